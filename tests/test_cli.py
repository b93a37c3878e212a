"""CLI tests driven through ``typer.testing.CliRunner``."""

from __future__ import annotations

import logging

import pytest
from typer.testing import CliRunner

from GCodeDocs.cli import app

runner = CliRunner()


@pytest.fixture(autouse=True)
def _reset_cli_logger():
    yield
    logger = logging.getLogger("GCodeDocs")
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
    logger.propagate = True


def test_view_annotates_instructions(docs_dir, gcode_file) -> None:
    result = runner.invoke(app, ["view", str(gcode_file), "--docs-dir", str(docs_dir)])

    assert result.exit_code == 0, result.output
    assert "; generated by slicer" in result.output
    assert "G28 -- Auto Home" in result.output
    assert "G1 X10 Y10 F3000 -- Linear Move" in result.output
    assert "M9999 P1 -- Unknown" in result.output
    assert "; done" in result.output


def test_view_respects_limit(docs_dir, gcode_file) -> None:
    result = runner.invoke(
        app, ["view", str(gcode_file), "--docs-dir", str(docs_dir), "--limit", "2"]
    )

    assert result.exit_code == 0, result.output
    assert "; home all axes" in result.output
    assert "Auto Home" not in result.output


def test_view_reads_docs_dir_from_environment(docs_dir, gcode_file, monkeypatch) -> None:
    monkeypatch.setenv("GCODEDOCS_DOCS_DIR", str(docs_dir))

    result = runner.invoke(app, ["view", str(gcode_file)])

    assert result.exit_code == 0, result.output
    assert "M104 S200 -- Set Hotend Temperature" in result.output


def test_view_missing_docs_dir_exits_1(tmp_path, gcode_file) -> None:
    result = runner.invoke(app, ["view", str(gcode_file), "--docs-dir", str(tmp_path / "nope")])

    assert result.exit_code == 1
    assert "does not exist" in result.output


def test_view_missing_gcode_exits_1(docs_dir, tmp_path) -> None:
    result = runner.invoke(
        app, ["view", str(tmp_path / "missing.gcode"), "--docs-dir", str(docs_dir)]
    )

    assert result.exit_code == 1
    assert "Cannot read G-code file" in result.output


def test_view_bad_config_exits_1(docs_dir, gcode_file, tmp_path) -> None:
    config = tmp_path / "gcodedocs.yaml"
    config.write_text("unknown_key: 1\n", encoding="utf-8")

    result = runner.invoke(
        app, ["view", str(gcode_file), "--docs-dir", str(docs_dir), "--config", str(config)]
    )

    assert result.exit_code == 1
    assert "unknown_key" in result.output


def test_lookup_known_code(docs_dir) -> None:
    result = runner.invoke(app, ["lookup", "g1", "--docs-dir", str(docs_dir)])

    assert result.exit_code == 0, result.output
    assert "Linear Move" in result.output
    assert "G0, G1" in result.output
    assert "linear move to the queue" in result.output


def test_lookup_without_body(docs_dir) -> None:
    result = runner.invoke(app, ["lookup", "G1", "--docs-dir", str(docs_dir), "--no-body"])

    assert result.exit_code == 0, result.output
    assert "linear move to the queue" not in result.output


def test_lookup_unknown_code_exits_1(docs_dir) -> None:
    result = runner.invoke(app, ["lookup", "M9999", "--docs-dir", str(docs_dir)])

    assert result.exit_code == 1
    assert "No documentation for M9999" in result.output


def test_check_docs_reports_failures(docs_dir) -> None:
    result = runner.invoke(app, ["check-docs", "--docs-dir", str(docs_dir)])

    assert result.exit_code == 0, result.output
    assert "Codes: 7" in result.output
    assert "Failures: 1" in result.output


def test_check_docs_strict_exits_1(docs_dir) -> None:
    result = runner.invoke(app, ["check-docs", "--docs-dir", str(docs_dir), "--strict"])

    assert result.exit_code == 1


def test_check_docs_strict_passes_on_clean_directory(docs_dir) -> None:
    (docs_dir / "broken.md").unlink()

    result = runner.invoke(app, ["check-docs", "--docs-dir", str(docs_dir), "--strict"])

    assert result.exit_code == 0, result.output
    assert "All documentation pages decoded" in result.output


def test_check_docs_duplicate_error_policy(docs_dir) -> None:
    (docs_dir / "g001-dup.md").write_text(
        "---\ntag: g001\ntitle: Dup\nbrief: Dup\ncodes: G1\n---\n", encoding="utf-8"
    )

    result = runner.invoke(
        app, ["check-docs", "--docs-dir", str(docs_dir), "--duplicate-policy", "error"]
    )

    assert result.exit_code == 1
    assert "G1" in result.output


def test_inspect_gcode_prints_source_lines(gcode_file) -> None:
    result = runner.invoke(app, ["inspect", str(gcode_file), "--limit", "2"])

    assert result.exit_code == 0, result.output
    assert "G28" in result.output
    assert "prime the nozzle" in result.output
    assert "G1 X10" not in result.output


def test_inspect_markdown_prints_record(docs_dir) -> None:
    result = runner.invoke(app, ["inspect", str(docs_dir / "g000-g001.md")])

    assert result.exit_code == 0, result.output
    assert '"title": "Linear Move"' in result.output


def test_inspect_broken_markdown_exits_1(docs_dir) -> None:
    result = runner.invoke(app, ["inspect", str(docs_dir / "broken.md")])

    assert result.exit_code == 1
    assert "Missing front matter header" in result.output


def test_inspect_unsupported_extension_exits_1(docs_dir) -> None:
    result = runner.invoke(app, ["inspect", str(docs_dir / "README.txt")])

    assert result.exit_code == 1
    assert "Unsupported file type" in result.output
