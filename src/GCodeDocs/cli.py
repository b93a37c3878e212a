"""Typer-based CLI for browsing G-code files alongside their documentation."""

import itertools
from pathlib import Path
from typing import Any, NoReturn, Optional

import typer
from pydantic import ValidationError
from rich.console import Console
from rich.markdown import Markdown
from rich.markup import escape
from rich.panel import Panel
from rich.table import Table
from rich.text import Text

from GCodeDocs.config_loaders import ConfigLoadError
from GCodeDocs.display import DisplayLine, assemble_file
from GCodeDocs.docs.parser import parse_opcode_file
from GCodeDocs.docs.registry import DocumentationRegistry, DuplicateCodePolicy, build_registry
from GCodeDocs.errors import DecodeError, GCodeDocsError, GCodeFileError, format_error
from GCodeDocs.gcode.tokenizer import parse
from GCodeDocs.logging import get_logger
from GCodeDocs.settings import LogFormat, LogLevel, ViewerSettings, load_settings

console = Console()
app = typer.Typer(
    help="GCodeDocs: annotate G-code with Marlin documentation", no_args_is_help=True
)

GCODE_SUFFIXES = frozenset({".gcode", ".g", ".gco", ".nc"})

# ============================================================================
# Shared options
# ============================================================================

_CONFIG_OPTION = typer.Option(
    None, "--config", "-c", help="Path to a YAML or TOML config file", envvar="GCODEDOCS_CONFIG"
)
_DOCS_DIR_OPTION = typer.Option(None, "--docs-dir", "-d", help="Documentation directory")
_POLICY_OPTION = typer.Option(
    None, "--duplicate-policy", help="Resolution when two pages declare the same code"
)
_WORKERS_OPTION = typer.Option(None, "--workers", min=1, help="Threads used to parse pages")
_LOG_LEVEL_OPTION = typer.Option(None, "--log-level", help="Logging level")
_LOG_FORMAT_OPTION = typer.Option(None, "--log-format", help="Log output format")


def _fail(error: BaseException) -> NoReturn:
    console.print(f"[red]✗ {escape(format_error(error))}[/red]", soft_wrap=True)
    raise typer.Exit(code=1)


def _setup(config: Optional[Path], **overrides: Any) -> ViewerSettings:
    """Load settings and configure logging; exit 1 on configuration errors."""

    try:
        settings = load_settings(config, **overrides)
    except ConfigLoadError as exc:
        _fail(exc)
    except ValidationError as exc:
        console.print(f"[red]✗ Invalid configuration:[/red] {escape(str(exc))}")
        raise typer.Exit(code=1)
    get_logger("GCodeDocs", settings.log_level.value, log_format=settings.log_format.value)
    return settings


def _load_registry(settings: ViewerSettings) -> DocumentationRegistry:
    try:
        return build_registry(settings.docs_dir, **settings.registry_options())
    except GCodeDocsError as exc:
        _fail(exc)


def _render_line(line: DisplayLine) -> Text:
    if line.kind == "comment":
        return Text(str(line), style="dim")
    text = Text(line.text, style="bold")
    text.append(" -- ")
    text.append(line.annotation or "", style="cyan" if line.is_known else "yellow")
    return text


# ============================================================================
# Commands
# ============================================================================


@app.command()
def view(
    file: Path = typer.Argument(..., help="G-code file to display"),
    docs_dir: Optional[Path] = _DOCS_DIR_OPTION,
    limit: Optional[int] = typer.Option(None, "--limit", "-n", min=1, help="Max lines to print"),
    config: Optional[Path] = _CONFIG_OPTION,
    duplicate_policy: Optional[DuplicateCodePolicy] = _POLICY_OPTION,
    workers: Optional[int] = _WORKERS_OPTION,
    log_level: Optional[LogLevel] = _LOG_LEVEL_OPTION,
    log_format: Optional[LogFormat] = _LOG_FORMAT_OPTION,
) -> None:
    """Print FILE with every instruction annotated by its documentation title."""

    settings = _setup(
        config,
        docs_dir=docs_dir,
        preview_limit=limit,
        duplicate_policy=duplicate_policy,
        workers=workers,
        log_level=log_level,
        log_format=log_format,
    )
    registry = _load_registry(settings)
    try:
        lines = assemble_file(file, registry)
        for line in itertools.islice(lines, settings.preview_limit):
            console.print(_render_line(line), soft_wrap=True)
    except GCodeFileError as exc:
        _fail(exc)


@app.command()
def lookup(
    code: str = typer.Argument(..., help="Opcode code such as G1 or M104"),
    docs_dir: Optional[Path] = _DOCS_DIR_OPTION,
    body: bool = typer.Option(True, "--body/--no-body", help="Render the markdown body"),
    config: Optional[Path] = _CONFIG_OPTION,
    log_level: Optional[LogLevel] = _LOG_LEVEL_OPTION,
) -> None:
    """Show the documentation recorded for CODE."""

    settings = _setup(config, docs_dir=docs_dir, log_level=log_level)
    registry = _load_registry(settings)
    key = code.strip().upper()
    record = registry.lookup(key)
    if record is None:
        console.print(f"[yellow]No documentation for {escape(key)}[/yellow]")
        raise typer.Exit(code=1)

    table = Table(show_header=False, box=None)
    table.add_column("Field", style="bold")
    table.add_column("Value")
    table.add_row("Title", escape(record.title))
    table.add_row("Brief", escape(record.brief))
    table.add_row("Codes", ", ".join(record.codes))
    if record.since:
        table.add_row("Since", escape(record.since))
    if record.requires:
        table.add_row("Requires", escape(record.requires))
    if record.experimental:
        table.add_row("Experimental", "yes")
    source = registry.source(key)
    if source is not None:
        table.add_row("Source", escape(source.name))
    console.print(Panel(table, title=key))

    if record.parameters:
        params = Table(title="Parameters")
        params.add_column("Tag", style="cyan")
        params.add_column("Optional")
        params.add_column("Description")
        for parameter in record.parameters:
            params.add_row(
                escape(parameter.tag),
                "yes" if parameter.optional else "no",
                escape(parameter.description or ""),
            )
        console.print(params)

    text = registry.body(key)
    if body and text and text.strip():
        console.print(Markdown(text))


@app.command("check-docs")
def check_docs(
    docs_dir: Optional[Path] = _DOCS_DIR_OPTION,
    strict: bool = typer.Option(False, "--strict", help="Exit 1 on any failure or conflict"),
    config: Optional[Path] = _CONFIG_OPTION,
    duplicate_policy: Optional[DuplicateCodePolicy] = _POLICY_OPTION,
    workers: Optional[int] = _WORKERS_OPTION,
    log_level: Optional[LogLevel] = _LOG_LEVEL_OPTION,
) -> None:
    """Build the documentation registry and report problems."""

    settings = _setup(
        config,
        docs_dir=docs_dir,
        duplicate_policy=duplicate_policy,
        workers=workers,
        log_level=log_level,
    )
    registry = _load_registry(settings)

    console.print(
        Panel(
            f"Directory: {escape(str(settings.docs_dir))}\n"
            f"Codes: {len(registry)}\n"
            f"Records: {len(registry.records())}\n"
            f"Failures: {len(registry.failures)}\n"
            f"Conflicts: {len(registry.conflicts)}",
            title="Documentation",
        )
    )

    if registry.failures:
        table = Table(title="Skipped files")
        table.add_column("File")
        table.add_column("Error code", style="red")
        table.add_column("Error")
        for failure in registry.failures:
            table.add_row(escape(failure.path.name), failure.error_code, escape(failure.error))
        console.print(table)

    if registry.conflicts:
        table = Table(title="Duplicate codes")
        table.add_column("Code", style="yellow")
        table.add_column("Kept")
        table.add_column("Discarded")
        for conflict in registry.conflicts:
            table.add_row(
                conflict.code, escape(conflict.kept.name), escape(conflict.discarded.name)
            )
        console.print(table)

    if strict and (registry.failures or registry.conflicts):
        raise typer.Exit(code=1)
    if not registry.failures and not registry.conflicts:
        console.print("[green]✓ All documentation pages decoded[/green]")


@app.command()
def inspect(
    file: Path = typer.Argument(..., help="G-code or documentation file"),
    limit: int = typer.Option(10, "--limit", "-n", min=1, help="Source lines to print"),
) -> None:
    """Dump the tokenized source lines of a G-code file or the record of a page."""

    suffix = file.suffix.lower()
    if suffix in GCODE_SUFFIXES:
        try:
            text = file.read_text(encoding="utf-8", errors="replace")
        except OSError as exc:
            _fail(GCodeFileError(f"Cannot read G-code file {file}: {exc}", path=str(file)))
        for source_line in itertools.islice(parse(text), limit):
            comments = " | ".join(comment.value for comment in source_line.comments)
            instructions = " | ".join(str(item) for item in source_line.instructions)
            console.print(
                f"[bold]{source_line.span.line:>5}[/bold] "
                f"{escape(instructions) or '-'} [dim]{escape(comments)}[/dim]",
                soft_wrap=True,
            )
        return

    if suffix == ".md":
        try:
            document = parse_opcode_file(file)
        except DecodeError as exc:
            _fail(exc)
        except (OSError, UnicodeDecodeError) as exc:
            console.print(f"[red]✗ Cannot read {escape(str(file))}: {escape(str(exc))}[/red]")
            raise typer.Exit(code=1)
        console.print_json(document.record.model_dump_json(by_alias=True, exclude_none=True))
        return

    console.print(f"[red]✗ Unsupported file type: {escape(suffix or str(file))}[/red]")
    raise typer.Exit(code=1)


def main() -> None:
    app()


if __name__ == "__main__":
    main()
