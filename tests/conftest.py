"""
Pytest Configuration

Shared fixtures for the GCodeDocs suite: ``src`` is added to ``sys.path`` so
the package imports without installation, and a small Marlin-style
documentation directory is generated per test under ``tmp_path``.
"""

from __future__ import annotations

import os
import sys
from pathlib import Path
from typing import Callable, Dict

import pytest

ROOT = Path(__file__).resolve().parents[1]
SRC = ROOT / "src"
if str(SRC) not in sys.path:
    sys.path.insert(0, str(SRC))


SAMPLE_DOCS: Dict[str, str] = {
    "g000-g001.md": """---
tag: g000
title: Linear Move
brief: Add a straight line movement to the planner
author: thinkyhead
codes: [G0, G1]
parameters:
  - tag: X
    optional: true
    description: An absolute or relative coordinate on the X axis
    values:
      - tag: pos
        type: float
  - tag: F
    optional: true
    description: The maximum movement rate of the move
examples:
  - pre: Move to X10
    code: G1 X10
---

The `G0` and `G1` commands add a linear move to the queue.
""",
    "g002-g003.md": """---
tag: g002
title: Arc or Circle Move
brief: Add an arc or circle movement to the planner
codes:
  - G2
  - G3
---

Arcs are split into short segments.
""",
    "g028.md": """---
tag: g028
title: Auto Home
brief: Auto home one or more axes
codes: G28
---
""",
    "m104.md": """---
tag: m104
title: Set Hotend Temperature
brief: Set a new target hot end temperature
since: 2.0
codes: [M104]
---

Heats the hotend without waiting.
""",
    "m117.md": """---
tag: m117
title: Set LCD Message
brief: Set the message line on the LCD
requires: HAS_DISPLAY
codes: [M117]
---
""",
    "broken.md": """# No front matter here

Just markdown.
""",
}

SAMPLE_GCODE = """; generated by slicer
G28 ; home all axes
(prime the nozzle)
M104 S200
G1 X10 Y10 F3000
M9999 P1
; done
"""


@pytest.fixture
def write_doc(tmp_path: Path) -> Callable[[str, str], Path]:
    """Return a helper writing ``name`` with ``content`` into ``tmp_path / 'docs'``."""

    docs = tmp_path / "docs"
    docs.mkdir(exist_ok=True)

    def _write(name: str, content: str) -> Path:
        path = docs / name
        path.write_text(content, encoding="utf-8")
        return path

    return _write


@pytest.fixture
def docs_dir(tmp_path: Path, write_doc: Callable[[str, str], Path]) -> Path:
    """Documentation directory with five valid pages, one broken page and noise."""

    for name, content in SAMPLE_DOCS.items():
        write_doc(name, content)
    root = tmp_path / "docs"
    (root / "README.txt").write_text("not documentation", encoding="utf-8")
    (root / "archive.md").mkdir()
    return root


@pytest.fixture
def gcode_file(tmp_path: Path) -> Path:
    path = tmp_path / "part.gcode"
    path.write_text(SAMPLE_GCODE, encoding="utf-8")
    return path


@pytest.fixture(autouse=True)
def _clear_gcodedocs_env(monkeypatch: pytest.MonkeyPatch) -> None:
    """Keep host ``GCODEDOCS_*`` variables from leaking into settings tests."""

    for name in [key for key in os.environ if key.startswith("GCODEDOCS_")]:
        monkeypatch.delenv(name, raising=False)
