"""
Shared utility helpers.

This module contains small, reusable helpers that do not belong
to identity storage, SSH config editing, or git orchestration.
"""

from __future__ import annotations

from pathlib import Path
from typing import Dict, Sequence


# ---------------------------------------------------------------------------
# Filesystem helpers
# ---------------------------------------------------------------------------


def ensure_parent_dir(path: Path) -> None:
    """Ensure the parent directory of a file exists."""
    path.parent.mkdir(parents=True, exist_ok=True)


def read_text(path: Path, missing_ok: bool = False) -> str:
    """Read a UTF-8 text file, optionally treating a missing file as empty."""
    try:
        return path.read_text(encoding="utf-8")
    except FileNotFoundError:
        if missing_ok:
            return ""
        raise


def write_text(path: Path, content: str) -> None:
    """Replace the whole content of a UTF-8 text file."""
    ensure_parent_dir(path)
    # newline="" keeps "\n" as-is on every platform
    with path.open("w", encoding="utf-8", newline="") as fh:
        fh.write(content)


def append_text(path: Path, content: str) -> None:
    """Append to a UTF-8 text file, creating it if needed."""
    ensure_parent_dir(path)
    with path.open("a", encoding="utf-8", newline="") as fh:
        fh.write(content)


# ---------------------------------------------------------------------------
# Output helpers
# ---------------------------------------------------------------------------


def format_table(columns: Sequence[str], rows: Sequence[Dict[str, str]]) -> str:
    """
    Render rows as a plain-text table.

    An empty ``rows`` still renders the header and separator lines.
    """

    widths = [len(col) for col in columns]
    for row in rows:
        for idx, col in enumerate(columns):
            widths[idx] = max(widths[idx], len(str(row.get(col, ""))))

    def _line(values: Sequence[str]) -> str:
        cells = [str(v).ljust(widths[i]) for i, v in enumerate(values)]
        return "  ".join(cells).rstrip()

    lines = [_line(columns), _line(["-" * w for w in widths])]
    for row in rows:
        lines.append(_line([str(row.get(col, "")) for col in columns]))
    return "\n".join(lines)
