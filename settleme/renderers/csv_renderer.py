"""Comma-separated rendering of tabular reports."""

from __future__ import annotations

from typing import Iterable

from ..models import TabularReport

_NEEDS_QUOTING = (",", '"', "\n", "\r")


def escape_csv(value: str) -> str:
    """Quote a cell that contains a comma, a double quote or a line break."""
    if any(ch in value for ch in _NEEDS_QUOTING):
        return '"' + value.replace('"', '""') + '"'
    return value


def _join(cells: Iterable[str]) -> str:
    return ",".join(escape_csv(c) for c in cells)


def render_csv(report: TabularReport) -> str:
    """Header line first, then one line per row, joined by ``\\n``.

    The title is not part of the CSV output; it only names the download.
    """
    lines = [_join(report.headers)]
    lines.extend(_join(row) for row in report.rows)
    return "\n".join(lines)


__all__ = ["escape_csv", "render_csv"]
