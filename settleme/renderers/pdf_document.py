# -*- coding: utf-8 -*-
"""Minimal single-page PDF synthesis for tabular reports.

The document is written by hand: one page, one content stream and one
standard Courier font referenced by name. Serialization is split into three
pure steps:

1. ``layout_page`` turns the report into positioned text lines,
2. ``build_objects`` encodes the five indirect objects as separate buffers,
3. ``compute_offsets`` derives the byte offset of every object, which
   ``assemble`` writes into the cross-reference table.

Nothing depends on the clock or on random ids, so equal reports always
produce identical bytes.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import List, Sequence, Tuple

from ..models import TabularReport

PDF_HEADER = b"%PDF-1.4\n"

PAGE_WIDTH = 612
PAGE_HEIGHT = 792
LEFT_X = 72
TOP_Y = 770
LINE_HEIGHT = 14
FONT_SIZE = 11
FONT_NAME = "Courier"
COLUMN_GAP = 2

# WinAnsi is single-byte: one character per byte keeps monospaced columns aligned
TEXT_ENCODING = "cp1252"

CATALOG_OBJ = 1
PAGES_OBJ = 2
PAGE_OBJ = 3
CONTENT_OBJ = 4
FONT_OBJ = 5


def escape_pdf_text(text: str) -> str:
    """Escape backslash and parentheses for a PDF literal string."""
    return text.replace("\\", "\\\\").replace("(", "\\(").replace(")", "\\)")


def column_widths(report: TabularReport) -> Tuple[int, ...]:
    widths = [len(h) for h in report.headers]
    for row in report.rows:
        for idx, cell in enumerate(row):
            if len(cell) > widths[idx]:
                widths[idx] = len(cell)
    return tuple(widths)


def format_line(cells: Sequence[str], widths: Sequence[int]) -> str:
    return "".join(cell.ljust(width + COLUMN_GAP) for cell, width in zip(cells, widths))


@dataclass(frozen=True)
class PositionedLine:
    text: str
    y: int


@dataclass(frozen=True)
class PageLayout:
    """Text lines of the single page with their baseline coordinates."""

    lines: Tuple[PositionedLine, ...]
    widths: Tuple[int, ...]

    @property
    def overflow_count(self) -> int:
        """Lines that land below the bottom edge and will not be visible."""
        return sum(1 for line in self.lines if line.y < 0)


def layout_page(report: TabularReport) -> PageLayout:
    widths = column_widths(report)
    texts = [report.title, format_line(report.headers, widths)]
    texts.extend(format_line(row, widths) for row in report.rows)
    # No pagination: lines past the bottom keep going to negative y
    lines = tuple(
        PositionedLine(text=text, y=TOP_Y - idx * LINE_HEIGHT) for idx, text in enumerate(texts)
    )
    return PageLayout(lines=lines, widths=widths)


def build_content_stream(layout: PageLayout) -> bytes:
    ops = ["BT", f"/F1 {FONT_SIZE} Tf"]
    for line in layout.lines:
        ops.append(f"1 0 0 1 {LEFT_X} {line.y} Tm ({escape_pdf_text(line.text)}) Tj")
    ops.append("ET")
    return "\n".join(ops).encode(TEXT_ENCODING, errors="replace")


def build_objects(content: bytes) -> List[bytes]:
    """Return the five indirect objects in object-number order."""
    bodies = [
        f"<< /Type /Catalog /Pages {PAGES_OBJ} 0 R >>".encode("ascii"),
        f"<< /Type /Pages /Kids [{PAGE_OBJ} 0 R] /Count 1 >>".encode("ascii"),
        (
            f"<< /Type /Page /Parent {PAGES_OBJ} 0 R /MediaBox [0 0 {PAGE_WIDTH} {PAGE_HEIGHT}] "
            f"/Contents {CONTENT_OBJ} 0 R /Resources << /Font << /F1 {FONT_OBJ} 0 R >> >> >>"
        ).encode("ascii"),
        f"<< /Length {len(content)} >>\nstream\n".encode("ascii") + content + b"\nendstream",
        f"<< /Type /Font /Subtype /Type1 /BaseFont /{FONT_NAME} /Encoding /WinAnsiEncoding >>".encode("ascii"),
    ]
    return [
        f"{number} 0 obj\n".encode("ascii") + body + b"\nendobj\n"
        for number, body in enumerate(bodies, start=1)
    ]


def compute_offsets(header: bytes, objects: Sequence[bytes]) -> List[int]:
    """Byte offset of each object when written directly after `header`."""
    offsets = []
    position = len(header)
    for obj in objects:
        offsets.append(position)
        position += len(obj)
    return offsets


def build_xref(offsets: Sequence[int]) -> bytes:
    entries = [f"xref\n0 {len(offsets) + 1}\n", "0000000000 65535 f \n"]
    entries.extend(f"{offset:010d} 00000 n \n" for offset in offsets)
    return "".join(entries).encode("ascii")


def build_trailer(size: int, xref_offset: int) -> bytes:
    return (
        f"trailer\n<< /Size {size} /Root {CATALOG_OBJ} 0 R >>\n"
        f"startxref\n{xref_offset}\n%%EOF\n"
    ).encode("ascii")


def assemble(objects: Sequence[bytes], header: bytes = PDF_HEADER) -> bytes:
    offsets = compute_offsets(header, objects)
    xref_offset = len(header) + sum(len(obj) for obj in objects)
    return b"".join([
        header,
        *objects,
        build_xref(offsets),
        build_trailer(len(objects) + 1, xref_offset),
    ])


def render_pdf(report: TabularReport) -> bytes:
    return render_layout(layout_page(report))


def render_layout(layout: PageLayout) -> bytes:
    return assemble(build_objects(build_content_stream(layout)))


__all__ = [
    "PageLayout",
    "PositionedLine",
    "assemble",
    "build_content_stream",
    "build_objects",
    "column_widths",
    "compute_offsets",
    "escape_pdf_text",
    "format_line",
    "layout_page",
    "render_layout",
    "render_pdf",
]
