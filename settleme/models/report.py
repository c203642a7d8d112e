"""Report request and tabular report models."""

from __future__ import annotations

import math
from dataclasses import dataclass
from enum import Enum
from typing import Any, Iterable, Optional, Sequence, Tuple, Type, TypeVar

from ..errors import MalformedRequestError


class Scope(Enum):
    """Whose records a report covers."""
    USER = "user"                     # A single user
    GROUP = "group"                   # Every resolvable member of a group


class ReportType(Enum):
    """Which records a report lists."""
    TIMES = "times"                   # Clock-in/clock-out entries
    RECEIPTS = "receipts"             # Expense receipts


class ExportFormat(Enum):
    """Serialization of the finished table."""
    CSV = "csv"
    PDF = "pdf"

    @property
    def media_type(self) -> str:
        if self is ExportFormat.PDF:
            return "application/pdf"
        return "text/csv; charset=utf-8"

    @property
    def extension(self) -> str:
        return f".{self.value}"


_E = TypeVar("_E", bound=Enum)


def _parse_enum(enum_cls: Type[_E], value: Optional[str], label: str) -> _E:
    if isinstance(value, enum_cls):
        return value
    if value is None or not str(value).strip():
        raise MalformedRequestError(f"Missing {label}")
    try:
        return enum_cls(str(value).strip().lower())
    except ValueError:
        raise MalformedRequestError(
            f"Invalid {label} {value!r}. Must be one of: {', '.join(m.value for m in enum_cls)}"
        ) from None


@dataclass(frozen=True)
class ReportRequest:
    """A fully parsed export request."""

    scope: Scope
    scope_id: str
    report_type: ReportType
    format: ExportFormat = ExportFormat.CSV

    def __post_init__(self):
        """Validate request."""
        if not isinstance(self.scope, Scope):
            raise MalformedRequestError(f"scope must be a Scope, got {self.scope!r}")
        if not isinstance(self.report_type, ReportType):
            raise MalformedRequestError(f"report_type must be a ReportType, got {self.report_type!r}")
        if not isinstance(self.format, ExportFormat):
            raise MalformedRequestError(f"format must be an ExportFormat, got {self.format!r}")
        if not self.scope_id:
            raise MalformedRequestError("Missing scope id")

    @classmethod
    def parse(
        cls,
        scope: Optional[str],
        scope_id: Optional[str],
        report_type: Optional[str],
        export_format: Optional[str] = None,
    ) -> "ReportRequest":
        """Build a request from free-form strings, e.g. URL path segments."""
        return cls(
            scope=_parse_enum(Scope, scope, "scope"),
            scope_id=(scope_id or "").strip(),
            report_type=_parse_enum(ReportType, report_type, "report type"),
            format=ExportFormat.CSV if export_format is None else _parse_enum(ExportFormat, export_format, "format"),
        )


def cell_text(value: Any) -> str:
    """Display string of a cell: absent values become the empty string."""
    if value is None or (isinstance(value, float) and math.isnan(value)):
        return ""
    if isinstance(value, str):
        return value
    return str(value)


@dataclass(frozen=True)
class TabularReport:
    """Format-agnostic table shared by the CSV and PDF renderers."""

    title: str
    headers: Tuple[str, ...]
    rows: Tuple[Tuple[str, ...], ...]
    filename_stem: str = "report"

    def __post_init__(self):
        width = len(self.headers)
        for idx, row in enumerate(self.rows):
            if len(row) != width:
                raise ValueError(
                    f"Row {idx} has {len(row)} cells, expected {width} to match the headers"
                )

    @classmethod
    def build(
        cls,
        title: str,
        headers: Sequence[Any],
        rows: Iterable[Sequence[Any]],
        filename_stem: str = "report",
    ) -> "TabularReport":
        """Normalize every cell through `cell_text` and freeze the result."""
        return cls(
            title=cell_text(title),
            headers=tuple(cell_text(h) for h in headers),
            rows=tuple(tuple(cell_text(c) for c in row) for row in rows),
            filename_stem=filename_stem,
        )

    @property
    def column_count(self) -> int:
        return len(self.headers)
