"""Export entry point: aggregate a request and render it in the requested format."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Callable, Dict, Tuple

from ..models import ExportFormat, ReportRequest, TabularReport
from ..renderers import layout_page, render_csv, render_layout
from ..stores import GroupStore, UserStore
from .aggregator import ReportAggregator

logger = logging.getLogger(__name__)

# Renderer returns (document bytes, number of lines that fell off the page)
Renderer = Callable[[TabularReport], Tuple[bytes, int]]


@dataclass(frozen=True)
class ExportResult:
    """A fully rendered download."""

    content: bytes
    media_type: str
    filename: str
    row_count: int
    overflow_lines: int = 0


def _render_csv(report: TabularReport) -> Tuple[bytes, int]:
    return render_csv(report).encode("utf-8"), 0


def _render_pdf(report: TabularReport) -> Tuple[bytes, int]:
    layout = layout_page(report)
    if layout.overflow_count:
        logger.warning(
            "Report %r has %d lines below the page edge; PDF output is single-page",
            report.title, layout.overflow_count,
        )
    return render_layout(layout), layout.overflow_count


RENDERERS: Dict[ExportFormat, Renderer] = {
    ExportFormat.CSV: _render_csv,
    ExportFormat.PDF: _render_pdf,
}


def export_report(
    request: ReportRequest,
    users: UserStore,
    groups: GroupStore,
    tz: str = "UTC",
) -> ExportResult:
    """Build the table for `request` and serialize it.

    Raises NotFoundError when the user or group does not exist; nothing is
    rendered in that case.
    """
    logger.info(
        "Export %s/%s for %s as %s",
        request.scope.value, request.report_type.value, request.scope_id, request.format.value,
    )
    report = ReportAggregator(users, groups, tz=tz).aggregate(request)
    content, overflow = RENDERERS[request.format](report)

    result = ExportResult(
        content=content,
        media_type=request.format.media_type,
        filename=f"{report.filename_stem}{request.format.extension}",
        row_count=len(report.rows),
        overflow_lines=overflow,
    )
    logger.info("Export finished: %s (%d rows, %d bytes)", result.filename, result.row_count, len(content))
    return result


__all__ = ["ExportResult", "RENDERERS", "export_report"]
