"""API endpoints for downloading time and receipt exports."""

from __future__ import annotations

import asyncio
import logging
import re
from typing import Optional
from urllib.parse import quote

from fastapi import APIRouter, Depends, HTTPException, Query
from fastapi.responses import JSONResponse, Response

from .. import config
from ..errors import MalformedRequestError, NotFoundError, StoreError
from ..formatting import check_timezone
from ..models import ExportFormat, ReportRequest, ReportType, Scope
from ..services import ExportResult, export_report
from ..stores import InMemoryStore, load_snapshot

logger = logging.getLogger(__name__)


router = APIRouter(prefix="/api/exports", tags=["exports"])


def get_store() -> InMemoryStore:
    """Read a fresh point-in-time snapshot for this request."""
    try:
        return load_snapshot(config.data_file())
    except StoreError:
        logger.error("Loading the data file failed", exc_info=True)
        raise HTTPException(status_code=500, detail="Data store unavailable")


def get_timezone() -> str:
    """Configured display time zone; a bad value is a server misconfiguration."""
    try:
        return check_timezone(config.display_timezone())
    except MalformedRequestError:
        logger.error("SETTLEME_TIMEZONE is not a known time zone", exc_info=True)
        raise HTTPException(status_code=500, detail="Display time zone is misconfigured")


@router.get("/types")
async def get_export_types() -> JSONResponse:
    """Get accepted scopes, report types and formats."""
    return JSONResponse({
        "scopes": [s.value for s in Scope],
        "report_types": [t.value for t in ReportType],
        "formats": [
            {"value": f.value, "media_type": f.media_type, "extension": f.extension}
            for f in ExportFormat
        ],
    })


@router.get("/{scope}/{scope_id}/{report_type}")
async def download_export(
    scope: str,
    scope_id: str,
    report_type: str,
    export_format: Optional[str] = Query(None, alias="format", description="csv (default) or pdf"),
    store: InMemoryStore = Depends(get_store),
    tz: str = Depends(get_timezone),
) -> Response:
    """Download a CSV or PDF export of a user's or a group's times or receipts."""
    return await _export(scope, scope_id, report_type, export_format, store, tz)


@router.get("/{scope}/{scope_id}/{report_type}/{export_format}")
async def download_export_with_format(
    scope: str,
    scope_id: str,
    report_type: str,
    export_format: str,
    store: InMemoryStore = Depends(get_store),
    tz: str = Depends(get_timezone),
) -> Response:
    """Path form used by the web client, e.g. ``/api/exports/user/usr_1/times/pdf``."""
    return await _export(scope, scope_id, report_type, export_format, store, tz)


async def _export(
    scope: str,
    scope_id: str,
    report_type: str,
    export_format: Optional[str],
    store: InMemoryStore,
    tz: str,
) -> Response:
    try:
        request = ReportRequest.parse(scope, scope_id, report_type, export_format)
    except MalformedRequestError as e:
        raise HTTPException(status_code=400, detail=str(e))

    try:
        result = await asyncio.to_thread(export_report, request, store.users, store.groups, tz)
    except NotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))
    except StoreError:
        logger.error("Stored record for %s %s is invalid", request.scope.value, request.scope_id, exc_info=True)
        raise HTTPException(status_code=500, detail="Stored record is invalid")
    except Exception:
        logger.error("Export failed", exc_info=True)
        raise HTTPException(status_code=500, detail="Internal error while building the export")

    return _download_response(result)


def _download_response(result: ExportResult) -> Response:
    headers = {"Content-Disposition": _content_disposition(result.filename)}
    if result.overflow_lines:
        headers["X-Report-Overflow-Lines"] = str(result.overflow_lines)
    return Response(content=result.content, media_type=result.media_type, headers=headers)


def _content_disposition(filename: str) -> str:
    """Attachment header with an ASCII fallback and the full UTF-8 name."""
    ascii_name = _safe_filename(filename, "export")
    if ascii_name == filename:
        return f'attachment; filename="{ascii_name}"'
    return f"attachment; filename=\"{ascii_name}\"; filename*=utf-8''{quote(filename)}"


def _safe_filename(name: str, fallback: str) -> str:
    """Allow only ASCII word characters, dots and dashes in a filename."""
    safe = re.sub(r"[^\w.\-]", "_", name, flags=re.ASCII)
    return safe[:128] or fallback
