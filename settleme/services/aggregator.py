"""Aggregator turning user and group records into tabular reports."""

from __future__ import annotations

import logging
from typing import Dict, List, Tuple

from ..formatting import (
    check_timezone,
    collapse_newlines,
    collation_key,
    format_amount,
    format_datetime,
    format_hours,
)
from ..models import ExpenseReceipt, Group, ReportRequest, ReportType, Scope, TabularReport, TimeEntry, User
from ..stores import GroupStore, UserStore

logger = logging.getLogger(__name__)


# Fixed column labels per report type (the UI is Spanish)
TIMES_HEADERS: Tuple[str, ...] = ("Nombre", "Entrada", "Salida", "Horas")
RECEIPTS_HEADERS: Tuple[str, ...] = ("Nombre", "Fecha", "Categoría", "Descripción", "Monto")
GROUP_HEADER = "Grupo"

_TITLES: Dict[Tuple[Scope, ReportType], str] = {
    (Scope.USER, ReportType.TIMES): "Horas de {name}",
    (Scope.USER, ReportType.RECEIPTS): "Recibos de {name}",
    (Scope.GROUP, ReportType.TIMES): "Horas del grupo {name}",
    (Scope.GROUP, ReportType.RECEIPTS): "Recibos del grupo {name}",
}

_FILE_PREFIXES: Dict[ReportType, str] = {
    ReportType.TIMES: "horas",
    ReportType.RECEIPTS: "recibos",
}


class ReportAggregator:
    """
    Resolves a report request against the stores and builds the table.

    User reports keep the stored record order. Group reports list members
    alphabetically and each member's records chronologically.
    """

    def __init__(self, users: UserStore, groups: GroupStore, tz: str = "UTC"):
        """
        Args:
            users: Store resolving user ids
            groups: Store resolving group ids
            tz: Time zone for displayed timestamps; an unknown zone raises
                MalformedRequestError
        """
        self.users = users
        self.groups = groups
        self.tz = check_timezone(tz)

    def aggregate(self, request: ReportRequest) -> TabularReport:
        """Build the table for `request`; raises NotFoundError for unknown ids."""
        if request.scope is Scope.USER:
            report = self._user_report(request)
        elif request.scope is Scope.GROUP:
            report = self._group_report(request)
        else:  # pragma: no cover - Scope is exhaustive
            raise AssertionError(f"Unhandled scope {request.scope!r}")

        logger.debug(
            "Aggregated %s/%s for %s: %d rows",
            request.scope.value, request.report_type.value, request.scope_id, len(report.rows),
        )
        return report

    def headers_for(self, request: ReportRequest) -> Tuple[str, ...]:
        base = TIMES_HEADERS if request.report_type is ReportType.TIMES else RECEIPTS_HEADERS
        if request.scope is Scope.GROUP:
            return (GROUP_HEADER,) + base
        return base

    # ------------------------------------------------------------------
    def _user_report(self, request: ReportRequest) -> TabularReport:
        user = self.users.get(request.scope_id)
        name = user.display_name

        if request.report_type is ReportType.TIMES:
            rows = [self._time_row(name, entry) for entry in user.times]
        else:
            rows = [self._receipt_row(name, receipt) for receipt in user.receipts]

        prefix = _FILE_PREFIXES[request.report_type]
        return TabularReport.build(
            title=_TITLES[(request.scope, request.report_type)].format(name=name),
            headers=self.headers_for(request),
            rows=rows,
            filename_stem=f"{prefix}_{user.first_name}_{user.last_name}",
        )

    def _group_report(self, request: ReportRequest) -> TabularReport:
        group = self.groups.get(request.scope_id)
        members = self._sorted_members(group)

        rows: List[List[str]] = []
        for user in members:
            name = user.display_name
            if request.report_type is ReportType.TIMES:
                # sorted() is stable, equal clock-ins keep their stored order
                for entry in sorted(user.times, key=lambda t: t.clock_in):
                    rows.append([group.name] + self._time_row(name, entry))
            else:
                for receipt in sorted(user.receipts, key=lambda r: r.date):
                    rows.append([group.name] + self._receipt_row(name, receipt))

        prefix = _FILE_PREFIXES[request.report_type]
        return TabularReport.build(
            title=_TITLES[(request.scope, request.report_type)].format(name=group.name),
            headers=self.headers_for(request),
            rows=rows,
            filename_stem=f"{prefix}_grupo_{group.name}",
        )

    def _sorted_members(self, group: Group) -> List[User]:
        """Resolve member ids, dropping stale ones, and order them by name."""
        resolved: List[User] = []
        for user_id in group.members:
            try:
                resolved.append(self.users.get(user_id))
            except LookupError:
                logger.debug("Group %s references unknown user %s, skipping", group.id, user_id)
        return sorted(resolved, key=lambda u: collation_key(u.display_name))

    def _time_row(self, name: str, entry: TimeEntry) -> List[str]:
        return [
            name,
            format_datetime(entry.clock_in, self.tz),
            format_datetime(entry.clock_out, self.tz),
            format_hours(entry.hours),
        ]

    def _receipt_row(self, name: str, receipt: ExpenseReceipt) -> List[str]:
        return [
            name,
            format_datetime(receipt.date, self.tz),
            receipt.category,
            collapse_newlines(receipt.note),
            format_amount(receipt.amount),
        ]
