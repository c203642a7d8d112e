"""Data models for the report exports."""

from .records import ExpenseReceipt, Group, TimeEntry, User
from .report import ExportFormat, ReportRequest, ReportType, Scope, TabularReport, cell_text

__all__ = [
    "ExpenseReceipt",
    "ExportFormat",
    "Group",
    "ReportRequest",
    "ReportType",
    "Scope",
    "TabularReport",
    "TimeEntry",
    "User",
    "cell_text",
]
