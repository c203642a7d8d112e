"""Services for building and rendering report exports."""

from .aggregator import ReportAggregator
from .exporter import ExportResult, export_report

__all__ = ["ReportAggregator", "ExportResult", "export_report"]
