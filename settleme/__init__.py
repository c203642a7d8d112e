"""Work-hours and expense report exports (CSV and single-page PDF)."""

__version__ = "1.0.0"
