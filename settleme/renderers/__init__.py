"""Serializers for tabular reports."""

from .csv_renderer import escape_csv, render_csv
from .pdf_document import PageLayout, layout_page, render_layout, render_pdf

__all__ = ["PageLayout", "escape_csv", "layout_page", "render_csv", "render_layout", "render_pdf"]
