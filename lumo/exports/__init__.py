"""Download an assistant response as PDF, Word, Excel, text or Markdown."""

from lumo.exports.formatting import (
    EXPORT_FORMATS,
    detect_content_type,
    extract_table_data,
    strip_markdown,
)
from lumo.exports.renderers import ExportedDocument, ExportError, render

__all__ = [
    "EXPORT_FORMATS",
    "ExportError",
    "ExportedDocument",
    "detect_content_type",
    "extract_table_data",
    "render",
    "strip_markdown",
]
