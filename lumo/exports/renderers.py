"""
Document renderers for downloading an assistant response.

Every document carries a "Lumo AI Response" title and a generated-on line.
"""

from __future__ import annotations

import io
import logging
import re
import unicodedata
from dataclasses import dataclass
from datetime import datetime

import docx
from docx.shared import Pt
from fpdf import FPDF
from openpyxl import Workbook

from lumo.exports.formatting import (
    EXPORT_FORMATS,
    extract_table_data,
    inline_runs,
    strip_markdown,
)

logger = logging.getLogger(__name__)

DOCUMENT_TITLE = "Lumo AI Response"
DEFAULT_FILENAME = "lumo-ai-response"

_UNSAFE_FILENAME_CHARS = re.compile(r"[^A-Za-z0-9._-]")

MEDIA_TYPES = {
    "pdf": "application/pdf",
    "docx": "application/vnd.openxmlformats-officedocument.wordprocessingml.document",
    "xlsx": "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet",
    "txt": "text/plain; charset=utf-8",
    "md": "text/markdown; charset=utf-8",
}


class ExportError(Exception):
    """Document generation failed or the format is unknown."""

    pass


@dataclass(frozen=True)
class ExportedDocument:
    content: bytes
    media_type: str
    filename: str


def _safe_stem(filename: str | None) -> str:
    """ASCII-only download name so it fits a Content-Disposition header."""
    if not filename:
        return DEFAULT_FILENAME
    stem = _UNSAFE_FILENAME_CHARS.sub("_", filename).strip("._")
    return stem or DEFAULT_FILENAME


def _generated_on(generated_at: datetime) -> str:
    return f"Generated on: {generated_at.strftime('%Y-%m-%d %H:%M:%S')}"


def _latin1(text: str) -> str:
    """Core PDF fonts are latin-1 only; drop anything they cannot encode."""
    normalized = unicodedata.normalize("NFKD", text)
    return normalized.encode("latin-1", "ignore").decode("latin-1")


def render_pdf(content: str, generated_at: datetime) -> bytes:
    pdf = FPDF()
    pdf.set_auto_page_break(auto=True, margin=20)
    pdf.add_page()
    pdf.set_font("Helvetica", "B", 16)
    pdf.cell(0, 10, DOCUMENT_TITLE, new_x="LMARGIN", new_y="NEXT")
    pdf.set_font("Helvetica", "", 10)
    pdf.cell(0, 8, _generated_on(generated_at), new_x="LMARGIN", new_y="NEXT")
    pdf.ln(5)
    pdf.set_font("Helvetica", "", 12)
    for line in _latin1(strip_markdown(content)).split("\n"):
        pdf.multi_cell(0, 7, line or " ", new_x="LMARGIN", new_y="NEXT")
    return bytes(pdf.output())


def render_docx(content: str, generated_at: datetime) -> bytes:
    document = docx.Document()
    document.add_heading(DOCUMENT_TITLE, level=1)
    stamp = document.add_paragraph().add_run(_generated_on(generated_at))
    stamp.font.size = Pt(9)
    for line in content.strip().split("\n"):
        heading = re.match(r"^(#{1,6})\s+(.*)$", line)
        if heading:
            level = min(len(heading.group(1)) + 1, 9)
            document.add_heading(strip_markdown(heading.group(2)), level=level)
            continue
        paragraph = document.add_paragraph()
        for text, style in inline_runs(line):
            run = paragraph.add_run(text)
            if style == "bold":
                run.bold = True
            elif style == "italic":
                run.italic = True
            elif style == "code":
                run.font.name = "Courier New"
    buffer = io.BytesIO()
    document.save(buffer)
    return buffer.getvalue()


def render_xlsx(content: str, generated_at: datetime) -> bytes:
    workbook = Workbook()
    worksheet = workbook.active
    worksheet.title = "Response"
    table = extract_table_data(content)
    if table:
        for row in table:
            worksheet.append(row)
    else:
        worksheet.append([DOCUMENT_TITLE])
        worksheet.append([_generated_on(generated_at)])
        worksheet.append([""])
        for line in content.split("\n"):
            worksheet.append([line])
    buffer = io.BytesIO()
    workbook.save(buffer)
    return buffer.getvalue()


def render_text(content: str, generated_at: datetime) -> bytes:
    body = f"{DOCUMENT_TITLE}\n{_generated_on(generated_at)}\n\n{strip_markdown(content)}"
    return body.encode("utf-8")


def render_markdown(content: str, generated_at: datetime) -> bytes:
    body = f"# {DOCUMENT_TITLE}\n\n*{_generated_on(generated_at)}*\n\n{content}"
    return body.encode("utf-8")


_RENDERERS = {
    "pdf": render_pdf,
    "docx": render_docx,
    "xlsx": render_xlsx,
    "txt": render_text,
    "md": render_markdown,
}


def render(
    content: str,
    export_format: str,
    filename: str | None = None,
    generated_at: datetime | None = None,
) -> ExportedDocument:
    """
    Render content in the requested format.

    Raises:
        ExportError: If the format is unknown or the library fails
    """
    if export_format not in EXPORT_FORMATS:
        raise ExportError(
            f"Unsupported export format: {export_format}. Use one of: {', '.join(EXPORT_FORMATS)}"
        )
    stem = _safe_stem(filename)
    try:
        data = _RENDERERS[export_format](content, generated_at or datetime.now())
    except Exception as e:
        logger.error(f"Failed to generate {export_format} document: {e}", exc_info=True)
        raise ExportError(f"Failed to generate {export_format} document") from e
    logger.info(
        "Export rendered",
        extra={"format": export_format, "bytes": len(data)},
    )
    return ExportedDocument(
        content=data,
        media_type=MEDIA_TYPES[export_format],
        filename=f"{stem}.{export_format}",
    )
