"""
Text extraction for uploaded documents.

Each extractor returns the content block shown to the user and forwarded to
the model. Extraction failures are reported inside the content block rather
than raised, so one unreadable file never aborts an upload.
"""

from __future__ import annotations

import csv
import io
import logging

import docx
from openpyxl import load_workbook
from pypdf import PdfReader

logger = logging.getLogger(__name__)

IMAGE_ANALYSIS_MARKER = "**What I can see in this image:**"
IMAGE_HINT_MARKER = "💡 **You can ask me more"
TEXT_ERROR_MARKER = "Error: Failed to extract text"
DATA_ERROR_MARKER = "Error: Failed to extract data"


def _size_kb(size: int) -> int:
    return round(size / 1024)


def extract_pdf(file_name: str, data: bytes) -> str:
    """Extract text page by page with pypdf."""
    try:
        reader = PdfReader(io.BytesIO(data))
        pages = []
        has_text = False
        for index, page in enumerate(reader.pages, start=1):
            page_text = page.extract_text() or ""
            has_text = has_text or bool(page_text.strip())
            pages.append(f"--- Page {index} ---\n{page_text}\n\n")
    except Exception as e:
        logger.warning(f"PDF extraction failed for {file_name}: {e}")
        return f"[PDF Document: {file_name}]\n{TEXT_ERROR_MARKER}. {e}"

    if not has_text:
        return (
            f"📄 **PDF Content: {file_name}**\n\n"
            "No text content could be extracted. The PDF might be scanned or contain only images."
        )
    return f"📄 **PDF Content: {file_name}** ({_size_kb(len(data))} KB)\n\n{''.join(pages)}"


def extract_word(file_name: str, data: bytes) -> str:
    """Extract paragraphs and table cells with python-docx."""
    try:
        document = docx.Document(io.BytesIO(data))
        lines = [paragraph.text for paragraph in document.paragraphs]
        for table in document.tables:
            for row in table.rows:
                lines.append("\t".join(cell.text.strip() for cell in row.cells))
        text = "\n".join(lines)
    except Exception as e:
        # python-docx only reads .docx; legacy .doc lands here too
        logger.warning(f"Word extraction failed for {file_name}: {e}")
        return f"[Word Document: {file_name}]\n{TEXT_ERROR_MARKER}. {e}"

    if not text.strip():
        return (
            f"📝 **Word Document Content: {file_name}**\n\n"
            "No text content could be extracted from this document."
        )
    return f"📝 **Word Document Content: {file_name}** ({_size_kb(len(data))} KB)\n\n{text}"


def _rows_to_csv(rows) -> str:
    buffer = io.StringIO()
    writer = csv.writer(buffer, lineterminator="\n")
    for row in rows:
        writer.writerow(["" if value is None else value for value in row])
    return buffer.getvalue().rstrip("\n")


def extract_spreadsheet(file_name: str, data: bytes) -> str:
    """Render every sheet as CSV (openpyxl for workbooks, csv for .csv)."""
    try:
        sheets: list[tuple[str, str]] = []
        if file_name.lower().endswith(".csv"):
            text = data.decode("utf-8-sig", errors="replace")
            sheets.append(("Sheet1", _rows_to_csv(csv.reader(io.StringIO(text)))))
        else:
            workbook = load_workbook(io.BytesIO(data), read_only=True, data_only=True)
            try:
                for worksheet in workbook.worksheets:
                    sheets.append(
                        (worksheet.title, _rows_to_csv(worksheet.iter_rows(values_only=True)))
                    )
            finally:
                workbook.close()
    except Exception as e:
        # openpyxl cannot open legacy .xls workbooks
        logger.warning(f"Spreadsheet extraction failed for {file_name}: {e}")
        return f"[Excel Document: {file_name}]\n{DATA_ERROR_MARKER}. {e}"

    if not any(content.strip() for _, content in sheets):
        return (
            f"📊 **Excel Content: {file_name}**\n\n"
            "No content could be extracted from this spreadsheet."
        )
    body = "".join(f"--- Sheet: {name} ---\n{content}\n\n" for name, content in sheets)
    return f"📊 **Excel Content: {file_name}** ({_size_kb(len(data))} KB)\n\n{body}"


def extract_text(data: bytes) -> str:
    """Decode plain text and source files as UTF-8."""
    return data.decode("utf-8", errors="replace")


def image_analysis_content(file_name: str, size: int, mime_type: str, description: str) -> str:
    """Content block for an image the vision model described."""
    size_mb = f"{size / (1024 * 1024):.2f}"
    return (
        f"🖼️ **Image Analysis: {file_name}**\n\n"
        f"📊 **File Info:** {_size_kb(size)} KB ({size_mb} MB) • {mime_type}\n\n"
        f"🔍 {IMAGE_ANALYSIS_MARKER}\n"
        f"{description}\n\n"
        f"{IMAGE_HINT_MARKER} specific questions about this image:**\n"
        '• "What colors are prominent in this image?"\n'
        '• "Are there any people in this image?"\n'
        "• \"What's the setting or location?\"\n"
        '• "Can you read any text in the image?"\n'
        "• \"What's the mood or atmosphere?\"\n\n"
        "**Feel free to ask any questions about what you see in the image!** 📸✨"
    )


def image_fallback_content(file_name: str, size: int) -> str:
    """Content block for an image when vision analysis is unavailable."""
    return (
        f"🖼️ **Image Uploaded: {file_name}** ({_size_kb(size)} KB)\n\n"
        "⚠️ **Vision analysis temporarily unavailable.** You can still:\n"
        "• Describe what you see and ask for analysis\n"
        "• Ask general questions about image content\n"
        "• Request help with image-related tasks\n\n"
        "**What would you like to know about this image?** 📸"
    )
