"""Markdown cleanup, table detection and format suggestions for downloads."""

import re

EXPORT_FORMATS = ("pdf", "docx", "xlsx", "txt", "md")
MAX_SUGGESTIONS = 5

_BOLD = re.compile(r"\*\*(.*?)\*\*")
_ITALIC = re.compile(r"\*(.*?)\*")
_CODE = re.compile(r"`(.*?)`")
_HEADER = re.compile(r"#{1,6}\s")
_LINK = re.compile(r"\[([^\]]+)\]\([^)]+\)")
_TABLE_SEPARATOR = re.compile(r"^:?-{3,}:?$")
_INLINE_TOKEN = re.compile(r"(\*\*.*?\*\*|\*.*?\*|`.*?`)")


def strip_markdown(content: str) -> str:
    """Remove emphasis, inline code, headers and link syntax."""
    text = _BOLD.sub(r"\1", content)
    text = _ITALIC.sub(r"\1", text)
    text = _CODE.sub(r"\1", text)
    text = _HEADER.sub("", text)
    text = _LINK.sub(r"\1", text)
    return text.strip()


def inline_runs(line: str) -> list[tuple[str, str | None]]:
    """
    Split a line into (text, style) runs.

    style is "bold", "italic", "code" or None for plain text.
    """
    runs: list[tuple[str, str | None]] = []
    for token in _INLINE_TOKEN.split(line):
        if not token:
            continue
        if len(token) > 4 and token.startswith("**") and token.endswith("**"):
            runs.append((token[2:-2], "bold"))
        elif len(token) > 2 and token.startswith("*") and token.endswith("*"):
            runs.append((token[1:-1], "italic"))
        elif len(token) > 2 and token.startswith("`") and token.endswith("`"):
            runs.append((token[1:-1], "code"))
        else:
            runs.append((token, None))
    return runs


def extract_table_data(content: str) -> list[list[str]]:
    """Collect pipe- or tab-separated rows; markdown separator rows are skipped."""
    rows: list[list[str]] = []
    for line in content.split("\n"):
        if "|" in line and len(line.split("|")) > 2:
            row = [cell.strip() for cell in line.split("|") if cell.strip()]
            if row and not all(_TABLE_SEPARATOR.match(cell) for cell in row):
                rows.append(row)
        elif "\t" in line:
            row = [cell.strip() for cell in line.split("\t")]
            if len(row) > 1:
                rows.append(row)
    return rows


def detect_content_type(content: str) -> list[str]:
    """Suggest download formats, most fitting first."""
    suggestions = []
    if extract_table_data(content):
        suggestions.append("xlsx")
    if len(content) > 100:
        suggestions.append("pdf")
    suggestions.extend(["docx", "txt", "md"])
    return list(dict.fromkeys(suggestions))[:MAX_SUGGESTIONS]
