"""File-type sniffing by MIME type and extension."""

from lumo.files.models import FileKind

SUPPORTED_MIME_TYPES = frozenset(
    {
        "text/plain",
        "text/markdown",
        "text/csv",
        "application/json",
        "application/javascript",
        "text/html",
        "text/css",
        "text/xml",
        "application/xml",
        "image/jpeg",
        "image/png",
        "image/gif",
        "image/webp",
        "application/pdf",
        "application/vnd.openxmlformats-officedocument.wordprocessingml.document",
        "application/msword",
        "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet",
        "application/vnd.ms-excel",
    }
)

CODE_EXTENSIONS = (
    ".js", ".jsx", ".ts", ".tsx", ".py", ".java", ".cpp", ".c", ".h",
    ".cs", ".php", ".rb", ".go", ".rs", ".swift", ".kt", ".scala",
    ".sh", ".bash", ".sql", ".r", ".m", ".pl", ".lua", ".dart",
    ".vue", ".svelte", ".astro",
)
WORD_EXTENSIONS = (".doc", ".docx")
SPREADSHEET_EXTENSIONS = (".xls", ".xlsx", ".csv")
IMAGE_EXTENSIONS = (".jpg", ".jpeg", ".png", ".gif", ".webp")
TEXT_EXTENSIONS = (".txt", ".md", ".json")

_IMAGE_MIME_BY_EXTENSION = {
    ".jpg": "image/jpeg",
    ".jpeg": "image/jpeg",
    ".png": "image/png",
    ".gif": "image/gif",
    ".webp": "image/webp",
}


def is_code_file(file_name: str) -> bool:
    return file_name.lower().endswith(CODE_EXTENSIONS)


def is_word_file(file_name: str) -> bool:
    return file_name.lower().endswith(WORD_EXTENSIONS)


def is_spreadsheet_file(file_name: str) -> bool:
    return file_name.lower().endswith(SPREADSHEET_EXTENSIONS)


def is_image_file(file_name: str) -> bool:
    return file_name.lower().endswith(IMAGE_EXTENSIONS)


def is_supported(file_name: str, content_type: str | None) -> bool:
    """Accept known MIME types plus code, office, image and plain-text extensions."""
    name = file_name.lower()
    return (
        (content_type or "") in SUPPORTED_MIME_TYPES
        or is_code_file(name)
        or is_word_file(name)
        or is_spreadsheet_file(name)
        or is_image_file(name)
        or name.endswith(".pdf")
        or name.endswith(TEXT_EXTENSIONS)
    )


def detect_kind(file_name: str, content_type: str | None) -> FileKind:
    """
    Pick the extraction path for a file.

    Checked in order: image, pdf, word, spreadsheet, then text for
    everything else.
    """
    name = file_name.lower()
    mime = (content_type or "").lower()

    if mime.startswith("image/") or is_image_file(name):
        return FileKind.IMAGE
    if mime == "application/pdf" or name.endswith(".pdf"):
        return FileKind.PDF
    if is_word_file(name) or "word" in mime or "officedocument.wordprocessingml" in mime:
        return FileKind.WORD
    if is_spreadsheet_file(name) or "excel" in mime or "spreadsheetml" in mime:
        return FileKind.SPREADSHEET
    return FileKind.TEXT


def image_mime_type(file_name: str, content_type: str | None) -> str:
    """Resolve an image MIME type, preferring the declared one."""
    if content_type and content_type.startswith("image/"):
        return content_type
    for extension, mime in _IMAGE_MIME_BY_EXTENSION.items():
        if file_name.lower().endswith(extension):
            return mime
    return "image/png"
