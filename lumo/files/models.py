"""Upload result models and file processing errors."""

from enum import Enum

from pydantic import BaseModel, Field


class FileKind(str, Enum):
    """Extraction path chosen for an uploaded file."""

    IMAGE = "image"
    PDF = "pdf"
    WORD = "word"
    SPREADSHEET = "spreadsheet"
    TEXT = "text"


class FileUploadResult(BaseModel):
    """Extracted content of one uploaded file."""

    content: str = Field(..., description="Extracted text or image analysis")
    file_name: str = Field(..., description="Original file name")
    file_type: str = Field(..., description="MIME type reported for the upload")
    file_size: int = Field(..., ge=0, description="Size in bytes")
    kind: FileKind = Field(..., description="Extraction path that produced the content")
    base64: str | None = Field(
        default=None, description="Base64 image data (images only, no data-URL prefix)"
    )

    @property
    def size_kb(self) -> int:
        return round(self.file_size / 1024)

    @property
    def is_image(self) -> bool:
        return self.kind == FileKind.IMAGE or self.file_type.startswith("image/")


class FileProcessingError(Exception):
    """Base exception for upload validation errors."""

    pass


class FileTooLargeError(FileProcessingError):
    """Upload exceeds the configured size limit."""

    def __init__(self, file_name: str, file_size: int, max_size: int) -> None:
        self.file_name = file_name
        self.file_size = file_size
        self.max_size = max_size
        super().__init__(f"File size exceeds {max_size // (1024 * 1024)}MB limit")


class UnsupportedFileTypeError(FileProcessingError):
    """Upload is neither a supported MIME type nor a known extension."""

    def __init__(self, file_name: str, content_type: str | None) -> None:
        self.file_name = file_name
        self.content_type = content_type
        super().__init__(f"Unsupported file type: {content_type or file_name}")
