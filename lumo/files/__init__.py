"""
File Upload Module

File-type sniffing and dispatch to PDF, Word, spreadsheet, text and image
extraction paths.
"""

from lumo.files.detection import detect_kind, is_supported
from lumo.files.models import (
    FileKind,
    FileProcessingError,
    FileTooLargeError,
    FileUploadResult,
    UnsupportedFileTypeError,
)
from lumo.files.service import FileService, format_file_for_chat
from lumo.files.vision import ImageAnalysisError, ImageAnalyzer

__all__ = [
    "FileKind",
    "FileProcessingError",
    "FileService",
    "FileTooLargeError",
    "FileUploadResult",
    "ImageAnalysisError",
    "ImageAnalyzer",
    "UnsupportedFileTypeError",
    "detect_kind",
    "format_file_for_chat",
    "is_supported",
]
