"""
File Service

Validates uploads, dispatches them to the matching extractor, and formats
the result as a chat prompt.
"""

import asyncio
import base64
import logging

from lumo.files.detection import detect_kind, image_mime_type, is_supported
from lumo.files.extractors import (
    DATA_ERROR_MARKER,
    TEXT_ERROR_MARKER,
    extract_pdf,
    extract_spreadsheet,
    extract_text,
    extract_word,
    image_analysis_content,
    image_fallback_content,
)
from lumo.files.models import (
    FileKind,
    FileTooLargeError,
    FileUploadResult,
    UnsupportedFileTypeError,
)
from lumo.files.vision import ImageAnalysisError, ImageAnalyzer

logger = logging.getLogger(__name__)

DEFAULT_MAX_FILE_SIZE = 10 * 1024 * 1024


class FileService:
    """Turn uploaded bytes into chat-ready content."""

    def __init__(
        self,
        analyzer: ImageAnalyzer | None = None,
        max_file_size: int = DEFAULT_MAX_FILE_SIZE,
    ) -> None:
        self.analyzer = analyzer
        self.max_file_size = max_file_size

    async def process_file(
        self,
        file_name: str,
        content_type: str | None,
        data: bytes,
    ) -> FileUploadResult:
        """
        Validate and extract one uploaded file.

        Raises:
            FileTooLargeError: If the file exceeds max_file_size
            UnsupportedFileTypeError: If neither MIME type nor extension is known
        """
        size = len(data)
        if size > self.max_file_size:
            raise FileTooLargeError(file_name, size, self.max_file_size)
        if not is_supported(file_name, content_type):
            raise UnsupportedFileTypeError(file_name, content_type)

        kind = detect_kind(file_name, content_type)
        file_type = content_type or ""
        encoded: str | None = None

        logger.info(
            f"Processing upload {file_name}",
            extra={"file_name": file_name, "kind": kind.value, "size": size},
        )

        if kind == FileKind.IMAGE:
            mime_type = image_mime_type(file_name, content_type)
            file_type = mime_type
            encoded = base64.b64encode(data).decode("ascii")
            content = await self._describe_image(file_name, size, mime_type, encoded)
        elif kind == FileKind.PDF:
            content = await asyncio.to_thread(extract_pdf, file_name, data)
        elif kind == FileKind.WORD:
            content = await asyncio.to_thread(extract_word, file_name, data)
        elif kind == FileKind.SPREADSHEET:
            content = await asyncio.to_thread(extract_spreadsheet, file_name, data)
        else:
            content = extract_text(data)

        return FileUploadResult(
            content=content,
            file_name=file_name,
            file_type=file_type,
            file_size=size,
            kind=kind,
            base64=encoded,
        )

    async def _describe_image(
        self, file_name: str, size: int, mime_type: str, encoded: str
    ) -> str:
        if self.analyzer is None:
            logger.warning("No vision provider configured; skipping image analysis")
            return image_fallback_content(file_name, size)
        try:
            description = await self.analyzer.analyze(encoded, mime_type)
        except ImageAnalysisError as e:
            logger.warning(f"Vision analysis unavailable for {file_name}: {e.message}")
            return image_fallback_content(file_name, size)
        return image_analysis_content(file_name, size, mime_type, description)


def format_file_for_chat(result: FileUploadResult) -> str:
    """Build the "I've uploaded a file" message sent on the user's behalf."""
    prompt = "I've uploaded a file for analysis:\n\n"
    prompt += "**File Details:**\n"
    prompt += f"- Name: {result.file_name}\n"
    prompt += f"- Type: {result.file_type}\n"
    prompt += f"- Size: {result.size_kb} KB\n\n"

    if result.is_image:
        prompt += f"{result.content}\n\n"
    elif TEXT_ERROR_MARKER in result.content or DATA_ERROR_MARKER in result.content:
        prompt += f"{result.content}\n\n"
        prompt += (
            "Please let me know if you can help with this file "
            "or if you need it in a different format."
        )
    else:
        prompt += f"**File Content:**\n```\n{result.content}\n```\n\n"
        prompt += (
            "Please analyze this file and provide insights, suggestions, or answer any "
            "questions about its content. I can now ask you questions about this file content."
        )

    return prompt
