"""
Image input handler for base64/data-URL payloads and multipart uploads.

Validates image count, MIME type and sizes before anything is sent
upstream, and decodes every image into an ImagePart.
"""
import base64
import binascii
import logging
import re
from typing import List, Optional, Sequence

from fastapi import UploadFile

from storylens.core.error_handling import InputValidationError
from storylens.models.api_models import ImagePayload
from storylens.models.story_models import ImagePart

logger = logging.getLogger(__name__)

DATA_URL_PATTERN = re.compile(r'^data:(?P<mime>[\w.+-]+/[\w.+-]+)?(?:;[\w=.+-]+)*;base64,(?P<data>.*)$', re.DOTALL)


class ImageInputHandler:
    """Handles image input validation and decoding."""

    def __init__(self, required_count: int, max_image_mb: int, max_total_mb: int):
        """
        Initialize image input handler.

        Args:
            required_count: Exact number of images a request must carry
            max_image_mb: Per-image size limit (decoded)
            max_total_mb: Limit for all images together (decoded)
        """
        self.required_count = required_count
        self.max_image_bytes = max_image_mb * 1024 * 1024
        self.max_total_bytes = max_total_mb * 1024 * 1024
        self.max_image_mb = max_image_mb
        self.max_total_mb = max_total_mb

    def _check_count(self, count: int) -> None:
        if count != self.required_count:
            raise InputValidationError(
                f"{self.required_count}장의 사진이 필요합니다. (received {count})"
            )

    def _check_mime(self, mime_type: Optional[str], index: int) -> str:
        if not mime_type or not mime_type.startswith("image/"):
            raise InputValidationError(f"Image {index + 1} has unsupported type: {mime_type!r}")
        return mime_type

    def _check_size(self, size: int, index: int) -> None:
        if size == 0:
            raise InputValidationError(f"Image {index + 1} is empty")
        if size > self.max_image_bytes:
            raise InputValidationError(
                f"Image {index + 1} exceeds max allowed size of {self.max_image_mb} MB"
            )

    def _check_total(self, parts: List[ImagePart]) -> None:
        total = sum(len(p.data) for p in parts)
        if total > self.max_total_bytes:
            raise InputValidationError(
                f"Images exceed max allowed total size of {self.max_total_mb} MB"
            )

    def decode_payload(self, payload: ImagePayload, index: int = 0) -> ImagePart:
        """Decode one base64 or data-URL payload."""
        data = payload.data.strip()
        mime_type = payload.mime_type

        match = DATA_URL_PATTERN.match(data)
        if match:
            data = match.group("data")
            mime_type = mime_type or match.group("mime")

        mime_type = self._check_mime(mime_type, index)

        try:
            raw = base64.b64decode(data, validate=True)
        except (binascii.Error, ValueError) as e:
            raise InputValidationError(f"Image {index + 1} is not valid base64: {e}")

        self._check_size(len(raw), index)
        return ImagePart(data=raw, mime_type=mime_type)

    def decode_payloads(self, payloads: Sequence[ImagePayload]) -> List[ImagePart]:
        """Validate and decode JSON image payloads (order preserved)."""
        self._check_count(len(payloads))
        parts = [self.decode_payload(p, i) for i, p in enumerate(payloads)]
        self._check_total(parts)
        logger.info(f"Decoded {len(parts)} images ({sum(len(p.data) for p in parts)} bytes)")
        return parts

    async def read_uploads(self, files: Sequence[UploadFile]) -> List[ImagePart]:
        """Validate and read multipart uploads (order preserved)."""
        self._check_count(len(files))
        parts = []
        for i, file in enumerate(files):
            mime_type = self._check_mime(file.content_type, i)
            content = await file.read()
            self._check_size(len(content), i)
            parts.append(ImagePart(data=content, mime_type=mime_type))
        self._check_total(parts)
        logger.info(f"Read {len(parts)} uploaded images ({sum(len(p.data) for p in parts)} bytes)")
        return parts
