"""
Response builder for story export.

Renders a Document as plain text and wraps it in a dated download response.
"""
import logging
from datetime import date
from typing import Optional
from urllib.parse import quote

from fastapi import Response

from storylens.core.constants import EXPORT_FILENAME_PREFIX, PARAGRAPH_SEPARATOR
from storylens.models.story_models import Document

logger = logging.getLogger(__name__)


def render_document(document: Document) -> str:
    """Title, a blank line, then paragraphs separated by blank lines."""
    return f"{document.title}{PARAGRAPH_SEPARATOR}{PARAGRAPH_SEPARATOR.join(document.contents)}"


def export_filename(export_date: Optional[date] = None) -> str:
    export_date = export_date or date.today()
    return f"{EXPORT_FILENAME_PREFIX}_{export_date.isoformat()}.txt"


class ResponseBuilder:
    """Builds responses for export endpoints."""

    def build_text_download(self, document: Document, export_date: Optional[date] = None) -> Response:
        """Build a UTF-8 plain text attachment for the document.

        Args:
            document: Story to export
            export_date: Date used in the filename (today when omitted)

        Returns:
            FastAPI Response with text content
        """
        text_bytes = render_document(document).encode('utf-8')
        filename = export_filename(export_date)

        logger.info(
            f"Exporting story: {document.paragraph_count} paragraphs, "
            f"{len(text_bytes)} bytes as {filename}"
        )

        return Response(
            content=text_bytes,
            media_type="text/plain; charset=utf-8",
            headers={
                "Content-Disposition": f"attachment; filename*=UTF-8''{quote(filename)}",
                "Content-Length": str(len(text_bytes))
            }
        )
