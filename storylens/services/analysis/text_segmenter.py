"""
Split raw generated text into a title and numbered paragraphs.
"""
import re
import logging

from storylens.core.constants import DEFAULT_TITLE, TITLE_MARKER, TITLE_MAX_LENGTH
from storylens.models.story_models import Document

logger = logging.getLogger(__name__)


class TextSegmenter:
    """Segments model output into a Document."""

    NUMBERED_LINE_PATTERN = re.compile(r'^\d+\.')

    def __init__(self, default_title: str = DEFAULT_TITLE):
        self.default_title = default_title

    def _is_title_marker_line(self, line: str) -> bool:
        return line.startswith(TITLE_MARKER) or f"{TITLE_MARKER} " in line

    def segment(self, raw_text: str) -> Document:
        """
        Segment raw text into a Document.

        The first non-empty line is consumed as the title when it carries the
        title marker, or when it is short and not a numbered paragraph. All
        remaining lines become paragraphs numbered by position; numeral
        prefixes in the text are kept as content and never trusted.

        Args:
            raw_text: Text returned by the generator

        Returns:
            Document (never raises for string input)
        """
        lines = [line.strip() for line in (raw_text or "").split('\n')]
        lines = [line for line in lines if line]

        title = self.default_title
        content_lines = lines

        if lines:
            first = lines[0]
            if self._is_title_marker_line(first):
                title = first.split(TITLE_MARKER)[-1].strip() or self.default_title
                content_lines = lines[1:]
            elif not self.NUMBERED_LINE_PATTERN.match(first) and len(first) < TITLE_MAX_LENGTH:
                title = first
                content_lines = lines[1:]

        document = Document.from_contents(title, content_lines)
        logger.debug(f"Segmented text into title + {document.paragraph_count} paragraphs")
        return document


_default_segmenter = TextSegmenter()


def segment(raw_text: str) -> Document:
    """Segment raw text with the default segmenter."""
    return _default_segmenter.segment(raw_text)
