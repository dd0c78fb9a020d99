"""
Keyword placement analysis.

Finds every literal occurrence of the keyword, numbers the occurrences with
circled markers in order of appearance, extracts the surrounding context and
grades each placement with a NaturalnessChecker.
"""
import logging
from typing import List, Optional, Sequence

from storylens.core.constants import KEYWORD_CONTEXT_CHARS, KEYWORD_MARKERS
from storylens.models.story_models import Document, KeywordOccurrence, KeywordReport

from .naturalness import HeuristicNaturalnessChecker, NaturalnessChecker

logger = logging.getLogger(__name__)


def find_occurrences(text: str, keyword: str) -> List[int]:
    """Start offsets of non-overlapping, case-sensitive matches."""
    if not keyword:
        return []
    positions = []
    start = text.find(keyword)
    while start != -1:
        positions.append(start)
        start = text.find(keyword, start + len(keyword))
    return positions


def count_occurrences(text: str, keyword: str) -> int:
    """Number of non-overlapping keyword matches in text."""
    return len(find_occurrences(text, keyword))


def extract_context(text: str, start: int, length: int, window: int = KEYWORD_CONTEXT_CHARS) -> str:
    """Return up to `window` chars either side of a match, clipped and trimmed."""
    left = max(0, start - window)
    right = min(len(text), start + length + window)
    return text[left:right].strip()


class KeywordAnalyzer:
    """Locates and grades keyword placements in a Document."""

    def __init__(
        self,
        checker: Optional[NaturalnessChecker] = None,
        markers: Sequence[str] = KEYWORD_MARKERS,
        context_chars: int = KEYWORD_CONTEXT_CHARS
    ):
        """
        Initialize keyword analyzer.

        Args:
            checker: Naturalness checker (heuristic checker by default)
            markers: Ordered marker symbols; occurrences past the end reuse the last one
            context_chars: Context window size on each side of a match
        """
        if not markers:
            raise ValueError("At least one keyword marker is required")
        self.checker = checker or HeuristicNaturalnessChecker()
        self.markers = tuple(markers)
        self.context_chars = context_chars

    def _marker_for(self, sequence: int) -> tuple[int, str]:
        capped = min(sequence, len(self.markers))
        return capped, self.markers[capped - 1]

    def analyze(self, document: Document, keyword: str) -> KeywordReport:
        """
        Analyze keyword placement across the document.

        Args:
            document: Segmented story
            keyword: Literal keyword (case-sensitive)

        Returns:
            KeywordReport with occurrences in order of appearance
        """
        occurrences: List[KeywordOccurrence] = []
        if not keyword or not keyword.strip():
            return KeywordReport(keyword="", occurrences=occurrences)

        found = 0
        for paragraph in document.paragraphs:
            positions = find_occurrences(paragraph.content, keyword)
            if not positions:
                continue

            natural = self.checker.is_natural(paragraph.content, keyword)
            for position in positions:
                found += 1
                sequence, marker = self._marker_for(found)
                occurrences.append(KeywordOccurrence(
                    sequence=sequence,
                    marker=marker,
                    paragraph=paragraph.number,
                    context=extract_context(paragraph.content, position, len(keyword), self.context_chars),
                    is_natural=natural,
                    keyword=keyword
                ))

        report = KeywordReport(keyword=keyword, occurrences=occurrences)
        logger.debug(
            f"Keyword '{keyword}': {report.total_count} occurrences, "
            f"{report.natural_count} natural ({report.natural_percentage}%)"
        )
        return report


_default_analyzer = KeywordAnalyzer()


def analyze_keywords(document: Document, keyword: str) -> KeywordReport:
    """Analyze keyword placement with the default heuristic checker and markers."""
    return _default_analyzer.analyze(document, keyword)
