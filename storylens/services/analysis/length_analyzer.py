"""
Character statistics and length thresholds for a segmented story.

Sections:
- Introduction: first paragraph
- Body: every paragraph strictly between the first and the last
- Conclusion: last paragraph

Threshold comparisons always use the whitespace-free character count.
"""
import re
import logging
from typing import List

from storylens.core.constants import (
    BODY_PARAGRAPH_MIN_CHARS,
    CONCLUSION_MIN_CHARS,
    INTRODUCTION_MIN_CHARS,
    PARAGRAPH_SEPARATOR,
    TOTAL_MIN_CHARS,
)
from storylens.models.story_models import (
    BodyCheck,
    Document,
    LengthReport,
    ParagraphStats,
    SectionCheck,
    round_half_up,
)

logger = logging.getLogger(__name__)

_WHITESPACE = re.compile(r'\s')


def count_chars(text: str) -> int:
    """Raw character count."""
    return len(text)


def count_chars_without_spaces(text: str) -> int:
    """Character count with every whitespace character removed."""
    return len(_WHITESPACE.sub('', text))


class LengthAnalyzer:
    """Computes per-paragraph statistics and evaluates length thresholds."""

    def __init__(
        self,
        introduction_min: int = INTRODUCTION_MIN_CHARS,
        body_min: int = BODY_PARAGRAPH_MIN_CHARS,
        conclusion_min: int = CONCLUSION_MIN_CHARS,
        total_min: int = TOTAL_MIN_CHARS
    ):
        self.introduction_min = introduction_min
        self.body_min = body_min
        self.conclusion_min = conclusion_min
        self.total_min = total_min

    def paragraph_stats(self, document: Document) -> List[ParagraphStats]:
        return [
            ParagraphStats(
                number=p.number,
                chars=count_chars(p.content),
                chars_without_spaces=count_chars_without_spaces(p.content)
            )
            for p in document.paragraphs
        ]

    def analyze(self, document: Document) -> LengthReport:
        """
        Build a LengthReport for the document.

        Pure function: the same document always yields the same report.
        An empty document fails every check with zero counts.

        Args:
            document: Segmented story

        Returns:
            LengthReport
        """
        stats = self.paragraph_stats(document)
        body = stats[1:-1]

        intro_chars = stats[0].chars_without_spaces if stats else 0
        conclusion_chars = stats[-1].chars_without_spaces if stats else 0
        body_counts = [s.chars_without_spaces for s in body]
        body_avg = round_half_up(sum(body_counts) / len(body_counts)) if body_counts else 0
        body_min = min(body_counts) if body_counts else 0
        total_no_space = sum(s.chars_without_spaces for s in stats)
        total_chars = count_chars(PARAGRAPH_SEPARATOR.join(document.contents))

        report = LengthReport(
            introduction=SectionCheck(
                chars=intro_chars,
                required=self.introduction_min,
                passed=intro_chars >= self.introduction_min
            ),
            body=BodyCheck(
                avg_chars=body_avg,
                min_chars=body_min,
                required=self.body_min,
                passed=body_min >= self.body_min
            ),
            conclusion=SectionCheck(
                chars=conclusion_chars,
                required=self.conclusion_min,
                passed=conclusion_chars >= self.conclusion_min
            ),
            total=SectionCheck(
                chars=total_no_space,
                required=self.total_min,
                passed=total_no_space >= self.total_min
            ),
            paragraph_stats=stats,
            total_chars=total_chars,
            total_chars_without_spaces=total_no_space,
            paragraph_count=len(stats)
        )

        logger.debug(
            f"Length analysis: intro={intro_chars}, body_min={body_min}, "
            f"conclusion={conclusion_chars}, total={total_no_space}, passed={report.all_passed}"
        )
        return report


_default_analyzer = LengthAnalyzer()


def analyze_length(document: Document) -> LengthReport:
    """Analyze a document with the default thresholds."""
    return _default_analyzer.analyze(document)
