"""
Analysis orchestration for generated stories.

Coordinates segmentation, length analysis, keyword placement analysis and
similarity checking for one story/keyword pair.
"""
import logging
from typing import Optional

from storylens.core.constants import EXPECTED_PARAGRAPH_COUNT
from storylens.models.story_models import Document, StoryAnalysisReport

from .keyword_analyzer import KeywordAnalyzer
from .length_analyzer import LengthAnalyzer
from .similarity_checker import SimilarityChecker
from .text_segmenter import TextSegmenter

logger = logging.getLogger(__name__)


class StoryAnalysisService:
    """Runs every analyzer over a story and bundles the results."""

    def __init__(
        self,
        segmenter: Optional[TextSegmenter] = None,
        length_analyzer: Optional[LengthAnalyzer] = None,
        keyword_analyzer: Optional[KeywordAnalyzer] = None,
        similarity_checker: Optional[SimilarityChecker] = None,
        expected_paragraph_count: int = EXPECTED_PARAGRAPH_COUNT
    ):
        """
        Initialize analysis service.

        Args:
            segmenter: Text segmenter (default instance if not provided)
            length_analyzer: Length analyzer (default thresholds if not provided)
            keyword_analyzer: Keyword analyzer (heuristic naturalness if not provided)
            similarity_checker: Similarity checker (no-op scorer if not provided)
            expected_paragraph_count: Paragraph count the generator is asked for
        """
        self.segmenter = segmenter or TextSegmenter()
        self.length_analyzer = length_analyzer or LengthAnalyzer()
        self.keyword_analyzer = keyword_analyzer or KeywordAnalyzer()
        self.similarity_checker = similarity_checker or SimilarityChecker()
        self.expected_paragraph_count = expected_paragraph_count

    def segment(self, raw_text: str) -> Document:
        return self.segmenter.segment(raw_text)

    async def analyze_document(self, document: Document, keyword: str) -> StoryAnalysisReport:
        """
        Analyze an already segmented (possibly edited) document.

        Threshold failures are reported in the result, never raised.
        """
        length = self.length_analyzer.analyze(document)
        keywords = self.keyword_analyzer.analyze(document, keyword)
        similarity = await self.similarity_checker.check_text(document.text, keyword)

        report = StoryAnalysisReport(
            document=document,
            length=length,
            keywords=keywords,
            similarity=similarity,
            expected_paragraph_count=self.expected_paragraph_count
        )

        logger.info(
            f"Analyzed story: {document.paragraph_count}/{self.expected_paragraph_count} paragraphs, "
            f"length_passed={length.all_passed}, keywords={keywords.total_count} "
            f"({keywords.natural_percentage}% natural), similarity_warnings={similarity.has_warnings}"
        )
        if not report.paragraph_count_matches:
            logger.warning(
                f"Paragraph count mismatch: expected {self.expected_paragraph_count}, "
                f"got {document.paragraph_count}"
            )
        return report

    async def analyze_text(self, raw_text: str, keyword: str) -> StoryAnalysisReport:
        """Segment raw generated text and analyze it."""
        return await self.analyze_document(self.segment(raw_text), keyword)
