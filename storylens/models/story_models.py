"""
Story models for the generated-text validation pipeline.

This module provides the data structures produced by segmentation and the
analyzers. All of them are derived from the raw generated text and are
recomputed on every analysis request.
"""
import math
from dataclasses import dataclass, field
from typing import List, Optional, Tuple


def round_half_up(value: float) -> int:
    """Round to the nearest integer with .5 going up (built-in round() goes to even)."""
    return math.floor(value + 0.5)


@dataclass(frozen=True)
class ImagePart:
    """A decoded image ready to be forwarded upstream."""

    data: bytes
    """Raw image bytes."""

    mime_type: str
    """MIME type, e.g. image/jpeg."""


@dataclass(frozen=True)
class Paragraph:
    """A single numbered paragraph of the generated story."""

    number: int
    """Positional ordinal, starting at 1."""

    content: str
    """Trimmed, non-empty paragraph text."""


@dataclass(frozen=True)
class Document:
    """Segmented story: a title plus ordered paragraphs."""

    title: str
    paragraphs: Tuple[Paragraph, ...] = ()

    @property
    def paragraph_count(self) -> int:
        return len(self.paragraphs)

    @property
    def contents(self) -> List[str]:
        return [p.content for p in self.paragraphs]

    @property
    def text(self) -> str:
        """Paragraph contents joined by a blank line (title excluded)."""
        return "\n\n".join(self.contents)

    @classmethod
    def from_contents(cls, title: str, contents: List[str]) -> "Document":
        """Build a document from raw paragraph strings, numbering them 1..N."""
        cleaned = [c.strip() for c in contents if c and c.strip()]
        return cls(
            title=title,
            paragraphs=tuple(Paragraph(number=i + 1, content=c) for i, c in enumerate(cleaned))
        )


@dataclass(frozen=True)
class ParagraphStats:
    """Character counts for one paragraph."""
    number: int
    chars: int
    chars_without_spaces: int


@dataclass(frozen=True)
class SectionCheck:
    """Threshold check for one section of the story."""
    chars: int
    required: int
    passed: bool


@dataclass(frozen=True)
class BodyCheck:
    """Threshold check for the body, reported via its shortest paragraph."""
    avg_chars: int
    min_chars: int
    required: int
    passed: bool


@dataclass(frozen=True)
class LengthReport:
    """Length statistics and threshold results for a document."""
    introduction: SectionCheck
    body: BodyCheck
    conclusion: SectionCheck
    total: SectionCheck
    paragraph_stats: List[ParagraphStats] = field(default_factory=list)
    total_chars: int = 0
    total_chars_without_spaces: int = 0
    paragraph_count: int = 0

    @property
    def all_passed(self) -> bool:
        return (
            self.introduction.passed
            and self.body.passed
            and self.conclusion.passed
            and self.total.passed
        )

    @property
    def average_chars_per_paragraph(self) -> int:
        if not self.paragraph_count:
            return 0
        return round_half_up(self.total_chars_without_spaces / self.paragraph_count)


@dataclass(frozen=True)
class KeywordOccurrence:
    """One match of the keyword inside a paragraph."""

    sequence: int
    """1-based marker index (capped at the size of the marker set)."""

    marker: str
    """Circled numeral shown in front of the keyword."""

    paragraph: int
    """Ordinal of the paragraph containing the match."""

    context: str
    """Trimmed text window around the match."""

    is_natural: bool
    """Result of the naturalness heuristic for the paragraph."""

    keyword: str = ""

    @property
    def marked_keyword(self) -> str:
        return f"{self.marker}{self.keyword}"


@dataclass(frozen=True)
class KeywordReport:
    """Keyword placement summary."""
    keyword: str
    occurrences: List[KeywordOccurrence] = field(default_factory=list)

    @property
    def total_count(self) -> int:
        return len(self.occurrences)

    @property
    def natural_count(self) -> int:
        return sum(1 for o in self.occurrences if o.is_natural)

    @property
    def natural_percentage(self) -> int:
        if self.total_count == 0:
            return 0
        return round_half_up(self.natural_count / self.total_count * 100)

    @property
    def verdict(self) -> str:
        """Bucket the natural percentage into a review verdict."""
        pct = self.natural_percentage
        if pct == 100:
            return "excellent"
        if pct >= 80:
            return "good"
        if pct >= 50:
            return "fair"
        return "needs_work"


@dataclass(frozen=True)
class SimilarityResult:
    """Similarity score for one keyword sentence."""
    sentence: str
    similarity: float
    is_warning: bool
    error: Optional[str] = None


@dataclass(frozen=True)
class NearDuplicate:
    """Two keyword sentences that read almost the same."""
    first: int
    second: int
    ratio: float


@dataclass(frozen=True)
class SimilarityReport:
    """Similarity results for all keyword sentences."""
    results: List[SimilarityResult] = field(default_factory=list)
    near_duplicates: List[NearDuplicate] = field(default_factory=list)

    @property
    def has_warnings(self) -> bool:
        return any(r.is_warning for r in self.results)

    @property
    def degraded(self) -> bool:
        """True when at least one sentence could not be scored."""
        return any(r.error for r in self.results)


@dataclass(frozen=True)
class StoryAnalysisReport:
    """Everything the presentation layer needs about one story/keyword pair."""
    document: Document
    length: LengthReport
    keywords: KeywordReport
    similarity: SimilarityReport
    expected_paragraph_count: int

    @property
    def paragraph_count_matches(self) -> bool:
        return self.document.paragraph_count == self.expected_paragraph_count
