"""
Keyword naturalness checkers.

The default checker is a best-effort Korean grammar sanity check built on
fixed patterns. It is not a parser: false positives and negatives are
expected. Callers depend only on NaturalnessChecker, so a language-aware
implementation can replace it.
"""
import re
from abc import ABC, abstractmethod


class NaturalnessChecker(ABC):
    """Decides whether a keyword sits naturally inside a paragraph."""

    @abstractmethod
    def is_natural(self, paragraph: str, keyword: str) -> bool:
        """Return True when the keyword placement looks natural."""
        pass


class HeuristicNaturalnessChecker(NaturalnessChecker):
    """Pattern-based checker for Korean review text.

    A placement is natural when all three hold:
    1. the paragraph ends with a Hangul word closed by a final verb ending
    2. the paragraph contains a Hangul word followed by a particle
    3. the keyword is attached to Hangul on at least one side
    """

    # Closing sentence punctuation after the ending is tolerated
    FINAL_ENDING_PATTERN = re.compile(r'[가-힣]+[다요죠예습니다]+[.?!…]*$')
    PARTICLE_PATTERN = re.compile(r'[가-힣]+[이가을를에게서로부터]')

    def has_final_ending(self, paragraph: str) -> bool:
        return bool(self.FINAL_ENDING_PATTERN.search(paragraph))

    def has_particle(self, paragraph: str) -> bool:
        return bool(self.PARTICLE_PATTERN.search(paragraph))

    def is_attached(self, paragraph: str, keyword: str) -> bool:
        if not keyword:
            return False
        escaped = re.escape(keyword)
        attached = re.compile(f'[가-힣]{escaped}|{escaped}[가-힣]')
        return bool(attached.search(paragraph))

    def is_natural(self, paragraph: str, keyword: str) -> bool:
        return (
            self.has_final_ending(paragraph)
            and self.has_particle(paragraph)
            and self.is_attached(paragraph, keyword)
        )
