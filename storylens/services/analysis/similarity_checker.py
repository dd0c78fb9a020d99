"""
Similarity checking for keyword sentences.

Two concerns live here:
- External similarity: each keyword sentence is scored 0-100 by a
  SimilarityScorer. The default scorer is a no-op that always returns 0;
  HttpSimilarityScorer calls a configured service. Scores >= 30 are warnings.
- Sentence diversity: keyword sentences that are near-duplicates of each
  other (Levenshtein ratio) are reported so they can be rewritten.
"""
import asyncio
import logging
import math
import re
from abc import ABC, abstractmethod
from typing import List, Optional

import httpx
import Levenshtein

from storylens.core.constants import (
    MAX_KEYWORD_SENTENCES,
    MIN_SIMILARITY_SENTENCE_LENGTH,
    NEAR_DUPLICATE_RATIO,
    SIMILARITY_WARNING_THRESHOLD,
)
from storylens.core.error_handling import SimilarityCheckError
from storylens.core.http_client import get_managed_client, post_json
from storylens.models.story_models import NearDuplicate, SimilarityReport, SimilarityResult

logger = logging.getLogger(__name__)

SENTENCE_SPLIT_PATTERN = re.compile(r'[.!?]+')


def extract_keyword_sentences(text: str, keyword: str, limit: int = MAX_KEYWORD_SENTENCES) -> List[str]:
    """
    Extract sentences containing the keyword.

    Splits on runs of '.', '!' and '?', trims, drops empties, keeps only
    sentences containing the keyword and returns at most `limit` of them.
    """
    if not keyword or not keyword.strip() or not text:
        return []
    sentences = [s.strip() for s in SENTENCE_SPLIT_PATTERN.split(text)]
    return [s for s in sentences if s and keyword in s][:limit]


def is_warning(similarity: float) -> bool:
    return similarity >= SIMILARITY_WARNING_THRESHOLD


def has_warnings(results: List[SimilarityResult]) -> bool:
    return any(r.is_warning for r in results)


def find_near_duplicates(sentences: List[str], threshold: float = NEAR_DUPLICATE_RATIO) -> List[NearDuplicate]:
    """
    Find pairs of sentences whose Levenshtein ratio meets the threshold.

    Indices refer to positions in `sentences`; each pair is reported once
    with first < second.
    """
    duplicates = []
    for i in range(len(sentences)):
        for j in range(i + 1, len(sentences)):
            ratio = Levenshtein.ratio(sentences[i], sentences[j])
            if ratio >= threshold:
                duplicates.append(NearDuplicate(first=i, second=j, ratio=round(ratio, 4)))
    if duplicates:
        logger.info(f"Found {len(duplicates)} near-duplicate keyword sentence pair(s)")
    return duplicates


# ============================================================================
# Scorers
# ============================================================================

class SimilarityScorer(ABC):
    """Scores how similar a sentence is to existing documents (0-100)."""

    @abstractmethod
    async def score(self, sentence: str) -> float:
        """Return a similarity percentage.

        Raises:
            SimilarityCheckError: If the lookup fails
        """
        pass


class NullSimilarityScorer(SimilarityScorer):
    """Placeholder scorer used until an external service is configured.

    Sentences shorter than the minimum length cannot be checked and score 0;
    every other sentence also scores 0, so no warning is ever raised.
    """

    async def score(self, sentence: str) -> float:
        if len(sentence) < MIN_SIMILARITY_SENTENCE_LENGTH:
            return 0
        return 0


class HttpSimilarityScorer(SimilarityScorer):
    """Scores sentences with an external similarity service.

    POSTs {"text": sentence} and reads a numeric "similarity" field from the
    JSON response, clamped to 0-100.
    """

    def __init__(
        self,
        endpoint: str,
        api_key: Optional[str] = None,
        timeout: float = 10.0,
        client: Optional[httpx.AsyncClient] = None
    ):
        if not endpoint:
            raise ValueError("Similarity service endpoint must be provided")
        self.endpoint = endpoint
        self.api_key = api_key
        self.timeout = timeout
        self._client = client

    async def score(self, sentence: str) -> float:
        if len(sentence) < MIN_SIMILARITY_SENTENCE_LENGTH:
            return 0

        headers = {"Content-Type": "application/json"}
        if self.api_key:
            headers["Authorization"] = f"Bearer {self.api_key}"

        try:
            async with get_managed_client(self._client, self.timeout) as client:
                response = await post_json(
                    client,
                    self.endpoint,
                    {"text": sentence},
                    headers=headers,
                    timeout=self.timeout
                )
        except httpx.HTTPError as e:
            raise SimilarityCheckError(f"Similarity service unreachable: {e}") from e

        if response.status_code != 200:
            raise SimilarityCheckError(
                f"Similarity service returned {response.status_code}: {response.text[:200]}"
            )

        try:
            value = float(response.json()["similarity"])
        except (ValueError, KeyError, TypeError) as e:
            raise SimilarityCheckError(f"Malformed similarity response: {e}") from e

        if not math.isfinite(value):
            raise SimilarityCheckError(f"Malformed similarity response: non-finite value {value}")

        return max(0.0, min(100.0, value))


# ============================================================================
# Checker
# ============================================================================

class SimilarityChecker:
    """Runs a scorer over keyword sentences with bounded fan-out.

    A failed or timed-out lookup degrades that sentence to a score of 0 and
    is logged; it never aborts the batch.
    """

    def __init__(
        self,
        scorer: Optional[SimilarityScorer] = None,
        max_concurrency: int = MAX_KEYWORD_SENTENCES,
        timeout: float = 10.0
    ):
        self.scorer = scorer or NullSimilarityScorer()
        self.max_concurrency = max(1, max_concurrency)
        self.timeout = timeout

    async def check_similarity(self, sentence: str) -> float:
        """Score one sentence; raises SimilarityCheckError on failure or timeout."""
        try:
            return await asyncio.wait_for(self.scorer.score(sentence), timeout=self.timeout)
        except asyncio.TimeoutError as e:
            raise SimilarityCheckError(f"Similarity check timed out after {self.timeout}s") from e

    async def _check_one(self, sentence: str, semaphore: asyncio.Semaphore) -> SimilarityResult:
        async with semaphore:
            try:
                similarity = await self.check_similarity(sentence)
            except Exception as e:
                logger.warning(f"Similarity check failed, defaulting to 0: {e}")
                return SimilarityResult(sentence=sentence, similarity=0, is_warning=False, error=str(e))
        return SimilarityResult(sentence=sentence, similarity=similarity, is_warning=is_warning(similarity))

    async def check_all_similarities(self, sentences: List[str]) -> List[SimilarityResult]:
        """Score every sentence concurrently; results keep the input order."""
        if not sentences:
            return []
        semaphore = asyncio.Semaphore(self.max_concurrency)
        results = await asyncio.gather(*(self._check_one(s, semaphore) for s in sentences))

        warnings = sum(1 for r in results if r.is_warning)
        failures = sum(1 for r in results if r.error)
        logger.info(
            f"Similarity checked {len(results)} sentence(s): {warnings} warning(s), {failures} failure(s)"
        )
        return list(results)

    async def check_text(self, text: str, keyword: str) -> SimilarityReport:
        """Extract keyword sentences from text and build a SimilarityReport."""
        sentences = extract_keyword_sentences(text, keyword)
        results = await self.check_all_similarities(sentences)
        return SimilarityReport(results=results, near_duplicates=find_near_duplicates(sentences))
