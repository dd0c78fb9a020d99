"""
Client factory for initializing generation clients and similarity scorers.

Centralizes reading settings so the clients themselves only receive
explicit configuration values.
"""
import logging
from functools import lru_cache
from typing import Optional

from storylens.core.config import Settings, settings as default_settings
from storylens.core.error_handling import ClientConfigurationError
from storylens.services.analysis.similarity_checker import (
    HttpSimilarityScorer,
    NullSimilarityScorer,
    SimilarityChecker,
    SimilarityScorer,
)
from storylens.services.backend_relay_client import BackendRelayClient
from storylens.services.clients.base_client import BaseGenerationClient
from storylens.services.gemini_client import GeminiStoryClient

logger = logging.getLogger(__name__)


class ClientFactory:
    """Factory for creating and caching upstream clients."""

    SUPPORTED_PROVIDERS = ("gemini", "backend")

    def __init__(self, config: Optional[Settings] = None):
        self.config = config or default_settings
        self._generation_client: Optional[BaseGenerationClient] = None
        self._similarity_checker: Optional[SimilarityChecker] = None

    @property
    def generation_client(self) -> BaseGenerationClient:
        """Get or create the configured generation client.

        Raises:
            ClientConfigurationError: If the provider is unknown or misconfigured
        """
        if self._generation_client is None:
            provider = self.config.GENERATION_PROVIDER.lower()
            if provider == "gemini":
                self._generation_client = GeminiStoryClient(
                    api_key=self.config.GEMINI_API_KEY,
                    model_name=self.config.GEMINI_MODEL,
                    timeout=self.config.GENERATION_TIMEOUT,
                    business_name=self.config.BUSINESS_NAME,
                    temperature=self.config.GEMINI_TEMPERATURE,
                    top_k=self.config.GEMINI_TOP_K,
                    top_p=self.config.GEMINI_TOP_P,
                    max_output_tokens=self.config.GEMINI_MAX_OUTPUT_TOKENS
                )
            elif provider == "backend":
                self._generation_client = BackendRelayClient(
                    endpoint=self.config.BACKEND_API,
                    timeout=self.config.GENERATION_TIMEOUT,
                    business_name=self.config.BUSINESS_NAME,
                    max_tokens=self.config.BACKEND_MAX_TOKENS,
                    temperature=self.config.BACKEND_TEMPERATURE,
                    max_attempts=self.config.HTTP_RETRY_ATTEMPTS
                )
            else:
                raise ClientConfigurationError(
                    f"Unknown GENERATION_PROVIDER '{provider}'. "
                    f"Options: {', '.join(self.SUPPORTED_PROVIDERS)}"
                )
            logger.info(f"Generation client initialized: {self._generation_client!r}")
        return self._generation_client

    def _build_scorer(self) -> SimilarityScorer:
        if self.config.SIMILARITY_API_URL:
            logger.info("Similarity scoring via external service")
            return HttpSimilarityScorer(
                endpoint=self.config.SIMILARITY_API_URL,
                api_key=self.config.SIMILARITY_API_KEY,
                timeout=self.config.SIMILARITY_CHECK_TIMEOUT
            )
        logger.info("SIMILARITY_API_URL not set - similarity scores default to 0")
        return NullSimilarityScorer()

    @property
    def similarity_checker(self) -> SimilarityChecker:
        if self._similarity_checker is None:
            self._similarity_checker = SimilarityChecker(
                scorer=self._build_scorer(),
                max_concurrency=self.config.SIMILARITY_MAX_CONCURRENCY,
                timeout=self.config.SIMILARITY_CHECK_TIMEOUT
            )
        return self._similarity_checker


@lru_cache(maxsize=1)
def get_client_factory() -> ClientFactory:
    """Process-wide client factory."""
    return ClientFactory()
