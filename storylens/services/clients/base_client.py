"""
Base client for story generation APIs.

This module provides an abstract base class for all generation clients,
establishing a consistent interface and shared functionality.
"""
import asyncio
import logging
from abc import ABC, abstractmethod
from typing import Optional, Sequence

import httpx

from storylens.core.error_handling import GenerationError
from storylens.core.http_client import get_async_client
from storylens.models.story_models import ImagePart
from storylens.services.prompt_builder import build_story_prompt

logger = logging.getLogger(__name__)


class BaseGenerationClient(ABC):
    """Abstract base class for all story generation clients.

    Provides common functionality for API clients including:
    - Explicit configuration passed at construction
    - HTTP client management with connection pooling
    - Async context manager support
    - Timeout and error conversion to GenerationError

    Subclasses must implement:
    - _validate_credentials(): Validate API credentials
    - _generate_text(): Call the upstream API and return its text
    - health_check(): Check if API is accessible
    """

    def __init__(
        self,
        api_key: Optional[str] = None,
        endpoint: Optional[str] = None,
        model_name: Optional[str] = None,
        timeout: float = 180.0,
        business_name: str = "노보텔 사이공센터"
    ):
        """Initialize the generation client.

        Args:
            api_key: API key for authentication
            endpoint: API endpoint URL
            model_name: Upstream model identifier
            timeout: Generation timeout in seconds
            business_name: Business featured in the generated review

        Raises:
            ClientConfigurationError: If credentials are invalid
        """
        self.api_key = api_key
        self.endpoint = endpoint
        self.model_name = model_name
        self.timeout = timeout
        self.business_name = business_name
        self._client: Optional[httpx.AsyncClient] = None

        self._validate_credentials()

        logger.info(f"Initialized {self.__class__.__name__} with timeout={timeout}s")

    @abstractmethod
    def _validate_credentials(self) -> None:
        """Validate API credentials.

        Raises:
            ClientConfigurationError: If credentials are missing or invalid
        """
        pass

    async def __aenter__(self):
        self._client = self._create_client()
        logger.debug(f"{self.__class__.__name__} context manager entered")
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        await self.close()
        logger.debug(f"{self.__class__.__name__} context manager exited")

    async def close(self):
        """Close the HTTP client and release resources. Safe to call multiple times."""
        if self._client:
            await self._client.aclose()
            self._client = None
            logger.debug(f"{self.__class__.__name__} HTTP client closed")

    def _create_client(self) -> httpx.AsyncClient:
        return get_async_client(timeout=self.timeout)

    @abstractmethod
    async def _generate_text(self, prompt: str, images: Sequence[ImagePart]) -> str:
        """Send prompt and images upstream and return the generated text.

        Raises:
            GenerationError: If the upstream call fails
        """
        pass

    async def generate(self, images: Sequence[ImagePart], keyword: str, image_count: Optional[int] = None) -> str:
        """Generate a review for the given images and keyword.

        Args:
            images: Decoded photographs in story order
            keyword: Keyword to place in the review
            image_count: Image count stated in the prompt (defaults to len(images))

        Returns:
            Raw generated text (stripped, never empty)

        Raises:
            InputValidationError: If the keyword is empty
            GenerationError: If the call fails, times out, or returns no text
        """
        prompt = build_story_prompt(
            keyword,
            business_name=self.business_name,
            image_count=image_count or len(images)
        )

        logger.info(f"Requesting story from {self.__class__.__name__} ({len(images)} images)")
        try:
            text = await asyncio.wait_for(self._generate_text(prompt, images), timeout=self.timeout)
        except asyncio.TimeoutError as e:
            raise GenerationError(f"Upstream generation timed out after {self.timeout}s") from e
        except GenerationError:
            raise
        except Exception as e:
            logger.error(f"{self.__class__.__name__} generation failed: {e}")
            raise GenerationError(f"Upstream generation failed: {e}") from e

        text = (text or "").strip()
        if not text:
            raise GenerationError("API에서 텍스트를 생성하지 못했습니다.")

        logger.info(f"Received story ({len(text)} chars)")
        return text

    @abstractmethod
    async def health_check(self) -> bool:
        """Check if the API is accessible. Returns False on any error, never raises."""
        pass

    def __repr__(self) -> str:
        return (
            f"{self.__class__.__name__}("
            f"endpoint={self.endpoint}, "
            f"model={self.model_name}, "
            f"timeout={self.timeout}s"
            ")"
        )
