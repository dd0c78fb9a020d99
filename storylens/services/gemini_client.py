"""
Google Gemini client for photo-based review generation.
"""
import logging
from typing import Optional, Sequence

from google import genai
from google.genai import types

from storylens.core.error_handling import ClientConfigurationError, GenerationError
from storylens.models.story_models import ImagePart
from storylens.services.clients.base_client import BaseGenerationClient

logger = logging.getLogger(__name__)


class GeminiStoryClient(BaseGenerationClient):
    """Client for generating reviews with Google Gemini Flash."""

    def __init__(
        self,
        api_key: Optional[str] = None,
        model_name: str = "gemini-2.5-flash",
        timeout: float = 180.0,
        business_name: str = "노보텔 사이공센터",
        temperature: float = 0.7,
        top_k: int = 40,
        top_p: float = 0.95,
        max_output_tokens: int = 12000
    ):
        """
        Initialize Gemini client.

        Args:
            api_key: Gemini API key
            model_name: Gemini model name
            timeout: Generation timeout in seconds
            business_name: Business featured in the generated review
            temperature: Sampling temperature
            top_k: Top-k sampling
            top_p: Nucleus sampling
            max_output_tokens: Output token cap (16 paragraphs need a generous budget)
        """
        super().__init__(
            api_key=api_key,
            model_name=model_name,
            timeout=timeout,
            business_name=business_name
        )
        self.generation_config = types.GenerateContentConfig(
            temperature=temperature,
            top_k=top_k,
            top_p=top_p,
            max_output_tokens=max_output_tokens
        )
        self.client = genai.Client(api_key=self.api_key)

        logger.info(f"Initialized Gemini client with model: {self.model_name}")

    def _validate_credentials(self) -> None:
        if not self.api_key:
            raise ClientConfigurationError(
                "Gemini API key must be provided either "
                "via parameters or environment variables (GEMINI_API_KEY)"
            )

    def _build_contents(self, prompt: str, images: Sequence[ImagePart]) -> list:
        """Prompt text first, then every image inlined in story order."""
        return [prompt] + [
            types.Part.from_bytes(data=image.data, mime_type=image.mime_type)
            for image in images
        ]

    async def _generate_text(self, prompt: str, images: Sequence[ImagePart]) -> str:
        logger.debug("Sending request to Gemini...")
        try:
            response = await self.client.aio.models.generate_content(
                model=self.model_name,
                contents=self._build_contents(prompt, images),
                config=self.generation_config
            )
        except Exception as e:
            logger.error(f"Gemini API error: {e}")
            raise GenerationError(f"Gemini API error: {e}") from e

        return response.text or ""

    async def health_check(self) -> bool:
        try:
            await self.client.aio.models.get(model=self.model_name)
            return True
        except Exception as e:
            logger.warning(f"Gemini health check failed: {e}")
            return False
