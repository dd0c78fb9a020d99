"""
Relay client that forwards generation requests to an AI backend gateway.

The gateway accepts a prompt plus base64 images and answers with the
generated text in either a "content" or a "text" field.
"""
import base64
import logging
from typing import Optional, Sequence

import httpx

from storylens.core.error_handling import ClientConfigurationError, GenerationError
from storylens.core.http_client import RetryPolicy, get_managed_client, post_json
from storylens.models.story_models import ImagePart
from storylens.services.clients.base_client import BaseGenerationClient

logger = logging.getLogger(__name__)


class BackendRelayClient(BaseGenerationClient):
    """Client for the multimodal backend gateway (POST /api/ai/generate)."""

    GENERATE_PATH = "/api/ai/generate"

    def __init__(
        self,
        endpoint: str,
        timeout: float = 180.0,
        business_name: str = "노보텔 사이공센터",
        max_tokens: int = 5000,
        temperature: float = 0.8,
        max_attempts: Optional[int] = None,
        api_key: Optional[str] = None
    ):
        """
        Initialize backend relay client.

        Args:
            endpoint: Gateway base URL (e.g. http://localhost:3000)
            timeout: Generation timeout in seconds
            business_name: Business featured in the generated review
            max_tokens: Output token cap forwarded to the gateway
            temperature: Sampling temperature forwarded to the gateway
            max_attempts: Total attempts for transient HTTP failures
            api_key: Optional bearer token for the gateway
        """
        super().__init__(
            api_key=api_key,
            endpoint=endpoint,
            model_name="multimodal",
            timeout=timeout,
            business_name=business_name
        )
        self.max_tokens = max_tokens
        self.temperature = temperature
        self.max_attempts = max_attempts

    def _validate_credentials(self) -> None:
        if not self.endpoint:
            raise ClientConfigurationError("Backend API endpoint must be provided (BACKEND_API)")

    @property
    def generate_url(self) -> str:
        return f"{self.endpoint.rstrip('/')}{self.GENERATE_PATH}"

    def _build_payload(self, prompt: str, images: Sequence[ImagePart]) -> dict:
        return {
            "prompt": prompt,
            "images": [
                {
                    "type": "image",
                    "source": {"bytes": base64.b64encode(image.data).decode("ascii")},
                }
                for image in images
            ],
            "model": self.model_name,
            "maxTokens": self.max_tokens,
            "temperature": self.temperature,
        }

    async def _generate_text(self, prompt: str, images: Sequence[ImagePart]) -> str:
        headers = {"Content-Type": "application/json"}
        if self.api_key:
            headers["Authorization"] = f"Bearer {self.api_key}"

        try:
            async with get_managed_client(self._client, self.timeout) as client:
                response = await post_json(
                    client,
                    self.generate_url,
                    self._build_payload(prompt, images),
                    headers=headers,
                    timeout=self.timeout,
                    policy=RetryPolicy.from_settings(self.max_attempts)
                )
        except httpx.HTTPError as e:
            raise GenerationError(f"Backend API unreachable: {e}") from e

        if response.status_code != 200:
            raise GenerationError(
                f"Backend API error {response.status_code}: {response.text[:500]}"
            )

        try:
            data = response.json()
        except ValueError as e:
            raise GenerationError(f"Backend API returned invalid JSON: {e}") from e

        if not isinstance(data, dict):
            raise GenerationError("Backend API returned an unexpected payload")
        return data.get("content") or data.get("text") or ""

    async def health_check(self) -> bool:
        try:
            async with get_managed_client(self._client, 10.0) as client:
                response = await client.get(self.endpoint)
            return response.status_code < 500
        except Exception as e:
            logger.warning(f"Backend health check failed: {e}")
            return False
