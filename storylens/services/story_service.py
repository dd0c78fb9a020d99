"""
Story generation orchestration.

Validates the request, relays it to the configured generation client and
runs the analysis pipeline over the returned text.
"""
import logging
from typing import Callable, List, Optional, Sequence

from fastapi import UploadFile

from storylens.core.config import Settings, settings as default_settings
from storylens.core.error_handling import InputValidationError
from storylens.models.api_models import ImagePayload
from storylens.models.story_models import ImagePart, StoryAnalysisReport
from storylens.services.analysis import StoryAnalysisService
from storylens.services.client_factory import ClientFactory, get_client_factory
from storylens.services.clients.base_client import BaseGenerationClient
from storylens.services.image_input_handler import ImageInputHandler

logger = logging.getLogger(__name__)


class StoryGenerationService:
    """Turns photographs and a keyword into an analyzed story."""

    def __init__(
        self,
        generation_client: Optional[BaseGenerationClient] = None,
        analysis_service: Optional[StoryAnalysisService] = None,
        input_handler: Optional[ImageInputHandler] = None,
        client_provider: Optional[Callable[[], BaseGenerationClient]] = None
    ):
        """
        Initialize story generation service.

        Args:
            generation_client: Ready generation client
            analysis_service: Analysis pipeline (default instance if not provided)
            input_handler: Image validator (settings-based if not provided)
            client_provider: Builds the client on first use when none is given,
                so request validation runs before any configuration lookup
        """
        if generation_client is None and client_provider is None:
            raise ValueError("Either generation_client or client_provider is required")
        self._generation_client = generation_client
        self._client_provider = client_provider
        self.analysis_service = analysis_service or StoryAnalysisService()
        self.input_handler = input_handler or build_input_handler()

    @property
    def generation_client(self) -> BaseGenerationClient:
        """
        Raises:
            ClientConfigurationError: If the provider cannot build a client
        """
        if self._generation_client is None:
            self._generation_client = self._client_provider()
        return self._generation_client

    def _clean_keyword(self, keyword: str) -> str:
        keyword = (keyword or "").strip()
        if not keyword:
            raise InputValidationError("키워드가 필요합니다.")
        return keyword

    async def generate_story(self, images: Sequence[ImagePart], keyword: str) -> str:
        """
        Generate raw story text.

        Raises:
            InputValidationError: Empty keyword (checked before any upstream call)
            GenerationError: Upstream failure, timeout or empty text
        """
        keyword = self._clean_keyword(keyword)
        return await self.generation_client.generate(images, keyword)

    async def generate_and_analyze(
        self,
        images: Sequence[ImagePart],
        keyword: str
    ) -> tuple[str, StoryAnalysisReport]:
        keyword = self._clean_keyword(keyword)
        story = await self.generate_story(images, keyword)
        report = await self.analysis_service.analyze_text(story, keyword)
        return story, report

    async def from_payloads(
        self,
        payloads: Sequence[ImagePayload],
        keyword: str
    ) -> tuple[str, StoryAnalysisReport]:
        """Validate JSON image payloads, then generate and analyze."""
        keyword = self._clean_keyword(keyword)
        images: List[ImagePart] = self.input_handler.decode_payloads(payloads)
        return await self.generate_and_analyze(images, keyword)

    async def from_uploads(
        self,
        files: Sequence[UploadFile],
        keyword: str
    ) -> tuple[str, StoryAnalysisReport]:
        """Validate multipart uploads, then generate and analyze."""
        keyword = self._clean_keyword(keyword)
        images = await self.input_handler.read_uploads(files)
        return await self.generate_and_analyze(images, keyword)


def build_analysis_service(factory: ClientFactory) -> StoryAnalysisService:
    return StoryAnalysisService(similarity_checker=factory.similarity_checker)


def build_input_handler(config: Settings = default_settings) -> ImageInputHandler:
    return ImageInputHandler(
        required_count=config.REQUIRED_IMAGE_COUNT,
        max_image_mb=config.MAX_IMAGE_MB,
        max_total_mb=config.MAX_UPLOAD_MB
    )


def get_story_service() -> StoryGenerationService:
    """Build the generation service from the process-wide client factory."""
    factory = get_client_factory()
    return StoryGenerationService(
        client_provider=lambda: factory.generation_client,
        analysis_service=build_analysis_service(factory),
        input_handler=build_input_handler(factory.config)
    )


def get_analysis_service() -> StoryAnalysisService:
    return build_analysis_service(get_client_factory())
