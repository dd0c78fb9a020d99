"""
Story generation API endpoints.

Supports both base64/data-URL JSON requests and multipart file uploads.
"""
import logging
from typing import List

from fastapi import APIRouter, Depends, File, Form, UploadFile

from storylens.core.error_handling import handle_service_errors
from storylens.models.api_models import AnalysisResponse, GenerateStoryRequest, GenerateStoryResponse
from storylens.services.story_service import StoryGenerationService, get_story_service

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/api")


def story_service_dependency() -> StoryGenerationService:
    """Generation service whose client is built on first use.

    A misconfigured provider surfaces as ClientConfigurationError (500) only
    after the request itself has been validated.
    """
    return get_story_service()


@router.post("/generate-story", response_model=GenerateStoryResponse)
@handle_service_errors("후기 생성 중 오류가 발생했습니다")
async def generate_story(
    request: GenerateStoryRequest,
    service: StoryGenerationService = Depends(story_service_dependency)
):
    """
    Generate a review from base64-encoded photographs and a keyword.

    Returns the raw story together with its segmentation and validation
    report so the client can render it without a second round trip.
    """
    logger.info(f"Generating story: {len(request.images)} images, keyword='{request.keyword}'")
    story, report = await service.from_payloads(request.images, request.keyword)
    return GenerateStoryResponse(success=True, story=story, analysis=AnalysisResponse.from_report(report))


@router.post("/generate-story/upload", response_model=GenerateStoryResponse)
@handle_service_errors("후기 생성 중 오류가 발생했습니다")
async def generate_story_upload(
    files: List[UploadFile] = File(...),
    keyword: str = Form(...),
    service: StoryGenerationService = Depends(story_service_dependency)
):
    """Generate a review from multipart image uploads and a keyword."""
    logger.info(f"Generating story from upload: {len(files)} files, keyword='{keyword}'")
    story, report = await service.from_uploads(files, keyword)
    return GenerateStoryResponse(success=True, story=story, analysis=AnalysisResponse.from_report(report))
