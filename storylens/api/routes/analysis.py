"""
Story analysis and export API endpoints.

Analysis is idempotent and side-effect free: clients call it again after
every manual edit.
"""
import logging

from fastapi import APIRouter, Depends

from storylens.core.constants import DEFAULT_TITLE
from storylens.core.error_handling import handle_service_errors
from storylens.models.api_models import AnalysisResponse, AnalyzeRequest, ExportRequest
from storylens.models.story_models import Document
from storylens.services.analysis import StoryAnalysisService
from storylens.services.response_builder import ResponseBuilder
from storylens.services.story_service import get_analysis_service

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/api")


@router.post("/analyze", response_model=AnalysisResponse)
@handle_service_errors("Failed to analyze story")
async def analyze_story(
    request: AnalyzeRequest,
    service: StoryAnalysisService = Depends(get_analysis_service)
):
    """
    Analyze raw generated text or an edited list of paragraphs.

    Length and keyword checks that fail are reported in the payload,
    never as errors.
    """
    if request.paragraphs is not None:
        document = Document.from_contents(
            (request.title or "").strip() or DEFAULT_TITLE,
            request.paragraphs
        )
    else:
        document = service.segment(request.story)

    report = await service.analyze_document(document, request.keyword.strip())
    return AnalysisResponse.from_report(report)


@router.post("/export")
@handle_service_errors("Failed to export story")
async def export_story(request: ExportRequest):
    """Download the title and paragraphs as a dated UTF-8 text file."""
    document = Document.from_contents(request.title.strip() or DEFAULT_TITLE, request.paragraphs)
    return ResponseBuilder().build_text_download(document)
