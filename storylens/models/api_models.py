"""
Pydantic models for API request and response structures.
"""
from pydantic import BaseModel, Field, field_validator, model_validator
from typing import List, Optional

from storylens.models.story_models import Document, StoryAnalysisReport


class ImagePayload(BaseModel):
    """Single image sent as base64 or a data URL."""

    data: str = Field(..., description="Base64 image bytes or a data:image/...;base64, URL")
    mime_type: Optional[str] = Field(
        default=None,
        description="MIME type (e.g. image/jpeg). Taken from the data URL when omitted."
    )

    @field_validator('data')
    @classmethod
    def validate_data(cls, v: str) -> str:
        if not v or not v.strip():
            raise ValueError("data cannot be empty")
        return v


class GenerateStoryRequest(BaseModel):
    """Request model for story generation."""

    images: List[ImagePayload] = Field(..., description="Photographs in story order")
    keyword: str = Field(..., description="Keyword to place in the review")

    model_config = {
        "json_schema_extra": {
            "example": {
                "images": [{"data": "data:image/jpeg;base64,/9j/4AAQSkZJRgABAQ...", "mime_type": "image/jpeg"}],
                "keyword": "호치민 출장"
            }
        }
    }


class ParagraphModel(BaseModel):
    number: int
    content: str


class DocumentModel(BaseModel):
    """Segmented story."""

    title: str
    paragraphs: List[ParagraphModel]

    @classmethod
    def from_document(cls, document: Document) -> "DocumentModel":
        return cls(
            title=document.title,
            paragraphs=[ParagraphModel(number=p.number, content=p.content) for p in document.paragraphs]
        )


class AnalyzeRequest(BaseModel):
    """Request model for (re-)analysis.

    Either `story` (raw generated text) or `paragraphs` (edited paragraphs,
    optionally with `title`) must be provided.
    """

    keyword: str = Field(default="", description="Keyword to look for")
    story: Optional[str] = Field(default=None, description="Raw generated text")
    title: Optional[str] = Field(default=None, description="Edited title")
    paragraphs: Optional[List[str]] = Field(default=None, description="Edited paragraphs in order")

    @model_validator(mode="after")
    def require_source(self) -> "AnalyzeRequest":
        if self.story is None and self.paragraphs is None:
            raise ValueError("Either story or paragraphs must be provided")
        return self


class ExportRequest(BaseModel):
    """Request model for plain text export."""

    title: str = Field(..., description="Story title")
    paragraphs: List[str] = Field(..., description="Paragraphs in order")


class SectionCheckModel(BaseModel):
    chars: int
    required: int
    passed: bool


class BodyCheckModel(BaseModel):
    avg_chars: int
    min_chars: int
    required: int
    passed: bool


class ParagraphStatsModel(BaseModel):
    number: int
    chars: int
    chars_without_spaces: int


class LengthReportModel(BaseModel):
    introduction: SectionCheckModel
    body: BodyCheckModel
    conclusion: SectionCheckModel
    total: SectionCheckModel
    paragraph_stats: List[ParagraphStatsModel]
    total_chars: int
    total_chars_without_spaces: int
    paragraph_count: int
    average_chars_per_paragraph: int
    all_passed: bool


class KeywordOccurrenceModel(BaseModel):
    sequence: int
    marker: str
    marked_keyword: str
    paragraph: int
    context: str
    is_natural: bool


class KeywordReportModel(BaseModel):
    keyword: str
    occurrences: List[KeywordOccurrenceModel]
    total_count: int
    natural_count: int
    natural_percentage: int
    verdict: str


class SimilarityResultModel(BaseModel):
    sentence: str
    similarity: float
    is_warning: bool
    error: Optional[str] = None


class NearDuplicateModel(BaseModel):
    first: int
    second: int
    ratio: float


class SimilarityReportModel(BaseModel):
    results: List[SimilarityResultModel]
    near_duplicates: List[NearDuplicateModel]
    has_warnings: bool
    degraded: bool


class AnalysisResponse(BaseModel):
    """Response model for story analysis."""

    document: DocumentModel
    length: LengthReportModel
    keywords: KeywordReportModel
    similarity: SimilarityReportModel
    expected_paragraph_count: int
    paragraph_count_matches: bool

    @classmethod
    def from_report(cls, report: StoryAnalysisReport) -> "AnalysisResponse":
        length = report.length
        keywords = report.keywords
        similarity = report.similarity
        return cls(
            document=DocumentModel.from_document(report.document),
            length=LengthReportModel(
                introduction=SectionCheckModel(**vars(length.introduction)),
                body=BodyCheckModel(**vars(length.body)),
                conclusion=SectionCheckModel(**vars(length.conclusion)),
                total=SectionCheckModel(**vars(length.total)),
                paragraph_stats=[ParagraphStatsModel(**vars(s)) for s in length.paragraph_stats],
                total_chars=length.total_chars,
                total_chars_without_spaces=length.total_chars_without_spaces,
                paragraph_count=length.paragraph_count,
                average_chars_per_paragraph=length.average_chars_per_paragraph,
                all_passed=length.all_passed
            ),
            keywords=KeywordReportModel(
                keyword=keywords.keyword,
                occurrences=[
                    KeywordOccurrenceModel(
                        sequence=o.sequence,
                        marker=o.marker,
                        marked_keyword=o.marked_keyword,
                        paragraph=o.paragraph,
                        context=o.context,
                        is_natural=o.is_natural
                    )
                    for o in keywords.occurrences
                ],
                total_count=keywords.total_count,
                natural_count=keywords.natural_count,
                natural_percentage=keywords.natural_percentage,
                verdict=keywords.verdict
            ),
            similarity=SimilarityReportModel(
                results=[SimilarityResultModel(**vars(r)) for r in similarity.results],
                near_duplicates=[NearDuplicateModel(**vars(d)) for d in similarity.near_duplicates],
                has_warnings=similarity.has_warnings,
                degraded=similarity.degraded
            ),
            expected_paragraph_count=report.expected_paragraph_count,
            paragraph_count_matches=report.paragraph_count_matches
        )


class GenerateStoryResponse(BaseModel):
    """Response model for story generation."""

    success: bool = True
    story: str = Field(..., description="Raw generated text")
    analysis: AnalysisResponse
