"""
Data models for story generation and analysis.
"""
from .story_models import (
    Document,
    ImagePart,
    KeywordOccurrence,
    KeywordReport,
    LengthReport,
    Paragraph,
    SimilarityReport,
    SimilarityResult,
    StoryAnalysisReport,
)

__all__ = [
    'Document',
    'ImagePart',
    'KeywordOccurrence',
    'KeywordReport',
    'LengthReport',
    'Paragraph',
    'SimilarityReport',
    'SimilarityResult',
    'StoryAnalysisReport',
]
