"""
Analysis package for generated story validation.

- text_segmenter.py: title/paragraph segmentation
- length_analyzer.py: character statistics and length thresholds
- keyword_analyzer.py: keyword placement, markers and context
- naturalness.py: pluggable keyword naturalness checkers
- similarity_checker.py: keyword sentence similarity and diversity
- document_editor.py: pure manual-edit operations
- analysis_orchestrator.py: StoryAnalysisService orchestration
"""
from .analysis_orchestrator import StoryAnalysisService
from .keyword_analyzer import KeywordAnalyzer, analyze_keywords, count_occurrences
from .length_analyzer import LengthAnalyzer, analyze_length
from .naturalness import HeuristicNaturalnessChecker, NaturalnessChecker
from .similarity_checker import (
    HttpSimilarityScorer,
    NullSimilarityScorer,
    SimilarityChecker,
    SimilarityScorer,
    extract_keyword_sentences,
    find_near_duplicates,
    has_warnings,
)
from .text_segmenter import TextSegmenter, segment

__all__ = [
    'StoryAnalysisService',
    'KeywordAnalyzer',
    'analyze_keywords',
    'count_occurrences',
    'LengthAnalyzer',
    'analyze_length',
    'HeuristicNaturalnessChecker',
    'NaturalnessChecker',
    'HttpSimilarityScorer',
    'NullSimilarityScorer',
    'SimilarityChecker',
    'SimilarityScorer',
    'extract_keyword_sentences',
    'find_near_duplicates',
    'has_warnings',
    'TextSegmenter',
    'segment',
]
