"""
Shared constants for story generation and validation.

This module consolidates the fixed thresholds and markers used by the
analysis pipeline so the analyzers never depend on runtime settings.
"""

# Title parsing
TITLE_MARKER = "제목:"
DEFAULT_TITLE = "호치민 출장의 완벽한 밸런스: 노보텔 사이공 센터에서의 기록"
TITLE_MAX_LENGTH = 100  # First lines at or above this length are body text

# Document structure
EXPECTED_PARAGRAPH_COUNT = 16
PARAGRAPH_SEPARATOR = "\n\n"
NEW_PARAGRAPH_PLACEHOLDER = "새로운 문단을 입력하세요."

# Length thresholds (characters, whitespace removed)
INTRODUCTION_MIN_CHARS = 250
BODY_PARAGRAPH_MIN_CHARS = 150
CONCLUSION_MIN_CHARS = 250
TOTAL_MIN_CHARS = 2900

# Keyword placement
KEYWORD_MARKERS = ("①", "②", "③", "④", "⑤")
EXTENDED_KEYWORD_MARKERS = ("①", "②", "③", "④", "⑤", "⑥")
KEYWORD_CONTEXT_CHARS = 30

# Similarity
SIMILARITY_WARNING_THRESHOLD = 30
MAX_KEYWORD_SENTENCES = 5
MIN_SIMILARITY_SENTENCE_LENGTH = 20
NEAR_DUPLICATE_RATIO = 0.8

# Export
EXPORT_FILENAME_PREFIX = "호치민출장후기"
