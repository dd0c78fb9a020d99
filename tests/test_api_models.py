"""
Unit tests for API request/response models.
"""
import unittest

from pydantic import ValidationError

from storylens.models.api_models import (
    AnalysisResponse,
    AnalyzeRequest,
    DocumentModel,
    GenerateStoryRequest,
    ImagePayload,
)
from storylens.models.story_models import (
    BodyCheck,
    Document,
    KeywordOccurrence,
    KeywordReport,
    LengthReport,
    NearDuplicate,
    ParagraphStats,
    SectionCheck,
    SimilarityReport,
    SimilarityResult,
    StoryAnalysisReport,
)


class TestRequestModels(unittest.TestCase):

    def test_generate_request(self):
        request = GenerateStoryRequest(
            images=[{"data": "aGVsbG8=", "mime_type": "image/png"}],
            keyword="호치민"
        )
        self.assertEqual(request.images[0].mime_type, "image/png")

    def test_image_payload_requires_data(self):
        with self.assertRaises(ValidationError):
            ImagePayload(data="   ")

    def test_generate_request_requires_keyword_field(self):
        with self.assertRaises(ValidationError):
            GenerateStoryRequest(images=[])

    def test_analyze_request_needs_story_or_paragraphs(self):
        with self.assertRaises(ValidationError):
            AnalyzeRequest(keyword="호치민")

        self.assertEqual(AnalyzeRequest(story="본문").keyword, "")
        self.assertEqual(AnalyzeRequest(paragraphs=["하나"]).paragraphs, ["하나"])


class TestAnalysisResponse(unittest.TestCase):

    def _report(self) -> StoryAnalysisReport:
        document = Document.from_contents("제목", ["호치민에서 시작했어요.", "끝"])
        return StoryAnalysisReport(
            document=document,
            length=LengthReport(
                introduction=SectionCheck(chars=11, required=250, passed=False),
                body=BodyCheck(avg_chars=0, min_chars=0, required=150, passed=False),
                conclusion=SectionCheck(chars=1, required=250, passed=False),
                total=SectionCheck(chars=12, required=2900, passed=False),
                paragraph_stats=[
                    ParagraphStats(number=1, chars=12, chars_without_spaces=11),
                    ParagraphStats(number=2, chars=1, chars_without_spaces=1),
                ],
                total_chars=15,
                total_chars_without_spaces=12,
                paragraph_count=2
            ),
            keywords=KeywordReport(
                keyword="호치민",
                occurrences=[
                    KeywordOccurrence(
                        sequence=1, marker="①", paragraph=1,
                        context="호치민에서 시작했어요.", is_natural=True, keyword="호치민"
                    )
                ]
            ),
            similarity=SimilarityReport(
                results=[SimilarityResult(sentence="호치민에서 시작했어요", similarity=0, is_warning=False)],
                near_duplicates=[NearDuplicate(first=0, second=1, ratio=0.9)]
            ),
            expected_paragraph_count=16
        )

    def test_from_report(self):
        response = AnalysisResponse.from_report(self._report())

        self.assertEqual(response.document.title, "제목")
        self.assertEqual([p.number for p in response.document.paragraphs], [1, 2])
        self.assertEqual(response.length.introduction.required, 250)
        self.assertEqual(response.length.average_chars_per_paragraph, 6)
        self.assertFalse(response.length.all_passed)
        self.assertEqual(response.keywords.occurrences[0].marked_keyword, "①호치민")
        self.assertEqual(response.keywords.natural_percentage, 100)
        self.assertEqual(response.keywords.verdict, "excellent")
        self.assertFalse(response.similarity.has_warnings)
        self.assertEqual(response.similarity.near_duplicates[0].ratio, 0.9)
        self.assertFalse(response.paragraph_count_matches)

    def test_serializes_to_json(self):
        data = AnalysisResponse.from_report(self._report()).model_dump(mode="json")
        self.assertEqual(data["keywords"]["occurrences"][0]["marker"], "①")
        self.assertIsNone(data["similarity"]["results"][0]["error"])

    def test_document_model(self):
        model = DocumentModel.from_document(Document.from_contents("T", [" a ", "", "b"]))
        self.assertEqual([p.content for p in model.paragraphs], ["a", "b"])


if __name__ == '__main__':
    unittest.main()
