"""
Unit tests for keyword placement analysis and naturalness heuristics.
"""
import unittest

from storylens.core.constants import EXTENDED_KEYWORD_MARKERS
from storylens.models.story_models import Document
from storylens.services.analysis.keyword_analyzer import (
    KeywordAnalyzer,
    analyze_keywords,
    count_occurrences,
    extract_context,
    find_occurrences,
)
from storylens.services.analysis.naturalness import HeuristicNaturalnessChecker, NaturalnessChecker


KEYWORD = "호치민"


class AlwaysNatural(NaturalnessChecker):
    def is_natural(self, paragraph: str, keyword: str) -> bool:
        return True


class MarkedNatural(NaturalnessChecker):
    def is_natural(self, paragraph: str, keyword: str) -> bool:
        return paragraph.startswith("좋은")


class TestOccurrenceSearch(unittest.TestCase):

    def test_find_non_overlapping(self):
        self.assertEqual(find_occurrences("aaaa", "aa"), [0, 2])

    def test_case_sensitive(self):
        self.assertEqual(count_occurrences("Saigon saigon SAIGON", "saigon"), 1)

    def test_empty_keyword(self):
        self.assertEqual(find_occurrences("아무 텍스트", ""), [])

    def test_context_window_clipped_and_trimmed(self):
        text = "A" * 50 + KEYWORD + "B" * 50
        context = extract_context(text, 50, len(KEYWORD))
        self.assertEqual(context, "A" * 30 + KEYWORD + "B" * 30)

        short = f"  {KEYWORD}에서  "
        self.assertEqual(extract_context(short, 2, len(KEYWORD)), f"{KEYWORD}에서")


class TestKeywordAnalyzer(unittest.TestCase):

    def test_five_occurrences_in_distinct_paragraphs(self):
        contents = [f"{i}번째 날 {KEYWORD}에서 시간을 보냈어요." for i in range(1, 6)]
        contents.insert(2, "키워드가 없는 문단이에요.")
        doc = Document.from_contents("제목", contents)

        report = analyze_keywords(doc, KEYWORD)

        self.assertEqual(report.total_count, 5)
        self.assertEqual([o.sequence for o in report.occurrences], [1, 2, 3, 4, 5])
        self.assertEqual([o.marker for o in report.occurrences], ["①", "②", "③", "④", "⑤"])
        self.assertEqual([o.paragraph for o in report.occurrences], [1, 2, 4, 5, 6])
        self.assertEqual(report.occurrences[0].marked_keyword, f"①{KEYWORD}")

    def test_markers_capped_at_fifth(self):
        doc = Document.from_contents("제목", [f"{KEYWORD} " * 6])
        report = analyze_keywords(doc, KEYWORD)

        self.assertEqual(report.total_count, 6)
        self.assertEqual(report.occurrences[5].sequence, 5)
        self.assertEqual(report.occurrences[5].marker, "⑤")

    def test_six_marker_set(self):
        analyzer = KeywordAnalyzer(markers=EXTENDED_KEYWORD_MARKERS)
        doc = Document.from_contents("제목", [f"{KEYWORD} " * 7])
        report = analyzer.analyze(doc, KEYWORD)

        self.assertEqual(report.occurrences[5].marker, "⑥")
        self.assertEqual(report.occurrences[6].marker, "⑥")

    def test_multiple_matches_in_one_paragraph_keep_order(self):
        doc = Document.from_contents("제목", [f"{KEYWORD}와 {KEYWORD}", f"끝 {KEYWORD}"])
        report = analyze_keywords(doc, KEYWORD)
        self.assertEqual([(o.sequence, o.paragraph) for o in report.occurrences], [(1, 1), (2, 1), (3, 2)])

    def test_no_keyword_found(self):
        doc = Document.from_contents("제목", ["아무것도 없어요."])
        report = analyze_keywords(doc, KEYWORD)
        self.assertEqual(report.total_count, 0)
        self.assertEqual(report.natural_percentage, 0)
        self.assertEqual(report.verdict, "needs_work")

    def test_empty_keyword_returns_empty_report(self):
        doc = Document.from_contents("제목", ["내용"])
        report = analyze_keywords(doc, "")
        self.assertEqual(report.occurrences, [])

    def test_regex_characters_in_keyword(self):
        keyword = "C++(호텔)"
        doc = Document.from_contents("제목", [f"이번엔 {keyword}에서 묵었어요."])
        report = analyze_keywords(doc, keyword)
        self.assertEqual(report.total_count, 1)
        self.assertTrue(report.occurrences[0].is_natural)

    def test_natural_percentage_and_verdict(self):
        doc = Document.from_contents("제목", [
            f"그날 {KEYWORD}에서 시간을 보냈어요.",
            f"도시를 걸었죠 {KEYWORD} ok",
            f"밤에는 {KEYWORD}의 야경을 즐겼습니다.",
        ])
        report = analyze_keywords(doc, KEYWORD)

        self.assertEqual(report.total_count, 3)
        self.assertEqual(report.natural_count, 2)
        self.assertEqual(report.natural_percentage, 67)
        self.assertEqual(report.verdict, "fair")

    def test_custom_checker(self):
        analyzer = KeywordAnalyzer(checker=AlwaysNatural())
        doc = Document.from_contents("제목", [f"{KEYWORD} !!"])
        report = analyzer.analyze(doc, KEYWORD)
        self.assertEqual(report.natural_percentage, 100)
        self.assertEqual(report.verdict, "excellent")

    def test_natural_percentage_rounds_half_up(self):
        analyzer = KeywordAnalyzer(checker=MarkedNatural())
        contents = [f"좋은 {KEYWORD}" for _ in range(5)] + [f"그냥 {KEYWORD}" for _ in range(3)]
        report = analyzer.analyze(Document.from_contents("제목", contents), KEYWORD)

        self.assertEqual(report.natural_count, 5)
        self.assertEqual(report.total_count, 8)
        self.assertEqual(report.natural_percentage, 63)

    def test_blank_keyword_returns_empty_report(self):
        doc = Document.from_contents("제목", ["공백 이 많은 문단 이에요"])
        report = analyze_keywords(doc, "  ")
        self.assertEqual(report.total_count, 0)
        self.assertEqual(report.keyword, "")

    def test_empty_marker_set_rejected(self):
        with self.assertRaises(ValueError):
            KeywordAnalyzer(markers=())

    def test_analysis_is_idempotent(self):
        doc = Document.from_contents("제목", [f"{KEYWORD}에서 시간을 보냈어요."])
        self.assertEqual(analyze_keywords(doc, KEYWORD), analyze_keywords(doc, KEYWORD))


class TestHeuristicNaturalness(unittest.TestCase):

    def setUp(self):
        self.checker = HeuristicNaturalnessChecker()

    def test_natural_placement(self):
        self.assertTrue(self.checker.is_natural(f"{KEYWORD}에서 보낸 시간이 좋았어요.", KEYWORD))

    def test_missing_final_ending(self):
        self.assertFalse(self.checker.is_natural(f"{KEYWORD}에서 시간을 보냄 ok", KEYWORD))

    def test_missing_particle(self):
        self.assertFalse(self.checker.is_natural(f"{KEYWORD}다", KEYWORD))

    def test_isolated_keyword(self):
        paragraph = f"시간을 보낸 도시는 {KEYWORD} 그 자체였어요."
        self.assertTrue(self.checker.has_final_ending(paragraph))
        self.assertTrue(self.checker.has_particle(paragraph))
        self.assertFalse(self.checker.is_natural(paragraph, KEYWORD))

    def test_attached_on_left_only(self):
        self.assertTrue(self.checker.is_attached("그곳은 베트남호치민 였죠", KEYWORD))

    def test_empty_keyword_is_not_attached(self):
        self.assertFalse(self.checker.is_attached("아무 문장이에요", ""))


if __name__ == '__main__':
    unittest.main()
