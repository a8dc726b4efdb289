import unittest

from stylecheck import heuristics
from stylecheck.style_guide import COVER_PAGE_KEYWORDS, SCRIPTURE_BOOKS

from model_builders import make_paragraph


class CoverPageHeuristicTests(unittest.TestCase):
    def _is_cover(self, index: int, text: str) -> bool:
        return heuristics.is_cover_page_paragraph(
            make_paragraph(index, text), COVER_PAGE_KEYWORDS, 30, 100
        )

    def test_keyword_anywhere(self) -> None:
        self.assertTrue(self._is_cover(200, "Submitted to Dr. Mathew " + "x" * 200))

    def test_short_early_paragraph(self) -> None:
        self.assertTrue(self._is_cover(30, "An Essay Title"))

    def test_short_late_paragraph(self) -> None:
        self.assertFalse(self._is_cover(31, "An Essay Title"))

    def test_long_early_paragraph(self) -> None:
        self.assertFalse(self._is_cover(2, "word " * 40))


class BibliographyHeuristicTests(unittest.TestCase):
    def test_heading(self) -> None:
        self.assertTrue(heuristics.is_bibliography_heading("Bibliography"))
        self.assertTrue(heuristics.is_bibliography_heading("  REFERENCES"))
        self.assertTrue(heuristics.is_bibliography_heading("Works Cited"))
        self.assertFalse(heuristics.is_bibliography_heading("See the bibliography"))

    def test_entry(self) -> None:
        self.assertTrue(heuristics.is_bibliography_entry("Adams, John. Grace. London: SCM, 2019."))
        self.assertFalse(heuristics.is_bibliography_entry("adams, john. Grace. 2019."))
        self.assertFalse(heuristics.is_bibliography_entry("Adams, John. Grace. London: SCM."))
        self.assertFalse(heuristics.is_bibliography_entry("ADAMS 2019"))

    def test_sort_key(self) -> None:
        self.assertEqual(heuristics.bibliography_sort_key("Brown, K. (2020)"), "brown")
        self.assertEqual(heuristics.bibliography_sort_key("Wright N. T. 2003"), "wright")

    def test_presence(self) -> None:
        self.assertTrue(heuristics.has_bibliography("...\n\nReferences\n\n..."))
        self.assertFalse(heuristics.has_bibliography("No sources listed"))
        self.assertTrue(heuristics.has_table_of_contents("TABLE OF CONTENTS"))
        self.assertFalse(heuristics.has_table_of_contents("contents of the table"))


class CitationHeuristicTests(unittest.TestCase):
    def test_citation_marker_after_quote(self) -> None:
        text = 'As Barth said, "God is God"12 and so on.'
        start = text.index('"')
        self.assertTrue(heuristics.has_citation_marker(text, start, start + 12))

    def test_citation_marker_missing(self) -> None:
        text = 'As Barth said, "God is God" and so on.'
        start = text.index('"')
        self.assertFalse(heuristics.has_citation_marker(text, start, start + 12))

    def test_citation_marker_outside_window(self) -> None:
        text = '"God is God"' + " " * 60 + '"x" 3'
        self.assertFalse(heuristics.has_citation_marker(text, 0, 12))

    def test_page_range_suffix(self) -> None:
        self.assertTrue(heuristics.has_page_range_suffix("Barth, Dogmatics, p. 45ff."))
        self.assertTrue(heuristics.has_page_range_suffix("Barth, Dogmatics, p. 45 f."))
        self.assertTrue(heuristics.has_page_range_suffix("Barth, Dogmatics, pp. 45ff."))
        self.assertFalse(heuristics.has_page_range_suffix("Barth, Dogmatics, 45-47."))
        self.assertFalse(heuristics.has_page_range_suffix("p. 45 for example"))

    def test_informal_web_source(self) -> None:
        pattern = r"blog|wordpress|medium|personal"
        access = r"accessed"
        self.assertTrue(
            heuristics.is_undated_informal_web_source(
                "Smith, My Blog, https://smith.wordpress.com/post", pattern, access
            )
        )
        self.assertFalse(
            heuristics.is_undated_informal_web_source(
                "Smith, My Blog, accessed May 2, 2021, https://smith.wordpress.com/post",
                pattern,
                access,
            )
        )
        self.assertFalse(
            heuristics.is_undated_informal_web_source(
                "Journal article, https://doi.org/10.1000/1", pattern, access
            )
        )
        self.assertFalse(heuristics.is_undated_informal_web_source("A personal letter", pattern, access))

    def test_scripture_footnote(self) -> None:
        pattern = heuristics.build_scripture_footnote_pattern(SCRIPTURE_BOOKS)
        self.assertTrue(heuristics.has_scripture_footnote("as in John 3:16 4 we read", pattern))
        self.assertTrue(heuristics.has_scripture_footnote("(Rom. 8:28).5", pattern))
        self.assertTrue(heuristics.has_scripture_footnote("see Ps 23:1-3 2", pattern))
        self.assertFalse(heuristics.has_scripture_footnote("as in John 3:16 we read", pattern))
        self.assertFalse(heuristics.has_scripture_footnote("John 3:16", pattern))
        self.assertFalse(heuristics.has_scripture_footnote("Paper 3:16 4", pattern))
        self.assertFalse(heuristics.has_scripture_footnote("John 3:16 2019 edition", pattern))


class QuotationHeuristicTests(unittest.TestCase):
    def test_spaced_footnote_marker(self) -> None:
        self.assertTrue(heuristics.has_spaced_footnote_marker('"the end" 4'))
        self.assertFalse(heuristics.has_spaced_footnote_marker('"the end"4'))

    def test_punctuation_inside_quotes(self) -> None:
        self.assertTrue(heuristics.has_punctuation_inside_quotes('He said "stop."'))
        self.assertTrue(heuristics.has_punctuation_inside_quotes('"Wait," she said'))
        self.assertFalse(heuristics.has_punctuation_inside_quotes('He said "stop".'))

    def test_punctuation_inside_quotes_is_comma_or_period_only(self) -> None:
        self.assertTrue(heuristics.has_punctuation_inside_quotes("He said “stop.”"))
        self.assertFalse(heuristics.has_punctuation_inside_quotes('"Stop!" he said'))
        self.assertFalse(heuristics.has_punctuation_inside_quotes('Who said "stop?"'))
        self.assertFalse(heuristics.has_punctuation_inside_quotes('He said "stop" loudly'))

    def test_single_quote_marks(self) -> None:
        self.assertTrue(heuristics.uses_single_quote_marks("he called it 'grace' plainly"))
        self.assertTrue(heuristics.uses_single_quote_marks("‘grace’"))
        self.assertFalse(heuristics.uses_single_quote_marks("don't stop Paul's letter"))
        self.assertFalse(heuristics.uses_single_quote_marks('a "double" with \'single\''))


class HeadingHeuristicTests(unittest.TestCase):
    def test_level_one_format(self) -> None:
        self.assertTrue(heuristics.is_level_one_heading_format("1. INTRODUCTION"))
        self.assertFalse(heuristics.is_level_one_heading_format("Introduction"))
        self.assertFalse(heuristics.is_level_one_heading_format("1. Introduction"))

    def test_all_caps(self) -> None:
        self.assertTrue(heuristics.is_all_caps("1. INTRODUCTION"))
        self.assertFalse(heuristics.is_all_caps("Introduction"))

    def test_numbering(self) -> None:
        self.assertTrue(heuristics.matches_heading_numbering("1.1 Background", 2))
        self.assertFalse(heuristics.matches_heading_numbering("Background", 2))
        self.assertTrue(heuristics.matches_heading_numbering("1.1.1 Detail", 3))
        self.assertFalse(heuristics.matches_heading_numbering("1.1 Detail", 3))
        self.assertTrue(heuristics.matches_heading_numbering("1.1.1.1 Point", 4))
        self.assertTrue(heuristics.matches_heading_numbering("anything", 5))

    def test_dissertation_chapter_format(self) -> None:
        self.assertTrue(heuristics.is_dissertation_chapter_format("1. CHAPTER ONE THE CALL"))
        self.assertTrue(heuristics.is_dissertation_chapter_format("2. THE CALL"))
        self.assertFalse(heuristics.is_dissertation_chapter_format("Chapter One"))

    def test_chapter_keywords(self) -> None:
        self.assertTrue(heuristics.is_chapter_heading("1. INTRODUCTION"))
        self.assertTrue(heuristics.is_chapter_heading("Chapter 2"))
        self.assertFalse(heuristics.is_chapter_heading("1. METHOD"))

    def test_keyword_offset(self) -> None:
        self.assertEqual(heuristics.keyword_offset("An Introduction", "introduction"), 3)
        self.assertEqual(heuristics.keyword_offset("nothing", "appendix"), -1)


if __name__ == "__main__":
    unittest.main()
