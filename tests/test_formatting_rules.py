import unittest

from stylecheck import formatting_rules
from stylecheck.models import Category, Margins, PageNumbering, Severity
from stylecheck.style_guide import DEFAULT_STYLE_GUIDES

from model_builders import build_model, issues_for_rule, make_footnote, make_paragraph

GUIDE = DEFAULT_STYLE_GUIDES[0]
LONG_TEXT = "This paragraph is long enough to sit outside any cover page heuristic. " * 3


def _check(model, document_type: str = "assignment"):
    return formatting_rules.check(model, document_type, GUIDE)


class DocumentFontRuleTests(unittest.TestCase):
    def test_required_font_present(self) -> None:
        self.assertEqual(issues_for_rule(_check(build_model()), "Font Style"), [])

    def test_required_font_missing(self) -> None:
        issues = issues_for_rule(_check(build_model(fonts_used=["Arial"])), "Font Style")
        self.assertEqual(len(issues), 1)
        self.assertEqual(issues[0].severity, Severity.CRITICAL)
        self.assertEqual(issues[0].category, Category.FORMATTING)
        self.assertEqual(issues[0].found, "Arial")

    def test_no_explicit_fonts_cannot_be_judged(self) -> None:
        issues = _check(build_model(fonts_used=[], font_sizes_used=[]))
        self.assertEqual(issues_for_rule(issues, "Font Style"), [])
        self.assertEqual(issues_for_rule(issues, "Font Size"), [])

    def test_font_consistency(self) -> None:
        model = build_model(fonts_used=["Times New Roman", "Arial", "Calibri"])
        issues = issues_for_rule(_check(model), "Font Consistency")
        self.assertEqual(len(issues), 1)
        self.assertEqual(issues[0].severity, Severity.MEDIUM)
        self.assertEqual(issues[0].found, "3 different fonts")
        model = build_model(fonts_used=["Times New Roman", "Symbol"])
        self.assertEqual(issues_for_rule(_check(model), "Font Consistency"), [])

    def test_required_size_within_body_range(self) -> None:
        self.assertEqual(issues_for_rule(_check(build_model(font_sizes_used=[12, 16])), "Font Size"), [])
        issues = issues_for_rule(_check(build_model(font_sizes_used=[11, 16])), "Font Size")
        self.assertEqual(len(issues), 1)
        self.assertEqual(issues[0].severity, Severity.CRITICAL)
        self.assertEqual(issues[0].found, "11pt")


class MarginRuleTests(unittest.TestCase):
    def test_tolerance_is_inclusive(self) -> None:
        model = build_model(margins=Margins(top=1.1, bottom=0.9, left=1.0, right=1.0))
        self.assertEqual(issues_for_rule(_check(model), "Page Margins"), [])

    def test_beyond_tolerance(self) -> None:
        model = build_model(margins=Margins(top=1.11, bottom=1.0, left=1.0, right=1.0))
        issues = issues_for_rule(_check(model), "Page Margins")
        self.assertEqual(len(issues), 1)
        self.assertEqual(issues[0].severity, Severity.CRITICAL)
        self.assertEqual(issues[0].message, 'Top margin must be 1" (found 1.11")')
        self.assertEqual(issues[0].fix, "Set top margin to 1 inch")

    def test_dissertation_left_margin(self) -> None:
        model = build_model(margins=Margins(top=1.0, bottom=1.0, left=1.0, right=1.0))
        issues = issues_for_rule(_check(model, "dissertation"), "Page Margins")
        self.assertEqual(len(issues), 1)
        self.assertEqual(issues[0].expected, '1.5"')
        self.assertEqual(issues[0].fix, "Set left margin to 1.5 inches")
        self.assertEqual(issues_for_rule(_check(model, "assignment"), "Page Margins"), [])

    def test_unknown_margins_are_skipped(self) -> None:
        self.assertEqual(issues_for_rule(_check(build_model(margins=None)), "Page Margins"), [])
        model = build_model(margins=Margins(top=None, bottom=2.0, left=None, right=None))
        issues = issues_for_rule(_check(model), "Page Margins")
        self.assertEqual(len(issues), 1)
        self.assertIn("Bottom", issues[0].message)


class LineSpacingRuleTests(unittest.TestCase):
    def test_main_spacing_is_first_sample(self) -> None:
        self.assertEqual(formatting_rules.main_line_spacing((1.0, 1.5, 1.5, 2.0)), 1.0)
        self.assertEqual(formatting_rules.main_line_spacing((1.54, 1.0)), 1.5)
        self.assertIsNone(formatting_rules.main_line_spacing(()))

    def test_first_paragraph_decides_over_majority(self) -> None:
        model = build_model(line_spacing_samples=[1.0, 1.5, 1.5])
        issues = issues_for_rule(_check(model), "Line Spacing")
        self.assertEqual(len(issues), 1)
        self.assertEqual(issues[0].severity, Severity.HIGH)
        self.assertEqual(issues[0].found, "1")
        model = build_model(line_spacing_samples=[1.5, 1.0, 1.0])
        self.assertEqual(issues_for_rule(_check(model), "Line Spacing"), [])

    def test_within_tolerance(self) -> None:
        model = build_model(line_spacing_samples=[1.3, 1.3, 1.0])
        self.assertEqual(issues_for_rule(_check(model), "Line Spacing"), [])

    def test_single_spacing_flagged(self) -> None:
        model = build_model(line_spacing_samples=[1.0, 1.0, 1.5])
        issues = issues_for_rule(_check(model), "Line Spacing")
        self.assertEqual(len(issues), 1)
        self.assertEqual(issues[0].severity, Severity.HIGH)
        self.assertEqual(issues[0].found, "1")

    def test_no_samples(self) -> None:
        self.assertEqual(issues_for_rule(_check(build_model()), "Line Spacing"), [])


class ParagraphRuleTests(unittest.TestCase):
    def test_each_offending_paragraph_reported(self) -> None:
        paragraphs = [
            make_paragraph(40, LONG_TEXT, fonts=["Arial", "Times New Roman"]),
            make_paragraph(41, LONG_TEXT, fonts=["Courier New", "Symbol"]),
            make_paragraph(42, LONG_TEXT, fonts=["Calibri"]),
        ]
        issues = issues_for_rule(_check(build_model(paragraphs=paragraphs)), "Font Style")
        self.assertEqual([issue.location.paragraph for issue in issues], [40, 42])
        self.assertEqual(issues[0].found, "Arial")

    def test_inherited_fonts_and_sizes_are_not_violations(self) -> None:
        paragraphs = [make_paragraph(40, LONG_TEXT, fonts=[None, None], sizes=[None])]
        issues = _check(build_model(paragraphs=paragraphs))
        self.assertEqual(issues_for_rule(issues, "Font Style"), [])
        self.assertEqual(issues_for_rule(issues, "Font Size"), [])

    def test_wrong_size(self) -> None:
        paragraphs = [
            make_paragraph(40, LONG_TEXT, sizes=[12, 10]),
            make_paragraph(41, LONG_TEXT, sizes=[14]),
        ]
        issues = issues_for_rule(_check(build_model(paragraphs=paragraphs)), "Font Size")
        self.assertEqual(len(issues), 1)
        self.assertEqual(issues[0].location.paragraph, 41)
        self.assertEqual(issues[0].found, "14pt")

    def test_empty_paragraphs_skipped(self) -> None:
        paragraphs = [make_paragraph(40, "   ", fonts=["Arial"], alignment="center")]
        self.assertEqual(_check(build_model(paragraphs=paragraphs)), [])

    def test_first_line_indent_reported_once(self) -> None:
        paragraphs = [
            make_paragraph(40, LONG_TEXT, first_line=720),
            make_paragraph(41, LONG_TEXT, first_line=720),
            make_paragraph(42, LONG_TEXT, first_line=0),
        ]
        issues = issues_for_rule(_check(build_model(paragraphs=paragraphs)), "Paragraph Indentation")
        self.assertEqual(len(issues), 1)
        self.assertEqual(issues[0].location.paragraph, 40)
        self.assertEqual(issues[0].severity, Severity.MEDIUM)

    def test_alignment_outside_cover_page(self) -> None:
        paragraphs = [
            make_paragraph(40, LONG_TEXT, alignment="both"),
            make_paragraph(41, LONG_TEXT, alignment="left"),
            make_paragraph(42, LONG_TEXT, alignment="start"),
            make_paragraph(43, LONG_TEXT),
        ]
        issues = issues_for_rule(_check(build_model(paragraphs=paragraphs)), "Text Alignment")
        self.assertEqual(len(issues), 1)
        self.assertEqual(issues[0].location.paragraph, 40)
        self.assertEqual(issues[0].severity, Severity.LOW)
        self.assertEqual(issues[0].found, "both")

    def test_cover_page_alignment_exempt(self) -> None:
        paragraphs = [
            make_paragraph(1, "SOUTH ASIA INSTITUTE OF ADVANCED CHRISTIAN STUDIES", alignment="center"),
            make_paragraph(5, "A Short Title", alignment="center"),
            make_paragraph(60, "Submitted to Dr. Mathew in a rather long line. " * 3, alignment="center"),
        ]
        issues = issues_for_rule(_check(build_model(paragraphs=paragraphs)), "Text Alignment")
        self.assertEqual(issues, [])


class FootnoteRuleTests(unittest.TestCase):
    def test_footnote_font_and_size(self) -> None:
        footnotes = [
            make_footnote("1", "Barth, Dogmatics, 12.", fonts=["Times New Roman"], sizes=[10]),
            make_footnote("2", "Barth, Dogmatics, 13.", fonts=["Arial", "Symbol"], sizes=[12]),
            make_footnote("3", "Barth, Dogmatics, 14.", fonts=[None], sizes=[None]),
        ]
        issues = _check(build_model(footnotes=footnotes))
        font_issues = issues_for_rule(issues, "Footnote Font")
        size_issues = issues_for_rule(issues, "Footnote Size")
        self.assertEqual([issue.location.footnote for issue in font_issues], ["2"])
        self.assertEqual([issue.location.footnote for issue in size_issues], ["2"])
        self.assertEqual(font_issues[0].severity, Severity.HIGH)
        self.assertEqual(size_issues[0].found, "12pt")

    def test_long_footnote(self) -> None:
        footnotes = [make_footnote("4", "x" * 501), make_footnote("5", "x" * 500)]
        issues = issues_for_rule(_check(build_model(footnotes=footnotes)), "Footnote Length")
        self.assertEqual(len(issues), 1)
        self.assertEqual(issues[0].found, "501 characters")
        self.assertEqual(issues[0].severity, Severity.LOW)
        self.assertTrue(issues[0].location.text.endswith("..."))

    def test_empty_footnote_skipped(self) -> None:
        footnotes = [make_footnote("6", "", fonts=["Arial"])]
        self.assertEqual(_check(build_model(footnotes=footnotes)), [])


class PageNumberingRuleTests(unittest.TestCase):
    def test_missing_page_numbers_on_multi_page_document(self) -> None:
        model = build_model(page_numbering=PageNumbering(present=False), word_count=251)
        issues = issues_for_rule(_check(model), "Page Numbering")
        self.assertEqual(len(issues), 1)
        self.assertEqual(issues[0].severity, Severity.MEDIUM)

    def test_single_page_document_needs_no_numbers(self) -> None:
        model = build_model(page_numbering=PageNumbering(present=False), word_count=250)
        self.assertEqual(issues_for_rule(_check(model), "Page Numbering"), [])

    def test_page_number_position(self) -> None:
        top = build_model(page_numbering=PageNumbering(present=True, location="top right"))
        issues = issues_for_rule(_check(top), "Page Number Position")
        self.assertEqual(len(issues), 1)
        self.assertEqual(issues[0].severity, Severity.LOW)
        self.assertEqual(issues[0].found, "top right")
        for location in ("bottom center", "bottom"):
            model = build_model(page_numbering=PageNumbering(present=True, location=location))
            self.assertEqual(issues_for_rule(_check(model), "Page Number Position"), [])
        right = build_model(page_numbering=PageNumbering(present=True, location="bottom right"))
        self.assertEqual(len(issues_for_rule(_check(right), "Page Number Position")), 1)


if __name__ == "__main__":
    unittest.main()
