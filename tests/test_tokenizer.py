"""Tests for the tagged-text state machine and nesting tracker."""

import io
import unittest
from contextlib import redirect_stdout

from ptml import Decoration, ParseResult, parse
from ptml.tokenizer import State, Tokenizer, TokenizerOpts


class TestPlainText(unittest.TestCase):
    def test_empty_input(self):
        assert parse("") == ("", ())

    def test_none_is_empty(self):
        assert parse(None) == ("", ())

    def test_non_string_input_rejected(self):
        with self.assertRaises(TypeError):
            parse(b"<b>x</b>")

    def test_tag_free_text_is_identity(self):
        for text in ["hello", "a > b", "x = y / z", "line1\nline2", "  ", "1 >= 2"]:
            plain_text, decorations = parse(text)
            assert plain_text == text
            assert decorations == ()

    def test_non_ascii_text_passes_through(self):
        text = "こんにちは \U0001f600 world"
        assert parse(f"<b>{text}</b>").plain_text == text


class TestDecorations(unittest.TestCase):
    def test_single_tag(self):
        plain_text, decorations = parse("say <b>hi</b>!")
        assert plain_text == "say hi!"
        assert decorations == (Decoration(4, 6, "b", ""),)

    def test_nested_tags_close_inner_first(self):
        plain_text, decorations = parse("<b><i>hi</i></b>")
        assert plain_text == "hi"
        assert decorations == (Decoration(0, 2, "i", ""), Decoration(0, 2, "b", ""))

    def test_sibling_tags_in_document_order(self):
        plain_text, decorations = parse("<b>x</b>-<i>y</i>")
        assert plain_text == "x-y"
        assert decorations == (Decoration(0, 1, "b"), Decoration(2, 3, "i"))

    def test_attribute_capture(self):
        plain_text, decorations = parse("<color=red>hi</color>")
        assert plain_text == "hi"
        assert decorations == (Decoration(0, 2, "color", "red"),)

    def test_attribute_keeps_delimiters_verbatim(self):
        _, decorations = parse("<link=a=b/c<d>x</link>")
        assert decorations[0].attribute == "a=b/c<d"

    def test_attribute_keeps_spaces(self):
        _, decorations = parse("<font= Noto Sans >x</font>")
        assert decorations[0].attribute == " Noto Sans "

    def test_case_insensitive_end_tag(self):
        plain_text, decorations = parse("<B>x</b>")
        assert plain_text == "x"
        assert decorations == (Decoration(0, 1, "B", ""),)

    def test_tag_name_keeps_start_tag_spelling(self):
        _, decorations = parse("<Color=blue>x</COLOR>")
        assert decorations[0].tag_name == "Color"

    def test_casefold_matching(self):
        # German sharp s folds to "ss"
        _, decorations = parse("<straße>x</STRASSE>")
        assert decorations[0].tag_name == "straße"

    def test_digits_and_unicode_letters_in_names(self):
        _, decorations = parse("<h1>x</h1><日本>y</日本>")
        assert [d.tag_name for d in decorations] == ["h1", "日本"]

    def test_empty_span(self):
        plain_text, decorations = parse("a<b></b>c")
        assert plain_text == "ac"
        assert decorations == (Decoration(1, 1, "b"),)

    def test_deep_nesting(self):
        depth = 500
        text = "<b>" * depth + "x" + "</b>" * depth
        plain_text, decorations = parse(text, strict=True)
        assert plain_text == "x"
        assert len(decorations) == depth
        assert all(d == Decoration(0, 1, "b") for d in decorations)

    def test_offsets_within_plain_text(self):
        text = "<a>one <b=1>two <c>three</c></b> four</a> five <d></d>"
        plain_text, decorations = parse(text, strict=True)
        assert plain_text == "one two three four five "
        for decoration in decorations:
            assert 0 <= decoration.start <= decoration.end <= len(plain_text)
        assert [(d.tag_name, d.start, d.end) for d in decorations] == [
            ("c", 8, 13),
            ("b", 4, 13),
            ("a", 0, 18),
            ("d", 24, 24),
        ]

    def test_stray_closing_delimiters_are_plain_text(self):
        plain_text, decorations = parse("a > b <i>=</i> c/d")
        assert plain_text == "a > b = c/d"
        assert decorations == (Decoration(6, 7, "i"),)


class TestParseResult(unittest.TestCase):
    def test_unpacks_as_pair(self):
        result = parse("<b>x</b>")
        plain_text, decorations = result
        assert result.ok
        assert plain_text == result.plain_text == result[0]
        assert decorations is result.decorations
        assert len(result) == 2

    def test_equality(self):
        assert parse("<b>x</b>") == ParseResult("x", [Decoration(0, 1, "b")])
        assert parse("x") != ParseResult("y")

    def test_decorations_are_immutable(self):
        decoration = parse("<b>x</b>").decorations[0]
        with self.assertRaises(AttributeError):
            decoration.start = 5

    def test_results_are_fresh_per_call(self):
        first = parse("<b>x</b>")
        second = parse("<i>y</i>")
        assert first.decorations == (Decoration(0, 1, "b"),)
        assert second.decorations == (Decoration(0, 1, "i"),)


class TestTokenizer(unittest.TestCase):
    def test_run_returns_result_types(self):
        tokenizer = Tokenizer()
        assert tokenizer.run("<b>x</b>").ok
        failure = tokenizer.run("<b>x")
        assert not failure.ok
        assert failure.text == "<b>x"
        assert failure.fallback() == ("<b>x", ())

    def test_tokenizer_is_reusable(self):
        tokenizer = Tokenizer()
        tokenizer.run("<b>unclosed")
        result = tokenizer.run("<i>y</i>")
        assert result == ("y", (Decoration(0, 1, "i"),))
        assert tokenizer.state == State.PLAIN_TEXT
        assert tokenizer.error is None

    def test_state_after_failure(self):
        tokenizer = Tokenizer()
        tokenizer.run("<color=red")
        assert tokenizer.state == State.ATTRIBUTE


class TestDebugTrace(unittest.TestCase):
    def test_debug_off_prints_nothing(self):
        out = io.StringIO()
        with redirect_stdout(out):
            parse("<b>x</b>")
            parse("<b>x")
        assert out.getvalue() == ""

    def test_debug_traces_transitions(self):
        out = io.StringIO()
        with redirect_stdout(out):
            parse("<b>x</b>", debug=True)
        trace = out.getvalue()
        assert "PLAIN_TEXT -> START_TAG_NAME at 0" in trace
        assert "open <b>" in trace
        assert "close Decoration(<b> 0..1)" in trace

    def test_debug_reports_discarded_markup(self):
        out = io.StringIO()
        with redirect_stdout(out):
            result = parse("<b></i>", debug=True)
        assert result == ("<b></i>", ())
        assert "discarding markup" in out.getvalue()
        assert "mismatched-end-tag" in out.getvalue()

    def test_tokenizer_opts(self):
        assert TokenizerOpts().debug is False
        assert TokenizerOpts(debug=1).debug is True
