"""
Tests for the markup tokenizer (fragments → located words).

We need to:
1. Split prose into words of letters, digits and apostrophes
2. Ignore tag syntax, attribute values and entity references
3. Treat <script> and <style> bodies as opaque
4. Report each word at its first character's original line/column
"""

import pytest

from hbspell.extractor import fragments_from_text
from hbspell.model import PositionMarker, WordToken
from hbspell.tokenizer import (
    Action,
    CharClass,
    MarkupTokenizer,
    TokenizerState,
    classify,
    tokenize,
    transition,
)


def words_of(text, **kwargs):
    return [w.word for w in tokenize(fragments_from_text(text), **kwargs)]


def located(text, line=1, column=0, **kwargs):
    return [(w.word, w.line, w.column) for w in tokenize(fragments_from_text(text, line, column), **kwargs)]


class TestClassification:
    """Character classes used by the state machine."""

    def test_letters_digits_apostrophe(self):
        for char in "aZ09'":
            assert classify(char) == (char, CharClass.ALPHANUM)

    def test_typographic_apostrophe_canonicalized(self):
        assert classify("’") == ("'", CharClass.ALPHANUM)

    def test_angle_brackets(self):
        assert classify("<") == ("<", CharClass.LT)
        assert classify(">") == (">", CharClass.GT)

    def test_everything_else_is_other(self):
        for char in " &;-é\n\"":
            assert classify(char)[1] is CharClass.OTHER


class TestTransitions:
    """The pure transition function."""

    def test_outside_buffers_word_chars(self):
        assert transition(TokenizerState.OUTSIDE_TAGS, "a", CharClass.ALPHANUM) == (
            TokenizerState.OUTSIDE_TAGS, Action.BUFFER)

    def test_outside_lt_opens_tag(self):
        assert transition(TokenizerState.OUTSIDE_TAGS, "<", CharClass.LT) == (
            TokenizerState.TAG_OPEN, Action.FLUSH)

    def test_outside_ampersand_starts_entity(self):
        assert transition(TokenizerState.OUTSIDE_TAGS, "&", CharClass.OTHER) == (
            TokenizerState.ENTITY_OUTSIDE, Action.FLUSH)

    def test_outside_stray_gt_is_no_op(self):
        assert transition(TokenizerState.OUTSIDE_TAGS, ">", CharClass.GT) == (
            TokenizerState.OUTSIDE_TAGS, Action.NONE)

    def test_tag_open_skip_tag(self):
        assert transition(TokenizerState.TAG_OPEN, ">", CharClass.GT, "script") == (
            TokenizerState.SKIPPED_BODY, Action.CLEAR)
        assert transition(TokenizerState.TAG_OPEN, " ", CharClass.OTHER, "style") == (
            TokenizerState.INSIDE_SKIPPED_TAG, Action.CLEAR)

    def test_tag_open_ordinary_tag(self):
        assert transition(TokenizerState.TAG_OPEN, ">", CharClass.GT, "b") == (
            TokenizerState.OUTSIDE_TAGS, Action.CLEAR)
        assert transition(TokenizerState.TAG_OPEN, " ", CharClass.OTHER, "a") == (
            TokenizerState.INSIDE_TAGS, Action.CLEAR)

    def test_skip_tag_match_is_case_sensitive(self):
        state, _ = transition(TokenizerState.TAG_OPEN, ">", CharClass.GT, "SCRIPT")
        assert state is TokenizerState.OUTSIDE_TAGS

    def test_skipped_body_close(self):
        assert transition(TokenizerState.SKIPPED_BODY, "<", CharClass.LT)[0] is TokenizerState.SKIPPED_BODY_LT
        assert transition(TokenizerState.SKIPPED_BODY_LT, "/", CharClass.OTHER)[0] is TokenizerState.INSIDE_TAGS
        assert transition(TokenizerState.SKIPPED_BODY_LT, "b", CharClass.ALPHANUM)[0] is TokenizerState.SKIPPED_BODY
        assert transition(TokenizerState.SKIPPED_BODY_LT, "<", CharClass.LT)[0] is TokenizerState.SKIPPED_BODY_LT

    def test_entities_end_at_semicolon(self):
        assert transition(TokenizerState.ENTITY_OUTSIDE, ";", CharClass.OTHER)[0] is TokenizerState.OUTSIDE_TAGS
        assert transition(TokenizerState.ENTITY_INSIDE, ";", CharClass.OTHER)[0] is TokenizerState.INSIDE_TAGS
        assert transition(TokenizerState.ENTITY_OUTSIDE, "a", CharClass.ALPHANUM)[0] is TokenizerState.ENTITY_OUTSIDE

    def test_inside_tags(self):
        assert transition(TokenizerState.INSIDE_TAGS, ">", CharClass.GT)[0] is TokenizerState.OUTSIDE_TAGS
        assert transition(TokenizerState.INSIDE_TAGS, "&", CharClass.OTHER)[0] is TokenizerState.ENTITY_INSIDE
        assert transition(TokenizerState.INSIDE_TAGS, "<", CharClass.LT)[0] is TokenizerState.INSIDE_TAGS


class TestWords:
    """Word extraction from text-with-markup."""

    def test_plain_prose(self):
        assert words_of("Hello, brave new world.") == ["Hello", "brave", "new", "world"]

    def test_helo_wrold_positions(self):
        words = tokenize(fragments_from_text("Helo <b>wrold</b>!"), source="page.hbs")
        assert words == [
            WordToken(word="Helo", line=1, column=0, source="page.hbs"),
            WordToken(word="wrold", line=1, column=8, source="page.hbs"),
        ]

    def test_script_body_ignored(self):
        assert words_of("<script>var x = 1;</script> Wrold") == ["Wrold"]

    def test_script_body_with_tags_inside(self):
        text = '<script>document.write("<b>bad</b>");</script>good'
        # The first "</" inside the body ends the skipped region.
        assert "bad" not in words_of(text)

    def test_style_with_attributes_ignored(self):
        assert words_of('<style type="text/css">body { colr: red; }</style>ok') == ["ok"]

    def test_attribute_values_ignored(self):
        assert words_of('<a href="texxt" title="speling">link</a>') == ["link"]

    def test_entity_is_not_a_word(self):
        assert words_of("Tom&amp;Jerry") == ["Tom", "Jerry"]

    def test_entity_inside_tag(self):
        assert words_of('<a title="a&quot;b">text</a>') == ["text"]

    def test_apostrophes(self):
        assert words_of("don’t") == ["don't"]
        assert words_of("don't") == ["don't"]

    def test_typographic_apostrophe_same_token(self):
        assert tokenize(fragments_from_text("It don’t")) == tokenize(fragments_from_text("It don't"))

    def test_digits_are_word_characters(self):
        assert words_of("version 2b") == ["version", "2b"]

    def test_stray_gt_is_absorbed(self):
        assert words_of("a>b") == ["ab"]
        assert words_of("x > y") == ["x", "y"]

    def test_closing_tag_name_not_a_word(self):
        assert words_of("</div>done") == ["done"]

    def test_custom_skip_tags(self):
        assert words_of("<code>x = y</code> fine", skip_tags={"code"}) == ["fine"]


class TestPositions:
    """Line/column bookkeeping."""

    def test_newline_resets_column(self):
        assert located("one two\nthree") == [("one", 1, 0), ("two", 1, 4), ("three", 2, 0)]

    def test_start_offset(self):
        assert located("word", line=3, column=7) == [("word", 3, 7)]

    def test_marker_flushes_and_moves_cursor(self):
        fragments = [PositionMarker(1, 0), *"ab", PositionMarker(4, 10), *"cd"]
        assert [(w.word, w.line, w.column) for w in tokenize(fragments)] == [("ab", 1, 0), ("cd", 4, 10)]

    def test_resegmentation_is_invisible(self):
        text = "Hello <i>there</i> friend\nsecond line"
        whole = tokenize(fragments_from_text(text))
        split = [PositionMarker(1, 0), *text[:6], PositionMarker(1, 6), *text[6:9],
                 PositionMarker(1, 9), *text[9:18], PositionMarker(1, 18), *text[18:]]
        assert tokenize(split) == whole

    def test_marker_inside_tag_name_keeps_name(self):
        # <scr{{x}}ipt> still opens a script element
        fragments = [PositionMarker(1, 0), *"<scr", PositionMarker(1, 9), *"ipt>junk</script>ok"]
        assert [w.word for w in tokenize(fragments)] == ["ok"]

    def test_newline_inside_tag(self):
        assert located('<a\nhref="x">go</a>') == [("go", 2, 9)]


class TestEndOfInput:
    """Pending word at end of input."""

    def test_trailing_word_flushed_by_default(self):
        assert words_of("last word") == ["last", "word"]

    def test_trailing_word_dropped_when_disabled(self):
        assert words_of("last word", flush_at_end=False) == ["last"]

    def test_empty_input(self):
        assert tokenize([]) == []

    def test_unterminated_tag_drops_nothing_extra(self):
        assert words_of("text <b") == ["text"]


class TestMarkupTokenizer:
    """The stateful driver."""

    def test_feed_returns_completed_word(self):
        tokenizer = MarkupTokenizer(source="s")
        assert tokenizer.feed(PositionMarker(2, 0)) is None
        assert tokenizer.feed("h") is None
        assert tokenizer.feed("i") is None
        assert tokenizer.feed(" ") == WordToken("hi", 2, 0, "s")
        assert tokenizer.column == 3

    def test_close_respects_flush_at_end(self):
        tokenizer = MarkupTokenizer(flush_at_end=False)
        tokenizer.feed("x")
        assert tokenizer.close() is None
        assert tokenizer.buffer == []

    @pytest.mark.parametrize("source", ["", "templates/a.hbs", "☃ not a path"])
    def test_source_is_opaque(self, source):
        assert tokenize(fragments_from_text("word"), source=source)[0].source == source
