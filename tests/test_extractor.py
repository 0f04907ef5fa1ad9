"""
Tests for the text extractor (statement tree → fragments).

The extractor must:
    - Emit a PositionMarker before every Content node
    - Emit every character of Content text, in order
    - Drop block syntax but visit both branches
    - Silently skip node shapes it does not know
"""

from hbspell.extractor import BranchOrder, extract_text, iter_fragments
from hbspell.model import Block, Comment, Content, Mustache, PositionMarker, Template
from hbspell.template_parser import parse_template


def texts(fragments):
    """Join characters, marking each PositionMarker with '|'."""
    return "".join("|" if isinstance(f, PositionMarker) else f for f in fragments)


class TestContent:
    """Content nodes."""

    def test_single_content(self):
        fragments = extract_text([Content(text="ab", line=2, column=3)])
        assert fragments == [PositionMarker(2, 3), "a", "b"]

    def test_accepts_template(self):
        template = Template(statements=[Content(text="x")])
        assert extract_text(template) == [PositionMarker(1, 0), "x"]

    def test_adjacent_content_not_merged(self):
        fragments = extract_text([Content("ab", 1, 0), Content("cd", 1, 2)])
        assert fragments == [PositionMarker(1, 0), "a", "b", PositionMarker(1, 2), "c", "d"]

    def test_empty_template(self):
        assert extract_text([]) == []

    def test_iter_fragments_is_lazy(self):
        iterator = iter_fragments([Content("abc")])
        assert next(iterator) == PositionMarker(1, 0)
        assert next(iterator) == "a"


class TestBlocks:
    """Block traversal."""

    def test_block_syntax_dropped(self):
        template = parse_template("Hello {{#if x}}there{{/if}} friend")
        assert texts(extract_text(template)) == "|Hello |there| friend"

    def test_document_order_by_default(self):
        block = Block(program=[Content("B")], inverse=[Content("A")])
        assert texts(extract_text([block])) == "|B|A"

    def test_alternate_first_order(self):
        block = Block(program=[Content("B")], inverse=[Content("A")])
        assert texts(extract_text([block], branch_order=BranchOrder.ALTERNATE_FIRST)) == "|A|B"

    def test_children_before_following_siblings(self):
        statements = [
            Content("1"),
            Block(program=[Content("2"), Block(program=[Content("3")])], inverse=[Content("4")]),
            Content("5"),
        ]
        assert texts(extract_text(statements)) == "|1|2|3|4|5"

    def test_block_with_no_branches(self):
        assert extract_text([Block()]) == []

    def test_tree_is_not_mutated(self):
        block = Block(program=[Content("a")], inverse=[Content("b")])
        extract_text([block, block])
        assert block == Block(program=[Content("a")], inverse=[Content("b")])


class TestUnknownShapes:
    """Unrecognised nodes are skipped."""

    def test_mustache_and_comment_skipped(self):
        statements = [Content("a"), Mustache("name"), Comment("note"), Content("b")]
        assert texts(extract_text(statements)) == "|a|b"

    def test_foreign_objects_skipped(self):
        statements = [Content("a"), {"type": "weird"}, None, 42, Content("b")]
        assert texts(extract_text(statements)) == "|a|b"
