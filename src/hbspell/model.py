"""
Core Data Model

Defines the data structures that flow through the spell-checking pipeline:
    - Statement nodes (the parsed template tree)
    - Fragments (the extractor's output)
    - Word tokens (the tokenizer's output)
    - Corrections (the oracle-matching output)

ARCHITECTURAL RULE:
    These objects:
        - Carry data, not behavior
        - Are never mutated by the extractor or tokenizer
        - Know nothing about dictionaries or reporting
"""

from abc import ABC
from dataclasses import dataclass, field
from typing import List, Optional, Tuple, Union


class StatementNode(ABC):
    """
    Base class for all nodes of a parsed template.

    Only two variants matter to text extraction: Content and Block.
    Every other shape is skipped by the extractor.
    """
    pass


@dataclass
class Content(StatementNode):
    """
    A run of literal template text (HTML included).

    Properties:
        text:
            The original characters, exactly as they appear in the source
        line:
            1-based line of the first character
        column:
            0-based column of the first character
    """

    text: str
    line: int = 1
    column: int = 0


@dataclass
class Block(StatementNode):
    """
    A template-logic block such as {{#if}} or {{#each}}.

    The block's own syntax is discarded during extraction, but the text
    in both branches is still visited.

    Properties:
        program:
            Primary branch statements (None if absent)
        inverse:
            Alternate ("else") branch statements (None if absent)
        name:
            Helper name, e.g. "if" (informational only)
    """

    program: Optional[List[StatementNode]] = None
    inverse: Optional[List[StatementNode]] = None
    name: Optional[str] = None
    line: int = 1
    column: int = 0


@dataclass
class Mustache(StatementNode):
    """A {{expression}} (escaped or raw). Never contributes text."""

    expression: str
    raw: bool = False
    line: int = 1
    column: int = 0


@dataclass
class Comment(StatementNode):
    """A {{! comment }} or {{!-- comment --}}."""

    text: str
    line: int = 1
    column: int = 0


@dataclass
class Partial(StatementNode):
    """A {{> partial}} invocation."""

    name: str
    line: int = 1
    column: int = 0


@dataclass
class Template:
    """
    Root of a parsed template.

    Properties:
        statements: Top-level statement nodes in document order
    """

    statements: List[StatementNode] = field(default_factory=list)


@dataclass(frozen=True)
class PositionMarker:
    """
    Cursor reset emitted at the start of every Content node.

    Tells the tokenizer where the following characters live in the
    original source.
    """

    line: int
    column: int


# A fragment is either a position marker or a single character.
Fragment = Union[PositionMarker, str]


@dataclass(frozen=True)
class WordToken:
    """
    A located word found in template prose.

    Properties:
        word: The word (typographic apostrophes already canonicalized)
        line: 1-based line of the first character in the original source
        column: 0-based column of the first character in the original source
        source: Opaque origin identifier (e.g. a file path)
    """

    word: str
    line: int
    column: int
    source: str = ""


@dataclass(frozen=True)
class Correction:
    """
    A word the oracle reported as misspelled.

    Properties:
        original: The misspelled word
        suggestions: Oracle suggestions, verbatim and in oracle order
        line, column, source: Copied from the WordToken
    """

    original: str
    suggestions: Tuple[str, ...]
    line: int
    column: int
    source: str = ""

    @classmethod
    def for_token(cls, token: WordToken, suggestions) -> "Correction":
        return cls(
            original=token.word,
            suggestions=tuple(suggestions),
            line=token.line,
            column=token.column,
            source=token.source,
        )
