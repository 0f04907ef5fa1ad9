"""
Markup Tokenizer — fragment sequence → located word tokens.

A character-level finite-state machine that separates prose from HTML
syntax. Runs of word-constituent characters found in prose become
WordTokens; tag contents, entity references (&amp;) and the bodies of
skip-tagged elements (<script>, <style>) contribute nothing.

STRUCTURE:
    transition(state, char, kind, tag_name) → (next_state, Action)
        Pure. Decides what happens to one character.

    MarkupTokenizer
        Applies the actions: owns the word buffer and the line/column
        cursor, and turns flushed buffers into WordTokens.

Columns are 0-based and always point at the word's first character.
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from enum import Enum
from typing import Callable, Dict, FrozenSet, Iterable, List, Optional, Tuple

from hbspell.model import Fragment, PositionMarker, WordToken


DEFAULT_SKIP_TAGS: FrozenSet[str] = frozenset({"script", "style"})

_WORD_CHAR_RE = re.compile(r"['’a-zA-Z0-9]")

TYPOGRAPHIC_APOSTROPHE = "’"


class TokenizerState(Enum):
    OUTSIDE_TAGS = "outside-tags"
    TAG_OPEN = "tag-open"
    SKIPPED_BODY = "skipped-body"
    SKIPPED_BODY_LT = "skipped-body2"
    INSIDE_SKIPPED_TAG = "inside-skipped-tag"
    INSIDE_TAGS = "inside-tags"
    ENTITY_INSIDE = "entity-inside"
    ENTITY_OUTSIDE = "entity-outside"


class CharClass(Enum):
    ALPHANUM = "alphanum"
    LT = "<"
    GT = ">"
    OTHER = "other"


class Action(Enum):
    """What the tokenizer does with the character after a transition."""

    NONE = "none"
    BUFFER = "buffer"  # append char to the word buffer
    FLUSH = "flush"    # emit the buffer as a word
    CLEAR = "clear"    # discard the buffer (it held a tag name)


def classify(char: str) -> Tuple[str, CharClass]:
    """
    Classify one character.

    Returns:
        (char, kind) where a typographic apostrophe is canonicalized to "'"
    """
    if _WORD_CHAR_RE.match(char):
        if char == TYPOGRAPHIC_APOSTROPHE:
            char = "'"
        return char, CharClass.ALPHANUM
    if char == "<":
        return char, CharClass.LT
    if char == ">":
        return char, CharClass.GT
    return char, CharClass.OTHER


# =============================================================================
# Transition table
# =============================================================================

Transition = Tuple[TokenizerState, Action]


def _outside_tags(char: str, kind: CharClass, tag_name: str, skip_tags: FrozenSet[str]) -> Transition:
    if kind is CharClass.ALPHANUM:
        return TokenizerState.OUTSIDE_TAGS, Action.BUFFER
    if kind is CharClass.LT:
        return TokenizerState.TAG_OPEN, Action.FLUSH
    if char == "&":
        return TokenizerState.ENTITY_OUTSIDE, Action.FLUSH
    if kind is CharClass.GT:
        # stray ">" is absorbed: "a>b" reads as "ab"
        return TokenizerState.OUTSIDE_TAGS, Action.NONE
    return TokenizerState.OUTSIDE_TAGS, Action.FLUSH


def _tag_open(char: str, kind: CharClass, tag_name: str, skip_tags: FrozenSet[str]) -> Transition:
    if kind is CharClass.ALPHANUM:
        return TokenizerState.TAG_OPEN, Action.BUFFER
    skip = tag_name in skip_tags
    if kind is CharClass.GT:
        return (TokenizerState.SKIPPED_BODY if skip else TokenizerState.OUTSIDE_TAGS), Action.CLEAR
    return (TokenizerState.INSIDE_SKIPPED_TAG if skip else TokenizerState.INSIDE_TAGS), Action.CLEAR


def _skipped_body(char: str, kind: CharClass, tag_name: str, skip_tags: FrozenSet[str]) -> Transition:
    if kind is CharClass.LT:
        return TokenizerState.SKIPPED_BODY_LT, Action.NONE
    return TokenizerState.SKIPPED_BODY, Action.NONE


def _skipped_body_lt(char: str, kind: CharClass, tag_name: str, skip_tags: FrozenSet[str]) -> Transition:
    if char == "/":
        return TokenizerState.INSIDE_TAGS, Action.NONE
    return _skipped_body(char, kind, tag_name, skip_tags)


def _inside_skipped_tag(char: str, kind: CharClass, tag_name: str, skip_tags: FrozenSet[str]) -> Transition:
    if kind is CharClass.GT:
        return TokenizerState.SKIPPED_BODY, Action.NONE
    return TokenizerState.INSIDE_SKIPPED_TAG, Action.NONE


def _inside_tags(char: str, kind: CharClass, tag_name: str, skip_tags: FrozenSet[str]) -> Transition:
    if kind is CharClass.GT:
        return TokenizerState.OUTSIDE_TAGS, Action.NONE
    if char == "&":
        return TokenizerState.ENTITY_INSIDE, Action.NONE
    return TokenizerState.INSIDE_TAGS, Action.NONE


def _entity_inside(char: str, kind: CharClass, tag_name: str, skip_tags: FrozenSet[str]) -> Transition:
    if char == ";":
        return TokenizerState.INSIDE_TAGS, Action.NONE
    return TokenizerState.ENTITY_INSIDE, Action.NONE


def _entity_outside(char: str, kind: CharClass, tag_name: str, skip_tags: FrozenSet[str]) -> Transition:
    if char == ";":
        return TokenizerState.OUTSIDE_TAGS, Action.NONE
    return TokenizerState.ENTITY_OUTSIDE, Action.NONE


_TRANSITIONS: Dict[TokenizerState, Callable[[str, CharClass, str, FrozenSet[str]], Transition]] = {
    TokenizerState.OUTSIDE_TAGS: _outside_tags,
    TokenizerState.TAG_OPEN: _tag_open,
    TokenizerState.SKIPPED_BODY: _skipped_body,
    TokenizerState.SKIPPED_BODY_LT: _skipped_body_lt,
    TokenizerState.INSIDE_SKIPPED_TAG: _inside_skipped_tag,
    TokenizerState.INSIDE_TAGS: _inside_tags,
    TokenizerState.ENTITY_INSIDE: _entity_inside,
    TokenizerState.ENTITY_OUTSIDE: _entity_outside,
}


def transition(
    state: TokenizerState,
    char: str,
    kind: CharClass,
    tag_name: str = "",
    skip_tags: FrozenSet[str] = DEFAULT_SKIP_TAGS,
) -> Transition:
    """
    Advance the machine by one (already classified) character.

    Args:
        state: Current state
        char: The character (canonicalized)
        kind: Its class
        tag_name: Buffer contents; only read in TAG_OPEN, where it holds the
            tag name collected since "<"
        skip_tags: Element names whose bodies are opaque

    Returns:
        (next_state, action)
    """
    return _TRANSITIONS[state](char, kind, tag_name, skip_tags)


# =============================================================================
# Driver
# =============================================================================

@dataclass
class MarkupTokenizer:
    """
    Stateful driver around `transition`.

    Feed fragments one at a time with `feed`, then call `close`.
    One instance handles one template; instances share nothing.
    """

    source: str = ""
    skip_tags: FrozenSet[str] = DEFAULT_SKIP_TAGS
    flush_at_end: bool = True

    state: TokenizerState = TokenizerState.OUTSIDE_TAGS
    line: int = 1
    column: int = 0
    buffer: List[str] = field(default_factory=list)

    def feed(self, fragment: Fragment) -> Optional[WordToken]:
        """
        Consume one fragment.

        Returns:
            The WordToken completed by this fragment, if any
        """
        if isinstance(fragment, PositionMarker):
            word = self._break()
            self.line = fragment.line
            self.column = fragment.column
            return word

        word = None
        if fragment == "\n":
            word = self._break()
            self.line += 1
            self.column = 0

        char, kind = classify(fragment)
        self.state, action = transition(
            self.state, char, kind, "".join(self.buffer), self.skip_tags
        )

        if action is Action.BUFFER:
            self.buffer.append(char)
        elif action is Action.FLUSH:
            word = self._flush() or word
        elif action is Action.CLEAR:
            self.buffer.clear()

        if fragment != "\n":
            self.column += 1
        return word

    def close(self) -> Optional[WordToken]:
        """Signal end of input. Flushes a pending word if `flush_at_end`."""
        if self.flush_at_end:
            return self._break()
        self.buffer.clear()
        return None

    def _break(self) -> Optional[WordToken]:
        # A position break inside a tag name does not end the tag name, so the
        # tag-open buffer is the one case a marker or newline leaves unflushed.
        if self.state is TokenizerState.TAG_OPEN:
            return None
        return self._flush()

    def _flush(self) -> Optional[WordToken]:
        if not self.buffer:
            return None
        word = "".join(self.buffer)
        self.buffer.clear()
        return WordToken(
            word=word,
            line=self.line,
            column=self.column - len(word),
            source=self.source,
        )


def tokenize(
    fragments: Iterable[Fragment],
    source: str = "",
    skip_tags: Iterable[str] = DEFAULT_SKIP_TAGS,
    flush_at_end: bool = True,
) -> List[WordToken]:
    """
    Pull located words out of a de-templated fragment sequence.

    Args:
        fragments: Output of the extractor
        source: Origin identifier attached to every token
        skip_tags: Element names whose bodies are ignored
        flush_at_end: Emit a word still pending when input runs out

    Returns:
        WordTokens in the order their last character was read
    """
    tokenizer = MarkupTokenizer(
        source=source,
        skip_tags=frozenset(skip_tags),
        flush_at_end=flush_at_end,
    )
    words: List[WordToken] = []
    for fragment in fragments:
        word = tokenizer.feed(fragment)
        if word is not None:
            words.append(word)
    word = tokenizer.close()
    if word is not None:
        words.append(word)
    return words
