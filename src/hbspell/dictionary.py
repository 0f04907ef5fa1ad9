"""
Word-list oracle.

A SpellOracle backed by a plain word list or a hunspell .dic file supplied
by the caller. No dictionary ships with the package.
"""

from __future__ import annotations

import difflib
import logging
from pathlib import Path
from typing import FrozenSet, Iterable, List, Tuple, Union

from hbspell.matching import SpellOracle

logger = logging.getLogger(__name__)


class DictionaryError(Exception):
    """Raised when a dictionary file cannot be read."""
    pass


def _read_lines(path: Union[str, Path]) -> List[str]:
    try:
        with open(path, "r", encoding="utf-8", errors="replace") as f:
            return f.read().splitlines()
    except OSError as e:
        raise DictionaryError(f"Cannot read dictionary {path}: {e}") from e


def read_word_list(path: Union[str, Path]) -> List[str]:
    """One word per line; blank lines and '#' comments are ignored."""
    words = []
    for line in _read_lines(path):
        line = line.strip()
        if line and not line.startswith("#"):
            words.append(line)
    return words


def read_hunspell_dic(path: Union[str, Path]) -> List[str]:
    """
    Read the stems of a hunspell .dic file.

    The first line is an approximate entry count; each following line is
    `word[/FLAGS]`. Affix rules are not expanded.
    """
    lines = _read_lines(path)
    if lines and lines[0].strip().isdigit():
        lines = lines[1:]
    words = []
    for line in lines:
        word = line.split("/", 1)[0].strip()
        if word:
            words.append(word)
    return words


def _match_case(template: str, word: str) -> str:
    if template.isupper() and len(template) > 1:
        return word.upper()
    if template[:1].isupper():
        return word[:1].upper() + word[1:]
    return word


class WordListOracle(SpellOracle):
    """
    Case-aware word list lookup with difflib suggestions.

    A word is correct if it is in the list as written, in lowercase, or
    (for a capitalized or all-caps word) if its lowercase form is. Words
    made only of digits are always correct.

    Read-only after construction, so safe for concurrent checks.
    """

    def __init__(self, words: Iterable[str], max_suggestions: int = 5, cutoff: float = 0.7):
        self._words: FrozenSet[str] = frozenset(words)
        self._lower: FrozenSet[str] = frozenset(w.lower() for w in self._words)
        self._candidates = sorted(self._lower)
        self.max_suggestions = max_suggestions
        self.cutoff = cutoff

    @classmethod
    def from_file(cls, path: Union[str, Path], extra_words: Iterable[str] = (), **kwargs) -> "WordListOracle":
        words = read_word_list(path)
        logger.debug("Loaded %d words from %s", len(words), path)
        return cls(list(words) + list(extra_words), **kwargs)

    @classmethod
    def from_hunspell_dic(cls, path: Union[str, Path], extra_words: Iterable[str] = (), **kwargs) -> "WordListOracle":
        words = read_hunspell_dic(path)
        logger.debug("Loaded %d stems from %s", len(words), path)
        return cls(list(words) + list(extra_words), **kwargs)

    def __len__(self) -> int:
        return len(self._words)

    def __contains__(self, word: str) -> bool:
        return self.is_known(word)

    def is_known(self, word: str) -> bool:
        if word.isdigit() or word in self._words:
            return True
        lower = word.lower()
        if lower in self._words:
            return True
        # "Hello" and "HELLO" are fine if "hello" is, but not the reverse
        return word[:1].isupper() and lower in self._lower

    def suggest(self, word: str) -> List[str]:
        matches = difflib.get_close_matches(
            word.lower(), self._candidates, n=self.max_suggestions, cutoff=self.cutoff
        )
        return [_match_case(word, m) for m in matches]

    def check(self, word: str) -> Tuple[bool, List[str]]:
        if self.is_known(word):
            return True, []
        return False, self.suggest(word)


def load_dictionaries(paths: Iterable[Union[str, Path]], extra_words: Iterable[str] = ()) -> WordListOracle:
    """
    Build one oracle from several dictionary files.

    Files ending in .dic are read as hunspell dictionaries, anything else
    as a plain word list.
    """
    words: List[str] = list(extra_words)
    for path in paths:
        if str(path).endswith(".dic"):
            words.extend(read_hunspell_dic(path))
        else:
            words.extend(read_word_list(path))
    logger.debug("Dictionary has %d entries", len(words))
    return WordListOracle(words)


__all__ = [
    "DictionaryError",
    "WordListOracle",
    "load_dictionaries",
    "read_hunspell_dic",
    "read_word_list",
]
