"""
Oracle Matching — word tokens → corrections.

Every word is checked independently and concurrently against a spell-check
oracle. A Correction is produced only for words the oracle reports as
incorrect, carrying the oracle's suggestions verbatim.

The oracle is anything with the shape

    check(word) -> (is_correct, suggestions)

either a plain callable or a SpellOracle instance. It must be safe for
concurrent read-only calls.

IMPORTANT: An oracle failure is fatal for the whole batch. It is not
retried and not reported as a spelling issue.
"""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from concurrent.futures import FIRST_EXCEPTION, ThreadPoolExecutor, wait
from typing import Callable, List, Optional, Sequence, Tuple, Union

from hbspell.model import Correction, WordToken

logger = logging.getLogger(__name__)


Verdict = Tuple[bool, Sequence[str]]


class SpellOracle(ABC):
    """Dictionary-backed verdict source."""

    @abstractmethod
    def check(self, word: str) -> Verdict:
        """Return (is_correct, suggestions) for one word."""

    def __call__(self, word: str) -> Verdict:
        return self.check(word)


OracleLike = Union[SpellOracle, Callable[[str], Verdict]]


class OracleError(Exception):
    """Raised when the oracle itself fails while checking a word."""

    def __init__(self, token: WordToken, cause: BaseException):
        super().__init__(
            f"Spell-check oracle failed on '{token.word}' "
            f"({token.source}:{token.line}:{token.column}): {cause}"
        )
        self.token = token
        self.cause = cause


def _check_one(oracle: Callable[[str], Verdict], token: WordToken) -> Optional[Correction]:
    try:
        correct, suggestions = oracle(token.word)
    except Exception as exc:
        raise OracleError(token, exc) from exc
    if correct:
        return None
    return Correction.for_token(token, suggestions)


def find_corrections(
    words: Sequence[WordToken],
    oracle: OracleLike,
    on_correction: Optional[Callable[[Correction], None]] = None,
    on_done: Optional[Callable[[], None]] = None,
    max_workers: Optional[int] = None,
) -> List[Correction]:
    """
    Check every word against the oracle.

    Args:
        words: Tokens to check
        oracle: Verdict source (callable or SpellOracle)
        on_correction: Called once per misspelled word, in completion order
        on_done: Called exactly once after every word has a verdict
            (immediately when `words` is empty); not called on failure
        max_workers: Thread pool size (executor default if None)

    Returns:
        Corrections in completion order

    Raises:
        OracleError: If any oracle call fails; pending checks are cancelled
    """
    corrections: List[Correction] = []

    if words:
        logger.debug("Dispatching %d word(s) to the spell-check oracle", len(words))
        with ThreadPoolExecutor(max_workers=max_workers) as executor:
            pending = {executor.submit(_check_one, oracle, token) for token in words}
            while pending:
                done, pending = wait(pending, return_when=FIRST_EXCEPTION)
                for future in done:
                    error = future.exception()
                    if error is not None:
                        for other in pending:
                            other.cancel()
                        logger.error("%s", error)
                        raise error
                    correction = future.result()
                    if correction is None:
                        continue
                    corrections.append(correction)
                    if on_correction is not None:
                        on_correction(correction)

    if on_done is not None:
        on_done()
    return corrections


__all__ = [
    "SpellOracle",
    "OracleError",
    "find_corrections",
]
