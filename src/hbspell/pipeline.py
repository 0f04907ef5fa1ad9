"""
End-to-end entry points: template text → words → corrections.

Each call runs an independent pipeline instance; templates can be checked
concurrently as long as the oracle is safe for concurrent reads.
"""

from __future__ import annotations

import logging
from typing import Callable, List, Optional, Sequence, Union

from hbspell.config import SpellcheckConfig
from hbspell.dictionary import WordListOracle, load_dictionaries
from hbspell.extractor import extract_text
from hbspell.matching import OracleLike, find_corrections
from hbspell.model import Correction, StatementNode, Template, WordToken
from hbspell.template_parser import parse_template
from hbspell.tokenizer import tokenize

logger = logging.getLogger(__name__)

parse = parse_template


def words_from_statements(
    statements: Union[Template, Sequence[StatementNode]],
    source: str = "",
    config: Optional[SpellcheckConfig] = None,
) -> List[WordToken]:
    """Extract and tokenize an already parsed template."""
    config = config or SpellcheckConfig()
    fragments = extract_text(statements, branch_order=config.branch_order)
    return tokenize(
        fragments,
        source=source,
        skip_tags=config.skip_tags,
        flush_at_end=config.flush_at_end,
    )


def all_words(template: str, source: str = "", config: Optional[SpellcheckConfig] = None) -> List[WordToken]:
    """
    All located words of a template.

    Raises:
        TemplateParseError: If the template cannot be parsed
    """
    return words_from_statements(parse_template(template), source=source, config=config)


def check_statements(
    statements: Union[Template, Sequence[StatementNode]],
    source: str,
    oracle: OracleLike,
    on_correction: Optional[Callable[[Correction], None]] = None,
    on_done: Optional[Callable[[], None]] = None,
    config: Optional[SpellcheckConfig] = None,
) -> List[Correction]:
    """Spell-check an already parsed template."""
    config = config or SpellcheckConfig()
    words = words_from_statements(statements, source=source, config=config)
    corrections = find_corrections(
        words,
        oracle,
        on_correction=on_correction,
        on_done=on_done,
        max_workers=config.max_workers,
    )
    logger.info(
        "Checked %s: %d word(s), %d correction(s)", source or "<template>", len(words), len(corrections)
    )
    return corrections


def check_template(
    template: str,
    source: str,
    oracle: OracleLike,
    on_correction: Optional[Callable[[Correction], None]] = None,
    on_done: Optional[Callable[[], None]] = None,
    config: Optional[SpellcheckConfig] = None,
) -> List[Correction]:
    """
    Spell-check a template, passing each correction to `on_correction`.

    Args:
        template: Template source text
        source: Origin identifier copied into every correction
        oracle: Verdict source
        on_correction: Per-correction callback (completion order)
        on_done: Called once when every word has a verdict
        config: Settings (defaults if None)

    Returns:
        Corrections in completion order

    Raises:
        TemplateParseError: If the template cannot be parsed
        OracleError: If the oracle fails
    """
    return check_statements(
        parse_template(template),
        source,
        oracle,
        on_correction=on_correction,
        on_done=on_done,
        config=config,
    )


def build_oracle(config: SpellcheckConfig) -> WordListOracle:
    """Word-list oracle from the configured dictionaries and extra words."""
    return load_dictionaries(config.dictionaries, extra_words=config.extra_words)


__all__ = [
    "parse",
    "all_words",
    "build_oracle",
    "check_statements",
    "check_template",
    "words_from_statements",
]
