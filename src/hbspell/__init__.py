"""
Handlebars Spellcheck (hbspell) Package

Locates the natural-language text embedded in Handlebars templates and
yields located words for spell-checking.

PIPELINE:
---------
    template text
        → statement tree      (template_parser)
        → fragment sequence   (extractor)
        → word tokens         (tokenizer)
        → corrections         (matching, against an external oracle)

The extractor and tokenizer are pure, single-pass and never fail on input.
Only the oracle-matching stage can fail, and it fails the whole batch.
"""

from .model import (
    Block,
    Comment,
    Content,
    Correction,
    Mustache,
    Partial,
    PositionMarker,
    Template,
    WordToken,
)
from .extractor import BranchOrder, extract_text
from .tokenizer import tokenize
from .matching import OracleError, SpellOracle, find_corrections
from .template_parser import TemplateParseError, parse_template
from .pipeline import all_words, check_statements, check_template, parse

__version__ = "0.1.0"

__all__ = [
    "Block",
    "BranchOrder",
    "Comment",
    "Content",
    "Correction",
    "Mustache",
    "OracleError",
    "Partial",
    "PositionMarker",
    "SpellOracle",
    "Template",
    "TemplateParseError",
    "WordToken",
    "all_words",
    "check_statements",
    "check_template",
    "extract_text",
    "find_corrections",
    "parse",
    "parse_template",
    "tokenize",
]
