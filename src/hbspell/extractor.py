"""
Text Extractor — template tree → fragment sequence.

Walks a parsed template and keeps only its literal text. Template-logic
blocks are dropped, but the text in their branches is still visited, in
document order, depth-first.

Every Content node is announced by a PositionMarker before its characters,
so the tokenizer can re-synchronize line/column at each block boundary,
even when a block splits an HTML tag in two.

IMPORTANT: Unknown node shapes produce no fragments. Extraction never fails.
"""

from __future__ import annotations

import logging
from collections import deque
from enum import Enum
from typing import Iterable, Iterator, List, Sequence, Union

from hbspell.model import Block, Content, Fragment, PositionMarker, StatementNode, Template

logger = logging.getLogger(__name__)


class BranchOrder(Enum):
    """
    Order in which a block's two branches are visited.

    DOCUMENT visits the primary branch, then the alternate ("else") branch,
    which is the order they appear in the source.

    ALTERNATE_FIRST visits the alternate branch before the primary branch.
    """

    DOCUMENT = "document"
    ALTERNATE_FIRST = "alternate-first"


def _branches(block: Block, order: BranchOrder) -> List[StatementNode]:
    primary = list(block.program or [])
    alternate = list(block.inverse or [])
    if order is BranchOrder.ALTERNATE_FIRST:
        return alternate + primary
    return primary + alternate


def iter_fragments(
    statements: Union[Template, Sequence[StatementNode]],
    branch_order: BranchOrder = BranchOrder.DOCUMENT,
) -> Iterator[Fragment]:
    """
    Lazily yield the fragment sequence for a template.

    Args:
        statements: A Template or its top-level statement list
        branch_order: How to order a block's branches

    Yields:
        PositionMarker before each Content node, then one str per character
    """
    if isinstance(statements, Template):
        statements = statements.statements

    # Work list: front is the next node in document order.
    work = deque(statements)
    while work:
        node = work.popleft()

        if isinstance(node, Content):
            yield PositionMarker(line=node.line, column=node.column)
            yield from node.text

        elif isinstance(node, Block):
            # Children go before the block's following siblings.
            work.extendleft(reversed(_branches(node, branch_order)))

        else:
            logger.debug("Skipping non-text node %s", type(node).__name__)


def extract_text(
    statements: Union[Template, Sequence[StatementNode]],
    branch_order: BranchOrder = BranchOrder.DOCUMENT,
) -> List[Fragment]:
    """
    Extract all literal text from a parsed template.

    HTML tags are left intact; a tag interrupted by a block is split, with a
    PositionMarker at the start of each piece. Roughly equivalent to deleting
    everything between {{ and }} from the original source.

    Args:
        statements: A Template or its top-level statement list
        branch_order: How to order a block's branches

    Returns:
        Ordered list of fragments
    """
    return list(iter_fragments(statements, branch_order=branch_order))


def fragments_from_text(text: str, line: int = 1, column: int = 0) -> Iterable[Fragment]:
    """Fragment sequence for a plain string starting at (line, column)."""
    yield PositionMarker(line=line, column=column)
    yield from text
