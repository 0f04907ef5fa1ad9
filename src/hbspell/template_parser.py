"""
Template Parser (Raw Input → statement tree).

Converts Handlebars-style template text to a Template of StatementNodes.

Syntax Notes:
    - {{expr}}, {{{expr}}}, {{&expr}}     → Mustache
    - {{! text}}, {{!-- text --}}         → Comment
    - {{> name}}                          → Partial
    - {{#name ...}} ... {{/name}}         → Block (program branch)
    - {{else}} / {{^}} inside a block     → switches to the other branch
    - {{else if x}}                       → nested Block in the inverse branch
    - {{^name}} ... {{/name}}             → Block with only an inverse branch
    - "~" whitespace control              → accepted, ignored
    - \\{{ ... }}                          → literal text

Literal text keeps its original characters. Lines are 1-based and
columns are 0-based.
"""

from __future__ import annotations

import bisect
import re
from dataclasses import dataclass
from typing import List, Tuple

from hbspell.model import Block, Comment, Content, Mustache, Partial, StatementNode, Template


class TemplateParseError(Exception):
    """Raised when template parsing fails."""

    def __init__(self, message: str, line: int, column: int):
        super().__init__(f"{message} (line {line}, column {column})")
        self.line = line
        self.column = column


_ELSE_RE = re.compile(r"^else(?:\s+(.*))?$", re.S)
_NAME_RE = re.compile(r"^\s*([^\s}]+)")


@dataclass
class _Tag:
    """One {{...}} occurrence."""
    kind: str      # "mustache", "raw", "comment", "open", "inverse", "else", "close", "partial"
    body: str
    start: int
    end: int


@dataclass
class _Frame:
    """An open block being filled."""
    block: Block
    tag: _Tag
    in_inverse: bool = False
    chained: bool = False

    def target(self) -> List[StatementNode]:
        if self.in_inverse:
            if self.block.inverse is None:
                self.block.inverse = []
            return self.block.inverse
        if self.block.program is None:
            self.block.program = []
        return self.block.program


class _Locator:
    """Maps string offsets to (line, column)."""

    def __init__(self, text: str):
        self._line_starts = [0] + [m.end() for m in re.finditer(r"\n", text)]

    def __call__(self, offset: int) -> Tuple[int, int]:
        index = bisect.bisect_right(self._line_starts, offset) - 1
        return index + 1, offset - self._line_starts[index]


def _tag_name(body: str) -> str:
    match = _NAME_RE.match(body)
    return match.group(1) if match else ""


def _scan_tag(template: str, start: int, locate: _Locator) -> _Tag:
    """Scan the mustache starting at `start` (which points at "{{")."""
    pos = start + 2
    if template.startswith("~", pos):
        pos += 1

    if template.startswith("!--", pos):
        close = re.compile(r"--~?\}\}")
        kind = "comment"
        pos += 3
    elif template.startswith("!", pos):
        close = re.compile(r"~?\}\}")
        kind = "comment"
        pos += 1
    elif template.startswith("{", pos):
        close = re.compile(r"\}~?\}\}")
        kind = "raw"
        pos += 1
    else:
        close = re.compile(r"~?\}\}")
        kind = "mustache"

    match = close.search(template, pos)
    if match is None:
        line, column = locate(start)
        raise TemplateParseError("Unclosed mustache", line, column)

    body = template[pos:match.start()]
    if kind == "mustache":
        kind, body = _classify_mustache(body.strip())
    return _Tag(kind=kind, body=body.strip(), start=start, end=match.end())


def _classify_mustache(body: str) -> Tuple[str, str]:
    if body.startswith("#"):
        return "open", body[1:].lstrip("*>")
    if body == "^":
        return "else", ""
    if body.startswith("^"):
        return "inverse", body[1:]
    if body.startswith("/"):
        return "close", body[1:]
    if body.startswith(">"):
        return "partial", body[1:]
    if body.startswith("&"):
        return "raw", body[1:]
    match = _ELSE_RE.match(body)
    if match:
        return "else", (match.group(1) or "").strip()
    return "mustache", body


def _tokenize(template: str, locate: _Locator) -> List[object]:
    """Split a template into Content nodes and _Tag objects."""
    items: List[object] = []
    pos = 0
    text_start = 0
    while True:
        start = template.find("{{", pos)
        if start < 0:
            break

        # \{{ escapes a mustache: the backslash is dropped, the mustache is text.
        if start > 0 and template[start - 1] == "\\":
            if start - 1 > text_start:
                line, column = locate(text_start)
                items.append(Content(text=template[text_start:start - 1], line=line, column=column))
            text_start = start
            end = template.find("}}", start)
            pos = len(template) if end < 0 else end + 2
            continue

        if start > text_start:
            line, column = locate(text_start)
            items.append(Content(text=template[text_start:start], line=line, column=column))

        tag = _scan_tag(template, start, locate)
        items.append(tag)
        pos = text_start = tag.end

    if text_start < len(template):
        line, column = locate(text_start)
        items.append(Content(text=template[text_start:], line=line, column=column))
    return items


def parse_template(template: str) -> Template:
    """
    Parse template text into a statement tree.

    Args:
        template: Template source

    Returns:
        Template whose statements are in document order

    Raises:
        TemplateParseError: On unclosed mustaches or unbalanced blocks
    """
    locate = _Locator(template)
    root: List[StatementNode] = []
    stack: List[_Frame] = []

    def target() -> List[StatementNode]:
        return stack[-1].target() if stack else root

    for item in _tokenize(template, locate):
        if isinstance(item, Content):
            target().append(item)
            continue

        tag: _Tag = item
        line, column = locate(tag.start)

        if tag.kind in ("open", "inverse"):
            block = Block(name=_tag_name(tag.body), line=line, column=column)
            target().append(block)
            stack.append(_Frame(block=block, tag=tag, in_inverse=(tag.kind == "inverse")))

        elif tag.kind == "else":
            if not stack:
                raise TemplateParseError("{{else}} outside of a block", line, column)
            frame = stack[-1]
            # {{^x}}A{{else}}B{{/x}}: B is the program branch
            frame.in_inverse = frame.tag.kind != "inverse"
            if tag.body:
                # {{else if x}}: the rest of the chain lives in a nested block
                block = Block(name=_tag_name(tag.body), line=line, column=column)
                frame.target().append(block)
                stack.append(_Frame(block=block, tag=tag, chained=True))

        elif tag.kind == "close":
            name = _tag_name(tag.body)
            if not stack:
                raise TemplateParseError(f"Unexpected close tag '{name}'", line, column)
            while stack[-1].chained:
                stack.pop()
            frame = stack.pop()
            if frame.block.name != name:
                raise TemplateParseError(
                    f"'{frame.block.name}' doesn't match '{name}'", line, column
                )

        elif tag.kind == "comment":
            target().append(Comment(text=tag.body, line=line, column=column))

        elif tag.kind == "partial":
            target().append(Partial(name=_tag_name(tag.body), line=line, column=column))

        else:
            target().append(
                Mustache(expression=tag.body, raw=(tag.kind == "raw"), line=line, column=column)
            )

    if stack:
        frame = stack[0]
        line, column = locate(frame.tag.start)
        raise TemplateParseError(f"Unclosed block '{frame.block.name}'", line, column)

    return Template(statements=root)


__all__ = [
    "parse_template",
    "TemplateParseError",
]
