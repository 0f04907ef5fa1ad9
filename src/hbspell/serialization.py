"""
Serialization helpers for statement trees, word tokens and corrections.

Statement trees go through an intermediate dict representation that also
accepts the JSON AST an external Handlebars parser produces, so a tree
parsed elsewhere can be fed straight into the extractor.
"""
from __future__ import annotations

import json
from typing import Any, Dict, List, Optional, Sequence

import yaml

from hbspell.model import (
    Block,
    Comment,
    Content,
    Correction,
    Mustache,
    Partial,
    StatementNode,
    Template,
    WordToken,
)


_CONTENT_TYPES = {"content", "ContentStatement"}
_BLOCK_TYPES = {"block", "BlockStatement", "DecoratorBlock", "PartialBlockStatement"}


def _position(d: Dict[str, Any]) -> tuple:
    loc = d.get("loc") or {}
    start = loc.get("start") or {}
    line = d.get("firstLine", d.get("line", start.get("line", 1)))
    column = d.get("firstColumn", d.get("column", start.get("column", 0)))
    return line, column


def _statements(d: Any) -> Optional[List[StatementNode]]:
    if d is None:
        return None
    raw = d.get("statements", d.get("body", [])) if isinstance(d, dict) else d
    nodes = [statement_from_dict(s) for s in raw]
    return [n for n in nodes if n is not None]


def statement_to_dict(node: StatementNode) -> Dict[str, Any]:
    if isinstance(node, Content):
        return {"type": "content", "original": node.text, "firstLine": node.line, "firstColumn": node.column}
    if isinstance(node, Block):
        return {
            "type": "block",
            "name": node.name,
            "program": None if node.program is None else {"statements": [statement_to_dict(s) for s in node.program]},
            "inverse": None if node.inverse is None else {"statements": [statement_to_dict(s) for s in node.inverse]},
            "firstLine": node.line,
            "firstColumn": node.column,
        }
    if isinstance(node, Mustache):
        return {"type": "mustache", "expression": node.expression, "raw": node.raw,
                "firstLine": node.line, "firstColumn": node.column}
    if isinstance(node, Comment):
        return {"type": "comment", "value": node.text, "firstLine": node.line, "firstColumn": node.column}
    if isinstance(node, Partial):
        return {"type": "partial", "name": node.name, "firstLine": node.line, "firstColumn": node.column}
    raise TypeError(f"Unsupported statement type: {type(node)}")


def statement_from_dict(d: Any) -> Optional[StatementNode]:
    """
    Build a statement node from its dict form.

    Unknown node types give None: an unfamiliar tree shape is dropped,
    never an error.
    """
    if not isinstance(d, dict):
        return None
    t = d.get("type")
    line, column = _position(d)
    if t in _CONTENT_TYPES:
        text = d.get("original", d.get("value", ""))
        return Content(text=text, line=line, column=column)
    if t in _BLOCK_TYPES:
        name = d.get("name", d.get("path"))
        if isinstance(name, dict):
            name = name.get("original")
        return Block(
            program=_statements(d.get("program")),
            inverse=_statements(d.get("inverse")),
            name=name,
            line=line,
            column=column,
        )
    if t == "mustache":
        return Mustache(expression=d.get("expression", ""), raw=bool(d.get("raw")), line=line, column=column)
    if t == "comment":
        return Comment(text=d.get("value", ""), line=line, column=column)
    if t == "partial":
        return Partial(name=d.get("name", ""), line=line, column=column)
    return None


def template_to_dict(t: Template) -> Dict[str, Any]:
    return {"type": "program", "statements": [statement_to_dict(s) for s in t.statements]}


def template_from_dict(d: Dict[str, Any]) -> Template:
    return Template(statements=_statements(d) or [])


def template_to_json(t: Template) -> str:
    return json.dumps(template_to_dict(t), sort_keys=True)


def template_from_json(s: str) -> Template:
    return template_from_dict(json.loads(s))


def token_to_dict(w: WordToken) -> Dict[str, Any]:
    return {"word": w.word, "line": w.line, "column": w.column, "source": w.source}


def correction_to_dict(c: Correction) -> Dict[str, Any]:
    return {
        "original": c.original,
        "suggestions": list(c.suggestions),
        "line": c.line,
        "column": c.column,
        "source": c.source,
    }


def tokens_to_json(words: Sequence[WordToken]) -> str:
    return json.dumps([token_to_dict(w) for w in words], sort_keys=True)


def tokens_to_yaml(words: Sequence[WordToken]) -> str:
    return yaml.safe_dump([token_to_dict(w) for w in words])


def corrections_to_json(corrections: Sequence[Correction]) -> str:
    return json.dumps([correction_to_dict(c) for c in corrections], sort_keys=True)


def corrections_to_yaml(corrections: Sequence[Correction]) -> str:
    return yaml.safe_dump([correction_to_dict(c) for c in corrections])
