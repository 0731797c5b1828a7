"""Serialization of tokens and AST nodes to JSON-compatible dicts."""

from __future__ import annotations

import dataclasses
import json

from .ast import Node
from .tokens import Token


def serialize(obj: object) -> object:
    """Recursively serialize an object to a JSON-compatible structure."""
    if obj is None:
        return None
    if isinstance(obj, (bool, int, float, str)):
        return obj
    if isinstance(obj, (list, tuple)):
        return [serialize(x) for x in obj]
    if isinstance(obj, Token):
        return {"_type": "Token", "kind": obj.kind, "lexeme": obj.lexeme, "line": obj.line}
    if isinstance(obj, Node):
        d: dict[str, object] = {"_type": type(obj).__name__}
        for f in dataclasses.fields(obj):
            d[f.name] = serialize(getattr(obj, f.name))
        return d
    raise TypeError("cannot serialize " + type(obj).__name__)


def to_json(obj: object) -> str:
    """Serialize object to pretty-printed JSON."""
    return json.dumps(serialize(obj), indent=2, ensure_ascii=False)
