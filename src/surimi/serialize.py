"""CSS serialization for stylesheet nodes."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

import tinycss2

if TYPE_CHECKING:
    from collections.abc import Iterable

_BLOCK_DELIMITERS = {"() block": ("(", ")"), "[] block": ("[", "]"), "{} block": ("{", "}")}


def serialize_values(nodes: Iterable[Any]) -> str:
    """Serialize component values exactly as tokenized.

    Unlike ``tinycss2.serialize`` this never inserts ``/**/`` between
    adjacent tokens, so ``nth-child(2n+1)`` comes back unchanged.
    """
    parts: list[str] = []
    for node in nodes:
        if node.type == "function":
            parts.append(f"{tinycss2.serialize_identifier(node.name)}({serialize_values(node.arguments)})")
        elif node.type in _BLOCK_DELIMITERS:
            start, end = _BLOCK_DELIMITERS[node.type]
            parts.append(f"{start}{serialize_values(node.content)}{end}")
        else:
            parts.append(node.serialize())
    return "".join(parts)


def serialize_declaration(node: Any) -> str:
    value = serialize_values(node.value).strip()
    if node.important:
        value = f"{value} !important"
    return f"{node.name}: {value};"


def serialize_prelude(node: Any) -> str:
    return serialize_values(node.prelude).strip()


def to_css(nodes: Iterable[Any], indent_size: int = 4) -> str:
    """Convert stylesheet nodes to a CSS string.

    Top-level rules are separated by a blank line; nested blocks are indented
    by ``indent_size`` spaces per level.
    """
    return "\n\n".join(_node_to_css(node, 0, indent_size) for node in nodes)


def _node_to_css(node: Any, indent: int = 0, indent_size: int = 4) -> str:
    """Helper to convert a node to CSS."""
    prefix = " " * (indent * indent_size)

    if node.type == "declaration":
        return f"{prefix}{serialize_declaration(node)}"

    if node.type == "qualified-rule":
        head = serialize_prelude(node)
    elif node.type == "at-rule":
        prelude = serialize_prelude(node)
        head = f"@{node.at_keyword} {prelude}" if prelude else f"@{node.at_keyword}"
        # Statement at-rules (@import, @charset) have no block
        if node.content is None:
            return f"{prefix}{head};"
    else:
        raise TypeError(f"Cannot serialize {node.type} node")

    parts = [f"{prefix}{head} {{"]
    for child in node.content:
        parts.append(_node_to_css(child, indent + 1, indent_size))
    parts.append(f"{prefix}}}")
    return "\n".join(parts)
