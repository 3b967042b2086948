"""Stylesheet accumulator shared by every builder created from it."""

from __future__ import annotations

import re
from typing import TYPE_CHECKING, Any

import tinycss2
from tinycss2.ast import AtRule, QualifiedRule

from .at_rule import stringify_at_rule, tokenize_at_rule
from .builder import SelectorBuilder
from .errors import generate_error_message
from .selector import join_selector_list, normalize_selector, tokenize_selector
from .serialize import serialize_prelude, serialize_values, to_css
from .tokens import TokenKind

if TYPE_CHECKING:
    from collections.abc import Iterator, Mapping

    from tinycss2.ast import Node

# (at-keyword, prelude) pairs, outermost first
AtRulePath = tuple[tuple[str, str], ...]

_UPPER = re.compile(r"([A-Z])")


class StyleError(ValueError):
    """Raised when a declaration or at-rule cannot be added to a stylesheet."""

    code: str
    message: str

    def __init__(self, code: str, detail: str | None = None) -> None:
        self.code = code
        self.message = generate_error_message(code, detail)
        super().__init__(self.message)


def format_property_name(name: str) -> str:
    """Convert ``backgroundColor`` or ``background_color`` to ``background-color``.

    Custom properties (``--name``) are returned unchanged.
    """
    if name.startswith("--"):
        return name
    return _UPPER.sub(r"-\1", name.replace("_", "-")).lower()


def format_property_value(name: str, value: Any) -> str:
    if isinstance(value, bool):
        raise StyleError("invalid-property-value", name)
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value)


def _normalize_prelude(name: str, prelude: str) -> tuple[str, str]:
    """Return (text, key) for an at-rule prelude.

    ``text`` is the author's prelude with whitespace collapsed, used for
    output. ``key`` is the token-normalized form used to merge at-rules that
    differ only in spacing or quoting. A leading ``@name`` is accepted when
    it matches.
    """
    text = prelude.strip()
    tokens = tokenize_at_rule(text)
    if tokens and tokens[0].kind == TokenKind.AT_RULE_NAME:
        if tokens[0].name.lower() != name.lower():
            raise StyleError("mismatched-at-rule", name)
        text = text[len(tokens[0].content) :]
    text = " ".join(text.split())
    return text, _prelude_key(tinycss2.parse_component_value_list(text))


def _prelude_key(values: list[Node]) -> str:
    # Keys are always taken after a tinycss2 round trip, which rewrites quotes
    return stringify_at_rule(tokenize_at_rule(serialize_values(values)))


def _selector_key(selector: str) -> str:
    return serialize_values(tinycss2.parse_component_value_list(selector)).strip()


class Stylesheet:
    """An ordered collection of CSS rules and at-rules.

    Builders never own rules; every ``SelectorBuilder`` created through
    ``select`` appends to the stylesheet it was created from.
    """

    __slots__ = ("nodes",)

    nodes: list[Node]

    def __init__(self) -> None:
        self.nodes = []

    def __repr__(self) -> str:
        return f"<Stylesheet {len(self.nodes)} nodes>"

    def select(self, *selectors: str) -> SelectorBuilder:
        """Start a builder for one or more selectors (joined as a selector list)."""
        groups = []
        for selector in selectors:
            tokens = tokenize_selector(selector)
            if tokens:
                groups.append(tokens)
        return SelectorBuilder(join_selector_list(groups), self)

    # ------------------------------------------------------------------
    # AST construction
    # ------------------------------------------------------------------

    def _container(self, at_rules: AtRulePath) -> list[Node]:
        container = self.nodes
        for name, prelude in at_rules:
            container = self._find_or_create_at_rule(container, name, prelude).content
        return container

    def _find_or_create_at_rule(self, container: list[Node], name: str, prelude: str) -> AtRule:
        text, key = _normalize_prelude(name, prelude)
        lower_name = name.lower()
        for node in container:
            if (
                node.type == "at-rule"
                and node.content is not None
                and node.lower_at_keyword == lower_name
                and _prelude_key(node.prelude) == key
            ):
                return node

        node = AtRule(0, 0, name, lower_name, tinycss2.parse_component_value_list(text), [])
        container.append(node)
        return node

    def _find_or_create_rule(self, container: list[Node], prelude: str) -> QualifiedRule:
        key = _selector_key(prelude)
        for node in container:
            if node.type == "qualified-rule" and serialize_prelude(node) == key:
                return node

        node = QualifiedRule(0, 0, tinycss2.parse_component_value_list(prelude), [])
        container.append(node)
        return node

    def rule(self, selector: str, at_rules: AtRulePath = ()) -> QualifiedRule:
        """Return the rule for ``selector`` inside ``at_rules``, creating it if needed."""
        normalized = normalize_selector(selector)
        if not normalized:
            raise StyleError("empty-selector")
        return self._find_or_create_rule(self._container(at_rules), normalized)

    def declare(self, node: QualifiedRule | AtRule, properties: Mapping[str, Any]) -> None:
        """Append one declaration per property to a rule, in mapping order.

        ``None`` values are skipped.
        """
        for key, value in properties.items():
            if value is None:
                continue
            name = format_property_name(key)
            declaration = tinycss2.parse_one_declaration(
                f"{name}: {format_property_value(name, value)}", skip_comments=True
            )
            if declaration.type == "error":
                raise StyleError("invalid-declaration", name)
            node.content.append(declaration)

    def at_rule(
        self,
        name: str,
        prelude: str = "",
        properties: Mapping[str, Any] | None = None,
        /,
        **kwargs: Any,
    ) -> AtRule:
        """Add a declaration block at-rule such as ``@font-face`` or ``@page :first``."""
        node = self._find_or_create_at_rule(self.nodes, name, prelude)
        self.declare(node, {**(properties or {}), **kwargs})
        return node

    def statement(self, name: str, prelude: str = "") -> AtRule:
        """Add a block-less at-rule such as ``@import url(base.css)`` or ``@layer a, b``."""
        text, _ = _normalize_prelude(name, prelude)
        node = AtRule(0, 0, name, name.lower(), tinycss2.parse_component_value_list(text), None)
        self.nodes.append(node)
        return node

    def keyframes(self, name: str, frames: Mapping[str, Mapping[str, Any]]) -> AtRule:
        """Add ``@keyframes name`` with one block per frame selector (``from``, ``50%``...)."""
        node = self._find_or_create_at_rule(self.nodes, "keyframes", name)
        for selector, properties in frames.items():
            frame = self._find_or_create_rule(node.content, " ".join(str(selector).split()))
            self.declare(frame, properties)
        return node

    # ------------------------------------------------------------------
    # Output
    # ------------------------------------------------------------------

    def build(self, indent_size: int = 4) -> str:
        return to_css(self.nodes, indent_size)

    def clear(self) -> None:
        self.nodes.clear()

    def __iter__(self) -> Iterator[Node]:
        return iter(self.nodes)

    def __len__(self) -> int:
        return len(self.nodes)
