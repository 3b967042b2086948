"""Fluent selector builder.

Every chaining step returns a new ``SelectorBuilder`` bound to the same
``Stylesheet``; only ``style`` mutates anything, and it mutates the
stylesheet rather than the builder.

    sheet = Stylesheet()
    button = sheet.select(".button").style(color="white")
    button.hover().style(background_color="navy")
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

from .selector import join_selector_list, split_selector_list, stringify_selector, tokenize_selector
from .tokens import CombinatorToken, PseudoClassToken, PseudoElementToken

if TYPE_CHECKING:
    from collections.abc import Mapping

    from .stylesheet import AtRulePath, Stylesheet
    from .tokens import Token


class SelectorBuilder:
    __slots__ = ("at_rules", "stylesheet", "tokens")

    tokens: list[Token]
    stylesheet: Stylesheet
    at_rules: AtRulePath

    def __init__(self, tokens: list[Token], stylesheet: Stylesheet, at_rules: AtRulePath = ()) -> None:
        self.tokens = tokens
        self.stylesheet = stylesheet
        self.at_rules = at_rules

    def __repr__(self) -> str:
        return f"<SelectorBuilder {self.selector!r}>"

    @property
    def selector(self) -> str:
        return stringify_selector(self.tokens)

    def _derive(self, tokens: list[Token] | None = None, at_rules: AtRulePath | None = None) -> SelectorBuilder:
        return SelectorBuilder(
            self.tokens if tokens is None else tokens,
            self.stylesheet,
            self.at_rules if at_rules is None else at_rules,
        )

    def _append(self, *tokens: Token) -> SelectorBuilder:
        # Simple selectors attach to every complex selector in the list
        groups = split_selector_list(self.tokens) or [[]]
        return self._derive(join_selector_list(group + list(tokens) for group in groups))

    def _combine(self, combinator: str | None, selector: str) -> SelectorBuilder:
        targets = split_selector_list(tokenize_selector(selector))
        if not targets:
            return self
        groups = split_selector_list(self.tokens)
        if not groups:
            return self._derive(join_selector_list(targets))

        link = [] if combinator is None else [CombinatorToken(combinator)]
        return self._derive(join_selector_list(group + link + target for group in groups for target in targets))

    # ------------------------------------------------------------------
    # Declarations
    # ------------------------------------------------------------------

    def style(self, properties: Mapping[str, Any] | None = None, /, **kwargs: Any) -> SelectorBuilder:
        """Append declarations to the rule for this selector.

        Accepts a mapping (for names that are not valid Python identifiers,
        like ``--accent``) and/or keyword arguments; keywords win on clashes.
        """
        rule = self.stylesheet.rule(self.selector, self.at_rules)
        self.stylesheet.declare(rule, {**(properties or {}), **kwargs})
        return self

    def build(self) -> str:
        return self.stylesheet.build()

    # ------------------------------------------------------------------
    # Pseudo-classes
    # ------------------------------------------------------------------

    def pseudo_class(self, name: str, argument: str | None = None) -> SelectorBuilder:
        return self._append(PseudoClassToken(name, argument))

    def hover(self) -> SelectorBuilder:
        return self.pseudo_class("hover")

    def focus(self) -> SelectorBuilder:
        return self.pseudo_class("focus")

    def active(self) -> SelectorBuilder:
        return self.pseudo_class("active")

    def disabled(self) -> SelectorBuilder:
        return self.pseudo_class("disabled")

    def visited(self) -> SelectorBuilder:
        return self.pseudo_class("visited")

    def checked(self) -> SelectorBuilder:
        return self.pseudo_class("checked")

    def first_child(self) -> SelectorBuilder:
        return self.pseudo_class("first-child")

    def last_child(self) -> SelectorBuilder:
        return self.pseudo_class("last-child")

    def nth_child(self, expression: str | int) -> SelectorBuilder:
        return self.pseudo_class("nth-child", str(expression).strip())

    def not_(self, selector: str) -> SelectorBuilder:
        # Tokenizing validates the argument before it is embedded
        return self.pseudo_class("not", stringify_selector(tokenize_selector(selector)))

    # ------------------------------------------------------------------
    # Pseudo-elements
    # ------------------------------------------------------------------

    def pseudo_element(self, name: str, argument: str | None = None) -> SelectorBuilder:
        return self._append(PseudoElementToken(name, argument))

    def before(self) -> SelectorBuilder:
        return self.pseudo_element("before")

    def after(self) -> SelectorBuilder:
        return self.pseudo_element("after")

    def placeholder(self) -> SelectorBuilder:
        return self.pseudo_element("placeholder")

    # ------------------------------------------------------------------
    # Navigation
    # ------------------------------------------------------------------

    def child(self, selector: str) -> SelectorBuilder:
        return self._combine(CombinatorToken.CHILD, selector)

    def descendant(self, selector: str) -> SelectorBuilder:
        return self._combine(CombinatorToken.DESCENDANT, selector)

    def adjacent(self, selector: str) -> SelectorBuilder:
        return self._combine(CombinatorToken.ADJACENT, selector)

    def sibling(self, selector: str) -> SelectorBuilder:
        return self._combine(CombinatorToken.SIBLING, selector)

    def join(self, selector: str) -> SelectorBuilder:
        """Compound with ``selector``: ``.button`` joined with ``.primary`` is ``.button.primary``."""
        return self._combine(None, selector)

    def and_(self, *selectors: str) -> SelectorBuilder:
        """Extend the selector list: ``.a`` and ``.b`` styles ``.a, .b``."""
        groups = split_selector_list(self.tokens)
        for selector in selectors:
            groups.extend(split_selector_list(tokenize_selector(selector)))
        return self._derive(join_selector_list(groups))

    # ------------------------------------------------------------------
    # At-rules
    # ------------------------------------------------------------------

    def at_rule(self, name: str, prelude: str) -> SelectorBuilder:
        """Nest the rules this builder writes inside ``@name prelude``."""
        return self._derive(at_rules=(*self.at_rules, (name, prelude)))

    def media(self, query: str) -> SelectorBuilder:
        return self.at_rule("media", query)

    def container(self, query: str) -> SelectorBuilder:
        return self.at_rule("container", query)

    def supports(self, condition: str) -> SelectorBuilder:
        return self.at_rule("supports", condition)

    def layer(self, name: str) -> SelectorBuilder:
        return self.at_rule("layer", name)
