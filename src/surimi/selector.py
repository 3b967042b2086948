# CSS selector tokenizer for Surimi
# Produces the same token stream as the parsel tokenizer for valid selectors

from __future__ import annotations

from typing import TYPE_CHECKING

from .errors import generate_error_message
from .tokens import (
    AttributeToken,
    ClassToken,
    CombinatorToken,
    CommaToken,
    IdToken,
    PseudoClassToken,
    PseudoElementToken,
    TokenKind,
    TypeToken,
    UniversalToken,
)

if TYPE_CHECKING:
    from collections.abc import Iterable

    from .tokens import Token


WHITESPACE: frozenset[str] = frozenset(" \t\n\r\f")
COMBINATORS: frozenset[str] = frozenset(">+~")
QUOTES: frozenset[str] = frozenset("\"'")
CASE_FLAGS: frozenset[str] = frozenset("iIsS")


class SelectorError(ValueError):
    """Raised when a CSS selector is invalid."""

    code: str
    position: int
    selector: str
    message: str

    def __init__(self, code: str, position: int, selector: str, detail: str | None = None) -> None:
        self.code = code
        self.position = position
        self.selector = selector
        self.message = generate_error_message(code, detail)
        super().__init__(f"{self.message} at position {position} in selector {selector!r}")


def _is_word_char(ch: str) -> bool:
    return ch != "" and ch.isascii() and (ch.isalnum() or ch == "_")


def _is_name_char(ch: str) -> bool:
    # ASCII word characters, hyphen, or anything outside ASCII
    return ch != "" and (_is_word_char(ch) or ch == "-" or not ch.isascii())


class SelectorTokenizer:
    """Tokenizes a CSS selector string into tokens."""

    __slots__ = ("length", "pos", "selector")

    selector: str
    pos: int
    length: int

    def __init__(self, selector: str) -> None:
        self.selector = selector
        self.pos = 0
        self.length = len(selector)

    def _peek(self, offset: int = 0) -> str:
        pos = self.pos + offset
        if pos < self.length:
            return self.selector[pos]
        return ""

    def _error(self, code: str, detail: str | None = None, position: int | None = None) -> SelectorError:
        return SelectorError(code, self.pos if position is None else position, self.selector, detail)

    def _skip_whitespace(self) -> None:
        while self.pos < self.length and self.selector[self.pos] in WHITESPACE:
            self.pos += 1

    def _starts_name(self, offset: int = 0) -> bool:
        ch = self._peek(offset)
        return _is_name_char(ch) or (ch == "\\" and self._peek(offset + 1) != "")

    def _read_name(self) -> str:
        start = self.pos
        while self.pos < self.length:
            ch = self.selector[self.pos]
            if ch == "\\" and self.pos + 1 < self.length:
                # Escaped character stays verbatim in the name
                self.pos += 2
            elif _is_name_char(ch):
                self.pos += 1
            else:
                break
        return self.selector[start : self.pos]

    def _skip_string(self, quote: str) -> None:
        start = self.pos
        self.pos += 1
        while self.pos < self.length:
            ch = self.selector[self.pos]
            if ch == "\\":
                self.pos += 2
                continue
            self.pos += 1
            if ch == quote:
                return
        raise self._error("unterminated-string", position=start)

    def _read_argument(self, owner: str) -> str:
        # Consumes "(" ... ")" with nesting; quoted parens do not count
        open_pos = self.pos
        self.pos += 1
        start = self.pos
        depth = 1
        while self.pos < self.length:
            ch = self.selector[self.pos]
            if ch in QUOTES:
                self._skip_string(ch)
                continue
            if ch == "(":
                depth += 1
            elif ch == ")":
                depth -= 1
                if depth == 0:
                    argument = self.selector[start : self.pos]
                    self.pos += 1
                    return argument
            self.pos += 1
        raise self._error("unclosed-parenthesis", owner, position=open_pos)

    def _read_namespace_prefix(self) -> str | None:
        """Consume ``*|`` or ``|`` when a name or ``*`` follows the bar."""
        if self._peek() == "*" and self._peek(1) == "|" and (self._starts_name(2) or self._peek(2) == "*"):
            self.pos += 2
            return "*"
        if self._peek() == "|" and (self._starts_name(1) or self._peek(1) == "*"):
            self.pos += 1
            return ""
        return None

    def _read_type_or_universal(self) -> Token:
        start = self.pos
        namespace = self._read_namespace_prefix()

        if namespace is None and self._starts_name():
            name = self._read_name()
            # ns|name or ns|*
            if self._peek() == "|" and (self._starts_name(1) or self._peek(1) == "*"):
                namespace = name
                self.pos += 1
            else:
                return TypeToken(name, None, self.selector[start : self.pos])

        if self._peek() == "*":
            self.pos += 1
            return UniversalToken(namespace, self.selector[start : self.pos])

        name = self._read_name()
        return TypeToken(name, namespace, self.selector[start : self.pos])

    def _read_attribute(self) -> AttributeToken:
        start = self.pos
        self.pos += 1
        self._skip_whitespace()

        namespace: str | None = None
        if self._peek() == "*" and self._peek(1) == "|" and self._starts_name(2):
            namespace = "*"
            self.pos += 2
        elif self._peek() == "|" and self._starts_name(1):
            namespace = ""
            self.pos += 1

        name = self._read_name()
        if not name:
            raise self._error("expected-attribute-name")

        # [ns|name], but not the |= operator
        if namespace is None and self._peek() == "|" and self._starts_name(1):
            namespace = name
            self.pos += 1
            name = self._read_name()

        self._skip_whitespace()

        operator: str | None = None
        value: str | None = None
        case_sensitive: str | None = None

        ch = self._peek()
        if ch != "]":
            if ch == "=":
                operator = "="
                self.pos += 1
            elif ch == "":
                raise self._error("unterminated-attribute", position=start)
            elif not _is_word_char(ch) and self._peek(1) == "=":
                operator = ch + "="
                self.pos += 2
            elif _is_word_char(ch):
                raise self._error("unexpected-character", ch)
            else:
                raise self._error("invalid-attribute-operator", ch)

            self._skip_whitespace()

            # Value runs to the closing bracket; brackets inside quotes don't count
            value_start = self.pos
            while self.pos < self.length and self.selector[self.pos] != "]":
                if self.selector[self.pos] in QUOTES:
                    self._skip_string(self.selector[self.pos])
                else:
                    self.pos += 1
            if self.pos >= self.length:
                raise self._error("unterminated-attribute", position=start)

            raw = self.selector[value_start : self.pos].rstrip()
            if len(raw) >= 3 and raw[-1] in CASE_FLAGS and raw[-2] in WHITESPACE:
                case_sensitive = raw[-1]
                raw = raw[:-2].rstrip()
            if not raw:
                raise self._error("expected-attribute-value", position=value_start)
            value = raw

        self.pos += 1
        return AttributeToken(name, namespace, operator, value, case_sensitive, self.selector[start : self.pos])

    def _read_pseudo(self) -> Token:
        start = self.pos
        is_element = self._peek(1) == ":"
        self.pos += 2 if is_element else 1

        name = self._read_name()
        if not name:
            raise self._error("expected-pseudo-element-name" if is_element else "expected-pseudo-class-name")

        argument: str | None = None
        if self._peek() == "(":
            argument = self._read_argument(self.selector[start : self.pos])

        content = self.selector[start : self.pos]
        if is_element:
            return PseudoElementToken(name, argument, content)
        return PseudoClassToken(name, argument, content)

    def tokenize(self) -> list[Token]:
        tokens: list[Token] = []

        while self.pos < self.length:
            ch = self.selector[self.pos]

            # Commas and combinators absorb the whitespace around them; a
            # whitespace run on its own is the descendant combinator.
            if ch in WHITESPACE or ch in COMBINATORS or ch == ",":
                self._skip_whitespace()
                ch = self._peek()
                if ch == ",":
                    self.pos += 1
                    self._skip_whitespace()
                    tokens.append(CommaToken(","))
                elif ch in COMBINATORS:
                    self.pos += 1
                    self._skip_whitespace()
                    tokens.append(CombinatorToken(ch))
                else:
                    tokens.append(CombinatorToken(CombinatorToken.DESCENDANT))
                continue

            # ID selector
            if ch == "#":
                start = self.pos
                self.pos += 1
                name = self._read_name()
                if not name:
                    raise self._error("expected-id-name")
                tokens.append(IdToken(name, self.selector[start : self.pos]))
                continue

            # Class selector
            if ch == ".":
                start = self.pos
                self.pos += 1
                name = self._read_name()
                if not name:
                    raise self._error("expected-class-name")
                tokens.append(ClassToken(name, self.selector[start : self.pos]))
                continue

            if ch == "[":
                tokens.append(self._read_attribute())
                continue

            if ch == ":":
                tokens.append(self._read_pseudo())
                continue

            # Type and universal selectors, optionally namespaced
            if ch in ("*", "|") or self._starts_name():
                start = self.pos
                token = self._read_type_or_universal()
                if self.pos == start:
                    raise self._error("unexpected-character", ch)
                tokens.append(token)
                continue

            raise self._error("unexpected-character", ch)

        return tokens


def tokenize_selector(selector: str) -> list[Token]:
    """Tokenize a CSS selector (or selector list) into tokens.

    Surrounding whitespace is ignored and an empty selector yields no tokens.
    Raises SelectorError on input that cannot be tokenized; its position
    indexes into ``selector`` as given, leading whitespace included.
    """
    tokenizer = SelectorTokenizer(selector)
    tokenizer.pos = len(selector) - len(selector.lstrip())
    tokenizer.length = len(selector.rstrip())
    return tokenizer.tokenize()


def _normalize(token: Token) -> str:
    if token.kind == TokenKind.COMBINATOR:
        symbol = token.content.strip()
        # Descendant combinator stays a single space
        if not symbol:
            return " "
        return f" {symbol} "
    if token.kind == TokenKind.COMMA:
        return ", "
    return token.content


def stringify_selector(tokens: Iterable[Token]) -> str:
    """Serialize selector tokens, normalizing spacing around combinators and commas."""
    return "".join(_normalize(token) for token in tokens)


def normalize_selector(selector: str) -> str:
    return stringify_selector(tokenize_selector(selector))


def split_selector_list(tokens: Iterable[Token]) -> list[list[Token]]:
    """Split a token stream at its commas into one token list per complex selector.

    Empty groups (from leading, trailing or doubled commas) are dropped.
    """
    groups: list[list[Token]] = []
    current: list[Token] = []
    for token in tokens:
        if token.kind == TokenKind.COMMA:
            if current:
                groups.append(current)
            current = []
        else:
            current.append(token)
    if current:
        groups.append(current)
    return groups


def join_selector_list(groups: Iterable[list[Token]]) -> list[Token]:
    """Inverse of split_selector_list: interleave comma tokens between groups."""
    tokens: list[Token] = []
    for group in groups:
        if tokens:
            tokens.append(CommaToken(","))
        tokens.extend(group)
    return tokens
