# CSS at-rule prelude tokenizer for Surimi
# Covers the text between an at-keyword and its opening brace, e.g.
# "@media screen and (min-width: 768px)" or "@import url(base.css) layer(theme)"

from __future__ import annotations

from typing import TYPE_CHECKING

from .tokens import (
    AtRuleNameToken,
    DelimiterToken,
    DimensionToken,
    FunctionToken,
    HashToken,
    IdentifierToken,
    NumberToken,
    OperatorToken,
    PercentageToken,
    StringToken,
    UrlToken,
)

if TYPE_CHECKING:
    from collections.abc import Iterable

    from .tokens import Token


WHITESPACE: frozenset[str] = frozenset(" \t\n\r")
DELIMITERS: frozenset[str] = frozenset("(),:/")
COMPARISON_START: frozenset[str] = frozenset("<>=")
QUOTES: frozenset[str] = frozenset("\"'")


def _is_digit(ch: str) -> bool:
    return ch != "" and "0" <= ch <= "9"


def _is_identifier_start(ch: str) -> bool:
    # ASCII letters, hyphen and underscore only
    return ch != "" and ("a" <= ch <= "z" or "A" <= ch <= "Z" or ch == "-" or ch == "_")


def _is_identifier_char(ch: str) -> bool:
    return _is_identifier_start(ch) or _is_digit(ch)


class AtRuleTokenizer:
    """Tokenizes an at-rule prelude into tokens.

    The scan never fails: characters outside the grammar are dropped and an
    unterminated string or parenthesis simply runs to the end of the input.
    """

    __slots__ = ("length", "pos", "prelude")

    prelude: str
    pos: int
    length: int

    def __init__(self, prelude: str) -> None:
        self.prelude = prelude
        self.pos = 0
        self.length = len(prelude)

    def _peek(self, offset: int = 0) -> str:
        pos = self.pos + offset
        if pos < self.length:
            return self.prelude[pos]
        return ""

    def _skip_whitespace(self) -> None:
        while self.pos < self.length and self.prelude[self.pos] in WHITESPACE:
            self.pos += 1

    def _read_identifier(self) -> str:
        start = self.pos
        while self.pos < self.length and _is_identifier_char(self.prelude[self.pos]):
            self.pos += 1
        return self.prelude[start : self.pos]

    def _starts_number(self) -> bool:
        ch = self._peek()
        if _is_digit(ch):
            return True
        return ch in ("-", "+", ".") and _is_digit(self._peek(1))

    def _read_number(self) -> int | float:
        start = self.pos
        if self._peek() in ("-", "+"):
            self.pos += 1

        while _is_digit(self._peek()):
            self.pos += 1

        # A dot only belongs to the number when a digit follows it
        has_fraction = False
        if self._peek() == "." and _is_digit(self._peek(1)):
            has_fraction = True
            self.pos += 1
            while _is_digit(self._peek()):
                self.pos += 1

        text = self.prelude[start : self.pos]
        return float(text) if has_fraction else int(text)

    def _read_quoted(self, quote: str) -> str:
        # Returns the string with its quotes; escapes are kept verbatim
        start = self.pos
        self.pos += 1
        escaped = False

        while self.pos < self.length:
            ch = self.prelude[self.pos]
            self.pos += 1
            if escaped:
                escaped = False
            elif ch == "\\":
                escaped = True
            elif ch == quote:
                break

        return self.prelude[start : self.pos]

    def _read_argument(self) -> str:
        """Read up to the parenthesis closing the one just consumed.

        Nesting is tracked with a depth counter; parentheses inside quoted
        strings do not count. The closing parenthesis is consumed but not
        returned.
        """
        start = self.pos
        depth = 1
        in_string: str | None = None
        escaped = False

        while self.pos < self.length:
            ch = self.prelude[self.pos]
            self.pos += 1

            if in_string is not None:
                if escaped:
                    escaped = False
                elif ch == "\\":
                    escaped = True
                elif ch == in_string:
                    in_string = None
            elif ch in QUOTES:
                in_string = ch
            elif ch == "(":
                depth += 1
            elif ch == ")":
                depth -= 1
                if depth == 0:
                    return self.prelude[start : self.pos - 1]

        # Unterminated; re-tokenizing the content closes only the outer "("
        return self.prelude[start : self.pos]

    def tokenize(self) -> list[Token]:
        tokens: list[Token] = []

        while self.pos < self.length:
            ch = self.prelude[self.pos]

            # Whitespace separates tokens but is never emitted
            if ch in WHITESPACE:
                self._skip_whitespace()
                continue

            # At-rule name: @media, @-webkit-keyframes
            if ch == "@":
                self.pos += 1
                name = self._read_identifier()
                tokens.append(AtRuleNameToken(name, f"@{name}"))
                continue

            # Quoted string, quotes included in the value
            if ch in QUOTES:
                value = self._read_quoted(ch)
                tokens.append(StringToken(value, value))
                continue

            # Hash: #fff, #main
            if ch == "#":
                self.pos += 1
                value = self._read_identifier()
                tokens.append(HashToken(value, f"#{value}"))
                continue

            # Numbers, dimensions and percentages. Checked before identifiers
            # since "-" also starts an identifier.
            if self._starts_number():
                start = self.pos
                number = self._read_number()
                if _is_identifier_start(self._peek()):
                    unit = self._read_identifier()
                    tokens.append(DimensionToken(number, unit, self.prelude[start : self.pos]))
                elif self._peek() == "%":
                    self.pos += 1
                    tokens.append(PercentageToken(number, self.prelude[start : self.pos]))
                else:
                    tokens.append(NumberToken(number, self.prelude[start : self.pos]))
                continue

            if _is_identifier_start(ch):
                value = self._read_identifier()

                # Logical keywords are never function names, even before "("
                if value in OperatorToken.LOGICAL:
                    tokens.append(OperatorToken(value, value))
                    continue

                self._skip_whitespace()
                if self._peek() == "(":
                    self.pos += 1
                    argument = self._read_argument()
                    if value == "url":
                        tokens.append(UrlToken(argument.strip(), f"url({argument})"))
                    else:
                        tokens.append(FunctionToken(value, argument, f"{value}({argument})"))
                    continue

                tokens.append(IdentifierToken(value, value))
                continue

            # Comparison operators: >=, <=, =, <, >
            if ch in COMPARISON_START:
                self.pos += 1
                operator = ch
                if ch != "=" and self._peek() == "=":
                    self.pos += 1
                    operator += "="
                tokens.append(OperatorToken(operator, operator))
                continue

            if ch in DELIMITERS:
                self.pos += 1
                tokens.append(DelimiterToken(ch, ch))
                continue

            # Anything else is dropped
            self.pos += 1

        return tokens


def tokenize_at_rule(prelude: str) -> list[Token]:
    """Tokenize an at-rule prelude such as ``"@media (min-width: 768px)"``.

    Never raises; unknown characters are skipped.
    """
    return AtRuleTokenizer(prelude).tokenize()


def stringify_at_rule(tokens: Iterable[Token]) -> str:
    """Join token contents with single spaces.

    This normalizes spacing rather than restoring it byte for byte:
    ``(min-width: 768px)`` comes back as ``( min-width : 768px )``.
    """
    return " ".join(token.content for token in tokens)
