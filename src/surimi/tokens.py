from __future__ import annotations

from typing import Any, ClassVar


class TokenKind:
    # At-rule prelude grammar
    AT_RULE_NAME: str = "at-rule-name"  # @media
    IDENTIFIER: str = "identifier"  # screen, min-width
    FUNCTION: str = "function"  # rotate(45deg)
    STRING: str = "string"  # "UTF-8"
    NUMBER: str = "number"  # 16
    DIMENSION: str = "dimension"  # 768px
    PERCENTAGE: str = "percentage"  # 50%
    OPERATOR: str = "operator"  # and, or, not, >=, <=, =, <, >
    DELIMITER: str = "delimiter"  # ( ) , : /
    HASH: str = "hash"  # #fff
    URL: str = "url"  # url(base.css)
    UNKNOWN: str = "unknown"

    # Selector grammar
    TYPE: str = "type"  # div, svg|rect
    UNIVERSAL: str = "universal"  # *
    ID: str = "id"  # #foo
    CLASS: str = "class"  # .bar
    ATTRIBUTE: str = "attribute"  # [href="x" i]
    PSEUDO_CLASS: str = "pseudo-class"  # :hover, :nth-child(2)
    PSEUDO_ELEMENT: str = "pseudo-element"  # ::before
    COMBINATOR: str = "combinator"  # " ", >, +, ~
    COMMA: str = "comma"  # ,


class Token:
    """Base class for the lexical tokens of both CSS sub-grammars.

    Tokens are immutable value objects. Two tokens compare equal when they
    share a kind and every payload field, ``content`` included. ``content``
    holds the source text the token was read from (or the canonical text to
    emit for tokens built by hand).
    """

    __slots__ = ("content",)

    kind: ClassVar[str] = ""
    _fields: ClassVar[tuple[str, ...]] = ()

    content: str

    def __init__(self, content: str) -> None:
        self._assign(content)

    def _assign(self, content: str, **values: Any) -> None:
        for name, value in values.items():
            object.__setattr__(self, name, value)
        object.__setattr__(self, "content", content)

    def __setattr__(self, name: str, value: Any) -> None:
        raise AttributeError(f"{type(self).__name__} is immutable")

    def __delattr__(self, name: str) -> None:
        raise AttributeError(f"{type(self).__name__} is immutable")

    def _values(self) -> tuple[Any, ...]:
        return tuple(getattr(self, name) for name in self._fields) + (self.content,)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Token):
            return NotImplemented
        return self.kind == other.kind and self._values() == other._values()

    def __hash__(self) -> int:
        return hash((self.kind, self._values()))

    def __repr__(self) -> str:
        parts = [f"{name}={getattr(self, name)!r}" for name in self._fields if getattr(self, name) is not None]
        parts.append(f"content={self.content!r}")
        return f"{type(self).__name__}({', '.join(parts)})"

    def to_dict(self) -> dict[str, Any]:
        """Return a JSON-friendly mapping, leaving out unset optional fields."""
        data: dict[str, Any] = {"type": self.kind}
        for name in self._fields:
            value = getattr(self, name)
            if value is not None:
                data[name] = value
        data["content"] = self.content
        return data


def _format_number(value: int | float) -> str:
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value)


# ---------------------------------------------------------------------------
# At-rule prelude tokens
# ---------------------------------------------------------------------------


class AtRuleNameToken(Token):
    __slots__ = ("name",)

    kind = TokenKind.AT_RULE_NAME
    _fields = ("name",)

    name: str

    def __init__(self, name: str, content: str | None = None) -> None:
        self._assign(f"@{name}" if content is None else content, name=name)


class IdentifierToken(Token):
    __slots__ = ("value",)

    kind = TokenKind.IDENTIFIER
    _fields = ("value",)

    value: str

    def __init__(self, value: str, content: str | None = None) -> None:
        self._assign(value if content is None else content, value=value)


class FunctionToken(Token):
    __slots__ = ("argument", "name")

    kind = TokenKind.FUNCTION
    _fields = ("name", "argument")

    name: str
    argument: str

    def __init__(self, name: str, argument: str, content: str | None = None) -> None:
        self._assign(f"{name}({argument})" if content is None else content, name=name, argument=argument)


class StringToken(Token):
    __slots__ = ("value",)

    kind = TokenKind.STRING
    _fields = ("value",)

    value: str  # quotes included

    def __init__(self, value: str, content: str | None = None) -> None:
        self._assign(value if content is None else content, value=value)


class NumberToken(Token):
    __slots__ = ("value",)

    kind = TokenKind.NUMBER
    _fields = ("value",)

    value: int | float

    def __init__(self, value: int | float, content: str | None = None) -> None:
        self._assign(_format_number(value) if content is None else content, value=value)


class DimensionToken(Token):
    __slots__ = ("unit", "value")

    kind = TokenKind.DIMENSION
    _fields = ("value", "unit")

    value: int | float
    unit: str

    def __init__(self, value: int | float, unit: str, content: str | None = None) -> None:
        self._assign(f"{_format_number(value)}{unit}" if content is None else content, value=value, unit=unit)


class PercentageToken(Token):
    __slots__ = ("value",)

    kind = TokenKind.PERCENTAGE
    _fields = ("value",)

    value: int | float

    def __init__(self, value: int | float, content: str | None = None) -> None:
        self._assign(f"{_format_number(value)}%" if content is None else content, value=value)


class OperatorToken(Token):
    __slots__ = ("operator",)

    kind = TokenKind.OPERATOR
    _fields = ("operator",)

    LOGICAL: ClassVar[frozenset[str]] = frozenset({"and", "or", "not"})
    COMPARISON: ClassVar[frozenset[str]] = frozenset({">=", "<=", "=", "<", ">"})

    operator: str

    def __init__(self, operator: str, content: str | None = None) -> None:
        self._assign(operator if content is None else content, operator=operator)


class DelimiterToken(Token):
    __slots__ = ("delimiter",)

    kind = TokenKind.DELIMITER
    _fields = ("delimiter",)

    delimiter: str

    def __init__(self, delimiter: str, content: str | None = None) -> None:
        self._assign(delimiter if content is None else content, delimiter=delimiter)


class HashToken(Token):
    __slots__ = ("value",)

    kind = TokenKind.HASH
    _fields = ("value",)

    value: str  # without the leading #

    def __init__(self, value: str, content: str | None = None) -> None:
        self._assign(f"#{value}" if content is None else content, value=value)


class UrlToken(Token):
    __slots__ = ("value",)

    kind = TokenKind.URL
    _fields = ("value",)

    value: str

    def __init__(self, value: str, content: str | None = None) -> None:
        self._assign(f"url({value})" if content is None else content, value=value)


class UnknownToken(Token):
    """Fallback for characters outside the grammar. The tokenizers never emit it."""

    __slots__ = ()

    kind = TokenKind.UNKNOWN


AtRuleToken = (
    AtRuleNameToken
    | IdentifierToken
    | FunctionToken
    | StringToken
    | NumberToken
    | DimensionToken
    | PercentageToken
    | OperatorToken
    | DelimiterToken
    | HashToken
    | UrlToken
    | UnknownToken
)


# ---------------------------------------------------------------------------
# Selector tokens
# ---------------------------------------------------------------------------


def _namespaced(namespace: str | None, name: str) -> str:
    if namespace is None:
        return name
    return f"{namespace}|{name}"


class TypeToken(Token):
    __slots__ = ("name", "namespace")

    kind = TokenKind.TYPE
    _fields = ("name", "namespace")

    name: str
    namespace: str | None

    def __init__(self, name: str, namespace: str | None = None, content: str | None = None) -> None:
        self._assign(_namespaced(namespace, name) if content is None else content, name=name, namespace=namespace)


class UniversalToken(Token):
    __slots__ = ("namespace",)

    kind = TokenKind.UNIVERSAL
    _fields = ("namespace",)

    namespace: str | None

    def __init__(self, namespace: str | None = None, content: str | None = None) -> None:
        self._assign(_namespaced(namespace, "*") if content is None else content, namespace=namespace)


class IdToken(Token):
    __slots__ = ("name",)

    kind = TokenKind.ID
    _fields = ("name",)

    name: str

    def __init__(self, name: str, content: str | None = None) -> None:
        self._assign(f"#{name}" if content is None else content, name=name)


class ClassToken(Token):
    __slots__ = ("name",)

    kind = TokenKind.CLASS
    _fields = ("name",)

    name: str

    def __init__(self, name: str, content: str | None = None) -> None:
        self._assign(f".{name}" if content is None else content, name=name)


class AttributeToken(Token):
    __slots__ = ("case_sensitive", "name", "namespace", "operator", "value")

    kind = TokenKind.ATTRIBUTE
    _fields = ("name", "namespace", "operator", "value", "case_sensitive")

    name: str
    namespace: str | None
    operator: str | None
    value: str | None  # quotes included when the source quoted it
    case_sensitive: str | None  # i, I, s or S

    def __init__(
        self,
        name: str,
        namespace: str | None = None,
        operator: str | None = None,
        value: str | None = None,
        case_sensitive: str | None = None,
        content: str | None = None,
    ) -> None:
        if content is None:
            parts = ["[", _namespaced(namespace, name)]
            if operator is not None:
                parts.extend([operator, value or ""])
                if case_sensitive is not None:
                    parts.extend([" ", case_sensitive])
            parts.append("]")
            content = "".join(parts)
        self._assign(
            content,
            name=name,
            namespace=namespace,
            operator=operator,
            value=value,
            case_sensitive=case_sensitive,
        )


class _PseudoToken(Token):
    __slots__ = ("argument", "name")

    _fields = ("name", "argument")

    PREFIX: ClassVar[str] = ""

    name: str
    argument: str | None

    def __init__(self, name: str, argument: str | None = None, content: str | None = None) -> None:
        if content is None:
            content = f"{self.PREFIX}{name}" if argument is None else f"{self.PREFIX}{name}({argument})"
        self._assign(content, name=name, argument=argument)


class PseudoClassToken(_PseudoToken):
    __slots__ = ()

    kind = TokenKind.PSEUDO_CLASS

    PREFIX = ":"


class PseudoElementToken(_PseudoToken):
    __slots__ = ()

    kind = TokenKind.PSEUDO_ELEMENT

    PREFIX = "::"


class CombinatorToken(Token):
    __slots__ = ()

    kind = TokenKind.COMBINATOR

    DESCENDANT: ClassVar[str] = " "
    CHILD: ClassVar[str] = ">"
    ADJACENT: ClassVar[str] = "+"
    SIBLING: ClassVar[str] = "~"

    def __init__(self, content: str = " ") -> None:
        self._assign(content)


class CommaToken(Token):
    __slots__ = ()

    kind = TokenKind.COMMA

    def __init__(self, content: str = ",") -> None:
        self._assign(content)


SelectorToken = (
    TypeToken
    | UniversalToken
    | IdToken
    | ClassToken
    | AttributeToken
    | PseudoClassToken
    | PseudoElementToken
    | CombinatorToken
    | CommaToken
)
