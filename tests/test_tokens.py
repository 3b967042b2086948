import pytest

from surimi.tokens import (
    AttributeToken,
    CombinatorToken,
    DimensionToken,
    FunctionToken,
    NumberToken,
    PseudoClassToken,
    PseudoElementToken,
    TokenKind,
    TypeToken,
    UniversalToken,
)


def test_tokens_are_immutable():
    token = TypeToken("div")
    with pytest.raises(AttributeError):
        token.name = "span"
    with pytest.raises(AttributeError):
        del token.content


def test_equality_includes_kind_and_content():
    assert TypeToken("div") == TypeToken("div", None, "div")
    assert TypeToken("div") != TypeToken("div", None, "DIV")
    assert PseudoClassToken("before") != PseudoElementToken("before")
    assert len({TypeToken("a"), TypeToken("a"), TypeToken("b")}) == 2


def test_default_content_is_canonical():
    assert UniversalToken("svg").content == "svg|*"
    assert AttributeToken("lang", operator="|=", value="en", case_sensitive="i").content == "[lang|=en i]"
    assert PseudoClassToken("nth-child", "2n+1").content == ":nth-child(2n+1)"
    assert PseudoElementToken("after").content == "::after"
    assert FunctionToken("rotate", "45deg").content == "rotate(45deg)"
    assert DimensionToken(2.0, "rem").content == "2rem"
    assert NumberToken(0.25).content == "0.25"


def test_kinds():
    assert CombinatorToken().kind == TokenKind.COMBINATOR
    assert CombinatorToken().content == CombinatorToken.DESCENDANT
    assert AttributeToken("x").kind == "attribute"


def test_repr_omits_unset_fields():
    assert repr(TypeToken("div")) == "TypeToken(name='div', content='div')"
    assert repr(CombinatorToken(">")) == "CombinatorToken(content='>')"


def test_to_dict():
    assert DimensionToken(768, "px").to_dict() == {"type": "dimension", "value": 768, "unit": "px", "content": "768px"}
    assert PseudoClassToken("hover").to_dict() == {"type": "pseudo-class", "name": "hover", "content": ":hover"}
