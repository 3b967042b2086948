import pytest

from surimi.selector import (
    SelectorError,
    SelectorTokenizer,
    join_selector_list,
    normalize_selector,
    split_selector_list,
    stringify_selector,
    tokenize_selector,
)
from surimi.tokens import (
    AttributeToken,
    ClassToken,
    CombinatorToken,
    CommaToken,
    IdToken,
    PseudoClassToken,
    PseudoElementToken,
    TypeToken,
    UniversalToken,
)


# ---------------------------------------------------------------------------
# Token streams matching the parsel tokenizer
# ---------------------------------------------------------------------------


def test_class_tokens():
    assert tokenize_selector("div.class.another") == [
        TypeToken("div"),
        ClassToken("class"),
        ClassToken("another"),
    ]


def test_id_tokens():
    assert tokenize_selector("span#uniqueId") == [TypeToken("span"), IdToken("uniqueId")]


def test_attribute_tokens():
    assert tokenize_selector('a[href="https://example.com"][target="_blank"]') == [
        TypeToken("a"),
        AttributeToken("href", operator="=", value='"https://example.com"'),
        AttributeToken("target", operator="=", value='"_blank"'),
    ]


def test_pseudo_class_tokens():
    assert tokenize_selector("button:disabled:hover") == [
        TypeToken("button"),
        PseudoClassToken("disabled"),
        PseudoClassToken("hover"),
    ]


def test_pseudo_element_tokens():
    assert tokenize_selector("p::first-line") == [TypeToken("p"), PseudoElementToken("first-line")]


def test_complex_selector_tokens():
    assert tokenize_selector("div#container > ul.items li.item:first-child::before") == [
        TypeToken("div"),
        IdToken("container"),
        CombinatorToken(">"),
        TypeToken("ul"),
        ClassToken("items"),
        CombinatorToken(" "),
        TypeToken("li"),
        ClassToken("item"),
        PseudoClassToken("first-child"),
        PseudoElementToken("before"),
    ]


def test_token_dicts_use_parsel_field_names():
    assert [token.to_dict() for token in tokenize_selector("a.b > [c~=d i]")] == [
        {"type": "type", "name": "a", "content": "a"},
        {"type": "class", "name": "b", "content": ".b"},
        {"type": "combinator", "content": ">"},
        {
            "type": "attribute",
            "name": "c",
            "operator": "~=",
            "value": "d",
            "case_sensitive": "i",
            "content": "[c~=d i]",
        },
    ]


# ---------------------------------------------------------------------------
# Individual token kinds
# ---------------------------------------------------------------------------


def test_universal_and_namespaces():
    assert tokenize_selector("*") == [UniversalToken()]
    assert tokenize_selector("svg|rect") == [TypeToken("rect", "svg")]
    assert tokenize_selector("*|a") == [TypeToken("a", "*")]
    assert tokenize_selector("|a") == [TypeToken("a", "")]
    assert tokenize_selector("ns|*") == [UniversalToken("ns")]


@pytest.mark.parametrize("operator", ["=", "~=", "|=", "^=", "$=", "*="])
def test_attribute_operators(operator):
    (token,) = tokenize_selector(f"[lang{operator}en]")
    assert token.name == "lang"
    assert token.operator == operator
    assert token.value == "en"
    assert token.case_sensitive is None


def test_attribute_presence_and_spacing():
    assert tokenize_selector("[disabled]") == [AttributeToken("disabled")]
    (token,) = tokenize_selector('[ title = "a ] b" s ]')
    assert token.value == '"a ] b"'
    assert token.case_sensitive == "s"
    assert token.content == '[ title = "a ] b" s ]'


def test_attribute_namespace():
    (token,) = tokenize_selector("[xlink|href]")
    assert token.namespace == "xlink"
    assert token.name == "href"
    (token,) = tokenize_selector("[lang|=en]")
    assert token.namespace is None
    assert token.operator == "|="


def test_pseudo_arguments_keep_nesting():
    tokens = tokenize_selector("li:not(.a, :is(.b, .c)):nth-child(2n+1)")
    assert tokens[1] == PseudoClassToken("not", ".a, :is(.b, .c)")
    assert tokens[2] == PseudoClassToken("nth-child", "2n+1")


def test_pseudo_argument_with_quoted_parenthesis():
    (token,) = tokenize_selector(':contains(")")')
    assert token.argument == '")"'


def test_pseudo_element_argument():
    (token,) = tokenize_selector("::part(label)")
    assert token == PseudoElementToken("part", "label")


def test_escaped_identifiers_are_kept_verbatim():
    assert tokenize_selector(r".md\:flex") == [ClassToken(r"md\:flex")]


def test_non_ascii_names():
    assert tokenize_selector(".café") == [ClassToken("café")]


# ---------------------------------------------------------------------------
# Combinators and commas
# ---------------------------------------------------------------------------


@pytest.mark.parametrize(
    ("selector", "combinator"),
    [("a>b", ">"), ("a > b", ">"), ("a+b", "+"), ("a  ~  b", "~"), ("a \n\t b", " ")],
)
def test_combinators_absorb_whitespace(selector, combinator):
    assert tokenize_selector(selector) == [TypeToken("a"), CombinatorToken(combinator), TypeToken("b")]


def test_commas_absorb_whitespace():
    assert tokenize_selector("a ,  b") == [TypeToken("a"), CommaToken(), TypeToken("b")]


def test_surrounding_whitespace_is_ignored():
    assert tokenize_selector("  .a  ") == [ClassToken("a")]


def test_empty_selector():
    assert tokenize_selector("") == []
    assert tokenize_selector("   ") == []
    assert stringify_selector([]) == ""


def test_dangling_combinators_are_tokenized():
    assert tokenize_selector("> a") == [CombinatorToken(">"), TypeToken("a")]
    assert tokenize_selector("a,") == [TypeToken("a"), CommaToken()]


# ---------------------------------------------------------------------------
# Errors
# ---------------------------------------------------------------------------


@pytest.mark.parametrize(
    ("selector", "code", "position"),
    [
        ("a!", "unexpected-character", 1),
        ("#", "expected-id-name", 1),
        ("a.", "expected-class-name", 2),
        ("a:", "expected-pseudo-class-name", 2),
        ("a::", "expected-pseudo-element-name", 3),
        ("[]", "expected-attribute-name", 1),
        ("[a=b", "unterminated-attribute", 0),
        ("[a", "unterminated-attribute", 0),
        ("[a=]", "expected-attribute-value", 3),
        ("[a b]", "unexpected-character", 3),
        ("[a!b]", "invalid-attribute-operator", 2),
        (":not(a", "unclosed-parenthesis", 4),
        ('[a="b]', "unterminated-string", 3),
        ("a|", "unexpected-character", 1),
    ],
)
def test_invalid_selectors_raise(selector, code, position):
    with pytest.raises(SelectorError) as excinfo:
        tokenize_selector(selector)
    assert excinfo.value.code == code
    assert excinfo.value.position == position
    assert excinfo.value.selector == selector


def test_error_position_counts_leading_whitespace():
    with pytest.raises(SelectorError) as excinfo:
        tokenize_selector("  a!  ")
    assert excinfo.value.position == 3
    assert excinfo.value.selector == "  a!  "


def test_selector_error_message():
    with pytest.raises(SelectorError, match=r"Unexpected character '!' at position 1 in selector 'a!'"):
        tokenize_selector("a!")


def test_selector_error_is_a_value_error():
    with pytest.raises(ValueError):
        tokenize_selector("a{")


# ---------------------------------------------------------------------------
# Stringify
# ---------------------------------------------------------------------------


@pytest.mark.parametrize(
    ("selector", "expected"),
    [
        ("a>b", "a > b"),
        ("a   b", "a b"),
        ("a,b ,  c", "a, b, c"),
        ("ul  +li~p", "ul + li ~ p"),
        ("div#main.content[data-x='1']:hover::after", "div#main.content[data-x='1']:hover::after"),
        (":is(a,b)>c", ":is(a,b) > c"),
    ],
)
def test_stringify_normalizes_spacing(selector, expected):
    assert normalize_selector(selector) == expected


@pytest.mark.parametrize(
    "selector",
    [
        "div.class.another",
        'a[href="https://example.com"][target="_blank"]',
        "div#container > ul.items li.item:first-child::before",
        "svg|rect, *|a,|b",
        ".a:not(.b,.c)+.d ~ .e",
        "[ title = 'x' i ]  >  p",
    ],
)
def test_stringify_is_idempotent(selector):
    once = normalize_selector(selector)
    assert normalize_selector(once) == once


def test_stringify_hand_built_tokens():
    tokens = [TypeToken("nav"), CombinatorToken(">"), ClassToken("item"), PseudoClassToken("nth-child", "2")]
    assert stringify_selector(tokens) == "nav > .item:nth-child(2)"


# ---------------------------------------------------------------------------
# Selector lists
# ---------------------------------------------------------------------------


def test_split_and_join_selector_list():
    groups = split_selector_list(tokenize_selector("a > b, .c,, d"))
    assert [stringify_selector(group) for group in groups] == ["a > b", ".c", "d"]
    assert stringify_selector(join_selector_list(groups)) == "a > b, .c, d"


def test_split_empty():
    assert split_selector_list([]) == []
    assert join_selector_list([]) == []


def test_tokenizer_class_does_not_strip():
    assert SelectorTokenizer("a ").tokenize() == [TypeToken("a"), CombinatorToken(" ")]
