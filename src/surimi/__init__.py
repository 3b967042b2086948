from .at_rule import AtRuleTokenizer, stringify_at_rule, tokenize_at_rule
from .builder import SelectorBuilder
from .compiler import (
    BuildCache,
    BuildError,
    CompileOptions,
    CompileResult,
    CompilerError,
    ExecutionError,
    compile_file,
    watch,
)
from .selector import (
    SelectorError,
    SelectorTokenizer,
    normalize_selector,
    stringify_selector,
    tokenize_selector,
)
from .serialize import to_css
from .stylesheet import Stylesheet, StyleError
from .tokens import Token, TokenKind

__all__ = [
    "AtRuleTokenizer",
    "BuildCache",
    "BuildError",
    "CompileOptions",
    "CompileResult",
    "CompilerError",
    "ExecutionError",
    "SelectorBuilder",
    "SelectorError",
    "SelectorTokenizer",
    "StyleError",
    "Stylesheet",
    "Token",
    "TokenKind",
    "compile_file",
    "normalize_selector",
    "stringify_at_rule",
    "stringify_selector",
    "to_css",
    "tokenize_at_rule",
    "tokenize_selector",
    "watch",
]
