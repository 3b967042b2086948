"""Centralized error message definitions for selector and style errors.

This module maps the error codes raised by the selector tokenizer and the
stylesheet builder to human-readable messages.
"""

from __future__ import annotations


def generate_error_message(code: str, detail: str | None = None) -> str:
    """Generate human-readable error message from error code.

    Args:
        code: The error code string (kebab-case format)
        detail: Optional text to include in the message for context
            (the offending character, property or at-rule name)

    Returns:
        Human-readable error message string
    """
    messages = {
        # ================================================================
        # SELECTOR TOKENIZER ERRORS
        # ================================================================
        "unexpected-character": f"Unexpected character {detail!r}",
        "expected-id-name": "Expected identifier after #",
        "expected-class-name": "Expected identifier after .",
        "expected-pseudo-class-name": "Expected pseudo-class name after :",
        "expected-pseudo-element-name": "Expected pseudo-element name after ::",
        "expected-attribute-name": "Expected attribute name after [",
        "invalid-attribute-operator": f"Expected = after {detail} in attribute selector",
        "expected-attribute-value": "Expected a value after the attribute operator",
        "unterminated-attribute": "Expected ] to close attribute selector",
        "unterminated-string": "Unterminated string",
        "unclosed-parenthesis": f"Expected ) to close the argument of {detail}",
        # ================================================================
        # STYLESHEET ERRORS
        # ================================================================
        "invalid-declaration": f"Invalid declaration for property {detail!r}",
        "invalid-property-value": f"Unsupported value for property {detail!r}",
        "mismatched-at-rule": f"Prelude names a different at-rule than @{detail}",
        "empty-selector": "Cannot style an empty selector",
    }

    # Return message or fall back to the code itself if not found
    return messages.get(code, code)
