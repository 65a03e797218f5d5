"""
Character classification for the IMP tokenizer.

Every character belongs to exactly one class:

    white   space, tab, newline, carriage return, form-feed, NUL
    alpha   ASCII letters
    digit   ASCII digits
    other   everything else (operators, punctuation, non-ASCII)

The predicates below are independent of each other but always agree with
`classify()`.
"""

from typing import Literal

CharClass = Literal["white", "alpha", "digit", "other"]

WHITE: CharClass = "white"
ALPHA: CharClass = "alpha"
DIGIT: CharClass = "digit"
OTHER: CharClass = "other"

WHITESPACE = frozenset(" \t\n\r\f\0")
DELIMITERS = frozenset("()")


def is_white(ch: str) -> bool:
    """Separators: space, tab, newline, carriage return, form-feed and NUL."""
    return ch in WHITESPACE


def is_lower_alpha(ch: str) -> bool:
    """`a` to `z`; identifiers are made of these."""
    return "a" <= ch <= "z"


def is_upper_alpha(ch: str) -> bool:
    """`A` to `Z`; keywords such as `WHILE` are made of these."""
    return "A" <= ch <= "Z"


def is_alpha(ch: str) -> bool:
    """ASCII letters only; `str.isalpha` would accept any Unicode letter."""
    return is_lower_alpha(ch) or is_upper_alpha(ch)


def is_digit(ch: str) -> bool:
    """ASCII digits only; `str.isdigit` would accept superscripts."""
    return "0" <= ch <= "9"


def is_delimiter(ch: str) -> bool:
    """Parentheses always form single-character tokens."""
    return ch in DELIMITERS


def classify(ch: str) -> CharClass:
    """Returns the class of a single character.

    Args:
        ch (str): A one-character string.

    Returns:
        CharClass: One of "white", "alpha", "digit" or "other".
    """
    if is_white(ch):
        return WHITE
    if is_alpha(ch):
        return ALPHA
    if is_digit(ch):
        return DIGIT
    return OTHER


__all__ = [
    "ALPHA",
    "DIGIT",
    "OTHER",
    "WHITE",
    "CharClass",
    "classify",
    "is_alpha",
    "is_delimiter",
    "is_digit",
    "is_lower_alpha",
    "is_upper_alpha",
    "is_white",
]
