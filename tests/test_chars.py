import pytest
from hypothesis import given
from hypothesis import strategies as st

from implang.imp_chars import (
    ALPHA,
    DIGIT,
    OTHER,
    WHITE,
    classify,
    is_alpha,
    is_delimiter,
    is_digit,
    is_lower_alpha,
    is_white,
)


@pytest.mark.parametrize("ch", [" ", "\t", "\n", "\r", "\f", "\0"])  # type: ignore[misc]
def test_whitespace_characters(ch: str) -> None:
    assert is_white(ch)
    assert classify(ch) == WHITE


@pytest.mark.parametrize("ch", ["a", "z", "A", "Z", "m"])  # type: ignore[misc]
def test_letters_are_alpha(ch: str) -> None:
    assert is_alpha(ch)
    assert classify(ch) == ALPHA


def test_lower_alpha_rejects_uppercase() -> None:
    assert is_lower_alpha("q")
    assert not is_lower_alpha("Q")


@pytest.mark.parametrize("ch", ["0", "5", "9"])  # type: ignore[misc]
def test_digits(ch: str) -> None:
    assert is_digit(ch)
    assert classify(ch) == DIGIT


@pytest.mark.parametrize("ch", ["=", "*", "+", ";", ":", "(", ")", "\v", "_"])  # type: ignore[misc]
def test_other_characters(ch: str) -> None:
    assert classify(ch) == OTHER


def test_non_ascii_letters_are_other() -> None:
    assert not is_alpha("é")
    assert classify("é") == OTHER


def test_delimiters() -> None:
    assert is_delimiter("(")
    assert is_delimiter(")")
    assert not is_delimiter("[")


@given(st.characters(max_codepoint=127))  # type: ignore[misc]
def test_classify_agrees_with_predicates(ch: str) -> None:
    cls = classify(ch)
    flags = {WHITE: is_white(ch), ALPHA: is_alpha(ch), DIGIT: is_digit(ch)}
    assert sum(flags.values()) <= 1
    if cls == OTHER:
        assert not any(flags.values())
    else:
        assert flags[cls]
