import pytest
from hypothesis import given
from hypothesis import strategies as st

from implang.imp_lexer import CharacterStream, Lexer, tokenize

ascii_text = st.text(alphabet=st.characters(max_codepoint=127), max_size=100)


def test_assignment_tokens() -> None:
    assert tokenize("x:=1+2*3") == ["x", ":=", "1", "+", "2", "*", "3"]


def test_if_tokens() -> None:
    assert tokenize("IF x<=y THEN x:=1 ELSE y:=2 END") == [
        "IF",
        "x",
        "<=",
        "y",
        "THEN",
        "x",
        ":=",
        "1",
        "ELSE",
        "y",
        ":=",
        "2",
        "END",
    ]


def test_parentheses_are_single_tokens() -> None:
    assert tokenize("((x))") == ["(", "(", "x", ")", ")"]


def test_parenthesis_splits_other_run() -> None:
    assert tokenize("*(+") == ["*", "(", "+"]


def test_other_runs_coalesce() -> None:
    assert tokenize("x==y") == ["x", "==", "y"]
    assert tokenize("x=+y") == ["x", "=+", "y"]
    assert tokenize("x:=-1") == ["x", ":=-", "1"]


def test_class_change_splits_tokens() -> None:
    assert tokenize("abc123def") == ["abc", "123", "def"]


def test_mixed_case_letters_stay_together() -> None:
    assert tokenize("Foo bar") == ["Foo", "bar"]


def test_whitespace_is_discarded() -> None:
    assert tokenize("  SKIP \t;\n\r SKIP\f\0") == ["SKIP", ";", "SKIP"]


def test_empty_input() -> None:
    assert tokenize("") == []
    assert tokenize("   \n") == []


def test_lexer_over_character_stream() -> None:
    lexer = Lexer(CharacterStream("a && b"))
    assert lexer.tokenize() == ["a", "&&", "b"]
    assert lexer.stream.end_of_file()


def test_character_stream_methods() -> None:
    stream = CharacterStream("abc")
    assert stream.next() == "a"
    assert stream.position == 1
    assert not stream.end_of_file()
    stream.next()
    stream.next()
    assert stream.end_of_file()


def test_character_stream_next_past_eof_raises() -> None:
    stream = CharacterStream("")
    with pytest.raises(
        Exception, match="CharacterStreamError: Attempted to read past end of source"
    ):
        stream.next()


@given(ascii_text)  # type: ignore[misc]
def test_no_empty_tokens(text: str) -> None:
    assert all(tok != "" for tok in tokenize(text))


@given(ascii_text)  # type: ignore[misc]
def test_space_joined_tokens_retokenize_identically(text: str) -> None:
    tokens = tokenize(text)
    assert tokenize(" ".join(tokens)) == tokens


@given(ascii_text)  # type: ignore[misc]
def test_tokens_preserve_non_whitespace_characters(text: str) -> None:
    stripped = "".join(ch for ch in text if ch not in " \t\n\r\f\0")
    assert "".join(tokenize(text)) == stripped
