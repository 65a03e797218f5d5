"""
Parser combinators over IMP token streams.

A parser of `T` is a plain function taking `(fuel, stream)` and returning
either `ParseSuccess(value, rest)` or `ParseFailure(message)`:

    Parser = Callable[[int, TokenStream], ParseResult[T]]

Fuel is a depth budget. Every combinator (and every grammar method built from
them) fails with `TOO_MANY_RECURSIVE_CALLS` once it is called with no fuel
left, so a parse can never recurse deeper than the budget it started with.

Failures are values, not exceptions. `either` discards the message of each
failing alternative and retries the next one from the original position.

Example:
    >>> digits = many(expect_token("1"))
    >>> digits(10, TokenStream(["1", "1", "+"]))
    ParseSuccess(['1', '1'], rest=['+'])
"""

from __future__ import annotations

from collections.abc import Callable, Sequence
from typing import Any, Generic, TypeVar, Union

T = TypeVar("T")
U = TypeVar("U")

TOO_MANY_RECURSIVE_CALLS = "Too many recursive calls"


class TokenStream:
    """Immutable view of a token sequence from a given position onwards.

    Advancing returns a new stream, so every parse result can hold on to the
    exact position it stopped at.

    Attributes:
        tokens (tuple[str, ...]): The full token sequence.
        position (int): Index of the next unread token.
    """

    __slots__ = ("tokens", "position")

    def __init__(self, tokens: Sequence[str], position: int = 0) -> None:
        self.tokens: tuple[str, ...] = tuple(tokens)
        self.position = position

    def peek(self) -> str | None:
        """Returns the next token without consuming it, or None at the end."""
        if self.position < len(self.tokens):
            return self.tokens[self.position]
        return None

    def advance(self) -> TokenStream:
        return TokenStream(self.tokens, self.position + 1)

    def remaining(self) -> list[str]:
        return list(self.tokens[self.position :])

    def at_end(self) -> bool:
        return self.position >= len(self.tokens)

    def __len__(self) -> int:
        return max(len(self.tokens) - self.position, 0)

    def __eq__(self, other: Any) -> bool:
        if isinstance(other, TokenStream):
            return self.remaining() == other.remaining()
        return False

    def __repr__(self) -> str:
        return f"TokenStream({self.remaining()!r})"


class ParseSuccess(Generic[T]):
    """A parsed value together with the unconsumed rest of the stream."""

    ok = True

    def __init__(self, value: T, rest: TokenStream) -> None:
        self.value = value
        self.rest = rest

    @property
    def remaining(self) -> list[str]:
        return self.rest.remaining()

    def __eq__(self, other: Any) -> bool:
        return (
            isinstance(other, ParseSuccess)
            and self.value == other.value
            and self.rest == other.rest
        )

    def __repr__(self) -> str:
        return f"ParseSuccess({self.value!r}, rest={self.remaining!r})"


class ParseFailure:
    """A failed parse, carrying a human-readable message."""

    ok = False

    def __init__(self, message: str) -> None:
        self.message = message

    def __eq__(self, other: Any) -> bool:
        return isinstance(other, ParseFailure) and self.message == other.message

    def __repr__(self) -> str:
        return f"ParseFailure({self.message!r})"


ParseResult = Union[ParseSuccess[T], ParseFailure]
Parser = Callable[[int, TokenStream], ParseResult[T]]


def out_of_fuel() -> ParseFailure:
    return ParseFailure(TOO_MANY_RECURSIVE_CALLS)


def is_out_of_fuel(result: ParseResult[Any]) -> bool:
    return (
        isinstance(result, ParseFailure)
        and result.message == TOO_MANY_RECURSIVE_CALLS
    )


def succeed(value: T) -> Parser[T]:
    """Parser that consumes nothing and always returns `value`."""

    def parser(fuel: int, stream: TokenStream) -> ParseResult[T]:
        if fuel <= 0:
            return out_of_fuel()
        return ParseSuccess(value, stream)

    return parser


def fail(message: str) -> Parser[Any]:
    """Parser that always fails with `message`."""

    def parser(fuel: int, stream: TokenStream) -> ParseResult[Any]:
        if fuel <= 0:
            return out_of_fuel()
        return ParseFailure(message)

    return parser


def expect_token(token: str) -> Parser[str]:
    """Consumes exactly one token equal to `token`."""

    def parser(fuel: int, stream: TokenStream) -> ParseResult[str]:
        if fuel <= 0:
            return out_of_fuel()
        if stream.peek() == token:
            return ParseSuccess(token, stream.advance())
        return ParseFailure(f"expected '{token}'.")

    return parser


def first_expect(token: str, then: Parser[T]) -> Parser[T]:
    """Consumes `token`, then runs `then` on what follows it."""
    keyword = expect_token(token)

    def parser(fuel: int, stream: TokenStream) -> ParseResult[T]:
        matched = keyword(fuel, stream)
        if isinstance(matched, ParseFailure):
            return matched
        return then(fuel, matched.rest)

    return parser


def map_value(inner: Parser[T], fn: Callable[[T], U]) -> Parser[U]:
    def parser(fuel: int, stream: TokenStream) -> ParseResult[U]:
        if fuel <= 0:
            return out_of_fuel()
        result = inner(fuel, stream)
        if isinstance(result, ParseFailure):
            return result
        return ParseSuccess(fn(result.value), result.rest)

    return parser


def either(*alternatives: Parser[T]) -> Parser[T]:
    """Ordered choice: the first alternative that succeeds wins.

    Each alternative starts from the same position. Messages of failed
    alternatives are dropped; if all fail, the last failure is returned.
    Running out of fuel is not a mismatch and is returned immediately.
    """
    if not alternatives:
        raise ValueError("either() needs at least one alternative")

    def parser(fuel: int, stream: TokenStream) -> ParseResult[T]:
        if fuel <= 0:
            return out_of_fuel()
        result: ParseResult[T] = ParseFailure("no alternatives")
        for alternative in alternatives:
            result = alternative(fuel, stream)
            if isinstance(result, ParseSuccess) or is_out_of_fuel(result):
                return result
        return result

    return parser


def chain(*steps: Parser[Any]) -> Parser[list[Any]]:
    """Runs `steps` one after another and collects their values.

    The first failing step aborts the whole chain with its message.
    """

    def parser(fuel: int, stream: TokenStream) -> ParseResult[list[Any]]:
        if fuel <= 0:
            return out_of_fuel()
        values: list[Any] = []
        for step in steps:
            result = step(fuel, stream)
            if isinstance(result, ParseFailure):
                return result
            values.append(result.value)
            stream = result.rest
        return ParseSuccess(values, stream)

    return parser


def enclosed(open_token: str, inner: Parser[T], close_token: str) -> Parser[T]:
    """Parses `open_token inner close_token` and keeps the inner value."""
    body = chain(first_expect(open_token, inner), expect_token(close_token))
    return map_value(body, lambda values: values[0])


def many(item: Parser[T]) -> Parser[list[T]]:
    """Zero or more repetitions of `item`.

    Collects values until `item` fails and returns them with the position of
    that failure. A failing first attempt gives an empty list. Every item gets
    the same fuel; the loop ends because each success consumes at least one
    token, so it runs at most `len(stream) + 1` times. An item that runs out
    of fuel fails the whole repetition.

    Raises:
        RuntimeError: If `item` succeeds without consuming a token, which
            would otherwise repeat forever.
    """

    def parser(fuel: int, stream: TokenStream) -> ParseResult[list[T]]:
        if fuel <= 0:
            return out_of_fuel()
        values: list[T] = []
        while True:
            result = item(fuel, stream)
            if isinstance(result, ParseFailure):
                if is_out_of_fuel(result):
                    return result
                return ParseSuccess(values, stream)
            if len(result.rest) >= len(stream):
                raise RuntimeError(
                    f"Repeated parser consumed no tokens at position {stream.position}"
                )
            values.append(result.value)
            stream = result.rest

    return parser


__all__ = [
    "TOO_MANY_RECURSIVE_CALLS",
    "ParseFailure",
    "ParseResult",
    "ParseSuccess",
    "Parser",
    "TokenStream",
    "chain",
    "either",
    "enclosed",
    "expect_token",
    "fail",
    "first_expect",
    "many",
    "map_value",
    "succeed",
]
