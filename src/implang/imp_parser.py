"""
IMP Language Parser

Parses IMP source text into an abstract syntax tree of `ASTNode` objects.

Grammar
-------
Arithmetic expressions (left-associative, `*` binds tighter than `+`/`-`)::

    primary     := identifier | number | '(' sum ')'
    product     := primary ('*' primary)*
    sum         := product (('+' | '-') product)*

Boolean expressions::

    atomic      := 'true' | 'false' | 'not' atomic | '(' conjunction ')'
                 | product ('==' sum | '<=' sum)
    conjunction := atomic ('&&' atomic)*

Commands::

    simple      := 'SKIP'
                 | 'IF' conjunction 'THEN' sequenced 'ELSE' sequenced 'END'
                 | 'WHILE' conjunction 'DO' sequenced 'END'
                 | identifier ':=' sum
    sequenced   := simple (';' sequenced)?

A `;` that is not followed by a command ends the sequence before the `;`,
leaving it in the unconsumed tokens.

The left operand of a comparison is a `product`, so `x+1==y` is not a valid
comparison while `x==y+1` is.

Parser Behavior
---------------
- Every grammar method takes `(fuel, stream)` and returns a `ParseSuccess` or
  `ParseFailure`; nothing is raised for malformed input.
- Each method spends one unit of fuel and fails with "Too many recursive
  calls" when none is left. Fuel bounds nesting depth only; repetitions and
  `;` sequences are loops, so their length costs no fuel.
- The default budget grows with the token count (`fuel_for`), so a legal
  program never runs out of it.
- A leading `SKIP`, `IF` or `WHILE` commits to that command, so errors inside
  its body are reported rather than hidden behind "Expecting a command".

Entry Points
------------
- `parse()`: Tokenize and parse a program, returning a result value.
- `parse_tokens()`: Parse an already tokenized program.
- `parse_program()`: Strict variant that returns the command or raises
  `ParseError`, including on trailing tokens.
"""

from __future__ import annotations

import logging
import sys
from collections.abc import Iterator, Sequence
from contextlib import contextmanager
from functools import reduce

from implang import imp_ast as ast
from implang.imp_ast import ASTNode
from implang.imp_chars import is_digit
from implang.imp_combinators import (
    TOO_MANY_RECURSIVE_CALLS,
    ParseFailure,
    Parser as TokenParser,
    ParseResult,
    ParseSuccess,
    TokenStream,
    chain,
    either,
    enclosed,
    expect_token,
    fail,
    first_expect,
    many,
    map_value,
    succeed,
)
from implang.imp_lexer import tokenize
from implang.imp_symbols import SymbolTable, build_symtable, is_identifier

logger = logging.getLogger(__name__)

DEFAULT_FUEL = 1000
FUEL_PER_TOKEN = 4
FRAMES_PER_FUEL = 4

MISSING_COMPARISON = "Expected '==' or '<=' after arithmetic expression"
EXPECTING_COMMAND = "Expecting a command"


class ParseError(SyntaxError):
    """Raised by `parse_program` when the source is not a complete program."""


class Parser:
    """
    IMP Parser Class

    Recursive-descent parser with one method per precedence level. Methods
    call each other directly and through the combinators in
    `implang.imp_combinators`.

    Attributes
    ----------
    symtable : SymbolTable
        Maps identifier tokens to variable indices.

    Methods
    -------
    parse_identifier, parse_number
        Single-token leaves.
    parse_primary, parse_product, parse_sum
        Arithmetic expressions.
    parse_atomic, parse_comparison, parse_conjunction
        Boolean expressions.
    parse_simple, parse_sequenced
        Commands.
    """

    def __init__(self, symtable: SymbolTable) -> None:
        self.symtable = symtable
        self.command_parsers: dict[str, TokenParser[ASTNode]] = {
            "SKIP": self.parse_skip,
            "IF": self.parse_if,
            "WHILE": self.parse_while,
        }

    def parse_identifier(self, fuel: int, stream: TokenStream) -> ParseResult[int]:
        tok = stream.peek()
        if tok is None:
            return ParseFailure("Expected identifier")
        if not is_identifier(tok):
            return ParseFailure(f"Illegal identifier:'{tok}'")
        return ParseSuccess(self.symtable(tok), stream.advance())

    def parse_number(self, fuel: int, stream: TokenStream) -> ParseResult[int]:
        tok = stream.peek()
        if tok is None or not all(is_digit(ch) for ch in tok):
            return ParseFailure("Expected number")
        value = reduce(lambda n, d: 10 * n + (ord(d) - ord("0")), tok, 0)
        return ParseSuccess(value, stream.advance())

    # Arithmetic expressions

    def parse_primary(self, fuel: int, stream: TokenStream) -> ParseResult[ASTNode]:
        """Parse an identifier, a number, or a parenthesized sum."""
        if fuel <= 0:
            return ParseFailure(TOO_MANY_RECURSIVE_CALLS)
        return either(
            map_value(self.parse_identifier, ast.var),
            map_value(self.parse_number, ast.num),
            enclosed("(", self.parse_sum, ")"),
        )(fuel - 1, stream)

    def parse_product(self, fuel: int, stream: TokenStream) -> ParseResult[ASTNode]:
        """Parse `primary ('*' primary)*` into left-nested `mult` nodes."""
        if fuel <= 0:
            return ParseFailure(TOO_MANY_RECURSIVE_CALLS)
        first = self.parse_primary(fuel - 1, stream)
        if isinstance(first, ParseFailure):
            return first
        rest = many(first_expect("*", self.parse_primary))(fuel - 1, first.rest)
        if isinstance(rest, ParseFailure):
            return rest
        return ParseSuccess(reduce(ast.mult, rest.value, first.value), rest.rest)

    def parse_sum(self, fuel: int, stream: TokenStream) -> ParseResult[ASTNode]:
        """Parse `product (('+' | '-') product)*` into left-nested nodes."""
        if fuel <= 0:
            return ParseFailure(TOO_MANY_RECURSIVE_CALLS)
        first = self.parse_product(fuel - 1, stream)
        if isinstance(first, ParseFailure):
            return first
        term = either(
            map_value(first_expect("+", self.parse_product), lambda e: (ast.plus, e)),
            map_value(first_expect("-", self.parse_product), lambda e: (ast.minus, e)),
        )
        rest = many(term)(fuel - 1, first.rest)
        if isinstance(rest, ParseFailure):
            return rest
        expr = reduce(lambda acc, t: t[0](acc, t[1]), rest.value, first.value)
        return ParseSuccess(expr, rest.rest)

    # Boolean expressions

    def parse_atomic(self, fuel: int, stream: TokenStream) -> ParseResult[ASTNode]:
        if fuel <= 0:
            return ParseFailure(TOO_MANY_RECURSIVE_CALLS)
        return either(
            map_value(expect_token("true"), lambda _: ast.btrue()),
            map_value(expect_token("false"), lambda _: ast.bfalse()),
            map_value(first_expect("not", self.parse_atomic), ast.bnot),
            enclosed("(", self.parse_conjunction, ")"),
            self.parse_comparison,
        )(fuel - 1, stream)

    def parse_comparison(
        self, fuel: int, stream: TokenStream
    ) -> ParseResult[ASTNode]:
        """Parse `product ('==' | '<=') sum`."""
        if fuel <= 0:
            return ParseFailure(TOO_MANY_RECURSIVE_CALLS)
        left = self.parse_product(fuel - 1, stream)
        if isinstance(left, ParseFailure):
            return left
        lhs = left.value
        return either(
            map_value(first_expect("==", self.parse_sum), lambda rhs: ast.eq(lhs, rhs)),
            map_value(first_expect("<=", self.parse_sum), lambda rhs: ast.le(lhs, rhs)),
            fail(MISSING_COMPARISON),
        )(fuel - 1, left.rest)

    def parse_conjunction(
        self, fuel: int, stream: TokenStream
    ) -> ParseResult[ASTNode]:
        """Parse `atomic ('&&' atomic)*` into left-nested `and` nodes."""
        if fuel <= 0:
            return ParseFailure(TOO_MANY_RECURSIVE_CALLS)
        first = self.parse_atomic(fuel - 1, stream)
        if isinstance(first, ParseFailure):
            return first
        rest = many(first_expect("&&", self.parse_atomic))(fuel - 1, first.rest)
        if isinstance(rest, ParseFailure):
            return rest
        return ParseSuccess(reduce(ast.band, rest.value, first.value), rest.rest)

    # Commands
    # parse_skip, parse_if and parse_while run after their keyword is consumed.

    def parse_skip(self, fuel: int, stream: TokenStream) -> ParseResult[ASTNode]:
        return succeed(ast.skip())(fuel, stream)

    def parse_if(self, fuel: int, stream: TokenStream) -> ParseResult[ASTNode]:
        if fuel <= 0:
            return ParseFailure(TOO_MANY_RECURSIVE_CALLS)
        return map_value(
            chain(
                self.parse_conjunction,
                first_expect("THEN", self.parse_sequenced),
                first_expect("ELSE", self.parse_sequenced),
                expect_token("END"),
            ),
            lambda parts: ast.if_(parts[0], parts[1], parts[2]),
        )(fuel - 1, stream)

    def parse_while(self, fuel: int, stream: TokenStream) -> ParseResult[ASTNode]:
        if fuel <= 0:
            return ParseFailure(TOO_MANY_RECURSIVE_CALLS)
        return map_value(
            chain(
                self.parse_conjunction,
                first_expect("DO", self.parse_sequenced),
                expect_token("END"),
            ),
            lambda parts: ast.while_(parts[0], parts[1]),
        )(fuel - 1, stream)

    def parse_assignment(
        self, fuel: int, stream: TokenStream
    ) -> ParseResult[ASTNode]:
        if fuel <= 0:
            return ParseFailure(TOO_MANY_RECURSIVE_CALLS)
        return map_value(
            chain(self.parse_identifier, first_expect(":=", self.parse_sum)),
            lambda parts: ast.assign(parts[0], parts[1]),
        )(fuel - 1, stream)

    def parse_simple(self, fuel: int, stream: TokenStream) -> ParseResult[ASTNode]:
        """Parse one command that is not a sequence."""
        if fuel <= 0:
            return ParseFailure(TOO_MANY_RECURSIVE_CALLS)
        keyword = stream.peek()
        if keyword is not None and keyword in self.command_parsers:
            return first_expect(keyword, self.command_parsers[keyword])(
                fuel - 1, stream
            )
        return either(self.parse_assignment, fail(EXPECTING_COMMAND))(fuel - 1, stream)

    def parse_sequenced(
        self, fuel: int, stream: TokenStream
    ) -> ParseResult[ASTNode]:
        """Parse `simple (';' simple)*`, nesting `seq` nodes to the right.

        Each `';' simple` tail is optional: if the command after a `;` does
        not parse, the sequence ends before that `;`.
        """
        if fuel <= 0:
            return ParseFailure(TOO_MANY_RECURSIVE_CALLS)
        first = self.parse_simple(fuel - 1, stream)
        if isinstance(first, ParseFailure):
            return first
        rest = many(first_expect(";", self.parse_simple))(fuel - 1, first.rest)
        if isinstance(rest, ParseFailure):
            return rest
        *heads, last = [first.value, *rest.value]
        tree = reduce(lambda tail, head: ast.seq(head, tail), reversed(heads), last)
        return ParseSuccess(tree, rest.rest)


def fuel_for(token_count: int) -> int:
    """Default fuel for a program of `token_count` tokens.

    No grammar method nests deeper than a few levels per token, so a budget
    linear in the input is never exhausted by a legal program.
    """
    return max(DEFAULT_FUEL, FUEL_PER_TOKEN * token_count)


@contextmanager
def recursion_headroom(fuel: int) -> Iterator[None]:
    """Temporarily raise the interpreter recursion limit to fit `fuel` levels."""
    previous = sys.getrecursionlimit()
    sys.setrecursionlimit(previous + FRAMES_PER_FUEL * max(fuel, 0))
    try:
        yield
    finally:
        sys.setrecursionlimit(previous)


def parse_tokens(
    tokens: Sequence[str],
    symtable: SymbolTable | None = None,
    fuel: int | None = None,
) -> ParseResult[ASTNode]:
    """Parse a token sequence as a sequenced command.

    Args:
        tokens: Output of `tokenize()`.
        symtable: Identifier indices; built from `tokens` when omitted.
        fuel: Recursion budget; `fuel_for(len(tokens))` when omitted.

    Returns:
        ParseSuccess with the command and unconsumed tokens, or ParseFailure.
    """
    if symtable is None:
        symtable = build_symtable(tokens, 0)
    if fuel is None:
        fuel = fuel_for(len(tokens))
    try:
        with recursion_headroom(fuel):
            result = Parser(symtable).parse_sequenced(fuel, TokenStream(tokens))
    except RecursionError:
        logger.warning(
            "Call stack exhausted before fuel (%d) ran out on %d tokens",
            fuel,
            len(tokens),
        )
        return ParseFailure(TOO_MANY_RECURSIVE_CALLS)
    if isinstance(result, ParseFailure):
        logger.debug("Parse failed: %s", result.message)
    return result


def parse(text: str, fuel: int | None = None) -> ParseResult[ASTNode]:
    """Tokenize and parse `text`.

    Trailing tokens are not an error here; they are returned in
    `result.remaining`.
    """
    tokens = tokenize(text)
    logger.debug("Tokenized %d characters into %d tokens", len(text), len(tokens))
    return parse_tokens(tokens, build_symtable(tokens, 0), fuel)


def parse_program(text: str, fuel: int | None = None) -> ASTNode:
    """Parse `text` as a complete program.

    Raises:
        ParseError: If parsing fails or tokens are left over.
    """
    result = parse(text, fuel)
    if isinstance(result, ParseFailure):
        raise ParseError(result.message)
    if not result.rest.at_end():
        raise ParseError(f"Trailing tokens remaining: {result.rest.peek()}")
    return result.value


__all__ = [
    "DEFAULT_FUEL",
    "EXPECTING_COMMAND",
    "FUEL_PER_TOKEN",
    "MISSING_COMPARISON",
    "ParseError",
    "Parser",
    "fuel_for",
    "parse",
    "parse_program",
    "parse_tokens",
    "recursion_headroom",
]
