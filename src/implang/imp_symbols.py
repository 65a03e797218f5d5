"""
Symbol table for IMP identifiers.

Identifiers are tokens made only of lowercase letters. Each distinct
identifier gets a small integer index in first-occurrence order; any other
token is ignored while building the table.

Usage:
    >>> table = build_symtable(["x", ":=", "y", ";", "x"])
    >>> table("x"), table("y"), table("z")
    (0, 1, 2)

Unknown tokens map to one past the last assigned index. That sentinel is only
meaningful within a single parse.
"""

from collections.abc import Iterable

from implang.imp_chars import is_lower_alpha


def is_identifier(token: str) -> bool:
    """
    Checks whether a token can name a variable.

    Args:
        token (str): A token produced by the lexer.

    Returns:
        bool: True if `token` is non-empty and made only of `a`-`z`.
    """
    return bool(token) and all(is_lower_alpha(ch) for ch in token)


class SymbolTable:
    """Insertion-ordered mapping from identifier to index.

    Attributes:
        start (int): Index given to the first registered identifier.
    """

    def __init__(self, start: int = 0) -> None:
        self.start = start
        self._indices: dict[str, int] = {}

    def register(self, token: str) -> None:
        """Assigns the next index to `token` if it is a new identifier."""
        if is_identifier(token) and token not in self._indices:
            self._indices[token] = self.start + len(self._indices)

    def lookup(self, token: str) -> int:
        """Returns the index of `token`, or the next unused index if unknown."""
        return self._indices.get(token, self.start + len(self._indices))

    def items(self) -> list[tuple[str, int]]:
        """Returns `(identifier, index)` pairs in index order."""
        return list(self._indices.items())

    def __call__(self, token: str) -> int:
        return self.lookup(token)

    def __len__(self) -> int:
        return len(self._indices)

    def __repr__(self) -> str:
        return f"SymbolTable({self._indices!r})"


def build_symtable(tokens: Iterable[str], start: int = 0) -> SymbolTable:
    """
    Builds a symbol table from a token list.

    Args:
        tokens (Iterable[str]): Tokens in source order.
        start (int): Index of the first identifier. Defaults to 0.

    Returns:
        SymbolTable: Every identifier in `tokens`, indexed by first occurrence.
    """
    table = SymbolTable(start)
    for token in tokens:
        table.register(token)
    return table


__all__ = ["SymbolTable", "build_symtable", "is_identifier"]
