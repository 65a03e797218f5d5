"""
Lexical analyzer for the IMP language.

This module turns raw source text into a flat list of token strings:

Classes:
    CharacterStream: Stream abstraction for reading characters one at a time.
    Lexer: Single-pass state machine that groups characters into tokens.

Rules:
    - A token is a maximal run of characters of one class (letters, digits or
      "other"), or a single `(` / `)`.
    - Whitespace separates tokens and is never a token itself.
    - Runs of "other" characters are coalesced, so `==` and `=+` are both a
      single token; the parser rejects operators it does not know.

Example:
    >>> tokenize("x:=1+2*3")
    ['x', ':=', '1', '+', '2', '*', '3']

Exports:
    - CharacterStream
    - Lexer
    - tokenize
"""

from implang.imp_chars import OTHER, WHITE, CharClass, classify, is_delimiter


class CharacterStream:
    """
    A utility for reading characters from a string source.

    Attributes:
        source (str): The input source string.
        position (int): Current index in the source.
    """

    def __init__(self, source: str, position: int = 0):
        self.source = source
        self.position = position

    def next(self) -> str:
        """
        Consumes and returns the next character in the stream.

        Returns:
            str: The next character.

        Raises:
            Exception: If reading past the end of the source.
        """
        if self.position >= len(self.source):
            raise Exception(
                f"CharacterStreamError: Attempted to read past end of source at position=<{self.position}>"
            )
        char = self.source[self.position]
        self.position += 1
        return char

    def end_of_file(self) -> bool:
        """
        Checks whether every character has been consumed.

        Returns:
            bool: True once `position` has reached the end of `source`.
        """
        return self.position >= len(self.source)


class Lexer:
    """Tokenizer for the IMP language.

    The lexer tracks the class of the run it is accumulating and flushes the
    run whenever the class changes, a delimiter appears, or whitespace is
    reached.

    Attributes:
        stream (CharacterStream): The source stream to tokenize.
    """

    def __init__(self, stream: CharacterStream) -> None:
        self.stream = stream
        self.tokens: list[str] = []
        self.run_class: CharClass = WHITE
        self.run = ""

    def flush(self) -> None:
        """Emits the accumulated run as a token, if there is one."""
        if self.run:
            self.tokens.append(self.run)
        self.run = ""

    def feed(self, ch: str) -> None:
        """Advances the state machine by one character."""
        if is_delimiter(ch):
            self.flush()
            self.tokens.append(ch)
            self.run_class = OTHER
            return

        cls = classify(ch)
        if cls == WHITE:
            self.flush()
            self.run_class = WHITE
        elif cls == self.run_class:
            self.run += ch
        else:
            self.flush()
            self.run_class = cls
            self.run = ch

    def tokenize(self) -> list[str]:
        """Consumes the whole stream and returns the tokens in order.

        Returns:
            list[str]: Non-empty token strings.
        """
        while not self.stream.end_of_file():
            self.feed(self.stream.next())
        self.flush()
        return self.tokens


def tokenize(source: str) -> list[str]:
    return Lexer(CharacterStream(source)).tokenize()


__all__ = ["CharacterStream", "Lexer", "tokenize"]
