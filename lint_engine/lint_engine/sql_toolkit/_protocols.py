"""SQL toolkit protocol definitions.

These define the interface contract that ANY implementation must satisfy.
Checks depend on these protocols, never on concrete implementations.
"""

from __future__ import annotations

from typing import Iterator, Protocol, runtime_checkable

from ._types import Dialect, ParseUnit, Token


@runtime_checkable
class SqlTokenizer(Protocol):
    """Split SQL text into classified tokens."""

    def tokenize(self, sql: str) -> list[Token]:
        """Tokenize a whole document.

        Returns:
            Tokens in source order.  Comments produce no tokens.

        Raises:
            SqlTokenizeError: If the text cannot be tokenized.
        """
        ...


@runtime_checkable
class SqlParser(Protocol):
    """Parse SQL documents statement by statement."""

    def parse_statements(self, sql: str) -> Iterator[ParseUnit]:
        """Yield one :class:`ParseUnit` per statement, in source order.

        The generator is the resumable cursor: each statement is parsed
        only when the consumer asks for it.

        Raises:
            SqlParseError: When the next statement fails to parse.  Every
                earlier statement has already been yielded.
        """
        ...


@runtime_checkable
class SqlToolkit(Protocol):
    """Composite toolkit bound to one dialect."""

    @property
    def dialect(self) -> Dialect: ...

    @property
    def tokenizer(self) -> SqlTokenizer: ...

    @property
    def parser(self) -> SqlParser: ...
