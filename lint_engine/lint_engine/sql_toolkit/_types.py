"""SQL toolkit shared types.

Every type here is implementation-agnostic.  Checks operate on these types
exclusively; the backing implementation converts from its native parser
objects internally.

ZERO dependency on any SQL parsing library.
"""

from __future__ import annotations

import enum
from dataclasses import dataclass, field
from typing import Any, Iterator

# ---------------------------------------------------------------------------
# Dialect
# ---------------------------------------------------------------------------


class Dialect(str, enum.Enum):
    """Supported SQL dialects."""

    BIGQUERY = "bigquery"
    DATABRICKS = "databricks"
    DUCKDB = "duckdb"
    POSTGRES = "postgres"
    SNOWFLAKE = "snowflake"


# ---------------------------------------------------------------------------
# Tokens
# ---------------------------------------------------------------------------


class TokenKind(str, enum.Enum):
    """Coarse token classification used by the token-level checks."""

    KEYWORD = "keyword"
    IDENTIFIER = "identifier"
    OTHER = "other"


@dataclass(frozen=True, slots=True)
class Token:
    """One lexical token with its byte range ``[start, end)`` in the source.

    ``text`` is the source spelling, so it always equals ``source[start:end]``.
    """

    kind: TokenKind
    start: int
    end: int
    text: str


# ---------------------------------------------------------------------------
# AST Node Types
# ---------------------------------------------------------------------------


class SqlNodeKind(str, enum.Enum):
    """Enumeration of SQL node types that the checks need to inspect.

    This is NOT a 1:1 mapping to any parser's internal types.  Everything
    the rules do not dispatch on collapses into ``UNKNOWN``.
    """

    # Statement types
    SELECT = "select"
    CREATE = "create"
    INSERT = "insert"
    UPDATE = "update"
    DELETE = "delete"
    DROP = "drop"
    COMMAND = "command"

    # Clause types
    WITH = "with"
    CTE = "cte"
    FROM = "from"
    JOIN = "join"
    WHERE = "where"
    GROUP = "group"
    HAVING = "having"
    ORDER = "order"

    # Expression types
    TABLE = "table"
    SCHEMA = "schema"
    COLUMN = "column"
    COLUMN_DEF = "column_def"
    STAR = "star"
    ALIAS = "alias"
    TABLE_ALIAS = "table_alias"
    IDENTIFIER = "identifier"
    LITERAL = "literal"
    AND = "and"
    OR = "or"
    PAREN = "paren"
    FUNCTION = "function"
    SUBQUERY = "subquery"
    WINDOW = "window"
    DATA_TYPE = "data_type"

    # Declarations
    FUNCTION_DECLARATION = "function_declaration"

    # Catch-all
    UNKNOWN = "unknown"


@dataclass(slots=True, eq=False)
class SqlNode:
    """Wrapper around one syntax node.

    ``start`` / ``end`` give the node's byte range in the document it was
    parsed from, or ``-1`` when no source token could be attributed to it.
    ``parent`` is ``None`` for a statement root.  The ``raw`` field holds the
    implementation-specific object for escape-hatch operations.
    """

    kind: SqlNodeKind
    name: str = ""
    alias: str = ""
    start: int = -1
    end: int = -1
    children: tuple[SqlNode, ...] = ()
    parent: SqlNode | None = field(default=None, repr=False)
    raw: Any = field(default=None, repr=False)

    @property
    def has_position(self) -> bool:
        return self.start >= 0

    # -- traversal helpers ---------------------------------------------------

    def walk(self) -> Iterator[SqlNode]:
        """Yield this node and every descendant in pre-order, document order.

        Uses an explicit worklist so deep expression chains cannot exhaust
        the interpreter stack.
        """
        stack: list[SqlNode] = [self]
        while stack:
            node = stack.pop()
            yield node
            stack.extend(reversed(node.children))

    def find(self, kind: SqlNodeKind) -> SqlNode | None:
        """Return the first descendant of *kind* (pre-order), or ``None``."""
        for node in self.walk():
            if node is not self and node.kind == kind:
                return node
        return None


# ---------------------------------------------------------------------------
# Parse Units
# ---------------------------------------------------------------------------


@dataclass(frozen=True, slots=True)
class ParseUnit:
    """One parsed top-level statement.

    ``start`` / ``end`` delimit the statement's tokens in the source text,
    excluding the terminating semicolon.
    """

    root: SqlNode
    start: int
    end: int

    def walk(self) -> Iterator[SqlNode]:
        return self.root.walk()


# ---------------------------------------------------------------------------
# Exceptions
# ---------------------------------------------------------------------------


class SqlToolkitError(Exception):
    """Base exception for all sql_toolkit errors."""


class SqlTokenizeError(SqlToolkitError):
    """SQL could not be split into tokens."""


class SqlParseError(SqlToolkitError):
    """A statement could not be parsed.

    ``position`` is the byte offset the parser blamed; ``statement_start``
    is where the failing statement begins.
    """

    def __init__(self, message: str, position: int = 0, statement_start: int = 0) -> None:
        super().__init__(message)
        self.message = message
        self.position = position
        self.statement_start = statement_start
