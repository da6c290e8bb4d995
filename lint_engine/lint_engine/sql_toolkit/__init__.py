"""SQL Toolkit: implementation-agnostic tokenizing and statement parsing.

Usage::

    from lint_engine.sql_toolkit import get_sql_toolkit, Dialect

    tk = get_sql_toolkit(Dialect.BIGQUERY)
    tokens = tk.tokenizer.tokenize("SELECT a FROM t")
    for unit in tk.parser.parse_statements("SELECT 1; SELECT 2;"):
        for node in unit.walk():
            ...

The default implementation delegates to SQLGlot.  A different backend can be
swapped in via ``register_implementation()`` without touching the checks.
"""

from ._factory import get_sql_toolkit, register_implementation, reset_toolkit
from ._protocols import SqlParser, SqlTokenizer, SqlToolkit
from ._types import (
    Dialect,
    ParseUnit,
    SqlNode,
    SqlNodeKind,
    SqlParseError,
    SqlTokenizeError,
    SqlToolkitError,
    Token,
    TokenKind,
)

__all__ = [
    # Factory
    "get_sql_toolkit",
    "register_implementation",
    "reset_toolkit",
    # Protocols
    "SqlToolkit",
    "SqlParser",
    "SqlTokenizer",
    # Types
    "Dialect",
    "ParseUnit",
    "SqlNode",
    "SqlNodeKind",
    "Token",
    "TokenKind",
    # Exceptions
    "SqlToolkitError",
    "SqlParseError",
    "SqlTokenizeError",
]
