"""SQLGlot-backed implementation of the SQL toolkit protocols.

This is the ONLY file in the entire codebase that imports ``sqlglot`` directly.
All check code goes through the protocol interfaces defined in
:mod:`lint_engine.sql_toolkit._protocols`.

SQLGlot's parser works on whole expressions and drops source offsets from
the tree, so this module re-attaches byte ranges by replaying the statement's
token stream against the parsed nodes.

Supports SQLGlot v25.x.
"""

from __future__ import annotations

import logging
from typing import Iterable, Iterator

from sqlglot import exp
from sqlglot.dialects.dialect import Dialect as GlotDialect
from sqlglot.errors import ErrorLevel, ParseError, SqlglotError, TokenError
from sqlglot.tokens import Token as GlotToken
from sqlglot.tokens import TokenType

from .._types import (
    Dialect,
    ParseUnit,
    SqlNode,
    SqlNodeKind,
    SqlParseError,
    SqlTokenizeError,
    Token,
    TokenKind,
)

logger = logging.getLogger(__name__)

_MAX_DEPTH = 100

# ---------------------------------------------------------------------------
# Internal: SQLGlot expression → SqlNodeKind mapping
# ---------------------------------------------------------------------------

# Maps sqlglot expression class names to our SqlNodeKind enum.
# This is the single point where sqlglot types are translated into our
# implementation-agnostic types.
_EXP_KIND_MAP: dict[str, SqlNodeKind] = {
    "Select": SqlNodeKind.SELECT,
    "Create": SqlNodeKind.CREATE,
    "Insert": SqlNodeKind.INSERT,
    "Update": SqlNodeKind.UPDATE,
    "Delete": SqlNodeKind.DELETE,
    "Drop": SqlNodeKind.DROP,
    "Command": SqlNodeKind.COMMAND,
    "With": SqlNodeKind.WITH,
    "CTE": SqlNodeKind.CTE,
    "From": SqlNodeKind.FROM,
    "Join": SqlNodeKind.JOIN,
    "Where": SqlNodeKind.WHERE,
    "Group": SqlNodeKind.GROUP,
    "Having": SqlNodeKind.HAVING,
    "Order": SqlNodeKind.ORDER,
    "Table": SqlNodeKind.TABLE,
    "Schema": SqlNodeKind.SCHEMA,
    "Column": SqlNodeKind.COLUMN,
    "ColumnDef": SqlNodeKind.COLUMN_DEF,
    "Star": SqlNodeKind.STAR,
    "Alias": SqlNodeKind.ALIAS,
    "TableAlias": SqlNodeKind.TABLE_ALIAS,
    "Identifier": SqlNodeKind.IDENTIFIER,
    "Literal": SqlNodeKind.LITERAL,
    "And": SqlNodeKind.AND,
    "Or": SqlNodeKind.OR,
    "Paren": SqlNodeKind.PAREN,
    "Subquery": SqlNodeKind.SUBQUERY,
    "Window": SqlNodeKind.WINDOW,
    "UserDefinedFunction": SqlNodeKind.FUNCTION_DECLARATION,
    "DataType": SqlNodeKind.DATA_TYPE,
}


def _token_types(*names: str) -> frozenset[TokenType]:
    """Resolve token type names, skipping ones this sqlglot release lacks."""
    return frozenset(getattr(TokenType, name) for name in names if hasattr(TokenType, name))


_STRING_TOKEN_TYPES = _token_types(
    "STRING",
    "NATIONAL_STRING",
    "RAW_STRING",
    "BYTE_STRING",
    "HEX_STRING",
    "BIT_STRING",
    "HEREDOC_STRING",
    "UNICODE_STRING",
)
_NUMBER_TOKEN_TYPES = _token_types("NUMBER")
_LITERAL_TOKEN_TYPES = _STRING_TOKEN_TYPES | _NUMBER_TOKEN_TYPES
_IDENTIFIER_TOKEN_TYPES = _token_types("VAR", "IDENTIFIER")


def _glot_dialect(dialect: Dialect) -> GlotDialect:
    """Return the sqlglot dialect instance for a :class:`Dialect` member."""
    return GlotDialect.get_or_raise(dialect.value)


def _classify_node(node: exp.Expression) -> SqlNodeKind:
    """Map a sqlglot expression to a :class:`SqlNodeKind`."""
    kind = _EXP_KIND_MAP.get(type(node).__name__)
    if kind is not None:
        return kind

    # Function subclass check covers both built-ins and anonymous calls.
    if isinstance(node, exp.Func):
        return SqlNodeKind.FUNCTION

    return SqlNodeKind.UNKNOWN


def _node_name(node: exp.Expression) -> str:
    """Extract a meaningful name from a sqlglot expression node."""
    # Joins are named after their type words, e.g. "LEFT OUTER".
    if isinstance(node, exp.Join):
        parts = (node.text("method"), node.text("side"), node.text("kind"))
        return " ".join(part for part in parts if part).upper()
    # Creates are named after the created object kind, e.g. "TABLE".
    if isinstance(node, exp.Create):
        return node.text("kind").upper()
    if isinstance(node, (exp.Identifier, exp.Literal)):
        return node.name or ""
    if isinstance(node, exp.Star):
        return "*"
    if isinstance(node, exp.DataType):
        return node.this.name if isinstance(node.this, exp.DataType.Type) else ""
    if isinstance(node, exp.Alias):
        return node.alias or ""
    # Generic fallback.
    if hasattr(node, "name"):
        return str(node.name) if node.name else ""
    return ""


def _node_alias(node: exp.Expression) -> str:
    """Extract the alias from a sqlglot expression, if present."""
    if isinstance(node, exp.Alias):
        return node.alias or ""
    alias_node = node.args.get("alias")
    if alias_node is not None and hasattr(alias_node, "name"):
        return alias_node.name or ""
    return ""


# ---------------------------------------------------------------------------
# Internal: source offsets
# ---------------------------------------------------------------------------


class _TokenLocator:
    """Attributes source tokens to leaf expressions.

    Leaves are visited in pre-order, which follows source order closely
    enough that claiming the first unclaimed token with matching text
    recovers the right occurrence.
    """

    def __init__(self, tokens: list[GlotToken]) -> None:
        self._tokens = tokens
        self._claimed = [False] * len(tokens)

    def locate(self, node: exp.Expression) -> GlotToken | None:
        if isinstance(node, exp.Identifier):
            return self._claim(node.name, exclude=_LITERAL_TOKEN_TYPES) or self._claim(node.name)
        if isinstance(node, exp.Literal):
            types = _STRING_TOKEN_TYPES if node.is_string else _NUMBER_TOKEN_TYPES
            return self._claim(node.name, types=types) or self._claim(node.name)
        if isinstance(node, exp.Star):
            return self._claim("*")
        if isinstance(node, exp.Null):
            return self._claim("NULL", fold_case=True)
        if isinstance(node, exp.Boolean):
            return self._claim("TRUE" if node.this else "FALSE", fold_case=True)
        if isinstance(node, exp.DataType) and isinstance(node.this, exp.DataType.Type):
            return self._claim_type(node.this.name)
        return None

    def _claim(
        self,
        text: str,
        *,
        fold_case: bool = False,
        types: Iterable[TokenType] | None = None,
        exclude: Iterable[TokenType] | None = None,
    ) -> GlotToken | None:
        wanted = text.upper() if fold_case else text
        for index, token in enumerate(self._tokens):
            if self._claimed[index]:
                continue
            if types is not None and token.token_type not in types:
                continue
            if exclude is not None and token.token_type in exclude:
                continue
            candidate = token.text.upper() if fold_case else token.text
            if candidate == wanted:
                self._claimed[index] = True
                return token
        return None

    def _claim_type(self, type_name: str) -> GlotToken | None:
        for index, token in enumerate(self._tokens):
            if not self._claimed[index] and token.token_type.name == type_name:
                self._claimed[index] = True
                return token
        return None


# Argument order for expressions whose ``arg_types`` do not follow the
# order the parts are written in.
_SOURCE_ARG_ORDER: dict[type[exp.Expression], tuple[str, ...]] = {
    exp.CTE: ("alias", "this"),
    exp.Column: ("catalog", "db", "table", "this"),
    exp.Table: ("catalog", "db", "this", "alias"),
}


def _iter_children(node: exp.Expression) -> Iterator[exp.Expression]:
    """Yield the child expressions of *node* in the order they are written.

    ``node.args`` keeps insertion order, which is not source order when the
    parser attaches a clause after the fact (``WITH`` on a select).  The
    declared ``arg_types`` follow the grammar instead.
    """
    keys = list(_SOURCE_ARG_ORDER.get(type(node), ()))
    keys += [key for key in node.arg_types if key not in keys]
    keys += [key for key in node.args if key not in keys]

    for key in keys:
        value = node.args.get(key)
        for item in value if isinstance(value, list) else [value]:
            if isinstance(item, exp.Expression):
                yield item


def _to_sql_node(
    node: exp.Expression,
    locator: _TokenLocator,
    parent: SqlNode | None = None,
    *,
    depth: int = 0,
) -> SqlNode:
    """Recursively convert a sqlglot AST into a :class:`SqlNode` tree.

    Inner nodes span the union of their children's ranges.  Limits recursion
    depth to 100; deeper subtrees are cut off as childless nodes.
    """
    sql_node = SqlNode(
        kind=_classify_node(node),
        name=_node_name(node),
        alias=_node_alias(node),
        parent=parent,
        raw=node,
    )
    if depth > _MAX_DEPTH:
        return sql_node

    token = locator.locate(node)
    start, end = (token.start, token.end + 1) if token is not None else (-1, -1)

    children: list[SqlNode] = []
    for child in _iter_children(node):
        child_node = _to_sql_node(child, locator, sql_node, depth=depth + 1)
        children.append(child_node)
        if child_node.has_position:
            start = child_node.start if start < 0 else min(start, child_node.start)
            end = max(end, child_node.end)

    sql_node.children = tuple(children)
    sql_node.start = start
    sql_node.end = end
    return sql_node


def _split_statements(tokens: list[GlotToken]) -> Iterator[list[GlotToken]]:
    """Group tokens into statements at semicolons, dropping empty ones."""
    chunk: list[GlotToken] = []
    for token in tokens:
        if token.token_type == TokenType.SEMICOLON:
            if chunk:
                yield chunk
            chunk = []
        else:
            chunk.append(token)
    if chunk:
        yield chunk


def _to_parse_error(exc: ParseError, chunk: list[GlotToken]) -> SqlParseError:
    """Convert a sqlglot ``ParseError`` into a positioned :class:`SqlParseError`."""
    statement_start = chunk[0].start
    details = exc.errors[0] if exc.errors else {}
    description = details.get("description") or str(exc)

    position = statement_start
    line, col = details.get("line"), details.get("col")
    for token in chunk:
        if token.line == line and token.col == col:
            position = token.start
            break

    message = f"Syntax error: {description}"
    highlight = details.get("highlight")
    if highlight:
        message += f" near '{highlight}'"
    return SqlParseError(message, position=position, statement_start=statement_start)


# ---------------------------------------------------------------------------
# SqlGlotTokenizer
# ---------------------------------------------------------------------------


class SqlGlotTokenizer:
    """SQLGlot-backed :class:`SqlTokenizer` implementation."""

    def __init__(self, dialect: Dialect) -> None:
        self._dialect = _glot_dialect(dialect)
        self._keywords = frozenset(self._dialect.tokenizer_class.KEYWORDS)

    def raw_tokens(self, sql: str) -> list[GlotToken]:
        """Return sqlglot's own tokens for *sql*."""
        try:
            return self._dialect.tokenize(sql)
        except TokenError as exc:
            raise SqlTokenizeError(f"Failed to tokenize SQL: {exc}") from exc

    def tokenize(self, sql: str) -> list[Token]:
        return [
            Token(
                kind=self._classify(token),
                start=token.start,
                end=token.end + 1,
                text=sql[token.start : token.end + 1],
            )
            for token in self.raw_tokens(sql)
        ]

    def _classify(self, token: GlotToken) -> TokenKind:
        if token.token_type in _IDENTIFIER_TOKEN_TYPES:
            return TokenKind.IDENTIFIER
        if token.token_type in _LITERAL_TOKEN_TYPES:
            return TokenKind.OTHER
        if any(ch.isalpha() for ch in token.text):
            normalized = " ".join(token.text.upper().split())
            if normalized in self._keywords:
                return TokenKind.KEYWORD
        return TokenKind.OTHER


# ---------------------------------------------------------------------------
# SqlGlotParser
# ---------------------------------------------------------------------------


class SqlGlotParser:
    """SQLGlot-backed :class:`SqlParser` implementation."""

    def __init__(self, dialect: Dialect, tokenizer: SqlGlotTokenizer) -> None:
        self._dialect = _glot_dialect(dialect)
        self._tokenizer = tokenizer

    def parse_statements(self, sql: str) -> Iterator[ParseUnit]:
        """Parse *sql* one statement at a time."""
        try:
            tokens = self._tokenizer.raw_tokens(sql)
        except SqlTokenizeError as exc:
            raise SqlParseError(str(exc), position=0, statement_start=0) from exc

        for chunk in _split_statements(tokens):
            yield self._parse_chunk(chunk, sql)

    def _parse_chunk(self, chunk: list[GlotToken], sql: str) -> ParseUnit:
        start, end = chunk[0].start, chunk[-1].end + 1
        parser = self._dialect.parser(error_level=ErrorLevel.IMMEDIATE)
        try:
            expressions = parser.parse(chunk, sql)
        except ParseError as exc:
            raise _to_parse_error(exc, chunk) from exc
        except SqlglotError as exc:
            raise SqlParseError(
                f"Syntax error: {exc}", position=start, statement_start=start
            ) from exc

        expression = next((e for e in expressions if e is not None), None)
        if expression is None:
            logger.debug("Statement at byte %d produced no expression", start)
            return ParseUnit(
                root=SqlNode(kind=SqlNodeKind.UNKNOWN, start=start, end=end),
                start=start,
                end=end,
            )

        root = _to_sql_node(expression, _TokenLocator(chunk))
        return ParseUnit(root=root, start=start, end=end)


# ---------------------------------------------------------------------------
# Composite Toolkit
# ---------------------------------------------------------------------------


class SqlGlotToolkit:
    """Composite :class:`SqlToolkit` backed by SQLGlot.

    This is the default implementation returned by :func:`get_sql_toolkit`.
    """

    def __init__(self, dialect: Dialect = Dialect.BIGQUERY) -> None:
        self._dialect = Dialect(dialect)
        self._tokenizer = SqlGlotTokenizer(self._dialect)
        self._parser = SqlGlotParser(self._dialect, self._tokenizer)

    @property
    def dialect(self) -> Dialect:
        return self._dialect

    @property
    def tokenizer(self) -> SqlGlotTokenizer:
        return self._tokenizer

    @property
    def parser(self) -> SqlGlotParser:
        return self._parser
