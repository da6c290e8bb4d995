"""Rule identifiers.

Each :class:`RuleKind` value is the public, kebab-case name used in
``NOLINT(...)`` / ``LINT(...)`` directives, in the ``disabled_rules``
setting, and in rendered diagnostics.  Declaration order is the lookup and
listing order.
"""

from __future__ import annotations

from enum import Enum


class RuleKind(str, Enum):
    """Closed set of diagnostic rules."""

    PARSE_FAILED = "parser-failed"
    NO_LINT = "nolint"
    LINE_LIMIT = "line-limit-exceed"
    STATEMENT_SEMICOLON = "statement-semicolon"
    LETTER_CASE = "consistent-letter-case"
    COMMENT_STYLE = "consistent-comment-style"
    ALIAS = "alias"
    UNIFORM_INDENT = "uniform-indent"
    TAB_OUTSIDE_INDENT = "not-indent-tab"
    QUOTE_STYLE = "single-or-double-quote"
    TABLE_NAME = "table-name"
    WINDOW_NAME = "window-name"
    FUNCTION_NAME = "function-name"
    DATA_TYPE_NAME = "data-type-name"
    COLUMN_NAME = "column-name"
    PARAMETER_NAME = "parameter-name"
    CONSTANT_NAME = "constant-name"
    JOIN = "join"
    IMPORTS = "imports"
    EXPRESSION_PARENTHESES = "expression-parentheses"
    COUNT_STAR = "count-star"
    KEYWORD_IDENTIFIER = "keyword-identifier"

    @classmethod
    def from_name(cls, name: str) -> RuleKind | None:
        """Return the rule called *name*, or ``None`` if no rule has that name.

        Older spellings of a rule name are accepted too.
        """
        try:
            return cls(name)
        except ValueError:
            return _LEGACY_NAMES.get(name)

    @property
    def description(self) -> str:
        return _DESCRIPTIONS[self]


_DESCRIPTIONS: dict[RuleKind, str] = {
    RuleKind.PARSE_FAILED: "The document must parse.",
    RuleKind.NO_LINT: "NOLINT / LINT directives must name known rules.",
    RuleKind.LINE_LIMIT: "Lines must not exceed the configured length.",
    RuleKind.STATEMENT_SEMICOLON: "The last statement must end with a semicolon.",
    RuleKind.LETTER_CASE: "Keywords use one letter case.",
    RuleKind.COMMENT_STYLE: "Single-line comments use one marker.",
    RuleKind.ALIAS: "Aliases are introduced with AS.",
    RuleKind.UNIFORM_INDENT: "Indentation uses only the allowed character.",
    RuleKind.TAB_OUTSIDE_INDENT: "Tabs appear only in indentation.",
    RuleKind.QUOTE_STYLE: "String literals use the preferred quote.",
    RuleKind.TABLE_NAME: "Created tables are named in UpperCamelCase.",
    RuleKind.WINDOW_NAME: "Named windows are UpperCamelCase.",
    RuleKind.FUNCTION_NAME: "Created functions are named in UpperCamelCase.",
    RuleKind.DATA_TYPE_NAME: "Simple data types are written in all caps.",
    RuleKind.COLUMN_NAME: "Column aliases are named in lower_snake_case.",
    RuleKind.PARAMETER_NAME: "Function parameters are lower_snake_case, table parameters UpperCamelCase.",
    RuleKind.CONSTANT_NAME: "Created constants are named in CAPS_SNAKE_CASE.",
    RuleKind.JOIN: "Joins state their type explicitly.",
    RuleKind.IMPORTS: "Imports are typed, grouped and unique.",
    RuleKind.EXPRESSION_PARENTHESES: "AND and OR are not mixed without parentheses.",
    RuleKind.COUNT_STAR: "COUNT(*) is used instead of COUNT(1).",
    RuleKind.KEYWORD_IDENTIFIER: "Identifiers are not bare keywords.",
}

_LEGACY_NAMES: dict[str, RuleKind] = {
    "expression-parantheses": RuleKind.EXPRESSION_PARENTHESES,
}
