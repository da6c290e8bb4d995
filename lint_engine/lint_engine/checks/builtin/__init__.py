"""Built-in checks and the two standard suites built from them."""

from __future__ import annotations

from lint_engine.checks.builtin.lexical import (
    CommentStyleCheck,
    ConstantNameCheck,
    CountStarCheck,
    ImportsCheck,
    LineLimitCheck,
    QuoteStyleCheck,
    SemicolonCheck,
    TabOutsideIndentCheck,
    UniformIndentCheck,
)
from lint_engine.checks.builtin.nodes import (
    AliasCheck,
    ColumnNameCheck,
    DataTypeNameCheck,
    ExpressionParenthesesCheck,
    FunctionNameCheck,
    JoinCheck,
    ParameterNameCheck,
    TableNameCheck,
    WindowNameCheck,
)
from lint_engine.checks.builtin.parser import ParserSucceedsCheck
from lint_engine.checks.builtin.tokens import KeywordIdentifierCheck, LetterCaseCheck
from lint_engine.checks.registry import CheckRegistry


def all_checks() -> CheckRegistry:
    """Return the complete suite.

    The parser check comes before every check that needs the syntax tree,
    so they all share its parse.
    """
    return CheckRegistry(
        [
            LineLimitCheck(),
            ParserSucceedsCheck(),
            SemicolonCheck(),
            LetterCaseCheck(),
            CommentStyleCheck(),
            AliasCheck(),
            UniformIndentCheck(),
            TabOutsideIndentCheck(),
            QuoteStyleCheck(),
            TableNameCheck(),
            WindowNameCheck(),
            FunctionNameCheck(),
            DataTypeNameCheck(),
            ColumnNameCheck(),
            ParameterNameCheck(),
            ConstantNameCheck(),
            JoinCheck(),
            ImportsCheck(),
            ExpressionParenthesesCheck(),
            CountStarCheck(),
            KeywordIdentifierCheck(),
        ]
    )


def ast_dependent_checks() -> CheckRegistry:
    """Return the checks that need a successful parse, without the parser check."""
    return CheckRegistry([check for check in all_checks().get_all() if check.requires_ast])


__all__ = [
    "AliasCheck",
    "ColumnNameCheck",
    "CommentStyleCheck",
    "ConstantNameCheck",
    "CountStarCheck",
    "DataTypeNameCheck",
    "ExpressionParenthesesCheck",
    "FunctionNameCheck",
    "ImportsCheck",
    "JoinCheck",
    "KeywordIdentifierCheck",
    "LetterCaseCheck",
    "LineLimitCheck",
    "ParameterNameCheck",
    "ParserSucceedsCheck",
    "QuoteStyleCheck",
    "SemicolonCheck",
    "TabOutsideIndentCheck",
    "TableNameCheck",
    "UniformIndentCheck",
    "WindowNameCheck",
    "all_checks",
    "ast_dependent_checks",
]
