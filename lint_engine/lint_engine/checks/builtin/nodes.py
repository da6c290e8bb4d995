"""Built-in checks that inspect the syntax tree node by node."""

from __future__ import annotations

from lint_engine.checks.base import NodeRuleCheck
from lint_engine.checks.models import RunContext
from lint_engine.diagnostics import DiagnosticReport, SourceText
from lint_engine.rules import RuleKind
from lint_engine.scanner import (
    is_all_caps,
    is_lower_snake_case,
    is_upper_camel_case,
    next_word,
    previous_word,
    skip_spaces_backward,
)
from lint_engine.sql_toolkit import SqlNode, SqlNodeKind

_CONNECTIVES = frozenset({SqlNodeKind.AND, SqlNodeKind.OR})


def _identifier_child(node: SqlNode, name: str, *, last: bool = False) -> SqlNode | None:
    """Return a positioned identifier child of *node* called *name*."""
    children = reversed(node.children) if last else node.children
    for child in children:
        if child.kind == SqlNodeKind.IDENTIFIER and child.name == name and child.has_position:
            return child
    return None


class AliasCheck(NodeRuleCheck):
    """Aliases are introduced with ``AS``.

    Covers expression aliases and table aliases; CTE names are not aliases.
    """

    @property
    def rule(self) -> RuleKind:
        return RuleKind.ALIAS

    def visit(self, node: SqlNode, source: SourceText, context: RunContext) -> DiagnosticReport:
        report = DiagnosticReport.for_source(source)
        if node.kind == SqlNodeKind.ALIAS:
            identifier = _identifier_child(node, node.alias, last=True)
        elif node.kind == SqlNodeKind.TABLE_ALIAS:
            if node.parent is not None and node.parent.kind == SqlNodeKind.CTE:
                return report
            identifier = _identifier_child(node, node.name)
        else:
            return report

        if identifier is None:
            return report
        word, _ = previous_word(source.text, identifier.start)
        if word.upper() != "AS":
            self.flag(report, source, context, identifier.start, "Always use AS keyword before aliases")
        return report


class TableNameCheck(NodeRuleCheck):
    """Tables created with ``CREATE TABLE`` are named in UpperCamelCase."""

    @property
    def rule(self) -> RuleKind:
        return RuleKind.TABLE_NAME

    def visit(self, node: SqlNode, source: SourceText, context: RunContext) -> DiagnosticReport:
        report = DiagnosticReport.for_source(source)
        if node.kind != SqlNodeKind.CREATE or node.name != "TABLE":
            return report

        table = node.find(SqlNodeKind.TABLE)
        if table is None:
            return report
        identifier = _identifier_child(table, table.name)
        if identifier is not None and not is_upper_camel_case(identifier.name):
            self.flag(
                report,
                source,
                context,
                identifier.start,
                "Table names or table aliases should be UpperCamelCase.",
            )
        return report


class WindowNameCheck(NodeRuleCheck):
    """Windows defined in a ``WINDOW`` clause are named in UpperCamelCase."""

    @property
    def rule(self) -> RuleKind:
        return RuleKind.WINDOW_NAME

    def visit(self, node: SqlNode, source: SourceText, context: RunContext) -> DiagnosticReport:
        report = DiagnosticReport.for_source(source)
        if node.kind != SqlNodeKind.WINDOW or node.parent is None or node.parent.kind != SqlNodeKind.SELECT:
            return report

        # Window functions in the select list lead with the function, not a name.
        name = node.children[0] if node.children else None
        if name is None or name.kind != SqlNodeKind.IDENTIFIER or not name.has_position:
            return report
        if not is_upper_camel_case(name.name):
            self.flag(report, source, context, name.start, "Window names should be UpperCamelCase.")
        return report


class FunctionNameCheck(NodeRuleCheck):
    """Functions created with ``CREATE FUNCTION`` are named in UpperCamelCase.

    Only the last part of a qualified name is checked.
    """

    @property
    def rule(self) -> RuleKind:
        return RuleKind.FUNCTION_NAME

    def visit(self, node: SqlNode, source: SourceText, context: RunContext) -> DiagnosticReport:
        report = DiagnosticReport.for_source(source)
        if node.kind != SqlNodeKind.FUNCTION_DECLARATION or not node.children:
            return report

        parts = [n for n in node.children[0].walk() if n.kind == SqlNodeKind.IDENTIFIER and n.has_position]
        if parts and not is_upper_camel_case(parts[-1].name):
            self.flag(report, source, context, parts[-1].start, "Function names should be UpperCamelCase.")
        return report


class DataTypeNameCheck(NodeRuleCheck):
    """Simple data types are written in all caps.

    Parameterized types such as ``ARRAY<INT64>`` are not checked themselves,
    only the simple types inside them.
    """

    @property
    def rule(self) -> RuleKind:
        return RuleKind.DATA_TYPE_NAME

    def visit(self, node: SqlNode, source: SourceText, context: RunContext) -> DiagnosticReport:
        report = DiagnosticReport.for_source(source)
        if node.kind != SqlNodeKind.DATA_TYPE or not node.has_position:
            return report
        if any(child.kind == SqlNodeKind.DATA_TYPE for child in node.children):
            return report

        word, _ = next_word(source.text, node.start)
        if word and not is_all_caps(word):
            self.flag(report, source, context, node.start, "Simple SQL data types should be all caps.")
        return report


class ParameterNameCheck(NodeRuleCheck):
    """Function parameters are lower_snake_case; table parameters are UpperCamelCase."""

    @property
    def rule(self) -> RuleKind:
        return RuleKind.PARAMETER_NAME

    def visit(self, node: SqlNode, source: SourceText, context: RunContext) -> DiagnosticReport:
        report = DiagnosticReport.for_source(source)
        parent = node.parent
        if node.kind != SqlNodeKind.COLUMN_DEF or parent is None or parent.kind != SqlNodeKind.FUNCTION_DECLARATION:
            return report

        identifier = _identifier_child(node, node.name)
        if identifier is None:
            return report
        is_table = any(child.kind == SqlNodeKind.DATA_TYPE and child.name == "TABLE" for child in node.children)
        if is_table and not is_upper_camel_case(identifier.name):
            self.flag(
                report,
                source,
                context,
                identifier.start,
                "Table or proto function parameters should be UpperCamelCase.",
            )
        elif not is_table and not is_lower_snake_case(identifier.name):
            self.flag(
                report,
                source,
                context,
                identifier.start,
                "Non-table function parameters should be lower_snake_case.",
            )
        return report


class ColumnNameCheck(NodeRuleCheck):
    """Select-list aliases are lower_snake_case (UpperCamelCase is tolerated)."""

    @property
    def rule(self) -> RuleKind:
        return RuleKind.COLUMN_NAME

    def visit(self, node: SqlNode, source: SourceText, context: RunContext) -> DiagnosticReport:
        report = DiagnosticReport.for_source(source)
        if node.kind != SqlNodeKind.ALIAS or node.parent is None or node.parent.kind != SqlNodeKind.SELECT:
            return report

        identifier = _identifier_child(node, node.alias, last=True)
        if identifier is None:
            return report
        if not is_lower_snake_case(identifier.name) and not is_upper_camel_case(identifier.name):
            self.flag(report, source, context, identifier.start, "Column names should be lower_snake_case.")
        return report


class JoinCheck(NodeRuleCheck):
    """Every explicit ``JOIN`` names its type (``INNER``, ``LEFT``, ``CROSS``, ...).

    Comma joins carry no ``JOIN`` keyword and are left alone.
    """

    @property
    def rule(self) -> RuleKind:
        return RuleKind.JOIN

    def visit(self, node: SqlNode, source: SourceText, context: RunContext) -> DiagnosticReport:
        report = DiagnosticReport.for_source(source)
        if node.kind != SqlNodeKind.JOIN or node.name or not node.has_position:
            return report

        text = source.text
        before = skip_spaces_backward(text, node.start - 1)
        while before >= 0 and text[before] == "(":
            before = skip_spaces_backward(text, before - 1)
        if before >= 0 and text[before] == ",":
            return report

        word, start = previous_word(text, before + 1)
        position = start if word.upper() == "JOIN" else node.start
        self.flag(report, source, context, position, "Always explicitly indicate the type of join.")
        return report


class ExpressionParenthesesCheck(NodeRuleCheck):
    """``AND`` and ``OR`` are not mixed without parentheses."""

    @property
    def rule(self) -> RuleKind:
        return RuleKind.EXPRESSION_PARENTHESES

    def visit(self, node: SqlNode, source: SourceText, context: RunContext) -> DiagnosticReport:
        report = DiagnosticReport.for_source(source)
        parent = node.parent
        if node.kind not in _CONNECTIVES or parent is None or not node.has_position:
            return report
        # Parenthesized operands sit under a PAREN node, not directly under
        # the other connective.
        if parent.kind in _CONNECTIVES and parent.kind != node.kind:
            self.flag(
                report,
                source,
                context,
                node.start,
                "Use parentheses between consecutive AND and OR operators",
            )
        return report
