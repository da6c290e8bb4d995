"""Unit tests for the check registry and the built-in suites."""

from __future__ import annotations

import pytest

from lint_engine.checks.base import BaseCheck
from lint_engine.checks.builtin import (
    AliasCheck,
    LineLimitCheck,
    ParserSucceedsCheck,
    all_checks,
    ast_dependent_checks,
)
from lint_engine.checks.models import RunContext
from lint_engine.checks.registry import CheckRegistry
from lint_engine.diagnostics import DiagnosticReport, SourceText
from lint_engine.rules import RuleKind


class _StubCheck(BaseCheck):
    def __init__(self, rule: RuleKind) -> None:
        self._rule = rule

    @property
    def rule(self) -> RuleKind:
        return self._rule

    def run(self, source: SourceText, context: RunContext) -> DiagnosticReport:
        return DiagnosticReport.for_source(source)


class TestCheckRegistry:
    def test_register_and_get(self) -> None:
        registry = CheckRegistry()
        check = _StubCheck(RuleKind.JOIN)
        registry.register(check)
        assert registry.get(RuleKind.JOIN) is check
        assert RuleKind.JOIN in registry
        assert len(registry) == 1

    def test_get_missing_returns_none(self) -> None:
        assert CheckRegistry().get(RuleKind.JOIN) is None

    def test_duplicate_rule_raises(self) -> None:
        registry = CheckRegistry([_StubCheck(RuleKind.JOIN)])
        with pytest.raises(ValueError, match="already registered"):
            registry.register(_StubCheck(RuleKind.JOIN))

    def test_preserves_registration_order(self) -> None:
        rules = [RuleKind.IMPORTS, RuleKind.ALIAS, RuleKind.JOIN]
        registry = CheckRegistry([_StubCheck(rule) for rule in rules])
        assert registry.get_rules() == rules
        assert [c.rule for c in registry.get_all()] == rules

    def test_unregister(self) -> None:
        registry = CheckRegistry([_StubCheck(RuleKind.JOIN)])
        registry.unregister(RuleKind.JOIN)
        assert RuleKind.JOIN not in registry
        assert len(registry) == 0

    def test_unregister_missing_raises(self) -> None:
        with pytest.raises(KeyError):
            CheckRegistry().unregister(RuleKind.JOIN)

    def test_parser_check_must_precede_ast_checks(self) -> None:
        registry = CheckRegistry([AliasCheck()])
        with pytest.raises(ValueError, match="must be registered before alias"):
            registry.register(ParserSucceedsCheck())

    def test_parser_check_after_text_checks_is_fine(self) -> None:
        registry = CheckRegistry([LineLimitCheck(), ParserSucceedsCheck(), AliasCheck()])
        assert len(registry) == 3


class TestBuiltinSuites:
    def test_all_checks_covers_every_rule_but_nolint(self) -> None:
        registry = all_checks()
        assert set(registry.get_rules()) == set(RuleKind) - {RuleKind.NO_LINT}

    def test_all_checks_order(self) -> None:
        assert all_checks().get_rules()[:3] == [
            RuleKind.LINE_LIMIT,
            RuleKind.PARSE_FAILED,
            RuleKind.STATEMENT_SEMICOLON,
        ]

    def test_ast_dependent_checks(self) -> None:
        assert ast_dependent_checks().get_rules() == [
            RuleKind.ALIAS,
            RuleKind.TABLE_NAME,
            RuleKind.WINDOW_NAME,
            RuleKind.FUNCTION_NAME,
            RuleKind.DATA_TYPE_NAME,
            RuleKind.COLUMN_NAME,
            RuleKind.PARAMETER_NAME,
            RuleKind.JOIN,
            RuleKind.EXPRESSION_PARENTHESES,
            RuleKind.KEYWORD_IDENTIFIER,
        ]
