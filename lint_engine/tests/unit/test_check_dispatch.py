"""Unit tests for node-rule dispatch and the parse cache."""

from __future__ import annotations

import pytest

from lint_engine.checks.dispatch import apply_rule, collect_identifier_starts, iter_parse_units
from lint_engine.checks.models import ParseCache, RunContext
from lint_engine.config import LintSettings
from lint_engine.diagnostics import DiagnosticReport, SourceText
from lint_engine.directives import DirectiveParser
from lint_engine.rules import RuleKind
from lint_engine.sql_toolkit import ParseUnit, SqlNode, SqlNodeKind, get_sql_toolkit


def _make_context(source: SourceText, **overrides: object) -> RunContext:
    settings = LintSettings(**overrides)
    ledger, _ = DirectiveParser().build_ledger(source, settings.disabled_rule_kinds())
    return RunContext(settings=settings, ledger=ledger, toolkit=get_sql_toolkit(settings.dialect))


def _flag_identifiers(node: SqlNode, source: SourceText, context: RunContext) -> DiagnosticReport:
    report = DiagnosticReport.for_source(source)
    if node.kind == SqlNodeKind.IDENTIFIER:
        report.add(RuleKind.ALIAS, source, node.start, node.name)
    return report


class _CountingParser:
    """Wraps a real parser and counts full-document parses."""

    def __init__(self, inner) -> None:
        self._inner = inner
        self.calls = 0

    def parse_statements(self, sql: str):
        self.calls += 1
        return self._inner.parse_statements(sql)


class _CountingToolkit:
    def __init__(self) -> None:
        self._inner = get_sql_toolkit()
        self.parser = _CountingParser(self._inner.parser)

    @property
    def dialect(self):
        return self._inner.dialect

    @property
    def tokenizer(self):
        return self._inner.tokenizer


# ---------------------------------------------------------------------------
# iter_parse_units
# ---------------------------------------------------------------------------


class TestIterParseUnits:
    def test_parses_when_no_cache(self) -> None:
        source = SourceText("SELECT 1; SELECT 2;")
        units = list(iter_parse_units(source, _make_context(source)))
        assert len(units) == 2

    def test_yields_nothing_when_a_statement_fails(self) -> None:
        source = SourceText("SELECT 1;\nSELECT 3+5\nSELECT 4+6;")
        assert list(iter_parse_units(source, _make_context(source))) == []

    def test_uses_populated_cache(self) -> None:
        source = SourceText("SELECT 1;")
        context = _make_context(source)
        cached = ParseUnit(root=SqlNode(kind=SqlNodeKind.UNKNOWN), start=0, end=0)
        context.parse_cache = ParseCache(units=(cached,), populated=True)
        assert list(iter_parse_units(source, context)) == [cached]

    def test_unpopulated_cache_is_ignored(self) -> None:
        source = SourceText("SELECT 1;")
        context = _make_context(source)
        context.parse_cache = ParseCache()
        assert not context.has_parse_cache
        assert len(list(iter_parse_units(source, context))) == 1

    def test_cache_avoids_reparsing(self) -> None:
        source = SourceText("SELECT a FROM t;")
        context = _make_context(source)
        toolkit = _CountingToolkit()
        context.toolkit = toolkit

        units = tuple(iter_parse_units(source, context))
        context.parse_cache = ParseCache(units=units, populated=True)
        list(iter_parse_units(source, context))
        collect_identifier_starts(source, context)
        assert toolkit.parser.calls == 1


# ---------------------------------------------------------------------------
# apply_rule
# ---------------------------------------------------------------------------


class TestApplyRule:
    def test_visits_every_node_in_document_order(self) -> None:
        source = SourceText("SELECT a, b FROM t;\nSELECT c;")
        report = apply_rule(_flag_identifiers, source, _make_context(source))
        assert [d.message for d in report.diagnostics] == ["a", "b", "t", "c"]

    def test_no_diagnostics_after_parse_failure(self) -> None:
        source = SourceText("SELECT 3+5\nSELECT 4+6;")
        report = apply_rule(_flag_identifiers, source, _make_context(source))
        assert report.is_clean

    def test_statements_before_a_failure_are_not_reported(self) -> None:
        source = SourceText("SELECT a FROM t;\nSELECT 3+5\nSELECT 4+6;")
        report = apply_rule(_flag_identifiers, source, _make_context(source))
        assert report.is_clean

    def test_raising_rule_becomes_hard_failure(self) -> None:
        source = SourceText("SELECT a, b FROM t;")
        seen: list[str] = []

        def rule(node: SqlNode, src: SourceText, context: RunContext) -> DiagnosticReport:
            if node.kind == SqlNodeKind.IDENTIFIER:
                seen.append(node.name)
                if node.name == "b":
                    raise RuntimeError("boom")
            return _flag_identifiers(node, src, context)

        report = apply_rule(rule, source, _make_context(source), kind=RuleKind.ALIAS)
        assert seen == ["a", "b"]
        assert [d.message for d in report.diagnostics] == ["a"]
        assert len(report.failures) == 1
        assert report.failures[0].rule is RuleKind.ALIAS
        assert "boom" in report.failures[0].message


class TestCollectIdentifierStarts:
    def test_offsets(self) -> None:
        source = SourceText("SELECT a, Date FROM t;")
        starts = collect_identifier_starts(source, _make_context(source))
        assert starts == frozenset({7, 10, 20})

    @pytest.mark.parametrize("text", ["", "SELECT 3+5\nSELECT 4+6;"])
    def test_empty_when_nothing_parses(self, text: str) -> None:
        source = SourceText(text)
        assert collect_identifier_starts(source, _make_context(source)) == frozenset()
