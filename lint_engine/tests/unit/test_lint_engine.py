"""Unit tests for the lint engine orchestrator."""

from __future__ import annotations

from lint_engine.checks.base import BaseCheck
from lint_engine.checks.builtin import (
    AliasCheck,
    ExpressionParenthesesCheck,
    LetterCaseCheck,
    LineLimitCheck,
)
from lint_engine.checks.engine import LintEngine, create_default_engine
from lint_engine.checks.models import RunContext
from lint_engine.checks.registry import CheckRegistry
from lint_engine.config import LintSettings
from lint_engine.diagnostics import DiagnosticReport, SourceText
from lint_engine.rules import RuleKind

DIRECTIVES_SQL = (
    "Select 3 a;\n"
    "-- NOLINT ( alias, consistent-letter-case)\n"
    "SELEcT 3 a;\n"
    "--LINT(alias)\n"
    " Select 3 a;\n"
    "--NOLINT  (  alias)\n"
    "--   LINT (consistent-letter-case)\n"
    " Select 3 a;\n"
)


def _summary(report: DiagnosticReport) -> list[tuple[RuleKind, int, int]]:
    return [(d.rule, d.line, d.column) for d in report.diagnostics]


class _ErrorCheck(BaseCheck):
    """A check that raises an exception."""

    @property
    def rule(self) -> RuleKind:
        return RuleKind.IMPORTS

    def run(self, source: SourceText, context: RunContext) -> DiagnosticReport:
        raise RuntimeError("Unexpected error in check")


class _OffsetCheck(BaseCheck):
    """Reports at a fixed offset, which may lie outside the document."""

    def __init__(self, offset: int) -> None:
        self._offset = offset

    @property
    def rule(self) -> RuleKind:
        return RuleKind.COUNT_STAR

    def run(self, source: SourceText, context: RunContext) -> DiagnosticReport:
        report = DiagnosticReport.for_source(source)
        self.flag(report, source, context, self._offset, "offset")
        return report


# ---------------------------------------------------------------------------
# Directives end to end
# ---------------------------------------------------------------------------


class TestDirectivesEndToEnd:
    def test_letter_case_and_alias(self) -> None:
        engine = LintEngine(
            settings=LintSettings(),
            registry=CheckRegistry([LetterCaseCheck(), AliasCheck()]),
        )
        report = engine.lint(DIRECTIVES_SQL)
        assert _summary(report) == [
            (RuleKind.LETTER_CASE, 1, 1),
            (RuleKind.ALIAS, 1, 10),
            (RuleKind.ALIAS, 5, 11),
            (RuleKind.LETTER_CASE, 8, 2),
        ]

    def test_full_suite_gives_same_result(self) -> None:
        report = create_default_engine(LintSettings()).lint(DIRECTIVES_SQL)
        assert _summary(report) == [
            (RuleKind.LETTER_CASE, 1, 1),
            (RuleKind.ALIAS, 1, 10),
            (RuleKind.ALIAS, 5, 11),
            (RuleKind.LETTER_CASE, 8, 2),
        ]
        assert report.failures == []

    def test_unknown_directive_name(self) -> None:
        report = create_default_engine(LintSettings()).lint("-- NOLINT(not-a-real-check)\nSELECT 1;")
        assert _summary(report) == [(RuleKind.NO_LINT, 1, 28)]

    def test_unknown_names_silenced_by_disabling_nolint(self) -> None:
        engine = create_default_engine(LintSettings(disabled_rules=["nolint"]))
        assert engine.lint("-- NOLINT(not-a-real-check)\nSELECT 1;").is_clean

    def test_config_disabled_rule_cannot_be_reenabled(self) -> None:
        engine = LintEngine(
            settings=LintSettings(disabled_rules=["alias"]),
            registry=CheckRegistry([AliasCheck()]),
        )
        assert engine.lint("-- LINT(alias)\nSELECT 1 a;").is_clean

    def test_misspelled_parentheses_name_suppresses(self) -> None:
        engine = LintEngine(settings=LintSettings(), registry=CheckRegistry([ExpressionParenthesesCheck()]))
        sql = "SELECT a OR b AND c;\n-- NOLINT(expression-parantheses)\nSELECT a OR b AND c;\n"
        report = engine.lint(sql)
        assert [(d.rule, d.line) for d in report.diagnostics] == [(RuleKind.EXPRESSION_PARENTHESES, 1)]


# ---------------------------------------------------------------------------
# Parse failures
# ---------------------------------------------------------------------------


class TestParseFailures:
    def test_only_the_parser_reports(self) -> None:
        report = create_default_engine(LintSettings()).lint("SELECT 3+5\nSELECT 4+6;")
        assert _summary(report) == [(RuleKind.PARSE_FAILED, 2, 1)]

    def test_text_checks_keep_reporting(self) -> None:
        report = create_default_engine(LintSettings(line_limit=5)).lint("SELECT 3+5\nSELECT 4+6;")
        rules = [d.rule for d in report.diagnostics]
        assert rules.count(RuleKind.LINE_LIMIT) == 2
        assert rules.count(RuleKind.PARSE_FAILED) == 1

    def test_parse_failure_can_be_suppressed(self) -> None:
        report = create_default_engine(LintSettings()).lint(
            "-- NOLINT(parser-failed)\nSELECT 3+5\nSELECT 4+6;"
        )
        assert report.is_clean


# ---------------------------------------------------------------------------
# Engine behaviour
# ---------------------------------------------------------------------------


class TestLintEngine:
    def test_empty_registry(self) -> None:
        engine = LintEngine(settings=LintSettings())
        assert len(engine.registry) == 0
        assert engine.lint("select 1").is_clean

    def test_register(self) -> None:
        engine = LintEngine(settings=LintSettings())
        engine.register(LineLimitCheck())
        assert RuleKind.LINE_LIMIT in engine.registry

    def test_failing_check_does_not_stop_the_run(self) -> None:
        engine = LintEngine(
            settings=LintSettings(line_limit=5),
            registry=CheckRegistry([_ErrorCheck(), LineLimitCheck()]),
        )
        report = engine.lint("SELECT 1;", filename="q.sql")
        assert len(report.diagnostics) == 1
        assert len(report.failures) == 1
        failure = report.failures[0]
        assert failure.rule is RuleKind.IMPORTS
        assert "Unexpected error in check" in failure.message
        assert report.render()[0].startswith("q.sql:Unhandled error in imports")

    def test_out_of_range_offset_becomes_failure(self) -> None:
        engine = LintEngine(settings=LintSettings(), registry=CheckRegistry([_OffsetCheck(99)]))
        report = engine.lint("SELECT 1;")
        assert report.diagnostics == []
        assert len(report.failures) == 1
        assert not report.is_clean

    def test_end_of_document_offset(self) -> None:
        engine = LintEngine(settings=LintSettings(), registry=CheckRegistry([_OffsetCheck(9)]))
        report = engine.lint("SELECT 1;")
        assert _summary(report) == [(RuleKind.COUNT_STAR, 1, 10)]

    def test_diagnostics_are_sorted(self) -> None:
        engine = create_default_engine(LintSettings())
        report = engine.lint("select 1 a;\nSELECT 2 AS b FROM t JOIN x;")
        positions = [(d.line, d.column) for d in report.diagnostics]
        assert positions == sorted(positions)
        assert {d.rule for d in report.diagnostics} == {
            RuleKind.LETTER_CASE,
            RuleKind.ALIAS,
            RuleKind.JOIN,
        }

    def test_filename_prefix(self) -> None:
        report = create_default_engine(LintSettings()).lint("SELECT 1", filename="q.sql")
        assert report.render() == [
            "q.sql:In line 1, column 9: Each statement should end with a semicolon ';'. [statement-semicolon]"
        ]

    def test_clean_document(self) -> None:
        sql = "SELECT\n  a AS column_a,\n  COUNT(*) AS total\nFROM Orders AS o\nINNER JOIN Items AS i ON o.id = i.id\nGROUP BY a;\n"
        assert create_default_engine(LintSettings()).lint(sql).is_clean
