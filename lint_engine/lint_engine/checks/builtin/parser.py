"""Built-in check that parses the document and fills the parse cache."""

from __future__ import annotations

import logging

from lint_engine.checks.base import BaseCheck
from lint_engine.checks.models import ParseCache, RunContext
from lint_engine.diagnostics import DiagnosticReport, SourceText
from lint_engine.rules import RuleKind
from lint_engine.sql_toolkit import ParseUnit, SqlParseError

logger = logging.getLogger(__name__)


class ParserSucceedsCheck(BaseCheck):
    """Report the first statement that fails to parse.

    When every statement parses, the statements are stored in
    ``RunContext.parse_cache`` for the node checks that follow.  After a
    failure the cache stays empty and node checks report nothing, not even
    for the statements that precede the failure.
    """

    populates_parse_cache = True

    @property
    def rule(self) -> RuleKind:
        return RuleKind.PARSE_FAILED

    def run(self, source: SourceText, context: RunContext) -> DiagnosticReport:
        report = DiagnosticReport.for_source(source)
        if context.has_parse_cache:
            return report

        units: list[ParseUnit] = []
        try:
            for unit in context.toolkit.parser.parse_statements(source.text):
                units.append(unit)
        except SqlParseError as exc:
            logger.info(
                "Parse failed for %s at byte %d after %d statement(s): %s",
                source.filename or "<input>",
                exc.position,
                len(units),
                exc.message,
            )
            self.flag(report, source, context, exc.position, exc.message)
            return report

        context.parse_cache = ParseCache(units=tuple(units), populated=True)
        logger.debug("Cached %d parsed statement(s)", len(units))
        return report
