"""Built-in checks over the keyword token stream."""

from __future__ import annotations

import logging

from lint_engine.checks.base import BaseCheck
from lint_engine.checks.dispatch import collect_identifier_starts
from lint_engine.checks.models import RunContext
from lint_engine.diagnostics import DiagnosticReport, SourceText
from lint_engine.rules import RuleKind
from lint_engine.scanner import is_all_caps, is_lower_snake_case
from lint_engine.sql_toolkit import SqlTokenizeError, Token, TokenKind

logger = logging.getLogger(__name__)


def _keyword_tokens(check: BaseCheck, source: SourceText, context: RunContext) -> list[Token]:
    try:
        tokens = context.toolkit.tokenizer.tokenize(source.text)
    except SqlTokenizeError as exc:
        logger.warning(
            "Skipping %s for %s: %s",
            check.rule.value,
            source.filename or "<input>",
            exc,
        )
        return []
    return [token for token in tokens if token.kind == TokenKind.KEYWORD]


class LetterCaseCheck(BaseCheck):
    """Keywords are written in one letter case.

    Keywords that the parser resolved as identifiers (``SELECT date``) are
    names, not keywords, and are skipped.
    """

    @property
    def rule(self) -> RuleKind:
        return RuleKind.LETTER_CASE

    def run(self, source: SourceText, context: RunContext) -> DiagnosticReport:
        report = DiagnosticReport.for_source(source)
        keywords = _keyword_tokens(self, source, context)
        if not keywords:
            return report

        identifiers = collect_identifier_starts(source, context)
        upper = context.settings.upper_keyword
        consistent = is_all_caps if upper else is_lower_snake_case
        case = "uppercase" if upper else "lowercase"

        for token in keywords:
            if token.start in identifiers or consistent(token.text):
                continue
            self.flag(report, source, context, token.start, f"Keyword '{token.text}' should be all {case}")
        return report


class KeywordIdentifierCheck(BaseCheck):
    """Identifiers must not be bare keywords; quote them with backticks."""

    requires_ast = True

    @property
    def rule(self) -> RuleKind:
        return RuleKind.KEYWORD_IDENTIFIER

    def run(self, source: SourceText, context: RunContext) -> DiagnosticReport:
        report = DiagnosticReport.for_source(source)
        if not context.parser_enabled:
            return report

        keywords = _keyword_tokens(self, source, context)
        if not keywords:
            return report

        identifiers = collect_identifier_starts(source, context)
        for token in keywords:
            if token.start in identifiers:
                self.flag(
                    report,
                    source,
                    context,
                    token.start,
                    f"Identifier `{token.text}` is an SQL keyword. "
                    f"Change the name or escape with backticks (`)",
                )
        return report
