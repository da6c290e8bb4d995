"""Lint Engine -- runs a check suite over one document.

The :class:`LintEngine` builds the activation ledger from the document's
directives, threads a fresh :class:`RunContext` through every registered
check in order, and merges their diagnostics into one sorted
:class:`DiagnosticReport`.
"""

from __future__ import annotations

import logging

from lint_engine.checks.base import BaseCheck
from lint_engine.checks.models import RunContext, Timer
from lint_engine.checks.registry import CheckRegistry
from lint_engine.config import LintSettings
from lint_engine.diagnostics import DiagnosticReport, SourceText
from lint_engine.directives import DirectiveParser
from lint_engine.rules import RuleKind
from lint_engine.sql_toolkit import SqlToolkit, get_sql_toolkit

logger = logging.getLogger(__name__)


class LintEngine:
    """Orchestrator for linting documents.

    Parameters
    ----------
    settings:
        Linter settings.  When ``None``, settings are read from the
        environment.
    registry:
        Optional pre-configured registry.  When ``None``, a new
        empty registry is created.
    toolkit:
        SQL toolkit to parse with.  Defaults to the cached toolkit for
        ``settings.dialect``.
    """

    def __init__(
        self,
        settings: LintSettings | None = None,
        registry: CheckRegistry | None = None,
        toolkit: SqlToolkit | None = None,
    ) -> None:
        self._settings = settings if settings is not None else LintSettings()
        self._registry = registry if registry is not None else CheckRegistry()
        self._toolkit = toolkit

    @property
    def settings(self) -> LintSettings:
        return self._settings

    @property
    def registry(self) -> CheckRegistry:
        """The check registry backing this engine."""
        return self._registry

    @property
    def toolkit(self) -> SqlToolkit:
        if self._toolkit is None:
            self._toolkit = get_sql_toolkit(self._settings.dialect)
        return self._toolkit

    def register(self, check: BaseCheck) -> None:
        """Register a check implementation with the engine."""
        self._registry.register(check)

    def lint(self, text: str, filename: str | None = None) -> DiagnosticReport:
        """Run every registered check over *text*.

        Parameters
        ----------
        text:
            The document to lint.
        filename:
            Optional name used to prefix rendered diagnostics.

        Returns
        -------
        DiagnosticReport
            Sorted diagnostics, plus a hard failure for each check that
            raised.
        """
        timer = Timer()
        timer.start()

        settings = self._settings
        source = SourceText(
            text=text,
            filename=filename,
            line_delimiter=settings.line_delimiter,
            tab_size=settings.tab_size,
        )
        disabled = settings.disabled_rule_kinds()

        directives = DirectiveParser(report_unknown=RuleKind.NO_LINT not in disabled)
        ledger, report = directives.build_ledger(source, disabled)
        context = RunContext(settings=settings, ledger=ledger, toolkit=self.toolkit)

        for check in self._registry.get_all():
            logger.debug("Running check: %s", check.rule.value)
            try:
                report.merge(check.run(source, context))
            except Exception as exc:
                logger.error(
                    "Check %s raised an unhandled exception: %s",
                    check.rule.value,
                    exc,
                )
                report.fail(f"Unhandled error in {check.rule.value}: {exc}", rule=check.rule)

        report.sort()
        logger.debug(
            "Linted %s in %d ms: %d diagnostic(s), %d failure(s)",
            filename or "<input>",
            timer.elapsed_ms(),
            len(report.diagnostics),
            len(report.failures),
        )
        return report


def create_default_engine(settings: LintSettings | None = None) -> LintEngine:
    """Create a :class:`LintEngine` with every built-in check registered.

    Parameters
    ----------
    settings:
        Linter settings; read from the environment when ``None``.

    Returns
    -------
    LintEngine
        Engine running the complete built-in suite.
    """
    from lint_engine.checks.builtin import all_checks

    return LintEngine(settings=settings, registry=all_checks())
