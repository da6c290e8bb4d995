"""Abstract base classes for check implementations.

Every check subclasses :class:`BaseCheck` and implements :meth:`run`.
Checks that inspect the syntax tree one node at a time subclass
:class:`NodeRuleCheck` and implement :meth:`visit` instead.
"""

from __future__ import annotations

import abc
import logging

from lint_engine.checks.dispatch import apply_rule
from lint_engine.checks.models import RunContext
from lint_engine.diagnostics import DiagnosticReport, SourceText
from lint_engine.rules import RuleKind
from lint_engine.sql_toolkit import SqlNode

logger = logging.getLogger(__name__)


class BaseCheck(abc.ABC):
    """Abstract base for all check implementations.

    Subclasses must implement :attr:`rule` and :meth:`run`.  Checks are
    stateless; everything they need arrives with the source and the
    :class:`RunContext`.
    """

    requires_ast: bool = False
    populates_parse_cache: bool = False

    @property
    @abc.abstractmethod
    def rule(self) -> RuleKind:
        """The rule this check reports under."""

    @abc.abstractmethod
    def run(self, source: SourceText, context: RunContext) -> DiagnosticReport:
        """Check *source* and return its diagnostics.

        Parameters
        ----------
        source:
            The document being linted.
        context:
            Activation ledger, settings, toolkit and parse cache of the run.

        Returns
        -------
        DiagnosticReport
            Diagnostics for positions where :attr:`rule` is active.
        """

    def flag(
        self,
        report: DiagnosticReport,
        source: SourceText,
        context: RunContext,
        position: int,
        message: str,
    ) -> None:
        """Add a diagnostic at *position* unless the rule is switched off there."""
        if context.is_active(self.rule, position):
            report.add(self.rule, source, position, message)


class NodeRuleCheck(BaseCheck):
    """Base for checks that inspect syntax nodes one at a time.

    Produces nothing when the document does not parse, and nothing at all
    when ``parser-failed`` is disabled by configuration.
    """

    requires_ast = True

    def run(self, source: SourceText, context: RunContext) -> DiagnosticReport:
        if not context.parser_enabled:
            logger.debug("Skipping %s: parser checks are disabled", self.rule.value)
            return DiagnosticReport.for_source(source)
        return apply_rule(self.visit, source, context, kind=self.rule)

    @abc.abstractmethod
    def visit(self, node: SqlNode, source: SourceText, context: RunContext) -> DiagnosticReport:
        """Return the diagnostics for one node."""
