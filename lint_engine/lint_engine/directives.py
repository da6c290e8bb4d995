"""Inline ``NOLINT(...)`` / ``LINT(...)`` directives.

A directive is a single-line comment whose text is ``NOLINT`` or ``LINT``
followed by a parenthesized, comma-separated list of rule names::

    SELECT a b;  -- NOLINT(alias)
    -- LINT(alias, consistent-letter-case) trailing text is ignored

Each directive switches the named rules from the end of its comment
onwards.  Comments that do not follow this shape are ordinary comments.
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass

from lint_engine.diagnostics import DiagnosticReport, SourceText
from lint_engine.ledger import ActivationLedger, Direction, LedgerEvent
from lint_engine.rules import RuleKind
from lint_engine.scanner import iter_line_comments

logger = logging.getLogger(__name__)

_DIRECTIVE_RE = re.compile(r"\s*(NOLINT|LINT)\s*\(([^()]*)\).*", re.DOTALL)
_NAME_RE = re.compile(r"[\w-]+")

_VERBS = {"NOLINT": Direction.DISABLE, "LINT": Direction.ENABLE}


@dataclass(frozen=True, slots=True)
class Directive:
    direction: Direction
    names: tuple[str, ...]


def parse_directive(comment: str) -> Directive | None:
    """Parse the text of a single-line comment (without its marker).

    Returns ``None`` when the comment is not a well-formed directive.
    """
    match = _DIRECTIVE_RE.fullmatch(comment)
    if match is None:
        return None

    names = tuple(part.strip() for part in match.group(2).split(","))
    if not all(_NAME_RE.fullmatch(name) for name in names):
        return None
    return Directive(direction=_VERBS[match.group(1)], names=names)


class DirectiveParser:
    """Finds directives in a document and turns them into ledger events.

    Parameters
    ----------
    report_unknown:
        Whether directives naming unknown rules produce ``nolint``
        diagnostics.
    """

    def __init__(self, report_unknown: bool = True) -> None:
        self._report_unknown = report_unknown

    def scan(self, source: SourceText) -> tuple[list[LedgerEvent], DiagnosticReport]:
        """Walk *source* once and collect every directive event.

        Strings and block comments are skipped, so directive-looking text
        inside them has no effect.  Events are positioned at the end of the
        directive's comment.
        """
        text = source.text
        events: list[LedgerEvent] = []
        report = DiagnosticReport.for_source(source)

        for start, marker, end in iter_line_comments(text, source.line_delimiter):
            directive = parse_directive(text[start + len(marker) : end])
            if directive is not None:
                self._collect(directive, end, source, events, report)

        logger.debug("Found %d directive event(s) in %s", len(events), source.filename or "<input>")
        return events, report

    def build_ledger(
        self,
        source: SourceText,
        disabled: frozenset[RuleKind] = frozenset(),
    ) -> tuple[ActivationLedger, DiagnosticReport]:
        """Scan *source* and fold its directives into an :class:`ActivationLedger`."""
        events, report = self.scan(source)
        return ActivationLedger.from_events(events, disabled=disabled), report

    def _collect(
        self,
        directive: Directive,
        position: int,
        source: SourceText,
        events: list[LedgerEvent],
        report: DiagnosticReport,
    ) -> None:
        for name in directive.names:
            rule = RuleKind.from_name(name)
            if rule is None:
                if self._report_unknown:
                    report.add(
                        RuleKind.NO_LINT,
                        source,
                        position,
                        f"Unknown NOLINT error category: '{name}'",
                    )
                continue
            events.append(LedgerEvent(position=position, rule=rule, direction=directive.direction))
