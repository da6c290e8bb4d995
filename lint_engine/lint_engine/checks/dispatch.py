"""Apply per-node rules across every parsed statement of a document.

A rule is a plain function ``(node, source, context) -> DiagnosticReport``
that looks at one :class:`SqlNode` at a time and dispatches on its
:class:`SqlNodeKind`.  The dispatcher feeds it every node of every
statement in document order.
"""

from __future__ import annotations

import logging
from typing import Callable, Iterator

from lint_engine.checks.models import RunContext
from lint_engine.diagnostics import DiagnosticReport, SourceText
from lint_engine.rules import RuleKind
from lint_engine.sql_toolkit import ParseUnit, SqlNode, SqlNodeKind, SqlParseError

logger = logging.getLogger(__name__)

Rule = Callable[[SqlNode, SourceText, RunContext], DiagnosticReport]


def iter_parse_units(source: SourceText, context: RunContext) -> Iterator[ParseUnit]:
    """Yield the document's statements, from the parse cache when populated.

    Without a cache the whole document is parsed here first.  If any
    statement fails, nothing is yielded, so node rules see either every
    statement or none.  Reporting the failure is the parser check's job.
    """
    if context.has_parse_cache:
        yield from context.parse_cache.units
        return

    units: list[ParseUnit] = []
    try:
        for unit in context.toolkit.parser.parse_statements(source.text):
            units.append(unit)
    except SqlParseError as exc:
        logger.debug(
            "Skipping node dispatch for %s, statement at byte %d does not parse: %s",
            source.filename or "<input>",
            exc.position,
            exc.message,
        )
        return
    yield from units


def apply_rule(
    rule: Rule,
    source: SourceText,
    context: RunContext,
    *,
    kind: RuleKind | None = None,
) -> DiagnosticReport:
    """Run *rule* on every node and merge what it returns.

    An exception raised by the rule ends dispatch for that rule and is
    recorded as a hard failure; diagnostics gathered before it are kept.
    """
    report = DiagnosticReport.for_source(source)
    name = kind.value if kind is not None else getattr(rule, "__name__", repr(rule))

    for unit in iter_parse_units(source, context):
        for node in unit.walk():
            try:
                report.merge(rule(node, source, context))
            except Exception as exc:
                logger.error(
                    "Rule %s raised on a %s node at byte %d: %s",
                    name,
                    node.kind.value,
                    node.start,
                    exc,
                )
                report.fail(f"Unhandled error in {name}: {exc}", rule=kind)
                return report
    return report


def collect_identifier_starts(source: SourceText, context: RunContext) -> frozenset[int]:
    """Return the start offsets of every identifier the parser recognised."""
    starts: set[int] = set()
    for unit in iter_parse_units(source, context):
        for node in unit.walk():
            if node.kind == SqlNodeKind.IDENTIFIER and node.has_position:
                starts.add(node.start)
    return frozenset(starts)
