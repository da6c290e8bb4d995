"""Check framework -- registry, node dispatch and the lint engine.

Quick start::

    from lint_engine.checks import create_default_engine

    engine = create_default_engine()
    report = engine.lint("SELECT a b FROM t;", filename="query.sql")
    for line in report.render():
        print(line)
"""

from lint_engine.checks.base import BaseCheck, NodeRuleCheck
from lint_engine.checks.dispatch import apply_rule, collect_identifier_starts, iter_parse_units
from lint_engine.checks.engine import LintEngine, create_default_engine
from lint_engine.checks.models import ParseCache, RunContext
from lint_engine.checks.registry import CheckRegistry

__all__ = [
    "BaseCheck",
    "CheckRegistry",
    "LintEngine",
    "NodeRuleCheck",
    "ParseCache",
    "RunContext",
    "apply_rule",
    "collect_identifier_starts",
    "create_default_engine",
    "iter_parse_units",
]
