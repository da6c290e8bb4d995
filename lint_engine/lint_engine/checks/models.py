"""Run-scoped state shared by the checks of one document."""

from __future__ import annotations

import time
from dataclasses import dataclass, field

from lint_engine.config import LintSettings
from lint_engine.ledger import ActivationLedger
from lint_engine.rules import RuleKind
from lint_engine.sql_toolkit import ParseUnit, SqlToolkit


@dataclass(frozen=True, slots=True)
class ParseCache:
    """Every statement of a document, parsed once and shared read-only."""

    units: tuple[ParseUnit, ...] = ()
    populated: bool = False


@dataclass
class RunContext:
    """Context passed to check implementations during one document's run.

    ``parse_cache`` stays ``None`` until the parser check succeeds; after
    that every AST-dependent check reuses it instead of parsing again.
    """

    settings: LintSettings
    ledger: ActivationLedger
    toolkit: SqlToolkit
    parse_cache: ParseCache | None = field(default=None)

    def is_active(self, rule: RuleKind, position: int) -> bool:
        return self.ledger.is_active(rule, position)

    @property
    def parser_enabled(self) -> bool:
        """False when ``parser-failed`` is switched off by configuration."""
        return not self.ledger.is_disabled_by_config(RuleKind.PARSE_FAILED)

    @property
    def has_parse_cache(self) -> bool:
        return self.parse_cache is not None and self.parse_cache.populated


class Timer:
    """Simple monotonic timer for measuring lint duration."""

    def __init__(self) -> None:
        self._start: float = 0.0

    def start(self) -> None:
        self._start = time.monotonic()

    def elapsed_ms(self) -> int:
        return int((time.monotonic() - self._start) * 1000)
