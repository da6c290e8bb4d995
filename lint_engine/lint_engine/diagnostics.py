"""Diagnostics and the per-document report.

:class:`SourceText` owns the byte-offset to line/column translation;
:class:`DiagnosticReport` collects positioned :class:`Diagnostic` values
together with :class:`HardFailure` entries that cannot be tied to a
position.
"""

from __future__ import annotations

import bisect
import logging
from dataclasses import dataclass
from functools import cached_property

from pydantic import BaseModel, Field

from lint_engine.rules import RuleKind

logger = logging.getLogger(__name__)


class PositionTranslationError(ValueError):
    """A byte offset lies outside the document."""

    def __init__(self, offset: int, length: int) -> None:
        super().__init__(f"Byte offset {offset} is outside the document (length {length})")
        self.offset = offset
        self.length = length


# ---------------------------------------------------------------------------
# Source text
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class SourceText:
    """One immutable document.

    Parameters
    ----------
    text:
        The document contents.
    filename:
        Optional name used as a prefix when rendering diagnostics.
    line_delimiter:
        Single character separating lines.
    tab_size:
        When set, tabs advance the column to the next multiple of this width
        (plus one).  When ``None`` every character counts as one column.
    """

    text: str
    filename: str | None = None
    line_delimiter: str = "\n"
    tab_size: int | None = None

    def __len__(self) -> int:
        return len(self.text)

    @cached_property
    def line_starts(self) -> tuple[int, ...]:
        """Offsets at which each line begins."""
        starts = [0]
        index = self.text.find(self.line_delimiter)
        while index != -1:
            starts.append(index + 1)
            index = self.text.find(self.line_delimiter, index + 1)
        return tuple(starts)

    def translate(self, offset: int) -> tuple[int, int]:
        """Return the 1-based ``(line, column)`` of byte *offset*.

        ``offset == len(text)`` is valid and addresses the end of the document.

        Raises
        ------
        PositionTranslationError
            If *offset* is negative or past the end of the text.
        """
        if not 0 <= offset <= len(self.text):
            raise PositionTranslationError(offset, len(self.text))

        line_index = bisect.bisect_right(self.line_starts, offset) - 1
        line_start = self.line_starts[line_index]
        if self.tab_size is None:
            return line_index + 1, offset - line_start + 1

        column = 0
        for ch in self.text[line_start:offset]:
            if ch == "\t":
                column += self.tab_size - column % self.tab_size
            else:
                column += 1
        return line_index + 1, column + 1


# ---------------------------------------------------------------------------
# Models
# ---------------------------------------------------------------------------


def _prefix(filename: str | None) -> str:
    return f"{filename}:" if filename else ""


class Diagnostic(BaseModel):
    """One reported issue."""

    rule: RuleKind = Field(..., description="Rule that produced the diagnostic")
    byte_offset: int = Field(..., ge=0, description="0-based offset into the document")
    line: int = Field(..., ge=1)
    column: int = Field(..., ge=1)
    message: str
    filename: str | None = None

    def render(self) -> str:
        return (
            f"{_prefix(self.filename)}In line {self.line}, column {self.column}: "
            f"{self.message} [{self.rule.value}]"
        )


class HardFailure(BaseModel):
    """A failure that is not attributable to a single position."""

    message: str
    rule: RuleKind | None = None
    filename: str | None = None

    def render(self) -> str:
        suffix = f" [{self.rule.value}]" if self.rule is not None else ""
        return f"{_prefix(self.filename)}{self.message}{suffix}"


class DiagnosticReport(BaseModel):
    """Diagnostics and hard failures for one document.

    Diagnostics accumulate in the order checks add them; call :meth:`sort`
    before rendering.
    """

    filename: str | None = None
    diagnostics: list[Diagnostic] = Field(default_factory=list)
    failures: list[HardFailure] = Field(default_factory=list)

    @classmethod
    def for_source(cls, source: SourceText) -> DiagnosticReport:
        return cls(filename=source.filename)

    def __len__(self) -> int:
        return len(self.diagnostics)

    @property
    def is_clean(self) -> bool:
        """True when there are neither diagnostics nor hard failures."""
        return not self.diagnostics and not self.failures

    def add(self, rule: RuleKind, source: SourceText, offset: int, message: str) -> None:
        """Record a diagnostic for *rule* at byte *offset* of *source*.

        Nothing is filtered here; callers check rule activation first.  An
        offset that cannot be translated is recorded as a hard failure
        instead of a diagnostic.
        """
        try:
            line, column = source.translate(offset)
        except PositionTranslationError as exc:
            logger.warning("Dropping %s diagnostic: %s", rule.value, exc)
            self.fail(f"{exc}: {message}", rule=rule)
            return

        self.diagnostics.append(
            Diagnostic(
                rule=rule,
                byte_offset=offset,
                line=line,
                column=column,
                message=message,
                filename=source.filename,
            )
        )

    def fail(self, message: str, rule: RuleKind | None = None) -> None:
        self.failures.append(HardFailure(message=message, rule=rule, filename=self.filename))

    def merge(self, other: DiagnosticReport) -> DiagnosticReport:
        """Append *other*'s diagnostics and failures to this report."""
        self.diagnostics.extend(other.diagnostics)
        self.failures.extend(other.failures)
        return self

    def sort(self) -> DiagnosticReport:
        """Stable sort by ``(line, column)``."""
        self.diagnostics.sort(key=lambda d: (d.line, d.column))
        return self

    def render(self) -> list[str]:
        """Render hard failures first, then every diagnostic, one line each."""
        return [f.render() for f in self.failures] + [d.render() for d in self.diagnostics]
