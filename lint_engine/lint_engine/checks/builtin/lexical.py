"""Built-in checks that work on the raw text.

None of these need the parser, so they keep reporting on documents that
fail to parse.
"""

from __future__ import annotations

import re

from lint_engine.checks.base import BaseCheck
from lint_engine.checks.models import RunContext
from lint_engine.diagnostics import DiagnosticReport, SourceText
from lint_engine.rules import RuleKind
from lint_engine.scanner import (
    is_all_caps,
    is_one_line_statement,
    iter_code,
    iter_line_comments,
    next_word,
    skip_comment,
    skip_string,
)

_INDENT_NAMES = {" ": "whitespace", "\t": "tab"}
_QUOTE_NAMES = {"'": "single quotes(')", '"': 'double quotes(")'}

_COUNT_ONE_RE = re.compile(r"COUNT\s*\(\s*1\s*\)", re.IGNORECASE)
_IMPORT_RE = re.compile(r"IMPORT\b", re.IGNORECASE)
_CREATE_CONSTANT_RE = re.compile(
    r"CREATE\s+(?:OR\s+REPLACE\s+)?(?:(?:TEMP|TEMPORARY|PUBLIC|PRIVATE)\s+)?CONSTANT\s+"
    r"(?:IF\s+NOT\s+EXISTS\s+)?([\w.]+)",
    re.IGNORECASE,
)


def _starts_word(text: str, position: int) -> bool:
    return position == 0 or not (text[position - 1].isalnum() or text[position - 1] == "_")


class LineLimitCheck(BaseCheck):
    """Lines must not exceed ``line_limit`` characters.

    Unbreakable statement headers such as ``IMPORT MODULE a.b.c;`` are
    exempt.  The diagnostic sits at the end of the offending line.
    """

    @property
    def rule(self) -> RuleKind:
        return RuleKind.LINE_LIMIT

    def run(self, source: SourceText, context: RunContext) -> DiagnosticReport:
        report = DiagnosticReport.for_source(source)
        limit = context.settings.line_limit

        start = 0
        for line in source.text.split(source.line_delimiter):
            end = start + len(line)
            if len(line) > limit and not is_one_line_statement(line):
                self.flag(report, source, context, end, f"Lines should be <= {limit} characters long.")
            start = end + 1
        return report


class SemicolonCheck(BaseCheck):
    """The last significant character of the document must be ``;``."""

    @property
    def rule(self) -> RuleKind:
        return RuleKind.STATEMENT_SEMICOLON

    def run(self, source: SourceText, context: RunContext) -> DiagnosticReport:
        report = DiagnosticReport.for_source(source)
        text = source.text

        last: int | None = None
        terminated = False
        i = 0
        while i < len(text):
            matched, end = skip_comment(text, i, source.line_delimiter)
            if matched:
                i = end + 1
                continue
            matched, end = skip_string(text, i)
            if matched:
                last, terminated = end, False
                i = end + 1
                continue
            if not text[i].isspace():
                last, terminated = i, text[i] == ";"
            i += 1

        if last is not None and not terminated:
            self.flag(report, source, context, last + 1, "Each statement should end with a semicolon ';'.")
        return report


class CommentStyleCheck(BaseCheck):
    """Every single-line comment uses the marker of the first one."""

    @property
    def rule(self) -> RuleKind:
        return RuleKind.COMMENT_STYLE

    def run(self, source: SourceText, context: RunContext) -> DiagnosticReport:
        report = DiagnosticReport.for_source(source)
        expected: str | None = None
        for start, marker, _end in iter_line_comments(source.text, source.line_delimiter):
            if expected is None:
                expected = marker
            elif marker != expected:
                self.flag(
                    report,
                    source,
                    context,
                    start,
                    f"One line comments should be consistent, expected: {expected}, found: {marker}",
                )
        return report


class UniformIndentCheck(BaseCheck):
    """Indentation uses only ``allowed_indent``; one diagnostic per line at most."""

    @property
    def rule(self) -> RuleKind:
        return RuleKind.UNIFORM_INDENT

    def run(self, source: SourceText, context: RunContext) -> DiagnosticReport:
        report = DiagnosticReport.for_source(source)
        allowed = context.settings.allowed_indent
        other = "\t" if allowed == " " else " "

        in_indent = True
        for i, ch in enumerate(source.text):
            if ch == source.line_delimiter:
                in_indent = True
                continue
            if not in_indent or ch == allowed:
                continue
            if ch == other:
                self.flag(
                    report,
                    source,
                    context,
                    i,
                    f"Inconsistent use of indentation symbols, expected: {_INDENT_NAMES[allowed]}",
                )
            in_indent = False
        return report


class TabOutsideIndentCheck(BaseCheck):
    """Tabs may only appear in a line's leading indentation."""

    @property
    def rule(self) -> RuleKind:
        return RuleKind.TAB_OUTSIDE_INDENT

    def run(self, source: SourceText, context: RunContext) -> DiagnosticReport:
        report = DiagnosticReport.for_source(source)
        in_indent = True
        for i, ch in enumerate(source.text):
            if ch == source.line_delimiter:
                in_indent = True
            elif ch == "\t":
                if not in_indent:
                    self.flag(report, source, context, i, "Tab is not in the indentation")
            elif ch != " ":
                in_indent = False
        return report


class QuoteStyleCheck(BaseCheck):
    """String literals open with the preferred quote character."""

    @property
    def rule(self) -> RuleKind:
        return RuleKind.QUOTE_STYLE

    def run(self, source: SourceText, context: RunContext) -> DiagnosticReport:
        report = DiagnosticReport.for_source(source)
        text = source.text
        preferred, other = ("'", '"') if context.settings.single_quote else ('"', "'")
        message = f"Use {_QUOTE_NAMES[preferred]} instead of {_QUOTE_NAMES[other]}"

        i = 0
        while i < len(text):
            matched, end = skip_comment(text, i, source.line_delimiter)
            if matched:
                i = end + 1
                continue
            if text[i] == other:
                self.flag(report, source, context, i, message)
            _, i = skip_string(text, i)
            i += 1
        return report


class ImportsCheck(BaseCheck):
    """``IMPORT`` statements are typed, grouped by type and unique.

    ``PROTO`` imports and ``MODULE`` imports must each form one contiguous
    group, and the same name must not be imported twice.
    """

    @property
    def rule(self) -> RuleKind:
        return RuleKind.IMPORTS

    def run(self, source: SourceText, context: RunContext) -> DiagnosticReport:
        report = DiagnosticReport.for_source(source)
        text = source.text
        groups: list[str] = []
        imported: set[str] = set()

        for i in iter_code(text, source.line_delimiter):
            if not _starts_word(text, i) or not _IMPORT_RE.match(text, i):
                continue

            kind, after_kind = next_word(text, i + len("IMPORT"))
            kind = kind.upper()
            if kind not in ("PROTO", "MODULE"):
                self.flag(report, source, context, i, "Imports should specify the type 'MODULE' or 'PROTO'.")
                continue

            if kind in groups and groups[-1] != kind:
                self.flag(
                    report,
                    source,
                    context,
                    after_kind - len(kind),
                    "PROTO and MODULE inputs should be in separate groups.",
                )
            if not groups or groups[-1] != kind:
                groups.append(kind)

            name, after_name = next_word(text, after_kind)
            if name in imported:
                self.flag(report, source, context, after_name - len(name), f'"{name}" is already defined.')
            imported.add(name)
        return report


class CountStarCheck(BaseCheck):
    """``COUNT(1)`` should be written ``COUNT(*)``."""

    @property
    def rule(self) -> RuleKind:
        return RuleKind.COUNT_STAR

    def run(self, source: SourceText, context: RunContext) -> DiagnosticReport:
        report = DiagnosticReport.for_source(source)
        text = source.text
        for i in iter_code(text, source.line_delimiter):
            if text[i] in "cC" and _starts_word(text, i) and _COUNT_ONE_RE.match(text, i):
                self.flag(report, source, context, i, "Use COUNT(*) instead of COUNT(1)")
        return report


class ConstantNameCheck(BaseCheck):
    """Constants created with ``CREATE CONSTANT`` are named in CAPS_SNAKE_CASE.

    The parser has no constant declarations, so the statement is matched on
    the raw text.  Only the last part of a qualified name is checked.
    """

    @property
    def rule(self) -> RuleKind:
        return RuleKind.CONSTANT_NAME

    def run(self, source: SourceText, context: RunContext) -> DiagnosticReport:
        report = DiagnosticReport.for_source(source)
        text = source.text
        for i in iter_code(text, source.line_delimiter):
            if text[i] not in "cC" or not _starts_word(text, i):
                continue
            match = _CREATE_CONSTANT_RE.match(text, i)
            if match is None:
                continue
            name = match.group(1).rsplit(".", 1)[-1]
            if name and not is_all_caps(name):
                position = match.end(1) - len(name)
                self.flag(report, source, context, position, "Constant names should be CAPS_SNAKE_CASE.")
        return report
