"""Rich output formatting for the sqllint CLI.

All functions write to a :class:`rich.console.Console` instance (typically
bound to *stderr*) so that rendered diagnostics on *stdout* are never
polluted with human-readable decoration.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from rich.markup import escape
from rich.panel import Panel
from rich.table import Table
from rich.tree import Tree

if TYPE_CHECKING:
    from rich.console import Console

    from lint_engine.checks import CheckRegistry
    from lint_engine.diagnostics import DiagnosticReport
    from lint_engine.sql_toolkit import ParseUnit, SqlNode


# ---------------------------------------------------------------------------
# Run summary
# ---------------------------------------------------------------------------


def display_summary(console: Console, reports: list[DiagnosticReport], elapsed_ms: int) -> None:
    """Print a one-line PASSED/FAILED summary for a lint run.

    Parameters
    ----------
    console:
        Rich console to write to (typically stderr).
    reports:
        One report per linted document.
    elapsed_ms:
        Wall-clock duration of the run.
    """
    diagnostics = sum(len(r.diagnostics) for r in reports)
    failures = sum(len(r.failures) for r in reports)
    passed = all(r.is_clean for r in reports)
    status = "[green]PASSED[/green]" if passed else "[red]FAILED[/red]"
    console.print(
        f"sqllint {status}: {len(reports)} file(s) checked, "
        f"{diagnostics} diagnostic(s), {failures} failure(s)  ({elapsed_ms}ms)"
    )


# ---------------------------------------------------------------------------
# Rule listing
# ---------------------------------------------------------------------------


def display_rules(console: Console, registry: CheckRegistry) -> None:
    """Render every rule name with its AST requirement and description."""
    from lint_engine.rules import RuleKind

    table = Table(title="Rules", show_lines=False, pad_edge=True, expand=False)
    table.add_column("Rule", style="bold")
    table.add_column("Needs AST", justify="center")
    table.add_column("Description")

    for rule in RuleKind:
        check = registry.get(rule)
        if check is None:
            needs_ast = "-"
        else:
            needs_ast = "[cyan]yes[/cyan]" if check.requires_ast else "no"
        table.add_row(rule.value, needs_ast, rule.description)

    console.print(table)


# ---------------------------------------------------------------------------
# Parse trees
# ---------------------------------------------------------------------------


def _node_label(node: SqlNode, text: str) -> str:
    label = f"[bold]{node.kind.value}[/bold]"
    if node.name:
        label += f" {escape(node.name)}"
    if node.alias:
        label += f" [dim]AS[/dim] {escape(node.alias)}"
    if node.has_position:
        snippet = text[node.start : node.end].replace("\n", " ")
        if len(snippet) > 40:
            snippet = snippet[:37] + "..."
        label += f"  [dim]{node.start}..{node.end} {escape(repr(snippet))}[/dim]"
    return label


def display_parse_tree(console: Console, units: list[ParseUnit], text: str) -> None:
    """Render each parsed statement as a tree of syntax nodes.

    Parameters
    ----------
    console:
        Rich console to write to.
    units:
        Parsed statements in document order.
    text:
        The document the statements were parsed from.
    """
    if not units:
        console.print("[dim]No statements found.[/dim]")
        return

    for index, unit in enumerate(units, start=1):
        tree = Tree(_node_label(unit.root, text), guide_style="dim")
        pending: list[tuple[Tree, SqlNode]] = [(tree, unit.root)]
        while pending:
            branch, node = pending.pop()
            added = [(branch.add(_node_label(child, text)), child) for child in node.children]
            pending.extend(reversed(added))
        console.print(
            Panel(tree, title=f"Statement {index} [{unit.start}..{unit.end}]", border_style="blue")
        )
