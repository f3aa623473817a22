"""Terminal rendering for CLI results.

Results are framed in rounded boxes. Values too wide for a box wrap onto
continuation lines, so full identifiers stay copyable.
"""
import json
import textwrap

import click

BOX_WIDTH = 60
INNER_WIDTH = BOX_WIDTH - 4


def print_json(data: dict) -> None:
    click.echo(json.dumps(data, indent=2, sort_keys=True))


def _frame(title: str, body: list[str]) -> None:
    click.echo(f"╭─ {title} ".ljust(BOX_WIDTH - 1, "─") + "╮")
    for line in body:
        click.echo(f"│ {line.ljust(INNER_WIDTH)} │")
    click.echo("╰" + "─" * (BOX_WIDTH - 2) + "╯")


def _wrap(text: str, indent: int = 0) -> list[str]:
    """Split text to box width; continuation lines are indented."""
    width = INNER_WIDTH - indent
    lines = []
    for paragraph in str(text).splitlines() or [""]:
        lines.extend(textwrap.wrap(paragraph, width, break_on_hyphens=False) or [""])
    return [lines[0]] + [" " * indent + line for line in lines[1:]]


def success_box(title: str, rows: list[tuple[str, str]], next_cmd: str | None = None) -> None:
    """Box of `label: value` rows, then an optional Next: hint."""
    body = []
    for label, value in rows:
        prefix = f"{label}: "
        wrapped = _wrap(f"{prefix}{value}", indent=min(len(prefix), INNER_WIDTH // 2))
        body.extend(wrapped)
    _frame(title, body)
    if next_cmd:
        click.echo(f"Next: {next_cmd}")


def error_box(title: str, message: str, fix_cmd: str | None = None) -> None:
    """Box around a wrapped error message, then an optional Fix: hint."""
    _frame(title, _wrap(message))
    if fix_cmd:
        click.echo(f"Fix: {fix_cmd}")


def table(headers: list[str], rows: list[list[str]]) -> None:
    """Columns sized to their widest cell; short rows are padded."""
    rows = [[str(cell) for cell in row] + [""] * (len(headers) - len(row)) for row in rows]
    widths = [max(len(cell) for cell in column) for column in zip(headers, *rows)]

    def line(cells: list[str]) -> str:
        return "│ " + " │ ".join(cell.ljust(w) for cell, w in zip(cells, widths)) + " │"

    def rule(left: str, joint: str, right: str) -> str:
        return left + joint.join("─" * (w + 2) for w in widths) + right

    click.echo(rule("╭", "┬", "╮"))
    click.echo(line(headers))
    click.echo(rule("├", "┼", "┤"))
    for row in rows:
        click.echo(line(row))
    click.echo(rule("╰", "┴", "╯"))
