"""Rich terminal reporter — verdict, per-file table, apply status."""

from __future__ import annotations

from typing import Optional

from rich.console import Console
from rich.table import Table
from rich.text import Text

from patchgate.engine.outcome import ApplyResult, FileStatus, Invalid, Valid, ValidationOutcome

_STATUS_STYLE = {
    FileStatus.APPLIED: "bold green",
    FileStatus.SKIPPED: "bold yellow",
    FileStatus.CONFLICT: "bold red",
}

_KIND_STYLE = {
    "create": "green",
    "modify": "cyan",
    "rename": "magenta",
    "delete": "red",
}


def _status_pill(status: FileStatus) -> Text:
    return Text(f" {status.value.upper()} ", style=_STATUS_STYLE.get(status, ""))


def render(
    outcome: ValidationOutcome,
    apply_result: Optional[ApplyResult] = None,
    *,
    show_summary: bool = True,
    console: Optional[Console] = None,
) -> None:
    """Print a validation outcome (and apply result) to the terminal using Rich."""
    console = console or Console(stderr=True)

    if isinstance(outcome, Invalid):
        console.print()
        console.print(
            f"[bold red]❌ REJECTED at {outcome.stage.value} stage:[/bold red] {outcome.message}"
        )
        if outcome.detail:
            console.print(Text(f"   {outcome.detail}", style="dim"))
        return

    console.print()
    table = Table(
        title="Patch Files",
        show_lines=False,
        title_style="bold",
        border_style="dim",
    )
    table.add_column("File", style="magenta")
    table.add_column("Kind", justify="center")
    table.add_column("Hunks", justify="right")
    table.add_column("+", justify="right", style="green")
    table.add_column("-", justify="right", style="red")
    if apply_result is not None:
        table.add_column("Status", justify="center")

    for fp in outcome.patch_set:
        row = [
            Text(fp.path if not fp.is_rename else f"{fp.old_path} → {fp.new_path}"),
            Text(fp.kind, style=_KIND_STYLE.get(fp.kind, "")),
            str(len(fp.hunks)),
            str(fp.additions),
            str(fp.deletions),
        ]
        if apply_result is not None:
            status = apply_result.status.get(fp.path)
            row.append(_status_pill(status) if status is not None else Text("-"))
        table.add_row(*row)

    console.print(table)

    if apply_result is not None:
        for path, reason in apply_result.conflicts.items():
            console.print(Text(f"  conflict in {path}: {reason}", style="red"))

    if show_summary:
        _print_summary(console, outcome, apply_result)

    console.print()
    if apply_result is None:
        console.print("[bold green]✅ Patch is valid.[/bold green]")
    elif apply_result.ok:
        console.print("[bold green]✅ Patch applied.[/bold green]")
    elif apply_result.applied:
        console.print(
            f"[bold yellow]⚠ Patch partly applied — {len(apply_result.applied)} file(s) applied, "
            f"{len(apply_result.conflicts)} with conflicts.[/bold yellow]"
        )
    else:
        console.print("[bold red]❌ Patch not applied — conflicts detected.[/bold red]")


def _print_summary(console: Console, outcome: Valid, apply_result: Optional[ApplyResult]) -> None:
    patch_set = outcome.patch_set
    console.print()
    console.print(f"[dim]Files:[/dim]      {len(patch_set)}")
    console.print(f"[dim]Hunks:[/dim]      {sum(len(fp.hunks) for fp in patch_set)}")
    console.print(f"[dim]Additions:[/dim]  {sum(fp.additions for fp in patch_set)}")
    console.print(f"[dim]Deletions:[/dim]  {sum(fp.deletions for fp in patch_set)}")
    if apply_result is not None:
        console.print(f"[dim]Updated:[/dim]    {len(apply_result.updated_files)}")
        console.print(f"[dim]Removed:[/dim]    {len(apply_result.removed_files)}")
        console.print(f"[dim]Conflicts:[/dim]  {len(apply_result.conflicts)}")
