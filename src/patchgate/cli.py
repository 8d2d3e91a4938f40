"""patchgate CLI — Typer application with check, apply, and init commands."""

from __future__ import annotations

import logging
import sys
from pathlib import Path
from typing import List, Optional, Set, Tuple

import typer
from rich.console import Console

from patchgate import __version__

app = typer.Typer(
    name="patchgate",
    help="Validate and apply model-generated diffs before they touch your files.",
    add_completion=False,
    no_args_is_help=True,
)

console = Console(stderr=True)


def _setup_logging(debug: bool) -> None:
    if debug:
        logging.basicConfig(
            level=logging.DEBUG,
            format="%(asctime)s %(levelname)s %(name)s: %(message)s",
            stream=sys.stderr,
        )


def _resolve_root(root: Path) -> Path:
    """Check the workspace root, exit 2 on failure."""
    if not root.is_dir():
        console.print(f"[bold red]Error:[/bold red] workspace root not found: {root}")
        raise typer.Exit(code=2)
    return root


def _load_config(root: Path, config: Optional[str], format: Optional[str]):
    from patchgate.config.loader import ConfigError, load_config
    from patchgate.config.schema import OUTPUT_FORMATS

    try:
        cfg = load_config(root, config)
    except ConfigError as exc:
        console.print(f"[bold red]Config error:[/bold red] {exc}")
        raise typer.Exit(code=2) from exc

    if format:
        if format not in OUTPUT_FORMATS:
            console.print(f"[bold red]Invalid format:[/bold red] {format}")
            raise typer.Exit(code=2)
        cfg.output.format = format  # type: ignore[assignment]
    return cfg


def _prepare(
    diff: str,
    root: Path,
    allow: Optional[List[str]],
    manifest: Optional[Path],
    cfg,
) -> Tuple[str, Set[str], dict]:
    """Read the diff, build the allowlist, and load the current file map."""
    from patchgate.workspace import WorkspaceError, load_files, read_diff, resolve_allowlist

    try:
        diff_text = read_diff(diff, cfg.limits.max_diff_kb)
        allowed = resolve_allowlist(root, cfg.allowlist, allow or (), manifest)
        files = load_files(root, allowed, cfg.limits.max_file_kb)
    except WorkspaceError as exc:
        console.print(f"[bold red]Workspace error:[/bold red] {exc}")
        raise typer.Exit(code=2) from exc
    return diff_text, allowed, files


def _report(outcome, cfg, allowed: Set[str], apply_result=None) -> None:
    from patchgate.output import json_report, terminal

    if cfg.output.format == "json":
        print(json_report.render(outcome, apply_result, allowed_files=allowed))
    else:
        terminal.render(outcome, apply_result, show_summary=cfg.output.show_summary)


# ── check ─────────────────────────────────────────────────────────────────────


@app.command()
def check(
    diff: str = typer.Argument(..., help="Diff file to validate, or - for stdin"),
    root: Path = typer.Option(Path("."), "--root", "-r", help="Workspace root"),
    allow: Optional[List[str]] = typer.Option(None, "--allow", "-a", help="File the patch may touch (repeatable)"),
    manifest: Optional[Path] = typer.Option(None, "--manifest", "-m", help="YAML list of files the patch may touch"),
    config: Optional[str] = typer.Option(None, "--config", "-c", help="Path to .patchgate.toml"),
    format: Optional[str] = typer.Option(None, "--format", "-f", help="Output format: terminal | json"),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Verbose output"),
    debug: bool = typer.Option(False, "--debug", help="Debug logging"),
) -> None:
    """Validate a diff against the workspace without changing anything."""
    from patchgate.engine.pipeline import validate

    _setup_logging(debug)
    root = _resolve_root(root)
    cfg = _load_config(root, config, format)
    diff_text, allowed, files = _prepare(diff, root, allow, manifest, cfg)

    if verbose:
        console.print(f"[dim]Allowed files: {len(allowed)}[/dim]")
        console.print(f"[dim]Loaded files: {len(files)}[/dim]")

    outcome = validate(
        diff_text,
        allowed,
        files,
        window=cfg.engine.window,
        require_git_header=cfg.engine.require_git_header,
    )
    _report(outcome, cfg, allowed)
    raise typer.Exit(code=0 if outcome.is_valid else 1)


# ── apply ─────────────────────────────────────────────────────────────────────


@app.command()
def apply(
    diff: str = typer.Argument(..., help="Diff file to apply, or - for stdin"),
    root: Path = typer.Option(Path("."), "--root", "-r", help="Workspace root"),
    allow: Optional[List[str]] = typer.Option(None, "--allow", "-a", help="File the patch may touch (repeatable)"),
    manifest: Optional[Path] = typer.Option(None, "--manifest", "-m", help="YAML list of files the patch may touch"),
    config: Optional[str] = typer.Option(None, "--config", "-c", help="Path to .patchgate.toml"),
    format: Optional[str] = typer.Option(None, "--format", "-f", help="Output format: terminal | json"),
    partial: bool = typer.Option(False, "--partial", help="Write non-conflicting files even if others conflict"),
    dry_run: bool = typer.Option(False, "--dry-run", help="Compute the result without writing files"),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Verbose output"),
    debug: bool = typer.Option(False, "--debug", help="Debug logging"),
) -> None:
    """Validate a diff and, if it passes, write the patched files."""
    from patchgate.engine.applier import apply as apply_patch
    from patchgate.engine.pipeline import validate
    from patchgate.workspace import WorkspaceError, write_result

    _setup_logging(debug)
    root = _resolve_root(root)
    cfg = _load_config(root, config, format)
    if partial:
        cfg.apply.partial = True
    diff_text, allowed, files = _prepare(diff, root, allow, manifest, cfg)

    outcome = validate(
        diff_text,
        allowed,
        files,
        window=cfg.engine.window,
        require_git_header=cfg.engine.require_git_header,
    )
    if not outcome.is_valid:
        _report(outcome, cfg, allowed)
        raise typer.Exit(code=1)

    result = apply_patch(
        outcome.patch_set, files, partial=cfg.apply.partial, window=cfg.engine.window
    )
    _report(outcome, cfg, allowed, result)

    if dry_run:
        if cfg.output.format == "terminal":
            console.print("[dim]Dry run — no files written.[/dim]")
    elif result.updated_files or result.removed_files:
        try:
            touched = write_result(root, result)
        except WorkspaceError as exc:
            console.print(f"[bold red]Workspace error:[/bold red] {exc}")
            raise typer.Exit(code=2) from exc
        if verbose:
            for path in touched:
                console.print(f"[dim]  wrote {path}[/dim]")

    raise typer.Exit(code=0 if result.ok else 1)


# ── init ──────────────────────────────────────────────────────────────────────


@app.command()
def init(
    root: Path = typer.Option(Path("."), "--root", "-r", help="Workspace root"),
) -> None:
    """Generate a starter .patchgate.toml in the workspace root."""
    from patchgate.config.defaults import DEFAULT_TOML
    from patchgate.config.loader import CONFIG_FILENAME

    root = _resolve_root(root)
    config_path = root / CONFIG_FILENAME

    if config_path.exists():
        console.print(f"[yellow]⚠[/yellow]  {CONFIG_FILENAME} already exists at {config_path}")
        raise typer.Exit(code=1)

    config_path.write_text(DEFAULT_TOML, encoding="utf-8")
    console.print(f"[green]✓[/green] Created {config_path}")


# ── version ───────────────────────────────────────────────────────────────────


def _version_callback(value: bool) -> None:
    if value:
        print(f"patchgate {__version__}")
        raise typer.Exit()


@app.callback()
def main(
    version: bool = typer.Option(
        False, "--version", "-V", callback=_version_callback,
        is_eager=True, help="Show version and exit",
    ),
) -> None:
    """patchgate — validate and apply model-generated diffs safely."""
