"""Workspace I/O for the CLI — diff input, allowlists, file maps, writing results.

The engine itself never touches the disk; this module is the caller that
loads the FileMap it needs and persists an ApplyResult afterwards.
"""

from __future__ import annotations

import sys
from fnmatch import fnmatch
from pathlib import Path
from typing import Dict, Iterable, List, Optional, Set

import yaml

from patchgate.config.schema import AllowlistConfig
from patchgate.engine.outcome import ApplyResult

_SKIP_DIRS = {".git", ".hg", ".svn", "node_modules", "__pycache__"}


class WorkspaceError(Exception):
    """Raised when workspace files cannot be read or written safely."""


def _resolve(root: Path, rel: str) -> Path:
    """Resolve *rel* under *root*, refusing anything that escapes it."""
    if Path(rel).is_absolute():
        raise WorkspaceError(f"Absolute paths are not allowed: {rel}")
    base = root.resolve()
    target = (base / rel).resolve()
    if target != base and base not in target.parents:
        raise WorkspaceError(f"Path escapes the workspace: {rel}")
    return target


def read_diff(source: str, max_kb: int) -> str:
    """Read diff text from a file, or stdin when *source* is ``-``."""
    if source == "-":
        text = sys.stdin.read()
    else:
        try:
            with open(source, encoding="utf-8", newline="") as f:
                text = f.read()
        except (OSError, UnicodeDecodeError) as exc:
            raise WorkspaceError(f"Cannot read diff {source}: {exc}") from exc
    size = len(text.encode("utf-8"))
    if size > max_kb * 1024:
        raise WorkspaceError(f"Diff is {size // 1024} KB, over the {max_kb} KB limit")
    return text


def list_files(root: Path) -> List[str]:
    """Every file under *root* as a posix relative path, VCS dirs skipped."""
    out: List[str] = []
    for path in sorted(root.rglob("*")):
        rel = path.relative_to(root)
        if any(part in _SKIP_DIRS for part in rel.parts):
            continue
        if path.is_file():
            out.append(rel.as_posix())
    return out


def load_manifest(path: Path) -> List[str]:
    """Load a YAML working-set manifest: a list of paths or ``{files: [...]}``."""
    try:
        with open(path, encoding="utf-8") as f:
            data = yaml.safe_load(f)
    except (OSError, yaml.YAMLError) as exc:
        raise WorkspaceError(f"Cannot load manifest {path}: {exc}") from exc
    if isinstance(data, dict):
        data = data.get("files", [])
    if data is None:
        return []
    if not isinstance(data, list) or not all(isinstance(p, str) for p in data):
        raise WorkspaceError(f"Manifest {path} must list file paths")
    return data


def resolve_allowlist(
    root: Path,
    config: AllowlistConfig,
    extra: Iterable[str] = (),
    manifest: Optional[Path] = None,
) -> Set[str]:
    """Union of configured paths, glob matches, CLI paths and manifest entries."""
    allowed: Set[str] = set(config.files) | set(extra)
    if manifest is not None:
        allowed.update(load_manifest(manifest))
    if config.globs:
        for rel in list_files(root):
            if any(fnmatch(rel, g) for g in config.globs):
                allowed.add(rel)
    return allowed


def load_files(root: Path, paths: Iterable[str], max_file_kb: int) -> Dict[str, str]:
    """Read the current content of every existing file in *paths*.

    Missing files are left out of the map (they can only be created).
    """
    files: Dict[str, str] = {}
    for rel in sorted(paths):
        target = _resolve(root, rel)
        if not target.is_file():
            continue
        size = target.stat().st_size
        if size > max_file_kb * 1024:
            raise WorkspaceError(f"{rel} is {size // 1024} KB, over the {max_file_kb} KB limit")
        try:
            with open(target, encoding="utf-8", newline="") as f:
                files[rel] = f.read()
        except UnicodeDecodeError as exc:
            raise WorkspaceError(f"{rel} is not UTF-8 text") from exc
        except OSError as exc:
            raise WorkspaceError(f"Cannot read {rel}: {exc}") from exc
    return files


def write_result(root: Path, result: ApplyResult) -> List[str]:
    """Persist an ApplyResult under *root*; returns the paths touched."""
    touched: List[str] = []
    try:
        for rel, content in result.updated_files.items():
            target = _resolve(root, rel)
            target.parent.mkdir(parents=True, exist_ok=True)
            with open(target, "w", encoding="utf-8", newline="") as f:
                f.write(content)
            touched.append(rel)
        for rel in result.removed_files:
            target = _resolve(root, rel)
            if target.exists():
                target.unlink()
            touched.append(rel)
    except OSError as exc:
        raise WorkspaceError(f"Failed to write workspace: {exc}") from exc
    return touched
