"""Patch applier — builds new file contents from a validated PatchSet.

The applier trusts that the patch set passed the allowlist and context
stages. It re-derives splice points with the same ``plan_file`` walk the
verifier used and never writes anything itself: callers receive every
file's new content at once and decide what to persist.
"""

from __future__ import annotations

import logging
from typing import Dict, List, Mapping, Optional, Tuple

from patchgate.diff.models import FilePatch, Hunk, HunkLine, LineKind, PatchSet
from patchgate.engine.matching import DEFAULT_WINDOW, Mismatch, covers_all, plan_file, split_lines
from patchgate.engine.outcome import ApplyResult, FileStatus

logger = logging.getLogger(__name__)

# path -> new content, or None when the path is removed
FileChanges = Dict[str, Optional[str]]


class ApplyConflict(Exception):
    """Raised when a validated patch cannot be spliced (a parser/verifier defect)."""


def _check_counts(file_patch: FilePatch) -> None:
    for hunk in file_patch.hunks:
        old, new = hunk.counted()
        if (old, new) != (hunk.old_count, hunk.new_count):
            raise ApplyConflict(
                f"{file_patch.path}: '{hunk.header()}' has -{old},+{new} body lines"
            )


def _render_new_file(hunks: Tuple[Hunk, ...]) -> str:
    new_lines = [ln for hunk in hunks for ln in hunk.lines if ln.on_new_side]
    if not new_lines:
        return ""
    text = "\n".join(ln.text for ln in new_lines)
    return text if new_lines[-1].no_newline else text + "\n"


def splice(source: str, hunks: Tuple[Hunk, ...], window: int = DEFAULT_WINDOW, path: str = "") -> str:
    """Apply *hunks* to *source* and return the new content."""
    text = split_lines(source)
    lines = text.lines
    plan = plan_file(hunks, lines, window)
    if isinstance(plan, Mismatch):
        raise ApplyConflict(plan.describe(path))

    out: List[str] = []
    pos = 0
    last_out: Optional[HunkLine] = None  # hunk line that produced the newest output line
    eof_line: Optional[HunkLine] = None  # hunk line that consumed the last source line

    for placement in plan:
        if placement.start < pos:
            raise ApplyConflict(f"{path}: hunk '{placement.hunk.header()}' overlaps previous output")
        if pos < placement.start:
            out.extend(lines[pos:placement.start])
            last_out = None
        pos = placement.start

        matched = iter(placement.positions)
        for ln in placement.hunk.lines:
            if ln.kind is LineKind.ADD:
                out.append(ln.text)
                last_out = ln
                continue
            at = next(matched)
            if pos < at:
                out.extend(lines[pos:at])  # drift inside the hunk
                last_out = None
            if ln.kind is LineKind.CONTEXT:
                out.append(lines[at])
                last_out = ln
            if at == len(lines) - 1:
                eof_line = ln
            pos = at + 1

    if pos < len(lines):
        out.extend(lines[pos:])
        last_out = None

    trailing = text.trailing_newline
    if last_out is not None:
        # The final line came from the patch; honour '\ No newline at end of file'
        if last_out.no_newline:
            trailing = False
        elif not lines:
            trailing = True
        elif not trailing and eof_line is not None and eof_line.no_newline:
            trailing = True
    return text.join(out, trailing)


def _apply_file(
    file_patch: FilePatch, current_files: Mapping[str, str], window: int
) -> FileChanges:
    _check_counts(file_patch)

    if file_patch.is_create:
        assert file_patch.new_path is not None
        return {file_patch.new_path: _render_new_file(file_patch.hunks)}

    assert file_patch.old_path is not None
    source = current_files.get(file_patch.old_path)
    if source is None:
        raise ApplyConflict(f"{file_patch.old_path}: no current content")
    if file_patch.new_path is None:
        lines = split_lines(source).lines
        plan = plan_file(file_patch.hunks, lines, window)
        if isinstance(plan, Mismatch):
            raise ApplyConflict(plan.describe(file_patch.old_path))
        if not covers_all(plan, len(lines)):
            raise ApplyConflict(f"{file_patch.old_path}: removal patch leaves file contents")
        return {file_patch.old_path: None}

    changes: FileChanges = {
        file_patch.new_path: splice(source, file_patch.hunks, window, file_patch.old_path)
    }
    if file_patch.is_rename:
        changes[file_patch.old_path] = None
    return changes


def apply(
    patch_set: PatchSet,
    current_files: Mapping[str, str],
    *,
    partial: bool = False,
    window: int = DEFAULT_WINDOW,
) -> ApplyResult:
    """Compute new content for every file in *patch_set*.

    *current_files* is only read. With ``partial=False`` a single conflict
    marks every other file SKIPPED and no content is returned at all.
    """
    result = ApplyResult()
    planned: List[Tuple[FilePatch, FileChanges]] = []

    for file_patch in patch_set:
        try:
            changes = _apply_file(file_patch, current_files, window)
        except ApplyConflict as exc:
            logger.info("Apply conflict in %s: %s", file_patch.path, exc)
            result.status[file_patch.path] = FileStatus.CONFLICT
            result.conflicts[file_patch.path] = str(exc)
            continue
        planned.append((file_patch, changes))

    if result.conflicts and not partial:
        for file_patch, _ in planned:
            result.status[file_patch.path] = FileStatus.SKIPPED
        return result

    for file_patch, changes in planned:
        for path, content in changes.items():
            if content is None:
                result.removed_files.append(path)
            else:
                result.updated_files[path] = content
        result.status[file_patch.path] = FileStatus.APPLIED

    logger.debug(
        "Applied %d file(s), %d conflict(s)", len(result.applied), len(result.conflicts)
    )
    return result
