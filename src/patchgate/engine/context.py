"""Context verification — claimed context and deleted lines must match reality."""

from __future__ import annotations

import logging
from typing import Mapping, Optional

from patchgate.diff.models import PatchSet
from patchgate.engine.matching import DEFAULT_WINDOW, Mismatch, covers_all, plan_file, split_lines
from patchgate.engine.outcome import Invalid, Stage

logger = logging.getLogger(__name__)


def _reject(message: str, detail: str) -> Invalid:
    return Invalid(stage=Stage.CONTEXT, message=message, detail=detail)


def verify(
    patch_set: PatchSet,
    current_files: Mapping[str, str],
    window: int = DEFAULT_WINDOW,
) -> Optional[Invalid]:
    """Replay every hunk against *current_files*; return the first failure or None.

    Creates skip replay (there is nothing to compare against) but must not
    target a file that already exists. Every other patch needs the current
    content of its old path.
    """
    for file_patch in patch_set:
        if file_patch.is_create:
            if file_patch.new_path in current_files:
                return _reject("File already exists", f"File: {file_patch.new_path}")
            continue

        assert file_patch.old_path is not None
        source = current_files.get(file_patch.old_path)
        if source is None:
            return _reject("Missing source content", f"File: {file_patch.old_path}")
        if file_patch.is_rename and file_patch.new_path in current_files:
            return _reject("Rename target already exists", f"File: {file_patch.new_path}")

        lines = split_lines(source).lines
        plan = plan_file(file_patch.hunks, lines, window)
        if isinstance(plan, Mismatch):
            logger.info("Context mismatch in %s near line %d", file_patch.old_path, plan.line_no)
            return _reject("Context mismatch", plan.describe(file_patch.old_path))
        if file_patch.is_delete and not covers_all(plan, len(lines)):
            deleted = sum(len(p.positions) for p in plan)
            return _reject(
                "Removal patch leaves file contents",
                f"File: {file_patch.old_path}, only {deleted} of {len(lines)} lines are deleted",
            )
        logger.debug("Verified %d hunk(s) in %s", len(plan), file_patch.old_path)

    return None
