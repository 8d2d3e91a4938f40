"""Allowlist enforcement — the patch may only touch files the caller granted."""

from __future__ import annotations

import logging
from typing import AbstractSet, Optional

from patchgate.diff.models import PatchSet
from patchgate.engine.outcome import Invalid, Stage

logger = logging.getLogger(__name__)


def enforce(patch_set: PatchSet, allowed_files: AbstractSet[str]) -> Optional[Invalid]:
    """Return an Invalid naming the first path outside *allowed_files*, else None.

    Both the old and the new path of every file patch are checked, so a
    rename cannot move a granted file onto an ungranted one.
    """
    for file_patch in patch_set:
        for path in file_patch.paths():
            if path not in allowed_files:
                logger.info("Rejected patch touching unauthorised file %s", path)
                return Invalid(
                    stage=Stage.ALLOWLIST,
                    message="Unauthorized file modification",
                    detail=path,
                )
    return None
