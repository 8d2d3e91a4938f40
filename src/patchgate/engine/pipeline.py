"""Validation pipeline — structure, parse, allowlist, context; fails fast.

``validate`` never raises for bad input: every rejection comes back as an
``Invalid`` naming the stage that failed.
"""

from __future__ import annotations

import logging
from typing import AbstractSet, Mapping

from patchgate.diff.parser import ParseError, parse
from patchgate.diff.structure import structure_problem
from patchgate.engine.allowlist import enforce
from patchgate.engine.context import verify
from patchgate.engine.matching import DEFAULT_WINDOW
from patchgate.engine.outcome import Invalid, Stage, Valid, ValidationOutcome

logger = logging.getLogger(__name__)


def _rejected(outcome: Invalid) -> Invalid:
    logger.info(
        "Patch rejected at %s stage: %s (%s)",
        outcome.stage.value,
        outcome.message,
        outcome.detail or "-",
    )
    return outcome


def validate(
    raw_text: str,
    allowed_files: AbstractSet[str],
    current_files: Mapping[str, str],
    *,
    window: int = DEFAULT_WINDOW,
    require_git_header: bool = False,
) -> ValidationOutcome:
    """Check *raw_text* and return Valid(patch_set) or Invalid(stage, ...)."""
    if window < 1:
        raise ValueError(f"window must be at least 1, got {window}")

    # --- Structure ---
    problem = structure_problem(raw_text, require_git_header=require_git_header)
    if problem is not None:
        return _rejected(Invalid(stage=Stage.STRUCTURE, message="Invalid diff structure", detail=problem))
    logger.debug("Structure check passed")

    # --- Parse ---
    try:
        patch_set = parse(raw_text)
    except ParseError as exc:
        return _rejected(Invalid(stage=Stage.PARSE, message=exc.message, detail=exc.detail))
    logger.debug("Parsed %d file patch(es)", len(patch_set))

    # --- Allowlist ---
    violation = enforce(patch_set, allowed_files)
    if violation is not None:
        return _rejected(violation)
    logger.debug("Allowlist check passed for %s", ", ".join(patch_set.paths()))

    # --- Context ---
    mismatch = verify(patch_set, current_files, window)
    if mismatch is not None:
        return _rejected(mismatch)

    logger.info("Patch valid: %d file(s)", len(patch_set))
    return Valid(patch_set=patch_set)
