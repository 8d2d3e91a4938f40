"""Engine — allowlist, context verification, applier, pipeline."""

from patchgate.engine.allowlist import enforce
from patchgate.engine.applier import ApplyConflict, apply, splice
from patchgate.engine.context import verify
from patchgate.engine.feedback import corrective_message
from patchgate.engine.matching import DEFAULT_WINDOW, plan_file, split_lines
from patchgate.engine.outcome import (
    ApplyResult,
    FileStatus,
    Invalid,
    Stage,
    Valid,
    ValidationOutcome,
)
from patchgate.engine.pipeline import validate

__all__ = [
    "DEFAULT_WINDOW",
    "ApplyConflict",
    "ApplyResult",
    "FileStatus",
    "Invalid",
    "Stage",
    "Valid",
    "ValidationOutcome",
    "apply",
    "corrective_message",
    "enforce",
    "plan_file",
    "splice",
    "split_lines",
    "validate",
    "verify",
]
