"""patchgate — validate and apply model-generated unified diffs safely."""

from patchgate.diff import FilePatch, Hunk, HunkLine, LineKind, ParseError, PatchSet, check, parse
from patchgate.engine import (
    ApplyResult,
    FileStatus,
    Invalid,
    Stage,
    Valid,
    ValidationOutcome,
    apply,
    corrective_message,
    validate,
)

__version__ = "0.1.0"

__all__ = [
    "ApplyResult",
    "FilePatch",
    "FileStatus",
    "Hunk",
    "HunkLine",
    "Invalid",
    "LineKind",
    "ParseError",
    "PatchSet",
    "Stage",
    "Valid",
    "ValidationOutcome",
    "__version__",
    "apply",
    "check",
    "corrective_message",
    "parse",
    "validate",
]
