"""Validation outcomes and apply results."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, List, Optional, Union

from patchgate.diff.models import PatchSet


class Stage(str, Enum):
    """Pipeline stage that rejected a patch, in validation order."""

    STRUCTURE = "structure"
    PARSE = "parse"
    ALLOWLIST = "allowlist"
    CONTEXT = "context"


@dataclass(frozen=True)
class Valid:
    """The patch passed every stage."""

    patch_set: PatchSet

    @property
    def is_valid(self) -> bool:
        return True


@dataclass(frozen=True)
class Invalid:
    """The patch was rejected by *stage*."""

    stage: Stage
    message: str
    detail: Optional[str] = None

    @property
    def is_valid(self) -> bool:
        return False


ValidationOutcome = Union[Valid, Invalid]


class FileStatus(str, Enum):
    APPLIED = "applied"
    SKIPPED = "skipped"
    CONFLICT = "conflict"


@dataclass
class ApplyResult:
    """New contents for every file a patch set touches.

    ``updated_files`` and ``removed_files`` are only populated for files
    whose status is APPLIED.
    """

    updated_files: Dict[str, str] = field(default_factory=dict)
    removed_files: List[str] = field(default_factory=list)
    status: Dict[str, FileStatus] = field(default_factory=dict)
    conflicts: Dict[str, str] = field(default_factory=dict)

    @property
    def ok(self) -> bool:
        return not self.conflicts

    @property
    def applied(self) -> List[str]:
        return [p for p, s in self.status.items() if s is FileStatus.APPLIED]

    @property
    def skipped(self) -> List[str]:
        return [p for p, s in self.status.items() if s is FileStatus.SKIPPED]
