"""JSON reporter for orchestration layers and CI."""

from __future__ import annotations

import json
from typing import AbstractSet, Any, Dict, List, Optional

from patchgate.engine.feedback import corrective_message
from patchgate.engine.outcome import ApplyResult, Invalid, ValidationOutcome


def _files(outcome: ValidationOutcome, apply_result: Optional[ApplyResult]) -> List[Dict[str, Any]]:
    if isinstance(outcome, Invalid):
        return []
    files_list: List[Dict[str, Any]] = []
    for fp in outcome.patch_set:
        entry: Dict[str, Any] = {
            "path": fp.path,
            "kind": fp.kind,
            "old_path": fp.old_path,
            "new_path": fp.new_path,
            "hunks": len(fp.hunks),
            "additions": fp.additions,
            "deletions": fp.deletions,
        }
        if apply_result is not None and fp.path in apply_result.status:
            entry["status"] = apply_result.status[fp.path].value
        files_list.append(entry)
    return files_list


def to_dict(
    outcome: ValidationOutcome,
    apply_result: Optional[ApplyResult] = None,
    *,
    allowed_files: Optional[AbstractSet[str]] = None,
) -> Dict[str, Any]:
    """Convert an outcome (and optional apply result) to a JSON-serialisable dict."""
    data: Dict[str, Any] = {
        "version": "1.0",
        "valid": outcome.is_valid,
        "files": _files(outcome, apply_result),
    }
    if isinstance(outcome, Invalid):
        data.update({
            "stage": outcome.stage.value,
            "message": outcome.message,
            "detail": outcome.detail,
            "feedback": corrective_message(outcome, allowed_files),
        })
    if apply_result is not None:
        data["apply"] = {
            "ok": apply_result.ok,
            "updated": sorted(apply_result.updated_files),
            "removed": list(apply_result.removed_files),
            "skipped": apply_result.skipped,
            "conflicts": dict(apply_result.conflicts),
        }
    return data


def render(
    outcome: ValidationOutcome,
    apply_result: Optional[ApplyResult] = None,
    *,
    allowed_files: Optional[AbstractSet[str]] = None,
) -> str:
    """Return formatted JSON string."""
    return json.dumps(to_dict(outcome, apply_result, allowed_files=allowed_files), indent=2)
