"""Corrective feedback for a model retry loop after a rejected patch."""

from __future__ import annotations

from typing import Iterable, Optional

from patchgate.engine.outcome import Invalid, Stage


def corrective_message(outcome: Invalid, allowed_files: Optional[Iterable[str]] = None) -> str:
    """Build the system message sent back to the model on rejection.

    Example: ``CRITICAL ERROR: Context mismatch. File: a.ts, near line 2, ...``
    """
    text = f"CRITICAL ERROR: {outcome.message}."
    if outcome.detail:
        text += f" {outcome.detail}"
    if outcome.stage is Stage.ALLOWLIST and allowed_files is not None:
        granted = sorted(allowed_files)
        text += "\nYou may only edit: " + (", ".join(granted) if granted else "(no files)")
    return text + "\nFix the diff format immediately."
