"""Structure gate — a cheap "is this a diff at all?" check run before parsing."""

from __future__ import annotations

from typing import Optional

NO_MARKERS = "No diff markers detected"
MISSING_GIT_HEADER = "Missing 'diff --git' header"
UNPAIRED_MARKERS = "File markers '---' and '+++' are not paired"


def structure_problem(raw_text: str, *, require_git_header: bool = False) -> Optional[str]:
    """Return why *raw_text* does not look like a diff, or None if it does."""
    lines = [line.rstrip("\r") for line in raw_text.lstrip("\ufeff").split("\n")]
    has_header = any(line.startswith("diff --git ") for line in lines)
    has_old = False
    paired = False

    for line, nxt in zip(lines, lines[1:]):
        if line.startswith("--- "):
            has_old = True
            if nxt.startswith("+++ "):
                paired = True
                break

    if not paired:
        return UNPAIRED_MARKERS if (has_old or has_header) else NO_MARKERS
    if require_git_header and not has_header:
        return MISSING_GIT_HEADER
    return None


def check(raw_text: str, *, require_git_header: bool = False) -> bool:
    """True when *raw_text* carries a paired ``---``/``+++`` file marker."""
    return structure_problem(raw_text, require_git_header=require_git_header) is None
