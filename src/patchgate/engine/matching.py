"""Line matching shared by the context verifier and the applier.

Both stages place hunks with ``plan_file`` so that what was judged valid
is exactly what gets spliced.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import List, Optional, Sequence, Tuple, Union

from patchgate.diff.models import Hunk, LineKind

DEFAULT_WINDOW = 5


@dataclass(frozen=True)
class SourceText:
    """File content split into lines, remembering how to join it back."""

    lines: Tuple[str, ...]
    newline: str = "\n"
    trailing_newline: bool = False

    def join(self, lines: Sequence[str], trailing_newline: bool) -> str:
        if not lines:
            return ""
        text = self.newline.join(lines)
        return text + self.newline if trailing_newline else text


def _same(source_line: str, text: str) -> bool:
    # Mixed-ending files keep a stray "\r" on their CRLF lines
    return source_line == text or (source_line.endswith("\r") and source_line[:-1] == text)


def split_lines(content: str) -> SourceText:
    if not content:
        return SourceText(lines=())
    # CRLF only when every line ending is CRLF
    crlf = "\r\n" in content and content.count("\r\n") == content.count("\n")
    newline = "\r\n" if crlf else "\n"
    parts = content.split(newline)
    trailing = parts[-1] == ""
    if trailing:
        parts.pop()
    return SourceText(lines=tuple(parts), newline=newline, trailing_newline=trailing)


@dataclass(frozen=True)
class Mismatch:
    """Why a hunk could not be placed."""

    line_no: int  # 1-based cursor position when the search gave up
    expected: Optional[str] = None
    reason: str = ""

    def describe(self, path: str) -> str:
        if self.expected is not None:
            return f'File: {path}, near line {self.line_no}, expected: "{self.expected}"'
        return f"File: {path}, near line {self.line_no}: {self.reason}"


@dataclass(frozen=True)
class Placement:
    """Source positions (0-based) of one hunk's context and deleted lines."""

    hunk: Hunk
    positions: Tuple[int, ...]
    insert_at: int

    @property
    def start(self) -> int:
        return self.positions[0] if self.positions else self.insert_at

    @property
    def end(self) -> int:
        return self.positions[-1] + 1 if self.positions else self.insert_at


def locate_hunk(
    hunk: Hunk, lines: Sequence[str], window: int = DEFAULT_WINDOW
) -> Union[Placement, Mismatch]:
    """Walk *hunk* against *lines*, searching each old-side line within *window*.

    The cursor starts at ``old_start - 1`` and moves just past every match,
    absorbing small offsets in the model's line numbers.
    """
    cursor = max(hunk.old_start - 1, 0)
    positions: List[int] = []

    for ln in hunk.lines:
        if ln.kind is LineKind.ADD:
            continue
        limit = min(cursor + window, len(lines))
        found = next((i for i in range(cursor, limit) if _same(lines[i], ln.text)), None)
        if found is None:
            return Mismatch(line_no=cursor + 1, expected=ln.text)
        positions.append(found)
        cursor = found + 1

    # A pure insertion goes after line old_start
    insert_at = hunk.old_start
    if not positions and insert_at > len(lines):
        return Mismatch(
            line_no=insert_at,
            reason=f"insertion point is past the end of the file ({len(lines)} lines)",
        )
    return Placement(hunk=hunk, positions=tuple(positions), insert_at=insert_at)


def plan_file(
    hunks: Sequence[Hunk], lines: Sequence[str], window: int = DEFAULT_WINDOW
) -> Union[List[Placement], Mismatch]:
    """Place every hunk of a file; hunks may not collide once placed."""
    placements: List[Placement] = []
    prev_end = 0
    for hunk in hunks:
        placed = locate_hunk(hunk, lines, window)
        if isinstance(placed, Mismatch):
            return placed
        if placed.start < prev_end:
            return Mismatch(
                line_no=placed.start + 1,
                reason=f"hunk '{hunk.header()}' overlaps the previous hunk",
            )
        placements.append(placed)
        prev_end = placed.end
    return placements


def covers_all(plan: Sequence[Placement], total: int) -> bool:
    """True when the placed old-side lines account for every source line."""
    return sum(len(p.positions) for p in plan) == total
