"""Unified diff parser — turns model output into a PatchSet.

Hunk bodies are consumed against the counts declared in their ``@@``
header, so a body whose length disagrees with its header is rejected
instead of being silently truncated or extended.
"""

from __future__ import annotations

import dataclasses
import re
from typing import List, Optional, Tuple

from patchgate.diff.models import FilePatch, Hunk, HunkLine, LineKind, PatchSet

# --- Regex patterns for diff parsing ---

_DIFF_HEADER_RE = re.compile(r"^diff --git a/(.*) b/(.*)$")
_HUNK_HEADER_RE = re.compile(
    r"^@@ -(\d+)(?:,(\d+))? \+(\d+)(?:,(\d+))? @@(.*)$"
)
_FILE_HEADER_OLD = re.compile(r"^--- (.+?)(?:\t.*)?$")
_FILE_HEADER_NEW = re.compile(r"^\+\+\+ (.+?)(?:\t.*)?$")
_RENAME_FROM_RE = re.compile(r"^rename from (.+)$")
_RENAME_TO_RE = re.compile(r"^rename to (.+)$")
_NEW_FILE_RE = re.compile(r"^new file mode \d+$")
_DELETED_FILE_RE = re.compile(r"^deleted file mode \d+$")
_EXTENDED_HEADER_RE = re.compile(
    r"^(?:index [0-9a-fA-F]+\.\.[0-9a-fA-F]+"
    r"|old mode \d+|new mode \d+"
    r"|(?:dis)?similarity index \d+%"
    r"|copy (?:from|to) .+"
    r"|Binary files .* and .* differ)"
)

_KIND_BY_MARKER = {
    " ": LineKind.CONTEXT,
    "-": LineKind.DELETE,
    "+": LineKind.ADD,
}


class ParseError(Exception):
    """Raised when diff text cannot be turned into a PatchSet."""

    def __init__(self, message: str, detail: Optional[str] = None) -> None:
        super().__init__(message if detail is None else f"{message}: {detail}")
        self.message = message
        self.detail = detail


def normalize_path(raw: str) -> Optional[str]:
    """Strip quoting and a leading ``a/`` or ``b/``; ``/dev/null`` becomes None."""
    path = raw.strip()
    if len(path) >= 2 and path[0] == path[-1] == '"':
        path = path[1:-1]
    if path == "/dev/null":
        return None
    if path.startswith("a/") or path.startswith("b/"):
        path = path[2:]
    return path or None


def _split_lines(text: str) -> List[str]:
    text = text.lstrip("\ufeff")
    lines = [line.rstrip("\r") for line in text.split("\n")]
    if lines and lines[-1] == "":
        lines.pop()  # artefact of the final newline
    return lines


class DiffParser:
    """Parse unified diff text into a PatchSet.

    Usage::

        patch_set = DiffParser(diff_text).parse()

    Raises ParseError on the first structural problem.
    """

    def __init__(self, diff_text: str) -> None:
        self._lines = _split_lines(diff_text)

    def parse(self) -> PatchSet:
        files: List[FilePatch] = []
        idx = 0
        total = len(self._lines)

        while idx < total:
            line = self._lines[idx]
            if _DIFF_HEADER_RE.match(line) or self._is_file_header(idx):
                file_patch, idx = self._parse_segment(idx)
                files.append(file_patch)
                continue
            if line.startswith("@@"):
                raise ParseError("Hunk outside of a file section", f"line {idx + 1}")
            # Preamble or trailing prose around the diff
            idx += 1

        if not files:
            raise ParseError("No file patches found")

        seen: set[str] = set()
        for file_patch in files:
            for path in file_patch.paths():
                if path in seen:
                    raise ParseError("Duplicate file section", f"{path} is patched more than once")
                seen.add(path)
        return PatchSet(files=tuple(files))

    # ---- segments ----

    def _is_file_header(self, idx: int) -> bool:
        return (
            idx + 1 < len(self._lines)
            and self._lines[idx].startswith("--- ")
            and self._lines[idx + 1].startswith("+++ ")
        )

    def _parse_segment(self, idx: int) -> Tuple[FilePatch, int]:
        start = idx
        total = len(self._lines)
        old_path: Optional[str] = None
        new_path: Optional[str] = None

        m = _DIFF_HEADER_RE.match(self._lines[idx])
        if m:
            old_path = normalize_path(m.group(1))
            new_path = normalize_path(m.group(2))
            idx += 1

            # Git extended headers (index, modes, renames, new/deleted file)
            while idx < total:
                sub = self._lines[idx]
                if _NEW_FILE_RE.match(sub):
                    old_path = None
                elif _DELETED_FILE_RE.match(sub):
                    new_path = None
                elif (rm := _RENAME_FROM_RE.match(sub)):
                    old_path = normalize_path(rm.group(1))
                elif (rt := _RENAME_TO_RE.match(sub)):
                    new_path = normalize_path(rt.group(1))
                elif not _EXTENDED_HEADER_RE.match(sub):
                    break
                idx += 1

        if self._is_file_header(idx):
            old_m = _FILE_HEADER_OLD.match(self._lines[idx])
            new_m = _FILE_HEADER_NEW.match(self._lines[idx + 1])
            if old_m is None or new_m is None:
                raise ParseError("Malformed file header", f"line {idx + 1}")
            old_path = normalize_path(old_m.group(1))
            new_path = normalize_path(new_m.group(1))
            idx += 2

        if old_path is None and new_path is None:
            raise ParseError("File section without a path", f"line {start + 1}")
        display = new_path or old_path

        hunks: List[Hunk] = []
        while idx < total:
            line = self._lines[idx]
            if line.startswith("@@"):
                hunk, idx = self._parse_hunk(idx)
                hunks.append(hunk)
                continue
            if _DIFF_HEADER_RE.match(line) or self._is_file_header(idx):
                break
            if line.strip() and line[0] in _KIND_BY_MARKER:
                if hunks:
                    last = hunks[-1]
                    raise ParseError(
                        "Hunk line count mismatch",
                        f"{display}: line {idx + 1} is past the end of hunk "
                        f"'{last.header()}'",
                    )
                raise ParseError(
                    "Missing hunk header",
                    f"{display}: line {idx + 1} has no preceding '@@' header",
                )
            idx += 1

        if not hunks:
            raise ParseError("No hunks found", f"{display} (section at line {start + 1})")
        _check_order(hunks, display)

        return FilePatch(old_path=old_path, new_path=new_path, hunks=tuple(hunks)), idx

    # ---- hunks ----

    def _parse_hunk(self, idx: int) -> Tuple[Hunk, int]:
        header = self._lines[idx]
        header_no = idx + 1
        hm = _HUNK_HEADER_RE.match(header)
        if hm is None:
            raise ParseError("Malformed hunk header", f"line {header_no}: {header!r}")

        old_start = int(hm.group(1))
        old_count = int(hm.group(2)) if hm.group(2) is not None else 1
        new_start = int(hm.group(3))
        new_count = int(hm.group(4)) if hm.group(4) is not None else 1
        if old_start == 0 and old_count > 0:
            raise ParseError("Invalid hunk range", f"line {header_no}: old side starts at 0 but spans {old_count} lines")
        if new_start == 0 and new_count > 0:
            raise ParseError("Invalid hunk range", f"line {header_no}: new side starts at 0 but spans {new_count} lines")

        old_left, new_left = old_count, new_count
        body: List[HunkLine] = []
        total = len(self._lines)
        idx += 1

        while old_left > 0 or new_left > 0:
            if idx >= total:
                raise ParseError(
                    "Hunk line count mismatch",
                    f"line {header_no}: input ended with {old_left} old and "
                    f"{new_left} new lines still expected",
                )
            raw = self._lines[idx]
            if raw.startswith("\\"):
                _flag_no_newline(body)
                idx += 1
                continue

            if raw == "":
                # Models often drop the leading space of a blank context line
                kind, text = LineKind.CONTEXT, ""
            else:
                kind = _KIND_BY_MARKER.get(raw[0])
                text = raw[1:]
                if kind is None:
                    if raw.startswith("@@") or _DIFF_HEADER_RE.match(raw):
                        raise ParseError(
                            "Hunk line count mismatch",
                            f"line {header_no}: hunk ends at line {idx + 1} with "
                            f"{old_left} old and {new_left} new lines still expected",
                        )
                    raise ParseError("Unexpected line in hunk body", f"line {idx + 1}: {raw!r}")

            if (kind is not LineKind.ADD and old_left == 0) or (
                kind is not LineKind.DELETE and new_left == 0
            ):
                raise ParseError(
                    "Hunk line count mismatch",
                    f"line {header_no}: header declares -{old_count},+{new_count} "
                    f"but line {idx + 1} exceeds it",
                )
            if kind is not LineKind.ADD:
                old_left -= 1
            if kind is not LineKind.DELETE:
                new_left -= 1
            body.append(HunkLine(kind=kind, text=text))
            idx += 1

        if idx < total and self._lines[idx].startswith("\\"):
            _flag_no_newline(body)
            idx += 1

        hunk = Hunk(
            old_start=old_start,
            old_count=old_count,
            new_start=new_start,
            new_count=new_count,
            lines=tuple(body),
            section=hm.group(5).strip(),
        )
        return hunk, idx


def _flag_no_newline(body: List[HunkLine]) -> None:
    if body:
        body[-1] = dataclasses.replace(body[-1], no_newline=True)


def _check_order(hunks: List[Hunk], path: Optional[str]) -> None:
    """Hunks must be ascending and non-overlapping on the old side."""
    prev_end = 0
    for hunk in hunks:
        # A zero-length old range sits *after* line old_start
        begin = hunk.old_start - 1 if hunk.old_count else hunk.old_start
        if begin < prev_end:
            raise ParseError(
                "Overlapping or out-of-order hunks",
                f"{path}: '{hunk.header()}' starts before line {prev_end + 1}",
            )
        prev_end = begin + hunk.old_count


def parse(diff_text: str) -> PatchSet:
    """Parse *diff_text*; raises ParseError."""
    return DiffParser(diff_text).parse()
