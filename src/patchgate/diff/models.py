"""Data models for parsed patches."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Iterator, List, Optional, Tuple

NO_NEWLINE_MARKER = "\\ No newline at end of file"


class LineKind(str, Enum):
    CONTEXT = "context"
    DELETE = "delete"
    ADD = "add"

    @property
    def marker(self) -> str:
        return _MARKERS[self]


_MARKERS = {
    LineKind.CONTEXT: " ",
    LineKind.DELETE: "-",
    LineKind.ADD: "+",
}


@dataclass(frozen=True, slots=True)
class HunkLine:
    """A single body line of a hunk."""

    kind: LineKind
    text: str
    no_newline: bool = False  # followed by '\ No newline at end of file'

    @property
    def on_old_side(self) -> bool:
        return self.kind is not LineKind.ADD

    @property
    def on_new_side(self) -> bool:
        return self.kind is not LineKind.DELETE


@dataclass(frozen=True)
class Hunk:
    """One ``@@`` block: header numbers plus its ordered body lines."""

    old_start: int
    old_count: int
    new_start: int
    new_count: int
    lines: Tuple[HunkLine, ...] = ()
    section: str = ""  # free text after the closing '@@'

    def old_lines(self) -> List[str]:
        """Context and deleted text, in order."""
        return [ln.text for ln in self.lines if ln.on_old_side]

    def new_lines(self) -> List[str]:
        """Context and added text, in order."""
        return [ln.text for ln in self.lines if ln.on_new_side]

    def counted(self) -> Tuple[int, int]:
        """(old, new) line counts actually present in the body."""
        old = sum(1 for ln in self.lines if ln.on_old_side)
        new = sum(1 for ln in self.lines if ln.on_new_side)
        return old, new

    @property
    def additions(self) -> int:
        return sum(1 for ln in self.lines if ln.kind is LineKind.ADD)

    @property
    def deletions(self) -> int:
        return sum(1 for ln in self.lines if ln.kind is LineKind.DELETE)

    @property
    def is_pure_insertion(self) -> bool:
        return all(ln.kind is LineKind.ADD for ln in self.lines)

    def header(self) -> str:
        text = f"@@ -{self.old_start},{self.old_count} +{self.new_start},{self.new_count} @@"
        if self.section:
            text += f" {self.section}"
        return text

    def render(self) -> str:
        out = [self.header()]
        for ln in self.lines:
            out.append(f"{ln.kind.marker}{ln.text}")
            if ln.no_newline:
                out.append(NO_NEWLINE_MARKER)
        return "\n".join(out)


@dataclass(frozen=True)
class FilePatch:
    """All hunks targeting one file.

    ``old_path`` is None for a create, ``new_path`` is None for a delete.
    Both are already normalised (no ``a/`` / ``b/`` prefix).
    """

    old_path: Optional[str]
    new_path: Optional[str]
    hunks: Tuple[Hunk, ...] = ()

    @property
    def is_create(self) -> bool:
        return self.old_path is None

    @property
    def is_delete(self) -> bool:
        return self.new_path is None

    @property
    def is_rename(self) -> bool:
        return (
            self.old_path is not None
            and self.new_path is not None
            and self.old_path != self.new_path
        )

    @property
    def path(self) -> str:
        """Display path: the new path, or the old one for deletes."""
        return self.new_path or self.old_path or ""

    @property
    def kind(self) -> str:
        if self.is_create:
            return "create"
        if self.is_delete:
            return "delete"
        if self.is_rename:
            return "rename"
        return "modify"

    def paths(self) -> List[str]:
        """Every path this patch touches, old side first."""
        out: List[str] = []
        for p in (self.old_path, self.new_path):
            if p is not None and p not in out:
                out.append(p)
        return out

    @property
    def additions(self) -> int:
        return sum(h.additions for h in self.hunks)

    @property
    def deletions(self) -> int:
        return sum(h.deletions for h in self.hunks)

    def render(self) -> str:
        old_ref = f"a/{self.old_path}" if self.old_path is not None else "/dev/null"
        new_ref = f"b/{self.new_path}" if self.new_path is not None else "/dev/null"
        left = self.old_path if self.old_path is not None else self.new_path
        right = self.new_path if self.new_path is not None else self.old_path
        out = [f"diff --git a/{left} b/{right}", f"--- {old_ref}", f"+++ {new_ref}"]
        out.extend(h.render() for h in self.hunks)
        return "\n".join(out)


@dataclass(frozen=True)
class PatchSet:
    """Every file patch of one diff, in order of appearance."""

    files: Tuple[FilePatch, ...] = ()

    def __iter__(self) -> Iterator[FilePatch]:
        return iter(self.files)

    def __len__(self) -> int:
        return len(self.files)

    def paths(self) -> List[str]:
        out: List[str] = []
        for fp in self.files:
            for p in fp.paths():
                if p not in out:
                    out.append(p)
        return out

    def render(self) -> str:
        """Re-serialise as unified diff text that parses back to an equal PatchSet."""
        return "\n".join(fp.render() for fp in self.files) + "\n"
