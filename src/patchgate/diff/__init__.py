"""Diff layer — structure gate, parser, models."""

from patchgate.diff.models import FilePatch, Hunk, HunkLine, LineKind, PatchSet
from patchgate.diff.parser import DiffParser, ParseError, normalize_path, parse
from patchgate.diff.structure import check, structure_problem

__all__ = [
    "DiffParser",
    "FilePatch",
    "Hunk",
    "HunkLine",
    "LineKind",
    "ParseError",
    "PatchSet",
    "check",
    "normalize_path",
    "parse",
    "structure_problem",
]
