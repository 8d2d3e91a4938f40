"""Configuration schema — dataclasses for every config section."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import List, Literal

from patchgate.engine.matching import DEFAULT_WINDOW

OutputFormat = Literal["terminal", "json"]
OUTPUT_FORMATS = ("terminal", "json")


@dataclass
class EngineConfig:
    window: int = DEFAULT_WINDOW  # tolerance window for context matching
    require_git_header: bool = False  # structure gate also demands 'diff --git'


@dataclass
class ApplyConfig:
    partial: bool = False  # keep non-conflicting files when another file conflicts


@dataclass
class LimitsConfig:
    max_diff_kb: int = 256
    max_file_kb: int = 1024


@dataclass
class OutputConfig:
    format: OutputFormat = "terminal"
    show_summary: bool = True


@dataclass
class AllowlistConfig:
    files: List[str] = field(default_factory=list)  # exact workspace-relative paths
    globs: List[str] = field(default_factory=list)  # expanded against the workspace


@dataclass
class PatchGateConfig:
    version: str = "1.0"
    engine: EngineConfig = field(default_factory=EngineConfig)
    apply: ApplyConfig = field(default_factory=ApplyConfig)
    limits: LimitsConfig = field(default_factory=LimitsConfig)
    output: OutputConfig = field(default_factory=OutputConfig)
    allowlist: AllowlistConfig = field(default_factory=AllowlistConfig)
