"""Load and merge configuration from .patchgate.toml and env vars."""

from __future__ import annotations

import dataclasses
import os
import sys
from pathlib import Path
from typing import Any, Dict, Optional

if sys.version_info >= (3, 11):
    import tomllib
else:
    import tomli as tomllib

from patchgate.config.schema import (
    OUTPUT_FORMATS,
    AllowlistConfig,
    ApplyConfig,
    EngineConfig,
    LimitsConfig,
    OutputConfig,
    PatchGateConfig,
)

CONFIG_FILENAME = ".patchgate.toml"


class ConfigError(Exception):
    """Raised when config is malformed or unreadable."""


def find_config_file(root: Path, override: Optional[str] = None) -> Optional[Path]:
    """Locate the config file. *override* takes precedence."""
    if override:
        p = Path(override)
        if not p.is_file():
            raise ConfigError(f"Config file not found: {override}")
        return p
    candidate = root / CONFIG_FILENAME
    return candidate if candidate.is_file() else None


def _parse_toml(path: Path) -> Dict[str, Any]:
    try:
        with open(path, "rb") as f:
            return tomllib.load(f)
    except (OSError, tomllib.TOMLDecodeError) as exc:
        raise ConfigError(f"Failed to parse {path}: {exc}") from exc


def _build_section(data: Dict[str, Any], cls: type, section: str):
    """Build a dataclass from a TOML section dict, ignoring unknown keys."""
    raw = data.get(section, {})
    if not isinstance(raw, dict):
        raise ConfigError(f"[{section}] must be a table")
    valid_fields = {f.name for f in dataclasses.fields(cls)}
    filtered = {k: v for k, v in raw.items() if k in valid_fields}
    return cls(**filtered)


def _validate(cfg: PatchGateConfig) -> None:
    if not isinstance(cfg.engine.window, int) or cfg.engine.window < 1:
        raise ConfigError(f"engine.window must be a positive integer, got {cfg.engine.window!r}")
    if cfg.output.format not in OUTPUT_FORMATS:
        raise ConfigError(f"output.format must be one of {', '.join(OUTPUT_FORMATS)}")
    for name in ("max_diff_kb", "max_file_kb"):
        value = getattr(cfg.limits, name)
        if not isinstance(value, int) or value < 1:
            raise ConfigError(f"limits.{name} must be a positive integer, got {value!r}")
    for name in ("files", "globs"):
        value = getattr(cfg.allowlist, name)
        if not isinstance(value, list) or not all(isinstance(p, str) for p in value):
            raise ConfigError(f"allowlist.{name} must be a list of strings, got {value!r}")


def _positive_int(value: str) -> Optional[int]:
    try:
        number = int(value)
    except ValueError:
        return None
    return number if number >= 1 else None


def _merge_env_overrides(cfg: PatchGateConfig) -> None:
    """Apply PATCHGATE_* environment variable overrides; invalid values are ignored."""
    if (val := os.environ.get("PATCHGATE_WINDOW")) and (n := _positive_int(val)):
        cfg.engine.window = n
    if val := os.environ.get("PATCHGATE_FORMAT"):
        if val in OUTPUT_FORMATS:
            cfg.output.format = val  # type: ignore[assignment]
    if (val := os.environ.get("PATCHGATE_MAX_DIFF_KB")) and (n := _positive_int(val)):
        cfg.limits.max_diff_kb = n
    if (val := os.environ.get("PATCHGATE_MAX_FILE_KB")) and (n := _positive_int(val)):
        cfg.limits.max_file_kb = n
    if val := os.environ.get("PATCHGATE_ALLOW"):
        cfg.allowlist.files.extend(p.strip() for p in val.split(",") if p.strip())
    if os.environ.get("PATCHGATE_PARTIAL_APPLY") == "1":
        cfg.apply.partial = True


def load_config(
    root: Path,
    config_override: Optional[str] = None,
) -> PatchGateConfig:
    """Load, validate, and return a PatchGateConfig."""
    config_path = find_config_file(root, config_override)

    if config_path is None:
        cfg = PatchGateConfig()
    else:
        raw = _parse_toml(config_path)
        try:
            cfg = PatchGateConfig(
                version=str(raw.get("version", "1.0")),
                engine=_build_section(raw, EngineConfig, "engine"),
                apply=_build_section(raw, ApplyConfig, "apply"),
                limits=_build_section(raw, LimitsConfig, "limits"),
                output=_build_section(raw, OutputConfig, "output"),
                allowlist=_build_section(raw, AllowlistConfig, "allowlist"),
            )
        except TypeError as exc:
            raise ConfigError(f"Invalid value in {config_path}: {exc}") from exc
        _validate(cfg)

    _merge_env_overrides(cfg)
    return cfg
