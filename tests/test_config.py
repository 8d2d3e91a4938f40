"""Tests for config loading, validation, and env var overrides."""

from pathlib import Path

import pytest

from patchgate.config.defaults import DEFAULT_TOML
from patchgate.config.loader import ConfigError, find_config_file, load_config
from patchgate.config.schema import PatchGateConfig


class TestConfigLoading:
    def test_default_config(self, tmp_path: Path):
        cfg = load_config(tmp_path)
        assert cfg.engine.window == 5
        assert cfg.engine.require_git_header is False
        assert cfg.apply.partial is False
        assert cfg.output.format == "terminal"
        assert cfg.limits.max_diff_kb == 256

    def test_custom_toml(self, tmp_path: Path):
        toml_path = tmp_path / ".patchgate.toml"
        toml_path.write_text(
            'version = "1.0"\n'
            '[engine]\n'
            'window = 8\n'
            'require_git_header = true\n'
            '[allowlist]\n'
            'files = ["src/app.ts"]\n'
            'globs = ["lib/*.ts"]\n'
        )
        cfg = load_config(tmp_path)
        assert cfg.engine.window == 8
        assert cfg.engine.require_git_header is True
        assert cfg.allowlist.files == ["src/app.ts"]
        assert cfg.allowlist.globs == ["lib/*.ts"]

    def test_config_override_path(self, tmp_path: Path):
        custom = tmp_path / "custom.toml"
        custom.write_text('[output]\nformat = "json"\n')
        cfg = load_config(tmp_path, config_override=str(custom))
        assert cfg.output.format == "json"

    def test_missing_override_raises(self, tmp_path: Path):
        with pytest.raises(ConfigError):
            load_config(tmp_path, config_override="/nonexistent/config.toml")

    def test_invalid_toml_raises(self, tmp_path: Path):
        (tmp_path / ".patchgate.toml").write_text("this is not valid [toml")
        with pytest.raises(ConfigError):
            load_config(tmp_path)

    def test_unknown_keys_ignored(self, tmp_path: Path):
        (tmp_path / ".patchgate.toml").write_text('[engine]\nwindow = 3\nfuzz = "yes"\n')
        assert load_config(tmp_path).engine.window == 3

    def test_default_template_loads(self, tmp_path: Path):
        (tmp_path / ".patchgate.toml").write_text(DEFAULT_TOML)
        cfg = load_config(tmp_path)
        assert cfg == PatchGateConfig()

    def test_find_config_file(self, tmp_path: Path):
        assert find_config_file(tmp_path) is None
        (tmp_path / ".patchgate.toml").write_text("")
        assert find_config_file(tmp_path) == tmp_path / ".patchgate.toml"


class TestConfigValidation:
    @pytest.mark.parametrize("body", [
        "[engine]\nwindow = 0\n",
        '[engine]\nwindow = "five"\n',
        '[output]\nformat = "sarif"\n',
        "[limits]\nmax_diff_kb = -1\n",
        '[allowlist]\nfiles = "src/a.ts"\n',
        '[allowlist]\nglobs = "*.ts"\n',
        "[allowlist]\nfiles = [1, 2]\n",
        'engine = "not a table"\n',
    ])
    def test_rejected(self, tmp_path: Path, body):
        (tmp_path / ".patchgate.toml").write_text(body)
        with pytest.raises(ConfigError):
            load_config(tmp_path)


class TestEnvVarOverrides:
    def test_window_override(self, tmp_path: Path, monkeypatch):
        monkeypatch.setenv("PATCHGATE_WINDOW", "12")
        assert load_config(tmp_path).engine.window == 12

    def test_format_override(self, tmp_path: Path, monkeypatch):
        monkeypatch.setenv("PATCHGATE_FORMAT", "json")
        assert load_config(tmp_path).output.format == "json"

    def test_allow_override(self, tmp_path: Path, monkeypatch):
        monkeypatch.setenv("PATCHGATE_ALLOW", "a.ts, b.ts,")
        assert load_config(tmp_path).allowlist.files == ["a.ts", "b.ts"]

    def test_limits_override(self, tmp_path: Path, monkeypatch):
        monkeypatch.setenv("PATCHGATE_MAX_DIFF_KB", "10")
        monkeypatch.setenv("PATCHGATE_MAX_FILE_KB", "20")
        cfg = load_config(tmp_path)
        assert (cfg.limits.max_diff_kb, cfg.limits.max_file_kb) == (10, 20)

    def test_partial_override(self, tmp_path: Path, monkeypatch):
        monkeypatch.setenv("PATCHGATE_PARTIAL_APPLY", "1")
        assert load_config(tmp_path).apply.partial is True

    def test_invalid_env_ignored(self, tmp_path: Path, monkeypatch):
        monkeypatch.setenv("PATCHGATE_WINDOW", "zero")
        monkeypatch.setenv("PATCHGATE_FORMAT", "xml")
        cfg = load_config(tmp_path)
        assert cfg.engine.window == 5  # default unchanged
        assert cfg.output.format == "terminal"
