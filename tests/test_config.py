"""Tests for configuration loading and validation."""

import os
from pathlib import Path

import pytest

from did_i_forget.config import CouplingConfig, load_config
from did_i_forget.exceptions import ConfigurationError, InvalidConfigError


@pytest.fixture
def isolated(tmp_path, monkeypatch):
    """Run in an empty directory with no DID_I_FORGET_* variables."""
    monkeypatch.chdir(tmp_path)
    for key in list(os.environ):
        if key.startswith("DID_I_FORGET_"):
            monkeypatch.delenv(key)
    return tmp_path


class TestCouplingConfig:
    """Test CouplingConfig defaults and validation."""

    def test_defaults(self):
        config = CouplingConfig()
        assert config.master == "origin/master"
        assert config.threshold == 0.5
        assert config.top_n == 1
        assert config.cache is False
        assert config.cache_file == ".did-i-forget-cache"
        assert config.normalization == "coupled"
        assert config.output_format == "table"

    @pytest.mark.parametrize("threshold", [-0.01, 1.01])
    def test_threshold_range(self, threshold):
        with pytest.raises(InvalidConfigError) as exc_info:
            CouplingConfig(threshold=threshold)
        assert exc_info.value.key == "threshold"

    @pytest.mark.parametrize("threshold", [0.0, 1.0, 1])
    def test_threshold_bounds_inclusive(self, threshold):
        assert CouplingConfig(threshold=threshold).threshold == threshold

    @pytest.mark.parametrize("top_n", [0, -3, 1.5, True])
    def test_top_n_positive_integer(self, top_n):
        with pytest.raises(InvalidConfigError):
            CouplingConfig(top_n=top_n)

    @pytest.mark.parametrize("master", ["", "   ", "--all"])
    def test_bad_branch(self, master):
        with pytest.raises(ConfigurationError):
            CouplingConfig(master=master)

    def test_bad_normalization(self):
        with pytest.raises(InvalidConfigError):
            CouplingConfig(normalization="both")

    def test_bad_format(self):
        with pytest.raises(InvalidConfigError):
            CouplingConfig(output_format="json")

    def test_frozen(self):
        config = CouplingConfig()
        with pytest.raises(AttributeError):
            config.threshold = 0.9  # type: ignore[misc]

    def test_cache_path_relative_to_repo(self):
        config = CouplingConfig(repo_path="/work/repo")
        assert config.cache_path == Path("/work/repo/.did-i-forget-cache")

    def test_cache_path_absolute(self, tmp_path):
        config = CouplingConfig(repo_path="/work/repo", cache_file=str(tmp_path / "c"))
        assert config.cache_path == tmp_path / "c"


class TestLoadConfig:
    """Test load_config source merging."""

    def test_defaults_only(self, isolated):
        assert load_config() == CouplingConfig()

    def test_overrides(self, isolated):
        config = load_config(threshold=0.8, top_n=3)
        assert config.threshold == 0.8
        assert config.top_n == 3

    def test_none_overrides_ignored(self, isolated):
        assert load_config(threshold=None).threshold == 0.5

    def test_quiet_and_verbose_flags(self, isolated):
        assert load_config(quiet=True).verbosity == "quiet"
        assert load_config(verbose=True).verbosity == "verbose"
        assert load_config(quiet=False, verbose=False).verbosity == "normal"

    def test_project_file(self, isolated):
        (isolated / "did-i-forget.toml").write_text('master = "origin/main"\ntop-n = 2\n')
        config = load_config()
        assert config.master == "origin/main"
        assert config.top_n == 2

    def test_pyproject_table(self, isolated):
        (isolated / "pyproject.toml").write_text(
            '[project]\nname = "x"\n\n[tool.did-i-forget]\nthreshold = 0.75\n'
        )
        assert load_config().threshold == 0.75

    def test_explicit_file_beats_project_file(self, isolated):
        (isolated / "did-i-forget.toml").write_text("top_n = 2\n")
        explicit = isolated / "custom.toml"
        explicit.write_text("top_n = 4\n")
        assert load_config(config_file=explicit).top_n == 4

    def test_missing_explicit_file(self, isolated):
        with pytest.raises(ConfigurationError):
            load_config(config_file=isolated / "nope.toml")

    def test_invalid_toml(self, isolated):
        (isolated / "did-i-forget.toml").write_text("top_n = = 2\n")
        with pytest.raises(ConfigurationError):
            load_config()

    def test_unknown_key(self, isolated):
        (isolated / "did-i-forget.toml").write_text("colour = 'blue'\n")
        with pytest.raises(ConfigurationError) as exc_info:
            load_config()
        assert "colour" in str(exc_info.value)

    def test_env_vars(self, isolated, monkeypatch):
        monkeypatch.setenv("DID_I_FORGET_THRESHOLD", "0.6")
        monkeypatch.setenv("DID_I_FORGET_CACHE", "yes")
        monkeypatch.setenv("DID_I_FORGET_TOP_N", "5")
        monkeypatch.setenv("DID_I_FORGET_MASTER", "origin/develop")
        config = load_config()
        assert config.threshold == 0.6
        assert config.cache is True
        assert config.top_n == 5
        assert config.master == "origin/develop"

    def test_env_optional_field(self, isolated, monkeypatch):
        monkeypatch.setenv("DID_I_FORGET_CACHE_TMP_DIR", "/var/tmp")
        assert load_config().cache_tmp_dir == "/var/tmp"

    def test_bad_env_value(self, isolated, monkeypatch):
        monkeypatch.setenv("DID_I_FORGET_CACHE", "maybe")
        with pytest.raises(InvalidConfigError):
            load_config()

    def test_cli_beats_env(self, isolated, monkeypatch):
        monkeypatch.setenv("DID_I_FORGET_THRESHOLD", "0.6")
        assert load_config(threshold=0.9).threshold == 0.9

    def test_env_beats_file(self, isolated, monkeypatch):
        (isolated / "did-i-forget.toml").write_text("threshold = 0.2\n")
        monkeypatch.setenv("DID_I_FORGET_THRESHOLD", "0.6")
        assert load_config().threshold == 0.6
