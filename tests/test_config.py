"""Tests for YAML configuration loading."""
import textwrap

import pytest

from pkg.noteboard.config import BoardConfig, ConfigError


@pytest.fixture(autouse=True)
def no_env_url(monkeypatch):
    monkeypatch.delenv("NOTEBOARD_URL", raising=False)


def test_missing_file_gives_defaults(tmp_path):
    cfg = BoardConfig.load(str(tmp_path / "absent.yaml"))
    assert cfg.base_url == "http://localhost:6969"
    assert cfg.debounce_secs == 1.0
    assert cfg.default_title == "New Note"
    assert cfg.default_description == "Add description..."


def test_yaml_values_and_unknown_keys(tmp_path):
    path = tmp_path / "noteboard.yaml"
    path.write_text(textwrap.dedent("""\
        base_url: http://10.0.0.5:6969
        debounce_secs: 0.5
        stack_breakpoint_px: 600
        theme: dark
    """))

    cfg = BoardConfig.load(str(path))
    assert cfg.base_url == "http://10.0.0.5:6969"
    assert cfg.debounce_secs == 0.5
    assert cfg.stack_breakpoint_px == 600
    assert not hasattr(cfg, "theme")


def test_env_overrides_url(tmp_path, monkeypatch):
    monkeypatch.setenv("NOTEBOARD_URL", "http://phone:6969")
    cfg = BoardConfig.load(str(tmp_path / "absent.yaml"))
    assert cfg.base_url == "http://phone:6969"


def test_malformed_yaml_falls_back(tmp_path):
    path = tmp_path / "noteboard.yaml"
    path.write_text("base_url: [unclosed\n")
    assert BoardConfig.load(str(path)).base_url == "http://localhost:6969"


def test_invalid_debounce_rejected(tmp_path):
    path = tmp_path / "noteboard.yaml"
    path.write_text("debounce_secs: 0\n")
    with pytest.raises(ConfigError):
        BoardConfig.load(str(path))


def test_empty_url_rejected():
    with pytest.raises(ConfigError):
        BoardConfig(base_url="").validate()


def test_non_numeric_debounce_rejected(tmp_path):
    path = tmp_path / "noteboard.yaml"
    path.write_text("debounce_secs: fast\n")
    with pytest.raises(ConfigError, match="debounce_secs"):
        BoardConfig.load(str(path))


@pytest.mark.parametrize("line", [
    "timeout_secs: -1",
    "timeout_secs: soon",
    "stack_breakpoint_px: 0",
    "stack_breakpoint_px: wide",
    "refresh_interval_secs: true",
])
def test_other_numbers_validated(tmp_path, line):
    path = tmp_path / "noteboard.yaml"
    path.write_text(line + "\n")
    with pytest.raises(ConfigError):
        BoardConfig.load(str(path))


def test_numeric_strings_coerced(tmp_path):
    path = tmp_path / "noteboard.yaml"
    path.write_text('debounce_secs: "0.25"\nstack_breakpoint_px: "600"\ntimeout_secs: 2\n')
    cfg = BoardConfig.load(str(path))
    assert cfg.debounce_secs == 0.25
    assert cfg.stack_breakpoint_px == 600
    assert isinstance(cfg.timeout_secs, float)
