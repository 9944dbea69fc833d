from __future__ import annotations

import json
from pathlib import Path

import pytest

from xcui_commands.config import DEFAULT_WDA_URL, CommandsConfig, load_config
from xcui_commands.errors import ConfigError


def test_defaults_without_file_or_env() -> None:
    assert load_config(env={}) == CommandsConfig()
    assert CommandsConfig().wda_url == DEFAULT_WDA_URL


def test_yaml_file_is_loaded(tmp_path: Path) -> None:
    path = tmp_path / "xcui.yaml"
    path.write_text(
        "wda_url: http://10.0.0.5:8100\nudid: ABC\nreal_device: true\ncommand_timeout_s: 15\n",
        encoding="utf-8",
    )
    cfg = load_config(path, env={})
    assert cfg.wda_url == "http://10.0.0.5:8100"
    assert cfg.udid == "ABC"
    assert cfg.real_device is True
    assert cfg.command_timeout_s == 15


def test_json_file_is_loaded(tmp_path: Path) -> None:
    path = tmp_path / "xcui.json"
    path.write_text(json.dumps({"session_id": "S1", "log_level": "DEBUG"}), encoding="utf-8")
    cfg = load_config(path, env={})
    assert cfg.session_id == "S1"
    assert cfg.log_level == "DEBUG"


def test_empty_yaml_file_means_defaults(tmp_path: Path) -> None:
    path = tmp_path / "empty.yml"
    path.write_text("", encoding="utf-8")
    assert load_config(path, env={}) == CommandsConfig()


def test_schema_errors_are_reported_together(tmp_path: Path) -> None:
    path = tmp_path / "bad.yaml"
    path.write_text("real_device: maybe\ncommand_timeout_s: -1\nextra: 1\n", encoding="utf-8")
    with pytest.raises(ConfigError) as exc_info:
        load_config(path, env={})
    msg = str(exc_info.value)
    assert "real_device" in msg
    assert "command_timeout_s" in msg
    assert "extra" in msg


def test_top_level_must_be_an_object(tmp_path: Path) -> None:
    path = tmp_path / "list.yaml"
    path.write_text("- a\n- b\n", encoding="utf-8")
    with pytest.raises(ConfigError, match="Top-level config must be an object"):
        load_config(path, env={})


def test_unsupported_extension(tmp_path: Path) -> None:
    path = tmp_path / "xcui.toml"
    path.write_text("", encoding="utf-8")
    with pytest.raises(ConfigError, match="Unsupported config file extension"):
        load_config(path, env={})


def test_missing_file() -> None:
    with pytest.raises(FileNotFoundError):
        load_config(Path("/nonexistent/xcui.yaml"), env={})


def test_env_overrides_file(tmp_path: Path) -> None:
    path = tmp_path / "xcui.yaml"
    path.write_text("wda_url: http://file:8100\nreal_device: true\n", encoding="utf-8")
    env = {
        "XCUI_WDA_URL": " http://env:8100 ",
        "XCUI_REAL_DEVICE": "no",
        "XCUI_COMMAND_TIMEOUT_S": "2.5",
        "XCUI_LOG_LEVEL": "warning",
        "XCUI_UDID": "",
    }
    cfg = load_config(path, env=env)
    assert cfg.wda_url == "http://env:8100"
    assert cfg.real_device is False
    assert cfg.command_timeout_s == 2.5
    assert cfg.log_level == "WARNING"
    assert cfg.udid is None


@pytest.mark.parametrize(
    "env",
    [
        {"XCUI_REAL_DEVICE": "sometimes"},
        {"XCUI_COMMAND_TIMEOUT_S": "fast"},
        {"XCUI_COMMAND_TIMEOUT_S": "0"},
        {"XCUI_LOG_LEVEL": "LOUD"},
    ],
)
def test_bad_env_values(env) -> None:
    with pytest.raises(ConfigError):
        load_config(env=env)
