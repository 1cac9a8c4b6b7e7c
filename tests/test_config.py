import logging

import pytest
import yaml

from subpair import config as config_module
from subpair.config import (
    AppConfig,
    PairingConfig,
    configure_logging,
    find_config_file,
    get_config,
    load_config,
    reload_config,
)


@pytest.fixture
def config_file(tmp_path):
    path = tmp_path / "subpair.yaml"
    path.write_text(
        yaml.safe_dump({
            "pairing": {"min_score": 0.7, "ambiguity_epsilon": 0.05},
            "scan": {"max_depth": 3},
            "logging": {"level": "WARNING"},
        }),
        encoding="utf-8",
    )
    return path


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    for name in ("SUBPAIR_CONFIG", "SUBPAIR_MIN_SCORE", "SUBPAIR_AMBIGUITY_EPSILON",
                 "SUBPAIR_LOG_LEVEL", "SUBPAIR_COMPUTE_HASH"):
        monkeypatch.delenv(name, raising=False)


def test_defaults():
    config = AppConfig()

    assert config.pairing.min_score == 0.6
    assert config.pairing.ambiguity_epsilon == 0.02
    assert config.pairing.cross_directory_factor == 0.9
    assert ".srt" in config.scan.subtitle_extensions
    assert config.metadata.compute_hash is True


def test_load_config_from_yaml(config_file):
    config = load_config(config_file)

    assert config.pairing.min_score == 0.7
    assert config.pairing.ambiguity_epsilon == 0.05
    assert config.scan.max_depth == 3
    assert config.logging.level == "WARNING"
    # 未配置的字段使用默认值
    assert config.pairing.cross_directory_factor == 0.9


def test_empty_yaml_uses_defaults(tmp_path):
    path = tmp_path / "subpair.yaml"
    path.write_text("", encoding="utf-8")

    assert load_config(path) == AppConfig()


def test_env_overrides_yaml(config_file, monkeypatch):
    monkeypatch.setenv("SUBPAIR_MIN_SCORE", "0.5")
    monkeypatch.setenv("SUBPAIR_LOG_LEVEL", "debug")
    monkeypatch.setenv("SUBPAIR_COMPUTE_HASH", "false")

    config = load_config(config_file)

    assert config.pairing.min_score == 0.5
    assert config.pairing.ambiguity_epsilon == 0.05
    assert config.logging.level == "DEBUG"
    assert config.metadata.compute_hash is False


def test_find_config_file_prefers_env(config_file, monkeypatch):
    monkeypatch.setenv("SUBPAIR_CONFIG", str(config_file))

    assert find_config_file() == config_file


def test_find_config_file_in_cwd(tmp_path, monkeypatch):
    path = tmp_path / "config.yaml"
    path.write_text("pairing: {min_score: 0.8}\n", encoding="utf-8")
    monkeypatch.chdir(tmp_path)

    assert find_config_file() == tmp_path / "config.yaml"


def test_reload_config_replaces_singleton(config_file, monkeypatch):
    monkeypatch.setenv("SUBPAIR_CONFIG", str(config_file))

    reloaded = reload_config()

    assert reloaded.pairing.min_score == 0.7
    assert get_config() is reloaded
    assert config_module._config is reloaded


def test_invalid_values_are_rejected():
    with pytest.raises(ValueError):
        PairingConfig(min_score=1.5)


def test_configure_logging(monkeypatch):
    calls = {}
    monkeypatch.setattr(logging, "basicConfig", lambda **kwargs: calls.update(kwargs))

    configure_logging(AppConfig(logging={"level": "debug"}))

    assert calls["level"] == logging.DEBUG
    assert "%(message)s" in calls["format"]
