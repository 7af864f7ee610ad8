from pathlib import Path

import pytest

from rssh.adapters.config import ConfigLoader, RsshConfig
from rssh.core.exceptions import ConfigError


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    for name in ("RSSH_CONFIG_DIR", "RSSH_TIMEOUT", "RSSH_TERM", "RSSH_POLL_INTERVAL", "RSSH_CHUNK_SIZE"):
        monkeypatch.delenv(name, raising=False)


def test_defaults_without_files(tmp_path):
    config = ConfigLoader().load(toml_path=tmp_path / "missing.toml")

    assert config.timeout == 10
    assert config.term == "xterm-256color"
    assert config.chunk_size == 32 * 1024
    assert config.config_dir == Path("~/.rss_ssh").expanduser()


def test_toml_settings(tmp_path):
    settings = tmp_path / "settings.toml"
    settings.write_text('timeout = 3\nterm = "vt100"\nunknown = 1\n')

    config = ConfigLoader().load(toml_path=settings)

    assert config.timeout == 3.0
    assert config.term == "vt100"


def test_env_overrides_toml(tmp_path, monkeypatch):
    settings = tmp_path / "settings.toml"
    settings.write_text("timeout = 3\nchunk_size = 1024\n")
    monkeypatch.setenv("RSSH_TIMEOUT", "7.5")

    config = ConfigLoader().load(toml_path=settings)

    assert config.timeout == 7.5
    assert config.chunk_size == 1024


def test_settings_file_follows_config_dir(tmp_path, monkeypatch):
    config_dir = tmp_path / "cfg"
    config_dir.mkdir()
    (config_dir / "settings.toml").write_text('term = "screen"\n')
    monkeypatch.setenv("RSSH_CONFIG_DIR", str(config_dir))

    config = ConfigLoader().load()

    assert config.config_dir == config_dir
    assert config.term == "screen"


def test_env_ignored_when_disabled(tmp_path, monkeypatch):
    monkeypatch.setenv("RSSH_TERM", "dumb")

    config = ConfigLoader().load(use_env=False, toml_path=tmp_path / "missing.toml")

    assert config.term == "xterm-256color"


def test_invalid_toml(tmp_path):
    settings = tmp_path / "settings.toml"
    settings.write_text("timeout = = 3")

    with pytest.raises(ConfigError):
        ConfigLoader().load(toml_path=settings)


@pytest.mark.parametrize(
    "data",
    [{"chunk_size": 0}, {"poll_interval": -1}, {"timeout": "soon"}],
)
def test_invalid_values(data):
    with pytest.raises(ConfigError):
        RsshConfig.from_dict(data)
