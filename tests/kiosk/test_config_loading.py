"""
Tests for kiosk config loading from YAML and environment variables
"""

import pytest
import yaml

from weathernow_kiosk.config import Config, ServerConfig, load_config

ENV_VARS = [
    "WEATHERNOW_KIOSK_ID",
    "WEATHERNOW_LOG_LEVEL",
    "WEATHERNOW_SERVER_URL",
    "WEATHERNOW_ADMIN_PASSWORD",
    "WEATHERNOW_VERIFY_TLS",
    "WEATHERNOW_POLL_INTERVAL",
    "WEATHERNOW_TTS_ENABLED",
    "WEATHERNOW_MUSIC_ENABLED",
]


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    for name in ENV_VARS:
        monkeypatch.delenv(name, raising=False)


def _write_config(tmp_path, data):
    path = tmp_path / "kiosk.yaml"
    path.write_text(yaml.dump(data))
    return str(path)


class TestDefaults:

    @pytest.mark.unit
    def test_missing_file_gives_defaults(self, tmp_path):
        config = load_config(str(tmp_path / "missing.yaml"))
        assert isinstance(config, Config)
        assert config.server.url == "http://localhost:3000"
        assert config.polling.interval == 5.0
        assert config.music.duck_ratio == 0.15
        assert config.music.duck_ms == 600
        assert config.music.unduck_ms == 1000
        assert config.tts.enabled is True

    @pytest.mark.unit
    def test_empty_file(self, tmp_path):
        path = tmp_path / "kiosk.yaml"
        path.write_text("")
        assert load_config(str(path)).kiosk.id == "kiosk-default"


class TestYaml:

    @pytest.mark.unit
    def test_sections_are_applied(self, tmp_path):
        path = _write_config(tmp_path, {
            "kiosk": {"id": "lobby"},
            "server": {"url": "http://10.0.0.5:3000", "admin_password": "s3cret"},
            "polling": {"interval": 2, "max_backoff": 30},
            "music": {"enabled": True, "playlist": ["/music/a.mp3"], "duck_ratio": 0.2},
            "tts": {"enabled": False},
        })

        config = load_config(path)

        assert config.kiosk.id == "lobby"
        assert config.server.url == "http://10.0.0.5:3000"
        assert config.server.admin_password == "s3cret"
        assert config.polling.interval == 2
        assert config.polling.max_backoff == 30
        assert config.music.enabled is True
        assert config.music.playlist == ["/music/a.mp3"]
        assert config.music.duck_ratio == 0.2
        assert config.tts.enabled is False

    @pytest.mark.unit
    def test_null_url_disables_backend(self, tmp_path):
        config = load_config(_write_config(tmp_path, {"server": {"url": None}}))
        assert config.server.url is None
        assert config.server.has_backend is False


class TestEnvOverrides:

    @pytest.mark.unit
    def test_env_wins_over_yaml(self, tmp_path, monkeypatch):
        path = _write_config(tmp_path, {"server": {"url": "http://yaml:3000"}})
        monkeypatch.setenv("WEATHERNOW_SERVER_URL", "http://env:3000")
        monkeypatch.setenv("WEATHERNOW_POLL_INTERVAL", "1.5")
        monkeypatch.setenv("WEATHERNOW_TTS_ENABLED", "false")
        monkeypatch.setenv("WEATHERNOW_MUSIC_ENABLED", "yes")

        config = load_config(path)

        assert config.server.url == "http://env:3000"
        assert config.polling.interval == 1.5
        assert config.tts.enabled is False
        assert config.music.enabled is True


class TestHasBackend:

    @pytest.mark.unit
    @pytest.mark.parametrize("url,expected", [
        ("http://localhost:3000", True),
        ("https://weather.example.com", True),
        ("file:///srv/kiosk/index.html", False),
        ("", False),
        (None, False),
    ])
    def test_has_backend(self, url, expected):
        assert ServerConfig(url=url).has_backend is expected
