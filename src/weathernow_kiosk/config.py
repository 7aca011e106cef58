"""
Configuration management for the WeatherNow kiosk

Loads configuration from YAML file and environment variables.
"""

import os
from dataclasses import dataclass, field
from typing import Optional
from urllib.parse import urlparse

import yaml
from loguru import logger


def _env_bool(value: str) -> bool:
    return value.lower() in ("true", "1", "yes")


@dataclass
class KioskConfig:
    """Kiosk identification"""
    id: str = "kiosk-default"
    log_level: str = "INFO"


@dataclass
class ServerConfig:
    """Announcement server connection settings"""
    url: Optional[str] = "http://localhost:3000"  # None or file:// = no backend
    admin_password: Optional[str] = None  # Needed for dismissals to delete on the server
    request_timeout: float = 10.0  # seconds
    verify_tls: bool = True

    @property
    def has_backend(self) -> bool:
        """False when running without a server (no URL or a local file URL)."""
        if not self.url:
            return False
        return urlparse(self.url).scheme in ("http", "https")


@dataclass
class PollingConfig:
    """Announcement polling settings"""
    interval: float = 5.0  # seconds
    max_backoff: float = 60.0  # seconds


@dataclass
class AudioConfig:
    """Chime and speech playback settings"""
    playback_device: Optional[str] = None  # mpv audio device, None = default
    chime_enabled: bool = True
    chime_sample_rate: int = 22050


@dataclass
class MusicConfig:
    """Background music volume and ducking settings"""
    enabled: bool = False
    playlist: list = field(default_factory=list)  # Audio file paths or URLs
    volume: float = 0.4  # 0.0 - 1.0
    duck_ratio: float = 0.15  # Fraction of current volume while ducked
    duck_ms: int = 600
    unduck_ms: int = 1000
    ramp_steps: int = 20


@dataclass
class TTSConfig:
    """Narration settings"""
    enabled: bool = True
    piper_binary: str = "piper"
    piper_model: str = "/usr/share/piper/voices/en_US-amy-medium.onnx"


@dataclass
class Config:
    """Main configuration container"""
    kiosk: KioskConfig = field(default_factory=KioskConfig)
    server: ServerConfig = field(default_factory=ServerConfig)
    polling: PollingConfig = field(default_factory=PollingConfig)
    audio: AudioConfig = field(default_factory=AudioConfig)
    music: MusicConfig = field(default_factory=MusicConfig)
    tts: TTSConfig = field(default_factory=TTSConfig)


def load_config(config_path: Optional[str] = None) -> Config:
    """
    Load configuration from YAML file.

    Args:
        config_path: Path to config file. If None, uses default locations.

    Returns:
        Config object with loaded settings
    """
    default_paths = [
        "/etc/weathernow-kiosk/config.yaml",
        os.path.expanduser("~/.weathernow-kiosk/config.yaml"),
        "config/kiosk.yaml",
    ]

    paths = [config_path] if config_path else default_paths

    config_data = {}
    for path in paths:
        if os.path.exists(path):
            with open(path, "r") as f:
                config_data = yaml.safe_load(f) or {}
            logger.info(f"Loaded config from: {path}")
            break

    config = Config()

    if "kiosk" in config_data:
        ksk = config_data["kiosk"]
        config.kiosk.id = ksk.get("id", config.kiosk.id)
        config.kiosk.log_level = ksk.get("log_level", config.kiosk.log_level)

    if "server" in config_data:
        srv = config_data["server"]
        # url may be explicitly null to run without a backend
        if "url" in srv:
            config.server.url = srv["url"]
        if "admin_password" in srv:
            config.server.admin_password = srv["admin_password"]
        config.server.request_timeout = srv.get("request_timeout", config.server.request_timeout)
        config.server.verify_tls = srv.get("verify_tls", config.server.verify_tls)

    if "polling" in config_data:
        pol = config_data["polling"]
        config.polling.interval = pol.get("interval", config.polling.interval)
        config.polling.max_backoff = pol.get("max_backoff", config.polling.max_backoff)

    if "audio" in config_data:
        aud = config_data["audio"]
        config.audio.playback_device = aud.get("playback_device", config.audio.playback_device)
        config.audio.chime_enabled = aud.get("chime_enabled", config.audio.chime_enabled)
        config.audio.chime_sample_rate = aud.get("chime_sample_rate", config.audio.chime_sample_rate)

    if "music" in config_data:
        mus = config_data["music"]
        config.music.enabled = mus.get("enabled", config.music.enabled)
        config.music.volume = mus.get("volume", config.music.volume)
        config.music.duck_ratio = mus.get("duck_ratio", config.music.duck_ratio)
        config.music.duck_ms = mus.get("duck_ms", config.music.duck_ms)
        config.music.unduck_ms = mus.get("unduck_ms", config.music.unduck_ms)
        config.music.ramp_steps = mus.get("ramp_steps", config.music.ramp_steps)
        if "playlist" in mus:
            config.music.playlist = list(mus["playlist"] or [])

    if "tts" in config_data:
        tts = config_data["tts"]
        config.tts.enabled = tts.get("enabled", config.tts.enabled)
        config.tts.piper_binary = tts.get("piper_binary", config.tts.piper_binary)
        config.tts.piper_model = tts.get("piper_model", config.tts.piper_model)

    # Environment variable overrides
    if os.environ.get("WEATHERNOW_KIOSK_ID"):
        config.kiosk.id = os.environ["WEATHERNOW_KIOSK_ID"]
    if os.environ.get("WEATHERNOW_LOG_LEVEL"):
        config.kiosk.log_level = os.environ["WEATHERNOW_LOG_LEVEL"]
    if os.environ.get("WEATHERNOW_SERVER_URL"):
        config.server.url = os.environ["WEATHERNOW_SERVER_URL"]
    if os.environ.get("WEATHERNOW_ADMIN_PASSWORD"):
        config.server.admin_password = os.environ["WEATHERNOW_ADMIN_PASSWORD"]
    if os.environ.get("WEATHERNOW_VERIFY_TLS"):
        config.server.verify_tls = _env_bool(os.environ["WEATHERNOW_VERIFY_TLS"])
    if os.environ.get("WEATHERNOW_POLL_INTERVAL"):
        config.polling.interval = float(os.environ["WEATHERNOW_POLL_INTERVAL"])
    if os.environ.get("WEATHERNOW_TTS_ENABLED"):
        config.tts.enabled = _env_bool(os.environ["WEATHERNOW_TTS_ENABLED"])
    if os.environ.get("WEATHERNOW_MUSIC_ENABLED"):
        config.music.enabled = _env_bool(os.environ["WEATHERNOW_MUSIC_ENABLED"])

    return config
