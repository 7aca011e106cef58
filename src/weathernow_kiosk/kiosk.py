"""
Main Kiosk Class for WeatherNow

Wires the announcement components together:
- Server polling
- Banner/popup delivery with auto-dismiss
- Chimes and narration
- Background music ducking
"""

import asyncio
from typing import Optional

from loguru import logger

from .announcements.delivery import DeliveryPipeline
from .announcements.display import AnnouncementDisplay, LogDisplay
from .announcements.narration import Narrator
from .announcements.poller import ClientPoller
from .audio.chime import ChimePlayer
from .audio.ducking import DuckCoordinator
from .audio.playback import AudioPlayback, MusicPlayer
from .audio.tts import PiperSpeechEngine
from .config import Config
from .network.messages_client import MessagesClient


class Kiosk:
    """
    Kiosk controller.

    Owns every long-lived component and tears them down in reverse order.
    """

    def __init__(self, config: Config, display: Optional[AnnouncementDisplay] = None):
        """
        Initialize kiosk with configuration.

        Args:
            config: Configuration object
            display: Display surface; defaults to logging announcements
        """
        self.config = config
        self._running = False
        self._stop_event: Optional[asyncio.Event] = None

        self.display = display or LogDisplay()
        self._init_components()

    def _init_components(self):
        """Initialize audio, network and announcement components"""
        cfg = self.config

        self.audio_playback = AudioPlayback(device=cfg.audio.playback_device)
        self.chime = ChimePlayer(
            self.audio_playback,
            sample_rate=cfg.audio.chime_sample_rate,
            enabled=cfg.audio.chime_enabled,
        )

        # Background music (optional); the ducker tolerates its absence
        self.music: Optional[MusicPlayer] = None
        if cfg.music.enabled:
            self.music = MusicPlayer(
                cfg.music.playlist,
                device=cfg.audio.playback_device,
                volume=cfg.music.volume,
            )
        self.ducker = DuckCoordinator(
            self.music,
            duck_ratio=cfg.music.duck_ratio,
            duck_ms=cfg.music.duck_ms,
            unduck_ms=cfg.music.unduck_ms,
            steps=cfg.music.ramp_steps,
        )

        # Narration and chimes stop independently
        self.speech_playback = AudioPlayback(device=cfg.audio.playback_device)
        self.speech: Optional[PiperSpeechEngine] = None
        if cfg.tts.enabled:
            self.speech = PiperSpeechEngine(
                self.speech_playback,
                model_path=cfg.tts.piper_model,
                binary=cfg.tts.piper_binary,
            )
        self.narrator = Narrator(self.speech, self.ducker)

        self.client: Optional[MessagesClient] = None
        if cfg.server.url:
            self.client = MessagesClient(
                cfg.server.url,
                admin_password=cfg.server.admin_password,
                timeout=cfg.server.request_timeout,
                verify_tls=cfg.server.verify_tls,
            )

        self.pipeline = DeliveryPipeline(
            self.display,
            client=self.client if cfg.server.has_backend else None,
            chime=self.chime,
            narrator=self.narrator,
        )

        self.poller: Optional[ClientPoller] = None
        if self.client is not None:
            self.poller = ClientPoller(
                self.client,
                self.pipeline,
                interval=cfg.polling.interval,
                max_backoff=cfg.polling.max_backoff,
                has_backend=cfg.server.has_backend,
            )

    @property
    def is_running(self) -> bool:
        return self._running

    async def start(self):
        """Start the kiosk and run until stop() is called"""
        logger.info(f"Starting kiosk {self.config.kiosk.id}...")
        self._running = True
        self._stop_event = asyncio.Event()

        if self.music is not None:
            self.music.start()

        if self.poller is not None:
            self.poller.start()
        else:
            logger.warning("No announcement server configured, polling disabled")

        await self._stop_event.wait()

    async def stop(self):
        """Stop the kiosk"""
        if not self._running:
            return
        logger.info("Stopping kiosk...")
        self._running = False

        if self.poller is not None:
            await self.poller.stop()
        await self.pipeline.stop()
        await self.ducker.close()

        if self.music is not None:
            self.music.stop()
        self.audio_playback.stop()
        self.speech_playback.stop()

        if self.client is not None:
            await self.client.close()

        if self._stop_event is not None:
            self._stop_event.set()
        logger.info("Kiosk stopped")
