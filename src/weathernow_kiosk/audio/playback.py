"""
Audio Playback Module for the WeatherNow kiosk

Handles speaker output using MPV for robust playback across
different audio backends (ALSA, PulseAudio, PipeWire):
- one-shot WAV playback for chimes and narration
- looping background music with a volume control for ducking
"""

import os
import tempfile
import threading
from typing import List, Optional, Set

from loguru import logger

try:
    import mpv
    MPV_AVAILABLE = True
except (ImportError, OSError):
    # python-mpv raises OSError when libmpv itself is missing
    mpv = None
    MPV_AVAILABLE = False


def _create_player(device: Optional[str], volume: int, **options) -> Optional["mpv.MPV"]:
    """Create an audio-only MPV player instance"""
    if not MPV_AVAILABLE:
        return None

    try:
        player = mpv.MPV(
            video=False,
            terminal=False,
            input_default_bindings=False,
            input_vo_keyboard=False,
            **options,
        )
        if device:
            player.audio_device = device
        player.volume = volume
        return player
    except Exception as e:
        logger.warning(f"Failed to create MPV player: {e}")
        return None


class AudioPlayback:
    """
    Plays WAV clips through the speaker using MPV.

    ``play_wav`` blocks until the clip ends, so callers on the event loop
    run it in a worker thread. Overlapping clips each get their own player;
    ``stop`` may be called from any thread and ends all of them.
    """

    def __init__(self, device: Optional[str] = None, volume: int = 100):
        """
        Args:
            device: Audio device name (e.g., "alsa/plughw:1,0") or None for default
            volume: Volume level 0-100
        """
        self.device = device
        self.volume = volume
        self._players: Set["mpv.MPV"] = set()
        self._lock = threading.Lock()

    @property
    def available(self) -> bool:
        return MPV_AVAILABLE

    def play_wav(self, wav_data: bytes) -> bool:
        """
        Play WAV audio data.

        Args:
            wav_data: WAV file data (with header)

        Returns:
            True if played to the end
        """
        if not MPV_AVAILABLE:
            logger.debug("MPV not available, skipping playback")
            return False

        with tempfile.NamedTemporaryFile(suffix=".wav", delete=False) as tmp_file:
            tmp_file.write(wav_data)
            tmp_path = tmp_file.name

        player = _create_player(self.device, self.volume)
        if player is None:
            os.unlink(tmp_path)
            return False

        with self._lock:
            self._players.add(player)
        try:
            player.play(tmp_path)
            player.wait_for_playback()
            return True
        except Exception as e:
            logger.warning(f"Playback error: {e}")
            return False
        finally:
            with self._lock:
                self._players.discard(player)
            player.terminate()
            os.unlink(tmp_path)

    def stop(self) -> None:
        """Stop every clip still playing"""
        with self._lock:
            players = list(self._players)
        for player in players:
            try:
                player.stop()
            except Exception as e:
                logger.debug(f"Stopping playback failed: {e}")


class MusicPlayer:
    """
    Background music loop.

    Only the volume matters to the announcement pipeline; the player exposes
    it as a 0.0-1.0 float so the ducking coordinator can ramp it.
    """

    def __init__(self, playlist: List[str], device: Optional[str] = None, volume: float = 0.4):
        self.playlist = list(playlist)
        self.device = device
        self._volume = max(0.0, min(1.0, volume))
        self._player: Optional["mpv.MPV"] = None

    @property
    def volume(self) -> float:
        return self._volume

    @volume.setter
    def volume(self, value: float) -> None:
        self._volume = max(0.0, min(1.0, value))
        if self._player is not None:
            self._player.volume = round(self._volume * 100)

    def start(self) -> bool:
        """Start looping the playlist"""
        if not self.playlist:
            logger.info("🎵 No music playlist configured")
            return False

        self._player = _create_player(self.device, round(self._volume * 100), loop_playlist="inf")
        if self._player is None:
            logger.warning("🎵 Background music unavailable (mpv missing)")
            return False

        for path in self.playlist:
            self._player.playlist_append(path)
        self._player.playlist_pos = 0
        logger.info(f"🎵 Playing {len(self.playlist)} track(s)")
        return True

    def stop(self) -> None:
        if self._player is not None:
            self._player.terminate()
            self._player = None
