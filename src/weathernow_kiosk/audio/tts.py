"""
Piper speech engine - Text to Speech for narrated announcements

Runs the piper CLI as a subprocess to synthesize a WAV, then plays it
through AudioPlayback. Speaking rate maps to piper's ``--length_scale``;
piper has no pitch control, so pitch is accepted and ignored.
"""

import asyncio
import os
import shutil
import tempfile
from typing import Optional

from loguru import logger

from .playback import AudioPlayback


class SpeechError(Exception):
    """Synthesis or playback of an utterance failed."""


class PiperSpeechEngine:
    """SpeechEngine backed by the piper CLI."""

    def __init__(self, playback: AudioPlayback, model_path: str, binary: str = "piper"):
        self.playback = playback
        self.model_path = model_path
        self.binary = binary
        self._process: Optional[asyncio.subprocess.Process] = None
        self.available = shutil.which(binary) is not None
        if not self.available:
            logger.warning(f"⚠️  Piper TTS not found ('{binary}'). Narration disabled.")
            logger.info("💡 Installation: pip install piper-tts")

    async def _synthesize(self, text: str, rate: float) -> bytes:
        with tempfile.NamedTemporaryFile(suffix=".wav", delete=False) as tmp:
            tmp_path = tmp.name

        try:
            self._process = await asyncio.create_subprocess_exec(
                self.binary,
                "--model", self.model_path,
                "--length_scale", f"{1.0 / rate:.3f}",
                "--output_file", tmp_path,
                stdin=asyncio.subprocess.PIPE,
                stdout=asyncio.subprocess.PIPE,
                stderr=asyncio.subprocess.PIPE,
            )
            _stdout, stderr = await self._process.communicate(input=text.encode("utf-8"))
            if self._process.returncode != 0:
                raise SpeechError(f"Piper failed: {stderr.decode(errors='replace').strip()}")

            with open(tmp_path, "rb") as f:
                return f.read()
        finally:
            self._process = None
            if os.path.exists(tmp_path):
                os.unlink(tmp_path)

    async def speak(self, text: str, rate: float = 1.0, pitch: float = 1.0) -> None:
        """
        Speak text and return once playback has finished.

        Raises:
            SpeechError: if piper is missing or fails
        """
        if not self.available:
            raise SpeechError("Piper not available")

        wav_data = await self._synthesize(text, rate)
        logger.debug(f"🗣️ Speaking {len(text)} chars (rate={rate}, pitch={pitch} ignored)")
        try:
            await asyncio.to_thread(self.playback.play_wav, wav_data)
        except asyncio.CancelledError:
            self.playback.stop()
            raise

    def stop(self) -> None:
        """Abort synthesis or playback in progress."""
        if self._process is not None and self._process.returncode is None:
            self._process.kill()
        self.playback.stop()
