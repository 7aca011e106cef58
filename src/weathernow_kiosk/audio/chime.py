"""
Alert chimes

Synthesizes a short tone sequence per announcement type so info, warning
and emergency are audibly distinct. No audio files needed.

Each tone ramps linearly from 0 to peak gain over 10ms, then decays
exponentially to near silence by the end of its duration. The oscillator
keeps running 50ms past that (at the decayed level) before it stops.
"""

import asyncio
import io
import wave
from dataclasses import dataclass
from typing import Dict, List, Optional

import numpy as np
from loguru import logger

from ..models import AnnouncementType
from .playback import AudioPlayback

PEAK_GAIN = 0.25
FLOOR_GAIN = 0.001
ATTACK_SECONDS = 0.01
RELEASE_TAIL_SECONDS = 0.05


@dataclass(frozen=True)
class Tone:
    frequency: float  # Hz
    duration: float  # seconds until the gain reaches FLOOR_GAIN
    offset: float  # seconds from the start of the chime
    wave: str  # "sine", "triangle" or "sawtooth"


CHIME_PATTERNS: Dict[AnnouncementType, List[Tone]] = {
    AnnouncementType.INFO: [
        Tone(880, 0.12, 0.0, "sine"),
        Tone(1047, 0.18, 0.14, "sine"),
    ],
    AnnouncementType.WARNING: [
        Tone(440, 0.15, 0.0, "triangle"),
        Tone(554, 0.15, 0.18, "triangle"),
        Tone(440, 0.25, 0.36, "triangle"),
    ],
    AnnouncementType.EMERGENCY: [
        Tone(900, 0.09, 0.0, "sawtooth"),
        Tone(1350, 0.09, 0.11, "sawtooth"),
        Tone(900, 0.09, 0.22, "sawtooth"),
        Tone(1350, 0.09, 0.33, "sawtooth"),
        Tone(900, 0.09, 0.44, "sawtooth"),
        Tone(1350, 0.22, 0.55, "sawtooth"),
    ],
}


def _coerce_type(ann_type) -> AnnouncementType:
    try:
        return AnnouncementType(ann_type)
    except ValueError:
        return AnnouncementType.INFO


def pattern_for(ann_type) -> List[Tone]:
    """Tone sequence for a type; unknown types get the info chime."""
    return CHIME_PATTERNS[_coerce_type(ann_type)]


def _oscillator(wave_type: str, frequency: float, t: np.ndarray) -> np.ndarray:
    phase = (t * frequency) % 1.0
    if wave_type == "triangle":
        return 4.0 * np.abs(phase - 0.5) - 1.0
    if wave_type == "sawtooth":
        return 2.0 * phase - 1.0
    return np.sin(2.0 * np.pi * frequency * t)


def _envelope(tone: Tone, t: np.ndarray) -> np.ndarray:
    env = np.empty_like(t)
    attack = t < ATTACK_SECONDS
    env[attack] = PEAK_GAIN * t[attack] / ATTACK_SECONDS

    decay = ~attack
    decay_time = max(tone.duration - ATTACK_SECONDS, 1e-6)
    progress = np.minimum((t[decay] - ATTACK_SECONDS) / decay_time, 1.0)
    env[decay] = PEAK_GAIN * (FLOOR_GAIN / PEAK_GAIN) ** progress
    return env


def render_pattern(tones: List[Tone], sample_rate: int = 22050) -> np.ndarray:
    """Mix a tone sequence into a float32 buffer in the range [-1, 1]."""
    total = max(t.offset + t.duration + RELEASE_TAIL_SECONDS for t in tones)
    buffer = np.zeros(int(np.ceil(total * sample_rate)), dtype=np.float32)

    for tone in tones:
        start = int(round(tone.offset * sample_rate))
        length = int(round((tone.duration + RELEASE_TAIL_SECONDS) * sample_rate))
        t = np.arange(length, dtype=np.float64) / sample_rate
        samples = _oscillator(tone.wave, tone.frequency, t) * _envelope(tone, t)
        end = min(start + length, len(buffer))
        buffer[start:end] += samples[: end - start].astype(np.float32)

    return np.clip(buffer, -1.0, 1.0)


def to_wav_bytes(samples: np.ndarray, sample_rate: int) -> bytes:
    """Encode float samples as 16-bit mono WAV."""
    pcm = (samples * 32767).astype("<i2")
    out = io.BytesIO()
    with wave.open(out, "wb") as wav_file:
        wav_file.setnchannels(1)
        wav_file.setsampwidth(2)
        wav_file.setframerate(sample_rate)
        wav_file.writeframes(pcm.tobytes())
    return out.getvalue()


class ChimePlayer:
    """Plays the chime for an announcement type without blocking the loop."""

    def __init__(self, playback: Optional[AudioPlayback], sample_rate: int = 22050, enabled: bool = True):
        self._playback = playback
        self.sample_rate = sample_rate
        self.enabled = enabled
        self._cache: Dict[AnnouncementType, bytes] = {}

    def wav_for(self, ann_type) -> bytes:
        key = _coerce_type(ann_type)
        if key not in self._cache:
            self._cache[key] = to_wav_bytes(render_pattern(pattern_for(key), self.sample_rate), self.sample_rate)
        return self._cache[key]

    async def play(self, ann_type) -> None:
        """Play a chime. Failures are logged, never raised."""
        if not self.enabled or self._playback is None:
            return
        try:
            wav_data = self.wav_for(ann_type)
            await asyncio.to_thread(self._playback.play_wav, wav_data)
        except asyncio.CancelledError:
            self._playback.stop()
            raise
        except Exception as e:
            logger.warning(f"🔔 Chime failed: {e}")
