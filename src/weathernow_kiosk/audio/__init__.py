"""Audio output modules: chimes, speech, background music ducking"""
from .chime import ChimePlayer
from .ducking import AudioDucker, DuckCoordinator
from .playback import AudioPlayback, MusicPlayer

__all__ = ["ChimePlayer", "AudioDucker", "DuckCoordinator", "AudioPlayback", "MusicPlayer"]
