"""
audio.py: Fire-and-forget sound cues via pygame.mixer.
"""

import logging
from pathlib import Path
from typing import Optional

import pygame

logger = logging.getLogger(__name__)


class AudioCues:
    """Flap, score and crash cues. Missing files or a missing mixer mean silence."""

    def __init__(self, root: Path, enabled: bool = True):
        self.root = Path(root)
        self.enabled = enabled

        if enabled:
            try:
                pygame.mixer.init(frequency=44100, size=-16, channels=2, buffer=512)
            except pygame.error as e:
                logger.warning(f"Audio unavailable: {e}")
                self.enabled = False

        self.snd_wing = self._load_sound("wing.ogg")
        self.snd_point = self._load_sound("point.ogg")
        self.snd_hit = self._load_sound("hit.ogg")

    def _load_sound(self, filename: str) -> Optional["pygame.mixer.Sound"]:
        """Load a sound file, return None if file missing or invalid."""
        if not self.enabled:
            return None
        path = self.root / "audio" / filename
        if not path.exists():
            return None
        try:
            sound = pygame.mixer.Sound(str(path))
            sound.set_volume(0.7)
            return sound
        except pygame.error as e:
            logger.warning(f"Could not load {path}: {e}")
            return None

    def _play(self, snd) -> None:
        if not self.enabled or snd is None:
            return
        try:
            snd.play()
        except pygame.error as e:
            logger.debug(f"Sound playback failed: {e}")

    def flap(self) -> None:
        self._play(self.snd_wing)

    def score(self) -> None:
        self._play(self.snd_point)

    def crash(self) -> None:
        self._play(self.snd_hit)
