"""
assets.py: Background image loading. Nothing here ever blocks the simulation;
until an image is in, its size reads as unavailable and fallbacks are used.
"""

import logging
import threading
from pathlib import Path
from typing import Dict, Optional, Tuple

import pygame

logger = logging.getLogger(__name__)

SPRITES = {
    "background": "sprites/background-day.png",
    "player": "sprites/yellowbird-midflap.png",
    "pipe": "sprites/pipe-green.png",
    "base": "sprites/base.png",
    "message": "sprites/message.png",
    "game_over": "sprites/gameover.png",
}


class AssetProvider:
    def __init__(self, root: Path, sprites: Optional[Dict[str, str]] = None):
        self.root = Path(root)
        self.sprites = sprites or SPRITES
        self._images: Dict[str, pygame.Surface] = {}
        self._lock = threading.Lock()
        self.loader_thread = threading.Thread(target=self._load_all, daemon=True)

    def start(self):
        """Starts loading every sprite on a daemon thread."""
        self.loader_thread.start()

    def _load_all(self):
        for name, rel in self.sprites.items():
            path = self.root / rel
            try:
                image = pygame.image.load(str(path))
            except (pygame.error, OSError) as e:
                logger.warning(f"Could not load {name} from {path}: {e}")
                continue
            with self._lock:
                self._images[name] = image
        logger.info(f"Loaded {len(self._images)}/{len(self.sprites)} sprites from {self.root}")

    def image(self, name: str) -> Optional[pygame.Surface]:
        with self._lock:
            return self._images.get(name)

    def size(self, name: str) -> Optional[Tuple[float, float]]:
        """(width, height) once loaded, None before."""
        image = self.image(name)
        if image is None:
            return None
        w, h = image.get_size()
        return (float(w), float(h)) if w and h else None
