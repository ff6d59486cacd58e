"""
obstacles.py: Procedural pipe pairs: spawning, scrolling and eviction.
"""

import logging
import random
from dataclasses import dataclass, field
from typing import Iterator, List, Optional, Tuple

from .constants import PIPE_H_FALLBACK, PIPE_W_FALLBACK
from .data_models import EntityKind, Environment, Obstacle, SizeLookup, no_sizes
from .physics_core import update_entity

logger = logging.getLogger(__name__)


def smooth_offset(previous: Optional[float], raw: float, alpha: float) -> float:
    """
    Eases a freshly sampled pipe offset toward the previous one so consecutive
    openings cannot jump arbitrarily far apart.
    """
    if previous is None:
        return raw
    return alpha * previous + (1.0 - alpha) * raw


def _ordered(bounds: Tuple[float, float], floor: float = 0.0) -> Tuple[float, float]:
    low, high = max(floor, bounds[0]), max(floor, bounds[1])
    return (low, high) if low <= high else (high, low)


@dataclass
class ObstacleStream:
    """
    Index-aligned upper/lower pipe sequences, oldest first.
    Spawn timing is counted in nominal steps.
    """
    env: Environment
    rng: random.Random = field(default_factory=random.Random)
    sizes: SizeLookup = no_sizes
    upper: List[Obstacle] = field(default_factory=list)
    lower: List[Obstacle] = field(default_factory=list)
    countdown: float = 0.0
    previous_offset: Optional[float] = None
    speed: float = 0.0

    def __post_init__(self):
        self.speed = self.env.pipe_speed
        self.countdown = self._draw_interval()

    def __len__(self) -> int:
        return len(self.upper)

    def pairs(self) -> Iterator[Tuple[Obstacle, Obstacle]]:
        return zip(self.upper, self.lower)

    def pipe_size(self) -> Tuple[float, float]:
        w, h = self.sizes("pipe") or (PIPE_W_FALLBACK, PIPE_H_FALLBACK)
        return float(w), float(h)

    def _draw_interval(self) -> float:
        low, high = _ordered(self.env.spawn_steps, floor=1.0)
        return self.rng.uniform(low, high)

    def _raw_offset(self, pipe_h: float) -> float:
        low, high = -pipe_h + self.env.offset_top, self.env.offset_bottom
        if low >= high:
            return high
        return self.rng.uniform(low, high)

    def has_room(self) -> bool:
        """True when the newest pair has cleared enough of the right edge."""
        if not self.upper:
            return True
        newest = self.upper[-1]
        min_distance = self.env.spacing_factor * max(1.0, newest.w)
        return self.env.width - newest.rect.right > min_distance

    def spawn(self, x: Optional[float] = None) -> Tuple[Obstacle, Obstacle]:
        """Appends a new pair just off the right edge and returns it."""
        w, h = self.pipe_size()
        if x is None:
            x = self.env.width + self.env.spawn_margin

        offset = smooth_offset(self.previous_offset, self._raw_offset(h), self.env.smoothing)
        self.previous_offset = offset
        gap = self.rng.uniform(*_ordered(self.env.gap_range))

        up = Obstacle(EntityKind.UPPER_PIPE, x=x, y=offset, w=w, h=h,
                      vel_x=self.speed, gap=gap)
        low = Obstacle(EntityKind.LOWER_PIPE, x=x, y=offset + h + gap, w=w, h=h,
                       vel_x=self.speed, gap=gap)
        self.upper.append(up)
        self.lower.append(low)
        logger.debug(f"Spawned pair at x={x:.1f} offset={offset:.1f} gap={gap:.1f}")
        return up, low

    def update(self, dt: float):
        # 1. Spawn (blocked spawns retry next step, the countdown is kept)
        self.countdown -= dt
        if self.countdown <= 0 and self.has_room():
            self.spawn()
            self.countdown = self._draw_interval()

        # 2. Move
        for pipe in self.upper + self.lower:
            update_entity(pipe, dt, self.env)

        # 3. Evict
        margin = self.env.evict_margin
        keep = [i for i, up in enumerate(self.upper) if up.rect.right >= -margin]
        if len(keep) != len(self.upper):
            self.upper = [self.upper[i] for i in keep]
            self.lower = [self.lower[i] for i in keep]

    def stop(self):
        """Freezes every pipe in place."""
        self.speed = 0.0
        for pipe in self.upper + self.lower:
            pipe.vel_x = 0.0
