"""
data_models.py: Data structures for the simulation state.
"""

from dataclasses import dataclass, field
from enum import Enum, auto
from typing import Callable, Optional, Tuple

from . import constants as c


class EntityKind(Enum):
    """Closed set of things living in the world."""
    PLAYER = auto()
    UPPER_PIPE = auto()
    LOWER_PIPE = auto()
    GROUND = auto()


class PlayerMode(Enum):
    IDLE = auto()
    PLAYING = auto()
    CRASHED = auto()


class GameState(Enum):
    IDLE = auto()
    PLAYING = auto()
    GAME_OVER = auto()


@dataclass(frozen=True)
class Rect:
    x: float
    y: float
    w: float
    h: float

    @property
    def right(self) -> float:
        return self.x + self.w

    @property
    def bottom(self) -> float:
        return self.y + self.h

    def shrink(self, pad: float) -> "Rect":
        """Returns a copy reduced by `pad` on every side."""
        return Rect(self.x + pad, self.y + pad,
                    max(0.0, self.w - 2 * pad), max(0.0, self.h - 2 * pad))


@dataclass(frozen=True)
class Environment:
    """
    Immutable simulation inputs: world metrics and tuning.
    Shared by reference between every update function.
    """
    width: float = c.WORLD_WIDTH
    height: float = c.WORLD_HEIGHT
    play_ratio: float = c.PLAY_AREA_RATIO

    gravity: float = c.GRAVITY
    flap_impulse: float = c.FLAP_IMPULSE
    terminal_velocity: float = c.TERMINAL_VELOCITY
    tilt_up: float = c.TILT_UP
    tilt_down: float = c.TILT_DOWN
    tilt_rate: float = c.TILT_RATE
    bob_amplitude: float = c.IDLE_BOB_AMPLITUDE
    bob_frequency: float = c.IDLE_BOB_FREQUENCY
    hitbox_padding: float = c.HITBOX_PADDING

    pipe_speed: float = c.PIPE_SPEED
    spawn_margin: float = c.PIPE_SPAWN_MARGIN
    evict_margin: float = c.PIPE_EVICT_MARGIN
    spacing_factor: float = c.PIPE_SPACING_FACTOR
    offset_top: float = c.PIPE_OFFSET_TOP
    offset_bottom: float = c.PIPE_OFFSET_BOTTOM
    gap_range: Tuple[float, float] = c.PIPE_GAP_RANGE
    spawn_steps: Tuple[float, float] = c.PIPE_SPAWN_STEPS
    smoothing: float = c.PIPE_SMOOTHING

    ground_speed: float = c.GROUND_SPEED

    @property
    def play_height(self) -> float:
        """Ground line: everything below is the non-playable band."""
        return self.height * self.play_ratio


@dataclass
class Player:
    """The player body. Only `y` moves; the world scrolls past a fixed `x`."""
    x: float = 0.0
    y: float = 0.0
    w: float = c.PLAYER_W_FALLBACK
    h: float = c.PLAYER_H_FALLBACK
    vel_y: float = 0.0
    rot: float = 0.0
    mode: PlayerMode = PlayerMode.IDLE
    idle_time: float = 0.0
    kind: EntityKind = field(default=EntityKind.PLAYER, init=False)

    @property
    def rect(self) -> Rect:
        return Rect(self.x, self.y, self.w, self.h)


@dataclass
class Obstacle:
    """One member of an upper/lower pipe pair."""
    kind: EntityKind
    x: float
    y: float
    w: float = c.PIPE_W_FALLBACK
    h: float = c.PIPE_H_FALLBACK
    vel_x: float = c.PIPE_SPEED
    gap: float = 0.0
    scored: bool = False  # meaningful on the upper member only

    @property
    def rect(self) -> Rect:
        return Rect(self.x, self.y, self.w, self.h)


@dataclass(frozen=True)
class Verdict:
    """Outcome of judging one simulation step."""
    points: int = 0
    collided: bool = False

    @property
    def scored(self) -> bool:
        return self.points > 0


@dataclass(frozen=True)
class Identity:
    """A leaderboard user."""
    id: str
    username: str = "Player"
    photo_url: str = ""


@dataclass(frozen=True)
class LeaderboardEntry:
    identity: Identity
    score: int

    def to_message(self) -> dict:
        """Prepares a minimal dictionary for network serialization."""
        return {
            "id": self.identity.id,
            "username": self.identity.username,
            "photo_url": self.identity.photo_url,
            "score": self.score,
        }

    @classmethod
    def from_message(cls, data: dict) -> "LeaderboardEntry":
        identity = Identity(
            id=str(data["id"]),
            username=data.get("username") or "Player",
            photo_url=data.get("photo_url") or "",
        )
        return cls(identity=identity, score=int(data["score"]))


SizeLookup = Callable[[str], Optional[Tuple[float, float]]]


def no_sizes(name: str) -> Optional[Tuple[float, float]]:
    """Size lookup used when no asset provider is attached."""
    return None
