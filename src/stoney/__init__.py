"""
Stoney: a tap-to-flap side scroller with a fixed-step simulation core.
"""

from .clock import FixedStepClock
from .data_models import Environment, GameState, PlayerMode
from .obstacles import ObstacleStream
from .session import Session

__version__ = "1.0.0"

__all__ = ["Environment", "FixedStepClock", "GameState", "ObstacleStream", "PlayerMode", "Session"]
