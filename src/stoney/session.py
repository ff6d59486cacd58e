"""
State machine driving one game session.

States:
    IDLE: Player bobs in place, no pipes, score 0. Initial state.
    PLAYING: Pipes spawn and scroll, gravity applies, the judge runs every step.
    GAME_OVER: Pipes and player frozen for a short hold, then back to IDLE.
"""

import logging
import random
from typing import Any, Callable, List, Optional

from .constants import GAME_OVER_HOLD_STEPS, GROUND_W_FALLBACK
from .data_models import (
    Environment, GameState, Player, PlayerMode, SizeLookup, Verdict, no_sizes
)
from .judge import judge
from .obstacles import ObstacleStream
from .physics_core import flap, hitbox, new_player, scroll_ground, set_mode, update_entity

logger = logging.getLogger(__name__)

Listener = Callable[[GameState, GameState, "Session"], None]


class Session:
    """
    Owns the player body, the obstacle stream and the score.

    Everything is mutated from `step` and the input methods only; resets swap in
    brand new Player and ObstacleStream instances.
    """

    VALID_TRANSITIONS = {
        (GameState.IDLE, GameState.PLAYING),
        (GameState.PLAYING, GameState.GAME_OVER),
        (GameState.GAME_OVER, GameState.IDLE),
    }

    def __init__(
        self,
        env: Optional[Environment] = None,
        rng: Optional[random.Random] = None,
        sizes: SizeLookup = no_sizes,
        cues: Any = None,
        game_over_hold: float = GAME_OVER_HOLD_STEPS,
    ) -> None:
        self.env = env or Environment()
        self.rng = rng or random.Random()
        self.sizes = sizes
        self.cues = cues
        self.game_over_hold = game_over_hold

        self._state = GameState.IDLE
        self._listeners: List[Listener] = []
        self.score = 0
        self.final_score = 0
        self.hold = 0.0
        self.ground_offset = 0.0
        self.last_verdict = Verdict()
        self.player: Player
        self.stream: ObstacleStream
        self._build_world(PlayerMode.IDLE)

    @property
    def state(self) -> GameState:
        return self._state

    # ------------------------------------------------------------------ #
    # Listeners
    # ------------------------------------------------------------------ #
    def add_listener(self, callback: Listener) -> None:
        """Add a state change listener."""
        self._listeners.append(callback)

    def remove_listener(self, callback: Listener) -> None:
        if callback in self._listeners:
            self._listeners.remove(callback)

    # ------------------------------------------------------------------ #
    # Input
    # ------------------------------------------------------------------ #
    def press(self) -> None:
        """The single start-or-flap input."""
        if self._state is GameState.IDLE:
            self.start()
        else:
            self.flap()

    def start(self) -> bool:
        if self._state is not GameState.IDLE:
            logger.debug(f"Ignoring start while {self._state.name}")
            return False
        self._build_world(PlayerMode.PLAYING)
        self._transition(GameState.PLAYING)
        self._cue("flap")
        return True

    def flap(self) -> bool:
        if self._state is not GameState.PLAYING or not flap(self.player, self.env):
            logger.debug(f"Ignoring flap while {self._state.name}")
            return False
        self._cue("flap")
        return True

    # ------------------------------------------------------------------ #
    # Simulation
    # ------------------------------------------------------------------ #
    def step(self, dt: float) -> None:
        """Advances the session by one fixed step."""
        if self._state is GameState.IDLE:
            update_entity(self.player, dt, self.env)
            self._scroll_ground(dt)
        elif self._state is GameState.PLAYING:
            self._play_step(dt)
        elif self._state is GameState.GAME_OVER:
            self.hold -= dt
            if self.hold <= 0:
                self._reset_to_idle()

    def _play_step(self, dt: float) -> None:
        # Motion first, so the judge sees where everything ends up.
        self.stream.update(dt)
        update_entity(self.player, dt, self.env)
        self._scroll_ground(dt)

        verdict = judge(
            self.player.rect,
            hitbox(self.player, self.env),
            self.env.play_height,
            self.stream.pairs(),
        )
        self.last_verdict = verdict

        if verdict.points:
            self.score += verdict.points
            self._cue("score")
        if verdict.collided:
            self._game_over()

    def _game_over(self) -> None:
        self.stream.stop()
        set_mode(self.player, PlayerMode.CRASHED, self.env)
        self.final_score = self.score
        logger.info(f"Run over, final score: {self.final_score}")
        self.hold = self.game_over_hold
        self._cue("crash")
        self._transition(GameState.GAME_OVER)
        if self.hold <= 0:
            self._reset_to_idle()

    def _reset_to_idle(self) -> None:
        self._build_world(PlayerMode.IDLE)
        self._transition(GameState.IDLE)

    def _build_world(self, mode: PlayerMode) -> None:
        self.stream = ObstacleStream(self.env, rng=self.rng, sizes=self.sizes)
        self.player = new_player(self.env, mode, self.sizes("player"))
        self.score = 0
        self.last_verdict = Verdict()

    def _scroll_ground(self, dt: float) -> None:
        w = (self.sizes("base") or (GROUND_W_FALLBACK, 0))[0]
        self.ground_offset = scroll_ground(
            self.ground_offset, self.env.ground_speed, dt, w - self.env.width)

    # ------------------------------------------------------------------ #
    # Helpers
    # ------------------------------------------------------------------ #
    def _transition(self, to_state: GameState) -> None:
        if (self._state, to_state) not in self.VALID_TRANSITIONS:
            logger.warning(f"Invalid transition: {self._state.name} -> {to_state.name}")
            return

        old_state = self._state
        self._state = to_state
        logger.info(f"State transition: {old_state.name} -> {to_state.name}")

        for listener in list(self._listeners):
            try:
                listener(old_state, to_state, self)
            except Exception as e:
                logger.error(f"Error in state listener: {e}")

    def _cue(self, name: str) -> None:
        """Fires an audio cue; cue failures never reach the simulation."""
        if self.cues is None:
            return
        try:
            getattr(self.cues, name)()
        except Exception as e:
            logger.warning(f"Audio cue '{name}' failed: {e}")
