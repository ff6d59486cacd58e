"""
physics_core.py: Deterministic kinematics for the player body and the scrolling world.

Entities are plain records (see data_models); behaviour lives in the free
functions below and is selected per EntityKind through UPDATERS.
"""

import math
from typing import Callable, Dict, Optional, Tuple, Union

from .constants import (
    NOMINAL_STEP, PLAYER_H_FALLBACK, PLAYER_W_FALLBACK, PLAYER_X_RATIO, PLAYER_Y_RATIO
)
from .data_models import EntityKind, Environment, Obstacle, Player, PlayerMode, Rect


def clamp(value: float, low: float, high: float) -> float:
    return max(low, min(value, high))


def ease(current: float, target: float, rate: float, dt: float) -> float:
    """Exponential smoothing toward `target`, frame-rate independent."""
    return current + (target - current) * (1.0 - math.exp(-rate * dt))


def apply_gravity_and_movement(y: float, velocity: float, env: Environment,
                               dt: float) -> Tuple[float, float]:
    """
    Calculates new position and velocity after one step (semi-implicit Euler).
    """
    velocity += env.gravity * dt
    velocity = min(velocity, env.terminal_velocity)
    y += velocity * dt
    return y, velocity


def target_tilt(velocity: float, env: Environment) -> float:
    """Maps velocity linearly from flap impulse (nose up) to terminal fall (nose down)."""
    span = max(1e-6, env.terminal_velocity - env.flap_impulse)
    t = clamp((velocity - env.flap_impulse) / span, 0.0, 1.0)
    return env.tilt_up + t * (env.tilt_down - env.tilt_up)


def idle_baseline(env: Environment) -> float:
    return env.height * PLAYER_Y_RATIO


def new_player(env: Environment, mode: PlayerMode = PlayerMode.IDLE,
               size: Optional[Tuple[float, float]] = None) -> Player:
    """Builds a fresh player body in `mode`; unknown sprite size uses the fallback."""
    w, h = size or (PLAYER_W_FALLBACK, PLAYER_H_FALLBACK)
    player = Player(w=float(w), h=float(h))
    set_mode(player, mode, env)
    return player


def set_mode(player: Player, mode: PlayerMode, env: Environment):
    player.mode = mode
    if mode is PlayerMode.IDLE:
        player.x = env.width * PLAYER_X_RATIO
        player.y = idle_baseline(env)
        player.vel_y = 0.0
        player.rot = 0.0
        player.idle_time = 0.0
    elif mode is PlayerMode.PLAYING:
        player.x = env.width * PLAYER_X_RATIO
        player.y = idle_baseline(env)
        player.vel_y = env.flap_impulse
        player.rot = 0.0
    elif mode is PlayerMode.CRASHED:
        player.vel_y = 0.0


def flap(player: Player, env: Environment) -> bool:
    """Resets vertical velocity to the flap impulse. Returns False when ignored."""
    if player.mode is not PlayerMode.PLAYING:
        return False
    player.vel_y = env.flap_impulse
    return True


def update_player(player: Player, dt: float, env: Environment):
    if player.mode is PlayerMode.IDLE:
        player.idle_time += dt
        seconds = player.idle_time * NOMINAL_STEP
        player.y = idle_baseline(env) + env.bob_amplitude * math.sin(
            2.0 * math.pi * env.bob_frequency * seconds)
        player.rot = ease(player.rot, 0.0, env.tilt_rate, dt)
    elif player.mode is PlayerMode.PLAYING:
        player.y, player.vel_y = apply_gravity_and_movement(
            player.y, player.vel_y, env, dt)
        player.rot = ease(player.rot, target_tilt(player.vel_y, env), env.tilt_rate, dt)
    else:
        return

    # Ground contact is judged elsewhere; this only keeps y inside the play area.
    bottom = env.play_height - player.h
    if player.y <= 0.0:
        player.y = 0.0
        player.vel_y = max(player.vel_y, 0.0)
    elif player.y > bottom:
        player.y = bottom


def hitbox(player: Player, env: Environment) -> Rect:
    """Collision rectangle, smaller than the body by the fairness padding."""
    return player.rect.shrink(env.hitbox_padding)


def advance_obstacle(obstacle: Obstacle, dt: float, env: Environment):
    obstacle.x += obstacle.vel_x * dt


def scroll_ground(offset: float, speed: float, dt: float, span: float) -> float:
    """Advances the ground scroll offset, wrapping within `span` (clamped to >= 1)."""
    span = max(1.0, span)
    return (offset + speed * dt) % span


Entity = Union[Player, Obstacle]

UPDATERS: Dict[EntityKind, Callable[[Entity, float, Environment], None]] = {
    EntityKind.PLAYER: update_player,
    EntityKind.UPPER_PIPE: advance_obstacle,
    EntityKind.LOWER_PIPE: advance_obstacle,
}


def update_entity(entity: Entity, dt: float, env: Environment):
    UPDATERS[entity.kind](entity, dt, env)
