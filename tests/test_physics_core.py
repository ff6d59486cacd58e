import math

import pytest

from stoney.constants import PLAYER_H_FALLBACK, PLAYER_W_FALLBACK
from stoney.data_models import EntityKind, Obstacle, Player, PlayerMode, Rect
from stoney.physics_core import (
    flap, hitbox, idle_baseline, new_player, scroll_ground, set_mode, target_tilt,
    update_entity, update_player,
)


def test_single_playing_step(env):
    player = Player(x=57.6, y=100.0, w=34.0, h=20.0, vel_y=-6.0, mode=PlayerMode.PLAYING)
    update_player(player, 1.0, env)
    assert player.vel_y == pytest.approx(-5.62)
    assert player.y == pytest.approx(94.38)


def test_idle_and_playing_modes_place_the_body(env):
    player = new_player(env, PlayerMode.IDLE)
    assert player.x == pytest.approx(env.width * 0.2)
    assert player.y == pytest.approx(idle_baseline(env))
    assert player.vel_y == 0.0

    set_mode(player, PlayerMode.PLAYING, env)
    assert player.x == pytest.approx(env.width * 0.2)
    assert player.vel_y == env.flap_impulse
    assert player.rot == 0.0


def test_fallback_and_known_sizes(env):
    assert new_player(env).rect.w == PLAYER_W_FALLBACK
    assert new_player(env).rect.h == PLAYER_H_FALLBACK
    player = new_player(env, size=(40, 30))
    assert (player.w, player.h) == (40.0, 30.0)


def test_falling_body_stays_inside_play_area(env):
    player = new_player(env, PlayerMode.PLAYING)
    for _ in range(400):
        update_player(player, 1.0, env)
        assert 0.0 <= player.y <= env.play_height - player.h
    assert player.y == pytest.approx(env.play_height - player.h)
    assert player.vel_y == env.terminal_velocity


def test_flapping_into_the_ceiling_stops_upward_motion(env):
    player = new_player(env, PlayerMode.PLAYING)
    for i in range(300):
        if i % 4 == 0:
            flap(player, env)
        update_player(player, 1.0, env)
        assert 0.0 <= player.y <= env.play_height - player.h
    assert player.y < 30.0


def test_flap_resets_instead_of_stacking(env):
    player = new_player(env, PlayerMode.PLAYING)
    update_player(player, 1.0, env)
    assert flap(player, env)
    assert flap(player, env)
    assert player.vel_y == env.flap_impulse


def test_flap_ignored_outside_playing(env):
    player = new_player(env, PlayerMode.IDLE)
    assert not flap(player, env)
    assert player.vel_y == 0.0

    set_mode(player, PlayerMode.CRASHED, env)
    assert not flap(player, env)


def test_idle_bob_is_a_one_hertz_wave(env):
    player = new_player(env, PlayerMode.IDLE)
    base = idle_baseline(env)
    ys = []
    for _ in range(60):
        update_player(player, 1.0, env)
        ys.append(player.y)
        assert abs(player.y - base) <= env.bob_amplitude + 1e-9
    assert max(ys) == pytest.approx(base + env.bob_amplitude, abs=0.05)
    assert ys[-1] == pytest.approx(base, abs=1e-6)


def test_crashed_body_is_inert(env):
    player = new_player(env, PlayerMode.PLAYING)
    update_player(player, 1.0, env)
    set_mode(player, PlayerMode.CRASHED, env)
    y = player.y
    for _ in range(10):
        update_player(player, 1.0, env)
    assert player.y == y
    assert player.vel_y == 0.0


def test_tilt_follows_velocity_smoothly(env):
    assert target_tilt(env.flap_impulse, env) == pytest.approx(env.tilt_up)
    assert target_tilt(env.terminal_velocity, env) == pytest.approx(env.tilt_down)

    player = new_player(env, PlayerMode.PLAYING)
    update_player(player, 1.0, env)
    assert 0.0 < player.rot < env.tilt_up

    max_jump = (1.0 - math.exp(-env.tilt_rate)) * (env.tilt_up - env.tilt_down)
    for _ in range(200):
        previous = player.rot
        update_player(player, 1.0, env)
        assert abs(player.rot - previous) <= max_jump + 1e-9
    assert env.tilt_down <= player.rot < env.tilt_down + 1.0


def test_integration_is_deterministic(env):
    dts = [1.0, 0.5, 2.0, 1.0, 0.25] * 20

    def trajectory():
        player = new_player(env, PlayerMode.PLAYING)
        ys = []
        for i, dt in enumerate(dts):
            if i % 17 == 0:
                flap(player, env)
            update_player(player, dt, env)
            ys.append(player.y)
        return ys

    assert trajectory() == trajectory()


def test_hitbox_is_padded_on_every_side(env):
    player = Player(x=10.0, y=20.0, w=34.0, h=24.0)
    assert hitbox(player, env) == Rect(14.0, 24.0, 26.0, 16.0)


def test_update_dispatches_on_kind(env):
    pipe = Obstacle(EntityKind.UPPER_PIPE, x=100.0, y=0.0, vel_x=-2.0)
    update_entity(pipe, 1.5, env)
    assert pipe.x == pytest.approx(97.0)

    player = new_player(env, PlayerMode.PLAYING)
    update_entity(player, 1.0, env)
    assert player.vel_y == pytest.approx(env.flap_impulse + env.gravity)


def test_scroll_ground_wraps_and_tolerates_zero_span():
    assert scroll_ground(47.0, 1.3, 1.0, 48.0) == pytest.approx(0.3)
    assert scroll_ground(0.0, 1.3, 1.0, 0.0) == pytest.approx(0.3)
    assert scroll_ground(0.0, 1.3, 1.0, -10.0) == pytest.approx(0.3)
