"""
renderer.py: Read-only pygame drawing of a session.

Draws in logical world units on an offscreen surface and scales it to the
window, so the simulation never depends on display size. Entities are drawn by
kind through DRAWERS, the scrolling ground by its offset; missing sprites fall
back to flat shapes.
"""

from typing import Callable, Dict, List, Sequence

import pygame

from .assets import AssetProvider
from .data_models import EntityKind, GameState, LeaderboardEntry, Obstacle, Player
from .session import Session

SKY = (78, 192, 202)
GROUND = (40, 50, 70)
PIPE = (84, 180, 60)
BIRD = (245, 217, 10)
WHITE = (255, 255, 255)
SHADOW = (30, 30, 30)


class FrameContext:
    """Mutable presentational handles for one window."""

    def __init__(self, window: pygame.Surface, world_size):
        self.window = window
        self.canvas = pygame.Surface((int(world_size[0]), int(world_size[1])))
        self.font = pygame.font.Font(None, 34)
        self.small_font = pygame.font.Font(None, 22)


def _draw_player(ctx: FrameContext, assets: AssetProvider, player: Player):
    image = assets.image("player")
    if image is None:
        center = (int(player.x + player.w / 2), int(player.y + player.h / 2))
        pygame.draw.circle(ctx.canvas, BIRD, center, int(max(10, player.h / 2)))
        return
    sprite = pygame.transform.scale(image, (int(player.w), int(player.h)))
    rotated = pygame.transform.rotate(sprite, player.rot)
    ctx.canvas.blit(rotated, rotated.get_rect(
        center=(player.x + player.w / 2, player.y + player.h / 2)))


def _draw_pipe(ctx: FrameContext, assets: AssetProvider, pipe: Obstacle):
    image = assets.image("pipe")
    if image is None:
        pygame.draw.rect(ctx.canvas, PIPE, pygame.Rect(pipe.x, pipe.y, pipe.w, pipe.h))
        return
    sprite = pygame.transform.scale(image, (int(pipe.w), int(pipe.h)))
    if pipe.kind is EntityKind.UPPER_PIPE:
        sprite = pygame.transform.flip(sprite, False, True)
    ctx.canvas.blit(sprite, (pipe.x, pipe.y))


def _draw_ground(ctx: FrameContext, assets: AssetProvider, ground_y: float, ground_offset: float):
    image = assets.image("base")
    if image is None:
        height = ctx.canvas.get_height() - ground_y
        pygame.draw.rect(ctx.canvas, GROUND, pygame.Rect(0, ground_y, ctx.canvas.get_width(), height))
        return
    ctx.canvas.blit(image, (-ground_offset, ground_y))
    ctx.canvas.blit(image, (-ground_offset + image.get_width(), ground_y))


DRAWERS: Dict[EntityKind, Callable] = {
    EntityKind.PLAYER: _draw_player,
    EntityKind.UPPER_PIPE: _draw_pipe,
    EntityKind.LOWER_PIPE: _draw_pipe,
}


class Renderer:
    def __init__(self, ctx: FrameContext, assets: AssetProvider):
        self.ctx = ctx
        self.assets = assets

    def draw(self, session: Session, leaderboard: Sequence[LeaderboardEntry] = (),
             paused: bool = False):
        canvas = self.ctx.canvas
        background = self.assets.image("background")
        if background is None:
            canvas.fill(SKY)
        else:
            canvas.blit(pygame.transform.scale(background, canvas.get_size()), (0, 0))

        for up, low in session.stream.pairs():
            DRAWERS[up.kind](self.ctx, self.assets, up)
            DRAWERS[low.kind](self.ctx, self.assets, low)
        _draw_ground(self.ctx, self.assets, session.env.play_height, session.ground_offset)
        DRAWERS[session.player.kind](self.ctx, self.assets, session.player)

        self._draw_hud(session, leaderboard, paused)

        self.ctx.window.blit(
            pygame.transform.scale(canvas, self.ctx.window.get_size()), (0, 0))
        pygame.display.flip()

    def _draw_hud(self, session: Session, leaderboard: Sequence[LeaderboardEntry], paused: bool):
        if session.state is GameState.PLAYING:
            self._text(str(session.score), 40, self.ctx.font)
        elif session.state is GameState.GAME_OVER:
            self._text("GAME OVER", 90, self.ctx.font)
            self._text(f"Score {session.final_score}", 125, self.ctx.small_font)
        else:
            self._text("Tap to Start", int(session.env.height * 0.35), self.ctx.font)
            self._draw_leaderboard(leaderboard)
        if paused:
            self._text("PAUSED", int(session.env.height * 0.5), self.ctx.font)

    def _draw_leaderboard(self, leaderboard: Sequence[LeaderboardEntry]):
        lines: List[str] = [f"{i + 1}. {e.identity.username}  {e.score}"
                            for i, e in enumerate(leaderboard[:5])]
        for row, line in enumerate(lines):
            self._text(line, 290 + row * 20, self.ctx.small_font)

    def _text(self, text: str, y: int, font: pygame.font.Font):
        shadow = font.render(text, True, SHADOW)
        surf = font.render(text, True, WHITE)
        x = self.ctx.canvas.get_width() // 2 - surf.get_width() // 2
        self.ctx.canvas.blit(shadow, (x + 2, y + 2))
        self.ctx.canvas.blit(surf, (x, y))
