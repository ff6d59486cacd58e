#!/usr/bin/env python3
"""
client.py

Single-player game window: pygame input and rendering around a fixed-step Session.
"""

import argparse
import logging
import random
import threading
import time
from pathlib import Path
from typing import List, Optional

import pygame

from .assets import AssetProvider
from .audio import AudioCues
from .clock import FixedStepClock
from .constants import DB_FILE, LEADERBOARD_LIMIT, RENDER_FPS
from .data_models import Environment, GameState, LeaderboardEntry
from .leaderboard import LeaderboardClient, parse_address
from .log import setup_logging
from .renderer import FrameContext, Renderer
from .server_db import ScoreStore
from .session import Session

logger = logging.getLogger(__name__)

FLAP_KEYS = (pygame.K_SPACE, pygame.K_UP)


class GameClient:
    def __init__(self, assets_dir: Path, scale: float = 1.5,
                 leaderboard: Optional[LeaderboardClient] = None,
                 seed: Optional[int] = None, mute: bool = False):
        pygame.init()
        self.env = Environment()
        self.screen = pygame.display.set_mode(
            (int(self.env.width * scale), int(self.env.height * scale)))
        pygame.display.set_caption("Stoney")

        self.assets = AssetProvider(assets_dir)
        self.cues = AudioCues(assets_dir, enabled=not mute)
        self.session = Session(self.env, rng=random.Random(seed),
                               sizes=self.assets.size, cues=self.cues)
        self.session.add_listener(self._on_transition)
        self.renderer = Renderer(FrameContext(self.screen, (self.env.width, self.env.height)),
                                 self.assets)

        self.leaderboard = leaderboard
        self.top: List[LeaderboardEntry] = []

        # Time Management
        self.clock = FixedStepClock()
        self.frame_clock = pygame.time.Clock()
        self.paused = False

    def run(self):
        """The main client execution loop."""
        self.assets.start()
        self._refresh_top()

        running = True
        while running:
            self.frame_clock.tick(RENDER_FPS)

            for event in pygame.event.get():
                if event.type == pygame.QUIT:
                    running = False
                elif event.type == pygame.KEYDOWN and event.key == pygame.K_ESCAPE:
                    running = False
                elif event.type == pygame.KEYDOWN and event.key == pygame.K_p:
                    self.set_paused(not self.paused)
                elif event.type == pygame.WINDOWFOCUSLOST:
                    self.set_paused(True)
                elif (event.type == pygame.KEYDOWN and event.key in FLAP_KEYS) \
                        or event.type == pygame.MOUSEBUTTONDOWN:
                    if not self.paused:
                        self.session.press()

            # --- Simulation (Fixed Timestep) ---
            if not self.paused:
                for dt in self.clock.advance(time.perf_counter()):
                    self.session.step(dt)

            self.renderer.draw(self.session, self.top, self.paused)

        pygame.quit()

    def set_paused(self, paused: bool):
        if paused != self.paused:
            logger.info("Paused" if paused else "Resumed")
        self.paused = paused

    def _on_transition(self, old: GameState, new: GameState, session: Session):
        if self.leaderboard is not None and new is GameState.GAME_OVER:
            sender = self.leaderboard.submit_score(session.final_score)
            self._refresh_top(after=sender)

    def _refresh_top(self, after: Optional[threading.Thread] = None):
        """Fetches the top list off the game thread, once `after` has finished."""
        if self.leaderboard is None:
            return

        def fetch():
            if after is not None:
                after.join()
            self.top = self.leaderboard.get_top(LEADERBOARD_LIMIT)

        threading.Thread(target=fetch, daemon=True).start()


def main(argv: Optional[list] = None) -> None:
    parser = argparse.ArgumentParser(description="Stoney, a tap-to-flap arcade game")
    parser.add_argument("--assets", type=Path, default=Path("assets"))
    parser.add_argument("--scale", type=float, default=1.5)
    parser.add_argument("--server", type=parse_address, default=None,
                        help="leaderboard server as HOST:PORT")
    parser.add_argument("--init-data", default="", help="signed identity for the leaderboard")
    parser.add_argument("--db", default=DB_FILE)
    parser.add_argument("--seed", type=int, default=None)
    parser.add_argument("--mute", action="store_true")
    parser.add_argument("--debug", action="store_true")
    args = parser.parse_args(argv)

    setup_logging(args.debug)
    leaderboard = LeaderboardClient(ScoreStore(args.db), args.server, args.init_data)
    GameClient(args.assets, args.scale, leaderboard, args.seed, args.mute).run()


if __name__ == "__main__":
    main()
