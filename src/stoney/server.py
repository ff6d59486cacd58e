#!/usr/bin/env python3
"""
Stoney leaderboard server with SQLite persistence.

UDP JSON protocol:
    {"type": "submit", "init_data": str, "score": int} -> {"type": "submit_ok", "best": int}
    {"type": "top", "limit": int}                      -> {"type": "top", "entries": [...]}
    anything invalid                                   -> {"type": "error", "message": str}
"""

import argparse
import json
import logging
import math
import os
import socket
import sqlite3
import threading
import time
from typing import Optional, Tuple

from .constants import (BOT_TOKEN_ENV, BUFFER_SIZE, DB_FILE, LEADERBOARD_LIMIT,
                        LEADERBOARD_PORT, MAX_SCORE)
from .identity import verify_init_data
from .log import setup_logging
from .server_db import ScoreStore

logger = logging.getLogger(__name__)


class LeaderboardError(Exception):
    """A request the server refuses; reported back to the sender."""


class LeaderboardServer:
    def __init__(self, store: ScoreStore, bot_token: str,
                 host: str = "", port: int = LEADERBOARD_PORT):
        self.store = store
        self.bot_token = bot_token

        # Network
        self.sock = socket.socket(socket.AF_INET, socket.SOCK_DGRAM)
        self.sock.bind((host, port))
        self.sock.settimeout(0.2)

        # Threading
        self.running = threading.Event()
        self.network_thread = threading.Thread(target=self._network_loop, daemon=True)

    @property
    def address(self) -> Tuple[str, int]:
        return self.sock.getsockname()

    def start(self):
        self.running.set()
        self.network_thread.start()

    def stop(self):
        logger.info("Stopping leaderboard server...")
        self.running.clear()
        if self.network_thread.is_alive():
            self.network_thread.join()
        self.sock.close()
        logger.info("Leaderboard server stopped.")

    def _network_loop(self):
        """Listens for and answers incoming UDP requests."""
        logger.info(f"Network thread started. Listening on {self.address}.")
        while self.running.is_set():
            try:
                data, addr = self.sock.recvfrom(BUFFER_SIZE)
            except socket.timeout:
                continue
            except OSError as e:
                if self.running.is_set():
                    logger.error(f"Network error: {e}")
                continue

            try:
                reply = self.handle_datagram(data)
            except Exception as e:
                logger.exception(f"Request from {addr} failed: {e}")
                reply = self._error("Internal error.")

            try:
                self.sock.sendto(json.dumps(reply).encode("utf-8"), addr)
            except OSError as e:
                logger.warning(f"Could not reply to {addr}: {e}")

    def handle_datagram(self, data: bytes) -> dict:
        try:
            message = json.loads(data.decode("utf-8"))
            if not isinstance(message, dict):
                raise LeaderboardError("Request must be a JSON object.")
            return self.handle(message)
        except (ValueError, UnicodeDecodeError):
            return self._error("Malformed JSON.")
        except LeaderboardError as e:
            return self._error(str(e))
        except sqlite3.Error as e:
            logger.error(f"Storage error: {e}")
            return self._error("Storage error.")

    def handle(self, message: dict) -> dict:
        msg_type = message.get("type")
        if msg_type == "submit":
            return self._handle_submit(message)
        if msg_type == "top":
            return self._handle_top(message)
        raise LeaderboardError("Unknown message type.")

    def _handle_submit(self, message: dict) -> dict:
        score = message.get("score")
        if (isinstance(score, bool) or not isinstance(score, (int, float))
                or not math.isfinite(score) or not 0 <= score <= MAX_SCORE):
            raise LeaderboardError("Invalid score.")

        init_data = message.get("init_data", "")
        if not isinstance(init_data, str):
            raise LeaderboardError("Invalid init data.")

        identity = verify_init_data(init_data, self.bot_token)
        if identity is None:
            raise LeaderboardError("Invalid init data.")

        best = self.store.submit(identity, int(score))
        logger.info(f"Score {int(score)} from {identity.username} ({identity.id}), best {best}")
        return {"type": "submit_ok", "best": best}

    def _handle_top(self, message: dict) -> dict:
        try:
            limit = int(message.get("limit", LEADERBOARD_LIMIT))
        except (TypeError, ValueError, OverflowError):
            raise LeaderboardError("Invalid limit.")
        entries = [entry.to_message() for entry in self.store.top(limit)]
        return {"type": "top", "entries": entries}

    def _error(self, text: str) -> dict:
        logger.debug(f"Rejected request: {text}")
        return {"type": "error", "message": text}


def main(argv: Optional[list] = None) -> None:
    parser = argparse.ArgumentParser(description="Stoney leaderboard server")
    parser.add_argument("--host", default="")
    parser.add_argument("--port", type=int, default=LEADERBOARD_PORT)
    parser.add_argument("--db", default=DB_FILE)
    parser.add_argument("--bot-token", default=os.environ.get(BOT_TOKEN_ENV, ""))
    parser.add_argument("--debug", action="store_true")
    args = parser.parse_args(argv)

    setup_logging(args.debug)
    if not args.bot_token:
        logger.warning(f"No bot token ({BOT_TOKEN_ENV}); every submission will be rejected.")

    server = LeaderboardServer(ScoreStore(args.db), args.bot_token, args.host, args.port)
    try:
        server.start()
        while server.running.is_set():
            time.sleep(0.1)
    except KeyboardInterrupt:
        server.stop()
        server.store.close()


if __name__ == "__main__":
    main()
