"""
leaderboard.py: Game-side leaderboard access with a local fallback.

Scores are always kept in the local store first. When a server address is
configured they are also submitted over UDP. Both happen on a background thread;
nothing here ever raises into or blocks the game loop.
"""

import json
import logging
import socket
import sqlite3
import threading
from typing import List, Optional, Tuple

from .constants import BUFFER_SIZE, LEADERBOARD_LIMIT, LEADERBOARD_TIMEOUT
from .data_models import Identity, LeaderboardEntry
from .identity import read_identity
from .server_db import ScoreStore, clamp_limit

logger = logging.getLogger(__name__)


def parse_address(text: str) -> Tuple[str, int]:
    """'host:port' -> (host, port)."""
    host, _, port = text.rpartition(":")
    if not host or not port.isdigit():
        raise ValueError(f"Expected HOST:PORT, got {text!r}")
    return host, int(port)


class LeaderboardClient:
    def __init__(self, store: ScoreStore, server_addr: Optional[Tuple[str, int]] = None,
                 init_data: str = "", timeout: float = LEADERBOARD_TIMEOUT):
        self.store = store
        self.server_addr = server_addr
        self.init_data = init_data
        self.timeout = timeout
        self.identity: Identity = read_identity(init_data) or store.local_identity()

    def submit_score(self, score: int) -> threading.Thread:
        """
        Fire-and-forget submission: the local save and, when a server is
        configured, the remote one run on a daemon thread, which is returned.
        """
        sender = threading.Thread(target=self._save, args=(int(score),), daemon=True)
        sender.start()
        return sender

    def _save(self, score: int):
        try:
            self.store.submit(self.identity, score)
        except sqlite3.Error as e:
            logger.warning(f"Local score save failed: {e}")

        if self.server_addr:
            self._send_submit(score)

    def _send_submit(self, score: int):
        try:
            reply = self._request({"type": "submit", "init_data": self.init_data, "score": score})
        except (OSError, ValueError) as e:
            logger.warning(f"Leaderboard submit failed: {e}")
            return
        if reply.get("type") != "submit_ok":
            logger.warning(f"Leaderboard submit rejected: {reply.get('message', 'unknown reason')}")

    def get_top(self, limit: int = LEADERBOARD_LIMIT) -> List[LeaderboardEntry]:
        """Remote top scores, or the local ones if the server is absent or failing."""
        limit = clamp_limit(limit)
        if self.server_addr:
            try:
                reply = self._request({"type": "top", "limit": limit})
                entries = [LeaderboardEntry.from_message(e) for e in reply.get("entries", [])]
                if entries:
                    return entries
            except (OSError, ValueError, KeyError, TypeError) as e:
                logger.warning(f"Leaderboard top failed: {e}")

        try:
            return self.store.top(limit)
        except sqlite3.Error as e:
            logger.warning(f"Local leaderboard unavailable: {e}")
            return []

    def _request(self, message: dict) -> dict:
        """Sends one datagram and waits for the reply (raises OSError on timeout)."""
        with socket.socket(socket.AF_INET, socket.SOCK_DGRAM) as sock:
            sock.settimeout(self.timeout)
            sock.sendto(json.dumps(message).encode("utf-8"), self.server_addr)
            data, _ = sock.recvfrom(BUFFER_SIZE)
        reply = json.loads(data.decode("utf-8"))
        if not isinstance(reply, dict):
            raise ValueError("Reply is not a JSON object")
        return reply
