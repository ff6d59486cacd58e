"""
server_db.py: Best-score-per-identity persistence, shared by the leaderboard
service and the game's local fallback.
"""

import sqlite3
import threading
import time
import uuid
from typing import List, Optional

from .constants import DB_FILE, LEADERBOARD_LIMIT, LEADERBOARD_MAX_LIMIT
from .data_models import Identity, LeaderboardEntry


def clamp_limit(limit: int) -> int:
    return max(1, min(LEADERBOARD_MAX_LIMIT, int(limit)))


class ScoreStore:
    """Handles all interaction with the SQLite database."""
    def __init__(self, db_file: str = DB_FILE):
        # check_same_thread=False is essential for multi-threading access
        self.conn = sqlite3.connect(db_file, check_same_thread=False)
        self.lock = threading.Lock()
        self.setup()

    def setup(self):
        """Creates tables if they don't exist."""
        with self.lock:
            self.conn.execute("""
                CREATE TABLE IF NOT EXISTS scores (
                    id TEXT PRIMARY KEY,
                    username TEXT,
                    photo_url TEXT,
                    best_score INTEGER DEFAULT 0,
                    updated_at INTEGER
                )
            """)
            self.conn.execute("""
                CREATE TABLE IF NOT EXISTS meta (
                    key TEXT PRIMARY KEY,
                    value TEXT
                )
            """)
            self.conn.commit()

    def submit(self, identity: Identity, score: int) -> int:
        """Records `score` for `identity` and returns the stored best."""
        now = int(time.time() * 1000)
        with self.lock:
            self.conn.execute("""
                INSERT INTO scores (id, username, photo_url, best_score, updated_at)
                VALUES (?, ?, ?, ?, ?)
                ON CONFLICT(id) DO UPDATE SET
                    username = excluded.username,
                    photo_url = excluded.photo_url,
                    best_score = MAX(scores.best_score, excluded.best_score),
                    updated_at = excluded.updated_at
            """, (identity.id, identity.username, identity.photo_url, int(score), now))
            self.conn.commit()
            row = self.conn.execute(
                "SELECT best_score FROM scores WHERE id=?", (identity.id,)).fetchone()
        return row[0]

    def best(self, identity_id: str) -> Optional[int]:
        with self.lock:
            row = self.conn.execute(
                "SELECT best_score FROM scores WHERE id=?", (identity_id,)).fetchone()
        return row[0] if row else None

    def top(self, limit: int = LEADERBOARD_LIMIT) -> List[LeaderboardEntry]:
        """Fetches the top scores, best first, most recent first on ties."""
        with self.lock:
            rows = self.conn.execute("""
                SELECT id, username, photo_url, best_score
                FROM scores
                ORDER BY best_score DESC, updated_at DESC
                LIMIT ?
            """, (clamp_limit(limit),)).fetchall()
        return [
            LeaderboardEntry(Identity(id=r[0], username=r[1] or "Player", photo_url=r[2] or ""), r[3])
            for r in rows
        ]

    def local_identity(self) -> Identity:
        """The persistent identity of this machine's player, created on first use."""
        with self.lock:
            row = self.conn.execute(
                "SELECT value FROM meta WHERE key='local_id'").fetchone()
            if row is None:
                local_id = f"local-{uuid.uuid4().hex[:12]}"
                self.conn.execute(
                    "INSERT INTO meta (key, value) VALUES ('local_id', ?)", (local_id,))
                self.conn.commit()
            else:
                local_id = row[0]
        return Identity(id=local_id, username="You")

    def close(self):
        with self.lock:
            self.conn.close()
