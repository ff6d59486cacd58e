"""
identity.py: Signed init-data strings identifying a leaderboard user.

Same scheme as Telegram WebApp init data: the payload is a url-encoded query
string carrying a `user` JSON object and a `hash`, an HMAC-SHA256 over the other
fields keyed by a secret derived from the bot token.
"""

import hashlib
import hmac
import json
import time
from typing import Optional
from urllib.parse import parse_qsl, urlencode

from .data_models import Identity


def _secret_key(bot_token: str) -> bytes:
    return hmac.new(b"WebAppData", bot_token.encode("utf-8"), hashlib.sha256).digest()


def _data_check_string(fields: dict) -> str:
    return "\n".join(f"{k}={v}" for k, v in sorted(fields.items()))


def display_name(user: dict) -> str:
    """username, else 'first last', else 'Player'."""
    name = user.get("username")
    if name:
        return str(name)
    parts = [user.get("first_name"), user.get("last_name")]
    return " ".join(str(p) for p in parts if p) or "Player"


def sign_init_data(user: dict, bot_token: str, auth_date: Optional[int] = None) -> str:
    """Builds an init-data string for `user` that verify_init_data accepts."""
    fields = {
        "auth_date": str(auth_date if auth_date is not None else int(time.time())),
        "user": json.dumps(user, separators=(",", ":")),
    }
    digest = hmac.new(_secret_key(bot_token),
                      _data_check_string(fields).encode("utf-8"),
                      hashlib.sha256).hexdigest()
    return urlencode({**fields, "hash": digest})


def verify_init_data(init_data: str, bot_token: str) -> Optional[Identity]:
    """Returns the signed identity, or None when missing, tampered or malformed."""
    if not init_data or not bot_token:
        return None

    fields = dict(parse_qsl(init_data, keep_blank_values=True))
    received = fields.pop("hash", "")
    expected = hmac.new(_secret_key(bot_token),
                        _data_check_string(fields).encode("utf-8"),
                        hashlib.sha256).hexdigest()
    if not hmac.compare_digest(received.encode("utf-8"), expected.encode("utf-8")):
        return None
    return read_identity(init_data)


def read_identity(init_data: str) -> Optional[Identity]:
    """The identity an init-data string claims, without checking its signature."""
    fields = dict(parse_qsl(init_data or "", keep_blank_values=True))
    try:
        user = json.loads(fields.get("user", ""))
    except ValueError:
        return None
    if not isinstance(user, dict) or "id" not in user:
        return None
    return Identity(id=str(user["id"]), username=display_name(user),
                    photo_url=str(user.get("photo_url") or ""))
