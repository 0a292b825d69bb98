"""Authentication context for console sessions.

The bearer token is held by an ``AuthContext`` created once when a session
starts and handed to the HTTP client explicitly. ``TokenStore`` persists the
token between runs in a small JSON file.
"""

import json
import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Dict, Optional

from ukt_console.app.core.settings import get_settings

logger = logging.getLogger(__name__)


@dataclass
class AuthContext:
    token: Optional[str] = None

    def headers(self) -> Dict[str, str]:
        # No token: the header is simply omitted.
        return {"Authorization": f"Bearer {self.token}"} if self.token else {}

    @property
    def is_authenticated(self) -> bool:
        return bool(self.token)

    @classmethod
    def from_store(cls, store: "TokenStore | None" = None) -> "AuthContext":
        store = store or TokenStore()
        return cls(token=store.load())


class TokenStore:
    def __init__(self, path: Path | None = None):
        self.path = Path(path) if path is not None else get_settings().token_path

    def load(self) -> Optional[str]:
        if not self.path.exists():
            return None
        try:
            payload = json.loads(self.path.read_text(encoding="utf-8"))
        except (OSError, json.JSONDecodeError) as exc:
            logger.warning("Ignoring unreadable token file %s: %s", self.path, exc)
            return None
        token = payload.get("token") if isinstance(payload, dict) else None
        return token or None

    def save(self, token: str) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        self.path.write_text(json.dumps({"token": token}), encoding="utf-8")

    def clear(self) -> None:
        if self.path.exists():
            self.path.unlink()
