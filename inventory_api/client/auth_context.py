from __future__ import annotations

import json
from dataclasses import dataclass
from pathlib import Path
from typing import Dict, Optional

from inventory_api.core.logging import get_logger
from inventory_api.core.policy import DEFAULT_ROLE

logger = get_logger(__name__)


@dataclass
class AuthContext:
    """
    Credential held by a client session.

    Passed explicitly to the API client and the views. When `storage_path`
    is set the credential survives restarts: `login` saves it, `load` reads it
    back and `clear` removes it.
    """

    storage_path: Optional[Path] = None
    token: Optional[str] = None
    role: str = DEFAULT_ROLE
    username: Optional[str] = None

    @property
    def is_authenticated(self) -> bool:
        return bool(self.token)

    def headers(self) -> Dict[str, str]:
        return {"Authorization": f"Bearer {self.token}"} if self.token else {}

    def login(self, token: str, role: Optional[str], username: Optional[str] = None) -> None:
        self.token = token
        self.role = role or DEFAULT_ROLE
        self.username = username
        self.save()

    def load(self) -> "AuthContext":
        if self.storage_path is None or not self.storage_path.exists():
            return self
        try:
            data = json.loads(self.storage_path.read_text(encoding="utf-8"))
        except (OSError, ValueError) as e:
            logger.warning("Ignoring unreadable credential store: %s", e)
            return self
        self.token = data.get("token") or None
        self.role = data.get("role") or DEFAULT_ROLE
        self.username = data.get("username")
        return self

    def save(self) -> None:
        if self.storage_path is None:
            return
        self.storage_path.parent.mkdir(parents=True, exist_ok=True)
        payload = {"token": self.token, "role": self.role, "username": self.username}
        self.storage_path.write_text(json.dumps(payload), encoding="utf-8")

    def clear(self) -> None:
        self.token = None
        self.role = DEFAULT_ROLE
        self.username = None
        if self.storage_path is not None and self.storage_path.exists():
            self.storage_path.unlink()
