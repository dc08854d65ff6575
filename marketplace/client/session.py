from __future__ import annotations

import json
import logging
import threading
from pathlib import Path
from typing import Any

from ..exceptions import AuthorizationError
from .http import ApiClient

logger = logging.getLogger(__name__)


class SessionStore:
    """The one owner of the signed-in token and user.

    ``init`` validates a stored token by fetching the identity again and
    ``logout`` drops token and user together. Both are mirrored to
    ``storage_path`` when one is given.
    """

    def __init__(self, client: ApiClient, storage_path: str | Path | None = None):
        self.client = client
        self.storage_path = Path(storage_path) if storage_path else None
        self._lock = threading.Lock()
        self._token: str | None = None
        self._user: dict[str, Any] | None = None

    @property
    def token(self) -> str | None:
        return self._token

    @property
    def user(self) -> dict[str, Any] | None:
        return self._user

    @property
    def is_authenticated(self) -> bool:
        return self._token is not None and self._user is not None

    @property
    def role(self) -> str | None:
        return self._user.get("role") if self._user else None

    def init(self) -> dict[str, Any] | None:
        """Load the stored token and confirm it is still accepted by the server."""
        stored = self._read()
        token = stored.get("token")
        if not token:
            self._set(None, None)
            return None
        return self.login(token)

    def login(self, token: str) -> dict[str, Any] | None:
        self.client.token = token
        try:
            user = self.client.me()
        except AuthorizationError:
            logger.info("Stored session token was rejected; signing out")
            self.logout()
            return None
        self._set(token, user)
        return user

    def refresh_user(self) -> dict[str, Any] | None:
        if not self._token:
            return None
        return self.login(self._token)

    def logout(self) -> None:
        self._set(None, None)

    def _set(self, token: str | None, user: dict[str, Any] | None) -> None:
        with self._lock:
            self._token = token
            self._user = user
            self.client.token = token
            self._write({"token": token, "user": user} if token else {})

    def _read(self) -> dict[str, Any]:
        if self.storage_path is None or not self.storage_path.exists():
            return {"token": self._token}
        try:
            return json.loads(self.storage_path.read_text(encoding="utf-8")) or {}
        except (OSError, ValueError):
            logger.warning("Ignoring unreadable session file %s", self.storage_path)
            return {}

    def _write(self, data: dict[str, Any]) -> None:
        if self.storage_path is None:
            return
        if not data:
            self.storage_path.unlink(missing_ok=True)
            return
        self.storage_path.write_text(json.dumps(data), encoding="utf-8")
