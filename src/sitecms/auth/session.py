# Copyright (C) 2026 Bernardo Gómez Bey
# SPDX-License-Identifier: AGPL-3.0-or-later

from __future__ import annotations

import secrets
import threading
import time
from dataclasses import dataclass
from typing import Callable, Dict, Optional

COOKIE_NAME = "admin_session"
SESSION_TTL_SECONDS = 24 * 60 * 60


@dataclass(frozen=True)
class SessionData:
    username: str
    expires_at: float


class SessionRegistry:
    """Process-wide token -> session table.

    Sessions live only in memory: a restart logs everybody out. Expired
    entries are dropped lazily, the first time they are looked up.
    """

    def __init__(self, *, ttl: float = SESSION_TTL_SECONDS, clock: Callable[[], float] = time.time):
        self._ttl = ttl
        self._clock = clock
        self._lock = threading.Lock()
        self._sessions: Dict[str, SessionData] = {}

    def create(self, username: str) -> str:
        with self._lock:
            token = secrets.token_urlsafe(32)
            while token in self._sessions:
                token = secrets.token_urlsafe(32)
            self._sessions[token] = SessionData(username=username, expires_at=self._clock() + self._ttl)
        return token

    def validate(self, token: Optional[str]) -> Optional[str]:
        if not token:
            return None
        with self._lock:
            sess = self._sessions.get(token)
            if sess is None:
                return None
            if self._clock() > sess.expires_at:
                del self._sessions[token]
                return None
            return sess.username

    def destroy(self, token: Optional[str]) -> None:
        if not token:
            return
        with self._lock:
            self._sessions.pop(token, None)

    def __len__(self) -> int:
        with self._lock:
            return len(self._sessions)
