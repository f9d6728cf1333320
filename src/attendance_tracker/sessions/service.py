from __future__ import annotations

import json
import logging
from datetime import datetime, timedelta
from typing import Callable, Optional

from ..common.datetime_utils import now_utc
from ..core.constants import DEFAULT_SESSION_HOURS, DEFAULT_SESSION_KEY
from .model import Session
from .store import KeyValueStore

logger = logging.getLogger(__name__)


class SessionManager:
    """Time-boxed login session kept in a key-value store.

    Validation is purely local (client clock, no server round-trip).
    """

    def __init__(
        self,
        store: KeyValueStore,
        *,
        key: str = DEFAULT_SESSION_KEY,
        lifetime: timedelta = timedelta(hours=DEFAULT_SESSION_HOURS),
        clock: Callable[[], datetime] = now_utc,
    ):
        self._store = store
        self._key = key
        self._lifetime = lifetime
        self._clock = clock

    def create_session(self, username: str) -> Session:
        now = self._clock()
        session = Session(username=username, login_time=now, expires_at=now + self._lifetime)
        self._store.set(self._key, json.dumps(session.to_dict()))
        return session

    def current(self) -> Optional[Session]:
        raw = self._store.get(self._key)
        if not raw:
            return None
        try:
            return Session.from_dict(json.loads(raw))
        except (ValueError, KeyError, TypeError, AttributeError):
            return None

    def is_valid(self) -> bool:
        if not self._store.get(self._key):
            return False

        session = self.current()
        if session is None:
            logger.info("Discarding unreadable session payload")
            self.destroy()
            return False

        if session.is_expired(self._clock()):
            self.destroy()
            return False

        return True

    def destroy(self) -> None:
        self._store.remove(self._key)
