from __future__ import annotations

from typing import Dict, Iterable, List

from werkzeug.security import check_password_hash, generate_password_hash

from ..common.validators import require_non_empty
from ..core.exceptions import AuthenticationError, ValidationError
from ..sessions.model import Session
from ..sessions.service import SessionManager
from .model import StaffAccount


def parse_credentials(raw: str) -> List[StaffAccount]:
    """Parse ``"user:password,user2:password2"`` into hashed accounts."""
    accounts: List[StaffAccount] = []
    for chunk in (raw or "").split(","):
        chunk = chunk.strip()
        if not chunk:
            continue
        username, sep, password = chunk.partition(":")
        if not sep or not username.strip() or not password:
            raise ValidationError(f"Malformed credential entry: {username.strip() or chunk!r}")
        accounts.append(StaffAccount(username=username.strip(), password_hash=generate_password_hash(password)))
    return accounts


class AuthService:
    """Use case: check static credentials and open a session."""

    def __init__(self, accounts: Iterable[StaffAccount]):
        self._accounts: Dict[str, StaffAccount] = {a.username: a for a in accounts}

    def authenticate(self, username: str, password: str) -> str:
        try:
            username = require_non_empty(username, "Username")
        except ValidationError:
            raise AuthenticationError("Invalid username or password")

        account = self._accounts.get(username)
        if not account or not password or not check_password_hash(account.password_hash, password):
            raise AuthenticationError("Invalid username or password")
        return account.username

    def login(self, sessions: SessionManager, username: str, password: str) -> Session:
        return sessions.create_session(self.authenticate(username, password))
