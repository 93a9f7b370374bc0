# auth.py
from __future__ import annotations

import time
from typing import Dict, Optional, Tuple

import bcrypt

from config import BCRYPT_ROUNDS, LOGIN_LOCKOUT_SECONDS, MAX_LOGIN_ATTEMPTS, SESSION_TIMEOUT_MINUTES
from errors import AuthenticationError
from logging_config import get_logger
from models import User
from repositories import UserService

logger = get_logger("influencer_manager.auth", component="auth")

# bcrypt reads at most 72 bytes; recent releases reject longer input outright
BCRYPT_MAX_BYTES = 72


def _now_ms() -> int:
    return int(time.time() * 1000)


def _secret(password: str) -> bytes:
    return password.encode("utf-8")[:BCRYPT_MAX_BYTES]


def hash_password(password: str) -> str:
    return bcrypt.hashpw(_secret(password), bcrypt.gensalt(rounds=BCRYPT_ROUNDS)).decode("utf-8")


def verify_password(password: str, hashed: Optional[str]) -> bool:
    if not hashed:
        return False
    try:
        return bcrypt.checkpw(_secret(password), hashed.encode("utf-8"))
    except ValueError:
        # stored value is not a bcrypt hash
        logger.warning("password_hash_unreadable")
        return False


class AuthenticationManager:
    """
    Credential checks against the user store.

    Failed password attempts are counted per username; after
    `max_login_attempts` failures the account refuses logins for
    `login_timeout` seconds, then the counter starts over.
    """

    def __init__(
        self,
        max_login_attempts: int = MAX_LOGIN_ATTEMPTS,
        login_timeout: int = LOGIN_LOCKOUT_SECONDS,
        session_timeout: int = SESSION_TIMEOUT_MINUTES,
    ):
        self.max_login_attempts = max_login_attempts
        self.login_timeout = login_timeout      # seconds
        self.session_timeout = session_timeout  # minutes
        self._failures: Dict[str, Tuple[int, int]] = {}  # username -> (attempts, last failure ms)

    def authenticate(
        self,
        username: Optional[str],
        password: Optional[str],
        users: UserService,
        now_ms: Optional[int] = None,
    ) -> User:
        if not username or not password:
            raise AuthenticationError("Username and password cannot be empty")

        user = users.get_user_by_username(username)
        if user is None:
            logger.info("login_failed", extra={"username": username, "reason": "unknown_user"})
            raise AuthenticationError("User not found")

        now_ms = now_ms if now_ms is not None else _now_ms()
        if self.is_locked_out(username, now_ms):
            logger.info("login_failed", extra={"username": username, "reason": "locked"})
            raise AuthenticationError("Account is temporarily locked")

        if not user.is_active:
            logger.info("login_failed", extra={"username": username, "reason": "inactive"})
            raise AuthenticationError("Account is inactive")

        if not verify_password(password, user.password):
            attempts = self._record_failure(username, now_ms)
            logger.info("login_failed", extra={"username": username, "reason": "bad_password", "attempts": attempts})
            raise AuthenticationError("Invalid password")

        self._failures.pop(username, None)
        user.update_last_login()
        logger.info("login_succeeded", extra={"username": username, "role": user.role.value})
        return user

    def _record_failure(self, username: str, now_ms: int) -> int:
        attempts = self._failures.get(username, (0, 0))[0] + 1
        self._failures[username] = (attempts, now_ms)
        return attempts

    def failed_attempts(self, username: str) -> int:
        return self._failures.get(username, (0, 0))[0]

    def is_locked_out(self, username: str, now_ms: Optional[int] = None) -> bool:
        attempts, last_failed_ms = self._failures.get(username, (0, 0))
        if self.is_account_locked(attempts, last_failed_ms, now_ms):
            return True
        if attempts >= self.max_login_attempts:
            # lockout window has passed
            self._failures.pop(username, None)
        return False

    @staticmethod
    def validate_password_strength(password: Optional[str]) -> bool:
        if not password or len(password) < 8:
            return False
        return (
            any(c.isupper() for c in password)
            and any(c.islower() for c in password)
            and any(c.isdigit() for c in password)
            and any(not c.isalnum() for c in password)
        )

    @staticmethod
    def generate_password_reset_token(user: User, now_ms: Optional[int] = None) -> str:
        return f"RESET_{user.username}_{now_ms if now_ms is not None else _now_ms()}"

    def is_session_valid(self, session_start_ms: int, now_ms: Optional[int] = None) -> bool:
        now_ms = now_ms if now_ms is not None else _now_ms()
        return now_ms - session_start_ms < self.session_timeout * 60 * 1000

    def is_account_locked(self, failed_attempts: int, last_failed_ms: int, now_ms: Optional[int] = None) -> bool:
        if failed_attempts < self.max_login_attempts:
            return False
        now_ms = now_ms if now_ms is not None else _now_ms()
        return now_ms - last_failed_ms < self.login_timeout * 1000
