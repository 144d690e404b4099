"""
CPlayground - Authentication Workflow

Signup, login and usage statistics on top of the digest and the store.

Every operation follows the same pattern:
    load all records -> find the user -> change records -> save all records

Expected failures (empty input, duplicate user, wrong password, ...) are
returned as AuthResult values, never raised. The reason code keeps the
exact cause for logs and tests; the message is what a user may see, and
it is the same for "no such user" and "wrong password".
"""

import logging
from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from typing import Callable, List, Optional

from . import digest
from .config import MAX_USERNAME_BYTES
from .store import CredentialStore, UserRecord


log = logging.getLogger(__name__)


def now_iso() -> str:
    """Local wall-clock time as YYYY-MM-DDTHH:MM:SS."""
    return datetime.now().strftime("%Y-%m-%dT%H:%M:%S")


# =============================================================================
# RESULTS
# =============================================================================

class AuthFailure(Enum):
    EMPTY_CREDENTIALS = "empty credentials"
    INVALID_USERNAME = "invalid username"
    ALREADY_EXISTS = "already exists"
    NO_USERS = "no users"
    NOT_FOUND = "not found"
    BAD_PASSWORD = "authentication failed"
    STORE_ERROR = "store error"


MESSAGES = {
    AuthFailure.EMPTY_CREDENTIALS: "Username and password cannot be empty.",
    AuthFailure.INVALID_USERNAME: "Username must be 1-63 bytes with no spaces.",
    AuthFailure.ALREADY_EXISTS: "User already exists.",
    AuthFailure.NO_USERS: "No users. Please sign up first.",
    # Unknown user and wrong password look the same from outside
    AuthFailure.NOT_FOUND: "Authentication failed.",
    AuthFailure.BAD_PASSWORD: "Authentication failed.",
    AuthFailure.STORE_ERROR: "Could not save user data.",
}


@dataclass
class AuthResult:
    ok: bool
    reason: Optional[AuthFailure] = None
    username: Optional[str] = None

    @property
    def message(self) -> str:
        if self.ok:
            return "OK"
        return MESSAGES[self.reason]

    @classmethod
    def fail(cls, reason: AuthFailure, username: Optional[str] = None) -> "AuthResult":
        return cls(ok=False, reason=reason, username=username)


def _valid_username(username: str) -> bool:
    if any(ch.isspace() for ch in username):
        return False
    return 1 <= len(username.encode('utf-8')) <= MAX_USERNAME_BYTES


# =============================================================================
# WORKFLOW
# =============================================================================

def signup(store: CredentialStore, username: str, password: str) -> AuthResult:
    """
    Register a new user with zeroed statistics.

    Does not log the user in.
    """
    if not username or not password:
        return AuthResult.fail(AuthFailure.EMPTY_CREDENTIALS)
    if not _valid_username(username):
        return AuthResult.fail(AuthFailure.INVALID_USERNAME)

    records = store.load()
    if store.find(records, username) is not None:
        log.info("Signup rejected for %r: already exists", username)
        return AuthResult.fail(AuthFailure.ALREADY_EXISTS, username)

    records.append(UserRecord(username=username, password_hash=digest.digest_hex(password)))
    if not store.save(records):
        return AuthResult.fail(AuthFailure.STORE_ERROR, username)

    log.info("Signed up %r", username)
    return AuthResult(ok=True, username=username)


def login(
    store: CredentialStore,
    username: str,
    password: str,
    clock: Callable[[], str] = now_iso,
) -> AuthResult:
    """
    Check a password and stamp last_login.

    Args:
        store: Record store
        username: Exact, case-sensitive username
        password: Plain password (hashed here, never stored)
        clock: Timestamp source, YYYY-MM-DDTHH:MM:SS

    Returns:
        AuthResult with ok=True and the username, or the failure reason
    """
    records = store.load()
    if not records:
        return AuthResult.fail(AuthFailure.NO_USERS, username)

    idx = store.find(records, username)
    if idx is None:
        log.info("Login failed for %r: unknown user", username)
        return AuthResult.fail(AuthFailure.NOT_FOUND, username)

    record = records[idx]
    if not digest.constant_compare(digest.digest_hex(password), record.password_hash):
        log.info("Login failed for %r: wrong password", username)
        return AuthResult.fail(AuthFailure.BAD_PASSWORD, username)

    record.last_login = clock()
    if not store.save(records):
        # The password was right; only the timestamp is lost
        log.warning("Could not record last login for %r", username)

    log.info("Logged in %r", username)
    return AuthResult(ok=True, username=username)


def record_game_result(store: CredentialStore, username: str, won: bool) -> None:
    """Count one finished game (and a win if won). No-op for unknown users."""
    records = store.load()
    idx = store.find(records, username)
    if idx is None:
        return
    records[idx].games_played += 1
    if won:
        records[idx].games_won += 1
    store.save(records)


def record_quiz_pass(store: CredentialStore, username: str) -> None:
    """Count one passed quiz. No-op for unknown users."""
    records = store.load()
    idx = store.find(records, username)
    if idx is None:
        return
    records[idx].quizzes_passed += 1
    store.save(records)


def profile(store: CredentialStore, username: str) -> Optional[UserRecord]:
    """The user's record, or None if there is no such user."""
    records = store.load()
    idx = store.find(records, username)
    return records[idx] if idx is not None else None


def list_users(store: CredentialStore) -> List[UserRecord]:
    """All records in file order (read-only, for the admin listing)."""
    return store.load()


# =============================================================================
# SESSION
# =============================================================================

class Session:
    """
    Who is logged in right now.

    Anonymous until login() succeeds; logout() makes it anonymous again.
    A failed login leaves the session anonymous.

    Usage:
        session = Session(store)
        result = session.login("alice", "secret1")
        if session.authenticated:
            session.record_game_result(won=True)
        session.logout()
    """

    def __init__(self, store: CredentialStore, clock: Callable[[], str] = now_iso):
        self.store = store
        self.clock = clock
        self.username: Optional[str] = None

    @property
    def authenticated(self) -> bool:
        return self.username is not None

    def login(self, username: str, password: str) -> AuthResult:
        self.username = None
        result = login(self.store, username, password, clock=self.clock)
        if result.ok:
            self.username = result.username
        return result

    def logout(self) -> None:
        self.username = None

    def record_game_result(self, won: bool) -> None:
        self._require_authenticated()
        record_game_result(self.store, self.username, won)

    def record_quiz_pass(self) -> None:
        self._require_authenticated()
        record_quiz_pass(self.store, self.username)

    def profile(self) -> Optional[UserRecord]:
        self._require_authenticated()
        return profile(self.store, self.username)

    def _require_authenticated(self) -> None:
        if not self.authenticated:
            raise RuntimeError("Not logged in. Call login() first.")
