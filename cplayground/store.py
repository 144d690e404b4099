"""
CPlayground - Credential Store

This file handles:
- The on-disk user file (one text line per user)
- Parsing lines back into UserRecord objects
- Atomic save (write <path>.tmp, then replace <path>)
- Username lookup

File format (no header, single spaces between fields):

    username password_hash games_played games_won quizzes_passed last_login

    alice ba7816bf8f01cfea414140de5dae2223b00361a396177a9cb410ff61f20015ad 3 1 2 2026-10-17T09:30:00
    bob   e3b0c44298fc1c149afbf4c8996fb92427ae41e4649b934ca495991b7852b855 0 0 0 -

last_login is "-" until the first successful login.

There is no long-lived in-memory copy: every operation loads the file,
changes the records and saves the whole file back.
"""

import logging
import os
import re
from dataclasses import dataclass, field
from typing import List, Optional

from .config import MAX_LAST_LOGIN_CHARS, NEVER, TMP_SUFFIX, Config, ensure_data_dir


log = logging.getLogger(__name__)

# ASCII decimal only: int() alone would also take "1_000" and non-ASCII digits
_INTEGER = re.compile(r"^[+-]?[0-9]+$", re.ASCII)


class StoreError(Exception):
    """The record file could not be written."""


# =============================================================================
# RECORD
# =============================================================================

@dataclass
class UserRecord:
    username: str
    password_hash: str
    games_played: int = 0
    games_won: int = 0
    quizzes_passed: int = 0
    last_login: str = field(default="")

    def to_line(self) -> str:
        """Serialize in the fixed field order, "-" for a missing last_login."""
        return "%s %s %d %d %d %s" % (
            self.username,
            self.password_hash,
            self.games_played,
            self.games_won,
            self.quizzes_passed,
            self.last_login or NEVER,
        )

    @classmethod
    def from_line(cls, line: str) -> Optional["UserRecord"]:
        """
        Parse one line, or return None when it has fewer than two fields.

        Counters that are missing or not integers default to 0 and every
        field after them is ignored, the way a scanf-style reader stops at
        the first field it cannot convert. A missing last_login (or "-")
        means "never"; a longer one is cut to 31 characters.
        """
        parts = line.split()
        if len(parts) < 2:
            return None

        record = cls(username=parts[0], password_hash=parts[1])
        counters = []
        for token in parts[2:5]:
            if not _INTEGER.match(token):
                break
            counters.append(int(token))
        if counters:
            record.games_played = counters[0]
        if len(counters) > 1:
            record.games_won = counters[1]
        if len(counters) > 2:
            record.quizzes_passed = counters[2]
            if len(parts) > 5 and parts[5] != NEVER:
                record.last_login = parts[5][:MAX_LAST_LOGIN_CHARS]
        return record


# =============================================================================
# STORE
# =============================================================================

class CredentialStore:
    """
    The user file and the three operations on it.

    Usage:
        store = CredentialStore("data/users.db")
        records = store.load()
        i = store.find(records, "alice")
        records[i].games_played += 1
        store.save(records)
    """

    def __init__(self, path: str):
        self.path = path
        self.tmp_path = path + TMP_SUFFIX

    @classmethod
    def from_config(cls, config: Optional[Config] = None) -> "CredentialStore":
        config = config or Config.from_env()
        return cls(config.users_db)

    def load(self) -> List[UserRecord]:
        """
        Read every record from disk.

        A missing file is an empty store, not an error. Lines with fewer
        than two fields (blank, whitespace-only, a lone token) and lines
        that are not valid UTF-8 are skipped.
        """
        if not os.path.exists(self.path):
            log.debug("No user file at %s", self.path)
            return []

        records = []
        skipped = 0
        with open(self.path, 'rb') as f:
            for raw in f:
                try:
                    line = raw.decode('utf-8')
                except UnicodeDecodeError:
                    skipped += 1
                    continue
                record = UserRecord.from_line(line)
                if record is None:
                    skipped += 1
                    continue
                records.append(record)

        if skipped:
            log.debug("Skipped %d malformed line(s) in %s", skipped, self.path)
        log.debug("Loaded %d record(s) from %s", len(records), self.path)
        return records

    def save(self, records: List[UserRecord]) -> bool:
        """
        Rewrite the whole file with the given records.

        Returns:
            True on success, False if the temporary file could not be
            written or moved into place (the previous file is untouched)
        """
        try:
            self.save_or_raise(records)
        except StoreError as e:
            log.error("Saving users failed: %s", e)
            return False
        return True

    def save_or_raise(self, records: List[UserRecord]) -> None:
        """
        Same as save() but raises StoreError instead of returning False.

        The records go to <path>.tmp first; only a fully written and flushed
        temporary file replaces the real one, so a crash mid-write leaves the
        last committed file in place.
        """
        try:
            ensure_data_dir(self.path)
            with open(self.tmp_path, 'w', encoding='utf-8') as f:
                for record in records:
                    f.write(record.to_line() + "\n")
                f.flush()
                os.fsync(f.fileno())
            os.replace(self.tmp_path, self.path)
        except OSError as e:
            self._discard_tmp()
            raise StoreError(f"could not write {self.path}: {e}") from e

        log.debug("Saved %d record(s) to %s", len(records), self.path)

    @staticmethod
    def find(records: List[UserRecord], username: str) -> Optional[int]:
        """Index of the first record whose username matches exactly, else None."""
        for i, record in enumerate(records):
            if record.username == username:
                return i
        return None

    def _discard_tmp(self) -> None:
        try:
            if os.path.exists(self.tmp_path):
                os.remove(self.tmp_path)
        except OSError as e:
            log.warning("Could not remove %s: %s", self.tmp_path, e)
