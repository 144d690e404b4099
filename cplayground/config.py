"""
CPlayground - Configuration

Where the user records live and how loudly the library logs.
Everything can be overridden from the environment:

    CPLAYGROUND_DATA_DIR    data directory (default: ./data)
    CPLAYGROUND_USERS_DB    full path of the record file (default: <data dir>/users.db)
    CPLAYGROUND_LOG_LEVEL   logging level name (default: WARNING)
"""

import logging
import os
from dataclasses import dataclass


DEFAULT_DATA_DIR = "data"
USERS_DB_NAME = "users.db"
TMP_SUFFIX = ".tmp"

MAX_USERNAME_BYTES = 63
MAX_LAST_LOGIN_CHARS = 31
NEVER = "-"                       # last_login sentinel on disk

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


@dataclass(frozen=True)
class Config:
    data_dir: str
    users_db: str
    log_level: str = "WARNING"

    @classmethod
    def from_env(cls) -> "Config":
        data_dir = os.getenv("CPLAYGROUND_DATA_DIR", DEFAULT_DATA_DIR)
        users_db = os.getenv("CPLAYGROUND_USERS_DB") or os.path.join(data_dir, USERS_DB_NAME)
        log_level = os.getenv("CPLAYGROUND_LOG_LEVEL", "WARNING").upper()
        return cls(data_dir=data_dir, users_db=users_db, log_level=log_level)


def ensure_data_dir(path: str) -> None:
    """Create the directory holding the record file if it is missing."""
    d = os.path.dirname(path)
    if d and not os.path.exists(d):
        os.makedirs(d, exist_ok=True)


def configure_logging(config: Config) -> None:
    level = getattr(logging, config.log_level, logging.WARNING)
    logging.basicConfig(level=level, format=LOG_FORMAT)
