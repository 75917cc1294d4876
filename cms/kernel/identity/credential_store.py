"""
Credential Store - username -> password hash, persisted as a YAML mapping.
"""

import os
from pathlib import Path
from typing import Dict, Optional

import yaml

from cms.kernel.errors import IOFailure, InvalidUsername
from cms.kernel.locking import KeyedLock, credential_locks
from cms.logging_config import get_logger

logger = get_logger(__name__)


class CredentialStore:
    """
    Loads and saves the credential file.

    Reads are lock-free (the file is only ever replaced atomically);
    every read-modify-write runs under a lock keyed by the file path.
    """

    def __init__(self, path: Path, locks: KeyedLock = credential_locks):
        self.path = Path(path)
        self.locks = locks

    def load(self) -> Dict[str, str]:
        if not self.path.is_file():
            return {}
        try:
            with open(self.path, "r", encoding="utf-8") as fh:
                data = yaml.safe_load(fh)
        except (OSError, yaml.YAMLError) as e:
            raise IOFailure("Could not read credentials.") from e
        if not data:
            return {}
        return {str(user): str(pw_hash) for user, pw_hash in data.items()}

    def save(self, credentials: Dict[str, str]) -> None:
        tmp = self.path.with_name(f".{self.path.name}.tmp")
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            with open(tmp, "w", encoding="utf-8") as fh:
                yaml.safe_dump(credentials, fh, default_flow_style=False, sort_keys=True)
            os.replace(tmp, self.path)
        except OSError as e:
            raise IOFailure("Could not save credentials.") from e

    def get(self, username: str) -> Optional[str]:
        return self.load().get(username)

    def exists(self, username: str) -> bool:
        return username in self.load()

    def add(self, username: str, password_hash: str) -> None:
        """Store a new record; a concurrent sign-up of the same name loses."""
        with self.locks.hold(str(self.path.resolve())):
            credentials = self.load()
            if username in credentials:
                raise InvalidUsername(f"{username} is already taken.")
            credentials[username] = password_hash
            self.save(credentials)
        logger.info("Credential added", extra={"user": username})

    def put(self, username: str, password_hash: str) -> None:
        """Replace an existing record's hash (used for rehashing)."""
        with self.locks.hold(str(self.path.resolve())):
            credentials = self.load()
            credentials[username] = password_hash
            self.save(credentials)
