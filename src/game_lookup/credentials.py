"""Disk cache for the single IGDB bearer credential.

The file holds one JSON object, ``{"igdbToken": "<token>"}``. It is read at
startup if present and rewritten in full on every refresh.
"""

from __future__ import annotations

import json
import os
import tempfile
from pathlib import Path

from loguru import logger

from .errors import CredentialStoreError
from .models import Credential

log = logger.bind(stage="credentials")


class CredentialStore:
    """Load and save the cached credential at a fixed path."""

    def __init__(self, path: Path, key: str = "igdbToken") -> None:
        self.path = path
        self.key = key

    def load(self) -> Credential | None:
        """Return the cached credential, or None if nothing usable is cached."""
        if not self.path.exists():
            log.debug(f"No cached credential at {self.path}")
            return None
        try:
            data = json.loads(self.path.read_text(encoding="utf-8"))
        except (ValueError, OSError) as exc:
            # ValueError covers both bad JSON and bytes that are not UTF-8
            log.error(f"Failed to read credential file {self.path}: {exc}")
            raise CredentialStoreError(
                f"Failed to read credential file {self.path}: {exc}", str(self.path),
            ) from exc

        token = data.get(self.key) if isinstance(data, dict) else None
        if not isinstance(token, str) or not token:
            log.warning(f"Credential file {self.path} has no {self.key!r} entry")
            return None

        log.debug(f"Loaded cached credential from {self.path}")
        return Credential(token=token)

    def save(self, credential: Credential) -> None:
        """Write the credential, replacing whatever the file held before."""
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            fd, tmp_path = tempfile.mkstemp(dir=str(self.path.parent), suffix=".tmp")
        except OSError as exc:
            raise CredentialStoreError(
                f"Failed to write credential file {self.path}: {exc}", str(self.path),
            ) from exc
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                json.dump({self.key: credential.token}, f)
            os.replace(tmp_path, self.path)
        except BaseException as exc:
            # Clean up temp file on any failure
            try:
                os.unlink(tmp_path)
            except OSError as cleanup_err:
                log.warning(f"Failed to cleanup temp file {tmp_path}: {cleanup_err}")
            if isinstance(exc, OSError):
                raise CredentialStoreError(
                    f"Failed to write credential file {self.path}: {exc}", str(self.path),
                ) from exc
            raise
        log.debug(f"Saved credential to {self.path}")
