"""Snapshot storage: baseline snapshots as JSON files on disk."""

from __future__ import annotations

import json
import logging
from pathlib import Path

from pydantic import ValidationError

from gas_track.errors import CorruptSnapshotError, SnapshotIOError, SnapshotNotFoundError
from gas_track.models import Snapshot

logger = logging.getLogger("gas_track.store")

DEFAULT_SNAPSHOT_FILE = Path(".gas-snapshot.json")


class SnapshotStore:
    """Reads and writes a single snapshot file."""

    def __init__(self, path: Path = DEFAULT_SNAPSHOT_FILE) -> None:
        self._path = path

    @property
    def path(self) -> Path:
        return self._path

    def exists(self) -> bool:
        return self._path.is_file()

    def save(self, snapshot: Snapshot) -> Path:
        """Write the snapshot, replacing any existing file."""
        try:
            self._path.parent.mkdir(parents=True, exist_ok=True)
            # A failed write must leave the previous baseline intact.
            tmp = self._path.with_name(f"{self._path.name}.tmp")
            tmp.write_text(snapshot.to_json(), encoding="utf-8")
            tmp.replace(self._path)
        except OSError as e:
            raise SnapshotIOError(self._path, str(e)) from e

        logger.info("Saved snapshot with %d keys to %s", len(snapshot), self._path)
        return self._path

    def load(self) -> Snapshot:
        """Read the snapshot back.

        Raises SnapshotNotFoundError when the file is missing so callers can
        point the user at ``gas-track snapshot``.
        """
        try:
            text = self._path.read_text(encoding="utf-8")
        except FileNotFoundError:
            raise SnapshotNotFoundError(self._path) from None
        except IsADirectoryError:
            raise SnapshotIOError(self._path, "path is a directory") from None
        except OSError as e:
            raise SnapshotIOError(self._path, str(e)) from e

        try:
            raw = json.loads(text)
        except json.JSONDecodeError as e:
            raise CorruptSnapshotError(self._path, f"invalid JSON ({e.msg})") from None

        if not isinstance(raw, dict):
            raise CorruptSnapshotError(
                self._path, f"expected an object, got {type(raw).__name__}"
            )

        try:
            snapshot = Snapshot.model_validate(raw)
        except ValidationError as e:
            raise CorruptSnapshotError(self._path, _first_error(e)) from None

        logger.info("Loaded snapshot with %d keys from %s", len(snapshot), self._path)
        return snapshot


def save_snapshot(path: Path, snapshot: Snapshot) -> Path:
    return SnapshotStore(path).save(snapshot)


def load_snapshot(path: Path) -> Snapshot:
    return SnapshotStore(path).load()


def _first_error(error: ValidationError) -> str:
    first = error.errors()[0]
    location = ".".join(str(part) for part in first["loc"])
    return f"{location}: {first['msg']}" if location else first["msg"]
