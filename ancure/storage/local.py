"""Device-scoped configuration store backed by JSON files.

One document per device key.  The file name is the SHA-256 of the key so
arbitrary client-supplied ids never touch the path.  Nothing here touches
the network, so guests keep working when the database is down.
"""

from __future__ import annotations

import hashlib
import json
import logging
import os
import tempfile
from pathlib import Path

from ancure.cycle.base import CycleConfiguration
from ancure.storage.base import CycleConfigurationStore, from_record, to_record
from ancure.storage.errors import StorageError

logger = logging.getLogger("ancure.storage.local")


class LocalCycleStore(CycleConfigurationStore):
    name = "local"

    def __init__(self, directory: Path) -> None:
        self._directory = Path(directory)

    def _path(self, key: str) -> Path:
        digest = hashlib.sha256(key.encode("utf-8")).hexdigest()
        return self._directory / f"{digest}.json"

    async def save(self, key: str, configuration: CycleConfiguration) -> None:
        record = to_record(configuration)
        record["last_period_date"] = configuration.last_period_start.isoformat()
        path = self._path(key)
        tmp_name: str | None = None
        try:
            self._directory.mkdir(parents=True, exist_ok=True)
            # Unique per writer so concurrent workers never share a temp file
            with tempfile.NamedTemporaryFile(
                "w",
                encoding="utf-8",
                dir=self._directory,
                prefix=f"{path.name}.",
                suffix=".tmp",
                delete=False,
            ) as fh:
                tmp_name = fh.name
                json.dump(record, fh, sort_keys=True)
            os.replace(tmp_name, path)
        except OSError as exc:
            if tmp_name is not None:
                Path(tmp_name).unlink(missing_ok=True)
            logger.error("Failed to save device cycle data to %s: %s", path, exc)
            raise StorageError(
                f"Could not write {path}: {exc}",
                user_message="Could not save your data on this device.",
            ) from exc

    async def load(self, key: str) -> CycleConfiguration | None:
        path = self._path(key)
        if not path.exists():
            return None
        try:
            return from_record(json.loads(path.read_text(encoding="utf-8")))
        except (OSError, KeyError, TypeError, ValueError) as exc:
            # json.JSONDecodeError is a ValueError
            logger.warning("Ignoring unreadable device cycle data at %s: %s", path, exc)
            return None

    async def delete(self, key: str) -> bool:
        path = self._path(key)
        try:
            path.unlink()
        except FileNotFoundError:
            return False
        except OSError as exc:
            logger.error("Failed to clear device cycle data at %s: %s", path, exc)
            raise StorageError(
                f"Could not delete {path}: {exc}",
                user_message="Could not clear your data on this device.",
            ) from exc
        return True

    def has_data(self, key: str) -> bool:
        return self._path(key).exists()
