"""File-based JSON storage adapters."""

import json
import logging
from pathlib import Path

from taskdeck.core.history import HistoryEntry
from taskdeck.core.tasks import Task
from taskdeck.ports.task_store import StorageUnavailable

logger = logging.getLogger(__name__)


class JsonBlob:
    """
    A JSON list stored under a well-known key.

    Each key maps to one file, <data_dir>/<key>.json, holding the whole
    sequence of records.
    """

    def __init__(self, data_dir: Path | str, key: str):
        self.data_dir = Path(data_dir).expanduser()
        self.key = key

    @property
    def path(self) -> Path:
        return self.data_dir / f"{self.key}.json"

    def read(self) -> list[dict]:
        """Read all records. Missing file means no records."""
        if not self.path.exists():
            return []
        try:
            data = json.loads(self.path.read_text())
        except (OSError, json.JSONDecodeError) as e:
            raise StorageUnavailable(f"Cannot read {self.path}: {e}") from e
        if not isinstance(data, list):
            raise StorageUnavailable(f"Unexpected data in {self.path}")
        return data

    def write(self, records: list[dict]) -> bool:
        """Replace all records. Returns False if the write fails."""
        try:
            self.data_dir.mkdir(parents=True, exist_ok=True)
            self.path.write_text(json.dumps(records, indent=2))
        except OSError as e:
            logger.error(f"Error saving {self.key}: {e}")
            return False
        return True

    def clear(self) -> bool:
        """Remove the stored blob."""
        try:
            self.path.unlink(missing_ok=True)
        except OSError as e:
            logger.error(f"Error clearing {self.key}: {e}")
            return False
        return True


class JsonTaskStore(JsonBlob):
    """
    JSON task storage.

    Implements TaskStore protocol.
    """

    def __init__(self, data_dir: Path | str, key: str = "tasks"):
        super().__init__(data_dir, key)

    def load_all(self) -> list[Task]:
        records = self.read()
        try:
            return [Task.from_dict(r) for r in records]
        except (KeyError, TypeError, ValueError) as e:
            raise StorageUnavailable(f"Corrupt task record in {self.path}: {e}") from e

    def save_all(self, tasks: list[Task]) -> bool:
        return self.write([t.to_dict() for t in tasks])


class JsonHistoryStore(JsonBlob):
    """
    JSON history log storage.

    Implements HistoryStore protocol. Entries are only ever appended.
    """

    def __init__(self, data_dir: Path | str, key: str = "history"):
        super().__init__(data_dir, key)

    def load_all(self) -> list[HistoryEntry]:
        records = self.read()
        try:
            return [HistoryEntry.from_dict(r) for r in records]
        except (KeyError, TypeError, ValueError) as e:
            raise StorageUnavailable(f"Corrupt history record in {self.path}: {e}") from e

    def append(self, entry: HistoryEntry) -> bool:
        try:
            records = self.read()
        except StorageUnavailable as e:
            logger.error(f"Not appending to history: {e}")
            return False
        records.append(entry.to_dict())
        return self.write(records)
