import json
import logging
from pathlib import Path
from typing import Any

from gallery.core.errors import PersistenceReadFailure, PersistenceWriteFailure

LOG = logging.getLogger("gallery.storage")

DATA_DIR = Path("./data")

LISTINGS_KEY = "ig_listings_v2"
FAVORITES_KEY = "ig_favorites_v2"
USERS_KEY = "ig_users_v2"
SESSION_KEY = "ig_auth_v2"
LANG_KEY = "ig_lang"


class JsonStorage:
    """Named JSON values, one file per key under ``data_dir``.

    Reads never raise: a missing or corrupt file yields the caller's default.
    Writes are best-effort: a failed write is logged and the in-memory state
    stays authoritative until the next successful save.
    """

    def __init__(self, data_dir: Path = DATA_DIR):
        self.data_dir = Path(data_dir)

    def _path_for(self, key: str) -> Path:
        return self.data_dir / f"{key}.json"

    def _read(self, key: str) -> Any:
        path = self._path_for(key)
        if not path.exists():
            raise PersistenceReadFailure(f"{path} does not exist")
        try:
            return json.loads(path.read_text(encoding="utf-8"))
        except (OSError, ValueError, RecursionError) as e:
            raise PersistenceReadFailure(f"{path}: {e}") from e

    def _write(self, key: str, value: Any) -> None:
        path = self._path_for(key)
        try:
            raw = json.dumps(value, ensure_ascii=False)
        except (TypeError, ValueError) as e:
            raise PersistenceWriteFailure(f"{key}: {e}") from e
        try:
            path.parent.mkdir(parents=True, exist_ok=True)
            path.write_text(raw, encoding="utf-8")
        except OSError as e:
            raise PersistenceWriteFailure(f"{path}: {e}") from e

    def load(self, key: str, default: Any = None) -> Any:
        try:
            return self._read(key)
        except PersistenceReadFailure as e:
            if self._path_for(key).exists():
                LOG.warning("Falling back to default for %s: %s", key, e)
            else:
                LOG.debug("No stored value for %s", key)
            return default

    def save(self, key: str, value: Any) -> None:
        try:
            self._write(key, value)
        except PersistenceWriteFailure as e:
            LOG.warning("Could not persist %s: %s", key, e)
