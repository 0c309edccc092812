"""
Persistence gateway.

The whole dataset lives under one key of a local key-value store. Each key is a
JSON file in the user data directory. Failures are logged and never raised:
a broken store must not take the UI down with it.
"""
from __future__ import annotations
import json
import logging
import re
from pathlib import Path
from typing import Any, Optional
from .models import Dataset
from .utils import STORAGE_KEY, storage_dir

logger = logging.getLogger(__name__)

_UNSAFE_KEY_RE = re.compile(r"[^A-Za-z0-9._-]+")


class LocalStorage:
    def __init__(self, directory: Optional[Path] = None):
        self.directory = Path(directory) if directory is not None else storage_dir()

    def _path(self, key: str) -> Path:
        safe = _UNSAFE_KEY_RE.sub("_", key).strip("._") or "_"
        return self.directory / f"{safe}.json"

    def save(self, key: str, value: Any) -> bool:
        path = self._path(key)
        try:
            payload = json.dumps(value, ensure_ascii=False, indent=2)
            path.parent.mkdir(parents=True, exist_ok=True)
            tmp = path.with_suffix(".json.tmp")
            tmp.write_text(payload, encoding="utf-8")
            tmp.replace(path)
        except (OSError, TypeError, ValueError) as e:
            logger.error("Error saving %r to local storage: %s", key, e)
            return False
        return True

    def load(self, key: str) -> Any:
        path = self._path(key)
        if not path.exists():
            return None
        try:
            with open(path, "r", encoding="utf-8") as f:
                return json.load(f)
        except (OSError, ValueError) as e:
            logger.error("Error loading %r from local storage: %s", key, e)
            return None

    def remove(self, key: str) -> None:
        try:
            self._path(key).unlink()
        except FileNotFoundError:
            pass
        except OSError as e:
            logger.error("Error removing %r from local storage: %s", key, e)


def save_dataset(storage: LocalStorage, dataset: Dataset, key: str = STORAGE_KEY) -> bool:
    return storage.save(key, dataset.to_dict())


def load_dataset(storage: LocalStorage, key: str = STORAGE_KEY) -> Dataset:
    # absent or malformed -> empty dataset
    raw = storage.load(key)
    if raw is None:
        return Dataset.empty()
    if not isinstance(raw, dict):
        logger.warning("Stored value under %r is not an object, starting empty", key)
        return Dataset.empty()
    try:
        return Dataset.from_dict(raw)
    except (KeyError, TypeError, ValueError, AttributeError) as e:
        logger.warning("Stored dataset under %r is malformed (%s), starting empty", key, e)
        return Dataset.empty()
