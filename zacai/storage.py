"""Persistent storage for knowledge collections: one JSON file per collection"""

import json
import logging
import os
from pathlib import Path
from typing import Dict, List

from . import config
from .errors import StorageError

logger = logging.getLogger(__name__)


class JsonStorage:
    """
    Segmented JSON storage.

    Each collection lives in its own file so a corrupted collection does not
    prevent the others from loading.
    """

    def __init__(self, directory: Path = None):
        self.directory = Path(directory or config.KNOWLEDGE_DIR)

    def path_for(self, collection: str) -> Path:
        return self.directory / f"{collection}.json"

    def _read(self, collection: str) -> List[Dict]:
        path = self.path_for(collection)
        try:
            with open(path, "r", encoding="utf-8") as f:
                data = json.load(f)
        except (OSError, ValueError) as e:
            raise StorageError(f"Could not read {path}: {e}") from e
        if not isinstance(data, list):
            raise StorageError(f"{path} does not contain a list of entries")
        return data

    def load(self, collection: str) -> List[Dict]:
        """Load one collection; missing or broken files yield no entries"""
        if not self.path_for(collection).exists():
            logger.info(f"No stored {collection} collection, starting fresh")
            return []
        try:
            return self._read(collection)
        except StorageError as e:
            logger.error(f"Failed to load {collection}: {e}")
            return []

    def save(self, collection: str, entries: List[Dict]) -> bool:
        """Save one collection atomically; returns False on failure"""
        path = self.path_for(collection)
        tmp_path = path.with_suffix(".json.tmp")
        try:
            self.directory.mkdir(parents=True, exist_ok=True)
            with open(tmp_path, "w", encoding="utf-8") as f:
                json.dump(entries, f, indent=2, ensure_ascii=False)
            os.replace(tmp_path, path)
            logger.debug(f"Saved {len(entries)} {collection} entries")
            return True
        except (OSError, TypeError, ValueError) as e:
            logger.error(f"Failed to save {collection}: {e}")
            return False

    def clear(self):
        """Delete every stored collection (use with caution!)"""
        for collection in config.COLLECTIONS:
            path = self.path_for(collection)
            if path.exists():
                path.unlink()
        logger.info("Knowledge storage cleared")
