import json
import os

import config
from core import PersistenceError
from app_logging import logging

logger = logging.getLogger(__name__)


class SnapshotStore:
    """Flat set of named integers kept in a JSON file."""

    def __init__(self, path=config.STATE_FILE, keys=config.SNAPSHOT_KEYS):
        self.path = path
        self.keys = keys

    def load(self):
        """
        Returns the stored integers, or None when there is nothing usable.

        A file that cannot be read or parsed is treated the same as no file.
        Keys that are missing or not integers are left out, so the caller
        falls back to its defaults for them.
        """
        if not os.path.exists(self.path):
            return None

        try:
            with open(self.path, 'r', encoding='utf-8') as f:
                data = json.load(f)
        except (OSError, ValueError) as e:
            logger.warning("Snapshot load error (%s): %s", self.path, e)
            return None

        if not isinstance(data, dict):
            logger.warning("Snapshot in %s is not an object, ignoring it", self.path)
            return None

        values = {}
        for key in self.keys:
            value = data.get(key)
            # bool is an int subclass, a stored true/false is not a counter
            if isinstance(value, int) and not isinstance(value, bool):
                values[key] = value
            elif key in data:
                logger.warning("Ignoring snapshot key %s with value %r", key, value)

        return values or None

    def save(self, values):
        """Writes all keys together. Raises PersistenceError, no retry."""
        missing = [key for key in self.keys if key not in values]
        if missing:
            raise PersistenceError(f"Snapshot is missing keys: {', '.join(missing)}")

        data = {key: int(values[key]) for key in self.keys}
        tmp_path = self.path + '.tmp'
        try:
            directory = os.path.dirname(self.path)
            if directory:
                os.makedirs(directory, exist_ok=True)
            with open(tmp_path, 'w', encoding='utf-8') as f:
                json.dump(data, f, indent=2)
            os.replace(tmp_path, self.path)
        except OSError as e:
            raise PersistenceError(f"Could not save snapshot to '{self.path}': {e}") from e

        logger.debug("Saved snapshot to %s: %s", self.path, data)

    def clear(self):
        """Removes every stored key."""
        try:
            os.remove(self.path)
        except FileNotFoundError:
            return
        except OSError as e:
            raise PersistenceError(f"Could not clear snapshot '{self.path}': {e}") from e
        logger.debug("Cleared snapshot %s", self.path)
