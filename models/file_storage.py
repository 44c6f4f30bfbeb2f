"""
JSON file storage engine: one `<collection>.json` file per collection.

A missing file is an empty collection. A corrupt file is logged, moved aside
to `<collection>.json.corrupt` and treated as empty, so the catalog can
still start without the next save overwriting it.
"""
import json
import logging
import os
from pathlib import Path

from models.errors import StorageError

logger = logging.getLogger(__name__)


class FileStorage:
    __data_dir = None

    def __init__(self, data_dir="data"):
        self.__data_dir = Path(data_dir)

    def __str__(self) -> str:
        return f"file:{self.__data_dir}"

    def reload(self):
        """Make sure the data directory exists"""
        try:
            self.__data_dir.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            raise StorageError(f"Cannot create data directory {self.__data_dir}: {e}") from e

    def path_for(self, collection: str) -> Path:
        return self.__data_dir / f"{collection}.json"

    def save(self, collection: str, records: list):
        """Write the whole collection, replacing the previous file atomically"""
        path = self.path_for(collection)
        tmp_path = path.with_suffix(".json.tmp")
        try:
            self.__data_dir.mkdir(parents=True, exist_ok=True)
            with open(tmp_path, "w", encoding="utf-8") as fh:
                json.dump(records, fh, ensure_ascii=False, indent=2)
            os.replace(tmp_path, path)
        except (OSError, TypeError, ValueError) as e:
            tmp_path.unlink(missing_ok=True)
            raise StorageError(f"Cannot save {collection} to {path}: {e}") from e
        logger.debug("Saved %d %s record(s) to %s", len(records), collection, path)

    def load(self, collection: str) -> list:
        """Read a collection; missing or unreadable files yield an empty list"""
        path = self.path_for(collection)
        if not path.exists():
            logger.info("No %s file at %s, starting with an empty collection", collection, path)
            return []
        try:
            with open(path, encoding="utf-8") as fh:
                records = json.load(fh)
        except ValueError as e:
            logger.error("Cannot parse %s from %s: %s; starting with an empty collection", collection, path, e)
            self._set_aside(path)
            return []
        except OSError as e:
            logger.error("Cannot read %s from %s: %s; starting with an empty collection", collection, path, e)
            return []
        if not isinstance(records, list):
            logger.error("%s does not contain a list of records; starting with an empty collection", path)
            self._set_aside(path)
            return []
        logger.debug("Loaded %d %s record(s) from %s", len(records), collection, path)
        return records

    def _set_aside(self, path: Path):
        """Keep a corrupt file around as <name>.json.corrupt for manual recovery"""
        target = path.with_suffix(".json.corrupt")
        try:
            os.replace(path, target)
        except OSError as e:
            raise StorageError(f"Cannot move corrupt file {path} aside: {e}") from e
        logger.warning("Moved corrupt file %s to %s", path, target)

    def close(self):
        """Nothing to release for plain files"""
