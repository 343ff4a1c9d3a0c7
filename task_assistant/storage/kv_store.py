"""
Key-value store - JSON file persistence for small application state
"""

import json
import os
import tempfile
from pathlib import Path
from typing import Any, Dict, Optional, Union

from task_assistant.utils.exceptions import MalformedStateError, PersistenceError
from task_assistant.utils.logger import get_logger

logger = get_logger(__name__)


class JsonKeyValueStore:
    """
    Durable key-value storage backed by a single JSON object on disk.

    Each set() rewrites the whole file through a temporary file and an atomic
    rename, so readers never see a half-written document.
    """

    def __init__(self, file_path: Union[str, Path]):
        self.file_path = Path(file_path)

    def _read_all(self) -> Dict[str, Any]:
        if not self.file_path.exists():
            return {}

        try:
            data = json.loads(self.file_path.read_text(encoding="utf-8"))
        except (OSError, UnicodeDecodeError, json.JSONDecodeError) as e:
            raise MalformedStateError(f"Cannot parse {self.file_path}: {e}")

        if not isinstance(data, dict):
            raise MalformedStateError(f"{self.file_path} does not hold a JSON object", actual_value=type(data).__name__)
        return data

    def _write_all(self, data: Dict[str, Any]) -> None:
        try:
            self.file_path.parent.mkdir(parents=True, exist_ok=True)
            fd, tmp_name = tempfile.mkstemp(dir=self.file_path.parent, prefix=".kv-", suffix=".json")
        except OSError as e:
            raise PersistenceError(str(self.file_path), "write failed", original_error=e)

        try:
            with os.fdopen(fd, "w", encoding="utf-8") as tmp:
                json.dump(data, tmp, indent=2)
            os.replace(tmp_name, self.file_path)
        except (OSError, TypeError, ValueError) as e:
            Path(tmp_name).unlink(missing_ok=True)
            raise PersistenceError(str(self.file_path), "write failed", original_error=e)

    def get(self, key: str, default: Optional[Any] = None) -> Any:
        """
        Return the value stored under key.

        Raises:
            MalformedStateError: If the backing file is not a JSON object
        """
        return self._read_all().get(key, default)

    def set(self, key: str, value: Any) -> None:
        """Store value under key, replacing a corrupt file if necessary."""
        try:
            data = self._read_all()
        except MalformedStateError as e:
            logger.warning(f"[STORE] Discarding unreadable store before write: {e.message}")
            data = {}

        data[key] = value
        self._write_all(data)
