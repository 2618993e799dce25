import json
import logging
import os
import stat
import tempfile
import threading
from contextlib import nullcontext
from pathlib import Path
from typing import Dict, List

logger = logging.getLogger(__name__)

# resolved ledger path -> lock shared by every OrderLedger on that file
_path_locks: Dict[str, threading.Lock] = {}
_path_locks_guard = threading.Lock()


def _lock_for(path: Path) -> threading.Lock:
    key = str(path.resolve())
    with _path_locks_guard:
        if key not in _path_locks:
            _path_locks[key] = threading.Lock()
        return _path_locks[key]


class LedgerWriteError(Exception):
    pass


class OrderLedger:
    """Append-only list of orders stored as one JSON array in a file.

    A missing, empty, unreadable or corrupt file reads as an empty ledger.
    Corrupt content is overwritten by the next successful append.
    """

    def __init__(self, path, lock: bool = True):
        self.path = Path(path)
        self._lock = _lock_for(self.path) if lock else nullcontext()

    def read(self) -> List:
        try:
            text = self.path.read_text(encoding="utf-8")
        except FileNotFoundError:
            return []
        except UnicodeDecodeError as e:
            logger.warning("Ledger %s is not valid UTF-8, starting from an empty list: %s", self.path, e)
            return []
        except OSError as e:
            logger.warning("Could not read ledger %s, treating it as empty: %s", self.path, e)
            return []

        if not text.strip():
            return []

        try:
            data = json.loads(text)
        except json.JSONDecodeError as e:
            logger.warning("Ledger %s is not valid JSON, starting from an empty list: %s", self.path, e)
            return []

        if not isinstance(data, list):
            logger.warning(
                "Ledger %s holds a %s instead of a list, starting from an empty list",
                self.path, type(data).__name__,
            )
            return []
        return data

    def append(self, order: Dict) -> int:
        """Add one order and rewrite the file. Returns the new ledger size."""
        with self._lock:
            orders = self.read()
            orders.append(order)
            try:
                self._write(orders)
            except OSError as e:
                raise LedgerWriteError(f"could not write {self.path}: {e}") from e
            return len(orders)

    def _write(self, orders: List):
        directory = self.path.parent
        fd, tmp = tempfile.mkstemp(dir=str(directory), prefix=f".{self.path.name}.", suffix=".tmp")
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                json.dump(orders, f, indent=2, ensure_ascii=False)
            if self.path.is_file():
                os.chmod(tmp, stat.S_IMODE(self.path.stat().st_mode))
            os.replace(tmp, self.path)
        finally:
            if os.path.exists(tmp):
                os.remove(tmp)
