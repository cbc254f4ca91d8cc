"""JSON file tables: a list of row dicts per file, written atomically."""
import json
import logging
import os
import shutil
import tempfile
import threading
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Callable, Dict, List, Optional
from uuid import uuid4

logger = logging.getLogger(__name__)

_locks: Dict[str, threading.RLock] = {}
_locks_guard = threading.Lock()


class RepositoryError(Exception):
    """Raised when a data file cannot be written."""


def _lock_for(path: Path) -> threading.RLock:
    key = str(path.resolve())
    with _locks_guard:
        if key not in _locks:
            _locks[key] = threading.RLock()
        return _locks[key]


def now_iso() -> str:
    return datetime.now(timezone.utc).isoformat()


class JsonTable:
    def __init__(self, path: Path):
        self.path = Path(path)
        self._lock = _lock_for(self.path)

    def load(self) -> List[Dict[str, Any]]:
        """Read all rows; a missing or unreadable file reads as an empty table."""
        if not self.path.exists():
            return []
        try:
            with open(self.path, 'r', encoding='utf-8') as f:
                rows = json.load(f)
        except json.JSONDecodeError as e:
            logger.warning("Invalid JSON in %s: %s. Treating as empty.", self.path, e)
            return []
        except OSError as e:
            logger.error("Could not read %s: %s", self.path, e)
            return []
        if not isinstance(rows, list):
            logger.warning("Expected a list in %s, got %s. Treating as empty.", self.path, type(rows).__name__)
            return []
        return [r for r in rows if isinstance(r, dict)]

    def save(self, rows: List[Dict[str, Any]]) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        try:
            fd, tmp_path = tempfile.mkstemp(dir=str(self.path.parent), prefix=f".{self.path.stem}_", suffix=".json")
        except OSError as e:
            raise RepositoryError(f"Cannot write {self.path.name}: {e}") from e
        try:
            with os.fdopen(fd, 'w', encoding='utf-8') as tmp:
                json.dump(rows, tmp, indent=2, ensure_ascii=False)
            shutil.move(tmp_path, self.path)
        except OSError as e:
            raise RepositoryError(f"Cannot write {self.path.name}: {e}") from e
        finally:
            if os.path.exists(tmp_path):
                os.remove(tmp_path)

    # --- row helpers ---------------------------------------------------------
    def all(self) -> List[Dict[str, Any]]:
        with self._lock:
            return self.load()

    def get(self, row_id: str) -> Optional[Dict[str, Any]]:
        for row in self.all():
            if row.get('id') == row_id:
                return row
        return None

    def find(self, predicate: Callable[[Dict[str, Any]], bool]) -> List[Dict[str, Any]]:
        return [row for row in self.all() if predicate(row)]

    def insert(self, row: Dict[str, Any]) -> Dict[str, Any]:
        stamp = now_iso()
        new_row = dict(row)
        if not new_row.get('id'):
            new_row['id'] = uuid4().hex
        if not new_row.get('created_at'):
            new_row['created_at'] = stamp
        new_row['updated_at'] = stamp
        with self._lock:
            rows = self.load()
            rows.append(new_row)
            self.save(rows)
        return new_row

    def insert_many(self, rows: List[Dict[str, Any]]) -> List[Dict[str, Any]]:
        stamp = now_iso()
        new_rows = []
        for row in rows:
            new_row = dict(row)
            if not new_row.get('id'):
                new_row['id'] = uuid4().hex
            if not new_row.get('created_at'):
                new_row['created_at'] = stamp
            new_row['updated_at'] = stamp
            new_rows.append(new_row)
        if not new_rows:
            return []
        with self._lock:
            stored = self.load()
            stored.extend(new_rows)
            self.save(stored)
        return new_rows

    def update(self, row_id: str, changes: Dict[str, Any]) -> Optional[Dict[str, Any]]:
        '''Merge changes into one row; returns the updated row or None when the id is unknown.'''
        with self._lock:
            rows = self.load()
            for row in rows:
                if row.get('id') == row_id:
                    row.update({k: v for k, v in changes.items() if k not in ('id', 'created_at')})
                    row['updated_at'] = now_iso()
                    self.save(rows)
                    return row
        return None

    def delete(self, row_id: str) -> bool:
        return self.delete_where(lambda row: row.get('id') == row_id) > 0

    def delete_where(self, predicate: Callable[[Dict[str, Any]], bool]) -> int:
        with self._lock:
            rows = self.load()
            kept = [row for row in rows if not predicate(row)]
            removed = len(rows) - len(kept)
            if removed:
                self.save(kept)
        return removed
