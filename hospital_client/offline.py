"""
Offline copy of server data.

The cache only serves reads while no backend is reachable.  Records are
merged last-write-wins per id using their ``updatedAt`` timestamp; a record
without a timestamp counts as older than any timestamped one.
"""
from __future__ import annotations

import json
import os
import tempfile
import threading
from datetime import datetime, timezone
from pathlib import Path
from typing import Iterable, Optional

EPOCH = datetime.min.replace(tzinfo=timezone.utc)


def _stamp(record: dict) -> datetime:
    raw = record.get('updatedAt')
    if not raw:
        return EPOCH
    try:
        ts = datetime.fromisoformat(str(raw).replace('Z', '+00:00'))
    except ValueError:
        return EPOCH
    return ts if ts.tzinfo else ts.replace(tzinfo=timezone.utc)


class OfflineCache:
    def __init__(self, path: Optional[os.PathLike] = None):
        default = Path(os.getenv('HOSPITAL_CACHE_FILE', Path.home() / '.hospital_client' / 'cache.json'))
        self.path = Path(path) if path else default
        self._lock = threading.Lock()
        self._data = self._load()

    def _load(self) -> dict:
        try:
            with open(self.path, encoding='utf-8') as f:
                data = json.load(f)
        except FileNotFoundError:
            return {}
        except (OSError, ValueError):
            # unreadable cache is as good as none
            return {}
        return data if isinstance(data, dict) else {}

    def _save(self) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        fd, tmp = tempfile.mkstemp(dir=self.path.parent, suffix='.tmp')
        with os.fdopen(fd, 'w', encoding='utf-8') as f:
            json.dump(self._data, f, default=str)
        os.replace(tmp, self.path)

    def merge(self, entity: str, records: Iterable[dict], key: str = 'id') -> int:
        """Merge ``records`` into ``entity``; returns how many entries changed."""
        changed = 0
        with self._lock:
            bucket = self._data.setdefault(entity, {})
            for record in records:
                rid = record.get(key)
                if rid is None:
                    continue
                current = bucket.get(str(rid))
                if current is None or _stamp(record) >= _stamp(current):
                    if current != record:
                        changed += 1
                    bucket[str(rid)] = record
            if changed:
                self._save()
        return changed

    def get(self, entity: str, rid: str) -> Optional[dict]:
        with self._lock:
            return self._data.get(entity, {}).get(str(rid))

    def all(self, entity: str) -> list[dict]:
        with self._lock:
            return list(self._data.get(entity, {}).values())

    def clear(self, entity: Optional[str] = None) -> None:
        with self._lock:
            if entity is None:
                self._data = {}
            else:
                self._data.pop(entity, None)
            self._save()
