"""
AI prep cache - generated insights keyed by (document, language)

Entries never expire on their own; the whole cache is cleared when the
signed-in profile changes or when clear() is called.
"""
import hashlib
import json
import logging
import os
import threading
from typing import Any, Dict, Optional

from cvstudio.config import AI_CACHE_PATH

logger = logging.getLogger(__name__)


def _generate_cache_key(prefix: str, *args) -> str:
    """Generate a cache key from prefix and arguments"""
    key_string = f"{prefix}:{':'.join(str(arg) for arg in args)}"
    return hashlib.md5(key_string.encode()).hexdigest()


def prep_cache_key(document_id: str, language: str, variant: str = "full") -> str:
    return _generate_cache_key("prep", document_id, (language or "").lower(), variant)


class PrepCache:
    """
    JSON-file backed cache service.

    Args:
        path: File the cache is persisted to; created on first write
    """

    def __init__(self, path: str = AI_CACHE_PATH):
        self.path = path
        self._lock = threading.Lock()
        self._profile_id: Optional[str] = None
        self._entries: Dict[str, Any] = {}
        self._load()

    @property
    def profile_id(self) -> Optional[str]:
        return self._profile_id

    def __len__(self):
        return len(self._entries)

    def __contains__(self, key: str) -> bool:
        return key in self._entries

    def get(self, key: str) -> Optional[Any]:
        return self._entries.get(key)

    def put(self, key: str, value: Any) -> None:
        with self._lock:
            self._entries[key] = value
            self._write()

    def get_prep(self, document_id: str, language: str) -> Optional[Any]:
        return self.get(prep_cache_key(document_id, language))

    def put_prep(self, document_id: str, language: str, value: Any) -> None:
        self.put(prep_cache_key(document_id, language), value)

    def clear(self) -> None:
        with self._lock:
            count = len(self._entries)
            self._entries = {}
            self._write()
        logger.info("cache.cleared", extra={"entries": count})

    def bind_profile(self, profile_id: Optional[str]) -> bool:
        """
        Attach the cache to a profile.

        Returns True when the cache was cleared because the profile changed.
        """
        with self._lock:
            if profile_id == self._profile_id:
                return False
            previous = self._profile_id
            self._profile_id = profile_id
            changed = previous is not None or bool(self._entries)
            if changed:
                self._entries = {}
            self._write()
        if changed:
            logger.info("cache.profile_changed", extra={"previous": previous, "profile": profile_id})
        return changed

    def _load(self):
        if not os.path.exists(self.path):
            return
        try:
            with open(self.path, "r", encoding="utf-8") as f:
                stored = json.load(f)
        except (OSError, ValueError) as e:
            logger.warning("cache.load_failed", extra={"path": self.path, "error": str(e)})
            return
        if isinstance(stored, dict):
            self._profile_id = stored.get("profile")
            self._entries = stored.get("entries") or {}

    def _write(self):
        directory = os.path.dirname(self.path)
        if directory:
            os.makedirs(directory, exist_ok=True)
        tmp_path = f"{self.path}.tmp"
        with open(tmp_path, "w", encoding="utf-8") as f:
            json.dump({"profile": self._profile_id, "entries": self._entries}, f)
        os.replace(tmp_path, self.path)
