"""
State stores for CogTrain bandits.

A bandit persists one JSON blob under its game's storage key. The store
only moves blobs around; validating them is the bandit's job.
"""

import json
import logging
from abc import ABC, abstractmethod
from pathlib import Path
from typing import Any, Dict, List, Optional, Union

logger = logging.getLogger(__name__)


class StateStore(ABC):
    """Key -> JSON blob store."""

    @abstractmethod
    def get(self, key: str) -> Optional[Any]:
        """Stored blob, or None when missing or unreadable."""

    @abstractmethod
    def set(self, key: str, blob: Dict[str, Any]) -> bool:
        """Store a blob. Returns True on success."""

    @abstractmethod
    def delete(self, key: str) -> bool:
        """Remove a blob. Returns True if something was removed."""

    @abstractmethod
    def keys(self) -> List[str]:
        """Keys currently stored."""


class InMemoryStore(StateStore):
    """
    Dict-backed store for tests and throwaway sessions.

    Blobs are round-tripped through JSON so they behave like persisted ones.
    """

    def __init__(self):
        self._blobs: Dict[str, str] = {}

    def get(self, key: str) -> Optional[Any]:
        raw = self._blobs.get(key)
        if raw is None:
            return None
        try:
            return json.loads(raw)
        except ValueError as e:
            logger.warning(f"[STORE] Unreadable blob {key}: {e}")
            return None

    def set(self, key: str, blob: Dict[str, Any]) -> bool:
        try:
            self._blobs[key] = json.dumps(blob)
            return True
        except (TypeError, ValueError) as e:
            logger.warning(f"[STORE] Failed to serialize {key}: {e}")
            return False

    def set_raw(self, key: str, raw: str) -> None:
        """Store text verbatim (lets tests plant corrupt blobs)."""
        self._blobs[key] = raw

    def delete(self, key: str) -> bool:
        return self._blobs.pop(key, None) is not None

    def keys(self) -> List[str]:
        return sorted(self._blobs)


class JsonFileStore(StateStore):
    """
    One `<key>.json` file per bandit under a directory.

    Storage structure:
        kb/bandits/cogtrain_bandit_memory_matching.json
        kb/bandits/cogtrain_bandit_reaction.json
        ...
    """

    def __init__(self, store_dir: Union[str, Path]):
        self.store_dir = Path(store_dir)

    def path_for(self, key: str) -> Path:
        return self.store_dir / f"{key}.json"

    def get(self, key: str) -> Optional[Any]:
        path = self.path_for(key)
        if not path.exists():
            return None
        try:
            with open(path, "r", encoding="utf-8") as f:
                return json.load(f)
        except Exception as e:
            logger.warning(f"[STORE] Unreadable state file {path}: {e}")
            return None

    def set(self, key: str, blob: Dict[str, Any]) -> bool:
        path = self.path_for(key)
        tmp_path = path.with_suffix(".json.tmp")
        try:
            self.store_dir.mkdir(parents=True, exist_ok=True)
            with open(tmp_path, "w", encoding="utf-8") as f:
                json.dump(blob, f, indent=2)
            tmp_path.replace(path)
            return True
        except Exception as e:
            logger.warning(f"[STORE] Failed to write {path}: {e}")
            return False

    def delete(self, key: str) -> bool:
        path = self.path_for(key)
        try:
            if path.exists():
                path.unlink()
                return True
        except Exception as e:
            logger.warning(f"[STORE] Failed to delete {path}: {e}")
        return False

    def keys(self) -> List[str]:
        if not self.store_dir.exists():
            return []
        return sorted(p.stem for p in self.store_dir.glob("*.json"))
