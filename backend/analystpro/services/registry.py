# backend/analystpro/services/registry.py

import os
import json
from threading import RLock
from typing import Dict, Any, Optional

from loguru import logger

from ..core.config import settings

_lock = RLock()


class Registry:
    """
    JSON-file catalog of uploaded datasets (id -> {id, name, path}).

    Only file references live here; profiles and pivots are recomputed
    from the file on every request.
    """

    def __init__(self, reg_path: Optional[str] = None):
        self.reg_path = reg_path or settings.registry_path
        self.data = self._load()

    # ----------------------------------------------------
    # Internal Load / Save
    # ----------------------------------------------------
    def _load(self) -> Dict[str, Any]:
        if not os.path.exists(self.reg_path):
            return {"datasets": {}}

        try:
            with open(self.reg_path, "r", encoding="utf-8") as f:
                data = json.load(f)
        except (OSError, ValueError) as e:
            logger.warning(f"Registry at {self.reg_path} unreadable, starting empty: {e}")
            return {"datasets": {}}

        data.setdefault("datasets", {})
        return data

    def save(self):
        with _lock:
            tmp = self.reg_path + ".tmp"
            with open(tmp, "w", encoding="utf-8") as f:
                json.dump(self.data, f, indent=2)
            os.replace(tmp, self.reg_path)

    # ----------------------------------------------------
    # DATASET METHODS
    # ----------------------------------------------------
    def get_dataset(self, dataset_id: str) -> Optional[Dict[str, Any]]:
        return self.data["datasets"].get(dataset_id)

    def upsert_dataset(self, entry: Dict[str, Any]):
        if not {"id", "name", "path"}.issubset(entry):
            raise ValueError("Dataset entry must include id, name, path")

        self.data["datasets"][entry["id"]] = dict(entry)
        self.save()

    def delete_dataset(self, dataset_id: str) -> bool:
        if dataset_id in self.data["datasets"]:
            del self.data["datasets"][dataset_id]
            self.save()
            return True
        return False

    def list_datasets(self) -> Dict[str, Any]:
        """
        Return all registered datasets as a dict keyed by dataset_id.
        """
        return self.data.get("datasets", {})


# =============================================================
# GLOBAL REGISTRY INSTANCE
# =============================================================
registry = Registry()


# =============================================================
# Top-Level Helper Functions (used by routers & tests)
# =============================================================
def upsert_dataset(entry: Dict[str, Any]):
    return registry.upsert_dataset(entry)

def get_dataset(dataset_id: str):
    return registry.get_dataset(dataset_id)

def delete_dataset(dataset_id: str):
    return registry.delete_dataset(dataset_id)

def list_datasets():
    return registry.list_datasets()

def registry_path():
    return registry.reg_path
