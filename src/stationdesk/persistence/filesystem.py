"""File-based key-value slots for the local store."""

from __future__ import annotations

import json
import os
from pathlib import Path
from typing import Any

from ..config import settings


class FileStorage:
    """Thin wrapper around the data root where each slot is one JSON file."""

    def __init__(self, root: Path | None = None) -> None:
        self.root = (root or settings.data_root).resolve()
        self.slot_root = self.root / "slots"
        self.slot_root.mkdir(parents=True, exist_ok=True)

    def slot_path(self, key: str) -> Path:
        return self.slot_root / f"{key}.json"

    def read_json(self, key: str, default: Any) -> Any:
        path = self.slot_path(key)
        if not path.exists():
            return default
        with path.open("r", encoding="utf-8") as handle:
            return json.load(handle)

    def write_json(self, key: str, data: Any, *, indent: int = 2) -> None:
        path = self.slot_path(key)
        tmp_path = path.with_suffix(".json.tmp")
        with tmp_path.open("w", encoding="utf-8") as handle:
            json.dump(data, handle, ensure_ascii=False, indent=indent)
        os.replace(tmp_path, path)
