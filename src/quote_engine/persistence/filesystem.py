"""File-based persistence helpers for quote and invoice records."""

from __future__ import annotations

import json
import re
from pathlib import Path
from typing import Any

from ..config import settings

_UNSAFE_ID_CHARS = re.compile(r"[^A-Za-z0-9_.-]")


class FileStorage:
    """Thin wrapper around the data root storing one JSON document per record."""

    def __init__(self, root: Path | None = None) -> None:
        self.root = (root or settings.data_root).resolve()
        self.records_root = self.root / "records"
        self.records_root.mkdir(parents=True, exist_ok=True)

    def collection_path(self, collection: str) -> Path:
        path = self.records_root / collection
        path.mkdir(parents=True, exist_ok=True)
        return path

    def record_path(self, collection: str, record_id: str) -> Path:
        safe_id = _UNSAFE_ID_CHARS.sub("_", record_id)
        if not safe_id:
            raise ValueError("Record id must not be empty.")
        return self.collection_path(collection) / f"{safe_id}.json"

    def write_json(self, path: Path, data: Any, *, indent: int = 2) -> None:
        path.parent.mkdir(parents=True, exist_ok=True)
        with path.open("w", encoding="utf-8") as handle:
            json.dump(data, handle, ensure_ascii=False, indent=indent)

    def read_json(self, path: Path) -> Any:
        with path.open("r", encoding="utf-8") as handle:
            return json.load(handle)

    def write_record(self, collection: str, record_id: str, data: dict) -> Path:
        path = self.record_path(collection, record_id)
        self.write_json(path, data)
        return path

    def read_record(self, collection: str, record_id: str) -> dict | None:
        path = self.record_path(collection, record_id)
        if not path.exists():
            return None
        return self.read_json(path)

    def list_records(self, collection: str) -> list[dict]:
        return [self.read_json(path) for path in sorted(self.collection_path(collection).glob("*.json"))]
