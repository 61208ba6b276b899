"""
Owner-scoped document store for profiles and scripts.

Layout on disk (one JSON document per record):

    <base_dir>/<owner>/dnas/<id>.json        (owner and id percent-encoded)
    <base_dir>/<owner>/scripts/<id>.json
"""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Dict, List, Literal, Optional, Protocol, Type
from urllib.parse import quote

from scriptmimic.models import GeneratedScript, Record, StyleDNA

logger = logging.getLogger(__name__)

Kind = Literal["dnas", "scripts"]

RECORD_TYPES: Dict[str, Type[Record]] = {"dnas": StyleDNA, "scripts": GeneratedScript}


class ProfileStore(Protocol):
    def get(self, owner: str, kind: Kind, key: str) -> Optional[Record]: ...

    def put(self, owner: str, kind: Kind, record: Record) -> None: ...

    def delete(self, owner: str, kind: Kind, key: str) -> None: ...

    def list_all(self, owner: str, kind: Kind) -> List[Record]: ...


def encode_key(raw: str) -> str:
    """Reversible, filesystem-safe form of an owner key or record id."""
    if not raw:
        raise ValueError("owner keys and record ids must not be empty")
    # dots are escaped too so "." and ".." never name a real directory
    return quote(raw, safe="").replace(".", "%2E")


class JsonFileStore:
    """ProfileStore backed by plain JSON files."""

    def __init__(self, base_dir: str | Path = "scriptmimic_data"):
        self.base_dir = Path(base_dir)

    def _dir(self, owner: str, kind: Kind) -> Path:
        if kind not in RECORD_TYPES:
            raise ValueError(f"unknown record kind: {kind!r}")
        return self.base_dir / encode_key(owner) / kind

    def _path(self, owner: str, kind: Kind, key: str) -> Path:
        return self._dir(owner, kind) / f"{encode_key(key)}.json"

    def get(self, owner: str, kind: Kind, key: str) -> Optional[Record]:
        path = self._path(owner, kind, key)
        if not path.exists():
            return None
        return RECORD_TYPES[kind].model_validate_json(path.read_text(encoding="utf-8"))

    def put(self, owner: str, kind: Kind, record: Record) -> None:
        path = self._path(owner, kind, record.id)
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(json.dumps(record.to_document(), indent=2, ensure_ascii=False), encoding="utf-8")
        logger.info("Saved %s/%s to %s", kind, record.id, path)

    def delete(self, owner: str, kind: Kind, key: str) -> None:
        self._path(owner, kind, key).unlink(missing_ok=True)

    def list_all(self, owner: str, kind: Kind) -> List[Record]:
        folder = self._dir(owner, kind)
        if not folder.is_dir():
            return []
        model = RECORD_TYPES[kind]
        records = [model.model_validate_json(p.read_text(encoding="utf-8")) for p in folder.glob("*.json")]
        return sorted(records, key=lambda r: r.created_at, reverse=True)
