"""Whole-structure JSON snapshots of a Sigel (optionally gzip-compressed)."""

from __future__ import annotations

import gzip
import logging
from pathlib import Path

import orjson

from sigmem.config import Config
from sigmem.exceptions import StorageError
from sigmem.sigel import Sigel
from sigmem.utils import json_dumps, json_loads

logger = logging.getLogger(__name__)


def is_compressed(path: Path | str) -> bool:
    return Path(path).name.endswith(".gz")


class SnapshotStore:
    """Load and save Sigel snapshots.

    Every save runs the numeric sanitation pass first, so the file on disk is
    always strict JSON that ``load`` can read back.
    """

    def __init__(self, config: Config | None = None) -> None:
        self.config = config or Config()

    def dumps(self, sigel: Sigel) -> bytes:
        sigel.sanitize()
        try:
            return json_dumps(sigel.to_dict(), indent=True)
        except (orjson.JSONEncodeError, TypeError) as exc:
            raise StorageError(f"Could not serialize sigel {sigel.name!r}: {exc}") from exc

    def loads(self, payload: bytes | str) -> Sigel:
        try:
            data = json_loads(payload)
        except orjson.JSONDecodeError as exc:
            raise StorageError(f"Invalid sigel snapshot: {exc}") from exc
        if not isinstance(data, dict):
            raise StorageError("Invalid sigel snapshot: top-level value must be an object")
        try:
            return Sigel.from_dict(data, config=self.config)
        except (KeyError, ValueError, TypeError, AttributeError) as exc:
            raise StorageError(f"Malformed sigel snapshot: {exc!r}") from exc

    def save(self, sigel: Sigel, path: Path | str) -> Path:
        path = Path(path)
        payload = self.dumps(sigel)
        try:
            path.parent.mkdir(parents=True, exist_ok=True)
            if is_compressed(path):
                with gzip.open(path, "wb") as fh:
                    fh.write(payload)
                logger.info(
                    "Compressed save of %s: %d -> %d bytes",
                    sigel.name, len(payload), path.stat().st_size,
                )
            else:
                path.write_bytes(payload)
        except OSError as exc:
            raise StorageError(f"Could not write {path}: {exc}") from exc
        return path

    def load(self, path: Path | str) -> Sigel:
        path = Path(path)
        try:
            if is_compressed(path):
                with gzip.open(path, "rb") as fh:
                    payload = fh.read()
            else:
                payload = path.read_bytes()
        except (OSError, EOFError) as exc:
            raise StorageError(f"Could not read {path}: {exc}") from exc
        return self.loads(payload)
