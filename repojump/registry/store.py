"""Snapshot-file registry store.

The whole registry is persisted as one binary snapshot::

    +--------+-----------------+---------------------------+
    | "RJDB" | version (u32 BE)| UTF-8 JSON array of repos |
    +--------+-----------------+---------------------------+

A snapshot is read wholesale at process start and replaced wholesale at
process end by writing a sibling temp file and renaming it over the target.
"""

from __future__ import annotations

import json
import math
import os
import struct
import tempfile
from pathlib import Path

from loguru import logger

from repojump.errors import DataCorruptError, SaveFailedError, UnsupportedVersionError
from repojump.registry.models import Registry, RepoRecord

MAGIC = b"RJDB"
VERSION = 1
HEADER = struct.Struct(">4sI")

# Refuse to decode anything larger; a registry is bounded by one user's clones.
MAX_SIZE = 32 << 20


class RegistryStore:
    """Loads and persists the registry snapshot of one workspace."""

    SNAPSHOT_FILE = "database"
    LOCK_FILE = "database.lock"

    def __init__(self, data_dir: str | Path):
        self.data_dir = Path(data_dir)
        self.snapshot_path = self.data_dir / self.SNAPSHOT_FILE
        self.lock_path = self.data_dir / self.LOCK_FILE

    def load(self) -> Registry:
        """Read the snapshot. A missing file is an empty registry."""
        try:
            data = self.snapshot_path.read_bytes()
        except FileNotFoundError:
            logger.debug(f"No snapshot at {self.snapshot_path}, starting empty")
            return Registry()
        except OSError as exc:
            raise DataCorruptError(f"could not read snapshot {self.snapshot_path}: {exc}") from exc

        registry = decode_snapshot(data)
        logger.debug(f"Loaded {len(registry)} repositories from {self.snapshot_path}")
        return registry

    def save(self, registry: Registry) -> None:
        """Atomically replace the snapshot with ``registry``."""
        payload = encode_snapshot(registry)
        tmp_path = ""
        try:
            self.data_dir.mkdir(parents=True, exist_ok=True)
            fd, tmp_path = tempfile.mkstemp(prefix="tmp_", dir=self.data_dir)
            with os.fdopen(fd, "wb") as f:
                f.write(payload)
                f.flush()
                os.fsync(f.fileno())
            os.replace(tmp_path, self.snapshot_path)
        except OSError as exc:
            if tmp_path:
                try:
                    os.unlink(tmp_path)
                except OSError:
                    pass
            raise SaveFailedError(
                f"could not write snapshot {self.snapshot_path}: {exc}"
            ) from exc

        logger.debug(f"Saved {len(registry)} repositories to {self.snapshot_path}")


# ---------------------------------------------------------------------------
# Codec
# ---------------------------------------------------------------------------


def encode_snapshot(registry: Registry) -> bytes:
    records = sorted(registry.records.values(), key=lambda r: r.key)
    body = json.dumps(
        [_record_to_dict(r) for r in records],
        separators=(",", ":"),
        allow_nan=False,
    ).encode("utf-8")
    return HEADER.pack(MAGIC, VERSION) + body


def decode_snapshot(data: bytes) -> Registry:
    if len(data) > MAX_SIZE:
        raise DataCorruptError(f"snapshot is larger than {MAX_SIZE} bytes")
    if len(data) < HEADER.size:
        raise DataCorruptError("could not decode snapshot: truncated header")

    magic, version = HEADER.unpack_from(data)
    if magic != MAGIC:
        raise DataCorruptError("could not decode snapshot: bad magic bytes")
    if version != VERSION:
        raise UnsupportedVersionError(version, VERSION)

    try:
        items = json.loads(data[HEADER.size:].decode("utf-8"))
    except (UnicodeDecodeError, ValueError, RecursionError) as exc:
        raise DataCorruptError(f"could not decode snapshot body: {exc}") from exc
    if not isinstance(items, list):
        raise DataCorruptError("could not decode snapshot body: expected a list")

    registry = Registry()
    for item in items:
        record = _dict_to_record(item)
        if record.key in registry:
            raise DataCorruptError(f"duplicate repository {record.display_key} in snapshot")
        registry.add(record)
    return registry


def _record_to_dict(record: RepoRecord) -> dict:
    return {
        "remote": record.remote,
        "name": record.name,
        "path": record.path,
        "score": record.score,
        "accessed": record.accessed,
        "last_accessed": record.last_accessed,
    }


def _dict_to_record(data: object) -> RepoRecord:
    if not isinstance(data, dict):
        raise DataCorruptError("could not decode repository entry: expected an object")
    for field in ("accessed", "last_accessed"):
        if not _is_int(data.get(field)):
            raise DataCorruptError(f"could not decode repository entry: {field} must be an integer")
    if not _is_number(data.get("score")):
        raise DataCorruptError("could not decode repository entry: score must be a number")
    try:
        record = RepoRecord(
            remote=data["remote"],
            name=data["name"],
            path=data.get("path", ""),
            score=float(data["score"]),
            accessed=int(data["accessed"]),
            last_accessed=int(data["last_accessed"]),
        )
    except (KeyError, TypeError, ValueError, OverflowError) as exc:
        raise DataCorruptError(f"could not decode repository entry: {exc}") from exc

    if not isinstance(record.remote, str) or not isinstance(record.name, str):
        raise DataCorruptError("could not decode repository entry: bad identity")
    if not isinstance(record.path, str):
        raise DataCorruptError(f"could not decode repository entry {record.display_key}: bad path")
    if not math.isfinite(record.score) or record.score < 0:
        raise DataCorruptError(f"repository {record.display_key} has invalid score {record.score}")
    return record


def _is_int(value: object) -> bool:
    return isinstance(value, int) and not isinstance(value, bool)


def _is_number(value: object) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)
