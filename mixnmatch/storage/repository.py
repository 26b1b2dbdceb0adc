"""JSON-backed key-value store shared between processes through a named group."""

from __future__ import annotations

import asyncio
import json
import logging
import os
import tempfile
from dataclasses import dataclass, field
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Callable, Generic, TypeVar

from mixnmatch.errors import DecodeFailure, PersistenceError

logger = logging.getLogger(__name__)

SCHEMA_VERSION = 1

T = TypeVar("T")


def _utcnow() -> str:
    return datetime.now(timezone.utc).isoformat()


@dataclass(slots=True)
class SlotDocument:
    """Decoded contents of a slot."""

    schema_version: int
    records: list[Any] = field(default_factory=list)
    updated_at: str | None = None


@dataclass(slots=True)
class LoadResult(Generic[T]):
    """Decoded records plus a flag telling whether the slot needs rewriting."""

    records: list[T]
    needs_repair: bool = False


class SharedStore:
    """Manages one JSON file per named slot under ``<root>/<group>/``.

    Every write replaces the whole slot atomically (temp file + rename), so a
    reader in another process never sees a half-written document.
    """

    def __init__(self, root: Path, group: str) -> None:
        self._dir = root / group
        self._dir.mkdir(parents=True, exist_ok=True)
        self._locks: dict[str, asyncio.Lock] = {}

    @property
    def directory(self) -> Path:
        return self._dir

    def _slot_path(self, slot: str) -> Path:
        return self._dir / f"{slot}.json"

    def _lock_for(self, slot: str) -> asyncio.Lock:
        if slot not in self._locks:
            self._locks[slot] = asyncio.Lock()
        return self._locks[slot]

    async def read(self, slot: str) -> SlotDocument | None:
        """Return the slot document, ``None`` when the slot was never written.

        Raises :class:`DecodeFailure` when the file exists but is not a
        recognised document.
        """

        async with self._lock_for(slot):
            path = self._slot_path(slot)
            if not path.exists():
                return None
            try:
                body = await asyncio.to_thread(path.read_text, encoding="utf-8")
            except OSError as exc:
                raise PersistenceError(f"Could not read slot {slot!r}: {exc}") from exc
            return self._decode(slot, body)

    async def write(self, slot: str, records: list[Any]) -> None:
        """Replace the slot with ``records`` in the current envelope."""

        document = {
            "schema_version": SCHEMA_VERSION,
            "updated_at": _utcnow(),
            "records": records,
        }
        body = json.dumps(document, ensure_ascii=False, indent=2)
        async with self._lock_for(slot):
            try:
                await asyncio.to_thread(self._write_file, self._slot_path(slot), body)
            except OSError as exc:
                logger.error("Failed to persist slot %s: %s", slot, exc)
                raise PersistenceError(f"Could not write slot {slot!r}: {exc}") from exc

    async def quarantine(self, slot: str) -> Path | None:
        """Move an unreadable slot aside so its data is kept for inspection."""

        async with self._lock_for(slot):
            path = self._slot_path(slot)
            if not path.exists():
                return None
            stamp = datetime.now(timezone.utc).strftime("%Y%m%dT%H%M%S%f")
            target = self._dir / f"{slot}.corrupt-{stamp}.json"
            try:
                await asyncio.to_thread(os.replace, path, target)
            except OSError as exc:
                raise PersistenceError(f"Could not quarantine slot {slot!r}: {exc}") from exc
            logger.warning("Moved unreadable slot %s to %s", slot, target.name)
            return target

    @staticmethod
    def _decode(slot: str, body: str) -> SlotDocument:
        try:
            payload = json.loads(body)
        except json.JSONDecodeError as exc:
            raise DecodeFailure(f"Slot {slot!r} is not valid JSON: {exc}") from exc

        # Releases before the envelope stored a bare list.
        if isinstance(payload, list):
            return SlotDocument(schema_version=0, records=payload)

        if not isinstance(payload, dict) or not isinstance(payload.get("records"), list):
            raise DecodeFailure(f"Slot {slot!r} has no records list.")

        version = payload.get("schema_version")
        if not isinstance(version, int):
            raise DecodeFailure(f"Slot {slot!r} has an invalid schema version.")
        if version > SCHEMA_VERSION:
            logger.warning(
                "Slot %s was written with schema %s (current %s); reading best-effort.",
                slot,
                version,
                SCHEMA_VERSION,
            )
        return SlotDocument(
            schema_version=version,
            records=payload["records"],
            updated_at=payload.get("updated_at"),
        )

    @staticmethod
    def _write_file(path: Path, body: str) -> None:
        path.parent.mkdir(parents=True, exist_ok=True)
        fd, tmp_name = tempfile.mkstemp(dir=path.parent, prefix=f".{path.stem}-", suffix=".tmp")
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as handle:
                handle.write(body)
                handle.flush()
                os.fsync(handle.fileno())
            os.replace(tmp_name, path)
        except BaseException:
            Path(tmp_name).unlink(missing_ok=True)
            raise


async def load_records(
    store: SharedStore,
    slot: str,
    decode: Callable[[Any], T],
) -> list[T]:
    """Load and decode every record in ``slot``, repairing the slot if needed.

    A document that cannot be decoded at all is quarantined and an empty list
    returned. Records that fail ``decode`` are dropped and the remaining ones
    written back, as are documents from an older schema version.
    """

    try:
        document = await store.read(slot)
    except DecodeFailure as exc:
        logger.warning("Starting with empty %s: %s", slot, exc)
        await store.quarantine(slot)
        return []

    if document is None:
        return []

    result = _decode_records(slot, document, decode)
    if result.needs_repair:
        logger.info("Rewriting slot %s after read-repair (%d records kept).", slot, len(result.records))
        await store.write(slot, [_encode(record) for record in result.records])
    return result.records


def _decode_records(slot: str, document: SlotDocument, decode: Callable[[Any], T]) -> LoadResult[T]:
    records: list[T] = []
    dropped = 0
    for index, raw in enumerate(document.records):
        try:
            records.append(decode(raw))
        except (KeyError, TypeError, ValueError) as exc:
            dropped += 1
            logger.warning("Dropping malformed record %d in slot %s: %s", index, slot, exc)
    # Never downgrade a document written by a newer release.
    needs_repair = document.schema_version <= SCHEMA_VERSION and (
        dropped > 0 or document.schema_version < SCHEMA_VERSION
    )
    return LoadResult(records=records, needs_repair=needs_repair)


def _encode(record: Any) -> Any:
    to_record = getattr(record, "to_record", None)
    if callable(to_record):
        return to_record()
    return record
