"""
Guest cart — one JSON list under one key of client-owned storage.

Every mutation reads the whole list and writes it back; there are no
partial updates.
"""

from __future__ import annotations

import json
import logging
from collections.abc import Iterable
from datetime import datetime
from typing import Any, Protocol

from kungfu import Result, Ok, Error

from oddwheels._errors import PersistenceFailure
from oddwheels._types import GUEST, LineId, OwnerRef, VariantId
from oddwheels.cart._types import GuestCartEntry, StoredLine

logger = logging.getLogger(__name__)


# ═══════════════════════════════════════════════════════════════════════════════
# Key-Value Storage
# ═══════════════════════════════════════════════════════════════════════════════


class KeyValueStorage(Protocol):
    def get_item(self, key: str) -> str | None: ...
    def set_item(self, key: str, value: str) -> None: ...
    def remove_item(self, key: str) -> None: ...


class MemoryStorage:
    """In-process KeyValueStorage. One instance per simulated browser."""

    def __init__(self) -> None:
        self._items: dict[str, str] = {}

    def get_item(self, key: str) -> str | None:
        return self._items.get(key)

    def set_item(self, key: str, value: str) -> None:
        self._items[key] = value

    def remove_item(self, key: str) -> None:
        self._items.pop(key, None)


# ═══════════════════════════════════════════════════════════════════════════════
# Encoding
# ═══════════════════════════════════════════════════════════════════════════════


def collapse(entries: Iterable[GuestCartEntry]) -> list[GuestCartEntry]:
    """Merge entries sharing a variant_id by summing qty. Earliest added_at wins."""
    by_variant: dict[str, GuestCartEntry] = {}
    for entry in entries:
        seen = by_variant.get(entry.variant_id)
        if seen is None:
            by_variant[entry.variant_id] = entry
            continue
        by_variant[entry.variant_id] = GuestCartEntry(
            variant_id=entry.variant_id,
            qty=seen.qty + entry.qty,
            added_at=min(seen.added_at, entry.added_at),
            protector_selected=seen.protector_selected or entry.protector_selected,
        )
    return sorted(by_variant.values(), key=lambda e: e.added_at)


def encode_entries(entries: Iterable[GuestCartEntry]) -> str:
    return json.dumps([
        {
            "variant_id": e.variant_id,
            "qty": e.qty,
            "added_at": e.added_at.isoformat(),
            "protector_selected": e.protector_selected,
        }
        for e in collapse(entries)
    ])


def _decode_entry(raw: Any) -> GuestCartEntry | None:
    if not isinstance(raw, dict):
        return None
    variant_id = str(raw.get("variant_id") or "").strip()
    try:
        qty = int(raw.get("qty") or 0)
    except (TypeError, ValueError):
        return None
    if not variant_id or qty <= 0:
        return None
    try:
        added_at = datetime.fromisoformat(str(raw.get("added_at")))
    except ValueError:
        added_at = datetime.now()
    return GuestCartEntry(
        variant_id=variant_id,
        qty=qty,
        added_at=added_at,
        protector_selected=bool(raw.get("protector_selected", False)),
    )


def decode_entries(payload: str | None) -> list[GuestCartEntry]:
    """Parse the stored list. Unreadable payloads decode as an empty cart."""
    if not payload:
        return []
    try:
        data = json.loads(payload)
    except json.JSONDecodeError:
        logger.warning("Discarding unreadable guest cart payload")
        return []
    if not isinstance(data, list):
        return []
    return collapse(e for e in map(_decode_entry, data) if e is not None)


# ═══════════════════════════════════════════════════════════════════════════════
# Local Backend
# ═══════════════════════════════════════════════════════════════════════════════


class LocalBackend:
    """
    CartBackend for guests.

    Note: line ids are variant ids, since a guest cart holds at most one
    entry per variant.
    """

    def __init__(self, storage: KeyValueStorage, key: str = "oddwheels:guest-cart") -> None:
        self._storage = storage
        self._key = key

    @property
    def owner(self) -> OwnerRef:
        return GUEST

    def _read(self) -> list[GuestCartEntry]:
        return decode_entries(self._storage.get_item(self._key))

    def _write(self, entries: list[GuestCartEntry]) -> None:
        self._storage.set_item(self._key, encode_entries(entries))

    async def entries(self) -> Result[list[GuestCartEntry], PersistenceFailure]:
        try:
            return Ok(self._read())
        except Exception as e:
            return Error(PersistenceFailure(f"Failed to read guest cart: {e}", e))

    async def load(self) -> Result[list[StoredLine], PersistenceFailure]:
        match await self.entries():
            case Ok(entries):
                return Ok([e.to_line() for e in entries])
            case Error(err):
                return Error(err)

    async def get(self, line_id: LineId) -> Result[StoredLine | None, PersistenceFailure]:
        return await self.find(line_id)

    async def find(self, variant_id: VariantId) -> Result[StoredLine | None, PersistenceFailure]:
        match await self.entries():
            case Ok(entries):
                for e in entries:
                    if e.variant_id == variant_id:
                        return Ok(e.to_line())
                return Ok(None)
            case Error(err):
                return Error(err)

    async def insert(
        self,
        variant_id: VariantId,
        qty: int,
        protector_selected: bool = False,
    ) -> Result[StoredLine, PersistenceFailure]:
        entry = GuestCartEntry(variant_id, qty, datetime.now(), protector_selected)
        try:
            entries = [e for e in self._read() if e.variant_id != variant_id]
            self._write([*entries, entry])
            return Ok(entry.to_line())
        except Exception as e:
            return Error(PersistenceFailure(f"Failed to add to guest cart: {e}", e))

    async def set_qty(self, line_id: LineId, qty: int) -> Result[None, PersistenceFailure]:
        return self._update(line_id, qty=qty)

    async def set_protector(
        self, line_id: LineId, selected: bool
    ) -> Result[None, PersistenceFailure]:
        return self._update(line_id, protector_selected=selected)

    def _update(
        self,
        line_id: LineId,
        qty: int | None = None,
        protector_selected: bool | None = None,
    ) -> Result[None, PersistenceFailure]:
        try:
            entries = [
                GuestCartEntry(
                    variant_id=e.variant_id,
                    qty=e.qty if qty is None else qty,
                    added_at=e.added_at,
                    protector_selected=(
                        e.protector_selected if protector_selected is None else protector_selected
                    ),
                )
                if e.variant_id == line_id
                else e
                for e in self._read()
            ]
            self._write(entries)
            return Ok(None)
        except Exception as e:
            return Error(PersistenceFailure(f"Failed to update guest cart: {e}", e))

    async def remove(self, line_ids: list[LineId]) -> Result[int, PersistenceFailure]:
        doomed = set(line_ids)
        try:
            entries = self._read()
            kept = [e for e in entries if e.variant_id not in doomed]
            self._write(kept)
            return Ok(len(entries) - len(kept))
        except Exception as e:
            return Error(PersistenceFailure(f"Failed to remove from guest cart: {e}", e))

    async def clear(self) -> Result[None, PersistenceFailure]:
        try:
            self._storage.remove_item(self._key)
            return Ok(None)
        except Exception as e:
            return Error(PersistenceFailure(f"Failed to clear guest cart: {e}", e))


__all__ = (
    "KeyValueStorage",
    "MemoryStorage",
    "collapse",
    "encode_entries",
    "decode_entries",
    "LocalBackend",
)
