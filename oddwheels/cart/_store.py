"""
Cart store — one shopper session's cart.

Every quantity is re-clamped against live stock on each mutation and on
each reload. Stock is never reserved here: two shoppers can both hold the
last unit, and the order-approval step settles who gets it.
"""

from __future__ import annotations

import asyncio
import logging
import uuid
from collections.abc import Callable
from datetime import timedelta

from kungfu import Result, Ok, Error

from oddwheels._errors import (
    CartError,
    LineNotFound,
    MergeTimeout,
    OutOfStock,
    PersistenceFailure,
)
from oddwheels._types import LineId, OwnerRef, VariantId, is_guest
from oddwheels.cart._backend import CartBackend
from oddwheels.cart._events import CartChanged, CartEvents
from oddwheels.cart._flight import SingleFlight
from oddwheels.cart._types import (
    AddResult,
    CartLine,
    CartState,
    MergedLine,
    MergeReport,
    StoredLine,
)
from oddwheels.inventory import Inventory, StockChanged, StockFeed, Variant
from oddwheels.pricing import is_protector_eligible

logger = logging.getLogger(__name__)

type RemoteFactory = Callable[[str], CartBackend]
type MergeFlight = SingleFlight[Result[MergeReport, CartError]]


def clamp_qty(desired: int, available: int) -> int:
    """Quantity a line may hold: at least 1, at most what is in stock."""
    return max(1, min(desired, available))


class CartStore:
    """
    Cart for one shopper session.

    Note: Mutations are serialized by an internal lock, so interleaved
    add / update / merge calls cannot corrupt quantities.

    Example:
        store = CartStore(inventory, LocalBackend(storage), remote=lambda uid: RemoteBackend(sf, uid))

        match await store.add("v-1", 2):
            case Ok(added) if added.capped:
                notify("Maximum available added")
            case Error(OutOfStock()):
                notify("Item sold out")

        await store.sign_in("user-1")   # merges the guest cart once
    """

    def __init__(
        self,
        inventory: Inventory,
        guest: CartBackend,
        remote: RemoteFactory,
        *,
        events: CartEvents | None = None,
        stock_feed: StockFeed | None = None,
        merge_flight: MergeFlight | None = None,
        merge_timeout: timedelta | None = timedelta(seconds=15),
        instance_id: str | None = None,
    ) -> None:
        self._inventory = inventory
        self._guest = guest
        self._remote = remote
        self._events = events
        self._merge_flight: MergeFlight = merge_flight if merge_flight is not None else SingleFlight()
        self._merge_timeout = merge_timeout
        self.instance_id = instance_id or f"cart-{uuid.uuid4().hex[:10]}"

        self._state = CartState.GUEST
        self._backend: CartBackend = guest
        self._lines: list[CartLine] = []
        self._lock = asyncio.Lock()

        self._unsubscribe: list[Callable[[], None]] = []
        if events is not None:
            self._unsubscribe.append(events.subscribe(self._on_cart_changed, key=self.instance_id))
        if stock_feed is not None:
            self._unsubscribe.append(stock_feed.subscribe(self._on_stock_changed))

    # ═══════════════════════════════════════════════════════════════════════════
    # Session
    # ═══════════════════════════════════════════════════════════════════════════

    @property
    def state(self) -> CartState:
        return self._state

    @property
    def owner(self) -> OwnerRef:
        return self._backend.owner

    @property
    def is_logged_in(self) -> bool:
        return self._state is CartState.AUTHENTICATED

    @property
    def lines(self) -> list[CartLine]:
        """Lines as of the last reload."""
        return list(self._lines)

    @property
    def backend(self) -> CartBackend:
        return self._backend

    async def sign_in(self, owner: OwnerRef) -> Result[MergeReport, CartError]:
        """
        GUEST → MERGING → AUTHENTICATED.

        The guest cart is merged exactly once per transition; signing in
        again as the same owner is a no-op.
        """
        if is_guest(owner):
            raise ValueError("sign_in needs an authenticated owner")
        if self._state is not CartState.GUEST and self.owner == owner:
            return Ok(MergeReport())

        # mutations already queued finish against the backend they started on
        async with self._lock:
            self._state = CartState.MERGING
            self._backend = self._remote(owner)
        merge = await self.merge_guest_cart_to_user()
        self._state = CartState.AUTHENTICATED

        match await self.reload():
            case Error(err):
                logger.warning("Cart reload after sign-in failed: %s", err.message)
        return merge

    async def sign_out(self) -> Result[list[CartLine], CartError]:
        async with self._lock:
            self._state = CartState.GUEST
            self._backend = self._guest
            return await self._reload_locked()

    def close(self) -> None:
        """Stop listening for cart and stock changes."""
        for unsubscribe in self._unsubscribe:
            unsubscribe()
        self._unsubscribe.clear()

    # ═══════════════════════════════════════════════════════════════════════════
    # Mutations
    # ═══════════════════════════════════════════════════════════════════════════

    async def add(self, variant_id: VariantId, qty: int = 1) -> Result[AddResult, CartError]:
        """Add qty of a variant, incrementing its existing line if any."""
        if qty < 1:
            raise ValueError(f"qty must be at least 1, got {qty}")

        async with self._lock:
            match await self._inventory.get_variant(variant_id):
                case Error(err):
                    return Error(err)
                case Ok(variant):
                    pass

            available = variant.available if variant is not None else 0
            if available <= 0:
                return Error(OutOfStock(variant_id, available))

            match await self._backend.find(variant_id):
                case Error(err):
                    return Error(err)
                case Ok(existing):
                    pass

            prev_qty = existing.qty if existing is not None else 0
            desired = prev_qty + qty
            next_qty = clamp_qty(desired, available)

            if existing is not None:
                if next_qty != prev_qty:
                    match await self._backend.set_qty(existing.id, next_qty):
                        case Error(err):
                            return Error(err)
            else:
                match await self._backend.insert(variant_id, next_qty):
                    case Error(err):
                        return Error(err)

            await self._refresh()

        self._announce()
        return Ok(AddResult(
            available=available,
            desired_qty=desired,
            next_qty=next_qty,
            prev_qty=prev_qty,
            capped=desired > available,
        ))

    async def update_qty(self, line_id: LineId, qty: int) -> Result[int, CartError]:
        """
        Set a line's quantity, clamped to live stock.

        Returns the stored quantity, or 0 when the variant vanished or sold
        out and the line was dropped.
        """
        async with self._lock:
            match await self._backend.get(line_id):
                case Error(err):
                    return Error(err)
                case Ok(None):
                    return Error(LineNotFound(line_id))
                case Ok(line):
                    pass

            match await self._inventory.get_variant(line.variant_id):
                case Error(err):
                    return Error(err)
                case Ok(variant):
                    pass

            if variant is None or variant.available <= 0:
                match await self._backend.remove([line.id]):
                    case Error(err):
                        return Error(err)
                next_qty = 0
            else:
                next_qty = clamp_qty(qty, variant.available)
                match await self._backend.set_qty(line.id, next_qty):
                    case Error(err):
                        return Error(err)

            await self._refresh()

        self._announce()
        return Ok(next_qty)

    async def set_protector(self, line_id: LineId, selected: bool) -> Result[bool, CartError]:
        """Toggle the protector add-on. Ineligible ship classes always store False."""
        async with self._lock:
            match await self._backend.get(line_id):
                case Error(err):
                    return Error(err)
                case Ok(None):
                    return Error(LineNotFound(line_id))
                case Ok(line):
                    pass

            match await self._inventory.get_variant(line.variant_id):
                case Error(err):
                    return Error(err)
                case Ok(variant):
                    pass

            stored = selected and variant is not None and is_protector_eligible(variant.ship_class)
            match await self._backend.set_protector(line.id, stored):
                case Error(err):
                    return Error(err)

            await self._refresh()

        self._announce()
        return Ok(stored)

    async def remove(self, line_id: LineId) -> Result[None, CartError]:
        async with self._lock:
            match await self._backend.remove([line_id]):
                case Error(err):
                    return Error(err)
            await self._refresh()

        self._announce()
        return Ok(None)

    # ═══════════════════════════════════════════════════════════════════════════
    # Reload
    # ═══════════════════════════════════════════════════════════════════════════

    async def reload(self) -> Result[list[CartLine], CartError]:
        """
        Re-read the backend and validate every line against live stock.

        Lines whose variant vanished or sold out are dropped; lines above
        stock are clamped. Corrections are written back.
        """
        async with self._lock:
            return await self._reload_locked()

    async def _refresh(self) -> None:
        match await self._reload_locked():
            case Error(err):
                logger.warning("Cart reload failed for %s: %s", self.owner, err.message)

    async def _reload_locked(self) -> Result[list[CartLine], CartError]:
        backend = self._backend
        match await backend.load():
            case Error(err):
                return Error(err)
            case Ok(stored):
                pass

        match await self._inventory.get_variants([s.variant_id for s in stored]):
            case Error(err):
                return Error(err)
            case Ok(variants):
                pass

        lines, stale, clamped = _validate(backend.owner, stored, variants)

        if stale:
            logger.info("Dropping %d stale cart line(s) for %s", len(stale), backend.owner)
            match await backend.remove(stale):
                case Error(err):
                    return Error(err)
        for line in clamped:
            match await backend.set_qty(line.id, line.qty):
                case Error(err):
                    return Error(err)

        if backend is self._backend:
            self._lines = lines
        return Ok(lines)

    # ═══════════════════════════════════════════════════════════════════════════
    # Merge
    # ═══════════════════════════════════════════════════════════════════════════

    async def merge_guest_cart_to_user(self) -> Result[MergeReport, CartError]:
        """
        Move the guest cart into the signed-in owner's server cart.

        Concurrent calls share one in-flight merge. Once the guest store
        is cleared, calling again performs zero upserts.
        """
        if self._backend is self._guest:
            raise ValueError("merge needs a signed-in owner")

        target = self._backend
        try:
            return await self._merge_flight.run(
                lambda: self._merge_into(target),
                self._merge_timeout,
            )
        except TimeoutError:
            seconds = self._merge_timeout.total_seconds() if self._merge_timeout else 0.0
            logger.warning("Guest cart merge into %s timed out", target.owner)
            return Error(MergeTimeout(seconds))

    async def _merge_into(self, target: CartBackend) -> Result[MergeReport, CartError]:
        async with self._lock:
            match await self._guest.load():
                case Error(err):
                    return Error(err)
                case Ok(entries):
                    pass

            if not entries:
                return Ok(MergeReport())

            match await self._inventory.get_variants([e.variant_id for e in entries]):
                case Error(err):
                    return Error(err)
                case Ok(variants):
                    pass

            merged: list[MergedLine] = []
            skipped: list[str] = []
            failed: list[tuple[str, PersistenceFailure]] = []

            for entry in entries:
                variant = variants.get(entry.variant_id)
                if variant is None or variant.available <= 0:
                    skipped.append(entry.variant_id)
                    continue
                match await _merge_entry(target, entry, variant):
                    case Ok(line):
                        merged.append(line)
                    case Error(err):
                        logger.warning(
                            "Merging %s into %s failed: %s",
                            entry.variant_id, target.owner, err.message,
                        )
                        failed.append((entry.variant_id, err))

            # the guest store is only touched once every entry has settled;
            # guest line ids are variant ids
            if failed:
                consumed = [*skipped, *(m.variant_id for m in merged)]
                cleared = await self._guest.remove(consumed)
            else:
                cleared = await self._guest.clear()
            match cleared:
                case Error(err):
                    return Error(err)

        report = MergeReport(tuple(merged), tuple(skipped), tuple(failed))
        logger.info(
            "Merged guest cart into %s: %d upserted, %d skipped, %d failed",
            target.owner, report.upserts, len(skipped), len(failed),
        )
        if merged and self._events is not None:
            self._events.changed(self.instance_id, target.owner)
        return Ok(report)

    # ═══════════════════════════════════════════════════════════════════════════
    # Listeners
    # ═══════════════════════════════════════════════════════════════════════════

    def _announce(self) -> None:
        if self._events is not None:
            self._events.changed(self.instance_id, self.owner)

    async def _on_cart_changed(self, event: CartChanged) -> None:
        if event.owner != self.owner:
            return
        await self.reload()

    async def _on_stock_changed(self, event: StockChanged) -> None:
        if any(line.variant_id == event.variant_id for line in self._lines):
            await self.reload()


# ═══════════════════════════════════════════════════════════════════════════════
# Helpers
# ═══════════════════════════════════════════════════════════════════════════════


def _validate(
    owner: OwnerRef,
    stored: list[StoredLine],
    variants: dict[str, Variant],
) -> tuple[list[CartLine], list[str], list[CartLine]]:
    """Join stored lines to live variants. Returns (lines, stale ids, clamped lines)."""
    lines: list[CartLine] = []
    stale: list[str] = []
    clamped: list[CartLine] = []

    for s in stored:
        variant = variants.get(s.variant_id)
        if variant is None or variant.available <= 0:
            stale.append(s.id)
            continue
        qty = clamp_qty(s.qty, variant.available)
        line = CartLine(
            id=s.id,
            owner=owner,
            variant=variant,
            qty=qty,
            protector_selected=s.protector_selected,
        )
        if qty != s.qty:
            clamped.append(line)
        lines.append(line)

    return lines, stale, clamped


async def _merge_entry(
    target: CartBackend,
    entry: StoredLine,
    variant: Variant,
) -> Result[MergedLine, PersistenceFailure]:
    match await target.find(entry.variant_id):
        case Error(err):
            return Error(err)
        case Ok(existing):
            pass

    prev_qty = existing.qty if existing is not None else 0
    next_qty = clamp_qty(prev_qty + entry.qty, variant.available)

    if existing is None:
        match await target.insert(entry.variant_id, next_qty, entry.protector_selected):
            case Error(err):
                return Error(err)
    else:
        if next_qty != prev_qty:
            match await target.set_qty(existing.id, next_qty):
                case Error(err):
                    return Error(err)
        if entry.protector_selected and not existing.protector_selected:
            match await target.set_protector(existing.id, True):
                case Error(err):
                    return Error(err)

    return Ok(MergedLine(entry.variant_id, entry.qty, prev_qty, next_qty))


__all__ = ("CartStore", "RemoteFactory", "MergeFlight", "clamp_qty")
