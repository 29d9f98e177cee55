"""
Cart backend protocol.

A session holds exactly one backend at a time: LocalBackend while the
shopper is a guest, RemoteBackend once authenticated.
"""

from __future__ import annotations

from typing import Protocol

from kungfu import Result

from oddwheels._errors import PersistenceFailure
from oddwheels._types import LineId, OwnerRef, VariantId
from oddwheels.cart._types import StoredLine


class CartBackend(Protocol):
    """
    Storage for one owner's cart lines, keyed by variant.

    All methods return Result for explicit error handling.
    """

    @property
    def owner(self) -> OwnerRef: ...

    async def load(self) -> Result[list[StoredLine], PersistenceFailure]:
        """All lines, oldest first."""
        ...

    async def get(self, line_id: LineId) -> Result[StoredLine | None, PersistenceFailure]: ...

    async def find(self, variant_id: VariantId) -> Result[StoredLine | None, PersistenceFailure]: ...

    async def insert(
        self,
        variant_id: VariantId,
        qty: int,
        protector_selected: bool = False,
    ) -> Result[StoredLine, PersistenceFailure]: ...

    async def set_qty(self, line_id: LineId, qty: int) -> Result[None, PersistenceFailure]: ...

    async def set_protector(
        self, line_id: LineId, selected: bool
    ) -> Result[None, PersistenceFailure]: ...

    async def remove(self, line_ids: list[LineId]) -> Result[int, PersistenceFailure]:
        """Delete lines by id. Returns how many existed."""
        ...

    async def clear(self) -> Result[None, PersistenceFailure]: ...


__all__ = ("CartBackend",)
