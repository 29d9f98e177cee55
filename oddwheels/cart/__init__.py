"""
Cart — guest and signed-in carts kept consistent with live stock.

    from oddwheels import cart as C

    store = C.CartStore(
        inventory,
        C.LocalBackend(C.MemoryStorage()),
        remote=lambda owner: C.RemoteBackend(session_factory, owner),
        events=C.CartEvents(),
    )

    await store.add("v-1", 2)
    await store.sign_in("user-1")   # guest lines move to the server cart
"""

from oddwheels.cart._types import (
    CartState,
    StoredLine,
    GuestCartEntry,
    CartLine,
    AddResult,
    MergedLine,
    MergeReport,
)
from oddwheels.cart._backend import CartBackend
from oddwheels.cart._local import (
    KeyValueStorage,
    MemoryStorage,
    LocalBackend,
    collapse,
    encode_entries,
    decode_entries,
)
from oddwheels.cart._remote import RemoteBackend
from oddwheels.cart._events import CartChanged, CartEvents
from oddwheels.cart._flight import SingleFlight
from oddwheels.cart._store import CartStore, RemoteFactory, MergeFlight, clamp_qty

__all__ = (
    "CartState",
    "StoredLine",
    "GuestCartEntry",
    "CartLine",
    "AddResult",
    "MergedLine",
    "MergeReport",
    "CartBackend",
    "KeyValueStorage",
    "MemoryStorage",
    "LocalBackend",
    "collapse",
    "encode_entries",
    "decode_entries",
    "RemoteBackend",
    "CartChanged",
    "CartEvents",
    "SingleFlight",
    "CartStore",
    "RemoteFactory",
    "MergeFlight",
    "clamp_qty",
)
