from datetime import datetime, timedelta

from kungfu import Ok

from conftest import unwrap

from oddwheels.cart import (
    GuestCartEntry,
    LocalBackend,
    MemoryStorage,
    collapse,
    decode_entries,
    encode_entries,
)

T0 = datetime(2024, 5, 1, 12, 0)
KEY = "oddwheels:guest-cart"


def test_collapse_sums_duplicates_keeping_earliest() -> None:
    entries = [
        GuestCartEntry("v-1", 1, T0 + timedelta(minutes=5)),
        GuestCartEntry("v-2", 1, T0 + timedelta(minutes=1)),
        GuestCartEntry("v-1", 2, T0, protector_selected=True),
    ]
    collapsed = collapse(entries)
    assert [e.variant_id for e in collapsed] == ["v-1", "v-2"]
    assert collapsed[0] == GuestCartEntry("v-1", 3, T0, protector_selected=True)


def test_encoding_never_writes_duplicates() -> None:
    payload = encode_entries([GuestCartEntry("v-1", 1, T0), GuestCartEntry("v-1", 4, T0)])
    assert decode_entries(payload) == [GuestCartEntry("v-1", 5, T0)]


def test_decode_tolerates_garbage() -> None:
    assert decode_entries(None) == []
    assert decode_entries("not json") == []
    assert decode_entries('{"variant_id": "v-1"}') == []
    payload = '[{"variant_id": "v-1", "qty": 2}, {"qty": 3}, {"variant_id": "v-2", "qty": 0}, 7]'
    decoded = decode_entries(payload)
    assert [(e.variant_id, e.qty) for e in decoded] == [("v-1", 2)]


def test_decode_collapses_legacy_duplicates() -> None:
    payload = (
        '[{"variant_id": "v-1", "qty": 1, "added_at": "2024-05-01T12:00:00"},'
        ' {"variant_id": "v-1", "qty": 1, "added_at": "2024-05-01T11:00:00"}]'
    )
    assert decode_entries(payload) == [GuestCartEntry("v-1", 2, T0 - timedelta(hours=1))]


class TestLocalBackend:
    async def test_insert_find_and_update(self) -> None:
        storage = MemoryStorage()
        backend = LocalBackend(storage, KEY)

        line = unwrap(await backend.insert("v-1", 2))
        assert line.id == "v-1"
        assert unwrap(await backend.find("v-1")) == line

        assert isinstance(await backend.set_qty("v-1", 5), Ok)
        assert isinstance(await backend.set_protector("v-1", True), Ok)
        stored = unwrap(await backend.get("v-1"))
        assert stored is not None
        assert (stored.qty, stored.protector_selected) == (5, True)

        assert decode_entries(storage.get_item(KEY))[0].qty == 5

    async def test_remove_and_clear(self) -> None:
        storage = MemoryStorage()
        backend = LocalBackend(storage, KEY)
        await backend.insert("v-1", 1)
        await backend.insert("v-2", 1)

        assert unwrap(await backend.remove(["v-1", "v-404"])) == 1
        assert [line.variant_id for line in unwrap(await backend.load())] == ["v-2"]

        await backend.clear()
        assert storage.get_item(KEY) is None
        assert unwrap(await backend.load()) == []

    async def test_owner_is_guest(self) -> None:
        assert LocalBackend(MemoryStorage()).owner == "guest"
