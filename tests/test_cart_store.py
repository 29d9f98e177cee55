from datetime import datetime

import pytest

from conftest import unwrap, unwrap_error

from oddwheels import LineNotFound, OutOfStock
from oddwheels.cart import (
    AddResult,
    CartState,
    GuestCartEntry,
    MemoryStorage,
    clamp_qty,
    decode_entries,
    encode_entries,
)

KEY = "oddwheels:guest-cart"


def guest_storage(*entries: tuple[str, int]) -> MemoryStorage:
    storage = MemoryStorage()
    storage.set_item(
        KEY,
        encode_entries(GuestCartEntry(v, qty, datetime(2024, 5, 1)) for v, qty in entries),
    )
    return storage


def test_clamp_qty() -> None:
    assert clamp_qty(7, 3) == 3
    assert clamp_qty(0, 3) == 1
    assert clamp_qty(2, 3) == 2


async def test_add_new_line(make_store) -> None:
    store = make_store()
    added = unwrap(await store.add("v-mgt", 2))

    assert added == AddResult(available=3, desired_qty=2, next_qty=2, prev_qty=0, capped=False)
    [line] = store.lines
    assert (line.variant_id, line.qty, line.unit_price) == ("v-mgt", 2, 800)
    assert store.state is CartState.GUEST


async def test_add_caps_at_stock(make_store) -> None:
    # 5 in cart, 3 in stock, add 2
    store = make_store(guest_storage(("v-mgt", 5)))
    added = unwrap(await store.add("v-mgt", 2))

    assert added.capped
    assert added.next_qty == 3
    assert added.prev_qty == 5
    assert added.desired_qty == 7
    assert store.lines[0].qty == 3


async def test_add_increments_existing_line(make_store) -> None:
    store = make_store()
    await store.add("v-kaido")
    added = unwrap(await store.add("v-kaido", 2))
    assert (added.prev_qty, added.next_qty, added.capped) == (1, 3, False)
    assert len(store.lines) == 1


async def test_add_sold_out(make_store) -> None:
    store = make_store()
    err = unwrap_error(await store.add("v-gone"))
    assert err == OutOfStock("v-gone", 0)
    assert err.message == "Item sold out"

    assert isinstance(unwrap_error(await store.add("v-missing")), OutOfStock)
    assert store.lines == []


async def test_add_rejects_non_positive_qty(make_store) -> None:
    store = make_store()
    with pytest.raises(ValueError):
        await store.add("v-mgt", 0)


@pytest.mark.parametrize("requested", [1, 2, 3, 4, 50])
async def test_qty_stays_within_stock(make_store, requested: int) -> None:
    store = make_store()
    await store.add("v-kaido", requested)
    line = store.lines[0]
    assert 1 <= line.qty <= 5

    assert unwrap(await store.update_qty(line.id, requested * 3)) == min(requested * 3, 5)
    assert 1 <= store.lines[0].qty <= 5


async def test_update_qty_clamps_both_ends(make_store) -> None:
    store = make_store()
    await store.add("v-kaido")
    line_id = store.lines[0].id

    assert unwrap(await store.update_qty(line_id, 99)) == 5
    assert unwrap(await store.update_qty(line_id, 0)) == 1
    assert store.lines[0].qty == 1


async def test_update_unknown_line(make_store) -> None:
    store = make_store()
    assert unwrap_error(await store.update_qty("nope", 1)) == LineNotFound("nope")


async def test_update_after_sell_out_drops_line(make_store, inventory) -> None:
    store = make_store()
    await store.add("v-last")
    unwrap(await inventory.set_stock("v-last", 0))

    assert unwrap(await store.update_qty("v-last", 1)) == 0
    assert store.lines == []


async def test_protector_only_for_eligible_classes(make_store) -> None:
    store = make_store()
    await store.add("v-hw", 2)
    await store.add("v-mgt")

    assert unwrap(await store.set_protector("v-hw", True)) is True
    assert unwrap(await store.set_protector("v-mgt", True)) is False

    by_variant = {line.variant_id: line for line in store.lines}
    assert by_variant["v-hw"].unit_price == 340
    assert by_variant["v-hw"].line_total == 680
    assert by_variant["v-mgt"].protector_selected is False


async def test_remove(make_store) -> None:
    store = make_store()
    await store.add("v-mgt")
    await store.add("v-kaido")
    unwrap(await store.remove("v-mgt"))
    assert [line.variant_id for line in store.lines] == ["v-kaido"]


async def test_reload_drops_stale_and_writes_back(make_store) -> None:
    storage = guest_storage(("v-gone", 1), ("v-kaido", 9), ("v-missing", 2))
    store = make_store(storage)

    lines = unwrap(await store.reload())

    assert [(line.variant_id, line.qty) for line in lines] == [("v-kaido", 5)]
    stored = decode_entries(storage.get_item(KEY))
    assert [(e.variant_id, e.qty) for e in stored] == [("v-kaido", 5)]


async def test_signed_in_cart_uses_server_rows(make_store) -> None:
    store = make_store()
    await store.sign_in("user-1")
    await store.add("v-mgt", 2)

    assert store.is_logged_in
    assert store.owner == "user-1"
    [line] = store.lines
    assert line.owner == "user-1"
    assert line.id != "v-mgt"

    other = make_store()
    await other.sign_in("user-1")
    assert [(l.variant_id, l.qty) for l in other.lines] == [("v-mgt", 2)]


async def test_sign_out_returns_to_guest_cart(make_store) -> None:
    store = make_store()
    await store.sign_in("user-1")
    await store.add("v-mgt")
    unwrap(await store.sign_out())

    assert store.state is CartState.GUEST
    assert store.lines == []


async def test_sign_in_rejects_guest_owner(make_store) -> None:
    with pytest.raises(ValueError):
        await make_store().sign_in("guest")
