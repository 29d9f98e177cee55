import asyncio

from conftest import unwrap

from oddwheels.cart import CartChanged, CartEvents, SingleFlight


def count_reloads(store) -> list[int]:
    calls: list[int] = []
    original = store.reload

    async def counting():
        calls.append(1)
        return await original()

    store.reload = counting
    return calls


async def test_other_views_reload_originator_does_not(make_store, events) -> None:
    a = make_store()
    b = make_store()
    await a.sign_in("user-1")
    await b.sign_in("user-1")
    await events.drain()
    a_reloads, b_reloads = count_reloads(a), count_reloads(b)

    await a.add("v-mgt", 2)
    await events.drain()

    assert a_reloads == []
    assert b_reloads == [1]
    assert [(l.variant_id, l.qty) for l in b.lines] == [("v-mgt", 2)]


async def test_changes_of_other_owners_are_ignored(make_store, events) -> None:
    a = make_store()
    b = make_store()
    await a.sign_in("user-1")
    await b.sign_in("user-2")
    await events.drain()
    b_reloads = count_reloads(b)

    await a.add("v-mgt")
    await events.drain()

    assert b_reloads == []
    assert b.lines == []


async def test_closed_store_stops_listening(make_store, events) -> None:
    a = make_store()
    b = make_store()
    await a.sign_in("user-1")
    await b.sign_in("user-1")
    b.close()

    assert events.changed("elsewhere", "user-1") == 1


async def test_stock_drop_reclamps_open_cart(make_store, inventory) -> None:
    store = make_store(stock_feed=inventory.feed)
    await store.add("v-kaido", 4)

    unwrap(await inventory.set_stock("v-kaido", 2))
    await inventory.feed.drain()
    assert store.lines[0].qty == 2

    unwrap(await inventory.set_stock("v-kaido", 0))
    await inventory.feed.drain()
    assert store.lines == []


async def test_unrelated_stock_change_is_ignored(make_store, inventory) -> None:
    store = make_store(stock_feed=inventory.feed)
    await store.add("v-kaido")
    reloads = count_reloads(store)

    unwrap(await inventory.set_stock("v-mgt", 1))
    await inventory.feed.drain()

    assert reloads == []


async def test_failing_listener_does_not_break_publish() -> None:
    bus = CartEvents()
    seen: list[CartChanged] = []

    async def broken(event: CartChanged) -> None:
        raise RuntimeError("boom")

    async def healthy(event: CartChanged) -> None:
        seen.append(event)

    bus.subscribe(broken, key="a")
    bus.subscribe(healthy, key="b")

    assert bus.changed("a", "user-1") == 1
    assert bus.changed("c", "user-1") == 2
    await bus.drain()

    assert seen == [CartChanged("a", "user-1"), CartChanged("c", "user-1")]


async def test_single_flight_runs_once() -> None:
    flight: SingleFlight[int] = SingleFlight()
    runs: list[int] = []

    async def work() -> int:
        runs.append(1)
        await asyncio.sleep(0.01)
        return len(runs)

    first, second = await asyncio.gather(flight.run(work), flight.run(work))

    assert (first, second) == (1, 1)
    assert not flight.in_flight
    assert await flight.run(work) == 2
