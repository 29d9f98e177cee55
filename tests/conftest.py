from __future__ import annotations

from collections.abc import AsyncIterator, Awaitable, Callable
from pathlib import Path

import pytest
from kungfu import Result, Ok, Error
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker

from oddwheels.cart import CartEvents, CartStore, LocalBackend, MemoryStorage, RemoteBackend
from oddwheels.db import CartItemTable, ItemLayout, ProductTable, VariantTable, create_database
from oddwheels.inventory import SQLAlchemyInventory

type SessionFactory = async_sessionmaker[AsyncSession]
type OpenDatabase = Callable[..., Awaitable[SessionFactory]]


def catalog() -> list[object]:
    """
    v-mgt   1000 @ 20% off -> 800, 3 in stock, MINI_GT
    v-kaido 1500, sale 1200, 5 in stock, KAIDO
    v-hw    300, 10 in stock, HOT_WHEELS_PREMIUM
    v-last  500, 1 in stock, MINI_GT
    v-gone  sold out
    """
    return [
        ProductTable(id="p-skyline", title="Mini GT Nissan Skyline GT-R", brand="Mini GT"),
        ProductTable(id="p-kaido", title="Kaido House Datsun 510", brand="Kaido House"),
        ProductTable(id="p-hw", title="Hot Wheels Premium Porsche 911", brand="Hot Wheels"),
        VariantTable(
            id="v-mgt", product_id="p-skyline", condition="sealed",
            price=1000, discount_percent=20, qty=3, ship_class="MINI_GT",
        ),
        VariantTable(
            id="v-kaido", product_id="p-kaido", condition="sealed",
            price=1500, sale_price=1200, qty=5, ship_class="KAIDO",
        ),
        VariantTable(
            id="v-hw", product_id="p-hw", condition="sealed",
            price=300, qty=10, ship_class="HOT_WHEELS_PREMIUM",
        ),
        VariantTable(
            id="v-last", product_id="p-skyline", condition="with issues",
            issue_notes="Dented blister", price=500, qty=1, ship_class="MINI_GT",
        ),
        VariantTable(
            id="v-gone", product_id="p-kaido", condition="sealed",
            price=900, qty=0, ship_class="KAIDO",
        ),
    ]


async def seed(session_factory: SessionFactory, *rows: object) -> None:
    async with session_factory() as session:
        session.add_all(rows)
        await session.commit()


async def seed_cart_line(
    session_factory: SessionFactory,
    line_id: str,
    owner: str,
    variant_id: str,
    qty: int,
) -> None:
    await seed(
        session_factory,
        CartItemTable(id=line_id, user_id=owner, variant_id=variant_id, qty=qty),
    )


@pytest.fixture
async def open_db(tmp_path: Path) -> AsyncIterator[OpenDatabase]:
    """Open a seeded file database with the given order_items layout."""
    engines: list[AsyncEngine] = []

    async def _open(layout: ItemLayout = ItemLayout.CURRENT) -> SessionFactory:
        url = f"sqlite+aiosqlite:///{tmp_path / f'shop-{layout.value}.db'}"
        session_factory, engine = await create_database(url, layout)
        engines.append(engine)
        await seed(session_factory, *catalog())
        return session_factory

    yield _open

    for engine in engines:
        await engine.dispose()


@pytest.fixture
async def session_factory(open_db: OpenDatabase) -> SessionFactory:
    return await open_db()


@pytest.fixture
def inventory(session_factory: SessionFactory) -> SQLAlchemyInventory:
    return SQLAlchemyInventory(session_factory)


@pytest.fixture
def events() -> CartEvents:
    return CartEvents()


@pytest.fixture
async def make_store(
    inventory: SQLAlchemyInventory,
    session_factory: SessionFactory,
    events: CartEvents,
) -> AsyncIterator[Callable[..., CartStore]]:
    stores: list[CartStore] = []

    def _make(storage: MemoryStorage | None = None, remote=None, **kwargs) -> CartStore:
        kwargs.setdefault("events", events)
        store = CartStore(
            inventory,
            LocalBackend(storage if storage is not None else MemoryStorage()),
            remote=remote or (lambda owner: RemoteBackend(session_factory, owner)),
            **kwargs,
        )
        stores.append(store)
        return store

    yield _make

    for store in stores:
        store.close()
    await events.drain()
    await inventory.feed.drain()


def unwrap[T](result: Result[T, object]) -> T:
    match result:
        case Ok(value):
            return value
        case Error(error):
            pytest.fail(f"expected Ok, got Error({error!r})")


def unwrap_error[E](result: Result[object, E]) -> E:
    match result:
        case Error(error):
            return error
        case Ok(value):
            pytest.fail(f"expected Error, got Ok({value!r})")
