"""
Storefront — wires settings, database and components together.

    shop = await Storefront.open(Settings.from_env())
    cart = shop.cart(MemoryStorage())
    await cart.add("v-1")
    await cart.sign_in("user-1")
    match await shop.checkout.create_order(order_input, cart.lines):
        ...
    await shop.close()
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field

from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker

from oddwheels._config import Settings
from oddwheels.cart import CartEvents, CartStore, KeyValueStorage, LocalBackend, RemoteBackend
from oddwheels.checkout import OrderReconciler, OrderRepository, TierAutoApproval
from oddwheels.db import ItemLayout, create_database
from oddwheels.inventory import SQLAlchemyInventory, StockFeed

logger = logging.getLogger(__name__)


@dataclass(slots=True)
class Storefront:
    settings: Settings
    engine: AsyncEngine
    session_factory: async_sessionmaker[AsyncSession]
    inventory: SQLAlchemyInventory
    events: CartEvents
    orders: OrderRepository
    checkout: OrderReconciler
    _carts: list[CartStore] = field(default_factory=list)

    @classmethod
    async def open(
        cls,
        settings: Settings | None = None,
        item_layout: ItemLayout = ItemLayout.CURRENT,
    ) -> Storefront:
        settings = settings or Settings()
        session_factory, engine = await create_database(settings.database_url, item_layout)

        events = CartEvents()
        orders = OrderRepository(session_factory)
        logger.info("Storefront opened on %s", engine.url.render_as_string(hide_password=True))

        return cls(
            settings=settings,
            engine=engine,
            session_factory=session_factory,
            inventory=SQLAlchemyInventory(session_factory, StockFeed()),
            events=events,
            orders=orders,
            checkout=OrderReconciler(
                orders,
                approval=TierAutoApproval(orders),
                events=events,
            ),
        )

    @property
    def stock_feed(self) -> StockFeed:
        return self.inventory.feed

    def cart(self, storage: KeyValueStorage) -> CartStore:
        """A cart session whose guest lines live in storage."""
        store = CartStore(
            self.inventory,
            LocalBackend(storage, self.settings.guest_cart_key),
            remote=lambda owner: RemoteBackend(self.session_factory, owner),
            events=self.events,
            stock_feed=self.stock_feed if self.settings.watch_stock else None,
            merge_timeout=self.settings.merge_timeout,
        )
        self._carts.append(store)
        return store

    async def close(self) -> None:
        for store in self._carts:
            store.close()
        self._carts.clear()
        await self.events.drain()
        await self.stock_feed.drain()
        await self.engine.dispose()


__all__ = ("Storefront",)
