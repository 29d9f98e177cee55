"""
Database setup.
"""

from __future__ import annotations

from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.pool import StaticPool

from oddwheels.db._tables import Base
from oddwheels.db._layouts import ItemLayout, LAYOUT_TABLES


def _engine(url: str) -> AsyncEngine:
    if url.endswith(":memory:"):
        # every pooled connection would otherwise open its own empty database
        return create_async_engine(url, echo=False, poolclass=StaticPool)
    return create_async_engine(url, echo=False)


async def create_database(
    url: str = "sqlite+aiosqlite:///:memory:",
    item_layout: ItemLayout = ItemLayout.CURRENT,
) -> tuple[async_sessionmaker[AsyncSession], AsyncEngine]:
    """Create tables and return (session_factory, engine)."""
    engine = _engine(url)

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
        await conn.run_sync(LAYOUT_TABLES[item_layout].metadata.create_all)

    return async_sessionmaker(engine, expire_on_commit=False), engine


__all__ = ("create_database",)
