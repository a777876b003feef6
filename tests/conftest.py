"""Shared fixtures: an in-memory SQLite database with a small customer/order schema.

Tests run with --import-mode=importlib, so the sample ORM classes are handed
to tests through the ``models`` fixture rather than imported.
"""

from __future__ import annotations

from types import SimpleNamespace
from typing import Optional

import pytest
from sqlalchemy import ForeignKey, Integer, String, Text
from sqlalchemy.ext.asyncio import create_async_engine
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column, relationship
from sqlalchemy.pool import StaticPool

from flexrepo.infrastructure.database import build_session_factory


class _TestBase(DeclarativeBase):
    pass


class Customer(_TestBase):
    __tablename__ = "customers"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    name: Mapped[str] = mapped_column(String(100), nullable=False)
    email: Mapped[Optional[str]] = mapped_column(String(200), nullable=True)
    tier: Mapped[str] = mapped_column(String(20), nullable=False, default="standard")

    orders: Mapped[list["Order"]] = relationship(
        back_populates="customer", cascade="all, delete-orphan"
    )


class Order(_TestBase):
    __tablename__ = "orders"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    customer_id: Mapped[int] = mapped_column(ForeignKey("customers.id"), nullable=False)
    reference: Mapped[str] = mapped_column(String(40), nullable=False)

    customer: Mapped[Customer] = relationship(back_populates="orders")
    items: Mapped[list["OrderItem"]] = relationship(
        back_populates="order", cascade="all, delete-orphan"
    )


class OrderItem(_TestBase):
    __tablename__ = "order_items"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    order_id: Mapped[int] = mapped_column(ForeignKey("orders.id"), nullable=False)
    sku: Mapped[str] = mapped_column(String(40), nullable=False)

    order: Mapped[Order] = relationship(back_populates="items")


class LedgerLine(_TestBase):
    """Composite primary key."""

    __tablename__ = "ledger_lines"

    ledger: Mapped[str] = mapped_column(String(20), primary_key=True)
    line_no: Mapped[int] = mapped_column(Integer, primary_key=True)
    memo: Mapped[str] = mapped_column(Text, nullable=False, default="")


@pytest.fixture
def models():
    return SimpleNamespace(
        Customer=Customer,
        Order=Order,
        OrderItem=OrderItem,
        LedgerLine=LedgerLine,
    )


@pytest.fixture
async def engine():
    engine = create_async_engine(
        "sqlite+aiosqlite:///:memory:",
        poolclass=StaticPool,
        connect_args={"check_same_thread": False},
    )
    async with engine.begin() as conn:
        await conn.run_sync(_TestBase.metadata.create_all)
    yield engine
    await engine.dispose()


@pytest.fixture
def session_factory(engine):
    return build_session_factory(engine)


@pytest.fixture
async def session(session_factory):
    async with session_factory() as session:
        yield session


@pytest.fixture
def seed_customers(session_factory):
    """Insert n customers named customer-01 .. customer-nn through a separate session."""

    async def _seed(n: int, tier: str = "standard") -> None:
        async with session_factory() as seed_session:
            seed_session.add_all(
                Customer(name=f"customer-{i:02d}", email=f"c{i}@example.com", tier=tier)
                for i in range(1, n + 1)
            )
            await seed_session.commit()

    return _seed
