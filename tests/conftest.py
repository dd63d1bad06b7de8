"""Shared fixtures: in-memory database, sessions and legacy data builders."""

from datetime import datetime
from typing import Dict, Iterable, Optional

import pytest
from sqlalchemy import create_engine
from sqlalchemy.pool import StaticPool

from custom_order_tables.config.settings import Settings
from custom_order_tables.core.events import EventBus
from custom_order_tables.db import Base, get_session_factory
from custom_order_tables.db.models import OrderItem, OrderItemMeta, Post, PostMeta
from custom_order_tables.services.order_store import OrderDataStore


@pytest.fixture
def engine():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(engine)
    yield engine
    engine.dispose()


@pytest.fixture
def session(engine):
    session = get_session_factory(engine)()
    yield session
    session.close()


@pytest.fixture
def events():
    return EventBus()


@pytest.fixture
def config():
    return Settings(
        automatic_migration=True,
        order_search_fields=["_billing_email", "_billing_phone", "_billing_last_name"],
    )


@pytest.fixture
def store(session, events, config):
    return OrderDataStore(session, events=events, config=config)


@pytest.fixture
def make_post(session):
    """Insert a posts row and return its ID."""

    def _make(
        post_type: str = "shop_order",
        status: str = "processing",
        parent: int = 0,
        date: Optional[datetime] = None,
    ) -> int:
        post = Post(
            post_type=post_type,
            post_status=status,
            post_parent=parent,
            post_date=date or datetime(2024, 1, 1, 12, 0, 0),
        )
        session.add(post)
        session.commit()
        return post.id

    return _make


@pytest.fixture
def add_meta(session):
    """Attach postmeta key/values to a post."""

    def _add(post_id: int, values: Dict[str, str]) -> None:
        for key, value in values.items():
            session.add(PostMeta(post_id=post_id, meta_key=key, meta_value=value))
        session.commit()

    return _add


@pytest.fixture
def legacy_order(make_post, add_meta):
    """An order stored only as a post plus postmeta (never migrated)."""

    def _make(meta: Optional[Dict[str, str]] = None, **post_kwargs) -> int:
        post_id = make_post(**post_kwargs)
        add_meta(post_id, meta or {})
        return post_id

    return _make


@pytest.fixture
def add_item(session):
    """Attach an order item (with item meta) to an order or refund."""

    def _add(order_id: int, item_type: str, name: str = "", meta: Optional[Dict[str, str]] = None) -> int:
        item = OrderItem(order_item_name=name, order_item_type=item_type, order_id=order_id)
        session.add(item)
        session.flush()
        for key, value in (meta or {}).items():
            session.add(OrderItemMeta(order_item_id=item.order_item_id, meta_key=key, meta_value=value))
        session.commit()
        return item.order_item_id

    return _add


@pytest.fixture
def add_refund(make_post, add_meta, add_item):
    """Create a refund for an order with optional tax and shipping items."""

    def _add(
        order_id: int,
        amount: Optional[str] = None,
        tax_items: Iterable[Dict[str, str]] = (),
        shipping_items: Iterable[Dict[str, str]] = (),
    ) -> int:
        refund_id = make_post(post_type="shop_order_refund", status="completed", parent=order_id)
        if amount is not None:
            add_meta(refund_id, {"_refund_amount": amount})
        for meta in tax_items:
            add_item(refund_id, "tax", "VAT", meta)
        for meta in shipping_items:
            add_item(refund_id, "shipping", "Flat rate", meta)
        return refund_id

    return _add
