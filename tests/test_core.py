"""Tests for the event bus, key generation and database bootstrap."""

import re

from sqlalchemy import inspect

from custom_order_tables.config.settings import settings
from custom_order_tables.core.events import EventBus
from custom_order_tables.core.keys import generate_order_key
from custom_order_tables.db import get_engine, init_db


def test_publish_reaches_subscribers_in_order():
    bus = EventBus()
    calls = []
    bus.subscribe("order.saved", lambda payload: calls.append(("first", payload["id"])))
    bus.subscribe("order.saved", lambda payload: calls.append(("second", payload["id"])))

    assert bus.publish("order.saved", {"id": 4}) == 2
    assert calls == [("first", 4), ("second", 4)]


def test_failing_handler_is_isolated():
    bus = EventBus()
    calls = []

    def broken(payload):
        raise ValueError("boom")

    bus.subscribe("order.saved", broken)
    bus.subscribe("order.saved", calls.append)

    assert bus.publish("order.saved", {"id": 1}) == 1
    assert calls == [{"id": 1}]


def test_unsubscribe_and_unknown_events():
    bus = EventBus()
    calls = []
    bus.subscribe("order.saved", calls.append)
    bus.unsubscribe("order.saved", calls.append)
    bus.unsubscribe("order.deleted", calls.append)

    assert bus.publish("order.saved", {}) == 0
    assert bus.publish("never.subscribed", {}) == 0
    assert calls == []


def test_generated_keys_are_unique():
    keys = {generate_order_key() for _ in range(500)}

    assert len(keys) == 500
    assert all(re.fullmatch(r"order_[0-9a-f]{13}", key) for key in keys)


def test_init_db_creates_all_tables(tmp_path):
    database_url = f"sqlite:///{tmp_path / 'orders.db'}"

    init_db(database_url)

    engine = get_engine(database_url)
    tables = set(inspect(engine).get_table_names())
    engine.dispose()
    assert {
        "posts",
        "postmeta",
        "woocommerce_orders",
        "woocommerce_order_items",
        "woocommerce_order_itemmeta",
        "woocommerce_downloadable_product_permissions",
    } <= tables


def test_get_engine_defaults_to_configured_database(monkeypatch):
    monkeypatch.setattr(settings, "database_url", "sqlite:///configured.db")
    monkeypatch.setattr(settings, "database_echo", True)

    engine = get_engine()

    assert str(engine.url) == "sqlite:///configured.db"
    assert engine.echo is True
    engine.dispose()
