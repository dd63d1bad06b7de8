"""Tests for Order change tracking."""

from decimal import Decimal

import pytest

from custom_order_tables.models.order import Order


def test_setters_write_baseline_until_object_read():
    order = Order(order_id=3)
    order.set("billing_city", "Lisbon")

    assert order.get("billing_city") == "Lisbon"
    assert order.get_original("billing_city") == "Lisbon"
    assert order.get_changes() == {}


def test_changes_are_tracked_after_read():
    order = Order(order_id=3)
    order.set_props({"billing_email": "a@example.com", "total": "10.00"})
    order.set_object_read(True)

    order.set("billing_email", "b@example.com")
    order.set("total", Decimal("10"))

    assert order.get_changes() == {"billing_email": "b@example.com"}
    assert order.get("billing_email") == "b@example.com"
    assert order.get_original("billing_email") == "a@example.com"


def test_setting_back_to_original_drops_change():
    order = Order(order_id=3)
    order.set("currency", "EUR")
    order.set_object_read(True)

    order.set("currency", "USD")
    order.set("currency", "EUR")

    assert order.get_changes() == {}


def test_apply_changes_moves_changes_into_baseline():
    order = Order(order_id=3)
    order.set_object_read(True)
    order.set("customer_id", "12")

    order.apply_changes()

    assert order.get_changes() == {}
    assert order.get_original("customer_id") == 12
    assert order.customer_id == 12


def test_unknown_field_is_rejected():
    order = Order()
    with pytest.raises(KeyError):
        order.set("not_a_field", "x")


def test_set_props_ignores_unknown_keys():
    order = Order()
    order.set_props({"order_id": 5, "billing_first_name": "Ada"})
    assert order.get("billing_first_name") == "Ada"
    assert order.id == 0
