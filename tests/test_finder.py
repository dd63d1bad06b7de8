"""Tests for order lookup by key, free-text search and listing."""

from datetime import datetime
from itertools import count

import pytest

from custom_order_tables.models.order import Order
from custom_order_tables.models.query import EntityQuery, OrderPage, OrderQuery
from custom_order_tables.services.order_store import OrderDataStore


@pytest.fixture
def keyed_store(session, events, config):
    sequence = count(1)
    return OrderDataStore(
        session,
        events=events,
        config=config,
        key_generator=lambda: f"order_{next(sequence)}",
    )


def _create(store, day, status="processing", **fields):
    order = Order(status=status, date_created=datetime(2024, 3, day, 9, 0, 0))
    order.set_props(fields)
    return store.create(order)


@pytest.fixture
def five_orders(keyed_store):
    return [
        _create(keyed_store, 1, customer_id=1, billing_email="ann@example.com"),
        _create(keyed_store, 2, customer_id=2, billing_email="ben@example.com", status="completed"),
        _create(keyed_store, 3, customer_id=1, billing_email="ann@example.com"),
        _create(keyed_store, 4, customer_id=0, billing_email="Guest@Example.com", status="completed"),
        _create(keyed_store, 5, customer_id=3, billing_email="cat@example.com"),
    ]


# ----------------------------------------------------------------------
# find_id_by_key
# ----------------------------------------------------------------------


def test_find_id_by_key(session, events, config):
    store = OrderDataStore(session, events=events, config=config, key_generator=lambda: "order_abc123")
    order = store.create(Order())

    assert order.order_key == "wc_order_abc123"
    assert store.get_order_id_by_order_key("wc_order_abc123") == order.id
    assert store.get_order_id_by_order_key("wc_order_nope") is None


# ----------------------------------------------------------------------
# search
# ----------------------------------------------------------------------


def test_numeric_term_is_a_candidate_id_and_results_are_deduplicated(store, legacy_order, add_item):
    phone_match = legacy_order({"_billing_phone": "555-0100"})
    legacy_order({"_billing_phone": "444-0100"})
    add_item(phone_match, "line_item", "Size 5 shoes")

    results = store.search_orders("5")

    assert results == {5, phone_match}


def test_search_is_case_insensitive_and_covers_configured_keys(store, legacy_order):
    email_match = legacy_order({"_billing_email": "alice@example.com"})
    name_match = legacy_order({"_billing_last_name": "Alicea"})
    legacy_order({"_shipping_first_name": "Alice"})

    assert store.search_orders("ALICE") == {email_match, name_match}


def test_search_matches_line_item_names(store, make_post, add_item):
    order_id = make_post()
    add_item(order_id, "line_item", "Blue Widget")
    add_item(order_id, "line_item", "Widget Stand")

    assert store.search_orders("widget") == {order_id}


def test_search_escapes_wildcards(store, legacy_order):
    legacy_order({"_billing_email": "someone@example.com"})

    assert store.search_orders("%") == set()
    assert store.search_orders("_") == set()


def test_search_finds_migrated_orders_without_postmeta(store, legacy_order):
    order_id = legacy_order({"_billing_email": "moved@example.com", "_order_key": "wc_order_m"})
    store.populate_from_meta(Order(order_id=order_id), save=True, delete=True)

    assert store.meta.get_all(order_id) == {}
    assert store.search_orders("moved@") == {order_id}


def test_search_without_configured_fields_uses_ids_and_items(session, events, config, legacy_order):
    config.order_search_fields = []
    store = OrderDataStore(session, events=events, config=config)
    legacy_order({"_billing_email": "alice@example.com"})

    assert store.search_orders("alice") == set()
    assert store.search_orders("12") == {12}
    assert store.search_orders("  ") == set()


# ----------------------------------------------------------------------
# list_orders
# ----------------------------------------------------------------------


def test_list_returns_ids_newest_first(keyed_store, five_orders):
    ids = keyed_store.get_orders(OrderQuery(limit=-1))

    assert ids == [order.id for order in reversed(five_orders)]


def test_list_page_and_offset(keyed_store, five_orders):
    newest_first = [order.id for order in reversed(five_orders)]

    assert keyed_store.get_orders(OrderQuery(limit=2, page=2)) == newest_first[2:4]
    # Offset wins over page
    assert keyed_store.get_orders(OrderQuery(limit=2, page=3, offset=1)) == newest_first[1:3]


def test_list_paginated_envelope(keyed_store, five_orders):
    page = keyed_store.get_orders(OrderQuery(limit=2, page=3, paginate=True, order="ASC"))

    assert isinstance(page, OrderPage)
    assert page.items == [five_orders[4].id]
    assert page.total_count == 5
    assert page.page_count == 3


def test_list_filters_by_status_customer_and_email(keyed_store, five_orders):
    completed = keyed_store.get_orders(OrderQuery(status="completed", limit=-1, order="ASC"))
    assert completed == [five_orders[1].id, five_orders[3].id]

    by_customer = keyed_store.get_orders(OrderQuery(customer=1, limit=-1, order="ASC"))
    assert by_customer == [five_orders[0].id, five_orders[2].id]

    by_email = keyed_store.get_orders(OrderQuery(email="guest@example.com", limit=-1))
    assert by_email == [five_orders[3].id]

    either = keyed_store.get_orders(OrderQuery(customer=[3, "ben@example.com"], limit=-1, order="ASC"))
    assert either == [five_orders[1].id, five_orders[4].id]


def test_list_filters_by_dates_and_exclusions(keyed_store, five_orders):
    ids = keyed_store.get_orders(
        OrderQuery(
            date_after=datetime(2024, 3, 1, 12, 0, 0),
            date_before=datetime(2024, 3, 5, 0, 0, 0),
            exclude=[five_orders[2].id],
            limit=-1,
            order="ASC",
        )
    )

    assert ids == [five_orders[1].id, five_orders[3].id]


def test_list_hides_trashed_orders(keyed_store, five_orders):
    keyed_store.delete(five_orders[0])

    ids = keyed_store.get_orders(OrderQuery(limit=-1))
    assert five_orders[0].id not in ids
    assert keyed_store.get_orders(OrderQuery(status="trash", limit=-1)) == [five_orders[0].id]


def test_list_objects(keyed_store, five_orders):
    orders = keyed_store.get_orders(OrderQuery(customer=1, limit=-1, order="ASC", **{"return": "objects"}))

    assert [order.id for order in orders] == [five_orders[0].id, five_orders[2].id]
    assert all(order.billing_email == "ann@example.com" for order in orders)


def test_query_transforms_run_before_execution(session, events, config, five_orders):
    seen = []

    def only_completed(query: EntityQuery, criteria: OrderQuery) -> EntityQuery:
        seen.append(criteria.limit)
        return query.model_copy(update={"post_status": ["completed"]})

    store = OrderDataStore(session, events=events, config=config, query_transforms=[only_completed])
    ids = store.get_orders(OrderQuery(limit=-1, order="ASC"))

    assert seen == [-1]
    assert ids == [five_orders[1].id, five_orders[3].id]


def test_non_ascii_digit_terms_are_not_order_ids(store, legacy_order):
    legacy_order({"_billing_phone": "555-0100"})

    assert store.search_orders("²") == set()


def test_customer_filter_with_non_ascii_digits_matches_emails(keyed_store, five_orders):
    assert keyed_store.get_orders(OrderQuery(customer="²", limit=-1)) == []
