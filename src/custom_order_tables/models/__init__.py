"""Order object model and query schemas."""

from custom_order_tables.models.order import Order
from custom_order_tables.models.query import EntityQuery, EntityQueryResult, OrderPage, OrderQuery

__all__ = ["Order", "EntityQuery", "EntityQueryResult", "OrderPage", "OrderQuery"]
