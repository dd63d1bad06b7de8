"""Store WooCommerce-style orders in a dedicated table instead of postmeta."""

from custom_order_tables.core.events import ORDER_UPDATED_PROPS, EventBus
from custom_order_tables.core.exceptions import DuplicateOrderRecordError, OrderTablesError
from custom_order_tables.models.order import Order
from custom_order_tables.models.query import OrderPage, OrderQuery
from custom_order_tables.services.order_store import OrderDataStore
from custom_order_tables.services.writer import WriteMode

__version__ = "1.0.0"

__all__ = [
    "ORDER_UPDATED_PROPS",
    "EventBus",
    "DuplicateOrderRecordError",
    "OrderTablesError",
    "Order",
    "OrderPage",
    "OrderQuery",
    "OrderDataStore",
    "WriteMode",
]
