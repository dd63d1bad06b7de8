"""Core module - Logging, exceptions, events and key generation."""

from custom_order_tables.core.events import ORDER_UPDATED_PROPS, EventBus
from custom_order_tables.core.exceptions import DuplicateOrderRecordError, OrderTablesError
from custom_order_tables.core.keys import KeyGenerator, generate_order_key
from custom_order_tables.core.logger import setup_logger

__all__ = [
    "ORDER_UPDATED_PROPS",
    "EventBus",
    "DuplicateOrderRecordError",
    "OrderTablesError",
    "KeyGenerator",
    "generate_order_key",
    "setup_logger",
]
