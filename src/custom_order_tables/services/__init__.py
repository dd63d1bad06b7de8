"""Services module - Order persistence, migration, lookups and refund totals."""

from custom_order_tables.services.finder import OrderFinder, QueryTransform
from custom_order_tables.services.migration import OrderMigrator
from custom_order_tables.services.order_store import OrderDataStore
from custom_order_tables.services.query import EntityQueryRunner
from custom_order_tables.services.refunds import RefundTotals
from custom_order_tables.services.writer import OrderRecordWriter, WriteMode

__all__ = [
    "OrderFinder",
    "QueryTransform",
    "OrderMigrator",
    "OrderDataStore",
    "EntityQueryRunner",
    "RefundTotals",
    "OrderRecordWriter",
    "WriteMode",
]
