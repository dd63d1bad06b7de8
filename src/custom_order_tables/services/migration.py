"""Move order data between legacy postmeta and the orders table."""

from decimal import InvalidOperation

from custom_order_tables.core.logger import setup_logger
from custom_order_tables.db.mapping import FIELD_SETTERS, ORDER_FIELDS, is_empty
from custom_order_tables.db.repository import OrderRecordRepository, PostMetaRepository
from custom_order_tables.models.order import Order
from custom_order_tables.services.writer import OrderRecordWriter, WriteMode

logger = setup_logger(__name__)


class OrderMigrator:
    """Forward (postmeta -> table) and backward (table -> postmeta) migration."""

    def __init__(
        self,
        records: OrderRecordRepository,
        meta: PostMetaRepository,
        writer: OrderRecordWriter,
    ):
        self.records = records
        self.meta = meta
        self.writer = writer

    def populate_from_meta(self, order: Order, save: bool = True, delete: bool = False) -> Order:
        """
        Populate the order from legacy postmeta where the table has no value.

        A value in the orders table always wins over postmeta. Legacy values
        that cannot be converted to the field's type are logged and skipped.

        Args:
            order: The order to populate
            save: Persist the merged order to the orders table
            delete: Delete the mapped postmeta keys afterwards

        Returns:
            The same order object
        """
        record = self.records.fetch(order.id)
        table_data = record.to_dict() if record is not None else {}

        if record is not None and not order.object_read:
            # Track legacy values as changes against the stored record
            order.set_props(table_data)
            order.set_object_read(True)

        legacy = self.meta.get_all(order.id)
        applied = []

        for field in ORDER_FIELDS:
            meta_value = legacy.get(field.meta_key)
            if not field.is_unset(table_data.get(field.column)) or is_empty(meta_value):
                continue
            try:
                FIELD_SETTERS[field.column](order, meta_value)
            except (InvalidOperation, OverflowError, ValueError):
                logger.warning(
                    f"Skipping invalid {field.meta_key} value {meta_value!r} for order {order.id}",
                    extra={"order_id": order.id},
                )
                continue
            applied.append(field.column)

        logger.info(
            f"Populated {len(applied)} field(s) from postmeta for order {order.id}",
            extra={"order_id": order.id},
        )

        if save:
            mode = WriteMode.INSERT if record is None else WriteMode.UPDATE
            self.writer.persist(order, mode)
            order.apply_changes()

        if delete:
            for field in ORDER_FIELDS:
                self.meta.delete(order.id, field.meta_key)
            logger.info(f"Deleted legacy postmeta for order {order.id}")

        return order

    def backfill_postmeta(self, order: Order) -> None:
        """Overwrite legacy postmeta with the values in the orders table."""
        record = self.records.fetch(order.id)
        if record is None:
            logger.debug(f"No order record to backfill for order {order.id}")
            return

        written = 0
        for field in ORDER_FIELDS:
            value = getattr(record, field.column)
            if value is not None:
                self.meta.update(order.id, field.meta_key, field.encode(value))
                written += 1

        logger.info(f"Backfilled {written} postmeta key(s) for order {order.id}")
