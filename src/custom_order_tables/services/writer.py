"""Persist orders to the dedicated orders table."""

from enum import Enum
from typing import List

from custom_order_tables.core.events import ORDER_UPDATED_PROPS, EventBus
from custom_order_tables.core.logger import setup_logger
from custom_order_tables.db.mapping import ORDER_FIELDS
from custom_order_tables.db.repository import DownloadPermissionStore, OrderRecordRepository
from custom_order_tables.models.order import Order

logger = setup_logger(__name__)

# Changes to these fields re-attribute the order's download permissions
CUSTOMER_FIELDS = ("customer_id", "billing_email")


class WriteMode(Enum):
    """Whether a write creates the order record or updates it."""

    INSERT = "insert"
    UPDATE = "update"


class OrderRecordWriter:
    """Writes an order's mapped fields to its order record."""

    def __init__(
        self,
        records: OrderRecordRepository,
        permissions: DownloadPermissionStore,
        events: EventBus,
    ):
        self.records = records
        self.permissions = permissions
        self.events = events

    def persist(self, order: Order, mode: WriteMode) -> List[str]:
        """
        Insert or update the order record for an order.

        Inserts write every mapped field. Updates write only the fields in
        the order's change-set and skip the database entirely when there
        are none.

        Args:
            order: The order to persist (must already have an ID)
            mode: WriteMode.INSERT for a new record, WriteMode.UPDATE otherwise

        Returns:
            Names of the columns updated (empty for inserts and no-op updates)

        Raises:
            DuplicateOrderRecordError: On insert, if a record already exists
        """
        edit_data = {field.column: order.get(field.column) for field in ORDER_FIELDS}
        updated_props: List[str] = []

        if mode is WriteMode.INSERT:
            self.records.insert(order.id, edit_data)
            logger.info(f"Created order record for order {order.id}", extra={"order_id": order.id})
        else:
            changes = {
                column: edit_data[column]
                for column in order.get_changes()
                if column in edit_data
            }
            if changes:
                rowcount = self.records.update(order.id, changes)
                if rowcount == 0:
                    logger.warning(
                        f"No order record for order {order.id}, update of {', '.join(changes)} not stored",
                        extra={"order_id": order.id},
                    )
                else:
                    logger.info(f"Updated order {order.id}: {', '.join(changes)}", extra={"order_id": order.id})
            else:
                logger.debug(f"No changes to persist for order {order.id}")
            updated_props = list(changes)

        if any(column in updated_props for column in CUSTOMER_FIELDS):
            self.permissions.update_owner(order.id, order.customer_id, order.billing_email)

        self.events.publish(ORDER_UPDATED_PROPS, {"order": order, "updated_props": updated_props})
        return updated_props
