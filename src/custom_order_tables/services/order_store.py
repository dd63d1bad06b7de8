"""Order data store backed by the dedicated orders table."""

from datetime import datetime
from decimal import Decimal
from typing import List, Optional, Sequence, Set, Union

from sqlalchemy.orm import Session

from custom_order_tables.config.settings import Settings, settings as default_settings
from custom_order_tables.core.events import EventBus
from custom_order_tables.core.keys import KeyGenerator, generate_order_key
from custom_order_tables.core.logger import setup_logger
from custom_order_tables.db.models import Post
from custom_order_tables.db.repository import (
    DownloadPermissionRepository,
    DownloadPermissionStore,
    OrderRecordRepository,
    PostMetaRepository,
)
from custom_order_tables.models.order import Order
from custom_order_tables.models.query import OrderPage, OrderQuery
from custom_order_tables.services.finder import OrderFinder, QueryTransform
from custom_order_tables.services.migration import OrderMigrator
from custom_order_tables.services.refunds import RefundTotals
from custom_order_tables.services.writer import OrderRecordWriter, WriteMode

logger = setup_logger(__name__)


class OrderDataStore:
    """
    Create, read, update and delete orders.

    Orders remain entities in the posts table; their mapped fields live in
    the orders table. Orders without a record are migrated from postmeta on
    read when automatic migration is enabled.
    """

    def __init__(
        self,
        session: Session,
        events: Optional[EventBus] = None,
        permissions: Optional[DownloadPermissionStore] = None,
        key_generator: KeyGenerator = generate_order_key,
        query_transforms: Optional[Sequence[QueryTransform]] = None,
        config: Optional[Settings] = None,
    ):
        self.session = session
        self.config = config or default_settings
        self.events = events or EventBus()
        self.key_generator = key_generator

        self.records = OrderRecordRepository(session)
        self.meta = PostMetaRepository(session)
        self.permissions = permissions or DownloadPermissionRepository(session)

        self.writer = OrderRecordWriter(self.records, self.permissions, self.events)
        self.migrator = OrderMigrator(self.records, self.meta, self.writer)
        self.refunds = RefundTotals(session, refund_type=self.config.refund_type)
        self.finder = OrderFinder(
            session,
            self.records,
            self.meta,
            order_loader=self.read,
            search_fields=self.config.order_search_fields,
            query_transforms=query_transforms,
        )

    # ------------------------------------------------------------------
    # CRUD
    # ------------------------------------------------------------------

    def create(self, order: Order) -> Order:
        """
        Create the order entity and its order record.

        Generates a fresh order key, then inserts the entity row and the
        order record in one transaction.
        """
        order.set_order_key(f"{self.config.order_key_prefix}{self.key_generator()}")
        order.type = order.type or self.config.order_type

        now = datetime.utcnow()
        post = Post(
            post_type=order.type,
            post_status=order.status,
            post_parent=order.parent_id or 0,
            post_date=order.date_created or now,
            post_modified=now,
        )
        self.session.add(post)
        self.session.flush()

        order.id = post.id
        order.date_created = post.post_date

        self.writer.persist(order, WriteMode.INSERT)
        order.apply_changes()
        order.set_object_read(True)

        logger.info(f"Created order {order.id} ({order.order_key})")
        return order

    def read(self, order_id: int) -> Optional[Order]:
        """Load an order, or None when no order entity exists for the ID."""
        post = self.session.get(Post, order_id)
        if post is None or post.post_type != self.config.order_type:
            return None

        order = Order(
            order_id=post.id,
            status=post.post_status,
            parent_id=post.post_parent,
            date_created=post.post_date,
            order_type=post.post_type,
        )

        record = self.records.fetch(order_id)
        if record is not None:
            order.set_props(record.to_dict())
        elif self.config.automatic_migration:
            logger.info(f"No order record for order {order_id}, migrating from postmeta")
            self.migrator.populate_from_meta(order)

        order.apply_changes()
        order.set_object_read(True)
        return order

    def update(self, order: Order) -> List[str]:
        """Save entity status and changed fields. Returns updated columns."""
        post = self.session.get(Post, order.id)
        if post is not None and (post.post_status != order.status or post.post_parent != order.parent_id):
            post.post_status = order.status
            post.post_parent = order.parent_id
            post.post_modified = datetime.utcnow()
            self.session.commit()

        updated_props = self.writer.persist(order, WriteMode.UPDATE)
        order.apply_changes()
        return updated_props

    def delete(self, order: Order, force_delete: bool = False) -> None:
        """
        Delete an order.

        Without force_delete the order is moved to the trash and its record
        is kept. With force_delete the entity, its postmeta and its order
        record are removed and the order's ID is reset to 0.
        """
        order_id = order.id
        post = self.session.get(Post, order_id)

        if not force_delete:
            if post is not None:
                post.post_status = "trash"
                post.post_modified = datetime.utcnow()
                self.session.commit()
            order.status = "trash"
            logger.info(f"Trashed order {order_id}")
            return

        self.records.delete(order_id)
        self.meta.delete(order_id)
        if post is not None:
            self.session.delete(post)
            self.session.commit()
        order.id = 0
        logger.info(f"Permanently deleted order {order_id}")

    # ------------------------------------------------------------------
    # Lookups
    # ------------------------------------------------------------------

    def get_order_id_by_order_key(self, order_key: str) -> Optional[int]:
        return self.finder.find_id_by_key(order_key)

    def search_orders(self, term: str) -> Set[int]:
        return self.finder.search(term)

    def get_orders(self, criteria: Optional[OrderQuery] = None) -> Union[List[int], List[Order], OrderPage]:
        return self.finder.list_orders(criteria)

    # ------------------------------------------------------------------
    # Refund totals
    # ------------------------------------------------------------------

    def get_total_refunded(self, order: Order) -> Decimal:
        return self.refunds.get_total_refunded(order)

    def get_total_tax_refunded(self, order: Order) -> Decimal:
        return self.refunds.get_total_tax_refunded(order)

    def get_total_shipping_refunded(self, order: Order) -> Decimal:
        return self.refunds.get_total_shipping_refunded(order)

    # ------------------------------------------------------------------
    # Migration
    # ------------------------------------------------------------------

    def populate_from_meta(self, order: Order, save: bool = True, delete: bool = False) -> Order:
        return self.migrator.populate_from_meta(order, save=save, delete=delete)

    def backfill_postmeta(self, order: Order) -> None:
        self.migrator.backfill_postmeta(order)
