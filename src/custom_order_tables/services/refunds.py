"""Refund totals computed from refund entities and their items."""

from decimal import Decimal, InvalidOperation
from typing import Iterable, Optional

from sqlalchemy import select
from sqlalchemy.orm import Session

from custom_order_tables.config.settings import settings
from custom_order_tables.core.logger import setup_logger
from custom_order_tables.db.models import OrderItem, OrderItemMeta, Post, PostMeta
from custom_order_tables.models.order import Order

logger = setup_logger(__name__)

REFUND_AMOUNT_KEY = "_refund_amount"
TAX_REFUND_KEYS = ("tax_amount", "shipping_tax_amount")
SHIPPING_REFUND_KEYS = ("cost",)


def _sum_values(values: Iterable[Optional[str]]) -> Decimal:
    total = Decimal("0")
    for value in values:
        if value is None or not str(value).strip():
            continue
        try:
            total += Decimal(str(value).strip())
        except InvalidOperation:
            logger.warning(f"Skipping non-numeric refund value: {value!r}")
    return total


class RefundTotals:
    """
    Read-only refund aggregates for an order.

    Refunds are separate entities whose parent is the order, so these values
    are never stored on the order record.
    """

    def __init__(self, session: Session, refund_type: Optional[str] = None):
        self.session = session
        self.refund_type = refund_type or settings.refund_type

    def get_total_refunded(self, order: Order) -> Decimal:
        """Signed sum of refund amounts across the order's refunds."""
        query = (
            select(PostMeta.meta_value)
            .join(Post, Post.id == PostMeta.post_id)
            .where(
                Post.post_type == self.refund_type,
                Post.post_parent == order.id,
                PostMeta.meta_key == REFUND_AMOUNT_KEY,
            )
        )
        return _sum_values(self.session.scalars(query))

    def get_total_tax_refunded(self, order: Order) -> Decimal:
        """Absolute refunded tax (order and shipping tax) across refund tax items."""
        return abs(self._sum_refund_item_meta(order, "tax", TAX_REFUND_KEYS))

    def get_total_shipping_refunded(self, order: Order) -> Decimal:
        """Absolute refunded shipping cost across refund shipping items."""
        return abs(self._sum_refund_item_meta(order, "shipping", SHIPPING_REFUND_KEYS))

    def _sum_refund_item_meta(self, order: Order, item_type: str, meta_keys: Iterable[str]) -> Decimal:
        query = (
            select(OrderItemMeta.meta_value)
            .join(OrderItem, OrderItem.order_item_id == OrderItemMeta.order_item_id)
            .join(Post, Post.id == OrderItem.order_id)
            .where(
                Post.post_type == self.refund_type,
                Post.post_parent == order.id,
                OrderItem.order_item_type == item_type,
                OrderItemMeta.meta_key.in_(list(meta_keys)),
            )
        )
        return _sum_values(self.session.scalars(query))
