"""SQLAlchemy models for order data.

``OrderRecord`` is the dedicated orders table. The remaining models describe
the host platform's generic tables (entities, key/value meta, order items and
download permissions) that the order layer reads from and writes through to.
"""

from datetime import datetime
from decimal import Decimal
from typing import Any, Dict, Optional

from sqlalchemy import (
    BigInteger,
    Boolean,
    DateTime,
    ForeignKey,
    Integer,
    Numeric,
    String,
    Text,
)
from sqlalchemy.orm import Mapped, mapped_column

from .base import Base
from .mapping import ORDER_FIELDS


class Post(Base):
    """Generic entity row. Orders and refunds are both stored here."""

    __tablename__ = "posts"

    id: Mapped[int] = mapped_column(BigInteger().with_variant(Integer, "sqlite"), primary_key=True, autoincrement=True)
    post_type: Mapped[str] = mapped_column(String(20), index=True, nullable=False, default="post")
    post_status: Mapped[str] = mapped_column(String(20), index=True, nullable=False, default="publish")
    post_parent: Mapped[int] = mapped_column(BigInteger, index=True, nullable=False, default=0)
    post_title: Mapped[str] = mapped_column(Text, nullable=False, default="")

    # Timestamps (UTC)
    post_date: Mapped[datetime] = mapped_column(
        DateTime, default=datetime.utcnow, nullable=False, index=True
    )
    post_modified: Mapped[datetime] = mapped_column(
        DateTime,
        default=datetime.utcnow,
        onupdate=datetime.utcnow,
        nullable=False,
    )


class PostMeta(Base):
    """Legacy key/value metadata attached to a post."""

    __tablename__ = "postmeta"

    meta_id: Mapped[int] = mapped_column(BigInteger().with_variant(Integer, "sqlite"), primary_key=True, autoincrement=True)
    post_id: Mapped[int] = mapped_column(BigInteger, index=True, nullable=False, default=0)
    meta_key: Mapped[Optional[str]] = mapped_column(String(255), index=True, nullable=True)
    meta_value: Mapped[Optional[str]] = mapped_column(Text, nullable=True)


class OrderRecord(Base):
    """
    Dedicated orders table: one row per order.

    Columns mirror ``ORDER_FIELDS`` in ``mapping.py``; ``to_dict`` and the
    writer rely on the two staying in sync.
    """

    __tablename__ = "woocommerce_orders"

    # Primary Key (the order's post ID)
    order_id: Mapped[int] = mapped_column(
        BigInteger().with_variant(Integer, "sqlite"), ForeignKey("posts.id"), primary_key=True, autoincrement=False
    )

    # Identity / meta
    order_key: Mapped[Optional[str]] = mapped_column(String(100), unique=True, nullable=True)
    customer_id: Mapped[int] = mapped_column(BigInteger, index=True, nullable=False, default=0)
    payment_method: Mapped[str] = mapped_column(String(100), nullable=False, default="")
    payment_method_title: Mapped[str] = mapped_column(String(100), nullable=False, default="")
    transaction_id: Mapped[str] = mapped_column(String(100), nullable=False, default="")
    customer_ip_address: Mapped[str] = mapped_column(String(100), nullable=False, default="")
    customer_user_agent: Mapped[str] = mapped_column(Text, nullable=False, default="")
    created_via: Mapped[str] = mapped_column(String(100), nullable=False, default="")
    date_completed: Mapped[Optional[datetime]] = mapped_column(DateTime, nullable=True)
    date_paid: Mapped[Optional[datetime]] = mapped_column(DateTime, nullable=True)
    cart_hash: Mapped[str] = mapped_column(String(32), nullable=False, default="")

    # Billing address
    billing_first_name: Mapped[str] = mapped_column(String(100), nullable=False, default="")
    billing_last_name: Mapped[str] = mapped_column(String(100), nullable=False, default="")
    billing_company: Mapped[str] = mapped_column(String(100), nullable=False, default="")
    billing_address_1: Mapped[str] = mapped_column(String(200), nullable=False, default="")
    billing_address_2: Mapped[str] = mapped_column(String(200), nullable=False, default="")
    billing_city: Mapped[str] = mapped_column(String(100), nullable=False, default="")
    billing_state: Mapped[str] = mapped_column(String(100), nullable=False, default="")
    billing_postcode: Mapped[str] = mapped_column(String(20), nullable=False, default="")
    billing_country: Mapped[str] = mapped_column(String(2), nullable=False, default="")
    billing_email: Mapped[str] = mapped_column(String(200), index=True, nullable=False, default="")
    billing_phone: Mapped[str] = mapped_column(String(200), nullable=False, default="")

    # Shipping address
    shipping_first_name: Mapped[str] = mapped_column(String(100), nullable=False, default="")
    shipping_last_name: Mapped[str] = mapped_column(String(100), nullable=False, default="")
    shipping_company: Mapped[str] = mapped_column(String(100), nullable=False, default="")
    shipping_address_1: Mapped[str] = mapped_column(String(200), nullable=False, default="")
    shipping_address_2: Mapped[str] = mapped_column(String(200), nullable=False, default="")
    shipping_city: Mapped[str] = mapped_column(String(100), nullable=False, default="")
    shipping_state: Mapped[str] = mapped_column(String(100), nullable=False, default="")
    shipping_postcode: Mapped[str] = mapped_column(String(20), nullable=False, default="")
    shipping_country: Mapped[str] = mapped_column(String(2), nullable=False, default="")

    # Monetary totals
    discount_total: Mapped[Decimal] = mapped_column(Numeric(12, 2), nullable=False, default=0)
    discount_tax: Mapped[Decimal] = mapped_column(Numeric(12, 2), nullable=False, default=0)
    shipping_total: Mapped[Decimal] = mapped_column(Numeric(12, 2), nullable=False, default=0)
    shipping_tax: Mapped[Decimal] = mapped_column(Numeric(12, 2), nullable=False, default=0)
    cart_tax: Mapped[Decimal] = mapped_column(Numeric(12, 2), nullable=False, default=0)
    total: Mapped[Decimal] = mapped_column(Numeric(12, 2), nullable=False, default=0)

    # Versioning
    version: Mapped[str] = mapped_column(String(16), nullable=False, default="")
    currency: Mapped[str] = mapped_column(String(3), nullable=False, default="")
    prices_include_tax: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)

    def to_dict(self) -> Dict[str, Any]:
        """Return mapped column values keyed by column name."""
        return {field.column: getattr(self, field.column) for field in ORDER_FIELDS}


class OrderItem(Base):
    """Line, tax, shipping and fee items belonging to an order or refund."""

    __tablename__ = "woocommerce_order_items"

    order_item_id: Mapped[int] = mapped_column(
        BigInteger().with_variant(Integer, "sqlite"), primary_key=True, autoincrement=True
    )
    order_item_name: Mapped[str] = mapped_column(Text, nullable=False, default="")
    order_item_type: Mapped[str] = mapped_column(String(200), nullable=False, default="")
    order_id: Mapped[int] = mapped_column(BigInteger, index=True, nullable=False)


class OrderItemMeta(Base):
    """Key/value metadata attached to an order item."""

    __tablename__ = "woocommerce_order_itemmeta"

    meta_id: Mapped[int] = mapped_column(BigInteger().with_variant(Integer, "sqlite"), primary_key=True, autoincrement=True)
    order_item_id: Mapped[int] = mapped_column(BigInteger, index=True, nullable=False)
    meta_key: Mapped[Optional[str]] = mapped_column(String(255), index=True, nullable=True)
    meta_value: Mapped[Optional[str]] = mapped_column(Text, nullable=True)


class DownloadPermission(Base):
    """Grants a customer access to a downloadable file bought in an order."""

    __tablename__ = "woocommerce_downloadable_product_permissions"

    permission_id: Mapped[int] = mapped_column(
        BigInteger().with_variant(Integer, "sqlite"), primary_key=True, autoincrement=True
    )
    download_id: Mapped[str] = mapped_column(String(36), nullable=False)
    product_id: Mapped[int] = mapped_column(BigInteger, nullable=False)
    order_id: Mapped[int] = mapped_column(BigInteger, index=True, nullable=False, default=0)
    order_key: Mapped[str] = mapped_column(String(200), nullable=False, default="")
    user_email: Mapped[str] = mapped_column(String(200), nullable=False, default="")
    user_id: Mapped[Optional[int]] = mapped_column(BigInteger, nullable=True)
    downloads_remaining: Mapped[Optional[str]] = mapped_column(String(9), nullable=True)
    access_granted: Mapped[datetime] = mapped_column(DateTime, default=datetime.utcnow, nullable=False)
    access_expires: Mapped[Optional[datetime]] = mapped_column(DateTime, nullable=True)
