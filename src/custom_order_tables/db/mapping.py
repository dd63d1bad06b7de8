"""Mapping between order table columns and legacy postmeta keys.

Every field stored on the orders table has exactly one legacy meta key.
Adding a field to the order without adding it here means migrations
silently drop it.
"""

import calendar
from collections import OrderedDict
from datetime import datetime, timezone
from decimal import Decimal
from enum import Enum
from typing import TYPE_CHECKING, Any, Callable, Dict, NamedTuple, Optional

if TYPE_CHECKING:
    from custom_order_tables.models.order import Order


class FieldKind(str, Enum):
    """Value type of a mapped field."""

    TEXT = "text"
    INTEGER = "integer"
    DECIMAL = "decimal"
    BOOLEAN = "boolean"
    DATETIME = "datetime"


def _is_blank(value: Any) -> bool:
    return value is None or (isinstance(value, str) and not value.strip())


def is_empty(value: Any) -> bool:
    """
    Check whether a stored value counts as empty.

    Matches the legacy store's notion of emptiness: None, "", "0",
    numeric zero and False are all empty.
    """
    if value is None:
        return True
    if isinstance(value, str):
        return value == "" or value == "0"
    if isinstance(value, (bool, int, float, Decimal)):
        return not value
    return False


def decode_value(kind: FieldKind, value: Any) -> Any:
    """Convert a legacy (string) or typed value to the field's Python type."""
    if kind is FieldKind.TEXT:
        return "" if value is None else str(value)

    if kind is FieldKind.INTEGER:
        if _is_blank(value):
            return 0
        return int(value.strip()) if isinstance(value, str) else int(value)

    if kind is FieldKind.DECIMAL:
        if _is_blank(value):
            return Decimal("0")
        if isinstance(value, Decimal):
            return value
        return Decimal(str(value).strip())

    if kind is FieldKind.BOOLEAN:
        if isinstance(value, str):
            return value == "yes"
        return bool(value)

    if kind is FieldKind.DATETIME:
        if _is_blank(value):
            return None
        if isinstance(value, datetime):
            return value
        if isinstance(value, (int, float)) or str(value).strip().isdecimal():
            timestamp = int(str(value).strip()) if isinstance(value, str) else int(value)
            return datetime.fromtimestamp(timestamp, tz=timezone.utc).replace(tzinfo=None)
        return datetime.fromisoformat(str(value).strip())

    raise ValueError(f"Unknown field kind: {kind}")


def encode_value(kind: FieldKind, value: Any) -> str:
    """Convert a typed value to its legacy postmeta string form."""
    if kind is FieldKind.BOOLEAN:
        return "yes" if value else "no"

    if value is None:
        return ""

    if kind is FieldKind.DATETIME:
        if value.tzinfo is not None:
            value = value.astimezone(timezone.utc)
        return str(calendar.timegm(value.timetuple()))

    if kind is FieldKind.INTEGER:
        return str(int(value))

    if kind is FieldKind.DECIMAL:
        return str(decode_value(kind, value))

    return str(value)


_DEFAULTS = {
    FieldKind.TEXT: "",
    FieldKind.INTEGER: 0,
    FieldKind.DECIMAL: Decimal("0"),
    FieldKind.BOOLEAN: False,
    FieldKind.DATETIME: None,
}


class OrderField(NamedTuple):
    """One mapped order attribute."""

    column: str
    meta_key: str
    kind: FieldKind = FieldKind.TEXT

    @property
    def default(self) -> Any:
        return _DEFAULTS[self.kind]

    def decode(self, value: Any) -> Any:
        return decode_value(self.kind, value)

    def encode(self, value: Any) -> str:
        return encode_value(self.kind, value)

    def is_unset(self, value: Any) -> bool:
        """Whether an orders table value leaves the field open for legacy data.

        Amounts are only unset when NULL; a stored 0.00 is a real total.
        """
        if self.kind is FieldKind.DECIMAL:
            return value is None
        return is_empty(value)


ORDER_FIELDS = (
    OrderField("order_key", "_order_key"),
    OrderField("customer_id", "_customer_user", FieldKind.INTEGER),
    OrderField("payment_method", "_payment_method"),
    OrderField("payment_method_title", "_payment_method_title"),
    OrderField("transaction_id", "_transaction_id"),
    OrderField("customer_ip_address", "_customer_ip_address"),
    OrderField("customer_user_agent", "_customer_user_agent"),
    OrderField("created_via", "_created_via"),
    OrderField("date_completed", "_date_completed", FieldKind.DATETIME),
    OrderField("date_paid", "_date_paid", FieldKind.DATETIME),
    OrderField("cart_hash", "_cart_hash"),

    OrderField("billing_first_name", "_billing_first_name"),
    OrderField("billing_last_name", "_billing_last_name"),
    OrderField("billing_company", "_billing_company"),
    OrderField("billing_address_1", "_billing_address_1"),
    OrderField("billing_address_2", "_billing_address_2"),
    OrderField("billing_city", "_billing_city"),
    OrderField("billing_state", "_billing_state"),
    OrderField("billing_postcode", "_billing_postcode"),
    OrderField("billing_country", "_billing_country"),
    OrderField("billing_email", "_billing_email"),
    OrderField("billing_phone", "_billing_phone"),

    OrderField("shipping_first_name", "_shipping_first_name"),
    OrderField("shipping_last_name", "_shipping_last_name"),
    OrderField("shipping_company", "_shipping_company"),
    OrderField("shipping_address_1", "_shipping_address_1"),
    OrderField("shipping_address_2", "_shipping_address_2"),
    OrderField("shipping_city", "_shipping_city"),
    OrderField("shipping_state", "_shipping_state"),
    OrderField("shipping_postcode", "_shipping_postcode"),
    OrderField("shipping_country", "_shipping_country"),

    OrderField("discount_total", "_cart_discount", FieldKind.DECIMAL),
    OrderField("discount_tax", "_cart_discount_tax", FieldKind.DECIMAL),
    OrderField("shipping_total", "_order_shipping", FieldKind.DECIMAL),
    OrderField("shipping_tax", "_order_shipping_tax", FieldKind.DECIMAL),
    OrderField("cart_tax", "_order_tax", FieldKind.DECIMAL),
    OrderField("total", "_order_total", FieldKind.DECIMAL),

    OrderField("version", "_order_version"),
    OrderField("currency", "_order_currency"),
    OrderField("prices_include_tax", "_prices_include_tax", FieldKind.BOOLEAN),
)

FIELDS_BY_COLUMN: Dict[str, OrderField] = {field.column: field for field in ORDER_FIELDS}
COLUMN_TO_META: Dict[str, str] = {field.column: field.meta_key for field in ORDER_FIELDS}
META_TO_COLUMN: Dict[str, str] = {field.meta_key: field.column for field in ORDER_FIELDS}


def get_postmeta_mapping() -> "OrderedDict[str, str]":
    """Return the column => legacy meta key mapping, in column order."""
    return OrderedDict((field.column, field.meta_key) for field in ORDER_FIELDS)


def get_field(column: str) -> Optional[OrderField]:
    """Look up a mapped field by column name."""
    return FIELDS_BY_COLUMN.get(column)


def _make_setter(field: OrderField) -> Callable[["Order", Any], None]:
    def setter(order: "Order", value: Any) -> None:
        order.set(field.column, field.decode(value))

    setter.__name__ = f"set_{field.column}"
    return setter


# Typed setter per column, used when applying legacy values onto an order
FIELD_SETTERS: Dict[str, Callable[["Order", Any], None]] = {
    field.column: _make_setter(field) for field in ORDER_FIELDS
}
