"""In-memory order object with change tracking."""

from datetime import datetime
from typing import Any, Dict, Iterable, Mapping, Optional

from custom_order_tables.db.mapping import FIELDS_BY_COLUMN, ORDER_FIELDS


class Order:
    """
    An order as seen by the host application.

    Holds the mapped order attributes plus the entity-level fields (status,
    parent, creation date). Before the object is marked as read, setters
    write straight into the baseline data; afterwards they are collected as
    changes until ``apply_changes`` is called.
    """

    def __init__(
        self,
        order_id: int = 0,
        status: str = "pending",
        parent_id: int = 0,
        date_created: Optional[datetime] = None,
        order_type: str = "shop_order",
    ):
        self.id = order_id
        self.status = status
        self.parent_id = parent_id
        self.date_created = date_created
        self.type = order_type

        self._data: Dict[str, Any] = {field.column: field.default for field in ORDER_FIELDS}
        self._changes: Dict[str, Any] = {}
        self._object_read = False

    def __repr__(self) -> str:
        return f"<Order id={self.id} key={self.get('order_key')!r} status={self.status!r}>"

    # ------------------------------------------------------------------
    # Field access
    # ------------------------------------------------------------------

    def get(self, field: str) -> Any:
        """Current value of a field, including unsaved changes."""
        if field in self._changes:
            return self._changes[field]
        return self._data[field]

    def get_original(self, field: str) -> Any:
        """Value of a field as last loaded or saved."""
        return self._data[field]

    def set(self, field: str, value: Any) -> None:
        """Set a mapped field, coercing the value to the field's type."""
        mapped = FIELDS_BY_COLUMN.get(field)
        if mapped is None:
            raise KeyError(f"Unknown order field: {field}")

        value = mapped.decode(value)

        if not self._object_read:
            self._data[field] = value
            return

        if value == self._data[field]:
            self._changes.pop(field, None)
        else:
            self._changes[field] = value

    def set_props(self, props: Mapping[str, Any]) -> None:
        """Set several mapped fields at once; unknown keys are ignored."""
        for field, value in props.items():
            if field in FIELDS_BY_COLUMN:
                self.set(field, value)

    def set_order_key(self, order_key: str) -> None:
        self.set("order_key", order_key)

    def get_data(self, fields: Optional[Iterable[str]] = None) -> Dict[str, Any]:
        """Current values for the given fields (all mapped fields by default)."""
        columns = fields if fields is not None else FIELDS_BY_COLUMN.keys()
        return {column: self.get(column) for column in columns}

    # ------------------------------------------------------------------
    # Change tracking
    # ------------------------------------------------------------------

    def get_changes(self) -> Dict[str, Any]:
        """Fields whose current value differs from the loaded baseline."""
        return dict(self._changes)

    def apply_changes(self) -> None:
        """Merge pending changes into the baseline."""
        self._data.update(self._changes)
        self._changes.clear()

    def set_object_read(self, read: bool = True) -> None:
        self._object_read = read

    @property
    def object_read(self) -> bool:
        return self._object_read

    # ------------------------------------------------------------------
    # Convenience accessors
    # ------------------------------------------------------------------

    @property
    def order_key(self) -> str:
        return self.get("order_key")

    @property
    def customer_id(self) -> int:
        return self.get("customer_id")

    @property
    def billing_email(self) -> str:
        return self.get("billing_email")

    @property
    def total(self):
        return self.get("total")
