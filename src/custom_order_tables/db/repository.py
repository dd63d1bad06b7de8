"""Repositories for order table and legacy meta data access."""

from typing import Any, Dict, Iterable, List, Optional, Protocol, Set

from sqlalchemy import delete, insert, or_, select, update
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from custom_order_tables.core.exceptions import DuplicateOrderRecordError
from custom_order_tables.core.logger import setup_logger

from .models import DownloadPermission, OrderRecord, PostMeta

logger = setup_logger(__name__)

LIKE_ESCAPE = "\\"


def escape_like(term: str) -> str:
    """Escape LIKE wildcards so the term matches literally."""
    return (
        term.replace(LIKE_ESCAPE, LIKE_ESCAPE * 2)
        .replace("%", f"{LIKE_ESCAPE}%")
        .replace("_", f"{LIKE_ESCAPE}_")
    )


def contains_pattern(term: str) -> str:
    """Wildcard-wrapped LIKE pattern for a substring match."""
    return f"%{escape_like(term)}%"


def _column_values(values: Dict[str, Any]) -> Dict[str, Any]:
    # The order key is unique; an empty key is stored as NULL
    if "order_key" in values and not values["order_key"]:
        values = {**values, "order_key": None}
    return values


class OrderRecordRepository:
    """Data access layer for the dedicated orders table."""

    def __init__(self, session: Session):
        """Initialize repository with session."""
        self.session = session

    def fetch(self, order_id: int) -> Optional[OrderRecord]:
        """Get the order record for an order, or None if not migrated yet."""
        query = (
            select(OrderRecord)
            .where(OrderRecord.order_id == order_id)
            .execution_options(populate_existing=True)
        )
        return self.session.execute(query).scalar_one_or_none()

    def insert(self, order_id: int, values: Dict[str, Any]) -> None:
        """
        Insert a new order record.

        Args:
            order_id: The order's entity ID
            values: Column values for every mapped field

        Raises:
            DuplicateOrderRecordError: A record already exists for this order
        """
        stmt = insert(OrderRecord).values(order_id=order_id, **_column_values(values))
        try:
            self.session.execute(stmt)
            self.session.commit()
        except IntegrityError as e:
            self.session.rollback()
            logger.error(f"Duplicate order record for order {order_id}: {e.orig}")
            raise DuplicateOrderRecordError(order_id) from e

        logger.debug(f"Inserted order record for order {order_id}")

    def update(self, order_id: int, changes: Dict[str, Any]) -> int:
        """Update the given columns. Returns count of updated rows."""
        if not changes:
            return 0

        stmt = (
            update(OrderRecord)
            .where(OrderRecord.order_id == order_id)
            .values(**_column_values(changes))
            .execution_options(synchronize_session=False)
        )
        try:
            result = self.session.execute(stmt)
            self.session.commit()
        except IntegrityError as e:
            self.session.rollback()
            logger.error(f"Integrity error updating order {order_id}: {e.orig}")
            raise

        logger.debug(f"Updated order {order_id} columns: {', '.join(changes)}")
        return result.rowcount

    def delete(self, order_id: int) -> int:
        """Delete the order record. Returns count of deleted rows."""
        stmt = delete(OrderRecord).where(OrderRecord.order_id == order_id)
        result = self.session.execute(stmt.execution_options(synchronize_session=False))
        self.session.commit()
        return result.rowcount

    def find_id_by_key(self, order_key: str) -> Optional[int]:
        """Find an order ID by its order key."""
        if not order_key:
            return None
        query = select(OrderRecord.order_id).where(OrderRecord.order_key == order_key)
        return self.session.execute(query).scalar_one_or_none()

    def search_columns(self, columns: Iterable[str], pattern: str) -> Set[int]:
        """Order IDs where any of the given columns matches a LIKE pattern."""
        conditions = [
            getattr(OrderRecord, column).ilike(pattern, escape=LIKE_ESCAPE)
            for column in columns
        ]
        if not conditions:
            return set()
        query = select(OrderRecord.order_id).where(or_(*conditions))
        return set(self.session.scalars(query).all())


class PostMetaRepository:
    """Single-value access to legacy postmeta."""

    def __init__(self, session: Session):
        """Initialize repository with session."""
        self.session = session

    def get(self, post_id: int, meta_key: str) -> Optional[str]:
        """Get the first value stored for a key, or None."""
        query = (
            select(PostMeta.meta_value)
            .where(PostMeta.post_id == post_id, PostMeta.meta_key == meta_key)
            .order_by(PostMeta.meta_id)
            .limit(1)
        )
        return self.session.execute(query).scalar_one_or_none()

    def get_all(self, post_id: int) -> Dict[str, str]:
        """All meta for a post, first value per key."""
        query = (
            select(PostMeta.meta_key, PostMeta.meta_value)
            .where(PostMeta.post_id == post_id)
            .order_by(PostMeta.meta_id)
        )
        values: Dict[str, str] = {}
        for key, value in self.session.execute(query):
            values.setdefault(key, value)
        return values

    def update(self, post_id: int, meta_key: str, meta_value: str) -> None:
        """Set a value, replacing any existing values for the key."""
        stmt = (
            update(PostMeta)
            .where(PostMeta.post_id == post_id, PostMeta.meta_key == meta_key)
            .values(meta_value=meta_value)
            .execution_options(synchronize_session=False)
        )
        result = self.session.execute(stmt)
        if result.rowcount == 0:
            self.session.add(PostMeta(post_id=post_id, meta_key=meta_key, meta_value=meta_value))
        self.session.commit()

    def delete(self, post_id: int, meta_key: Optional[str] = None) -> int:
        """Delete one key (or every key when meta_key is None) for a post."""
        stmt = delete(PostMeta).where(PostMeta.post_id == post_id)
        if meta_key is not None:
            stmt = stmt.where(PostMeta.meta_key == meta_key)
        result = self.session.execute(stmt.execution_options(synchronize_session=False))
        self.session.commit()
        return result.rowcount

    def search_ids(self, meta_keys: List[str], pattern: str) -> Set[int]:
        """Post IDs having any of the keys with a value matching a LIKE pattern."""
        if not meta_keys:
            return set()
        query = (
            select(PostMeta.post_id)
            .where(
                PostMeta.meta_key.in_(meta_keys),
                PostMeta.meta_value.ilike(pattern, escape=LIKE_ESCAPE),
            )
            .distinct()
        )
        return set(self.session.scalars(query).all())


class DownloadPermissionStore(Protocol):
    """Keeps download permissions attributed to the order's customer."""

    def update_owner(self, order_id: int, customer_id: int, billing_email: str) -> None:
        ...


class DownloadPermissionRepository:
    """Download permissions stored in the permissions table."""

    def __init__(self, session: Session):
        """Initialize repository with session."""
        self.session = session

    def update_owner(self, order_id: int, customer_id: int, billing_email: str) -> None:
        """Re-attribute every permission granted by an order."""
        stmt = (
            update(DownloadPermission)
            .where(DownloadPermission.order_id == order_id)
            .values(user_id=customer_id or None, user_email=billing_email or "")
            .execution_options(synchronize_session=False)
        )
        result = self.session.execute(stmt)
        self.session.commit()
        logger.info(f"Updated {result.rowcount} download permission(s) for order {order_id}")
