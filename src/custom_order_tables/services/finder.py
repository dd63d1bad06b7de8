"""Find, search and list orders."""

from typing import Callable, List, Optional, Sequence, Set, Union

from sqlalchemy import select
from sqlalchemy.orm import Session

from custom_order_tables.config.settings import settings
from custom_order_tables.core.logger import setup_logger
from custom_order_tables.db.mapping import META_TO_COLUMN
from custom_order_tables.db.models import OrderItem
from custom_order_tables.db.repository import (
    LIKE_ESCAPE,
    OrderRecordRepository,
    PostMetaRepository,
    contains_pattern,
)
from custom_order_tables.models.order import Order
from custom_order_tables.models.query import EntityQuery, OrderPage, OrderQuery
from custom_order_tables.services.query import EntityQueryRunner

logger = setup_logger(__name__)

# Host hook run on the translated query before it is executed
QueryTransform = Callable[[EntityQuery, OrderQuery], EntityQuery]
OrderLoader = Callable[[int], Optional[Order]]


def _as_list(value) -> list:
    if value is None:
        return []
    if isinstance(value, (list, tuple, set)):
        return list(value)
    return [value]


class OrderFinder:
    """Look up orders by key, free-text term or structured criteria."""

    def __init__(
        self,
        session: Session,
        records: OrderRecordRepository,
        meta: PostMetaRepository,
        order_loader: Optional[OrderLoader] = None,
        search_fields: Optional[Sequence[str]] = None,
        query_transforms: Optional[Sequence[QueryTransform]] = None,
    ):
        self.session = session
        self.records = records
        self.meta = meta
        self.entities = EntityQueryRunner(session)
        self.order_loader = order_loader
        self.search_fields = list(search_fields if search_fields is not None else settings.order_search_fields)
        self.query_transforms = list(query_transforms or [])

    def find_id_by_key(self, order_key: str) -> Optional[int]:
        """Order ID for an order key, or None."""
        return self.records.find_id_by_key(order_key)

    def search(self, term: str) -> Set[int]:
        """
        Search orders for a term.

        Combines: the term itself when it is a non-negative integer, the
        configured searchable meta keys (and the table columns they map to),
        and order item names.

        Args:
            term: The search term

        Returns:
            Set of matching order IDs
        """
        term = (term or "").strip()
        order_ids: Set[int] = set()
        if not term:
            return order_ids

        # Treat a numeric search term as an order ID
        if term.isdecimal():
            order_ids.add(int(term))

        pattern = contains_pattern(term)

        meta_keys = [key.strip() for key in self.search_fields if key and key.strip()]
        if meta_keys:
            order_ids |= self.meta.search_ids(meta_keys, pattern)

            # Migrated orders may no longer have the postmeta
            columns = [META_TO_COLUMN[key] for key in meta_keys if key in META_TO_COLUMN]
            order_ids |= self.records.search_columns(columns, pattern)

        item_query = select(OrderItem.order_id).where(
            OrderItem.order_item_name.ilike(pattern, escape=LIKE_ESCAPE)
        )
        order_ids |= set(self.session.scalars(item_query).all())

        logger.info(f"Search for {term!r} matched {len(order_ids)} order(s)")
        return order_ids

    def build_query(self, criteria: OrderQuery) -> EntityQuery:
        """Translate order criteria into an entity query."""
        customer_query = _as_list(criteria.customer) + _as_list(criteria.email)

        query = EntityQuery(
            post_type=criteria.type or settings.order_type,
            post_status=_as_list(criteria.status) or None,
            posts_per_page=criteria.limit,
            offset=abs(criteria.offset) if criteria.offset is not None else None,
            paged=abs(criteria.page) or 1,
            post_parent=abs(criteria.parent) if criteria.parent is not None else None,
            post__not_in=[abs(order_id) for order_id in criteria.exclude],
            date_before=criteria.date_before,
            date_after=criteria.date_after,
            orderby=criteria.orderby,
            order=criteria.order.upper(),
            no_found_rows=not criteria.paginate,
            customer_query=customer_query,
        )

        for transform in self.query_transforms:
            query = transform(query, criteria)

        return query

    def list_orders(self, criteria: Optional[OrderQuery] = None) -> Union[List[int], List[Order], OrderPage]:
        """
        List orders matching the criteria.

        Returns a list of IDs, a list of orders (``return="objects"``), or an
        OrderPage envelope when ``paginate`` is set.
        """
        criteria = criteria or OrderQuery()
        result = self.entities.run(self.build_query(criteria))

        if criteria.return_ == "objects":
            if self.order_loader is None:
                raise ValueError("Listing order objects needs an order loader")
            loaded = (self.order_loader(order_id) for order_id in result.ids)
            items = [order for order in loaded if order is not None]
        else:
            items = list(result.ids)

        if criteria.paginate:
            return OrderPage(
                items=items,
                total_count=result.found_posts,
                page_count=result.max_num_pages,
            )
        return items
