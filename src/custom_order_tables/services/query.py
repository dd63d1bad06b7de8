"""Entity queries over the posts table, with the order customer extension."""

import math
from typing import List, Union

from sqlalchemy import Select, asc, desc, func, or_, select
from sqlalchemy.orm import Session

from custom_order_tables.core.logger import setup_logger
from custom_order_tables.db.models import OrderRecord, Post
from custom_order_tables.models.query import EntityQuery, EntityQueryResult

logger = setup_logger(__name__)

# Statuses hidden unless asked for explicitly
HIDDEN_STATUSES = ("trash", "auto-draft")

ORDERBY_COLUMNS = {
    "date": Post.post_date,
    "id": Post.id,
    "modified": Post.post_modified,
    "parent": Post.post_parent,
    "title": Post.post_title,
    "type": Post.post_type,
}


def apply_customer_query(stmt: Select, values: List[Union[int, str]]) -> Select:
    """
    Restrict an entity query to orders of the given customers.

    Integers (or digit strings) match the order's customer ID, anything
    else is compared case-insensitively with the billing email.
    """
    customer_ids = set()
    emails = set()
    for value in values:
        if isinstance(value, int) or (isinstance(value, str) and value.strip().isdecimal()):
            customer_ids.add(int(value))
        elif isinstance(value, str) and value.strip():
            emails.add(value.strip().lower())

    conditions = []
    if customer_ids:
        conditions.append(OrderRecord.customer_id.in_(sorted(customer_ids)))
    if emails:
        conditions.append(func.lower(OrderRecord.billing_email).in_(sorted(emails)))
    if not conditions:
        return stmt

    return stmt.join(OrderRecord, OrderRecord.order_id == Post.id).where(or_(*conditions))


class EntityQueryRunner:
    """Runs ``EntityQuery`` objects against the posts table."""

    def __init__(self, session: Session):
        self.session = session

    def run(self, query: EntityQuery) -> EntityQueryResult:
        """
        Execute a query and return matching post IDs.

        Args:
            query: The entity query

        Returns:
            EntityQueryResult with IDs, plus found_posts/max_num_pages unless
            no_found_rows is set
        """
        stmt = self._build_filtered(query)

        found_posts = 0
        if not query.no_found_rows:
            count_stmt = select(func.count()).select_from(stmt.subquery())
            found_posts = self.session.execute(count_stmt).scalar_one()

        direction = asc if query.order.upper() == "ASC" else desc
        order_column = ORDERBY_COLUMNS.get(query.orderby.lower(), Post.post_date)
        stmt = stmt.order_by(direction(order_column), direction(Post.id))

        per_page = query.posts_per_page
        if per_page > 0:
            if query.offset is not None:
                offset = query.offset
            else:
                offset = (max(query.paged, 1) - 1) * per_page
            stmt = stmt.limit(per_page).offset(offset)
        elif query.offset:
            stmt = stmt.offset(query.offset)

        ids = list(self.session.scalars(stmt).all())

        if per_page > 0:
            max_num_pages = math.ceil(found_posts / per_page)
        else:
            max_num_pages = 1 if found_posts else 0

        logger.debug(f"Entity query matched {len(ids)} id(s) (found={found_posts})")
        return EntityQueryResult(ids=ids, found_posts=found_posts, max_num_pages=max_num_pages)

    def _build_filtered(self, query: EntityQuery) -> Select:
        stmt = select(Post.id).where(Post.post_type == query.post_type)

        if query.post_status:
            stmt = stmt.where(Post.post_status.in_(query.post_status))
        else:
            stmt = stmt.where(Post.post_status.notin_(HIDDEN_STATUSES))

        if query.post_parent is not None:
            stmt = stmt.where(Post.post_parent == query.post_parent)

        if query.post__not_in:
            stmt = stmt.where(Post.id.notin_(query.post__not_in))

        if query.date_before is not None:
            stmt = stmt.where(Post.post_date < query.date_before)

        if query.date_after is not None:
            stmt = stmt.where(Post.post_date > query.date_after)

        if query.customer_query:
            stmt = apply_customer_query(stmt, query.customer_query)

        return stmt
