"""Pydantic models for order listing queries."""

from datetime import datetime
from typing import Any, List, Literal, Optional, Union

from pydantic import BaseModel, Field

from custom_order_tables.config.settings import settings


class OrderQuery(BaseModel):
    """Structured filter accepted by ``OrderFinder.list_orders``."""

    type: Optional[str] = Field(None, description="Entity type (defaults to the order type)")
    status: Optional[Union[str, List[str]]] = Field(None, description="Status or statuses; None = any but trash")
    limit: int = Field(default_factory=lambda: settings.default_page_size, description="-1 for no limit")
    offset: Optional[int] = Field(None, description="Takes precedence over page")
    page: int = 1
    exclude: List[int] = Field(default_factory=list)
    parent: Optional[int] = None
    customer: Optional[Union[int, str, List[Union[int, str]]]] = None
    email: Optional[Union[str, List[str]]] = None
    date_before: Optional[datetime] = None
    date_after: Optional[datetime] = None
    orderby: str = "date"
    order: Literal["ASC", "DESC", "asc", "desc"] = "DESC"
    return_: Literal["ids", "objects"] = Field("ids", alias="return")
    paginate: bool = False

    class Config:
        populate_by_name = True


class EntityQuery(BaseModel):
    """Query in the generic entity store's own terms."""

    post_type: str
    post_status: Optional[List[str]] = None
    posts_per_page: int = 10
    offset: Optional[int] = None
    paged: int = 1
    post_parent: Optional[int] = None
    post__not_in: List[int] = Field(default_factory=list)
    date_before: Optional[datetime] = None
    date_after: Optional[datetime] = None
    orderby: str = "date"
    order: str = "DESC"
    no_found_rows: bool = False

    # Order-specific extension: customer IDs and/or billing emails
    customer_query: List[Union[int, str]] = Field(default_factory=list)


class EntityQueryResult(BaseModel):
    """IDs returned by an entity query, plus totals when counted."""

    ids: List[int] = Field(default_factory=list)
    found_posts: int = 0
    max_num_pages: int = 0


class OrderPage(BaseModel):
    """Paginated listing envelope."""

    items: List[Any] = Field(default_factory=list)
    total_count: int = 0
    page_count: int = 0
