"""Database module."""

from .base import Base, get_engine, get_session_factory, init_db
from .mapping import COLUMN_TO_META, FIELD_SETTERS, META_TO_COLUMN, ORDER_FIELDS, get_postmeta_mapping
from .models import DownloadPermission, OrderItem, OrderItemMeta, OrderRecord, Post, PostMeta
from .repository import (
    DownloadPermissionRepository,
    DownloadPermissionStore,
    OrderRecordRepository,
    PostMetaRepository,
)

__all__ = [
    "Base",
    "get_engine",
    "get_session_factory",
    "init_db",
    "COLUMN_TO_META",
    "FIELD_SETTERS",
    "META_TO_COLUMN",
    "ORDER_FIELDS",
    "get_postmeta_mapping",
    "DownloadPermission",
    "OrderItem",
    "OrderItemMeta",
    "OrderRecord",
    "Post",
    "PostMeta",
    "DownloadPermissionRepository",
    "DownloadPermissionStore",
    "OrderRecordRepository",
    "PostMetaRepository",
]
