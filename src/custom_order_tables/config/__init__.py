"""Configuration module."""

from custom_order_tables.config.settings import Settings, settings

__all__ = ["Settings", "settings"]
