"""Configuration management using Pydantic Settings.

Loads configuration from environment variables with .env file support.
"""

from typing import List, Optional

from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """Application configuration."""

    # Database Configuration
    database_url: str = "sqlite:///./orders.db"
    database_echo: bool = False

    # Logging Configuration
    log_level: str = "INFO"
    log_dir: Optional[str] = None

    # Order Table Behaviour
    automatic_migration: bool = True
    order_key_prefix: str = "wc_"
    order_search_fields: List[str] = []

    # Entity Types
    order_type: str = "shop_order"
    refund_type: str = "shop_order_refund"

    # Listing
    default_page_size: int = 10

    class Config:
        """Pydantic config."""

        env_file = ".env"
        case_sensitive = False
        extra = "ignore"


# Create a global settings instance
settings = Settings()
