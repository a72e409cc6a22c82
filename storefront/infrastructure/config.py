"""Application configuration.

Loads settings from environment variables with sensible defaults.
"""

from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    # API
    api_version: str = "0.1.0"
    debug: bool = False

    # Authentication
    admin_api_key: str = "dev-admin-key-change-in-production"

    # Public base URL of the backend, used to resolve uploaded image paths
    api_base_url: str = ""

    # Storefront client
    storefront_api_url: str = "http://localhost:8000"
    client_timeout: float = 30.0
    product_fetch_limit: int = 200

    # Catalog browsing
    mobile_breakpoint: int = 768
    mobile_page_size: int = 8
    desktop_page_size: int = 16
    region_page_size: int = 16
    default_min_price: float = 0
    default_max_price: float = 5000
    quantity_labels: list[str] = ["All", "80g", "100g", "25g", "300ml", "600ml", "1L"]

    # Logging
    log_level: str = "INFO"

    class Config:
        """Pydantic configuration."""

        env_file = ".env"
        env_file_encoding = "utf-8"


settings = Settings()
