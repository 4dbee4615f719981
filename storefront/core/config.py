"""Storefront BFF Configuration"""

from typing import Optional
from pydantic_settings import BaseSettings
from functools import lru_cache


class Settings(BaseSettings):
    """Application settings loaded from environment"""

    # Application
    app_name: str = "Storefront BFF"
    debug: bool = False
    host: str = "0.0.0.0"
    port: int = 5000
    frontend_origin: str = "http://localhost:3000"

    # Commerce platform credentials
    ct_client_id: Optional[str] = None
    ct_client_secret: Optional[str] = None
    ct_auth_url: Optional[str] = None
    ct_api_url: Optional[str] = None
    ct_project_key: Optional[str] = None
    ct_scopes: Optional[str] = None  # e.g. "view_products:{projectKey}"
    ct_http_timeout: float = 30.0

    # Storefront defaults
    default_locale: str = "en-US"
    default_currency: str = "USD"

    # Cart identity
    cart_cookie_name: str = "cartId"
    cart_header_name: str = "x-cart-id"
    cart_cookie_max_age: int = 60 * 60 * 24 * 7
    cart_update_max_retries: int = 2

    class Config:
        env_file = ".env"
        env_file_encoding = "utf-8"
        case_sensitive = False

    @property
    def commerce_configured(self) -> bool:
        """Check if commerce platform credentials are configured"""
        return all([
            self.ct_client_id,
            self.ct_client_secret,
            self.ct_auth_url,
            self.ct_api_url,
            self.ct_project_key,
        ])


@lru_cache()
def get_settings() -> Settings:
    """Get cached settings instance"""
    return Settings()


settings = get_settings()
