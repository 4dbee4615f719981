"""Shared commerce client for the storefront services"""

import logging
from typing import Optional

import httpx

from commerce import CommerceClient, ConfigurationError, TokenProvider

from .config import settings

logger = logging.getLogger(__name__)

# One client per process, created on first use and closed on shutdown
commerce_client: Optional[CommerceClient] = None


def build_commerce_client(http_client: Optional[httpx.AsyncClient] = None) -> CommerceClient:
    """Create a commerce client from settings"""
    if not settings.commerce_configured:
        raise ConfigurationError(
            "Missing commerce configuration. Need CT_CLIENT_ID, CT_CLIENT_SECRET, "
            "CT_AUTH_URL, CT_API_URL, CT_PROJECT_KEY"
        )

    http_client = http_client or httpx.AsyncClient(timeout=settings.ct_http_timeout)
    tokens = TokenProvider(
        auth_url=settings.ct_auth_url,
        client_id=settings.ct_client_id,
        client_secret=settings.ct_client_secret,
        scopes=settings.ct_scopes,
        http_client=http_client,
    )
    return CommerceClient(
        api_url=settings.ct_api_url,
        project_key=settings.ct_project_key,
        token_provider=tokens,
        http_client=http_client,
    )


def get_commerce_client() -> CommerceClient:
    """Get or create the commerce client"""
    global commerce_client
    if commerce_client is None:
        commerce_client = build_commerce_client()
        logger.info(f"Commerce client created for {commerce_client.base_url}")
    return commerce_client


async def close_commerce_client() -> None:
    """Close the commerce client if one was created"""
    global commerce_client
    if commerce_client is not None:
        await commerce_client.close()
        commerce_client = None
