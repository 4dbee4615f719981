# Core modules

from .config import settings, get_settings, Settings
from .clients import get_commerce_client, close_commerce_client

__all__ = [
    "settings",
    "get_settings",
    "Settings",
    "get_commerce_client",
    "close_commerce_client",
]
