# Commerce platform client

from .auth import TokenProvider
from .client import CommerceClient
from .exceptions import (
    CommerceError,
    ConfigurationError,
    AuthError,
    ApiError,
    NotFoundError,
    ValidationError,
    CartUpdateExhaustedError,
)
from .models import CamelModel, Money
from .retry import with_version_retry

__all__ = [
    "TokenProvider",
    "CommerceClient",
    "CommerceError",
    "ConfigurationError",
    "AuthError",
    "ApiError",
    "NotFoundError",
    "ValidationError",
    "CartUpdateExhaustedError",
    "CamelModel",
    "Money",
    "with_version_retry",
]
