"""Commerce platform error taxonomy"""

from typing import Optional


class CommerceError(Exception):
    """Base exception for commerce platform errors"""
    pass


class AuthError(CommerceError):
    """Client-credentials token grant failed"""
    pass


class ApiError(CommerceError):
    """Non-2xx response from the commerce API"""

    def __init__(
        self,
        status: int,
        body: str = "",
        method: Optional[str] = None,
        path: Optional[str] = None,
    ):
        self.status = status
        self.body = body
        self.method = method
        self.path = path
        target = f"{method} {path} " if method else ""
        super().__init__(f"{target}failed ({status}): {body}")

    @property
    def is_conflict(self) -> bool:
        """True when the platform rejected a stale resource version"""
        return self.status == 409


class ConfigurationError(CommerceError):
    """Commerce platform credentials are missing"""
    pass


class NotFoundError(CommerceError):
    """Requested resource could not be resolved"""
    pass


class ValidationError(CommerceError):
    """Malformed input or an ineligible selection"""
    pass


class CartUpdateExhaustedError(CommerceError):
    """Cart update kept conflicting after all retries"""

    def __init__(self, cart_id: str, attempts: int):
        self.cart_id = cart_id
        self.attempts = attempts
        super().__init__(
            f"Failed to update cart {cart_id} after {attempts} attempts"
        )
