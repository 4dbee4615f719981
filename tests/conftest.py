import asyncio
from typing import Any, Callable, Optional, Union

import httpx
import pytest
from fastapi.testclient import TestClient

from commerce import CommerceClient, TokenProvider
from storefront.core.clients import get_commerce_client
from storefront.main import app

AUTH_URL = "https://auth.test"
API_URL = "https://api.test"
PROJECT = "shop"

ResponseSpec = Union[dict, list, tuple, Callable[[httpx.Request], Any]]


class FakeCommerce:
    """In-memory stand-in for the commerce platform HTTP API"""

    def __init__(self):
        self.requests: list[httpx.Request] = []
        self.routes: dict[tuple[str, str], list] = {}
        self.token_grants = 0
        self.expires_in: Optional[int] = 3600
        self.token_status = 200

    def on(self, method: str, path: str, *responses: ResponseSpec) -> None:
        """
        Register responses for a project-relative path.

        Each response is a JSON body (200), a (status, body) tuple or a
        callable taking the request. Responses are used in order, the last
        one repeats.
        """
        self.routes[(method, f"/{PROJECT}{path}")] = list(responses)

    def calls(self, method: str, path: str) -> list[httpx.Request]:
        return [
            r for r in self.requests
            if r.method == method and r.url.path == f"/{PROJECT}{path}"
        ]

    def api_requests(self) -> list[httpx.Request]:
        return [r for r in self.requests if r.url.host == "api.test"]

    def handler(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)

        if request.url.path == "/oauth/token":
            self.token_grants += 1
            if self.token_status != 200:
                return httpx.Response(self.token_status, json={"error": "invalid_client"})
            body = {"access_token": f"token-{self.token_grants}", "token_type": "Bearer"}
            if self.expires_in is not None:
                body["expires_in"] = self.expires_in
            return httpx.Response(200, json=body)

        responses = self.routes.get((request.method, request.url.path))
        if not responses:
            return httpx.Response(404, json={"message": f"No route for {request.url.path}"})

        spec = responses.pop(0) if len(responses) > 1 else responses[0]
        if callable(spec):
            spec = spec(request)
        if isinstance(spec, httpx.Response):
            return spec
        if isinstance(spec, tuple):
            status, body = spec
            return httpx.Response(status, json=body)
        return httpx.Response(200, json=spec)


def make_client(platform: FakeCommerce, clock: Callable[[], float] = None) -> CommerceClient:
    http_client = httpx.AsyncClient(transport=httpx.MockTransport(platform.handler))
    tokens = TokenProvider(
        auth_url=AUTH_URL,
        client_id="client",
        client_secret="secret",
        scopes="manage_project:shop",
        http_client=http_client,
        **({"clock": clock} if clock else {}),
    )
    return CommerceClient(API_URL, PROJECT, tokens, http_client)


def make_cart(
    cart_id: str = "cart-1",
    version: int = 1,
    line_items: Optional[list] = None,
    currency: str = "USD",
    **extra: Any,
) -> dict[str, Any]:
    line_items = line_items or []
    total = sum(li["totalPrice"]["centAmount"] for li in line_items)
    cart = {
        "id": cart_id,
        "version": version,
        "lineItems": line_items,
        "discountCodes": [],
        "totalPrice": {
            "type": "centPrecision",
            "centAmount": total,
            "currencyCode": currency,
            "fractionDigits": 2,
        },
    }
    if line_items:
        cart["totalLineItemQuantity"] = sum(li["quantity"] for li in line_items)
    cart.update(extra)
    return cart


def make_line_item(
    item_id: str = "li-1",
    quantity: int = 1,
    unit_cents: int = 1000,
    currency: str = "USD",
) -> dict[str, Any]:
    def money(cents):
        return {"centAmount": cents, "currencyCode": currency, "fractionDigits": 2}

    return {
        "id": item_id,
        "productId": f"product-{item_id}",
        "variant": {"id": 1},
        "quantity": quantity,
        "price": {"value": money(unit_cents)},
        "totalPrice": money(unit_cents * quantity),
    }


def run(coro):
    return asyncio.run(coro)


@pytest.fixture()
def platform():
    return FakeCommerce()


@pytest.fixture()
def commerce_client(platform):
    return make_client(platform)


@pytest.fixture()
def client(commerce_client):
    app.dependency_overrides[get_commerce_client] = lambda: commerce_client
    with TestClient(app) as test_client:
        yield test_client
    app.dependency_overrides.clear()
