import json

import pytest

from commerce import ApiError, CartUpdateExhaustedError, ValidationError, with_version_retry
from storefront.services.cart_service import CartService, simplify_shipping_method

from conftest import make_cart, make_line_item, run

CONFLICT = (409, {"statusCode": 409, "message": "Object has a different version"})


def body_of(request):
    return json.loads(request.content)


def shipping_method(method_id, currency="USD", cents=500, is_matching=True):
    return {
        "id": method_id,
        "name": f"Method {method_id}",
        "localizedDescription": {"en-US": "Ground delivery"},
        "zoneRates": [{
            "zone": {"typeId": "zone", "id": "zone-us"},
            "shippingRates": [
                {
                    "price": {"centAmount": cents + 100, "currencyCode": "EUR"},
                    "isMatching": is_matching,
                },
                {
                    "price": {"centAmount": cents, "currencyCode": currency},
                    "freeAbove": {"centAmount": 10000, "currencyCode": currency},
                    "isMatching": is_matching,
                },
            ],
        }],
    }


@pytest.fixture()
def carts(commerce_client):
    return CartService(commerce_client, max_retries=2)


# ==================== update_cart ====================

def test_update_cart_submits_version_and_actions(platform, carts):
    cart = make_cart(version=3)
    platform.on("POST", "/carts/cart-1", make_cart(version=4))

    updated = run(carts.update_cart(cart, [{"action": "addDiscountCode", "code": "SAVE"}]))

    assert updated["version"] == 4
    (request,) = platform.calls("POST", "/carts/cart-1")
    assert body_of(request) == {
        "version": 3,
        "actions": [{"action": "addDiscountCode", "code": "SAVE"}],
    }


def test_update_cart_refetches_once_per_conflict(platform, carts):
    stale = make_cart(version=3)
    platform.on("POST", "/carts/cart-1", CONFLICT, make_cart(version=6))
    platform.on("GET", "/carts/cart-1", make_cart(version=5))

    updated = run(carts.update_cart(stale, [{"action": "recalculate"}]))

    assert updated["version"] == 6
    posts = platform.calls("POST", "/carts/cart-1")
    assert [body_of(r)["version"] for r in posts] == [3, 5]
    assert len(platform.calls("GET", "/carts/cart-1")) == 1
    assert all(body_of(r)["actions"] == [{"action": "recalculate"}] for r in posts)


def test_update_cart_gives_up_after_max_retries(platform, carts):
    platform.on("POST", "/carts/cart-1", CONFLICT)
    platform.on("GET", "/carts/cart-1", make_cart(version=9))

    with pytest.raises(CartUpdateExhaustedError) as exc_info:
        run(carts.update_cart(make_cart(version=1), [{"action": "recalculate"}]))

    assert exc_info.value.attempts == 3
    assert isinstance(exc_info.value.__cause__, ApiError)
    assert len(platform.calls("POST", "/carts/cart-1")) == 3
    assert len(platform.calls("GET", "/carts/cart-1")) == 2


def test_update_cart_does_not_retry_other_rejections(platform, carts):
    platform.on("POST", "/carts/cart-1", (400, {"message": "The discount code 'NOPE' was not found."}))

    with pytest.raises(ApiError) as exc_info:
        run(carts.apply_discount_code(make_cart(), "NOPE"))

    assert exc_info.value.status == 400
    assert len(platform.calls("POST", "/carts/cart-1")) == 1
    assert platform.calls("GET", "/carts/cart-1") == []


def test_with_version_retry_without_retries_fails_on_first_conflict():
    calls = []

    async def apply(current):
        calls.append(current["version"])
        raise ApiError(409, "conflict")

    async def fetch_latest():
        raise AssertionError("should not refetch")

    with pytest.raises(CartUpdateExhaustedError):
        run(with_version_retry({"id": "c", "version": 1}, fetch_latest, apply, max_retries=0))

    assert calls == [1]


# ==================== line items ====================

def test_add_line_item(platform, carts):
    platform.on("POST", "/carts/cart-1", make_cart(version=2, line_items=[make_line_item(quantity=2)]))

    updated = run(carts.add_line_item(make_cart(), "product-1", 1, 2))

    assert updated["lineItems"][0]["quantity"] == 2
    (request,) = platform.calls("POST", "/carts/cart-1")
    assert body_of(request)["actions"] == [{
        "action": "addLineItem",
        "productId": "product-1",
        "variantId": 1,
        "quantity": 2,
    }]


@pytest.mark.parametrize("product_id, variant_id, quantity", [
    ("", 1, 1),
    ("product-1", 0, 1),
    ("product-1", 1, 0),
])
def test_add_line_item_validation(platform, carts, product_id, variant_id, quantity):
    with pytest.raises(ValidationError):
        run(carts.add_line_item(make_cart(), product_id, variant_id, quantity))

    assert platform.api_requests() == []


def test_negative_quantity_is_rejected(platform, carts):
    with pytest.raises(ValidationError):
        run(carts.change_line_item_quantity(make_cart(), "li-1", -1))

    assert platform.api_requests() == []


def test_removing_last_item_clears_shipping_method(platform, carts):
    cart = make_cart(
        version=4,
        line_items=[make_line_item(quantity=1)],
        shippingInfo={"shippingMethodName": "Standard"},
    )
    emptied = make_cart(version=5, shippingInfo={"shippingMethodName": "Standard"})
    emptied["totalLineItemQuantity"] = 0
    cleared = make_cart(version=6)
    platform.on("POST", "/carts/cart-1", emptied, cleared)

    result = run(carts.remove_line_item(cart, "li-1"))

    assert "shippingInfo" not in result
    posts = platform.calls("POST", "/carts/cart-1")
    assert [body_of(r)["actions"] for r in posts] == [
        [{"action": "removeLineItem", "lineItemId": "li-1"}],
        [{"action": "setShippingMethod"}],
    ]
    assert body_of(posts[1])["version"] == 5


def test_quantity_zero_on_last_item_clears_shipping_method(platform, carts):
    cart = make_cart(line_items=[make_line_item(quantity=2)], shippingInfo={"price": {}})
    emptied = make_cart(version=2, shippingInfo={"price": {}})
    platform.on("POST", "/carts/cart-1", emptied, make_cart(version=3))

    result = run(carts.change_line_item_quantity(cart, "li-1", 0))

    assert result["version"] == 3
    assert len(platform.calls("POST", "/carts/cart-1")) == 2


def test_removing_item_keeps_shipping_when_items_remain(platform, carts):
    remaining = make_cart(
        version=2,
        line_items=[make_line_item("li-2")],
        shippingInfo={"shippingMethodName": "Standard"},
    )
    platform.on("POST", "/carts/cart-1", remaining)

    result = run(carts.remove_line_item(make_cart(), "li-1"))

    assert result["shippingInfo"] == {"shippingMethodName": "Standard"}
    assert len(platform.calls("POST", "/carts/cart-1")) == 1


# ==================== discount codes & address ====================

def test_remove_discount_code_references_code_id(platform, carts):
    platform.on("POST", "/carts/cart-1", make_cart(version=2))

    run(carts.remove_discount_code(make_cart(), "dc-1"))

    (request,) = platform.calls("POST", "/carts/cart-1")
    assert body_of(request)["actions"] == [{
        "action": "removeDiscountCode",
        "discountCode": {"typeId": "discount-code", "id": "dc-1"},
    }]


def test_set_shipping_address_uppercases_country(platform, carts):
    platform.on("POST", "/carts/cart-1", make_cart(version=2))

    run(carts.set_shipping_address(make_cart(), {"country": "us", "city": "Austin"}))

    (request,) = platform.calls("POST", "/carts/cart-1")
    assert body_of(request)["actions"] == [{
        "action": "setShippingAddress",
        "address": {"country": "US", "city": "Austin"},
    }]


def test_set_shipping_address_requires_country(platform, carts):
    with pytest.raises(ValidationError):
        run(carts.set_shipping_address(make_cart(), {"city": "Austin"}))

    assert platform.api_requests() == []


# ==================== shipping methods ====================

def test_shipping_methods_require_address(platform, carts):
    platform.on("GET", "/carts/cart-1", make_cart())

    with pytest.raises(ValidationError, match="shipping address"):
        run(carts.get_matching_shipping_methods("cart-1"))

    assert platform.calls("GET", "/shipping-methods/matching-cart") == []


def test_matching_shipping_methods_are_simplified(platform, carts):
    platform.on("GET", "/carts/cart-1", make_cart(shippingAddress={"country": "US"}))
    platform.on("GET", "/shipping-methods/matching-cart", {"results": [shipping_method("sm-1")]})

    (method,) = run(carts.get_matching_shipping_methods("cart-1"))

    assert method.id == "sm-1"
    assert method.description == "Ground delivery"
    assert method.price.cent_amount == 500
    assert method.price.currency_code == "USD"
    assert method.free_above.cent_amount == 10000
    assert method.matches_cart is True
    request = platform.calls("GET", "/shipping-methods/matching-cart")[0]
    assert request.url.params["cartId"] == "cart-1"


def test_simplify_falls_back_to_first_rate_without_currency_match():
    method = simplify_shipping_method(shipping_method("sm-1", currency="GBP"), "USD")

    assert method.price.currency_code == "EUR"
    assert method.free_above is None


def test_simplify_reports_non_matching_rate():
    method = simplify_shipping_method(shipping_method("sm-1", is_matching=False), "USD")

    assert method.matches_cart is False


def test_set_shipping_method_rejects_ineligible_method(platform, carts):
    platform.on("GET", "/carts/cart-1", make_cart(shippingAddress={"country": "DE"}))
    platform.on("GET", "/shipping-methods/matching-cart", {"results": [shipping_method("sm-eu")]})

    with pytest.raises(ValidationError):
        run(carts.set_shipping_method("cart-1", "sm-us"))

    assert platform.calls("POST", "/carts/cart-1") == []


def test_set_shipping_method_rejects_non_matching_rate(platform, carts):
    platform.on("GET", "/carts/cart-1", make_cart(shippingAddress={"country": "US"}))
    platform.on(
        "GET",
        "/shipping-methods/matching-cart",
        {"results": [shipping_method("sm-1", is_matching=False)]},
    )

    with pytest.raises(ValidationError):
        run(carts.set_shipping_method("cart-1", "sm-1"))

    assert platform.calls("POST", "/carts/cart-1") == []


def test_set_shipping_method(platform, carts):
    platform.on("GET", "/carts/cart-1", make_cart(version=7, shippingAddress={"country": "US"}))
    platform.on("GET", "/shipping-methods/matching-cart", {"results": [shipping_method("sm-1")]})
    platform.on("POST", "/carts/cart-1", make_cart(version=8, shippingInfo={"shippingMethodName": "Method sm-1"}))

    updated = run(carts.set_shipping_method("cart-1", "sm-1"))

    assert updated["version"] == 8
    (request,) = platform.calls("POST", "/carts/cart-1")
    assert body_of(request) == {
        "version": 7,
        "actions": [{
            "action": "setShippingMethod",
            "shippingMethod": {"typeId": "shipping-method", "id": "sm-1"},
        }],
    }


# ==================== retrieval ====================

def test_get_cart_expands_discount_codes(platform, carts):
    platform.on("GET", "/carts/cart-1", make_cart())

    run(carts.get_cart("cart-1"))

    request = platform.calls("GET", "/carts/cart-1")[0]
    assert request.url.params["expand"] == "discountCodes[*].discountCode"


def test_create_cart_uses_default_currency(platform, carts):
    platform.on("POST", "/carts", make_cart(cart_id="new-cart"))

    cart = run(carts.create_cart())

    assert cart["id"] == "new-cart"
    assert body_of(platform.calls("POST", "/carts")[0]) == {"currency": "USD"}
