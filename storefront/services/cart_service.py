"""
Cart Service

Cart retrieval, creation and versioned update actions against the
commerce platform, plus the normalized totals shown by the storefront.
"""

import logging
from typing import Any, Optional

from commerce import CommerceClient, Money, ValidationError, with_version_retry

from ..core.config import settings
from ..models.cart import CartTotals, ShippingMethodView
from .catalog_service import pick_locale

logger = logging.getLogger(__name__)

Cart = dict[str, Any]
CartAction = dict[str, Any]


def total_line_item_quantity(cart: Cart) -> int:
    """Total quantity across line items"""
    if cart.get("totalLineItemQuantity") is not None:
        return cart["totalLineItemQuantity"]
    return sum(item.get("quantity", 0) for item in cart.get("lineItems") or [])


def _cents(value: Optional[dict[str, Any]]) -> int:
    return (value or {}).get("centAmount") or 0


def get_normalized_totals(cart: Cart, default_currency: str = "USD") -> CartTotals:
    """
    Totals breakdown of a cart in integer cents.

    subtotal is the sum of line item totals, shipping the shipping line price,
    tax the platform's total tax. An empty cart is all zero and its taxed
    price is ignored, since the platform may still report a stale one.
    """
    total_price = cart.get("totalPrice") or {}
    currency = total_price.get("currencyCode") or default_currency
    fraction_digits = total_price.get("fractionDigits", 2)

    def money(cents: int) -> Money:
        return Money(cent_amount=cents, currency_code=currency, fraction_digits=fraction_digits)

    line_items = cart.get("lineItems") or []
    if not line_items:
        zero = money(0)
        return CartTotals(currency=currency, subtotal=zero, shipping=zero, tax=zero, total=zero)

    subtotal = money(sum(_cents(item.get("totalPrice")) for item in line_items))

    shipping_info = cart.get("shippingInfo")
    shipping = money(_cents(shipping_info.get("price")) if shipping_info else 0)

    taxed_price = cart.get("taxedPrice")
    # A missing taxedPrice counts as zero tax
    tax = money(_cents(taxed_price.get("totalTax")) if taxed_price else 0)

    return CartTotals(
        currency=currency,
        subtotal=subtotal,
        shipping=shipping,
        tax=tax,
        total=subtotal + shipping + tax,
    )


def simplify_shipping_method(method: dict[str, Any], currency: str) -> ShippingMethodView:
    """Flatten a shipping method's zone rates into the rate for the cart currency"""
    rates = [
        rate
        for zone_rate in method.get("zoneRates") or []
        for rate in zone_rate.get("shippingRates") or []
    ]
    in_currency = [r for r in rates if (r.get("price") or {}).get("currencyCode") == currency]
    candidates = in_currency or rates
    rate = next((r for r in candidates if r.get("isMatching", True)), None)
    if rate is None and candidates:
        rate = candidates[0]

    description = method.get("localizedDescription")
    if isinstance(description, dict):
        description = pick_locale(description, settings.default_locale)
    else:
        description = method.get("description")

    return ShippingMethodView(
        id=method["id"],
        name=method.get("name", ""),
        description=description,
        price=Money.from_platform(rate.get("price")) if rate else None,
        free_above=Money.from_platform(rate.get("freeAbove")) if rate else None,
        matches_cart=rate.get("isMatching", True) if rate else True,
    )


class CartService:
    """
    Cart operations with optimistic concurrency.

    Every mutation is a batch of declarative update actions ("set quantity
    to N", "add this code"), so resubmitting a batch against a refetched
    version never double-applies it.
    """

    def __init__(self, client: CommerceClient, max_retries: Optional[int] = None):
        self.client = client
        self.max_retries = (
            settings.cart_update_max_retries if max_retries is None else max_retries
        )

    # ==================== Retrieval ====================

    async def get_cart(self, cart_id: str) -> Cart:
        """Get cart by ID with discount codes expanded"""
        return await self.client.get(
            f"/carts/{cart_id}",
            {"expand": "discountCodes[*].discountCode"},
        )

    async def get_cart_or_none(self, cart_id: str) -> Optional[Cart]:
        """Get cart by ID, None when it does not exist"""
        return await self.client.get_or_none(f"/carts/{cart_id}")

    async def create_cart(self, currency: Optional[str] = None) -> Cart:
        """Create a new cart"""
        cart = await self.client.post("/carts", {"currency": currency or settings.default_currency})
        logger.info(f"Created cart {cart['id']}")
        return cart

    # ==================== Updates ====================

    async def update_cart(
        self,
        cart: Cart,
        actions: list[CartAction],
        max_retries: Optional[int] = None,
    ) -> Cart:
        """
        Apply update actions to a cart.

        On a version conflict the cart is refetched and the same actions are
        resubmitted, up to `max_retries` more times.

        Raises:
            CartUpdateExhaustedError: conflicts persisted after every retry
            ApiError: the platform rejected the actions
        """
        async def submit(current: Cart) -> Cart:
            return await self.client.post(
                f"/carts/{current['id']}",
                {"version": current["version"], "actions": actions},
            )

        async def refetch() -> Cart:
            return await self.get_cart(cart["id"])

        return await with_version_retry(
            cart,
            refetch,
            submit,
            self.max_retries if max_retries is None else max_retries,
        )

    async def add_line_item(
        self,
        cart: Cart,
        product_id: str,
        variant_id: int,
        quantity: int = 1,
    ) -> Cart:
        """Add a product variant to the cart"""
        if not product_id or not variant_id:
            raise ValidationError("productId and variantId are required")
        if quantity < 1:
            raise ValidationError("quantity must be at least 1")

        return await self.update_cart(cart, [{
            "action": "addLineItem",
            "productId": product_id,
            "variantId": variant_id,
            "quantity": quantity,
        }])

    async def change_line_item_quantity(
        self,
        cart: Cart,
        line_item_id: str,
        quantity: int,
    ) -> Cart:
        """Set a line item's quantity; 0 removes it"""
        if not line_item_id:
            raise ValidationError("lineItemId is required")
        if quantity < 0:
            raise ValidationError("quantity must not be negative")

        updated = await self.update_cart(cart, [{
            "action": "changeLineItemQuantity",
            "lineItemId": line_item_id,
            "quantity": quantity,
        }])
        return await self._clear_shipping_if_empty(updated)

    async def remove_line_item(self, cart: Cart, line_item_id: str) -> Cart:
        """Remove a line item from the cart"""
        if not line_item_id:
            raise ValidationError("lineItemId is required")

        updated = await self.update_cart(cart, [{
            "action": "removeLineItem",
            "lineItemId": line_item_id,
        }])
        return await self._clear_shipping_if_empty(updated)

    async def _clear_shipping_if_empty(self, cart: Cart) -> Cart:
        # An empty cart must not keep a shipping method selection
        if total_line_item_quantity(cart) == 0 and cart.get("shippingInfo"):
            logger.info(f"Cart {cart['id']} is empty, clearing shipping method")
            return await self.unset_shipping_method(cart)
        return cart

    async def apply_discount_code(self, cart: Cart, code: str) -> Cart:
        """Add a discount code by its code string"""
        code = (code or "").strip()
        if not code:
            raise ValidationError("code is required")
        return await self.update_cart(cart, [{"action": "addDiscountCode", "code": code}])

    async def remove_discount_code(self, cart: Cart, code_id: str) -> Cart:
        """Remove a discount code by its ID"""
        if not code_id:
            raise ValidationError("discount code id is required")
        return await self.update_cart(cart, [{
            "action": "removeDiscountCode",
            "discountCode": {"typeId": "discount-code", "id": code_id},
        }])

    async def set_shipping_address(self, cart: Cart, address: dict[str, Any]) -> Cart:
        """Set the shipping address, country code upper-cased"""
        country = str(address.get("country") or "").strip().upper()
        if not country:
            raise ValidationError("address.country is required")

        normalized = {**address, "country": country}
        return await self.update_cart(cart, [{"action": "setShippingAddress", "address": normalized}])

    async def unset_shipping_address(self, cart: Cart) -> Cart:
        return await self.update_cart(cart, [{"action": "setShippingAddress"}])

    # ==================== Shipping methods ====================

    async def _matching_shipping_methods(self, cart: Cart) -> list[ShippingMethodView]:
        country = str((cart.get("shippingAddress") or {}).get("country") or "").upper()
        if not country:
            raise ValidationError("Set shipping address first (country is required).")

        page = await self.client.get(
            "/shipping-methods/matching-cart",
            {"cartId": cart["id"]},
        )
        currency = (cart.get("totalPrice") or {}).get("currencyCode") or settings.default_currency
        return [simplify_shipping_method(m, currency) for m in page.get("results") or []]

    async def get_matching_shipping_methods(self, cart_id: str) -> list[ShippingMethodView]:
        """Shipping methods the platform matches to the cart's shipping address"""
        cart = await self.get_cart(cart_id)
        return await self._matching_shipping_methods(cart)

    async def set_shipping_method(self, cart_id: str, shipping_method_id: str) -> Cart:
        """
        Select a shipping method after checking it matches the cart.

        Raises:
            ValidationError: the method is not eligible; the cart is not touched
        """
        if not shipping_method_id:
            raise ValidationError("shippingMethodId is required")

        cart = await self.get_cart(cart_id)
        methods = await self._matching_shipping_methods(cart)
        if not any(m.id == shipping_method_id and m.matches_cart for m in methods):
            raise ValidationError(
                "Selected shipping method does not match this cart. "
                "Check the shipping address country or the method's predicate."
            )

        return await self.update_cart(cart, [{
            "action": "setShippingMethod",
            "shippingMethod": {"typeId": "shipping-method", "id": shipping_method_id},
        }])

    async def unset_shipping_method(self, cart: Cart) -> Cart:
        return await self.update_cart(cart, [{"action": "setShippingMethod"}])

    # ==================== Totals ====================

    async def get_cart_totals(self, cart_id: str) -> CartTotals:
        cart = await self.get_cart(cart_id)
        return get_normalized_totals(cart, settings.default_currency)
