"""Cart models for the storefront"""

from typing import Any, Optional

from pydantic import ConfigDict, Field

from commerce.models import CamelModel, Money


class AddLineItemRequest(CamelModel):
    """Request to add a product variant to the cart"""
    product_id: str = Field(min_length=1)
    variant_id: int
    quantity: int = Field(default=1, ge=1)


class ChangeLineItemQuantityRequest(CamelModel):
    """Request to set a line item quantity, 0 removes it"""
    quantity: int = Field(ge=0)


class DiscountCodeRequest(CamelModel):
    code: str = Field(min_length=1)


class Address(CamelModel):
    """Shipping address, country is required for shipping method matching"""
    model_config = ConfigDict(extra="allow")

    country: str = Field(min_length=2, max_length=2)
    first_name: Optional[str] = None
    last_name: Optional[str] = None
    street_name: Optional[str] = None
    street_number: Optional[str] = None
    postal_code: Optional[str] = None
    city: Optional[str] = None
    state: Optional[str] = None
    email: Optional[str] = None


class SetAddressRequest(CamelModel):
    address: Address


class SetShippingMethodRequest(CamelModel):
    shipping_method_id: str = Field(min_length=1)


class ShippingMethodView(CamelModel):
    """Shipping method eligible for a cart"""
    id: str
    name: str
    description: Optional[str] = None
    price: Optional[Money] = None
    free_above: Optional[Money] = None
    matches_cart: bool = True


class CartTotals(CamelModel):
    """Totals breakdown in integer cents"""
    currency: str
    subtotal: Money
    shipping: Money
    tax: Money
    total: Money


class CartAddressResponse(CamelModel):
    cart_id: str
    version: int
    shipping_address: Optional[dict[str, Any]] = None


class CartShippingResponse(CamelModel):
    cart_id: str
    version: int
    shipping_info: Optional[dict[str, Any]] = None
    taxed_price: Optional[dict[str, Any]] = None
    total_price: Optional[dict[str, Any]] = None

    @classmethod
    def from_cart(cls, cart: dict[str, Any]) -> "CartShippingResponse":
        return cls(
            cart_id=cart["id"],
            version=cart["version"],
            shipping_info=cart.get("shippingInfo"),
            taxed_price=cart.get("taxedPrice"),
            total_price=cart.get("totalPrice"),
        )
