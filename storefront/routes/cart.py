"""Cart API routes for the storefront"""

import logging
from typing import Any

from fastapi import APIRouter, Depends, Request, Response

from ..core.config import settings
from ..models.cart import (
    AddLineItemRequest,
    ChangeLineItemQuantityRequest,
    DiscountCodeRequest,
    SetAddressRequest,
    SetShippingMethodRequest,
    ShippingMethodView,
    CartTotals,
    CartAddressResponse,
    CartShippingResponse,
)
from ..services import CartService
from .dependencies import get_cart_service

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/storefront/cart", tags=["Cart"])


async def resolve_cart_id(
    request: Request,
    response: Response,
    carts: CartService = Depends(get_cart_service),
) -> str:
    """
    Resolve the cart for this request.

    Precedence: x-cart-id header or cartId query parameter, then the cartId
    cookie, then a newly created cart. Ids that no longer exist are skipped.
    The chosen id is echoed in the x-cart-id response header.
    """
    explicit = (
        request.headers.get(settings.cart_header_name)
        or request.query_params.get("cartId")
        or ""
    ).strip()
    from_cookie = (request.cookies.get(settings.cart_cookie_name) or "").strip()

    for candidate in (explicit, from_cookie):
        if not candidate:
            continue
        existing = await carts.get_cart_or_none(candidate)
        if existing:
            response.headers[settings.cart_header_name] = existing["id"]
            return existing["id"]

    created = await carts.create_cart()
    response.set_cookie(
        settings.cart_cookie_name,
        created["id"],
        max_age=settings.cart_cookie_max_age,
        httponly=True,
        samesite="lax",
    )
    response.headers[settings.cart_header_name] = created["id"]
    return created["id"]


@router.get("")
async def get_cart(
    cart_id: str = Depends(resolve_cart_id),
    carts: CartService = Depends(get_cart_service),
) -> dict[str, Any]:
    """Get the current cart"""
    return await carts.get_cart(cart_id)


@router.post("/line-items")
async def add_line_item(
    request: AddLineItemRequest,
    cart_id: str = Depends(resolve_cart_id),
    carts: CartService = Depends(get_cart_service),
) -> dict[str, Any]:
    """Add a product variant to the cart"""
    cart = await carts.get_cart(cart_id)
    return await carts.add_line_item(
        cart,
        request.product_id,
        request.variant_id,
        request.quantity,
    )


@router.patch("/line-items/{line_item_id}")
async def change_line_item_quantity(
    line_item_id: str,
    request: ChangeLineItemQuantityRequest,
    cart_id: str = Depends(resolve_cart_id),
    carts: CartService = Depends(get_cart_service),
) -> dict[str, Any]:
    """Change a line item's quantity"""
    cart = await carts.get_cart(cart_id)
    return await carts.change_line_item_quantity(cart, line_item_id, request.quantity)


@router.delete("/line-items/{line_item_id}")
async def remove_line_item(
    line_item_id: str,
    cart_id: str = Depends(resolve_cart_id),
    carts: CartService = Depends(get_cart_service),
) -> dict[str, Any]:
    """Remove a line item"""
    cart = await carts.get_cart(cart_id)
    return await carts.remove_line_item(cart, line_item_id)


@router.post("/discount-codes")
async def apply_discount_code(
    request: DiscountCodeRequest,
    cart_id: str = Depends(resolve_cart_id),
    carts: CartService = Depends(get_cart_service),
) -> dict[str, Any]:
    """Apply a discount code"""
    cart = await carts.get_cart(cart_id)
    return await carts.apply_discount_code(cart, request.code)


@router.delete("/discount-codes/{code_id}")
async def remove_discount_code(
    code_id: str,
    cart_id: str = Depends(resolve_cart_id),
    carts: CartService = Depends(get_cart_service),
) -> dict[str, Any]:
    """Remove a discount code"""
    cart = await carts.get_cart(cart_id)
    return await carts.remove_discount_code(cart, code_id)


@router.post("/address", response_model=CartAddressResponse)
async def set_shipping_address(
    request: SetAddressRequest,
    cart_id: str = Depends(resolve_cart_id),
    carts: CartService = Depends(get_cart_service),
):
    """Set the shipping address"""
    cart = await carts.get_cart(cart_id)
    address = request.address.model_dump(by_alias=True, exclude_none=True)
    updated = await carts.set_shipping_address(cart, address)
    return CartAddressResponse(
        cart_id=updated["id"],
        version=updated["version"],
        shipping_address=updated.get("shippingAddress"),
    )


@router.delete("/address", response_model=CartAddressResponse)
async def unset_shipping_address(
    cart_id: str = Depends(resolve_cart_id),
    carts: CartService = Depends(get_cart_service),
):
    """Remove the shipping address"""
    cart = await carts.get_cart(cart_id)
    updated = await carts.unset_shipping_address(cart)
    return CartAddressResponse(
        cart_id=updated["id"],
        version=updated["version"],
        shipping_address=updated.get("shippingAddress"),
    )


@router.get("/shipping-methods", response_model=list[ShippingMethodView])
async def get_shipping_methods(
    cart_id: str = Depends(resolve_cart_id),
    carts: CartService = Depends(get_cart_service),
):
    """Shipping methods matching the cart's shipping address"""
    return await carts.get_matching_shipping_methods(cart_id)


@router.post("/set-shipping-method", response_model=CartShippingResponse)
async def set_shipping_method(
    request: SetShippingMethodRequest,
    cart_id: str = Depends(resolve_cart_id),
    carts: CartService = Depends(get_cart_service),
):
    """Select a shipping method"""
    updated = await carts.set_shipping_method(cart_id, request.shipping_method_id)
    return CartShippingResponse.from_cart(updated)


@router.post("/unset-shipping-method", response_model=CartShippingResponse)
async def unset_shipping_method(
    cart_id: str = Depends(resolve_cart_id),
    carts: CartService = Depends(get_cart_service),
):
    """Clear the shipping method"""
    cart = await carts.get_cart(cart_id)
    updated = await carts.unset_shipping_method(cart)
    return CartShippingResponse.from_cart(updated)


@router.get("/totals", response_model=CartTotals)
async def get_totals(
    cart_id: str = Depends(resolve_cart_id),
    carts: CartService = Depends(get_cart_service),
):
    """Normalized subtotal, shipping, tax and total"""
    return await carts.get_cart_totals(cart_id)
