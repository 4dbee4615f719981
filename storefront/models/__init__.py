# Storefront Models

from .product import (
    MoneyView,
    PriceView,
    VariantView,
    ProductListItem,
    ProductDetail,
    ProductListResponse,
    ProductQuery,
    AttributeSpec,
    ProductTypeConfig,
    VariantInput,
    CreateProductRequest,
    UpdateProductRequest,
)
from .cart import (
    AddLineItemRequest,
    ChangeLineItemQuantityRequest,
    DiscountCodeRequest,
    Address,
    SetAddressRequest,
    SetShippingMethodRequest,
    ShippingMethodView,
    CartTotals,
    CartAddressResponse,
    CartShippingResponse,
)

__all__ = [
    "MoneyView",
    "PriceView",
    "VariantView",
    "ProductListItem",
    "ProductDetail",
    "ProductListResponse",
    "ProductQuery",
    "AttributeSpec",
    "ProductTypeConfig",
    "VariantInput",
    "CreateProductRequest",
    "UpdateProductRequest",
    "AddLineItemRequest",
    "ChangeLineItemQuantityRequest",
    "DiscountCodeRequest",
    "Address",
    "SetAddressRequest",
    "SetShippingMethodRequest",
    "ShippingMethodView",
    "CartTotals",
    "CartAddressResponse",
    "CartShippingResponse",
]
