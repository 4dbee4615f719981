# Storefront services

from .cart_service import CartService, get_normalized_totals
from .catalog_service import CatalogService
from .product_service import ProductService

__all__ = [
    "CartService",
    "get_normalized_totals",
    "CatalogService",
    "ProductService",
]
