"""Service dependencies shared by the API routers"""

from fastapi import Depends

from commerce import CommerceClient

from ..core.clients import get_commerce_client
from ..services import CartService, CatalogService, ProductService


def get_cart_service(client: CommerceClient = Depends(get_commerce_client)) -> CartService:
    return CartService(client)


def get_catalog_service(client: CommerceClient = Depends(get_commerce_client)) -> CatalogService:
    return CatalogService(client)


def get_product_service(client: CommerceClient = Depends(get_commerce_client)) -> ProductService:
    return ProductService(client)
