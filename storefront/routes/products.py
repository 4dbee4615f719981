"""Storefront catalog routes"""

from typing import Optional

from fastapi import APIRouter, Depends, Query

from ..models.product import ProductDetail, ProductListResponse, ProductQuery
from ..services import CatalogService
from .dependencies import get_catalog_service

router = APIRouter(prefix="/api/storefront/products", tags=["Catalog"])


def product_query(
    limit: int = Query(20, ge=1, le=500, description="Max results"),
    offset: int = Query(0, ge=0, description="Offset for pagination"),
    locale: Optional[str] = Query(None, description="Locale for names and slugs"),
    currency: Optional[str] = Query(None, description="Price currency"),
    country: Optional[str] = Query(None, description="Price country"),
    customer_group_id: Optional[str] = Query(None, alias="customerGroupId"),
    channel_id: Optional[str] = Query(None, alias="channelId"),
    staged: bool = Query(False, description="Read staged projections"),
) -> ProductQuery:
    return ProductQuery(
        limit=limit,
        offset=offset,
        locale=locale,
        currency=currency,
        country=country,
        customer_group_id=customer_group_id,
        channel_id=channel_id,
        staged=staged,
    )


@router.get("", response_model=ProductListResponse)
async def list_products(
    filters: ProductQuery = Depends(product_query),
    catalog: CatalogService = Depends(get_catalog_service),
):
    """List products with scoped prices"""
    return await catalog.list_products(filters)


@router.get("/{id_or_slug}", response_model=ProductDetail)
async def get_product(
    id_or_slug: str,
    filters: ProductQuery = Depends(product_query),
    catalog: CatalogService = Depends(get_catalog_service),
):
    """
    Get a product by ID or slug.

    The ID is tried first, then the slug in the requested locale.
    """
    return await catalog.get_product_by_id_or_slug(id_or_slug, filters)
