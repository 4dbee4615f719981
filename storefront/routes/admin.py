"""Product administration and project routes"""

from fastapi import APIRouter, Depends, Query

from commerce import CommerceClient

from ..core.clients import get_commerce_client
from ..models.product import CreateProductRequest, UpdateProductRequest
from ..services import ProductService
from .dependencies import get_product_service

router = APIRouter(prefix="/api", tags=["Admin"])


@router.get("/project")
async def get_project(client: CommerceClient = Depends(get_commerce_client)):
    """Commerce project details"""
    project = await client.get("")
    return {"ok": True, "project": project}


@router.post("/products")
async def create_product(
    request: CreateProductRequest,
    products: ProductService = Depends(get_product_service),
):
    """Create and publish a product"""
    product = await products.create_product(request)
    return {"ok": True, "product": product}


@router.patch("/products/{product_id}")
async def update_product(
    product_id: str,
    request: UpdateProductRequest,
    products: ProductService = Depends(get_product_service),
):
    """Apply update actions to a product"""
    product = await products.update_product(product_id, request.version, request.actions)
    return {"ok": True, "product": product}


@router.delete("/products/{product_id}")
async def delete_product(
    product_id: str,
    version: int = Query(..., ge=1, description="Current product version"),
    products: ProductService = Depends(get_product_service),
):
    """Delete a product version"""
    product = await products.delete_product(product_id, version)
    return {"ok": True, "product": product}
