"""
Product Service

Product type and product administration: idempotent product type setup,
product creation with variants, publishing and raw updates.
"""

import logging
import re
from typing import Any, Optional
from urllib.parse import quote

from commerce import CommerceClient

from ..models.product import (
    AttributeSpec,
    CreateProductRequest,
    ProductTypeConfig,
    VariantInput,
)

logger = logging.getLogger(__name__)

# Used when a product is created without its own type configuration
DEFAULT_TYPE_ATTRIBUTES = [
    AttributeSpec(name="color", type="enum", values=[{"key": "black", "label": "Black"}]),
    AttributeSpec(name="size", type="enum", values=[{"key": "m", "label": "M"}]),
]


def to_slug(value: str) -> str:
    """URL slug from a product name"""
    slug = value.lower().strip()
    slug = re.sub(r"[^a-z0-9\s-]", "", slug)
    slug = re.sub(r"\s+", "-", slug)
    return re.sub(r"-+", "-", slug)


def localized(value: str, locale: str = "en") -> dict[str, str]:
    return {locale: value}


def attributes_to_list(attributes: Optional[dict[str, Any]]) -> list[dict[str, Any]]:
    return [{"name": name, "value": value} for name, value in (attributes or {}).items()]


def attribute_definition(spec: AttributeSpec) -> dict[str, Any]:
    """Platform attribute definition draft for an attribute spec"""
    if spec.type == "enum":
        attr_type = {"name": "enum", "values": [v.model_dump() for v in spec.values]}
    else:
        attr_type = {"name": spec.type}

    return {
        "name": spec.name,
        "label": {"en": spec.name[:1].upper() + spec.name[1:]},
        "isRequired": spec.required,
        "isSearchable": spec.searchable,
        "attributeConstraint": "SameForAll" if spec.same_for_all else "None",
        "inputHint": "SingleLine",
        "type": attr_type,
    }


class ProductService:
    """Product administration against the commerce platform"""

    def __init__(self, client: CommerceClient):
        self.client = client

    async def ensure_product_type(
        self,
        key: str,
        attributes: list[AttributeSpec],
    ) -> dict[str, Any]:
        """
        Ensure a product type exists with at least the given attributes.

        Creates the type when missing, otherwise adds missing attribute
        definitions and missing enum values.
        """
        existing = await self.client.get_or_none(f"/product-types/key={quote(key, safe='')}")

        if existing is None:
            logger.info(f"Creating product type {key}")
            return await self.client.post("/product-types", {
                "key": key,
                "name": key,
                "description": f"Product type for {key}",
                "attributes": [attribute_definition(a) for a in attributes],
            })

        present = {a["name"]: a for a in existing.get("attributes") or []}
        actions: list[dict[str, Any]] = []

        for spec in attributes:
            current = present.get(spec.name)
            if current is None:
                actions.append({
                    "action": "addAttributeDefinition",
                    "attribute": attribute_definition(spec),
                })
                continue

            if spec.type == "enum" and (current.get("type") or {}).get("name") == "enum":
                have = {v["key"] for v in current["type"].get("values") or []}
                for value in spec.values:
                    if value.key not in have:
                        actions.append({
                            "action": "addPlainEnumValue",
                            "attributeName": spec.name,
                            "value": value.model_dump(),
                        })

        if not actions:
            return existing

        logger.info(f"Updating product type {key} with {len(actions)} actions")
        return await self.client.post(f"/product-types/{existing['id']}", {
            "version": existing["version"],
            "actions": actions,
        })

    @staticmethod
    def _variant_draft(variant: VariantInput, request: CreateProductRequest) -> dict[str, Any]:
        cent_amount = variant.cent_amount if variant.cent_amount is not None else request.cent_amount
        return {
            "sku": variant.sku,
            "attributes": attributes_to_list(variant.attributes),
            "prices": [{
                "value": {
                    "currencyCode": variant.currency_code or request.currency_code,
                    "centAmount": cent_amount,
                },
            }],
            "images": [
                {"url": image.url, "dimensions": {"w": image.w, "h": image.h}}
                for image in variant.images
            ],
        }

    def build_product_draft(
        self,
        request: CreateProductRequest,
        product_type_id: str,
    ) -> dict[str, Any]:
        """Product draft with master variant and additional variants"""
        draft: dict[str, Any] = {
            "productType": {"typeId": "product-type", "id": product_type_id},
            "name": localized(request.name, request.locale),
            "slug": localized(request.slug or to_slug(request.name), request.locale),
            "masterVariant": {
                "sku": request.sku,
                "attributes": attributes_to_list(request.attributes),
                "prices": [{
                    "value": {
                        "currencyCode": request.currency_code,
                        "centAmount": request.cent_amount,
                    },
                }],
            },
            "variants": [self._variant_draft(v, request) for v in request.variants],
            "publish": request.publish,
        }
        if request.key:
            draft["key"] = request.key
        if request.description:
            draft["description"] = localized(request.description, request.locale)
        return draft

    async def create_product(self, request: CreateProductRequest) -> dict[str, Any]:
        """Create a product, ensuring its product type first"""
        type_config = request.product_type_config or ProductTypeConfig(
            key=request.product_type_key,
            attributes=DEFAULT_TYPE_ATTRIBUTES,
        )
        product_type = await self.ensure_product_type(type_config.key, type_config.attributes)

        product = await self.client.post(
            "/products",
            self.build_product_draft(request, product_type["id"]),
        )
        logger.info(f"Created product {product['id']} ({request.sku})")

        published = ((product.get("masterData") or {}).get("published"))
        if request.publish and published is False:
            product = await self.publish_product(product["id"], product["version"])
        return product

    async def publish_product(self, product_id: str, version: int) -> dict[str, Any]:
        return await self.update_product(product_id, version, [{"action": "publish", "scope": "All"}])

    async def unpublish_product(self, product_id: str, version: int) -> dict[str, Any]:
        return await self.update_product(product_id, version, [{"action": "unpublish"}])

    async def update_product(
        self,
        product_id: str,
        version: int,
        actions: list[dict[str, Any]],
    ) -> dict[str, Any]:
        """Apply raw update actions to a product version"""
        return await self.client.post(f"/products/{product_id}", {
            "version": version,
            "actions": actions,
        })

    async def delete_product(self, product_id: str, version: int) -> dict[str, Any]:
        return await self.client.delete(f"/products/{product_id}", {"version": version})
