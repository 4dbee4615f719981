#!/usr/bin/env python3
"""
Create sample products with variants.

Ensures an electronics product type with brand, model and variant-level
color/storage attributes, then creates two published products.
"""

import asyncio
import secrets
import sys

from dotenv import load_dotenv

load_dotenv()

from commerce import CommerceError  # noqa: E402
from storefront.core.clients import build_commerce_client  # noqa: E402
from storefront.models.product import CreateProductRequest, ProductTypeConfig  # noqa: E402
from storefront.services.catalog_service import pick_locale  # noqa: E402
from storefront.services.product_service import ProductService  # noqa: E402

LOCALE = "en-US"

ELECTRONICS_TYPE = ProductTypeConfig.model_validate({
    "key": "electronics-type-v3",
    "attributes": [
        {"name": "brand", "type": "enum", "sameForAll": True, "values": [
            {"key": "google", "label": "Google"},
            {"key": "apple", "label": "Apple"},
            {"key": "samsung", "label": "Samsung"},
        ]},
        {"name": "model", "type": "text", "sameForAll": True},
        {"name": "warrantyYears", "type": "number", "sameForAll": True},
        {"name": "color", "type": "enum", "values": [
            {"key": "black", "label": "Black"},
            {"key": "white", "label": "White"},
            {"key": "blue", "label": "Blue"},
            {"key": "silver", "label": "Silver"},
            {"key": "gray", "label": "Gray"},
        ]},
        {"name": "storage", "type": "enum", "values": [
            {"key": "64gb", "label": "64 GB"},
            {"key": "128gb", "label": "128 GB"},
            {"key": "256gb", "label": "256 GB"},
            {"key": "512gb", "label": "512 GB"},
        ]},
        {"name": "is5g", "type": "boolean"},
    ],
})


def sample_products(suffix: str) -> list[CreateProductRequest]:
    smartphone = {
        "name": "Smartphone Alpha",
        "slug": f"smartphone-alpha-{suffix.lower()}",
        "description": "A sleek 5G smartphone with long battery life.",
        "locale": LOCALE,
        "currencyCode": "USD",
        "centAmount": 49900,
        "sku": f"PHONE-ALPHA-{suffix}",
        "key": f"prod-smartphone-alpha-{suffix}",
        "attributes": {
            "brand": "google",
            "model": "Alpha",
            "warrantyYears": 2,
            "color": "black",
            "storage": "128gb",
            "is5g": True,
        },
        "variants": [
            {
                "sku": f"PHONE-ALPHA-BLUE-{suffix}",
                "attributes": {"color": "blue", "storage": "128gb", "is5g": True},
                "centAmount": 49900,
                "images": [{"url": "https://images.example.com/alpha-blue-front.jpg", "w": 800, "h": 800}],
            },
            {
                "sku": f"PHONE-ALPHA-WHITE-{suffix}",
                "attributes": {"color": "white", "storage": "256gb", "is5g": True},
                "centAmount": 54900,
                "images": [{"url": "https://images.example.com/alpha-white-front.jpg", "w": 800, "h": 800}],
            },
        ],
    }
    laptop = {
        "name": "Laptop Nova",
        "slug": f"laptop-nova-{suffix.lower()}",
        "description": "Lightweight laptop with powerful performance.",
        "locale": LOCALE,
        "currencyCode": "USD",
        "centAmount": 119900,
        "sku": f"LAPTOP-NOVA-{suffix}",
        "key": f"prod-laptop-nova-{suffix}",
        "attributes": {
            "brand": "apple",
            "model": "Nova 14",
            "warrantyYears": 1,
            "color": "silver",
            "storage": "256gb",
            "is5g": False,
        },
        "variants": [
            {
                "sku": f"LAPTOP-NOVA-GRAY-512-{suffix}",
                "attributes": {"color": "gray", "storage": "512gb", "is5g": False},
                "centAmount": 139900,
                "images": [{"url": "https://images.example.com/nova-gray-512.jpg", "w": 1200, "h": 800}],
            },
        ],
    }
    return [
        CreateProductRequest.model_validate({**draft, "productTypeConfig": ELECTRONICS_TYPE})
        for draft in (smartphone, laptop)
    ]


async def main() -> int:
    suffix = secrets.token_hex(3).upper()
    client = build_commerce_client()
    products = ProductService(client)
    failures = 0

    try:
        for request in sample_products(suffix):
            try:
                product = await products.create_product(request)
            except CommerceError as e:
                print(f"Failed to create {request.name}: {e}")
                failures += 1
                continue
            current = (product.get("masterData") or {}).get("current") or {}
            shown = pick_locale(current.get("name"), LOCALE) or request.name
            print(f"Created: {shown} (id: {product['id']})")
    finally:
        await client.close()

    return 1 if failures else 0


if __name__ == "__main__":
    sys.exit(asyncio.run(main()))
