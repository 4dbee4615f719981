"""
Catalog Service

Reads product projections for the storefront listing and detail pages
and maps them into UI view models.
"""

import logging
from typing import Any, Awaitable, Callable, Optional

from commerce import CommerceClient, NotFoundError

from ..core.config import settings
from ..models.product import (
    MoneyView,
    PriceView,
    VariantView,
    ProductListItem,
    ProductDetail,
    ProductListResponse,
    ProductQuery,
)

logger = logging.getLogger(__name__)

# A lookup strategy resolves to a product projection or None on a miss
LookupStrategy = Callable[[], Awaitable[Optional[dict[str, Any]]]]


def pick_locale(localized: Optional[dict[str, str]], locale: str) -> Optional[str]:
    """Value for the locale, falling back to the first available one"""
    if not localized:
        return None
    if localized.get(locale):
        return localized[locale]
    return next(iter(localized.values()), None)


def price_from_variant(variant: Optional[dict[str, Any]]) -> PriceView:
    """Prefer the scoped price selected by the platform over the raw price list"""
    variant = variant or {}
    scoped = variant.get("scopedPrice")
    if scoped and scoped.get("value"):
        discounted = scoped.get("discounted")
        return PriceView(
            price=MoneyView.from_platform(scoped["value"]),
            discounted=MoneyView.from_platform(discounted["value"]) if discounted else None,
        )

    prices = variant.get("prices") or []
    first = prices[0].get("value") if prices else None
    return PriceView(price=MoneyView.from_platform(first))


def map_variant(variant: dict[str, Any]) -> VariantView:
    return VariantView(
        id=variant["id"],
        sku=variant.get("sku"),
        images=[image["url"] for image in variant.get("images") or []],
        price=price_from_variant(variant),
    )


def map_list_item(projection: dict[str, Any], locale: str) -> ProductListItem:
    master = projection.get("masterVariant") or {}
    images = master.get("images") or []
    return ProductListItem(
        id=projection["id"],
        slug=pick_locale(projection.get("slug"), locale) or projection["id"],
        name=pick_locale(projection.get("name"), locale) or "Untitled",
        thumbnail=images[0]["url"] if images else None,
        variant_id=master.get("id"),
        sku=master.get("sku"),
        price=price_from_variant(master),
    )


def map_detail(projection: dict[str, Any], locale: str) -> ProductDetail:
    return ProductDetail(
        id=projection["id"],
        slug=pick_locale(projection.get("slug"), locale) or projection["id"],
        name=pick_locale(projection.get("name"), locale) or "Untitled",
        description=pick_locale(projection.get("description"), locale),
        master_variant=map_variant(projection["masterVariant"]),
        variants=[map_variant(v) for v in projection.get("variants") or []],
    )


def slug_predicate(slug: str, locale: str) -> str:
    """Query predicate matching a localized slug; the locale stays unquoted"""
    escaped = slug.replace('"', '\\"')
    return f'slug({locale}="{escaped}")'


async def resolve_first(strategies: list[LookupStrategy]) -> Optional[dict[str, Any]]:
    """Run lookup strategies in order and return the first hit"""
    for strategy in strategies:
        result = await strategy()
        if result is not None:
            return result
    return None


class CatalogService:
    """Product listing and detail lookups"""

    def __init__(self, client: CommerceClient):
        self.client = client

    @staticmethod
    def _price_selection(filters: ProductQuery) -> dict[str, Any]:
        return {
            "staged": filters.staged,
            "priceCurrency": filters.currency or settings.default_currency,
            "priceCountry": filters.country,
            "priceCustomerGroup": filters.customer_group_id,
            "priceChannel": filters.channel_id,
        }

    async def list_products(self, filters: Optional[ProductQuery] = None) -> ProductListResponse:
        """List product projections with price selection applied"""
        filters = filters or ProductQuery()
        locale = filters.locale or settings.default_locale

        query = {
            "limit": filters.limit,
            "offset": filters.offset,
            **self._price_selection(filters),
        }
        page = await self.client.get("/product-projections", query)

        return ProductListResponse(
            count=page.get("count", 0),
            total=page.get("total"),
            offset=page.get("offset", filters.offset),
            results=[map_list_item(p, locale) for p in page.get("results") or []],
        )

    async def get_product_by_id_or_slug(
        self,
        id_or_slug: str,
        filters: Optional[ProductQuery] = None,
    ) -> ProductDetail:
        """
        Resolve a product by id, then by slug in the requested locale.

        Raises:
            NotFoundError: neither lookup matched a product
        """
        filters = filters or ProductQuery()
        locale = filters.locale or settings.default_locale
        common = self._price_selection(filters)

        async def by_id() -> Optional[dict[str, Any]]:
            return await self.client.get_or_none(f"/product-projections/{id_or_slug}", common)

        async def by_slug() -> Optional[dict[str, Any]]:
            page = await self.client.get(
                "/product-projections",
                {**common, "where": slug_predicate(id_or_slug, locale), "limit": 1},
            )
            results = page.get("results") or []
            return results[0] if results else None

        projection = await resolve_first([by_id, by_slug])
        if projection is None:
            logger.info(f"No product with id or slug {id_or_slug!r} ({locale})")
            raise NotFoundError("Product not found")

        return map_detail(projection, locale)
