"""Product models for the storefront"""

from typing import Any, Literal, Optional

from pydantic import Field

from commerce.models import CamelModel


# ==================== Catalog views ====================

class MoneyView(CamelModel):
    """Money with its decimal amount for display"""
    currency_code: str
    amount: float
    cent_amount: int
    fraction_digits: int = 2

    @classmethod
    def from_platform(cls, value: Optional[dict[str, Any]]) -> Optional["MoneyView"]:
        if not value:
            return None
        fraction_digits = value.get("fractionDigits", 2)
        return cls(
            currency_code=value["currencyCode"],
            cent_amount=value["centAmount"],
            fraction_digits=fraction_digits,
            amount=value["centAmount"] / 10 ** fraction_digits,
        )


class PriceView(CamelModel):
    """Selected price of a variant"""
    price: Optional[MoneyView] = None
    discounted: Optional[MoneyView] = None


class VariantView(CamelModel):
    """Product variant"""
    id: int
    sku: Optional[str] = None
    images: list[str] = []
    price: PriceView


class ProductListItem(CamelModel):
    """Product card in a listing"""
    id: str
    slug: str
    name: str
    thumbnail: Optional[str] = None
    variant_id: Optional[int] = None
    sku: Optional[str] = None
    price: PriceView


class ProductDetail(CamelModel):
    """Product detail page"""
    id: str
    slug: str
    name: str
    description: Optional[str] = None
    master_variant: VariantView
    variants: list[VariantView] = []


class ProductListResponse(CamelModel):
    """Page of product listings"""
    count: int
    total: Optional[int] = None
    offset: int
    results: list[ProductListItem]


class ProductQuery(CamelModel):
    """Listing and price-selection filters"""
    limit: int = Field(default=20, ge=1, le=500)
    offset: int = Field(default=0, ge=0)
    locale: Optional[str] = None
    currency: Optional[str] = None
    country: Optional[str] = None
    customer_group_id: Optional[str] = None
    channel_id: Optional[str] = None
    staged: bool = False


# ==================== Product administration ====================

class EnumValue(CamelModel):
    key: str
    label: str


class AttributeSpec(CamelModel):
    """Attribute definition requested for a product type"""
    name: str
    type: Literal["text", "number", "boolean", "enum"] = "text"
    values: list[EnumValue] = []
    required: bool = False
    searchable: bool = True
    same_for_all: bool = False


class ProductTypeConfig(CamelModel):
    key: str
    attributes: list[AttributeSpec]


class ImageInput(CamelModel):
    url: str
    w: int
    h: int


class VariantInput(CamelModel):
    """Additional variant of a new product"""
    sku: str
    attributes: dict[str, Any] = {}
    cent_amount: Optional[int] = None
    currency_code: Optional[str] = None
    images: list[ImageInput] = []


class CreateProductRequest(CamelModel):
    """Request to create a product with its master variant"""
    name: str = Field(min_length=1)
    currency_code: str = Field(min_length=3, max_length=3)
    cent_amount: int = Field(ge=0)
    sku: str
    slug: Optional[str] = None
    description: Optional[str] = None
    locale: str = "en"
    key: Optional[str] = None
    publish: bool = True
    product_type_key: str = "default-product-type"
    product_type_config: Optional[ProductTypeConfig] = None
    attributes: dict[str, Any] = {}
    variants: list[VariantInput] = []


class UpdateProductRequest(CamelModel):
    """Raw update actions against a product version"""
    version: int
    actions: list[dict[str, Any]]
