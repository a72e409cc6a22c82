"""API schemas for the Storefront API.

Pydantic models for request/response validation and serialization.
Request bodies use the camelCase field names of the storefront pages;
``to_fields()`` converts them into the snake_case fields the services
expect.
"""

from enum import Enum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field


# ============================================================================
# Common Schemas
# ============================================================================


class ErrorDetail(BaseModel):
    """Detailed error information."""

    field: str | None = Field(default=None, description="Field that caused the error")
    message: str = Field(..., description="Error message")


class ErrorResponse(BaseModel):
    """Standard error response.

    All API errors follow this format for consistency.
    """

    ok: bool = Field(default=False, description="Always false for errors")
    error_code: str = Field(..., description="Machine-readable error code")
    message: str = Field(..., description="Human-readable error message")
    details: list[ErrorDetail] = Field(
        default_factory=list, description="Additional error details"
    )
    request_id: str | None = Field(
        default=None, description="Request ID for correlation"
    )


class Envelope(BaseModel):
    """Successful response wrapper."""

    ok: bool = Field(default=True, description="Always true for successes")
    data: Any = Field(..., description="Response payload")


# ============================================================================
# Region Schemas
# ============================================================================


class RegionRequest(BaseModel):
    """Region create/update request.

    Every field is optional so that missing names are reported with the
    region-specific messages rather than a schema error.
    """

    model_config = ConfigDict(populate_by_name=True)

    name: str | None = Field(default=None, description="Region name")
    slug: str | None = Field(default=None, description="URL slug, generated from the name when empty")
    description: str | None = Field(default=None, description="Region description")
    active: bool | None = Field(default=None, description="Whether the region is listed")
    image_url: str | None = Field(default=None, alias="imageUrl", description="Banner image")

    def to_fields(self) -> dict[str, Any]:
        """Fields present in the request body."""
        return self.model_dump(exclude_unset=True, by_alias=False)


class RegionSchema(BaseModel):
    """Region representation."""

    model_config = ConfigDict(populate_by_name=True)

    id: str = Field(..., alias="_id")
    name: str
    slug: str
    description: str | None = None
    active: bool
    image_url: str | None = Field(default=None, alias="imageUrl")
    created_at: str = Field(..., alias="createdAt")
    updated_at: str = Field(..., alias="updatedAt")


class RegionEnvelope(Envelope):
    """Single region response."""

    data: RegionSchema


class RegionListEnvelope(Envelope):
    """Region list response."""

    data: list[RegionSchema]


# ============================================================================
# Product Schemas
# ============================================================================


class DiscountType(str, Enum):
    """Discount kinds."""

    PERCENTAGE = "percentage"
    FLAT = "flat"


class DiscountSchema(BaseModel):
    """Product discount."""

    type: DiscountType = Field(..., description="percentage or flat")
    value: float = Field(..., ge=0, description="Percent off or amount off")


class QuantityOptionSchema(BaseModel):
    """Quantity option of a product."""

    model_config = ConfigDict(populate_by_name=True)

    id: str = Field(..., min_length=1)
    quantity: float = Field(default=0, ge=0)
    unit: str = Field(default="pcs", description="gm, ml, l or pcs")
    pack_size: int = Field(default=1, ge=1, alias="packSize")
    display_label: str = Field(..., min_length=1, alias="displayLabel")
    price: float = Field(default=0, ge=0)
    original_price: float | None = Field(default=None, ge=0, alias="originalPrice")
    stock: int = Field(default=0, ge=0)
    is_active: bool = Field(default=True, alias="isActive")
    sort_order: float = Field(default=0, alias="sortOrder")


class SizeInventorySchema(BaseModel):
    """Legacy per-size stock entry."""

    code: str
    label: str | None = None
    qty: int = Field(default=0, ge=0)


class ReviewSchema(BaseModel):
    """Product review."""

    model_config = ConfigDict(extra="allow")

    rating: float = Field(..., ge=0, le=5)
    username: str | None = None
    text: str | None = None
    status: str | None = None


class ProductFieldsBase(BaseModel):
    """Product fields shared by create and update requests."""

    model_config = ConfigDict(populate_by_name=True)

    slug: str | None = None
    discount: DiscountSchema | None = None
    region: str | None = Field(default=None, description="Region slug")
    description: str | None = None
    image_url: str | None = None
    quantity_options: list[QuantityOptionSchema] | None = Field(default=None, alias="quantityOptions")
    size_inventory: list[SizeInventorySchema] | None = Field(default=None, alias="sizeInventory")
    track_inventory_by_size: bool | None = Field(default=None, alias="trackInventoryBySize")
    reviews: list[ReviewSchema] | None = None
    is_best_seller: bool | None = Field(default=None, alias="isBestSeller")
    active: bool | None = None
    images: list[str] | None = None
    colors: list[str] | None = None
    stock: int | None = Field(default=None, ge=0)
    category: str | None = None

    def to_fields(self) -> dict[str, Any]:
        """Fields present in the request body, nested values in wire shape."""
        fields = self.model_dump(exclude_unset=True, by_alias=False, mode="json")
        if self.quantity_options is not None:
            fields["quantity_options"] = [
                option.model_dump(by_alias=True, exclude_none=True)
                for option in self.quantity_options
            ]
        if self.discount is not None:
            fields["discount"] = self.discount.model_dump(mode="json")
        return fields


class ProductCreateRequest(ProductFieldsBase):
    """Request to create a product."""

    title: str = Field(..., min_length=1, max_length=500)
    price: float = Field(default=0, ge=0, description="Base price")


class ProductUpdateRequest(ProductFieldsBase):
    """Request to update a product (partial)."""

    title: str | None = Field(default=None, max_length=500)
    price: float | None = Field(default=None, ge=0, description="Base price")


class ProductEnvelope(Envelope):
    """Single product response (a product record)."""

    data: dict[str, Any]


class ProductListEnvelope(Envelope):
    """Product list response."""

    data: list[dict[str, Any]]
    total: int = Field(..., description="Number of products returned")
