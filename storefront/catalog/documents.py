"""Catalog documents.

Regions and products as stored in the document store. Documents are
serialized with the field names the storefront pages consume (``_id``,
``imageUrl``, ``quantityOptions``, ``createdAt``, ...).
"""

from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any
from uuid import uuid4


def new_document_id() -> str:
    """Generate a 24-character hex document id."""
    return uuid4().hex[:24]


def _now() -> datetime:
    return datetime.now(timezone.utc)


def _iso(moment: datetime) -> str:
    return moment.isoformat().replace("+00:00", "Z")


@dataclass
class RegionDocument:
    """A shopping region (e.g. a state or a city collection).

    Attributes:
        id: Document id.
        name: Display name, unique regardless of case.
        slug: URL slug, unique.
        description: Optional description shown on the region page.
        active: Whether the region is listed.
        image_url: Optional banner image reference.
    """

    name: str
    slug: str
    description: str | None = None
    active: bool = True
    image_url: str | None = None
    id: str = field(default_factory=new_document_id)
    created_at: datetime = field(default_factory=_now)
    updated_at: datetime = field(default_factory=_now)

    def to_dict(self) -> dict[str, Any]:
        """Convert to the wire representation."""
        return {
            "_id": self.id,
            "name": self.name,
            "slug": self.slug,
            "description": self.description,
            "active": self.active,
            "imageUrl": self.image_url,
            "createdAt": _iso(self.created_at),
            "updatedAt": _iso(self.updated_at),
        }


@dataclass
class ProductDocument:
    """A catalog product.

    Nested values (discount, quantity options, size inventory, reviews)
    are kept as plain mappings in their wire shape, as a document store
    would hold them.
    """

    title: str
    slug: str
    price: float = 0
    discount: dict[str, Any] | None = None
    category: str = ""
    region: str | None = None
    description: str | None = None
    images: list[str] = field(default_factory=list)
    image_url: str | None = None
    stock: int = 0
    colors: list[str] = field(default_factory=list)
    quantity_options: list[dict[str, Any]] = field(default_factory=list)
    size_inventory: list[dict[str, Any]] = field(default_factory=list)
    track_inventory_by_size: bool = False
    reviews: list[dict[str, Any]] = field(default_factory=list)
    is_best_seller: bool = False
    active: bool = True
    id: str = field(default_factory=new_document_id)
    created_at: datetime = field(default_factory=_now)
    updated_at: datetime = field(default_factory=_now)

    def to_dict(self) -> dict[str, Any]:
        """Convert to the wire representation (a product record)."""
        return {
            "_id": self.id,
            "title": self.title,
            "slug": self.slug,
            "price": self.price,
            "discount": self.discount,
            "category": self.category,
            "region": self.region,
            "description": self.description,
            "images": list(self.images),
            "image_url": self.image_url,
            "stock": self.stock,
            "colors": list(self.colors),
            "quantityOptions": [dict(option) for option in self.quantity_options],
            "sizeInventory": [dict(entry) for entry in self.size_inventory],
            "trackInventoryBySize": self.track_inventory_by_size,
            "reviews": [dict(review) for review in self.reviews],
            "isBestSeller": self.is_best_seller,
            "active": self.active,
            "createdAt": _iso(self.created_at),
            "updatedAt": _iso(self.updated_at),
        }
