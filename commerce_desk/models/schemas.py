"""
Pydantic models and schemas for Commerce Desk.

This module defines all data structures shared by the catalog, task and
agent components, ensuring type safety, validation, and serialization
consistency.

Models:
    - CatalogRow: Canonical product row from a catalog sheet
    - CatalogListing: One row realized for one marketplace
    - CatalogDataset: Generated listing packs keyed by marketplace
    - PerformanceSnapshot: Parsed performance metrics
    - TaskRecommendation: Prioritized action item
    - AgentMessage: Conversation log entry
    - ListingExportRow: Flat listing-pack record for CSV export
"""

from __future__ import annotations

from datetime import datetime, timezone
from enum import Enum
from typing import Any, Optional, Self

from pydantic import (
    BaseModel as PydanticBaseModel,
    ConfigDict,
    Field,
    field_serializer,
    field_validator,
    model_validator,
)


# =============================================================================
# Base Configuration
# =============================================================================

class BaseModel(PydanticBaseModel):
    """Base model with common configuration for all schemas."""

    model_config = ConfigDict(
        str_strip_whitespace=True,
        populate_by_name=True,
        use_enum_values=False,
    )

    def to_json(self, **kwargs) -> str:
        """Serialize model to JSON string."""
        return self.model_dump_json(indent=2, **kwargs)

    def to_dict(self, **kwargs) -> dict[str, Any]:
        """Serialize model to dictionary."""
        return self.model_dump(**kwargs)

    @classmethod
    def from_json(cls, json_str: str) -> Self:
        """Deserialize model from JSON string."""
        return cls.model_validate_json(json_str)


class FrozenModel(BaseModel):
    """Immutable variant for records that never change after creation."""

    model_config = ConfigDict(frozen=True)


# =============================================================================
# Enums
# =============================================================================

class MarketplaceKey(str, Enum):
    """Supported marketplaces."""
    AMAZON = "amazon"
    FLIPKART = "flipkart"
    MEESHO = "meesho"
    MYNTRA = "myntra"


class ComplianceMode(str, Enum):
    """Listing generation compliance mode."""
    STANDARD = "standard"
    STRICT = "strict"


class FulfillmentMode(str, Enum):
    """Who ships the order."""
    FULFILLED = "fulfilled"
    SELF = "self"


class TaskPriority(str, Enum):
    """Task priority level."""
    HIGH = "high"
    MEDIUM = "medium"
    LOW = "low"

    @property
    def rank(self) -> int:
        """Sort key: high first."""
        return _PRIORITY_RANK[self]


_PRIORITY_RANK = {
    TaskPriority.HIGH: 0,
    TaskPriority.MEDIUM: 1,
    TaskPriority.LOW: 2,
}


class TaskStatus(str, Enum):
    """Operator-controlled task status."""
    PENDING = "pending"
    DONE = "done"


class MessageRole(str, Enum):
    """Conversation participant."""
    USER = "user"
    AGENT = "agent"


# =============================================================================
# Catalog Models
# =============================================================================

class CatalogRow(FrozenModel):
    """
    Canonical product record produced from one raw sheet row.

    Example:
        >>> row = CatalogRow(sku="A1", title="Kurta Set", price=999)
        >>> row.price
        999.0
    """

    sku: str = Field(
        default="",
        description="Seller SKU, unique within a batch",
        examples=["KS-1001"],
    )
    title: str = Field(
        ...,
        min_length=1,
        description="Product title",
        examples=["Cotton Kurta Set"],
    )
    brand: Optional[str] = Field(default=None, description="Brand name")
    description: str = Field(default="", description="Long-form description")
    category: Optional[str] = Field(default=None, description="Source category")
    price: float = Field(
        default=0.0,
        ge=0,
        description="Maximum retail price from the sheet",
    )
    attributes: dict[str, str] = Field(
        default_factory=dict,
        description="Unrecognized columns keyed by original header",
    )

    @field_validator("brand", "category", mode="before")
    @classmethod
    def blank_to_none(cls, v: Optional[str]) -> Optional[str]:
        """Treat blank optional strings as missing."""
        if v is None:
            return None
        v = str(v).strip()
        return v or None


class ListingPrice(FrozenModel):
    """MRP and selling price for one listing."""

    mrp: float = Field(..., ge=0, description="Maximum retail price")
    selling: float = Field(..., ge=0, description="Selling price after discount")

    @model_validator(mode="after")
    def check_selling_not_above_mrp(self) -> Self:
        """Selling price may never exceed MRP."""
        if self.selling > self.mrp:
            raise ValueError(
                f"Selling price {self.selling} exceeds MRP {self.mrp}"
            )
        return self

    @property
    def discount_percentage(self) -> float:
        """Discount off MRP, in percent."""
        if not self.mrp:
            return 0.0
        return round((self.mrp - self.selling) / self.mrp * 100, 1)


class CatalogListing(FrozenModel):
    """One catalog row realized for one marketplace."""

    platform: MarketplaceKey = Field(..., description="Target marketplace")
    sku: str = Field(..., description="Seller SKU")
    title: str = Field(..., min_length=1, description="Listing title")
    subtitle: Optional[str] = Field(default=None, description="Brand/category line")
    bullet_points: list[str] = Field(default_factory=list)
    description: str = Field(default="")
    search_terms: list[str] = Field(default_factory=list)
    category_path: str = Field(default="Uncategorized")
    price: ListingPrice
    fulfillment: FulfillmentMode
    compliance_notes: list[str] = Field(default_factory=list)


class GenerationOptions(BaseModel):
    """Options for a single listing generation run."""

    selected_platforms: set[MarketplaceKey] = Field(default_factory=set)
    compliance_mode: ComplianceMode = Field(default=ComplianceMode.STANDARD)


class CatalogDataset(BaseModel):
    """
    Listing packs for one generation run.

    Only selected marketplaces are present as keys; each pack holds one
    listing per valid catalog row.
    """

    generated: dict[MarketplaceKey, list[CatalogListing]] = Field(default_factory=dict)

    @property
    def platforms(self) -> list[MarketplaceKey]:
        """Marketplaces present in the dataset, in insertion order."""
        return list(self.generated.keys())

    @property
    def listing_count(self) -> int:
        """Total listings across all marketplaces."""
        return sum(len(listings) for listings in self.generated.values())

    @property
    def is_empty(self) -> bool:
        """True when no listing was generated."""
        return self.listing_count == 0

    def for_platform(self, platform: MarketplaceKey | str) -> list[CatalogListing]:
        """Listings for one marketplace (empty when not generated)."""
        return self.generated.get(MarketplaceKey(platform), [])


# =============================================================================
# Performance & Task Models
# =============================================================================

class PerformanceSnapshot(FrozenModel):
    """Metrics parsed from one free-text performance snapshot."""

    metrics: dict[str, float] = Field(
        default_factory=dict,
        description="Metric name to value; unmentioned metrics are absent",
        examples=[{"CTR": 0.9, "Conversion": 1.4}],
    )
    narrative: str = Field(default="", description="One-line health summary")


class TaskRecommendation(BaseModel):
    """
    Prioritized action item raised by a threshold breach.

    The id is derived from the triggering metric and tier, so repeated
    analyses of the same condition map to the same task.
    """

    id: str = Field(..., min_length=1, description="Stable condition-derived id")
    title: str = Field(..., description="Short actionable title")
    description: str = Field(default="", description="What to do and why")
    priority: TaskPriority = Field(default=TaskPriority.MEDIUM)
    status: TaskStatus = Field(default=TaskStatus.PENDING)
    tags: set[str] = Field(default_factory=set)
    metric_impact: Optional[dict[str, float]] = Field(default=None)

    @field_serializer("tags")
    def serialize_tags(self, value: set[str]) -> list[str]:
        """Serialize tags in a stable order."""
        return sorted(value)

    @property
    def is_open(self) -> bool:
        """True while the task is still pending."""
        return self.status == TaskStatus.PENDING


# =============================================================================
# Conversation Models
# =============================================================================

class AgentMessage(FrozenModel):
    """One entry of the append-only conversation log."""

    id: str = Field(..., description="Sequence-derived message id")
    role: MessageRole
    text: str
    timestamp: datetime = Field(
        default_factory=lambda: datetime.now(timezone.utc),
        description="Message creation time (UTC)",
    )

    @field_serializer("timestamp")
    def serialize_timestamp(self, value: datetime) -> str:
        """Serialize timestamp to ISO format."""
        if value.tzinfo is None:
            return value.isoformat() + "Z"
        return value.isoformat()


class AgentContext(BaseModel):
    """Everything the response composer may read."""

    message: str = Field(default="")
    conversation: list[AgentMessage] = Field(default_factory=list)
    catalog: Optional[CatalogDataset] = Field(default=None)
    tasks: list[TaskRecommendation] = Field(default_factory=list)


# =============================================================================
# Export Models
# =============================================================================

EXPORT_COLUMNS = [
    "SKU",
    "Title",
    "Subtitle",
    "BulletPoints",
    "Description",
    "SearchTerms",
    "CategoryPath",
    "MRP",
    "SellingPrice",
    "Fulfillment",
    "ComplianceNotes",
]


class ListingExportRow(BaseModel):
    """Flat listing-pack record with fixed CSV column names."""

    sku: str = Field(..., alias="SKU")
    title: str = Field(..., alias="Title")
    subtitle: str = Field(default="", alias="Subtitle")
    bullet_points: str = Field(default="", alias="BulletPoints")
    description: str = Field(default="", alias="Description")
    search_terms: str = Field(default="", alias="SearchTerms")
    category_path: str = Field(default="", alias="CategoryPath")
    mrp: float = Field(..., alias="MRP")
    selling_price: float = Field(..., alias="SellingPrice")
    fulfillment: str = Field(..., alias="Fulfillment")
    compliance_notes: str = Field(default="", alias="ComplianceNotes")


__all__ = [
    # Base
    "BaseModel",
    "FrozenModel",

    # Enums
    "MarketplaceKey",
    "ComplianceMode",
    "FulfillmentMode",
    "TaskPriority",
    "TaskStatus",
    "MessageRole",

    # Catalog
    "CatalogRow",
    "ListingPrice",
    "CatalogListing",
    "GenerationOptions",
    "CatalogDataset",

    # Tasks
    "PerformanceSnapshot",
    "TaskRecommendation",

    # Conversation
    "AgentMessage",
    "AgentContext",

    # Export
    "EXPORT_COLUMNS",
    "ListingExportRow",
]
