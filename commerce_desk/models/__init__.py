"""Data models module for Commerce Desk."""

from commerce_desk.models.schemas import (
    # Base Models
    BaseModel,
    FrozenModel,

    # Enums
    MarketplaceKey,
    ComplianceMode,
    FulfillmentMode,
    TaskPriority,
    TaskStatus,
    MessageRole,

    # Catalog Models
    CatalogRow,
    ListingPrice,
    CatalogListing,
    GenerationOptions,
    CatalogDataset,

    # Task Models
    PerformanceSnapshot,
    TaskRecommendation,

    # Conversation Models
    AgentMessage,
    AgentContext,

    # Export Models
    EXPORT_COLUMNS,
    ListingExportRow,
)

__all__ = [
    "BaseModel",
    "FrozenModel",
    "MarketplaceKey",
    "ComplianceMode",
    "FulfillmentMode",
    "TaskPriority",
    "TaskStatus",
    "MessageRole",
    "CatalogRow",
    "ListingPrice",
    "CatalogListing",
    "GenerationOptions",
    "CatalogDataset",
    "PerformanceSnapshot",
    "TaskRecommendation",
    "AgentMessage",
    "AgentContext",
    "EXPORT_COLUMNS",
    "ListingExportRow",
]
