import json

import pytest
from pydantic import ValidationError

from commerce_desk.models.schemas import (
    AgentMessage,
    CatalogDataset,
    CatalogRow,
    ListingExportRow,
    ListingPrice,
    MarketplaceKey,
    MessageRole,
    TaskPriority,
    TaskRecommendation,
    TaskStatus,
)


def test_catalog_row_requires_title():
    with pytest.raises(ValidationError):
        CatalogRow(sku="A1", title="   ")


def test_catalog_row_blank_brand_becomes_none():
    row = CatalogRow(sku="A1", title="Kurta Set", brand="  ", category="")
    assert row.brand is None
    assert row.category is None


def test_catalog_row_rejects_negative_price():
    with pytest.raises(ValidationError):
        CatalogRow(sku="A1", title="Kurta Set", price=-1)


def test_catalog_row_is_immutable():
    row = CatalogRow(sku="A1", title="Kurta Set", price=999)
    with pytest.raises(ValidationError):
        row.title = "Other"


def test_listing_price_selling_above_mrp_rejected():
    with pytest.raises(ValidationError):
        ListingPrice(mrp=100, selling=120)


def test_listing_price_discount_percentage():
    assert ListingPrice(mrp=200, selling=170).discount_percentage == 15.0
    assert ListingPrice(mrp=0, selling=0).discount_percentage == 0.0


def test_priority_rank_orders_high_first():
    ordered = sorted([TaskPriority.LOW, TaskPriority.HIGH, TaskPriority.MEDIUM], key=lambda p: p.rank)
    assert ordered == [TaskPriority.HIGH, TaskPriority.MEDIUM, TaskPriority.LOW]


def test_task_defaults_and_tag_serialization():
    task = TaskRecommendation(id="task-x", title="Do it", tags={"b", "a"})
    assert task.status == TaskStatus.PENDING
    assert task.priority == TaskPriority.MEDIUM
    assert task.is_open
    data = json.loads(task.to_json())
    assert data["tags"] == ["a", "b"]
    assert data["metric_impact"] is None


def test_task_json_round_trip_keeps_enums():
    task = TaskRecommendation(id="task-x", title="Do it", priority="high", status="done")
    restored = TaskRecommendation.from_json(task.to_json())
    assert restored.priority is TaskPriority.HIGH
    assert restored.status is TaskStatus.DONE
    assert not restored.is_open


def test_agent_message_timestamp_is_utc_iso():
    message = AgentMessage(id="agent-1", role=MessageRole.AGENT, text="hi")
    dumped = message.to_dict(mode="json")
    assert dumped["timestamp"].endswith("+00:00")


def test_empty_dataset_properties():
    dataset = CatalogDataset()
    assert dataset.is_empty
    assert dataset.listing_count == 0
    assert dataset.platforms == []
    assert dataset.for_platform("amazon") == []


def test_export_row_uses_column_aliases():
    row = ListingExportRow(sku="A1", title="T", mrp=10, selling_price=9, fulfillment="self")
    dumped = row.model_dump(by_alias=True)
    assert dumped["SKU"] == "A1"
    assert dumped["SellingPrice"] == 9
    assert dumped["ComplianceNotes"] == ""


def test_marketplace_key_values():
    assert {k.value for k in MarketplaceKey} == {"amazon", "flipkart", "meesho", "myntra"}
