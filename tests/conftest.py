import pytest
from datetime import datetime, timezone
from pathlib import Path
from unittest.mock import patch

import pandas as pd
import structlog

from commerce_desk.catalog.normalizer import ingest_rows
from commerce_desk.config.settings import Settings
from commerce_desk.models.schemas import (
    ComplianceMode,
    GenerationOptions,
    MarketplaceKey,
    PerformanceSnapshot,
    TaskPriority,
    TaskRecommendation,
    TaskStatus,
)

CATALOG_HEADERS = ["SKU", "Product Name", "Brand", "Category", "MRP", "Description", "Color", "Fabric"]


@pytest.fixture
def settings(tmp_path):
    """Real settings pointed at a temporary workspace, isolated from the environment."""
    return Settings(
        _env_file=None,
        APP_ENV="development",
        DEBUG=False,
        LOG_LEVEL="WARNING",
        LOG_JSON=False,
        AGENT_NAME="Jarvis",
        DEFAULT_PLATFORMS=["amazon", "flipkart"],
        COMPLIANCE_MODE="standard",
        THRESHOLDS_FILE=None,
        OUTPUT_DIR=str(tmp_path / "listing_packs"),
        REPORT_DIR=str(tmp_path / "reports"),
        REPORT_FORMAT="markdown",
    )


@pytest.fixture(autouse=True)
def patch_get_settings(settings):
    """Globally patch get_settings to return the isolated settings."""
    with patch("commerce_desk.config.settings.get_settings", return_value=settings):
        with patch("commerce_desk.session.desk.get_settings", return_value=settings):
            with patch("commerce_desk.main.get_settings", return_value=settings):
                yield settings


@pytest.fixture(autouse=True)
def reset_structlog():
    """Drop logger configuration bound to streams captured by earlier tests."""
    yield
    structlog.reset_defaults()
    structlog.contextvars.clear_contextvars()


@pytest.fixture
def fixed_clock():
    return lambda: datetime(2024, 5, 1, 9, 30, tzinfo=timezone.utc)


@pytest.fixture
def catalog_records():
    """Raw sheet records: two good rows, one without a title, one duplicate SKU."""
    return [
        {
            "SKU": "KS-1001",
            "Product Name": "Cotton Kurta Set",
            "Brand": "Anaya",
            "Category": "Kurta Set",
            "MRP": "₹1,299",
            "Description": "Pure cotton kurta with palazzo. Hand block printed. Machine washable.",
            "Color": "Indigo",
            "Fabric": "Cotton",
        },
        {
            "SKU": "SR-2002",
            "Product Name": "Banarasi Silk Saree",
            "Brand": "",
            "Category": "Sarees",
            "MRP": "2499",
            "Description": "Woven zari border",
            "Color": "Maroon",
            "Fabric": "Silk",
        },
        {
            "SKU": "KT-3003",
            "Product Name": "   ",
            "Brand": "Anaya",
            "Category": "Kurta",
            "MRP": "999",
            "Description": "",
            "Color": "",
            "Fabric": "",
        },
        {
            "SKU": "ks-1001",
            "Product Name": "Cotton Kurta Set (Repeat)",
            "Brand": "Anaya",
            "Category": "Kurta Set",
            "MRP": "1299",
            "Description": "",
            "Color": "",
            "Fabric": "",
        },
    ]


@pytest.fixture
def catalog_rows(catalog_records):
    return ingest_rows(catalog_records)


@pytest.fixture
def catalog_csv(tmp_path, catalog_records):
    path = tmp_path / "catalog.csv"
    pd.DataFrame(catalog_records, columns=CATALOG_HEADERS).to_csv(path, index=False, encoding="utf-8")
    return path


@pytest.fixture
def amazon_options():
    return GenerationOptions(selected_platforms={MarketplaceKey.AMAZON})


@pytest.fixture
def all_platforms_strict():
    return GenerationOptions(
        selected_platforms=set(MarketplaceKey),
        compliance_mode=ComplianceMode.STRICT,
    )


@pytest.fixture
def breach_snapshot():
    return PerformanceSnapshot(
        metrics={"CTR": 0.9, "Conversion": 1.4, "Cancellation Rate": 9.5},
        narrative="",
    )


@pytest.fixture
def sample_tasks():
    return [
        TaskRecommendation(
            id="task-ctr-below-floor",
            title="Refresh main images and titles to lift CTR",
            description="CTR is at 0.9% against a floor of 1%.",
            priority=TaskPriority.LOW,
            tags={"ctr", "creatives"},
            metric_impact={"CTR": 0.9},
        ),
        TaskRecommendation(
            id="task-cancellation-rate-above-ceiling",
            title="Fix inventory sync to cut cancellations",
            description="Cancellation Rate is at 9.5% against a ceiling of 2.5%.",
            priority=TaskPriority.HIGH,
            status=TaskStatus.DONE,
            tags={"cancellation", "inventory"},
            metric_impact={"Cancellation Rate": 9.5},
        ),
    ]


@pytest.fixture
def tasks_file(tmp_path):
    return Path(tmp_path) / "board" / "tasks.json"
