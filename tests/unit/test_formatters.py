from datetime import datetime, timezone

import pytest

from commerce_desk.catalog.generator import generate_catalog_dataset
from commerce_desk.models.schemas import PerformanceSnapshot
from commerce_desk.utils.formatters import (
    format_listing_table,
    format_snapshot_table,
    format_task_table,
    generate_desk_report,
    save_report,
)

GENERATED_AT = datetime(2024, 5, 1, 9, 30, tzinfo=timezone.utc)


def test_listing_table(catalog_rows, amazon_options):
    dataset = generate_catalog_dataset(catalog_rows, amazon_options)
    table = format_listing_table(dataset.for_platform("amazon"))
    lines = table.splitlines()
    assert lines[0].startswith("| SKU | Title |")
    assert len(lines) == 4
    assert "| KS-1001 | Cotton Kurta Set |" in lines[2]
    assert "1299.00" in lines[2]


def test_empty_tables():
    assert format_listing_table([]) == "*No listings generated.*"
    assert format_task_table([]) == "*No tasks on the board.*"
    assert format_snapshot_table(PerformanceSnapshot(metrics={}, narrative="")) == "*No metrics recognized.*"


def test_task_table_lists_open_tasks_first(sample_tasks):
    rows = format_task_table(list(reversed(sample_tasks))).splitlines()[2:]
    assert rows[0].startswith("| Low | Refresh main images")
    assert "| done |" in rows[1]
    assert "creatives, ctr" in rows[0]


def test_snapshot_table_marks_health():
    snapshot = PerformanceSnapshot(metrics={"CTR": 0.9, "Return Rate": 3.0}, narrative="")
    rows = format_snapshot_table(snapshot).splitlines()[2:]
    assert rows[0] == "| CTR | 0.9% | floor 1% | ⚠️ At risk |"
    assert rows[1] == "| Return Rate | 3% | ceiling 5% | ✅ Healthy |"


def test_report_sections(catalog_rows, all_platforms_strict, sample_tasks, breach_snapshot):
    dataset = generate_catalog_dataset(catalog_rows, all_platforms_strict)
    report = generate_desk_report(
        dataset=dataset,
        tasks=sample_tasks,
        snapshot=breach_snapshot,
        agent_name="Friday",
        generated_at=GENERATED_AT,
    )

    assert report.startswith("# Commerce Desk Report")
    for heading in ("## Catalog Summary", "## Listing Packs", "### Meesho", "## Performance Snapshot", "## Task Board"):
        assert heading in report
    assert "1 open of 2 tasks." in report
    assert report.rstrip().endswith("Generated on: 2024-05-01 09:30 UTC by Friday")


def test_report_without_catalog():
    report = generate_desk_report(generated_at=GENERATED_AT)
    assert "No listings generated yet." in report
    assert "## Listing Packs" not in report
    assert "## Performance Snapshot" not in report
    assert "*No tasks on the board.*" in report


def test_save_markdown(tmp_path):
    path = save_report("# Title\n", tmp_path / "out" / "report.txt", format="markdown")
    assert path.suffix == ".md"
    assert path.read_text(encoding="utf-8") == "# Title\n"


def test_save_html(tmp_path, sample_tasks):
    report = generate_desk_report(tasks=sample_tasks, generated_at=GENERATED_AT)
    path = save_report(report, tmp_path / "report", format="html")
    html = path.read_text(encoding="utf-8")
    assert path.suffix == ".html"
    assert html.startswith("<!DOCTYPE html>")
    assert "<table>" in html
    assert "Commerce Desk Report</h1>" in html


def test_save_unsupported_format(tmp_path):
    with pytest.raises(ValueError, match="Unsupported format"):
        save_report("# x", tmp_path / "report", format="pdf")
