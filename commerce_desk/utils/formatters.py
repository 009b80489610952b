"""
Report formatting utilities.

Builds Markdown desk reports (listing packs, metrics, task board) and saves
them as Markdown or styled HTML.
"""

import logging
from datetime import datetime, timezone
from pathlib import Path
from typing import Optional, Sequence

import markdown2

from commerce_desk.catalog.summarizer import summarize_catalog
from commerce_desk.config.marketplaces import marketplace_label
from commerce_desk.config.thresholds import DEFAULT_THRESHOLD_POLICY, ThresholdPolicy
from commerce_desk.models.schemas import (
    CatalogDataset,
    CatalogListing,
    PerformanceSnapshot,
    TaskRecommendation,
)

logger = logging.getLogger(__name__)

MAX_TITLE_WIDTH = 60

HTML_TEMPLATE = """<!DOCTYPE html>
<html>
<head>
<meta charset="UTF-8">
<title>{title}</title>
<style>
body {{ font-family: -apple-system, system-ui, sans-serif; max-width: 960px; margin: 0 auto; padding: 40px; line-height: 1.6; color: #333; }}
table {{ border-collapse: collapse; width: 100%; margin: 20px 0; }}
th, td {{ border: 1px solid #ddd; padding: 10px; text-align: left; vertical-align: top; }}
th {{ background-color: #f5f5f5; }}
h1, h2, h3 {{ color: #2c3e50; margin-top: 30px; }}
h1 {{ border-bottom: 2px solid #2c3e50; padding-bottom: 10px; }}
</style>
</head>
<body>
{body}
</body>
</html>
"""


def _cell(text: object) -> str:
    """Escape pipes and flatten newlines for a table cell."""
    return str(text).replace("|", "-").replace("\n", " ")


def _truncate(text: str, width: int = MAX_TITLE_WIDTH) -> str:
    return text[:width] + "..." if len(text) > width else text


def format_listing_table(listings: Sequence[CatalogListing]) -> str:
    """
    Markdown table for one marketplace pack.

    | SKU | Title | Category | MRP | Selling | Fulfillment | Notes |
    |-----|-------|----------|-----|---------|-------------|-------|
    """
    if not listings:
        return "*No listings generated.*"

    header = (
        "| SKU | Title | Category | MRP | Selling | Fulfillment | Notes |\n"
        "|-----|-------|----------|-----|---------|-------------|-------|"
    )
    rows = []
    for item in listings:
        rows.append(
            f"| {_cell(item.sku)} | {_cell(_truncate(item.title))} | {_cell(item.category_path)} "
            f"| {item.price.mrp:.2f} | {item.price.selling:.2f} "
            f"| {item.fulfillment.value} | {len(item.compliance_notes)} |"
        )
    return header + "\n" + "\n".join(rows)


def format_task_table(tasks: Sequence[TaskRecommendation]) -> str:
    """
    Markdown table for the task board, open tasks first.

    | Priority | Task | Status | Tags |
    |----------|------|--------|------|
    """
    if not tasks:
        return "*No tasks on the board.*"

    header = "| Priority | Task | Status | Tags |\n|----------|------|--------|------|"
    ordered = sorted(tasks, key=lambda t: (not t.is_open, t.priority.rank))
    rows = [
        f"| {task.priority.value.title()} | {_cell(task.title)} | {task.status.value} "
        f"| {', '.join(sorted(task.tags))} |"
        for task in ordered
    ]
    return header + "\n" + "\n".join(rows)


def format_snapshot_table(
    snapshot: PerformanceSnapshot,
    policy: ThresholdPolicy = DEFAULT_THRESHOLD_POLICY,
) -> str:
    """
    Markdown table of parsed metrics against their limits.

    | Metric | Value | Limit | Health |
    |--------|-------|-------|--------|
    """
    if not snapshot.metrics:
        return "*No metrics recognized.*"

    header = "| Metric | Value | Limit | Health |\n|--------|-------|-------|--------|"
    rows = []
    for name, value in snapshot.metrics.items():
        rules = policy.rules_for(name)
        limits = ", ".join(f"{r.direction.value} {policy.format_value(name, r.limit)}" for r in rules)
        breached = any(r.is_breached(value) for r in rules)
        health = "⚠️ At risk" if breached else "✅ Healthy"
        rows.append(f"| {name} | {policy.format_value(name, value)} | {limits or '-'} | {health} |")
    return header + "\n" + "\n".join(rows)


def generate_desk_report(
    dataset: Optional[CatalogDataset] = None,
    tasks: Sequence[TaskRecommendation] = (),
    snapshot: Optional[PerformanceSnapshot] = None,
    policy: ThresholdPolicy = DEFAULT_THRESHOLD_POLICY,
    agent_name: str = "Jarvis",
    generated_at: Optional[datetime] = None,
) -> str:
    """
    Generate the complete desk report content.

    Structure:
    # Commerce Desk Report
    ## Catalog Summary
    ## Listing Packs (one subsection per marketplace)
    ## Performance Snapshot
    ## Task Board
    """
    timestamp = (generated_at or datetime.now(timezone.utc)).strftime("%Y-%m-%d %H:%M UTC")

    sections = ["# Commerce Desk Report", ""]

    sections.append("## Catalog Summary")
    if dataset is None or dataset.is_empty:
        sections.append("No listings generated yet.")
    else:
        sections.append(summarize_catalog(dataset))
    sections.append("")

    if dataset is not None and not dataset.is_empty:
        sections.append("## Listing Packs")
        for platform, listings in dataset.generated.items():
            sections.append(f"### {marketplace_label(platform)}")
            sections.append(format_listing_table(listings))
            sections.append("")

    if snapshot is not None:
        sections.append("## Performance Snapshot")
        sections.append(snapshot.narrative)
        sections.append("")
        sections.append(format_snapshot_table(snapshot, policy))
        sections.append("")

    sections.append("## Task Board")
    open_count = sum(1 for task in tasks if task.is_open)
    if tasks:
        sections.append(f"{open_count} open of {len(tasks)} tasks.")
        sections.append("")
    sections.append(format_task_table(tasks))
    sections.append("")

    sections.append("---")
    sections.append(f"Generated on: {timestamp} by {agent_name}")
    return "\n".join(sections) + "\n"


def save_report(report: str, output_path: Path, format: str = "markdown") -> Path:
    """
    Save report to file, converting format when needed.

    Args:
        report: Markdown content
        output_path: Destination path (extension is replaced)
        format: 'markdown' or 'html'
    """
    output_path = Path(output_path)
    output_path.parent.mkdir(parents=True, exist_ok=True)
    base_path = output_path.with_suffix("")

    if format == "markdown":
        file_path = base_path.with_suffix(".md")
        file_path.write_text(report, encoding="utf-8")
        logger.info(f"Saved Markdown report to {file_path}")
        return file_path

    if format == "html":
        body = markdown2.markdown(
            report,
            extras=["tables", "fenced-code-blocks", "header-ids", "break-on-newline"],
        )
        file_path = base_path.with_suffix(".html")
        file_path.write_text(HTML_TEMPLATE.format(title="Commerce Desk Report", body=body), encoding="utf-8")
        logger.info(f"Saved HTML report to {file_path}")
        return file_path

    raise ValueError(f"Unsupported format: {format}")


__all__ = [
    "format_listing_table",
    "format_task_table",
    "format_snapshot_table",
    "generate_desk_report",
    "save_report",
]
