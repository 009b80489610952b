"""
Commerce Desk - CLI Entry Point.
Operator console using Click and Rich.
"""

import json
import logging
import sys
from datetime import datetime, timezone
from pathlib import Path
from typing import Optional

import click
from pydantic import ValidationError
from rich.console import Console
from rich.logging import RichHandler
from rich.markup import escape
from rich.panel import Panel
from rich.table import Table

from commerce_desk import __version__
from commerce_desk.config.marketplaces import get_profile
from commerce_desk.config.settings import Settings, get_settings
from commerce_desk.config.thresholds import ThresholdPolicy
from commerce_desk.io.sheets import write_all_listing_packs
from commerce_desk.io.task_store import load_tasks, save_tasks
from commerce_desk.models.schemas import (
    ComplianceMode,
    MarketplaceKey,
    TaskPriority,
    TaskRecommendation,
)
from commerce_desk.session.desk import DeskSession
from commerce_desk.utils.errors import DeskError
from commerce_desk.utils.formatters import generate_desk_report, save_report
from commerce_desk.utils.logger import setup_logging

# Initialize Rich Consoles
console = Console()
err_console = Console(stderr=True)

PLATFORM_CHOICE = click.Choice([key.value for key in MarketplaceKey], case_sensitive=False)
COMPLIANCE_CHOICE = click.Choice([mode.value for mode in ComplianceMode], case_sensitive=False)
EXIT_WORDS = {"exit", "quit", "bye"}

PRIORITY_STYLES = {
    TaskPriority.HIGH: "bold red",
    TaskPriority.MEDIUM: "yellow",
    TaskPriority.LOW: "dim",
}

# =============================================================================
# Helper Functions
# =============================================================================

def setup_logger(verbose: bool, settings: Optional[Settings] = None):
    """Configure logging based on verbosity."""
    level = "DEBUG" if verbose else "WARNING"
    logging.basicConfig(
        level=level,
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(console=err_console, rich_tracebacks=True)],
        force=True,
    )
    settings = settings or get_settings()
    setup_logging(
        level=level,
        json_format=settings.log_json,
        log_file=str(settings.log_file) if settings.log_file else None,
    )


def fail(message: str) -> None:
    """Print an error and exit with status 1."""
    console.print(f"[bold red]Error:[/bold red] {escape(message)}")
    sys.exit(1)


def build_session(
    settings: Settings,
    catalog: Optional[str] = None,
    platforms: tuple[str, ...] = (),
    compliance: Optional[str] = None,
    tasks_file: Optional[str] = None,
    policy: Optional[ThresholdPolicy] = None,
) -> DeskSession:
    """Session seeded from CLI options: task board, catalog and listings."""
    tasks = load_tasks(tasks_file) if tasks_file else []
    desk = DeskSession(settings=settings, policy=policy, tasks=tasks)
    if catalog:
        desk.load_sheet(catalog)
        mode = ComplianceMode(compliance) if compliance else None
        if desk.generate(platforms or None, mode) is None:
            fail(desk.status)
    return desk


def load_policy(settings: Settings, thresholds: Optional[str]) -> ThresholdPolicy:
    if thresholds:
        return ThresholdPolicy.from_file(Path(thresholds))
    return settings.load_threshold_policy()


def task_table(tasks: list[TaskRecommendation], title: str = "Task Board") -> Table:
    table = Table(title=title, show_header=True, header_style="bold magenta")
    table.add_column("Priority")
    table.add_column("ID", overflow="fold")
    table.add_column("Task", overflow="fold")
    table.add_column("Status")
    for task in tasks:
        style = PRIORITY_STYLES.get(task.priority, "")
        status = "[green]done[/green]" if not task.is_open else "pending"
        table.add_row(
            f"[{style}]{task.priority.value}[/{style}]",
            task.id,
            escape(task.title),
            status,
        )
    return table

# =============================================================================
# CLI Group
# =============================================================================

@click.group()
@click.version_option(version=__version__)
def cli():
    """Commerce Desk: listing packs and action plans for marketplace sellers"""
    pass

# =============================================================================
# Commands
# =============================================================================

@cli.command()
@click.argument("catalog_csv", type=click.Path(exists=True, dir_okay=False))
@click.option("-p", "--platform", "platforms", multiple=True, type=PLATFORM_CHOICE,
              help="Marketplace to generate for (repeatable; defaults to DEFAULT_PLATFORMS)")
@click.option("--compliance", type=COMPLIANCE_CHOICE, default=None, help="Compliance mode")
@click.option("--output-dir", type=click.Path(file_okay=False), default=None, help="Listing pack directory")
@click.option("--verbose", is_flag=True, help="Detailed logging")
def generate(catalog_csv: str, platforms: tuple[str, ...], compliance: Optional[str],
             output_dir: Optional[str], verbose: bool):
    """
    Generate marketplace listing packs from a catalog sheet.

    CATALOG_CSV: UTF-8 CSV with one product per row.
    """
    settings = get_settings()
    setup_logger(verbose, settings)

    try:
        desk = build_session(settings, catalog_csv, platforms, compliance)
        paths = write_all_listing_packs(desk.dataset, Path(output_dir or settings.output_dir))
    except DeskError as e:
        fail(e.message)

    console.print(Panel.fit(
        f"[bold blue]Listing Packs Generated[/bold blue]\n{escape(desk.summary())}"
    ))

    table = Table(title="Listing Packs", show_header=True, header_style="bold magenta")
    table.add_column("Marketplace")
    table.add_column("Listings", justify="right")
    table.add_column("Bullets", justify="right")
    table.add_column("File", overflow="fold")
    for platform, path in zip(desk.dataset.platforms, paths):
        profile = get_profile(platform)
        table.add_row(
            profile.label,
            str(len(desk.dataset.for_platform(platform))),
            str(profile.bullet_limit),
            str(path),
        )
    console.print(table)
    console.print(f"[green]✓[/green] {escape(desk.status)}")


@cli.command()
@click.argument("metrics_text")
@click.option("--tasks-file", type=click.Path(dir_okay=False), default=None,
              help="Task board JSON to merge into (created when missing)")
@click.option("--thresholds", type=click.Path(exists=True, dir_okay=False), default=None,
              help="Threshold policy JSON")
@click.option("--json", "as_json", is_flag=True, help="Print snapshot and tasks as JSON")
@click.option("--verbose", is_flag=True, help="Detailed logging")
def analyze(metrics_text: str, tasks_file: Optional[str], thresholds: Optional[str],
            as_json: bool, verbose: bool):
    """
    Turn a free-text performance snapshot into prioritized tasks.

    METRICS_TEXT: e.g. "CTR: 0.9, Conversion: 1.4, Cancellation Rate: 3"
    """
    settings = get_settings()
    setup_logger(verbose, settings)

    try:
        policy = load_policy(settings, thresholds)
        desk = build_session(settings, tasks_file=tasks_file, policy=policy)
        snapshot = desk.analyze(metrics_text)
        if snapshot is None:
            fail("Nothing to analyze. Pass metrics like 'CTR: 0.9, Conversion: 1.4'.")
        if tasks_file:
            save_tasks(desk.tasks, tasks_file)
    except ValidationError as e:
        fail(f"Invalid threshold policy: {e.error_count()} error(s)")
    except DeskError as e:
        fail(e.message)

    if as_json:
        payload = {
            "metrics": snapshot.metrics,
            "narrative": snapshot.narrative,
            "tasks": [task.model_dump(mode="json") for task in desk.tasks],
        }
        click.echo(json.dumps(payload, indent=2, ensure_ascii=False))
        return

    console.print(Panel.fit(f"[bold blue]Performance Snapshot[/bold blue]\n{escape(snapshot.narrative)}"))
    if desk.tasks:
        console.print(task_table(desk.tasks))
        console.print(f"[bold]{len(desk.open_tasks)}[/bold] open of {len(desk.tasks)} tasks.")
    else:
        console.print("[green]✓[/green] No action needed.")


@cli.group()
def tasks():
    """Manage the task board."""
    pass


@tasks.command("toggle")
@click.argument("task_id")
@click.option("--tasks-file", type=click.Path(dir_okay=False), required=True, help="Task board JSON")
def toggle(task_id: str, tasks_file: str):
    """
    Mark a task done, or reopen it.

    TASK_ID: e.g. task-ctr-below-floor
    """
    settings = get_settings()
    setup_logger(False, settings)

    try:
        desk = build_session(settings, tasks_file=tasks_file)
        if not desk.toggle_task(task_id):
            fail(f"Unknown task id: {task_id}")
        save_tasks(desk.tasks, tasks_file)
    except DeskError as e:
        fail(e.message)

    task = next(t for t in desk.tasks if t.id == task_id)
    console.print(f"[green]✓[/green] {task.id} is now [bold]{task.status.value}[/bold]")


@tasks.command("list")
@click.option("--tasks-file", type=click.Path(dir_okay=False), required=True, help="Task board JSON")
@click.option("--open", "only_open", is_flag=True, help="Only pending tasks")
def list_tasks(tasks_file: str, only_open: bool):
    """Show the task board."""
    settings = get_settings()
    setup_logger(False, settings)

    try:
        board = load_tasks(tasks_file)
    except DeskError as e:
        fail(e.message)

    shown = [t for t in board if t.is_open] if only_open else board
    if not shown:
        console.print("No tasks on the board.")
        return
    console.print(task_table(shown))


@cli.command()
@click.option("--catalog", type=click.Path(exists=True, dir_okay=False), default=None,
              help="Catalog CSV to load before chatting")
@click.option("-p", "--platform", "platforms", multiple=True, type=PLATFORM_CHOICE,
              help="Marketplace to generate for (repeatable)")
@click.option("--tasks-file", type=click.Path(dir_okay=False), default=None, help="Task board JSON")
@click.option("--verbose", is_flag=True, help="Detailed logging")
def chat(catalog: Optional[str], platforms: tuple[str, ...], tasks_file: Optional[str], verbose: bool):
    """Talk to the desk agent. Type 'exit' to leave."""
    settings = get_settings()
    setup_logger(verbose, settings)

    try:
        desk = build_session(settings, catalog, platforms, tasks_file=tasks_file)
    except DeskError as e:
        fail(e.message)

    name = escape(settings.agent_name)
    console.print(f"[bold cyan]{name}:[/bold cyan] {escape(desk.messages[0].text)}")

    while True:
        try:
            text = click.prompt("You", default="", show_default=False)
        except click.exceptions.Abort:
            break
        if text.strip().lower() in EXIT_WORDS:
            break
        reply = desk.send(text)
        console.print(f"[bold cyan]{name}:[/bold cyan] {escape(reply)}")

    console.print(f"[dim]Session closed after {len(desk.messages)} messages.[/dim]")


@cli.command()
@click.option("--catalog", type=click.Path(exists=True, dir_okay=False), default=None, help="Catalog CSV")
@click.option("-p", "--platform", "platforms", multiple=True, type=PLATFORM_CHOICE,
              help="Marketplace to include (repeatable)")
@click.option("--compliance", type=COMPLIANCE_CHOICE, default=None, help="Compliance mode")
@click.option("--tasks-file", type=click.Path(dir_okay=False), default=None, help="Task board JSON")
@click.option("--metrics", default=None, help="Performance snapshot text to include")
@click.option("--format", "fmt", type=click.Choice(["markdown", "html"]), default=None, help="Output format")
@click.option("--output", type=click.Path(dir_okay=False), default=None, help="Report path")
@click.option("--verbose", is_flag=True, help="Detailed logging")
def report(catalog: Optional[str], platforms: tuple[str, ...], compliance: Optional[str],
           tasks_file: Optional[str], metrics: Optional[str], fmt: Optional[str],
           output: Optional[str], verbose: bool):
    """Write a Markdown or HTML desk report."""
    settings = get_settings()
    setup_logger(verbose, settings)

    try:
        desk = build_session(settings, catalog, platforms, compliance, tasks_file)
    except DeskError as e:
        fail(e.message)
    if metrics:
        desk.analyze(metrics)

    content = generate_desk_report(
        dataset=desk.dataset,
        tasks=desk.tasks,
        snapshot=desk.snapshot,
        policy=desk.policy,
        agent_name=settings.agent_name,
    )
    if output:
        target = Path(output)
    else:
        stamp = datetime.now(timezone.utc).strftime("%Y%m%d_%H%M%S")
        target = Path(settings.report_dir) / f"desk_report_{stamp}"
    path = save_report(content, target, fmt or settings.report_format)
    console.print(f"[green]✓[/green] Report saved to {escape(str(path))}")


@cli.command()
@click.option("--thresholds", type=click.Path(exists=True, dir_okay=False), default=None,
              help="Threshold policy JSON")
def thresholds(thresholds: Optional[str]):
    """Show the active threshold table."""
    settings = get_settings()
    setup_logger(False, settings)

    try:
        policy = load_policy(settings, thresholds)
    except ValidationError as e:
        fail(f"Invalid threshold policy: {e.error_count()} error(s)")

    table = Table(title="Thresholds", show_header=True, header_style="bold magenta")
    table.add_column("Metric")
    table.add_column("Direction")
    table.add_column("Limit", justify="right")
    table.add_column("Tier")
    table.add_column("Synonyms", overflow="fold")
    for rule in policy.rules:
        metric = policy.get_metric(rule.metric)
        table.add_row(
            rule.metric,
            rule.direction.value,
            policy.format_value(rule.metric, rule.limit),
            rule.tier,
            ", ".join(metric.synonyms) if metric else "",
        )
    console.print(table)


if __name__ == "__main__":
    cli()
