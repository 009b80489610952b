"""
Operator desk session.

DeskSession owns all mutable state for one operator: the ingested catalog
rows, the latest generated dataset, the task board, the last performance
snapshot and the conversation log. The rule engine stays pure; the session
feeds it the current state and stores what comes back.

Example:
    >>> desk = DeskSession()
    >>> desk.ingest([{"SKU": "A1", "Title": "Kurta Set", "Price": "999"}])
    >>> desk.generate([MarketplaceKey.AMAZON])
    >>> desk.send("status?")
"""

from datetime import datetime
from pathlib import Path
from typing import Any, Callable, Iterable, Mapping, Optional, Union
from uuid import uuid4

from commerce_desk.agent.composer import ResponseComposer
from commerce_desk.agent.conversation import AGENT_GREETING, ConversationLog
from commerce_desk.catalog.exporter import export_listing_pack
from commerce_desk.catalog.generator import ListingGenerator
from commerce_desk.catalog.normalizer import ingest_rows
from commerce_desk.catalog.summarizer import summarize_catalog
from commerce_desk.config.settings import Settings, get_settings
from commerce_desk.config.thresholds import ThresholdPolicy
from commerce_desk.io.sheets import read_catalog_sheet
from commerce_desk.models.schemas import (
    AgentContext,
    AgentMessage,
    CatalogDataset,
    CatalogRow,
    ComplianceMode,
    GenerationOptions,
    MarketplaceKey,
    MessageRole,
    PerformanceSnapshot,
    TaskRecommendation,
)
from commerce_desk.tasks.extractor import extract_metrics
from commerce_desk.tasks.merger import open_tasks, toggle_task_status, upsert_tasks
from commerce_desk.tasks.synthesizer import TaskSynthesizer
from commerce_desk.utils.errors import SheetReadError
from commerce_desk.utils.logger import LogContext, get_logger

logger = get_logger(__name__)


# =============================================================================
# Status Messages
# =============================================================================

STATUS_WAITING = "Waiting for catalog upload."
STATUS_INGESTED = "Ingested {count} rows. Choose marketplaces and generate listings."
STATUS_UNREADABLE = "Unable to read sheet. Upload a UTF-8 CSV."
STATUS_NO_ROWS = "Upload a catalog sheet first."
STATUS_NO_PLATFORMS = "Pick at least one marketplace to generate listings."
STATUS_GENERATED = "Listings generated. Review per marketplace view below."


class DeskSession:
    """
    Stateful collaborator around the rule engine.

    Not thread-safe: one instance serves one operator.
    """

    def __init__(
        self,
        settings: Optional[Settings] = None,
        policy: Optional[ThresholdPolicy] = None,
        tasks: Optional[Iterable[TaskRecommendation]] = None,
        clock: Optional[Callable[[], datetime]] = None,
        session_id: Optional[str] = None,
    ):
        """
        Initialize the session.

        Args:
            settings: Application settings (uses defaults if not provided)
            policy: Threshold policy (loaded from settings if not provided)
            tasks: Existing task board to continue from
            clock: Timestamp source for conversation messages
            session_id: Identifier bound into log context
        """
        self.settings = settings or get_settings()
        self.policy = policy or self.settings.load_threshold_policy()
        self.session_id = session_id or uuid4().hex[:8]

        self.generator = ListingGenerator()
        self.synthesizer = TaskSynthesizer(self.policy)
        self.composer = ResponseComposer(self.policy)

        self.rows: list[CatalogRow] = []
        self.dataset: Optional[CatalogDataset] = None
        self.tasks: list[TaskRecommendation] = list(tasks or [])
        self.snapshot: Optional[PerformanceSnapshot] = None
        self.status = STATUS_WAITING

        self.conversation = ConversationLog(clock)
        self.conversation.append(
            MessageRole.AGENT,
            AGENT_GREETING.format(name=self.settings.agent_name),
        )

    # -------------------------------------------------------------------------
    # Catalog
    # -------------------------------------------------------------------------

    def ingest(self, records: Iterable[Mapping[str, Any]]) -> list[CatalogRow]:
        """Replace the catalog rows with a freshly ingested batch."""
        with LogContext(session_id=self.session_id):
            self.rows = ingest_rows(records)
            self.status = STATUS_INGESTED.format(count=len(self.rows))
            return self.rows

    def load_sheet(self, path: Union[str, Path]) -> list[CatalogRow]:
        """
        Read and ingest a catalog CSV.

        Raises:
            SheetReadError: Propagated after the status is updated.
        """
        try:
            records = read_catalog_sheet(path)
        except SheetReadError:
            self.status = STATUS_UNREADABLE
            raise
        return self.ingest(records)

    def generate(
        self,
        platforms: Optional[Iterable[MarketplaceKey | str]] = None,
        compliance_mode: Optional[ComplianceMode] = None,
    ) -> Optional[CatalogDataset]:
        """
        Generate listing packs, replacing any previous dataset.

        Returns None, with the status explaining why, when there are no rows
        or no marketplaces selected.
        """
        with LogContext(session_id=self.session_id):
            if not self.rows:
                self.status = STATUS_NO_ROWS
                logger.info("Generation skipped", reason="no_rows")
                return None

            selected = self.settings.default_platforms if platforms is None else platforms
            options = GenerationOptions(
                selected_platforms={MarketplaceKey(p) for p in selected},
                compliance_mode=compliance_mode or self.settings.compliance_mode,
            )
            if not options.selected_platforms:
                self.status = STATUS_NO_PLATFORMS
                logger.info("Generation skipped", reason="no_platforms")
                return None

            self.dataset = self.generator.generate(self.rows, options)
            self.status = STATUS_GENERATED
            return self.dataset

    def summary(self) -> str:
        return summarize_catalog(self.dataset) if self.dataset else ""

    def export(self, platform: MarketplaceKey | str) -> list[dict[str, object]]:
        """Flat export records for one marketplace (empty before generation)."""
        if self.dataset is None:
            return []
        return export_listing_pack(self.dataset, platform)

    # -------------------------------------------------------------------------
    # Tasks
    # -------------------------------------------------------------------------

    def analyze(self, text: str) -> Optional[PerformanceSnapshot]:
        """
        Parse a metrics snapshot and merge the resulting tasks into the board.

        Blank input is ignored and returns None.
        """
        if not text or not text.strip():
            return None
        with LogContext(session_id=self.session_id):
            snapshot = extract_metrics(text, self.policy)
            raised = self.synthesizer.synthesize(snapshot)
            self.tasks = upsert_tasks(self.tasks, raised)
            self.snapshot = snapshot
            logger.info(
                "Snapshot analyzed",
                metrics=len(snapshot.metrics),
                raised=len(raised),
                open=len(self.open_tasks),
            )
            return snapshot

    def toggle_task(self, task_id: str) -> bool:
        """Flip a task between pending and done. Returns False for unknown ids."""
        if not any(task.id == task_id for task in self.tasks):
            logger.warning("Unknown task id", task_id=task_id, session_id=self.session_id)
            return False
        self.tasks = toggle_task_status(self.tasks, task_id)
        return True

    @property
    def open_tasks(self) -> list[TaskRecommendation]:
        return open_tasks(self.tasks)

    # -------------------------------------------------------------------------
    # Conversation
    # -------------------------------------------------------------------------

    @property
    def messages(self) -> list[AgentMessage]:
        return self.conversation.messages

    def context_for(self, message: str) -> AgentContext:
        """Composer input built from the current session state."""
        return AgentContext(
            message=message,
            conversation=self.conversation.messages,
            catalog=self.dataset,
            tasks=self.tasks,
        )

    def send(self, text: str) -> str:
        """
        Handle one operator utterance and return the agent's reply.

        Non-blank utterances and their replies are appended to the log.
        Blank input gets the listening prompt without touching the log.
        """
        if not text or not text.strip():
            return self.composer.respond(self.context_for(""))

        with LogContext(session_id=self.session_id):
            self.conversation.append(MessageRole.USER, text.strip())
            reply = self.composer.respond(self.context_for(text.strip()))
            self.conversation.append(MessageRole.AGENT, reply)
            logger.debug("Reply sent", messages=len(self.conversation))
            return reply


__all__ = [
    "DeskSession",
    "STATUS_WAITING",
    "STATUS_INGESTED",
    "STATUS_UNREADABLE",
    "STATUS_NO_ROWS",
    "STATUS_NO_PLATFORMS",
    "STATUS_GENERATED",
]
