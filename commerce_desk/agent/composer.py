"""
Response composer for the desk agent.

Selects a reply for one operator utterance from an ordered intent table.
Every handler either returns a reply or None; the first reply wins, and a
generic acknowledgment closes the table. Replies pull live counts from the
catalog and task state in the AgentContext but never modify it.
"""

import re
from typing import Callable, Optional

from commerce_desk.agent.conversation import last_agent_text
from commerce_desk.catalog.summarizer import summarize_catalog
from commerce_desk.config.marketplaces import MARKETPLACE_PROFILES, MarketplaceProfile
from commerce_desk.config.thresholds import DEFAULT_THRESHOLD_POLICY, ThresholdPolicy
from commerce_desk.models.schemas import (
    AgentContext,
    FulfillmentMode,
    TaskPriority,
)
from commerce_desk.tasks.extractor import extract_metrics
from commerce_desk.tasks.merger import open_tasks
from commerce_desk.tasks.synthesizer import craft_tasks_from_snapshot
from commerce_desk.utils.logger import get_logger

logger = get_logger(__name__)


# =============================================================================
# Keyword Patterns
# =============================================================================

REPEAT = re.compile(r"\b(repeat|say that again|say again|come again)\b", re.IGNORECASE)
LISTING_WORDS = re.compile(
    r"\b(listings?|catalog(ue)?s?|skus?|packs?|products?|copy)\b", re.IGNORECASE
)
TASK_WORDS = re.compile(
    r"\b(tasks?|plans?|actions?|to-?dos?|priorit\w*|fix(es)?)\b", re.IGNORECASE
)
STATUS_WORDS = re.compile(
    r"\b(status|progress|update|summary|digest|how are we|where are we)\b", re.IGNORECASE
)
GREETING = re.compile(
    r"^\W*(hi|hello|hey|namaste|yo|good (morning|afternoon|evening))\b", re.IGNORECASE
)
HELP_WORDS = re.compile(
    r"\b(help|what can you do|commands?|capabilit\w*)\b", re.IGNORECASE
)
THANKS = re.compile(r"\b(thanks|thank you|thx|cheers|shukriya|dhanyavaad)\b", re.IGNORECASE)

FULFILLMENT_LABELS = {
    FulfillmentMode.FULFILLED: "marketplace-fulfilled",
    FulfillmentMode.SELF: "self-ship",
}

MAX_QUOTE = 80
TOP_TASKS = 3


def _plural(count: int, word: str) -> str:
    return f"{count} {word}{'' if count == 1 else 's'}"


# =============================================================================
# Response Composer
# =============================================================================

class ResponseComposer:
    """
    Keyword-driven reply selection over live desk state.

    The intent order is part of the behavior: a message that mentions both
    a marketplace and tasks is answered as a marketplace question.
    """

    INTENTS = (
        "blank",
        "repeat",
        "metrics",
        "marketplace",
        "listings",
        "tasks",
        "status",
        "greeting",
        "help",
        "thanks",
    )

    def __init__(self, policy: Optional[ThresholdPolicy] = None):
        self.policy = policy or DEFAULT_THRESHOLD_POLICY
        marketplace_names = "|".join(re.escape(p.label) for p in MARKETPLACE_PROFILES.values())
        self._marketplace_pattern = re.compile(rf"\b({marketplace_names})\b", re.IGNORECASE)

    def respond(self, context: AgentContext) -> str:
        """Return the reply for context.message."""
        message = (context.message or "").strip()
        for name in self.INTENTS:
            handler: Callable[[str, AgentContext], Optional[str]] = getattr(self, f"_on_{name}")
            reply = handler(message, context)
            if reply is not None:
                logger.debug("Intent matched", intent=name)
                return reply
        logger.debug("Intent matched", intent="fallback")
        return self._fallback(message)

    # -------------------------------------------------------------------------
    # Intent handlers
    # -------------------------------------------------------------------------

    def _on_blank(self, message: str, context: AgentContext) -> Optional[str]:
        if message:
            return None
        return "I'm listening. Tell me what to work on: listings, metrics, or today's tasks."

    def _on_repeat(self, message: str, context: AgentContext) -> Optional[str]:
        if not REPEAT.search(message):
            return None
        previous = last_agent_text(context.conversation)
        if previous is None:
            return "I haven't said anything yet. Ask me about listings, metrics, or tasks."
        return previous

    def _on_metrics(self, message: str, context: AgentContext) -> Optional[str]:
        snapshot = extract_metrics(message, self.policy)
        if not snapshot.metrics:
            return None
        raised = craft_tasks_from_snapshot(snapshot, self.policy)
        if not raised:
            return f"{snapshot.narrative} No action items needed."
        return (
            f"{snapshot.narrative} That analysis would raise {_plural(len(raised), 'action item')}. "
            "Run it through the task planner to add them to the board."
        )

    def _on_marketplace(self, message: str, context: AgentContext) -> Optional[str]:
        match = self._marketplace_pattern.search(message)
        if not match:
            return None
        profile = next(
            p for p in MARKETPLACE_PROFILES.values() if p.label.lower() == match.group(1).lower()
        )
        return self._marketplace_reply(profile, context)

    def _marketplace_reply(self, profile: MarketplaceProfile, context: AgentContext) -> str:
        label = profile.label
        if context.catalog is None or context.catalog.is_empty:
            return (
                f"Upload a catalog sheet and I'll prep {label} listings: up to "
                f"{_plural(profile.bullet_limit, 'bullet')}, {profile.discount * 100:g}% default "
                f"discount, {FULFILLMENT_LABELS[profile.fulfillment]} by default."
            )

        listings = context.catalog.for_platform(profile.key)
        if not listings:
            return f"{label} isn't in the current run. Select it and regenerate the listing packs."

        fulfilled = sum(1 for item in listings if item.fulfillment == FulfillmentMode.FULFILLED)
        self_ship = len(listings) - fulfilled
        return (
            f"{label} pack is ready with {_plural(len(listings), 'listing')} "
            f"({fulfilled} marketplace-fulfilled, {self_ship} self-ship). "
            f"Sample category path: {listings[0].category_path}."
        )

    def _on_listings(self, message: str, context: AgentContext) -> Optional[str]:
        if not LISTING_WORDS.search(message):
            return None
        if context.catalog is None or context.catalog.is_empty:
            return (
                "No listings generated yet. Upload a catalog CSV, pick marketplaces, "
                "and I'll build the packs."
            )
        return summarize_catalog(context.catalog)

    def _on_tasks(self, message: str, context: AgentContext) -> Optional[str]:
        if not TASK_WORDS.search(message):
            return None
        if not context.tasks:
            return (
                "No tasks on the board yet. Share today's metrics, like "
                "'CTR: 0.9, Conversion: 1.4', and I'll draft an action plan."
            )
        pending = open_tasks(context.tasks)
        if not pending:
            return (
                f"All {_plural(len(context.tasks), 'task')} are marked done. "
                "Share fresh metrics to check for new issues."
            )

        urgent = [t.title for t in pending if t.priority == TaskPriority.HIGH][:TOP_TASKS]
        reply = f"{_plural(len(pending), 'open task')} of {len(context.tasks)}."
        if urgent:
            return f"{reply} High priority: {'; '.join(urgent)}."
        ranked = sorted(pending, key=lambda t: t.priority.rank)
        return f"{reply} Nothing is high priority. Next up: {ranked[0].title}."

    def _on_status(self, message: str, context: AgentContext) -> Optional[str]:
        if not STATUS_WORDS.search(message):
            return None
        return " ".join([
            self._catalog_digest(context),
            self._task_digest(context),
            f"We've exchanged {_plural(len(context.conversation), 'message')} so far.",
        ])

    def _on_greeting(self, message: str, context: AgentContext) -> Optional[str]:
        if not GREETING.search(message):
            return None
        return (
            f"Hello! {self._catalog_digest(context)} {self._task_digest(context)} "
            "What should we tackle first?"
        )

    def _on_help(self, message: str, context: AgentContext) -> Optional[str]:
        if not HELP_WORDS.search(message):
            return None
        marketplaces = ", ".join(p.label for p in MARKETPLACE_PROFILES.values())
        return (
            f"I can build listing packs for {marketplaces} from your catalog sheet, "
            "turn metrics like 'CTR: 0.9, Cancellation Rate: 4' into prioritized tasks, "
            "summarize the catalog or task board, and repeat my last answer."
        )

    def _on_thanks(self, message: str, context: AgentContext) -> Optional[str]:
        if not THANKS.search(message):
            return None
        return "Anytime. Ping me when you need the next listing pack or action plan."

    def _fallback(self, message: str) -> str:
        quoted = message if len(message) <= MAX_QUOTE else message[: MAX_QUOTE - 3].rstrip() + "..."
        return (
            f'Noted: "{quoted}". I can generate listing packs, analyze metrics into tasks, '
            "or give you a status digest."
        )

    # -------------------------------------------------------------------------
    # Digests
    # -------------------------------------------------------------------------

    @staticmethod
    def _catalog_digest(context: AgentContext) -> str:
        catalog = context.catalog
        if catalog is None or catalog.is_empty:
            return "No catalog loaded yet."
        return (
            f"Catalog has {_plural(catalog.listing_count, 'listing')} across "
            f"{_plural(len(catalog.platforms), 'marketplace')}."
        )

    @staticmethod
    def _task_digest(context: AgentContext) -> str:
        if not context.tasks:
            return "No tasks on the board."
        pending = len(open_tasks(context.tasks))
        done = len(context.tasks) - pending
        return f"Tasks: {pending} open, {done} done."


def generate_agent_response(
    context: AgentContext,
    policy: Optional[ThresholdPolicy] = None,
) -> str:
    """
    Convenience function for composing one reply.

    Args:
        context: Utterance plus read-only catalog, task and conversation state
        policy: Threshold policy used for inline metric analysis

    Returns:
        Reply text
    """
    return ResponseComposer(policy).respond(context)


__all__ = [
    "ResponseComposer",
    "generate_agent_response",
]
