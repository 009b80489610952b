"""
Conversational agent: reply selection and the conversation log.
"""

from commerce_desk.agent.composer import ResponseComposer, generate_agent_response
from commerce_desk.agent.conversation import AGENT_GREETING, ConversationLog, last_agent_text

__all__ = [
    "ResponseComposer",
    "generate_agent_response",
    "AGENT_GREETING",
    "ConversationLog",
    "last_agent_text",
]
