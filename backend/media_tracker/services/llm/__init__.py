"""Chat completion client and the tool-calling conversation loop."""
from media_tracker.services.llm.client import LLMClient, LLMError
from media_tracker.services.llm.conversation import ConversationEngine

__all__ = ["LLMClient", "LLMError", "ConversationEngine"]
