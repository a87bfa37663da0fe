"""
Summarization boundary layer.

Keeps the relay agnostic of which hosted model writes the summary.

Supported backends:
- OpenAIChatSummaryBackend: OpenAI chat completions
- AnthropicSummaryBackend: Anthropic Messages API

Example usage:
    from services.summary import OpenAIChatSummaryBackend, SummaryRequest

    backend = OpenAIChatSummaryBackend(api_key="sk-...")
    response = await backend.summarize(SummaryRequest(text="Call me back at five"))
"""

from .types import SUMMARY_SYSTEM_PROMPT, SummaryRequest, SummaryResponse, SummaryStatus
from .base import SummaryBackend
from .openai_chat import OpenAIChatSummaryBackend
from .anthropic_messages import AnthropicSummaryBackend

__all__ = [
    "SUMMARY_SYSTEM_PROMPT",
    "SummaryRequest",
    "SummaryResponse",
    "SummaryStatus",
    "SummaryBackend",
    "OpenAIChatSummaryBackend",
    "AnthropicSummaryBackend",
]
