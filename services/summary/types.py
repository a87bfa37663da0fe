from dataclasses import dataclass
from typing import Optional, Dict, Any, Literal

SummaryStatus = Literal["success", "recoverable_error", "fatal_error"]

# Shared by every summary backend so providers stay interchangeable
SUMMARY_SYSTEM_PROMPT = "Summarize the message in 1-2 sentences max."


@dataclass
class SummaryRequest:
    text: str                  # transcript to summarize
    max_tokens: int = 2000
    trace_id: Optional[str] = None


@dataclass
class SummaryResponse:
    status: SummaryStatus
    output: str = ""           # empty on any failure
    error_type: Optional[str] = None   # http_error | backend_unavailable | invalid_response
    metadata: Optional[Dict[str, Any]] = None
