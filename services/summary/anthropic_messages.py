import logging

import httpx

from .base import SummaryBackend
from .types import SUMMARY_SYSTEM_PROMPT, SummaryRequest, SummaryResponse

logger = logging.getLogger(__name__)

ANTHROPIC_MESSAGES_URL = "https://api.anthropic.com/v1/messages"
ANTHROPIC_VERSION = "2023-06-01"


class AnthropicSummaryBackend(SummaryBackend):
    """Summaries via the Anthropic Messages API (content[0].text)."""

    name = "anthropic"

    def __init__(
        self,
        api_key: str,
        model_name: str = "claude-3-haiku-20240307",
        timeout_s: float = 30.0,
    ):
        self.api_key = api_key
        self.model_name = model_name
        self.timeout_s = timeout_s

    async def summarize(self, request: SummaryRequest) -> SummaryResponse:
        payload = {
            "model": self.model_name,
            "max_tokens": request.max_tokens,
            "system": SUMMARY_SYSTEM_PROMPT,
            "messages": [
                {"role": "user", "content": request.text},
            ],
        }
        headers = {
            "x-api-key": self.api_key,
            "anthropic-version": ANTHROPIC_VERSION,
            "Content-Type": "application/json",
        }

        try:
            async with httpx.AsyncClient(timeout=self.timeout_s) as client:
                response = await client.post(
                    ANTHROPIC_MESSAGES_URL,
                    json=payload,
                    headers=headers,
                )
        except httpx.RequestError as e:
            logger.error(f"Error generating Anthropic summary: {e}", exc_info=True)
            return self._failure(request, "backend_unavailable", status="fatal_error", error=str(e))

        if not response.is_success:
            logger.error(
                f"Anthropic API error: {response.status_code}",
                extra={"status_code": response.status_code, "backend": self.name},
            )
            return self._failure(request, "http_error", status_code=response.status_code)

        try:
            text = response.json()["content"][0]["text"]
        except (ValueError, KeyError, IndexError, TypeError) as e:
            logger.error(f"Unexpected Anthropic response: {e}")
            return self._failure(request, "invalid_response")

        return SummaryResponse(
            status="success",
            output=(text or "").strip(),
            metadata={"backend": self.name, "model": self.model_name, "trace_id": request.trace_id},
        )
