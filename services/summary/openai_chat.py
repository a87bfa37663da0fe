import logging

import httpx

from .base import SummaryBackend
from .types import SUMMARY_SYSTEM_PROMPT, SummaryRequest, SummaryResponse

logger = logging.getLogger(__name__)

OPENAI_CHAT_COMPLETIONS_URL = "https://api.openai.com/v1/chat/completions"


class OpenAIChatSummaryBackend(SummaryBackend):
    """
    Summaries via OpenAI chat completions.

    Reads choices[0].message.content from the response.
    """

    name = "openai_chat"

    def __init__(
        self,
        api_key: str,
        model_name: str = "gpt-3.5-turbo",
        temperature: float = 0.5,
        timeout_s: float = 30.0,
    ):
        self.api_key = api_key
        self.model_name = model_name
        self.temperature = temperature
        self.timeout_s = timeout_s

    async def summarize(self, request: SummaryRequest) -> SummaryResponse:
        payload = {
            "model": self.model_name,
            "messages": [
                {"role": "system", "content": SUMMARY_SYSTEM_PROMPT},
                {"role": "user", "content": request.text},
            ],
            "max_tokens": request.max_tokens,
            "temperature": self.temperature,
        }
        headers = {
            "Authorization": f"Bearer {self.api_key}",
            "Content-Type": "application/json",
        }

        try:
            async with httpx.AsyncClient(timeout=self.timeout_s) as client:
                response = await client.post(
                    OPENAI_CHAT_COMPLETIONS_URL,
                    json=payload,
                    headers=headers,
                )
        except httpx.RequestError as e:
            logger.error(f"Error generating OpenAI summary: {e}", exc_info=True)
            return self._failure(request, "backend_unavailable", status="fatal_error", error=str(e))

        if not response.is_success:
            logger.error(
                f"OpenAI API error: {response.status_code}",
                extra={"status_code": response.status_code, "backend": self.name},
            )
            return self._failure(request, "http_error", status_code=response.status_code)

        try:
            content = response.json()["choices"][0]["message"]["content"]
        except (ValueError, KeyError, IndexError, TypeError) as e:
            logger.error(f"Unexpected OpenAI chat response: {e}")
            return self._failure(request, "invalid_response")

        return SummaryResponse(
            status="success",
            output=(content or "").strip(),
            metadata={"backend": self.name, "model": self.model_name, "trace_id": request.trace_id},
        )
