from abc import ABC, abstractmethod
from typing import Any

from .types import SummaryRequest, SummaryResponse, SummaryStatus


class SummaryBackend(ABC):
    """
    Abstract summarization boundary.
    The relay depends ONLY on this interface.
    """

    name: str = "summary"

    @abstractmethod
    async def summarize(self, request: SummaryRequest) -> SummaryResponse:
        """Summarize the transcript. Never raises; failures carry output=""."""
        raise NotImplementedError

    def _failure(
        self,
        request: SummaryRequest,
        error_type: str,
        status: SummaryStatus = "recoverable_error",
        **extra: Any,
    ) -> SummaryResponse:
        return SummaryResponse(
            status=status,
            output="",
            error_type=error_type,
            metadata={"backend": self.name, "trace_id": request.trace_id, **extra},
        )
