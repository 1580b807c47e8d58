"""
Gemini Extraction Client
========================

Sends a document (inline base64) plus an extraction prompt to the Gemini
``generateContent`` REST endpoint and returns the text completion.

Transient failures (transport errors, HTTP 429, HTTP 5xx) are retried with
exponential backoff, bounded by ``settings.extraction_max_attempts``. All
other failures surface once as ``UpstreamApiError``.
"""

import base64
from typing import Any

import httpx
from tenacity import (
    AsyncRetrying,
    retry_if_exception_type,
    stop_after_attempt,
    wait_exponential,
)

from lekhapal.config.settings import Settings
from lekhapal.utils.errors import UpstreamApiError
from lekhapal.utils.logger import get_logger, human_bytes, preview

logger = get_logger(__name__)


class TransientExtractionError(Exception):
    """Retryable failure talking to the extraction API."""

    pass


class GeminiExtractionClient:
    """
    Async client for the Gemini document-understanding API.

    Example:
        client = GeminiExtractionClient(settings)
        text = await client.extract(pdf_bytes, "application/pdf", prompt)
        await client.close()
    """

    def __init__(
        self,
        settings: Settings,
        transport: httpx.AsyncBaseTransport | None = None,
        retry_wait_seconds: float = 1.0,
    ) -> None:
        """
        Initialize the client.

        Args:
            settings: Application settings (API key, model, timeouts)
            transport: Optional httpx transport (tests use httpx.MockTransport)
            retry_wait_seconds: Backoff multiplier between attempts
        """
        self._api_key = settings.gemini_api_key
        self._model = settings.gemini_model
        self._max_attempts = settings.extraction_max_attempts
        self._retry_wait_seconds = retry_wait_seconds
        self._client = httpx.AsyncClient(
            base_url=settings.gemini_base_url,
            timeout=settings.extraction_timeout,
            transport=transport,
        )

    @property
    def is_configured(self) -> bool:
        """True when an API key is available."""
        return bool(self._api_key)

    @property
    def model(self) -> str:
        """Gemini model name."""
        return self._model

    async def close(self) -> None:
        """Release the underlying HTTP client."""
        await self._client.aclose()

    async def extract(self, content: bytes, mime_type: str, prompt: str) -> str:
        """
        Run one extraction call.

        Args:
            content: File bytes
            mime_type: MIME type sent alongside the inline payload
            prompt: Extraction prompt

        Returns:
            Text of the first candidate

        Raises:
            UpstreamApiError: Missing API key, non-retryable HTTP error,
                exhausted retries or a response without text
        """
        if not self._api_key:
            raise UpstreamApiError(
                message="Extraction API key is not configured",
                details={"setting": "GEMINI_API_KEY"},
            )

        body = {
            "contents": [
                {
                    "role": "user",
                    "parts": [
                        {"text": prompt},
                        {
                            "inlineData": {
                                "mimeType": mime_type,
                                "data": base64.b64encode(content).decode("ascii"),
                            }
                        },
                    ],
                }
            ]
        }

        logger.info(
            "Calling extraction API",
            model=self._model,
            mime_type=mime_type,
            size=human_bytes(len(content)),
        )

        retrying = AsyncRetrying(
            stop=stop_after_attempt(self._max_attempts),
            wait=wait_exponential(multiplier=self._retry_wait_seconds, max=8),
            retry=retry_if_exception_type(TransientExtractionError),
            reraise=True,
        )

        try:
            async for attempt in retrying:
                with attempt:
                    payload = await self._post(body, attempt.retry_state.attempt_number)
        except TransientExtractionError as e:
            logger.error(
                "Extraction API failed after retries",
                attempts=self._max_attempts,
                error=str(e),
            )
            raise UpstreamApiError(
                message="Extraction API error",
                details={"error": str(e), "attempts": self._max_attempts},
            ) from e

        text = self._response_text(payload)
        logger.info("Extraction API responded", length=len(text), preview=preview(text))
        return text

    async def _post(self, body: dict[str, Any], attempt_number: int) -> dict[str, Any]:
        """POST once; classify failures as transient or final."""
        try:
            response = await self._client.post(
                f"/models/{self._model}:generateContent",
                json=body,
                headers={"x-goog-api-key": self._api_key or ""},
            )
        except httpx.TransportError as e:
            logger.warning(
                "Extraction API transport error",
                attempt=attempt_number,
                error=str(e),
            )
            raise TransientExtractionError(f"{type(e).__name__}: {e}") from e

        if response.status_code == 429 or response.status_code >= 500:
            logger.warning(
                "Extraction API transient status",
                attempt=attempt_number,
                status_code=response.status_code,
            )
            raise TransientExtractionError(
                f"HTTP {response.status_code}: {preview(response.text, 200)}"
            )

        if response.status_code >= 400:
            raise UpstreamApiError(
                message=f"Extraction API rejected the request (HTTP {response.status_code})",
                details={
                    "status_code": response.status_code,
                    "body": preview(response.text, 1000),
                },
            )

        try:
            return response.json()
        except ValueError as e:
            raise UpstreamApiError(
                message="Extraction API returned a non-JSON body",
                details={"body": preview(response.text, 1000)},
            ) from e

    @staticmethod
    def _response_text(payload: dict[str, Any]) -> str:
        """Join the text parts of the first candidate."""
        if not isinstance(payload, dict):
            payload = {}
        candidates = payload.get("candidates") or []
        parts: list[Any] = []
        if candidates and isinstance(candidates[0], dict):
            parts = (candidates[0].get("content") or {}).get("parts") or []

        text = "".join(
            part.get("text", "") for part in parts if isinstance(part, dict)
        )
        if not text:
            raise UpstreamApiError(
                message="Extraction API returned no text",
                details={
                    "prompt_feedback": payload.get("promptFeedback"),
                    "finish_reason": candidates[0].get("finishReason")
                    if candidates and isinstance(candidates[0], dict)
                    else None,
                },
            )
        return text
