"""Clients that turn a free-text query into a parsed intent."""

from __future__ import annotations

import logging
from typing import Optional, Protocol

import httpx
from pydantic import ValidationError

from finflow.core.config import IntentServiceSettings
from finflow.schemas import ParsedIntent
from finflow.services.intent_classifier import IntentClassificationError, classify

logger = logging.getLogger(__name__)


class IntentClient(Protocol):
    async def parse(self, query: str) -> ParsedIntent:
        ...


class LocalIntentClient:
    """Classify queries in process with the rule-based classifier."""

    async def parse(self, query: str) -> ParsedIntent:
        return classify(query)


class HttpIntentClient:
    """Classify queries through a remote intent parsing endpoint."""

    _PATH = "/api/intent/parse"

    def __init__(
        self,
        settings: IntentServiceSettings,
        *,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> None:
        if not settings.base_url:
            raise ValueError("An intent service URL is required for HttpIntentClient.")
        self._base_url = str(settings.base_url).rstrip("/")
        self._timeout = settings.timeout_seconds
        self._transport = transport

    async def parse(self, query: str) -> ParsedIntent:
        """Post ``query`` to the intent service. Failures are not retried."""
        try:
            async with httpx.AsyncClient(
                base_url=self._base_url,
                timeout=self._timeout,
                transport=self._transport,
            ) as client:
                response = await client.post(self._PATH, json={"query": query})
                response.raise_for_status()
        except httpx.HTTPStatusError as exc:
            logger.warning(
                "Intent service returned %s for query", exc.response.status_code
            )
            raise IntentClassificationError("Failed to parse intent") from exc
        except httpx.HTTPError as exc:
            logger.warning("Intent service request failed: %s", exc)
            raise IntentClassificationError("Failed to parse intent") from exc

        try:
            return ParsedIntent.model_validate(response.json())
        except (ValueError, ValidationError) as exc:
            raise IntentClassificationError("Intent service returned an invalid payload") from exc


__all__ = [
    "HttpIntentClient",
    "IntentClassificationError",
    "IntentClient",
    "LocalIntentClient",
]
