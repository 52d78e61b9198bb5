"""Server-side generation proxy: prompt the AI gateway and parse its reply.

One request per call, no retries, no streaming. Upstream failures are mapped
onto the GenerationError taxonomy so the endpoint can pass them through.
"""
import logging

import httpx

from decision_journal.core.config import Settings
from decision_journal.core.errors import (
    EmptyResponse,
    GenerationError,
    InsufficientCredits,
    MissingTitle,
    RateLimited,
    UnknownError,
    UpstreamError,
)
from decision_journal.services.generation.parsing import parse_alternatives
from decision_journal.services.generation.prompts import build_messages

logger = logging.getLogger(__name__)

DEFAULT_COUNT = 3


class AlternativeProxy:
    """Turns (title, description, count) into model-sourced alternatives."""

    def __init__(self, settings: Settings, transport: httpx.AsyncBaseTransport | None = None):
        self.settings = settings
        # injectable for tests (httpx.MockTransport)
        self._transport = transport

    async def generate(self, title: str | None, description: str | None = None, count: int = DEFAULT_COUNT) -> list[str]:
        if not title or not title.strip():
            raise MissingTitle()

        try:
            content = await self._complete(title, description, count)
            return parse_alternatives(content, count)
        except GenerationError:
            raise
        except Exception as exc:
            logger.exception("generate-alternatives error")
            raise UnknownError(str(exc) or UnknownError.default_message) from exc

    async def _complete(self, title: str, description: str | None, count: int) -> str:
        api_key = self.settings.ai_gateway_api_key
        if not api_key:
            raise UnknownError("AI_GATEWAY_API_KEY não configurada")

        async with httpx.AsyncClient(
            timeout=self.settings.ai_request_timeout,
            transport=self._transport,
        ) as client:
            response = await client.post(
                self.settings.ai_gateway_url,
                headers={"Authorization": f"Bearer {api_key}"},
                json={
                    "model": self.settings.ai_model,
                    "messages": build_messages(title, description, count),
                },
            )

        if response.status_code == 429:
            raise RateLimited()
        if response.status_code == 402:
            raise InsufficientCredits()
        if not response.is_success:
            logger.error("AI gateway error: %s %s", response.status_code, response.text)
            raise UpstreamError()

        data = response.json()
        try:
            content = data["choices"][0]["message"]["content"]
        except (KeyError, IndexError, TypeError):
            content = None

        if not content or not str(content).strip():
            raise EmptyResponse()
        return str(content)
