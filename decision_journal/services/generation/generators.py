"""Alternative generators: the client-facing side of generation.

Three strategies share one interface and are picked once, at composition
time, by ``build_generator``:

- ``SimulatedAlternativeGenerator``: local template expander, no network;
- ``GatewayAlternativeGenerator``: runs the generation proxy in-process;
- ``ProxyAlternativeGenerator``: POSTs to a remote ``/generate-alternatives``.

All of them make a single attempt and raise ``GenerationFailure`` with a
human-readable message on any error.
"""
import asyncio
import logging
import random
from abc import ABC, abstractmethod
from dataclasses import dataclass

import httpx

from decision_journal.core.config import Settings
from decision_journal.core.errors import GenerationError, GenerationFailure
from decision_journal.services.generation.proxy import AlternativeProxy

logger = logging.getLogger(__name__)

TITLE_ECHO_MAX = 30

SIMULATED_PHRASES = [
    "Escolher a opção de menor custo inicial",
    "Escolher a opção com maior retorno a longo prazo",
    "Adiar a decisão por 30 dias",
    "Seguir com a opção mais segura e conhecida",
    "Apostar na opção mais inovadora",
    "Dividir o investimento entre duas opções",
    "Começar com um piloto de pequena escala",
    "Delegar a escolha para quem executa",
    "Manter a situação atual",
    "Escolher a opção mais rápida de implementar",
]


@dataclass(frozen=True)
class GeneratedAlternative:
    text: str


class AlternativeGenerator(ABC):
    @abstractmethod
    async def generate(self, title: str, description: str, count: int) -> list[GeneratedAlternative]:
        """Return up to ``count`` alternatives for the decision."""


def echo_title(title: str) -> str:
    title = title.strip()
    if len(title) > TITLE_ECHO_MAX:
        return title[:TITLE_ECHO_MAX] + "..."
    return title


class SimulatedAlternativeGenerator(AlternativeGenerator):
    """Random picks from a fixed phrase pool, each tagged with the decision title."""

    def __init__(self, latency_seconds: float = 0.0, rng: random.Random | None = None, phrases: list[str] | None = None):
        self.latency_seconds = latency_seconds
        self.rng = rng or random.Random()
        self.phrases = phrases or SIMULATED_PHRASES

    async def generate(self, title: str, description: str, count: int) -> list[GeneratedAlternative]:
        if self.latency_seconds > 0:
            await asyncio.sleep(self.latency_seconds)

        if count <= len(self.phrases):
            picks = self.rng.sample(self.phrases, count)
        else:
            # pool exhausted: every phrase once, then repeats
            picks = self.rng.sample(self.phrases, len(self.phrases))
            picks += self.rng.choices(self.phrases, k=count - len(self.phrases))

        suffix = echo_title(title)
        return [GeneratedAlternative(text=f"{phrase} ({suffix})") for phrase in picks]


class GatewayAlternativeGenerator(AlternativeGenerator):
    """Calls the generation proxy in the same process."""

    def __init__(self, proxy: AlternativeProxy):
        self.proxy = proxy

    async def generate(self, title: str, description: str, count: int) -> list[GeneratedAlternative]:
        try:
            texts = await self.proxy.generate(title, description, count)
        except GenerationError as exc:
            logger.warning("Error generating alternatives: %s (%s)", exc.message, exc.kind)
            raise GenerationFailure(exc.message) from exc
        return [GeneratedAlternative(text=text) for text in texts[:count]]


class ProxyAlternativeGenerator(AlternativeGenerator):
    """HTTP client of a remote /generate-alternatives endpoint."""

    def __init__(self, url: str, timeout: float = 60.0, transport: httpx.AsyncBaseTransport | None = None):
        self.url = url
        self.timeout = timeout
        self._transport = transport

    async def generate(self, title: str, description: str, count: int) -> list[GeneratedAlternative]:
        try:
            async with httpx.AsyncClient(timeout=self.timeout, transport=self._transport) as client:
                response = await client.post(
                    self.url,
                    json={"title": title, "description": description, "count": count},
                )
        except httpx.HTTPError as exc:
            logger.error("Error generating alternatives: %r", exc)
            raise GenerationFailure(str(exc) or None) from exc

        try:
            data = response.json()
        except ValueError:
            data = None

        if isinstance(data, dict) and data.get("error"):
            raise GenerationFailure(str(data["error"]))
        if not response.is_success:
            logger.error("Generation proxy returned %s", response.status_code)
            raise GenerationFailure()

        alternatives = data.get("alternatives") if isinstance(data, dict) else None
        if not isinstance(alternatives, list):
            raise GenerationFailure("Resposta inválida da IA")

        texts = [str(item).strip() for item in alternatives if isinstance(item, str) and item.strip()]
        return [GeneratedAlternative(text=text) for text in texts[:count]]


def build_generator(settings: Settings, transport: httpx.AsyncBaseTransport | None = None) -> AlternativeGenerator:
    """Pick the generator strategy from settings.generator_backend."""
    backend = settings.generator_backend
    if backend == "auto":
        backend = "gateway" if settings.ai_gateway_api_key else "simulated"

    if backend == "gateway":
        return GatewayAlternativeGenerator(AlternativeProxy(settings, transport=transport))
    if backend == "proxy":
        return ProxyAlternativeGenerator(
            settings.generation_proxy_url,
            timeout=settings.ai_request_timeout,
            transport=transport,
        )
    return SimulatedAlternativeGenerator(latency_seconds=settings.simulated_latency_seconds)
