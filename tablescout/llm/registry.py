from __future__ import annotations

import logging
import threading
from dataclasses import dataclass
from typing import Callable, TypeVar

from ..chat.models import Message
from .base import ProviderAdapter
from .config import DEFAULT_PROVIDER_CONFIG, ProviderConfig
from .gemini_client import GeminiAdapter
from .groq_client import GroqAdapter
from .models import NoProvidersConfigured, ProviderError
from .openai_client import OpenAIAdapter

logger = logging.getLogger(__name__)

T = TypeVar("T")

AdapterFactory = Callable[[ProviderConfig], ProviderAdapter]


@dataclass(frozen=True)
class ProviderDescriptor:
    name: str
    enabled: bool = True
    priority: int = 100


# Lower priority is tried first.
DEFAULT_PROVIDERS: tuple[ProviderDescriptor, ...] = (
    ProviderDescriptor(name="gemini", enabled=True, priority=1),
    ProviderDescriptor(name="openai", enabled=True, priority=2),
    ProviderDescriptor(name="groq", enabled=True, priority=3),
)

DEFAULT_FACTORIES: dict[str, AdapterFactory] = {
    "gemini": GeminiAdapter,
    "openai": OpenAIAdapter,
    "groq": GroqAdapter,
}


class ProviderRegistry:
    """Provider descriptors plus the config they are checked against.

    Availability is derived from the injected config only: a provider is
    available when it is enabled, has a factory and has a credential.
    """

    def __init__(
        self,
        config: ProviderConfig = DEFAULT_PROVIDER_CONFIG,
        descriptors: tuple[ProviderDescriptor, ...] = DEFAULT_PROVIDERS,
        factories: dict[str, AdapterFactory] | None = None,
    ) -> None:
        self._config = config
        self._descriptors = descriptors
        self._factories = dict(DEFAULT_FACTORIES if factories is None else factories)
        self._adapters: dict[str, ProviderAdapter] = {}
        self._lock = threading.Lock()

    def available_providers(self, preferred: str | None = None) -> list[ProviderDescriptor]:
        available = sorted(
            (
                d for d in self._descriptors
                if d.enabled and d.name in self._factories and self._config.api_key_for(d.name)
            ),
            key=lambda d: d.priority,
        )
        if preferred:
            wanted = preferred.strip().lower()
            first = [d for d in available if d.name == wanted]
            available = first + [d for d in available if d.name != wanted]
        return available

    def get(self, name: str) -> ProviderAdapter:
        with self._lock:
            adapter = self._adapters.get(name)
            if adapter is None:
                adapter = self._factories[name](self._config)
                self._adapters[name] = adapter
            return adapter


class FailoverChain:
    def __init__(self, registry: ProviderRegistry) -> None:
        self._registry = registry

    def run(
        self,
        conversation: list[Message],
        turn: Callable[[ProviderAdapter, list[Message]], T],
        preferred: str | None = None,
    ) -> tuple[T, str]:
        """Run ``turn`` on each available provider until one succeeds.

        Returns the turn's result and the name of the provider that produced
        it. Each provider is attempted at most once. The last provider's
        failure is re-raised as a ProviderError.

        Raises:
            NoProvidersConfigured: no provider has credentials.
            ProviderError: every available provider failed.
        """
        providers = self._registry.available_providers(preferred)
        if not providers:
            raise NoProvidersConfigured("No AI providers are configured")

        for index, descriptor in enumerate(providers):
            is_last = index == len(providers) - 1
            try:
                logger.info("Trying provider %s", descriptor.name)
                result = turn(self._registry.get(descriptor.name), conversation)
            except ProviderError as e:
                if e.provider is None:
                    e.provider = descriptor.name
                if is_last:
                    logger.error("Provider %s failed (%s), no providers left", descriptor.name, e.kind.value)
                    raise
                logger.warning("Provider %s failed (%s): %s; trying next", descriptor.name, e.kind.value, e)
                continue
            except Exception as e:
                if is_last:
                    logger.error("Provider %s failed, no providers left", descriptor.name, exc_info=True)
                    raise ProviderError(str(e), provider=descriptor.name) from e
                logger.warning("Provider %s failed: %s; trying next", descriptor.name, e, exc_info=True)
                continue

            logger.info("Provider %s succeeded", descriptor.name)
            return result, descriptor.name

        # Unreachable: the last iteration either returns or raises.
        raise ProviderError("All providers failed")
