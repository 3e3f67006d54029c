from __future__ import annotations

import groq
from groq import Groq

from .chat_completions import ChatCompletionsAdapter, classify_sdk_error
from .config import DEFAULT_PROVIDER_CONFIG, ProviderConfig
from .models import ErrorKind


class GroqAdapter(ChatCompletionsAdapter):
    name = "groq"

    def __init__(self, config: ProviderConfig = DEFAULT_PROVIDER_CONFIG) -> None:
        super().__init__(config.groq_model, config.groq_api_key, config)

    def _create_client(self) -> Groq:
        return Groq(api_key=self._api_key, timeout=self._config.timeout)

    def _classify(self, exc: Exception) -> ErrorKind:
        return classify_sdk_error(exc, groq)
