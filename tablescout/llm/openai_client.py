from __future__ import annotations

import openai
from openai import OpenAI

from .chat_completions import ChatCompletionsAdapter, classify_sdk_error
from .config import DEFAULT_PROVIDER_CONFIG, ProviderConfig
from .models import ErrorKind


class OpenAIAdapter(ChatCompletionsAdapter):
    name = "openai"

    def __init__(self, config: ProviderConfig = DEFAULT_PROVIDER_CONFIG) -> None:
        super().__init__(config.openai_model, config.openai_api_key, config)

    def _create_client(self) -> OpenAI:
        return OpenAI(api_key=self._api_key, timeout=self._config.timeout, max_retries=1)

    def _classify(self, exc: Exception) -> ErrorKind:
        return classify_sdk_error(exc, openai)
