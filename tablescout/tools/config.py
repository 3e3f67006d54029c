from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path

from dotenv import load_dotenv

load_dotenv(Path(__file__).resolve().parent.parent.parent / ".env")


@dataclass(frozen=True)
class ToolConfig:
    reddit_client_id: str = os.getenv("REDDIT_CLIENT_ID", "")
    reddit_client_secret: str = os.getenv("REDDIT_CLIENT_SECRET", "")
    brave_api_key: str = os.getenv("BRAVE_SEARCH_API_KEY", "")
    timeout: float = 15.0
    user_agent: str = "TableScout/1.0"


DEFAULT_TOOL_CONFIG = ToolConfig()
