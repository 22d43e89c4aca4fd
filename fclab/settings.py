from __future__ import annotations

import os
from functools import lru_cache
from typing import Optional

from dotenv import load_dotenv


load_dotenv()


class Settings:
    """Settings for the examples, loaded from environment variables / .env.

    Provider API keys are not kept here: each client reads its own variable
    (OPENAI_API_KEY, ANTHROPIC_API_KEY, GEMINI_API_KEY).
    """

    def __init__(self):
        self.model: str = os.getenv("FCLAB_MODEL", "gpt-3.5-turbo-0125")
        self.temperature: float = float(os.getenv("FCLAB_TEMPERATURE", "0"))
        self.max_tokens: int = int(os.getenv("FCLAB_MAX_TOKENS", "1024"))
        self.max_iterations: int = int(os.getenv("FCLAB_MAX_ITERATIONS", "10"))
        self.cache_dir: Optional[str] = os.getenv("FCLAB_CACHE_DIR") or None
        self.history_dir: str = os.getenv("FCLAB_HISTORY_DIR", ".history")
        self.log_level: str = os.getenv("FCLAB_LOG_LEVEL", "INFO")
        self.log_path: Optional[str] = os.getenv("FCLAB_LOG_PATH") or None


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    return Settings()
