"""
Runtime configuration for the resume optimizer.
Values come from the environment (optionally a .env file) and are re-read on
every request so model id and token changes apply without a restart.
"""
import os
from dataclasses import dataclass
from typing import Optional

from .errors import ConfigurationError

# Local generation service (Ollama)
OLLAMA_URL = "http://localhost:11434"
OLLAMA_GENERATE_ENDPOINT = f"{OLLAMA_URL}/api/generate"
OLLAMA_MODEL = "llama3"

# Hosted chat-completion service (GitHub Models)
GITHUB_MODELS_ENDPOINT = "https://models.github.ai/inference/chat/completions"
GITHUB_API_VERSION = "2022-11-28"
DEFAULT_GITHUB_MODEL_ID = "openai/gpt-4.1"

TEMPERATURE = 0.3
MAX_OUTPUT_TOKENS = 2000

DEFAULT_BACKEND = "github"
DEFAULT_TIMEOUT_SECONDS = 60.0


@dataclass(frozen=True)
class Settings:
    backend: str = DEFAULT_BACKEND
    github_model_id: str = DEFAULT_GITHUB_MODEL_ID
    github_token: Optional[str] = None
    timeout_seconds: float = DEFAULT_TIMEOUT_SECONDS

    @classmethod
    def from_env(cls) -> "Settings":
        backend = (os.getenv("OPTIMIZER_BACKEND") or DEFAULT_BACKEND).strip().lower()
        if backend not in ("ollama", "github"):
            raise ConfigurationError(
                f"OPTIMIZER_BACKEND must be 'ollama' or 'github', got '{backend}'"
            )

        raw_timeout = os.getenv("LLM_TIMEOUT_SECONDS")
        timeout = DEFAULT_TIMEOUT_SECONDS
        if raw_timeout:
            try:
                timeout = float(raw_timeout)
            except ValueError:
                raise ConfigurationError(f"LLM_TIMEOUT_SECONDS is not a number: '{raw_timeout}'")
            if timeout <= 0:
                raise ConfigurationError("LLM_TIMEOUT_SECONDS must be positive")

        return cls(
            backend=backend,
            github_model_id=os.getenv("GITHUB_MODEL_ID") or DEFAULT_GITHUB_MODEL_ID,
            github_token=os.getenv("GITHUB_MODELS_TOKEN") or None,
            timeout_seconds=timeout,
        )


def get_settings() -> Settings:
    """FastAPI dependency; builds settings fresh for each request."""
    return Settings.from_env()
