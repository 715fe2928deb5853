"""
LLM backend adapters.

Each adapter owns the wire contract of one inference service: request shape,
auth headers, where the generated text lives in the answer and how that
service reports an unknown model. Adapters never decide HTTP statuses for the
caller; they return a BackendResponse or raise a transport signal and leave
classification to the optimization service.
"""
import json
import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Any, Dict

import httpx

from . import config
from .config import Settings
from .errors import BackendTimedOut, BackendUnreachable, ConfigurationError
from .prompts import SINGLE_STRING, STRUCTURED, PromptPayload

logger = logging.getLogger(__name__)


@dataclass
class BackendResponse:
    status_code: int
    text: str
    data: Any = None

    @property
    def ok(self) -> bool:
        return 200 <= self.status_code < 300


def parse_json_body(text: str) -> Any:
    """Best-effort JSON decoding.

    Backend error bodies are not guaranteed to be JSON (proxies, HTML error
    pages), so anything that does not decode is returned as None and the raw
    text is kept for diagnostics.
    """
    if not text:
        return None
    try:
        return json.loads(text)
    except ValueError:
        return None


class LLMBackend(ABC):
    name: str = ""
    label: str = ""
    prompt_mode: str = SINGLE_STRING

    def check_settings(self, settings: Settings) -> None:
        """Raise ConfigurationError when the backend cannot be called at all."""

    @abstractmethod
    def model_id(self, settings: Settings) -> str:
        ...

    @abstractmethod
    def build_request(self, payload: PromptPayload, settings: Settings) -> Dict[str, Any]:
        """Return keyword arguments for ``httpx.AsyncClient.post``."""
        ...

    @abstractmethod
    def extract_content(self, data: Any) -> str:
        ...

    @abstractmethod
    def is_unknown_model(self, data: Any, text: str) -> bool:
        ...

    @abstractmethod
    def unreachable_message(self, settings: Settings) -> str:
        ...

    @abstractmethod
    def unknown_model_message(self, settings: Settings) -> str:
        ...

    def error_message(self, text: str) -> str:
        return f"{self.label} error: {text}"

    def timeout_message(self, settings: Settings) -> str:
        return f"{self.label} did not respond within {settings.timeout_seconds:g} seconds."

    async def invoke(self, payload: PromptPayload, settings: Settings) -> BackendResponse:
        request = self.build_request(payload, settings)
        try:
            async with httpx.AsyncClient(timeout=settings.timeout_seconds) as client:
                response = await client.post(request["url"], json=request["json"], headers=request["headers"])
        except httpx.TimeoutException as e:
            raise BackendTimedOut(str(e)) from e
        except httpx.ConnectError as e:
            raise BackendUnreachable(str(e)) from e

        text = response.text
        logger.debug(f"{self.name} answered {response.status_code} ({len(text)} bytes)")
        return BackendResponse(status_code=response.status_code, text=text, data=parse_json_body(text))


class OllamaBackend(LLMBackend):
    """Local generation service; flat prompt, no credential."""

    name = "ollama"
    label = "Ollama"
    prompt_mode = SINGLE_STRING

    def model_id(self, settings: Settings) -> str:
        return config.OLLAMA_MODEL

    def build_request(self, payload: PromptPayload, settings: Settings) -> Dict[str, Any]:
        return {
            "url": config.OLLAMA_GENERATE_ENDPOINT,
            "headers": {"Content-Type": "application/json"},
            "json": {
                "model": config.OLLAMA_MODEL,
                "prompt": payload.prompt,
                "stream": False,
                "options": {
                    "temperature": config.TEMPERATURE,
                    "num_predict": config.MAX_OUTPUT_TOKENS,
                },
            },
        }

    def extract_content(self, data: Any) -> str:
        if isinstance(data, dict) and isinstance(data.get("response"), str):
            return data["response"]
        return ""

    def is_unknown_model(self, data: Any, text: str) -> bool:
        # e.g. {"error": "model \"llama3\" not found, try pulling it first"}
        detail = data.get("error") if isinstance(data, dict) else None
        if not isinstance(detail, str):
            detail = text or ""
        detail = detail.lower()
        return "model" in detail and "not found" in detail

    def unreachable_message(self, settings: Settings) -> str:
        return f"Cannot reach Ollama at {config.OLLAMA_URL}. Is it running? Try `ollama serve`."

    def unknown_model_message(self, settings: Settings) -> str:
        return (
            f"Unknown model '{config.OLLAMA_MODEL}'. Pull it with `ollama pull {config.OLLAMA_MODEL}` "
            f"(see https://ollama.com/library for available models)."
        )


class GitHubModelsBackend(LLMBackend):
    """Hosted chat-completion service behind a bearer token."""

    name = "github"
    label = "GitHub Models"
    prompt_mode = STRUCTURED

    def check_settings(self, settings: Settings) -> None:
        if not settings.github_token:
            raise ConfigurationError("GITHUB_MODELS_TOKEN not configured")

    def model_id(self, settings: Settings) -> str:
        return settings.github_model_id

    def build_request(self, payload: PromptPayload, settings: Settings) -> Dict[str, Any]:
        return {
            "url": config.GITHUB_MODELS_ENDPOINT,
            "headers": {
                "Authorization": f"Bearer {settings.github_token}",
                "Accept": "application/vnd.github+json",
                "Content-Type": "application/json",
                "X-GitHub-Api-Version": config.GITHUB_API_VERSION,
            },
            "json": {
                "model": settings.github_model_id,
                "messages": list(payload.messages or ()),
                "max_tokens": config.MAX_OUTPUT_TOKENS,
                "temperature": config.TEMPERATURE,
                "stream": False,
            },
        }

    def extract_content(self, data: Any) -> str:
        if not isinstance(data, dict):
            return ""
        choices = data.get("choices")
        if not isinstance(choices, list) or not choices or not isinstance(choices[0], dict):
            return ""
        first = choices[0]
        message = first.get("message")
        if isinstance(message, dict) and isinstance(message.get("content"), str):
            return message["content"]
        # Legacy completion shape
        if isinstance(first.get("text"), str):
            return first["text"]
        return ""

    def is_unknown_model(self, data: Any, text: str) -> bool:
        code = _error_code(data)
        if code is None:
            code = text
        return isinstance(code, str) and "unknown_model" in code

    def unreachable_message(self, settings: Settings) -> str:
        return "Cannot reach GitHub Models endpoint. Check network and token."

    def unknown_model_message(self, settings: Settings) -> str:
        return (
            f"Unknown model '{settings.github_model_id}'. Check that GITHUB_MODEL_ID is set to a model "
            f"you can access (see https://github.com/marketplace/models and open the model's "
            f"Playground -> Code tab)."
        )


def _error_code(data: Any) -> Any:
    """First present of error.code, code, error.message; None when none is set."""
    if not isinstance(data, dict):
        return None
    error = data.get("error")
    error = error if isinstance(error, dict) else {}
    for value in (error.get("code"), data.get("code"), error.get("message")):
        if value is not None:
            return value
    return None


BACKENDS: Dict[str, LLMBackend] = {
    OllamaBackend.name: OllamaBackend(),
    GitHubModelsBackend.name: GitHubModelsBackend(),
}


def get_backend(name: str) -> LLMBackend:
    try:
        return BACKENDS[name]
    except KeyError:
        raise ConfigurationError(f"Unknown backend '{name}'")
