"""
Resume optimization service.

Takes a validated request, renders the prompt in the form the selected
backend expects, makes a single backend call and turns whatever comes back
into either an OptimizationResult or an OptimizationError. Nothing is retried.
"""
import logging
from dataclasses import dataclass

from .backends import LLMBackend
from .config import Settings
from .errors import (
    BackendError,
    BackendTimedOut,
    BackendTimeoutError,
    BackendUnreachable,
    ConnectivityError,
    ModelConfigurationError,
)
from .prompts import build
from .schemas import OptimizationRequest

logger = logging.getLogger(__name__)


@dataclass
class OptimizationResult:
    optimized: str


class OptimizationService:
    def __init__(self, backend: LLMBackend, settings: Settings):
        self.backend = backend
        self.settings = settings

    async def optimize(self, request: OptimizationRequest) -> OptimizationResult:
        backend, settings = self.backend, self.settings
        backend.check_settings(settings)

        payload = build(request.resumeText, request.jobDescription, request.tone, backend.prompt_mode)
        logger.info(
            f"Optimizing resume via {backend.name} (model={backend.model_id(settings)}, "
            f"resume_chars={len(request.resumeText)}, tone={request.tone})"
        )

        try:
            response = await backend.invoke(payload, settings)
        except BackendTimedOut as e:
            logger.warning(f"{backend.name} timed out: {e}")
            raise BackendTimeoutError(backend.timeout_message(settings))
        except BackendUnreachable as e:
            logger.warning(f"{backend.name} unreachable: {e}")
            raise ConnectivityError(backend.unreachable_message(settings))

        if not response.ok:
            logger.warning(f"{backend.name} returned {response.status_code}")
            if backend.is_unknown_model(response.data, response.text):
                raise ModelConfigurationError(backend.unknown_model_message(settings))
            status = response.status_code if 400 <= response.status_code < 600 else None
            raise BackendError(backend.error_message(response.text), status_code=status)

        optimized = backend.extract_content(response.data)
        if not optimized:
            logger.info(f"{backend.name} returned no content")
        return OptimizationResult(optimized=optimized)
