"""
Resume optimization endpoints.
/api/optimize-resume uses the configured backend, /api/optimize always talks
to the local Ollama service.
"""
import json
import logging

from fastapi import APIRouter, Depends, Request
from fastapi.responses import JSONResponse

from ..backends import LLMBackend, get_backend
from ..config import Settings, get_settings
from ..errors import OptimizationError, ValidationError
from ..prompts import DEFAULT_TONE, TONES
from ..schemas import ErrorResponse, OptimizationRequest, OptimizeResponse, TonesResponse
from ..service import OptimizationService

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api", tags=["optimize"])

ERROR_RESPONSES = {
    400: {"model": ErrorResponse},
    500: {"model": ErrorResponse},
    504: {"model": ErrorResponse},
}


async def _optimize(request: Request, backend: LLMBackend, settings: Settings) -> JSONResponse:
    try:
        try:
            body = await request.json()
        except (json.JSONDecodeError, UnicodeDecodeError):
            raise ValidationError("Invalid JSON body")
        optimization = OptimizationRequest.from_payload(body)
        result = await OptimizationService(backend, settings).optimize(optimization)
    except OptimizationError as e:
        return JSONResponse(e.to_payload(), status_code=e.status_code)
    except Exception:
        logger.exception("Resume optimization failed")
        return JSONResponse({"error": "Server error"}, status_code=500)
    return JSONResponse(OptimizeResponse(optimized=result.optimized).model_dump())


@router.post("/optimize-resume", response_model=OptimizeResponse, responses=ERROR_RESPONSES)
async def optimize_resume(request: Request, settings: Settings = Depends(get_settings)):
    return await _optimize(request, get_backend(settings.backend), settings)


@router.post("/optimize", response_model=OptimizeResponse, responses=ERROR_RESPONSES)
async def optimize_local(request: Request, settings: Settings = Depends(get_settings)):
    return await _optimize(request, get_backend("ollama"), settings)


@router.get("/tones", response_model=TonesResponse)
def list_tones():
    return TonesResponse(tones=list(TONES), default=DEFAULT_TONE)
