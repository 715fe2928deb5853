from pydantic import BaseModel, Field, StrictStr, field_validator
from pydantic import ValidationError as PydanticValidationError
from typing import Any, List, Optional

from .errors import ValidationError
from .prompts import TONES, normalize_job_description, normalize_tone


class OptimizationRequest(BaseModel):
    resumeText: StrictStr = Field(..., min_length=1)
    jobDescription: Optional[StrictStr] = Field(None, validate_default=True)
    tone: Optional[StrictStr] = Field(None, validate_default=True)

    @field_validator("jobDescription")
    @classmethod
    def _default_target_role(cls, v: Optional[str]) -> str:
        return normalize_job_description(v)

    @field_validator("tone")
    @classmethod
    def _known_tone(cls, v: Optional[str]) -> str:
        tone = normalize_tone(v)
        if tone not in TONES:
            raise ValueError(f"Unsupported tone '{tone}'. Expected one of: {', '.join(TONES)}")
        return tone

    @classmethod
    def from_payload(cls, body: Any) -> "OptimizationRequest":
        """Validate a decoded JSON body, raising the API's ValidationError (400)."""
        if not isinstance(body, dict):
            raise ValidationError("Request body must be a JSON object")
        try:
            return cls.model_validate(body)
        except PydanticValidationError as e:
            raise ValidationError(_error_message(e.errors()[0])) from None


def _error_message(error: dict) -> str:
    field = error["loc"][0] if error["loc"] else ""
    if field == "resumeText":
        return "Missing resumeText"
    if error["type"] == "value_error":
        return str(error["ctx"]["error"])
    return f"{field} must be a string"


class OptimizeResponse(BaseModel):
    optimized: str


class ErrorResponse(BaseModel):
    error: str


class TonesResponse(BaseModel):
    tones: List[str]
    default: str
