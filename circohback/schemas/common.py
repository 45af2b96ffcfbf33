"""
Error envelope shared by every router.

All 4xx/5xx bodies are built by the handlers in circohback.core.errors; the
models here only document that shape in the OpenAPI schema.
"""
from typing import Any, Optional

from pydantic import BaseModel, Field


class ErrorResponse(BaseModel):
    code: str = Field(
        description="Machine-readable error code, e.g. UNKNOWN_ACTIVITY_TYPE.",
        examples=["UNKNOWN_ACTIVITY_TYPE"],
    )
    message: str
    details: Optional[dict[str, Any]] = Field(
        default=None,
        description="Error-specific context. VALIDATION_ERROR puts field errors under `errors`.",
    )
