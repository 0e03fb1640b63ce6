"""
ThemeColor API Schemas
Pydantic models for response validation.
"""
from typing import Optional
from pydantic import BaseModel, Field


class ColorResponse(BaseModel):
    """Response body of the /api endpoint."""
    err: Optional[str] = Field(
        None,
        description="Error message, null on success"
    )
    rgb: str = Field(
        "",
        description="Average color as #RRGGBB, empty when an error occurred"
    )


class HealthResponse(BaseModel):
    """Health check response."""
    ok: bool = Field(True, description="Service health status")
    version: str = Field(..., description="Service version")
    service: str = Field("themecolor", description="Service name")
