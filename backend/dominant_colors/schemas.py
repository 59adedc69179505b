"""
Dominant Colors API Schemas
Pydantic models for request/response validation.
"""
from typing import List, Optional

from pydantic import BaseModel, Field


class HealthResponse(BaseModel):
    """Health check response."""
    ok: bool = Field(True, description="Service health status")
    version: str = Field(..., description="Service version")
    service: str = Field("dominant-colors", description="Service name")


class ErrorResponse(BaseModel):
    """Error response."""
    detail: str = Field(..., description="Error message")
    error: str = Field(..., description="Error type")


class ColorEntry(BaseModel):
    """Single color in a palette with its population ratio."""
    hex: str = Field(
        ...,
        pattern=r"^#[0-9A-Fa-f]{6}$",
        description="Hex color code in format #RRGGBB"
    )
    rgb: List[int] = Field(..., min_length=3, max_length=3, description="RGB channels 0-255")
    ratio: float = Field(
        ...,
        ge=0.0,
        le=1.0,
        description="Share of pixels (0.0-1.0) in this color's cluster"
    )


class IterationTrace(BaseModel):
    """Cluster centers after one refinement iteration."""
    cluster_centers: List[str] = Field(..., description="Hex centers sorted by cluster size")
    max_distance: float = Field(..., description="Largest center movement in this iteration")


class DominantColorsResponse(BaseModel):
    """Dominant colors response."""
    request_id: str
    found_colors: List[str] = Field(..., description="Hex colors ordered by frequency")
    palette: List[ColorEntry]
    pixel_count: int = Field(..., description="Number of pixels clustered after resizing")
    iteration_count: int = Field(..., description="Refinement iterations until convergence")
    initial_centers: Optional[List[str]] = Field(None, description="Seed centers (verbose only)")
    iterations: Optional[List[IterationTrace]] = Field(None, description="Per-iteration trace (verbose only)")
