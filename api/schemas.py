"""
Pydantic schemas for FastAPI request and response models.

The search routes forward the backend's JSON untouched (see
recipefinder.models for its shape), so only the routes this API answers
itself have response models here:

- DetectIngredientsResponse: ingredients found in an uploaded photo
- ImageSearchRequest / ImageSearchResponse: generated food photos
- HealthResponse: liveness information
- ErrorResponse: error body shared by all routes
"""

from typing import Any, List, Optional

from pydantic import BaseModel, ConfigDict, Field


class ErrorResponse(BaseModel):
    """Error body returned by the proxy routes."""
    error: str = Field(..., description="Short error summary")
    message: Optional[str] = Field(None, description="Human-readable explanation")
    details: Optional[Any] = Field(None, description="Upstream error body or exception text")

    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "error": "Too many requests",
                "message": "Too many requests, please try again in 6 seconds.",
            }
        }
    )


class DetectIngredientsResponse(BaseModel):
    """Ingredients detected in an uploaded photo."""
    ingredients: List[str] = Field(default_factory=list, description="Title-cased ingredient names")
    message: Optional[str] = Field(None, description="Set when no food ingredients were detected")

    model_config = ConfigDict(
        json_schema_extra={
            "example": {"ingredients": ["Tomato", "Basil", "Garlic"]}
        }
    )


class ImageSearchRequest(BaseModel):
    """Request body for /api/imageSearch."""
    query: Optional[str] = Field(None, description="Dish or ingredient description")


class ImageResult(BaseModel):
    """One generated image."""
    url: Optional[str] = Field(None, description="Image URL or data URI")
    alt: str = Field(..., description="Alt text, '<query> - result N'")


class ImageSearchResponse(BaseModel):
    """Generated images for a query."""
    images: List[ImageResult] = Field(default_factory=list)


class HealthResponse(BaseModel):
    """Health check response."""
    status: str = Field("ok", description="Always 'ok' when the API is reachable")
    service: str = Field(..., description="Service name")
    timestamp: str = Field(..., description="Current time (ISO 8601, UTC)")
    uptime: float = Field(..., ge=0, description="Seconds since the API started")
