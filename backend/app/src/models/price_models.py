"""Request and response models for the price comparison endpoints."""

from typing import Any, Dict, List, Optional

from pydantic import BaseModel, Field, field_validator
from pydantic_core import PydanticCustomError

from configs import settings


class BatchSearchRequest(BaseModel):
    """Body of the batch search endpoint."""

    medicines: List[str] = Field(
        ...,
        description="Medicine names to compare, processed one after another.",
    )
    method: Optional[str] = Field(
        default=None,
        description="Fetch method: 'axios' (static HTML) or 'puppeteer' (browser).",
    )

    @field_validator("medicines")
    @classmethod
    def check_medicines(cls, value: List[str]) -> List[str]:
        if not value:
            raise PydanticCustomError(
                "batch_empty", "Please provide an array of medicine names"
            )
        limit = settings.BATCH_MAX_QUERIES
        if len(value) > limit:
            raise PydanticCustomError(
                "batch_too_large",
                "Maximum {limit} medicines allowed per batch request",
                {"limit": limit},
            )
        cleaned = [name.strip() for name in value]
        if not all(cleaned):
            raise PydanticCustomError(
                "blank_medicine", "Medicine names must not be blank"
            )
        return cleaned


class ErrorResponse(BaseModel):
    """Error envelope returned by every failing endpoint."""

    error: str = Field(..., description="Short error category.")
    message: Optional[str] = Field(default=None, description="Error details.")


class ServiceInfo(BaseModel):
    """Metadata returned by the root endpoint."""

    message: str
    version: str
    endpoints: Dict[str, str]


class BatchSearchResponse(BaseModel):
    """Sequential comparison results keyed by medicine name."""

    batch_results: Dict[str, Dict[str, Any]]
    processed: int
