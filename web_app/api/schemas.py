"""Pydantic schemas for API requests and responses."""

from pydantic import AliasChoices, BaseModel, Field, field_validator
from typing import List, Optional
from datetime import datetime

from shortlinks.common.validators import is_valid_url


class ShortenRequest(BaseModel):
    """Request to shorten the links of an HTML template."""

    html_content: str = Field(
        ...,
        description="The HTML template",
        validation_alias=AliasChoices("html_content", "htmlContent"),
    )
    base_url: Optional[str] = Field(
        None,
        description="Base URL for short links (defaults to the request's public URL)",
        validation_alias=AliasChoices("base_url", "baseUrl"),
    )

    @field_validator("html_content")
    @classmethod
    def validate_html_content(cls, v: str) -> str:
        if not v or not v.strip():
            raise ValueError("html_content must not be empty")
        return v

    @field_validator("base_url")
    @classmethod
    def validate_base_url(cls, v: Optional[str]) -> Optional[str]:
        if v is None:
            return v
        is_valid, error = is_valid_url(v)
        if not is_valid:
            raise ValueError(f"Invalid base_url: {error}")
        return v.rstrip("/")

    model_config = {
        "json_schema_extra": {
            "examples": [
                {
                    "html_content": '<a href="https://example.com/sale">Shop now</a>',
                    "base_url": "https://short.link",
                }
            ]
        }
    }


class ExtractRequest(BaseModel):
    """Request to list the shortenable URLs of an HTML template."""

    html_content: str = Field(
        ...,
        description="The HTML template",
        validation_alias=AliasChoices("html_content", "htmlContent"),
    )


class Replacement(BaseModel):
    """One original URL and its short URL."""

    original_url: str
    short_code: str
    short_url: str


class ShortenStats(BaseModel):
    urls_found: int
    urls_shortened: int
    locations_rewritten: int


class ShortenResponse(BaseModel):
    """Rewritten template plus the mapping report."""

    success: bool = True
    modified_html: str = Field(..., description="The template with short links")
    replacements: List[Replacement] = Field(..., description="Every mapping used")
    stats: ShortenStats

    model_config = {
        "json_schema_extra": {
            "examples": [
                {
                    "success": True,
                    "modified_html": '<a href="https://short.link/r/abc123">Shop now</a>',
                    "replacements": [
                        {
                            "original_url": "https://example.com/sale",
                            "short_code": "abc123",
                            "short_url": "https://short.link/r/abc123",
                        }
                    ],
                    "stats": {"urls_found": 1, "urls_shortened": 1, "locations_rewritten": 1},
                }
            ]
        }
    }


class ExtractResponse(BaseModel):
    urls: List[str]
    count: int


class URLInfoResponse(BaseModel):
    """Stored mapping for a short code."""

    short_code: str
    original_url: str
    created_at: datetime
    access_count: int
    last_accessed: Optional[datetime] = None


class HealthResponse(BaseModel):
    """Health check response."""

    status: str = Field(..., description="Overall status")
    database: str = Field(..., description="Store status")
    cache: str = Field(..., description="Cache status")
    timestamp: datetime = Field(..., description="Check timestamp")


class ErrorResponse(BaseModel):
    """Error response."""

    detail: str = Field(..., description="Error message")


class StatisticsResponse(BaseModel):
    """Statistics response."""

    total_urls: int
    total_accesses: int
    database: str
    cache_enabled: bool
