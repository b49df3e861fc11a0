"""Pydantic schemas for API requests and responses."""

from pydantic import BaseModel, Field
from datetime import datetime


class EncodeRequest(BaseModel):
    """Request to encode a value."""

    value: str = Field(..., description="The value to encode")

    model_config = {
        "json_schema_extra": {
            "examples": [
                {"value": "https://example.com/very/long/path/to/resource"}
            ]
        }
    }


class EncodeResponse(BaseModel):
    """Response after encoding a value."""

    code: str = Field(..., description="The short code assigned to the value")

    model_config = {
        "json_schema_extra": {
            "examples": [
                {"code": "4c92"}
            ]
        }
    }


class DecodeRequest(BaseModel):
    """Request to decode a short code."""

    code: str = Field(..., description="The short code to decode")


class DecodeResponse(BaseModel):
    """Response with the original value."""

    value: str = Field(..., description="The value the code was assigned to")


class HealthResponse(BaseModel):
    """Health check response."""

    status: str = Field(..., description="Overall status")
    database: str = Field(..., description="Database status")
    cache: str = Field(..., description="Cache status")
    timestamp: datetime = Field(..., description="Check timestamp")


class ErrorResponse(BaseModel):
    """Error response."""

    error: str = Field(..., description="Error message")
