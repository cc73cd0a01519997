"""Pydantic request and response models for the GenAI Gateway API.

These models define the JSON schema for every API endpoint.  Multipart
endpoints take their inputs as form fields, so only the text endpoint has a
request model.

Models
------
TextGenerationRequest
    Payload for ``POST /generate-text``.
TextResponse
    Result of ``POST /generate-text``.
OutputResponse
    Result of the three ``POST /generate-from-*`` media endpoints.
ErrorResponse
    Body of every 400 and 500 response.
HealthResponse
    Result of ``GET /health``.
"""

from __future__ import annotations

from pydantic import BaseModel, Field


class TextGenerationRequest(BaseModel):
    """Request body for the ``POST /generate-text`` endpoint.

    Attributes:
        prompt: The prompt sent to the model.  Must be a non-empty string;
            other JSON types are rejected rather than coerced.
    """

    prompt: str = Field(
        ...,
        min_length=1,
        strict=True,
        description="Prompt sent to the model.",
    )


class TextResponse(BaseModel):
    """Response body for ``POST /generate-text``."""

    text: str = Field(..., description="Text generated by the model.")


class OutputResponse(BaseModel):
    """Response body for the media endpoints."""

    output: str = Field(..., description="Text generated by the model.")


class ErrorResponse(BaseModel):
    """Response body for failed requests."""

    error: str = Field(..., description="Validation message, or a generic error.")


class HealthResponse(BaseModel):
    """Response body for ``GET /health``."""

    status: str = Field(default="ok")
