"""GenAI Gateway — FastAPI Application.

This module defines the FastAPI application, its routes, and the ``main()``
CLI function that launches the uvicorn server.

Architecture
------------
Each request is handled independently; nothing is shared between requests
except the read-only model client:

- **Configuration** comes from :mod:`genai_gateway.core.config`.
- **The model client** is built once in the application lifespan (or passed
  to :func:`create_app`) and stored on ``app.state``.  Handlers receive it
  through the :func:`get_model_client` dependency.
- **Uploads** are written to the upload directory for the duration of the
  request and removed afterwards (:mod:`genai_gateway.core.uploads`).
- **Errors** are turned into responses by
  :func:`genai_gateway.api.errors.error_response`.

Endpoints
---------
========  ============================  ====================================
Method    Path                          Purpose
========  ============================  ====================================
POST      ``/generate-text``            Generate text from a JSON prompt
POST      ``/generate-from-image``      Prompt + uploaded image
POST      ``/generate-from-document``   Prompt + uploaded document
POST      ``/generate-from-audio``      Prompt + uploaded audio
GET       ``/health``                   Liveness check
========  ============================  ====================================

Usage
-----
CLI (installed entry point)::

    genai-gateway

Direct invocation::

    python -m genai_gateway.api.main
"""

from __future__ import annotations

import logging
import sys
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from dataclasses import dataclass
from pathlib import Path

from fastapi import APIRouter, Depends, FastAPI, File, Form, Request, UploadFile
from pydantic import ValidationError as PydanticValidationError

from genai_gateway import __version__
from genai_gateway.api.errors import register_error_handlers
from genai_gateway.api.models import (
    ErrorResponse,
    HealthResponse,
    OutputResponse,
    TextGenerationRequest,
    TextResponse,
)
from genai_gateway.core.config import GatewayConfig, config, require_api_key
from genai_gateway.core.encoder import file_to_part
from genai_gateway.core.errors import ConfigurationError, ValidationError
from genai_gateway.core.model_client import GeminiModelClient, ModelClient
from genai_gateway.core.uploads import scoped_upload, upload_mime_type

logging.basicConfig(
    level=config.log_level,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)
logger = logging.getLogger(__name__)

PROMPT_ERROR = "Prompt must be a non-empty string"

ERROR_RESPONSES = {
    400: {"model": ErrorResponse, "description": "Invalid request input"},
    500: {"model": ErrorResponse, "description": "Internal server error"},
}


# ---------------------------------------------------------------------------
# Media endpoint definitions.
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class MediaEndpoint:
    """What a ``/generate-from-*`` endpoint accepts and defaults to.

    Attributes:
        name: Short label used in log messages.
        path: Route the endpoint is served on.
        default_prompt: Prompt used when the request does not supply one.
        error_message: Validation message for a missing or unacceptable file.
        mime_prefix: Required MIME type prefix (e.g. ``"image/"``), or
            ``None`` to accept any file.
    """

    name: str
    path: str
    default_prompt: str
    error_message: str
    mime_prefix: str | None = None

    def check_upload(self, upload: UploadFile | None) -> UploadFile:
        """Return *upload* if this endpoint accepts it.

        Raises:
            ValidationError: If the file is missing or has the wrong MIME type.
        """
        if upload is None:
            raise ValidationError(self.error_message)
        if self.mime_prefix and not upload_mime_type(upload).startswith(self.mime_prefix):
            raise ValidationError(self.error_message)
        return upload

    def resolve_prompt(self, prompt: str | None) -> str:
        """Return *prompt*, or the default when it is missing or empty."""
        return prompt or self.default_prompt


IMAGE = MediaEndpoint(
    name="image",
    path="/generate-from-image",
    default_prompt="Describe the image",
    error_message="Valid image file is required",
    mime_prefix="image/",
)
DOCUMENT = MediaEndpoint(
    name="document",
    path="/generate-from-document",
    default_prompt="Analyze the document",
    error_message="Document file is required",
)
AUDIO = MediaEndpoint(
    name="audio",
    path="/generate-from-audio",
    default_prompt="Transcribe the audio",
    error_message="Valid audio file is required",
    mime_prefix="audio/",
)
MEDIA_ENDPOINTS = (IMAGE, DOCUMENT, AUDIO)


# ---------------------------------------------------------------------------
# Dependencies and shared request handling.
# ---------------------------------------------------------------------------


def get_model_client(request: Request) -> ModelClient:
    """Return the model client stored on the application."""
    return request.app.state.model_client


def get_upload_dir(request: Request) -> Path:
    """Return the upload directory configured for the application."""
    return request.app.state.config.upload_dir


def _is_json(request: Request) -> bool:
    """Return whether the request declares a JSON body."""
    media_type = request.headers.get("content-type", "").split(";", 1)[0].strip()
    return media_type.lower() == "application/json"


async def _parse_text_request(request: Request) -> TextGenerationRequest:
    """Read and validate the ``/generate-text`` JSON body.

    A body that is not sent as ``application/json``, is not valid JSON, or is
    not a JSON object is treated the same as a missing prompt.

    Raises:
        ValidationError: If the prompt is missing, empty, or not a string.
    """
    payload = None
    if _is_json(request):
        try:
            payload = await request.json()
        except ValueError:
            pass
    try:
        return TextGenerationRequest.model_validate(payload)
    except PydanticValidationError as e:
        raise ValidationError(PROMPT_ERROR) from e


async def _generate_from_media(
    endpoint: MediaEndpoint,
    upload: UploadFile | None,
    prompt: str | None,
    client: ModelClient,
    upload_dir: Path,
) -> OutputResponse:
    """Validate, store, encode and forward one uploaded file.

    Validation happens before anything touches the disk.  Once stored, the
    file is removed on every exit path by :func:`scoped_upload`.
    """
    upload = endpoint.check_upload(upload)
    resolved_prompt = endpoint.resolve_prompt(prompt)

    async with scoped_upload(upload, upload_dir) as stored:
        part = await file_to_part(stored.path, stored.mime_type)
        output = await client.generate_from_parts(resolved_prompt, part)

    logger.info(
        f"Generated {len(output)} chars from {endpoint.name} {stored.filename!r} "
        f"({stored.mime_type}, {stored.size} bytes)"
    )
    return OutputResponse(output=output)


# ---------------------------------------------------------------------------
# Routes.
# ---------------------------------------------------------------------------

router = APIRouter()


@router.get("/health", response_model=HealthResponse)
async def health() -> HealthResponse:
    """Liveness check.  Does not contact the model."""
    return HealthResponse()


@router.post(
    "/generate-text",
    response_model=TextResponse,
    responses=ERROR_RESPONSES,
    openapi_extra={
        "requestBody": {
            "required": True,
            "content": {"application/json": {"schema": TextGenerationRequest.model_json_schema()}},
        }
    },
)
async def generate_text(
    request: Request,
    client: ModelClient = Depends(get_model_client),
) -> TextResponse:
    """Generate text from a JSON prompt.

    The body is parsed by hand rather than declared as a parameter so that
    every malformed body produces the same 400 message instead of FastAPI's
    422 detail.

    Args:
        request: The incoming request; its body must be ``{"prompt": str}``.
        client: Injected model client.

    Returns:
        ``{"text": <model output>}``.

    Raises:
        ValidationError: 400 if the prompt is missing or not a non-empty string.
    """
    req = await _parse_text_request(request)
    text = await client.generate_from_text(req.prompt)
    logger.info(f"Generated {len(text)} chars from text prompt")
    return TextResponse(text=text)


@router.post(IMAGE.path, response_model=OutputResponse, responses=ERROR_RESPONSES)
async def generate_from_image(
    image: UploadFile | None = File(None),
    prompt: str | None = Form(None),
    client: ModelClient = Depends(get_model_client),
    upload_dir: Path = Depends(get_upload_dir),
) -> OutputResponse:
    """Generate text from an uploaded image (``image/*``)."""
    return await _generate_from_media(IMAGE, image, prompt, client, upload_dir)


@router.post(DOCUMENT.path, response_model=OutputResponse, responses=ERROR_RESPONSES)
async def generate_from_document(
    document: UploadFile | None = File(None),
    prompt: str | None = Form(None),
    client: ModelClient = Depends(get_model_client),
    upload_dir: Path = Depends(get_upload_dir),
) -> OutputResponse:
    """Generate text from an uploaded document of any type."""
    return await _generate_from_media(DOCUMENT, document, prompt, client, upload_dir)


@router.post(AUDIO.path, response_model=OutputResponse, responses=ERROR_RESPONSES)
async def generate_from_audio(
    audio: UploadFile | None = File(None),
    prompt: str | None = Form(None),
    client: ModelClient = Depends(get_model_client),
    upload_dir: Path = Depends(get_upload_dir),
) -> OutputResponse:
    """Generate text from an uploaded audio file (``audio/*``)."""
    return await _generate_from_media(AUDIO, audio, prompt, client, upload_dir)


# ---------------------------------------------------------------------------
# Application factory.
# ---------------------------------------------------------------------------


def create_app(
    cfg: GatewayConfig | None = None,
    model_client: ModelClient | None = None,
) -> FastAPI:
    """Build the FastAPI application.

    Args:
        cfg: Configuration to use.  Defaults to the global ``config``.
        model_client: Model client shared by all requests.  When omitted a
            :class:`GeminiModelClient` is built at startup, which fails if
            no API key is configured.

    Returns:
        The configured application.
    """
    cfg = cfg or config

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        if getattr(app.state, "model_client", None) is None:
            app.state.model_client = GeminiModelClient(require_api_key(cfg), cfg.model_name)
        logger.info(f"Gateway ready (model={cfg.model_name}, uploads={cfg.upload_dir}).")
        yield

    app = FastAPI(
        title="GenAI Gateway",
        description="Forward text prompts and uploaded media to a generative model.",
        version=__version__,
        lifespan=lifespan,
    )
    app.state.config = cfg
    app.state.model_client = model_client

    register_error_handlers(app, {e.path: e.error_message for e in MEDIA_ENDPOINTS})
    app.include_router(router)
    return app


app = create_app()


# ---------------------------------------------------------------------------
# CLI entry point.
# ---------------------------------------------------------------------------


def main() -> None:
    """Launch the uvicorn ASGI server.

    Exits with status 1 if no API key is configured.  Host and port come
    from :data:`~genai_gateway.core.config.config` (``GATEWAY_HOST`` and
    ``PORT``).  Defaults to ``0.0.0.0:3000``.

    This function is registered as the ``genai-gateway`` console script in
    ``pyproject.toml``.
    """
    try:
        require_api_key(config)
    except ConfigurationError as e:
        logger.error(str(e))
        sys.exit(1)

    import uvicorn

    logger.info(f"Server is running on http://localhost:{config.port}")
    uvicorn.run(
        "genai_gateway.api.main:app",
        host=config.host,
        port=config.port,
        reload=False,
    )


if __name__ == "__main__":
    main()
