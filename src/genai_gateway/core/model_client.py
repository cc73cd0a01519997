"""Clients for the generative model behind the gateway.

The gateway only needs two call shapes from a model:

- **text** — a prompt on its own.
- **parts** — a prompt followed by one inline media part (image, document
  or audio).

:class:`ModelClient` defines that interface and :class:`GeminiModelClient`
implements it on top of the ``google-genai`` SDK.  Request handlers depend
only on :class:`ModelClient`, so tests inject a stub implementation.

Error Contract
--------------
Every failure coming out of the SDK (network, quota, safety blocks, invalid
content, model errors) is raised as
:class:`~genai_gateway.core.errors.RemoteServiceError` with the original
exception chained.  Callers do not inspect it; it is reported as an
internal error.

Usage
-----
::

    from genai_gateway.core.config import config, require_api_key
    from genai_gateway.core.model_client import GeminiModelClient

    client = GeminiModelClient(require_api_key(config), config.model_name)
    text = await client.generate_from_text("Say hi")
"""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from typing import Any

from google import genai
from google.genai import types

from genai_gateway.core.encoder import EncodedMediaPart
from genai_gateway.core.errors import RemoteServiceError

logger = logging.getLogger(__name__)


class ModelClient(ABC):
    """Interface every model backend must implement."""

    @abstractmethod
    async def generate_from_text(self, prompt: str) -> str:
        """Generate text from a prompt.

        Raises:
            RemoteServiceError: If the model fails to respond.
        """

    @abstractmethod
    async def generate_from_parts(self, prompt: str, part: EncodedMediaPart) -> str:
        """Generate text from a prompt and one media part.

        Raises:
            RemoteServiceError: If the model fails to respond.
        """


class GeminiModelClient(ModelClient):
    """:class:`ModelClient` backed by the Gemini API.

    One instance is created at application startup and shared, read-only,
    by every request.

    Attributes:
        model_name (str): Gemini model used for every call.
    """

    def __init__(self, api_key: str, model_name: str, client: genai.Client | None = None) -> None:
        """Create the client.

        Args:
            api_key: Gemini API key.
            model_name: Model identifier, e.g. ``"gemini-2.5-flash"``.
            client: Pre-built SDK client.  Built from *api_key* when omitted.
        """
        self.model_name = model_name
        self._client = client if client is not None else genai.Client(api_key=api_key)

    async def generate_from_text(self, prompt: str) -> str:
        return await self._generate(prompt)

    async def generate_from_parts(self, prompt: str, part: EncodedMediaPart) -> str:
        media = types.Part.from_bytes(data=part.decoded(), mime_type=part.mime_type)
        return await self._generate([prompt, media])

    async def _generate(self, contents: Any) -> str:
        """Send *contents* to the model and return the response text."""
        try:
            response = await self._client.aio.models.generate_content(
                model=self.model_name,
                contents=contents,
            )
        except Exception as e:
            raise RemoteServiceError(f"{self.model_name} request failed: {e}") from e

        text = response.text
        if text is None:
            raise RemoteServiceError(f"{self.model_name} returned no text")
        return text
