"""Core functionality for the GenAI Gateway.

- **GatewayConfig**: Configuration management using Pydantic Settings
- **ModelClient**: Interface to the generative model, with a Gemini backend
- **file_to_part**: Encodes a stored file as an inline media part
- **scoped_upload**: Request-scoped storage for uploaded files
"""

from genai_gateway.core.config import GatewayConfig, require_api_key
from genai_gateway.core.encoder import EncodedMediaPart, file_to_part
from genai_gateway.core.errors import (
    ConfigurationError,
    GatewayError,
    RemoteServiceError,
    ValidationError,
)
from genai_gateway.core.model_client import GeminiModelClient, ModelClient
from genai_gateway.core.uploads import StoredUpload, remove_upload, scoped_upload

__all__ = [
    "ConfigurationError",
    "EncodedMediaPart",
    "GatewayConfig",
    "GatewayError",
    "GeminiModelClient",
    "ModelClient",
    "RemoteServiceError",
    "StoredUpload",
    "ValidationError",
    "file_to_part",
    "remove_upload",
    "require_api_key",
    "scoped_upload",
]
