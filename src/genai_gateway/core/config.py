"""Configuration management for the GenAI Gateway.

This module provides centralized configuration management using Pydantic Settings.
Configuration is loaded from environment variables with the GATEWAY_ prefix,
except for the two values every deployment of the gateway has always used
unprefixed: ``GOOGLE_API_KEY`` and ``PORT``.

Environment Variable Loading
-----------------------------
Configuration values are loaded in the following priority order:
1. Environment variables (GATEWAY_* prefix, plus GOOGLE_API_KEY and PORT)
2. .env file in the project root
3. Default values defined in GatewayConfig

Example .env file:
    GOOGLE_API_KEY=your-key-here
    PORT=3000
    GATEWAY_MODEL_NAME=gemini-2.5-flash
    GATEWAY_UPLOAD_DIR=uploads

Global Configuration Instance
------------------------------
A global `config` instance is created automatically at module import time.
It is read by the CLI entry point and used as the default by
:func:`genai_gateway.api.main.create_app`.

Usage Example
-------------
    from genai_gateway.core.config import config, require_api_key

    require_api_key(config)
    print(config.model_name)
    print(config.upload_dir)

Directory Management
--------------------
The upload directory is created on initialization.  Uploaded files are only
ever held there for the duration of a single request.
"""

from pathlib import Path
from typing import Literal

from pydantic import AliasChoices, Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from genai_gateway.core.errors import ConfigurationError


class GatewayConfig(BaseSettings):
    """Main configuration for the GenAI Gateway.

    Attributes
    ----------
    Model Settings:
        google_api_key : str | None
            API credential for the Gemini API.  Required to start serving.
        model_name : str
            Gemini model used for every generation request.

    Server Settings:
        host : str
            Bind address for uvicorn.
        port : int
            TCP port to listen on (1-65535, default 3000).
        log_level : Literal["DEBUG", "INFO", "WARNING", "ERROR"]
            Root logging level.

    Paths:
        upload_dir : Path
            Directory that receives uploaded files while a request is
            being handled.

    Examples
    --------
        >>> cfg = GatewayConfig(google_api_key="test", port=8080, _env_file=None)
        >>> cfg.port
        8080
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        env_prefix="GATEWAY_",
        case_sensitive=False,
        extra="ignore",
    )

    google_api_key: str | None = Field(
        default=None,
        validation_alias=AliasChoices("google_api_key", "gateway_google_api_key"),
        description="API credential for the Gemini API",
    )
    model_name: str = Field(
        default="gemini-2.5-flash",
        description="Gemini model used for generation",
    )

    host: str = Field(
        default="0.0.0.0",
        description="Server bind address",
    )
    port: int = Field(
        default=3000,
        validation_alias=AliasChoices("port", "gateway_port"),
        description="Server port",
        ge=1,
        le=65535,
    )
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = Field(
        default="INFO",
        description="Root logging level",
    )

    upload_dir: Path = Field(
        default=Path("uploads"),
        description="Directory for in-flight uploaded files",
    )

    def __init__(self, **kwargs):
        """Initialize configuration and create the upload directory."""
        super().__init__(**kwargs)
        self.upload_dir.mkdir(parents=True, exist_ok=True)


def require_api_key(cfg: GatewayConfig) -> str:
    """Return the configured API key, or raise if it is missing.

    Args:
        cfg: Configuration to check.

    Returns:
        The API key with surrounding whitespace removed.

    Raises:
        ConfigurationError: If ``google_api_key`` is unset or blank.
    """
    key = (cfg.google_api_key or "").strip()
    if not key:
        raise ConfigurationError("GOOGLE_API_KEY is not set in environment variables.")
    return key


# Global configuration instance
config = GatewayConfig()
