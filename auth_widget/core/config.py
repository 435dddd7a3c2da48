# Copyright (c) 2026 Auth Widget Contributors. All Rights Reserved.

"""
Auth Widget Configuration — Environment-driven settings.

All configuration is loaded from environment variables (or .env file).
"""

from __future__ import annotations

from pydantic import Field
from pydantic_settings import BaseSettings


class WidgetSettings(BaseSettings):
    """Widget-wide configuration loaded from environment."""

    # --- Auth / data service ---
    AUTH_API_URL: str = Field(
        default="http://localhost:54321",
        description="Base URL of the auth API (edge functions + REST data)",
    )
    AUTH_API_ANON_KEY: str = Field(
        default="",
        description="Public anon key sent as bearer + apikey headers",
    )
    CLIENT_INFO: str = Field(
        default="authsystem-public-form/1.0",
        description="X-Client-Info header sent with gateway submissions",
    )

    # --- IP reputation ---
    IP_ECHO_URL: str = Field(
        default="https://api.ipify.org?format=json",
        description="Public IP echo service, must answer {\"ip\": ...}",
    )

    # --- Token storage ---
    REDIS_URL: str = Field(
        default="redis://localhost:6379/0",
        description="Redis connection URL for persisted tokens",
    )
    TOKEN_KEY_PREFIX: str = Field(
        default="widget",
        description="Namespace prefix for persisted token keys",
    )

    # --- Widget ---
    DEFAULT_APP_ID: str = Field(
        default="",
        description="Fallback app_id when the query string omits it",
    )
    HTTP_TIMEOUT: float = Field(
        default=30.0,
        description="Timeout in seconds for every outbound HTTP call",
    )
    LOG_LEVEL: str = Field(default="INFO")
    WIDGET_ENV: str = Field(
        default="dev",
        description="Environment: dev | prod",
    )

    model_config = {
        "env_file": ".env",
        "env_file_encoding": "utf-8",
        "case_sensitive": True,
    }


# Global singleton
settings = WidgetSettings()
