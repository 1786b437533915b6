"""Pydantic configuration models with validation."""

from __future__ import annotations

from typing import Any, Literal, Optional

from pydantic import (
    AliasChoices,
    AliasPath,
    BaseModel,
    Field,
    field_validator,
    model_validator,
)
from pydantic_settings import BaseSettings, SettingsConfigDict

Environment = Literal["dev", "test", "prod"]
LogLevel = Literal["DEBUG", "INFO", "WARNING", "ERROR"]
LogFormat = Literal["json", "console"]


class YouTubeConfig(BaseModel):
    """Settings of the YouTube handler (YAML section ``youtube``)."""

    host: str = Field(
        default="www.youtube.com",
        description="Host serving the metadata endpoint, watch page and player.",
    )
    video_mime_type: str = Field(
        default="video/mp4",
        description="Container of progressive (muxed) streams to keep.",
    )
    audio_mime_type: str = Field(
        default="audio/mp4",
        description="Container of adaptive audio-only streams to keep.",
    )

    @field_validator("host")
    @classmethod
    def _validate_host(cls, v: str) -> str:
        v = v.strip().rstrip("/")
        if not v or "/" in v:
            raise ValueError("youtube.host must be a bare host name")
        return v


class AppConfig(BaseModel):
    """
    Canonical application configuration (validated, final).

    Note:
    - YAML is expected to be sectioned (http/logging/youtube).
    - Environment variables are handled by EnvOverrides(BaseSettings) to allow strict
      precedence control (defaults < YAML < ENV < CLI) in load.py.
    """

    # General
    app_name: str = Field(default="ytresolve", description="Application name.")
    environment: Environment = Field(
        default="dev",
        description="Runtime environment (affects defaults like log format).",
    )

    # HTTP (YAML section: http.*)
    http_timeout_seconds: float = Field(
        default=30.0,
        validation_alias=AliasChoices(
            "http_timeout_seconds",
            AliasPath("http", "timeout_seconds"),
        ),
        description="Upper bound for every outbound request, in seconds.",
    )
    http_user_agent: str = Field(
        default="ytresolve/0.1.0",
        validation_alias=AliasChoices(
            "http_user_agent",
            AliasPath("http", "user_agent"),
        ),
        description="User-Agent for outgoing HTTP requests.",
    )
    http_verify_tls: bool = Field(
        default=False,
        validation_alias=AliasChoices(
            "http_verify_tls",
            AliasPath("http", "verify_tls"),
        ),
        description=(
            "Verify peer certificates and host names on outbound requests. "
            "Disabled by default to match the platform client this tool "
            "impersonates; enable it unless you know you need otherwise."
        ),
    )

    # Logging (YAML section: logging.*)
    log_level: LogLevel = Field(
        default="INFO",
        validation_alias=AliasChoices(
            "log_level",
            AliasPath("logging", "level"),
        ),
        description="Log level.",
    )
    log_format: Optional[LogFormat] = Field(
        default=None,
        validation_alias=AliasChoices(
            "log_format",
            AliasPath("logging", "format"),
        ),
        description=(
            "Log renderer format (console/json). If unset, derived from environment."
        ),
    )

    # YouTube handler (YAML section: youtube.*)
    youtube: YouTubeConfig = Field(default_factory=YouTubeConfig)

    @field_validator("http_timeout_seconds")
    @classmethod
    def _validate_http_timeout(cls, v: float) -> float:
        if v <= 0:
            raise ValueError("http_timeout_seconds must be > 0")
        return v

    @model_validator(mode="after")
    def _derive_defaults(self) -> "AppConfig":
        # Default log format: console in dev/test, json in prod.
        if self.log_format is None:
            self.log_format = "json" if self.environment == "prod" else "console"
        return self

    def to_sectioned_dict(self) -> dict[str, Any]:
        """
        Dump configuration in the sectioned shape used by config.yaml/docs.
        """
        return {
            "app_name": self.app_name,
            "environment": self.environment,
            "http": {
                "timeout_seconds": self.http_timeout_seconds,
                "user_agent": self.http_user_agent,
                "verify_tls": self.http_verify_tls,
            },
            "logging": {"level": self.log_level, "format": self.log_format},
            "youtube": self.youtube.model_dump(),
        }


class EnvOverrides(BaseSettings):
    """
    Environment-variable overrides (all optional).

    Intended usage:
    - load.py creates EnvOverrides() to read YTRESOLVE_* variables,
      converts to dict of set values, merges into YAML/defaults,
      then validates AppConfig.

    Supported env var examples (flat, explicit):
    - YTRESOLVE_HTTP_TIMEOUT_SECONDS
    - YTRESOLVE_HTTP_VERIFY_TLS
    - YTRESOLVE_LOG_LEVEL
    - YTRESOLVE_YOUTUBE_HOST
    """

    model_config = SettingsConfigDict(
        env_prefix="YTRESOLVE_",
        extra="ignore",
        case_sensitive=False,
    )

    app_name: Optional[str] = None
    environment: Optional[Environment] = None

    http_timeout_seconds: Optional[float] = None
    http_user_agent: Optional[str] = None
    http_verify_tls: Optional[bool] = None

    log_level: Optional[LogLevel] = None
    log_format: Optional[LogFormat] = None

    youtube_host: Optional[str] = None
    youtube_video_mime_type: Optional[str] = None
    youtube_audio_mime_type: Optional[str] = None

    def to_update_dict(self) -> dict[str, Any]:
        """
        Return only values that were actually provided (non-None), for merging.
        """
        return self.model_dump(exclude_none=True)
