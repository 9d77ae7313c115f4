"""
Configuration Models

Pydantic models for the pipeline and bridge settings with validation and
defaults.
"""

import logging
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator


DEFAULT_MIDDLEWARE_INTERFACE = "pipechain.bridge.interfaces.Middleware"
MIDDLEWARE_RESPONSE = "middlewareResponse"

_LOG_LEVELS = ("debug", "info", "warning", "error", "critical")


def _validate_dotted_name(value: Optional[str]) -> Optional[str]:
    if value is None:
        return None
    value = value.strip()
    if not value:
        return None
    if ' ' in value or ('.' not in value and ':' not in value):
        raise ValueError(f"Expected a dotted name like 'package.module.Name', got {value!r}")
    return value


class BridgeSettings(BaseModel):
    """Configuration for the middleware bridge."""

    model_config = ConfigDict(validate_assignment=True, extra='forbid')

    middleware_interface: Optional[str] = Field(
        default=None,
        description="Dotted name of the middleware interface supplied by the host framework"
    )
    middleware_adapter: Optional[str] = Field(
        default=None,
        description="Dotted name of the class wrapping normalized middleware callables"
    )
    default_middleware_interface: str = Field(
        default=DEFAULT_MIDDLEWARE_INTERFACE,
        description="Middleware interface used when no adapter interface is registered"
    )
    response_attribute: str = Field(
        default=MIDDLEWARE_RESPONSE,
        min_length=1,
        description="Request attribute holding the in-flight pipe response"
    )
    container: Optional[str] = Field(
        default=None,
        description="Dotted name of a dependency container (object or zero-arg factory)"
    )

    @field_validator('middleware_interface', 'middleware_adapter', 'container')
    @classmethod
    def validate_optional_names(cls, v: Optional[str]) -> Optional[str]:
        """Validate optional dotted names, treating blanks as unset."""
        return _validate_dotted_name(v)

    @field_validator('default_middleware_interface')
    @classmethod
    def validate_default_interface(cls, v: str) -> str:
        """Validate the default interface dotted name."""
        value = _validate_dotted_name(v)
        if value is None:
            raise ValueError("default_middleware_interface cannot be empty")
        return value


class PipelineSettings(BaseModel):
    """Configuration for pipeline execution."""

    model_config = ConfigDict(validate_assignment=True, extra='forbid')

    report_sealed: bool = Field(
        default=True,
        description="Report failures swallowed by a fallback through the error reporter"
    )
    seal_log_level: str = Field(
        default="warning",
        description="Log level used when reporting sealed failures"
    )

    @field_validator('seal_log_level')
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        """Validate the log level name."""
        level = v.strip().lower()
        if level not in _LOG_LEVELS:
            raise ValueError(f"Invalid log level {v!r}; expected one of {', '.join(_LOG_LEVELS)}")
        return level

    @property
    def seal_log_level_number(self) -> int:
        """The numeric logging level for sealed failures."""
        return logging.getLevelName(self.seal_log_level.upper())


class AppConfig(BaseModel):
    """Root configuration."""

    model_config = ConfigDict(validate_assignment=True, extra='forbid')

    bridge: BridgeSettings = Field(default_factory=BridgeSettings)
    pipeline: PipelineSettings = Field(default_factory=PipelineSettings)
    debug: bool = Field(
        default=False,
        description="Enable debug logging for the pipechain loggers"
    )
