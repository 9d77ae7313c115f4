"""
Configuration Management Package

Provides Pydantic-based configuration models and management for Pipechain.
"""

from pipechain.core.config.models import AppConfig, BridgeSettings, PipelineSettings
from pipechain.core.config.manager import ConfigManager

__all__ = [
    "AppConfig",
    "BridgeSettings",
    "PipelineSettings",
    "ConfigManager",
]
