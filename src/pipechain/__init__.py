"""
Pipechain

Chain of Responsibility pipelines for arbitrary subjects, with a bridge that
lets HTTP-style middleware run as pipes.
"""

from pipechain.core.exceptions import (
    PipechainError,
    InvalidPipe,
    InvalidPipeline,
    MiddlewareInterfaceNotFound,
    InvalidMiddlewareForPipe,
    ConfigurationError,
)
from pipechain.core.pipeline import Pipe, Pipeline, ChainResult
from pipechain.core.config import AppConfig, BridgeSettings, PipelineSettings, ConfigManager
from pipechain.bridge import MIDDLEWARE_RESPONSE, PipelineBridge, get_bridge

__version__ = "1.0.0"

__all__ = [
    'Pipe',
    'Pipeline',
    'ChainResult',
    'PipelineBridge',
    'get_bridge',
    'MIDDLEWARE_RESPONSE',
    'AppConfig',
    'BridgeSettings',
    'PipelineSettings',
    'ConfigManager',
    'PipechainError',
    'InvalidPipe',
    'InvalidPipeline',
    'MiddlewareInterfaceNotFound',
    'InvalidMiddlewareForPipe',
    'ConfigurationError',
]
