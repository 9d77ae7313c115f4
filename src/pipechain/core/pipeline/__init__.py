"""
Pipeline Infrastructure

Core pipeline components implementing the Chain of Responsibility pattern:
the Pipe interface, descriptor classification and the Pipeline executor.
"""

from .interfaces import Pipe, ChainResult, NextPipe
from .descriptors import (
    PipeDescriptor, NamedFactory, CapabilityInstance, DirectCallable, classify_pipe
)
from .executor import Pipeline

__all__ = [
    'Pipe',
    'ChainResult',
    'NextPipe',
    'PipeDescriptor',
    'NamedFactory',
    'CapabilityInstance',
    'DirectCallable',
    'classify_pipe',
    'Pipeline'
]
