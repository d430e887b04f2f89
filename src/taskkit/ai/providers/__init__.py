"""
MIT License
Copyright (c) 2026 arpan404
See LICENSE file for full license text.

Module: providers/__init__.py.
"""

from .contracts import GenerationTransport, TransportFactory
from .litellm import LiteLLMTransport

__all__ = [
    "GenerationTransport",
    "TransportFactory",
    "LiteLLMTransport",
]
