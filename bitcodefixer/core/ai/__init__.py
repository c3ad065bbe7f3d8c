"""
AI Provider Abstraction Layer

Unified interface over OpenAI-compatible completion endpoints.
"""

from bitcodefixer.core.ai.base import BaseAIProvider, AIProviderConfig, AIResponse, build_messages
from bitcodefixer.core.ai.openai_provider import OpenAIProvider

__all__ = [
    "BaseAIProvider",
    "AIProviderConfig",
    "AIResponse",
    "OpenAIProvider",
    "build_messages",
]
