"""
Base AI Provider Interface

Abstract base class for completion providers.
The fixer and the commit assistant only talk to this interface.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import AsyncIterator, List, Dict, Any, Optional


DEFAULT_API_BASE = "https://api.openai.com/v1"
DEFAULT_MODEL = "gpt-4-turbo-preview"


@dataclass
class AIProviderConfig:
    """Configuration for an AI provider."""
    api_key: Optional[str] = None
    base_url: str = DEFAULT_API_BASE
    default_model: str = DEFAULT_MODEL
    temperature: float = 0.2
    max_tokens: Optional[int] = None
    timeout: int = 60


@dataclass
class AIResponse:
    """Standardized AI response."""
    content: str
    model: str
    usage: Optional[Dict[str, int]] = None


class BaseAIProvider(ABC):
    """
    Abstract base class for all AI providers.

    Providers must preserve fragment order when streaming; callers
    rebuild the full response by concatenating what ``stream`` yields.
    """

    def __init__(self, config: AIProviderConfig):
        """
        Initialize the AI provider.

        Args:
            config: Provider configuration
        """
        self.config = config

    @abstractmethod
    def stream(
        self,
        messages: List[Dict[str, Any]],
        model: Optional[str] = None,
        temperature: Optional[float] = None,
        max_tokens: Optional[int] = None,
        **kwargs
    ) -> AsyncIterator[str]:
        """
        Stream responses from the AI provider.

        Args:
            messages: List of message dictionaries
            model: Model name (overrides default)
            temperature: Temperature setting (overrides default)
            max_tokens: Max tokens (overrides default)
            **kwargs: Additional provider-specific parameters

        Yields:
            Content chunks as strings, in arrival order
        """

    @abstractmethod
    async def complete(
        self,
        messages: List[Dict[str, Any]],
        model: Optional[str] = None,
        temperature: Optional[float] = None,
        max_tokens: Optional[int] = None,
        **kwargs
    ) -> AIResponse:
        """
        Get a complete (non-streaming) response.

        Args:
            messages: List of message dictionaries
            model: Model name (overrides default)
            temperature: Temperature setting (overrides default)
            max_tokens: Max tokens (overrides default)
            **kwargs: Additional provider-specific parameters

        Returns:
            AIResponse with complete content
        """


def build_messages(system_prompt: str, user_prompt: str) -> List[Dict[str, Any]]:
    """Two-turn chat payload used by every request in this project."""
    return [
        {"role": "system", "content": system_prompt},
        {"role": "user", "content": user_prompt},
    ]
