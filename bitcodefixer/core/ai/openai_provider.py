"""
OpenAI Provider Implementation

Concrete implementation of BaseAIProvider for OpenAI-compatible APIs.
"""

import logging
from typing import AsyncIterator, List, Dict, Any, Optional
from openai import AsyncOpenAI

from bitcodefixer.core.ai.base import (
    BaseAIProvider,
    AIProviderConfig,
    AIResponse,
)

logger = logging.getLogger(__name__)


class OpenAIProvider(BaseAIProvider):
    """OpenAI API provider implementation."""

    def __init__(self, config: AIProviderConfig, client: Optional[AsyncOpenAI] = None):
        """Initialize OpenAI provider."""
        super().__init__(config)
        if client is None:
            if not config.api_key:
                raise ValueError("OpenAI API key is required")
            client = AsyncOpenAI(
                api_key=config.api_key,
                base_url=config.base_url,
                timeout=config.timeout,
            )
        self.client = client
        logger.info(f"OpenAIProvider initialized with model: {config.default_model} ({config.base_url})")

    def _request_args(
        self,
        model: Optional[str],
        temperature: Optional[float],
        max_tokens: Optional[int],
    ) -> Dict[str, Any]:
        args: Dict[str, Any] = {
            "model": model or self.config.default_model,
            "temperature": temperature if temperature is not None else self.config.temperature,
        }
        max_tokens = max_tokens or self.config.max_tokens
        if max_tokens:
            args["max_tokens"] = max_tokens
        return args

    async def stream(
        self,
        messages: List[Dict[str, Any]],
        model: Optional[str] = None,
        temperature: Optional[float] = None,
        max_tokens: Optional[int] = None,
        **kwargs
    ) -> AsyncIterator[str]:
        """Stream responses from OpenAI."""
        stream = await self.client.chat.completions.create(
            messages=messages,
            stream=True,
            **self._request_args(model, temperature, max_tokens),
            **kwargs
        )

        async for chunk in stream:
            if chunk.choices:
                content = chunk.choices[0].delta.content
                if content:
                    yield content

    async def complete(
        self,
        messages: List[Dict[str, Any]],
        model: Optional[str] = None,
        temperature: Optional[float] = None,
        max_tokens: Optional[int] = None,
        **kwargs
    ) -> AIResponse:
        """Get complete response from OpenAI."""
        args = self._request_args(model, temperature, max_tokens)
        response = await self.client.chat.completions.create(
            messages=messages,
            stream=False,
            **args,
            **kwargs
        )

        content = ""
        if response.choices:
            content = response.choices[0].message.content or ""

        return AIResponse(
            content=content,
            model=args["model"],
            usage={
                "prompt_tokens": response.usage.prompt_tokens,
                "completion_tokens": response.usage.completion_tokens,
                "total_tokens": response.usage.total_tokens,
            } if response.usage else None,
        )
