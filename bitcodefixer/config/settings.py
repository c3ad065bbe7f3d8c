"""
Configuration resolution.

Each field is taken from the user config file first, then the environment,
then a built-in default. Resolution never raises: a broken config file is
logged and ignored.
"""

import logging
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Mapping, Optional

from bitcodefixer.core.ai.base import AIProviderConfig, DEFAULT_API_BASE, DEFAULT_MODEL
from bitcodefixer.core.errors import ConfigLoadError
from bitcodefixer.services.config_service import ConfigService

logger = logging.getLogger(__name__)

ENV_API_KEY = "OPENAI_API_KEY"
ENV_API_BASE = "OPENAI_API_BASE"
ENV_MODEL = "OPENAI_MODEL"


@dataclass(frozen=True)
class Config:
    """Session-wide settings, read-only once resolved."""
    api_key: str = ""
    api_base: str = DEFAULT_API_BASE
    model: str = DEFAULT_MODEL
    source: Optional[str] = None

    @property
    def has_api_key(self) -> bool:
        return bool(self.api_key)

    def to_provider_config(self) -> AIProviderConfig:
        return AIProviderConfig(
            api_key=self.api_key or None,
            base_url=self.api_base,
            default_model=self.model,
        )

    def with_model(self, model: Optional[str]) -> "Config":
        if not model:
            return self
        return Config(api_key=self.api_key, api_base=self.api_base, model=model, source=self.source)


def resolve_config(
    config_path: Optional[Path] = None,
    environ: Optional[Mapping[str, str]] = None,
) -> Config:
    """
    Resolve API key, base URL and model.

    Args:
        config_path: Config file location (defaults to ~/.codefixrc.json)
        environ: Environment mapping (defaults to os.environ)

    Returns:
        Config with every field populated (api_key may be empty)
    """
    env = os.environ if environ is None else environ
    service = ConfigService(config_path=config_path)
    source = None

    try:
        if service.load():
            source = str(service.config_path)
    except ConfigLoadError as e:
        logger.warning(f"Ignoring config file: {e}")

    api_key = service.get_first("openai.apiKey", "openai.api_key") or env.get(ENV_API_KEY) or ""
    api_base = (
        service.get_first("openai.apiBase", "openai.api_base", "openai.base_url")
        or env.get(ENV_API_BASE)
        or DEFAULT_API_BASE
    )
    model = service.get_first("openai.model") or env.get(ENV_MODEL) or DEFAULT_MODEL

    return Config(api_key=str(api_key), api_base=str(api_base), model=str(model), source=source)
