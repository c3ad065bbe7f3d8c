from bitcodefixer.config.settings import Config, resolve_config

__all__ = ["Config", "resolve_config"]
