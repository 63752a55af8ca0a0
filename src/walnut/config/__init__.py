"""Configuration for the custom method runtime."""

from walnut.config.settings import WalnutConfig, load_config

__all__ = ["WalnutConfig", "load_config"]
