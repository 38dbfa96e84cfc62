"""
Config Module - Black Box Interface

Purpose: Describe which SessionVOC endpoint a client talks to
Interface: ClientConfig, EnvConfigProvider.get_client_config()
Hidden: Environment parsing, defaults, validation
"""

from .provider import (
    DEFAULT_HOST,
    DEFAULT_PORT,
    ClientConfig,
    ConfigProvider,
    EnvConfigProvider,
)

__all__ = [
    "ClientConfig",
    "ConfigProvider",
    "EnvConfigProvider",
    "DEFAULT_HOST",
    "DEFAULT_PORT",
]
