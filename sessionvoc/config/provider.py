"""Configuration provider following Black Box Design principles."""
import os
from dataclasses import dataclass, field
from typing import Any, Dict, Mapping, Optional, Protocol

DEFAULT_HOST = "localhost"
DEFAULT_PORT = 8208
DEFAULT_SCHEME = "http"


@dataclass
class ClientConfig:
    """SessionVOC endpoint configuration."""
    host: str = DEFAULT_HOST
    port: int = DEFAULT_PORT
    scheme: str = DEFAULT_SCHEME
    headers: Dict[str, str] = field(default_factory=dict)

    def __post_init__(self):
        if isinstance(self.port, bool) or not isinstance(self.port, int):
            raise ValueError(f"port must be an integer, got {self.port!r}")
        if not 0 < self.port < 65536:
            raise ValueError(f"port must be between 1 and 65535, got {self.port}")
        if self.scheme not in ("http", "https"):
            raise ValueError(f"scheme must be 'http' or 'https', got {self.scheme!r}")

    @property
    def base_url(self) -> str:
        """Root URL every resource path is appended to."""
        return f"{self.scheme}://{self.host}:{self.port}"

    @classmethod
    def from_mapping(cls, options: Optional[Mapping[str, Any]]) -> "ClientConfig":
        """
        Build a config from a ``{"host": ..., "port": ...}`` options mapping.

        Missing or empty values fall back to the defaults.
        """
        options = options or {}
        return cls(
            host=options.get("host") or DEFAULT_HOST,
            port=int(options.get("port") or DEFAULT_PORT),
            scheme=options.get("scheme") or DEFAULT_SCHEME,
            headers=dict(options.get("headers") or {}),
        )


class ConfigProvider(Protocol):
    """Protocol for configuration providers."""

    def get_client_config(self) -> ClientConfig:
        """Get SessionVOC client configuration."""
        ...


class EnvConfigProvider:
    """Environment-based configuration provider."""

    def get_client_config(self) -> ClientConfig:
        """Get client configuration from environment variables."""
        return ClientConfig(
            host=os.getenv("SESSIONVOC_HOST", DEFAULT_HOST),
            port=int(os.getenv("SESSIONVOC_PORT", str(DEFAULT_PORT))),
            scheme=os.getenv("SESSIONVOC_SCHEME", DEFAULT_SCHEME).lower(),
        )
