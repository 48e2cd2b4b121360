"""Typed configuration dataclasses for plsync.

Provides strongly-typed configuration objects that can be used throughout
the application for better type safety and IDE support.
"""
from __future__ import annotations
from dataclasses import dataclass, field, asdict
from typing import Dict, Any


@dataclass
class ServerConfig:
    """Subsonic server connection configuration."""
    url: str | None = None
    username: str | None = None
    password: str | None = None
    api_version: str = "1.16.1"
    client_name: str = "plsync"
    timeout: float = 30
    verify_ssl: bool = True

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


@dataclass
class SyncConfig:
    """Playlist editing and remote sync behaviour."""
    confirm_remove: bool = True
    shutdown_wait_ms: int = 5000

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


@dataclass
class AppConfig:
    """Root application configuration with all subsections."""
    log_level: str = "INFO"
    provider: str = "subsonic"
    server: ServerConfig = field(default_factory=ServerConfig)
    sync: SyncConfig = field(default_factory=SyncConfig)

    def to_dict(self) -> Dict[str, Any]:
        """Convert to nested dictionary matching the load_config() format."""
        return {
            "log_level": self.log_level,
            "provider": self.provider,
            "server": self.server.to_dict(),
            "sync": self.sync.to_dict(),
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> AppConfig:
        """Create typed config from dictionary (from load_config).

        Unknown keys inside a section raise TypeError so typos in environment
        variables surface early.
        """
        return cls(
            log_level=data.get("log_level", "INFO"),
            provider=data.get("provider", "subsonic"),
            server=ServerConfig(**data.get("server", {})),
            sync=SyncConfig(**data.get("sync", {})),
        )


__all__ = ["AppConfig", "ServerConfig", "SyncConfig"]
