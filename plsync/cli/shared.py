"""Shared utilities for CLI and GUI.

This module contains utilities that are used by both CLI and GUI components,
without importing click (which is CLI-only).
"""

from __future__ import annotations
from ..config import validate_server_config
from ..providers import get_provider_instance


def get_client(cfg):
    """Build the remote playlist client from config.

    Args:
        cfg: Configuration dictionary

    Returns:
        Client implementing RemotePlaylistService

    Raises:
        ValueError: If the server section is incomplete
    """
    server = validate_server_config(cfg)
    provider = get_provider_instance(cfg.get('provider', 'subsonic'))
    return provider.create_client(server)
