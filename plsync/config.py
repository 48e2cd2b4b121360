"""Configuration loading.

Values are layered, later layers winning:

    built-in defaults <- .env file <- PLSYNC__* environment <- explicit overrides

Environment keys map onto nested sections with double underscores, e.g.
``PLSYNC__SERVER__URL=https://music.example.com`` sets ``cfg['server']['url']``.
"""
from __future__ import annotations
import copy
import json
import logging
import os
from pathlib import Path
from typing import Any, Dict, Iterable, Tuple

logger = logging.getLogger(__name__)

ENV_PREFIX = "PLSYNC__"

_DEFAULTS: Dict[str, Any] = {
    "log_level": "INFO",
    "provider": "subsonic",
    "server": {
        "url": None,
        "username": None,
        "password": None,
        "api_version": "1.16.1",
        "client_name": "plsync",
        "timeout": 30,
        "verify_ssl": True,
    },
    "sync": {
        "confirm_remove": True,  # Ask before removing tracks in the GUI
        "shutdown_wait_ms": 5000,  # Grace period for in-flight remote calls on exit
    },
}

_BOOL_WORDS = {"true": True, "yes": True, "false": False, "no": False}

# Free-text settings are kept verbatim, never coerced
_STRING_KEYS = {
    ("server", "url"),
    ("server", "username"),
    ("server", "password"),
    ("server", "api_version"),
    ("server", "client_name"),
}


def validate_server_config(cfg: Dict[str, Any]) -> Dict[str, Any]:
    """Return the server section, raising ValueError if url/username/password is unset."""
    server = cfg.get('server') or {}
    missing = [key for key in ('url', 'username', 'password') if not server.get(key)]
    if missing:
        hints = ", ".join(f"{ENV_PREFIX}SERVER__{key.upper()}" for key in missing)
        raise ValueError(f"Server not configured: missing {', '.join(missing)}. Please set {hints}")
    logger.debug(f"Using server: {server['url']}")
    return server


def deep_merge(base: Dict[str, Any], override: Dict[str, Any]) -> Dict[str, Any]:
    """Return a new dict with ``override`` layered onto ``base``; nested sections merge."""
    merged = dict(base)
    for key, value in override.items():
        current = merged.get(key)
        merged[key] = deep_merge(current, value) if isinstance(current, dict) and isinstance(value, dict) else value
    return merged


def _parse_dotenv_line(line: str) -> Tuple[str, str] | None:
    line = line.strip()
    if line.startswith('#') or '=' not in line:
        return None
    key, _, raw = line.partition('=')
    raw = raw.strip()
    quoted = len(raw) >= 2 and raw[0] == raw[-1] and raw[0] in ('"', "'")
    if quoted:
        raw = raw[1:-1]
    elif '#' in raw:
        raw = raw.split('#', 1)[0].rstrip()
    return (key.strip(), raw) if key.strip() else None


def _read_dotenv(path: Path) -> Dict[str, str]:
    if not path.is_file():
        return {}
    parsed = (_parse_dotenv_line(line) for line in path.read_text(encoding='utf-8').splitlines())
    return dict(item for item in parsed if item is not None)


def _apply_env(cfg: Dict[str, Any], items: Iterable[Tuple[str, str]]) -> None:
    for raw_key, raw_value in items:
        if not raw_key.startswith(ENV_PREFIX):
            continue
        *sections, leaf = raw_key[len(ENV_PREFIX):].lower().split("__")
        node = cfg
        for section in sections:
            node = node.setdefault(section, {})
        path = (*sections, leaf)
        node[leaf] = raw_value if path in _STRING_KEYS else coerce_scalar(raw_value)


def load_config(overrides: Dict[str, Any] | None = None, dotenv_path: Path | None = None) -> Dict[str, Any]:
    """Build the configuration dict and configure logging from it.

    Under pytest (PYTEST_CURRENT_TEST set) the .env file is ignored unless
    PLSYNC_ENABLE_DOTENV is set, so a developer's local file cannot leak into
    test runs.

    Args:
        overrides: Values merged last
        dotenv_path: .env location (default: ./.env)

    Returns:
        Nested configuration dict; see load_typed_config() for a typed view
    """
    use_dotenv = bool(os.environ.get('PLSYNC_ENABLE_DOTENV')) or not os.environ.get('PYTEST_CURRENT_TEST')
    cfg = copy.deepcopy(_DEFAULTS)
    if use_dotenv:
        _apply_env(cfg, _read_dotenv(dotenv_path or Path('.env')).items())
    _apply_env(cfg, os.environ.items())
    if overrides:
        cfg = deep_merge(cfg, overrides)

    _configure_logging(cfg.get('log_level', 'INFO'))
    return cfg


def load_typed_config(overrides: Dict[str, Any] | None = None):
    """Same as load_config() but returns an AppConfig."""
    from .config_types import AppConfig
    return AppConfig.from_dict(load_config(overrides))


def _configure_logging(level_str: str, fmt: str = '%(message)s') -> None:
    level = logging.getLevelName(str(level_str).upper())
    logging.basicConfig(
        level=level if isinstance(level, int) else logging.INFO,
        format=fmt,
        force=True,
    )


def coerce_scalar(value: str) -> Any:
    """Turn an environment string into bool, int, float, JSON list/dict or str."""
    text = value.strip()
    if text[:1] + text[-1:] in ('[]', '{}'):
        try:
            return json.loads(text)
        except ValueError:
            return text
    if text.lower() in _BOOL_WORDS:
        return _BOOL_WORDS[text.lower()]
    if (text[1:] if text.startswith('-') else text).isdigit():
        return int(text)
    try:
        return float(text)
    except ValueError:
        return text


__all__ = ["load_config", "deep_merge", "load_typed_config", "validate_server_config", "coerce_scalar"]
