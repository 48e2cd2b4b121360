"""CLI package bootstrap.

Defines root group (`cli`) in helpers and imports submodules so their
decorators register commands. Keep this file minimal to avoid circular
imports and duplication.
"""
from plsync.cli.helpers import cli  # root group
from plsync.cli import core  # noqa: F401
from plsync.cli import playlist_cmds  # noqa: F401

__all__ = ["cli"]
