"""Core CLI module - GUI launcher.

Command modules are organized by functionality:
- playlist_cmds: Listing, showing and editing playlists
"""

from __future__ import annotations
import click
import logging

from .helpers import cli

logger = logging.getLogger(__name__)


@cli.command()
@click.argument('playlist_id')
@click.pass_context
def gui(ctx: click.Context, playlist_id: str):
    """Launch the desktop playlist editor.

    \b
    Features:
    - Drag rows to reorder (server order is replaced in the background)
    - Drop tracks from other plsync windows to insert them
    - Delete selected tracks
    - Create a new playlist from the selection

    \b
    Example:
        plsync gui 42
    """
    import sys

    try:
        from plsync.gui.app import main as gui_main
    except ImportError as e:
        if "PySide6" in str(e):
            click.echo(click.style("Error: PySide6 not installed", fg="red", bold=True))
            click.echo("Install it with:")
            click.echo(click.style("  pip install PySide6>=6.6.0", fg="cyan"))
            sys.exit(1)
        raise
    sys.exit(gui_main(playlist_id, cfg=ctx.obj))
