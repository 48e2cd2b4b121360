from __future__ import annotations
import copy
import click
from ..config import load_typed_config
from ..version import __version__

# Import shared utilities (also used by GUI)
from .shared import get_client


def parse_positions(value: str) -> list[int]:
    """Parse a comma separated list of zero-based rows ('1,3,5' or '2-4')."""
    positions: list[int] = []
    for part in value.split(','):
        part = part.strip()
        if not part:
            continue
        try:
            if '-' in part[1:]:
                start, end = part.split('-', 1)
                positions.extend(range(int(start), int(end) + 1))
            else:
                positions.append(int(part))
        except ValueError:
            raise click.BadParameter(f"'{part}' is not a row number or range")
    if not positions:
        raise click.BadParameter("at least one row is required")
    return positions


def _redact_server_config(cfg: dict) -> dict:
    result = copy.deepcopy(cfg)
    server = result.get('server', {})
    if isinstance(server, dict) and server.get('password'):
        server['password'] = '*** redacted ***'
    return result


def client_or_usage_error(cfg: dict):
    try:
        return get_client(cfg)
    except ValueError as e:
        raise click.UsageError(str(e))


@click.group()
@click.version_option(version=__version__, prog_name="plsync")
@click.pass_context
def cli(ctx: click.Context):
    """Edit Subsonic playlists and keep the server in sync.

    \b
    TYPICAL WORKFLOWS:

    \b
    Browse:
      plsync playlists              # List playlists on the server
      plsync show PLAYLIST_ID       # Show tracks with their row numbers

    \b
    Edit (preview first, then --apply):
      plsync move PLAYLIST_ID --from 1,3 --to 4
      plsync remove PLAYLIST_ID 0,2 --apply

    \b
    Desktop:
      plsync gui PLAYLIST_ID        # Drag & drop editor

    \b
    Configure the server with PLSYNC__SERVER__URL, PLSYNC__SERVER__USERNAME
    and PLSYNC__SERVER__PASSWORD (environment or .env).
    """
    if not isinstance(ctx.obj, dict):
        ctx.obj = load_typed_config().to_dict()


__all__ = ["cli", "get_client", "client_or_usage_error", "parse_positions", "_redact_server_config"]
