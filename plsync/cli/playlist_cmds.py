from __future__ import annotations
import click
import logging
from .helpers import cli, client_or_usage_error, parse_positions, _redact_server_config
from ..providers import RemoteServiceError
from ..services.edit_service import EditPreview, preview_move, preview_remove

logger = logging.getLogger(__name__)


def _format_duration(seconds: int | None) -> str:
    if seconds is None:
        return ""
    minutes, secs = divmod(int(seconds), 60)
    return f"{minutes}:{secs:02d}"


def _echo_preview(preview: EditPreview) -> None:
    click.echo(f"Playlist '{preview.playlist_name}' ({preview.playlist_id})")
    click.echo(f"Tracks: {preview.current_count} -> {preview.new_count}")
    click.echo(f"Rows changed: {preview.positional_changes}")
    if preview.action == 'move':
        click.echo(f"Moved tracks now at rows: {', '.join(map(str, preview.new_positions))}")
    else:
        click.echo(f"Removed rows: {', '.join(map(str, preview.new_positions))}")
    if preview.applied:
        click.echo(click.style('Applied to server', fg='green'))
    elif not preview.changed:
        click.echo(click.style('No changes', fg='yellow'))
    else:
        click.echo(click.style('Preview only (use --apply to write to server)', fg='cyan'))


@cli.command(name='playlists')
@click.pass_context
def playlists_cmd(ctx: click.Context):
    """List playlists on the server."""
    client = client_or_usage_error(ctx.obj)
    try:
        playlists = client.get_playlists()
    except (RemoteServiceError, OSError) as e:
        raise click.ClickException(f"Could not list playlists: {e}")
    if not playlists:
        click.echo("No playlists")
        return
    for pl in playlists:
        owner = f" [{pl.owner}]" if pl.owner else ""
        click.echo(f"{pl.playlist_id}\t{pl.name}{owner}\t{pl.song_count} tracks\t{_format_duration(pl.duration_s)}")


@cli.command(name='show')
@click.argument('playlist_id')
@click.pass_context
def show_cmd(ctx: click.Context, playlist_id: str):
    """Show a playlist's tracks with zero-based row numbers."""
    client = client_or_usage_error(ctx.obj)
    try:
        playlist, tracks = client.get_playlist(playlist_id)
    except (RemoteServiceError, OSError) as e:
        raise click.ClickException(f"Could not load playlist {playlist_id}: {e}")
    click.echo(click.style(f"{playlist.name} ({len(tracks)} tracks)", bold=True))
    for row, track in enumerate(tracks):
        artist = f" - {track.artist}" if track.artist else ""
        click.echo(f"{row:>4}  {track.title}{artist}  {_format_duration(track.duration_s)}")


@cli.command(name='move')
@click.argument('playlist_id')
@click.option('--from', 'sources', required=True, help='Rows to move, e.g. 1,3 or 2-4 (zero-based)')
@click.option('--to', 'destination', type=int, required=True, help='Row to drop above, before the move (row count appends)')
@click.option('--apply', is_flag=True, help='Apply changes (otherwise preview only)')
@click.pass_context
def move_cmd(ctx: click.Context, playlist_id: str, sources: str, destination: int, apply: bool):
    """Move tracks to a new position and replace the server order."""
    rows = parse_positions(sources)
    client = client_or_usage_error(ctx.obj)
    try:
        preview = preview_move(client, playlist_id, rows, destination, apply=apply)
    except ValueError as e:
        raise click.UsageError(str(e))
    except (RemoteServiceError, OSError) as e:
        raise click.ClickException(f"Move failed: {e}")
    _echo_preview(preview)


@cli.command(name='remove')
@click.argument('playlist_id')
@click.argument('positions')
@click.option('--apply', is_flag=True, help='Apply changes (otherwise preview only)')
@click.pass_context
def remove_cmd(ctx: click.Context, playlist_id: str, positions: str, apply: bool):
    """Remove tracks by zero-based row (e.g. 0,2 or 3-5)."""
    rows = parse_positions(positions)
    client = client_or_usage_error(ctx.obj)
    try:
        preview = preview_remove(client, playlist_id, rows, apply=apply)
    except ValueError as e:
        raise click.UsageError(str(e))
    except (RemoteServiceError, OSError) as e:
        raise click.ClickException(f"Remove failed: {e}")
    _echo_preview(preview)


@cli.command(name='config')
@click.pass_context
def config_cmd(ctx: click.Context):
    """Show the effective configuration (password redacted)."""
    import json
    click.echo(json.dumps(_redact_server_config(ctx.obj), indent=2))
