import json

import pytest
from click.testing import CliRunner

from plsync.cli import cli
from plsync.version import __version__
from tests.mocks.remote import FakePlaylistService


@pytest.fixture
def service(monkeypatch):
    fake = FakePlaylistService(['a', 'b', 'c', 'd'], name='Mix')
    monkeypatch.setattr('plsync.cli.helpers.get_client', lambda cfg: fake)
    return fake


def test_cli_version():
    runner = CliRunner()
    result = runner.invoke(cli, ['--version'])
    assert result.exit_code == 0
    assert 'plsync' in result.output
    assert __version__ in result.output


def test_playlists_lists_server_playlists(service, test_config):
    result = CliRunner().invoke(cli, ['playlists'], obj=test_config)
    assert result.exit_code == 0, result.output
    assert 'Mix' in result.output
    assert '4 tracks' in result.output


def test_show_prints_rows(service, test_config):
    result = CliRunner().invoke(cli, ['show', 'pl1'], obj=test_config)
    assert result.exit_code == 0, result.output
    lines = result.output.strip().splitlines()
    assert lines[0].startswith('Mix (4 tracks)')
    assert lines[1].split() == ['0', 'A']


def test_move_previews_by_default(service, test_config):
    result = CliRunner().invoke(cli, ['move', 'pl1', '--from', '0,1', '--to', '4'], obj=test_config)
    assert result.exit_code == 0, result.output
    assert 'Moved tracks now at rows: 2, 3' in result.output
    assert 'Preview only' in result.output
    assert service.remote_ids == ['a', 'b', 'c', 'd']


def test_move_apply_writes_order(service, test_config):
    result = CliRunner().invoke(cli, ['move', 'pl1', '--from', '3', '--to', '0', '--apply'], obj=test_config)
    assert result.exit_code == 0, result.output
    assert 'Applied to server' in result.output
    assert service.remote_ids == ['d', 'a', 'b', 'c']


def test_remove_apply_with_range(service, test_config):
    result = CliRunner().invoke(cli, ['remove', 'pl1', '1-2', '--apply'], obj=test_config)
    assert result.exit_code == 0, result.output
    assert service.calls[-1] == ('remove_items', 'pl1', [1, 2])


def test_out_of_range_row_is_usage_error(service, test_config):
    result = CliRunner().invoke(cli, ['remove', 'pl1', '9'], obj=test_config)
    assert result.exit_code == 2
    assert 'out of range' in result.output


def test_bad_row_syntax(service, test_config):
    result = CliRunner().invoke(cli, ['remove', 'pl1', 'x'], obj=test_config)
    assert result.exit_code == 2
    assert 'not a row number' in result.output


def test_server_failure_is_reported(service, test_config):
    service.fail.add('replace_playlist_order')
    result = CliRunner().invoke(cli, ['move', 'pl1', '--from', '0', '--to', '2', '--apply'], obj=test_config)
    assert result.exit_code == 1
    assert 'Move failed' in result.output


def test_missing_server_config_is_usage_error():
    result = CliRunner().invoke(cli, ['playlists'], obj={'provider': 'subsonic', 'server': {}})
    assert result.exit_code == 2
    assert 'PLSYNC__SERVER__URL' in result.output


def test_config_redacts_password(test_config):
    result = CliRunner().invoke(cli, ['config'], obj=test_config)
    assert result.exit_code == 0
    data = json.loads(result.output)
    assert data['server']['password'] == '*** redacted ***'
    assert data['server']['username'] == 'alice'
