from pathlib import Path
import logging
import textwrap

import pytest

from plsync.config import coerce_scalar, deep_merge, load_config, load_typed_config, validate_server_config


def test_deep_merge_simple():
    a = {'a': 1, 'b': {'x': 1, 'y': 2}}
    b = {'b': {'y': 99, 'z': 5}, 'c': 3}
    merged = deep_merge(a, b)
    assert merged['a'] == 1
    assert merged['b']['x'] == 1
    assert merged['b']['y'] == 99
    assert merged['b']['z'] == 5
    assert merged['c'] == 3
    # inputs untouched
    assert a['b'] == {'x': 1, 'y': 2}


def test_coerce_scalar():
    assert coerce_scalar('true') is True
    assert coerce_scalar('No') is False
    assert coerce_scalar('10') == 10
    assert coerce_scalar('-3') == -3
    assert isinstance(coerce_scalar('2.5'), float)
    assert coerce_scalar('https://music.test') == 'https://music.test'
    assert coerce_scalar('[1, 2]') == [1, 2]


def test_defaults_without_environment():
    cfg = load_config()
    assert cfg['provider'] == 'subsonic'
    assert cfg['server']['url'] is None
    assert cfg['sync']['confirm_remove'] is True


def test_load_config_dotenv_and_env(tmp_path: Path, monkeypatch):
    """.env is read when enabled and real environment variables override it."""
    env_file = tmp_path / '.env'
    env_file.write_text(textwrap.dedent('''\
    # server settings
    PLSYNC__SERVER__URL="https://music.example.com"
    PLSYNC__SERVER__USERNAME=bob  # inline comment
    PLSYNC__SYNC__CONFIRM_REMOVE=false
    OTHER_TOOL__SETTING=ignored
    '''), encoding='utf-8')
    monkeypatch.chdir(tmp_path)
    monkeypatch.setenv('PLSYNC_ENABLE_DOTENV', '1')
    monkeypatch.setenv('PLSYNC__SERVER__USERNAME', 'carol')
    monkeypatch.setenv('PLSYNC__SERVER__TIMEOUT', '12')

    cfg = load_config()

    assert cfg['server']['url'] == 'https://music.example.com'
    assert cfg['server']['username'] == 'carol'
    assert cfg['server']['timeout'] == 12
    assert cfg['sync']['confirm_remove'] is False
    assert 'other_tool' not in cfg


def test_dotenv_skipped_under_pytest(tmp_path: Path, monkeypatch):
    (tmp_path / '.env').write_text('PLSYNC__SERVER__URL=https://from-dotenv.test\n', encoding='utf-8')
    monkeypatch.chdir(tmp_path)
    monkeypatch.delenv('PLSYNC_ENABLE_DOTENV', raising=False)

    cfg = load_config()

    assert cfg['server']['url'] is None


def test_overrides_win(monkeypatch):
    monkeypatch.setenv('PLSYNC__LOG_LEVEL', 'WARNING')
    cfg = load_config({'log_level': 'DEBUG', 'server': {'url': 'http://override.test'}})
    assert cfg['log_level'] == 'DEBUG'
    assert cfg['server']['url'] == 'http://override.test'
    assert cfg['server']['api_version'] == '1.16.1'
    assert logging.getLogger().level == logging.DEBUG


def test_load_typed_config(monkeypatch):
    monkeypatch.setenv('PLSYNC__SYNC__SHUTDOWN_WAIT_MS', '250')
    config = load_typed_config()
    assert config.sync.shutdown_wait_ms == 250


def test_validate_server_config(test_config):
    assert validate_server_config(test_config)['username'] == 'alice'

    with pytest.raises(ValueError, match='PLSYNC__SERVER__PASSWORD'):
        validate_server_config({'server': {'url': 'http://x', 'username': 'u'}})


@pytest.mark.parametrize('password', ['007', 'yes', '1.5', '[x]'])
def test_credentials_are_not_coerced(monkeypatch, password):
    monkeypatch.setenv('PLSYNC__SERVER__URL', 'http://music.test')
    monkeypatch.setenv('PLSYNC__SERVER__USERNAME', '1234')
    monkeypatch.setenv('PLSYNC__SERVER__PASSWORD', password)
    monkeypatch.setenv('PLSYNC__SERVER__TIMEOUT', '12')

    cfg = load_config()

    assert cfg['server']['password'] == password
    assert cfg['server']['username'] == '1234'
    # Non-credential settings are still coerced
    assert cfg['server']['timeout'] == 12


def test_client_hashes_password_verbatim(monkeypatch):
    from plsync.cli.shared import get_client
    monkeypatch.setenv('PLSYNC__SERVER__URL', 'http://music.test')
    monkeypatch.setenv('PLSYNC__SERVER__USERNAME', 'alice')
    monkeypatch.setenv('PLSYNC__SERVER__PASSWORD', '007')

    client = get_client(load_config())

    assert client.password == '007'
