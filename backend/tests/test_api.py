import pytest

from lightcycle import create_app


def test_index(client):
    res = client.get('/')
    assert res.status_code == 200
    assert 'message' in res.get_json()


def test_state_view(client, controller):
    controller.connect('a')
    res = client.get('/api/state')
    assert res.status_code == 200
    data = res.get_json()
    assert data['phase'] == 'lobby'
    assert data['players'] == {'red': True, 'blue': False}
    assert data['running'] is False
    assert data['winner'] is None
    assert set(data['bikes']) == {'red', 'blue'}
    assert len(data['pickups']) == 1


def test_state_view_tracks_running_match(client, controller):
    controller.connect('a')
    controller.connect('b')
    controller.start('a')
    controller.tick()
    data = client.get('/api/state').get_json()
    assert data['phase'] == 'active'
    assert data['bikes']['red']['trail'] == [{'x': 120, 'y': 300}]


def test_board_command(flask_app):
    runner = flask_app.test_cli_runner()
    result = runner.invoke(args=['board'])
    assert result.exit_code == 0
    assert 'board 600x600' in result.output
    assert 'cells=30x30' in result.output
    assert 'tick=67ms' in result.output


def _config(**overrides):
    from conftest import TestConfig
    return type('Cfg', (TestConfig,), overrides)


@pytest.mark.parametrize('overrides', [
    {'BOARD_WIDTH': 610},
    {'CELL_SIZE': 0},
    {'TICKS_PER_SECOND': 0},
])
def test_invalid_geometry_rejected(overrides):
    with pytest.raises(ValueError):
        create_app(_config(**overrides))


def test_custom_board_start_positions():
    app = create_app(_config(BOARD_WIDTH=1200, BOARD_HEIGHT=400, CELL_SIZE=40))
    match = app.extensions['lightcycle'].match
    assert match.bikes[0].position == (200, 200)
    assert match.bikes[1].position == (1000, 200)


def test_unsafe_werkzeug_off_unless_requested(monkeypatch):
    import importlib
    import config

    monkeypatch.delenv('ALLOW_UNSAFE_WERKZEUG', raising=False)
    assert importlib.reload(config).Config.ALLOW_UNSAFE_WERKZEUG is False
    monkeypatch.setenv('ALLOW_UNSAFE_WERKZEUG', '1')
    assert importlib.reload(config).Config.ALLOW_UNSAFE_WERKZEUG is True
    monkeypatch.delenv('ALLOW_UNSAFE_WERKZEUG')
    importlib.reload(config)
