"""
Shared pytest fixtures for the portowner test suite.

Provides isolated configuration, fake inspectors and sample connections.
"""
import logging
import socket
import time

import pytest

from portowner.config_manager import ConfigManager
from tests.fixtures import FakeInspector, make_connection, make_meta


# ============================================================================
# Configuration Fixtures
# ============================================================================

@pytest.fixture(autouse=True)
def isolated_config(monkeypatch, tmp_path):
    """
    Point the config singleton at an empty temp directory.

    Every test starts with a fresh ConfigManager and no user config file.
    """
    config_path = tmp_path / "config.yaml"
    monkeypatch.setattr(ConfigManager, '_instance', None)
    monkeypatch.setattr(ConfigManager, '_config', None)
    monkeypatch.setattr(ConfigManager, '_get_config_path', lambda self: config_path)
    yield config_path


@pytest.fixture(autouse=True)
def restore_root_logger():
    """Keep setup_logging() calls from leaking handlers between tests."""
    root = logging.getLogger()
    handlers = list(root.handlers)
    level = root.level
    yield
    root.handlers[:] = handlers
    root.setLevel(level)


@pytest.fixture
def new_york_tz(monkeypatch):
    """Run the test with US Eastern local time (DST ends 2024-11-03 06:00 UTC)."""
    if not hasattr(time, 'tzset'):
        pytest.skip("time.tzset() not available on this platform")
    with monkeypatch.context() as patch:
        patch.setenv('TZ', 'EST5EDT,M3.2.0,M11.1.0')
        time.tzset()
        yield
    time.tzset()


# ============================================================================
# Inspector Fixtures
# ============================================================================

@pytest.fixture
def srv_meta():
    """ProcessMeta for a server started 65 minutes before NOW."""
    return make_meta()


@pytest.fixture
def fake_inspector(srv_meta):
    """Inspector that knows PID 100 (srv) and PID 200 (dns) only."""
    return FakeInspector({
        100: srv_meta,
        200: make_meta(pid=200, name='dnsd', command='dnsd -f', workdir='/',
                       minutes_ago=45),
    })


@pytest.fixture
def sample_connections():
    """Mixed TCP/UDP connections across two known PIDs and one vanished PID."""
    return [
        make_connection(pid=100, port=8080, ip='0.0.0.0'),
        make_connection(pid=100, port=8080, ip='::'),
        make_connection(pid=100, port=80, ip='127.0.0.1', status='ESTABLISHED'),
        make_connection(pid=200, port=5380, ip='0.0.0.0', status='NONE',
                        sock_type=socket.SOCK_DGRAM),
        make_connection(pid=999, port=8081, ip='10.0.0.5'),
        make_connection(pid=None, port=8082, ip='10.0.0.5', status='TIME_WAIT'),
    ]
