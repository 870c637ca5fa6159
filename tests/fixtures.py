"""
Test fixtures and mock data for portowner tests.

This module provides realistic test data constants and helper functions
(NOT pytest fixtures - those are in conftest.py).
"""
import socket
from collections import namedtuple
from datetime import datetime, timedelta, timezone
from typing import Dict, List, Optional

from portowner.models import ConnectionRecord, ProcessMeta
from portowner.system_inspector import ProcessInspectionError


# =============================================================================
# REFERENCE TIME
# =============================================================================

NOW = datetime(2024, 6, 1, 12, 0, 0, tzinfo=timezone.utc)


# =============================================================================
# PSUTIL-SHAPED RAW DATA
# =============================================================================

addr = namedtuple('addr', ['ip', 'port'])
sconn = namedtuple('sconn', ['fd', 'family', 'type', 'laddr', 'raddr', 'status', 'pid'])

SAMPLE_PSUTIL_CONNECTIONS = [
    sconn(3, socket.AF_INET, socket.SOCK_STREAM, addr('0.0.0.0', 8080), (), 'LISTEN', 100),
    sconn(4, socket.AF_INET6, socket.SOCK_STREAM, addr('::', 8080), (), 'LISTEN', 100),
    sconn(5, socket.AF_INET, socket.SOCK_STREAM, addr('127.0.0.1', 8080),
          addr('127.0.0.1', 51000), 'ESTABLISHED', 100),
    sconn(6, socket.AF_INET, socket.SOCK_DGRAM, addr('0.0.0.0', 5353), (), 'NONE', 200),
    sconn(-1, socket.AF_INET, socket.SOCK_STREAM, addr('10.0.0.5', 22),
          addr('10.0.0.9', 60122), 'TIME_WAIT', None),
    sconn(7, socket.AF_UNIX, socket.SOCK_STREAM, '/run/app.sock', '', 'NONE', 300),
]


# =============================================================================
# HELPERS
# =============================================================================

def make_connection(
    pid: Optional[int] = 100,
    port: int = 8080,
    ip: str = '0.0.0.0',
    status: str = 'LISTEN',
    sock_type: int = socket.SOCK_STREAM
) -> ConnectionRecord:
    """Build a ConnectionRecord with sensible defaults."""
    family = socket.AF_INET6 if ':' in ip else socket.AF_INET
    return ConnectionRecord(
        family=family,
        sock_type=sock_type,
        local_ip=ip,
        local_port=port,
        status=status,
        pid=pid,
    )


def make_meta(
    pid: int = 100,
    name: str = 'srv',
    command: str = 'srv --port 8080',
    workdir: str = '/app',
    minutes_ago: int = 65,
    now: datetime = NOW
) -> ProcessMeta:
    """Build a ProcessMeta started minutes_ago before now."""
    return ProcessMeta(
        pid=pid,
        name=name,
        command=command,
        workdir=workdir,
        started=now - timedelta(minutes=minutes_ago),
    )


class FakeInspector:
    """Inspector stand-in that records calls and fails for unknown PIDs."""

    def __init__(self, processes: Dict[int, ProcessMeta]):
        self.processes = processes
        self.calls: List[int] = []

    def __call__(self, pid: int) -> ProcessMeta:
        self.calls.append(pid)
        if pid not in self.processes:
            raise ProcessInspectionError(pid, "NoSuchProcess")
        return self.processes[pid]
