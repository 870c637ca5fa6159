"""
System inspection for port ownership lookups.

Takes one snapshot of the socket table and resolves process identity on
demand. Uses psutil so the same code works on Linux, macOS and Windows.
"""
import logging
from datetime import datetime, timezone
from typing import List, Optional

import psutil

from portowner.config_manager import InspectorConfig, get_config
from portowner.models import ConnectionRecord, ProcessMeta
from portowner.utils import shorten_home


logger = logging.getLogger(__name__)


class ConnectionSourceError(RuntimeError):
    """The socket table could not be read at all."""

    def __init__(self, message: str, access_denied: bool = False):
        super().__init__(message)
        self.access_denied = access_denied


class ProcessInspectionError(LookupError):
    """A process could not be inspected (exited, access denied, ...)."""

    def __init__(self, pid: int, reason: str):
        super().__init__(f"Cannot inspect PID {pid}: {reason}")
        self.pid = pid
        self.reason = reason


def _split_addr(addr) -> tuple:
    """Return (ip, port) from a psutil address, tolerating empty tuples."""
    if not addr:
        return "", 0
    if hasattr(addr, 'ip'):
        return addr.ip, addr.port
    # AF_UNIX entries carry a path string instead of an address tuple
    if isinstance(addr, str):
        return "", 0
    return addr[0], addr[1]


class SystemInspector:
    """
    Connection source and process inspector backed by psutil.

    get_connections() is called once per run; inspect() is called lazily by
    the aggregator, once per newly seen PID.
    """

    def __init__(self, config: Optional[InspectorConfig] = None):
        """Initialize the inspector with the given (or global) settings."""
        self.config = config or get_config().inspector
        logger.debug(f"Initialized SystemInspector (kind={self.config.connection_kind})")

    def get_connections(self) -> List[ConnectionRecord]:
        """
        Snapshot the system socket table.

        Returns:
            List of ConnectionRecord, one per socket

        Raises:
            ConnectionSourceError: if the table cannot be enumerated
        """
        try:
            raw = psutil.net_connections(kind=self.config.connection_kind)
        except (psutil.Error, OSError, ValueError) as e:
            # macOS refuses the whole table to non-root users
            denied = isinstance(e, (psutil.AccessDenied, PermissionError))
            raise ConnectionSourceError(str(e) or e.__class__.__name__, access_denied=denied) from e

        records = []
        for conn in raw:
            local_ip, local_port = _split_addr(conn.laddr)
            remote_ip, remote_port = _split_addr(conn.raddr)
            records.append(ConnectionRecord(
                family=int(conn.family),
                sock_type=int(conn.type),
                local_ip=local_ip,
                local_port=local_port,
                remote_ip=remote_ip or None,
                remote_port=remote_port or None,
                status=str(conn.status),
                pid=conn.pid,
            ))

        logger.debug(f"Collected {len(records)} connections")
        return records

    def inspect(self, pid: int) -> ProcessMeta:
        """
        Get identity information for a process.

        Args:
            pid: Process ID

        Returns:
            ProcessMeta for the process

        Raises:
            ProcessInspectionError: if the process is gone or inaccessible
        """
        try:
            proc = psutil.Process(pid)
            name = proc.name()
            command = " ".join(proc.cmdline())
            create_time = proc.create_time()
        except (psutil.Error, OSError) as e:
            raise ProcessInspectionError(pid, e.__class__.__name__) from e

        return ProcessMeta(
            pid=pid,
            name=name,
            command=command,
            workdir=self._get_workdir(proc),
            # Truncate to whole seconds; UTC so uptime ignores DST changes
            started=datetime.fromtimestamp(int(create_time), tz=timezone.utc),
        )

    def _get_workdir(self, proc: "psutil.Process") -> str:
        """Working directory for display, or the configured fallback."""
        try:
            cwd = proc.cwd()
        except (psutil.Error, OSError) as e:
            logger.debug(f"No cwd for PID {proc.pid}: {e}")
            return self.config.workdir_fallback

        if not cwd:
            return self.config.workdir_fallback
        if self.config.shorten_home:
            return shorten_home(cwd)
        return cwd
