"""
Port filtering and per-process aggregation.

Connections whose local port contains the user's fragment are grouped by
owning PID. Process identity is looked up once, the first time a PID is
seen; if that lookup fails the connection is dropped and the run goes on.
"""
import logging
from typing import Callable, Dict, Iterable

from portowner.models import ConnectionRecord, ProcessAggregate, ProcessMeta
from portowner.system_inspector import ProcessInspectionError

__all__ = ['ProcessAggregator', 'aggregate_connections', 'port_matches']

logger = logging.getLogger(__name__)

Inspect = Callable[[int], ProcessMeta]


def port_matches(port: int, fragment: str) -> bool:
    """
    True if the decimal port contains fragment anywhere.

    Examples:
        (8080, "80") -> True
        (18, "8") -> True
        (80, "08") -> False
    """
    return fragment in str(port)


class ProcessAggregator:
    """Builds one ProcessAggregate per PID from matching connections."""

    def __init__(self, inspect: Inspect, fragment: str):
        self.inspect = inspect
        self.fragment = fragment
        self.processes: Dict[int, ProcessAggregate] = {}
        self.dropped = 0

    def add(self, record: ConnectionRecord) -> bool:
        """
        Merge one connection record.

        Returns:
            True if the record was counted towards a process
        """
        if not port_matches(record.local_port, self.fragment):
            return False

        # Kernel-owned sockets have no PID
        if not record.pid:
            return False

        aggregate = self.processes.get(record.pid)
        if aggregate is None:
            try:
                meta = self.inspect(record.pid)
            except ProcessInspectionError as e:
                self.dropped += 1
                logger.debug(f"Dropping connection on port {record.local_port}: {e}")
                return False
            aggregate = ProcessAggregate.from_meta(meta)
            self.processes[record.pid] = aggregate

        aggregate.add_connection(record)
        return True

    def aggregate(self, records: Iterable[ConnectionRecord]) -> Dict[int, ProcessAggregate]:
        """Merge every record and return the PID -> aggregate mapping."""
        for record in records:
            self.add(record)

        logger.debug(
            f"Aggregated {len(self.processes)} processes for fragment "
            f"'{self.fragment}' ({self.dropped} connections dropped)"
        )
        return self.processes


def aggregate_connections(
    records: Iterable[ConnectionRecord],
    inspect: Inspect,
    fragment: str
) -> Dict[int, ProcessAggregate]:
    """
    Group connections on ports containing fragment by owning process.

    Args:
        records: Snapshot of the connection table
        inspect: PID -> ProcessMeta lookup, raising ProcessInspectionError
        fragment: Substring to look for in each local port

    Returns:
        Dictionary mapping PID to its ProcessAggregate (possibly empty)
    """
    return ProcessAggregator(inspect, fragment).aggregate(records)
