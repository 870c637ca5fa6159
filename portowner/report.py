"""
Text report for aggregated processes.

Each process becomes a block of "Label value" lines followed by a blank
line; the report ends with a total count.
"""
from datetime import datetime, timezone
from typing import Dict, List, Optional

from portowner.models import ProcessAggregate
from portowner.utils import format_uptime, seconds_since


def format_ports(aggregate: ProcessAggregate) -> str:
    """
    Render ports ascending, each with its sorted IPs.

    Example:
        "80(0.0.0.0), 8080([::],127.0.0.1)"
    """
    parts = []
    for port in sorted(aggregate.ports):
        # Unix sockets carry no IP
        ips = [ip for ip in aggregate.port_ips.get(port, ()) if ip]
        if ips:
            parts.append(f"{port}({','.join(sorted(ips))})")
        else:
            parts.append(str(port))
    return ", ".join(parts)


def _join_labels(labels, sort_labels: bool) -> str:
    values = [str(getattr(label, 'value', label)) for label in labels]
    if sort_labels:
        values.sort()
    return ", ".join(values)


def render_process(aggregate: ProcessAggregate, now: Optional[datetime] = None,
                   sort_labels: bool = True) -> List[str]:
    """Lines for one process block, ending with a blank separator."""
    lines = []

    if aggregate.ports:
        lines.append(f"Port {format_ports(aggregate)}")

    lines.append(f"Process {aggregate.name}")
    lines.append(f"PID {aggregate.pid}")
    lines.append(f"Command {aggregate.command}")
    lines.append(f"WorkDirectory {aggregate.workdir}")

    if aggregate.protocols:
        lines.append(f"Protocol {_join_labels(aggregate.protocols, sort_labels)}")
    if aggregate.states:
        lines.append(f"Status {_join_labels(aggregate.states, sort_labels)}")

    uptime = format_uptime(seconds_since(aggregate.started, now))
    lines.append(f"Started {uptime}")
    lines.append("")
    return lines


def no_processes_message(fragment: str) -> str:
    return f"No processes found using ports containing '{fragment}'"


def render_report(
    aggregates: Dict[int, ProcessAggregate],
    fragment: str,
    now: Optional[datetime] = None,
    sort_processes: bool = True,
    sort_labels: bool = True
) -> str:
    """
    Render the full report.

    Args:
        aggregates: PID -> ProcessAggregate mapping from the aggregator
        fragment: Port fragment the user searched for
        now: Reference time for uptimes (defaults to the current time)
        sort_processes: Order blocks by PID instead of mapping order
        sort_labels: Sort protocol and status labels within a block

    Returns:
        Report text without a trailing newline
    """
    if not aggregates:
        return no_processes_message(fragment)

    now = now or datetime.now(timezone.utc)
    pids = sorted(aggregates) if sort_processes else list(aggregates)

    lines = []
    for pid in pids:
        lines.extend(render_process(aggregates[pid], now, sort_labels))

    lines.append(f"Total: {len(pids)} processes found")
    return "\n".join(lines)
