"""
Data models for portowner.

ConnectionRecord and ProcessMeta are the validated snapshots handed over by
the system inspector. ProcessAggregate is the per-process view built while
scanning the connection table.
"""
import socket
from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Dict, Optional, Set

from pydantic import BaseModel, ConfigDict, field_validator

from portowner.utils import to_utc


class Protocol(str, Enum):
    """Transport label shown in the report."""
    TCP = "TCP"
    UDP = "UDP"
    OTHER = "OTHER"


def classify_protocol(sock_type: int) -> Protocol:
    """Map a socket type to its report label; unknown types are OTHER."""
    if sock_type == socket.SOCK_STREAM:
        return Protocol.TCP
    if sock_type == socket.SOCK_DGRAM:
        return Protocol.UDP
    return Protocol.OTHER


def format_ip(ip: str) -> str:
    """
    Format a local IP for display next to its port.

    Examples:
        "::" -> "[::]"
        "::1" -> "[::1]"
        "fe80::1" -> "[fe80::1]"
        "127.0.0.1" -> "127.0.0.1"
    """
    if ip == "::":
        return "[::]"
    if ip == "::1":
        return "[::1]"
    if ":" in ip:
        return f"[{ip}]"
    return ip


class ConnectionRecord(BaseModel):
    """One socket entry from the connection table."""
    model_config = ConfigDict(frozen=True)

    family: int = socket.AF_INET
    sock_type: int = socket.SOCK_STREAM
    local_ip: str = ""
    local_port: int = 0
    remote_ip: Optional[str] = None
    remote_port: Optional[int] = None
    status: str = ""
    pid: Optional[int] = None

    @field_validator('local_port')
    @classmethod
    def validate_port(cls, v: int) -> int:
        if not 0 <= v <= 65535:
            raise ValueError("Port must be between 0 and 65535")
        return v


class ProcessMeta(BaseModel):
    """Identity of a process as reported by the system inspector."""
    model_config = ConfigDict(frozen=True)

    pid: int
    name: str
    command: str = ""
    workdir: str = "~"
    started: datetime

    @field_validator('started')
    @classmethod
    def truncate_to_seconds(cls, v: datetime) -> datetime:
        # Creation times are second-resolution; drop (never round) the rest
        return to_utc(v).replace(microsecond=0)


@dataclass
class ProcessAggregate:
    """Accumulated view of every matching connection owned by one process."""
    pid: int
    name: str
    command: str
    workdir: str
    started: datetime
    protocols: Set[Protocol] = field(default_factory=set)
    states: Set[str] = field(default_factory=set)
    ports: Set[int] = field(default_factory=set)
    port_ips: Dict[int, Set[str]] = field(default_factory=dict)

    @classmethod
    def from_meta(cls, meta: ProcessMeta) -> "ProcessAggregate":
        """Seed an aggregate with identity fields and empty sets."""
        return cls(
            pid=meta.pid,
            name=meta.name,
            command=meta.command,
            workdir=meta.workdir,
            started=meta.started,
        )

    def add_connection(self, record: ConnectionRecord) -> None:
        """Merge one connection; identity fields are never touched."""
        self.protocols.add(classify_protocol(record.sock_type))
        self.states.add(record.status)
        self.ports.add(record.local_port)
        self.port_ips.setdefault(record.local_port, set()).add(format_ip(record.local_ip))
