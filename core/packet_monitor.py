"""Packet Monitor — ring buffer of recent KNXnet/IP frames.

Stores the last N frames seen by the transport for REST access. Each entry
includes timestamp, direction, remote address, service type and the
diagnostic rendering of the packet. Malformed datagrams are counted and
kept too, so a desynchronised gateway shows up in the history.

Thread-safe: uses a lock since frames arrive from the UDP receive thread.
"""

import logging
import threading
import time
from collections import Counter, deque
from typing import Optional

from knxnetip.packet import Packet

logger = logging.getLogger("knxframe.packet_monitor")

# Direction descriptions for clarity
DIRECTION_INFO = {
    "rx": {"label": "RX", "description": "Received from gateway"},
    "tx": {"label": "TX", "description": "Sent to gateway"},
}


class PacketEntry:
    """A single recorded frame."""

    __slots__ = (
        "timestamp",
        "direction",
        "remote",
        "service_type",
        "service_name",
        "payload_hex",
        "description",
        "error",
    )

    def __init__(
        self,
        direction: str,
        remote: Optional[tuple] = None,
        packet: Optional[Packet] = None,
        raw: bytes = b"",
        error: Optional[str] = None,
    ):
        self.timestamp = time.time()
        self.direction = direction  # "rx" or "tx"
        self.remote = remote
        self.error = error
        if packet is not None:
            self.service_type = packet.service_type
            self.service_name = packet.service_name
            self.payload_hex = packet.payload.hex()
            self.description = packet.describe()
        else:
            self.service_type = None
            self.service_name = None
            self.payload_hex = raw.hex()
            self.description = None

    def to_dict(self) -> dict:
        dir_info = DIRECTION_INFO.get(self.direction, {})
        return {
            "timestamp": self.timestamp,
            "direction": self.direction,
            "direction_label": dir_info.get("label", self.direction.upper()),
            "direction_desc": dir_info.get("description", ""),
            "remote": f"{self.remote[0]}:{self.remote[1]}" if self.remote else None,
            "service_type": self.service_type,
            "service_name": self.service_name,
            "payload": self.payload_hex,
            "description": self.description,
            "error": self.error,
        }


class PacketMonitor:
    """Ring buffer storing recent frames, newest last."""

    def __init__(self, max_size: int = 1000):
        self._max_size = max_size
        self._buffer: deque[PacketEntry] = deque(maxlen=max_size)
        self._lock = threading.Lock()
        self._total_count = 0
        self._malformed_count = 0
        self._direction_counts: Counter = Counter()
        self._service_counts: Counter = Counter()

    def record(self, packet: Packet, direction: str = "rx", remote: Optional[tuple] = None):
        """Record a well-formed frame.

        Args:
            packet: The envelope (typed bodies should pass to_packet())
            direction: "rx" (from gateway) or "tx" (sent by us)
            remote: (ip, port) of the peer, if known
        """
        entry = PacketEntry(direction, remote=remote, packet=packet)
        with self._lock:
            self._buffer.append(entry)
            self._total_count += 1
            self._direction_counts[direction] += 1
            self._service_counts[entry.service_name] += 1

    def record_malformed(self, data: bytes, remote: Optional[tuple], error: Exception):
        """Record a datagram that failed to parse."""
        entry = PacketEntry("rx", remote=remote, raw=bytes(data), error=str(error))
        with self._lock:
            self._buffer.append(entry)
            self._total_count += 1
            self._malformed_count += 1
            self._direction_counts["rx"] += 1

    def get_history(
        self,
        limit: int = 100,
        offset: int = 0,
        direction: Optional[str] = None,
    ) -> list[dict]:
        """Get recorded frames (newest first).

        Args:
            limit: Max entries to return (default 100)
            offset: Skip this many entries from the newest
            direction: Only "rx" or "tx" entries, if given
        """
        with self._lock:
            entries = list(reversed(self._buffer))
        if direction:
            entries = [e for e in entries if e.direction == direction]
        return [e.to_dict() for e in entries[offset : offset + limit]]

    def get_stats(self) -> dict:
        with self._lock:
            return {
                "total_recorded": self._total_count,
                "buffered": len(self._buffer),
                "buffer_max": self._max_size,
                "rx_count": self._direction_counts["rx"],
                "tx_count": self._direction_counts["tx"],
                "malformed_count": self._malformed_count,
                "services": dict(self._service_counts),
            }

    def clear(self):
        """Clear history and counters."""
        with self._lock:
            self._buffer.clear()
            self._total_count = 0
            self._malformed_count = 0
            self._direction_counts.clear()
            self._service_counts.clear()
        logger.info("Packet history cleared")
