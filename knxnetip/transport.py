"""KNXnet/IP UDP transport.

Moves datagrams between the local socket and a gateway:
  - send() serializes a packet or body and writes one datagram
  - the receive thread parses each datagram, decodes its body by service
    type and hands the result to on_packet

Malformed datagrams are logged and dropped. There is no retransmission,
sequence tracking or session timeout here; callers that need them build
them on top of on_packet.
"""

import logging
import socket
import threading
from typing import Callable, Optional

from . import constants as C
from .dispatch import decode
from .errors import MalformedPacketError
from .packet import Packet

logger = logging.getLogger("knxframe.transport")


class UDPTransport:
    """UDP endpoint for KNXnet/IP frames.

    Args:
        host: Local bind address (default 0.0.0.0 — all interfaces)
        port: Local UDP port (default 0 — any free port)
        gateway: (ip, port) of the gateway, the default send destination
        on_packet: Callback for received frames: fn(decoded, addr)
        monitor: Optional PacketMonitor recording rx/tx frames
    """

    def __init__(
        self,
        host: str = "0.0.0.0",
        port: int = 0,
        gateway: Optional[tuple] = None,
        on_packet: Optional[Callable] = None,
        monitor=None,
    ):
        self.host = host
        self.port = port
        self.gateway = gateway
        self.on_packet = on_packet
        self.monitor = monitor

        self._sock: Optional[socket.socket] = None
        self._running = False
        self._thread: Optional[threading.Thread] = None

    @property
    def is_running(self) -> bool:
        return self._running

    @property
    def local_address(self) -> Optional[tuple]:
        if self._sock is None:
            return None
        return self._sock.getsockname()

    def start(self):
        """Bind the socket and start the receive loop in a background thread."""
        self._sock = socket.socket(socket.AF_INET, socket.SOCK_DGRAM)
        self._sock.setsockopt(socket.SOL_SOCKET, socket.SO_REUSEADDR, 1)
        self._sock.bind((self.host, self.port))
        self._sock.settimeout(1.0)  # Allow periodic check of _running flag
        self._running = True
        self._thread = threading.Thread(
            target=self._recv_loop, name="knxip-transport", daemon=True
        )
        self._thread.start()
        logger.info("KNXnet/IP transport bound to %s:%d/udp", *self.local_address)

    def stop(self):
        """Stop the receive loop and close the socket."""
        self._running = False
        if self._thread:
            self._thread.join(timeout=3.0)
        if self._sock:
            self._sock.close()
            self._sock = None
        logger.info("KNXnet/IP transport stopped")

    def send(self, frame, addr: Optional[tuple] = None):
        """Send a Packet, a typed body or raw bytes as one datagram.

        Defaults to the configured gateway when addr is not given.
        """
        if self._sock is None:
            raise RuntimeError("Transport is not started")
        addr = addr or self.gateway
        if addr is None:
            raise ValueError("No destination address and no gateway configured")

        if isinstance(frame, (bytes, bytearray)):
            data = bytes(frame)
            try:
                packet = Packet.parse(data)
            except MalformedPacketError:
                packet = None
        else:
            packet = frame if isinstance(frame, Packet) else frame.to_packet()
            data = packet.to_bytes()

        if packet is not None:
            logger.debug(
                "→ %s to %s:%d (%d bytes)", packet.service_name, addr[0], addr[1], len(data)
            )
            if self.monitor is not None:
                self.monitor.record(packet, direction="tx", remote=addr)
        else:
            logger.debug("→ RAW UDP to %s: %s", addr, data.hex())
        self._send(data, addr)

    def _recv_loop(self):
        """Main receive loop — reads UDP datagrams and hands them to _handle_datagram."""
        while self._running:
            try:
                data, addr = self._sock.recvfrom(C.MAX_TOTAL_LENGTH)
            except socket.timeout:
                continue
            except OSError:
                if self._running:
                    logger.exception("Socket error")
                break

            self._handle_datagram(data, addr)

    def _handle_datagram(self, data: bytes, addr: tuple):
        """Parse, record and dispatch one received datagram."""
        logger.debug("← RAW UDP from %s: %s", addr, data.hex())

        try:
            packet = Packet.parse(data)
            decoded = decode(packet)
        except MalformedPacketError as e:
            logger.warning("Bad frame from %s: %s", addr, e)
            if self.monitor is not None:
                self.monitor.record_malformed(data, addr, e)
            return None

        if self.monitor is not None:
            self.monitor.record(packet, direction="rx", remote=addr)

        if packet.service_type == C.TUNNELLING_REQUEST:
            logger.info(
                "← TUNNEL_REQ ch=%d seq=%d telegram=%s",
                decoded.channel_id,
                decoded.sequence,
                decoded.message.get_raw().hex(),
            )

        if self.on_packet:
            try:
                self.on_packet(decoded, addr)
            except Exception:
                logger.exception(
                    "Error handling %s from %s", packet.service_name, addr
                )
        return decoded

    def _send(self, data: bytes, addr: tuple):
        """Send a UDP datagram."""
        try:
            self._sock.sendto(data, addr)
        except OSError:
            logger.exception("Failed to send to %s", addr)
