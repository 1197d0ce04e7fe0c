"""Connection management bodies.

CONNECT_REQUEST / CONNECT_RESPONSE, CONNECTION_STATE_REQUEST /
CONNECTION_STATE_RESPONSE and DISCONNECT_REQUEST / DISCONNECT_RESPONSE.
They only build and read bodies; sequencing them over a socket is up to
the caller.
"""

import struct
from typing import Optional

from . import constants as C
from .errors import MalformedPacketError
from .hpai import Hpai
from .packet import ServiceBody


def parse_individual_address(text: str) -> int:
    """Parse "1.0.0" → 0x1000 (area.line.device as 4.4.8 bits)."""
    parts = text.split(".")
    area, line, device = int(parts[0]), int(parts[1]), int(parts[2])
    return (area << 12) | (line << 8) | device


def format_individual_address(addr: int) -> str:
    """Format 0x1000 → "1.0.0"."""
    return f"{(addr >> 12) & 0x0F}.{(addr >> 8) & 0x0F}.{addr & 0xFF}"


# ---------------------------------------------------------------------------
# CONNECT_REQUEST / CONNECT_RESPONSE
# ---------------------------------------------------------------------------


class ConnectionRequest(ServiceBody):
    """Ask the gateway to open a tunnel.

    Body layout:
      [HPAI control endpoint: 8B] [HPAI data endpoint: 8B] [CRI: 4B]
    CRI (Connection Request Information):
      [length=0x04] [conn_type] [knx_layer] [reserved=0x00]
    """

    SERVICE_TYPE = C.CONNECT_REQUEST
    MIN_BODY_SIZE = 2 * C.HPAI_SIZE + C.CRI_SIZE

    __slots__ = ("control", "data", "connection_type", "knx_layer")

    def __init__(
        self,
        control: Optional[Hpai] = None,
        data: Optional[Hpai] = None,
        connection_type: int = C.TUNNEL_CONNECTION,
        knx_layer: int = C.TUNNEL_LINKLAYER,
    ):
        self.control = control or Hpai()
        self.data = data or Hpai()
        self.connection_type = connection_type & 0xFF
        self.knx_layer = knx_layer & 0xFF

    def body(self) -> bytes:
        cri = struct.pack("!BBBB", C.CRI_SIZE, self.connection_type, self.knx_layer, 0x00)
        return self.control.to_bytes() + self.data.to_bytes() + cri

    @classmethod
    def _decode_body(cls, body: bytes):
        control = Hpai.from_bytes(body, 0)
        data = Hpai.from_bytes(body, C.HPAI_SIZE)
        cri_offset = 2 * C.HPAI_SIZE
        cri_len, conn_type, layer = struct.unpack_from("!BBB", body, cri_offset)
        if cri_len != C.CRI_SIZE:
            raise MalformedPacketError(f"Bad CRI length: {cri_len}")
        return cls(control, data, conn_type, layer)

    def to_dict(self) -> dict:
        return {
            "control": self.control.to_dict(),
            "data": self.data.to_dict(),
            "connection_type": self.connection_type,
            "knx_layer": self.knx_layer,
        }


class ConnectionResponse(ServiceBody):
    """Gateway's answer to a CONNECT_REQUEST.

    Body layout:
      [channel_id: 1B] [status: 1B] [HPAI data endpoint: 8B] [CRD: 4B]
    CRD (Connection Response Data):
      [length=0x04] [conn_type=0x04] [individual_address: 2B]

    Error responses may stop after the status byte.
    """

    SERVICE_TYPE = C.CONNECT_RESPONSE
    MIN_BODY_SIZE = 2

    __slots__ = ("channel_id", "status", "data", "individual_address")

    def __init__(
        self,
        channel_id: int,
        status: int = C.E_NO_ERROR,
        data: Optional[Hpai] = None,
        individual_address: Optional[int] = None,
    ):
        self.channel_id = channel_id & 0xFF
        self.status = status & 0xFF
        self.data = data
        self.individual_address = (
            None if individual_address is None else individual_address & 0xFFFF
        )

    @property
    def ok(self) -> bool:
        return self.status == C.E_NO_ERROR

    def body(self) -> bytes:
        body = struct.pack("!BB", self.channel_id, self.status)
        if self.data is None and self.individual_address is None:
            return body
        body += (self.data or Hpai()).to_bytes()
        body += struct.pack(
            "!BBH", C.CRD_SIZE, C.TUNNEL_CONNECTION, self.individual_address or 0
        )
        return body

    @classmethod
    def _decode_body(cls, body: bytes):
        channel_id, status = struct.unpack_from("!BB", body, 0)
        if len(body) == 2:
            return cls(channel_id, status)
        if len(body) < 2 + C.HPAI_SIZE + C.CRD_SIZE:
            raise MalformedPacketError(
                f"connection.response body truncated: {len(body)} bytes"
            )
        data = Hpai.from_bytes(body, 2)
        crd_offset = 2 + C.HPAI_SIZE
        crd_len, _conn_type, address = struct.unpack_from("!BBH", body, crd_offset)
        if crd_len != C.CRD_SIZE:
            raise MalformedPacketError(f"Bad CRD length: {crd_len}")
        return cls(channel_id, status, data, address)

    def to_dict(self) -> dict:
        return {
            "channel_id": self.channel_id,
            "status": self.status,
            "data": self.data.to_dict() if self.data else None,
            "individual_address": format_individual_address(self.individual_address)
            if self.individual_address is not None
            else None,
        }


# ---------------------------------------------------------------------------
# CONNECTION_STATE / DISCONNECT
# ---------------------------------------------------------------------------


class _ChannelRequest(ServiceBody):
    """[channel_id: 1B] [reserved=0x00] [HPAI control endpoint: 8B]"""

    MIN_BODY_SIZE = 2 + C.HPAI_SIZE

    __slots__ = ("channel_id", "control")

    def __init__(self, channel_id: int, control: Optional[Hpai] = None):
        self.channel_id = channel_id & 0xFF
        self.control = control or Hpai()

    def body(self) -> bytes:
        return struct.pack("!BB", self.channel_id, 0x00) + self.control.to_bytes()

    @classmethod
    def _decode_body(cls, body: bytes):
        return cls(body[0], Hpai.from_bytes(body, 2))

    def to_dict(self) -> dict:
        return {"channel_id": self.channel_id, "control": self.control.to_dict()}


class _ChannelResponse(ServiceBody):
    """[channel_id: 1B] [status: 1B]"""

    MIN_BODY_SIZE = 2

    __slots__ = ("channel_id", "status")

    def __init__(self, channel_id: int, status: int = C.E_NO_ERROR):
        self.channel_id = channel_id & 0xFF
        self.status = status & 0xFF

    def body(self) -> bytes:
        return struct.pack("!BB", self.channel_id, self.status)

    @classmethod
    def _decode_body(cls, body: bytes):
        return cls(body[0], body[1])

    def to_dict(self) -> dict:
        return {"channel_id": self.channel_id, "status": self.status}


class ConnectionStateRequest(_ChannelRequest):
    """Heartbeat for an open channel."""

    SERVICE_TYPE = C.CONNECTION_STATE_REQUEST
    __slots__ = ()


class ConnectionStateResponse(_ChannelResponse):
    SERVICE_TYPE = C.CONNECTION_STATE_RESPONSE
    __slots__ = ()


class DisconnectRequest(_ChannelRequest):
    SERVICE_TYPE = C.DISCONNECT_REQUEST
    __slots__ = ()


class DisconnectResponse(_ChannelResponse):
    SERVICE_TYPE = C.DISCONNECT_RESPONSE
    __slots__ = ()
