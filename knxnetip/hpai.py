"""HPAI (Host Protocol Address Information) — 8 bytes.

  [length=0x08] [protocol=0x01 IPv4/UDP] [ip: 4B] [port: 2B]

0.0.0.0:0 tells the peer to answer to the datagram's source address
(NAT mode).
"""

import socket
import struct

from . import constants as C
from .errors import MalformedPacketError


class Hpai:
    """An IPv4 UDP endpoint as carried inside KNXnet/IP bodies."""

    __slots__ = ("ip", "port", "protocol")

    def __init__(self, ip: str = "0.0.0.0", port: int = 0, protocol: int = C.IPV4_UDP):
        self.ip = ip
        self.port = port & 0xFFFF
        self.protocol = protocol & 0xFF

    @property
    def is_nat(self) -> bool:
        return self.ip == "0.0.0.0" and self.port == 0

    def to_bytes(self) -> bytes:
        try:
            packed_ip = socket.inet_pton(socket.AF_INET, self.ip)
        except (OSError, TypeError):
            raise ValueError(f"Invalid IPv4 address: {self.ip!r}") from None
        return (
            struct.pack("!BB", C.HPAI_SIZE, self.protocol)
            + packed_ip
            + struct.pack("!H", self.port)
        )

    def __bytes__(self) -> bytes:
        return self.to_bytes()

    @classmethod
    def from_bytes(cls, data: bytes, offset: int = 0) -> "Hpai":
        if len(data) - offset < C.HPAI_SIZE:
            raise MalformedPacketError(
                f"HPAI too short: {len(data) - offset} bytes at offset {offset}"
            )
        hlen, protocol = struct.unpack_from("!BB", data, offset)
        if hlen != C.HPAI_SIZE:
            raise MalformedPacketError(f"Bad HPAI length: {hlen}")
        ip = socket.inet_ntoa(bytes(data[offset + 2 : offset + 6]))
        port = struct.unpack_from("!H", data, offset + 6)[0]
        return cls(ip, port, protocol)

    def to_dict(self) -> dict:
        return {"ip": self.ip, "port": self.port, "protocol": self.protocol}

    def __eq__(self, other):
        if not isinstance(other, Hpai):
            return NotImplemented
        return (self.ip, self.port, self.protocol) == (
            other.ip,
            other.port,
            other.protocol,
        )

    __hash__ = None

    def __repr__(self) -> str:
        return f"<Hpai {self.ip}:{self.port}>"
