"""KNXnet/IP packet envelope.

All frames share a common 6-byte header:
  [header_len=0x06] [protocol=0x10] [service_type: 2B] [total_len: 2B]

After the header, the body varies by service type. Packet holds the service
type and the raw body; ServiceBody subclasses are typed views that know how
to build and interpret one service's body.
"""

import struct

from . import constants as C
from .errors import MalformedPacketError
from .services import name_of

# ---------------------------------------------------------------------------
# Header
# ---------------------------------------------------------------------------


def encode_header(service_type: int, body_len: int) -> bytes:
    """Encode the 6-byte KNXnet/IP header."""
    total = C.HEADER_SIZE + body_len
    if total > C.MAX_TOTAL_LENGTH:
        raise ValueError(f"Frame too large: {total} bytes")
    return struct.pack(
        "!BBHH", C.HEADER_SIZE, C.PROTOCOL_VERSION, service_type & 0xFFFF, total
    )


def decode_header(data: bytes):
    """Decode header → (service_type, total_length). Raises MalformedPacketError on bad header."""
    if len(data) < C.HEADER_SIZE:
        raise MalformedPacketError(
            f"Frame too short: {len(data)} bytes, header needs {C.HEADER_SIZE}"
        )
    hlen, version, service_type, total_len = struct.unpack("!BBHH", data[:6])
    if hlen != C.HEADER_SIZE:
        raise MalformedPacketError(
            f"Expected header length of {C.HEADER_SIZE}, but {hlen} given"
        )
    if version != C.PROTOCOL_VERSION:
        raise MalformedPacketError(
            f"Unsupported protocol version {version:#04x}, only 1.0 is supported"
        )
    return service_type, total_len


# ---------------------------------------------------------------------------
# Envelope
# ---------------------------------------------------------------------------


class Packet:
    """A KNXnet/IP frame: service type plus opaque body bytes.

    The service type is truncated to 16 bits, never rejected. Instances are
    immutable and own a private copy of the payload.
    """

    __slots__ = ("_service_type", "_payload")

    def __init__(self, service_type: int, payload=b""):
        self._service_type = service_type & 0xFFFF
        self._payload = bytes(payload)

    @property
    def service_type(self) -> int:
        return self._service_type

    @property
    def service_name(self) -> str:
        return name_of(self._service_type)

    @property
    def payload(self) -> bytes:
        return self._payload

    def to_bytes(self) -> bytes:
        """Serialize to the wire format: header followed by the payload."""
        return encode_header(self._service_type, len(self._payload)) + self._payload

    def __bytes__(self) -> bytes:
        return self.to_bytes()

    @classmethod
    def parse(cls, data) -> "Packet":
        """Parse a received datagram.

        Accepts bytes, bytearray, memoryview or a list of ints. The payload is
        copied, so the caller may reuse its receive buffer.

        Raises:
            MalformedPacketError: on a short buffer, a wrong header length,
                an unsupported protocol version or a total length that does
                not match the buffer length.
        """
        data = bytes(data)
        service_type, total_len = decode_header(data)
        if total_len != len(data):
            raise MalformedPacketError(
                f"Data has not correct length. Expected {total_len} bytes, got {len(data)}"
            )
        return cls(service_type, data[C.HEADER_SIZE :])

    def describe(self) -> str:
        """Diagnostic rendering, e.g. "<Packet (tunneling.ack) 04 01 00 00>"."""
        hex_bytes = " ".join(f"{b:02x}" for b in self._payload)
        return f"<Packet ({self.service_name}) {hex_bytes}>"

    def __repr__(self) -> str:
        return self.describe()

    def __eq__(self, other):
        if not isinstance(other, Packet):
            return NotImplemented
        return (
            self._service_type == other._service_type
            and self._payload == other._payload
        )

    def __hash__(self):
        return hash((self._service_type, self._payload))


class ServiceBody:
    """Base for typed bodies of a single service type.

    Subclasses set SERVICE_TYPE and implement body(), _decode_body() and
    to_dict(). The envelope itself is always a plain Packet.
    """

    SERVICE_TYPE = 0x0000
    MIN_BODY_SIZE = 0

    __slots__ = ()

    @property
    def service_type(self) -> int:
        return self.SERVICE_TYPE

    @property
    def service_name(self) -> str:
        return name_of(self.SERVICE_TYPE)

    def body(self) -> bytes:
        raise NotImplementedError

    def to_packet(self) -> Packet:
        return Packet(self.SERVICE_TYPE, self.body())

    def to_bytes(self) -> bytes:
        return self.to_packet().to_bytes()

    def __bytes__(self) -> bytes:
        return self.to_bytes()

    @classmethod
    def from_packet(cls, packet: Packet):
        """Interpret a parsed envelope as this service's body."""
        if packet.service_type != cls.SERVICE_TYPE:
            raise MalformedPacketError(
                f"Expected service {name_of(cls.SERVICE_TYPE)}, got {packet.service_name}"
            )
        body = packet.payload
        if len(body) < cls.MIN_BODY_SIZE:
            raise MalformedPacketError(
                f"{packet.service_name} body too short: {len(body)} bytes, "
                f"need at least {cls.MIN_BODY_SIZE}"
            )
        return cls._decode_body(body)

    @classmethod
    def _decode_body(cls, body: bytes):
        raise NotImplementedError

    def to_dict(self) -> dict:
        raise NotImplementedError

    def __eq__(self, other):
        if type(other) is not type(self):
            return NotImplemented
        return self.to_dict() == other.to_dict()

    __hash__ = None

    def __repr__(self) -> str:
        fields = " ".join(f"{k}={v!r}" for k, v in self.to_dict().items())
        return f"<{type(self).__name__} {fields}>"
