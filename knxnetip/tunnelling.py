"""TUNNELLING_REQUEST / TUNNELLING_ACK bodies.

Both start with the 4-byte connection header:
  [length=0x04] [channel_id] [sequence_counter] [reserved / status]

A request carries the telegram after the header; an ack carries nothing
else and uses the fourth byte as its status code.
"""

import struct

from . import constants as C
from .errors import MalformedPacketError
from .packet import ServiceBody
from .telegram import RawTelegram


def encode_connection_header(channel_id: int, seq: int, last: int = 0x00) -> bytes:
    return struct.pack(
        "!BBBB", C.CONNECTION_HEADER_SIZE, channel_id & 0xFF, seq & 0xFF, last & 0xFF
    )


def decode_connection_header(body: bytes):
    """Decode the connection header → (channel_id, seq, last_byte)."""
    ch_len, channel_id, seq, last = struct.unpack_from("!BBBB", body, 0)
    if ch_len != C.CONNECTION_HEADER_SIZE:
        raise MalformedPacketError(
            f"Expected connection header length of {C.CONNECTION_HEADER_SIZE}, "
            f"but {ch_len} given"
        )
    return channel_id, seq, last


class TunnellingRequest(ServiceBody):
    """A telegram tunnelled over an open channel.

    The message is borrowed, not copied: its get_raw() is called each time
    the request is serialized, so the bytes current at that moment are the
    ones sent.

    Args:
        channel_id: Channel assigned by the gateway's CONNECT_RESPONSE
        sequence: Per-channel send counter (caller wraps it modulo 256)
        message: Telegram source exposing get_raw()
    """

    SERVICE_TYPE = C.TUNNELLING_REQUEST
    MIN_BODY_SIZE = C.CONNECTION_HEADER_SIZE

    __slots__ = ("_channel_id", "_sequence", "_message")

    def __init__(self, channel_id: int, sequence: int, message):
        self._channel_id = channel_id & 0xFF
        self._sequence = sequence & 0xFF
        self._message = message

    @property
    def channel_id(self) -> int:
        return self._channel_id

    @property
    def sequence(self) -> int:
        return self._sequence

    @property
    def message(self):
        return self._message

    def body(self) -> bytes:
        header = encode_connection_header(self._channel_id, self._sequence)
        return header + bytes(self._message.get_raw())

    @classmethod
    def _decode_body(cls, body: bytes):
        channel_id, seq, _reserved = decode_connection_header(body)
        return cls(channel_id, seq, RawTelegram(body[C.CONNECTION_HEADER_SIZE :]))

    def to_dict(self) -> dict:
        return {
            "channel_id": self._channel_id,
            "sequence": self._sequence,
            "telegram": bytes(self._message.get_raw()).hex(),
        }


class TunnellingAck(ServiceBody):
    """Acknowledges a TUNNELLING_REQUEST with the same channel and sequence."""

    SERVICE_TYPE = C.TUNNELLING_ACK
    MIN_BODY_SIZE = C.CONNECTION_HEADER_SIZE

    __slots__ = ("channel_id", "sequence", "status")

    def __init__(self, channel_id: int, sequence: int, status: int = C.E_NO_ERROR):
        self.channel_id = channel_id & 0xFF
        self.sequence = sequence & 0xFF
        self.status = status & 0xFF

    def body(self) -> bytes:
        return encode_connection_header(self.channel_id, self.sequence, self.status)

    @classmethod
    def _decode_body(cls, body: bytes):
        return cls(*decode_connection_header(body))

    def to_dict(self) -> dict:
        return {
            "channel_id": self.channel_id,
            "sequence": self.sequence,
            "status": self.status,
        }
