"""KNXnet/IP tunnelling frame codec."""

from .connection import (
    ConnectionRequest,
    ConnectionResponse,
    ConnectionStateRequest,
    ConnectionStateResponse,
    DisconnectRequest,
    DisconnectResponse,
)
from .dispatch import decode, parse_frame
from .errors import MalformedPacketError
from .hpai import Hpai
from .packet import Packet, ServiceBody
from .services import code_of, name_of
from .telegram import RawTelegram
from .tunnelling import TunnellingAck, TunnellingRequest

__all__ = [
    "ConnectionRequest",
    "ConnectionResponse",
    "ConnectionStateRequest",
    "ConnectionStateResponse",
    "DisconnectRequest",
    "DisconnectResponse",
    "Hpai",
    "MalformedPacketError",
    "Packet",
    "RawTelegram",
    "ServiceBody",
    "TunnellingAck",
    "TunnellingRequest",
    "code_of",
    "decode",
    "name_of",
    "parse_frame",
]
