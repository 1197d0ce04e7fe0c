"""Decode a received envelope into the typed body for its service type."""

import logging

from . import constants as C
from .connection import (
    ConnectionRequest,
    ConnectionResponse,
    ConnectionStateRequest,
    ConnectionStateResponse,
    DisconnectRequest,
    DisconnectResponse,
)
from .packet import Packet
from .tunnelling import TunnellingAck, TunnellingRequest

logger = logging.getLogger("knxframe.dispatch")

BODY_TYPES = {
    C.CONNECT_REQUEST: ConnectionRequest,
    C.CONNECT_RESPONSE: ConnectionResponse,
    C.CONNECTION_STATE_REQUEST: ConnectionStateRequest,
    C.CONNECTION_STATE_RESPONSE: ConnectionStateResponse,
    C.DISCONNECT_REQUEST: DisconnectRequest,
    C.DISCONNECT_RESPONSE: DisconnectResponse,
    C.TUNNELLING_REQUEST: TunnellingRequest,
    C.TUNNELLING_ACK: TunnellingAck,
}


def decode(packet: Packet):
    """Return the typed body for packet, or packet itself if the service has none.

    Raises MalformedPacketError if the body does not fit its service type.
    """
    body_type = BODY_TYPES.get(packet.service_type)
    if body_type is None:
        logger.debug("No body decoder for %s", packet.service_name)
        return packet
    return body_type.from_packet(packet)


def parse_frame(data):
    """Parse raw datagram bytes and decode the body in one step."""
    return decode(Packet.parse(data))
