"""Tests for the KNXnet/IP packet envelope."""

from __future__ import annotations

import pytest

from knxnetip import constants as C
from knxnetip.errors import MalformedPacketError
from knxnetip.packet import Packet, decode_header, encode_header


@pytest.mark.parametrize(
    "service_type, payload",
    [
        (0x0201, b""),
        (0x0420, bytes([0x04, 0x01, 0x00, 0x00, 0x29])),
        (0x9999, bytes(range(256))),
        (0xFFFF, b"\x00"),
    ],
)
def test_roundtrip(service_type: int, payload: bytes):
    """parse(to_bytes()) keeps service type and payload."""
    packet = Packet.parse(Packet(service_type, payload).to_bytes())
    assert packet.service_type == service_type
    assert packet.payload == payload


def test_header_layout():
    frame = Packet(0x0421, [0x04, 0x01, 0x02, 0x00]).to_bytes()
    assert frame == bytes([0x06, 0x10, 0x04, 0x21, 0x00, 0x0A, 0x04, 0x01, 0x02, 0x00])
    assert bytes(Packet(0x0421, [0x04, 0x01, 0x02, 0x00])) == frame


def test_empty_payload_is_header_only():
    frame = Packet(0x0201, []).to_bytes()
    assert frame == bytes([0x06, 0x10, 0x02, 0x01, 0x00, 0x06])


def test_service_type_masked_to_16_bits():
    packet = Packet(0x10420, b"")
    assert packet.service_type == 0x0420
    assert packet.to_bytes()[2:4] == bytes([0x04, 0x20])


def test_total_length_uses_two_bytes():
    payload = bytes(300)
    frame = Packet(0x0420, payload).to_bytes()
    assert frame[4:6] == (306).to_bytes(2, "big")
    assert len(frame) == 306


def test_oversized_payload_rejected_on_serialize():
    with pytest.raises(ValueError):
        Packet(0x0420, bytes(C.MAX_TOTAL_LENGTH)).to_bytes()


def test_parse_rejects_wrong_header_length():
    with pytest.raises(MalformedPacketError, match="header length"):
        Packet.parse(bytes([0x05, 0x10, 0x04, 0x20, 0x00, 0x06]))


def test_parse_rejects_unsupported_version():
    with pytest.raises(MalformedPacketError, match="protocol version"):
        Packet.parse(bytes([0x06, 0x20, 0x04, 0x20, 0x00, 0x06]))


def test_parse_rejects_truncated_frame():
    with pytest.raises(MalformedPacketError, match="length"):
        Packet.parse(bytes([0x06, 0x10, 0x04, 0x20, 0x00, 0x0A, 0x04, 0x01]))


def test_parse_rejects_padded_frame():
    with pytest.raises(MalformedPacketError, match="length"):
        Packet.parse(bytes([0x06, 0x10, 0x02, 0x01, 0x00, 0x06, 0x00]))


@pytest.mark.parametrize("data", [b"", b"\x06", bytes([0x06, 0x10, 0x04, 0x20, 0x00])])
def test_parse_rejects_short_buffer(data: bytes):
    with pytest.raises(MalformedPacketError, match="too short"):
        Packet.parse(data)


def test_malformed_error_is_value_error():
    with pytest.raises(ValueError):
        Packet.parse(b"\x00")


def test_parse_accepts_list_and_copies_buffer():
    buf = bytearray([0x06, 0x10, 0x04, 0x21, 0x00, 0x07, 0xAA])
    packet = Packet.parse(buf)
    buf[6] = 0x55
    assert packet.payload == b"\xaa"

    from_list = Packet.parse(list(bytes([0x06, 0x10, 0x02, 0x03, 0x00, 0x06])))
    assert from_list.service_type == 0x0203


def test_service_name():
    assert Packet(0x0420).service_name == "tunneling.request"
    assert Packet(0x9999).service_name == "0x9999"


def test_describe():
    packet = Packet(0x0421, [0x04, 0x5E, 0x0A, 0x00])
    assert packet.describe() == "<Packet (tunneling.ack) 04 5e 0a 00>"
    assert repr(packet) == packet.describe()
    assert Packet(0x1234, [0xFF]).describe() == "<Packet (0x1234) ff>"


def test_equality():
    assert Packet(0x0420, b"\x01") == Packet(0x10420, [0x01])
    assert Packet(0x0420, b"\x01") != Packet(0x0421, b"\x01")
    assert len({Packet(0x0201), Packet(0x0201)}) == 1


def test_header_helpers():
    header = encode_header(C.TUNNELLING_ACK, 4)
    assert header == bytes([0x06, 0x10, 0x04, 0x21, 0x00, 0x0A])
    assert decode_header(header) == (C.TUNNELLING_ACK, 10)
