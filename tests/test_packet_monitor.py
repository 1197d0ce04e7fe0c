"""Unit tests for PacketMonitor."""

from __future__ import annotations

from core.packet_monitor import PacketMonitor
from knxnetip import constants as C
from knxnetip.errors import MalformedPacketError
from knxnetip.packet import Packet

GATEWAY = ("192.168.1.10", 3671)


def _ack(seq: int) -> Packet:
    return Packet(C.TUNNELLING_ACK, [0x04, 0x01, seq, 0x00])


def test_record_and_history_order():
    monitor = PacketMonitor(max_size=5)
    monitor.record(_ack(1), direction="rx", remote=GATEWAY)
    monitor.record(_ack(2), direction="tx", remote=GATEWAY)

    history = monitor.get_history()
    assert len(history) == 2
    assert history[0]["payload"] == "04010200"
    assert history[0]["direction_label"] == "TX"
    assert history[1]["remote"] == "192.168.1.10:3671"
    assert history[1]["service_name"] == "tunneling.ack"
    assert history[1]["description"] == "<Packet (tunneling.ack) 04 01 01 00>"


def test_ring_buffer_eviction():
    monitor = PacketMonitor(max_size=2)
    for seq in range(3):
        monitor.record(_ack(seq))

    history = monitor.get_history()
    assert len(history) == 2
    assert history[0]["payload"] == "04010200"
    assert history[1]["payload"] == "04010100"
    assert monitor.get_stats()["total_recorded"] == 3


def test_history_filters_and_paging():
    monitor = PacketMonitor(max_size=10)
    monitor.record(_ack(1), direction="rx")
    monitor.record(_ack(2), direction="tx")
    monitor.record(_ack(3), direction="tx")

    assert len(monitor.get_history(direction="rx")) == 1
    assert len(monitor.get_history(direction="tx")) == 2
    page = monitor.get_history(limit=1, offset=1)
    assert page[0]["payload"] == "04010200"


def test_malformed_and_stats():
    monitor = PacketMonitor(max_size=10)
    monitor.record(_ack(1), direction="rx")
    monitor.record(Packet(C.TUNNELLING_REQUEST, [0x04, 0x01, 0x00, 0x00]), direction="tx")
    monitor.record_malformed(b"\x06\x20", GATEWAY, MalformedPacketError("bad version"))

    stats = monitor.get_stats()
    assert stats["rx_count"] == 2
    assert stats["tx_count"] == 1
    assert stats["malformed_count"] == 1
    assert stats["services"] == {"tunneling.ack": 1, "tunneling.request": 1}

    entry = monitor.get_history(limit=1)[0]
    assert entry["error"] == "bad version"
    assert entry["payload"] == "0620"
    assert entry["service_name"] is None


def test_clear():
    monitor = PacketMonitor(max_size=5)
    monitor.record(_ack(1))
    monitor.clear()
    assert monitor.get_history() == []
    assert monitor.get_stats()["total_recorded"] == 0
