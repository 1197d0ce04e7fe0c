"""Pytest configuration and shared fixtures for knxframe tests."""

from __future__ import annotations

import os
import sys

import pytest

_TESTS_DIR = os.path.dirname(__file__)
_PROJECT_ROOT = os.path.abspath(os.path.join(_TESTS_DIR, ".."))
if _PROJECT_ROOT not in sys.path:
    sys.path.insert(0, _PROJECT_ROOT)


class StubTelegram:
    """Telegram source whose raw bytes can change between serializations."""

    def __init__(self, raw):
        self.raw = list(raw)
        self.calls = 0

    def get_raw(self):
        self.calls += 1
        return self.raw


@pytest.fixture
def stub_telegram():
    return StubTelegram([0x01, 0x02, 0x03])


@pytest.fixture
def packet_monitor():
    """Create a PacketMonitor instance."""
    from core.packet_monitor import PacketMonitor

    return PacketMonitor(max_size=100)


@pytest.fixture
def app(packet_monitor):
    """Create a FastAPI test app without a transport."""
    from api.app import create_app

    return create_app(packet_monitor)


@pytest.fixture
async def client(app):
    """Create an AsyncClient for HTTP testing against the ASGI app."""
    import httpx

    transport = httpx.ASGITransport(app=app)
    async with httpx.AsyncClient(
        transport=transport, base_url="http://testserver"
    ) as client:
        yield client


@pytest.fixture(autouse=True)
def _disable_udp_transport(request, monkeypatch):
    """Avoid binding UDP sockets in tests, unless marked udp_loopback."""
    if request.node.get_closest_marker("udp_loopback"):
        return

    from knxnetip.transport import UDPTransport

    def _start(self):  # pragma: no cover - trivial override
        self._running = True

    def _stop(self):  # pragma: no cover - trivial override
        self._running = False

    monkeypatch.setattr(UDPTransport, "start", _start)
    monkeypatch.setattr(UDPTransport, "stop", _stop)
