"""FastAPI application factory for the packet inspection API.

Creates the app with all routers mounted and the packet monitor and
transport injected via app.state.
"""

import logging

from fastapi import FastAPI

from core.packet_monitor import PacketMonitor

from .routes_packets import router as packets_router
from .routes_services import router as services_router

logger = logging.getLogger("knxframe.api")


def create_app(packet_monitor: PacketMonitor = None, transport=None) -> FastAPI:
    """Create the FastAPI application with all routes.

    Args:
        packet_monitor: PacketMonitor for history access
        transport: UDPTransport used when a built frame should be sent
    """
    app = FastAPI(
        title="KNXnet/IP Frame Inspector",
        description="Decode, build and monitor KNXnet/IP tunnelling frames",
        version="1.0.0",
    )

    # Store references for route handlers
    app.state.packet_monitor = packet_monitor or PacketMonitor()
    app.state.transport = transport

    # Mount routers
    app.include_router(services_router)
    app.include_router(packets_router)

    # Set app reference on routers (needed for app.state access)
    services_router.app = app
    packets_router.app = app

    # Health endpoint
    @app.get("/api/v1/health", tags=["system"])
    def health():
        """Health check — transport state and buffered frame count."""
        stats = app.state.packet_monitor.get_stats()
        return {
            "status": "ok",
            "transport_running": bool(transport and transport.is_running),
            "gateway": f"{transport.gateway[0]}:{transport.gateway[1]}"
            if transport and transport.gateway
            else None,
            "packets_buffered": stats["buffered"],
        }

    logger.info("FastAPI app created with %d routers", 2)
    return app
