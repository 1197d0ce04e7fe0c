"""Packet decode/build routes and frame history.

Decoding and building run the codec directly; history reads the packet
monitor fed by the transport.
"""

import logging

from fastapi import APIRouter, HTTPException, Query

from knxnetip.dispatch import decode
from knxnetip.errors import MalformedPacketError
from knxnetip.packet import Packet
from knxnetip.telegram import RawTelegram
from knxnetip.tunnelling import TunnellingRequest

from .models import DecodeRequest, DecodeResponse, FrameResponse, TunnellingRequestCreate

logger = logging.getLogger("knxframe.routes.packets")

router = APIRouter(prefix="/api/v1/packets", tags=["packets"])


def _hex_to_bytes(text: str) -> bytes:
    return bytes.fromhex(text.replace(":", "").replace(" ", ""))


@router.post("/decode", response_model=DecodeResponse)
def decode_packet(body: DecodeRequest):
    """Parse a raw frame and decode its body by service type."""
    try:
        packet = Packet.parse(_hex_to_bytes(body.frame))
        decoded = decode(packet)
    except MalformedPacketError as e:
        raise HTTPException(status_code=400, detail=str(e))
    return {
        "service_type": packet.service_type,
        "service_name": packet.service_name,
        "payload": packet.payload.hex(),
        "description": packet.describe(),
        "body": decoded.to_dict() if decoded is not packet else None,
    }


@router.post("/tunnelling", response_model=FrameResponse)
def build_tunnelling_request(body: TunnellingRequestCreate):
    """Build a TUNNELLING_REQUEST frame, optionally sending it to the gateway."""
    request = TunnellingRequest(
        body.channel_id, body.sequence, RawTelegram(_hex_to_bytes(body.telegram))
    )
    packet = request.to_packet()
    try:
        frame = packet.to_bytes()
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))

    sent = False
    if body.send:
        transport = router.app.state.transport
        if transport is None or not transport.is_running:
            raise HTTPException(status_code=409, detail="Transport not running")
        if transport.gateway is None:
            raise HTTPException(status_code=409, detail="No gateway configured")
        transport.send(frame)
        sent = True
        logger.info(
            "Sent tunnelling request ch=%d seq=%d via API", body.channel_id, body.sequence
        )

    return {"frame": frame.hex(), "description": packet.describe(), "sent": sent}


@router.get("/history")
def get_packet_history(
    limit: int = Query(default=100, ge=1, le=1000),
    offset: int = Query(default=0, ge=0),
    direction: str | None = Query(default=None, pattern="^(rx|tx)$"),
):
    """Get recently seen frames (newest first)."""
    monitor = router.app.state.packet_monitor
    entries = monitor.get_history(limit=limit, offset=offset, direction=direction)
    stats = monitor.get_stats()
    return {
        "packets": entries,
        "count": len(entries),
        "total_buffered": stats.get("buffered", 0),
    }


@router.get("/stats")
def get_packet_stats():
    """Get frame statistics."""
    return router.app.state.packet_monitor.get_stats()


@router.delete("/history")
def clear_packet_history():
    """Clear frame history."""
    router.app.state.packet_monitor.clear()
    return {"status": "cleared"}
