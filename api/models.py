"""Pydantic models for the packet inspection API."""

from typing import Any

from pydantic import BaseModel, Field

_HEX_PATTERN = r"^([0-9a-fA-F]{2}[ :]?)*$"


class DecodeRequest(BaseModel):
    frame: str = Field(
        ...,
        pattern=_HEX_PATTERN,
        description="Raw frame as hex, optionally space or colon separated",
    )


class DecodeResponse(BaseModel):
    service_type: int
    service_name: str
    payload: str
    description: str
    body: dict[str, Any] | None = None


class TunnellingRequestCreate(BaseModel):
    channel_id: int = Field(..., ge=0, le=255)
    sequence: int = Field(..., ge=0, le=255)
    telegram: str = Field(default="", pattern=_HEX_PATTERN, description="cEMI frame as hex")
    send: bool = Field(default=False, description="Send to the gateway via the transport")


class FrameResponse(BaseModel):
    frame: str
    description: str
    sent: bool = False


class ServiceInfo(BaseModel):
    code: str = Field(..., description="Service type as 0xhhll")
    value: int
    name: str
