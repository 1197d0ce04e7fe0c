"""Service type registry routes."""

from fastapi import APIRouter, HTTPException

from knxnetip.services import code_of, services

from .models import ServiceInfo

router = APIRouter(prefix="/api/v1/services", tags=["services"])


def _info(code: int, name: str) -> dict:
    return {"code": f"0x{code:04x}", "value": code, "name": name}


@router.get("", response_model=list[ServiceInfo])
def list_services():
    """List every registered KNXnet/IP service type."""
    return [_info(code, name) for code, name in services()]


@router.get("/{name}", response_model=ServiceInfo)
def get_service(name: str):
    """Reverse lookup a canonical service name."""
    try:
        code = code_of(name)
    except LookupError:
        raise HTTPException(status_code=404, detail="Service not found")
    return _info(code, name)
