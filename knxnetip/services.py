"""Service type registry.

Maps the 16-bit KNXnet/IP service type codes to their canonical names and
back. Both directions are built once at import time and are read-only.
"""

from types import MappingProxyType

from . import constants as C

SERVICE_NAMES = MappingProxyType(
    {
        C.SEARCH_REQUEST: "search.request",
        C.SEARCH_RESPONSE: "search.response",
        C.DESCRIPTION_REQUEST: "description.request",
        C.DESCRIPTION_RESPONSE: "description.response",
        C.CONNECT_REQUEST: "connection.request",
        C.CONNECT_RESPONSE: "connection.response",
        C.CONNECTION_STATE_REQUEST: "connectionstate.request",
        C.CONNECTION_STATE_RESPONSE: "connectionstate.response",
        C.DISCONNECT_REQUEST: "disconnect.request",
        C.DISCONNECT_RESPONSE: "disconnect.response",
        C.DEVICE_CONFIGURATION_REQUEST: "configuration.request",
        C.DEVICE_CONFIGURATION_ACK: "configuration.ack",
        C.TUNNELLING_REQUEST: "tunneling.request",
        C.TUNNELLING_ACK: "tunneling.ack",
        C.ROUTING_INDICATION: "routing.indication",
        C.ROUTING_LOST_MESSAGE: "routing.lostmessage",
    }
)

SERVICE_CODES = MappingProxyType({name: code for code, name in SERVICE_NAMES.items()})


def name_of(code: int) -> str:
    """Return the canonical name for a service type.

    Unregistered codes format as "0xhhll" (lowercase, four digits).
    """
    code &= 0xFFFF
    name = SERVICE_NAMES.get(code)
    if name is None:
        name = f"0x{code >> 8:02x}{code & 0xFF:02x}"
    return name


def code_of(name: str) -> int:
    """Return the service type code for a canonical name.

    Raises:
        LookupError: if the name is not registered.
    """
    try:
        return SERVICE_CODES[name]
    except KeyError:
        raise LookupError(f"Unknown service name: {name!r}") from None


def services() -> list[tuple[int, str]]:
    """All registered (code, name) pairs, ordered by code."""
    return sorted(SERVICE_NAMES.items())
