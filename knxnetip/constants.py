# KNXnet/IP protocol constants
# Reference: KNX Standard 03_08_02 (Core), 03_08_04 (Tunnelling)

# Header
HEADER_SIZE = 0x06
PROTOCOL_VERSION = 0x10  # 1.0
MAX_TOTAL_LENGTH = 0xFFFF

# Service type identifiers (2 bytes, big-endian)
SEARCH_REQUEST = 0x0201
SEARCH_RESPONSE = 0x0202
DESCRIPTION_REQUEST = 0x0203
DESCRIPTION_RESPONSE = 0x0204
CONNECT_REQUEST = 0x0205
CONNECT_RESPONSE = 0x0206
CONNECTION_STATE_REQUEST = 0x0207
CONNECTION_STATE_RESPONSE = 0x0208
DISCONNECT_REQUEST = 0x0209
DISCONNECT_RESPONSE = 0x020A
DEVICE_CONFIGURATION_REQUEST = 0x0310
DEVICE_CONFIGURATION_ACK = 0x0311
TUNNELLING_REQUEST = 0x0420
TUNNELLING_ACK = 0x0421
ROUTING_INDICATION = 0x0530
ROUTING_LOST_MESSAGE = 0x0531

# Connection header (tunnelling request / ack)
CONNECTION_HEADER_SIZE = 0x04

# Connection types (CRI - Connection Request Information)
TUNNEL_CONNECTION = 0x04
CRI_SIZE = 0x04
CRD_SIZE = 0x04

# Tunnelling layer
TUNNEL_LINKLAYER = 0x02

# Error codes
E_NO_ERROR = 0x00
E_CONNECTION_ID = 0x21
E_CONNECTION_TYPE = 0x22
E_CONNECTION_OPTION = 0x23
E_NO_MORE_CONNECTIONS = 0x24
E_DATA_CONNECTION = 0x26
E_KNX_CONNECTION = 0x27
E_TUNNELLING_LAYER = 0x29

# Host Protocol Address Information (HPAI)
HPAI_SIZE = 0x08
IPV4_UDP = 0x01

# Standard KNXnet/IP port
DEFAULT_PORT = 3671
