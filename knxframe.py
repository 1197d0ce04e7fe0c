"""KNXnet/IP Frame Inspector — Main Entry Point.

Loads config.yaml, binds the KNXnet/IP UDP transport towards the configured
gateway, records every frame in the packet monitor and runs the FastAPI
inspection API.

This script is the single process that handles everything:
  - KNXnet/IP datagrams (UDP transport, receive thread)
  - Packet history (ring buffer)
  - FastAPI inspection API (HTTP, default port 9090)
"""

import logging
import os
import signal
import threading

import yaml

from knxnetip import constants as C

# ---------------------------------------------------------------------------
# Configuration
# ---------------------------------------------------------------------------

DEFAULTS = {
    "gateway": {"host": None, "port": C.DEFAULT_PORT},
    "local": {"host": "0.0.0.0", "port": 0},
    "api": {"host": "0.0.0.0", "port": 9090},
    "monitor": {"max_size": 1000},
    "logging": {"level": "INFO"},
}


def load_config(path: str) -> dict:
    """Load config.yaml and fill in defaults for missing sections/keys."""
    with open(path) as f:
        loaded = yaml.safe_load(f) or {}

    config = {}
    for section, defaults in DEFAULTS.items():
        values = loaded.get(section) or {}
        config[section] = {**defaults, **values}

    api_port = os.environ.get("KNXFRAME_API_PORT")
    if api_port:
        config["api"]["port"] = int(api_port)
    return config


# ---------------------------------------------------------------------------
# Main
# ---------------------------------------------------------------------------


def main():
    config_path = os.environ.get("KNXFRAME_CONFIG")
    if not config_path or not os.path.exists(config_path):
        config_path = os.path.join(os.path.dirname(__file__), "config.yaml")
    config = load_config(config_path)

    logging.basicConfig(
        level=getattr(logging, str(config["logging"]["level"]).upper(), logging.INFO),
        format="%(asctime)s [%(name)s] %(levelname)s %(message)s",
        datefmt="%H:%M:%S",
    )
    logger = logging.getLogger("knxframe")
    logger.info("Loaded config from %s", config_path)

    from api.app import create_app
    from core.packet_monitor import PacketMonitor
    from knxnetip.transport import UDPTransport

    monitor = PacketMonitor(max_size=config["monitor"]["max_size"])

    gateway_cfg = config["gateway"]
    gateway = None
    if gateway_cfg["host"]:
        gateway = (gateway_cfg["host"], int(gateway_cfg["port"]))

    def on_packet(decoded, addr):
        logger.debug("Decoded %r from %s:%d", decoded, addr[0], addr[1])

    transport = UDPTransport(
        host=config["local"]["host"],
        port=int(config["local"]["port"]),
        gateway=gateway,
        on_packet=on_packet,
        monitor=monitor,
    )
    transport.start()

    app = create_app(monitor, transport=transport)

    api_host = config["api"]["host"]
    api_port = int(config["api"]["port"])
    _start_api_server(app, api_host, api_port, logger)

    logger.info("KNXnet/IP frame inspector fully started")
    if gateway:
        logger.info("  Gateway: %s:%d/udp", gateway[0], gateway[1])
    else:
        logger.info("  Gateway: not configured (receive only)")
    logger.info("  Inspection API: http://%s:%d", api_host, api_port)

    # Wait for shutdown signal
    shutdown = threading.Event()

    def handle_signal(signum, frame):
        logger.info("Received signal %d — shutting down", signum)
        shutdown.set()

    signal.signal(signal.SIGTERM, handle_signal)
    signal.signal(signal.SIGINT, handle_signal)

    shutdown.wait()

    transport.stop()
    logger.info("Shutdown complete")


def _start_api_server(app, host: str, port: int, logger):
    """Start uvicorn in a daemon thread."""
    import uvicorn

    config = uvicorn.Config(
        app=app,
        host=host,
        port=port,
        log_level="info",
        access_log=False,
    )
    server = uvicorn.Server(config)

    thread = threading.Thread(target=server.run, name="uvicorn", daemon=True)
    thread.start()
    logger.info("Uvicorn started on port %d (daemon thread)", port)
    return thread


if __name__ == "__main__":
    main()
