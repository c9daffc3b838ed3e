"""Run the game server. Usage: python -m clickergame"""

import socket

import uvicorn

from clickergame.core.config import get_settings
from clickergame.core.logging import configure_logging, get_logger

log = get_logger(__name__)


def local_ip() -> str:
    """Best-effort LAN address of this machine."""
    with socket.socket(socket.AF_INET, socket.SOCK_DGRAM) as s:
        try:
            # no packet is sent; connect() on UDP only picks a route
            s.connect(("10.255.255.255", 1))
            return s.getsockname()[0]
        except OSError:
            return "0.0.0.0"


def main() -> None:
    settings = get_settings()
    configure_logging(debug=settings.debug)
    log.info(
        "server_starting",
        local=f"http://localhost:{settings.port}",
        network=f"http://{local_ip()}:{settings.port}",
    )
    uvicorn.run("clickergame.main:app", host=settings.host, port=settings.port)


if __name__ == "__main__":
    main()
