import logging
import socket

import uvicorn
from mealplan.api.api_run import app
from mealplan.utilities.config import APP_HOST, APP_PORT, LOG_LEVEL


def get_local_ip() -> str:
    """Return a non-loopback local IP address if possible, otherwise '127.0.0.1'."""
    s = socket.socket(socket.AF_INET, socket.SOCK_DGRAM)
    try:
        # No data is sent; connect only selects the outgoing interface
        s.connect(("8.8.8.8", 80))
        ip = str(s.getsockname()[0])
    except OSError:
        ip = "127.0.0.1"
    finally:
        s.close()
    return ip


if __name__ == "__main__":
    logging.basicConfig(level=LOG_LEVEL, format="%(asctime)s %(levelname)s %(name)s: %(message)s")
    local_url = f"http://localhost:{APP_PORT}"
    local_ip = get_local_ip()
    print(f"Uvicorn running on {local_url} (Press CTRL+C to quit)")
    if APP_HOST == "0.0.0.0" and local_ip not in ("127.0.0.1", "localhost"):
        print(f"Accessible from other devices at: http://{local_ip}:{APP_PORT}")
    uvicorn.run(app, host=APP_HOST, port=APP_PORT)
