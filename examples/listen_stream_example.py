from autoshort_python_client.client import AutoShortClient
from autoshort_python_client.errors import ConfigError
import logging
import sys

logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s [%(levelname)s] %(message)s",
)

if __name__ == "__main__":
    # WEBSOCKET must hold the stream URL.
    try:
        client = AutoShortClient.from_env()
    except ConfigError as e:
        logging.error(e)
        sys.exit(1)

    with client:
        client.listen()
