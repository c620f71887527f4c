from autoshort_python_client.client import AutoShortClient
from autoshort_python_client.errors import ConfigError
from autoshort_python_client.toolbox import ladder_table
from rich.console import Console
import logging
import sys

logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s [%(levelname)s] %(message)s",
)

if __name__ == "__main__":
    # Reads USERNAME, PASSWORD and API_URL from the environment.
    try:
        client = AutoShortClient.from_env()
    except ConfigError as e:
        logging.error(e)
        sys.exit(1)

    # Run this script from cron (or similar) to poll on a schedule.
    with client:
        snapshot = client.get_quote("YPFD", "cedear", timeout=60)

    console = Console()
    console.print(ladder_table(snapshot))
