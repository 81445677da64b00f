import logging
import sys

from config import LOG_LEVEL
from errors import RSADemoError
from exchange import run_exchange


def _log_level(name):
    # getLevelName maps unknown names to a string, not an int
    level = logging.getLevelName(name)
    return level if isinstance(level, int) else logging.WARNING


def main():
    # Diagnostics go to stderr so stdout only carries the exchange itself
    logging.basicConfig(
        level=_log_level(LOG_LEVEL),
        stream=sys.stderr,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    try:
        run_exchange()
    except RSADemoError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
