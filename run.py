import sys

from songmem.config import Settings, configure_logging
from songmem.main import run as _run


def run():
    """Entry point for songmem command."""
    settings = Settings.from_env()
    configure_logging(settings.log_level)
    sys.exit(_run(settings, sys.argv[1:]))


if __name__ == "__main__":
    run()
