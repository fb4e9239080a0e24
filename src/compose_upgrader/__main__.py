"""Entry point for ``python -m compose_upgrader``."""

import sys

from compose_upgrader.cli import main

if __name__ == "__main__":
    sys.exit(main())
