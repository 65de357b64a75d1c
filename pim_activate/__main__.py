"""Allows running the CLI as: python -m pim_activate"""

import sys

from .cli import main

if __name__ == "__main__":
    sys.exit(main())
