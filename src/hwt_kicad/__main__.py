"""Allow running as ``python -m hwt_kicad``."""

import sys

from hwt_kicad.cli import main

if __name__ == "__main__":
    sys.exit(main())
