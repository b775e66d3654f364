"""Allow running the renderer with ``python -m spherecast``."""

import sys

from spherecast.cli import main

sys.exit(main())
