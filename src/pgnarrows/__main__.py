"""Allow ``python -m pgnarrows``."""

import sys

from pgnarrows.app import main

sys.exit(main())
