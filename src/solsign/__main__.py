"""Allow ``python -m solsign``."""

import sys

from solsign.cli import main

sys.exit(main())
