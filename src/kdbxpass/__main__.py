"""Allow running as ``python -m kdbxpass``."""

import sys

from .cli import main

sys.exit(main())
