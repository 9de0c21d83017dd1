"""Allow ``python -m shearmd``."""

import sys

from .cli import main

sys.exit(main())
