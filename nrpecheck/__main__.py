"""Allow running as python -m nrpecheck."""

import sys

from nrpecheck.cli import main

sys.exit(main())
