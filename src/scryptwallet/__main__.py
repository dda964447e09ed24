"""Allow ``python -m scryptwallet``."""

import sys

from scryptwallet.cli.main import main

sys.exit(main())
