"""Allow ``python -m reportdesk``."""

import sys

from reportdesk.main import main

if __name__ == "__main__":
    sys.exit(main())
