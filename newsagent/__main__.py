"""Entry point for running the agent as a module.

Allows running with: python -m newsagent
"""

import sys

from newsagent.main import main

if __name__ == "__main__":
    sys.exit(main())
