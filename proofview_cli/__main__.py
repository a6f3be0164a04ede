"""
Module execution entry point.

Allows running with: python -m proofview_cli
"""

import sys
from proofview_cli.main import main

if __name__ == "__main__":
    sys.exit(main())
