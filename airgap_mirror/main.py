"""
Main entry point for the air-gapped mirroring tool.
Allows running the tool with ``python -m airgap_mirror.main``.
"""

import sys
from airgap_mirror.cli.main import main

if __name__ == "__main__":
    sys.exit(main())
