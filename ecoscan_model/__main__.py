"""
Main entry point for running an assessment.

Usage:
    python -m ecoscan_model workload.json
    python -m ecoscan_model --import extracted.json --apply-all
"""

import sys

from .cli import main


if __name__ == "__main__":
    sys.exit(main())
