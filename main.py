#!/usr/bin/env python3
"""Main entry point for auditstream."""

import sys

from auditstream.cli import main


if __name__ == "__main__":
    sys.exit(main())
