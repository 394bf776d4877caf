#!/usr/bin/env python3
"""PDF Field Stamper entry point."""

import sys

from fieldstamp.ui.app import main

if __name__ == "__main__":
    sys.exit(main())
