#!/usr/bin/env python3
"""TabataX — entry point.

Run with:
    python main.py
    python -m tabatax
"""

import sys

from tabatax.__main__ import main


if __name__ == "__main__":
    sys.exit(main())
