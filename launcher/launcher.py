#!/usr/bin/env python3
"""
DayZ Dedicated Server Manager (DZSM)

Usage: python launcher.py [run|plan|api] [--offline] [--skip-validation] ...
Run it from (or point --install-dir at) the directory the server lives in.
"""

import sys

from dayz_launcher.cli import main

if __name__ == "__main__":
    sys.exit(main())
