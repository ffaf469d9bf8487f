#!/usr/bin/env python3
"""
zip-exec - mark a file inside a ZIP archive as a unix executable.

usage: zip-exec.py archive.zip exec path/in/archive/run.sh [-o out.zip]
"""

import sys
sys.dont_write_bytecode = True # no __pycache__ bs

from zipexec.cli import main


if __name__ == "__main__":
    sys.exit(main())
