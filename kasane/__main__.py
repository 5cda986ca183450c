"""
Allow running the client as a module.

Usage:
    python -m kasane encode '<range json>'
"""

from .cli import main
import sys

if __name__ == "__main__":
    sys.exit(main())
