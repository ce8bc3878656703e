"""
Main entry point for running envguard as a module.

Usage:
    python -m envguard <command> [options]
"""

from .cli import main
import sys

if __name__ == "__main__":
    sys.exit(main())