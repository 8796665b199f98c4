"""
Main entry point for running goodgit as a module.

Usage:
    python -m goodgit <command> [options]
"""

from .cli import main
import sys

if __name__ == "__main__":
    sys.exit(main())
