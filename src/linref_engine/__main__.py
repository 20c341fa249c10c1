"""Entry point for running the engine CLI as a module."""

import sys

from linref_engine.cli import main

if __name__ == "__main__":
    sys.exit(main())
