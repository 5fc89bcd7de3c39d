"""Run a duplicate check from a source checkout: ``python main.py check ...``."""
import sys

from storedup.cli import main

if __name__ == "__main__":
    sys.exit(main())
