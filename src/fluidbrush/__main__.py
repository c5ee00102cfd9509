"""Command-line interface: python -m fluidbrush [path.csv]"""
import sys

from fluidbrush.main import main

if __name__ == "__main__":
    sys.exit(main())
