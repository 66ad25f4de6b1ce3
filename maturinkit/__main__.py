"""
Entry point for running MaturinKit CLI as a module.

Usage: python -m maturinkit [options]
"""

from maturinkit.cli.parser import main

if __name__ == "__main__":
    main()
