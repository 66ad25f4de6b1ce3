"""
Entry point for running MaturinKit CLI as a module.

Usage: python -m maturinkit.cli [options]
"""

from .parser import main

if __name__ == "__main__":
    main()
