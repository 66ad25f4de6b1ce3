"""
MaturinKit CLI module.

This module provides the command-line interface for MaturinKit.
"""

from .parser import CLI, main

__all__ = ["CLI", "main"]
