"""
MaturinKit - build Python wheels with maturin on the host or in manylinux containers.
"""

__version__ = "0.1.0"
