"""Waqf engine: portfolio allocation and waqf lifecycle computations."""

__version__ = "0.1.0"
