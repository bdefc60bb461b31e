"""Sweep history inspector for captured RF spectrum sweeps."""

__version__ = "0.1.0"
