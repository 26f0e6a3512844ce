"""Clarity Engine: weighted multi-criteria decision scoring with a risk penalty."""

__version__ = "0.1.0"
