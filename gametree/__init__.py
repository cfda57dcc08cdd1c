"""Editable extensive-form games with a derived strategic form."""

__version__ = "0.1.0"
