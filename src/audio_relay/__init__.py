"""Stateless audio conversion relay."""

__version__ = "2.0.0"
