"""Famand: rule engine for a turn-based farm and city building card game."""

__version__ = "0.1.0"
