"""Simulated bonding-curve key market and paid question-and-answer app on an in-memory chain."""

__version__ = "0.1.0"