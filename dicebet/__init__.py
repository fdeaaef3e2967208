"""Dice-betting game: account records, events, error codes and bet placement."""

__version__ = "0.1.0"
__all__ = ["accounts", "errors", "events", "program"]