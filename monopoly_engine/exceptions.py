"""
Custom exception hierarchy for the game engine and its dispatch boundary.

The reducer itself never raises to its caller: rule violations are reported
through the message log and toasts, and unexpected faults become ``ui_error``.
These types are raised by the boundary that feeds actions into the engine.
"""


class MonopolyError(Exception):
    """Base exception for all game-related errors."""


class InvalidActionError(MonopolyError):
    """Action envelope could not be parsed into a known action."""


class NotYourTurnError(MonopolyError):
    """Actor is not the currently active seat."""


class NotHostError(MonopolyError):
    """Only the host seat may start the game."""
