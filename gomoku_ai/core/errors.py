"""
Exceptions raised by the Gomoku engine.

Both concrete errors derive from ValueError so callers that validate input
the usual way keep working.
"""


class GomokuError(Exception):
    """Base class for engine errors."""


class InvalidMoveError(GomokuError, ValueError):
    """A stone was placed on an occupied or out-of-range cell."""

    def __init__(self, row: int, col: int, reason: str):
        self.row = row
        self.col = col
        self.reason = reason
        super().__init__(f"Invalid move ({row}, {col}): {reason}")


class DegenerateConfigError(GomokuError, ValueError):
    """An engine configuration that no search can run with."""
