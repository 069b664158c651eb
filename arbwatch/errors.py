"""
Error taxonomy for the opportunity engine.

Source and evaluation errors are contained inside the engine and only
ever logged. Mode, kind and lookup errors reach the caller of the manual
operations.
"""

from typing import Optional


class BotError(Exception):
    """Base class for all engine errors."""


class SourceFetchError(BotError):
    """A single source failed to produce candidates for this cycle."""

    def __init__(self, source: str, message: str, cause: Optional[BaseException] = None):
        super().__init__(f"{source}: {message}")
        self.source = source
        self.cause = cause


class EvaluationError(BotError):
    """A monitor's evaluation failed during an autonomous tick."""

    def __init__(self, kind: str, message: str, cause: Optional[BaseException] = None):
        super().__init__(f"{kind}: {message}")
        self.kind = kind
        self.cause = cause


class InvalidModeError(BotError):
    """Unknown operating mode, or an operation not allowed in the current mode."""


class InvalidKindError(BotError):
    """Unknown opportunity kind."""


class NotFoundError(BotError):
    """No opportunity matches the requested id."""
