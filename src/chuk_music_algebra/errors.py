"""
Exceptions raised by the algebras.

Most failures use the built-in types (ValueError, ZeroDivisionError).
These subclasses exist so callers can tell the algebra-specific cases apart.
"""


class IncompatiblePhrasesError(ValueError):
    """Phrase operands disagree on key, tempo, duration or chords per beat."""


class NoInverseError(ArithmeticError):
    """An element has no inverse in the ring it was asked to invert in."""


class ConvergenceError(RuntimeError):
    """Power iteration exhausted its restart limit."""
