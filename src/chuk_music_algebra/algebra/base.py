"""
The algebra contract.

Every algebra gives the same four operation names a different meaning,
but all of them take phrases and return phrases:

    sum(P1, P2, ... Pn)   = (P1 + P2) + ... + Pn
    magnify(A, P)         = A P, for a real scalar A (magnify(-1, P) = -P)
    product(P1, P2)       = P1 * P2
    inverse(P)            = ~P

Callers should hold an Algebra, never a concrete variant.
"""

from __future__ import annotations

from abc import ABC, abstractmethod

from chuk_music_algebra.core.phrase import Phrase


class Algebra(ABC):
    """One interpretation of musical composition as algebra."""

    name: str = "algebra"

    @abstractmethod
    def sum(self, *phrases: Phrase) -> Phrase:
        """Combine any positive number of phrases."""

    @abstractmethod
    def magnify(self, scalar: float, phrase: Phrase) -> Phrase:
        """Scale a phrase by a real number."""

    @abstractmethod
    def product(self, first: Phrase, second: Phrase) -> Phrase:
        """Multiply two phrases."""

    @abstractmethod
    def inverse(self, phrase: Phrase) -> Phrase:
        """Invert a phrase."""

    def __repr__(self) -> str:
        return f"{type(self).__name__}()"
