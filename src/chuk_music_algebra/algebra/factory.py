"""
Algebra factory - pick a variant by name.
"""

from __future__ import annotations

from chuk_music_algebra.algebra.base import Algebra
from chuk_music_algebra.algebra.galois import GaloisAlgebra
from chuk_music_algebra.algebra.harmonic import HarmonicAlgebra
from chuk_music_algebra.algebra.linear import LinearAlgebra
from chuk_music_algebra.models.settings import AlgebraSettings

ALGEBRA_NAMES = ("harmonic", "galois", "linear")


def create_algebra(name: str, settings: AlgebraSettings | None = None) -> Algebra:
    """
    Build an algebra from its name and (optionally loaded) settings.

    Raises:
        ValueError: If the name is unknown
    """
    settings = settings or AlgebraSettings()
    if name == "harmonic":
        return HarmonicAlgebra.from_settings(settings.harmonic)
    if name == "galois":
        return GaloisAlgebra.from_settings(settings.galois)
    if name == "linear":
        return LinearAlgebra.from_settings(settings.linear)
    raise ValueError(f"Unknown algebra: '{name}'. Available: {', '.join(ALGEBRA_NAMES)}")
