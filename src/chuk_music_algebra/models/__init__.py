"""
Pydantic models for algebra configuration.

- HarmonicSettings: pruning threshold
- LinearSettings: pruning threshold and power iteration limits
- GaloisSettings: generator and optional modulus
- WaveformSettings: sample rate
- AlgebraSettings: all of the above, as stored in YAML
"""

from chuk_music_algebra.models.settings import (
    AlgebraSettings,
    GaloisSettings,
    HarmonicSettings,
    LinearSettings,
    WaveformSettings,
)

__all__ = [
    "AlgebraSettings",
    "GaloisSettings",
    "HarmonicSettings",
    "LinearSettings",
    "WaveformSettings",
]
