"""
Settings models - numeric parameters for each algebra.

These are plain pydantic models so they can be validated, stored as YAML
and passed around independently of the algebra instances they configure.
"""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, Field, field_validator

from chuk_music_algebra.constants import (
    DEFAULT_GENERATOR_BITS,
    DEFAULT_SAMPLE_RATE,
    FIELD_MASK,
    HARMONIC_EPS,
    LINEAR_EPS,
    LINEAR_PEPS,
    LINEAR_PMAX,
)


class HarmonicSettings(BaseModel):
    """Settings for the harmonic (spectral) algebra."""

    eps: float = Field(HARMONIC_EPS, gt=0, description="Drop notes whose dynamic is below this")

    model_config = {"frozen": True}


class LinearSettings(BaseModel):
    """
    Settings for the linear (matrix/SVD) algebra.

    eps prunes small matrix entries when reading a phrase back and rejects
    near-null eigenvalues; pmax and peps bound each power iteration.
    """

    eps: float = Field(LINEAR_EPS, gt=0, description="Ignore entries/eigenvalues below this")
    pmax: int = Field(LINEAR_PMAX, gt=0, description="Power iteration limit per start vector")
    peps: float = Field(LINEAR_PEPS, gt=0, description="Power iteration convergence distance")
    max_restarts: int | None = Field(
        None, ge=0, description="Restarts per eigenvector before giving up (None = unbounded)"
    )
    seed: int | None = Field(None, description="Seed for random restart vectors")

    model_config = {"frozen": True}


class GaloisSettings(BaseModel):
    """
    Settings for the GF(2^12) algebra.

    The modulus is stored as {degree: coefficient bits}; None means the
    algebra cannot compute inverses.
    """

    generator: int = Field(
        DEFAULT_GENERATOR_BITS, gt=0, le=FIELD_MASK, description="Generator a as 12 bits"
    )
    modulus: dict[int, int] | None = Field(None, description="Modulus M as {degree: bits}")

    model_config = {"frozen": True}

    @field_validator("modulus")
    @classmethod
    def validate_modulus(cls, v: dict[int, int] | None) -> dict[int, int] | None:
        """Ensure every coefficient is a valid field element."""
        if v is None:
            return v
        for degree, bits in v.items():
            if degree < 0:
                raise ValueError(f"Invalid modulus degree: {degree}")
            if not 0 <= bits <= FIELD_MASK:
                raise ValueError(f"Invalid modulus coefficient at x^{degree}: {bits}")
        return {d: b for d, b in v.items() if b}


class WaveformSettings(BaseModel):
    """Settings for the sample-level waveform algebra."""

    sample_rate: int = Field(DEFAULT_SAMPLE_RATE, gt=0, description="Samples per second")

    model_config = {"frozen": True}


class AlgebraSettings(BaseModel):
    """All algebra settings, as stored in algebra.yaml."""

    harmonic: HarmonicSettings = Field(default_factory=HarmonicSettings)
    linear: LinearSettings = Field(default_factory=LinearSettings)
    galois: GaloisSettings = Field(default_factory=GaloisSettings)
    waveform: WaveformSettings = Field(default_factory=WaveformSettings)

    def to_yaml_dict(self) -> dict[str, Any]:
        """Convert to a dict for YAML serialization."""
        return self.model_dump(mode="python")

    @classmethod
    def from_yaml_dict(cls, data: dict[str, Any] | None) -> AlgebraSettings:
        """Create from a YAML dict; missing sections fall back to defaults."""
        return cls.model_validate(data or {})
