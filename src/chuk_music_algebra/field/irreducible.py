"""
Irreducibility over GF(2^12).

A monic F of degree d is irreducible iff it has no factor of degree <= d/2,
and F has a factor of degree dividing i iff gcd(F, x^(q^i) - x) is
nontrivial, where q = 2^12. x^(q^i) mod F is reached by 12*i squarings.
"""

from __future__ import annotations

import logging
import random

from chuk_music_algebra.constants import FIELD_DEGREE
from chuk_music_algebra.field.gf4096 import FieldElement
from chuk_music_algebra.field.polynomial import Polynomial

logger = logging.getLogger(__name__)


def is_irreducible(poly: Polynomial) -> bool:
    """
    Test whether a polynomial over GF(2^12) is irreducible.

    Constants are trivially irreducible. A polynomial whose leading
    coefficient is not one is rejected, since that coefficient can be
    factored out.
    """
    if poly.is_zero():
        return False
    if poly.degree == 0:
        return True
    if not poly.is_monic():
        return False

    x = Polynomial.x()
    frobenius = x
    for _ in range(1, poly.degree // 2 + 1):
        # x^(q^i) from x^(q^(i-1)) by another 12 squarings
        frobenius = frobenius.pow2_mod(FIELD_DEGREE, poly)
        if poly.gcd(frobenius - x).degree > 0:
            return False
    return True


def random_polynomial(degree: int, rng: random.Random | None = None) -> Polynomial:
    """A random monic polynomial of the given degree."""
    if degree < 0:
        raise ValueError(f"Degree must be non-negative, got {degree}")
    terms = {d: FieldElement.random(rng) for d in range(degree)}
    terms[degree] = FieldElement.ONE
    return Polynomial(terms)


def random_irreducible(
    degree: int,
    rng: random.Random | None = None,
    max_attempts: int | None = None,
) -> Polynomial:
    """
    Find a random irreducible monic polynomial of the given degree.

    Samples random monic polynomials until one passes is_irreducible().
    Roughly 1 in `degree` candidates succeeds, so this usually takes a
    handful of attempts, but it is not bounded unless max_attempts is set.

    Raises:
        RuntimeError: If max_attempts candidates were all reducible
    """
    attempts = 0
    while max_attempts is None or attempts < max_attempts:
        attempts += 1
        candidate = random_polynomial(degree, rng)
        if is_irreducible(candidate):
            logger.info(f"Found irreducible of degree {degree} after {attempts} attempts")
            return candidate
        logger.debug(f"Attempt {attempts}: candidate of degree {degree} is reducible")

    raise RuntimeError(f"No irreducible polynomial of degree {degree} in {max_attempts} attempts")
