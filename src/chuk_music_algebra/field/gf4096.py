"""
GF(2^12) arithmetic.

An element is a 12-bit vector over GF(2), read as the coefficients of a
polynomial of degree < 12 (bit i is the coefficient of x^i). Arithmetic is
polynomial arithmetic modulo M0 = 1 + x^3 + x^12.

- Addition (and subtraction) is XOR
- Multiplication is carry-less multiplication reduced mod M0
- Every nonzero element has an inverse (extended Euclid against M0)
"""

from __future__ import annotations

import random as _random
from collections.abc import Sequence
from dataclasses import dataclass
from typing import ClassVar

from chuk_music_algebra.constants import (
    FIELD_DEGREE,
    FIELD_MASK,
    FIELD_MODULUS,
    ErrorMessages,
)

# M0 without its leading term: what x^12 reduces to
_REDUCTION = FIELD_MODULUS ^ (1 << FIELD_DEGREE)


def _clmul(a: int, b: int) -> int:
    """Carry-less product of two GF(2)[x] polynomials held as ints."""
    result = 0
    while b:
        if b & 1:
            result ^= a
        a <<= 1
        b >>= 1
    return result


def _divmod(p: int, d: int) -> tuple[int, int]:
    """Quotient and remainder of GF(2)[x] polynomials held as ints."""
    quotient = 0
    width = d.bit_length()
    while p.bit_length() >= width:
        shift = p.bit_length() - width
        quotient ^= 1 << shift
        p ^= d << shift
    return quotient, p


@dataclass(frozen=True)
class FieldElement:
    """
    An element of GF(2^12).

    Immutable and hashable. Negation is the identity (characteristic 2),
    so a - b == a + b.
    """

    bits: int

    ZERO: ClassVar[FieldElement]
    ONE: ClassVar[FieldElement]

    def __post_init__(self) -> None:
        if not 0 <= self.bits <= FIELD_MASK:
            raise ValueError(f"Field element must fit in {FIELD_DEGREE} bits, got {self.bits}")

    @classmethod
    def from_coefficients(cls, coefficients: Sequence[int | bool]) -> FieldElement:
        """
        Build an element from its coefficients, lowest power first.

        FieldElement.from_coefficients([1, 1, 0, 1]) is 1 + x + x^3.
        """
        if len(coefficients) > FIELD_DEGREE:
            raise ValueError(f"At most {FIELD_DEGREE} coefficients, got {len(coefficients)}")
        bits = 0
        for i, c in enumerate(coefficients):
            if c:
                bits |= 1 << i
        return cls(bits)

    @classmethod
    def random(cls, rng: _random.Random | None = None) -> FieldElement:
        """A uniformly random element (zero included)."""
        return cls((rng or _random).getrandbits(FIELD_DEGREE))

    def coefficient(self, i: int) -> int:
        """The coefficient of x^i (0 or 1)."""
        if not 0 <= i < FIELD_DEGREE:
            raise IndexError(f"Index must be in [0, {FIELD_DEGREE}), got {i}")
        return (self.bits >> i) & 1

    def is_zero(self) -> bool:
        return self.bits == 0

    def is_one(self) -> bool:
        return self.bits == 1

    def add(self, other: FieldElement) -> FieldElement:
        return FieldElement(self.bits ^ other.bits)

    def negate(self) -> FieldElement:
        return self

    def multiply(self, other: FieldElement) -> FieldElement:
        a, b = self.bits, other.bits
        product = 0
        for _ in range(FIELD_DEGREE):
            if b & 1:
                product ^= a
            # a *= x, folding x^12 back in as 1 + x^3
            carry = a >> (FIELD_DEGREE - 1)
            a = (a << 1) & FIELD_MASK
            if carry:
                a ^= _REDUCTION
            b >>= 1
        return FieldElement(product)

    def invert(self) -> FieldElement:
        """
        Multiplicative inverse via the extended Euclidean algorithm.

        The last nonzero remainder against M0 is always 1 because M0 is
        irreducible, and no scalar normalization is needed over GF(2).

        Raises:
            ZeroDivisionError: If this is the zero element
        """
        if self.is_zero():
            raise ZeroDivisionError(ErrorMessages.ZERO_INVERSE)

        previous, remainder = FIELD_MODULUS, self.bits
        x_previous, x = 0, 1
        quotient, rest = _divmod(previous, remainder)
        while rest:
            x_previous, x = x, x_previous ^ _clmul(quotient, x)
            previous, remainder = remainder, rest
            quotient, rest = _divmod(previous, remainder)

        return FieldElement(_divmod(x, FIELD_MODULUS)[1])

    def pow(self, e: int) -> FieldElement:
        """Raise to an integer power by square-and-multiply; e < 0 uses the inverse."""
        if e < 0:
            return self.invert().pow(-e)
        result = FieldElement.ONE
        base = self
        while e:
            if e & 1:
                result = result.multiply(base)
            base = base.multiply(base)
            e >>= 1
        return result

    def __add__(self, other: FieldElement) -> FieldElement:
        if not isinstance(other, FieldElement):
            return NotImplemented
        return self.add(other)

    # Characteristic 2: subtraction is addition
    __sub__ = __add__

    def __neg__(self) -> FieldElement:
        return self

    def __mul__(self, other: FieldElement) -> FieldElement:
        if not isinstance(other, FieldElement):
            return NotImplemented
        return self.multiply(other)

    def __truediv__(self, other: FieldElement) -> FieldElement:
        if not isinstance(other, FieldElement):
            return NotImplemented
        return self.multiply(other.invert())

    def __pow__(self, e: int) -> FieldElement:
        if not isinstance(e, int):
            return NotImplemented
        return self.pow(e)

    def __invert__(self) -> FieldElement:
        return self.invert()

    def __bool__(self) -> bool:
        return self.bits != 0

    def __repr__(self) -> str:
        return f"FieldElement(0b{self.bits:b})"

    def __str__(self) -> str:
        # Coefficients lowest power first, e.g. 110100000000 for 1 + x + x^3
        return "".join(str((self.bits >> i) & 1) for i in range(FIELD_DEGREE))


FieldElement.ZERO = FieldElement(0)
FieldElement.ONE = FieldElement(1)
