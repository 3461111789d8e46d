"""
Polynomials over GF(2^12).

A polynomial is a sparse mapping from degree to nonzero coefficient.
The ring operations, long division, gcd and inversion modulo a chosen
polynomial M are provided here; irreducibility lives in irreducible.py.
"""

from __future__ import annotations

from collections.abc import Iterator, Mapping, Sequence
from typing import Any

from chuk_music_algebra.constants import ErrorMessages
from chuk_music_algebra.errors import NoInverseError
from chuk_music_algebra.field.gf4096 import FieldElement

_ZERO = FieldElement.ZERO


class Polynomial:
    """
    A polynomial with GF(2^12) coefficients.

    Zero coefficients are never stored. The zero polynomial has degree -1.

    Immutable and hashable.
    """

    __slots__ = ("_terms",)
    _terms: dict[int, FieldElement]

    def __init__(self, terms: Mapping[int, FieldElement] | None = None) -> None:
        """Create a polynomial from a {degree: coefficient} mapping."""
        cleaned: dict[int, FieldElement] = {}
        for degree, coefficient in (terms or {}).items():
            if degree < 0:
                raise ValueError(f"Degrees must be non-negative, got {degree}")
            if coefficient:
                cleaned[int(degree)] = coefficient
        object.__setattr__(self, "_terms", cleaned)

    def __setattr__(self, name: str, value: object) -> None:
        raise AttributeError("Polynomial is immutable")

    # Constructors

    @classmethod
    def zero(cls) -> Polynomial:
        return cls()

    @classmethod
    def one(cls) -> Polynomial:
        return cls({0: FieldElement.ONE})

    @classmethod
    def x(cls) -> Polynomial:
        """The monomial x."""
        return cls({1: FieldElement.ONE})

    @classmethod
    def constant(cls, c: FieldElement) -> Polynomial:
        return cls({0: c})

    @classmethod
    def monomial(cls, c: FieldElement, degree: int) -> Polynomial:
        """c * x^degree."""
        return cls({degree: c})

    @classmethod
    def from_coefficients(cls, coefficients: Sequence[FieldElement]) -> Polynomial:
        """Build from a dense coefficient list, lowest degree first."""
        return cls(dict(enumerate(coefficients)))

    # Inspection

    @property
    def degree(self) -> int:
        return max(self._terms) if self._terms else -1

    @property
    def highest_coefficient(self) -> FieldElement:
        """Leading coefficient (zero for the zero polynomial)."""
        return self._terms[self.degree] if self._terms else _ZERO

    def coefficient(self, degree: int) -> FieldElement:
        return self._terms.get(degree, _ZERO)

    def coefficients(self) -> list[FieldElement]:
        """Dense coefficient list, lowest degree first."""
        return [self.coefficient(d) for d in range(self.degree + 1)]

    def terms(self) -> Iterator[tuple[int, FieldElement]]:
        """(degree, coefficient) pairs in descending degree."""
        for degree in sorted(self._terms, reverse=True):
            yield degree, self._terms[degree]

    def is_zero(self) -> bool:
        return not self._terms

    def is_monic(self) -> bool:
        return self.highest_coefficient.is_one()

    def without_highest_power(self) -> Polynomial:
        """This polynomial with its leading term removed."""
        if not self._terms:
            return self
        terms = dict(self._terms)
        del terms[self.degree]
        return Polynomial(terms)

    # Ring operations

    def add(self, other: Polynomial) -> Polynomial:
        terms = dict(self._terms)
        for degree, coefficient in other._terms.items():
            terms[degree] = terms.get(degree, _ZERO) + coefficient
        return Polynomial(terms)

    # Characteristic 2
    subtract = add

    def scale(self, c: FieldElement) -> Polynomial:
        """Multiply every coefficient by a field element."""
        return Polynomial({d: c * v for d, v in self._terms.items()})

    def multiply(self, other: Polynomial) -> Polynomial:
        terms: dict[int, FieldElement] = {}
        for da, ca in self._terms.items():
            for db, cb in other._terms.items():
                terms[da + db] = terms.get(da + db, _ZERO) + ca * cb
        return Polynomial(terms)

    def square(self) -> Polynomial:
        """
        Square using the Frobenius map.

        In characteristic 2 the cross terms cancel, so each coefficient is
        squared and its degree doubled.
        """
        return Polynomial({2 * d: c * c for d, c in self._terms.items()})

    def long_division(self, divisor: Polynomial) -> tuple[Polynomial, Polynomial]:
        """
        Divide by another polynomial.

        Eliminates the leading term of the running remainder one degree at a
        time until its degree drops below the divisor's.

        Returns:
            (quotient, remainder) with self == quotient * divisor + remainder

        Raises:
            ZeroDivisionError: If divisor is the zero polynomial
        """
        if divisor.is_zero():
            raise ZeroDivisionError(ErrorMessages.ZERO_DIVISOR)

        divisor_degree = divisor.degree
        lead_inverse = divisor.highest_coefficient.invert()
        remainder = dict(self._terms)
        quotient: dict[int, FieldElement] = {}

        while remainder:
            degree = max(remainder)
            if degree < divisor_degree:
                break
            factor = remainder[degree] * lead_inverse
            offset = degree - divisor_degree
            quotient[offset] = factor
            for d, c in divisor._terms.items():
                value = remainder.get(d + offset, _ZERO) + factor * c
                if value:
                    remainder[d + offset] = value
                else:
                    remainder.pop(d + offset, None)

        return Polynomial(quotient), Polynomial(remainder)

    def gcd(self, other: Polynomial) -> Polynomial:
        """
        Greatest common divisor by repeated division.

        The result is made monic so equal ideals give equal polynomials.
        """
        a, b = self, other
        while not b.is_zero():
            a, b = b, a.long_division(b)[1]
        return a.monic()

    def monic(self) -> Polynomial:
        """Divide through by the leading coefficient."""
        if self.is_zero() or self.is_monic():
            return self
        return self.scale(self.highest_coefficient.invert())

    def evaluate(self, x: FieldElement) -> FieldElement:
        """Evaluate at a field element (Horner's rule)."""
        result = _ZERO
        for degree in range(self.degree, -1, -1):
            result = result * x + self.coefficient(degree)
        return result

    def pow2_mod(self, e: int, modulus: Polynomial) -> Polynomial:
        """self^(2^e) mod modulus, by e rounds of squaring and reduction."""
        result = self.long_division(modulus)[1]
        for _ in range(e):
            result = result.square().long_division(modulus)[1]
        return result

    def inverse_mod(self, modulus: Polynomial) -> Polynomial:
        """
        Inverse in the ring GF(2^12)[x] / modulus.

        Runs the extended Euclidean algorithm between modulus and self,
        tracking the coefficient of self.

        Raises:
            NoInverseError: If the last nonzero remainder is not a constant,
                i.e. self and modulus share a factor (or self is zero mod it)
        """
        if self.is_zero():
            raise NoInverseError(ErrorMessages.NOT_COPRIME.format(gcd=modulus))

        x_previous, x = Polynomial.zero(), Polynomial.one()
        a = self
        quotient, remainder = modulus.long_division(a)
        while not remainder.is_zero():
            x_previous, x = x, x_previous - quotient * x
            quotient, next_remainder = a.long_division(remainder)
            a, remainder = remainder, next_remainder

        if a.degree != 0:
            raise NoInverseError(ErrorMessages.NOT_COPRIME.format(gcd=a.monic()))
        # Normalize by the last nonzero (constant) remainder
        return x.scale(a.highest_coefficient.invert())

    # Serialization

    def to_dict(self) -> dict[int, int]:
        """{degree: coefficient bits} for YAML/JSON storage."""
        return {d: c.bits for d, c in sorted(self._terms.items())}

    @classmethod
    def from_dict(cls, data: Mapping[Any, int]) -> Polynomial:
        return cls({int(d): FieldElement(int(bits)) for d, bits in data.items()})

    # Operators

    def __add__(self, other: Polynomial) -> Polynomial:
        if not isinstance(other, Polynomial):
            return NotImplemented
        return self.add(other)

    __sub__ = __add__

    def __neg__(self) -> Polynomial:
        return self

    def __mul__(self, other: Polynomial) -> Polynomial:
        if not isinstance(other, Polynomial):
            return NotImplemented
        return self.multiply(other)

    def __divmod__(self, other: Polynomial) -> tuple[Polynomial, Polynomial]:
        if not isinstance(other, Polynomial):
            return NotImplemented
        return self.long_division(other)

    def __floordiv__(self, other: Polynomial) -> Polynomial:
        if not isinstance(other, Polynomial):
            return NotImplemented
        return self.long_division(other)[0]

    def __mod__(self, other: Polynomial) -> Polynomial:
        if not isinstance(other, Polynomial):
            return NotImplemented
        return self.long_division(other)[1]

    def __bool__(self) -> bool:
        return bool(self._terms)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Polynomial):
            return NotImplemented
        return self._terms == other._terms

    def __hash__(self) -> int:
        return hash(frozenset(self._terms.items()))

    def __repr__(self) -> str:
        return f"Polynomial({self.to_dict()!r})"

    def __str__(self) -> str:
        if not self._terms:
            return "0"
        parts = []
        for degree, c in self.terms():
            if degree == 0:
                parts.append(f"[{c}]")
            elif degree == 1:
                parts.append(f"[{c}]x")
            else:
                parts.append(f"[{c}]x^{degree}")
        return " + ".join(parts)
