"""
Eigen decomposition and SVD by deflating power iteration.

The SVD of X is assembled from two symmetric eigenproblems: X X^t gives
the left singular vectors and the singular values, X^t X gives the right
singular vectors. Right vector i starts its power iteration at X^t l_i, the
partner of left vector i, so pairs stay matched even when singular values
repeat and their eigenspaces have no preferred basis. The relative sign of
each pair is still ambiguous; that is the same as allowing negative
singular values, so the decomposition tries every sign pattern of the
diagonal and keeps the one that reconstructs X best.
"""

from __future__ import annotations

import logging
import math
import random
from collections.abc import Sequence
from dataclasses import dataclass

import numpy as np

from chuk_music_algebra.constants import LINEAR_EPS, LINEAR_PEPS, LINEAR_PMAX, ErrorMessages
from chuk_music_algebra.errors import ConvergenceError
from chuk_music_algebra.numeric.matrix import (
    Matrix,
    Vector,
    distance,
    dot,
    l2_norm,
    normalize,
)

logger = logging.getLogger(__name__)


def rayleigh_quotient(m: Matrix, v: Sequence[float]) -> float:
    """v^t M v; the eigenvalue when v is a unit eigenvector."""
    return dot(v, m.apply(v))


class EigenSolver:
    """
    Eigenvectors of a symmetric matrix by power iteration with deflation.

    Args:
        eps: Eigenvalues below this mean the iteration settled on a
            near-null component and must restart
        pmax: Iterations allowed before a start vector is abandoned
        peps: Convergence threshold on the distance between iterates
        max_restarts: Restarts allowed per eigenvector; None means no limit
        rng: Source of random restart vectors
    """

    def __init__(
        self,
        eps: float = LINEAR_EPS,
        pmax: int = LINEAR_PMAX,
        peps: float = LINEAR_PEPS,
        max_restarts: int | None = None,
        rng: random.Random | None = None,
    ):
        self.eps = eps
        self.pmax = pmax
        self.peps = peps
        self.max_restarts = max_restarts
        self.rng = rng or random.Random()

    def power_iteration(
        self,
        m: Matrix,
        index: int = 0,
        rank: int = 1,
        start: Sequence[float] | None = None,
    ) -> Vector:
        """
        Find one unit eigenvector of m.

        Starts from start (normalized), or from the normalized all-ones
        vector when start is missing or zero, and iterates
        x <- normalize(M x) until successive iterates are closer than peps.
        When that takes more than pmax steps, or the eigenvalue found is
        below eps, a warning is logged and the search restarts from a random
        unit vector orthogonal to the failed start.

        Raises:
            ConvergenceError: Only when max_restarts is set and exhausted
        """
        if start is not None and l2_norm(start) > 0:
            start = normalize(start)
        else:
            start = normalize(np.ones(m.rows))
        restarts = 0

        while True:
            x, dist, converged = self._iterate(m, start)
            eigenvalue = rayleigh_quotient(m, x) if x is not None else 0.0
            if converged and eigenvalue >= self.eps:
                return x

            logger.warning(
                f"Power iteration failed for vector {index + 1}/{rank}: "
                f"distance {dist:.3g}, eigenvalue {eigenvalue:.3g}; restarting"
            )
            restarts += 1
            if self.max_restarts is not None and restarts > self.max_restarts:
                raise ConvergenceError(
                    ErrorMessages.NOT_CONVERGED.format(
                        index=index + 1, rank=rank, restarts=self.max_restarts
                    )
                )
            start = self.random_orthonormal(start)

    def _iterate(self, m: Matrix, start: Vector) -> tuple[Vector | None, float, bool]:
        x = start
        dist = math.inf
        for _ in range(self.pmax):
            product = m.apply(x)
            if l2_norm(product) == 0:
                return None, dist, False
            following = normalize(product)
            dist = distance(following, x)
            x = following
            if dist < self.peps:
                return x, dist, True
        return x, dist, False

    def random_orthonormal(self, v: Sequence[float]) -> Vector:
        """A random unit vector orthogonal to the unit vector v."""
        v = np.asarray(v, dtype=float)
        while True:
            r = np.array([self.rng.uniform(-1.0, 1.0) for _ in range(len(v))])
            r = r - dot(r, v) * v
            if l2_norm(r) > 0:
                return normalize(r)

    def eigen_basis(
        self,
        m: Matrix,
        rank: int | None = None,
        starts: Sequence[Sequence[float]] | None = None,
    ) -> Matrix:
        """
        The leading eigenvectors of a symmetric matrix, as columns.

        Finds one eigenvector per unit of rank; after each one the matrix is
        deflated by subtracting lambda * x x^t. starts, when given, holds a
        start vector for each eigenvector.
        """
        if rank is None:
            rank = m.rank()

        vectors: list[Vector] = []
        for i in range(rank):
            start = starts[i] if starts is not None else None
            x = self.power_iteration(m, i, rank, start)
            eigenvalue = rayleigh_quotient(m, x)
            vectors.append(x)
            m = m.subtract(Matrix.outer(x, x).scale(eigenvalue))

        return Matrix.from_columns(vectors, m.rows)


@dataclass(frozen=True)
class SingularValueDecomposition:
    """
    X ~= L D R^t with L and R holding singular vectors as columns.

    singular_values may be negative; the sign absorbs the ambiguity in the
    relative sign of each left and right pair.
    """

    left: Matrix
    singular_values: tuple[float, ...]
    right: Matrix

    @property
    def rank(self) -> int:
        return len(self.singular_values)

    def reconstruct(self) -> Matrix:
        """L D R^t."""
        return _weighted_sum(self.left, self.right, self.singular_values)

    def pseudo_inverse(self) -> Matrix:
        """
        L D^-1 R^t.

        This keeps the shape of X, so the result can be read back as a
        phrase of the same number of slots.
        """
        return _weighted_sum(self.left, self.right, [1.0 / d for d in self.singular_values])

    def error(self, x: Matrix) -> float:
        """Summed elementwise absolute reconstruction error against x."""
        return x.abs_difference(self.reconstruct())


def _weighted_sum(left: Matrix, right: Matrix, weights: Sequence[float]) -> Matrix:
    result = Matrix.zeros(left.rows, right.rows)
    for i, w in enumerate(weights):
        result = result.add(Matrix.outer(left.column(i), right.column(i)).scale(w))
    return result


def singular_value_decomposition(
    x: Matrix, solver: EigenSolver | None = None
) -> SingularValueDecomposition:
    """
    Decompose x using power-iteration eigenbases.

    Left vectors come from X X^t, right vectors from X^t X with vector i
    started at X^t l_i, singular values from sqrt(l^t X X^t l). All 2^rank
    sign patterns of the diagonal are tried and the one with the smallest
    summed absolute error is kept.
    """
    solver = solver or EigenSolver()
    xt = x.transpose()
    xxt = x.multiply(xt)
    xtx = xt.multiply(x)
    rank = x.rank()

    left = solver.eigen_basis(xxt, rank)
    right = solver.eigen_basis(xtx, rank, starts=[xt.apply(col) for col in left.columns()])
    magnitudes = [math.sqrt(max(0.0, rayleigh_quotient(xxt, col))) for col in left.columns()]

    components = [
        Matrix.outer(left.column(i), right.column(i)).scale(magnitudes[i]) for i in range(rank)
    ]

    best_pattern = 0
    best_error = math.inf
    for pattern in range(2**rank):
        approximation = Matrix.zeros(x.rows, x.cols)
        for i, component in enumerate(components):
            approximation = (
                approximation.subtract(component)
                if _flipped(pattern, i, rank)
                else approximation.add(component)
            )
        error = x.abs_difference(approximation)
        if error < best_error:
            best_pattern, best_error = pattern, error

    values = tuple(
        -d if _flipped(best_pattern, i, rank) else d for i, d in enumerate(magnitudes)
    )
    logger.debug(f"SVD of rank {rank}: sign pattern {best_pattern}, error {best_error:.3g}")
    return SingularValueDecomposition(left, values, right)


def _flipped(pattern: int, i: int, rank: int) -> bool:
    # Most significant bit belongs to the first singular value
    return bool((pattern >> (rank - 1 - i)) & 1)
