from __future__ import annotations

import warnings

import numpy as np
from scipy.linalg import LinAlgWarning, lu_factor, lu_solve

from marquardt.error import SingularMatrixError

__all__ = ["LUDecomposition"]


class LUDecomposition:
    """LU decomposition with partial pivoting of a square matrix.

    The factorization is computed once on construction and can then be used to
    solve ``A x = b`` for any number of right-hand sides.  Unlike
    ``numpy.linalg.solve``, a singular matrix does not raise on construction;
    check :py:attr:`is_nonsingular` before calling :py:meth:`solve`.

    Parameters
    ----------
    matrix : array_like, shape (n, n)
        Matrix to decompose.  The input is copied, so it may be modified
        afterwards without affecting the decomposition.

    Examples
    --------
    >>> A = np.array([[4.0, 1.0], [1.0, 3.0]])
    >>> lu = LUDecomposition(A)
    >>> lu.is_nonsingular
    True
    >>> lu.solve(np.array([1.0, 2.0]))
    array([0.09090909, 0.63636364])
    """

    def __init__(self, matrix):
        matrix = np.asarray(matrix, dtype=float)
        if matrix.ndim != 2 or matrix.shape[0] != matrix.shape[1]:
            raise ValueError(
                f"LU decomposition requires a square matrix, got shape {matrix.shape}"
            )

        self.n = matrix.shape[0]

        # Non-finite entries cannot be factorized meaningfully, so they are
        # reported as a singular matrix instead of propagating NaNs.
        if not np.all(np.isfinite(matrix)):
            self._lu, self._piv = None, None
            self._nonsingular = False
            return

        with warnings.catch_warnings():
            warnings.simplefilter("ignore", LinAlgWarning)  # exactly-zero pivot
            self._lu, self._piv = lu_factor(matrix, check_finite=False)

        pivots = np.diag(self._lu)
        self._nonsingular = bool(np.all(np.isfinite(pivots)) and np.all(pivots != 0.0))

    @property
    def is_nonsingular(self) -> bool:
        """Whether the upper-triangular factor has no zero pivots."""
        return self._nonsingular

    def solve(self, b) -> np.ndarray:
        """Solve ``A x = b`` using the stored factorization.

        Parameters
        ----------
        b : array_like, shape (n,)
            Right-hand side vector.

        Returns
        -------
        x : ndarray, shape (n,)
            Solution vector.

        Raises
        ------
        SingularMatrixError
            If the decomposed matrix is singular.
        """
        if not self._nonsingular:
            raise SingularMatrixError("Matrix is singular, cannot solve")

        b = np.asarray(b, dtype=float)
        if b.shape != (self.n,):
            raise ValueError(
                f"Right-hand side must have shape ({self.n},), got {b.shape}"
            )

        return lu_solve((self._lu, self._piv), b, check_finite=False)
