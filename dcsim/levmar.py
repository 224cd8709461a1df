"""Levenberg-Marquardt nonlinear least-squares fitting."""

from __future__ import annotations

from typing import Callable, Sequence

Model = Callable[[float, Sequence[float]], "tuple[float, Sequence[float]]"]


def gauss_jordan(
    a: Sequence[Sequence[float]], b: Sequence[Sequence[float]]
) -> tuple[list[list[float]], list[list[float]]]:
    """Solve a·X = b by Gauss-Jordan elimination with full pivoting.

    Returns the inverse of ``a`` and the solution matrix ``X``.
    """
    n = len(a)
    mat = [[float(v) for v in row] for row in a]
    rhs = [[float(v) for v in row] for row in b]
    if any(len(row) != n for row in mat) or len(rhs) != n:
        raise ValueError("gauss_jordan needs a square matrix and a matching right-hand side")

    ipiv = [0] * n
    indxr = [0] * n
    indxc = [0] * n

    for i in range(n):
        big = 0.0
        irow = icol = -1
        for j in range(n):
            if ipiv[j] == 1:
                continue
            for k in range(n):
                if ipiv[k] == 0:
                    if abs(mat[j][k]) >= big:
                        big = abs(mat[j][k])
                        irow, icol = j, k
                elif ipiv[k] > 1:
                    raise ValueError("Singular Matrix")
        ipiv[icol] += 1
        if irow != icol:
            mat[irow], mat[icol] = mat[icol], mat[irow]
            rhs[irow], rhs[icol] = rhs[icol], rhs[irow]
        indxr[i] = irow
        indxc[i] = icol

        pivot = mat[icol][icol]
        if pivot == 0:
            raise ValueError("Singular Matrix")
        pivinv = 1 / pivot
        mat[icol][icol] = 1.0
        mat[icol] = [v * pivinv for v in mat[icol]]
        rhs[icol] = [v * pivinv for v in rhs[icol]]

        for ll in range(n):
            if ll == icol:
                continue
            dum = mat[ll][icol]
            mat[ll][icol] = 0.0
            mat[ll] = [v - p * dum for v, p in zip(mat[ll], mat[icol])]
            rhs[ll] = [v - p * dum for v, p in zip(rhs[ll], rhs[icol])]

    for r, c in reversed(list(zip(indxr, indxc))):
        if r != c:
            for row in mat:
                row[r], row[c] = row[c], row[r]

    return mat, rhs


def sort_covariance(
    covar: Sequence[Sequence[float]], free: Sequence[bool]
) -> list[list[float]]:
    """Spread a covariance of the free parameters over all parameters.

    Rows and columns of fixed parameters are zero.
    """
    positions = [i for i, is_free in enumerate(free) if is_free]
    ma = len(free)
    full = [[0.0] * ma for _ in range(ma)]
    for j, pj in enumerate(positions):
        for k, pk in enumerate(positions):
            full[pj][pk] = float(covar[j][k])
    return full


def mrq_coefficients(
    x: Sequence[float],
    y: Sequence[float],
    sig: Sequence[float],
    params: Sequence[float],
    free: Sequence[bool],
    model: Model,
) -> tuple[list[list[float]], list[float], float]:
    """Curvature matrix, gradient vector and chi-square of a model against data."""
    if len(free) != len(params):
        raise ValueError("free flags and parameters differ in length")
    free_idx = [i for i, is_free in enumerate(free) if is_free]
    mfit = len(free_idx)

    alpha = [[0.0] * mfit for _ in range(mfit)]
    beta = [0.0] * mfit
    chisq = 0.0

    for xi, yi, si in zip(x, y, sig, strict=True):
        ymod, dyda = model(xi, params)
        sig2i = 1 / (si * si)
        dy = yi - ymod
        for j, l in enumerate(free_idx):
            wt = dyda[l] * sig2i
            for k, m in enumerate(free_idx[: j + 1]):
                alpha[j][k] += wt * dyda[m]
            beta[j] += dy * wt
        chisq += dy * dy * sig2i

    for j in range(1, mfit):
        for k in range(j):
            alpha[k][j] = alpha[j][k]

    return alpha, beta, chisq


class MarquardtFitter:
    """Iterative Levenberg-Marquardt fit of a model to data with errors."""

    def __init__(
        self,
        x: Sequence[float],
        y: Sequence[float],
        sig: Sequence[float],
        params: Sequence[float],
        free: Sequence[bool],
        model: Model,
    ) -> None:
        if len(free) != len(params):
            raise ValueError("free flags and parameters differ in length")
        self.x = list(x)
        self.y = list(y)
        self.sig = list(sig)
        if not len(self.x) == len(self.y) == len(self.sig):
            raise ValueError("x, y and sig differ in length")
        self.params = [float(p) for p in params]
        self.free = [bool(f) for f in free]
        self.model = model
        self._free_idx = [i for i, f in enumerate(self.free) if f]

        self.alamda = 0.001
        self.alpha, self.beta, self.chisq = mrq_coefficients(
            self.x, self.y, self.sig, self.params, self.free, self.model
        )
        self._ochisq = self.chisq
        self.covariance: list[list[float]] | None = None

    def step(self) -> float:
        """Try one damped update; keep it if chi-square falls. Returns chi-square."""
        trial = [
            [v * (1 + self.alamda) if j == k else v for k, v in enumerate(row)]
            for j, row in enumerate(self.alpha)
        ]
        _, solution = gauss_jordan(trial, [[b] for b in self.beta])

        atry = list(self.params)
        for l, row in zip(self._free_idx, solution):
            atry[l] += row[0]

        alpha, beta, chisq = mrq_coefficients(
            self.x, self.y, self.sig, atry, self.free, self.model
        )
        if chisq < self._ochisq:
            self.alamda *= 0.1
            self._ochisq = chisq
            self.alpha, self.beta = alpha, beta
            self.params = atry
            self.chisq = chisq
        else:
            self.alamda *= 10
            self.chisq = self._ochisq
        return self.chisq

    def finish(self) -> list[list[float]]:
        """Covariance matrix of all parameters at the current solution."""
        inverse, _ = gauss_jordan(self.alpha, [[b] for b in self.beta])
        self.alamda = 0.0
        self.covariance = sort_covariance(inverse, self.free)
        return self.covariance