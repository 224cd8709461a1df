"""Cubic spline construction and evaluation."""

from __future__ import annotations

from bisect import bisect_right
from typing import Sequence

_NATURAL = 0.99e30


def spline_second_derivatives(
    x: Sequence[float], y: Sequence[float], yp1: float, ypn: float
) -> list[float]:
    """Second derivatives of the cubic spline through (x, y).

    A boundary slope above 0.99e30 selects a natural end (zero second derivative).
    """
    n = len(x)
    if n < 2 or len(y) != n:
        raise ValueError("spline needs at least two points and matching x and y")

    if yp1 > _NATURAL:
        y2 = [0.0]
        u = [0.0]
    else:
        y2 = [0.5]
        u = [(3.0 / (x[1] - x[0])) * ((y[1] - y[0]) / (x[1] - x[0]) - yp1)]

    for i in range(1, n - 1):
        sig = (x[i] - x[i - 1]) / (x[i + 1] - x[i - 1])
        p = sig * y2[i - 1] + 2
        y2.append((sig - 1) / p)
        slope_diff = (y[i + 1] - y[i]) / (x[i + 1] - x[i]) - (y[i] - y[i - 1]) / (
            x[i] - x[i - 1]
        )
        u.append((6 * slope_diff / (x[i + 1] - x[i - 1]) - sig * u[i - 1]) / p)

    if ypn > _NATURAL:
        qn = un = 0.0
    else:
        qn = 0.5
        un = (3.0 / (x[n - 1] - x[n - 2])) * (
            ypn - (y[n - 1] - y[n - 2]) / (x[n - 1] - x[n - 2])
        )

    y2.append((un - qn * u[n - 2]) / (qn * y2[n - 2] + 1))

    for k in range(n - 2, -1, -1):
        y2[k] = y2[k] * y2[k + 1] + u[k]

    return y2


def splint(
    xa: Sequence[float], ya: Sequence[float], y2a: Sequence[float], x: float
) -> float:
    """Evaluate the cubic spline with second derivatives y2a at x."""
    n = len(xa)
    if n < 2:
        raise ValueError("splint needs at least two points")
    lo = min(max(bisect_right(xa, x) - 1, 0), n - 2)
    hi = lo + 1

    h = xa[hi] - xa[lo]
    if h == 0:
        raise ValueError("bad xa input in splint")

    a = (xa[hi] - x) / h
    b = (x - xa[lo]) / h
    return (
        a * ya[lo]
        + b * ya[hi]
        + ((a**3 - a) * y2a[lo] + (b**3 - b) * y2a[hi]) * h * h / 6.0
    )