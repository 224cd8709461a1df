"""Voigt line shapes: the Faddeeva function, the true Voigt profile and the pseudo-Voigt profile."""

from __future__ import annotations

import cmath
import math
from typing import Sequence

_C1 = 0.5641896
_C2 = 1.12837917
_CZ1, _CZ2 = 0.4613135, 0.1901635
_CZ3, _CZ4 = 0.09999216, 1.7844927
_CZ5, _CZ6 = 0.002883994, 5.5253437

_ITMAX = 400
_ITPOL = 40
_EPS = 1e-9

_VOIGT_C1 = 1.665109222315395
_VOIGT_C2 = _VOIGT_C1 / 2
_VOIGT_C3 = 1.128379167095513


def _continued_fraction(z: complex) -> complex:
    """w(z) from its continued-fraction expansion (upper half plane)."""
    a0, a1 = 0j, 1 + 0j
    b0, b1 = 1 + 0j, z
    previous = 0j
    w = a1 / b1
    for n in range(1, _ITMAX):
        cn = -n / 2
        a2 = z * a1 + cn * a0
        b2 = z * b1 + cn * b0
        a0, a1, b0, b1 = a1, a2, b1, b2
        scale = abs(b1)
        if scale:
            a0, a1, b0, b1 = a0 / scale, a1 / scale, b0 / scale, b1 / scale
        if b1 == 0:
            continue
        w = a1 / b1
        if w != 0 and abs((w - previous) / w) < _EPS:
            break
        previous = w
    return w * _C1 * 1j


def faddeeva(xw: float, yw: float) -> tuple[float, float]:
    """Real and imaginary parts of the complex error function w(xw + i*yw)."""
    z = complex(xw, yw)
    z2 = z * z
    if abs(xw) > 3 or abs(yw) > 3.9:
        w = z * 1j * (_CZ1 / (z2 - _CZ2) + _CZ3 / (z2 - _CZ4) + _CZ5 / (z2 - _CZ6))
    elif abs(yw) > 0.5:
        w = _continued_fraction(z)
    else:
        zr = -z * 1j
        zr2 = zr * zr
        series: complex = complex(1 / (2 * _ITPOL + 1))
        for i in range(_ITPOL, 1, -1):
            series = 1 / (2 * i - 1) - zr2 * series / i
        series = (1 - zr2 * series) * zr
        w = cmath.exp(-z2) * (1 - _C2 * series)
    return w.real, w.imag


def true_voigt(x: float, a: Sequence[float]) -> tuple[float, list[float]]:
    """Sum of Voigt peaks on a constant background, with parameter derivatives.

    Parameters are laid out as ``[gauss_width, (amplitude, lorentz_width,
    position) * k, background]``; each peak's height at its centre is its
    amplitude.
    """
    na = len(a)
    if na < 5 or (na - 2) % 3:
        raise ValueError("Voigt parameters must be width, triples of peak values and background")

    y = a[-1]
    dyda = [-1.0] * na
    deri1 = 0.0
    width = a[0]

    for j in range(1, na - 1, 3):
        amplitude, lorentz, position = a[j], a[j + 1], a[j + 2]
        xw = (x - position) * _VOIGT_C1 / width
        yw = lorentz * _VOIGT_C2 / width

        aky, _ = faddeeva(0.0, yw)
        dekyy = 2 * yw * aky - _VOIGT_C3

        ak, al = faddeeva(xw, yw)
        derkx = 2 * (yw * al - xw * ak)
        derky = 2 * (xw * al + yw * ak) - _VOIGT_C3
        dy = (derky - dekyy * ak / aky) / aky

        deri1 += ((xw * derkx / aky + yw * dy) * amplitude) / width
        dyda[j] = ak / aky
        dyda[j + 1] = _VOIGT_C2 * amplitude * dy / width
        dyda[j + 2] = -_VOIGT_C1 * amplitude * derkx / (width * aky)
        y += amplitude * ak / aky

    dyda[0] = -deri1
    dyda[-1] = 1.0
    return y, dyda


def pseudo_voigt(x: float, a: Sequence[float]) -> tuple[float, list[float]]:
    """Pseudo-Voigt peak on a constant background, with parameter derivatives.

    Parameters are ``[width, amplitude, lorentz_fraction, position, background]``.
    """
    if len(a) != 5:
        raise ValueError("pseudo-Voigt takes exactly five parameters")
    width, amplitude, eta, position, background = a

    d = x - position
    d2 = d * d
    denom = 4 * d2 + width * width

    const1 = math.sqrt(4 * math.log(2)) / (math.sqrt(math.pi) * width)
    const2 = 4 * math.log(2) / (width * width)

    lorentz = 2 * width / (math.pi * denom)
    gauss = const1 * math.exp(-const2 * d2)

    der_lorentz = lorentz * 8 * d / denom
    der_gauss = 2 * const2 * d * gauss

    term1 = (4 * d2 - width * width) / (denom * denom)
    term2 = (1 - 2 * const2 * d2) / width

    dyda = [
        amplitude * (eta * 2 * term1 / math.pi + (1 - eta) * term2 * gauss),
        eta * lorentz + (1 - eta) * gauss,
        amplitude * (lorentz - gauss),
        amplitude * (eta * der_lorentz + (1 - eta) * der_gauss),
        1.0,
    ]
    y = background + amplitude * (eta * lorentz + (1 - eta) * gauss)
    return y, dyda