"""Ray geometry helpers for the double-crystal spectrometer."""

from __future__ import annotations

import math
import random
from dataclasses import dataclass
from typing import Sequence


@dataclass(frozen=True)
class Reflection:
    """Glancing angle on a crystal plane and the reflected unit direction."""

    angle: float
    rx: float
    ry: float
    rz: float


def box_muller(std_dev: float, mean: float, rng: random.Random) -> float:
    """Draw one normally distributed value by the polar Box-Muller method."""
    while True:
        v1 = 2 * rng.random() - 1
        v2 = 2 * rng.random() - 1
        rsq = v1 * v1 + v2 * v2
        if 0 < rsq < 1:
            break
    fac = math.sqrt(-2 * math.log(rsq) / rsq)
    return mean + std_dev * v2 * fac


def find_index(values: Sequence[float], value: float) -> int:
    """Index of the first element equal to value."""
    for index, item in enumerate(values):
        if item == value:
            return index
    raise ValueError("Value not found in array.")


def first_crystal_approx_angle(
    tetaref: float,
    tetadir: float,
    sin_fi: float,
    cos_fi: float,
    tilt_c1: float,
    squa_tilt1: float,
) -> float:
    """Incidence angle on the first crystal, first-order approximation."""
    temp_sin = math.sin(tetadir + tetaref) * cos_fi
    sinte = temp_sin * (1 - squa_tilt1) + sin_fi * tilt_c1
    return math.asin(sinte)


def first_crystal_full_approx_angle(
    tetaref: float,
    tetadir: float,
    cos_e: float,
    tan_e: float,
    fidir: float,
    tilt_c1: float,
) -> float:
    """Incidence angle on the first crystal, small-angle expansion."""
    return (
        tetaref
        + tetadir
        - (fidir**2 + tilt_c1**2) * tan_e
        + fidir * tilt_c1 / cos_e
    )


def reflect(
    rx: float, ry: float, rz: float, nx: float, ny: float, nz: float
) -> Reflection:
    """Reflect direction r on a plane of normal n and give the glancing angle."""
    inter_pro = rx * nx + ry * ny + rz * nz
    return Reflection(
        angle=math.asin(-inter_pro),
        rx=rx - 2 * inter_pro * nx,
        ry=ry - 2 * inter_pro * ny,
        rz=rz - 2 * inter_pro * nz,
    )


def second_crystal_approx_angle(
    tetaref: float,
    tetadir: float,
    delrot: float,
    sin_fi: float,
    cos_fi: float,
    squa_tilt2: float,
    cosdel: float,
    cosdel_othe: float,
    cosdel_teta: float,
    cosdel_teta_othe: float,
    sin_teref_tedi: float,
    parallel: bool,
) -> float:
    """Incidence angle on the second crystal, first-order approximation."""
    if parallel:
        temp_sin = math.sin(tetadir + tetaref - delrot) * cos_fi
        sinte = (
            temp_sin * (1 - squa_tilt2)
            + cosdel * sin_fi
            - cosdel_othe * cos_fi * sin_teref_tedi
        )
    else:
        temp_sin = math.sin(-tetadir + tetaref + delrot) * cos_fi
        sinte = (
            temp_sin * (1 - squa_tilt2)
            + cosdel * sin_fi
            - cosdel_teta_othe * cos_fi * sin_teref_tedi
        )
    return math.asin(sinte)


def second_crystal_full_approx_angle(
    tetaref: float,
    tetadir: float,
    delrot: float,
    cos_e: float,
    tan_e: float,
    cos2_e: float,
    fidir: float,
    tilt_c1: float,
    tilt_c2: float,
    parallel: bool,
) -> float:
    """Incidence angle on the second crystal, small-angle expansion."""
    if parallel:
        return (
            tetaref
            + tetadir
            - delrot
            - tan_e * (fidir**2 + tilt_c2**2 + 4 * tilt_c1 * (tilt_c1 + tilt_c2))
            + fidir * (tilt_c2 + 2 * tilt_c1) / cos_e
        )
    return (
        tetaref
        - tetadir
        + delrot
        - tan_e
        * (fidir**2 + tilt_c2**2 + 4 * tilt_c1 * tilt_c2 - 4 * cos2_e * tilt_c1**2)
        + fidir * (tilt_c2 - 2 * cos2_e * tilt_c1) / cos_e
    )


def reaches_detector(
    z: float,
    y: float,
    tetadir: float,
    fidir: float,
    length: float,
    z_max: float,
    z_min: float,
    y_max: float,
    y_min: float,
) -> bool:
    """Whether a ray from (y, z) lands strictly inside the detector window."""
    z_temp = z + math.tan(fidir) * length
    y_temp = y + math.tan(tetadir) * length
    return z_min < z_temp < z_max and y_min < y_temp < y_max


def project_yz(
    r: float,
    sin_tetap: float,
    cos_tetap: float,
    tan_tetadir: float,
    tan_fidir: float,
    length: float,
) -> tuple[float, float]:
    """Transverse (y, z) position after travelling a distance along the beam."""
    y = r * cos_tetap + tan_tetadir * length
    z = r * sin_tetap + tan_fidir * length
    return y, z


def lattice_at_temperature(d_lat: float, t_crystal: float) -> float:
    """Lattice spacing corrected for a crystal temperature in degrees Celsius."""
    temp = t_crystal + 273.15
    return d_lat * (1 + (temp - 295.65) * 2.56e-6)