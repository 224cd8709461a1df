"""Monte Carlo scan of a double-crystal spectrometer with a simple source."""

from __future__ import annotations

import logging
import math
import random
from dataclasses import dataclass
from typing import Protocol

from .geometry import (
    first_crystal_approx_angle,
    first_crystal_full_approx_angle,
    lattice_at_temperature,
    reaches_detector,
    reflect,
    second_crystal_approx_angle,
    second_crystal_full_approx_angle,
)
from .settings import SimulationConfig, SourceType

_log = logging.getLogger(__name__)


class CrystalPhysics(Protocol):
    """Physical models the scan relies on: misalignment, divergence, energy and reflectivity."""

    def misalign(self, dis_total: float) -> tuple[float, float, float, float]:
        """Return (fi_max, fi_min, z_max, z_min) for the total path length."""
        ...

    def horizontal_limits(
        self,
        tetaref: float,
        delrot_min: float,
        delrot_max: float,
        fi_max: float,
        teta_max: float,
        teta_min: float,
    ) -> tuple[float, float]:
        """Return the horizontal divergence limits (first, second)."""
        ...

    def energy(self, a_lamds_uni: float, b_lamds_uni: float, tw_d: float) -> float:
        """Draw a wavelength from the source spectrum."""
        ...

    def reflection(
        self,
        angle: float,
        tetabra: float,
        lamda: float,
        second_crystal: bool,
        poli_p: bool,
    ) -> bool:
        """Decide whether a ray at this angle is reflected by the crystal."""
        ...


@dataclass(frozen=True)
class ProfileBin:
    """Counts recorded at one rotation angle of the second crystal."""

    index: int
    angle_para: float
    angle_anti: float
    counts_para: int
    counts_anti: int

    @property
    def error_para(self) -> float:
        return math.sqrt(self.counts_para)

    @property
    def error_anti(self) -> float:
        return math.sqrt(self.counts_anti)


class SimpleSourceSimulation:
    """Scan of the second crystal through the rocking range with a point or uniform source."""

    def __init__(
        self,
        config: SimulationConfig,
        physics: CrystalPhysics,
        teta_crys1: float,
        mini_angl: float,
        maxi_angl: float,
        d_lat: float,
        rng: random.Random | None = None,
    ) -> None:
        self.config = config
        self.physics = physics
        self.teta_crys1 = teta_crys1
        self.mini_angl = mini_angl
        self.maxi_angl = maxi_angl
        self.d_lat = d_lat
        self.rng = rng if rng is not None else random.Random()

        self.peak_posi_para = 0.0
        self.peak_posi_anti = 0.0
        self.amplitude_para = 0.0
        self.amplitude_anti = 0.0
        self.max_para = 0
        self.min_plot = (0.0, 0.0)
        self.max_plot = (0.0, 0.0)

    def _source_point(self, s_aper_r_2: float) -> tuple[float, float]:
        source = self.config.path_lengths.type_source
        if source is SourceType.POINT:
            return 0.0, 0.0
        if source is SourceType.UNIFORM:
            r = self.rng.random() * s_aper_r_2
            tetap = 2 * math.pi * self.rng.random()
            return r * math.cos(tetap), r * math.sin(tetap)
        _log.warning(
            "Simple simulation only for point or uniform source, proceding as point source"
        )
        return 0.0, 0.0

    def run(self) -> list[ProfileBin]:
        """Run the scan and return the counts of every angular bin."""
        cfg = self.config
        le = cfg.length_elements
        gp = cfg.geo_parameters
        pl = cfg.path_lengths
        user = cfg.user
        nubins = cfg.plot_parameters.nubins
        nbeams = cfg.number_rays.nbeams
        rng = self.rng
        physics = self.physics

        if nubins <= 0:
            raise ValueError("the number of bins must be positive")

        self.peak_posi_para = 0.0
        self.peak_posi_anti = 0.0
        max_valu_para = 0
        max_valu_anti = 0
        self.max_para = 0

        s_aper_r_2 = le.s_aper / 2
        y_max = le.ydetc / 2
        y_min = -le.ydetc / 2

        tetaref = math.pi / 2 - self.teta_crys1
        cos_e = math.cos(tetaref)
        cos2_e = math.cos(2 * tetaref)
        sin_e = math.sin(tetaref)
        tan_e = math.tan(tetaref) / 2

        n1x = math.cos(gp.tilt_c1) * sin_e
        n1y = math.cos(gp.tilt_c1) * cos_e
        n1z = math.sin(gp.tilt_c1)

        dis_total = pl.lt_aper + pl.dist_t_cr1 + pl.dist_cr1_cr2 + pl.dist_cr2_det
        teta_max = math.atan((le.s_aper + le.ydetc) / (2 * dis_total))
        teta_min = -teta_max

        squa_tilt1 = 0.5 * gp.tilt_c1**2
        squa_tilt2 = 0.5 * gp.tilt_c2**2
        twtilt_c1 = 2 * gp.tilt_c1

        delrot_min = math.radians(self.mini_angl)
        delrot_max = math.radians(self.maxi_angl)
        delrot_inc = (delrot_max - delrot_min) / nubins
        delrot = delrot_max

        teta_crys1_deg = self.teta_crys1 * 180 / math.pi
        self.min_plot = (self.mini_angl + teta_crys1_deg, self.mini_angl - teta_crys1_deg)
        self.max_plot = (self.maxi_angl + teta_crys1_deg, self.maxi_angl - teta_crys1_deg)

        tw_d1 = 2 * lattice_at_temperature(self.d_lat, cfg.temperature.t_crystal_1_para)
        tw_d2 = 2 * lattice_at_temperature(self.d_lat, cfg.temperature.t_crystal_2_para)

        fi_max, fi_min, z_max, z_min = physics.misalign(dis_total)
        del_fi = fi_max - fi_min

        if tw_d1 < tw_d2:
            a_lamds_uni = tw_d1 * math.sin(tetaref + delrot_min)
            b_lamds_uni = tw_d2 * math.sin(tetaref + delrot_max)
        else:
            a_lamds_uni = tw_d2 * math.sin(tetaref + delrot_min)
            b_lamds_uni = tw_d1 * math.sin(tetaref + delrot_max)
        b_lamds_uni -= a_lamds_uni

        _, teta_min = physics.horizontal_limits(
            tetaref, delrot_min, delrot_max, fi_max, teta_max, teta_min
        )
        del_teta = teta_max - teta_min

        # The reach flags carry over from ray to ray.
        para_reach = False
        anti_reach = False
        bins: list[ProfileBin] = []

        for numbins in range(1, nubins + 2):
            toint_para = 0
            toint_anti = 0

            cosdel = gp.tilt_c2 + twtilt_c1 * math.cos(delrot)
            cosdel_othe = 2 * gp.tilt_c1 * (gp.tilt_c2 + gp.tilt_c1 * math.cos(delrot))
            cosdel_teta = gp.tilt_c2 - twtilt_c1 * math.cos(delrot + 2 * tetaref)
            cosdel_teta_othe = 2 * gp.tilt_c1 * (
                gp.tilt_c2 - gp.tilt_c1 * math.cos(delrot + 2 * tetaref)
            )

            cos_tilt2 = math.cos(gp.tilt_c2)
            n2x_para = cos_tilt2 * math.sin(tetaref + delrot + math.pi)
            n2y_para = cos_tilt2 * math.cos(tetaref + delrot + math.pi)
            n2x_anti = cos_tilt2 * math.sin(3 * tetaref + delrot)
            n2y_anti = cos_tilt2 * math.cos(3 * tetaref + delrot)
            n2z = math.sin(gp.tilt_c2)

            for _ in range(nbeams):
                tetadir = 2 * del_teta * rng.random() + teta_min
                if user.make_vertical:
                    fidir = rng.random() * del_fi + fi_min
                else:
                    fidir = gp.xsi

                z, y = self._source_point(s_aper_r_2)

                if not reaches_detector(
                    z, y, tetadir, fidir, dis_total, z_max, z_min, y_max, y_min
                ):
                    continue

                aprox = user.angle_aprox
                sin_fi = math.sin(fidir)
                cos_fi = math.cos(fidir)
                first = None
                if aprox == 0:
                    sin_tetadir = math.sin(tetadir)
                    cos_tetadir = math.cos(tetadir)
                    first = reflect(
                        -cos_fi * cos_tetadir,
                        -cos_fi * sin_tetadir,
                        -sin_fi,
                        n1x,
                        n1y,
                        n1z,
                    )
                    angle = first.angle
                elif aprox == 1:
                    angle = first_crystal_approx_angle(
                        tetaref, tetadir, sin_fi, cos_fi, gp.tilt_c1, squa_tilt1
                    )
                elif aprox == 2:
                    angle = first_crystal_full_approx_angle(
                        tetaref, tetadir, cos_e, tan_e, fidir, gp.tilt_c1
                    )
                else:
                    raise ValueError(
                        f"Error in angle_aprox: must be 0, 1 or 2, given was {aprox}"
                    )

                if cfg.energy_spectrum.make_more_lines >= 2:
                    raise ValueError(
                        "Error in intensity_source: for a simple source the energy "
                        "generation cannot be read from file"
                    )
                lamda = physics.energy(a_lamds_uni, b_lamds_uni, tw_d1)
                tetabra1 = math.asin(lamda / tw_d1)

                if not physics.reflection(angle, tetabra1, lamda, False, False):
                    continue

                tetabra2 = math.asin(lamda / tw_d2)

                if aprox == 0:
                    assert first is not None
                    if user.see_para:
                        second = reflect(
                            first.rx, first.ry, first.rz, n2x_para, n2y_para, n2z
                        )
                        para_reach = physics.reflection(
                            second.angle, tetabra2, lamda, True, False
                        )
                    if user.see_anti:
                        second = reflect(
                            first.rx, first.ry, first.rz, n2x_anti, n2y_anti, n2z
                        )
                        para_reach = physics.reflection(
                            second.angle, tetabra2, lamda, True, False
                        )
                elif aprox == 1:
                    sin_teref_tedi = math.sin(tetadir + tetaref)
                    for parallel, wanted in ((True, user.see_para), (False, user.see_anti)):
                        if not wanted:
                            continue
                        angle = second_crystal_approx_angle(
                            tetaref, tetadir, delrot, sin_fi, cos_fi, squa_tilt2,
                            cosdel, cosdel_othe, cosdel_teta, cosdel_teta_othe,
                            sin_teref_tedi, parallel,
                        )
                        reached = physics.reflection(angle, tetabra2, lamda, True, False)
                        if parallel:
                            para_reach = reached
                        else:
                            anti_reach = reached
                else:
                    for parallel, wanted in ((True, user.see_para), (False, user.see_anti)):
                        if not wanted:
                            continue
                        angle = second_crystal_full_approx_angle(
                            tetaref, tetadir, delrot, cos_e, tan_e, cos2_e,
                            fidir, gp.tilt_c1, gp.tilt_c2, parallel,
                        )
                        reached = physics.reflection(angle, tetabra2, lamda, True, False)
                        if parallel:
                            para_reach = reached
                        else:
                            anti_reach = reached

                if para_reach or anti_reach:
                    toint_para += 1
                    toint_anti += 1

            delrot_deg = delrot * 180 / math.pi
            angle_para = delrot_deg + teta_crys1_deg
            angle_anti = delrot_deg - teta_crys1_deg

            bins.append(
                ProfileBin(numbins, angle_para, angle_anti, toint_para, toint_anti)
            )

            self.max_para = max(self.max_para, toint_para)

            if user.fitting:
                if max_valu_para < toint_para:
                    max_valu_para = toint_para
                    self.peak_posi_para = angle_para
                    self.amplitude_para = float(toint_para)
                if max_valu_anti < toint_anti:
                    max_valu_anti = toint_anti
                    self.peak_posi_anti = angle_anti
                    self.amplitude_anti = float(toint_anti)

            _log.info("%d of %d done", numbins, nubins)
            delrot -= delrot_inc

        return bins