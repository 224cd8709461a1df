"""Fixed geometry of a full double-crystal spectrometer scan with an extended source."""

from __future__ import annotations

import math
from dataclasses import dataclass

from .geometry import lattice_at_temperature
from .settings import LIMIT_REFLEC, SimulationConfig, SourceType

_MASK_MARGIN = 0.2
_CENTER_MASK_HALF_HEIGHT = 0.6
_LAMBDA_MARGIN = 0.2


@dataclass(frozen=True)
class CrystalWindow:
    """Rectangular acceptance window in the transverse (y, z) plane."""

    y_min: float
    y_max: float
    z_min: float
    z_max: float

    def contains(self, y: float, z: float) -> bool:
        """Whether (y, z) lies strictly inside the window."""
        return self.y_min < y < self.y_max and self.z_min < z < self.z_max


@dataclass(frozen=True)
class ComplexGeometry:
    """Quantities that stay fixed during a scan with an extended source."""

    d_lat: float
    d_lat1_para: float
    d_lat1_anti: float
    d_lat2_para: float
    d_lat2_anti: float

    s_aper_r_2: float
    s_aper_var_2: float
    s_aper_sqr: float
    s_sour_2: float
    z_sour_2: float
    y_sour_2: float

    detector: CrystalWindow
    aperture: CrystalWindow
    crystal1: CrystalWindow
    crystal2: CrystalWindow

    delrot_min: float
    delrot_max: float
    delrot_inc: float

    teta_crys1: float
    tetaref: float
    cos_e: float
    sin_e: float
    tilt_c1: float
    n1x: float
    n1y: float
    n1z: float
    tetabrag_ref: float

    teta_max_l: float
    teta_min_l: float
    fi_max_l: float
    fi_min_l: float

    cos_tetartab: float
    sin_tetartab: float
    cos_difte_c1_ta: float
    sin_difte_c1_ta: float
    cos_tetartabdete_para: float
    sin_tetartabdete_para: float
    cos_tetartabdete_anti: float
    sin_tetartabdete_anti: float

    a_lamds_uni: float
    b_lamds_uni: float

    lt_aper: float
    dist_t_cr1: float
    dist_cr1_cr2: float
    dist_cr2_det: float

    min_plot: tuple[float, float]
    max_plot: tuple[float, float]

    @property
    def tw_d1_para(self) -> float:
        return 2 * self.d_lat1_para

    @property
    def tw_d1_anti(self) -> float:
        return 2 * self.d_lat1_anti

    @property
    def tw_d2_para(self) -> float:
        return 2 * self.d_lat2_para

    @property
    def tw_d2_anti(self) -> float:
        return 2 * self.d_lat2_anti

    @property
    def del_teta_l(self) -> float:
        return self.teta_max_l - self.teta_min_l

    @property
    def del_fi_l(self) -> float:
        return self.fi_max_l - self.fi_min_l


def _mask_window(
    mask: int, y_half: float, z_half: float, name: str
) -> CrystalWindow:
    if mask == 0:
        return CrystalWindow(-y_half, y_half, -z_half, z_half)
    y_min = -y_half + _MASK_MARGIN
    y_max = y_half - _MASK_MARGIN
    if mask == 1:
        return CrystalWindow(y_min, y_max, 0.0, z_half - _MASK_MARGIN)
    if mask == 2:
        return CrystalWindow(y_min, y_max, -z_half + _MASK_MARGIN, 0.0)
    raise ValueError(f"Error in {name}: must be 0, 1 or 2, given was {mask}")


def crystal_windows(config: SimulationConfig) -> tuple[CrystalWindow, CrystalWindow]:
    """Acceptance windows of the first and second crystal, masks applied."""
    le = config.length_elements
    user = config.user
    y_half = le.y_first_crys / 2
    z_half = le.z_first_crys / 2

    if user.center_mask:
        first = CrystalWindow(
            -y_half + _MASK_MARGIN,
            y_half - _MASK_MARGIN,
            -_CENTER_MASK_HALF_HEIGHT,
            _CENTER_MASK_HALF_HEIGHT,
        )
    else:
        first = _mask_window(user.mask_c1, y_half, z_half, "mask_C1")

    second = _mask_window(user.mask_c2, y_half, z_half, "mask_C2")
    return first, second


def _divergence_limits(
    source: SourceType,
    s_aper: float,
    shift_b: float,
    shift_a: float,
    aper_size: float,
    sour_half: float,
    crys_size: float,
    lt_aper: float,
    dist_t_cr1: float,
) -> tuple[float, float]:
    if source is SourceType.UNIFORM_CIRCULAR:
        upper = math.atan((s_aper - shift_b + shift_a) / lt_aper)
        lower = -math.atan((s_aper + shift_b - shift_a) / lt_aper)
        return upper, lower
    to_crystal = lt_aper + dist_t_cr1
    upper = math.atan(
        min(
            (aper_size / 2 + sour_half + shift_b - shift_a) / lt_aper,
            (crys_size / 2 + sour_half - shift_a) / to_crystal,
        )
    )
    lower = -math.atan(
        min(
            (aper_size / 2 + sour_half - shift_b + shift_a) / lt_aper,
            (crys_size / 2 + sour_half + shift_a) / to_crystal,
        )
    )
    return upper, lower


def build_geometry(
    config: SimulationConfig,
    teta_crys1: float,
    mini_angl: float,
    maxi_angl: float,
    d_lat: float,
    first_line_lamda: float,
    tilt_c1: float,
) -> ComplexGeometry:
    """Work out the fixed geometry of a scan from the settings.

    ``tilt_c1`` is the vertical tilt of the first crystal actually in use;
    ``first_line_lamda`` is the wavelength of the main emission line.
    """
    le = config.length_elements
    gp = config.geo_parameters
    pl = config.path_lengths
    temp = config.temperature
    nubins = config.plot_parameters.nubins

    if nubins <= 0:
        raise ValueError("the number of bins must be positive")
    if pl.lt_aper <= 0:
        raise ValueError("the source to aperture distance must be positive")

    d_lat1_para = lattice_at_temperature(d_lat, temp.t_crystal_1_para)
    d_lat1_anti = lattice_at_temperature(d_lat, temp.t_crystal_1_anti)
    d_lat2_para = lattice_at_temperature(d_lat, temp.t_crystal_2_para)
    d_lat2_anti = lattice_at_temperature(d_lat, temp.t_crystal_2_anti)

    s_aper_r_2 = le.s_aper / 2
    y_sour_2 = le.y_sour / 2
    z_sour_2 = le.z_sour / 2

    detector = CrystalWindow(
        y_min=-le.ydetc / 2 + le.shift_det_ver,
        y_max=le.ydetc / 2 + le.shift_det_ver,
        z_min=-le.zdetc / 2 + le.shift_det_ver,
        z_max=le.zdetc / 2 + le.shift_det_ver,
    )
    aperture = CrystalWindow(
        y_min=le.s_shi_hor_a - le.y_aper / 2,
        y_max=le.s_shi_hor_a + le.y_aper / 2,
        z_min=le.s_shi_ver_a - le.z_aper / 2,
        z_max=le.s_shi_ver_a + le.z_aper / 2,
    )
    crystal1, crystal2 = crystal_windows(config)

    delrot_min = math.radians(mini_angl)
    delrot_max = math.radians(maxi_angl)
    delrot_inc = (delrot_max - delrot_min) / nubins

    tetaref = math.pi / 2 - teta_crys1
    cos_e = math.cos(tetaref)
    sin_e = math.sin(tetaref)

    cos_tilt = math.cos(tilt_c1)
    n1x = -cos_tilt * sin_e
    n1y = cos_tilt * cos_e
    n1z = math.sin(tilt_c1)
    tetabrag_ref = math.asin(-n1x)

    teta_max_l, teta_min_l = _divergence_limits(
        pl.type_source,
        le.s_aper,
        le.s_shi_hor_b,
        le.s_shi_hor_a,
        le.y_aper,
        y_sour_2,
        le.y_first_crys,
        pl.lt_aper,
        pl.dist_t_cr1,
    )

    if config.energy_spectrum.make_more_lines == 0:
        aux_bragg = math.asin(first_line_lamda / (2 * d_lat1_para))
        centre = math.pi / 2 + gp.teta_table + math.radians(gp.exp_crys1) - aux_bragg
        teta_max_l = min(centre + LIMIT_REFLEC, teta_max_l)
        teta_min_l = max(centre - LIMIT_REFLEC, teta_min_l)

    fi_max_l, fi_min_l = _divergence_limits(
        pl.type_source,
        le.s_aper,
        le.s_shi_ver_b,
        le.s_shi_ver_a,
        le.z_aper,
        z_sour_2,
        le.z_first_crys,
        pl.lt_aper,
        pl.dist_t_cr1,
    )

    tw_d1_anti = 2 * d_lat1_anti
    tw_d2_anti = 2 * d_lat2_anti
    low_d, high_d = (
        (tw_d1_anti, tw_d2_anti) if tw_d1_anti < tw_d2_anti else (tw_d2_anti, tw_d1_anti)
    )
    a_lamds_uni = low_d * math.sin(tetaref + delrot_min - _LAMBDA_MARGIN)
    b_lamds_uni = high_d * math.sin(tetaref + delrot_max + _LAMBDA_MARGIN) - a_lamds_uni

    teta_crys1_deg = math.degrees(teta_crys1)
    table = gp.teta_table

    return ComplexGeometry(
        d_lat=d_lat,
        d_lat1_para=d_lat1_para,
        d_lat1_anti=d_lat1_anti,
        d_lat2_para=d_lat2_para,
        d_lat2_anti=d_lat2_anti,
        s_aper_r_2=s_aper_r_2,
        s_aper_var_2=le.s_aper_var / 2,
        s_aper_sqr=s_aper_r_2**2,
        s_sour_2=le.s_sour / 2,
        z_sour_2=z_sour_2,
        y_sour_2=y_sour_2,
        detector=detector,
        aperture=aperture,
        crystal1=crystal1,
        crystal2=crystal2,
        delrot_min=delrot_min,
        delrot_max=delrot_max,
        delrot_inc=delrot_inc,
        teta_crys1=teta_crys1,
        tetaref=tetaref,
        cos_e=cos_e,
        sin_e=sin_e,
        tilt_c1=tilt_c1,
        n1x=n1x,
        n1y=n1y,
        n1z=n1z,
        tetabrag_ref=tetabrag_ref,
        teta_max_l=teta_max_l,
        teta_min_l=teta_min_l,
        fi_max_l=fi_max_l,
        fi_min_l=fi_min_l,
        cos_tetartab=math.cos(table),
        sin_tetartab=math.sin(table),
        cos_difte_c1_ta=math.cos(table - tetaref),
        sin_difte_c1_ta=math.sin(table - tetaref),
        cos_tetartabdete_para=math.cos(table + gp.teta_detec_para),
        sin_tetartabdete_para=math.sin(table + gp.teta_detec_para),
        cos_tetartabdete_anti=math.cos(table + gp.teta_detec_anti),
        sin_tetartabdete_anti=math.sin(table + gp.teta_detec_anti),
        a_lamds_uni=a_lamds_uni,
        b_lamds_uni=b_lamds_uni,
        lt_aper=float(pl.lt_aper),
        dist_t_cr1=float(pl.dist_t_cr1),
        dist_cr1_cr2=float(pl.dist_cr1_cr2),
        dist_cr2_det=float(pl.dist_cr2_det),
        min_plot=(mini_angl + teta_crys1_deg, mini_angl - teta_crys1_deg),
        max_plot=(maxi_angl + teta_crys1_deg, maxi_angl - teta_crys1_deg),
    )