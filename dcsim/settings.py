"""Simulation settings, record types and physical constants."""

from __future__ import annotations

import math
from dataclasses import dataclass, field
from enum import Enum


class SourceType(Enum):
    """Shape of the X-ray source."""

    POINT = "P"
    UNIFORM = "U"
    UNIFORM_CIRCULAR = "UC"
    UNIFORM_RECTANGULAR = "UR"
    GAUSSIAN = "G"


def parse_source_type(text: str | SourceType) -> SourceType:
    """Return the source type named by its short code ("P", "UC", "UR", "G", "U")."""
    if isinstance(text, SourceType):
        return text
    try:
        return SourceType(text.strip())
    except (ValueError, AttributeError):
        raise ValueError(
            f"Bad input on the source type: type_source ({text!r})"
        ) from None


@dataclass
class Pick:
    lamda: float = 0.0
    natural_varia: float = 0.0
    intensi: float = 0.0


@dataclass
class EnergyCarac:
    lamda: float = 0.0
    intensity: float = 0.0
    intensity_two_deriv: float = 0.0


@dataclass
class EnergyGen:
    lamda: float = 0.0
    intensity: float = 0.0
    cum_int: float = 0.0
    intensity_two_deriv: float = 0.0
    lambda_two_deriv: float = 0.0


@dataclass
class PlotResponse:
    degree: float = 0.0
    reflecti_total: float = 0.0
    reflecti_two_deriv: float = 0.0
    reflecti_total_p: float = 0.0
    reflecti_two_deriv_p: float = 0.0
    reflecti_total_s: float = 0.0
    reflecti_two_deriv_s: float = 0.0


@dataclass
class PlotPoint:
    x: float = 0.0
    y: float = 0.0
    error: float = 0.0


@dataclass
class Geometry:
    mode_bragg_geo: bool = False
    imh: int = 0
    imk: int = 0
    iml: int = 0
    crystal_si: bool = False


@dataclass
class UserSettings:
    see_para: bool = False
    see_anti: bool = False
    make_vertical: bool = False
    make_horizontal: bool = False
    angle_aprox: int = 0
    fitting: bool = False
    true_voigt: bool = False
    simple_simu: bool = False
    center_1crys: bool = False
    center_2crys: bool = False
    mask_c1: int = 0
    mask_c2: int = 0
    print_scan: bool = False
    center_mask: bool = False
    make_mask_test: bool = False


@dataclass
class GeoPathLengths:
    type_source: SourceType = SourceType.POINT
    lt_aper: float = 0.0
    dist_t_cr1: float = 0.0
    dist_cr1_cr2: float = 0.0
    dist_cr2_det: float = 0.0
    dist_aper_det: float = 0.0

    def __post_init__(self) -> None:
        self.type_source = parse_source_type(self.type_source)


@dataclass
class GeoLengthElements:
    s_aper: float = 0.0
    s_aper_var: float = 0.0
    s_sour: float = 0.0
    y_sour: float = 0.0
    z_sour: float = 0.0
    y_aper: float = 0.0
    z_aper: float = 0.0
    s_shi_hor_b: float = 0.0
    s_shi_hor_a: float = 0.0
    s_shi_ver_b: float = 0.0
    s_shi_ver_a: float = 0.0
    y_first_crys: float = 0.0
    z_first_crys: float = 0.0
    ydetc: float = 0.0
    zdetc: float = 0.0
    shift_det_ver: float = 0.0


@dataclass
class GeoParameters:
    exp_crys1: float = 0.0
    teta_table: float = 0.0
    offset_rot_cry1: float = 0.0
    teta_detec_para: float = 0.0
    teta_detec_anti: float = 0.0
    tilt_c1: float = 0.0
    tilt_c2: float = 0.0
    xsi: float = 0.0
    center_1cry_at: float = 0.0
    center_2cry_at: float = 0.0


@dataclass
class CurveVerticalTilt:
    make_curve_tilt: bool = False
    phas_tilt1: float = 0.0
    phas_tilt2: float = 0.0
    offsettilt1: float = 0.0
    offsettilt2: float = 0.0
    consttilt1: float = 0.0
    consttilt2: float = 0.0


@dataclass
class GraphOptions:
    make_dislin: bool = False
    make_graph_profile: bool = False
    make_image_plates: bool = False
    make_image_c1_after_refle: bool = False
    make_image_c2_after_refle: bool = False


@dataclass
class PlotParameters:
    delta_angl: float = 0.0
    shift_disp_window: float = 0.0
    nubins: int = 0


@dataclass
class NumberRays:
    nbeams: int = 0
    number_rotati: int = 0


@dataclass
class PhysicalParameters:
    unit_energy: str = "eV"
    linelamda: float = 0.0
    naturalwidth: float = 0.0
    gauss_doop: float = 0.0


@dataclass
class PolarizationParameters:
    mka_poli: bool = False
    relation_p_s: float = 0.0


@dataclass
class TemperatureParameters:
    t_crystal_1_para: float = 0.0
    t_crystal_1_anti: float = 0.0
    t_crystal_2_para: float = 0.0
    t_crystal_2_anti: float = 0.0
    mk_temp_bin: bool = False
    aa_tempera: float = 0.0
    tt_tempera: float = 0.0


@dataclass
class FullEnergySpectrum:
    make_more_lines: int = 0
    linelamda1: float = 0.0
    naturalwidth1: float = 0.0
    p1_ener: float = 0.0
    linelamda2: float = 0.0
    naturalwidth2: float = 0.0
    p2_ener: float = 0.0
    linelamda3: float = 0.0
    naturalwidth3: float = 0.0
    p3_ener: float = 0.0
    linelamda4: float = 0.0
    naturalwidth4: float = 0.0
    do_background: bool = False


@dataclass
class CurvedCrystal:
    curve_crystall: bool = False
    r_cur_crys_1: float = 0.0
    r_cur_crys_2: float = 0.0


@dataclass
class AnalysisCrystalTilts:
    make_matrix_full: bool = False
    make_graph_widths: bool = False
    metafile: str = ""
    make_an_c1_ta: bool = False
    make_plot_c1_table: bool = False


def _default_picks() -> list[Pick]:
    return [Pick() for _ in range(5)]


@dataclass
class SimulationConfig:
    """All input settings of one simulation run."""

    geometry: Geometry = field(default_factory=Geometry)
    user: UserSettings = field(default_factory=UserSettings)
    path_lengths: GeoPathLengths = field(default_factory=GeoPathLengths)
    length_elements: GeoLengthElements = field(default_factory=GeoLengthElements)
    geo_parameters: GeoParameters = field(default_factory=GeoParameters)
    curve_vertical_tilt: CurveVerticalTilt = field(default_factory=CurveVerticalTilt)
    graph_options: GraphOptions = field(default_factory=GraphOptions)
    plot_parameters: PlotParameters = field(default_factory=PlotParameters)
    number_rays: NumberRays = field(default_factory=NumberRays)
    physical: PhysicalParameters = field(default_factory=PhysicalParameters)
    polarization: PolarizationParameters = field(default_factory=PolarizationParameters)
    temperature: TemperatureParameters = field(default_factory=TemperatureParameters)
    energy_spectrum: FullEnergySpectrum = field(default_factory=FullEnergySpectrum)
    curved_crystal: CurvedCrystal = field(default_factory=CurvedCrystal)
    crystal_tilts: AnalysisCrystalTilts = field(default_factory=AnalysisCrystalTilts)
    picks: list[Pick] = field(default_factory=_default_picks)
    energy_spec: list[EnergyGen] = field(default_factory=list)


REFRA_CORR_NIST = 0.00351262
REFRA_CORR_PARIS = 0.005952

A_SI_PARA = 5.431020457
A_GE_PARA = 5.65735
CONVERT_AG_MINUSONE_EV = 12398.41875

ENERGY_UNITS = ("eV ", "Ang")

CONVRAD = math.pi / 180
CONVDEG = 180 / math.pi
ONE_MICRO = 1000000.0

LIMIT_REFLEC = 0.001

N_HIS_IMA = 100
N_HIS_G = 100

FACT_3 = 3 * 2
FACT_5 = 5 * 4 * 3 * 2
FACT_7 = 7 * 6 * 5 * 4 * 3 * 2

LEGEND_COUNTS = (
    "Number counts entrance:\t",
    "Number counts C1:\t\t\t",
    "Number counts C2_para:\t\t",
    "Number counts detc_para:\t",
    "Number counts C2_anti:\t\t",
    "Number counts detc_anti:\t",
)
LEGEND_COUNTS_1C = LEGEND_COUNTS

NM2 = float(N_HIS_IMA // 2)
NP2 = float(N_HIS_IMA // 2)

MA = 5

CONST_BACK_PARA = 100.0
CONST_BACK_ANTI = 100.0

WIDTH_GAUS_PARA = 0.009
WIDTH_LORE_PARA = 0.0009
WIDTH_GAUS_ANTI = 0.009
WIDTH_LORE_ANTI = 0.005

DO_AMPLITU_CON_PARA = 1
DO_AMPLITU_CON_ANTI = 1
DO_CONST_BACK_PARA = 1
DO_CONST_BACK_ANTI = 1
DO_FIRSTCRYST = 1
DO_GWIDTH_PARA = 1
DO_LWIDTH_PARA = 1
DO_FIRSTCRYST_ANTI = 1
DO_GWIDTH_ANTI = 1
DO_LWIDTH_ANTI = 1

C1 = 0.5346
C2 = 0.2166

SHAPE_CORR = 0.0