import math

import pytest

from dcsim.complex_geometry import (
    ComplexGeometry,
    CrystalWindow,
    build_geometry,
    crystal_windows,
)
from dcsim.geometry import lattice_at_temperature
from dcsim.settings import SimulationConfig, SourceType

D_LAT = 3.1356
TETA_CRYS1 = math.radians(30.0)


def make_config(**overrides) -> SimulationConfig:
    cfg = SimulationConfig()
    le = cfg.length_elements
    le.s_aper = 0.6
    le.s_aper_var = 0.3
    le.s_sour = 0.8
    le.y_sour = 0.5
    le.z_sour = 0.5
    le.y_aper = 0.6
    le.z_aper = 0.6
    le.y_first_crys = 4.0
    le.z_first_crys = 6.0
    le.ydetc = 2.0
    le.zdetc = 3.0
    le.shift_det_ver = 0.1
    pl = cfg.path_lengths
    pl.type_source = SourceType.UNIFORM_RECTANGULAR
    pl.lt_aper = 20.0
    pl.dist_t_cr1 = 10.0
    pl.dist_cr1_cr2 = 15.0
    pl.dist_cr2_det = 12.0
    cfg.temperature.t_crystal_1_para = 22.5
    cfg.temperature.t_crystal_1_anti = 22.5
    cfg.temperature.t_crystal_2_para = 25.0
    cfg.temperature.t_crystal_2_anti = 25.0
    cfg.plot_parameters.nubins = 40
    cfg.energy_spectrum.make_more_lines = 1
    for key, value in overrides.items():
        setattr(cfg.user, key, value)
    return cfg


def build(cfg: SimulationConfig, tilt_c1: float = 0.0, lamda: float = 3.0) -> ComplexGeometry:
    return build_geometry(cfg, TETA_CRYS1, -1.0, 1.0, D_LAT, lamda, tilt_c1)


def test_window_contains_is_strict():
    window = CrystalWindow(-1.0, 1.0, -2.0, 2.0)
    assert window.contains(0.0, 0.0)
    assert not window.contains(1.0, 0.0)
    assert not window.contains(0.0, -2.0)


def test_unmasked_windows_cover_whole_crystal():
    first, second = crystal_windows(make_config())
    assert first == CrystalWindow(-2.0, 2.0, -3.0, 3.0)
    assert second == first


def test_center_mask_uses_fixed_height():
    first, _ = crystal_windows(make_config(center_mask=True))
    assert first.z_max == pytest.approx(0.6)
    assert first.z_min == pytest.approx(-0.6)
    assert first.y_max == pytest.approx(2.0 - 0.2)


@pytest.mark.parametrize("mask", [1, 2])
def test_half_masks_split_at_zero(mask):
    first, second = crystal_windows(make_config(mask_c1=mask, mask_c2=mask))
    assert first == second
    if mask == 1:
        assert first.z_min == 0.0
        assert first.z_max == pytest.approx(3.0 - 0.2)
    else:
        assert first.z_max == 0.0
        assert first.z_min == pytest.approx(-3.0 + 0.2)


def test_bad_mask_is_rejected():
    with pytest.raises(ValueError):
        crystal_windows(make_config(mask_c2=5))


def test_lattice_spacings_follow_temperatures():
    geo = build(make_config())
    assert geo.d_lat1_para == pytest.approx(lattice_at_temperature(D_LAT, 22.5))
    assert geo.tw_d2_anti == pytest.approx(2 * lattice_at_temperature(D_LAT, 25.0))
    assert geo.tw_d2_para > geo.tw_d1_para


def test_first_crystal_normal_is_unit_vector():
    geo = build(make_config(), tilt_c1=0.01)
    assert math.hypot(geo.n1x, geo.n1y, geo.n1z) == pytest.approx(1.0)
    assert geo.n1z == pytest.approx(math.sin(0.01))


def test_untilted_bragg_reference_is_tetaref():
    geo = build(make_config())
    assert geo.tetaref == pytest.approx(math.pi / 2 - TETA_CRYS1)
    assert geo.tetabrag_ref == pytest.approx(geo.tetaref)


def test_rotation_steps_span_range():
    geo = build(make_config())
    assert geo.delrot_inc * 40 == pytest.approx(geo.delrot_max - geo.delrot_min)
    assert geo.delrot_max == pytest.approx(math.radians(1.0))


def test_detector_window_shifted_vertically():
    geo = build(make_config())
    assert (geo.detector.y_max + geo.detector.y_min) / 2 == pytest.approx(0.1)
    assert geo.detector.z_max - geo.detector.z_min == pytest.approx(3.0)


def test_divergence_limits_bracket_zero():
    geo = build(make_config())
    assert geo.teta_min_l < 0 < geo.teta_max_l
    assert geo.fi_min_l < 0 < geo.fi_max_l
    assert geo.del_teta_l == pytest.approx(geo.teta_max_l - geo.teta_min_l)


def test_circular_source_uses_aperture_only():
    cfg = make_config()
    cfg.path_lengths.type_source = SourceType.UNIFORM_CIRCULAR
    geo = build(cfg)
    assert geo.teta_max_l == pytest.approx(math.atan(0.6 / 20.0))
    assert geo.fi_min_l == pytest.approx(-math.atan(0.6 / 20.0))


def test_single_line_narrows_horizontal_range():
    wide = build(make_config())
    cfg = make_config()
    cfg.energy_spectrum.make_more_lines = 0
    narrow = build(cfg)
    assert narrow.teta_max_l <= wide.teta_max_l
    assert narrow.teta_min_l >= wide.teta_min_l
    assert narrow.fi_max_l == pytest.approx(wide.fi_max_l)


def test_wavelength_range_is_positive():
    geo = build(make_config())
    assert geo.b_lamds_uni > 0
    upper = geo.tw_d2_anti * math.sin(geo.tetaref + geo.delrot_max + 0.2)
    assert geo.a_lamds_uni + geo.b_lamds_uni == pytest.approx(upper)


def test_plot_limits_follow_scan_range():
    geo = build(make_config())
    assert geo.min_plot[0] == pytest.approx(-1.0 + 30.0)
    assert geo.max_plot[1] == pytest.approx(1.0 - 30.0)


def test_zero_bins_rejected():
    cfg = make_config()
    cfg.plot_parameters.nubins = 0
    with pytest.raises(ValueError):
        build(cfg)


def test_zero_aperture_distance_rejected():
    cfg = make_config()
    cfg.path_lengths.lt_aper = 0.0
    with pytest.raises(ValueError):
        build(cfg)