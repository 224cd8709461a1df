import pytest

from dcsim.settings import (
    GeoPathLengths,
    SimulationConfig,
    SourceType,
    parse_source_type,
)


@pytest.mark.parametrize(
    "code, expected",
    [
        ("P", SourceType.POINT),
        ("U", SourceType.UNIFORM),
        ("UC", SourceType.UNIFORM_CIRCULAR),
        ("UR", SourceType.UNIFORM_RECTANGULAR),
        ("G", SourceType.GAUSSIAN),
    ],
)
def test_parse_source_type_codes(code, expected):
    assert parse_source_type(code) is expected


def test_parse_source_type_accepts_enum():
    assert parse_source_type(SourceType.GAUSSIAN) is SourceType.GAUSSIAN


def test_parse_source_type_rejects_unknown():
    with pytest.raises(ValueError, match="type_source"):
        parse_source_type("X")


def test_path_lengths_converts_string_code():
    lengths = GeoPathLengths(type_source="UR", lt_aper=3.0)
    assert lengths.type_source is SourceType.UNIFORM_RECTANGULAR
    assert lengths.lt_aper == 3.0


def test_path_lengths_rejects_bad_code():
    with pytest.raises(ValueError):
        GeoPathLengths(type_source="bad")


def test_config_instances_do_not_share_state():
    first = SimulationConfig()
    second = SimulationConfig()
    first.user.see_para = True
    first.picks[1].lamda = 3.0
    assert second.user.see_para is False
    assert second.picks[1].lamda == 0.0
    assert len(second.picks) == 5