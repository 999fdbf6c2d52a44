import pytest

from strongarm import (
    ConstructionError, InputKind, InverterParams, MosKind, MosTileParams, StrongArmParams,
    TapTileParams, TileKind,
)
from strongarm.pdk.rules import DesignRules
from strongarm.pdk.sky130 import sky130_rules

from conftest import make_params


def test_input_kind():
    assert InputKind.N.is_n() and not InputKind.N.is_p()
    assert InputKind.P.is_p() and not InputKind.P.is_n()


@pytest.mark.parametrize('name', ['half_tail_w', 'input_pair_w', 'inv_input_w', 'inv_precharge_w', 'precharge_w'])
@pytest.mark.parametrize('value', [0, -3, 1.5, True])
def test_invalid_latch_width(name, value):
    with pytest.raises(ConstructionError) as err:
        make_params(**{name: value})
    assert name in str(err.value)
    assert err.value.step == 'StrongArm parameters'


def test_invalid_primitive_width():
    with pytest.raises(ConstructionError):
        MosTileParams(MosKind.SVT, TileKind.N, 0)
    with pytest.raises(ConstructionError):
        TapTileParams(TileKind.P, -1)
    with pytest.raises(ConstructionError):
        InverterParams(nmos_w=2, pmos_w=0)


def test_params_are_values():
    a = make_params(input_pair_w=4)
    b = make_params(input_pair_w=4)
    assert a == b
    assert hash(a) == hash(b)
    assert a != make_params(input_pair_w=6)
    with pytest.raises(AttributeError):
        a.input_pair_w = 8


def test_yaml_round_trip():
    params = make_params(InputKind.P, half_tail_w=8)
    text = params.to_yaml()
    assert 'input_kind: p' in text
    assert StrongArmParams.from_yaml(text) == params


def test_from_dict_with_enum_values():
    params = StrongArmParams.from_dict({
        'nmos_kind': 'svt', 'pmos_kind': 'hvt',
        'half_tail_w': 4, 'input_pair_w': 4, 'inv_input_w': 2, 'inv_precharge_w': 2, 'precharge_w': 2,
        'input_kind': 'n',
    })
    assert params.pmos_kind is MosKind.HVT
    assert params.input_kind is InputKind.N


def test_inverter_defaults_from_dict():
    params = InverterParams.from_dict({'nmos_w': 2, 'pmos_w': 3})
    assert params.nmos_kind is MosKind.SVT
    assert params.to_dict() == {'nmos_w': 2, 'pmos_w': 3, 'nmos_kind': 'svt', 'pmos_kind': 'svt'}


def test_yaml_not_a_mapping():
    with pytest.raises(ConstructionError):
        StrongArmParams.from_yaml('- 1\n- 2\n')


def test_design_rules():
    rules = DesignRules.from_yaml('M1:\n  MIN_W: 140\n  MIN_S: 140\ntech_name: test\n')
    assert rules.M1.MIN_W == 140
    assert 'M1' in rules and 'M9' not in rules
    assert rules.get('M9', 5) == 5
    assert rules.to_dict() == {'M1': {'MIN_W': 140, 'MIN_S': 140}, 'tech_name': 'test'}
    with pytest.raises(AttributeError):
        rules.M9
    with pytest.raises(ValueError):
        DesignRules.from_yaml('just a string')


def test_sky130_grid():
    assert sky130_rules.GRID.TRACK == 340
    assert sky130_rules.MOS.ROW_TRACKS == 6
    assert sky130_rules.MCON.get('H') == 170
