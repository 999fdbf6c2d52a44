import pytest

from strongarm import MosKind, MosTileParams, TileKind
from strongarm.layout import LayoutCell
from strongarm.pdk.sky130 import Sky130MosTile, Sky130StrongArm, Sky130ViaMaker, sky130_rules
from strongarm.pdk.sky130.layers import LI, M1, M2, MCON, NWELL, PWELL, VIA1


def test_process_identity(process):
    assert process == Sky130StrongArm()
    assert process.buffer_spacing == 4 * sky130_rules.GRID.TRACK
    assert process.via_maker() == Sky130ViaMaker()
    assert isinstance(process.mos(MosTileParams(MosKind.SVT, TileKind.N, 2)), Sky130MosTile)


def test_via_maker_layers():
    vm = Sky130ViaMaker()
    assert vm.routing_layers() == [vm.layer(i) for i in range(5)]
    assert vm.layer_index(LI) == 0
    assert vm.layer_index(M2) == 2
    assert vm.layer_index(NWELL) is None
    with pytest.raises(IndexError):
        vm.layer(5)
    assert [vm.spacing(i) for i in range(5)] == [170, 140, 140, 300, 300]
    assert vm.footprint(0) == 170
    for i in range(1, 5):
        assert vm.footprint(i) == vm.wire_width(i)


def test_via_stack():
    cell = LayoutCell('via')
    shapes = Sky130ViaMaker().draw_via(cell, M2, LI, 1000, 1000, net='a')
    assert len(shapes) == 6
    assert [s.layer for s in shapes[::3]] == [MCON, VIA1]
    assert all(s.net == 'a' for s in shapes)
    for shape in shapes:
        assert shape.center == (1000, 1000)


@pytest.mark.parametrize('kind,well', [(TileKind.N, PWELL), (TileKind.P, NWELL)])
def test_mos_tile(process, kind, well):
    tile = process.mos(MosTileParams(MosKind.SVT, kind, 3))
    built = tile.build('m')
    width, height = tile.size
    assert built.bounds() == (0, 0, width, height)
    # two LI straps and the met1 bar contacted to them
    for k, bar_y in enumerate(sky130_rules.MOS.M1_BAR_Y):
        port = built.io.sd[k]
        assert len(port) == 3
        assert port.primary.layer == M1
        assert port.primary.center[1] == bar_y
        assert sum(s.layer == MCON and s.net == f'sd_{k}' for s in built.layout.shapes) == 2
    assert built.io.g[0].primary is not None
    assert built.io.b.shapes[0].layer == well
    assert built.layout.check_shorts().clean
    assert built.layout.pins['g_0'].layer == LI
    assert built.schematic.get_parameter('w') == 3
