import logging

import pytest

from strongarm import (
    ConstructionError, GreedyRouter, RoutingError, TapTileParams, Tile, TileKind,
)
from strongarm.core import Cell, Net, TapIo
from strongarm.layout import LayoutCell, Port
from strongarm.pdk.sky130.layers import LI, M1, M2, M3
from strongarm.placement import Row, place_rows
from strongarm.tile import IoBuilder, TileBuilder


class ScriptTile(Tile):
    """A single-port tile whose body is a plain function."""
    io_class = TapIo
    cell_name = 'script'

    def __init__(self, body, process):
        super().__init__(None, process)
        self.body = body

    def key(self):
        return self.body

    def tile(self, io, cell):
        self.body(self, io, cell)


def open_builder(tile, name='top'):
    schematic = Cell(name, cell_name=tile.name)
    layout = LayoutCell(name, schematic=schematic)
    for leaf in tile.io_class.leaf_names():
        schematic.add_terminal(leaf)
        Net(leaf, schematic)
    io = IoBuilder(schematic=tile.io_class.build(schematic.get_net), layout=tile.io_class.build(Port))
    return TileBuilder(tile, schematic, layout, io)


def nothing(tile, io, cell):
    pass


def two_taps(tile, io, cell):
    tap = tile.process.tap(TapTileParams(TileKind.P, 2))
    a = cell.generate_connected(tap, TapIo(x=io.schematic.x), 'a')
    b = cell.generate_connected(tap, TapIo(x=io.schematic.x), 'b').align(a, 'to_the_right', 1000)
    a, b = cell.draw(a), cell.draw(b)
    io.layout.x.merge(a.io.x).merge(b.io.x)
    return a, b


def test_primitive_build(process):
    built = process.tap(TapTileParams(TileKind.N, 3)).build('ntap')
    assert built.name == 'ntap'
    assert built.schematic.get_parameter('w') == 3
    assert built.schematic.get_parameter('kind') == 'n'
    assert built.io.x.primary is not None
    assert built.layout.pins['x'].shape.layer == LI
    assert built.layout.check_shorts().clean


def test_tile_identity(process):
    tap = process.tap(TapTileParams(TileKind.N, 3))
    assert tap == process.tap(TapTileParams(TileKind.N, 3))
    assert tap != process.tap(TapTileParams(TileKind.P, 3))
    assert len({tap, process.tap(TapTileParams(TileKind.N, 3))}) == 1


def test_draw_transforms_ports(process):
    def body(tile, io, cell):
        a, b = two_taps(tile, io, cell)
        assert b.bounds()[0] == a.bounds()[2] + 1000
        assert b.io.x.primary.bounds[0] == a.io.x.primary.bounds[0] + b.bounds()[0]
    built = ScriptTile(body, process).build()
    assert set(built.layout.subcells) == {'a', 'b'}
    assert set(built.schematic.subcells) == {'a', 'b'}
    assert len(built.io.x) == 2
    assert built.routes == []


def test_routed_tile(process):
    def body(tile, io, cell):
        two_taps(tile, io, cell)
        cell.set_top_layer(2)
        cell.set_router(GreedyRouter())
        cell.set_via_maker(tile.process.via_maker())
    built = ScriptTile(body, process).build()
    assert built.router == GreedyRouter()
    assert built.top_layer == 2
    layers = {route.layer for route in built.routes}
    via_maker = process.via_maker()
    assert built.routes
    assert layers <= {via_maker.layer(1), via_maker.layer(2)}
    assert all(route.net == 'x' for route in built.routes)
    assert built.layout.check_shorts().clean


def crossing_taps(tile, io, cell):
    """Four taps on a square, with x and mid on opposite corners."""
    mid = cell.signal('mid')
    tap = tile.process.tap(TapTileParams(TileKind.P, 2))
    a = cell.generate_connected(tap, TapIo(x=io.schematic.x), 'a')
    b = cell.generate_connected(tap, TapIo(x=mid), 'b').align(a, 'to_the_right', 1000)
    c = cell.generate_connected(tap, TapIo(x=mid), 'c').align(a, 'beneath', -1000)
    d = cell.generate_connected(tap, TapIo(x=io.schematic.x), 'd').align(c, 'bottom').align(c, 'to_the_right', 1000)
    drawn = [cell.draw(inst) for inst in (a, b, c, d)]
    io.layout.x.merge(drawn[0].io.x)
    cell.set_top_layer(2)
    cell.set_router(GreedyRouter())
    cell.set_via_maker(tile.process.via_maker())


def test_crossing_nets_stay_apart(process):
    built = ScriptTile(crossing_taps, process).build()
    assert {route.net for route in built.routes} == {'x', 'mid'}
    assert built.layout.check_shorts().clean


def test_blocked_net_raises(process):
    def body(tile, io, cell):
        crossing_taps(tile, io, cell)
        x0, y0, x1, y1 = cell.bounds()
        for layer in (M1, M2):
            cell.layout.add_rect(layer, x0, y0, x1, y1)
    with pytest.raises(RoutingError) as err:
        ScriptTile(body, process).build()
    assert 'cannot route net' in str(err.value)


def test_shorted_result_raises(process):
    def body(tile, io, cell):
        two_taps(tile, io, cell)
        cell.layout.add_rect(M1, 0, -2000, 400, -1600, net='x')
        cell.layout.add_rect(M1, 300, -1700, 700, -1300, net='stray')
        cell.set_top_layer(2)
        cell.set_router(GreedyRouter())
        cell.set_via_maker(tile.process.via_maker())
    with pytest.raises(RoutingError) as err:
        ScriptTile(body, process).build()
    assert 'stray / x' in str(err.value)


def test_undeclared_net(process):
    def body(tile, io, cell):
        inst = cell.generate(tile.process.tap(TapTileParams(TileKind.P, 2)), 'a')
        cell.connect(inst.terminals.x, Net('x', Cell('elsewhere')))
    with pytest.raises(ConstructionError) as err:
        ScriptTile(body, process).build()
    assert 'not declared' in str(err.value)


def test_unbound_child_port(process):
    def body(tile, io, cell):
        cell.draw(cell.generate(tile.process.tap(TapTileParams(TileKind.P, 2)), 'a'))
    with pytest.raises(ConstructionError) as err:
        ScriptTile(body, process).build()
    assert 'unbound' in str(err.value)


def test_unbound_tile_port(process):
    with pytest.raises(ConstructionError) as err:
        ScriptTile(nothing, process).build()
    assert 'port x is unbound' in str(err.value)


def test_undrawn_instance(process):
    def body(tile, io, cell):
        two_taps(tile, io, cell)
        cell.generate_connected(tile.process.tap(TapTileParams(TileKind.P, 2)), TapIo(x=io.schematic.x), 'c')
    with pytest.raises(ConstructionError) as err:
        ScriptTile(body, process).build()
    assert 'never drawn' in str(err.value)


def test_double_draw(process):
    def body(tile, io, cell):
        inst = cell.generate_connected(tile.process.tap(TapTileParams(TileKind.P, 2)),
                                       TapIo(x=io.schematic.x), 'a')
        cell.draw(inst)
        cell.draw(inst)
    with pytest.raises(ConstructionError) as err:
        ScriptTile(body, process).build()
    assert 'already drawn' in str(err.value)


def test_drawn_instance_is_frozen(process):
    builder = open_builder(ScriptTile(nothing, process))
    inst = builder.generate_connected(process.tap(TapTileParams(TileKind.P, 2)),
                                      TapIo(x=builder.io.schematic.x), 'a')
    builder.draw(inst)
    with pytest.raises(ConstructionError):
        inst.translate(10, 0)
    with pytest.raises(ConstructionError):
        builder.connect(inst.terminals.x, builder.io.schematic.x)


def test_draw_in_other_builder(process):
    first = open_builder(ScriptTile(nothing, process), 'first')
    second = open_builder(ScriptTile(nothing, process), 'second')
    inst = first.generate_connected(process.tap(TapTileParams(TileKind.P, 2)),
                                    TapIo(x=first.io.schematic.x), 'a')
    with pytest.raises(ConstructionError) as err:
        second.draw(inst)
    assert 'belongs to tile first' in str(err.value)


def test_duplicate_names(process):
    builder = open_builder(ScriptTile(nothing, process))
    builder.signal('mid')
    with pytest.raises(ConstructionError):
        builder.signal('mid')
    with pytest.raises(ConstructionError):
        builder.signal('x')
    tap = process.tap(TapTileParams(TileKind.P, 2))
    builder.generate(tap, 'a')
    with pytest.raises(ConstructionError):
        builder.generate(tap, 'a')


def test_configure_once(process):
    builder = open_builder(ScriptTile(nothing, process))
    builder.set_router(GreedyRouter())
    with pytest.raises(ConstructionError):
        builder.set_router(GreedyRouter())
    builder.set_top_layer(2)
    with pytest.raises(ConstructionError):
        builder.set_top_layer(3)


def test_router_needs_configuration(process):
    def body(tile, io, cell):
        two_taps(tile, io, cell)
        cell.set_router(GreedyRouter())
    with pytest.raises(ConstructionError) as err:
        ScriptTile(body, process).build()
    assert 'without a top layer' in str(err.value)


def test_finished_builder_is_frozen(process):
    builder = open_builder(ScriptTile(nothing, process))
    builder.io.layout.x.merge(builder.layout.add_rect(LI, 0, 0, 10, 10, net='x'))
    builder.finish()
    assert builder.finished
    assert 'x' in builder.layout.pins
    with pytest.raises(ConstructionError):
        builder.signal('late')
    with pytest.raises(ConstructionError):
        builder.finish()


@pytest.mark.parametrize('top', [0, 5])
def test_top_layer_outside_stack(process, top):
    def body(tile, io, cell):
        two_taps(tile, io, cell)
        cell.set_top_layer(top)
        cell.set_router(GreedyRouter())
        cell.set_via_maker(tile.process.via_maker())
    with pytest.raises(RoutingError):
        ScriptTile(body, process).build()


def test_pin_above_top_layer(process):
    def m3_pin(tile, io, cell):
        io.layout.x.set_primary(cell.layout.add_rect(M3, 0, 0, 300, 300, net='x'))

    def body(tile, io, cell):
        leaf = ScriptTile(m3_pin, tile.process)
        a = cell.generate_connected(leaf, TapIo(x=io.schematic.x), 'a')
        b = cell.generate_connected(leaf, TapIo(x=io.schematic.x), 'b').align(a, 'to_the_right', 500)
        a, b = cell.draw(a), cell.draw(b)
        io.layout.x.merge(a.io.x)
        cell.set_top_layer(2)
        cell.set_router(GreedyRouter())
        cell.set_via_maker(tile.process.via_maker())
    with pytest.raises(RoutingError) as err:
        ScriptTile(body, process).build()
    assert 'above top layer' in str(err.value)


def test_rebinding_in_builder_keeps_last(process, caplog):
    def body(tile, io, cell):
        mid = cell.signal('mid')
        inst = cell.generate(tile.process.tap(TapTileParams(TileKind.P, 2)), 'a')
        cell.connect(inst.terminals.x, mid)
        cell.connect(inst.terminals.x, io.schematic.x)
        io.layout.x.merge(cell.draw(inst).io.x)
    with caplog.at_level(logging.WARNING, logger='strongarm'):
        built = ScriptTile(body, process).build()
    assert built.schematic.a.x.net.name == 'x'
    assert built.schematic.get_net('mid').connections == []
    assert any('rebound' in r.getMessage() for r in caplog.records)


def test_build_failure_logged_once(process, caplog):
    def body(tile, io, cell):
        cell.generate(ScriptTile(nothing, tile.process), 'child')
    with caplog.at_level(logging.ERROR, logger='strongarm'):
        with pytest.raises(ConstructionError):
            ScriptTile(body, process).build('parent')
    failures = [r for r in caplog.records if 'Failed to build' in r.getMessage()]
    assert len(failures) == 1
    assert 'child' in failures[0].getMessage()


def test_row_placement_errors():
    with pytest.raises(ConstructionError):
        place_rows([], None)
    with pytest.raises(ConstructionError):
        Row(dummy=object(), pair=[object()])
