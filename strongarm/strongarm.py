"""
StrongARM latch generators.

Three levels, each a tile:

* StrongArmHalf: one differential branch set, six device rows with their
  dummies between an N tap and a P tap.
* StrongArm: two halves bound to the same nets, the right one reflected.
* StrongArmWithOutputBuffers: a StrongArm between two inverters, with the
  latch outputs crossed over to the external outputs.
"""

from typing import Any

from strongarm.core.signals import BufferIo, ClockedDiffComparatorIo, MosIo, StrongArmHalfIo, TapIo
from strongarm.layout.transform import Orientation
from strongarm.params import InverterParams, MosKind, MosTileParams, StrongArmParams, TapTileParams, TileKind
from strongarm.placement import Row, place_rows
from strongarm.router import GreedyRouter
from strongarm.tile import IoBuilder, Tile, TileBuilder

TAP_WIDTH = 3


class StrongArmHalf(Tile):
    """
    One half of a StrongARM latch.

    Rows, top to bottom for an N input pair (reversed for P): precharge A,
    precharge B, inverter precharge, inverter input, input pair, tail.
    Every row holds a dummy followed by the functional pair.
    """
    io_class = StrongArmHalfIo
    cell_name = 'strong_arm_half'
    top_layer = 3

    def _row(self, cell: TileBuilder, name: str, kind: MosKind, tile_kind: TileKind, w: int,
             rail, bindings) -> Row:
        """
        Generate a device pair and its dummy.

        ``bindings`` holds the (sd[0], sd[1], g[0]) nets of each device of
        the pair. The dummy is tied to ``rail`` on every terminal and every
        device has its bulk on ``rail``.
        """
        mos = self.process.mos(MosTileParams(kind, tile_kind, w))
        pair = [cell.generate_connected(mos, MosIo(sd=[sd0, sd1], g=[g], b=rail), f'{name}_{i}')
                for i, (sd0, sd1, g) in enumerate(bindings)]
        dummy = cell.generate_connected(mos, MosIo(sd=[rail, rail], g=[rail], b=rail), f'{name}_dummy')
        return Row(dummy, pair)

    def tile(self, io: IoBuilder, cell: TileBuilder) -> None:
        p = self.params
        s = io.schematic

        if p.input_kind.is_n():
            in_kind, in_tile, in_rail = p.nmos_kind, TileKind.N, s.vss
            pre_kind, pre_tile, pre_rail = p.pmos_kind, TileKind.P, s.vdd
        else:
            in_kind, in_tile, in_rail = p.pmos_kind, TileKind.P, s.vdd
            pre_kind, pre_tile, pre_rail = p.nmos_kind, TileKind.N, s.vss

        tail = self._row(cell, 'tail', in_kind, in_tile, p.half_tail_w, in_rail,
                         [(in_rail, s.tail_d, s.clock)] * 2)
        input_pair = self._row(cell, 'input', in_kind, in_tile, p.input_pair_w, in_rail,
                               [(s.tail_d, s.input_d.n, s.input.p),
                                (s.tail_d, s.input_d.p, s.input.n)])
        inv_input = self._row(cell, 'inv_input', in_kind, in_tile, p.inv_input_w, in_rail,
                              [(s.input_d.n, s.output.n, s.output.p),
                               (s.input_d.p, s.output.p, s.output.n)])
        inv_precharge = self._row(cell, 'inv_precharge', pre_kind, pre_tile, p.inv_precharge_w, pre_rail,
                                  [(pre_rail, s.output.n, s.output.p),
                                   (pre_rail, s.output.p, s.output.n)])
        precharge_a = self._row(cell, 'precharge_a', pre_kind, pre_tile, p.precharge_w, pre_rail,
                                [(pre_rail, s.output.n, s.clock),
                                 (pre_rail, s.output.p, s.clock)])
        precharge_b = self._row(cell, 'precharge_b', pre_kind, pre_tile, p.precharge_w, pre_rail,
                                [(pre_rail, s.input_d.n, s.clock),
                                 (pre_rail, s.input_d.p, s.clock)])

        ntap = cell.generate_connected(self.process.tap(TapTileParams(TileKind.N, TAP_WIDTH)),
                                       TapIo(x=s.vdd), 'ntap')
        ptap = cell.generate_connected(self.process.tap(TapTileParams(TileKind.P, TAP_WIDTH)),
                                       TapIo(x=s.vss), 'ptap')

        rows = [precharge_a, precharge_b, inv_precharge, inv_input, input_pair, tail]
        if p.input_kind.is_p():
            rows.reverse()

        cursor = place_rows(rows, ntap.bounds())
        ptap.align(cursor, 'left').align(cursor, 'beneath')

        drawn = {}
        for inst in [ptap, ntap] + [inst for row in rows for inst in row.instances]:
            drawn[inst.name] = cell.draw(inst)

        cell.set_top_layer(self.top_layer)
        cell.set_router(GreedyRouter())
        cell.set_via_maker(self.process.via_maker())

        ports = io.layout
        ports.vdd.set_primary(drawn['ntap'].io.x)
        ports.vss.set_primary(drawn['ptap'].io.x)
        ports.input_d.n.merge(drawn['input_0'].io.sd[1])
        ports.input_d.p.merge(drawn['input_1'].io.sd[1])
        ports.tail_d.merge(drawn['tail_0'].io.sd[1])
        ports.clock.merge(drawn['tail_0'].io.g[0])
        ports.input.p.merge(drawn['input_0'].io.g[0])
        ports.input.n.merge(drawn['input_1'].io.g[0])
        ports.output.p.merge(drawn['inv_input_1'].io.sd[1])
        ports.output.n.merge(drawn['inv_input_0'].io.sd[1])


class StrongArm(Tile):
    """A StrongARM latch: two halves, the right one reflected horizontally."""
    io_class = ClockedDiffComparatorIo
    cell_name = 'strong_arm'
    top_layer = 4

    def tile(self, io: IoBuilder, cell: TileBuilder) -> None:
        s = io.schematic
        conn = StrongArmHalfIo(
            input=s.input, output=s.output, clock=s.clock, vdd=s.vdd, vss=s.vss,
            input_d=cell.diff_signal('input_d'), tail_d=cell.signal('tail_d'),
        )
        half = StrongArmHalf(self.params, self.process)
        left = cell.generate_connected(half, conn, 'left_half')
        right = (cell.generate_connected(half, conn, 'right_half')
                 .orient(Orientation.REFLECT_HORIZ)
                 .align(left, 'to_the_right'))

        left = cell.draw(left)
        right = cell.draw(right)

        cell.set_top_layer(self.top_layer)
        cell.set_router(GreedyRouter())
        cell.set_via_maker(self.process.via_maker())

        for leaf, port in io.layout:
            port.merge(left.ports[leaf]).merge(right.ports[leaf])

        self.process.post_layout_hooks(cell)


class StrongArmWithOutputBuffers(Tile):
    """
    A StrongARM latch flanked by two inverting output buffers.

    The latch's positive output drives the right buffer, which produces
    the negative external output; the negative output drives the
    reflected left buffer, which produces the positive external output.
    """
    io_class = ClockedDiffComparatorIo
    cell_name = 'strong_arm_with_output_buffers'
    top_layer = 4

    def __init__(self, params: StrongArmParams, buf_params: InverterParams, process):
        super().__init__(params, process)
        self.buf_params = buf_params

    def key(self):
        return (self.params, self.buf_params)

    def parameters(self) -> dict[str, Any]:
        out = self.params.to_dict()
        out.update({f'buf_{k}': v for k, v in self.buf_params.to_dict().items()})
        return out

    def __repr__(self):
        return f'{self.name}({self.params!r}, {self.buf_params!r})'

    def tile(self, io: IoBuilder, cell: TileBuilder) -> None:
        s = io.schematic
        out = cell.diff_signal('out')
        spacing = self.process.buffer_spacing

        strongarm = cell.generate_connected(
            StrongArm(self.params, self.process),
            ClockedDiffComparatorIo(input=s.input, output=out, clock=s.clock, vdd=s.vdd, vss=s.vss),
            'strongarm')

        buffer = self.process.inverter(self.buf_params)
        right_buf = (cell.generate_connected(buffer, BufferIo(din=out.p, dout=s.output.n, vdd=s.vdd, vss=s.vss),
                                             'right_buffer')
                     .align(strongarm, 'center_vertical')
                     .align(strongarm, 'to_the_right', spacing))
        left_buf = (cell.generate_connected(buffer, BufferIo(din=out.n, dout=s.output.p, vdd=s.vdd, vss=s.vss),
                                            'left_buffer')
                    .orient(Orientation.REFLECT_HORIZ)
                    .align(strongarm, 'center_vertical')
                    .align(strongarm, 'to_the_left', -spacing))

        strongarm = cell.draw(strongarm)
        right_buf = cell.draw(right_buf)
        left_buf = cell.draw(left_buf)

        cell.set_top_layer(self.top_layer)
        cell.set_router(GreedyRouter())
        cell.set_via_maker(self.process.via_maker())

        ports = io.layout
        ports.vdd.merge(strongarm.io.vdd)
        ports.vss.merge(strongarm.io.vss)
        ports.clock.merge(strongarm.io.clock)
        ports.input.p.merge(strongarm.io.input.p)
        ports.input.n.merge(strongarm.io.input.n)
        ports.output.p.merge(left_buf.io.dout)
        ports.output.n.merge(right_buf.io.dout)

        self.process.buffered_post_layout_hooks(cell)
