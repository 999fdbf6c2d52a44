"""
Tile - Generators that build a schematic and a layout together.

A tile is a generator object: parameters plus a process capability set.
Building it runs its ``tile()`` method against a fresh TileBuilder, which
owns the schematic Cell, the LayoutCell and every net and child instance
of that one build. Children are generated, bound, placed and then drawn;
drawing is a one-way commit after which the child is part of the tile's
output. Once ``tile()`` returns the builder is finalized: ports are
checked, the router runs once, and the builder is frozen.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Any, Optional, Union

from strongarm.core.cell import Cell
from strongarm.core.net import Net
from strongarm.core.signals import DiffPair, Io
from strongarm.core.terminal import Terminal
from strongarm.errors import ConstructionError, StrongArmError
from strongarm.layout.cell import LayoutCell, Rect
from strongarm.layout.port import Port
from strongarm.layout.route import Route
from strongarm.layout.transform import Orientation
from strongarm.logging import logger


@dataclass
class BuiltTile:
    """
    The output of one tile build.

    Attributes:
        tile: The generator that was built
        schematic: Schematic cell; terminals are the tile ports
        layout: Layout cell with drawn children and router shapes
        io: Layout ports, in the layout cell's coordinates
        top_layer: Routing-layer index the router may use, if configured
        router: Router that connected the tile, if configured
        via_maker: Via maker used by the router, if configured
        routes: Routes drawn by the router
        nested_data: Auxiliary schematic data (always None here)
        layout_data: Auxiliary layout data (always None here)
    """
    tile: 'Tile'
    schematic: Cell
    layout: LayoutCell
    io: Io
    top_layer: Optional[int] = None
    router: Any = None
    via_maker: Any = None
    routes: list = field(default_factory=list)
    nested_data: Any = None
    layout_data: Any = None

    @property
    def name(self) -> str:
        return self.schematic.instance_name

    def bounds(self) -> Rect:
        return self.layout.bbox()


@dataclass
class IoBuilder:
    """
    A tile's own ports, seen from inside the tile.

    ``schematic`` holds the nets of the tile cell that back each port and
    ``layout`` holds the Port each child fragment is merged into.
    """
    schematic: Io
    layout: Io


def _bounds_of(other) -> Rect:
    if isinstance(other, (Instance, DrawnInstance)):
        return other.bounds()
    if isinstance(other, LayoutCell):
        return other.transformed_bbox()
    if other is None:
        raise ConstructionError('placement', 'cannot align against an undefined rectangle')
    return tuple(other)


class Instance:
    """
    A generated child that is not yet drawn.

    The child's nets are bound through ``terminals`` and its placement is
    set through ``orient``/``align``. Both are frozen once it is drawn.
    """

    def __init__(self, name: str, built: BuiltTile, builder: 'TileBuilder'):
        self.name = name
        self.built = built
        self.builder = builder
        self.drawn = False
        self.terminals = built.tile.io_class.build(built.schematic.get_terminal)

    def __repr__(self):
        return f'Instance({self.name}, tile={self.built.tile.name})'

    @property
    def tile(self) -> 'Tile':
        return self.built.tile

    @property
    def schematic(self) -> Cell:
        return self.built.schematic

    @property
    def layout(self) -> LayoutCell:
        return self.built.layout

    def _check_mutable(self, step: str) -> None:
        if self.drawn:
            raise ConstructionError(f'{self.builder.name} {step}', f'instance {self.name} is already drawn')

    def bounds(self) -> Rect:
        """Bounding box in the parent's coordinates."""
        return self.layout.transformed_bbox()

    def orient(self, orientation: Orientation) -> 'Instance':
        self._check_mutable('placement')
        self.layout.orient(orientation)
        return self

    def translate(self, dx: int, dy: int) -> 'Instance':
        self._check_mutable('placement')
        self.layout.move(dx, dy)
        return self

    def align(self, other: Union['Instance', 'DrawnInstance', Rect], mode: str, offset: int = 0) -> 'Instance':
        """Align this instance's bounds against another instance or a rectangle."""
        self._check_mutable('placement')
        self.layout.align_rect(_bounds_of(other), mode, offset)
        return self


class DrawnInstance:
    """
    A child committed to its parent's layout.

    ``io`` holds the child's layout ports transformed into the parent's
    coordinates. It is computed once, at draw time. ``routed`` is set when
    the child ran a router of its own.
    """

    def __init__(self, instance: Instance):
        self.name = instance.name
        self.tile = instance.tile
        self.schematic = instance.schematic
        self.layout = instance.layout
        self.terminals = instance.terminals
        transform = instance.layout.transform
        self.io = self.tile.io_class.build(
            lambda leaf: instance.built.io[leaf].transformed(transform))
        self.ports: dict[str, Port] = self.io.flatten()
        self.routed = instance.built.router is not None
        self._bounds = instance.bounds()

    def __repr__(self):
        return f'DrawnInstance({self.name}, tile={self.tile.name})'

    def bounds(self) -> Rect:
        return self._bounds


class TileBuilder:
    """
    The construction context of one tile build.

    Owns the tile's schematic cell and layout cell, its declared nets and
    its child instances. Mutating calls raise ConstructionError once the
    builder is finalized.
    """

    def __init__(self, tile: 'Tile', schematic: Cell, layout: LayoutCell, io: IoBuilder):
        self.tile = tile
        self.schematic = schematic
        self.layout = layout
        self.io = io
        self.instances: dict[str, Instance] = {}
        self.drawn: list[DrawnInstance] = []
        self.routes: list[Route] = []
        self._top_layer: Optional[int] = None
        self._router = None
        self._via_maker = None
        self._finished = False

    def __repr__(self):
        return f'TileBuilder({self.name})'

    @property
    def name(self) -> str:
        return self.schematic.instance_name

    @property
    def finished(self) -> bool:
        return self._finished

    def _check_open(self, step: str) -> None:
        if self._finished:
            raise ConstructionError(f'{self.name} {step}', 'tile is already built')

    # ------------------------------------------------------------------
    # Nets
    # ------------------------------------------------------------------

    def signal(self, name: str) -> Net:
        """Declare an internal net."""
        self._check_open('signal')
        if self.schematic.has_net(name):
            raise ConstructionError(f'{self.name} signal', f'net {name} is already declared')
        logger.debug(f'{self.name}: declare net {name}')
        return Net(name, self.schematic)

    def diff_signal(self, name: str) -> DiffPair:
        """Declare an internal differential pair ``{name}_p``/``{name}_n``."""
        return DiffPair.build(name, self.signal)

    def bus(self, name: str, width: int) -> list[Net]:
        """Declare ``width`` internal nets ``{name}_{i}``."""
        return [self.signal(f'{name}_{i}') for i in range(width)]

    # ------------------------------------------------------------------
    # Children
    # ------------------------------------------------------------------

    def generate(self, tile: 'Tile', name: str) -> Instance:
        """Build a child tile. The child is not part of this tile until drawn."""
        self._check_open('generate')
        if name in self.instances:
            raise ConstructionError(f'{self.name} generate', f'instance {name} already exists')
        logger.debug(f'{self.name}: generate {tile.name} as {name}')
        inst = Instance(name, tile.build(name), self)
        self.instances[name] = inst
        return inst

    def generate_connected(self, tile: 'Tile', conn: Io, name: str) -> Instance:
        """Build a child tile and bind all of its ports at once."""
        inst = self.generate(tile, name)
        self.connect(inst.terminals, conn)
        return inst

    def connect(self, terminals, nets) -> None:
        """
        Bind child terminals to nets declared in this tile.

        Accepts a single Terminal and Net, or matching DiffPairs, lists or
        bundles of them.
        """
        self._check_open('connect')
        if isinstance(terminals, Terminal):
            self._connect_one(terminals, nets)
        elif isinstance(terminals, DiffPair):
            if not isinstance(nets, DiffPair):
                raise ConstructionError(f'{self.name} connect', f'cannot bind a differential pair to {nets!r}')
            self.connect(terminals.p, nets.p)
            self.connect(terminals.n, nets.n)
        elif isinstance(terminals, (list, tuple)):
            if not isinstance(nets, (list, tuple)) or len(nets) != len(terminals):
                raise ConstructionError(f'{self.name} connect', f'cannot bind {len(terminals)} terminals to {nets!r}')
            for t, n in zip(terminals, nets):
                self.connect(t, n)
        elif isinstance(terminals, Io):
            term_map = terminals.flatten()
            net_map = nets.flatten() if isinstance(nets, Io) else None
            if net_map is None or set(net_map) != set(term_map):
                raise ConstructionError(f'{self.name} connect', f'bundle {type(terminals).__name__} does not match {nets!r}')
            for leaf, term in term_map.items():
                self._connect_one(term, net_map[leaf])
        else:
            raise ConstructionError(f'{self.name} connect', f'{terminals!r} is not a terminal')

    def _connect_one(self, terminal: Terminal, net: Net) -> None:
        inst = self.instances.get(terminal.cell.instance_name)
        if inst is None or inst.schematic is not terminal.cell:
            raise ConstructionError(f'{self.name} connect',
                                    f'{terminal.get_name_from_top()} is not a terminal of an instance of this tile')
        if inst.drawn:
            raise ConstructionError(f'{self.name} connect', f'instance {inst.name} is already drawn')
        if not isinstance(net, Net) or self.schematic.get_net(net.name) is not net:
            raise ConstructionError(f'{self.name} connect',
                                    f'net {net!r} bound to {inst.name}.{terminal.name} is not declared in this tile')
        terminal.connect(net)

    def draw(self, inst: Instance) -> DrawnInstance:
        """Commit a child to this tile. One way: a drawn child cannot be redrawn."""
        step = f'{self.name} draw'
        if not isinstance(inst, Instance):
            raise ConstructionError(step, f'{inst!r} is not a generated instance')
        if inst.builder is not self:
            raise ConstructionError(step, f'instance {inst.name} belongs to tile {inst.builder.name}')
        if inst.drawn:
            raise ConstructionError(step, f'instance {inst.name} is already drawn')
        self._check_open('draw')

        for leaf, term in inst.terminals:
            if term.net is None:
                raise ConstructionError(step, f'port {leaf} of {inst.name} is unbound')
            if self.schematic.get_net(term.net.name) is not term.net:
                raise ConstructionError(step, f'net {term.net.name} of {inst.name}.{leaf} is not declared in this tile')

        inst.schematic.attach(self.schematic)
        self.layout.add_subcell(inst.layout, inst.name)
        inst.drawn = True
        drawn = DrawnInstance(inst)
        self.drawn.append(drawn)
        logger.debug(f'{self.name}: draw {inst.name} at {drawn.bounds()}')
        return drawn

    def bounds(self) -> Rect:
        """Bounds of everything drawn so far."""
        return self.layout.bbox()

    # ------------------------------------------------------------------
    # Configuration
    # ------------------------------------------------------------------

    def _set_once(self, attr: str, what: str, value) -> None:
        self._check_open(f'set {what}')
        if getattr(self, attr) is not None:
            raise ConstructionError(f'{self.name} set {what}', f'{what} is already set')
        setattr(self, attr, value)

    def set_top_layer(self, layer: int) -> None:
        self._set_once('_top_layer', 'top layer', layer)

    def set_router(self, router) -> None:
        self._set_once('_router', 'router', router)

    def set_via_maker(self, via_maker) -> None:
        self._set_once('_via_maker', 'via maker', via_maker)

    @property
    def top_layer(self) -> Optional[int]:
        return self._top_layer

    @property
    def router(self):
        return self._router

    @property
    def via_maker(self):
        return self._via_maker

    # ------------------------------------------------------------------
    # Finalization
    # ------------------------------------------------------------------

    def finish(self) -> None:
        """Check ports, run the router once and freeze the builder."""
        step = f'{self.name} finalize'
        self._check_open('finalize')

        undrawn = [name for name, inst in self.instances.items() if not inst.drawn]
        if undrawn:
            raise ConstructionError(step, f'instances generated but never drawn: {", ".join(undrawn)}')

        for leaf, port in self.io.layout:
            net = self.schematic.get_net(leaf)
            if not port.shapes and not net.connections:
                raise ConstructionError(step, f'port {leaf} is unbound')

        if self._router is not None:
            if self._top_layer is None or self._via_maker is None:
                raise ConstructionError(step, 'router configured without a top layer and via maker')
            logger.debug(f'{self.name}: routing with {type(self._router).__name__}, top layer {self._top_layer}')
            self.routes = self._router.route(self)

        for leaf, port in self.io.layout:
            shapes = port.access_shapes()
            if shapes:
                self.layout.add_pin(leaf, shapes[0])
        self._finished = True


class Tile(ABC):
    """
    Base class of all generators.

    Subclasses set ``io_class`` to their port bundle and implement
    ``tile(io, cell)``. Two tiles are equal when they are the same
    generator class with equal parameters for the same process.

    Attributes:
        io_class: Port bundle of the tile
        cell_name: Type name of generated cells (defaults to class name)
    """
    io_class: type = None
    cell_name: Optional[str] = None

    def __init__(self, params, process):
        self.params = params
        self.process = process

    @property
    def name(self) -> str:
        return self.cell_name or type(self).__name__

    def key(self):
        """Everything besides the class and process that identifies the generator."""
        return self.params

    def parameters(self) -> dict[str, Any]:
        """Parameters recorded on the generated schematic cell."""
        return self.params.to_dict() if hasattr(self.params, 'to_dict') else {}

    def __eq__(self, other):
        return (type(self) is type(other) and self.key() == other.key()
                and self.process == other.process)

    def __hash__(self):
        return hash((type(self), self.key(), self.process))

    def __repr__(self):
        return f'{self.name}({self.params!r})'

    @abstractmethod
    def tile(self, io: IoBuilder, cell: TileBuilder) -> None:
        """Generate, bind, place and draw children; merge ports."""

    def build(self, instance_name: Optional[str] = None) -> BuiltTile:
        """Run the generator once and return its output."""
        name = instance_name or self.name
        logger.debug(f'Building {self.name} as {name}')

        schematic = Cell(name, cell_name=self.name)
        for key, value in self.parameters().items():
            schematic.set_parameter(key, value)
        layout = LayoutCell(name, schematic=schematic)
        for leaf in self.io_class.leaf_names():
            schematic.add_terminal(leaf)
            Net(leaf, schematic)
        io = IoBuilder(schematic=self.io_class.build(schematic.get_net),
                       layout=self.io_class.build(Port))
        builder = TileBuilder(self, schematic, layout, io)

        try:
            self.tile(io, builder)
            builder.finish()
        except StrongArmError as err:
            if not getattr(err, 'logged', False):
                logger.error(f'Failed to build tile {name} ({self.name}): {err}')
                err.logged = True
            raise

        return BuiltTile(
            tile=self,
            schematic=schematic,
            layout=layout,
            io=io.layout,
            top_layer=builder.top_layer,
            router=builder.router,
            via_maker=builder.via_maker,
            routes=builder.routes,
        )
