"""
LayoutCell - Layout view of a tile: shapes, pins, subcells and placement.
"""

from typing import Dict, List, Optional, Tuple, Union

from strongarm.layout.pin import Pin
from strongarm.layout.route import Route, simplify
from strongarm.layout.shape import Layer, Shape
from strongarm.layout.transform import Orientation, Transform

Rect = Tuple[int, int, int, int]

ALIGN_MODES = (
    'left', 'right', 'bottom', 'top', 'beneath', 'above',
    'to_the_left', 'to_the_right', 'center_vertical', 'center_horizontal',
)

# mode -> (axis, edge of the moved rect, edge of the reference rect)
# 0/1 are the low/high edge, None is the center
_ALIGN_EDGES = {
    'left': (0, 0, 0),
    'right': (0, 1, 1),
    'to_the_left': (0, 1, 0),
    'to_the_right': (0, 0, 1),
    'center_horizontal': (0, None, None),
    'bottom': (1, 0, 0),
    'top': (1, 1, 1),
    'beneath': (1, 1, 0),
    'above': (1, 0, 1),
    'center_vertical': (1, None, None),
}


def _edge(rect: Rect, axis: int, edge: Optional[int]) -> int:
    lo, hi = rect[axis], rect[axis + 2]
    if edge is None:
        return (lo + hi) // 2
    return hi if edge else lo


def rect_align_delta(rect: Rect, other: Rect, mode: str, offset: int = 0) -> Tuple[int, int]:
    """
    Translation that aligns ``rect`` against ``other``.

    ``left`` puts the left edges together, ``to_the_left`` puts rect's right
    edge on other's left edge, ``beneath`` puts rect's top on other's
    bottom, and so on. ``offset`` is added along the positive axis.
    """
    if mode not in _ALIGN_EDGES:
        raise ValueError(f"Unknown alignment mode '{mode}', expected one of {', '.join(ALIGN_MODES)}")
    axis, mine, theirs = _ALIGN_EDGES[mode]
    delta = _edge(other, axis, theirs) + offset - _edge(rect, axis, mine)
    return (delta, 0) if axis == 0 else (0, delta)


def _transform_rect(transform: Transform, rect: Rect) -> Rect:
    xs, ys = zip(*(transform.apply_point(x, y) for x in (rect[0], rect[2]) for y in (rect[1], rect[3])))
    return min(xs), min(ys), max(xs), max(ys)


class LayoutCell:
    """
    Layout view of a tile.

    Holds the tile's own shapes, the pins recorded for its ports and the
    layout cells of its drawn children. ``transform`` places the cell in
    its parent. All coordinates in nm.

    Attributes:
        instance_name: Name of the cell in its parent
        cell_name: Generator name (taken from the schematic when linked)
        schematic: Schematic Cell of the same tile, used to resolve nets
        parent: Layout cell this one is drawn into, or None
    """

    def __init__(self, instance_name: Optional[str] = None, cell_name: Optional[str] = None,
                 schematic=None):
        self.schematic = schematic
        self.cell_name = cell_name or (schematic.cell_name if schematic else None) or type(self).__name__
        self.instance_name = instance_name
        self.parent: Optional[LayoutCell] = None
        if schematic is not None:
            schematic.layout_cell = self

        self.transform = Transform()
        self.shapes: List[Shape] = []
        self.pins: Dict[str, Pin] = {}
        self.subcells: Dict[str, LayoutCell] = {}

    def __repr__(self):
        return f'LayoutCell({self.instance_name}, type={self.cell_name})'

    def __getattr__(self, name: str):
        """cell.tail_0 is the subcell, cell.vdd the pin."""
        for table in ('subcells', 'pins'):
            items = self.__dict__.get(table, {})
            if name in items:
                return items[name]
        raise AttributeError(f"'{type(self).__name__}' has no attribute '{name}'")

    # ------------------------------------------------------------------
    # Contents
    # ------------------------------------------------------------------

    def add_shape(self, shape: Shape) -> Shape:
        self.shapes.append(shape)
        return shape

    def add_rect(self, layer: Layer, x0: int, y0: int, x1: int, y1: int, net: Optional[str] = None) -> Shape:
        return self.add_shape(Shape.rect(layer, x0, y0, x1, y1, net=net))

    def add_pin(self, name: str, shape: Shape) -> Pin:
        """Record ``shape`` (in this cell's coordinates) as the pin of port ``name``."""
        pin = Pin(name, self, shape)
        self.pins[name] = pin
        return pin

    def add_subcell(self, cell: 'LayoutCell', instance_name: Optional[str] = None) -> 'LayoutCell':
        if cell.parent is not None:
            raise ValueError(f'{cell} is already drawn into {cell.parent}')
        if instance_name is not None:
            cell.instance_name = instance_name
        if cell.instance_name is None:
            raise ValueError('A subcell needs an instance name')
        if cell.instance_name in self.subcells:
            raise ValueError(f"Subcell '{cell.instance_name}' already exists in {self}")
        cell.parent = self
        self.subcells[cell.instance_name] = cell
        return cell

    def route(self, points: List[Tuple[int, int]], layer: Layer, width: int,
              net: Optional[str] = None) -> Route:
        """Draw a Manhattan wire through ``points``, merging straight runs."""
        return Route(simplify(points), layer, width, net=net).draw(self)

    def check_shorts(self):
        from strongarm.layout.connectivity import check_shorts
        return check_shorts(self)

    # ------------------------------------------------------------------
    # Placement
    # ------------------------------------------------------------------

    def move(self, dx: int = 0, dy: int = 0) -> 'LayoutCell':
        self.transform = self.transform.translated(dx, dy)
        return self

    def orient(self, orientation: Orientation) -> 'LayoutCell':
        """Set the orientation, keeping the current translation."""
        rotation, mirror = orientation.value
        self.transform = Transform(self.transform.x, self.transform.y, rotation, mirror)
        return self

    def align_rect(self, other: Union['LayoutCell', Rect], mode: str, offset: int = 0) -> 'LayoutCell':
        """Move so that this cell's bounds are aligned to ``other`` per ``mode``."""
        rect = other.transformed_bbox() if isinstance(other, LayoutCell) else tuple(other)
        return self.move(*rect_align_delta(self.transformed_bbox(), rect, mode, offset))

    # ------------------------------------------------------------------
    # Geometry queries
    # ------------------------------------------------------------------

    def bbox(self) -> Rect:
        """Local bounds of shapes and non-empty subcells, (0, 0, 0, 0) when empty."""
        rects = [shape.bounds for shape in self.shapes]
        rects += [sub.transformed_bbox() for sub in self.subcells.values() if sub.shapes or sub.subcells]
        if not rects:
            return 0, 0, 0, 0
        x0s, y0s, x1s, y1s = zip(*rects)
        return min(x0s), min(y0s), max(x1s), max(y1s)

    def transformed_bbox(self) -> Rect:
        """Bounds in the parent's coordinates."""
        return _transform_rect(self.transform, self.bbox())

    def get_all_shapes(self, transform: Optional[Transform] = None, resolve_nets: bool = False,
                       _net_map: Optional[dict] = None, _path: Optional[str] = None) -> List[Shape]:
        """
        Flatten the hierarchy into shapes in this cell's coordinates.

        With ``resolve_nets`` each shape's net is renamed to the net it is
        bound to at the top, following the schematic terminal bindings of
        every level, and ``source`` is set to the instance path. A net that
        does not reach the top is qualified with its instance path so the
        internal nets of sibling instances stay distinct.
        """
        transform = transform or Transform()
        path = _path or self.instance_name or self.cell_name

        result = []
        for shape in self.shapes:
            flat = shape.transformed(transform)
            if resolve_nets:
                flat.source = f'{path} net={flat.net}' if flat.net else path
                if _net_map is not None and flat.net:
                    flat.net = _net_map.get(flat.net, f'{path}:{flat.net}')
            result.append(flat)

        for sub in self.subcells.values():
            result.extend(sub.get_all_shapes(
                sub.transform.compose(transform),
                resolve_nets=resolve_nets,
                _net_map=self._net_map_of(sub, _net_map, path) if resolve_nets else None,
                _path=f'{path}.{sub.instance_name}'))
        return result

    @staticmethod
    def _net_map_of(sub: 'LayoutCell', parent_map: Optional[dict], parent_path: str) -> dict:
        """Map a subcell's port names to the net each is bound to, seen from the top."""
        if sub.schematic is None:
            return {}
        net_map = {}
        for name, terminal in sub.schematic.terminals.items():
            if terminal.net is None:
                continue
            net = terminal.net.name
            if parent_map is not None:
                net = parent_map.get(net, f'{parent_path}:{net}')
            net_map[name] = net
        return net_map
