"""
Router contract and the default greedy maze router.
"""

import heapq
import math
from abc import ABC, abstractmethod
from collections import defaultdict
from typing import TYPE_CHECKING, Dict, Iterable, Iterator, List, Optional, Set, Tuple

import numpy as np

from strongarm.errors import RoutingError
from strongarm.layout.cell import Rect
from strongarm.layout.connectivity import check_shorts
from strongarm.layout.route import Route
from strongarm.logging import logger

if TYPE_CHECKING:
    from strongarm.tile import TileBuilder

# (routing layer index, x line index, y line index)
Node = Tuple[int, int, int]
Pin = Tuple[int, Rect]

FREE = -1
BLOCKED = -2


class Router(ABC):
    """Connects the pins of a finished placement."""

    @abstractmethod
    def route(self, cell: 'TileBuilder') -> list[Route]:
        """Draw interconnect into ``cell.layout`` and return the drawn routes."""


class RoutingGrid:
    """
    Routing nodes of one tile on layers 0 to the top layer.

    Node coordinates are a regular grid over the tile bounds, refined with
    extra lines through the pin centers. A wire or via landing centered on
    a node covers a square of the layer's footprint. ``owner`` records,
    per layer and node, the net such a square would come within one
    spacing of: FREE for none, the net id for a single net, BLOCKED for
    several nets, an unlabelled shape or the tile border.
    """

    def __init__(self, bounds: Rect, pitch: int, footprints: List[int], spacings: List[int],
                 xs: Iterable[int] = (), ys: Iterable[int] = ()):
        x0, y0, x1, y1 = bounds
        self.xs = self._lines(x0, x1, pitch, xs)
        self.ys = self._lines(y0, y1, pitch, ys)
        self.x_at = self.xs.tolist()
        self.y_at = self.ys.tolist()
        self.reach = [(f / 2, max(s, 1)) for f, s in zip(footprints, spacings)]
        self.owner = []
        for half, space in self.reach:
            # Keep half a spacing inside the border so abutting tiles never touch
            margin = half + math.ceil(space / 2)
            owner = np.full((len(self.xs), len(self.ys)), FREE, dtype=np.int64)
            owner[(self.xs < x0 + margin) | (self.xs > x1 - margin), :] = BLOCKED
            owner[:, (self.ys < y0 + margin) | (self.ys > y1 - margin)] = BLOCKED
            self.owner.append(owner)

    @staticmethod
    def _lines(lo: int, hi: int, pitch: int, extra: Iterable[int]) -> np.ndarray:
        extra = np.array([v for v in extra if lo <= v <= hi], dtype=np.int64)
        return np.unique(np.concatenate([np.arange(lo, hi + 1, pitch, dtype=np.int64), extra]))

    def __repr__(self):
        return f'RoutingGrid({len(self.xs)}x{len(self.ys)}, layers={len(self.owner)})'

    def point(self, node: Node) -> Tuple[int, int]:
        _, i, j = node
        return self.x_at[i], self.y_at[j]

    def free(self, node: Node, net_id: int) -> bool:
        owner = self.owner[node[0]][node[1], node[2]]
        return owner == FREE or owner == net_id

    def mark(self, layer: int, bounds: Rect, net_id: Optional[int]) -> None:
        """Record a shape of ``net_id``. A shape without a net blocks every net."""
        half, space = self.reach[layer]
        x0, y0, x1, y1 = bounds
        grow = half + space
        i0 = np.searchsorted(self.xs, x0 - grow, side='right')
        i1 = np.searchsorted(self.xs, x1 + grow, side='left')
        j0 = np.searchsorted(self.ys, y0 - grow, side='right')
        j1 = np.searchsorted(self.ys, y1 + grow, side='left')
        view = self.owner[layer][i0:i1, j0:j1]
        if net_id is None:
            view[...] = BLOCKED
            return
        view[(view != FREE) & (view != net_id)] = BLOCKED
        view[view == FREE] = net_id

    def nodes_on(self, layer: int, bounds: Rect, net_id: int) -> Set[Node]:
        """Nodes inside ``bounds`` that ``net_id`` may use."""
        x0, y0, x1, y1 = bounds
        i0 = np.searchsorted(self.xs, x0, side='left')
        i1 = np.searchsorted(self.xs, x1, side='right')
        j0 = np.searchsorted(self.ys, y0, side='left')
        j1 = np.searchsorted(self.ys, y1, side='right')
        owner = self.owner[layer][i0:i1, j0:j1]
        ii, jj = np.nonzero((owner == FREE) | (owner == net_id))
        return {(layer, int(i0 + i), int(j0 + j)) for i, j in zip(ii, jj)}


def _span(groups: List[List[Pin]]) -> int:
    rects = [bounds for group in groups for _, bounds in group]
    return (max(r[2] for r in rects) - min(r[0] for r in rects)
            + max(r[3] for r in rects) - min(r[1] for r in rects))


class GreedyRouter(Router):
    """
    Greedy maze router.

    Nets are routed one at a time, smallest first. Each net grows a tree
    from one of its pin groups: an A* search runs from the whole tree to
    the nearest unconnected group over layers 1 to the top layer, with
    vias in between, and drops to layer 0 only onto the net's own pins.
    A node is used only when a wire or via landing on it keeps one
    spacing from every shape of another net, so routed nets touch neither
    each other nor the children. Odd layers run horizontally and even
    layers vertically; a wrong-way step costs ``WRONG_WAY`` times its
    length and a via ``VIA_COST`` grid pitches.

    A child that was routed itself offers one pin group per net: all of
    its shapes on that net, wires included. A primitive offers each access
    fragment of its port as a separate group.

    Every failure raises RoutingError and nothing is retried. The routed
    tile is short checked before it is returned.
    """
    WRONG_WAY = 3
    VIA_COST = 4

    def __eq__(self, other):
        return type(self) is type(other)

    def __hash__(self):
        return hash(type(self))

    def route(self, cell: 'TileBuilder') -> list[Route]:
        via_maker = cell.via_maker
        layers = via_maker.routing_layers()
        top = cell.top_layer
        if top < 1 or top >= len(layers):
            raise RoutingError(f'{cell.name}: top layer {top} is not a routing layer of the via stack '
                               f'(1..{len(layers) - 1})')

        obstacles, groups, centers = self._collect(cell, via_maker, top)
        pitch = min(via_maker.footprint(i) for i in range(1, top + 1)) // 2
        grid = RoutingGrid(cell.layout.bbox(), pitch,
                           [via_maker.footprint(i) for i in range(top + 1)],
                           [via_maker.spacing(i) for i in range(top + 1)],
                           xs=[x for x, _ in centers], ys=[y for _, y in centers])
        ids: Dict[str, int] = {}
        for index, bounds, net in obstacles:
            grid.mark(index, bounds, None if net is None else ids.setdefault(net, len(ids)))

        routes: list[Route] = []
        nets = [net for net, pins in groups.items() if len(pins) > 1]
        for net in sorted(nets, key=lambda n: (_span(groups[n]), n)):
            routes.extend(self._route_net(cell, grid, net, ids.setdefault(net, len(ids)), groups[net],
                                          pitch, top))
        logger.debug(f'{cell.name}: routed {len(nets)} nets on {grid} with {len(routes)} wires')

        result = check_shorts(cell.layout)
        if not result.clean:
            pairs = sorted({' / '.join(sorted((s.net_a, s.net_b))) for s in result.shorts})
            raise RoutingError(f'{cell.name}: routed layout shorts {", ".join(pairs)}\n{result.summary()}')
        return routes

    @staticmethod
    def _collect(cell: 'TileBuilder', via_maker, top: int):
        """
        Obstacles, pin groups per net and pin centers, in tile coordinates.

        Obstacles are every shape on layers 0 to ``top``, with child nets
        renamed to the tile nets they are bound to. Child nets bound to
        nothing are qualified with the child name.
        """
        obstacles: list[tuple[int, Rect, Optional[str]]] = []
        groups: Dict[str, List[List[Pin]]] = defaultdict(list)
        centers: list[tuple[int, int]] = []

        for drawn in cell.drawn:
            nets = {leaf: term.net.name for leaf, term in drawn.terminals if term.net is not None}
            flat: list[tuple[int, Rect, Optional[str]]] = []
            for shape in drawn.layout.get_all_shapes(drawn.layout.transform, resolve_nets=True):
                index = via_maker.layer_index(shape.layer)
                if index is None or index > top:
                    continue
                net = None if shape.net is None else nets.get(shape.net, f'{drawn.name}:{shape.net}')
                obstacles.append((index, shape.bounds, net))
                flat.append((index, shape.bounds, shape.net))

            for leaf, net in nets.items():
                access: List[Pin] = []
                for shape in drawn.ports[leaf].access_shapes():
                    index = via_maker.layer_index(shape.layer)
                    if index is None:
                        continue
                    if index > top:
                        raise RoutingError(f'{cell.name}: pin {drawn.name}.{leaf} of net {net} on {shape.layer} '
                                           f'is above top layer {via_maker.layer(top)}')
                    access.append((index, shape.bounds))
                    centers.append(shape.center)
                if not access:
                    continue
                if drawn.routed:
                    groups[net].append([(index, bounds) for index, bounds, n in flat if n == leaf] or access)
                else:
                    groups[net].extend([pin] for pin in access)

        for shape in cell.layout.shapes:
            index = via_maker.layer_index(shape.layer)
            if index is not None and index <= top:
                obstacles.append((index, shape.bounds, shape.net))
        return obstacles, groups, centers

    def _route_net(self, cell: 'TileBuilder', grid: RoutingGrid, net: str, net_id: int,
                   groups: List[List[Pin]], pitch: int, top: int) -> list[Route]:
        terminals = []
        for group in groups:
            nodes: Set[Node] = set()
            for index, bounds in group:
                nodes |= grid.nodes_on(index, bounds, net_id)
            if not nodes:
                raise RoutingError(f'{cell.name}: no free access to net {net} at {group[0][1]}')
            terminals.append(nodes)
        entries = {node for nodes in terminals for node in nodes if node[0] == 0}

        tree = set(terminals[0])
        pending = terminals[1:]
        routes: list[Route] = []
        while True:
            pending = [nodes for nodes in pending if not nodes & tree]
            if not pending:
                break
            targets = set().union(*pending)
            path = self._search(grid, tree, targets, net_id, entries, top, self.VIA_COST * pitch)
            if path is None:
                raise RoutingError(f'{cell.name}: cannot route net {net}, '
                                   f'{len(pending)} of {len(groups)} pin groups unreachable')
            tree.update(path)
            for nodes in pending:
                if path[-1] in nodes:
                    tree |= nodes
            routes.extend(self._draw(cell, grid, net, net_id, path))
        logger.debug(f'{cell.name}: routed {net} ({len(groups)} pin groups)')
        return routes

    def _search(self, grid: RoutingGrid, sources: Set[Node], targets: Set[Node], net_id: int,
                entries: Set[Node], top: int, via_cost: int) -> Optional[List[Node]]:
        """Cheapest path from any source to any target, source first."""
        xs = [grid.x_at[i] for _, i, _ in targets]
        ys = [grid.y_at[j] for _, _, j in targets]
        tx0, tx1, ty0, ty1 = min(xs), max(xs), min(ys), max(ys)

        def estimate(node: Node) -> int:
            x, y = grid.x_at[node[1]], grid.y_at[node[2]]
            return max(tx0 - x, 0, x - tx1) + max(ty0 - y, 0, y - ty1)

        best = {node: 0 for node in sources}
        heap = [(estimate(node), 0, node) for node in sources]
        heapq.heapify(heap)
        came_from: Dict[Node, Node] = {}
        while heap:
            _, cost, node = heapq.heappop(heap)
            if cost > best[node]:
                continue
            if node in targets:
                path = [node]
                while path[-1] in came_from:
                    path.append(came_from[path[-1]])
                return path[::-1]
            for step, step_cost in self._steps(grid, node, net_id, entries, top, via_cost):
                new = cost + step_cost
                if new < best.get(step, math.inf):
                    best[step] = new
                    came_from[step] = node
                    heapq.heappush(heap, (new + estimate(step), new, step))
        return None

    def _steps(self, grid: RoutingGrid, node: Node, net_id: int, entries: Set[Node], top: int,
               via_cost: int) -> Iterator[Tuple[Node, int]]:
        layer, i, j = node
        if layer == 0:
            up = (1, i, j)
            if grid.free(up, net_id):
                yield up, via_cost
            return

        horizontal = layer % 2 == 1
        for di, dj in ((1, 0), (-1, 0), (0, 1), (0, -1)):
            ni, nj = i + di, j + dj
            if not (0 <= ni < len(grid.x_at) and 0 <= nj < len(grid.y_at)):
                continue
            step = (layer, ni, nj)
            if not grid.free(step, net_id):
                continue
            if di:
                length, wrong = abs(grid.x_at[ni] - grid.x_at[i]), not horizontal
            else:
                length, wrong = abs(grid.y_at[nj] - grid.y_at[j]), horizontal
            yield step, length * (self.WRONG_WAY if wrong else 1)

        if layer < top:
            up = (layer + 1, i, j)
            if grid.free(up, net_id):
                yield up, via_cost
        down = (layer - 1, i, j)
        if layer == 1:
            if down in entries:
                yield down, via_cost
        elif grid.free(down, net_id):
            yield down, via_cost

    @staticmethod
    def _draw(cell: 'TileBuilder', grid: RoutingGrid, net: str, net_id: int, path: List[Node]) -> list[Route]:
        """Draw a path as one wire per same-layer run and vias between runs."""
        via_maker = cell.via_maker
        routes: list[Route] = []
        runs: list[list[Node]] = [[path[0]]]
        for prev, node in zip(path, path[1:]):
            if node[0] == prev[0]:
                runs[-1].append(node)
                continue
            lo, hi = sorted((prev[0], node[0]))
            x, y = grid.point(node)
            for shape in via_maker.draw_via(cell.layout, via_maker.layer(lo), via_maker.layer(hi), x, y, net=net):
                index = via_maker.layer_index(shape.layer)
                if index is not None:
                    grid.mark(index, shape.bounds, net_id)
            runs.append([node])

        for run in runs:
            if len(run) < 2:
                continue
            layer = run[0][0]
            route = cell.layout.route([grid.point(node) for node in run], via_maker.layer(layer),
                                      via_maker.wire_width(layer), net=net)
            for rect in route.segments():
                grid.mark(layer, rect, net_id)
            routes.append(route)
        return routes
