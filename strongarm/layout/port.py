"""
Port - The layout geometry of one cell terminal.

A port is a set of shape fragments, all in the owning cell's coordinates,
that together make up a terminal. Fragments come from the cell's own
shapes or from the ports of drawn children. One fragment may be marked as
primary: the preferred access point for routing.
"""

from typing import Iterable, List, Optional, Union

from strongarm.layout.shape import Shape
from strongarm.layout.transform import Transform


class Port:
    """
    Mergeable geometry of a cell terminal.

    Attributes:
        name: Terminal name; merged fragments are renamed to this net
        shapes: Fragments in the owning cell's coordinates
        primary: Preferred fragment, or None
    """

    def __init__(self, name: str, shapes: Optional[Iterable[Shape]] = None,
                 primary: Optional[Shape] = None):
        self.name = name
        self.shapes: List[Shape] = []
        self.primary: Optional[Shape] = None
        self._keys = set()
        if shapes is not None:
            self.merge(list(shapes))
        if primary is not None:
            self.set_primary(primary)

    def __repr__(self):
        return f"Port({self.name}, fragments={len(self.shapes)}, primary={self.primary is not None})"

    def __len__(self) -> int:
        return len(self.shapes)

    def __iter__(self):
        return iter(self.shapes)

    def _add(self, shape: Shape) -> Shape:
        key = shape.key()
        if key in self._keys:
            return next(s for s in self.shapes if s.key() == key)
        fragment = shape.with_net(self.name)
        self.shapes.append(fragment)
        self._keys.add(key)
        return fragment

    def merge(self, other: Union['Port', Shape, Iterable[Shape]]) -> 'Port':
        """
        Add fragments to this port.

        Merging is idempotent: a fragment with the same layer and bounds as
        one already present is not added again. Merging a port also carries
        over its primary fragment when this port has none.

        Returns self for chaining.
        """
        if isinstance(other, Port):
            for shape in other.shapes:
                self._add(shape)
            if self.primary is None and other.primary is not None:
                self.primary = self._add(other.primary)
        elif isinstance(other, Shape):
            self._add(other)
        else:
            for shape in other:
                if not isinstance(shape, Shape):
                    raise TypeError(f'Cannot merge {shape!r} into port {self.name}')
                self._add(shape)
        return self

    def set_primary(self, other: Union['Port', Shape]) -> 'Port':
        """Merge other and make it (or its primary fragment) the primary."""
        if isinstance(other, Port):
            shape = other.primary if other.primary is not None else (other.shapes[0] if other.shapes else None)
            if shape is None:
                raise ValueError(f'Port {other.name} has no geometry to use as primary')
            self.merge(other)
        else:
            shape = other
        self.primary = self._add(shape)
        return self

    def access_shapes(self) -> List[Shape]:
        """Fragments to connect to: the primary if set, else all."""
        if self.primary is not None:
            return [self.primary]
        return list(self.shapes)

    def transformed(self, transform: Transform, name: Optional[str] = None) -> 'Port':
        """Return a copy of this port with every fragment transformed."""
        port = Port(name or self.name)
        for shape in self.shapes:
            port._add(shape.transformed(transform))
        if self.primary is not None:
            port.primary = port._add(self.primary.transformed(transform))
        return port
