"""
Signal bundles.

A bundle is a dataclass whose fields are leaves (a single net, port or
terminal), differential pairs, or fixed-width buses. The same bundle class
describes a tile's interface in every view: `build(leaf)` fills each leaf
by calling `leaf(name)` with the flattened leaf name, so a schematic view
holds `Net` objects and a layout view holds `Port` objects under the same
structure.
"""

from dataclasses import dataclass, field, fields
from typing import Any, Callable, Iterator, get_type_hints


@dataclass
class DiffPair:
    """A differential pair of signals."""
    p: Any
    n: Any

    @classmethod
    def build(cls, name: str, leaf: Callable[[str], Any]) -> 'DiffPair':
        return cls(p=leaf(f'{name}_p'), n=leaf(f'{name}_n'))


def bus(width: int):
    """Declare a fixed-width bus field on a bundle."""
    return field(metadata={'width': width})


@dataclass
class Io:
    """Base class of all signal bundles."""

    @classmethod
    def build(cls, leaf: Callable[[str], Any]) -> 'Io':
        hints = get_type_hints(cls)
        kwargs = {}
        for f in fields(cls):
            hint = hints.get(f.name)
            if hint is DiffPair:
                kwargs[f.name] = DiffPair.build(f.name, leaf)
            elif 'width' in f.metadata:
                kwargs[f.name] = [leaf(f'{f.name}_{i}') for i in range(f.metadata['width'])]
            else:
                kwargs[f.name] = leaf(f.name)
        return cls(**kwargs)

    @classmethod
    def leaf_names(cls) -> list[str]:
        """Flattened leaf names in field order."""
        return list(cls.build(lambda name: name).flatten())

    def flatten(self) -> dict[str, Any]:
        """Return {flattened leaf name: leaf}."""
        out = {}
        for f in fields(self):
            value = getattr(self, f.name)
            if isinstance(value, DiffPair):
                out[f'{f.name}_p'] = value.p
                out[f'{f.name}_n'] = value.n
            elif isinstance(value, list):
                for i, v in enumerate(value):
                    out[f'{f.name}_{i}'] = v
            else:
                out[f.name] = value
        return out

    def __iter__(self) -> Iterator[tuple[str, Any]]:
        return iter(self.flatten().items())

    def __getitem__(self, name: str) -> Any:
        return self.flatten()[name]


@dataclass
class ClockedDiffComparatorIo(Io):
    """Interface of a clocked differential comparator."""
    input: DiffPair
    output: DiffPair
    clock: Any
    vdd: Any
    vss: Any


@dataclass
class StrongArmHalfIo(ClockedDiffComparatorIo):
    """Comparator interface plus the internal nodes shared by both halves."""
    input_d: DiffPair
    tail_d: Any


@dataclass
class BufferIo(Io):
    din: Any
    dout: Any
    vdd: Any
    vss: Any


@dataclass
class MosIo(Io):
    """Ports of a MOS primitive: source/drain, gate and bulk."""
    sd: list = bus(2)
    g: list = bus(1)
    b: Any


@dataclass
class TapIo(Io):
    x: Any
