"""SKY130 layers used by the StrongARM primitives and the router."""

from strongarm.layout.shape import Layer


def _conductor(name: str) -> Layer:
    return Layer(name, 'drawing', connectivity=True)


# Front end
NWELL = Layer('NWELL')
PWELL = Layer('PWELL')
NSDM = Layer('NSDM')
PSDM = Layer('PSDM')
DIFF = _conductor('DIFF')
TAP = _conductor('TAP')
POLY = _conductor('POLY')

# Local interconnect and its contact to met1
LI = _conductor('LI1')
MCON = _conductor('MCON')

# Metal stack
M1, M2, M3, M4 = (_conductor(name) for name in ('MET1', 'MET2', 'MET3', 'MET4'))
VIA1, VIA2, VIA3 = (_conductor(name) for name in ('VIA', 'VIA2', 'VIA3'))

PR_BOUNDARY = Layer('PRBNDRY', 'boundary')
