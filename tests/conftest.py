import pytest

from strongarm import InputKind, InverterParams, MosKind, StrongArmParams
from strongarm.pdk.sky130 import Sky130StrongArm


def make_params(input_kind=InputKind.N, **widths) -> StrongArmParams:
    sizes = dict(half_tail_w=2, input_pair_w=2, inv_input_w=2, inv_precharge_w=2, precharge_w=2)
    sizes.update(widths)
    return StrongArmParams(nmos_kind=MosKind.SVT, pmos_kind=MosKind.LVT, input_kind=input_kind, **sizes)


@pytest.fixture
def process():
    return Sky130StrongArm()


@pytest.fixture
def n_params():
    return make_params(InputKind.N)


@pytest.fixture
def p_params():
    return make_params(InputKind.P)


@pytest.fixture
def buf_params():
    return InverterParams(nmos_w=2, pmos_w=4)
