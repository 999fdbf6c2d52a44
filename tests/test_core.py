import logging

import pytest

from strongarm.core import Cell, ClockedDiffComparatorIo, DiffPair, MosIo, Net, StrongArmHalfIo


def test_bundle_leaf_names():
    assert ClockedDiffComparatorIo.leaf_names() == ['input_p', 'input_n', 'output_p', 'output_n',
                                                    'clock', 'vdd', 'vss']
    assert StrongArmHalfIo.leaf_names()[-3:] == ['input_d_p', 'input_d_n', 'tail_d']
    assert MosIo.leaf_names() == ['sd_0', 'sd_1', 'g_0', 'b']


def test_bundle_build_and_lookup():
    io = ClockedDiffComparatorIo.build(str.upper)
    assert io.input == DiffPair(p='INPUT_P', n='INPUT_N')
    assert io['output_n'] == 'OUTPUT_N'
    assert dict(io)['clock'] == 'CLOCK'


def test_terminal_connect():
    top = Cell('top')
    child = Cell('child', parent=top)
    term = child.add_terminal('a')
    net = Net('n1', top)
    term.connect(net)
    assert top.has_net('n1')
    assert term.net is top.get_net('n1')
    assert net.connections == [term]
    assert term.get_name_from_top() == 'top.child.a'
    with pytest.raises(ValueError):
        term.connect('n1')


def test_rebinding_warns_and_keeps_last(caplog):
    top = Cell('top')
    child = Cell('child', parent=top)
    term = child.add_terminal('a')
    first, second = Net('first', top), Net('second', top)
    term.connect(first)
    with caplog.at_level(logging.WARNING, logger='strongarm'):
        term.connect(first)
        assert not caplog.records
        term.connect(second)
    assert term.net is second
    assert term not in first.connections
    assert second.connections == [term]
    assert any('rebound' in r.getMessage() for r in caplog.records)


def test_attach_once():
    top, other = Cell('top'), Cell('other')
    child = Cell('child')
    child.attach(top)
    assert top.child is child
    with pytest.raises(ValueError):
        child.attach(other)
    with pytest.raises(ValueError):
        Cell('child', parent=top)


def test_parameters_and_walk():
    top = Cell('top', cell_name='strong_arm')
    top.set_parameter('w', 4)
    top.set_parameter('l', 150, unit='nm')
    assert top.get_parameter('w') == 4
    assert top.parameters['l'].unit == 'nm'
    assert str(top.parameters['l']) == 'l=150 nm'
    a = Cell('a', parent=top)
    b = Cell('b', parent=a)
    assert [c.instance_name for c in top.walk()] == ['top', 'a', 'b']
    assert b.get_name_from_top() == 'top.a.b'
    with pytest.raises(ValueError):
        top.get_parameter('missing')
