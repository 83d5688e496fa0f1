'''
Stack and register tests
'''

from pydc.number import ScaledNumber
from pydc.stack import Stack, Registers, Number, Command, ZERO


def test_underflow_answers_zero():
    s = Stack()
    for _ in range(3):
        assert s.pop() == ZERO
        assert s.peek() == ZERO
    assert len(s) == 0


def test_pop_past_pushes():
    s = Stack()
    s.push(Command('p'))
    assert s.pop() == Command('p')
    assert s.pop() == ZERO


def test_order():
    s = Stack()
    one, two = Number(ScaledNumber(1, 0)), Number(ScaledNumber(2, 0))
    s.push(one)
    s.push(two)
    assert list(s) == [one, two]
    assert s.peek() == two
    assert len(s) == 2
    assert s.pop() == two
    assert s.pop() == one


def test_reset():
    s = Stack([ZERO, ZERO])
    s.reset(Command('x'))
    assert list(s) == [Command('x')]


def test_registers_created_on_reference():
    r = Registers()
    assert 'a' not in r
    a = r['a']
    assert 'a' in r
    assert r['a'] is a
    assert a.pop() == ZERO
