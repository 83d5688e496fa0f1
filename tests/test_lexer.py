'''
dc lexer tests
'''

import regex

from pydc.util import ParseFailure, UnterminatedCommand
from pydc.lexer import Lexer
from pydc.number import ScaledNumber
from pydc.opcode import Opcode, Instruction
from pydc.stack import Number, Command

from pytest import raises, mark


def tokens(text):
    return list(Lexer().tokens(text))


def test_arithmetic():
    assert tokens('2 3+p') == [Number(ScaledNumber(2, 0)),
                               Number(ScaledNumber(3, 0)),
                               Instruction(Opcode.ADD),
                               Instruction(Opcode.PRINT)]


@mark.parametrize('text, value, scale', [
    ('_1.25', -125, 2),
    ('1.', 1, 0),
    ('.5', 5, 1),
    ('2.50', 250, 2),
    ('1F', 31, 0),
    ('0FF', 255, 0),
    ('_A', -10, 0),
])
def test_numbers(text, value, scale):
    assert tokens(text) == [Number(ScaledNumber(value, scale))]


def test_lowercase_is_not_hex():
    assert tokens('5d') == [Number(ScaledNumber(5, 0)),
                            Instruction(Opcode.DUP)]
    assert tokens('5D') == [Number(ScaledNumber(0x5D, 0))]


def test_several_points():
    with raises(ParseFailure, match=regex.escape("Malformed number '12.3.4'")):
        tokens('12.3.4')


@mark.parametrize('text', ['1_2', '__1', '_', '.', '1.F'])
def test_malformed_numbers(text):
    with raises(ParseFailure):
        tokens(text)


def test_command():
    assert tokens('[2 3+]x') == [Command('2 3+'), Instruction(Opcode.EXECUTE)]


def test_command_does_not_nest():
    assert tokens('[1 [2]3]') == [Command('1 [2'),
                                  Number(ScaledNumber(3, 0))]


def test_unterminated_command():
    with raises(UnterminatedCommand):
        tokens('1 [2 3+')


def test_registers():
    assert tokens('sa S lb L< <c>d=e') == [
        Instruction(Opcode.STORE, 'a'),
        Instruction(Opcode.PUSHREG, ' '),
        Instruction(Opcode.LOAD, 'b'),
        Instruction(Opcode.POPREG, '<'),
        Instruction(Opcode.LESS, 'c'),
        Instruction(Opcode.GREATER, 'd'),
        Instruction(Opcode.EQUAL, 'e'),
    ]


def test_missing_register():
    with raises(ParseFailure, match="after 's'"):
        tokens('1s')


def test_unknown_skipped():
    assert tokens('y w\n\t#z') == [Instruction(Opcode.DEPTH)]


def test_lazy():
    '''
    Tokens before a bad lexeme come out before it fails.
    '''
    lexed = Lexer().tokens('1 12.3.4')
    assert next(lexed) == Number(ScaledNumber(1, 0))
    with raises(ParseFailure):
        next(lexed)


def test_kinds():
    l = Lexer()
    assert [l.kind(m) for m in l.lex('1 [p]sa+')] == ['number',
                                                      'skip',
                                                      'command',
                                                      'registered',
                                                      'operator']


def test_every_opcode_lexes():
    for opcode in Opcode:
        text = opcode.value + ('r' if opcode.takes_register else '')
        assert [t.opcode for t in tokens(text)] == [opcode]


def test_finished():
    lexed = Lexer().tokens('1 x y \n')
    assert not lexed.finished()
    next(lexed)
    assert not lexed.finished()
    assert next(lexed) == Instruction(Opcode.EXECUTE)
    assert lexed.finished()
    assert list(lexed) == []


def test_finished_does_not_parse():
    lexed = Lexer().tokens('1 12.3.4')
    next(lexed)
    assert not lexed.finished()
    with raises(ParseFailure):
        next(lexed)
