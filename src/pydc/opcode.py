from collections import namedtuple
from enum import Enum


class Opcode(Enum):
    '''
    Every single-character command of the language, keyed by its character.
    '''
    # Arithmetic
    ADD = '+'
    SUB = '-'
    MUL = '*'
    DIV = '/'
    MOD = '%'
    POW = '^'

    # Stack
    DUP = 'd'
    CLEAR = 'c'
    DEPTH = 'z'
    PRINTSTACK = 'f'
    PRINT = 'p'
    POPPRINT = 'P'
    SCALEOF = 'X'

    # Registers
    STORE = 's'
    PUSHREG = 'S'
    LOAD = 'l'
    POPREG = 'L'

    # Scale and base
    STORESCALE = 'i'
    LOADSCALE = 'I'
    STOREOBASE = 'o'
    LOADOBASE = 'O'
    STOREOSCALE = 'k'

    # Control
    EXECUTE = 'x'
    LESS = '<'
    GREATER = '>'
    EQUAL = '='
    QUIT = 'q'
    QUITLEVELS = 'Q'

    # Reserved
    SQRT = 'v'
    LENGTH = 'Z'
    READLINE = '?'
    SHELL = '!'

    @property
    def takes_register(self):
        return self in REGISTER_OPCODES


REGISTER_OPCODES = frozenset({
    Opcode.STORE, Opcode.PUSHREG, Opcode.LOAD, Opcode.POPREG,
    Opcode.LESS, Opcode.GREATER, Opcode.EQUAL,
})


# An opcode resolved at lex time, with its register name if it takes one.
Instruction = namedtuple('Instruction', 'opcode register', defaults=(None,))
