from functools import reduce
import logging
import operator

import regex

from .util import ParseFailure, UnterminatedCommand
from .number import ScaledNumber
from .opcode import Opcode, Instruction
from .stack import Number, Command


log = logging.getLogger(__name__)


class Lexer:
    '''
    Lexer for the dc *regular* grammar.

    For consistency, for now, needs to be instantiated, despite holding no
    internal state.
    '''
    # Number: the maximal run of anything that could belong to one. Whether
    # the run is a well-formed number is LITERAL's business, so that 12.3.4
    # fails as a whole instead of lexing as 12.3 and .4.
    NUMBER = r'[0-9_.][0-9A-F_.]*'
    # Shape of a valid number
    LITERAL = r'''
               (?<sign>_)?
               (?<integral>[0-9A-F]*)
               (?:
                   \.
                   (?<fractional>[0-9A-F]*)
               )?
               '''
    # Command string. No nesting: the first ] closes it.
    COMMAND = r'''
               \[
               (?<__body__>
                   [^\]]*
               )
               \]
               '''
    # A [ that COMMAND couldn't close
    UNTERMINATED = r'\['

    # Opcodes followed by a register name, which can be any character at all.
    # A missing name (end of input) is left for parse() to complain about.
    REGISTERED = r'(?<opcode>' \
                 r'[' + ''.join(map(regex.escape,
                                    sorted(op.value
                                           for op
                                           in Opcode
                                           if op.takes_register))) + r']' \
                 r')' \
                 r'(?<register>.)?'
    OPERATOR = r'(?:' + r'|'.join(map(regex.escape,
                                      (op.value
                                       for op
                                       in Opcode
                                       if not op.takes_register))) + r')'
    # Whitespace, and anything unrecognized
    SKIP = r'\s+|.'

    # All possible lexemes. Alternatives are tried in order.
    LEXEME = r'(?<number>' + NUMBER + r')|' \
             r'(?<command>' + COMMAND + r')|' \
             r'(?<unterminated>' + UNTERMINATED + r')|' \
             r'(?<registered>' + REGISTERED + r')|' \
             r'(?<operator>' + OPERATOR + r')|' \
             r'(?<skip>' + SKIP + r')'
    KINDS = 'number', 'command', 'unterminated', 'registered', 'operator', \
            'skip'
    # Default regex flags for matching lexemes
    FLAGS = reduce(operator.__or__,
                   {regex.DOTALL,
                    regex.VERSION1,
                    regex.VERBOSE},
                   0)

    def lex(self, text, position=0):
        '''
        Lazily yield every lexeme match in text from position, skips included.
        '''
        while position < len(text):
            match = regex.match(type(self).LEXEME, text,
                                pos=position,
                                flags=type(self).FLAGS)
            yield match
            position = match.end()

    def tokens(self, text):
        '''
        Lazily iterate the items and instructions of text, in order.
        '''
        return Tokens(self, text)

    def kind(self, match):
        '''
        Return which kind of lexeme matched.
        '''
        for kind in type(self).KINDS:
            if match.group(kind) is not None:
                return kind

    def isfeedable(self, match):
        '''
        Return True if lexeme can be fed to machine.
        '''
        return self.kind(match) != 'skip'

    def parse(self, match):
        '''
        Turn a lexeme match into a stack item or an instruction.

        Returns None for skipped text.
        '''
        kind = self.kind(match)
        if kind == 'number':
            return self.number(match.group('number'))
        elif kind == 'command':
            return Command(match.group('__body__'))
        elif kind == 'unterminated':
            raise UnterminatedCommand("Expected ']', not found")
        elif kind == 'registered':
            opcode = Opcode(match.group('opcode'))
            register = match.group('register')
            if register is None:
                raise ParseFailure('Expected register name after {!r}'
                                   .format(opcode.value))
            return Instruction(opcode, register)
        elif kind == 'operator':
            return Instruction(Opcode(match.group('operator')))

    def number(self, text):
        '''
        Parse a numeric literal into a Number item.

        _ in front negates, every digit after the . adds one to the scale, and
        any of the digits A-F makes the whole literal hexadecimal.
        '''
        match = regex.fullmatch(type(self).LITERAL, text,
                                flags=type(self).FLAGS)
        if match is None:
            raise ParseFailure('Malformed number {!r}'.format(text))
        integral = match.group('integral')
        fractional = match.group('fractional') or ''
        digits = integral + fractional
        if not digits:
            raise ParseFailure('No digits in number {!r}'.format(text))
        if regex.search(r'[A-F]', digits):
            if fractional:
                raise ParseFailure('Fractional digits in hexadecimal number '
                                   '{!r}'.format(text))
            base = 16
        else:
            base = 10
        value = int(digits, base)
        if match.group('sign'):
            value = -value
        return Number(ScaledNumber(value, len(fractional)))


class Tokens:
    '''
    Items and instructions of one text, lexed as they are asked for.

    Lexing errors surface only when the bad lexeme is reached, so anything
    before it has already run.
    '''

    def __init__(self, lexer, text):
        self.lexer = lexer
        self.text = text
        self.position = 0

    def __iter__(self):
        return self

    def __next__(self):
        for match in self.lexer.lex(self.text, self.position):
            self.position = match.end()
            if self.lexer.isfeedable(match):
                token = self.lexer.parse(match)
                log.debug('lexed %r', token)
                return token
        raise StopIteration

    def finished(self):
        '''
        Return True if nothing but skipped text remains.

        Only matches lexemes, never parses them, so it cannot fail.
        '''
        return not any(self.lexer.isfeedable(match)
                       for match
                       in self.lexer.lex(self.text, self.position))
