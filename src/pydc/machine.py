import logging
import sys

from .util import DCError, TypeMismatch, Unimplemented, RecursionLimit
from .number import ScaledNumber
from .opcode import Opcode, Instruction
from .stack import Number, Command, Stack, Registers
from .lexer import Lexer


log = logging.getLogger(__name__)


class Machine:
    '''
    Arithmetic stack machine (dc calculator).

    Takes program text and runs it against one root stack and one set of
    registers. Running a command string (x, <, >, =) pushes a frame onto an
    explicit frame stack instead of recursing, so nesting depth is bounded by
    max_depth rather than by Python's call stack. A frame that has nothing
    left to run is dropped before its callee is pushed, so a command that
    ends by running itself loops in constant depth. Every frame shares the
    machine's state.
    '''

    DEFAULT_SCALE = 0
    DEFAULT_OBASE = 10
    # None shows every number at its own scale.
    DEFAULT_OSCALE = None
    DEFAULT_MAX_DEPTH = 100000

    # Binary arithmetic, as b op a where a was on top.
    BUILTINS = {
        Opcode.ADD: lambda b, a, scale: b.add(a),
        Opcode.SUB: lambda b, a, scale: b.sub(a),
        Opcode.MUL: lambda b, a, scale: b.mul(a, scale),
        Opcode.DIV: lambda b, a, scale: b.div(a, scale),
        Opcode.MOD: lambda b, a, scale: b.mod(a, scale),
        Opcode.POW: lambda b, a, scale: b.pow(a, scale),
    }

    # Comparisons for conditional execution, again b op a.
    COMPARISONS = {
        Opcode.LESS: lambda b, a: b.as_fraction() < a.as_fraction(),
        Opcode.GREATER: lambda b, a: b.as_fraction() > a.as_fraction(),
        Opcode.EQUAL: lambda b, a: b == a,
    }

    def __init__(self, output=None, scale=None, obase=None, oscale=None,
                 max_depth=None):
        '''
        Create empty stack machine.

        :param output: Text stream to print to; stdout by default.
        :param max_depth: Most frames that may be active at once.
        '''
        cls = type(self)
        self.stack = Stack()
        self.registers = Registers()
        self.frames = []
        self.lexer = Lexer()
        self.output = sys.stdout if output is None else output
        self.scale = cls.DEFAULT_SCALE if scale is None else scale
        self.obase = cls.DEFAULT_OBASE if obase is None else obase
        self.oscale = cls.DEFAULT_OSCALE if oscale is None else oscale
        self.max_depth = cls.DEFAULT_MAX_DEPTH if max_depth is None \
            else max_depth
        self.halted = False

    def run(self, text):
        '''
        Run program text to its end, or until q/Q leaves every frame.

        Any DCError aborts the whole run, including every frame entered from
        it, and propagates.
        '''
        self.halted = False
        self._enter(text)
        try:
            while self.frames:
                token = next(self.frames[-1], None)
                if token is None:
                    self.frames.pop()
                    log.debug('left frame, depth now %d', len(self.frames))
                else:
                    self.feed(token)
        finally:
            self.frames.clear()

    def feed(self, token):
        '''
        Stack an item, or run an instruction.
        '''
        if isinstance(token, Instruction):
            type(self).FUNCTIONS[token.opcode](self, token)
        else:
            self.stack.push(token)

    def _enter(self, text):
        # Tail call: a caller with nothing left to run is replaced, not kept.
        if self.frames and self.frames[-1].finished():
            self.frames.pop()
            log.debug('dropped finished frame, depth now %d',
                      len(self.frames))
        if len(self.frames) >= self.max_depth:
            raise RecursionLimit('More than {} nested executions'
                                 .format(self.max_depth))
        self.frames.append(self.lexer.tokens(text))
        log.debug('entered frame, depth now %d', len(self.frames))

    def _leave(self, levels):
        '''
        Drop levels frames. Dropping the last one halts the machine.
        '''
        del self.frames[max(0, len(self.frames) - levels):]
        log.debug('quit %d level(s), depth now %d', levels, len(self.frames))
        if not self.frames:
            self.halted = True

    def _popnumber(self, instruction):
        item = self.stack.pop()
        if not isinstance(item, Number):
            raise TypeMismatch('{!r} expects a number, found command [{}]'
                               .format(instruction.opcode.value, item.text))
        return item.number

    def _popcommand(self, instruction):
        item = self.stack.pop()
        if not isinstance(item, Command):
            raise TypeMismatch('{!r} expects a command, found number {}'
                               .format(instruction.opcode.value,
                                       item.number))
        return item.text

    def _popint(self, instruction):
        '''
        Pop a number and drop its fractional part.
        '''
        return self._popnumber(instruction).rescale(0).value

    def _pshint(self, n):
        self.stack.push(Number(ScaledNumber(n, 0)))

    def format(self, item):
        '''
        Text of an item according to output base and scale.
        '''
        if isinstance(item, Command):
            return item.text
        number = item.number
        if self.oscale is not None:
            number = number.rescale(self.oscale)
        return number.format(self.obase)

    def print(self, *items, **kwargs):
        '''
        Format and print items to the machine's output.
        '''
        return print(*map(self.format, items), file=self.output, **kwargs)

    def arithmetic(self, instruction):
        '''
        Pop two numbers, push b op a.
        '''
        a = self._popnumber(instruction)
        b = self._popnumber(instruction)
        f = type(self).BUILTINS[instruction.opcode]
        self.stack.push(Number(f(b, a, self.scale)))

    def dupstack(self, instruction):
        '''
        Duplicate element at top of stack.
        '''
        self.stack.push(self.stack.peek())

    def clrstack(self, instruction):
        '''
        Clear everything from the stack.
        '''
        self.stack.clear()

    def depth(self, instruction):
        '''
        Push the number of elements on the stack.
        '''
        self._pshint(len(self.stack))

    def printstack(self, instruction):
        '''
        Print all elements on the stack, bottom of the stack first.
        '''
        for item in self.stack:
            self.print(item)

    def printtop(self, instruction):
        '''
        Print the number on the top of the stack, leaving it there.
        '''
        item = self.stack.peek()
        if isinstance(item, Command):
            raise TypeMismatch('p cannot print a command')
        self.print(item)

    def popprint(self, instruction):
        '''
        Pop a command and print its raw text, without a newline.
        '''
        self.print(Command(self._popcommand(instruction)), end='')

    def scaleof(self, instruction):
        '''
        Replace the number on top with its scale.
        '''
        self._pshint(self._popnumber(instruction).scale)

    def store(self, instruction):
        '''
        Make the popped item the only one in a register.
        '''
        self.registers[instruction.register].reset(self.stack.pop())

    def pushreg(self, instruction):
        '''
        Push the popped item onto a register.
        '''
        self.registers[instruction.register].push(self.stack.pop())

    def load(self, instruction):
        '''
        Copy the top of a register onto the stack.
        '''
        self.stack.push(self.registers[instruction.register].peek())

    def popreg(self, instruction):
        '''
        Move the top of a register onto the stack.
        '''
        self.stack.push(self.registers[instruction.register].pop())

    def _popsetting(self, instruction, minimum, what):
        n = self._popint(instruction)
        if n < minimum:
            raise DCError('{} must be at least {}, not {}'
                          .format(what, minimum, n))
        return n

    def storescale(self, instruction):
        '''
        Set working precision, the scale of divisions.
        '''
        self.scale = self._popsetting(instruction, 0, 'Scale')

    def loadscale(self, instruction):
        self._pshint(self.scale)

    def storeobase(self, instruction):
        '''
        Set output base.
        '''
        self.obase = self._popsetting(instruction, 2, 'Output base')

    def loadobase(self, instruction):
        self._pshint(self.obase)

    def storeoscale(self, instruction):
        '''
        Set the scale numbers are printed at.
        '''
        self.oscale = self._popsetting(instruction, 0, 'Output scale')

    def execute(self, instruction):
        '''
        Pop and run a command.
        '''
        self._enter(self._popcommand(instruction))

    def conditional(self, instruction):
        '''
        Pop two numbers and run a register's command if b op a holds.
        '''
        a = self._popnumber(instruction)
        b = self._popnumber(instruction)
        if not type(self).COMPARISONS[instruction.opcode](b, a):
            return
        item = self.registers[instruction.register].peek()
        if not isinstance(item, Command):
            raise TypeMismatch('Register {!r} holds number {}, not a command'
                               .format(instruction.register, item.number))
        self._enter(item.text)

    def quit(self, instruction):
        '''
        Leave the current frame and the one that ran it.
        '''
        self._leave(2)

    def quitlevels(self, instruction):
        '''
        Pop n and leave n frames.
        '''
        self._leave(self._popsetting(instruction, 0, 'Quit level count'))

    def unimplemented(self, instruction):
        raise Unimplemented('{!r} ({}) is not implemented'
                            .format(instruction.opcode.value,
                                    instruction.opcode.name.lower()))

    # Language mapping to stack operations.
    FUNCTIONS = {
        Opcode.ADD: arithmetic,
        Opcode.SUB: arithmetic,
        Opcode.MUL: arithmetic,
        Opcode.DIV: arithmetic,
        Opcode.MOD: arithmetic,
        Opcode.POW: arithmetic,

        Opcode.DUP: dupstack,
        Opcode.CLEAR: clrstack,
        Opcode.DEPTH: depth,
        Opcode.PRINTSTACK: printstack,
        Opcode.PRINT: printtop,
        Opcode.POPPRINT: popprint,
        Opcode.SCALEOF: scaleof,

        Opcode.STORE: store,
        Opcode.PUSHREG: pushreg,
        Opcode.LOAD: load,
        Opcode.POPREG: popreg,

        Opcode.STORESCALE: storescale,
        Opcode.LOADSCALE: loadscale,
        Opcode.STOREOBASE: storeobase,
        Opcode.LOADOBASE: loadobase,
        Opcode.STOREOSCALE: storeoscale,

        Opcode.EXECUTE: execute,
        Opcode.LESS: conditional,
        Opcode.GREATER: conditional,
        Opcode.EQUAL: conditional,
        Opcode.QUIT: quit,
        Opcode.QUITLEVELS: quitlevels,

        Opcode.SQRT: unimplemented,
        Opcode.LENGTH: unimplemented,
        Opcode.READLINE: unimplemented,
        Opcode.SHELL: unimplemented,
    }

    assert set(FUNCTIONS) == set(Opcode)
