'''
dc calculator.

Arbitrary precision, stack based desk calculator: numbers, [bracketed]
command strings, single character commands, and registers that can hold
either. Numbers are scaled decimals over Python ints, so they never overflow
and never round through a float.

Differences from GNU dc worth knowing:

- i and I set and get the working precision (GNU dc's k), not the input base.
  k sets the scale numbers are *printed* at.
- A-F in a number make the whole number hexadecimal; there is no input base.
- [ ] do not nest.
- v, Z, ? and ! are reserved and fail.
'''

# TODO: Square root (v), with the scale rules of div().

import logging

from .cli import CLI
from .lexer import Lexer
from .machine import Machine
from .number import ScaledNumber
from .util import DCError


logging.getLogger(__name__).addHandler(logging.NullHandler())


__all__ = 'Machine', 'Lexer', 'CLI', 'ScaledNumber', 'DCError'
