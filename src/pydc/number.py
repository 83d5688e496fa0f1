'''
Scaled decimal numbers.

A ScaledNumber is an integer ``value`` and a non-negative ``scale``, standing
for ``value / 10**scale``. All arithmetic is integer arithmetic on ``value``;
Python's unbounded int keeps it exact at any magnitude.
'''

from fractions import Fraction
import logging

from .util import DivideByZero, wrap_user_errors


log = logging.getLogger(__name__)

DIGITS = '0123456789ABCDEF'


def _truncdiv(n, d):
    '''
    Integer division truncating toward zero, not toward negative infinity.
    '''
    q = abs(n) // abs(d)
    return q if (n < 0) == (d < 0) else -q


def _truncmod(n, d):
    # Remainder takes the sign of the dividend.
    return n - d * _truncdiv(n, d)


def _digits(n, base):
    '''
    Digits of non-negative n in base, most significant first.
    '''
    digits = []
    while True:
        n, d = divmod(n, base)
        digits.append(d)
        if not n:
            return digits[::-1]


class ScaledNumber:
    '''
    Fixed-point decimal with explicit scale. Immutable.

    Equality is exact: 1.0 and 1 have different scales and are not equal.
    Compare as_fraction() for numeric ordering.
    '''

    __slots__ = 'value', 'scale'

    def __init__(self, value=0, scale=0):
        if scale < 0:
            raise ValueError('Negative scale {}'.format(scale))
        object.__setattr__(self, 'value', value)
        object.__setattr__(self, 'scale', scale)

    def __setattr__(self, name, value):
        raise AttributeError('ScaledNumber is immutable')

    def __eq__(self, other):
        if not isinstance(other, ScaledNumber):
            return NotImplemented
        return (self.value, self.scale) == (other.value, other.scale)

    def __hash__(self):
        return hash((self.value, self.scale))

    def __repr__(self):
        return 'ScaledNumber({}, {})'.format(self.value, self.scale)

    def __str__(self):
        return self.format()

    def as_fraction(self):
        return Fraction(self.value, 10 ** self.scale)

    def rescale(self, scale):
        '''
        Same number at another scale.

        Growing the scale is lossless; shrinking it truncates toward zero.
        '''
        delta = scale - self.scale
        if delta >= 0:
            value = self.value * 10 ** delta
        else:
            value = _truncdiv(self.value, 10 ** -delta)
        log.debug('rescaled %r to scale %d', self, scale)
        return ScaledNumber(value, scale)

    def add(self, other):
        scale = max(self.scale, other.scale)
        return ScaledNumber(self.rescale(scale).value +
                            other.rescale(scale).value, scale)

    def sub(self, other):
        scale = max(self.scale, other.scale)
        return ScaledNumber(self.rescale(scale).value -
                            other.rescale(scale).value, scale)

    def mul(self, other, working):
        '''
        Product, truncated to the larger of the working and operand scales.

        Never more digits than the exact product has.
        '''
        exact = ScaledNumber(self.value * other.value,
                             self.scale + other.scale)
        return exact.rescale(min(exact.scale,
                                 max(working, self.scale, other.scale)))

    @wrap_user_errors('Divide by zero', DivideByZero)
    def div(self, other, working):
        '''
        Quotient truncated toward zero at the working scale.
        '''
        numerator = self.value * 10 ** (other.scale + working)
        denominator = other.value * 10 ** self.scale
        return ScaledNumber(_truncdiv(numerator, denominator), working)

    @wrap_user_errors('Remainder by zero', DivideByZero)
    def mod(self, other, working):
        return ScaledNumber(_truncmod(self.rescale(working).value,
                                      other.rescale(working).value),
                            working)

    def pow(self, exponent, working):
        '''
        Raise to the integral part of exponent.

        Repeated multiplication for positive exponents, repeated division for
        negative ones, each step following the mul()/div() scale rules.
        '''
        count = exponent.rescale(0).value
        if self.scale == 0 and count >= 0:
            # Integers stay exact at scale 0; skip the loop.
            return ScaledNumber(self.value ** count, 0)
        result = ONE
        if count >= 0:
            for _ in range(count):
                result = result.mul(self, working)
        else:
            for _ in range(-count):
                result = result.div(self, working)
        return result

    def format(self, base=10):
        '''
        Exact text of the number in base.

        Bases up to 16 use the digits 0-9A-F. Larger bases print every digit
        as a zero-padded decimal group, groups separated by spaces. Fractional
        digits in bases other than 10 stop once the base's resolution reaches
        the number's scale.
        '''
        sign = '-' if self.value < 0 else ''
        if base == 10:
            digits = str(abs(self.value)).rjust(self.scale + 1, '0')
            if not self.scale:
                return sign + digits
            return '{}{}.{}'.format(sign,
                                    digits[:-self.scale],
                                    digits[-self.scale:])

        if base <= 16:
            show, sep = DIGITS.__getitem__, ''
        else:
            width = len(str(base - 1))
            show, sep = (lambda d: str(d).zfill(width)), ' '

        denominator = 10 ** self.scale
        integral, fractional = divmod(abs(self.value), denominator)
        text = sep.join(map(show, _digits(integral, base)))
        if self.scale:
            shown = []
            resolution = 1
            while resolution < denominator:
                digit, fractional = divmod(fractional * base, denominator)
                shown.append(show(digit))
                resolution *= base
            text += '.' + sep.join(shown)
        return sign + text


ZERO = ScaledNumber(0, 0)
ONE = ScaledNumber(1, 0)
