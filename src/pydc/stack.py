from collections import namedtuple
import logging

from . import number


log = logging.getLogger(__name__)


class Number(namedtuple('Number', 'number')):
    '''
    Stack item holding a ScaledNumber.
    '''
    __slots__ = ()


class Command(namedtuple('Command', 'text')):
    '''
    Stack item holding unparsed program text, as captured between brackets.
    '''
    __slots__ = ()


ZERO = Number(number.ZERO)


class Stack:
    '''
    Stack of items that is never observably empty.

    Popping or peeking with nothing stored answers a zero Number instead of
    failing.
    '''

    def __init__(self, items=()):
        self.items = list(items)

    def __len__(self):
        return len(self.items)

    def __iter__(self):
        '''
        Iterate bottom to top.
        '''
        return iter(self.items)

    def __repr__(self):
        return 'Stack({!r})'.format(self.items)

    def push(self, item):
        log.debug('push %r', item)
        self.items.append(item)

    def pop(self):
        if not self.items:
            log.debug('pop on empty stack, answering zero')
            return ZERO
        item = self.items.pop()
        log.debug('pop %r', item)
        return item

    def peek(self):
        # Items are immutable; handing out the stored one is a copy.
        return self.items[-1] if self.items else ZERO

    def clear(self):
        self.items.clear()

    def reset(self, item):
        '''
        Replace everything with the single item.
        '''
        self.items[:] = [item]


class Registers(dict):
    '''
    Register stacks by name, created empty on first reference.
    '''

    def __missing__(self, name):
        log.debug('creating register %r', name)
        stack = self[name] = Stack()
        return stack
