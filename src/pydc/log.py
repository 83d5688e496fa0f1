'''
In-memory debug logging.

Records go to a fixed-size ring buffer while the calculator runs and are
written out afterwards, so even a long run only keeps its tail. Off unless
enable() is called.
'''

from collections import deque
import logging


CAPACITY = 6144
FORMAT = '%(name)s: %(message)s'


class RingBufferHandler(logging.Handler):
    '''
    Keep the last ``capacity`` formatted records.
    '''

    def __init__(self, capacity=CAPACITY, level=logging.NOTSET):
        super().__init__(level)
        self.records = deque(maxlen=capacity)

    def emit(self, record):
        try:
            self.records.append(self.format(record))
        except Exception:
            self.handleError(record)

    def dump(self, stream):
        '''
        Write out and forget everything buffered so far, oldest first.
        '''
        for line in self.records:
            print(line, file=stream)
        self.records.clear()


def enable(capacity=CAPACITY):
    '''
    Start buffering debug records from the whole package. Returns the handler.
    '''
    handler = RingBufferHandler(capacity)
    handler.setFormatter(logging.Formatter(FORMAT))
    logger = logging.getLogger(__package__)
    logger.addHandler(handler)
    logger.setLevel(logging.DEBUG)
    return handler


def disable(handler):
    logger = logging.getLogger(__package__)
    logger.removeHandler(handler)
    logger.setLevel(logging.NOTSET)
