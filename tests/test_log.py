'''
Ring buffer logging tests
'''

from io import StringIO
import logging

from pydc import log
from pydc.log import RingBufferHandler


def test_keeps_only_last_records():
    handler = RingBufferHandler(capacity=2)
    handler.setFormatter(logging.Formatter('%(message)s'))
    logger = logging.getLogger('pydc.test_log')
    logger.addHandler(handler)
    logger.setLevel(logging.DEBUG)
    try:
        for message in 'one', 'two', 'three':
            logger.debug(message)
    finally:
        logger.removeHandler(handler)
    out = StringIO()
    handler.dump(out)
    assert out.getvalue() == 'two\nthree\n'


def test_dump_forgets():
    handler = RingBufferHandler()
    handler.emit(logging.makeLogRecord({'msg': 'once'}))
    handler.dump(StringIO())
    out = StringIO()
    handler.dump(out)
    assert out.getvalue() == ''


def test_enable_disable():
    handler = log.enable(capacity=10)
    try:
        logging.getLogger('pydc.stack').debug('seen')
    finally:
        log.disable(handler)
    logging.getLogger('pydc.stack').debug('unseen')
    out = StringIO()
    handler.dump(out)
    assert out.getvalue() == 'pydc.stack: seen\n'
