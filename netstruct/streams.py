import io
import logging
from contextlib import contextmanager

from .exceptions import ParseError


logger = logging.getLogger(__name__)


class Stream(object):
    '''This is a simple wrapper around a BytesIO object to
    uniform its properties: mainly we need reads that know
    how many bytes are really available, also inside a bounded
    window of the underlying data.'''
    def __init__(self, obj=b''):
        '''Here we normalize the object in order to be accessed as a normal file object'''
        self.obj = obj
        self.history = []

        init_method_name = 'init_%s' % self.obj.__class__.__name__

        try:
            init_method = getattr(self, init_method_name)
        except AttributeError:
            raise ValueError('\'%s\' is the wrong kind of data to use' % self.obj.__class__.__name__)

        init_method()

        self._end = self.obj.seek(0, io.SEEK_END)
        self.obj.seek(0)

    def __getattr__(self, name):
        return getattr(self.obj, name)

    def __repr__(self):
        return '<%s(%d/%d)>' % (self.__class__.__name__, self.tell(), self._end)

    def init_bytes(self):
        '''We think these are raw bytes'''
        self.obj = io.BytesIO(self.obj)

    def init_bytearray(self):
        self.obj = io.BytesIO(bytes(self.obj))

    def init_memoryview(self):
        self.obj = io.BytesIO(self.obj.tobytes())

    @property
    def end(self):
        return self._end

    def remaining(self):
        return max(self._end - self.obj.tell(), 0)

    def read_exactly(self, size):
        '''Read "size" bytes or raise ParseError telling how many are missing.'''
        available = self.remaining()
        if size > available:
            raise ParseError(chain=[], needed=size, available=available)

        return self.obj.read(size)

    def read_all(self):
        '''Returns all the data until the end of the (bounded) stream.'''
        return self.obj.read(self.remaining())

    def write(self, data):
        written = self.obj.write(data)
        self._end = max(self._end, self.obj.tell())

        return written

    @contextmanager
    def bounded(self, size):
        '''Reads inside the block cannot go past "size" bytes from the actual position.'''
        old_end = self._end
        self._end = min(self._end, self.obj.tell() + size)
        logger.debug('bounding stream to %d', self._end)
        try:
            yield self
        finally:
            self._end = old_end

    def save(self):
        self.history.append(self.obj.tell())

    def restore(self):
        old_seek = self.history.pop()
        self.obj.seek(old_seek)

    def discard(self):
        self.history.pop()
