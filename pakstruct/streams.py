import io
import os
import logging
from contextlib import contextmanager

from .exceptions import StreamException


logger = logging.getLogger(__name__)


class Stream(object):
    '''This is a simple wrapper around bytes/path/file object to
    uniform its properties: mainly we need seek() and read() methods
    that fail loudly instead of returning less data than asked.'''
    def __init__(self, obj):
        '''Here we normalize the object in order to be accessed as a normal file object'''
        self._type = type(obj)
        self._owned = True
        self.obj = obj
        self.history = []

        if isinstance(obj, os.PathLike):
            self.obj = os.fspath(obj)

        init_method_name = 'init_%s' % self.obj.__class__.__name__

        init_method = getattr(self, init_method_name, self.init_file)

        init_method()

    def __getattr__(self, name):
        return getattr(self.obj, name)

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_value, traceback):
        self.close()

    def __repr__(self):
        return '<%s(%s)>' % (self.__class__.__name__, self._type.__name__)

    def init_str(self):
        '''We think this is a path'''
        logger.debug('opening path \'%s\'' % self.obj)
        try:
            self.obj = open(self.obj, 'rb')
        except OSError as e:
            raise StreamException('failed to open \'%s\': %s' % (self.obj, e.strerror))

    def init_bytes(self):
        '''We think these are raw bytes'''
        self.obj = io.BytesIO(self.obj)

    def init_bytearray(self):
        self.obj = io.BytesIO(bytes(self.obj))

    def init_file(self):
        '''Anything else must already behave like a binary file, we don't own it'''
        if not hasattr(self.obj, 'read') or not hasattr(self.obj, 'seek'):
            raise ValueError('\'%s\' is the wrong kind of object to use as a stream' % self._type.__name__)
        self._owned = False

    def close(self):
        if self._owned:
            self.obj.close()

    @property
    def size(self) -> int:
        '''Total length of the underlying data, the position is preserved'''
        with self.saved():
            self.obj.seek(0, io.SEEK_END)
            return self.obj.tell()

    def seek(self, offset):
        if not isinstance(offset, int):
            raise ValueError('\'%s\' is the wrong kind of offset to use' % offset.__class__.__name__)

        try:
            self.obj.seek(offset)
        except (OSError, ValueError) as e:
            raise StreamException('failed to seek at offset 0x%x: %s' % (offset, e))

        return self

    def read(self, size=-1):
        try:
            return self.obj.read(size)
        except (OSError, ValueError) as e:
            raise StreamException('failed to read %d bytes: %s' % (size, e))

    def read_exactly(self, size: int) -> bytes:
        '''Read "size" bytes and raise if the stream doesn't have enough of them'''
        offset = self.obj.tell()
        data = self.read(size)

        if len(data) != size:
            raise StreamException('short read at offset 0x%x: wanted %d bytes, got %d' % (
                offset, size, len(data)))

        return data

    def save(self):
        self.history.append(self.obj.tell())

    def restore(self):
        old_seek = self.history.pop()
        self.obj.seek(old_seek)

    @contextmanager
    def saved(self):
        self.save()
        try:
            yield self
        finally:
            self.restore()
