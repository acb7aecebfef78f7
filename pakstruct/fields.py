"""
A Field is "fundamental" datatype from the format point of view, something directly
unpackable from a stream without need for sub-components.
"""
import logging
import struct
from enum import Enum

from .meta import FieldBase, Endianess
from .properties import Dependency, PropertyDescriptor
from .exceptions import UnpackException


class Field(FieldBase):
    """Base class to subclass from"""
    logger = logging.getLogger(__name__)

    def __init__(self, *args, name=None, father=None, default=None, offset=None,
                 endianess=Endianess.LITTLE_ENDIAN):
        super().__init__()
        self.name = name
        self.father = father
        self.default = default
        self.offset = offset
        self.endianess = endianess

        self.init()

    def init(self):
        self.value = self.value_from_default()

    def value_from_default(self):
        return self.default

    def __str__(self):
        return str(self.value)

    def get_dependencies(self):
        """Return the dictionary containing the dependent attributes of this field"""
        instance_dict = self.__dict__
        return {_k: _v for _k, _v in instance_dict.items() if isinstance(_v, Dependency)}

    def _get_value(self):
        return self._value

    def _set_value(self, value):
        self._value = value

    value = property(
        fget=lambda self: self._get_value(),
        fset=lambda self, value: self._set_value(value))

    def _get_size(self):
        raise NotImplementedError(f"method {self.__class__.__name__}._get_size() not implemented")

    size = property(
        fget=lambda self: self._get_size(),
    )

    def _get_raw(self) -> bytes:
        raise NotImplementedError(f"method {self.__class__.__name__}._get_raw() not implemented")

    raw = property(
        fget=lambda self: self._get_raw(),
    )

    def relayout(self, offset=0):
        self.offset = offset

        return self.size

    def unpack(self, stream):
        raise NotImplementedError('you need to implement this in the subclass')


class StructField(Field):
    """
    Simplest of the fields: mimic the behaviour of the struct module packing/unpacking
    integers to/from bytes.

    The main advantage is the possibility to indicate via the "enum" argument some subclass
    of enum.Enum so to have directly a representation of the integer value of the field itself.
    A value not present into the enum is kept as a plain integer.
    """

    def __init__(self, format, default=0, enum=None, **kw):
        self.format = format
        self.enum = enum
        super().__init__(default=default, **kw)

    def __repr__(self):
        if isinstance(self.value, Enum):
            return f'<{self.__class__.__name__}({self.value!r})>'

        return '<%s(%s)>' % (self.__class__.__name__, hex(self.value))

    def __str__(self):
        width = self.size * 2
        formatter = '0x%%0%dx' % width
        return formatter % (self.value.value if isinstance(self.value, Enum) else self.value,)

    def get_format(self):
        return '%s%s' % ('<' if self.endianess == Endianess.LITTLE_ENDIAN else '>', self.format)

    def _get_size(self):
        return struct.calcsize(self.get_format())

    def _get_raw(self) -> bytes:
        value = self.value.value if isinstance(self.value, Enum) else self.value
        return struct.pack(self.get_format(), value)

    def _unpack_enum(self, value: int):
        try:
            return self.enum(value)
        except ValueError:
            self.logger.warning(f'enum {self.enum.__name__} doesn\'t have element with value 0x{value:x} in it')

        return value

    def _unpack(self, raw: bytes):
        try:
            value = struct.unpack(self.get_format(), raw)[0]
        except struct.error as e:
            raise UnpackException(str(e), chain=[])

        if self.enum:
            value = self._unpack_enum(value)

        return value

    def unpack(self, stream):
        self.value = self._unpack(stream.read_exactly(self.size))


class StringField(Field):
    """Represent a contiguous chunk of bytes, its length can be a Dependency."""

    length = PropertyDescriptor('length', int)

    def __init__(self, n=None, **kw):
        if n is None and 'default' not in kw:
            raise ValueError("StringField must have 'n' or 'default' indicated!")

        self.length = n if n is not None else len(kw['default'])

        super().__init__(**kw)

    def __repr__(self):
        return '<%s(%s)>' % (self.__class__.__name__, repr(self.value))

    def __len__(self):
        return len(self.value)

    def value_from_default(self):
        if self.default is not None:
            return self.default

        if StringField.length.is_dependency(self):
            return b''

        return b'\x00' * self.length

    def _set_value(self, value) -> None:
        """A fixed length must be respected, with a Dependency the length follows the value."""
        if not StringField.length.is_dependency(self) and len(value) != self.length:
            raise ValueError(f'you are trying to set a value with the wrong size (that is {self.length} bytes)')

        super()._set_value(value)

    def _get_size(self):
        return len(self.value)

    def _get_raw(self):
        return self.value

    def unpack(self, stream):
        length = self.length
        self.logger.debug('reading %d bytes for \'%s\'' % (length, self.name))
        self.value = stream.read_exactly(length)


class ArrayField(Field):
    '''Unpack an array of fields.

    You can indicate an explicit number of elements via the parameter named "n"
    or the number of bytes the elements take via the parameter named
    "total_size" (elements are read while less than that has been consumed, so
    the last one can go past it).

    This class must behave like a list in python.
    '''

    n = PropertyDescriptor('n', int)
    total_size = PropertyDescriptor('total_size', int)

    def __init__(self, field_cls, n=0, total_size=None, **kw):
        self.field_cls = field_cls
        self.n = n
        if total_size is not None:
            self.total_size = total_size
        self._by_size = total_size is not None

        super().__init__(**kw)

    def __repr__(self):
        return f'<{self.__class__.__name__}({self.value!r})>'

    def __getitem__(self, item):
        return self.value[item]

    def __len__(self):
        return len(self.value)

    def __iter__(self):
        return iter(self.value)

    def value_from_default(self):
        if self.default is not None:
            return list(self.default)

        return []

    def clear(self):
        self.value.clear()

    def _get_raw(self):
        return b''.join(element.raw for element in self.value)

    def _get_size(self):
        return sum(element.size for element in self.value)

    def relayout(self, offset=0):
        super().relayout(offset=offset)
        size = 0
        for field in self.value:
            size += field.relayout(offset=offset + size)

        return size

    def instance_element(self):
        return self.field_cls.create(father=self)  # pass the father so that we don't lose the hierarchy

    def append(self, element):
        element.father = self
        self.value.append(element)

    def _is_complete(self, consumed):
        if self._by_size:
            return consumed >= self.total_size

        return len(self.value) >= self.n

    def unpack(self, stream):
        self.value = []
        consumed = 0

        while not self._is_complete(consumed):
            element = self.instance_element()
            element.offset = stream.tell()

            self.logger.debug('unpacking element #%d of \'%s\'' % (len(self.value), self.name))
            try:
                element.unpack(stream)
            except UnpackException as e:
                e.chain.append(str(len(self.value)))
                raise

            self.append(element)
            consumed += element.size
