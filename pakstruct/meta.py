'''
Machinery behind the declarative chunks.

A chunk class lists its fields as class attributes

    class PakFileEntry(Chunk):
        content_id = fields.StructField('I')
        position   = fields.StructField('I')

MetaChunk takes them out of the class, remembers their order into
PakFileEntry._meta.fields and puts a FieldDescriptor in their place; the
field instances written into the class body are only prototypes, each chunk
instance works on its own copies.
'''
import copy
import logging
from enum import Enum, auto


logger = logging.getLogger(__name__)


class Endianess(Enum):
    LITTLE_ENDIAN = auto()
    BIG_ENDIAN    = auto()


class FieldDescriptor(object):
    '''Class attribute standing in for a field, the copy of the prototype
    is created the first time an instance asks for it.'''

    def __init__(self, prototype: "FieldBase", name: str):
        self.prototype = prototype
        self.name = name
        prototype.name = name

    def __repr__(self):
        return f'<{self.__class__.__name__}({self.name}: {self.prototype.__class__.__name__})>'

    def __get__(self, instance, owner=None):
        if instance is None:
            return self

        try:
            return instance.__dict__[self.name]
        except KeyError:
            logger.debug("creating field '%s' of '%s'", self.name, instance.__class__.__name__)

        field = self.prototype.create(father=instance)
        instance.__dict__[self.name] = field

        return field

    def __set__(self, instance, value):
        '''Assigning a field replaces it, anything else becomes its value.'''
        if not isinstance(value, self.prototype.__class__):
            self.__get__(instance).value = value
            return

        value.name = self.name
        value.father = instance
        instance.__dict__[self.name] = value


class FieldBase(object):
    # attributes every field instance sets on itself
    RESERVED_NAMES = ('name', 'father', 'default', 'offset', 'endianess')

    def contribute_to_chunk(self, cls, name):
        if name in self.RESERVED_NAMES or hasattr(cls, name):
            raise AttributeError(f"field '{name}' of {cls.__name__} would shadow an attribute with the same name")

        setattr(cls, name, FieldDescriptor(self, name))

    def create(self, father):
        instance = copy.deepcopy(self)
        instance.father = father
        return instance


class Meta(object):
    """What is known about a chunk class: the names of its fields, in order."""

    def __init__(self, fields=()):
        self.fields = list(fields)


class MetaChunk(type):

    def __new__(mcs, name, bases, attrs):
        '''The fields of the parents come first, then the ones in the class
        body in order of definition.'''
        prototypes = {key: value for key, value in attrs.items() if isinstance(value, FieldBase)}
        others = {key: value for key, value in attrs.items() if key not in prototypes}

        new_cls = super().__new__(mcs, name, bases, others)

        inherited = []
        for base in bases:
            if isinstance(base, MetaChunk):
                inherited.extend(base._meta.fields)

        new_cls._meta = Meta(inherited)

        for field_name, prototype in prototypes.items():
            new_cls.add_to_class(field_name, prototype)

        return new_cls

    def add_to_class(cls, name, prototype):
        prototype.contribute_to_chunk(cls, name)
        cls._meta.fields.append(name)
