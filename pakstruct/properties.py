import logging


class Dependency:
    '''This makes the relation between fields possible.

    In practice this class allows to write something like

        class PakNameRecord(Chunk):
            name_length = fields.StructField('I')
            filename    = fields.StringField(Dependency('.name_length'))

    and have the length of the string contained in the field named 'filename'
    read from the field named 'name_length' at unpacking time.

    The expression starts with a '.' and refers to a field at the same level,
    the following components descend into sub-chunks ('.header.size').
    '''
    def __init__(self, expression: str):
        if not expression.startswith('.') or expression == '.':
            raise ValueError(f"'{expression}' is not a relative expression like '.field'")

        self.expression = expression
        self.logger = logging.getLogger(__name__)

    def __repr__(self):
        return f'<{self.__class__.__name__}({self.expression})>'

    def __deepcopy__(self, memo):
        # dependencies are immutable, the field copies can share them
        return self

    def resolve_field(self, instance):
        self.logger.debug('trying to resolve \'%s\' for \'%s\'' % (
            self.expression,
            instance.__class__.__name__,
        ))

        field = instance.father
        if field is None:
            raise AttributeError(f"'{self.expression}' can't be resolved for a field without father")

        # '.header.size'.split('.') -> ['', 'header', 'size']
        for component_name in self.expression.split('.')[1:]:
            field = getattr(field, component_name)
            self.logger.debug(' resolved sub-component "%s" from "%s"' % (
                field.__class__.__name__, component_name))

        return field

    def resolve(self, instance):
        '''With this method we resolve the attribute with respect to the instance
        passed as argument.'''
        value = self.resolve_field(instance).value

        self.logger.debug(' resolved with value %s' % value)

        return value


class PropertyDescriptor(object):
    """The glue for dependency management: an attribute of a field that can be
    either a plain value or a Dependency resolved when read."""

    def __init__(self, name: str, _type: type):
        self.name = name
        self.type = _type

    def __get__(self, instance, owner):
        if instance is None:
            return self

        data = instance.__dict__
        if self.name not in data:
            raise AttributeError(f"no '{self.name}' here!")

        value = data[self.name]

        if isinstance(value, Dependency):
            return value.resolve(instance)

        return value

    def __set__(self, instance, value):
        if not isinstance(value, (self.type, Dependency)):
            raise ValueError(f"A property must be of type {self.type} or a Dependency")

        instance.__dict__[self.name] = value

    def is_dependency(self, instance) -> bool:
        return isinstance(instance.__dict__.get(self.name), Dependency)
