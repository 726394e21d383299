import inspect
import logging
from enum import Enum

from .meta import FieldBase


def get_root_from_chunk(instance):
    return get_instance_from_chunk(instance, condition=lambda x: x.father is None)


def get_instance_from_chunk(instance, condition):
    is_root = condition(instance)
    father = instance

    while not is_root:
        father = instance.father

        is_root = condition(father)
        instance = father

    return father


class Dependency:
    '''This makes the relation between fields possible.

    In practice this class allows to write something like

        class Simple(Chunk):
            length = fields.IntField('H')
            content = fields.StringField(n=Dependency('.length'))

    and have the size of the string contained in the field named 'content'
    read from the field named 'length' when unpacking.

    The relation works in one direction only: setting 'content' doesn't
    update 'length', the owner must do it explicitly.

    The syntax for defining the expression is inspired from module resolution:

     - '.' as first char indicates we refer to a field at the same level
       of the field owning the dependency
     - otherwise the first component is searched starting from the root chunk
    '''
    def __init__(self, expression):
        self.expression = expression
        self.logger = logging.getLogger(__name__)

    def __repr__(self):
        return f'<{self.__class__.__name__}({self.expression})>'

    def resolve_field(self, instance):
        self.logger.debug('trying to resolve \'%s\' using class \'%s\'' % (
            self.expression,
            self.__class__.__name__,
        ))

        fields_path = self.expression.split('.')
        # '.miao'.split(".") -> ['', 'miao']
        # 'miao'.split(".") -> ['miao']

        if fields_path[0] != '':
            field = get_root_from_chunk(instance)
            self.logger.debug(' resolve from root: \'%s\'' % field.__class__.__name__)
        else:  # we have a relative dependency
            field = instance.father
            self.logger.debug(' resolve from father: \'%s\'' % field.__class__.__name__)
            fields_path = fields_path[1:]  # skip the first one that is empty

        # now we can resolve each component
        for component_name in fields_path:
            field = getattr(field, component_name)
            self.logger.debug(' resolved sub-component "%s" from "%s"' % (
                field.__class__.__name__, component_name))

        return field

    def resolve(self, instance):
        '''With this method we resolve the attribute with respect to the instance
        passed as argument.'''
        field = self.resolve_field(instance)

        if inspect.ismethod(field):
            value = field()
        elif isinstance(field, FieldBase):
            value = field.value
        else:  # a bit range or a plain attribute
            value = field

        if isinstance(value, Enum):
            value = value.value

        self.logger.debug(' resolved with value %s' % value)

        return value


class ScaledDependency(Dependency):
    '''Resolve as (value + bias) * scale, never below zero.

    Useful for header lengths expressed in words, like the IHL of IPv4:

        ScaledDependency('.ihl', 4, bias=-5)
    '''

    def __init__(self, expression, scale, bias=0):
        super().__init__(expression)
        self._scale = scale
        self._bias = bias

    def resolve(self, instance):
        value = super().resolve(instance)

        return max((value + self._bias) * self._scale, 0)


def resolve_size(size, instance):
    '''A size can be a plain integer, a Dependency or a callable receiving the father.'''
    if size is None or isinstance(size, int):
        return size

    if isinstance(size, Dependency):
        return size.resolve(instance)

    return size(instance.father)
