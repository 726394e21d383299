"""
Core module for the abstraction of a protocol header

"""
import logging
from typing import Tuple, List, Dict

from .fields import Field
from .enum import Compliant
from .meta import MetaChunk
from .streams import Stream
from .exceptions import (
    ParseError,
    ValidationError,
    FormatError,
)


class Chunk(Field, metaclass=MetaChunk):
    """
    Together with Field is the main class that defines a format: it's an ordered
    sequence of fields declared as class attributes

        class Dummy(Chunk):
            kind    = fields.IntField('B')
            length  = fields.IntField('H')
            content = fields.StringField(Dependency('.length'))

    The fields declared are prototypes: each instance owns its copies, created
    (and so with the default resolved) when the instance is created.

    The keyword arguments not consumed by Field are used as initial values for
    the fields (or for the bit ranges of a BitsField): for this reason a field
    cannot be named as one of the arguments of the constructor (see
    MetaChunk.RESERVED).

    A Chunk can contain sub-chunks.
    """
    logger = logging.getLogger(__name__)

    def __init__(self, data=None, *, father=None, name=None, present=None, compliant=Compliant.INHERIT, **values):
        self._values = values
        super().__init__(name=name, father=father, present=present, compliant=compliant)

        # now we have setup all the fields necessary and we can unpack if
        # some data is passed with the constructor
        if data is not None:
            self.logger.debug('unpacking \'%s\' from %d bytes' % (self.__class__.__name__, len(data)))
            self.unpack(Stream(data))

    def init(self):
        for field_name in self.get_ordered_fields_name():
            prototype = getattr(self.__class__, field_name).field
            self.__dict__[field_name] = prototype.create(father=self)

        for key, value in self._values.items():
            self.set_option(key, value)

    @property
    def given_options(self):
        '''Names of the values explicitly passed at creation time.'''
        return frozenset(self._values)

    def set_option(self, key, value):
        if key not in self._meta.fields and key not in self._meta.views:
            raise AttributeError(f"'{self.__class__.__name__}' has no field named '{key}'")

        setattr(self, key, value)

    def get_ordered_fields_name(self) -> List[str]:
        return self._meta.fields

    def get_fields(self) -> List[Tuple[str, Field]]:
        '''It returns a list of couples (name, instance) for each field.'''
        return [(_, getattr(self, _)) for _ in self.get_ordered_fields_name()]

    def get_present_fields(self) -> List[Tuple[str, Field]]:
        return [(_, field) for _, field in self.get_fields() if field.is_present()]

    def __repr__(self):
        msg = []
        for field_name, field in self.get_fields():
            msg.append('%s=%s' % (field_name, repr(field)))
        return '<%s(%s)>' % (self.__class__.__name__, ','.join(msg))

    def __str__(self):
        msg = ''
        for field_name in self._meta.fields:
            field = getattr(self, field_name)
            msg += '%s: %s\n' % (field_name, repr(field))
        return msg

    def _get_value(self):
        return {name: field.value for name, field in self.get_fields()}

    def _set_value(self, value):
        for key, element in value.items():
            self.set_option(key, element)

    def _get_size(self):
        '''the size parameter MUST not be set but MUST be derived from the subchunks'''
        size = 0
        for _, field in self.get_present_fields():
            size += field.size

        return size

    @property
    def layout(self) -> Dict[str, Tuple[int, int]]:
        self.relayout()

        result = {}
        for name, field in self.get_present_fields():
            result[name] = (field.offset, field.size)

        return result

    def relayout(self, offset=0):
        '''This method sets the offsets of the present fields with respect to
        the beginning of this chunk.'''
        self.offset = offset

        size = 0
        for _, field_instance in self.get_present_fields():
            size += field_instance.relayout(offset=offset + size)

        return size

    def validate(self):
        '''Override this to check the sanity of the data after the unpacking.'''
        return True

    def pack(self, stream):
        for field_name, field_instance in self.get_fields():
            if not field_instance.is_present():
                self.logger.debug('skipping %s.%s' % (self.__class__.__name__, field_name))
                continue

            self.logger.debug('packing %s.%s' % (self.__class__.__name__, field_name))
            try:
                field_instance.pack(stream)
            except FormatError as e:
                e.chain.append(field_name)
                raise

    def unpack(self, stream):
        '''This is one of the main APIs to take care of: its aim is to take a binary
        data and transform in the representation given by the class this method
        is implemented.

        The fields are unpacked in order, a field not present is skipped and
        doesn't consume data. When a field needs more data than is available
        a ParseError with the chain of field names is raised.
        '''
        for field_name, field in self.get_fields():
            if not field.is_present():
                self.logger.debug('skipping %s.%s' % (self.__class__.__name__, field_name))
                continue

            self.logger.debug('unpacking %s.%s at offset %d' % (self.__class__.__name__, field_name, stream.tell()))

            field.offset = stream.tell()
            try:
                field.unpack(stream)
            except ParseError as e:
                e.chain.append(field_name)
                raise

        if not self.validate():
            self.logger.debug(f'validation of \'{self.__class__.__name__}\' failed')
            raise ValidationError(chain=[], reason=f'{self.__class__.__name__} is not valid')


class Body(object):
    '''What follows the fields of a Header: it's either Raw or Parsed.'''

    def to_bytes(self) -> bytes:
        raise NotImplementedError()

    @property
    def size(self):
        return len(self.to_bytes())


class Raw(Body):

    def __init__(self, data=b''):
        self.data = bytes(data)

    def __repr__(self):
        return f'<{self.__class__.__name__}({self.data!r})>'

    def __eq__(self, other):
        return isinstance(other, Raw) and other.data == self.data

    def to_bytes(self) -> bytes:
        return self.data


class Parsed(Body):

    def __init__(self, header: "Header"):
        self.header = header

    def __repr__(self):
        return f'<{self.__class__.__name__}({self.header.__class__.__name__})>'

    def __eq__(self, other):
        return isinstance(other, Parsed) and other.header is self.header

    def to_bytes(self) -> bytes:
        return self.header.raw


class Header(Chunk):
    """A protocol layer: the fields are followed by a body that holds
    the rest of the data, raw or already parsed as the next header.

    The "protocol_name" is the name used by the registry to find this class,
    when not indicated the name of the class is used.
    """
    protocol_name = None

    def init(self):
        self._body = Raw()
        super().init()

    @classmethod
    def get_protocol_name(cls):
        return cls.protocol_name or cls.__name__

    def set_option(self, key, value):
        if key == 'body':
            self.body = value
            return

        super().set_option(key, value)

    def _get_body(self) -> Body:
        return self._body

    def _set_body(self, value):
        if isinstance(value, Body):
            self._body = value
        elif isinstance(value, Header):
            self._body = Parsed(value)
        elif isinstance(value, (bytes, bytearray)):
            self._body = Raw(value)
        else:
            raise TypeError(f'a body cannot be of type {value.__class__.__name__}')

    body = property(_get_body, _set_body)

    def __repr__(self):
        return '%s+%r' % (super().__repr__(), self.body)

    @property
    def header_size(self):
        '''The size of the fields only.'''
        return super()._get_size()

    @property
    def header_raw(self) -> bytes:
        stream = Stream(b'')
        self.pack_header(stream)

        return stream.getvalue()

    def _get_size(self):
        return self.header_size + self.body.size

    def to_bytes(self) -> bytes:
        return self.raw

    def pack_header(self, stream):
        '''Override this (and unpack_header()) for headers that are not
        a plain sequence of fields.'''
        super().pack(stream)

    def unpack_header(self, stream):
        super().unpack(stream)

    def pack(self, stream):
        self.pack_header(stream)
        stream.write(self.body.to_bytes())

    def unpack(self, stream):
        self.unpack_header(stream)
        self.body = Raw(stream.read_all())
