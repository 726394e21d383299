"""
A Field is "fundamental" datatype from the format point of view, something directly
packable/unpackable without subcomponents.
"""
import logging
import struct
from enum import Enum

from bitstring import BitArray, Bits

from .enum import Compliant
from .meta import FieldBase, Endianess
from .properties import resolve_size
from .streams import Stream
from .exceptions import ParseError, FormatError


class Field(FieldBase):
    """Base class to subclass from.

    The "default" can be a value or a callable: in the latter case it's called
    with the chunk owning the field, once, when the field is created.

    The "present" argument is a callable receiving the owning chunk and returning
    False when the field must be skipped (both packing and unpacking).
    """
    logger = logging.getLogger(__name__)

    def __init__(self, *, name=None, father=None, default=None, present=None, compliant=Compliant.INHERIT):
        super().__init__()
        self.name = name
        self.father = father
        self.default = default
        self.present = present
        self.offset = None
        self.compliant = compliant

        self.init()

    def init(self):
        self.value = self.value_from_default()

    def value_from_default(self):
        if callable(self.default):
            return self.default(self.father)

        return self.default

    def __str__(self):
        return str(self.value)

    def is_compliant(self, level):
        '''Returns the compliant'''
        instance = self
        while instance is not None:
            if instance.compliant & level:
                return True
            if not instance.compliant & Compliant.INHERIT:
                break

            instance = instance.father

        return False

    def is_present(self):
        if self.present is None:
            return True

        return bool(self.present(self.father))

    value = property(
        fget=lambda self: self._get_value(),
        fset=lambda self, value: self._set_value(value))

    def _get_value(self):
        return self._value

    def _set_value(self, value):
        self._value = value

    def _get_size(self):
        raise NotImplementedError(f"method {self.__class__.__name__}._get_size() not implemented")

    size = property(
        fget=lambda self: self._get_size(),
    )

    @property
    def raw(self) -> bytes:
        stream = Stream(b'')
        self.pack(stream)

        return stream.getvalue()

    def relayout(self, offset=0):
        self.offset = offset

        return self.size

    def pack(self, stream):
        raise NotImplementedError('you need to implement this in the subclass')

    def unpack(self, stream):
        raise NotImplementedError('you need to implement this in the subclass')


class IntField(Field):
    """
    Unsigned integers packed/unpacked with the struct module, in network order
    if not indicated otherwise.

    The main advantage is the possibility to indicate via the "enum" argument some subclass
    of enum.Enum so to have directly a representation of the integer value of the field itself.

    Values that don't fit are wrapped when packing, unless the field is compliant
    with Compliant.RANGE: in that case a FormatError is raised.
    """

    FORMATS = 'BHIQ'
    BYTE_ORDER = {
        Endianess.LITTLE_ENDIAN: '<',
        Endianess.BIG_ENDIAN: '>',
        Endianess.NETWORK: '!',
        Endianess.NATIVE: '=',
    }

    def __init__(self, format, default=0, enum=None, endianess=Endianess.NETWORK, **kw):
        if format not in self.FORMATS:
            raise ValueError(f"format '{format}' is not one of '{self.FORMATS}'")
        self.format = format
        self.enum = enum
        self.endianess = endianess
        super().__init__(default=default, **kw)

    def __repr__(self):
        if not self.enum:
            return '<%s(%s)>' % (self.__class__.__name__, hex(self.value))

        return f'<{self.__class__.__name__}({self.value!r})>'

    def __str__(self):
        width = self.size * 2  # we want to be as large as possible
        formatter = '0x%%0%dx' % width
        return formatter % (self._encode(),)

    def __int__(self):
        return self._encode()

    def value_from_default(self):
        value = super().value_from_default()
        if not self.enum:
            return value

        return self._unpack_enum(value)

    def get_format(self):
        return '%s%s' % (self.BYTE_ORDER[self.endianess], self.format)

    @property
    def mask(self):
        return (1 << (self.size * 8)) - 1

    def _get_size(self):
        return struct.calcsize(self.get_format())

    def _encode(self) -> int:
        value = int(self.value.value if isinstance(self.value, Enum) else self.value)

        if value & self.mask != value:
            if self.is_compliant(Compliant.RANGE):
                raise FormatError(chain=[], reason=f'value {value} does not fit in {self.size * 8} bits')
            self.logger.debug('wrapping value %d for field \'%s\'', value, self.name)
            value &= self.mask

        return value

    def pack(self, stream):
        stream.write(struct.pack(self.get_format(), self._encode()))

    def _unpack_enum(self, value: int):
        try:
            return self.enum(value)
        except ValueError:
            if self.is_compliant(Compliant.ENUM):
                raise ParseError(chain=[], reason=f'{value:#x} is not a valid {self.enum.__name__}')

            self.logger.warning(f'enum {self.enum!r} doesn\'t have element with value 0x{value:x} in it')

        return value

    def unpack(self, stream):
        raw = stream.read_exactly(self.size)
        value = struct.unpack(self.get_format(), raw)[0]
        if self.enum:
            value = self._unpack_enum(value)

        self.value = value


class BitsField(IntField):
    """An integer divided in named ranges of bits.

    The ranges are listed starting from the most significant bit and must cover
    the whole integer: a name alone is a 1-bit flag (read as a boolean), otherwise
    use a tuple (name, width)

        u8 = fields.BitsField('B', [('version', 4), ('ihl', 4)], default=0x45)

    When declared in a chunk each range is also accessible as an attribute of it.
    """

    def __init__(self, format, bits, **kw):
        super().__init__(format, **kw)
        self.bits = {}

        offset = 0
        for bit in bits:
            bit_name, width = (bit, 1) if isinstance(bit, str) else bit
            if bit_name in self.bits:
                raise ValueError(f"bit range '{bit_name}' is defined twice")
            self.bits[bit_name] = (offset, width)
            offset += width

        if offset != self.size * 8:
            raise ValueError(f'bit ranges cover {offset} bits instead of {self.size * 8}')

    def contribute_to_chunk(self, cls, name):
        super().contribute_to_chunk(cls, name)
        for bit_name in self.bits:
            cls.add_view(name, bit_name)

    def _get_bitarray(self):
        return BitArray(uint=self._encode(), length=self.size * 8)

    def __getitem__(self, bit_name):
        offset, width = self.bits[bit_name]
        array = self._get_bitarray()

        if width == 1:
            return array[offset]

        return array[offset:offset + width].uint

    def __setitem__(self, bit_name, value):
        offset, width = self.bits[bit_name]
        value = int(value)

        if value >> width or value < 0:
            if self.is_compliant(Compliant.RANGE):
                raise FormatError(
                    chain=[bit_name, self.name],
                    reason=f'value {value} does not fit in {width} bits')
            value &= (1 << width) - 1

        array = self._get_bitarray()
        array.overwrite(Bits(uint=value, length=width), offset)

        self.value = array.uint

    def as_dict(self):
        return {_: self[_] for _ in self.bits}


class StringField(Field):
    """Represent a contiguous chunk of bytes.

    The size "n" can be

     - an integer: the value must always have that length
     - a Dependency or a callable (receiving the father): the size is resolved when unpacking
     - None: when unpacking consumes all the remaining data
    """

    def __init__(self, n=None, default=None, **kw):
        self.length = n

        if default is None:
            default = self.decode(b'\x00' * n) if isinstance(n, int) else self.empty()

        super().__init__(default=default, **kw)

    def __repr__(self):
        return '<%s(%s)>' % (self.__class__.__name__, repr(self.value))

    def __len__(self):
        return self.size

    def empty(self):
        return b''

    def encode(self, value) -> bytes:
        return value

    def decode(self, raw: bytes):
        return raw

    def _set_value(self, value) -> None:
        """The StringField with a fixed size must follow that indication."""
        if isinstance(self.length, int) and len(self.encode(value)) != self.length:
            raise ValueError(f'you are trying to set a value with the wrong size (that is {self.length} bytes)')

        super()._set_value(value)

    def _get_size(self):
        return len(self.encode(self.value))

    def pack(self, stream):
        stream.write(self.encode(self.value))

    def unpack(self, stream):
        size = resolve_size(self.length, self)
        raw = stream.read_all() if size is None else stream.read_exactly(size)
        self._value = self.decode(raw)


class TextField(StringField):
    """Same as StringField but its value is a string."""

    def __init__(self, n=None, encoding='ascii', **kw):
        self.encoding = encoding
        super().__init__(n=n, **kw)

    def empty(self):
        return ''

    def encode(self, value) -> bytes:
        return value.encode(self.encoding)

    def decode(self, raw: bytes):
        try:
            return raw.decode(self.encoding)
        except UnicodeDecodeError as e:
            raise ParseError(chain=[], reason=str(e))


class CodecField(StringField):
    """Delegate the encoding to an external codec object exposing

        encode(value) -> bytes
        decode(raw) -> value

    like an ASN.1 codec. The size follows the same rules of StringField.
    """

    def __init__(self, codec, n=None, default=None, **kw):
        self.codec = codec
        super().__init__(n=n, default=default, **kw)

    def empty(self):
        return None

    def encode(self, value) -> bytes:
        if value is None:
            return b''

        return self.codec.encode(value)

    def decode(self, raw: bytes):
        if not raw:
            return None

        try:
            return self.codec.decode(raw)
        except ValueError as e:
            raise ParseError(chain=[], reason=f'codec failed: {e}')
