import sys
from enum import Enum, auto

import pytest

from netstruct.enum import Compliant
from netstruct.exceptions import ParseError, FormatError
from netstruct.fields import IntField, BitsField, StringField, TextField, CodecField
from netstruct.addresses import MacAddrField, IPv4AddrField, IPv6AddrField
from netstruct.meta import Endianess
from netstruct.streams import Stream


def test_intfield_conversion_raw_value():
    """Check that the attributes "value" and "raw" are the analogous
    of the integers and bytes representation for a field."""
    field = IntField('I')

    assert field.size == 4
    assert field.raw == b'\x00\x00\x00\x00'
    assert field.value == 0

    field.value = 0xcafe

    assert field.value == 0xcafe
    assert field.raw == b'\x00\x00\xca\xfe'


def test_intfield_little_endian():
    field = IntField('I', default=0xcafe, endianess=Endianess.LITTLE_ENDIAN)

    assert field.raw == b'\xfe\xca\x00\x00'


def test_intfield_unpack():
    field = IntField('I')
    field.unpack(Stream(b'\x01\x02\x03\x04'))

    assert field.value == 0x01020304


def test_intfield_too_short():
    field = IntField('I')

    with pytest.raises(ParseError) as e:
        field.unpack(Stream(b'\x01\x02'))

    assert e.value.needed == 4
    assert e.value.available == 2
    assert e.value.missing == 2


def test_intfield_overflow():
    field = IntField('B', default=0x1ff)

    assert field.raw == b'\xff'

    field = IntField('B', default=0x1ff, compliant=Compliant.RANGE)

    with pytest.raises(FormatError):
        field.raw


def test_intfield_enum():
    class DummyEnum(Enum):
        NONE = 0
        FIRST = auto()
        SECOND = auto()

    field = IntField('I', enum=DummyEnum, compliant=Compliant.ENUM)

    assert field.value == DummyEnum.NONE

    field.value = DummyEnum.SECOND

    assert field.value == DummyEnum.SECOND
    assert field.raw == b'\x00\x00\x00\x02'

    with pytest.raises(ParseError):
        field.unpack(Stream(b'\x00\x00\x00\x04'))

    # without compliance the value is kept as an integer
    field = IntField('I', enum=DummyEnum)
    field.unpack(Stream(b'\x00\x00\x00\x04'))

    assert field.value == 4


def test_bitsfield():
    field = BitsField('B', [('version', 4), ('ihl', 4)], default=0x45)

    assert field['version'] == 4
    assert field['ihl'] == 5
    assert field.as_dict() == {'version': 4, 'ihl': 5}

    field['ihl'] = 6

    assert field.value == 0x46
    assert field.raw == b'\x46'


def test_bitsfield_flags():
    field = BitsField('H', ['a', 'b', ('rest', 14)], default=0x8001)

    assert field['a'] is True
    assert field['b'] is False
    assert field['rest'] == 1

    field['b'] = True

    assert field.value == 0xc001


def test_bitsfield_wrong_coverage():
    with pytest.raises(ValueError):
        BitsField('B', [('version', 4), ('ihl', 3)])


def test_bitsfield_overflow():
    field = BitsField('B', [('version', 4), ('ihl', 4)], default=0x45)
    field['version'] = 0x1f

    assert field.value == 0xf5

    field = BitsField('B', [('version', 4), ('ihl', 4)], default=0x45, compliant=Compliant.RANGE)

    with pytest.raises(FormatError):
        field['version'] = 0x1f


def test_stringfield():
    field = StringField(0x10)

    assert field.size == 0x10
    assert len(field.raw) == field.size
    assert field.raw == b'\x00' * field.size

    with pytest.raises(ValueError):
        field.value = b'kebab'

    data = b''.join([bytes([_]) for _ in range(0x10)])

    field.value = data

    assert field.value == data
    assert field.raw == data


def test_stringfield_unbounded():
    field = StringField()

    assert field.value == b''

    stream = Stream(b'kebab')
    field.unpack(stream)

    assert field.value == b'kebab'
    assert stream.remaining() == 0


def test_textfield():
    field = TextField(4)

    assert field.value == '\x00' * 4

    field = TextField(default='kebab')

    assert field.raw == b'kebab'
    assert field.size == 5

    with pytest.raises(ParseError):
        field.unpack(Stream(b'\xff\xfe'))


class IntCodec:

    def encode(self, value):
        return str(value).encode()

    def decode(self, raw):
        return int(raw)


def test_codecfield():
    field = CodecField(IntCodec())

    assert field.value is None
    assert field.raw == b''

    field.value = 42

    assert field.raw == b'42'

    field.unpack(Stream(b'1337'))

    assert field.value == 1337

    with pytest.raises(ParseError):
        field.unpack(Stream(b'kebab'))


def test_macaddrfield():
    field = MacAddrField()

    assert field.value == '00:00:00:00:00:00'
    assert field.size == 6

    field.value = 'AA-BB-CC-DD-EE-FF'

    assert field.value == 'aa:bb:cc:dd:ee:ff'
    assert field.raw == b'\xaa\xbb\xcc\xdd\xee\xff'

    field.value = b'\x00\x01\x02\x03\x04\x05'

    assert field.value == '00:01:02:03:04:05'

    with pytest.raises(ValueError):
        field.value = '00:01:02'


def test_ipaddrfields():
    field = IPv4AddrField()

    assert field.value == '0.0.0.0'

    field.value = '192.168.0.1'

    assert field.raw == b'\xc0\xa8\x00\x01'
    assert field.to_int() == 0xc0a80001

    field.unpack(Stream(b'\x0a\x00\x00\x01'))

    assert field.value == '10.0.0.1'

    with pytest.raises(ValueError):
        field.value = '300.0.0.1'

    field = IPv6AddrField(default='::1')

    assert field.size == 16
    assert field.raw == b'\x00' * 15 + b'\x01'

    with pytest.raises(ParseError):
        field.unpack(Stream(b'\x00' * 8))


def test_intfield_byte_orders():
    assert IntField('I', default=0xcafe, endianess=Endianess.BIG_ENDIAN).raw == b'\x00\x00\xca\xfe'
    assert IntField('I', default=0xcafe, endianess=Endianess.NETWORK).raw == b'\x00\x00\xca\xfe'
    assert IntField('I', default=0xcafe, endianess=Endianess.NATIVE).raw == (0xcafe).to_bytes(4, sys.byteorder)
