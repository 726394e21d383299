import itertools

import pytest

from netstruct.core import Chunk, Header, Raw
from netstruct.enum import Compliant
from netstruct.exceptions import ParseError, ValidationError, FormatError
from netstruct.fields import IntField, BitsField, StringField
from netstruct.properties import Dependency
from netstruct.streams import Stream


class Dummy(Chunk):
    a = IntField('I', default=0xbad)
    b = StringField(0x10)
    c = IntField('I', default=0xdeadbeef)


def test_chunk():
    """Check that building a Chunk from fields behaves correctly."""
    dummy = Dummy()

    assert dummy.a.size == 4
    assert dummy.a.raw == b'\x00\x00\x0b\xad'
    assert dummy.a.value == 0xbad
    assert dummy.a.father == dummy

    assert dummy.b.size == 0x10
    assert dummy.b.raw == b'\x00' * 0x10

    assert dummy.size == 0x18
    assert len(dummy.raw) == dummy.size
    assert dummy.raw == (
        b'\x00\x00\x0b\xad' +
        b'\x00' * 0x10 +
        b'\xde\xad\xbe\xef'
    )

    assert dummy.layout == {
        'a': (0, 4),
        'b': (4, 16),
        'c': (20, 4),
    }

    assert dummy.value == {
        'a': 0xbad,
        'b': b'\x00' * 0x10,
        'c': 0xdeadbeef,
    }


def test_chunk_options():
    dummy = Dummy(a=1, c=2)

    assert dummy.a.value == 1
    assert dummy.c.value == 2
    assert dummy.given_options == {'a', 'c'}

    with pytest.raises(AttributeError):
        Dummy(kebab=1)


def test_chunk_instances_are_independent():
    first, second = Dummy(), Dummy()

    first.a = 0xcafe

    assert first.a.value == 0xcafe
    assert second.a.value == 0xbad


def test_chunk_unpack():
    dummy = Dummy(b'\x00\x00\x00\x01' + b'A' * 0x10 + b'\x00\x00\x00\x02')

    assert dummy.a.value == 1
    assert dummy.b.value == b'A' * 0x10
    assert dummy.c.value == 2
    assert dummy.c.offset == 20


def test_default_computed_once():
    counter = itertools.count()

    class Counter(Chunk):
        x = IntField('B', default=lambda _: next(counter))

    first = Counter()
    value = first.x.value

    assert first.x.value == value
    assert Counter().x.value != value


class Example(Chunk):
    length  = IntField('B')
    content = StringField(Dependency('.length'))
    trailer = IntField('B')


def test_chunk_w_dependencies():
    example = Example(b'\x03abc\x07')

    assert example.content.value == b'abc'
    assert example.trailer.value == 7
    assert example.layout == {
        'length': (0, 1),
        'content': (1, 3),
        'trailer': (4, 1),
    }


def test_chunk_too_short():
    with pytest.raises(ParseError) as e:
        Example(b'\x05ab')

    assert e.value.path == 'content'
    assert e.value.needed == 5
    assert e.value.available == 2
    assert "field 'content'" in str(e.value)


class Optional(Chunk):
    flag  = IntField('B')
    extra = IntField('H', present=lambda chunk: chunk.flag.value == 1)


def test_chunk_presence():
    optional = Optional(b'\x00')

    assert optional.size == 1
    assert optional.raw == b'\x00'

    optional = Optional(b'\x01\x00\x02')

    assert optional.size == 3
    assert optional.extra.value == 2

    assert Optional(flag=0, extra=0xffff).raw == b'\x00'


def test_chunk_validate():
    class Versioned(Chunk):
        version = IntField('B')

        def validate(self):
            return self.version.value == 4

    assert Versioned(b'\x04').version.value == 4

    with pytest.raises(ValidationError):
        Versioned(b'\x05')

    # a validation error is a parse error too
    with pytest.raises(ParseError):
        Versioned(b'\x06')


def test_chunk_bit_views():
    class Bits(Chunk):
        u8 = BitsField('B', [('hi', 4), ('lo', 4)])

    bits = Bits(hi=3, lo=2)

    assert bits.raw == b'\x32'
    assert bits.hi == 3

    bits.lo = 0xf

    assert bits.u8.value == 0x3f


def test_chunk_duplicate_bit_view():
    with pytest.raises(AttributeError):
        class Wrong(Chunk):
            first  = BitsField('B', [('flag', 1), ('rest', 7)])
            second = BitsField('B', [('flag', 1), ('other', 7)])


class Inner(Chunk):
    content = StringField(Dependency('length'))


class Outer(Chunk):
    length = IntField('B')
    inner  = Inner()
    tail   = IntField('B')


def test_nested_chunks():
    outer = Outer(b'\x02ab\x09')

    assert outer.inner.father is outer
    assert outer.inner.content.value == b'ab'
    assert outer.tail.value == 9
    assert outer.size == 4


def test_format_error_path():
    class Strict(Chunk):
        x = IntField('B', compliant=Compliant.RANGE)

    with pytest.raises(FormatError) as e:
        Strict(x=0x100).raw

    assert e.value.path == 'x'


def test_compliant_inherited():
    class Lax(Chunk):
        x = IntField('B')

    assert Lax(x=0x100).raw == b'\x00'

    with pytest.raises(FormatError):
        Lax(x=0x100, compliant=Compliant.RANGE).raw


class Simple(Header):
    kind = IntField('B')


def test_header_body():
    header = Simple(b'\x01rest')

    assert header.kind.value == 1
    assert header.body == Raw(b'rest')
    assert header.header_size == 1
    assert header.header_raw == b'\x01'
    assert header.size == 5
    assert header.to_bytes() == b'\x01rest'

    header.body = b'xy'

    assert header.body == Raw(b'xy')
    assert header.to_bytes() == b'\x01xy'

    with pytest.raises(TypeError):
        header.body = 3


def test_header_nested_body():
    header = Simple(kind=1, body=Simple(kind=2, body=b'payload'))

    assert header.to_bytes() == b'\x01\x02payload'
    assert header.body.header.kind.value == 2


def test_stream_bounded():
    stream = Stream(b'abcdef')

    with stream.bounded(2):
        assert stream.remaining() == 2
        assert stream.read_all() == b'ab'

        with pytest.raises(ParseError):
            stream.read_exactly(1)

    assert stream.remaining() == 4

    stream.save()
    stream.read_exactly(3)
    stream.restore()

    assert stream.read_all() == b'cdef'

    with pytest.raises(ValueError):
        Stream(3)


@pytest.mark.parametrize('field_name', ['data', 'name', 'father', 'present', 'compliant'])
def test_reserved_field_names(field_name):
    with pytest.raises(AttributeError):
        type('Wrong', (Chunk,), {'__module__': __name__, field_name: IntField('B')})
