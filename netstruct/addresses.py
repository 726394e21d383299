'''
Fixed size address fields.

The value of an address field is its canonical text representation: it can be
set using text, the packed bytes or an integer.
'''
import ipaddress
import re

from .fields import Field


class AddressField(Field):
    length = None
    zero = None

    def __init__(self, default=None, **kw):
        super().__init__(default=default if default is not None else self.zero, **kw)

    def __repr__(self):
        return f'<{self.__class__.__name__}({self.value})>'

    def to_raw(self, value) -> bytes:
        raise NotImplementedError()

    def to_text(self, raw: bytes) -> str:
        raise NotImplementedError()

    def _get_value(self):
        return self.to_text(self._raw)

    def _set_value(self, value):
        self._raw = self.to_raw(value)

    def _get_size(self):
        return self.length

    def to_int(self):
        return int.from_bytes(self._raw, 'big')

    def pack(self, stream):
        stream.write(self._raw)

    def unpack(self, stream):
        self._raw = stream.read_exactly(self.length)


class MacAddrField(AddressField):
    '''Link layer address'''
    length = 6
    zero = '00:00:00:00:00:00'

    SEPARATOR = re.compile('[:-]')

    def to_raw(self, value) -> bytes:
        if isinstance(value, bytes):
            if len(value) != self.length:
                raise ValueError(f'a MAC address is {self.length} bytes long')
            return value
        if isinstance(value, int):
            return value.to_bytes(self.length, 'big')

        octets = self.SEPARATOR.split(value)
        if len(octets) != self.length or not all(1 <= len(_) <= 2 for _ in octets):
            raise ValueError(f"'{value}' is not a valid MAC address")

        return bytes(int(_, 16) for _ in octets)

    def to_text(self, raw: bytes) -> str:
        return ':'.join('%02x' % _ for _ in raw)


class IPAddrField(AddressField):
    address_class = None

    def to_raw(self, value) -> bytes:
        return self.address_class(value).packed

    def to_text(self, raw: bytes) -> str:
        return str(self.address_class(raw))


class IPv4AddrField(IPAddrField):
    length = 4
    zero = '0.0.0.0'
    address_class = ipaddress.IPv4Address


class IPv6AddrField(IPAddrField):
    length = 16
    zero = '::'
    address_class = ipaddress.IPv6Address
