'''
# Internet Control Message Protocol for IPv6

From <https://tools.ietf.org/html/rfc4443>: as for ICMP only the type, code
and checksum are decoded here, the specific messages bind to it using the type.

Differently from ICMP the checksum includes the IPv6 pseudo-header.
'''
from ..core import Header
from .. import fields
from ..common import checksum
from ..exceptions import FormatError
from .ipv6 import IPv6


PROTOCOL = 58


class ICMPv6(Header):
    type     = fields.IntField('B')
    code     = fields.IntField('B')
    checksum = fields.IntField('H')

    def calc_checksum(self, enclosing):
        if enclosing is None:
            raise FormatError(reason=f"the checksum of {self.get_protocol_name()} needs the enclosing IP header")
        initial = enclosing.pseudo_header_checksum() + PROTOCOL + self.size
        return checksum.calc_checksum(self, initial=initial)


def register(registry):
    registry.add_header(ICMPv6)
    registry.bind(IPv6, ICMPv6, next=PROTOCOL)
