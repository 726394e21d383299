'''
# User Datagram Protocol

From <https://tools.ietf.org/html/rfc768>

    0      7 8     15 16    23 24    31
   +--------+--------+--------+--------+
   |     Source      |   Destination   |
   |      Port       |      Port       |
   +--------+--------+--------+--------+
   |                 |                 |
   |     Length      |    Checksum     |
   +--------+--------+--------+--------+
'''
from ..core import Header
from .. import fields
from ..common import checksum
from ..exceptions import FormatError
from .ip import IP
from .ipv6 import IPv6


PROTOCOL = 17


class UDP(Header):
    sport    = fields.IntField('H')
    dport    = fields.IntField('H')
    length   = fields.IntField('H', default=8)
    checksum = fields.IntField('H')

    def calc_length(self):
        return checksum.calc_length(self)

    def calc_checksum(self, enclosing):
        if enclosing is None:
            raise FormatError(reason=f"the checksum of {self.get_protocol_name()} needs the enclosing IP header")
        initial = enclosing.pseudo_header_checksum() + PROTOCOL + self.length.value
        return checksum.calc_checksum(self, initial=initial)


def register(registry):
    registry.add_header(UDP)
    registry.bind(IP, UDP, protocol=PROTOCOL)
    registry.bind(IPv6, UDP, next=PROTOCOL)
