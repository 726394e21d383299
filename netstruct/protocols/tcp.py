'''
# Transmission Control Protocol

From <https://tools.ietf.org/html/rfc793>

    0                   1                   2                   3
    0 1 2 3 4 5 6 7 8 9 0 1 2 3 4 5 6 7 8 9 0 1 2 3 4 5 6 7 8 9 0 1
   +-+-+-+-+-+-+-+-+-+-+-+-+-+-+-+-+-+-+-+-+-+-+-+-+-+-+-+-+-+-+-+-+
   |          Source Port          |       Destination Port        |
   +-+-+-+-+-+-+-+-+-+-+-+-+-+-+-+-+-+-+-+-+-+-+-+-+-+-+-+-+-+-+-+-+
   |                        Sequence Number                        |
   +-+-+-+-+-+-+-+-+-+-+-+-+-+-+-+-+-+-+-+-+-+-+-+-+-+-+-+-+-+-+-+-+
   |                    Acknowledgment Number                      |
   +-+-+-+-+-+-+-+-+-+-+-+-+-+-+-+-+-+-+-+-+-+-+-+-+-+-+-+-+-+-+-+-+
   |  Data |     |N|C|E|U|A|P|R|S|F|                               |
   | Offset| Rsv |S|W|C|R|C|S|S|Y|I|            Window             |
   |       |     | |R|E|G|K|H|T|N|N|                               |
   +-+-+-+-+-+-+-+-+-+-+-+-+-+-+-+-+-+-+-+-+-+-+-+-+-+-+-+-+-+-+-+-+
   |           Checksum            |         Urgent Pointer        |
   +-+-+-+-+-+-+-+-+-+-+-+-+-+-+-+-+-+-+-+-+-+-+-+-+-+-+-+-+-+-+-+-+
   |                    Options                    |    Padding    |
   +-+-+-+-+-+-+-+-+-+-+-+-+-+-+-+-+-+-+-+-+-+-+-+-+-+-+-+-+-+-+-+-+

The checksum includes a pseudo-header built from the enclosing IP header,
so it must be passed to calc_checksum().
'''
import random

from ..core import Header
from .. import fields
from ..properties import ScaledDependency
from ..common import checksum
from ..exceptions import FormatError
from .ip import IP
from .ipv6 import IPv6


PROTOCOL = 6


class TCP(Header):
    sport       = fields.IntField('H')
    dport       = fields.IntField('H')
    seqnum      = fields.IntField('I', default=lambda _: random.randrange(0x100000000))
    acknum      = fields.IntField('I')
    u16         = fields.BitsField('H', [
        ('data_offset', 4), ('reserved', 3),
        'flag_ns', 'flag_cwr', 'flag_ece', 'flag_urg', 'flag_ack', 'flag_psh', 'flag_rst', 'flag_syn', 'flag_fin',
    ], default=0x5000)
    window      = fields.IntField('H')
    checksum    = fields.IntField('H')
    urg_pointer = fields.IntField('H')
    options     = fields.StringField(ScaledDependency('.data_offset', 4, bias=-5), present=lambda h: h.data_offset > 5)

    def validate(self):
        return self.data_offset >= 5

    def calc_length(self):
        '''TCP has no length field, only the data offset.'''
        self.data_offset = 5 + len(self.options.value) // 4
        return self.data_offset

    def calc_checksum(self, enclosing):
        if enclosing is None:
            raise FormatError(reason=f"the checksum of {self.get_protocol_name()} needs the enclosing IP header")
        initial = enclosing.pseudo_header_checksum() + PROTOCOL + self.size
        return checksum.calc_checksum(self, initial=initial)


def register(registry):
    registry.add_header(TCP)
    registry.bind(IP, TCP, protocol=PROTOCOL)
    registry.bind(IPv6, TCP, next=PROTOCOL)
