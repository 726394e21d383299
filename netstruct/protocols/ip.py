'''
# Internet Protocol version 4

From <https://tools.ietf.org/html/rfc791>

    0                   1                   2                   3
    0 1 2 3 4 5 6 7 8 9 0 1 2 3 4 5 6 7 8 9 0 1 2 3 4 5 6 7 8 9 0 1
   +-+-+-+-+-+-+-+-+-+-+-+-+-+-+-+-+-+-+-+-+-+-+-+-+-+-+-+-+-+-+-+-+
   |Version|  IHL  |Type of Service|          Total Length         |
   +-+-+-+-+-+-+-+-+-+-+-+-+-+-+-+-+-+-+-+-+-+-+-+-+-+-+-+-+-+-+-+-+
   |         Identification        |Flags|      Fragment Offset    |
   +-+-+-+-+-+-+-+-+-+-+-+-+-+-+-+-+-+-+-+-+-+-+-+-+-+-+-+-+-+-+-+-+
   |  Time to Live |    Protocol   |         Header Checksum       |
   +-+-+-+-+-+-+-+-+-+-+-+-+-+-+-+-+-+-+-+-+-+-+-+-+-+-+-+-+-+-+-+-+
   |                       Source Address                          |
   +-+-+-+-+-+-+-+-+-+-+-+-+-+-+-+-+-+-+-+-+-+-+-+-+-+-+-+-+-+-+-+-+
   |                    Destination Address                        |
   +-+-+-+-+-+-+-+-+-+-+-+-+-+-+-+-+-+-+-+-+-+-+-+-+-+-+-+-+-+-+-+-+
   |                    Options                    |    Padding    |
   +-+-+-+-+-+-+-+-+-+-+-+-+-+-+-+-+-+-+-+-+-+-+-+-+-+-+-+-+-+-+-+-+

The options are kept as raw bytes, present only when IHL is greater than 5.
'''
import random

from ..core import Header
from .. import fields
from ..addresses import IPv4AddrField
from ..properties import ScaledDependency
from ..common import checksum
from .eth import Eth


ETHERTYPE = 0x0800


class IP(Header):
    u8       = fields.BitsField('B', [('version', 4), ('ihl', 4)], default=0x45)
    tos      = fields.IntField('B')
    length   = fields.IntField('H', default=20)
    id       = fields.IntField('H', default=lambda _: random.randrange(0x10000))
    frag     = fields.BitsField('H', ['flag_rsv', 'flag_df', 'flag_mf', ('fragment_offset', 13)])
    ttl      = fields.IntField('B', default=64)
    protocol = fields.IntField('B')
    checksum = fields.IntField('H')
    src      = IPv4AddrField(default='127.0.0.1')
    dst      = IPv4AddrField(default='127.0.0.1')
    options  = fields.StringField(ScaledDependency('.ihl', 4, bias=-5), present=lambda h: h.ihl > 5)

    def validate(self):
        return self.version == 4 and self.ihl >= 5

    def calc_checksum(self, enclosing=None):
        '''The checksum covers only the header.'''
        return checksum.calc_checksum(self, include_body=False)

    def calc_length(self):
        '''Set the total length and the IHL (taking into account the options).'''
        self.ihl = 5 + len(self.options.value) // 4
        return checksum.calc_length(self)

    def pseudo_header_checksum(self):
        '''The IP part of the pseudo-header used by the transport protocols.'''
        value = self.src.to_int() + self.dst.to_int()
        return (value >> 16) + (value & 0xffff)

    def reply(self):
        '''Invert source and destination addresses.'''
        self.src, self.dst = self.dst.value, self.src.value

        return self


def register(registry):
    registry.add_header(IP)
    registry.bind(Eth, IP, ethertype=ETHERTYPE)
    registry.bind(IP, IP, protocol=4)
