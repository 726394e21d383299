'''
# Internet Protocol version 6

From <https://tools.ietf.org/html/rfc8200>

   +-+-+-+-+-+-+-+-+-+-+-+-+-+-+-+-+-+-+-+-+-+-+-+-+-+-+-+-+-+-+-+-+
   |Version| Traffic Class |           Flow Label                  |
   +-+-+-+-+-+-+-+-+-+-+-+-+-+-+-+-+-+-+-+-+-+-+-+-+-+-+-+-+-+-+-+-+
   |         Payload Length        |  Next Header  |   Hop Limit   |
   +-+-+-+-+-+-+-+-+-+-+-+-+-+-+-+-+-+-+-+-+-+-+-+-+-+-+-+-+-+-+-+-+
   |                         Source Address                        |
   |                          (128 bits)                           |
   +-+-+-+-+-+-+-+-+-+-+-+-+-+-+-+-+-+-+-+-+-+-+-+-+-+-+-+-+-+-+-+-+
   |                      Destination Address                      |
   |                          (128 bits)                           |
   +-+-+-+-+-+-+-+-+-+-+-+-+-+-+-+-+-+-+-+-+-+-+-+-+-+-+-+-+-+-+-+-+

Extension headers are not decoded.
'''
from ..core import Header
from .. import fields
from ..addresses import IPv6AddrField
from ..common import checksum
from .eth import Eth


ETHERTYPE = 0x86dd


class IPv6(Header):
    u32    = fields.BitsField('I', [('version', 4), ('traffic_class', 8), ('flow_label', 20)], default=0x60000000)
    length = fields.IntField('H')
    next   = fields.IntField('B')
    hop    = fields.IntField('B', default=64)
    src    = IPv6AddrField(default='::1')
    dst    = IPv6AddrField(default='::1')

    def validate(self):
        return self.version == 6

    def calc_length(self):
        '''The payload length doesn't include the header.'''
        return checksum.calc_length(self, header_in_size=False)

    def pseudo_header_checksum(self):
        '''The IPv6 part of the pseudo-header used by the upper protocols.'''
        return checksum.sum16(self.src.raw + self.dst.raw)

    def reply(self):
        self.src, self.dst = self.dst.value, self.src.value

        return self


def register(registry):
    registry.add_header(IPv6)
    registry.bind(Eth, IPv6, ethertype=ETHERTYPE)
