'''
# Multicast Listener Discovery version 2

Only the Multicast Listener Report message is supported, from <https://tools.ietf.org/html/rfc3810>

    0                   1                   2                   3
    0 1 2 3 4 5 6 7 8 9 0 1 2 3 4 5 6 7 8 9 0 1 2 3 4 5 6 7 8 9 0 1
   +-+-+-+-+-+-+-+-+-+-+-+-+-+-+-+-+-+-+-+-+-+-+-+-+-+-+-+-+-+-+-+-+
   |  Type = 143   |    Reserved   |           Checksum            |
   +-+-+-+-+-+-+-+-+-+-+-+-+-+-+-+-+-+-+-+-+-+-+-+-+-+-+-+-+-+-+-+-+
   |           Reserved            |Nr of Mcast Address Records (M)|
   +-+-+-+-+-+-+-+-+-+-+-+-+-+-+-+-+-+-+-+-+-+-+-+-+-+-+-+-+-+-+-+-+
   |                  Multicast Address Record [1]                 |
   .                               .                               .
   |                  Multicast Address Record [M]                 |
   +-+-+-+-+-+-+-+-+-+-+-+-+-+-+-+-+-+-+-+-+-+-+-+-+-+-+-+-+-+-+-+-+

The first 4 bytes belong to the ICMPv6 header.
'''
from ..core import Chunk, Header
from .. import fields
from ..addresses import IPv6AddrField
from ..containers import ArrayField
from ..properties import Dependency, ScaledDependency
from .icmpv6 import ICMPv6


MLR_TYPE = 143


class McastAddressRecord(Chunk):
    type              = fields.IntField('B')
    aux_data_len      = fields.IntField('B')
    number_of_sources = fields.IntField('H')
    multicast_address = IPv6AddrField()
    source_addr       = ArrayField(IPv6AddrField(), n=Dependency('.number_of_sources'))
    aux_data          = fields.StringField(ScaledDependency('.aux_data_len', 4))


class MLR(Header):
    protocol_name = 'MLDv2.MLR'

    reserved      = fields.IntField('H')
    number_of_mar = fields.IntField('H')
    records       = ArrayField(McastAddressRecord(), n=Dependency('.number_of_mar'))


def register(registry):
    registry.add_header(MLR)
    registry.bind(ICMPv6, MLR, type=MLR_TYPE)
