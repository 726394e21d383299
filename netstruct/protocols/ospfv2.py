'''
# Open Shortest Path First version 2

From <https://tools.ietf.org/html/rfc2328>, the common header

    0                   1                   2                   3
    0 1 2 3 4 5 6 7 8 9 0 1 2 3 4 5 6 7 8 9 0 1 2 3 4 5 6 7 8 9 0 1
   +-+-+-+-+-+-+-+-+-+-+-+-+-+-+-+-+-+-+-+-+-+-+-+-+-+-+-+-+-+-+-+-+
   |   Version #   |     Type      |         Packet length         |
   +-+-+-+-+-+-+-+-+-+-+-+-+-+-+-+-+-+-+-+-+-+-+-+-+-+-+-+-+-+-+-+-+
   |                          Router ID                            |
   +-+-+-+-+-+-+-+-+-+-+-+-+-+-+-+-+-+-+-+-+-+-+-+-+-+-+-+-+-+-+-+-+
   |                           Area ID                             |
   +-+-+-+-+-+-+-+-+-+-+-+-+-+-+-+-+-+-+-+-+-+-+-+-+-+-+-+-+-+-+-+-+
   |           Checksum            |             AuType            |
   +-+-+-+-+-+-+-+-+-+-+-+-+-+-+-+-+-+-+-+-+-+-+-+-+-+-+-+-+-+-+-+-+
   |                       Authentication                          |
   |                                                               |
   +-+-+-+-+-+-+-+-+-+-+-+-+-+-+-+-+-+-+-+-+-+-+-+-+-+-+-+-+-+-+-+-+

and the Database Description packet

   +-+-+-+-+-+-+-+-+-+-+-+-+-+-+-+-+-+-+-+-+-+-+-+-+-+-+-+-+-+-+-+-+
   |         Interface MTU         |    Options    |0|0|0|0|0|I|M|MS
   +-+-+-+-+-+-+-+-+-+-+-+-+-+-+-+-+-+-+-+-+-+-+-+-+-+-+-+-+-+-+-+-+
   |                     DD sequence number                        |
   +-+-+-+-+-+-+-+-+-+-+-+-+-+-+-+-+-+-+-+-+-+-+-+-+-+-+-+-+-+-+-+-+
   |                                                               |
   +-                                                             -+
   |                             An LSA Header                     |
   +-+-+-+-+-+-+-+-+-+-+-+-+-+-+-+-+-+-+-+-+-+-+-+-+-+-+-+-+-+-+-+-+
   |                              ...                              |
'''
from enum import IntEnum

from ..core import Chunk, Header
from .. import fields
from ..addresses import IPv4AddrField
from ..containers import ArrayField
from ..common import checksum
from .ip import IP


PROTOCOL = 89

OPTIONS = ['dn_opt', 'o_opt', 'dc_opt', 'l_opt', 'n_opt', 'mc_opt', 'e_opt', 'mt_opt']


class OSPFType(IntEnum):
    HELLO          = 1
    DB_DESCRIPTION = 2
    LS_REQUEST     = 3
    LS_UPDATE      = 4
    LS_ACK         = 5


class OSPFv2(Header):
    version        = fields.IntField('B', default=2)
    type           = fields.IntField('B', enum=OSPFType, default=OSPFType.HELLO)
    length         = fields.IntField('H')
    router_id      = IPv4AddrField()
    area_id        = IPv4AddrField()
    checksum       = fields.IntField('H')
    au_type        = fields.IntField('H')
    authentication = fields.IntField('Q')

    def validate(self):
        return self.version.value == 2

    def calc_length(self):
        return checksum.calc_length(self)

    def calc_checksum(self, enclosing=None):
        '''The checksum covers the whole packet but the authentication field.'''
        def without_authentication(header):
            raw = header.to_bytes()
            return raw[:16] + raw[24:]

        return checksum.calc_checksum(self, data=without_authentication)


class LSAHeader(Chunk):
    age                = fields.IntField('H')
    options            = fields.BitsField('B', OPTIONS)
    type               = fields.IntField('B')
    link_state_id      = IPv4AddrField()
    advertising_router = IPv4AddrField()
    sequence_number    = fields.IntField('I')
    checksum           = fields.IntField('H')
    length             = fields.IntField('H')


class DbDescription(Header):
    protocol_name = 'OSPFv2.DbDescription'

    mtu             = fields.IntField('H')
    options         = fields.BitsField('B', OPTIONS)
    flags           = fields.BitsField('B', [('zero', 5), 'i_flag', 'm_flag', 'ms_flag'])
    sequence_number = fields.IntField('I')
    lsas            = ArrayField(LSAHeader())


def register(registry):
    registry.add_header(OSPFv2)
    registry.add_header(DbDescription)
    registry.bind(IP, OSPFv2, protocol=PROTOCOL)
    registry.bind(OSPFv2, DbDescription, type=OSPFType.DB_DESCRIPTION)
