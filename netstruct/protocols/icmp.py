'''
# Internet Control Message Protocol

From <https://tools.ietf.org/html/rfc792>, only the common part of the
messages is decoded, the rest is the body.
'''
from ..core import Header
from .. import fields
from ..common import checksum
from .ip import IP


PROTOCOL = 1


class ICMP(Header):
    type     = fields.IntField('B')
    code     = fields.IntField('B')
    checksum = fields.IntField('H')

    def calc_checksum(self, enclosing=None):
        return checksum.calc_checksum(self)


def register(registry):
    registry.add_header(ICMP)
    registry.bind(IP, ICMP, protocol=PROTOCOL)
