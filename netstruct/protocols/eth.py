'''
# Ethernet II

The frame is reduced to its header, the preamble and the FCS are handled by
the hardware

    +-------------+-------------+-----------+------------
    | destination |   source    | ethertype | payload ...
    |  6 bytes    |  6 bytes    |  2 bytes  |
    +-------------+-------------+-----------+------------
'''
from ..core import Header
from .. import fields
from ..addresses import MacAddrField


class Eth(Header):
    dst       = MacAddrField()
    src       = MacAddrField()
    ethertype = fields.IntField('H')

    def reply(self):
        '''Invert source and destination addresses.'''
        self.src, self.dst = self.dst.value, self.src.value

        return self


def register(registry):
    registry.add_header(Eth)
