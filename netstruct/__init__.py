"""
# Netstruct: network packets for humans.

A protocol header is described declaratively as a sequence of fields, each one
knowing how to

 1. unpack(): read its binary representation from a stream
 2. pack(): write it back

and a header is a field itself, with a body following it that can be the
next header of the packet.

Which header follows another is not written inside the headers: the binding
registry holds the rules (like "IP follows Ethernet when ethertype is 0x0800")
and it's used both when dissecting data and when building a packet

    from netstruct import dissect, default_registry

    packet = dissect(default_registry(), data, 'Eth')
    print(packet.get('TCP').dport)

Nothing is recomputed behind the back of the user: lengths and checksums
are updated only calling calc_length()/calc_checksum() (or calc() on the
packet).
"""
from .core import Chunk, Header, Body, Raw, Parsed
from .binding import BindingRegistry, BindingRule
from .packet import Packet, dissect, build, serialize
from .protocols import default_registry, register_all
from .exceptions import (
    NetstructException,
    ParseError,
    ValidationError,
    FormatError,
    BindingError,
)
