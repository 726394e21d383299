"""
A packet is the stack of the headers found in (or used to build) some data.

The headers are chained using their bodies: the body of each header is the
next header, the body of the last one is the payload.

Dissection starts from the first header and asks the registry which header
follows, until no rule matches or the data cannot be parsed as the next header:
in this case what remains stays as raw payload

    packet = dissect(registry, data, 'Eth')
    packet.get('TCP').dport

Construction goes the other way

    packet = build(registry, [('IP', {'dst': '10.0.0.1'}), ('TCP', {'dport': 80})])
    packet.payload = b'hello'
    packet.calc()
    data = serialize(packet)
"""
import logging
from typing import List, Optional, Tuple, Union

from .binding import BindingRegistry
from .core import Header, Parsed, Raw
from .exceptions import ParseError
from .streams import Stream


logger = logging.getLogger(__name__)


class Packet(object):

    def __init__(self, registry: BindingRegistry):
        self.registry = registry
        self.headers: List[Header] = []

    def __repr__(self):
        return '<%s(%s)>' % (
            self.__class__.__name__,
            '/'.join(_.get_protocol_name() for _ in self.headers),
        )

    def __str__(self):
        msg = ''
        for header in self.headers:
            msg += '--- %s\n%s' % (header.get_protocol_name(), header)
        msg += '--- payload\n%r\n' % self.payload
        return msg

    def __len__(self):
        return len(self.headers)

    def __iter__(self):
        return iter(self.headers)

    def __getitem__(self, index):
        return self.headers[index]

    def __contains__(self, protocol):
        return self.get(protocol) is not None

    def _matches(self, header: Header, protocol) -> bool:
        if isinstance(protocol, type):
            return isinstance(header, protocol)

        return header.get_protocol_name() == protocol

    def get(self, protocol, nth=0) -> Optional[Header]:
        '''Returns the nth header of the given kind (name or class).'''
        found = [_ for _ in self.headers if self._matches(_, protocol)]
        if nth >= len(found):
            return None

        return found[nth]

    def add(self, protocol, **options) -> "Packet":
        '''Append a header on top of the stack: the header before it
        is reconciled so to point to the new one.'''
        header_cls = self.registry.freeze().resolve(protocol)
        header = header_cls(**options)

        if self.headers:
            outer = self.headers[-1]
            self.registry.reconcile(outer, header)
            outer.body = Parsed(header)

        self.headers.append(header)

        return self

    def _get_payload(self) -> bytes:
        if not self.headers:
            return b''

        return self.headers[-1].body.to_bytes()

    def _set_payload(self, value: bytes):
        self.headers[-1].body = Raw(value)

    payload = property(_get_payload, _set_payload)

    def to_bytes(self) -> bytes:
        if not self.headers:
            return b''

        return self.headers[0].to_bytes()

    def _enclosing(self, index):
        return self.headers[index - 1] if index > 0 else None

    def calc_length(self):
        '''Recompute the length fields, starting from the innermost header.'''
        for index in reversed(range(len(self.headers))):
            header = self.headers[index]
            if hasattr(header, 'calc_length'):
                header.calc_length()

    def calc_checksum(self):
        '''Recompute the checksums, starting from the innermost header; each
        header receives its enclosing one for the pseudo-header.'''
        for index in reversed(range(len(self.headers))):
            header = self.headers[index]
            if hasattr(header, 'calc_checksum'):
                header.calc_checksum(self._enclosing(index))

    def calc(self):
        self.calc_length()
        self.calc_checksum()


def _descend(packet: Packet, header: Header):
    registry = packet.registry

    while True:
        inner_cls = registry.lookup(header)
        if inner_cls is None:
            logger.debug('no header after %s' % header.get_protocol_name())
            break

        inner = inner_cls()
        try:
            inner.unpack(Stream(header.body.to_bytes()))
        except ParseError as e:
            logger.debug('body of %s is not %s: %s' % (
                header.get_protocol_name(), inner_cls.get_protocol_name(), e))
            break

        header.body = Parsed(inner)
        packet.headers.append(inner)
        header = inner


def _dissect_from(registry: BindingRegistry, data: bytes, first) -> Packet:
    header = registry.resolve(first)()
    header.unpack(Stream(data))

    packet = Packet(registry)
    packet.headers.append(header)
    _descend(packet, header)

    return packet


def _guess_first(registry: BindingRegistry, data: bytes) -> Packet:
    for header_cls in registry.headers:
        try:
            packet = _dissect_from(registry, data, header_cls)
        except ParseError:
            continue

        if len(packet) > 1:
            logger.debug('guessed %s as first header' % header_cls.get_protocol_name())
            return packet

    raise ParseError(reason='unable to guess the first header')


def dissect(registry: BindingRegistry, data: bytes, first=None) -> Packet:
    '''Parse the data starting with the first header indicated (a name or a class).

    If the first header can't be parsed a ParseError is raised, the headers after
    it instead are parsed as long as it's possible.'''
    registry.freeze()

    data = bytes(data)

    if first is None:
        return _guess_first(registry, data)

    return _dissect_from(registry, data, first)


def build(registry: BindingRegistry, layers: List[Tuple[Union[str, type], dict]]) -> Packet:
    '''Build a packet from the list of (protocol, options).'''
    packet = Packet(registry)

    for protocol, options in layers:
        packet.add(protocol, **(options or {}))

    return packet


def serialize(packet: Packet) -> bytes:
    return packet.to_bytes()
