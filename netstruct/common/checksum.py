'''
Helpers to maintain the checksum and length fields of the headers.

The checksum is the one used by IP, TCP, UDP, ICMP and friends: the ones'
complement of the ones' complement sum of the 16-bit words of the data.

See <https://tools.ietf.org/html/rfc1071>.

Nothing here is called automatically: the fields are updated only when the
header (or the packet) asks explicitly.
'''
import logging
import struct


logger = logging.getLogger(__name__)


def sum16(data: bytes) -> int:
    '''Sum of the big-endian 16-bit words, an odd byte is padded with zero.'''
    if len(data) % 2:
        data += b'\x00'

    return sum(struct.unpack('>%dH' % (len(data) // 2), data))


def reduce_checksum(checksum: int) -> int:
    '''Fold the carries, invert and force 0xffff in place of zero (that means
    "no checksum" for some protocols).'''
    while checksum > 0xffff:
        checksum = (checksum & 0xffff) + (checksum >> 16)

    checksum = ~checksum & 0xffff

    return checksum or 0xffff


def checksum(data: bytes, initial: int = 0) -> int:
    return reduce_checksum(initial + sum16(data))


def calc_checksum(header, field_name='checksum', initial=0, include_body=True, data=None):
    '''Compute the checksum of the header and set it in the field named "field_name".

    The field is zeroed before computing. The "initial" value is added to the
    sum (it's the place for a pseudo-header); "data" can be a callable
    receiving the header and returning the bytes to sum, otherwise the header is
    used with or without its body.'''
    field = getattr(header, field_name)
    field.value = 0

    if data is not None:
        raw = data(header)
    elif include_body:
        raw = header.to_bytes()
    else:
        raw = header.header_raw

    field.value = checksum(raw, initial=initial)
    logger.debug('%s.%s set to %#06x' % (header.__class__.__name__, field_name, field.value))

    return field.value


def calc_length(header, field_name='length', header_in_size=True):
    '''Set the length field to the size of the header and of all the layers
    it contains, or only of the layers it contains if "header_in_size" is false.'''
    length = header.size if header_in_size else header.body.size

    setattr(header, field_name, length)
    logger.debug('%s.%s set to %d' % (header.__class__.__name__, field_name, length))

    return length
