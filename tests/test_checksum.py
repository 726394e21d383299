from netstruct.common import checksum
from netstruct.protocols.ip import IP
from netstruct.protocols.udp import UDP


# from <https://en.wikipedia.org/wiki/IPv4_header_checksum>
IP_HEADER = bytes.fromhex('45000073000040004011b861c0a80001c0a800c7')


def test_sum16():
    assert checksum.sum16(b'\x00' * 8) == 0
    # the example of RFC 1071
    assert checksum.sum16(bytes.fromhex('0001f203f4f5f6f7')) == 0x2ddf0
    # an odd byte is padded with zero
    assert checksum.sum16(b'\x01') == 0x0100


def test_reduce_checksum():
    assert checksum.reduce_checksum(0x2ddf0) == 0x220d
    # zero is never returned
    assert checksum.reduce_checksum(0xffff) == 0xffff
    assert checksum.reduce_checksum(0) == 0xffff


def test_checksum_verify():
    # summing the checksum itself gives all ones
    assert checksum.checksum(IP_HEADER) == 0xffff


def test_calc_checksum():
    ip = IP(IP_HEADER)

    assert ip.checksum.value == 0xb861

    ip.checksum = 0x1234

    assert ip.calc_checksum() == 0xb861
    assert ip.checksum.value == 0xb861
    assert ip.to_bytes() == IP_HEADER


def test_calc_length():
    udp = UDP(body=b'abc')

    assert udp.length.value == 8
    assert udp.calc_length() == 11
    assert udp.length.value == 11

    ip = IP(body=udp)

    assert ip.calc_length() == 31
    assert ip.ihl == 5


def test_calc_length_options():
    ip = IP(options=b'\x01\x01\x01\x01')

    ip.calc_length()

    assert ip.ihl == 6
    assert ip.length.value == 24
    assert IP(ip.to_bytes()).options.value == b'\x01\x01\x01\x01'
