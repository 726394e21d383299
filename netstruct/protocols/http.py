'''
# HTTP/1.1 request

From <https://tools.ietf.org/html/rfc7230>, the request line and the headers

    GET /index.html HTTP/1.1\\r\\n
    Host: example.com\\r\\n
    \\r\\n

There is no numeric discriminator: the request is recognized from the method
at the beginning of the TCP payload. The message body (if any) is the body
of the header.

The lines can be terminated by a bare LF too. Whatever is not part of the
values (the line terminators, the spaces around them) is remembered when
unpacking so that packing gives back the same data; a request line that is
not made of exactly three parts separated by single spaces is rejected.
'''
import re

from ..core import Header
from .. import fields
from ..exceptions import FormatError, ParseError, ValidationError
from .tcp import TCP


METHODS = (b'CONNECT', b'DELETE', b'GET', b'HEAD', b'OPTIONS', b'PATCH', b'POST', b'PUT')

REQUEST_RE = re.compile(rb'^(%s) ' % b'|'.join(METHODS))

CRLF = b'\r\n'
LF = b'\n'
BLANKS = b' \t'


def is_request(data: bytes) -> bool:
    return REQUEST_RE.match(data) is not None


def _read_line(stream):
    '''Returns the line and its terminator.'''
    line = bytearray()
    while not line.endswith(LF):
        line += stream.read_exactly(1)

    eol = CRLF if line.endswith(CRLF) else LF

    return bytes(line[:-len(eol)]), eol


def _to_bytes(value: str, encoding: str, chain) -> bytes:
    try:
        return value.encode(encoding)
    except UnicodeEncodeError as e:
        raise FormatError(chain=chain, reason=str(e))


def _to_text(raw: bytes, encoding: str, chain) -> str:
    try:
        return raw.decode(encoding)
    except UnicodeDecodeError as e:
        raise ParseError(chain=chain, reason=str(e))


class HeadersField(fields.Field):
    '''The HTTP headers as a list of couples (name, value), in the order they
    appear: the same name can be present more than once (think of Cookie).

    The empty line terminating them is part of the field.

    The headers set by the user are packed as "name: value\\r\\n".'''
    SEPARATOR = b': '

    def __init__(self, **kw):
        kw.setdefault('default', lambda _: [])
        super().__init__(**kw)

    def __getitem__(self, name):
        values = self.get_all(name)
        if not values:
            raise KeyError(name)

        return values[0]

    def get_all(self, name):
        '''The values of all the headers with the given name (case insensitive).'''
        return [value for key, value in self.value if key.lower() == name.lower()]

    def _set_value(self, value):
        if isinstance(value, dict):
            value = value.items()

        super()._set_value([(key, element) for key, element in value])
        # (separator, suffix) for each line, the suffix includes the terminator
        self._spelling = []
        self._terminator = CRLF

    def _get_spelling(self, index):
        if index < len(self._spelling):
            return self._spelling[index]

        return self.SEPARATOR, CRLF

    def _encode(self) -> bytes:
        raw = b''
        for index, (key, value) in enumerate(self.value):
            separator, suffix = self._get_spelling(index)
            raw += _to_bytes(key, 'latin-1', [key]) + separator + _to_bytes(value, 'latin-1', [key]) + suffix

        return raw + self._terminator

    def _get_size(self):
        return len(self._encode())

    def pack(self, stream):
        stream.write(self._encode())

    def unpack(self, stream):
        headers = []
        spelling = []
        while True:
            line, eol = _read_line(stream)
            if not line:
                break

            key, sep, rest = line.partition(b':')
            if not sep:
                raise ParseError(chain=[], reason=f'malformed header line {line!r}')

            stripped = rest.lstrip(BLANKS)
            value = stripped.rstrip(BLANKS)

            headers.append((key.decode('latin-1'), value.decode('latin-1')))
            spelling.append((sep + rest[:len(rest) - len(stripped)], stripped[len(value):] + eol))

        self.value = headers
        self._spelling = spelling
        self._terminator = eol


class Request(Header):
    '''The fields of the request line are separated by spaces and terminated
    by CRLF (or LF), so the header is packed/unpacked by hand.

    Packing a request without method, path or version raises FormatError.'''
    protocol_name = 'HTTP.Request'

    method  = fields.TextField()
    path    = fields.TextField()
    version = fields.TextField(default='HTTP/1.1')
    headers = HeadersField()

    def init(self):
        self.line_end = CRLF
        super().init()

    def validate(self):
        return self.version.value.startswith('HTTP/')

    @property
    def header_size(self):
        return len(self.header_raw)

    def pack_header(self, stream):
        parts = []
        for name in ('method', 'path', 'version'):
            value = getattr(self, name).value
            if not value:
                raise FormatError(chain=[name], reason='missing value')
            parts.append(_to_bytes(value, 'ascii', [name]))

        stream.write(b' '.join(parts) + self.line_end)

        try:
            self.headers.pack(stream)
        except FormatError as e:
            e.chain.append('headers')
            raise

    def unpack_header(self, stream):
        line, self.line_end = _read_line(stream)

        parts = line.split(b' ')
        if len(parts) != 3 or not is_request(line):
            raise ParseError(chain=['method'], reason=f'malformed request line {line!r}')

        self.method, self.path, self.version = (
            _to_text(raw, 'ascii', [name]) for name, raw in zip(('method', 'path', 'version'), parts))

        try:
            self.headers.unpack(stream)
        except ParseError as e:
            e.chain.append('headers')
            raise

        if not self.validate():
            raise ValidationError(chain=['version'], reason=f'{self.version.value!r} is not an HTTP version')


def register(registry):
    registry.add_header(Request)
    registry.bind(TCP, Request, body=is_request)
