class NetstructException(Exception):
    '''Base class to extend in order to throw exception in netstruct.

    It takes as first argument the chain of the fields that caused the
    exception: the innermost field comes first and every enclosing chunk
    appends its own field name while the exception propagates.
    '''

    def __init__(self, chain=None, reason=None):
        self.chain = chain if chain is not None else []
        self.reason = reason
        super().__init__()

    @property
    def path(self):
        return '.'.join(reversed(self.chain))

    def __str__(self):
        msg = self.reason or self.__class__.__name__
        if self.chain:
            return f"field '{self.path}': {msg}"

        return msg


class ParseError(NetstructException):
    '''Raised when the data cannot be decoded.

    When the error is caused by a short buffer the attributes "needed" and
    "available" tell how many bytes were missing.'''

    def __init__(self, chain=None, reason=None, needed=None, available=None):
        if reason is None and needed is not None:
            reason = f'too short, {needed} bytes needed but {available} available'
        self.needed = needed
        self.available = available
        super().__init__(chain=chain, reason=reason)

    @property
    def missing(self):
        if self.needed is None:
            return None

        return self.needed - self.available


class ValidationError(ParseError):
    '''The data was consumable but the header is not valid.'''
    pass


class FormatError(NetstructException):
    '''A value cannot be encoded.'''
    pass


class BindingError(NetstructException):
    pass
