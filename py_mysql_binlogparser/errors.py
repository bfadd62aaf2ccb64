# coding=utf-8


class BinlogError(Exception):
    """Base class for everything raised while decoding a binlog"""


class FormatError(BinlogError, ValueError):
    """The bytes are not a valid binlog stream"""


class TruncatedInputError(FormatError):
    """A read asked for more bytes than the source holds"""

    def __init__(self, expected, received, offset=None):
        self.expected = expected
        self.received = received
        self.offset = offset
        msg = "truncated input: wanted %d bytes, got %d" % (expected, received)
        if offset is not None:
            msg += " at offset %d" % offset
        super(TruncatedInputError, self).__init__(msg)


class UnsupportedEventError(BinlogError):
    """Event type that strict mode refuses to skip"""

    def __init__(self, type_code, type_name=None):
        self.type_code = type_code
        super(UnsupportedEventError, self).__init__(
            "unsupported event type %s (%s)" % (type_code, type_name or "?"))
