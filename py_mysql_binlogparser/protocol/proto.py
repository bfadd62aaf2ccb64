# coding=utf-8
from py_mysql_binlogparser.errors import FormatError, TruncatedInputError


class Proto(object):
    """
    Little-endian reader over a byte source.

    ``stream`` is anything with a ``read(n)`` method (an open binlog file,
    ``io.BytesIO``...). Every ``get_*`` call consumes exactly the bytes it
    asks for or raises ``TruncatedInputError``; the stream is never re-read.
    """
    __slots__ = ('stream', 'offset', 'history')

    def __init__(self, stream, offset=0):
        self.stream = stream
        self.offset = offset
        # bytearray while an event checksum is being computed
        self.history = None

    @staticmethod
    def build_fixed_int(size, value):
        """
        Build a little-endian fixed int

        >>> Proto.build_fixed_int(1, 0)
        bytearray(b'\\x00')

        >>> Proto.build_fixed_int(1, 255)
        bytearray(b'\\xff')

        >>> Proto.build_fixed_int(2, 0xFFFF)
        bytearray(b'\\xff\\xff')

        >>> Proto.build_fixed_int(4, 19)
        bytearray(b'\\x13\\x00\\x00\\x00')

        >>> Proto.build_fixed_int(8, 255)
        bytearray(b'\\xff\\x00\\x00\\x00\\x00\\x00\\x00\\x00')
        """
        packet = bytearray(size)
        for i in range(size):
            packet[i] = (value >> (8 * i)) & 0xFF
        return packet

    @staticmethod
    def build_fixed_str(size, value):
        """
        Build a fixed string, zero padded or cut to ``size``

        >>> Proto.build_fixed_str(2, 'ab')
        bytearray(b'ab')

        >>> Proto.build_fixed_str(3, 'ab')
        bytearray(b'ab\\x00')

        >>> Proto.build_fixed_str(2, b'abc')
        bytearray(b'ab')
        """
        if isinstance(value, str):
            value = value.encode('utf-8')
        packet = bytearray(size)
        packet[:len(value)] = value[:size]
        return packet

    @staticmethod
    def build_filler(size, fill=0x00):
        """
        Build a set of filler

        >>> Proto.build_filler(1)
        bytearray(b'\\x00')

        >>> Proto.build_filler(2, 0xff)
        bytearray(b'\\xff\\xff')
        """
        return bytearray([fill]) * size

    def read(self, size):
        """
        Read exactly ``size`` bytes

        >>> from io import BytesIO
        >>> proto = Proto(BytesIO(b'abc'))
        >>> proto.read(2)
        b'ab'
        >>> proto.offset
        2
        >>> proto.read(0)
        b''
        """
        if size < 0:
            raise FormatError("negative read of %d bytes at offset %d" % (size, self.offset))
        data = self.stream.read(size) if size else b''
        if len(data) != size:
            raise TruncatedInputError(size, len(data), self.offset)
        self.offset += size
        if self.history is not None:
            self.history.extend(data)
        return bytes(data)

    def read_partial(self, size):
        """
        Read up to ``size`` bytes, an empty result means end of stream

        >>> from io import BytesIO
        >>> proto = Proto(BytesIO(b'abc'))
        >>> proto.read_partial(5)
        b'abc'
        >>> proto.read_partial(5)
        b''
        """
        data = bytes(self.stream.read(size))
        self.offset += len(data)
        if self.history is not None:
            self.history.extend(data)
        return data

    def get_fixed_int(self, size):
        """
        Extract a fixed int from the current position

        >>> from io import BytesIO
        >>> proto = Proto(BytesIO(Proto.build_fixed_int(4, 120)))
        >>> proto.get_fixed_int(4)
        120
        >>> proto.offset
        4
        """
        return int.from_bytes(self.read(size), 'little')

    def get_fixed_str(self, size):
        return self.read(size)

    def get_filler(self, size):
        """
        Skip over filler

        >>> from io import BytesIO
        >>> proto = Proto(BytesIO(bytearray(5)))
        >>> proto.get_filler(2)
        >>> proto.offset
        2
        """
        self.read(size)


if __name__ == "__main__":
    import doctest
    doctest.testmod()
