# coding=utf-8
from py_mysql_binlogparser.errors import FormatError
from py_mysql_binlogparser.protocol.packet import Packet


class UnknownEvent(Packet):
    """
    Body of any event without its own decoder, row events included.
    The bytes are kept so the stream stays aligned on the next header.
    """
    __slots__ = ('data',)

    def __init__(self, data=b''):
        self.data = bytes(data)

    def getEventBody(self):
        return bytearray(self.data)

    getPayload = getEventBody

    @staticmethod
    def loadFromStream(proto, event_length, header_length):
        size = event_length - header_length
        if size < 0:
            raise FormatError("event length %d is shorter than the %d byte header" % (event_length, header_length))
        return UnknownEvent(proto.read(size))
