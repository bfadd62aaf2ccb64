# coding=utf-8
import struct

from py_mysql_binlogparser.constants.EVENT_TYPE import BINLOG_MAGIC, EVENT_HEADER_FIX_LEN, event_type_name
from py_mysql_binlogparser.errors import FormatError, TruncatedInputError
from py_mysql_binlogparser.protocol.packet import Packet
from py_mysql_binlogparser.protocol.proto import Proto


def check_magic(proto):
    """
    Consume the 4 byte file header, FormatError unless it is fe 62 69 6e
    """
    magic = proto.read(len(BINLOG_MAGIC))
    if magic != BINLOG_MAGIC:
        raise FormatError("not a binlog file: bad magic %r" % magic)


def read_extra_header(proto, header_length):
    """
    Bytes between the fixed 19 byte header and the event body.

    Their count comes from the negotiated header length announced by the
    last FORMAT_DESCRIPTION_EVENT; they are returned without interpretation.
    """
    return proto.read(max(0, header_length - EVENT_HEADER_FIX_LEN))


class EventHeader(Packet):
    '''
    https://dev.mysql.com/doc/internals/en/event-structure.html
    4              timestamp
    1              type code
    4              server-id
    4              event-length (header included)
    4              next position
    2              flags
    '''
    __slots__ = ('timestamp', 'type_code', 'server_id', 'event_length', 'next_position', 'flags')

    _struct = struct.Struct('<IBIIIH')

    def __init__(self, timestamp=0, type_code=0, server_id=0, event_length=EVENT_HEADER_FIX_LEN,
                 next_position=0, flags=0):
        self.timestamp = timestamp
        self.type_code = type_code
        self.server_id = server_id
        self.event_length = event_length
        self.next_position = next_position
        self.flags = flags

    @property
    def type_name(self):
        return event_type_name(self.type_code)

    def getPayload(self):
        payload = bytearray()

        payload.extend(Proto.build_fixed_int(4, self.timestamp))
        payload.extend(Proto.build_fixed_int(1, self.type_code))
        payload.extend(Proto.build_fixed_int(4, self.server_id))
        payload.extend(Proto.build_fixed_int(4, self.event_length))
        payload.extend(Proto.build_fixed_int(4, self.next_position))
        payload.extend(Proto.build_fixed_int(2, self.flags))

        return payload

    @staticmethod
    def loadFromPacket(packet):
        if len(packet) != EVENT_HEADER_FIX_LEN:
            raise TruncatedInputError(EVENT_HEADER_FIX_LEN, len(packet))
        return EventHeader(*EventHeader._struct.unpack(bytes(packet)))

    @staticmethod
    def loadFromStream(proto):
        return EventHeader.loadFromPacket(proto.read(EVENT_HEADER_FIX_LEN))

    def __str__(self):
        return "timestamp:%s  type_code:%s(%s)  server_id:%s  event_length:%s  next_position:%s  flags:%s" % (
            self.timestamp, self.type_code, self.type_name, self.server_id,
            self.event_length, self.next_position, self.flags)
