# coding=utf-8
import zlib

from py_mysql_binlogparser.constants.EVENT_TYPE import BINLOG_CHECKSUM_LEN, EVENT_HEADER_FIX_LEN, QUERY_EVENT
from py_mysql_binlogparser.errors import BinlogError
from py_mysql_binlogparser.packet.event_header import EventHeader
from py_mysql_binlogparser.protocol.packet import Packet
from py_mysql_binlogparser.protocol.proto import Proto


class BinlogEvent(Packet):
    """
    One decoded event: the fixed header, the opaque extra header bytes, the
    decoded body and, on checksummed streams, the 4 byte CRC32 trailer.
    """
    __slots__ = ('header', 'extra_header', 'data', 'checksum', 'log_file')

    def __init__(self, header, data, extra_header=b'', checksum=None, log_file=None):
        self.header = header
        self.data = data
        self.extra_header = bytes(extra_header)
        self.checksum = checksum
        self.log_file = log_file

    @property
    def type_code(self):
        return self.header.type_code

    @property
    def type_name(self):
        return self.header.type_name

    def check_log_type(self, type_code):
        return self.header.type_code == type_code

    def get_sql_statement(self):
        if self.header.type_code != QUERY_EVENT:
            raise BinlogError("Not Query Event: %s" % self.type_name)
        return self.data.get_sql_statement()

    def get_timestamp(self):
        return self.header.timestamp

    def get_position(self):
        """
        (start, end) offsets of the event in its file
        """
        return self.header.next_position - self.header.event_length, self.header.next_position

    def getPayload(self):
        payload = bytearray()

        payload.extend(self.header.getPayload())
        payload.extend(self.extra_header)
        payload.extend(self.data.getEventBody())
        if self.checksum is not None:
            payload.extend(self.checksum)

        return payload

    def __str__(self):
        return "Binlog Event[%s]: [%s] %s %s %s" % (self.header.timestamp, self.header.type_code, self.type_name,
                                                   self.header.event_length, self.header.next_position)


def encode_event(type_code, body, header_length=EVENT_HEADER_FIX_LEN, timestamp=0, server_id=1,
                 start_position=None, flags=0, checksum=False):
    """
    Bytes of one event around ``body`` (a decoder object or raw bytes).

    The extra header is zero filled up to ``header_length``. With a
    ``start_position`` the header's next-position is filled in, otherwise it
    is left at 0 like on artificial events. ``checksum`` appends a CRC32.
    """
    if hasattr(body, 'getEventBody'):
        body = body.getEventBody()
    extra_header = Proto.build_filler(max(0, header_length - EVENT_HEADER_FIX_LEN))

    event_length = EVENT_HEADER_FIX_LEN + len(extra_header) + len(body)
    if checksum:
        event_length += BINLOG_CHECKSUM_LEN
    next_position = 0 if start_position is None else start_position + event_length

    header = EventHeader(timestamp, type_code, server_id, event_length, next_position, flags)
    packet = header.getPayload() + extra_header + bytearray(body)
    if checksum:
        packet.extend(Proto.build_fixed_int(BINLOG_CHECKSUM_LEN, zlib.crc32(bytes(packet)) & 0xffffffff))
    return bytes(packet)
