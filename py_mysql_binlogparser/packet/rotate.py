# coding=utf-8
import os

from py_mysql_binlogparser.errors import FormatError
from py_mysql_binlogparser.protocol.packet import Packet
from py_mysql_binlogparser.protocol.proto import Proto


class RotateEvent(Packet):
    '''
    https://dev.mysql.com/doc/internals/en/rotate-event.html
    8              position of the first event in the next file
    string[EOF]    name of the next file

    0 4 43 0
    00000000  00 00 00 00 04 74 72 32  00 2B 00 00 00 00 00 00   .....tr2 .+......
    00000010  00 20 00 04 00 00 00 00  00 00 00 6D 79 73 71 6C   . ...... ...mysql
    00000020  2D 62 69 6E 2E 30 30 30  30 30 32                  -bin.000 002

    event-length 43 = 19 header + 8 position + 16 name bytes
    '''
    __slots__ = ('position', 'next_log_name')

    POSITION_LENGTH = 8

    def __init__(self, position=4, next_log_name=b''):
        self.position = position
        if isinstance(next_log_name, str):
            next_log_name = os.fsencode(next_log_name)
        self.next_log_name = bytes(next_log_name)

    @property
    def log_file_name(self):
        """
        Next file name, cut at the first NUL
        """
        return os.fsdecode(self.next_log_name.split(b'\x00', 1)[0])

    def getEventBody(self):
        payload = bytearray()
        payload.extend(Proto.build_fixed_int(8, self.position))
        payload.extend(self.next_log_name)
        return payload

    getPayload = getEventBody

    @staticmethod
    def loadFromStream(proto, event_length, header_length):
        name_length = event_length - header_length - RotateEvent.POSITION_LENGTH
        if name_length < 0:
            raise FormatError("rotate event length %d is shorter than its %d byte header and position" % (
                event_length, header_length))

        obj = RotateEvent()
        obj.position = proto.get_fixed_int(8)
        obj.next_log_name = proto.read(name_length)
        return obj
