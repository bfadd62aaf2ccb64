# coding=utf-8
import re

from py_mysql_binlogparser.constants.EVENT_TYPE import (
    BINLOG_CHECKSUM_ALG_DESC_LEN, BINLOG_CHECKSUM_ALG_UNDEF, BINLOG_CHECKSUM_LEN, CHECKSUM_VERSION_SPLIT,
    EVENT_HEADER_FIX_LEN, LOG_EVENT_TYPES)
from py_mysql_binlogparser.errors import FormatError
from py_mysql_binlogparser.protocol.packet import Packet
from py_mysql_binlogparser.protocol.proto import Proto

_VERSION_RE = re.compile(r'(\d+)\.(\d+)\.(\d+)')


class FormatDescriptionEvent(Packet):
    '''
    https://dev.mysql.com/doc/internals/en/format-description-event.html
    2                binlog-version
    string[50]       mysql-server version
    4                create timestamp
    1                event header length
    string[p]        event type header lengths, p = event type count
    string[t]        trailer: remaining post-header lengths of newer servers,
                     checksum algorithm (1) and checksum (4) from 5.6.1 on
    '''
    __slots__ = ('binlog_version', 'server_version', 'create_timestamp', 'header_length',
                 'post_header_lengths', 'trailer')

    FIXED_LENGTH = 2 + 50 + 4 + 1

    def __init__(self, binlog_version=4, server_version='5.5.62-log', create_timestamp=0,
                 header_length=EVENT_HEADER_FIX_LEN, post_header_lengths=None, trailer=b''):
        self.binlog_version = binlog_version
        self.server_version = server_version
        self.create_timestamp = create_timestamp
        self.header_length = header_length
        if post_header_lengths is None:
            post_header_lengths = bytes(LOG_EVENT_TYPES)
        self.post_header_lengths = bytes(post_header_lengths)
        self.trailer = bytes(trailer)

    def version_split(self):
        """
        (major, minor, patch) of the server that wrote the file

        >>> FormatDescriptionEvent(server_version='5.6.10-log').version_split()
        (5, 6, 10)
        >>> FormatDescriptionEvent(server_version='garbage').version_split()
        (0, 0, 0)
        """
        match = _VERSION_RE.match(self.server_version)
        if not match:
            return (0, 0, 0)
        return tuple(int(x) for x in match.groups())

    @property
    def checksum_alg(self):
        if (self.version_split() >= CHECKSUM_VERSION_SPLIT
                and len(self.trailer) >= BINLOG_CHECKSUM_ALG_DESC_LEN + BINLOG_CHECKSUM_LEN):
            return self.trailer[-BINLOG_CHECKSUM_LEN - BINLOG_CHECKSUM_ALG_DESC_LEN]
        return BINLOG_CHECKSUM_ALG_UNDEF

    @property
    def checksum(self):
        if self.checksum_alg == BINLOG_CHECKSUM_ALG_UNDEF:
            return None
        return self.trailer[-BINLOG_CHECKSUM_LEN:]

    def getEventBody(self):
        payload = bytearray()

        payload.extend(Proto.build_fixed_int(2, self.binlog_version))
        payload.extend(Proto.build_fixed_str(50, self.server_version))
        payload.extend(Proto.build_fixed_int(4, self.create_timestamp))
        payload.extend(Proto.build_fixed_int(1, self.header_length))
        payload.extend(self.post_header_lengths)
        payload.extend(self.trailer)

        return payload

    getPayload = getEventBody

    @staticmethod
    def loadFromStream(proto, event_length, header_length, event_type_count=LOG_EVENT_TYPES):
        rest = event_length - header_length - FormatDescriptionEvent.FIXED_LENGTH - event_type_count
        if rest < 0:
            raise FormatError("format description event length %d cannot hold a %d byte header and "
                              "%d event types" % (event_length, header_length, event_type_count))

        obj = FormatDescriptionEvent()

        obj.binlog_version = proto.get_fixed_int(2)
        obj.server_version = proto.get_fixed_str(50).split(b'\x00', 1)[0].decode('ascii', 'replace')
        obj.create_timestamp = proto.get_fixed_int(4)
        obj.header_length = proto.get_fixed_int(1)
        obj.post_header_lengths = proto.read(event_type_count)
        obj.trailer = proto.read(rest)

        return obj
