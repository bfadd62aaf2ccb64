# -*- coding: utf-8 -*-
import logging
import os
import threading
import zlib

from py_mysql_binlogparser.constants.EVENT_TYPE import (
    BINLOG_CHECKSUM_ALG_CRC32, BINLOG_CHECKSUM_LEN, EVENT_HEADER_FIX_LEN, FORMAT_DESCRIPTION_EVENT,
    LOG_EVENT_TYPES, ROTATE_EVENT)
from py_mysql_binlogparser.errors import FormatError, TruncatedInputError
from py_mysql_binlogparser.packet.binlog_event import BinlogEvent
from py_mysql_binlogparser.packet.event_data import parse_event_data
from py_mysql_binlogparser.packet.event_header import EventHeader, check_magic, read_extra_header
from py_mysql_binlogparser.packet.unknown import UnknownEvent
from py_mysql_binlogparser.protocol.packet import dump
from py_mysql_binlogparser.protocol.proto import Proto
from py_mysql_binlogparser.source import open_source

logger = logging.getLogger('py_mysql_binlogparser')


class BinLogStreamReader(object):
    """Read the events of a local binlog file, one at a time.

    With ``follow_rotation`` the reader continues with the file named by the
    ROTATE_EVENT that ends each file, so a whole chain reads as one stream.
    Events are decoded only when asked for: the reader never holds more than
    the event being handed over.

    The negotiated header length (and the checksum algorithm) announced by a
    FORMAT_DESCRIPTION_EVENT belong to the reader, not to a file, and carry
    over a rotation.
    """

    def __init__(self, log_file, follow_rotation=False, event_type_count=LOG_EVENT_TYPES, strict=False,
                 verify_checksum=False, opener=open_source):
        self._log_file = log_file
        self._log_dir = os.path.dirname(log_file) or None
        self._follow_rotation = follow_rotation
        self._event_type_count = event_type_count
        self._strict = strict
        self._verify_checksum = verify_checksum
        self._opener = opener

        self._header_length = EVENT_HEADER_FIX_LEN
        self._checksum_length = 0
        self._source = None
        self._proto = None
        self._stopped = threading.Event()
        self._events = None

    @property
    def log_file(self):
        return self._log_file

    @property
    def header_length(self):
        return self._header_length

    def _open(self, log_file, relative_to):
        self._source = self._opener(log_file, relative_to)
        self._log_file = log_file
        self._proto = Proto(self._source)
        check_magic(self._proto)

    def _close_source(self):
        if self._source is not None:
            self._source.close()
            self._source = None
            self._proto = None

    def _check_crc(self, covered, checksum):
        expected = int.from_bytes(checksum, 'little')
        actual = zlib.crc32(bytes(covered)) & 0xffffffff
        if actual != expected:
            raise FormatError("checksum mismatch in %s at %d: stored %08x, computed %08x" % (
                self._log_file, self._proto.offset, expected, actual))

    def _read_event(self):
        """
        Decode the next event, None on a clean end of file
        """
        proto = self._proto
        header_data = proto.read_partial(EVENT_HEADER_FIX_LEN)
        if not header_data:
            return None
        if len(header_data) < EVENT_HEADER_FIX_LEN:
            raise TruncatedInputError(EVENT_HEADER_FIX_LEN, len(header_data), proto.offset - len(header_data))
        header = EventHeader.loadFromPacket(header_data)

        # a FORMAT_DESCRIPTION_EVENT carries its own checksum in its body
        is_fde = header.type_code == FORMAT_DESCRIPTION_EVENT
        checksum_length = 0 if is_fde else self._checksum_length

        if header.event_length < self._header_length + checksum_length:
            raise FormatError("event length %d at %d in %s is shorter than its %d byte header" % (
                header.event_length, proto.offset - EVENT_HEADER_FIX_LEN, self._log_file,
                self._header_length + checksum_length))

        if self._verify_checksum and (checksum_length or is_fde):
            proto.history = bytearray(header_data)
        try:
            extra_header = read_extra_header(proto, self._header_length)
            data = parse_event_data(proto, header.type_code, header.event_length - checksum_length,
                                    self._header_length, self._event_type_count, self._strict)
            covered = proto.history
        finally:
            proto.history = None

        checksum = proto.read(checksum_length) if checksum_length else None
        if covered is not None:
            if checksum is not None:
                self._check_crc(covered, checksum)
            elif is_fde and data.checksum_alg == BINLOG_CHECKSUM_ALG_CRC32:
                self._check_crc(covered[:-BINLOG_CHECKSUM_LEN], data.checksum)

        if is_fde:
            if data.header_length < EVENT_HEADER_FIX_LEN:
                raise FormatError("format description announces a %d byte header" % data.header_length)
            logger.debug("Format description: server %s, binlog v%d, header length %d, checksum alg %d",
                         data.server_version, data.binlog_version, data.header_length, data.checksum_alg)
            self._header_length = data.header_length
            self._checksum_length = BINLOG_CHECKSUM_LEN if data.checksum_alg == BINLOG_CHECKSUM_ALG_CRC32 else 0

        event = BinlogEvent(header, data, extra_header=extra_header, checksum=checksum, log_file=self._log_file)
        logger.debug(str(event))
        if isinstance(data, UnknownEvent):
            dump(data.data)
        return event

    def _read_events(self):
        try:
            self._open(self._log_file, None)
            while not self._stopped.is_set():
                event = self._read_event()
                if event is None:
                    logger.debug("End of binlog file %s", self._log_file)
                    return
                yield event

                if event.header.type_code == ROTATE_EVENT:
                    if not self._follow_rotation or self._stopped.is_set():
                        return
                    new_log_file = event.data.log_file_name
                    logger.info("Rotate new binlog file: %s", new_log_file)
                    self._close_source()
                    self._open(new_log_file, self._log_dir)
        finally:
            self._close_source()

    def fetchone(self):
        """
        Next event, None once the stream has ended
        """
        if self._events is None:
            self._events = self._read_events()
        return next(self._events, None)

    def stop(self):
        """
        Ask the reader to end before its next header read, safe from any thread
        """
        self._stopped.set()

    def close(self):
        self.stop()
        if self._events is not None:
            self._events.close()
        self._close_source()

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.close()

    def __iter__(self):
        return iter(self.fetchone, None)
