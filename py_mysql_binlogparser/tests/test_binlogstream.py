import os
import shutil
import tempfile
import unittest
from io import BytesIO

from py_mysql_binlogparser.binlogstream import BinLogStreamReader
from py_mysql_binlogparser.constants.EVENT_TYPE import (
    BINLOG_CHECKSUM_ALG_CRC32, BINLOG_MAGIC, FORMAT_DESCRIPTION_EVENT, INTVAR_EVENT, LAST_INSERT_ID, QUERY_EVENT,
    RAND_EVENT, ROTATE_EVENT, START_EVENT_V3, WRITE_ROWS_EVENT, XID_EVENT)
from py_mysql_binlogparser.errors import BinlogError, FormatError, TruncatedInputError, UnsupportedEventError
from py_mysql_binlogparser.packet.binlog_event import encode_event
from py_mysql_binlogparser.packet.format_description_event import FormatDescriptionEvent
from py_mysql_binlogparser.packet.intvar import IntvarEvent
from py_mysql_binlogparser.packet.query import QueryEvent
from py_mysql_binlogparser.packet.rand import RandEvent
from py_mysql_binlogparser.packet.rotate import RotateEvent
from py_mysql_binlogparser.packet.unknown import UnknownEvent
from py_mysql_binlogparser.packet.xid import XidEvent

__all__ = ["TestBinLogStreamReader", "TestRotation", "TestChecksum"]

SQL = 'INSERT INTO t VALUES (1)'


def event(type_code, body, **options):
    return type_code, body, options


def binlog(*events):
    data = bytearray(BINLOG_MAGIC)
    for type_code, body, options in events:
        data.extend(encode_event(type_code, body, start_position=len(data), timestamp=1700000000, **options))
    return bytes(data)


def fde(header_length=19, checksum=False, **kwargs):
    return event(FORMAT_DESCRIPTION_EVENT, FormatDescriptionEvent(header_length=header_length, **kwargs),
                 checksum=checksum)


class MemoryOpener(object):
    """Byte sources from a dict, remembers what it opened"""

    def __init__(self, files):
        self.files = files
        self.opened = []

    def __call__(self, name, relative_to=None):
        if name not in self.files:
            raise FileNotFoundError(name)
        source = BytesIO(self.files[name])
        self.opened.append(source)
        return source

    def all_closed(self):
        return all(source.closed for source in self.opened)


class TestBinLogStreamReader(unittest.TestCase):

    def reader(self, data, **kwargs):
        self.opener = MemoryOpener({'mysql-bin.000001': data})
        return BinLogStreamReader('mysql-bin.000001', opener=self.opener, **kwargs)

    def test_end_to_end(self):
        data = binlog(fde(),
                      event(QUERY_EVENT, QueryEvent(thread_id=5, database_name='test', sql_statement=SQL)),
                      event(XID_EVENT, XidEvent(21)))
        reader = self.reader(data)
        events = list(reader)

        self.assertEqual([e.type_code for e in events], [FORMAT_DESCRIPTION_EVENT, QUERY_EVENT, XID_EVENT])
        self.assertEqual(events[1].data.sql_statement, SQL.encode())
        self.assertEqual(events[1].get_sql_statement(), SQL)
        self.assertEqual(events[1].data.database_name, b'test')
        self.assertEqual(events[2].data.xid, 21)
        self.assertIsNone(reader.fetchone())
        self.assertTrue(self.opener.all_closed())

    def test_event_helpers(self):
        data = binlog(fde(), event(XID_EVENT, XidEvent(1)))
        first, second = list(self.reader(data))
        self.assertEqual(first.get_position(), (4, 4 + first.header.event_length))
        self.assertEqual(second.get_position()[0], first.header.next_position)
        self.assertEqual(second.get_timestamp(), 1700000000)
        self.assertTrue(second.check_log_type(XID_EVENT))
        self.assertEqual(second.type_name, 'XID_EVENT')
        self.assertEqual(second.log_file, 'mysql-bin.000001')
        with self.assertRaises(BinlogError):
            second.get_sql_statement()

    def test_all_decoded_types(self):
        data = binlog(fde(),
                      event(INTVAR_EVENT, IntvarEvent(LAST_INSERT_ID, 10)),
                      event(RAND_EVENT, RandEvent(b'\x01' * 8, b'\x02' * 8)),
                      event(WRITE_ROWS_EVENT, b'\x10\x20\x30\x40'),
                      event(QUERY_EVENT, QueryEvent(sql_statement='COMMIT')))
        events = list(self.reader(data))
        self.assertEqual(len(events), 5)
        self.assertEqual(events[1].data, IntvarEvent(LAST_INSERT_ID, 10))
        self.assertEqual(events[2].data, RandEvent(b'\x01' * 8, b'\x02' * 8))
        self.assertEqual(events[3].data, UnknownEvent(b'\x10\x20\x30\x40'))
        self.assertEqual(events[4].get_sql_statement(), 'COMMIT')

    def test_no_format_description(self):
        data = binlog(event(XID_EVENT, XidEvent(3)))
        events = list(self.reader(data))
        self.assertEqual(len(events), 1)
        self.assertEqual(events[0].data.xid, 3)

    def test_negotiated_header_length(self):
        data = binlog(fde(header_length=23),
                      event(QUERY_EVENT, QueryEvent(sql_statement=SQL), header_length=23),
                      event(XID_EVENT, XidEvent(8), header_length=23))
        reader = self.reader(data)
        events = list(reader)
        self.assertEqual(events[0].extra_header, b'')
        self.assertEqual(events[1].extra_header, bytes(4))
        self.assertEqual(events[1].data.sql_statement, SQL.encode())
        self.assertEqual(events[2].data.xid, 8)
        self.assertEqual(reader.header_length, 23)

    def test_empty_file(self):
        self.assertEqual(list(self.reader(BINLOG_MAGIC)), [])

    def test_bad_magic(self):
        reader = self.reader(b'\xfe\x62\x69\x6f' + binlog(fde())[4:])
        with self.assertRaises(FormatError):
            reader.fetchone()
        self.assertTrue(self.opener.all_closed())
        self.assertIsNone(reader.fetchone())

    def test_short_magic(self):
        with self.assertRaises(TruncatedInputError):
            list(self.reader(b'\xfe\x62'))

    def test_truncated_body(self):
        data = binlog(fde(), event(QUERY_EVENT, QueryEvent(sql_statement=SQL)))
        reader = self.reader(data[:-3])
        self.assertEqual(reader.fetchone().type_code, FORMAT_DESCRIPTION_EVENT)
        with self.assertRaises(TruncatedInputError):
            reader.fetchone()
        self.assertTrue(self.opener.all_closed())

    def test_truncated_header(self):
        data = binlog(fde(), event(XID_EVENT, XidEvent(1)))
        reader = self.reader(data + data[4:10])
        with self.assertRaises(TruncatedInputError):
            list(reader)

    def test_event_length_below_header(self):
        data = bytearray(binlog(fde(), event(XID_EVENT, XidEvent(1))))
        # event-length field of the trailing 27 byte XID_EVENT
        offset = len(data) - 27 + 9
        data[offset:offset + 4] = (10).to_bytes(4, 'little')
        reader = self.reader(bytes(data))
        with self.assertRaises(FormatError):
            list(reader)

    def test_short_post_header_table(self):
        data = binlog(fde(post_header_lengths=bytes(22)), event(XID_EVENT, XidEvent(77)))
        reader = self.reader(data)
        with self.assertRaises(FormatError) as ctx:
            reader.fetchone()
        self.assertIn('27 event types', str(ctx.exception))
        self.assertTrue(self.opener.all_closed())

        events = list(self.reader(data, event_type_count=22))
        self.assertEqual([e.type_code for e in events], [FORMAT_DESCRIPTION_EVENT, XID_EVENT])
        self.assertEqual(events[1].data.xid, 77)

    def test_unsupported_types(self):
        data = binlog(fde(), event(START_EVENT_V3, bytes(10)), event(XID_EVENT, XidEvent(1)))
        events = list(self.reader(data))
        self.assertEqual(events[1].data, UnknownEvent(bytes(10)))
        self.assertEqual(events[2].data.xid, 1)

        with self.assertRaises(UnsupportedEventError):
            list(self.reader(data, strict=True))

    def test_idempotent(self):
        data = binlog(fde(),
                      event(QUERY_EVENT, QueryEvent(database_name='test', sql_statement=SQL)),
                      event(WRITE_ROWS_EVENT, b'\x01\x02'),
                      event(XID_EVENT, XidEvent(2)))
        first = list(self.reader(data))
        second = list(self.reader(data))
        self.assertEqual(first, second)
        self.assertEqual(b''.join(bytes(e.getPayload()) for e in first), data[4:])

    def test_stop(self):
        data = binlog(fde(), event(XID_EVENT, XidEvent(1)), event(XID_EVENT, XidEvent(2)))
        reader = self.reader(data)
        self.assertIsNotNone(reader.fetchone())
        reader.stop()
        self.assertIsNone(reader.fetchone())
        self.assertTrue(self.opener.all_closed())

    def test_close(self):
        data = binlog(fde(), event(XID_EVENT, XidEvent(1)))
        with self.reader(data) as reader:
            reader.fetchone()
        self.assertTrue(self.opener.all_closed())
        self.assertIsNone(reader.fetchone())


class TestRotation(unittest.TestCase):

    def setUp(self):
        self.binlog_dir = tempfile.mkdtemp()
        self.first = os.path.join(self.binlog_dir, 'mysql-bin.000001')
        self.write('mysql-bin.000001', binlog(
            fde(),
            event(QUERY_EVENT, QueryEvent(database_name='test', sql_statement=SQL)),
            event(XID_EVENT, XidEvent(1)),
            event(ROTATE_EVENT, RotateEvent(4, 'mysql-bin.000002'))))
        self.write('mysql-bin.000002', binlog(
            fde(),
            event(XID_EVENT, XidEvent(2))))

    def tearDown(self):
        shutil.rmtree(self.binlog_dir)

    def write(self, name, data):
        with open(os.path.join(self.binlog_dir, name), 'wb') as fw:
            fw.write(data)

    def test_follow(self):
        events = list(BinLogStreamReader(self.first, follow_rotation=True))
        self.assertEqual([e.type_code for e in events], [
            FORMAT_DESCRIPTION_EVENT, QUERY_EVENT, XID_EVENT, ROTATE_EVENT, FORMAT_DESCRIPTION_EVENT, XID_EVENT])
        self.assertEqual(events[3].data.log_file_name, 'mysql-bin.000002')
        self.assertEqual(events[5].data.xid, 2)
        self.assertEqual(events[5].log_file, 'mysql-bin.000002')

    def test_no_follow(self):
        events = list(BinLogStreamReader(self.first))
        self.assertEqual(len(events), 4)
        self.assertEqual(events[-1].type_code, ROTATE_EVENT)

    def test_stop_at_rotate_when_rotate_not_last(self):
        self.write('mysql-bin.000001', binlog(
            fde(),
            event(ROTATE_EVENT, RotateEvent(4, 'mysql-bin.000002')),
            event(XID_EVENT, XidEvent(9))))
        events = list(BinLogStreamReader(self.first))
        self.assertEqual([e.type_code for e in events], [FORMAT_DESCRIPTION_EVENT, ROTATE_EVENT])

    def test_missing_next_file(self):
        os.remove(os.path.join(self.binlog_dir, 'mysql-bin.000002'))
        reader = BinLogStreamReader(self.first, follow_rotation=True)
        types = []
        with self.assertRaises(FileNotFoundError):
            for e in reader:
                types.append(e.type_code)
        self.assertEqual(types[-1], ROTATE_EVENT)
        self.assertIsNone(reader.fetchone())

    def test_next_file_bad_magic(self):
        self.write('mysql-bin.000002', b'junk' + bytes(30))
        with self.assertRaises(FormatError):
            list(BinLogStreamReader(self.first, follow_rotation=True))

    def test_header_length_carries_over(self):
        opener = MemoryOpener({
            'mysql-bin.000001': binlog(
                fde(header_length=23),
                event(ROTATE_EVENT, RotateEvent(4, 'mysql-bin.000002'), header_length=23)),
            'mysql-bin.000002': binlog(
                event(QUERY_EVENT, QueryEvent(sql_statement=SQL), header_length=23)),
        })
        events = list(BinLogStreamReader('mysql-bin.000001', follow_rotation=True, opener=opener))
        self.assertEqual(len(events), 3)
        self.assertEqual(events[1].data.log_file_name, 'mysql-bin.000002')
        self.assertEqual(events[2].data.sql_statement, SQL.encode())
        self.assertTrue(opener.all_closed())
        self.assertEqual(len(opener.opened), 2)


class TestChecksum(unittest.TestCase):

    def checksummed_binlog(self):
        trailer = bytes(8) + bytes([BINLOG_CHECKSUM_ALG_CRC32])
        return bytearray(binlog(
            fde(server_version='5.6.40-log', trailer=trailer, checksum=True),
            event(QUERY_EVENT, QueryEvent(database_name='test', sql_statement=SQL), checksum=True),
            event(XID_EVENT, XidEvent(5), checksum=True)))

    def read(self, data, **kwargs):
        opener = MemoryOpener({'mysql-bin.000001': bytes(data)})
        return list(BinLogStreamReader('mysql-bin.000001', opener=opener, **kwargs))

    def test_decode(self):
        events = self.read(self.checksummed_binlog(), verify_checksum=True)
        self.assertEqual(len(events), 3)
        self.assertEqual(events[0].data.checksum_alg, BINLOG_CHECKSUM_ALG_CRC32)
        self.assertIsNone(events[0].checksum)
        self.assertEqual(events[1].data.sql_statement, SQL.encode())
        self.assertEqual(len(events[1].checksum), 4)
        self.assertEqual(events[2].data.xid, 5)

    def test_corrupt_event(self):
        data = self.checksummed_binlog()
        data[data.index(b'INSERT')] = ord('U')
        self.assertEqual(len(self.read(data)), 3)
        with self.assertRaises(FormatError):
            self.read(data, verify_checksum=True)

    def test_corrupt_format_description(self):
        data = self.checksummed_binlog()
        data[data.index(b'5.6.40')] = ord('7')
        with self.assertRaises(FormatError):
            self.read(data, verify_checksum=True)


if __name__ == "__main__":
    unittest.main()
