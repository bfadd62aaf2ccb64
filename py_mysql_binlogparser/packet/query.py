# coding=utf-8
import codecs
import logging
from io import BytesIO

from pymysql.charset import charset_by_id

from py_mysql_binlogparser.errors import FormatError, TruncatedInputError
from py_mysql_binlogparser.protocol.packet import Packet
from py_mysql_binlogparser.protocol.proto import Proto

logger = logging.getLogger('py_mysql_binlogparser')

# status variable codes, libbinlogevents/include/statement_events.h
Q_FLAGS2_CODE                           = 0
Q_SQL_MODE_CODE                         = 1
Q_CATALOG_CODE                          = 2
Q_AUTO_INCREMENT                        = 3
Q_CHARSET_CODE                          = 4
Q_TIME_ZONE_CODE                        = 5
Q_CATALOG_NZ_CODE                       = 6
Q_LC_TIME_NAMES_CODE                    = 7
Q_CHARSET_DATABASE_CODE                 = 8
Q_TABLE_MAP_FOR_UPDATE_CODE             = 9
Q_MASTER_DATA_WRITTEN_CODE              = 10
Q_INVOKER                               = 11
Q_UPDATED_DB_NAMES                      = 12
Q_MICROSECONDS                          = 13
Q_EXPLICIT_DEFAULTS_FOR_TIMESTAMP       = 16
Q_DDL_LOGGED_WITH_XID                   = 17
Q_DEFAULT_COLLATION_FOR_UTF8MB4         = 18
Q_SQL_REQUIRE_PRIMARY_KEY               = 19
Q_DEFAULT_TABLE_ENCRYPTION              = 20

OVER_MAX_DBS_IN_EVENT_MTS               = 254

# code -> (name, fixed size)
_FIXED_STATUS_VARS = {
    Q_FLAGS2_CODE: ('Q_FLAGS2_CODE', 4),
    Q_SQL_MODE_CODE: ('Q_SQL_MODE_CODE', 8),
    Q_LC_TIME_NAMES_CODE: ('Q_LC_TIME_NAMES_CODE', 2),
    Q_CHARSET_DATABASE_CODE: ('Q_CHARSET_DATABASE_CODE', 2),
    Q_TABLE_MAP_FOR_UPDATE_CODE: ('Q_TABLE_MAP_FOR_UPDATE_CODE', 8),
    Q_MASTER_DATA_WRITTEN_CODE: ('Q_MASTER_DATA_WRITTEN_CODE', 4),
    Q_MICROSECONDS: ('Q_MICROSECONDS', 3),
    Q_EXPLICIT_DEFAULTS_FOR_TIMESTAMP: ('Q_EXPLICIT_DEFAULTS_FOR_TIMESTAMP', 1),
    Q_DDL_LOGGED_WITH_XID: ('Q_DDL_LOGGED_WITH_XID', 8),
    Q_DEFAULT_COLLATION_FOR_UTF8MB4: ('Q_DEFAULT_COLLATION_FOR_UTF8MB4', 2),
    Q_SQL_REQUIRE_PRIMARY_KEY: ('Q_SQL_REQUIRE_PRIMARY_KEY', 1),
    Q_DEFAULT_TABLE_ENCRYPTION: ('Q_DEFAULT_TABLE_ENCRYPTION', 1),
}


def _read_null_str(proto):
    value = b''
    while True:
        c = proto.read(1)
        if c == b'\x00':
            return value
        value += c


def parse_status_vars(data):
    """
    Decode the status variable block of a QUERY_EVENT into a dict.

    Every entry is a one byte code followed by a code specific value, with
    no length of its own, so parsing stops at the first unknown code.
    """
    status_vars = {}
    proto = Proto(BytesIO(data))
    try:
        while proto.offset < len(data):
            code = proto.get_fixed_int(1)
            if code in _FIXED_STATUS_VARS:
                name, size = _FIXED_STATUS_VARS[code]
                status_vars[name] = proto.get_fixed_int(size)
            elif code == Q_CATALOG_CODE:
                status_vars['Q_CATALOG_CODE'] = proto.read(proto.get_fixed_int(1))
                proto.get_filler(1)
            elif code == Q_AUTO_INCREMENT:
                # auto_increment_increment, auto_increment_offset
                status_vars['Q_AUTO_INCREMENT'] = (proto.get_fixed_int(2), proto.get_fixed_int(2))
            elif code == Q_CHARSET_CODE:
                # character_set_client, collation_connection, collation_server
                status_vars['Q_CHARSET_CODE'] = (proto.get_fixed_int(2), proto.get_fixed_int(2),
                                                 proto.get_fixed_int(2))
            elif code == Q_TIME_ZONE_CODE:
                status_vars['Q_TIME_ZONE_CODE'] = proto.read(proto.get_fixed_int(1))
            elif code == Q_CATALOG_NZ_CODE:
                status_vars['Q_CATALOG_NZ_CODE'] = proto.read(proto.get_fixed_int(1))
            elif code == Q_INVOKER:
                user = proto.read(proto.get_fixed_int(1))
                host = proto.read(proto.get_fixed_int(1))
                status_vars['Q_INVOKER'] = {'user': user, 'host': host}
            elif code == Q_UPDATED_DB_NAMES:
                count = proto.get_fixed_int(1)
                names = []
                if count != OVER_MAX_DBS_IN_EVENT_MTS:
                    for _ in range(count):
                        names.append(_read_null_str(proto))
                status_vars['Q_UPDATED_DB_NAMES'] = names
            else:
                logger.debug("Unknown status variable code %d at %d, stop parsing", code, proto.offset - 1)
                break
    except TruncatedInputError as e:
        logger.debug("Status variables cut short: %s", e)
    return status_vars


def trim_unprintable(text):
    """
    Strip non printable characters from both ends

    >>> trim_unprintable('\\x00INSERT INTO t VALUES (1)\\n')
    'INSERT INTO t VALUES (1)'
    >>> trim_unprintable('\\x00\\x01')
    ''
    """
    start, end = 0, len(text)
    while start < end and not text[start].isprintable():
        start += 1
    while end > start and not text[end - 1].isprintable():
        end -= 1
    return text[start:end]


def _to_bytes(value):
    if isinstance(value, str):
        return value.encode('utf-8')
    return bytes(value)


class QueryEvent(Packet):
    '''
    https://dev.mysql.com/doc/internals/en/query-event.html
    4              thread id
    4              execution time
    1              schema length
    2              error code
    2              status-vars length
    string[$len]   status-vars
    string[$len]   schema
    string[EOF]    query, length derived from the event length
    '''
    __slots__ = ('thread_id', 'exec_time', 'error_code', 'status_variables', 'database_name', 'sql_statement')

    FIXED_LENGTH = 4 + 4 + 1 + 2 + 2

    def __init__(self, thread_id=0, exec_time=0, error_code=0, status_variables=b'', database_name=b'',
                 sql_statement=b''):
        self.thread_id = thread_id
        self.exec_time = exec_time
        self.error_code = error_code
        self.status_variables = _to_bytes(status_variables)
        self.database_name = _to_bytes(database_name)
        self.sql_statement = _to_bytes(sql_statement)

    @property
    def status_vars(self):
        return parse_status_vars(self.status_variables)

    @property
    def encoding(self):
        """
        Python codec of character_set_client, utf-8 when unknown
        """
        charset = self.status_vars.get('Q_CHARSET_CODE')
        if charset:
            try:
                encoding = charset_by_id(charset[0]).encoding
                codecs.lookup(encoding)
                return encoding
            except (KeyError, LookupError):
                logger.debug("No codec for charset id %s", charset[0])
        return 'utf-8'

    def get_sql_statement(self, encoding=None):
        """
        The statement for display: decoded, with the non printable bytes at
        both ends removed (the NUL that ends the schema name included).
        Lossy, do not execute the result.
        """
        return trim_unprintable(self.sql_statement.decode(encoding or self.encoding, 'replace'))

    def getEventBody(self):
        payload = bytearray()

        payload.extend(Proto.build_fixed_int(4, self.thread_id))
        payload.extend(Proto.build_fixed_int(4, self.exec_time))
        payload.extend(Proto.build_fixed_int(1, len(self.database_name)))
        payload.extend(Proto.build_fixed_int(2, self.error_code))
        payload.extend(Proto.build_fixed_int(2, len(self.status_variables)))
        payload.extend(self.status_variables)
        payload.extend(self.database_name)
        payload.extend(self.sql_statement)

        return payload

    getPayload = getEventBody

    @staticmethod
    def loadFromStream(proto, event_length, header_length):
        obj = QueryEvent()

        obj.thread_id = proto.get_fixed_int(4)
        obj.exec_time = proto.get_fixed_int(4)
        database_name_length = proto.get_fixed_int(1)
        obj.error_code = proto.get_fixed_int(2)
        status_length = proto.get_fixed_int(2)

        obj.status_variables = proto.read(status_length)
        obj.database_name = proto.read(database_name_length)

        sql_length = event_length - (header_length + QueryEvent.FIXED_LENGTH + status_length + database_name_length)
        if sql_length < 0:
            raise FormatError("query event length %d is shorter than its %d byte header, "
                              "%d byte status block and %d byte schema" % (
                                  event_length, header_length, status_length, database_name_length))
        obj.sql_statement = proto.read(sql_length)

        return obj
