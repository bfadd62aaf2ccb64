#!/usr/bin/env python
# coding=utf-8

BINLOG_MAGIC                            = b'\xfe\x62\x69\x6e'
EVENT_HEADER_FIX_LEN                    = 19

# Size of the post-header length table carried by a FORMAT_DESCRIPTION_EVENT.
# 27 for 5.5 servers, later servers append more entries.
LOG_EVENT_TYPES                         = 27

UNKNOWN_EVENT                           = 0
START_EVENT_V3                          = 1
QUERY_EVENT                             = 2
STOP_EVENT                              = 3
ROTATE_EVENT                            = 4
INTVAR_EVENT                            = 5
LOAD_EVENT                              = 6
SLAVE_EVENT                             = 7
CREATE_FILE_EVENT                       = 8
APPEND_BLOCK_EVENT                      = 9
EXEC_LOAD_EVENT                         = 10
DELETE_FILE_EVENT                       = 11
# same class as LOAD_EVENT with a longer sql_ex
NEW_LOAD_EVENT                          = 12
RAND_EVENT                              = 13
USER_VAR_EVENT                          = 14
FORMAT_DESCRIPTION_EVENT                = 15
XID_EVENT                               = 16
BEGIN_LOAD_QUERY_EVENT                  = 17
EXECUTE_LOAD_QUERY_EVENT                = 18
TABLE_MAP_EVENT                         = 19
# 5.1.0 to 5.1.15 only
PRE_GA_WRITE_ROWS_EVENT                 = 20
PRE_GA_UPDATE_ROWS_EVENT                = 21
PRE_GA_DELETE_ROWS_EVENT                = 22
WRITE_ROWS_EVENT                        = 23
UPDATE_ROWS_EVENT                       = 24
DELETE_ROWS_EVENT                       = 25
INCIDENT_EVENT                          = 26
HEARTBEAT_LOG_EVENT                     = 27

# INTVAR_EVENT subtypes
INVALID_INT                             = 0
LAST_INSERT_ID                          = 1
INSERT_ID                               = 2

BINLOG_CHECKSUM_ALG_OFF                 = 0
BINLOG_CHECKSUM_ALG_CRC32               = 1
BINLOG_CHECKSUM_ALG_UNDEF               = 255
BINLOG_CHECKSUM_ALG_DESC_LEN            = 1
BINLOG_CHECKSUM_LEN                     = 4
CHECKSUM_VERSION_SPLIT                  = (5, 6, 1)

_EVENT_NAMES = (
    "UNKNOWN_EVENT",
    "START_EVENT_V3",
    "QUERY_EVENT",
    "STOP_EVENT",
    "ROTATE_EVENT",
    "INTVAR_EVENT",
    "LOAD_EVENT",
    "SLAVE_EVENT",
    "CREATE_FILE_EVENT",
    "APPEND_BLOCK_EVENT",
    "EXEC_LOAD_EVENT",
    "DELETE_FILE_EVENT",
    "NEW_LOAD_EVENT",
    "RAND_EVENT",
    "USER_VAR_EVENT",
    "FORMAT_DESCRIPTION_EVENT",
    "XID_EVENT",
    "BEGIN_LOAD_QUERY_EVENT",
    "EXECUTE_LOAD_QUERY_EVENT",
    "TABLE_MAP_EVENT",
    "PRE_GA_WRITE_ROWS_EVENT",
    "PRE_GA_UPDATE_ROWS_EVENT",
    "PRE_GA_DELETE_ROWS_EVENT",
    "WRITE_ROWS_EVENT",
    "UPDATE_ROWS_EVENT",
    "DELETE_ROWS_EVENT",
    "INCIDENT_EVENT",
    "HEARTBEAT_LOG_EVENT",
)


def event_type_name(code):
    """
    Canonical name of an event type code, None outside 0..27

    >>> event_type_name(QUERY_EVENT)
    'QUERY_EVENT'
    >>> event_type_name(DELETE_ROWS_EVENT)
    'DELETE_ROWS_EVENT'
    >>> event_type_name(200) is None
    True
    """
    if isinstance(code, int) and 0 <= code < len(_EVENT_NAMES):
        return _EVENT_NAMES[code]
    return None


def event_type_map():
    return dict(enumerate(_EVENT_NAMES))


if __name__ == "__main__":
    import doctest
    doctest.testmod()
