# coding=utf-8
from py_mysql_binlogparser.constants.EVENT_TYPE import (
    FORMAT_DESCRIPTION_EVENT, INTVAR_EVENT, LOG_EVENT_TYPES, QUERY_EVENT, RAND_EVENT, ROTATE_EVENT,
    START_EVENT_V3, UNKNOWN_EVENT, XID_EVENT, event_type_name)
from py_mysql_binlogparser.errors import UnsupportedEventError
from py_mysql_binlogparser.packet.format_description_event import FormatDescriptionEvent
from py_mysql_binlogparser.packet.intvar import IntvarEvent
from py_mysql_binlogparser.packet.query import QueryEvent
from py_mysql_binlogparser.packet.rand import RandEvent
from py_mysql_binlogparser.packet.rotate import RotateEvent
from py_mysql_binlogparser.packet.unknown import UnknownEvent
from py_mysql_binlogparser.packet.xid import XidEvent

EVENT_CLASSES = {
    FORMAT_DESCRIPTION_EVENT: FormatDescriptionEvent,
    QUERY_EVENT: QueryEvent,
    INTVAR_EVENT: IntvarEvent,
    XID_EVENT: XidEvent,
    ROTATE_EVENT: RotateEvent,
    RAND_EVENT: RandEvent,
}

# refused in strict mode, skipped like any other unknown type otherwise
STRICT_UNSUPPORTED = (UNKNOWN_EVENT, START_EVENT_V3)


def event_class(type_code):
    return EVENT_CLASSES.get(type_code, UnknownEvent)


def parse_event_data(proto, type_code, event_length, header_length, event_type_count=LOG_EVENT_TYPES,
                     strict=False):
    """
    Decode the body of one event, the full header being already consumed.

    ``event_length`` is the header's event-length (minus the checksum
    trailer when there is one) and ``header_length`` the negotiated header
    length, extra header included.
    """
    if strict and type_code in STRICT_UNSUPPORTED:
        raise UnsupportedEventError(type_code, event_type_name(type_code))

    cls = event_class(type_code)
    if cls is FormatDescriptionEvent:
        return cls.loadFromStream(proto, event_length, header_length, event_type_count)
    return cls.loadFromStream(proto, event_length, header_length)
