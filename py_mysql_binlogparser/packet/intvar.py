# coding=utf-8
from py_mysql_binlogparser.constants.EVENT_TYPE import INSERT_ID, INVALID_INT, LAST_INSERT_ID
from py_mysql_binlogparser.protocol.packet import Packet
from py_mysql_binlogparser.protocol.proto import Proto


class IntvarEvent(Packet):
    '''
    1              type, LAST_INSERT_ID = 1 or INSERT_ID = 2
    8              value
    '''
    __slots__ = ('type', 'value')

    _TYPE_NAMES = {
        INVALID_INT: 'INVALID_INT',
        LAST_INSERT_ID: 'LAST_INSERT_ID',
        INSERT_ID: 'INSERT_ID',
    }

    def __init__(self, type=INSERT_ID, value=0):
        self.type = type
        self.value = value

    @property
    def type_name(self):
        return self._TYPE_NAMES.get(self.type)

    def getEventBody(self):
        payload = bytearray()
        payload.extend(Proto.build_fixed_int(1, self.type))
        payload.extend(Proto.build_fixed_int(8, self.value))
        return payload

    getPayload = getEventBody

    @staticmethod
    def loadFromStream(proto, event_length=None, header_length=None):
        obj = IntvarEvent()
        obj.type = proto.get_fixed_int(1)
        obj.value = proto.get_fixed_int(8)
        return obj
