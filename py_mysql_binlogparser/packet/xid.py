# coding=utf-8
from py_mysql_binlogparser.protocol.packet import Packet
from py_mysql_binlogparser.protocol.proto import Proto


class XidEvent(Packet):
    '''
    8              xid, the transaction that just committed
    '''
    __slots__ = ('xid',)

    def __init__(self, xid=0):
        self.xid = xid

    def getEventBody(self):
        return Proto.build_fixed_int(8, self.xid)

    getPayload = getEventBody

    @staticmethod
    def loadFromStream(proto, event_length=None, header_length=None):
        return XidEvent(proto.get_fixed_int(8))
