# coding=utf-8
from py_mysql_binlogparser.protocol.packet import Packet
from py_mysql_binlogparser.protocol.proto import Proto


class RandEvent(Packet):
    '''
    8              seed1
    8              seed2
    Both seeds are kept as raw bytes.
    '''
    __slots__ = ('seed1', 'seed2')

    def __init__(self, seed1=bytes(8), seed2=bytes(8)):
        self.seed1 = bytes(seed1)
        self.seed2 = bytes(seed2)

    def getEventBody(self):
        payload = bytearray()
        payload.extend(Proto.build_fixed_str(8, self.seed1))
        payload.extend(Proto.build_fixed_str(8, self.seed2))
        return payload

    getPayload = getEventBody

    @staticmethod
    def loadFromStream(proto, event_length=None, header_length=None):
        obj = RandEvent()
        obj.seed1 = proto.get_fixed_str(8)
        obj.seed2 = proto.get_fixed_str(8)
        return obj
