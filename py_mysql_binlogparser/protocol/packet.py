# coding=utf-8

import logging

logger = logging.getLogger('py_mysql_binlogparser')


class Packet(object):
    """
    Basic class for all decoded binlog structures to inherit from
    """
    __slots__ = ()

    def getPayload(self):
        """
        Return the encoded structure as a bytearray
        """
        raise NotImplementedError('getPayload')

    def _fields(self):
        return tuple(getattr(self, name, None) for name in self.__slots__)

    def __eq__(self, other):
        if type(self) is not type(other):
            return NotImplemented
        return self._fields() == other._fields()

    def __ne__(self, other):
        result = self.__eq__(other)
        if result is NotImplemented:
            return result
        return not result

    __hash__ = None

    def __repr__(self):
        return '%s(%s)' % (self.__class__.__name__, ', '.join(
            '%s=%r' % (name, getattr(self, name, None)) for name in self.__slots__))


def hexdump(packet):
    """
    Hex and ascii rendering, 16 bytes per line
    """
    offset = 0
    dump = ''

    while offset < len(packet):
        dump += hex(offset)[2:].zfill(8).upper()
        dump += '  '

        for x in range(16):
            if offset + x >= len(packet):
                dump += '   '
            else:
                dump += hex(packet[offset + x])[2:].upper().zfill(2)
                dump += ' '
                if x == 7:
                    dump += ' '

        dump += '  '

        for x in range(16):
            if offset + x >= len(packet):
                break
            if packet[offset + x] < 32 or packet[offset + x] >= 127:
                dump += '.'
            else:
                dump += chr(packet[offset + x])

            if x == 7:
                dump += ' '

        dump += '\n'
        offset += 16

    return dump


def dump(packet):
    """
    Dumps a packet to the logger
    """
    if not logger.isEnabledFor(logging.DEBUG):
        return
    logger.debug('Packet Dump\n%s', hexdump(packet))
