# coding=utf-8
import logging
import os

logger = logging.getLogger('py_mysql_binlogparser')


def open_source(name, relative_to=None):
    """
    Open a binlog file for reading.

    Rotate events name the next file without a directory, so a relative
    ``name`` is looked up next to the file that named it (``relative_to``).
    OSError is left to the caller.
    """
    path = name
    if relative_to and not os.path.isabs(name):
        path = os.path.join(relative_to, name)
    logger.debug("Open binlog file %s", path)
    return open(path, 'rb')
