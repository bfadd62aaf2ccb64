# coding=utf-8
import logging
import os
import sys
from logging.handlers import RotatingFileHandler

FORMAT = '%(asctime)s %(levelname)s [%(process)d] %(filename)s %(message)s '


def init_logger(level=logging.INFO, log_file=None, logger=None):
    """初始化logger"""
    if logger is None:
        logger = logging.getLogger('py_mysql_binlogparser')
    fmt = logging.Formatter(FORMAT)

    if log_file:
        log_dir = os.path.dirname(os.path.abspath(log_file))
        if not os.path.isdir(log_dir):
            os.makedirs(log_dir)
        # 单文件最大10M
        file_handler = RotatingFileHandler(log_file, mode='a', maxBytes=10240000, backupCount=100,
                                           encoding="utf8")
        file_handler.setFormatter(fmt)
        logger.addHandler(file_handler)

    stdout_handler = logging.StreamHandler(sys.stdout)
    stdout_handler.setFormatter(fmt)
    logger.addHandler(stdout_handler)
    logger.setLevel(level)

    return logger
