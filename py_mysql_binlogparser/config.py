# coding=utf-8
import configparser
import logging

from py_mysql_binlogparser.constants.EVENT_TYPE import LOG_EVENT_TYPES

DEFAULTS = {
    "Logging": {
        "level": str(logging.INFO),
        "file": "",
    },
    "Parser": {
        "log_file": "mysql-bin.000001",
        "follow_rotation": "false",
        "event_type_count": str(LOG_EVENT_TYPES),
        "strict": "false",
        "verify_checksum": "false",
    },
}


def load_config(conf_file=None):
    """
    ConfigParser holding the defaults, overridden by ``conf_file`` when it exists
    """
    config = configparser.ConfigParser()
    config.read_dict(DEFAULTS)
    if conf_file:
        config.read(conf_file)
    return config


def parser_options(config):
    """
    [Parser] section as BinLogStreamReader keyword arguments
    """
    section = config["Parser"]
    return {
        "log_file": section["log_file"],
        "follow_rotation": section.getboolean("follow_rotation"),
        "event_type_count": section.getint("event_type_count"),
        "strict": section.getboolean("strict"),
        "verify_checksum": section.getboolean("verify_checksum"),
    }
