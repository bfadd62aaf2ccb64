# coding=utf-8
import logging
import os
import sys

from py_mysql_binlogparser.binlogstream import BinLogStreamReader
from py_mysql_binlogparser.config import load_config, parser_options
from py_mysql_binlogparser.constants.EVENT_TYPE import QUERY_EVENT
from py_mysql_binlogparser.lib.log import init_logger


def main(argv=None):
    argv = sys.argv if argv is None else argv
    conf_file = len(argv) > 1 and argv[1] or os.path.dirname(__file__) + "/example.conf"
    config = load_config(conf_file)

    logger = init_logger(config["Logging"].getint("level"), config["Logging"].get("file") or None)

    options = parser_options(config)
    logger.info("Parse binlog %s (follow rotation: %s)" % (options["log_file"], options["follow_rotation"]))

    reader = BinLogStreamReader(**options)
    count = 0
    try:
        for event in reader:
            count += 1
            if event.check_log_type(QUERY_EVENT):
                logger.info("%s %s" % (event, event.get_sql_statement()))
            else:
                logger.info(str(event))
    except KeyboardInterrupt:
        logger.info("Stop parsing %s after %d events" % (reader.log_file, count))
    finally:
        reader.close()

    logger.info("Parsed %d events, last file %s" % (count, reader.log_file))


if __name__ == "__main__":
    main()
