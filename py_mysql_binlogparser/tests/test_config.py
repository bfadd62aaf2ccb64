import logging
import os
import shutil
import tempfile
import unittest

from py_mysql_binlogparser.binparser import main
from py_mysql_binlogparser.config import load_config, parser_options
from py_mysql_binlogparser.constants.EVENT_TYPE import BINLOG_MAGIC, FORMAT_DESCRIPTION_EVENT, QUERY_EVENT, XID_EVENT
from py_mysql_binlogparser.lib.log import init_logger
from py_mysql_binlogparser.packet.binlog_event import encode_event
from py_mysql_binlogparser.packet.format_description_event import FormatDescriptionEvent
from py_mysql_binlogparser.packet.query import QueryEvent
from py_mysql_binlogparser.packet.xid import XidEvent

__all__ = ["TestConfig", "TestMain"]


class TestConfig(unittest.TestCase):

    def setUp(self):
        self.conf_dir = tempfile.mkdtemp()

    def tearDown(self):
        shutil.rmtree(self.conf_dir)

    def test_defaults(self):
        config = load_config()
        self.assertEqual(config["Logging"].getint("level"), logging.INFO)
        self.assertEqual(parser_options(config), {
            "log_file": "mysql-bin.000001",
            "follow_rotation": False,
            "event_type_count": 27,
            "strict": False,
            "verify_checksum": False,
        })

    def test_conf_file(self):
        conf_file = os.path.join(self.conf_dir, "parser.conf")
        with open(conf_file, "w") as fw:
            fw.write("[Logging]\nlevel = 10\n\n"
                     "[Parser]\nlog_file = /tmp/binlog/mysql-bin.000042\nfollow_rotation = yes\n"
                     "event_type_count = 35\n")
        config = load_config(conf_file)
        options = parser_options(config)
        self.assertEqual(config["Logging"].getint("level"), logging.DEBUG)
        self.assertEqual(options["log_file"], "/tmp/binlog/mysql-bin.000042")
        self.assertTrue(options["follow_rotation"])
        self.assertEqual(options["event_type_count"], 35)
        self.assertFalse(options["strict"])

    def test_missing_conf_file(self):
        config = load_config(os.path.join(self.conf_dir, "absent.conf"))
        self.assertEqual(parser_options(config)["log_file"], "mysql-bin.000001")

    def test_log_file(self):
        log_file = os.path.join(self.conf_dir, "logs", "parser.log")
        logger = init_logger(logging.DEBUG, log_file, logging.getLogger("binlogparser_test"))
        try:
            logger.debug("written to file")
            for handler in logger.handlers:
                handler.flush()
            with open(log_file) as fr:
                self.assertIn("written to file", fr.read())
        finally:
            for handler in list(logger.handlers):
                handler.close()
                logger.removeHandler(handler)


class TestMain(unittest.TestCase):

    def setUp(self):
        self.work_dir = tempfile.mkdtemp()
        self.log_file = os.path.join(self.work_dir, "mysql-bin.000001")

        data = bytearray(BINLOG_MAGIC)
        for type_code, body in ((FORMAT_DESCRIPTION_EVENT, FormatDescriptionEvent()),
                                (QUERY_EVENT, QueryEvent(database_name="test", sql_statement="DROP TABLE t")),
                                (XID_EVENT, XidEvent(7))):
            data.extend(encode_event(type_code, body, start_position=len(data)))
        with open(self.log_file, "wb") as fw:
            fw.write(data)

        self.conf_file = os.path.join(self.work_dir, "parser.conf")
        with open(self.conf_file, "w") as fw:
            fw.write("[Logging]\nlevel = 20\n\n[Parser]\nlog_file = %s\n" % self.log_file)

    def tearDown(self):
        shutil.rmtree(self.work_dir)

    def test_main(self):
        with self.assertLogs("py_mysql_binlogparser", "INFO") as logs:
            main(["binparser", self.conf_file])

        output = "\n".join(logs.output)
        self.assertIn("DROP TABLE t", output)
        self.assertIn("XID_EVENT", output)
        self.assertIn("Parsed 3 events", output)


if __name__ == "__main__":
    unittest.main()
