#!/usr/bin/env python3
"""Test suite for logging configuration"""

import logging
import os
import tempfile
import unittest
from pysatpos.logger import (
    ROOT_LOGGER, ColoredFormatter, LogContext,
    setup_logger, setup_logger_from_config
)


class TestSetupLogger(unittest.TestCase):
    """Test logger setup"""

    def tearDown(self):
        logger = logging.getLogger(ROOT_LOGGER)
        for handler in list(logger.handlers):
            logger.removeHandler(handler)
            handler.close()
        logger.setLevel(logging.NOTSET)

    def test_console_handler(self):
        logger = setup_logger(level="DEBUG")

        self.assertEqual(logger.name, ROOT_LOGGER)
        self.assertEqual(logger.level, logging.DEBUG)
        self.assertEqual(len(logger.handlers), 1)

    def test_repeated_setup_replaces_handlers(self):
        setup_logger(level="INFO")
        logger = setup_logger(level="WARNING")

        self.assertEqual(len(logger.handlers), 1)
        self.assertEqual(logger.level, logging.WARNING)

    def test_trace_level(self):
        logger = setup_logger(level="TRACE", console=False)
        self.assertEqual(logger.level, 5)
        self.assertEqual(logging.getLevelName(5), "TRACE")

    def test_file_handler(self):
        with tempfile.TemporaryDirectory() as tmp:
            path = os.path.join(tmp, "satpos.log")
            logger = setup_logger(level="INFO", log_file=path, console=False)
            logging.getLogger(f"{ROOT_LOGGER}.satellite").info("decoded")
            for handler in logger.handlers:
                handler.flush()

            with open(path) as f:
                self.assertIn("decoded", f.read())

            for handler in list(logger.handlers):
                logger.removeHandler(handler)
                handler.close()

    def test_unknown_level(self):
        with self.assertRaises(ValueError):
            setup_logger(level="VERBOSE")


class TestColoredFormatter(unittest.TestCase):
    def test_record_not_modified(self):
        record = logging.LogRecord("pysatpos", logging.WARNING, __file__, 1,
                                   "orbit", None, None)
        output = ColoredFormatter('%(levelname)s %(message)s').format(record)

        self.assertIn("WARNING", output)
        self.assertIn("\033[33m", output)
        self.assertEqual(record.levelname, "WARNING")


class TestLogContext(unittest.TestCase):
    def test_level_restored(self):
        logger = logging.getLogger(f"{ROOT_LOGGER}.satellite.satellite_position")
        logger.setLevel(logging.WARNING)

        with LogContext(logger, "DEBUG") as ctx:
            self.assertIs(ctx, logger)
            self.assertEqual(logger.level, logging.DEBUG)

        self.assertEqual(logger.level, logging.WARNING)
        logger.setLevel(logging.NOTSET)


class TestSetupFromConfig(unittest.TestCase):
    """Test dictionary-based configuration"""

    def tearDown(self):
        for name in (ROOT_LOGGER, 'pysatpos.satellite.ephemeris'):
            logger = logging.getLogger(name)
            for handler in list(logger.handlers):
                logger.removeHandler(handler)
                handler.close()
            logger.setLevel(logging.NOTSET)

    def test_module_levels(self):
        module = 'pysatpos.satellite.ephemeris'
        logger = setup_logger_from_config({
            'level': 'ERROR',
            'module_levels': {module: 'DEBUG'},
        })

        self.assertIs(logger, logging.getLogger(ROOT_LOGGER))
        self.assertEqual(logger.level, logging.ERROR)
        self.assertEqual(logging.getLogger(module).level, logging.DEBUG)
        self.assertEqual(logging.getLogger(module).handlers, [])
        # Module DEBUG records reach the package handler
        self.assertEqual(logger.handlers[0].level, logging.DEBUG)

    def test_defaults(self):
        logger = setup_logger_from_config({'console': False})

        self.assertEqual(logger.level, logging.WARNING)
        self.assertEqual(logger.handlers, [])

    def test_invalid_module_level(self):
        root = logging.getLogger(ROOT_LOGGER)
        root.addHandler(logging.NullHandler())

        with self.assertRaises(ValueError):
            setup_logger_from_config({'module_levels': {'pysatpos.satellite': 'LOUD'}})

        # Nothing was reconfigured
        self.assertEqual(len(root.handlers), 1)
        self.assertIsInstance(root.handlers[0], logging.NullHandler)


if __name__ == '__main__':
    unittest.main()
