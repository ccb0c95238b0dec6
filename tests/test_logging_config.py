import logging
import unittest

from pitchscope.logger import get_logger
from pitchscope.logging_config import MODULE_LOG_LEVELS, setup_logging


class TestLoggingSetup(unittest.TestCase):
    def tearDown(self):
        setup_logging()

    def test_get_logger_is_cached(self):
        self.assertIs(get_logger("pitchscope.detection.tuner"), get_logger("pitchscope.detection.tuner"))

    def test_default_levels(self):
        setup_logging()
        for name, level in MODULE_LOG_LEVELS.items():
            self.assertEqual(logging.getLogger(name).level, level, name)

    def test_override_applies_to_package_loggers_only(self):
        setup_logging("DEBUG")
        self.assertEqual(logging.getLogger("pitchscope.detection").level, logging.DEBUG)
        self.assertEqual(logging.getLogger("aubio").level, logging.ERROR)

    def test_single_handler_after_repeated_setup(self):
        setup_logging()
        setup_logging()
        self.assertEqual(len(logging.getLogger("pitchscope").handlers), 1)
        self.assertFalse(logging.getLogger("pitchscope").propagate)
        self.assertEqual(logging.getLogger("pitchscope.core").handlers, [])


if __name__ == "__main__":
    unittest.main()
