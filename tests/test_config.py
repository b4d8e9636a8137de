"""
FactGPT Configuration Test Suite
"""

import logging
import shutil
import tempfile
import unittest
from pathlib import Path
from unittest import mock

from factgpt import ResolutionProtocol, SQLiteStateStore, config
from factgpt.logging_config import StructuredFormatter, configure_from_env
from factgpt.signing import Ed25519OracleVerifier


class TestConfig(unittest.TestCase):

    def test_defaults_valid_in_dev(self):
        with mock.patch.object(config, "ENV", "dev"), mock.patch.object(config, "ORACLE_URL", ""):
            checks = config.validate_config()
        self.assertTrue(checks["oracle_url"])
        self.assertTrue(checks["prompt_max_bytes"])
        self.assertEqual(config.PROMPT_MAX_BYTES, 100)

    def test_production_requires_oracle_url(self):
        with mock.patch.object(config, "ENV", "prod"), mock.patch.object(config, "ORACLE_URL", ""):
            self.assertTrue(config.is_production())
            self.assertFalse(config.validate_config()["oracle_url"])

    def test_debug_flag(self):
        with mock.patch.dict("os.environ", {"FACTGPT_DEBUG": "yes"}):
            self.assertTrue(config.is_debug())
        with mock.patch.dict("os.environ", {"FACTGPT_DEBUG": ""}):
            self.assertFalse(config.is_debug())


class TestFromConfig(unittest.TestCase):

    def setUp(self):
        self.tmpdir = tempfile.mkdtemp()
        self.addCleanup(shutil.rmtree, self.tmpdir, True)

    def test_protocol_uses_configured_db(self):
        db_path = str(Path(self.tmpdir) / "nested" / "factgpt.db")
        with mock.patch.object(config, "DB_PATH", db_path):
            protocol = ResolutionProtocol.from_config(Ed25519OracleVerifier())

        self.assertIsInstance(protocol.store, SQLiteStateStore)
        self.addCleanup(protocol.store.close)
        self.assertEqual(str(protocol.store.db_path), db_path)
        self.assertTrue(Path(db_path).exists())


class TestConfigureFromEnv(unittest.TestCase):

    def setUp(self):
        root = logging.getLogger()
        self._handlers = root.handlers[:]
        self._level = root.level
        self.addCleanup(self._restore)

    def _restore(self):
        root = logging.getLogger()
        root.handlers[:] = self._handlers
        root.setLevel(self._level)

    def test_json_logging(self):
        with mock.patch.object(config, "LOG_LEVEL", "WARNING"), \
                mock.patch.object(config, "LOG_JSON", True), \
                mock.patch.dict("os.environ", {"FACTGPT_DEBUG": ""}):
            configure_from_env()

        root = logging.getLogger()
        self.assertEqual(root.level, logging.WARNING)
        self.assertIsInstance(root.handlers[0].formatter, StructuredFormatter)

    def test_debug_overrides_level(self):
        with mock.patch.object(config, "LOG_LEVEL", "WARNING"), \
                mock.patch.dict("os.environ", {"FACTGPT_DEBUG": "1"}):
            configure_from_env()

        self.assertEqual(logging.getLogger().level, logging.DEBUG)


if __name__ == "__main__":
    unittest.main()
