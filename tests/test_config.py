import os
import tempfile
import unittest
from pathlib import Path
from unittest import mock

from core.errors import ConfigurationError
from utils.config import CONFIG_TEMPLATE, DEFAULT_REQUEST_TIMEOUT, config_path, load_config

COMPLETE = """\
SEARCH_API_URL=https://api.test/products/basic-search
DATA_FILE_PATH=C:\\barcode\\labels.txt
TEMPLATE_FILE_PATH=C:\\barcode\\STIC33X21.btw
LOGIN_API_URL=https://api.test/login
LOCATIONS_API_URL=https://api.test/locations
"""


class LoadConfigTestCase(unittest.TestCase):
    def setUp(self):
        self.temp_dir = tempfile.TemporaryDirectory()
        self.path = Path(self.temp_dir.name) / "config.txt"

    def tearDown(self):
        self.temp_dir.cleanup()

    def test_missing_file_writes_template(self):
        with self.assertRaises(ConfigurationError) as ctx:
            load_config(self.path)
        self.assertIn("restart", str(ctx.exception))
        self.assertEqual(self.path.read_text(encoding="utf-8"), CONFIG_TEMPLATE)

    def test_template_is_loadable(self):
        self.path.write_text(CONFIG_TEMPLATE, encoding="utf-8")
        config = load_config(self.path)
        self.assertTrue(config.search_api_url.startswith("https://"))

    def test_complete_file(self):
        self.path.write_text(COMPLETE, encoding="utf-8")
        config = load_config(self.path)

        self.assertEqual(config.search_api_url, "https://api.test/products/basic-search")
        self.assertEqual(config.data_file_path, "C:\\barcode\\labels.txt")
        self.assertEqual(config.template_file_path, "C:\\barcode\\STIC33X21.btw")
        self.assertEqual(config.login_api_url, "https://api.test/login")
        self.assertEqual(config.locations_api_url, "https://api.test/locations")
        self.assertEqual(config.request_timeout, DEFAULT_REQUEST_TIMEOUT)
        self.assertEqual(config.session_db_path, "data/session.sqlite")

    def test_incomplete_file_is_not_overwritten(self):
        partial = "SEARCH_API_URL=https://api.test/search\nLOGIN_API_URL=\n"
        self.path.write_text(partial, encoding="utf-8")
        with self.assertRaises(ConfigurationError) as ctx:
            load_config(self.path)
        self.assertIn("LOGIN_API_URL", str(ctx.exception))
        self.assertEqual(self.path.read_text(encoding="utf-8"), partial)

    def test_optional_keys(self):
        self.path.write_text(
            COMPLETE + "REQUEST_TIMEOUT=5\nSESSION_DB_PATH=/tmp/s.sqlite\n", encoding="utf-8"
        )
        config = load_config(self.path)
        self.assertEqual(config.request_timeout, 5.0)
        self.assertEqual(config.session_db_path, "/tmp/s.sqlite")

    def test_bad_timeout(self):
        for value in ["soon", "0", "-2"]:
            with self.subTest(value=value):
                self.path.write_text(COMPLETE + f"REQUEST_TIMEOUT={value}\n", encoding="utf-8")
                with self.assertRaises(ConfigurationError):
                    load_config(self.path)

    def test_path_from_environment(self):
        with mock.patch.dict(os.environ, {"LABELDESK_CONFIG": str(self.path)}):
            self.assertEqual(config_path(), self.path)
        with mock.patch.dict(os.environ, {}, clear=True):
            self.assertEqual(config_path(), Path("config.txt"))


if __name__ == "__main__":
    unittest.main()
