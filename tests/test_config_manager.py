import json
import os
import shutil
import unittest
from unittest.mock import patch

from recycleme.core import config_manager


class TestConfigManager(unittest.TestCase):
    def setUp(self):
        self.test_dir = "tests/data/config"
        os.makedirs(self.test_dir, exist_ok=True)
        self.path = os.path.join(self.test_dir, "config.json")

    def tearDown(self):
        if os.path.exists("tests/data"):
            shutil.rmtree("tests/data")

    @patch.dict(os.environ, {}, clear=True)
    def test_defaults_without_file(self):
        config = config_manager.load_config(self.path)
        self.assertEqual(config["server_url"], "http://localhost:8080")
        self.assertIsNone(config["request_timeout"])
        self.assertEqual(config["ui_port"], 8081)

    @patch.dict(os.environ, {}, clear=True)
    def test_file_overrides_defaults(self):
        with open(self.path, "w") as f:
            json.dump({"server_url": "http://recycle.example.com/", "request_timeout": 5}, f)

        config = config_manager.load_config(self.path)

        self.assertEqual(config["server_url"], "http://recycle.example.com")
        self.assertEqual(config["request_timeout"], 5)
        self.assertEqual(config["log_level"], "INFO")

    @patch.dict(os.environ, {"RECYCLEME_SERVER_URL": "http://env:9000", "RECYCLEME_PORT": "9100"}, clear=True)
    def test_environment_overrides_file(self):
        with open(self.path, "w") as f:
            json.dump({"server_url": "http://file:8080"}, f)

        config = config_manager.load_config(self.path)

        self.assertEqual(config["server_url"], "http://env:9000")
        self.assertEqual(config["ui_port"], 9100)

    @patch.dict(os.environ, {"RECYCLEME_PORT": "not-a-port"}, clear=True)
    def test_invalid_environment_ignored(self):
        config = config_manager.load_config(self.path)
        self.assertEqual(config["ui_port"], 8081)

    @patch.dict(os.environ, {}, clear=True)
    def test_corrupt_file_falls_back_to_defaults(self):
        with open(self.path, "w") as f:
            f.write("{not json")

        config = config_manager.load_config(self.path)

        self.assertEqual(config["server_url"], "http://localhost:8080")

    @patch.dict(os.environ, {}, clear=True)
    def test_save_round_trip(self):
        config = config_manager.load_config(self.path)
        config["title"] = "Kiosk 3"

        config_manager.save_config(config, self.path)

        self.assertEqual(config_manager.load_config(self.path)["title"], "Kiosk 3")


if __name__ == '__main__':
    unittest.main()
