import unittest
import os
import sys
from unittest import mock

sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from utils.model_config import ModelConfig, DEFAULT_MODEL


class TestModelConfig(unittest.TestCase):
    def test_default_model(self):
        with mock.patch.dict(os.environ, {}, clear=True):
            self.assertEqual(ModelConfig.get_config()["model"], DEFAULT_MODEL)

    def test_environment_selects_model(self):
        with mock.patch.dict(os.environ, {"GEMINI_MODEL": "gemini-2.0-flash"}):
            self.assertEqual(ModelConfig.get_config()["model"], "gemini-2.0-flash")

    def test_explicit_key_wins(self):
        with mock.patch.dict(os.environ, {"GEMINI_MODEL": "gemini-2.0-flash"}):
            self.assertEqual(ModelConfig.get_config("gemini-2.5-flash")["model"], "gemini-2.5-flash")

    def test_unknown_model(self):
        with self.assertRaises(ValueError):
            ModelConfig.get_config("gpt-4")

    def test_generation_config_shape(self):
        self.assertEqual(
            ModelConfig.generation_config(DEFAULT_MODEL),
            {"max_output_tokens": 8192, "temperature": 0.7},
        )
        self.assertIn(DEFAULT_MODEL, ModelConfig.get_available_models())


if __name__ == '__main__':
    unittest.main()
