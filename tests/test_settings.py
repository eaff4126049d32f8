from __future__ import annotations

import os
import tempfile
import unittest
from pathlib import Path
from unittest import mock

from markov_slm.settings import load_settings


class SettingsTests(unittest.TestCase):
    def setUp(self) -> None:
        self._tmp = tempfile.TemporaryDirectory()
        self.env_path = Path(self._tmp.name) / ".env"

    def tearDown(self) -> None:
        self._tmp.cleanup()

    def test_defaults_without_env_file(self) -> None:
        with mock.patch.dict(os.environ, {}, clear=True):
            settings = load_settings(self.env_path)
        self.assertEqual(settings.depth, 2)
        self.assertEqual(settings.tokenizer, "char")
        self.assertFalse(settings.tokenizer_lowercase)
        self.assertEqual((settings.min_length, settings.max_length), (8, 24))
        self.assertIsNone(settings.seed)
        self.assertIsNone(settings.env_file)

    def test_env_file_is_overridden_by_environment(self) -> None:
        self.env_path.write_text(
            "# comment\nMARKOV_SLM_DEPTH=3\nMARKOV_SLM_TOKENIZER='word'\nMARKOV_SLM_SEED=11\nnoise\n",
            encoding="utf-8",
        )
        with mock.patch.dict(os.environ, {"MARKOV_SLM_DEPTH": "4", "MARKOV_SLM_TOKENIZER_LOWERCASE": "yes"}, clear=True):
            settings = load_settings(self.env_path)
        self.assertEqual(settings.depth, 4)
        self.assertEqual(settings.tokenizer, "word")
        self.assertTrue(settings.tokenizer_lowercase)
        self.assertEqual(settings.seed, 11)
        self.assertEqual(settings.env_file, self.env_path)

    def test_invalid_values_name_the_variable(self) -> None:
        cases = {
            "MARKOV_SLM_DEPTH": "0",
            "MARKOV_SLM_MIN_LENGTH": "many",
            "MARKOV_SLM_TOKENIZER": "bpe",
            "MARKOV_SLM_SEED": "x",
        }
        for key, value in cases.items():
            with self.subTest(key=key):
                with mock.patch.dict(os.environ, {key: value}, clear=True):
                    with self.assertRaisesRegex(ValueError, key):
                        load_settings(self.env_path)

    def test_max_length_must_cover_min_length(self) -> None:
        env = {"MARKOV_SLM_MIN_LENGTH": "10", "MARKOV_SLM_MAX_LENGTH": "5"}
        with mock.patch.dict(os.environ, env, clear=True):
            with self.assertRaises(ValueError):
                load_settings(self.env_path)


if __name__ == "__main__":
    unittest.main()
