from __future__ import annotations

import unittest

from markov_slm.tokenizer import detokenize, tokenize


class TokenizerTests(unittest.TestCase):
    def test_char_mode_keeps_every_character(self) -> None:
        self.assertEqual(tokenize("Hi, yo"), ["H", "i", ",", " ", "y", "o"])
        self.assertEqual(detokenize(tokenize("Hi, yo")), "Hi, yo")

    def test_word_mode_splits_punctuation(self) -> None:
        tokens = tokenize("Hello, World!", "word", lowercase=True)
        self.assertEqual(tokens, ["hello", ",", "world", "!"])
        self.assertEqual(detokenize(tokens, "word"), "hello, world!")

    def test_word_mode_spaces_underscore_tokens(self) -> None:
        tokens = tokenize("call foo_bar _private now", "word")
        self.assertEqual(tokens, ["call", "foo_bar", "_private", "now"])
        self.assertEqual(detokenize(tokens, "word"), "call foo_bar _private now")

    def test_unknown_mode(self) -> None:
        with self.assertRaises(ValueError):
            tokenize("abc", "bpe")
        with self.assertRaises(ValueError):
            detokenize(["a"], "bpe")


if __name__ == "__main__":
    unittest.main()
