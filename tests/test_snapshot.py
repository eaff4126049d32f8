from __future__ import annotations

import copy
import json
import unittest

from markov_slm import MarkovModel, SnapshotError
from markov_slm.snapshot import SNAPSHOT_FORMAT, freeze_symbol


def valid_snapshot() -> dict:
    return {
        "format": SNAPSHOT_FORMAT,
        "depth": 1,
        "symbols": ["", "a", "b"],
        "counts": {
            "0": {"total": 1, "suffixes": {"1": 1}},
            "1": {"total": 3, "suffixes": {"2": 2, "0": 1}},
            "2": {"total": 2, "suffixes": {"1": 2}},
        },
    }


class SnapshotLoadTests(unittest.TestCase):
    def test_valid_snapshot_matches_training(self) -> None:
        loaded = MarkovModel.from_snapshot(valid_snapshot())
        trained = MarkovModel(1).train(["a", "b", "a", "b", "a"])
        self.assertEqual(loaded.to_snapshot(), trained.to_snapshot())

    def test_integer_suffix_keys_are_accepted(self) -> None:
        data = valid_snapshot()
        data["counts"]["0"]["suffixes"] = {1: 1}
        loaded = MarkovModel.from_snapshot(data)
        self.assertEqual(loaded.transitions([""]), {"a": 1})

    def test_format_field_is_optional(self) -> None:
        data = valid_snapshot()
        del data["format"]
        self.assertEqual(MarkovModel.from_snapshot(data).depth, 1)

    def test_malformed_snapshots_fail_fast(self) -> None:
        def mutate(fn):
            data = copy.deepcopy(valid_snapshot())
            fn(data)
            return data

        cases = {
            "not a mapping": ["depth", 1],
            "missing depth": mutate(lambda d: d.pop("depth")),
            "missing symbols": mutate(lambda d: d.pop("symbols")),
            "missing counts": mutate(lambda d: d.pop("counts")),
            "zero depth": mutate(lambda d: d.update(depth=0)),
            "string depth": mutate(lambda d: d.update(depth="1")),
            "bool depth": mutate(lambda d: d.update(depth=True)),
            "empty symbols": mutate(lambda d: d.update(symbols=[])),
            "duplicate symbols": mutate(lambda d: d.update(symbols=["", "a", "a"])),
            "symbols not a list": mutate(lambda d: d.update(symbols="ab")),
            "counts not a mapping": mutate(lambda d: d.update(counts=[1, 2])),
            "prefix wrong depth": mutate(lambda d: d["counts"].update({"0,1": d["counts"].pop("0")})),
            "prefix not numeric": mutate(lambda d: d["counts"].update({"x": d["counts"].pop("0")})),
            "prefix out of range": mutate(lambda d: d["counts"].update({"9": d["counts"].pop("0")})),
            "suffix out of range": mutate(lambda d: d["counts"]["0"].update(suffixes={"7": 1})),
            "negative suffix": mutate(lambda d: d["counts"]["0"].update(suffixes={"-1": 1})),
            "zero count": mutate(lambda d: d["counts"]["0"].update(total=0, suffixes={"1": 0})),
            "total mismatch": mutate(lambda d: d["counts"]["1"].update(total=4)),
            "missing total": mutate(lambda d: d["counts"]["1"].pop("total")),
            "empty suffixes": mutate(lambda d: d["counts"]["1"].update(suffixes={})),
            "entry not a mapping": mutate(lambda d: d["counts"].update({"2": 5})),
            "duplicate prefix": mutate(lambda d: d["counts"].update({"00": {"total": 1, "suffixes": {"1": 1}}})),
            "unknown format": mutate(lambda d: d.update(format="other/9")),
            "float suffix key": mutate(lambda d: d["counts"]["0"].update(suffixes={1.7: 1})),
            "bool suffix key": mutate(lambda d: d["counts"]["0"].update(suffixes={True: 1})),
            "padded string key": mutate(lambda d: d["counts"]["0"].update(suffixes={" 1 ": 1})),
            "signed string key": mutate(lambda d: d["counts"]["0"].update(suffixes={"+1": 1})),
            "padded prefix key": mutate(lambda d: d["counts"].update({" 0": d["counts"].pop("0")})),
            "non-string prefix key": mutate(lambda d: d["counts"].update({0: d["counts"].pop("0")})),
        }
        for label, data in cases.items():
            with self.subTest(case=label):
                with self.assertRaises(SnapshotError):
                    MarkovModel.from_snapshot(data)

    def test_invalid_json_is_a_snapshot_error(self) -> None:
        with self.assertRaises(SnapshotError):
            MarkovModel.from_json("{not json")
        with self.assertRaises(SnapshotError):
            MarkovModel.from_json(json.dumps({"depth": 1}))

    def test_snapshot_error_is_value_error(self) -> None:
        with self.assertRaises(ValueError):
            MarkovModel.from_snapshot({})

    def test_freeze_symbol_converts_nested_lists(self) -> None:
        self.assertEqual(freeze_symbol(["a", [1, 2]]), ("a", (1, 2)))
        self.assertEqual(freeze_symbol("a"), "a")


if __name__ == "__main__":
    unittest.main()
