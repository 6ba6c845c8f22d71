import json
import tempfile
import unittest
from datetime import datetime, timezone
from pathlib import Path

import storage
from models import Decision, Result


class TestStorage(unittest.TestCase):
    def setUp(self) -> None:
        self._temp_dir = tempfile.TemporaryDirectory()
        self._previous_dir = storage.DATA_DIR
        storage.DATA_DIR = Path(self._temp_dir.name)

    def tearDown(self) -> None:
        storage.DATA_DIR = self._previous_dir
        self._temp_dir.cleanup()

    def test_save_and_load_decision(self) -> None:
        decision = Decision(title="Test Decision", description="Pick one", scoring_scale=10)
        decision.add_criterion("Cost", weight=4)
        decision.add_option("Option A")
        decision.set_rating("Option A", "Cost", 8)
        decision.results = [Result(option="Option A", score=0.8)]

        path = storage.save_decision(decision)
        self.assertTrue(path.exists())
        self.assertEqual(path.name, "test-decision.json")

        loaded = storage.load_decision("Test Decision")
        self.assertIsNotNone(loaded)
        assert loaded is not None
        self.assertEqual(loaded.title, "Test Decision")
        self.assertEqual(loaded.description, "Pick one")
        self.assertEqual(loaded.scoring_scale, 10)
        self.assertEqual(loaded.criterion_weights(), {"Cost": 4})
        self.assertEqual(loaded.options[0].ratings, {"Cost": 8})
        self.assertEqual(loaded.results[0].option, "Option A")
        self.assertEqual(loaded.results[0].score, 0.8)

    def test_list_decisions(self) -> None:
        storage.save_decision(Decision(title="Beta"))
        storage.save_decision(Decision(title="Alpha Plan"))
        self.assertEqual(storage.list_decisions(), ["alpha-plan", "beta"])
        self.assertIsNotNone(storage.load_decision("alpha-plan"))

    def test_load_missing_returns_none(self) -> None:
        self.assertIsNone(storage.load_decision("Nothing Here"))

    def test_load_corrupt_file_raises(self) -> None:
        storage.decision_path("Broken").write_text("{not json", encoding="utf-8")
        with self.assertRaises(storage.StorageError):
            storage.load_decision("Broken")

    def test_delete_decision(self) -> None:
        path = storage.save_decision(Decision(title="Gone"))
        self.assertTrue(storage.delete_decision("Gone"))
        self.assertFalse(path.exists())
        self.assertFalse(storage.delete_decision("Gone"))

    def test_load_non_utf8_file_raises(self) -> None:
        storage.decision_path("Binary").write_bytes(b"\xff\xfe{")
        with self.assertRaises(storage.StorageError):
            storage.load_decision("Binary")

    def test_load_non_object_raises(self) -> None:
        storage.decision_path("List").write_text("[1, 2, 3]", encoding="utf-8")
        with self.assertRaises(storage.StorageError):
            storage.load_decision("List")

    def test_load_malformed_fields_raises(self) -> None:
        storage.decision_path("Nulls").write_text(
            json.dumps({"criteria": [{"name": "c", "weight": None}]}), encoding="utf-8"
        )
        with self.assertRaises(storage.StorageError) as caught:
            storage.load_decision("Nulls")
        self.assertEqual(caught.exception.path.name, "nulls.json")

        storage.decision_path("Dates").write_text(json.dumps({"date_created": "yesterday"}), encoding="utf-8")
        with self.assertRaises(storage.StorageError):
            storage.load_decision("Dates")

    def test_save_refreshes_last_modified(self) -> None:
        decision = Decision(title="Stamped")
        decision.last_modified = datetime(2020, 1, 1, tzinfo=timezone.utc)
        storage.save_decision(decision)
        self.assertGreater(decision.last_modified, datetime(2020, 1, 1, tzinfo=timezone.utc))

        loaded = storage.load_decision("Stamped")
        assert loaded is not None
        self.assertEqual(loaded.last_modified, decision.last_modified)
        self.assertEqual(loaded.date_created, decision.date_created)
