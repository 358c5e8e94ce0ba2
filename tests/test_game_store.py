import tempfile
import unittest
from pathlib import Path

from spider.Core import Card, Game, GameConfig
from storage import game_store
from storage.game_store import FileStorage, MemoryStorage
from storage.state_codec import STOCK_KEY, TABLEAU_KEY


def seeded_game(seed=99):
    config = GameConfig()
    config.seed = seed
    return Game.newGame(config)


def ranks(game):
    return [[c.rank for c in pile] for pile in game.tableau], [c.rank for c in game.stock]


class FailingStorage(MemoryStorage):
    def __init__(self, fail_on):
        super().__init__()
        self.fail_on = fail_on

    def set(self, key, value):
        if key.endswith(self.fail_on):
            raise OSError("disk full")
        super().set(key, value)


class GameStoreTestCase(unittest.TestCase):
    def test_save_and_load_in_memory(self):
        storage = MemoryStorage()
        game = seeded_game()
        self.assertTrue(game_store.save_game(game, storage, 2))
        self.assertTrue(game_store.has_saved_game(storage, 2))
        self.assertFalse(game_store.has_saved_game(storage, 1))
        loaded = game_store.load_game(storage, 2)
        self.assertEqual(ranks(game), ranks(loaded))

    def test_save_and_load_on_disk(self):
        with tempfile.TemporaryDirectory() as td:
            storage = FileStorage(Path(td) / "saves")
            game = seeded_game()
            self.assertTrue(game_store.save_game(game, storage))
            self.assertTrue((Path(td) / "saves" / "slot1.tableau.json").exists())
            self.assertTrue((Path(td) / "saves" / "slot1.stockpile.json").exists())
            loaded = game_store.load_game(FileStorage(Path(td) / "saves"))
        self.assertEqual(ranks(game), ranks(loaded))

    def test_slots_are_clamped(self):
        storage = MemoryStorage()
        game_store.save_game(seeded_game(), storage, 9)
        self.assertTrue(game_store.has_saved_game(storage, 3))
        self.assertEqual(
            [{"slot": 1, "exists": False}, {"slot": 2, "exists": False}, {"slot": 3, "exists": True}],
            game_store.list_slot_status(storage),
        )

    def test_empty_slot_loads_nothing(self):
        self.assertIsNone(game_store.load_game(MemoryStorage()))

    def test_partial_save_is_ignored(self):
        storage = MemoryStorage()
        game_store.save_game(seeded_game(), storage)
        storage.remove("slot1." + STOCK_KEY)
        with self.assertLogs("storage.game_store", level="WARNING"):
            self.assertIsNone(game_store.load_game(storage))
        self.assertFalse(game_store.has_saved_game(storage))

    def test_corrupt_save_is_ignored(self):
        storage = MemoryStorage()
        storage.set("slot1." + TABLEAU_KEY, "{oops")
        storage.set("slot1." + STOCK_KEY, "[]")
        with self.assertLogs("storage.game_store", level="WARNING"):
            self.assertIsNone(game_store.load_game(storage))

    def test_restore_replaces_state_in_place(self):
        storage = MemoryStorage()
        saved = seeded_game(1)
        game_store.save_game(saved, storage)
        game = seeded_game(2)
        self.assertTrue(game_store.restore_game(game, storage))
        self.assertEqual(ranks(saved), ranks(game))
        self.assertEqual(0, game.completedCount)

    def test_failed_restore_leaves_game_untouched(self):
        storage = MemoryStorage()
        storage.set("slot1." + TABLEAU_KEY, "[]")
        storage.set("slot1." + STOCK_KEY, "[]")
        game = seeded_game(3)
        before = ranks(game)
        with self.assertLogs("storage.game_store", level="WARNING"):
            self.assertFalse(game_store.restore_game(game, storage))
        self.assertEqual(before, ranks(game))

    def test_failed_write_leaves_no_partial_save(self):
        storage = FailingStorage(STOCK_KEY)
        with self.assertLogs("storage.game_store", level="ERROR"):
            self.assertFalse(game_store.save_game(seeded_game(), storage))
        self.assertEqual({}, storage.data)

    def test_deeply_nested_save_is_ignored(self):
        storage = MemoryStorage()
        storage.set("slot1." + TABLEAU_KEY, "[" * 100000 + "]" * 100000)
        storage.set("slot1." + STOCK_KEY, "[]")
        game = seeded_game(6)
        before = ranks(game)
        with self.assertLogs("storage.game_store", level="WARNING"):
            self.assertFalse(game_store.restore_game(game, storage))
        self.assertEqual(before, ranks(game))

    def test_undecodable_slot_file_does_not_break_status(self):
        with tempfile.TemporaryDirectory() as td:
            (Path(td) / "slot1.tableau.json").write_bytes(b"\xff\xfe\x00")
            storage = FileStorage(td)
            self.assertFalse(game_store.has_saved_game(storage))
            self.assertFalse(game_store.list_slot_status(storage)[0]["exists"])
            (Path(td) / "slot1.stockpile.json").write_text("[]", encoding="utf-8")
            self.assertTrue(game_store.has_saved_game(storage))
            with self.assertLogs("storage.game_store", level="WARNING"):
                self.assertIsNone(game_store.load_game(storage))

    def test_clear_game_is_idempotent(self):
        with tempfile.TemporaryDirectory() as td:
            storage = FileStorage(td)
            game_store.save_game(seeded_game(), storage)
            self.assertTrue(game_store.clear_game(storage))
            self.assertFalse(game_store.has_saved_game(storage))
            self.assertTrue(game_store.clear_game(storage))

    def test_saved_face_up_flags_survive(self):
        storage = MemoryStorage()
        tableau = [[Card("Spades", 8), Card("Spades", 7, True)]] + [[] for _ in range(9)]
        game_store.save_game(Game(tableau), storage)
        loaded = game_store.load_game(storage)
        self.assertEqual([False, True], [c.faceUp for c in loaded.tableau[0]])


if __name__ == "__main__":
    unittest.main()
