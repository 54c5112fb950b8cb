import sys
from pathlib import Path
import unittest

sys.path.insert(0, str(Path(__file__).resolve().parents[2] / "src"))

from chronicles.application.services.random_source import (
    RandomSequenceExhausted,
    ReplayRandomSource,
    SeededRandomSource,
)
from chronicles.application.services.seed_policy import derive_seed, seed_from_setting, source_for


class SeededRandomSourceTests(unittest.TestCase):
    def test_same_seed_produces_same_sequence(self) -> None:
        first = SeededRandomSource(42)
        second = SeededRandomSource(42)

        left = [first.uniform_int(1, 100) for _ in range(20)] + [first.uniform_float01() for _ in range(5)]
        right = [second.uniform_int(1, 100) for _ in range(20)] + [second.uniform_float01() for _ in range(5)]

        self.assertEqual(left, right)

    def test_uniform_int_upper_bound_is_exclusive(self) -> None:
        rng = SeededRandomSource(3)
        draws = {rng.uniform_int(0, 3) for _ in range(300)}
        self.assertEqual({0, 1, 2}, draws)

    def test_single_argument_draws_from_zero(self) -> None:
        rng = SeededRandomSource(9)
        draws = {rng.uniform_int(4) for _ in range(200)}
        self.assertTrue(draws <= {0, 1, 2, 3})

    def test_empty_range_is_rejected(self) -> None:
        rng = SeededRandomSource(1)
        with self.assertRaises(ValueError):
            rng.uniform_int(5, 5)

    def test_pick_rejects_empty_sequence(self) -> None:
        with self.assertRaises(ValueError):
            SeededRandomSource(1).pick([])

    def test_certain_and_impossible_chances_never_flip(self) -> None:
        rng = SeededRandomSource(2024)
        self.assertTrue(all(rng.chance(1.0) for _ in range(200)))
        self.assertFalse(any(rng.chance(0.0) for _ in range(200)))

    def test_dice_sum_stays_within_faces(self) -> None:
        rng = SeededRandomSource(11)
        for _ in range(100):
            self.assertTrue(1 <= rng.dice_sum(100) <= 100)
            self.assertTrue(2 <= rng.dice_sum(6, count=2) <= 12)


class ReplayRandomSourceTests(unittest.TestCase):
    def test_replays_ints_and_floats_from_separate_queues(self) -> None:
        rng = ReplayRandomSource(ints=[2, 7], floats=[0.25, 0.9])

        self.assertTrue(rng.chance(0.5))
        self.assertEqual(2, rng.uniform_int(5))
        self.assertFalse(rng.chance(0.5))
        self.assertEqual(7, rng.uniform_int(1, 10))
        self.assertEqual((0, 0), rng.remaining)
        self.assertEqual([("float", 0.25), ("int", 2), ("float", 0.9), ("int", 7)], rng.history)

    def test_exhausted_queue_raises(self) -> None:
        rng = ReplayRandomSource(ints=[1])
        rng.uniform_int(3)
        with self.assertRaises(RandomSequenceExhausted):
            rng.uniform_int(3)
        with self.assertRaises(RandomSequenceExhausted):
            rng.uniform_float01()

    def test_out_of_range_replay_fails_loudly(self) -> None:
        rng = ReplayRandomSource(ints=[10])
        with self.assertRaises(ValueError):
            rng.uniform_int(0, 5)

    def test_default_int_is_clamped_into_requested_range(self) -> None:
        rng = ReplayRandomSource(default_int=50, default_float=0.5)
        self.assertEqual(4, rng.uniform_int(5))
        self.assertEqual(7, rng.uniform_int(3, 8))
        self.assertEqual(0.5, rng.uniform_float01())

    def test_chance_extremes_hold_at_the_edges_of_the_float_range(self) -> None:
        rng = ReplayRandomSource(floats=[0.0, 0.999999])

        self.assertFalse(rng.chance(0.0))
        self.assertTrue(rng.chance(1.0))

    def test_dice_sum_uses_one_based_faces(self) -> None:
        rng = ReplayRandomSource(ints=[100])
        self.assertEqual(100, rng.dice_sum(100))


class SeedPolicyTests(unittest.TestCase):
    def test_derive_seed_is_stable_across_key_order(self) -> None:
        first = derive_seed("battle", {"character": 3, "turn": 12, "tags": {"b", "a"}})
        second = derive_seed("battle", {"turn": 12, "tags": {"a", "b"}, "character": 3})
        self.assertEqual(first, second)

    def test_namespace_changes_the_seed(self) -> None:
        self.assertNotEqual(derive_seed("battle", {"turn": 1}), derive_seed("training", {"turn": 1}))

    def test_non_finite_floats_are_rejected(self) -> None:
        with self.assertRaises(ValueError):
            derive_seed("battle", {"weight": float("nan")})

    def test_seed_setting_accepts_integers_and_text(self) -> None:
        self.assertEqual(42, seed_from_setting(" 42 "))
        self.assertEqual(-3, seed_from_setting("-3"))
        self.assertIsNone(seed_from_setting(None))
        self.assertIsNone(seed_from_setting("   "))
        self.assertEqual(seed_from_setting("moonrise"), seed_from_setting("moonrise"))
        self.assertNotEqual(seed_from_setting("moonrise"), seed_from_setting("sunset"))

    def test_source_for_builds_reproducible_source(self) -> None:
        left = source_for("events", {"session": 1})
        right = source_for("events", {"session": 1})
        self.assertEqual(left.seed, right.seed)
        self.assertEqual(left.uniform_int(1000), right.uniform_int(1000))


if __name__ == "__main__":
    unittest.main()
