import json
import math

import pytest

from ttcards.errors import MissingContainerBaselineError
from ttcards.models import LootBaseline
from ttcards.probability import ProbabilityEngine, relative_probability
from ttcards.rarity import Rarity

WEIGHTS = {
    Rarity.COMMON: 0.35,
    Rarity.UNCOMMON: 0.25,
    Rarity.RARE: 0.2,
    Rarity.EPIC: 0.1,
    Rarity.LEGENDARY: 0.07,
    Rarity.SECRET: 0.03,
}


def baseline(max_found: float) -> LootBaseline:
    return LootBaseline.from_total(max_found)


class TestRelativeProbability:
    """Test suite for relative_probability."""

    def test_worked_example(self):
        """max=100, one Rare card, multiplier 1, Rare weight 0.2 -> ceil(4) = 4"""
        result = relative_probability(Rarity.RARE, baseline(100), {Rarity.RARE: 1}, WEIGHTS, 1.0)

        assert result == 4

    def test_floor_of_one(self):
        result = relative_probability(
            Rarity.SECRET, baseline(1), {Rarity.SECRET: 50}, WEIGHTS, 0.01
        )

        assert result == 1

    def test_missing_count_treated_as_one(self):
        assert relative_probability(Rarity.RARE, baseline(100), {}, WEIGHTS) == 4

    @pytest.mark.parametrize("max_found", [1, 10, 99, 100, 1000, 123456])
    def test_monotonic_in_baseline_max(self, max_found):
        counts = {Rarity.EPIC: 3}
        lower = relative_probability(Rarity.EPIC, baseline(max_found), counts, WEIGHTS)
        higher = relative_probability(Rarity.EPIC, baseline(max_found * 2), counts, WEIGHTS)

        assert 1 <= lower <= higher

    def test_monotonic_in_rarity_weight(self):
        counts = {Rarity.COMMON: 2}
        results = [
            relative_probability(
                Rarity.COMMON, baseline(5000), counts, {Rarity.COMMON: weight}
            )
            for weight in (0.0, 0.01, 0.1, 0.35, 0.9)
        ]

        assert results == sorted(results)
        assert results[0] == 1

    def test_non_increasing_in_rarity_count(self):
        results = [
            relative_probability(Rarity.RARE, baseline(5000), {Rarity.RARE: n}, WEIGHTS)
            for n in range(1, 40)
        ]

        assert all(a >= b for a, b in zip(results, results[1:]))
        assert all(isinstance(r, int) and r >= 1 for r in results)

    @pytest.mark.parametrize("count", [1, 2, 3, 7, 50, 1000])
    def test_tier_budget_is_shared(self, count):
        stats = baseline(2000)
        pool = 2000 * 0.2 * WEIGHTS[Rarity.UNCOMMON]
        per_card = relative_probability(
            Rarity.UNCOMMON, stats, {Rarity.UNCOMMON: count}, WEIGHTS
        )

        total = per_card * count

        assert total == count * max(1, math.ceil(pool / count))
        assert total >= count


class TestComputeBaselines:
    """Test suite for ProbabilityEngine.compute_baselines."""

    def test_sums_each_distribution(self, store):
        baselines = ProbabilityEngine.compute_baselines(store)

        jacket = baselines["bigmap"]["jacket"]
        assert jacket.min_found == 1
        assert jacket.max_found == 100
        assert jacket.average == 50
        assert jacket.p15 == 15
        assert jacket.p65 == 65
        assert baselines["woods"]["jacket"].max_found == 1000

    def test_rounds_half_up(self, store):
        drawer = ProbabilityEngine.compute_baselines(store)["bigmap"]["drawer"]

        assert drawer.max_found == 5
        assert drawer.average == 3
        assert drawer.p15 == 1
        assert drawer.p65 == 3

    def test_empty_and_zero_weight_containers_are_absent(self, store):
        baselines = ProbabilityEngine.compute_baselines(store)

        assert "empty_box" not in baselines["bigmap"]
        assert "zero_box" not in baselines["bigmap"]
        assert "hideout" not in baselines

    def test_does_not_mutate_store(self, store, tables):
        before = json.dumps(tables, sort_keys=True)

        ProbabilityEngine.compute_baselines(store)

        assert json.dumps(tables, sort_keys=True) == before

    def test_empty_store(self):
        from ttcards.store import ContentStore

        assert ProbabilityEngine.compute_baselines(ContentStore({})) == {}


class TestProbabilityEngine:
    """Test suite for the engine's snapshot lifecycle."""

    def test_merge_new_wins(self):
        engine = ProbabilityEngine(
            {"bigmap": {"jacket": baseline(1), "stale": baseline(9)}}
        )

        engine.merge({"bigmap": {"jacket": baseline(100)}, "woods": {"x": baseline(3)}})

        assert engine.baseline_for("bigmap", "jacket").max_found == 100
        assert engine.baseline_for("bigmap", "stale").max_found == 9
        assert engine.baseline_for("woods", "x").max_found == 3

    def test_snapshot_uses_historic_key_names(self, tmp_path):
        snapshot = tmp_path / "probabilities.json"
        ProbabilityEngine({"bigmap": {"jacket": baseline(100)}}).save(snapshot)

        written = json.loads(snapshot.read_text())

        assert written == {
            "bigmap": {
                "jacket": {
                    "min_found": 1,
                    "max_found": 100,
                    "average": 50,
                    "15p": 15,
                    "65p": 65,
                }
            }
        }
        assert ProbabilityEngine.from_snapshot(snapshot).baseline_for("bigmap", "jacket").p65 == 65

    def test_bad_snapshot_entries_are_ignored(self, tmp_path):
        snapshot = tmp_path / "probabilities.json"
        snapshot.write_text(
            json.dumps(
                {
                    "bigmap": {
                        "good": {"max_found": 10, "average": 5, "15p": 2, "65p": 7},
                        "bad": {"average": 5},
                    }
                }
            )
        )

        engine = ProbabilityEngine.from_snapshot(snapshot)

        assert engine.baseline_for("bigmap", "good").max_found == 10
        with pytest.raises(MissingContainerBaselineError):
            engine.baseline_for("bigmap", "bad")

    def test_missing_snapshot_starts_empty(self, tmp_path):
        assert ProbabilityEngine.from_snapshot(tmp_path / "nope.json").baselines == {}

    def test_prepare_without_snapshot_computes_in_memory(self, store, tmp_path):
        snapshot = tmp_path / "probabilities.json"
        engine = ProbabilityEngine()

        engine.prepare(store, regenerate=False, snapshot_path=snapshot)

        assert engine.baseline_for("bigmap", "jacket").max_found == 100
        assert not snapshot.exists()

    def test_prepare_keeps_loaded_snapshot(self, store):
        engine = ProbabilityEngine({"bigmap": {"jacket": baseline(7)}})

        engine.prepare(store, regenerate=False)

        assert engine.baseline_for("bigmap", "jacket").max_found == 7
        with pytest.raises(MissingContainerBaselineError):
            engine.baseline_for("woods", "jacket")

    def test_prepare_regenerates_and_persists(self, store, tmp_path):
        snapshot = tmp_path / "probabilities.json"
        engine = ProbabilityEngine({"bigmap": {"jacket": baseline(7), "old": baseline(2)}})

        engine.prepare(store, regenerate=True, snapshot_path=snapshot)

        written = json.loads(snapshot.read_text())
        assert written["bigmap"]["jacket"]["max_found"] == 100
        assert written["bigmap"]["old"]["max_found"] == 2
        assert written["woods"]["jacket"]["max_found"] == 1000

    def test_baseline_for_unknown_pair(self):
        with pytest.raises(MissingContainerBaselineError) as error:
            ProbabilityEngine().baseline_for("bigmap", "nothing")

        assert error.value.container_id == "nothing"
