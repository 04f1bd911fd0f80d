"""Smoke tests for the runnable evaluation suite."""

from bf_seeded import evaluation
from bf_seeded.bloom_filter import BloomFilter


def test_demo_reports_membership(capsys):
    results = evaluation.run_demo()

    assert results["apple"] is True
    assert results["banana"] is True
    assert results["long item"] is True
    assert results["grape"] is False
    assert "might_contain(apple): True" in capsys.readouterr().out


def test_synthetic_data_is_reproducible_with_seed():
    first = evaluation.generate_synthetic_data(100, seed=3)
    assert first == evaluation.generate_synthetic_data(100, seed=3)
    assert len(set(first)) == 100
    assert len(set(evaluation.generate_synthetic_data(50))) == 50


def test_build_split():
    words = evaluation.generate_synthetic_data(1000, seed=1)
    bloom, train, test = evaluation.build_split(words, seeding="keyed")

    assert len(train) == 800
    assert len(test) == 200
    assert bloom.size == 800 * evaluation.BITS_PER_ITEM
    assert bloom.hash_count == evaluation.NUM_HASHES
    assert len(bloom) == 800


def test_measurements(capsys):
    words = evaluation.generate_synthetic_data(2000, seed=7)
    bloom, train, test = evaluation.build_split(words, seeding="keyed")

    assert evaluation.check_membership(bloom, train) == 0

    fpr = evaluation.measure_false_positive_rate(bloom, train, test)
    assert fpr["held_out"] == 400
    assert fpr["empirical"] < 0.05
    assert 0 < fpr["expected"] < 0.05

    props = evaluation.show_properties(bloom, train)
    assert props["bytes"] == len(bloom.bit_array)

    perf = evaluation.measure_performance(bloom, train, test, target_ops=1000)
    assert perf["insert_count"] == 1600
    assert perf["query_count"] == 1000
    assert "TEST D" in capsys.readouterr().out


def test_empty_held_out_set():
    bloom = BloomFilter(100, 3)
    result = evaluation.measure_false_positive_rate(bloom, ["a"], ["a"])
    assert result["held_out"] == 0


def test_overloaded_filter():
    result = evaluation.run_overloaded(probes=500)
    assert result["fill_ratio"] >= 0.9
    assert result["empirical"] > 0.5


def test_run_all_covers_every_configuration():
    report = evaluation.run_all(n=500, seed=0, target_ops=500)
    assert set(report) == {"murmur3/additive", "murmur3/keyed", "xxh64/additive", "xxh64/keyed"}
    for entry in report.values():
        assert entry["missing"] == 0
        assert entry["demo"]["apple"] is True


def test_demo_header_follows_constants(capsys, monkeypatch):
    monkeypatch.setattr(evaluation, "DEMO_SIZE", 5000)
    monkeypatch.setattr(evaluation, "DEMO_HASH_COUNT", 4)
    evaluation.run_demo()
    assert "DEMO: 5000 bits, 4 hash functions" in capsys.readouterr().out


def test_additive_estimate_is_flagged(capsys):
    words = evaluation.generate_synthetic_data(500, seed=2)
    for seeding in ("additive", "keyed"):
        bloom, train, test = evaluation.build_split(words, seeding=seeding)
        evaluation.measure_false_positive_rate(bloom, train, test)
        expected_line = next(
            line for line in capsys.readouterr().out.splitlines() if "Expected FPR" in line
        )
        assert ("additive seeding runs higher" in expected_line) == (seeding == "additive")
