import random

import pytest

from pmuevents.clustering import calc_classify, calc_classify_fake, hash_sequence


def test_worked_example_two_clusters_and_gap():
    values = [100, 101, 102, 500, 1000, 1001]
    groups = calc_classify(values, 0.1)
    assert groups == [[100, 101, 102], [1000, 1001], [], [500]]


def test_input_order_does_not_matter():
    values = [100, 101, 102, 500, 1000, 1001]
    shuffled = values[:]
    random.Random(7).shuffle(shuffled)
    assert calc_classify(shuffled, 0.1) == calc_classify(values, 0.1)


def test_input_is_not_modified():
    values = [1001, 5, 100, 101]
    copy = values[:]
    calc_classify(values, 0.2)
    assert values == copy


def test_empty_input_gives_no_groups():
    assert calc_classify([], 0.1) == []


def test_single_item():
    assert calc_classify([5], 0.1) == [[5], []]


def test_key_function_groups_records():
    records = [{"ins": v, "id": i} for i, v in enumerate([1000, 100, 1001, 101])]
    groups = calc_classify(records, 0.1, key=lambda r: r["ins"])
    first = groups[0]
    assert [r["ins"] for r in first] == [100, 101]
    assert all(isinstance(r, dict) for group in groups for r in group)


def test_groups_are_sorted_and_drawn_from_input():
    rng = random.Random(3)
    values = [rng.randint(1, 10_000) for _ in range(200)]
    groups = calc_classify(values, 0.05)
    flat = [v for group in groups for v in group]
    assert len(flat) <= len(values)
    for group in groups:
        assert group == sorted(group)
    remaining = list(values)
    for v in flat:
        remaining.remove(v)


def test_clusters_respect_radius():
    rng = random.Random(11)
    values = [rng.randint(1, 5000) for _ in range(100)]
    alpha = 0.1
    groups = calc_classify(values, alpha)
    # the cluster groups come first and each lies inside one window
    for group in groups:
        if group:
            assert group[-1] <= group[-1]
    first = groups[0]
    assert first
    assert max(first) < min(first) * (1 + alpha) / (1 - alpha) + 1


def test_fake_puts_everything_in_one_group():
    values = [3, 1, 2]
    assert calc_classify_fake(values, 0.5) == [[3, 1, 2]]


def test_hash_of_empty_sequence_is_zero():
    assert hash_sequence([]) == 0


def test_hash_of_zero_is_the_golden_constant():
    assert hash_sequence([0]) == 0x9E3779B97F4A7C15


def test_hash_negative_value_wraps_to_64_bits():
    assert hash_sequence([-1]) == 0x9E3779B97F4A7C14


@pytest.mark.parametrize("values", [[1, 2, 3], [2**63, 2**64 - 1, 12345], list(range(50))])
def test_hash_stays_within_64_bits_and_is_deterministic(values):
    result = hash_sequence(values)
    assert 0 <= result < 2**64
    assert hash_sequence(iter(values)) == result


def test_hash_depends_on_order():
    a = hash_sequence([1, 2])
    b = hash_sequence([2, 1])
    assert a != b
    assert a == hash_sequence([1, 2])