import pytest
from world.luck import luck, murmur3_32, encode_seed, value_seed, spawn_seed, HASH_RANGE

def test_murmur3_known_vectors():
    assert murmur3_32(b"") == 0
    assert murmur3_32(b"hello") == 613153351
    assert murmur3_32(b"foo") == 4138058784

def test_encode_seed_is_stable_text():
    assert encode_seed([3, -4, "initialValue"]) == "3,-4,initialValue"
    assert encode_seed([3.0, 2]) == "3,2"
    assert encode_seed([True, None, "a"]) == "true,,a"

def test_luck_is_deterministic():
    for x in range(-10, 10):
        for y in range(-10, 10):
            assert luck((x, y)) == luck((x, y))
            assert luck(value_seed(x, y)) == luck(value_seed(x, y))

def test_luck_range():
    for x in range(-50, 50):
        v = luck((x, 7, "initialValue"))
        assert 0.0 <= v < 1.0

def test_luck_upper_bound_is_exclusive():
    assert (HASH_RANGE - 1) / HASH_RANGE < 1.0

def test_salted_and_unsalted_seeds_differ():
    assert value_seed(1, 2) != spawn_seed(1, 2)
    differing = sum(1 for x in range(20) if luck(value_seed(x, 0)) != luck(spawn_seed(x, 0)))
    assert differing == 20

def test_luck_distribution_roughly_uniform():
    samples = [luck((x, y)) for x in range(100) for y in range(100)]
    below = sum(1 for s in samples if s < 0.2)
    # 10,000 samples; expected 2,000
    assert 1700 < below < 2300
    assert 0.45 < sum(samples) / len(samples) < 0.55
