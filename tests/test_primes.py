import pytest

from alephcode.primes import DEFAULT_SIEVE_CAP, PrimeOracle, is_prime_trial


@pytest.mark.parametrize("n, expected", [(0, False), (1, False), (2, True), (3, True), (4, False), (97, True)])
def test_small_values(oracle, n, expected):
    assert oracle.is_prime(n) is expected


def test_negative_values_are_not_prime(oracle):
    assert oracle.is_prime(-7) is False


def test_sieve_agrees_with_trial_division(oracle):
    for n in list(range(0, 2000)) + [7919, 65_521, 65_537, 999_983, 1_000_000]:
        assert oracle.is_prime(n) == is_prime_trial(n), n


def test_sieve_grows_on_demand(oracle):
    start = oracle.size
    assert oracle.is_prime(10_007)
    assert oracle.size > 10_007
    assert oracle.size >= start


def test_grow_to_at_least_doubles():
    oracle = PrimeOracle(initial_size=256)
    oracle.grow_to(300)
    assert oracle.size == 511


def test_incremental_growth_matches_fresh_sieve():
    grown = PrimeOracle(initial_size=16)
    for limit in (40, 100, 1_000, 5_000):
        grown.grow_to(limit)
    fresh = PrimeOracle(initial_size=grown.size)
    for n in range(grown.size):
        assert grown.is_prime(n) == fresh.is_prime(n), n


def test_grow_to_ignores_limits_above_cap():
    oracle = PrimeOracle(cap=1_000)
    oracle.grow_to(5_000)
    assert oracle.size <= 1_001


def test_cap_boundary_is_covered_by_sieve():
    oracle = PrimeOracle(cap=1_000)
    oracle.grow_to(1_000)
    assert oracle.size == 1_001
    assert oracle.is_prime(997)
    assert oracle.is_prime(1_000) is False


def test_above_cap_falls_back_to_trial_division():
    oracle = PrimeOracle(cap=1_000)
    assert oracle.is_prime(1_009)
    assert oracle.is_prime(1_011) is False
    assert oracle.size <= 1_001


def test_default_cap_value():
    assert PrimeOracle().cap == DEFAULT_SIEVE_CAP
    assert PrimeOracle().is_prime(DEFAULT_SIEVE_CAP) is False
