from __future__ import annotations

import logging
import math

import numpy as np

logger = logging.getLogger(__name__)

DEFAULT_SIEVE_CAP = 20_000_000
_INITIAL_SIZE = 256


def is_prime_trial(n: int) -> bool:
    """Odd trial division up to sqrt(n)."""
    if n < 2:
        return False
    if n < 4:
        return True
    if n % 2 == 0:
        return False
    for d in range(3, math.isqrt(n) + 1, 2):
        if n % d == 0:
            return False
    return True


class PrimeOracle:
    """
    Primality service backed by a growable sieve of Eratosthenes.

    The sieve grows on demand (at least doubling) up to `cap`; queries above
    the cap are answered by trial division and are not cached.

    One oracle is meant to be shared by every computation of a session, so
    the sieve only ever grows.
    """

    def __init__(self, cap: int = DEFAULT_SIEVE_CAP, initial_size: int = _INITIAL_SIZE):
        if cap < 2:
            raise ValueError("Sieve cap must be at least 2")
        self.cap = int(cap)
        size = max(2, min(int(initial_size), self.cap + 1))
        sieve = np.ones(size, dtype=np.uint8)
        sieve[:2] = 0
        for p in range(2, math.isqrt(size - 1) + 1):
            if sieve[p]:
                sieve[p * p :: p] = 0
        self._sieve = sieve

    @property
    def size(self) -> int:
        """Number of integers currently covered by the sieve (0..size-1)."""
        return int(self._sieve.shape[0])

    def grow_to(self, limit: int) -> None:
        """
        Extend the sieve so it covers `limit`.

        Only the new range is sieved: primes already known cross forward from
        the first multiple past the old end, and primes found in the new range
        (up to sqrt(target)) cross from their square.
        """
        limit = int(limit)
        old_len = self.size
        if limit < old_len or limit > self.cap:
            return

        target = min(max(limit, (old_len - 1) * 2), self.cap)
        grown = np.empty(target + 1, dtype=np.uint8)
        grown[:old_len] = self._sieve
        grown[old_len:] = 1

        for p in range(2, math.isqrt(target) + 1):
            if not grown[p]:
                continue
            start = p * p
            if start < old_len:
                start = -(-old_len // p) * p
            grown[start::p] = 0

        self._sieve = grown
        logger.debug(f"Prime sieve grown from {old_len} to {target + 1} entries")

    def is_prime(self, n: int) -> bool:
        n = int(n)
        if n < 2:
            return False
        if n > self.cap:
            return is_prime_trial(n)
        if n >= self.size:
            self.grow_to(n)
        return bool(self._sieve[n])

    __call__ = is_prime
