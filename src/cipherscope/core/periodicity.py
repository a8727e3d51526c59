from __future__ import annotations

import math
from collections import defaultdict

from .scoring import ENGLISH_IC, index_of_coincidence
from .utils import extract_alphabetic, split_columns

# ============================================================
# Key-length estimation for periodic ciphers
#   1) Kasiski: factor votes over distances between repeated sequences
#   2) IC periodicity: average column IC closest to English
# ============================================================


def find_factors(number: int) -> set[int]:
    """All divisors of number (including 1 and itself); empty for 0."""
    factors: set[int] = set()
    if number <= 0:
        return factors
    for i in range(1, math.isqrt(number) + 1):
        if number % i == 0:
            factors.add(i)
            factors.add(number // i)
    return factors


def _repeated_sequences(az: str, min_len: int, max_len: int) -> dict[str, list[int]]:
    """
    Map each repeated substring (min_len..max_len letters) to every position it
    occurs at. A substring is only recorded at its first occurrence if it recurs
    later; every later occurrence is appended.
    """
    sequences: dict[str, list[int]] = {}
    n = len(az)
    for length in range(min(max_len, n // 2), min_len - 1, -1):
        for i in range(n - length + 1):
            seq = az[i:i + length]
            positions = sequences.get(seq)
            if positions is not None:
                positions.append(i)
            elif az.find(seq, i + 1) != -1:
                sequences[seq] = [i]
    return sequences


def kasiski_key_lengths(text: str, min_len: int = 3, max_len: int = 20) -> list[tuple[int, int]]:
    """
    Kasiski examination. Returns (factor, votes) pairs for factors 2..max_len of
    every pairwise distance between repeats, most votes first, ties by smaller factor.
    """
    az = extract_alphabetic(text)
    if min_len <= 0 or len(az) < min_len * 2:
        return []

    votes: dict[int, int] = defaultdict(int)
    for positions in _repeated_sequences(az, min_len, max_len).values():
        if len(positions) < 2:
            continue
        for i, a in enumerate(positions[:-1]):
            for b in positions[i + 1:]:
                for f in find_factors(b - a):
                    if 1 < f <= max_len:
                        votes[f] += 1

    return sorted(votes.items(), key=lambda kv: (-kv[1], kv[0]))


def average_column_ic(az: str, period: int) -> float | None:
    """Mean IC of the interleaved columns that have at least 2 letters."""
    iocs = [ic for ic in (index_of_coincidence(col) for col in split_columns(az, period)) if ic is not None]
    if not iocs:
        return None
    return sum(iocs) / len(iocs)


def ic_periodicity_key_lengths(text: str, min_len: int = 1, max_len: int = 20) -> list[tuple[int, float]]:
    """
    IC periodicity test. Returns (length, average column IC) for every length in
    [min_len, max_len] with at least one measurable column. Lengths whose average
    reaches English IC rank first (smallest first); the rest by how far they fall short.
    """
    az = extract_alphabetic(text)
    scores: list[tuple[int, float]] = []
    for period in range(max(1, min_len), max_len + 1):
        avg = average_column_ic(az, period)
        if avg is not None:
            scores.append((period, avg))

    return sorted(scores, key=lambda x: (max(0.0, ENGLISH_IC - x[1]), x[0]))
