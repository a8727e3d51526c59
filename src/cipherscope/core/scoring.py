from __future__ import annotations

import sys
from typing import Optional, Sequence

from .ngrams import get_trigram_table
from .utils import extract_alphabetic

# ----------------------------
# Reference constants
# ----------------------------

# Typical English letter frequencies, A..Z.
ENGLISH_FREQUENCIES: tuple[float, ...] = (
    0.08167, 0.01492, 0.02782, 0.04253, 0.12702, 0.02228, 0.02015,  # A-G
    0.06094, 0.06966, 0.00153, 0.00772, 0.04025, 0.02406, 0.06749,  # H-N
    0.07507, 0.01929, 0.00095, 0.05987, 0.06327, 0.09056, 0.02758,  # O-U
    0.00978, 0.02360, 0.00150, 0.01974, 0.00074,                    # V-Z
)
ENGLISH_IC = 0.0667
RANDOM_IC = 1.0 / 26.0

# Saturated chi-squared: "impossible under this model" but still rankable.
MAX_SCORE = sys.float_info.max

# Fewer letters than this in a column and MIC shift ranking is not trusted.
MIN_CHARS_FOR_MIC = 5


# ----------------------------
# Letter statistics
# ----------------------------

def letter_counts(text: str) -> list[int]:
    counts = [0] * 26
    for ch in extract_alphabetic(text):
        counts[ord(ch) - 65] += 1
    return counts


def letter_frequencies(text: str) -> Optional[tuple[tuple[float, ...], int]]:
    """(profile, total_letters), or None when there are no letters."""
    counts = letter_counts(text)
    total = sum(counts)
    if total == 0:
        return None
    return tuple(c / total for c in counts), total


def chi_squared(observed: Sequence[float], expected: Sequence[float]) -> float:
    """Lower is better. A zero expected bucket with nonzero observed saturates to MAX_SCORE."""
    score = 0.0
    for o, e in zip(observed, expected):
        if e == 0.0:
            if o != 0.0:
                return MAX_SCORE
            continue
        diff = o - e
        score += diff * diff / e
    return score


def english_likelihood(text: str) -> Optional[float]:
    """Chi-squared of the letter profile against English. Lower is better; None without letters."""
    freqs = letter_frequencies(text)
    if freqs is None:
        return None
    profile, _ = freqs
    return chi_squared(profile, ENGLISH_FREQUENCIES)


def index_of_coincidence(text: str) -> Optional[float]:
    """IC over A-Z; None for fewer than 2 letters. Invariant under Caesar shifts."""
    counts = letter_counts(text)
    n = sum(counts)
    if n < 2:
        return None
    num = sum(c * (c - 1) for c in counts)
    return num / (n * (n - 1))


# ----------------------------
# Trigram likelihood
# ----------------------------

def trigram_log_probability(text: str) -> float:
    """
    Sum of log10 trigram probabilities over the alphabetic signal. Higher (less
    negative) is better. Not length-normalised, so only compare equal-length texts.
    Returns -inf for fewer than 3 letters.
    """
    return get_trigram_table().score(text)


# ----------------------------
# Column shift ranking
# ----------------------------

def mutual_index_of_coincidence(column: str, top_n: int) -> Optional[list[tuple[int, float]]]:
    """
    Rank the 26 Caesar shifts for one Vigenere column by mutual index of
    coincidence against English: for shift g, sum_i english[i] * observed[(i+g) % 26].

    Returns the top_n (shift, mic) pairs, best first, or None when the column has
    fewer than MIN_CHARS_FOR_MIC letters or top_n is 0.
    """
    if top_n <= 0:
        return None
    freqs = letter_frequencies(column)
    if freqs is None:
        return None
    observed, n = freqs
    if n < MIN_CHARS_FOR_MIC:
        return None

    scored: list[tuple[int, float]] = []
    for g in range(26):
        mic = sum(ENGLISH_FREQUENCIES[i] * observed[(i + g) % 26] for i in range(26))
        scored.append((g, mic))

    # stable sort: equal MIC keeps the smaller shift first
    scored.sort(key=lambda x: x[1], reverse=True)
    return scored[:top_n]
