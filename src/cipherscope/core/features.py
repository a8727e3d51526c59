from __future__ import annotations

import string
from dataclasses import asdict, dataclass
from typing import Any, Optional

from .periodicity import ic_periodicity_key_lengths, kasiski_key_lengths
from .scoring import english_likelihood, index_of_coincidence
from .utils import extract_alphabetic

_PUNCT = set(string.punctuation)
# ASCII whitespace as far as character classes go (no vertical tab)
_WS = set(" \t\n\r\x0c")


@dataclass(frozen=True)
class BasicStats:
    char_count_total: int
    char_count_alpha: int
    char_count_upper: int
    char_count_lower: int
    char_count_numeric: int
    char_count_whitespace: int
    char_count_punctuation: int
    char_count_other: int
    word_count: int
    min_word_length: int
    max_word_length: int
    average_word_length: float
    uppercase_percent: float
    lowercase_percent: float

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)


def calculate_basic_stats(text: str) -> Optional[BasicStats]:
    """Character-class and word-length statistics; None for empty text."""
    if not text:
        return None

    alpha = upper = lower = numeric = ws = punct = other = 0
    for ch in text:
        if ch.isascii() and ch.isalpha():
            alpha += 1
            if ch.isupper():
                upper += 1
            else:
                lower += 1
        elif ch.isascii() and ch.isdigit():
            numeric += 1
        elif ch in _WS:
            ws += 1
        elif ch in _PUNCT:
            punct += 1
        else:
            other += 1

    lengths = [len(w) for w in text.split()]
    words = len(lengths)

    return BasicStats(
        char_count_total=len(text),
        char_count_alpha=alpha,
        char_count_upper=upper,
        char_count_lower=lower,
        char_count_numeric=numeric,
        char_count_whitespace=ws,
        char_count_punctuation=punct,
        char_count_other=other,
        word_count=words,
        min_word_length=min(lengths) if lengths else 0,
        max_word_length=max(lengths) if lengths else 0,
        average_word_length=sum(lengths) / words if words else 0.0,
        uppercase_percent=upper / alpha * 100.0 if alpha else 0.0,
        lowercase_percent=lower / alpha * 100.0 if alpha else 0.0,
    )


def analyze_text(text: str, max_key_len: int = 20) -> dict:
    """
    Returns a dict of features used to eyeball a ciphertext before cracking:
    basic stats plus the statistics the identifiers rely on.
    """
    stats = calculate_basic_stats(text)
    info: dict[str, Any] = stats.to_dict() if stats else {}
    info["alpha_signal_length"] = len(extract_alphabetic(text))
    info["ioc"] = index_of_coincidence(text)
    info["chi_squared_english"] = english_likelihood(text)
    info["kasiski"] = kasiski_key_lengths(text, 3, max_key_len)[:5]
    info["ic_periodicity"] = ic_periodicity_key_lengths(text, 1, max_key_len)[:5]
    return info
