from __future__ import annotations

import math
from dataclasses import dataclass
from importlib import resources
from itertools import product
from types import MappingProxyType
from typing import Mapping

from loguru import logger

from cipherscope.core.utils import extract_alphabetic

ALPHABET = "ABCDEFGHIJKLMNOPQRSTUVWXYZ"
TRIGRAM_COUNT = 26 ** 3


class TrigramTableError(ValueError):
    """The trigram resource could not produce a usable table."""


def trigram_index(a: int, b: int, c: int) -> int:
    return a * 676 + b * 26 + c


@dataclass(frozen=True)
class TrigramTable:
    # Dense: all 17,576 trigrams, unseen ones carry the floor value.
    logp: Mapping[str, float]
    values: tuple[float, ...]
    floor: float
    total: float

    @classmethod
    def from_package_data(cls, filename: str = "english_trigrams.txt") -> "TrigramTable":
        pkg = "cipherscope.data"
        text = resources.files(pkg).joinpath(filename).read_text(encoding="utf-8")
        return cls.from_text(text)

    @classmethod
    def from_text(cls, text: str) -> "TrigramTable":
        """Build from whitespace-delimited 'TRIGRAM COUNT' lines; malformed lines are skipped."""
        counts: dict[str, float] = {}
        for raw in text.splitlines():
            parts = raw.split()
            if len(parts) < 2:
                continue

            gram = parts[0].upper()
            if len(gram) != 3 or not all("A" <= ch <= "Z" for ch in gram):
                continue

            try:
                v = float(parts[1])
            except ValueError:
                continue
            if v < 0 or math.isnan(v) or math.isinf(v):
                continue

            counts[gram] = counts.get(gram, 0.0) + v

        if not counts:
            raise TrigramTableError("No valid trigram lines found. Expected lines like 'THE 1234'.")

        total = sum(counts.values())
        if total <= 0:
            raise TrigramTableError("Trigram counts sum to <= 0.")

        floor = math.log10(0.01 / total)
        logp: dict[str, float] = {}
        for letters in product(ALPHABET, repeat=3):
            gram = "".join(letters)
            c = counts.get(gram, 0.0)
            logp[gram] = math.log10(c / total) if c > 0 else floor

        # product() walks AAA, AAB, ... so insertion order matches trigram_index()
        values = tuple(logp.values())
        return cls(logp=MappingProxyType(logp), values=values, floor=floor, total=total)

    def score(self, text: str) -> float:
        s = extract_alphabetic(text)
        if len(s) < 3:
            return float("-inf")
        idx = [ord(ch) - 65 for ch in s]
        values = self.values
        total = 0.0
        for i in range(len(idx) - 2):
            total += values[trigram_index(idx[i], idx[i + 1], idx[i + 2])]
        return total


_TRIGRAMS: TrigramTable | None = None


def get_trigram_table() -> TrigramTable:
    """Load the packaged trigram table once; failures propagate since nothing can be scored without it."""
    global _TRIGRAMS
    if _TRIGRAMS is None:
        table = TrigramTable.from_package_data("english_trigrams.txt")
        logger.debug("Loaded trigram table: {} trigram occurrences, floor={:.3f}", int(table.total), table.floor)
        _TRIGRAMS = table
    return _TRIGRAMS
