from __future__ import annotations

from itertools import product
from typing import Iterator, Optional

from loguru import logger

from cipherscope.classical.common import key_to_shifts, shift_table, shifts_to_key
from cipherscope.classical.polyalphabetic.gating import identify_vigenere
from cipherscope.core.config import Settings
from cipherscope.core.ngrams import get_trigram_table, trigram_index
from cipherscope.core.periodicity import ic_periodicity_key_lengths, kasiski_key_lengths
from cipherscope.core.registry import register_plugin
from cipherscope.core.results import DecryptionAttempt, IdentificationResult
from cipherscope.core.scoring import MIN_CHARS_FOR_MIC, mutual_index_of_coincidence
from cipherscope.core.utils import extract_alphabetic, split_columns

CIPHER_NAME = "vigenere"

# Tried when neither estimator has an opinion.
DEFAULT_KEY_LENGTHS = (3, 4, 5, 6, 7)


def _apply_key(text: str, key: str, direction: int) -> str:
    if not key or not (key.isascii() and key.isalpha()):
        raise ValueError(f"Vigenère key must be one or more A-Z letters, got {key!r}.")
    shifts = key_to_shifts(key)

    tables = [shift_table(direction * s % 26) for s in shifts]
    period = len(tables)

    out = []
    j = 0
    for ch in text:
        mapped = tables[j % period].get(ch)
        if mapped is None:
            out.append(ch)
        else:
            # key advances on letters only
            out.append(mapped)
            j += 1
    return "".join(out)


def vigenere_encrypt(text: str, key: str) -> str:
    return _apply_key(text, key, 1)


def vigenere_decrypt(text: str, key: str) -> str:
    return _apply_key(text, key, -1)


def candidate_key_lengths(az: str, settings: Settings) -> list[int]:
    """
    Key lengths to search, best first: IC periodicity, else Kasiski, else the
    defaults. Capped by MAX_SEARCH_KEY_LEN and by every column needing enough
    letters for MIC ranking.
    """
    source = "ic-periodicity"
    estimates = [klen for klen, _ in ic_periodicity_key_lengths(
        az, settings.PERIODICITY_MIN_KEY_LEN, settings.KASISKI_MAX_KEY_LEN
    )]
    if not estimates:
        source = "kasiski"
        estimates = [klen for klen, _ in kasiski_key_lengths(
            az, settings.KASISKI_MIN_SEQ_LEN, settings.KASISKI_MAX_KEY_LEN
        )]
    if not estimates:
        source = "defaults"
        estimates = list(DEFAULT_KEY_LENGTHS)

    upper = min(settings.MAX_SEARCH_KEY_LEN, len(az) // MIN_CHARS_FOR_MIC)
    lengths = [k for k in estimates if 0 < k <= upper][: settings.MAX_KEY_LENGTHS_TO_TRY]
    logger.debug("Key lengths from {}: {} (cap {})", source, lengths, upper)
    return lengths


def rank_column_shifts(az: str, key_len: int, top_n: int) -> Optional[list[list[int]]]:
    """Top-N MIC shifts for each column, or None if any column is too short to rank."""
    ranked: list[list[int]] = []
    for col in split_columns(az, key_len):
        shifts = mutual_index_of_coincidence(col, top_n)
        if shifts is None:
            return None
        ranked.append([s for s, _ in shifts])
    return ranked


class _KeyScorer:
    """
    Trigram score of the decrypted signal for a full key, without decrypting.

    The trigram starting at position p only depends on the key letters at
    phases p, p+1, p+2 (mod key length), so per-phase partial sums are cached
    by those three shifts and a key's score is the sum of key_len lookups.
    """

    def __init__(self, az: str, key_len: int) -> None:
        self.signal = [ord(ch) - 65 for ch in az]
        self.key_len = key_len
        self.values = get_trigram_table().values
        self._cache: dict[tuple[int, int, int, int], float] = {}

    def _phase_score(self, phase: int, a: int, b: int, c: int) -> float:
        cache_key = (phase, a, b, c)
        cached = self._cache.get(cache_key)
        if cached is not None:
            return cached

        sig = self.signal
        values = self.values
        total = 0.0
        for p in range(phase, len(sig) - 2, self.key_len):
            total += values[trigram_index((sig[p] - a) % 26, (sig[p + 1] - b) % 26, (sig[p + 2] - c) % 26)]
        self._cache[cache_key] = total
        return total

    def score(self, shifts: tuple[int, ...]) -> float:
        if len(self.signal) < 3:
            return float("-inf")
        L = self.key_len
        return sum(
            self._phase_score(i, shifts[i], shifts[(i + 1) % L], shifts[(i + 2) % L])
            for i in range(L)
        )


def iter_keyword_candidates(ciphertext: str, az: str, key_len: int, top_n: int) -> Iterator[DecryptionAttempt]:
    """
    Lazily walk the Cartesian product of per-column shift candidates for one key
    length, yielding a scored attempt per full key. Yields nothing when a column
    is too short to rank.
    """
    options = rank_column_shifts(az, key_len, top_n)
    if options is None:
        logger.debug("Abandoning key length {}: a column has fewer than {} letters", key_len, MIN_CHARS_FOR_MIC)
        return

    scorer = _KeyScorer(az, key_len)
    for shifts in product(*options):
        key = shifts_to_key(shifts)
        yield DecryptionAttempt(
            cipher_name=CIPHER_NAME,
            key=key,
            plaintext=vigenere_decrypt(ciphertext, key),
            score=scorer.score(shifts),
            lower_is_better=False,
            notes=f"MIC+trigram keylen={key_len}",
            meta={"key_length": key_len},
        )


def crack_vigenere(ciphertext: str, min_text_len: int, *, settings: Settings) -> list[DecryptionAttempt]:
    """
    Keyword search: rank key lengths, take the top-N MIC shifts per column, try
    every combination and score the plaintext by trigram log-probability.

    Best-effort: MIC pruning can miss the true key on short texts. An empty or
    low-scoring list is the failure signal; nothing is raised.
    """
    az = extract_alphabetic(ciphertext)
    if len(az) < min_text_len:
        return []

    results: list[DecryptionAttempt] = []
    for key_len in candidate_key_lengths(az, settings):
        before = len(results)
        results.extend(iter_keyword_candidates(ciphertext, az, key_len, settings.TOP_SHIFTS_PER_COLUMN))
        logger.debug("Key length {}: {} candidate keys", key_len, len(results) - before)

    results.sort()
    return results


class VigenereCipher:
    name = CIPHER_NAME

    def __init__(self, settings: Settings) -> None:
        self.settings = settings

    def encrypt(self, plaintext: str, key: str) -> str:
        return vigenere_encrypt(plaintext, key)

    def decrypt(self, ciphertext: str, key: str) -> str:
        return vigenere_decrypt(ciphertext, key)

    def identify(self, ciphertext: str) -> Optional[IdentificationResult]:
        return identify_vigenere(
            ciphertext,
            self.settings.VIGENERE_MIN_ID_LEN,
            kasiski_min_len=self.settings.KASISKI_MIN_SEQ_LEN,
            kasiski_max_len=self.settings.KASISKI_MAX_KEY_LEN,
        )

    def crack(self, ciphertext: str) -> list[DecryptionAttempt]:
        return crack_vigenere(ciphertext, self.settings.VIGENERE_MIN_DEC_LEN, settings=self.settings)

    def min_crack_length(self) -> int:
        return self.settings.VIGENERE_MIN_DEC_LEN


def register(settings: Settings) -> None:
    register_plugin(VigenereCipher(settings))
