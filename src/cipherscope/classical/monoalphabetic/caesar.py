from __future__ import annotations

from typing import Optional

from cipherscope.classical.common import shift_text
from cipherscope.core.config import Settings
from cipherscope.core.registry import register_plugin
from cipherscope.core.results import DecryptionAttempt, IdentificationResult
from cipherscope.core.scoring import MAX_SCORE, english_likelihood
from cipherscope.core.utils import extract_alphabetic

CIPHER_NAME = "caesar"


def _parse_shift(key: str) -> int:
    try:
        return int(key) % 26
    except ValueError as e:
        raise ValueError("Caesar key must be an integer 0..25.") from e


def caesar_brute_force(ciphertext: str) -> list[DecryptionAttempt]:
    """
    Try all 26 shifts, scored by chi-squared against English (lower is better).

    Text without any letters still yields one row: the identity transform with
    the saturated worst score.
    """
    if not extract_alphabetic(ciphertext):
        return [
            DecryptionAttempt(
                cipher_name=CIPHER_NAME,
                key="0",
                plaintext=ciphertext,
                score=MAX_SCORE,
                lower_is_better=True,
                notes="No alphabetic content",
            )
        ]

    out: list[DecryptionAttempt] = []
    for k in range(26):
        pt = shift_text(ciphertext, -k)
        out.append(
            DecryptionAttempt(
                cipher_name=CIPHER_NAME,
                key=str(k),
                plaintext=pt,
                score=english_likelihood(pt),
                lower_is_better=True,
                notes=f"Caesar shift {k}",
            )
        )
    out.sort()
    return out


def identify_caesar(ciphertext: str) -> Optional[IdentificationResult]:
    """Best shift by chi-squared; the score itself is the (lower-is-better) confidence."""
    best_shift: Optional[int] = None
    best_score = MAX_SCORE
    for k in range(26):
        score = english_likelihood(shift_text(ciphertext, -k))
        if score is not None and score < best_score:
            best_score = score
            best_shift = k

    if best_shift is None:
        return None
    return IdentificationResult(
        cipher_name=CIPHER_NAME,
        confidence=best_score,
        description=f"Potential Shift: {best_shift}",
        lower_is_better=True,
    )


class CaesarCipher:
    name = CIPHER_NAME

    def encrypt(self, plaintext: str, key: str) -> str:
        return shift_text(plaintext, _parse_shift(key))

    def decrypt(self, ciphertext: str, key: str) -> str:
        # Decrypt means shift backwards by k
        return shift_text(ciphertext, -_parse_shift(key))

    def identify(self, ciphertext: str) -> Optional[IdentificationResult]:
        return identify_caesar(ciphertext)

    def crack(self, ciphertext: str) -> list[DecryptionAttempt]:
        return caesar_brute_force(ciphertext)

    def min_crack_length(self) -> int:
        return 0


def register(settings: Settings) -> None:
    # Caesar has nothing configurable; it always runs.
    register_plugin(CaesarCipher())
