from __future__ import annotations

from typing import Optional

from cipherscope.core.periodicity import kasiski_key_lengths
from cipherscope.core.results import IdentificationResult
from cipherscope.core.scoring import ENGLISH_IC, RANDOM_IC, index_of_coincidence
from cipherscope.core.utils import extract_alphabetic

# IC must sit at least this far below English before a text looks polyalphabetic.
IC_MARGIN = 0.005


def identify_vigenere(
    ciphertext: str,
    min_text_len: int,
    *,
    kasiski_min_len: int = 3,
    kasiski_max_len: int = 20,
) -> Optional[IdentificationResult]:
    """
    Flag text whose IC has dropped toward random as likely Vigenere.

    Confidence (higher is better) is how far the IC has travelled from English
    toward random, clamped to 0..1. Kasiski estimates go into the description.
    """
    az = extract_alphabetic(ciphertext)
    if len(az) < min_text_len:
        return None

    ic = index_of_coincidence(az)
    if ic is None or ic > ENGLISH_IC - IC_MARGIN:
        return None

    estimates = kasiski_key_lengths(az, kasiski_min_len, kasiski_max_len)
    if estimates:
        top = ", ".join(f"{klen} ({count})" for klen, count in estimates[:5])
        description = f"Low IC ({ic:.4f}). Likely Key Lengths (Count): [{top}]"
    else:
        description = f"Low IC ({ic:.4f}) suggests Polyalphabetic, Kasiski inconclusive."

    confidence = max(0.0, min(1.0, (ENGLISH_IC - ic) / (ENGLISH_IC - RANDOM_IC)))
    return IdentificationResult(
        cipher_name="vigenere",
        confidence=confidence,
        description=description,
        lower_is_better=False,
    )
