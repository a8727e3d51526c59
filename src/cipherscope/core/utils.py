from __future__ import annotations

import re


_NON_AZ_RE = re.compile(r"[^A-Za-z]+")


def extract_alphabetic(s: str) -> str:
    """Keep only ASCII A-Z/a-z, uppercased. This is the signal every statistic runs on."""
    if not s:
        return ""
    # filter before upper(): some non-ASCII letters expand to ASCII when uppercased
    return _NON_AZ_RE.sub("", s).upper()


def alpha_count(s: str) -> int:
    return len(extract_alphabetic(s))


def split_columns(az: str, period: int) -> list[str]:
    """Interleaved columns: column i holds every period-th letter starting at offset i."""
    if period <= 0:
        return []
    return [az[i::period] for i in range(period)]
