from __future__ import annotations

from functools import lru_cache

ALPHABET = "ABCDEFGHIJKLMNOPQRSTUVWXYZ"
A_ORD = ord("A")


def norm_key_alpha(key: str) -> str:
    """Uppercase and keep only A-Z."""
    return "".join(ch for ch in key.upper() if "A" <= ch <= "Z")


def key_to_shifts(key: str) -> list[int]:
    return [ord(ch) - A_ORD for ch in norm_key_alpha(key)]


def shifts_to_key(shifts) -> str:
    return "".join(chr(A_ORD + (s % 26)) for s in shifts)


@lru_cache(maxsize=26)
def shift_table(shift: int) -> dict[str, str]:
    """Letter -> shifted letter for both cases; non-letters are absent."""
    shift %= 26
    table: dict[str, str] = {}
    for i, ch in enumerate(ALPHABET):
        shifted = ALPHABET[(i + shift) % 26]
        table[ch] = shifted
        table[ch.lower()] = shifted.lower()
    return table


def shift_char(ch: str, shift: int) -> str:
    """Shift one ASCII letter by 'shift' (can be negative); anything else is returned as is."""
    return shift_table(shift % 26).get(ch, ch)


def shift_text(text: str, shift: int) -> str:
    """Caesar shift; preserves non-letters; preserves case."""
    table = shift_table(shift % 26)
    return "".join(table.get(ch, ch) for ch in text)
