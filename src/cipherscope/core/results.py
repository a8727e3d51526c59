from __future__ import annotations

from dataclasses import dataclass, field
from functools import total_ordering
from typing import Any, Optional


@total_ordering
@dataclass(frozen=True)
class DecryptionAttempt:
    # Best-first ordering key; see __lt__
    sort_index: tuple[float] = field(init=False, repr=False)

    cipher_name: str
    key: str
    plaintext: str
    score: float

    # Chi-squared style scores (Caesar) rank ascending, trigram log-probabilities
    # (Vigenere) rank descending. Never sort attempts of different directions together.
    lower_is_better: bool = False

    notes: str = field(default="", compare=False)
    meta: dict[str, Any] = field(default_factory=dict, compare=False)

    def __post_init__(self) -> None:
        # sorts ascending; negate when higher is better
        idx = self.score if self.lower_is_better else -self.score
        object.__setattr__(self, "sort_index", (idx,))

    def beats(self, other: "DecryptionAttempt") -> bool:
        if self.lower_is_better != other.lower_is_better:
            raise ValueError("Cannot compare attempts scored in opposite directions.")
        return self.sort_index < other.sort_index

    def __lt__(self, other: object) -> bool:
        if not isinstance(other, DecryptionAttempt):
            return NotImplemented
        # sorting a mixed Caesar/Vigenere list raises instead of interleaving scales
        return self.beats(other)

    def to_dict(self) -> dict[str, Any]:
        return {
            "cipher_name": self.cipher_name,
            "key": self.key,
            "plaintext": self.plaintext,
            "score": self.score,
            "lower_is_better": self.lower_is_better,
            "notes": self.notes,
            "meta": dict(self.meta),
        }


@dataclass(frozen=True)
class IdentificationResult:
    cipher_name: str
    confidence: float
    description: Optional[str] = None
    lower_is_better: bool = False

    @property
    def badness(self) -> float:
        """Lower is better regardless of cipher family; used to pick a best guess."""
        return self.confidence if self.lower_is_better else 1.0 - self.confidence

    def to_dict(self) -> dict[str, Any]:
        return {
            "cipher_name": self.cipher_name,
            "confidence": self.confidence,
            "description": self.description,
            "lower_is_better": self.lower_is_better,
        }
