"""
Engine configuration using pydantic-settings.

Every field can be overridden with a CIPHERSCOPE_-prefixed environment variable
(e.g. CIPHERSCOPE_VIGENERE_MIN_DEC_LEN=12) or a .env file.
"""

from __future__ import annotations

from typing import Any

from pydantic import Field, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Thresholds and search bounds consumed by the analysis engine."""

    # Alphabetic-character minimums before Vigenere work is attempted
    VIGENERE_MIN_ID_LEN: int = Field(30, ge=0)
    VIGENERE_MIN_DEC_LEN: int = Field(20, ge=0)

    KASISKI_MIN_SEQ_LEN: int = Field(3, ge=1)
    KASISKI_MAX_KEY_LEN: int = Field(20, ge=1)
    PERIODICITY_MIN_KEY_LEN: int = Field(1, ge=1)

    # Keyword search bounds: N ** L keys per trial length
    MAX_KEY_LENGTHS_TO_TRY: int = Field(5, ge=1)
    MAX_SEARCH_KEY_LEN: int = Field(8, ge=1)
    TOP_SHIFTS_PER_COLUMN: int = Field(3, ge=1, le=26)
    MAX_KEYS_PER_LENGTH: int = Field(100_000, ge=1)

    LOG_LEVEL: str = "WARNING"

    model_config = SettingsConfigDict(
        env_prefix="CIPHERSCOPE_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=True,
        extra="ignore",
    )

    @model_validator(mode="after")
    def _check_search_bounds(self) -> "Settings":
        worst = self.TOP_SHIFTS_PER_COLUMN ** self.MAX_SEARCH_KEY_LEN
        if worst > self.MAX_KEYS_PER_LENGTH:
            raise ValueError(
                f"Keyword search would try up to {worst} keys per length "
                f"(TOP_SHIFTS_PER_COLUMN={self.TOP_SHIFTS_PER_COLUMN} ** "
                f"MAX_SEARCH_KEY_LEN={self.MAX_SEARCH_KEY_LEN}); "
                f"MAX_KEYS_PER_LENGTH is {self.MAX_KEYS_PER_LENGTH}."
            )
        if self.PERIODICITY_MIN_KEY_LEN > self.KASISKI_MAX_KEY_LEN:
            raise ValueError("PERIODICITY_MIN_KEY_LEN must not exceed KASISKI_MAX_KEY_LEN.")
        return self

    def with_overrides(self, **fields: Any) -> "Settings":
        """A new, re-validated Settings with some fields replaced (None values are ignored)."""
        data = self.model_dump()
        data.update({k: v for k, v in fields.items() if v is not None})
        return self.__class__(**data)


settings = Settings()
