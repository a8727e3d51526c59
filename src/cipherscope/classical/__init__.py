from __future__ import annotations

from typing import Optional

from cipherscope.core.config import Settings


def register_all(settings: Optional[Settings] = None) -> None:
    """(Re)register both cipher families; Vigenere picks up thresholds from settings."""
    from cipherscope.core.config import settings as default_settings
    from .monoalphabetic import caesar
    from .polyalphabetic import vigenere

    cfg = settings or default_settings
    caesar.register(cfg)
    vigenere.register(cfg)
