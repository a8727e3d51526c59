from __future__ import annotations

from typing import Iterable, Optional, Protocol

from loguru import logger

from .results import DecryptionAttempt, IdentificationResult


class CipherPlugin(Protocol):
    name: str

    def encrypt(self, plaintext: str, key: str) -> str:
        ...

    def decrypt(self, ciphertext: str, key: str) -> str:
        ...

    def identify(self, ciphertext: str) -> Optional[IdentificationResult]:
        ...

    def crack(self, ciphertext: str) -> list[DecryptionAttempt]:
        ...

    def min_crack_length(self) -> int:
        ...


_PLUGINS: dict[str, CipherPlugin] = {}


def register_plugin(plugin: CipherPlugin) -> None:
    """Register (or replace) the plugin for one cipher family."""
    key = plugin.name.lower().strip()
    if not key:
        raise ValueError("Plugin must have a non-empty name.")
    _PLUGINS[key] = plugin


def list_plugins() -> list[str]:
    return sorted(_PLUGINS.keys())


def get_plugin(cipher_name: str) -> CipherPlugin:
    name = cipher_name.lower().strip()
    if name not in _PLUGINS:
        raise ValueError(f"Unknown cipher '{cipher_name}'. Available: {', '.join(list_plugins())}")
    return _PLUGINS[name]


def decrypt_known(cipher_name: str, ciphertext: str, key: Optional[str]) -> str:
    if key is None:
        raise ValueError("This decrypt operation requires --key.")
    return get_plugin(cipher_name).decrypt(ciphertext, key)


def encrypt_known(cipher_name: str, plaintext: str, key: Optional[str]) -> str:
    if key is None:
        raise ValueError("This encrypt operation requires --key.")
    return get_plugin(cipher_name).encrypt(plaintext, key)


def _selected(include: Optional[Iterable[str]]) -> list[tuple[str, CipherPlugin]]:
    names = list_plugins() if include is None else sorted({n.lower().strip() for n in include})
    return [(n, get_plugin(n)) for n in names]


def identify_all(ciphertext: str, *, include: Optional[Iterable[str]] = None) -> list[IdentificationResult]:
    """Run every selected identifier; families with no opinion are left out."""
    found: list[IdentificationResult] = []
    for name, plugin in _selected(include):
        result = plugin.identify(ciphertext)
        if result is None:
            logger.debug("Identifier {} inconclusive", name)
            continue
        found.append(result)
    return found


def best_identification(results: Iterable[IdentificationResult]) -> Optional[IdentificationResult]:
    """Lowest badness wins; Caesar confidence is a chi-squared score, Vigenere a 0..1 confidence."""
    best: Optional[IdentificationResult] = None
    for r in results:
        if best is None or r.badness < best.badness:
            best = r
    return best


def crack_all(ciphertext: str, *, include: Optional[Iterable[str]] = None) -> dict[str, list[DecryptionAttempt]]:
    """
    Ask each selected plugin to crack the text. Results stay grouped per cipher
    because score directions differ between families; each list is best-first.
    """
    return {name: plugin.crack(ciphertext) for name, plugin in _selected(include)}
