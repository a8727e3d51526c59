from .results import DecryptionAttempt, IdentificationResult
from .features import analyze_text, calculate_basic_stats
from .registry import register_plugin, decrypt_known, encrypt_known, identify_all, crack_all

__all__ = [
    "DecryptionAttempt",
    "IdentificationResult",
    "analyze_text",
    "calculate_basic_stats",
    "register_plugin",
    "decrypt_known",
    "encrypt_known",
    "identify_all",
    "crack_all",
]
