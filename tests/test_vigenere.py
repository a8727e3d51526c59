"""
Tests for Vigenere encryption, identification and the MIC + trigram keyword search.
"""

import inspect

import pytest

from cipherscope.classical.common import shift_text
from cipherscope.classical.polyalphabetic import vigenere as vig
from cipherscope.classical.polyalphabetic.gating import identify_vigenere
from cipherscope.classical.polyalphabetic.vigenere import (
    VigenereCipher,
    candidate_key_lengths,
    crack_vigenere,
    iter_keyword_candidates,
    rank_column_shifts,
    vigenere_decrypt,
    vigenere_encrypt,
)
from cipherscope.core.scoring import trigram_log_probability
from cipherscope.core.utils import extract_alphabetic


# ----------------------------
# Encryption / decryption
# ----------------------------

def test_decrypt_known_vectors():
    assert vigenere_decrypt("LXFOPVEFRNHR", "LEMON") == "ATTACKATDAWN"
    assert vigenere_decrypt("Hello World!", "KEY") == "Xanbk Yennt!"
    assert vigenere_decrypt("ARHI IQS XKIE", "SECURE") == "INFO RMA TION"


@pytest.mark.parametrize("key", ["LEMON", "key", "CRYPTO", "A", "Zebra"])
def test_round_trip_preserves_case_and_punctuation(key):
    plaintext = "Four score, and SEVEN years ago -- our fathers (1863)!"
    ciphertext = vigenere_encrypt(plaintext, key)
    assert vigenere_decrypt(ciphertext, key) == plaintext
    assert [c for c in ciphertext if not c.isalpha()] == [c for c in plaintext if not c.isalpha()]


def test_key_must_have_letters():
    with pytest.raises(ValueError):
        vigenere_decrypt("TESTING", "")
    with pytest.raises(ValueError):
        vigenere_encrypt("TESTING", "123")


@pytest.mark.parametrize("key", ["K3Y", "KEY ", "KÉY", "-"])
def test_key_with_non_letters_is_rejected(key):
    with pytest.raises(ValueError, match="A-Z letters"):
        vigenere_decrypt("TESTING", key)
    with pytest.raises(ValueError):
        vigenere_encrypt("TESTING", key)


# ----------------------------
# Identification
# ----------------------------

def test_identify_vigenere_long(alice):
    result = identify_vigenere(vigenere_encrypt(alice, "CRYPTO"), 30)
    assert result is not None
    assert result.cipher_name == "vigenere"
    assert result.confidence > 0.5
    assert not result.lower_is_better
    assert result.description.startswith("Low IC")


def test_identify_not_vigenere_high_ic():
    plaintext = "THISISAPLAINTEXTMESSAGELONGENOUGHTOTESTIDENTIFICATION"
    assert identify_vigenere(plaintext, 30) is None
    assert identify_vigenere(shift_text(plaintext, 3), 30) is None


def test_identify_too_short():
    assert identify_vigenere("SHORTTEXT", 30) is None
    assert identify_vigenere("ABCABCABCABCABCABC", 15) is None


def test_identify_random_low_ic():
    randomish = "AZBYCXDWEVFUGTHSIRJQKPLOMNNAZBYCXDWEVFUGTHSIRJQKPLOMN"
    result = identify_vigenere(randomish, 30)
    assert result.confidence > 0.8
    assert "Kasiski inconclusive" in result.description or "Likely Key Lengths" in result.description


def test_identify_length_boundaries(registered):
    cipher = VigenereCipher(registered)
    assert cipher.identify("ABCDEFGHIJKLMNOPQRSTUVWXYZABC") is None
    assert cipher.identify("ABCDEFGHIJKLMNOPQRSTUVWXYZABCDE") is not None
    assert cipher.identify("A" * 45) is None


# ----------------------------
# Search building blocks
# ----------------------------

def test_rank_column_shifts_abandons_short_columns():
    assert rank_column_shifts("ABCDEFGHIJ", 3, 3) is None
    assert list(iter_keyword_candidates("ABCDEFGHIJ", "ABCDEFGHIJ", 3, 3)) == []


def test_rank_column_shifts_shape(alice):
    ranked = rank_column_shifts(alice, 4, 2)
    assert len(ranked) == 4
    assert all(len(col) == 2 for col in ranked)


def test_keyword_candidates_are_lazy(alice):
    gen = iter_keyword_candidates(alice, alice, 2, 3)
    assert inspect.isgenerator(gen)
    assert len(list(gen)) == 9


def test_candidate_lengths_respect_caps(settings):
    lengths = candidate_key_lengths("LXFOPVEFRNHR", settings)
    assert lengths
    assert set(lengths) <= {1, 2}


def test_candidate_lengths_fall_back_to_defaults(settings, monkeypatch):
    monkeypatch.setattr(vig, "ic_periodicity_key_lengths", lambda *a, **k: [])
    monkeypatch.setattr(vig, "kasiski_key_lengths", lambda *a, **k: [])
    assert candidate_key_lengths("A" * 200, settings) == [3, 4, 5, 6, 7]
    assert candidate_key_lengths("A" * 22, settings) == [3, 4]


def test_candidate_lengths_fall_back_to_kasiski(settings, monkeypatch):
    monkeypatch.setattr(vig, "ic_periodicity_key_lengths", lambda *a, **k: [])
    monkeypatch.setattr(vig, "kasiski_key_lengths", lambda *a, **k: [(12, 9), (6, 7), (3, 5)])
    assert candidate_key_lengths("A" * 200, settings) == [6, 3]


# ----------------------------
# Keyword search
# ----------------------------

def test_crack_scores_match_trigram_scorer(alice, settings):
    results = crack_vigenere(vigenere_encrypt(alice, "CRYPTO"), 20, settings=settings)
    assert results
    for r in results[:25]:
        assert r.score == pytest.approx(trigram_log_probability(r.plaintext), abs=1e-6)
        assert vigenere_decrypt(vigenere_encrypt(r.plaintext, r.key), r.key) == r.plaintext


def test_crack_results_sorted_descending(alice, settings):
    results = crack_vigenere(vigenere_encrypt(alice, "CRYPTO"), 20, settings=settings)
    scores = [r.score for r in results]
    assert scores == sorted(scores, reverse=True)
    assert all(r.cipher_name == "vigenere" and not r.lower_is_better for r in results)


def test_crack_long_text_cycle(alice, settings):
    ciphertext = vigenere_encrypt(alice, "CRYPTO")
    results = crack_vigenere(ciphertext, 20, settings=settings)
    assert results

    manual = vigenere_decrypt(ciphertext, "CRYPTO")
    assert extract_alphabetic(manual) == alice
    assert 6 in candidate_key_lengths(extract_alphabetic(ciphertext), settings)

    keys = [r.key for r in results]
    assert "CRYPTO" in keys
    assert keys.index("CRYPTO") < 3
    assert results[0].score >= trigram_log_probability(manual)


def test_crack_recovers_keyword_on_long_text(gettysburg, settings):
    ciphertext = vigenere_encrypt(gettysburg, "LINCOLN")
    results = crack_vigenere(ciphertext, 20, settings=settings)
    assert results[0].key == "LINCOLN"
    assert results[0].plaintext == gettysburg


def test_crack_on_caesar_text(settings):
    plaintext = "THISISACAESARCIPHERTEXTWHICHSHOULDNOTBEBROKENASVIGENEREEXTENDED"
    ciphertext = shift_text(plaintext, 5)
    results = crack_vigenere(ciphertext, 20, settings=settings)
    assert results
    assert set(results[0].key) == {"F"}
    assert results[0].score == pytest.approx(trigram_log_probability(plaintext), abs=1e-6)


def test_crack_short_text_gated(settings):
    assert crack_vigenere("KICMPVCPVWPI", 20, settings=settings) == []
    assert crack_vigenere("LXFOPVEFRNHR", 20, settings=settings) == []
    assert crack_vigenere("LXFOPVEFRNHR", 10, settings=settings) != []


def test_crack_no_letters(settings):
    assert crack_vigenere("1234 5678 !!", 0, settings=settings) == []


def test_plugin_uses_configured_minimum(settings):
    short = settings.with_overrides(VIGENERE_MIN_DEC_LEN=10)
    assert VigenereCipher(settings).crack("LXFOPVEFRNHR") == []
    assert VigenereCipher(short).crack("LXFOPVEFRNHR") != []
    assert VigenereCipher(short).min_crack_length() == 10
