"""
Unit tests for the trigram table and trigram log-probability scoring.
"""

import math

import pytest

from cipherscope.classical.common import shift_text
from cipherscope.core.ngrams import TrigramTable, TrigramTableError, get_trigram_table
from cipherscope.core.scoring import trigram_log_probability


def test_packaged_table_is_dense():
    table = get_trigram_table()
    assert len(table.logp) == 26 ** 3
    assert len(table.values) == 26 ** 3
    assert table.values[0] == table.logp["AAA"]
    assert table.values[-1] == table.logp["ZZZ"]


def test_packaged_table_is_read_only():
    table = get_trigram_table()
    with pytest.raises(TypeError):
        table.logp["THE"] = 0.0
    assert get_trigram_table() is table


def test_unseen_trigram_uses_floor():
    table = get_trigram_table()
    assert table.logp["QZX"] == table.floor
    assert math.isfinite(table.floor)
    assert table.logp["THE"] > table.logp["ING"] > table.floor


def test_trigram_score_sums_windows():
    table = get_trigram_table()
    assert trigram_log_probability("the") == pytest.approx(table.logp["THE"])
    assert trigram_log_probability("T-H-E-N") == pytest.approx(table.logp["THE"] + table.logp["HEN"])


def test_trigram_score_too_short():
    assert trigram_log_probability("") == float("-inf")
    assert trigram_log_probability("ab 12") == float("-inf")


def test_trigram_score_prefers_english(alice):
    assert trigram_log_probability(alice) > trigram_log_probability(shift_text(alice, 3))


def test_from_text_parses_counts_and_skips_junk():
    table = TrigramTable.from_text("abc 5\n\nnot a line\nABCD 4\nXYZ notnum\nXY 3\nDEF -1\nabc 5\n")
    assert table.total == 10
    assert table.logp["ABC"] == 0.0
    assert table.logp["XYZ"] == table.floor
    assert table.floor == pytest.approx(math.log10(0.01 / 10))


@pytest.mark.parametrize("text", ["", "garbage\nmore garbage", "ABCD 12\nXY 4", "ABC 0\nDEF 0"])
def test_from_text_without_usable_entries_is_fatal(text):
    with pytest.raises(TrigramTableError):
        TrigramTable.from_text(text)
