"""
Tests for hidden label detection.
"""

import pytest

from datacollect.extraction.obfuscation import has_hidden_word


@pytest.mark.parametrize(
    "needle,haystack,expected",
    [
        ("cookie", "cooOOOkie", True),
        ("cookie", "cookie", True),
        ("Sponsored", "423TGRcoSAFpoGRnkHsiDSoDrGRTeYd", True),
        ("", "anything", True),
        ("", "", True),
        ("baking cookies", "some cookie baking", False),
        ("candy canes", "candy", False),
        ("Sponsored", "423TGRcoAFoGRkHiDSDGRTe", False),
        ("Sponsored", "sponsored", False),
        ("a", "", False),
    ],
)
def test_has_hidden_word(needle: str, haystack: str, expected: bool) -> None:
    assert has_hidden_word(needle, haystack) is expected
