import pytest

from bgg_honors.validators.placeholder_detector import (
    derive_award_prefixes,
    find_placeholder_games,
    is_likely_award_placeholder,
)


@pytest.mark.parametrize(
    "name, expected",
    [
        ("Spiel des Jahres Nominee", True),
        ("Golden Geek Best Strategy Game Winner", True),
        ("Golden Geek Best Strategy Game Winn", True),
        ("Kennerspiel des Jahres nomin", True),
        ("Best Board Game Award Honor Roll Collection", True),
        ("Best Award", False),
        ("Brass: Birmingham", False),
        ("Spiel des Jahres", False),
        ("", False),
        (None, False),
    ],
)
def test_is_likely_award_placeholder(name, expected):
    assert is_likely_award_placeholder(name) is expected


def test_derive_award_prefixes_skips_generic_words():
    prefixes = derive_award_prefixes(["Spiel des Jahres", "Golden Geek", "Best of the Year", ""])
    assert prefixes == ["golden", "golden geek", "spiel", "spiel des"]


def test_find_placeholder_games():
    games = [
        (1, "Spiel des Jahres Nominee"),
        (2, "Spiel des Jahres"),
        (3, "Azul"),
        (4, "Golden Geek Best Thematic Board Game Winner"),
        (5, "Catan Winner"),
    ]
    candidates = find_placeholder_games(games, ["Spiel des Jahres", "Golden Geek"])
    assert candidates == [
        {"bgg_id": 4, "name": "Golden Geek Best Thematic Board Game Winner", "prefix": "golden"},
        {"bgg_id": 1, "name": "Spiel des Jahres Nominee", "prefix": "spiel"},
    ]
