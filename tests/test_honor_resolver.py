import pytest

from bgg_honors.models.honor import HonorCategory, HonorRecord
from bgg_honors.services.honor_resolver import resolve_honors


def _honor(honor_id, category, year=2020, award_type="Spiel des Jahres", name=None):
    return HonorRecord(
        year=year,
        award_type=award_type,
        category=category,
        honor_id=honor_id,
        name=name or f"{year} {award_type}",
    )


def test_winner_suppresses_special_in_same_award_year():
    special = _honor("s", HonorCategory.SPECIAL)
    winner = _honor("w", HonorCategory.WINNER)

    resolution = resolve_honors([special, winner])

    assert resolution.honors == [winner]
    assert resolution.dropped_specials == [special]
    assert resolution.changed


def test_specials_in_other_years_or_awards_survive():
    honors = [
        _honor("s1", HonorCategory.SPECIAL, year=2019),
        _honor("s2", HonorCategory.SPECIAL, award_type="Kennerspiel des Jahres"),
        _honor("w", HonorCategory.WINNER),
        _honor("n", HonorCategory.NOMINEE),
    ]
    resolution = resolve_honors(honors)
    assert resolution.honors == honors
    assert not resolution.changed


def test_duplicate_honor_id_keeps_first():
    first = _honor("1", HonorCategory.NOMINEE)
    again = _honor("1", HonorCategory.NOMINEE, name="2020 Spiel des Jahres (dup)")
    resolution = resolve_honors([first, again])
    assert resolution.honors == [first]
    assert resolution.dropped_duplicates == [again]


def test_duplicates_without_id_match_on_category_and_name():
    a = _honor(None, HonorCategory.NOMINEE)
    b = _honor(None, HonorCategory.NOMINEE)
    c = _honor(None, HonorCategory.SPECIAL)
    resolution = resolve_honors([a, b, c])
    assert resolution.honors == [a, c]


def test_legacy_record_without_id_matches_incoming_record_with_id():
    legacy = _honor(None, HonorCategory.WINNER, year=2022)
    incoming = _honor("w-2022", HonorCategory.WINNER, year=2022)

    resolution = resolve_honors([legacy, incoming])

    assert resolution.honors == [legacy]
    assert resolution.dropped_duplicates == [incoming]


def test_distinct_ids_with_same_name_are_both_kept():
    a = _honor("gg-1", HonorCategory.NOMINEE, award_type="Golden Geek", name="2021 Golden Geek")
    b = _honor("gg-2", HonorCategory.NOMINEE, award_type="Golden Geek", name="2021 Golden Geek")
    assert resolve_honors([a, b]).honors == [a, b]


MIXED_COLLECTIONS = [
    [],
    [
        _honor("s", HonorCategory.SPECIAL),
        _honor("w", HonorCategory.WINNER),
        _honor("w", HonorCategory.WINNER),
        _honor("n", HonorCategory.NOMINEE, year=2021),
    ],
    [
        _honor("1", HonorCategory.NOMINEE),
        _honor(None, HonorCategory.NOMINEE),
        _honor("2", HonorCategory.NOMINEE),
        _honor(None, HonorCategory.NOMINEE),
    ],
    [
        _honor("x", HonorCategory.NOMINEE),
        _honor("x", HonorCategory.WINNER),
        _honor(None, HonorCategory.SPECIAL),
        _honor(None, HonorCategory.SPECIAL, year=2019),
    ],
    [
        _honor(None, HonorCategory.WINNER, year=2018),
        _honor("a", HonorCategory.WINNER, year=2018),
        _honor("b", HonorCategory.SPECIAL, year=2018),
        _honor("c", HonorCategory.NOMINEE, year=2018, award_type="Kennerspiel des Jahres"),
        _honor(None, HonorCategory.NOMINEE, year=2018, award_type="Kennerspiel des Jahres"),
        _honor("c", HonorCategory.NOMINEE, year=2019, award_type="Kennerspiel des Jahres"),
    ],
]


@pytest.mark.parametrize("honors", MIXED_COLLECTIONS)
def test_resolve_is_idempotent(honors):
    once = resolve_honors(honors).honors
    twice = resolve_honors(once)
    assert twice.honors == once
    assert not twice.changed
