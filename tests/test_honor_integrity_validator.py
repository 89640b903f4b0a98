from bgg_honors.config import AwardRule, NomineeCap
from bgg_honors.models.honor import HonorCategory, HonorRecord
from bgg_honors.validators.honor_integrity_validator import (
    RULE_NOMINEE_CAP,
    RULE_RECOMMENDED_CAP,
    RULE_WINNER_COUNT,
    verify_corpus,
)


def _honor(category, year, award_type="Spiel des Jahres", honor_id=None):
    return HonorRecord(year=year, award_type=award_type, category=category, honor_id=honor_id)


def _corpus(*specs):
    """specs: (bgg_id, category, year[, award_type])"""
    games = {}
    for spec in specs:
        bgg_id, category, year, *rest = spec
        games.setdefault(bgg_id, []).append(_honor(category, year, *rest))
    return list(games.items())


def test_two_winners_in_one_year_is_a_winner_count_violation():
    games = _corpus((1, HonorCategory.WINNER, 2021), (2, HonorCategory.WINNER, 2021))
    report = verify_corpus(games)

    assert not report.ok
    assert len(report.violations) == 1
    violation = report.violations[0]
    assert (violation.year, violation.award_type, violation.rule) == (2021, "Spiel des Jahres", RULE_WINNER_COUNT)
    assert violation.detail == 2


def test_missing_winner_is_reported_with_zero():
    report = verify_corpus(_corpus((1, HonorCategory.NOMINEE, 2021)))
    assert [(v.rule, v.detail) for v in report.violations] == [(RULE_WINNER_COUNT, 0)]


def test_four_nominees_exceed_cap_of_three():
    games = _corpus(
        (1, HonorCategory.WINNER, 2020),
        *[(10 + i, HonorCategory.NOMINEE, 2020) for i in range(4)],
    )
    report = verify_corpus(games)
    assert [(v.rule, v.detail) for v in report.violations] == [(RULE_NOMINEE_CAP, "4 > 3")]
    assert len(report.groups[("Spiel des Jahres", 2020)].nominees) == 4


def test_no_nominees_allowed_before_nominee_era():
    games = _corpus((1, HonorCategory.WINNER, 1995), (2, HonorCategory.NOMINEE, 1995))
    report = verify_corpus(games)
    assert [(v.rule, v.detail) for v in report.violations] == [(RULE_NOMINEE_CAP, "1 > 0")]


def test_recommended_cap():
    games = _corpus(
        (1, HonorCategory.WINNER, 2015),
        *[(10 + i, HonorCategory.SPECIAL, 2015) for i in range(6)],
    )
    report = verify_corpus(games)
    assert [(v.rule, v.detail) for v in report.violations] == [(RULE_RECOMMENDED_CAP, "6 > 5")]


def test_co_equal_winner_awards_are_not_checked_for_winner_count():
    games = _corpus(
        (1, HonorCategory.WINNER, 2019, "Mensa Select"),
        (2, HonorCategory.WINNER, 2019, "Mensa Select"),
        (3, HonorCategory.WINNER, 2019, "Mensa Select"),
    )
    assert verify_corpus(games).ok


def test_rules_table_is_configurable():
    rules = {"Deutscher Spiele Preis": AwardRule(nominee_caps=(NomineeCap(2000, 1),))}
    games = _corpus(
        (1, HonorCategory.WINNER, 2005, "Deutscher Spiele Preis"),
        (2, HonorCategory.NOMINEE, 2005, "Deutscher Spiele Preis"),
        (3, HonorCategory.NOMINEE, 2005, "Deutscher Spiele Preis"),
    )
    report = verify_corpus(games, rules)
    assert [v.rule for v in report.violations] == [RULE_NOMINEE_CAP]


def test_violations_sorted_and_filterable_by_award_type():
    games = _corpus(
        (1, HonorCategory.NOMINEE, 2022, "Spiel des Jahres"),
        (2, HonorCategory.NOMINEE, 2021, "Spiel des Jahres"),
        (3, HonorCategory.NOMINEE, 2022, "Kennerspiel des Jahres"),
    )
    report = verify_corpus(games)
    assert [(v.award_type, v.year) for v in report.violations] == [
        ("Kennerspiel des Jahres", 2022),
        ("Spiel des Jahres", 2021),
        ("Spiel des Jahres", 2022),
    ]

    only_sdj = verify_corpus(games, award_types=["spiel des jahres"])
    assert {v.award_type for v in only_sdj.violations} == {"Spiel des Jahres"}
    assert only_sdj.games_scanned == 3


def test_report_as_dict():
    report = verify_corpus(_corpus((1, HonorCategory.WINNER, 2021), (2, HonorCategory.WINNER, 2021)))
    data = report.as_dict()
    assert data["games_scanned"] == 2
    assert data["violations"] == [
        {"year": 2021, "award_type": "Spiel des Jahres", "rule": RULE_WINNER_COUNT, "detail": 2}
    ]
