import json

import pytest

from bgg_honors.config import DEFAULT_RULE, AwardRule, NomineeCap, load_award_rules, rule_for


def test_spiel_des_jahres_nominee_era():
    rule = rule_for("Spiel des Jahres")
    assert rule.nominee_cap_for(1998) == 0
    assert rule.nominee_cap_for(1999) == 3
    assert rule.nominee_cap_for(2024) == 3
    assert rule.recommended_cap == 5


def test_nominee_eras_pick_latest_applicable():
    rule = AwardRule(nominee_caps=(NomineeCap(2010, 5), NomineeCap(2000, 3)))
    assert rule.nominee_cap_for(1999) == 0
    assert rule.nominee_cap_for(2005) == 3
    assert rule.nominee_cap_for(2015) == 5


def test_rule_lookup_falls_back_to_prefix_then_default():
    assert rule_for("Golden Geek Best Strategy Board Game").infer_from_game_count
    assert rule_for("mensa select").single_winner is False
    assert rule_for("Some Local Award") == DEFAULT_RULE
    assert rule_for(None) == DEFAULT_RULE
    assert DEFAULT_RULE.nominee_cap_for(2020) is None


def test_load_award_rules_merges_overrides(tmp_path):
    path = tmp_path / "rules.json"
    path.write_text(
        json.dumps(
            {
                "Spiel des Jahres": {"recommended_cap": 6},
                "As d'Or": {"nominee_caps": [{"from_year": 2005, "cap": 4}]},
            }
        ),
        encoding="utf-8",
    )
    rules = load_award_rules(path)

    sdj = rules["Spiel des Jahres"]
    assert sdj.recommended_cap == 6
    assert sdj.nominee_cap_for(2020) == 3
    assert rules["As d'Or"].nominee_cap_for(2010) == 4
    assert rules["Golden Geek"].infer_from_game_count


def test_load_award_rules_rejects_unknown_keys(tmp_path):
    path = tmp_path / "rules.json"
    path.write_text(json.dumps({"Spiel des Jahres": {"max_winners": 2}}), encoding="utf-8")
    with pytest.raises(ValueError):
        load_award_rules(path)


def test_load_award_rules_rejects_non_object(tmp_path):
    path = tmp_path / "rules.json"
    path.write_text("[]", encoding="utf-8")
    with pytest.raises(ValueError):
        load_award_rules(path)
