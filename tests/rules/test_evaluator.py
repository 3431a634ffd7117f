import logging

import pytest

from dprforge.codex.styles import default_styles
from dprforge.models.build import Buffs, Feats, Features
from dprforge.rules.evaluator import compare_builds, evaluate, governing_ability
from dprforge.rules.modifiers import Archery, Bless, Dueling, modifiers_for


def test_longsword_dueling_reference(make_build):
    s = evaluate(make_build(style_id="dueling"))
    assert s.to_hit == 6
    assert s.p_hit == pytest.approx(0.55)
    assert s.p_crit == pytest.approx(0.05)
    assert s.attacks == 2
    # (0.50 * 9.5 + 0.05 * 14) * 2
    assert s.dpr == pytest.approx(10.9)
    assert s.notes == ("Dueling: +2 damage with 1H melee.",)
    assert s.dpr > evaluate(make_build()).dpr


def test_evaluate_is_pure(make_build):
    b = make_build(style_id="dueling", buffs=Buffs(bless=True))
    assert evaluate(b) == evaluate(b)


def test_gwm_trades_accuracy_for_damage(make_build):
    s = evaluate(make_build("greatsword", feats=Feats(gwm=True)))
    assert s.to_hit == 1
    assert s.p_hit == pytest.approx(0.30)
    # (0.25 * 20 + 0.05 * 27) * 2
    assert s.dpr == pytest.approx(12.7)
    assert "GWM: -5 to hit/+10 dmg." in s.notes


def test_gwm_needs_a_tagged_weapon(make_build):
    plain = evaluate(make_build("longsword"))
    assert evaluate(make_build("longsword", feats=Feats(gwm=True))) == plain


def test_sharpshooter_ignored_on_melee(make_build):
    base = evaluate(make_build("greatsword"))
    assert base.dpr == pytest.approx(11.7)
    assert evaluate(make_build("greatsword", feats=Feats(ss=True))) == base


def test_sharpshooter_on_longbow(make_build):
    s = evaluate(make_build("longbow", feats=Feats(ss=True)))
    # DEX 14: +3 prof +2 dex -5
    assert s.to_hit == 0
    assert "Sharpshooter: -5 to hit/+10 dmg." in s.notes


def test_archery_only_for_ranged(make_build):
    bow = evaluate(make_build("longbow", style_id="archery"))
    assert bow.to_hit == 7
    assert bow.notes == ("Archery: +2 to hit applied.",)
    sword = evaluate(make_build("longsword", style_id="archery"))
    assert sword.to_hit == 6
    assert sword.notes == ()


def test_defense_is_a_note_only(make_build):
    s = evaluate(make_build(style_id="defense"))
    assert s.dpr == evaluate(make_build()).dpr
    assert s.notes == ("Defense: +1 AC (not factored into DPR).",)


def test_bless_rounds_half_up(make_build):
    s = evaluate(make_build(buffs=Buffs(bless=True)))
    # 6 + 2.5
    assert s.to_hit == 9
    assert s.p_hit == pytest.approx(0.675)
    assert s.notes == ("Bless: +≈2.5 to hit EV.",)


def test_versatile_uses_larger_die(make_build):
    one = evaluate(make_build())
    two = evaluate(make_build(use_versatile=True))
    assert two.avg_hit - one.avg_hit == pytest.approx(1.0)
    # no versatile die: flag is ignored
    assert evaluate(make_build("mace", use_versatile=True)) == evaluate(make_build("mace"))


def test_great_weapon_fighting(make_build):
    s = evaluate(make_build("greatsword", style_id="great-weapon"))
    assert s.avg_hit == pytest.approx(2 * (3.5 + 0.6667) + 3)
    assert "Great Weapon Fighting: reroll 1s & 2s estimated." in s.notes
    # one-handed weapons don't qualify
    assert evaluate(make_build(style_id="great-weapon")).notes == ()


def test_two_weapon_fighting_adds_attack(make_build):
    s = evaluate(make_build("shortsword", style_id="two-weapon"))
    assert s.attacks == 3
    assert s.notes == ("Two-Weapon Fighting: includes offhand attack (adds mod).",)
    assert evaluate(make_build("longsword", style_id="two-weapon")).attacks == 2


def test_crossbow_expert(make_build):
    s = evaluate(make_build("hand-crossbow", feats=Feats(cbe=True)))
    assert s.attacks == 3
    assert "Crossbow Expert: bonus attack added." in s.notes
    assert evaluate(make_build("longbow", feats=Feats(cbe=True))).attacks == 2


def test_sneak_attack_once_per_turn(make_build):
    base = evaluate(make_build("rapier", dex=16))
    s = evaluate(make_build("rapier", dex=16, features=Features(sneak=True)))
    # p_noncrit 0.5, two swings: 0.75 chance of landing 3d6
    assert s.dpr - base.dpr == pytest.approx(0.75 * 10.5)
    assert "Sneak Attack: 3d6 once per turn." in s.notes


def test_divine_smite(make_build):
    base = evaluate(make_build())
    s = evaluate(make_build(features=Features(smite=True, smite_dice=2, smites_per_round=1)))
    assert s.dpr - base.dpr == pytest.approx(0.5 * 9 + 0.05 * 18)
    zero = evaluate(make_build(features=Features(smite=True, smites_per_round=0)))
    assert zero.dpr == base.dpr


def test_polearm_master_bonus_attack(make_build):
    s = evaluate(make_build("glaive", feats=Feats(pam=True)))
    # main: (0.5 * 8.5 + 0.05 * 14) * 2; bonus 1d4+3: 0.5 * 5.5 + 0.05 * 8
    assert s.dpr == pytest.approx(9.9 + 3.15)
    assert s.attacks == 2
    assert "Polearm Master: bonus 1d4 attack added." in s.notes


def test_rage_is_melee_only(make_build):
    axe = evaluate(make_build("greataxe", features=Features(rage=True)))
    assert axe.avg_hit == pytest.approx(6.5 + 3 + 2)
    assert "Rage: +2 melee damage per hit." in axe.notes
    bow = evaluate(make_build("longbow", features=Features(rage=True)))
    assert bow == evaluate(make_build("longbow"))


def test_resist_and_vuln_compound(make_build):
    base = evaluate(make_build())
    res = evaluate(make_build(resist="slashing"))
    assert res.dpr == pytest.approx(base.dpr / 2)
    assert res.notes == ("Target resists slashing damage.",)
    both = evaluate(make_build(resist="slashing", vuln="slashing"))
    assert both.dpr == pytest.approx(base.dpr)
    assert both.notes == (
        "Target resists slashing damage.",
        "Target vulnerable to slashing damage.",
    )
    # other damage types are untouched
    assert evaluate(make_build(resist="fire")) == base


def test_notes_follow_modifier_order(make_build):
    b = make_build(
        "glaive",
        style_id="great-weapon",
        feats=Feats(gwm=True, pam=True),
        buffs=Buffs(bless=True, d6_on_hit=True),
        features=Features(rage=True),
    )
    assert [n.split(":")[0] for n in evaluate(b).notes] == [
        "Bless",
        "GWM",
        "Great Weapon Fighting",
        "Polearm Master",
        "Hex/Hunter's Mark",
        "Rage",
    ]


def test_finesse_ability_choice(make_build, weapons):
    rapier = weapons.get("rapier")
    assert governing_ability(make_build("rapier", str_=18, dex=12), rapier) == "dex"
    assert governing_ability(make_build("rapier", str_=18, dex=12, finesse_ability="best"), rapier) == "str"
    assert governing_ability(make_build("rapier", finesse_ability="str"), rapier) == "str"
    assert governing_ability(make_build("longbow", str_=18), weapons.get("longbow")) == "dex"


def test_out_of_reach_ac_only_crits_land(make_build):
    s = evaluate(make_build(target_ac=30))
    assert s.p_hit == 0.0
    # (0 - 0.05) * 7.5 + 0.05 * 12 per swing, two swings
    assert s.per_attack == pytest.approx(0.225)
    assert s.dpr == pytest.approx(0.45)
    # smite keeps its non-crit chance at 0: only the doubled crit dice count
    smite = evaluate(make_build(target_ac=30, features=Features(smite=True)))
    assert smite.dpr - s.dpr == pytest.approx(0.05 * 18)
    assert evaluate(make_build(str_=1, level=1, target_ac=30)).dpr >= 0.0


def test_advantage_transforms_hit_and_crit(make_build):
    s = evaluate(make_build(adv_mode="adv"))
    assert s.p_hit == pytest.approx(1 - 0.45 ** 2)
    assert s.p_crit == pytest.approx(0.0975)
    assert s.dpr == pytest.approx(2 * ((s.p_hit - s.p_crit) * 7.5 + s.p_crit * 12))
    assert s.dpr == pytest.approx(12.84)


def test_disadvantage_transforms_hit_and_crit(make_build):
    s = evaluate(make_build(adv_mode="dis"))
    assert s.p_hit == pytest.approx(0.3025)
    assert s.p_crit == pytest.approx(0.0025)
    assert s.dpr == pytest.approx(2 * ((s.p_hit - s.p_crit) * 7.5 + s.p_crit * 12))
    assert s.dpr == pytest.approx(4.56)
    assert s.dpr < evaluate(make_build()).dpr < evaluate(make_build(adv_mode="adv")).dpr


def test_modifier_categories_logged(make_build, caplog):
    with caplog.at_level(logging.DEBUG, logger="dprforge.rules.evaluator"):
        evaluate(make_build("greatsword", style_id="great-weapon", feats=Feats(gwm=True)))
    assert "style:GreatWeaponFighting, feat:GreatWeaponMaster" in caplog.text


def test_unknown_weapon_falls_back(make_build, caplog):
    s = evaluate(make_build("vorpal-spoon"))
    assert s == evaluate(make_build("longsword"))
    assert "vorpal-spoon" in caplog.text


def test_strict_catalog_raises(make_build, monkeypatch):
    monkeypatch.setenv("DPRFORGE_STRICT_CATALOG", "true")
    with pytest.raises(KeyError):
        evaluate(make_build("vorpal-spoon"))
    with pytest.raises(KeyError):
        evaluate(make_build(style_id="brawler"))


def test_unknown_style_means_no_style(make_build):
    assert evaluate(make_build(style_id="brawler")) == evaluate(make_build())


def test_explicit_modifier_list(make_build, weapons):
    b = make_build("longbow", style_id="dueling")
    s = evaluate(b, modifiers=[Archery(), Bless(bonus=1)])
    assert s.notes == ("Archery: +2 to hit applied.", "Bless: +≈1 to hit EV.")
    assert [type(m) for m in modifiers_for(make_build(style_id="dueling"), default_styles())] == [Dueling]


def test_compare_builds_ranks_by_dpr(make_build):
    ranked = compare_builds(
        {
            "plain": make_build(),
            "dueling": make_build(style_id="dueling"),
            "gwm": make_build("greatsword", feats=Feats(gwm=True)),
        }
    )
    assert [label for label, _ in ranked] == ["gwm", "dueling", "plain"]
    pairs = compare_builds([("a", make_build()), ("b", make_build())])
    assert [label for label, _ in pairs] == ["a", "b"]


def test_reference_fighter_vs_ac15(make_build):
    s = evaluate(make_build(style_id="dueling", target_ac=15))
    assert s.to_hit == 6
    assert s.p_hit == pytest.approx(0.60)
    assert s.dpr > evaluate(make_build(target_ac=15)).dpr


def test_gwm_shifts_exactly_five_and_ten(make_build):
    base = evaluate(make_build("maul"))
    gwm = evaluate(make_build("maul", feats=Feats(gwm=True)))
    assert base.to_hit - gwm.to_hit == 5
    assert gwm.avg_hit - base.avg_hit == pytest.approx(10)
