"""Flat optimizer form: slider state in, clamped build out."""
from __future__ import annotations

from typing import Any, Dict, Mapping, Optional

from dprforge.config import ability_range
from dprforge.models.build import ABILITY_ORDER, BuildConfiguration
from dprforge.models.summary import DPRSummary
from dprforge.rules.evaluator import evaluate

LEVEL_RANGE = (1, 20)
SMITE_DICE_RANGE = (0, 5)
SMITES_PER_ROUND_RANGE = (0, 2)

DEFAULT_FORM_STATE: Dict[str, Any] = {
    "level": 5,
    "str": 16,
    "dex": 14,
    "targetAC": 16,
    "advMode": "normal",
    "useVersatile": False,
    "resist": "none",
    "vuln": "none",
    "styleId": "dueling",
    "weaponId": "longsword",
    "feats": {"gwm": False, "ss": False, "pam": False, "cbe": False},
    "features": {"sneak": False, "rage": False, "smite": False, "smiteDice": 2, "smitesPerRound": 1},
    "buffs": {"bless": False, "d6onhit": False},
}


def clamp(x: int, lo: int, hi: int) -> int:
    return max(lo, min(hi, x))


def clamp_build(build: BuildConfiguration, *, editor: Optional[str] = None) -> BuildConfiguration:
    """Clamp slider-backed fields to their documented ranges.

    ``editor`` picks the ability score bounds: ``"form"`` (8-20) or
    ``"deep"`` (3-20).
    """
    lo, hi = ability_range(editor)
    abilities = build.abilities.model_copy(
        update={k: clamp(getattr(build.abilities, k), lo, hi) for k in ABILITY_ORDER}
    )
    features = build.features.model_copy(
        update={
            "smite_dice": clamp(build.features.smite_dice, *SMITE_DICE_RANGE),
            "smites_per_round": clamp(build.features.smites_per_round, *SMITES_PER_ROUND_RANGE),
        }
    )
    return build.model_copy(
        update={
            "abilities": abilities,
            "level": clamp(build.level, *LEVEL_RANGE),
            "features": features,
        }
    )


def build_from_form(state: Mapping[str, Any], *, editor: Optional[str] = None) -> BuildConfiguration:
    """Map optimizer form state (camelCase keys) onto a clamped build.

    Missing keys take :data:`DEFAULT_FORM_STATE` values.
    """
    s = {**DEFAULT_FORM_STATE, **state}
    feats = {**DEFAULT_FORM_STATE["feats"], **(s.get("feats") or {})}
    features = {**DEFAULT_FORM_STATE["features"], **(s.get("features") or {})}
    buffs = {**DEFAULT_FORM_STATE["buffs"], **(s.get("buffs") or {})}
    build = BuildConfiguration.model_validate(
        {
            "abilities": {"str": int(s["str"]), "dex": int(s["dex"])},
            "level": int(s["level"]),
            "target_ac": int(s["targetAC"] or 0),
            "adv_mode": s["advMode"],
            "style_id": s.get("styleId"),
            "weapon_id": s["weaponId"],
            "use_versatile": bool(s["useVersatile"]),
            "feats": {k: bool(feats.get(k)) for k in ("gwm", "ss", "pam", "cbe")},
            "features": {
                "sneak": bool(features.get("sneak")),
                "rage": bool(features.get("rage")),
                "smite": bool(features.get("smite")),
                "smite_dice": int(features.get("smiteDice") if features.get("smiteDice") is not None else 2),
                "smites_per_round": int(
                    features.get("smitesPerRound") if features.get("smitesPerRound") is not None else 1
                ),
            },
            "buffs": {"bless": bool(buffs.get("bless")), "d6_on_hit": bool(buffs.get("d6onhit"))},
            "resist": s.get("resist"),
            "vuln": s.get("vuln"),
        }
    )
    return clamp_build(build, editor=editor)


def evaluate_form(state: Mapping[str, Any], **kwargs) -> DPRSummary:
    return evaluate(build_from_form(state), **kwargs)
