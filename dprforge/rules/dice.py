"""Dice notation: averages for the DPR engine and a seeded roller for quick rolls."""
from __future__ import annotations

import random
import re
from dataclasses import dataclass
from typing import List, Mapping, Optional

ALLOWED_SIDES = (4, 6, 8, 10, 12)

# Expected gain from rerolling a 1 or 2 once (Great Weapon Fighting).
REROLL_LOW_BOOST = {4: 0.75, 6: 0.6667, 8: 0.625, 10: 0.6, 12: 0.5833}

_TERM_PAT = re.compile(r"^(\d*)d(\d*)$")
_DIE_PAT = re.compile(r"^(\d+)d(\d+)$")
_STRICT_EXPR_PAT = re.compile(r"^\d*d\d+(\+\d*d\d+)*$")


@dataclass(frozen=True)
class DiceTerm:
    count: int
    sides: int

    @property
    def average(self) -> float:
        return self.count * (self.sides + 1) / 2


def die_average(sides: int) -> float:
    return (sides + 1) / 2


def parse_dice(expression: str) -> List[DiceTerm]:
    """Best-effort parse of ``"2d6+1d8"`` style notation.

    Count defaults to 1 and any side count outside :data:`ALLOWED_SIDES`
    becomes a d6. Terms without a ``d`` separator are dropped.
    """
    terms: List[DiceTerm] = []
    for chunk in (expression or "").lower().replace(" ", "").split("+"):
        if not chunk:
            continue
        m = _TERM_PAT.match(chunk)
        if not m:
            continue
        count = int(m.group(1)) if m.group(1) else 1
        sides = int(m.group(2)) if m.group(2) else 6
        if sides not in ALLOWED_SIDES:
            sides = 6
        terms.append(DiceTerm(count, sides))
    return terms


def dice_average(expression: str, reroll_low: bool = False) -> float:
    """Probability-weighted average of ``expression``.

    With ``reroll_low`` each die gains the expected value of rerolling
    a 1 or 2 once.
    """
    avg = 0.0
    for term in parse_dice(expression):
        boost = REROLL_LOW_BOOST[term.sides] if reroll_low else 0.0
        avg += term.average + term.count * boost
    return avg


def is_dice(expression: str) -> bool:
    """Strict check: every term is ``XdY`` with an allowed side count."""
    expr = (expression or "").lower().replace(" ", "")
    if not _STRICT_EXPR_PAT.match(expr):
        return False
    return all(int(t.split("d", 1)[1]) in ALLOWED_SIDES for t in expr.split("+"))


def double_dice(expression: str) -> str:
    out = []
    for chunk in expression.split("+"):
        m = _DIE_PAT.match(chunk.strip())
        out.append(f"{int(m.group(1)) * 2}d{m.group(2)}" if m else chunk.strip())
    return "+".join(out)


# ---------- Quick rolls -------------------------------------------------------

_ROLL_CHARS = re.compile(r"^[0-9dD+\-]+$")
_ROLL_DIE = re.compile(r"^(\d*)d(\d+)$", re.IGNORECASE)
_TEMPLATE_TOKEN = re.compile(r"\{(str|dex|con|int|wis|cha)\}")


@dataclass(frozen=True)
class RollResult:
    total: int
    detail: str


def roll_expression(expr: str, rng: Optional[random.Random] = None) -> Optional[RollResult]:
    """Roll ``expr`` such as ``2d6+3d4+5-1``.

    Returns ``None`` for anything that is not dice and integers joined by
    ``+``/``-``.
    """
    compact = expr.replace(" ", "")
    if not compact or not _ROLL_CHARS.match(compact):
        return None
    rng = rng or random.Random()
    total = 0
    parts: List[str] = []
    for part in re.split(r"(?=[+-])", compact):
        if not part:
            continue
        sign = -1 if part.startswith("-") else 1
        core = part.lstrip("+-")
        m = _ROLL_DIE.match(core)
        if m:
            count = int(m.group(1) or 1)
            sides = int(m.group(2))
            if sides < 1:
                return None
            rolls = [rng.randint(1, sides) for _ in range(count)]
            total += sign * sum(rolls)
            parts.append(f"{'-' if sign < 0 else ''}[{','.join(str(r) for r in rolls)}]")
            continue
        if core.isdigit():
            total += sign * int(core)
            parts.append(f"{'-' if sign < 0 else ''}{core}")
            continue
        return None
    return RollResult(total=total, detail=" + ".join(parts))


def expand_template(template: str, mods: Mapping[str, int]) -> str:
    """Fill ``{dex}``-style tokens from an explicit ability-modifier mapping.

    Negative modifiers keep a valid expression: ``1d20+{str}`` with STR -1
    becomes ``1d20-1``.
    """

    def _sub(m: re.Match) -> str:
        return str(int(mods.get(m.group(1), 0)))

    return _TEMPLATE_TOKEN.sub(_sub, template).replace("+-", "-")
