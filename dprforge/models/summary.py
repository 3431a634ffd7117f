"""Result record produced by :func:`dprforge.rules.evaluator.evaluate`."""

from __future__ import annotations

from dataclasses import asdict, dataclass
from typing import Tuple

from dprforge.types import AdvMode


@dataclass(frozen=True)
class DPRSummary:
    to_hit: int
    adv_mode: AdvMode
    target_ac: int
    p_hit: float
    p_crit: float
    attacks: int
    dpr: float
    notes: Tuple[str, ...] = ()
    # Single primary attack figures, before resistance/vulnerability.
    avg_hit: float = 0.0
    avg_crit: float = 0.0
    per_attack: float = 0.0

    def to_dict(self) -> dict:
        data = asdict(self)
        data["notes"] = list(self.notes)
        return data
