from __future__ import annotations

from typing import Iterable, List, Optional, Sequence, Tuple

from rich.console import Console, Group
from rich.panel import Panel
from rich.table import Table

from dprforge.adapters.sheet import AttackOption
from dprforge.codex.styles import StyleIndex
from dprforge.codex.weapons import Weapon, WeaponIndex
from dprforge.models.summary import DPRSummary
from dprforge.rules.dice import double_dice

MODE_LABELS = {"normal": "Normal", "adv": "Advantage", "dis": "Disadvantage"}


def format_mod(n: int) -> str:
    return f"+{n}" if n >= 0 else str(n)


def _pct(x: float) -> str:
    return f"{round(x * 100)}%"


def summary_table(summary: DPRSummary) -> Table:
    t = Table(box=None, show_header=False, expand=False)
    t.add_row("To-hit", format_mod(summary.to_hit))
    t.add_row("Mode", MODE_LABELS.get(summary.adv_mode, summary.adv_mode))
    t.add_row(f"Hit chance vs AC {summary.target_ac}", _pct(summary.p_hit))
    t.add_row("Crit chance", _pct(summary.p_crit))
    t.add_row("Attacks/round", str(summary.attacks))
    t.add_row("[bold]DPR[/]", f"[bold]{summary.dpr:.2f}[/]")
    return t


def summary_panel(summary: DPRSummary, weapon: Optional[Weapon] = None, title: str = "DPR Output") -> Panel:
    parts: List = [summary_table(summary)]
    if summary.notes:
        parts.append("\n".join(f"• {n}" for n in summary.notes))
    if weapon is not None:
        title = f"{title}: {weapon.name}"
    return Panel(Group(*parts), title=title, expand=False)


def compare_table(ranked: Sequence[Tuple[str, DPRSummary]]) -> Table:
    t = Table(show_header=True, expand=False)
    t.add_column("#", justify="right")
    t.add_column("Build")
    t.add_column("To-hit", justify="right")
    t.add_column("Hit %", justify="right")
    t.add_column("Attacks", justify="right")
    t.add_column("DPR", justify="right")
    for i, (label, s) in enumerate(ranked, start=1):
        t.add_row(str(i), label, format_mod(s.to_hit), _pct(s.p_hit), str(s.attacks), f"{s.dpr:.2f}")
    return t


def attack_options_table(options: Iterable[AttackOption]) -> Table:
    t = Table(show_header=True, expand=False, title="Attack Options")
    for col in ("Weapon", "Atk Bonus", "Hit %", "Avg Dmg", "Crit Avg", "Exp DPR", "Notes"):
        t.add_column(col)
    rows = list(options)
    if not rows:
        t.add_row("-", "-", "-", "-", "-", "-", "No weapon attacks.")
        return t
    for o in rows:
        t.add_row(
            o.label,
            format_mod(o.attack_bonus),
            _pct(o.hit_chance),
            f"{o.avg_normal:g}",
            f"{o.avg_crit:g}",
            f"{o.expected:g}",
            o.notes,
        )
    return t


def weapons_table(index: WeaponIndex) -> Table:
    t = Table(show_header=True, expand=False, title="Weapons")
    t.add_column("Id")
    t.add_column("Name")
    t.add_column("Damage")
    t.add_column("Crit")
    t.add_column("Type")
    t.add_column("Props")
    t.add_column("Feats")
    for w in index:
        dmg = w.damage + (f" ({w.versatile} versatile)" if w.versatile else "")
        t.add_row(w.id, w.name, dmg, double_dice(w.damage), w.damage_type, ", ".join(w.properties) or "-", ", ".join(w.tags) or "-")
    return t


def styles_table(index: StyleIndex) -> Table:
    t = Table(show_header=True, expand=False, title="Fighting Styles")
    t.add_column("Id")
    t.add_column("Name")
    t.add_column("Tag")
    for s in index:
        t.add_row(s.id, s.name, s.tag)
    return t


def render_console(renderable, console: Optional[Console] = None) -> None:
    (console or Console()).print(renderable)
