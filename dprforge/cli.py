from __future__ import annotations

import json
import random
from functools import partial
from pathlib import Path
from typing import List, Optional

import typer
from rich import box

try:
    import typer.rich_utils as tru
except ModuleNotFoundError:  # pragma: no cover - older Typer versions
    tru = None

from dprforge.adapters.form import clamp_build
from dprforge.adapters.graph import evaluate_graph, load_layout
from dprforge.adapters.sheet import attack_options
from dprforge.codex.styles import default_styles
from dprforge.codex.weapons import default_weapons
from dprforge.config_env import load_env
from dprforge.models.build import AbilityScores
from dprforge.report import (
    attack_options_table,
    compare_table,
    render_console,
    styles_table,
    summary_panel,
    weapons_table,
)
from dprforge.rules.attack_math import combine_modes
from dprforge.rules.dice import expand_template, roll_expression
from dprforge.rules.evaluator import compare_builds, evaluate
from dprforge.validation import PrettyError, load_build

if tru is not None:  # pragma: no branch
    tru.Panel = partial(tru.Panel, box=box.ASCII)


app = typer.Typer(no_args_is_help=True, help="dprforge - 5e damage-per-round build calculator.")


def _mode_override(adv: bool, dis: bool) -> str:
    mode = "normal"
    if adv:
        mode = combine_modes(mode, "adv")
    if dis:
        mode = combine_modes(mode, "dis")
    return mode


def _load_or_exit(file: Path, editor: Optional[str]):
    try:
        return clamp_build(load_build(file), editor=editor)
    except PrettyError as e:
        typer.secho(f"ERR: {file}\n{e}", fg=typer.colors.RED, err=True)
        raise typer.Exit(1)


@app.callback()
def main() -> None:
    """dprforge - 5e damage-per-round build calculator."""
    load_env()


@app.command("eval")
def eval_build(
    file: Path = typer.Argument(..., exists=True, help="Build file (json or yaml)"),
    adv: bool = typer.Option(False, "--adv", help="Stack advantage onto the build's roll mode"),
    dis: bool = typer.Option(False, "--dis", help="Stack disadvantage onto the build's roll mode"),
    editor: Optional[str] = typer.Option(None, help="Ability clamp range: form (8-20) or deep (3-20)"),
    as_json: bool = typer.Option(False, "--json", help="Print the summary as JSON"),
):
    """Evaluate one build file."""
    build = _load_or_exit(file, editor)
    extra = _mode_override(adv, dis)
    if extra != "normal":
        build = build.model_copy(update={"adv_mode": combine_modes(build.adv_mode, extra)})
    summary = evaluate(build)
    if as_json:
        typer.echo(json.dumps(summary.to_dict(), indent=2))
        return
    weapon = default_weapons().resolve(build.weapon_id)
    render_console(summary_panel(summary, weapon))


@app.command()
def compare(
    files: List[Path] = typer.Argument(..., exists=True, help="Build files to rank"),
    editor: Optional[str] = typer.Option(None, help="Ability clamp range: form or deep"),
):
    """Rank several builds by DPR."""
    builds = [(f.stem, _load_or_exit(f, editor)) for f in files]
    render_console(compare_table(compare_builds(builds)))


@app.command()
def graph(
    layout: Path = typer.Argument(..., exists=True, help="Node layout (json)"),
    settings: Optional[Path] = typer.Option(None, exists=True, help="Global sliders (json, form keys)"),
):
    """Evaluate every output node of a node-editor layout."""
    data = load_layout(layout)
    globals_ = json.loads(settings.read_text(encoding="utf-8")) if settings else {}
    results = evaluate_graph(data, globals_)
    if not results:
        typer.echo("No output nodes in layout.")
        return
    for node_id, summary in results.items():
        if summary is None:
            typer.echo(f"{node_id}: connect a weapon to compute DPR.")
            continue
        render_console(summary_panel(summary, title=node_id))


@app.command()
def attacks(
    weapon: List[str] = typer.Option(..., "--weapon", "-w", help="Weapon id (repeatable)"),
    level: int = typer.Option(1, min=1, max=20),
    str_: int = typer.Option(10, "--str"),
    dex: int = typer.Option(10, "--dex"),
    ac: int = typer.Option(15, "--ac", help="Target AC"),
    mode: str = typer.Option("normal", help="normal | adv | dis"),
    rage: bool = typer.Option(False, help="Include Rage damage on melee weapons"),
):
    """Character-sheet attack options for a loadout."""
    if mode not in {"normal", "adv", "dis"}:
        raise typer.BadParameter("mode must be normal, adv or dis")
    opts = attack_options(
        AbilityScores(str=str_, dex=dex),
        level,
        weapon,
        target_ac=ac,
        adv_mode=mode,
        include_rage=rage,
    )
    render_console(attack_options_table(opts))


@app.command()
def weapons():
    """List the weapon catalog."""
    render_console(weapons_table(default_weapons()))


@app.command()
def styles():
    """List the fighting styles."""
    render_console(styles_table(default_styles()))


@app.command()
def roll(
    expr: str = typer.Argument(..., help="Dice, e.g. '1d20+{dex}' or '2d6+3'"),
    str_: int = typer.Option(0, "--str", help="STR modifier for {str}"),
    dex: int = typer.Option(0, "--dex", help="DEX modifier for {dex}"),
    seed: Optional[int] = typer.Option(None, help="Deterministic RNG seed"),
):
    """Quick roll with ability-modifier templates."""
    expanded = expand_template(expr, {"str": str_, "dex": dex})
    result = roll_expression(expanded, random.Random(seed))
    if result is None:
        typer.secho(f"Invalid dice expression: {expanded}", fg=typer.colors.RED, err=True)
        raise typer.Exit(1)
    typer.echo(f"{expanded} = {result.total}  ({result.detail})")


@app.command()
def validate(file: Path = typer.Argument(..., exists=True)):
    """Validate a build file."""
    try:
        _ = load_build(file)
        typer.secho(f"OK: {file}", fg=typer.colors.GREEN)
    except PrettyError as e:
        typer.secho(f"ERR: {file}\n{e}", fg=typer.colors.RED)
        raise typer.Exit(1)


def run_cli() -> None:
    app()


if __name__ == "__main__":
    run_cli()
