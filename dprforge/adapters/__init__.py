from .form import DEFAULT_FORM_STATE, build_from_form, clamp_build, evaluate_form
from .graph import build_for_output, evaluate_graph, load_layout
from .sheet import AttackOption, attack_options

__all__ = [
    "DEFAULT_FORM_STATE",
    "AttackOption",
    "attack_options",
    "build_for_output",
    "build_from_form",
    "clamp_build",
    "evaluate_form",
    "evaluate_graph",
    "load_layout",
]
