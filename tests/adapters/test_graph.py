import json
import logging

from dprforge.adapters.graph import build_for_output, evaluate_graph, load_layout
from dprforge.models.build import Feats
from dprforge.rules.evaluator import evaluate


def _layout():
    return {
        "nodes": [
            {"id": "w1", "type": "weapon", "data": {"weaponId": "glaive"}},
            {"id": "w2", "type": "weapon", "data": {"weaponId": "dagger"}},
            {"id": "s1", "type": "fighterStyle", "data": {"styleId": "great-weapon"}},
            {"id": "f1", "type": "feats", "data": {"pam": True}},
            {"id": "o1", "type": "output", "data": {}},
            {"id": "o2", "type": "output", "data": {}},
        ],
        "edges": [
            {"source": "w1", "target": "o1"},
            {"source": "w2", "target": "o1"},
            {"source": "s1", "target": "o1"},
            {"source": "f1", "target": "o1"},
            {"source": "s1", "target": "o2"},
        ],
    }


def test_output_without_weapon_is_none():
    results = evaluate_graph(_layout(), {"level": 5, "str": 16})
    assert set(results) == {"o1", "o2"}
    assert results["o2"] is None


def test_output_matches_direct_evaluation(make_build):
    results = evaluate_graph(_layout(), {"level": 5, "str": 16})
    expected = evaluate(make_build("glaive", style_id="great-weapon", feats=Feats(pam=True)))
    assert results["o1"] == expected


def test_first_edge_wins():
    b = build_for_output(_layout(), "o1", {})
    assert b.weapon_id == "glaive"


def test_unconnected_output_has_no_style():
    layout = _layout()
    layout["edges"].append({"source": "w2", "target": "o2"})
    b = build_for_output(layout, "o2", {})
    assert b.weapon_id == "dagger" and b.style_id == "great-weapon"
    layout["edges"] = [{"source": "w2", "target": "o2"}]
    assert build_for_output(layout, "o2", {}).style_id is None


def test_load_layout_warns_on_unknown_nodes(tmp_path, caplog):
    data = _layout()
    data["nodes"].append({"id": "x", "type": "spellbook", "data": {}})
    p = tmp_path / "layout.json"
    p.write_text(json.dumps(data), encoding="utf-8")
    with caplog.at_level(logging.WARNING):
        layout = load_layout(p)
    assert len(layout["nodes"]) == 7
    assert "spellbook" in caplog.text
