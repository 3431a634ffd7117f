"""Node-editor layouts: wire style/weapon/feats/features/buffs nodes into outputs.

A layout is ``{"nodes": [...], "edges": [...]}`` where each node has ``id``,
``type`` and ``data`` and each edge has ``source`` and ``target``. Global
sliders (level, abilities, AC...) come from a separate settings mapping in the
form adapter's key format.
"""
from __future__ import annotations

import json
from pathlib import Path
from typing import Any, Dict, List, Mapping, Optional

from dprforge.adapters.form import build_from_form
from dprforge.logging import get_logger
from dprforge.models.build import BuildConfiguration
from dprforge.models.summary import DPRSummary
from dprforge.rules.evaluator import evaluate

log = get_logger(__name__)

NODE_TYPES = ("fighterStyle", "weapon", "feats", "features", "buffs", "output")


def load_layout(path: Path) -> Dict[str, Any]:
    data = json.loads(path.read_text(encoding="utf-8"))
    for n in data.get("nodes", []):
        if n.get("type") not in NODE_TYPES:
            log.warning("layout node %s has unknown type %r", n.get("id"), n.get("type"))
    return {"nodes": list(data.get("nodes", [])), "edges": list(data.get("edges", []))}


def _incoming(layout: Mapping[str, Any], node_id: str) -> List[dict]:
    by_id = {n["id"]: n for n in layout.get("nodes", [])}
    out = []
    for e in layout.get("edges", []):
        if e.get("target") == node_id and e.get("source") in by_id:
            out.append(by_id[e["source"]])
    return out


def _first(nodes: List[dict], node_type: str) -> Optional[dict]:
    return next((n for n in nodes if n.get("type") == node_type), None)


def build_for_output(
    layout: Mapping[str, Any], output_id: str, settings: Mapping[str, Any]
) -> Optional[BuildConfiguration]:
    """Assemble the build feeding ``output_id``, or None without a weapon node.

    When several nodes of one type are wired in, the first edge wins.
    """
    incoming = _incoming(layout, output_id)
    weapon_node = _first(incoming, "weapon")
    if weapon_node is None:
        return None
    style_node = _first(incoming, "fighterStyle")
    feats_node = _first(incoming, "feats")
    features_node = _first(incoming, "features")
    buffs_node = _first(incoming, "buffs")

    state = dict(settings)
    state["weaponId"] = (weapon_node.get("data") or {}).get("weaponId", "")
    state["styleId"] = (style_node.get("data") or {}).get("styleId") if style_node else None
    state["feats"] = (feats_node.get("data") or {}) if feats_node else {}
    state["features"] = (features_node.get("data") or {}) if features_node else {}
    state["buffs"] = (buffs_node.get("data") or {}) if buffs_node else {}
    return build_from_form(state)


def evaluate_graph(
    layout: Mapping[str, Any], settings: Mapping[str, Any], **kwargs
) -> Dict[str, Optional[DPRSummary]]:
    """Summary per output node id; None where no weapon is connected."""
    results: Dict[str, Optional[DPRSummary]] = {}
    for node in layout.get("nodes", []):
        if node.get("type") != "output":
            continue
        build = build_for_output(layout, node["id"], settings)
        if build is None:
            log.info("output %s has no weapon connected", node["id"])
            results[node["id"]] = None
            continue
        results[node["id"]] = evaluate(build, **kwargs)
    return results
