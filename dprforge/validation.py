from __future__ import annotations

from pathlib import Path
from typing import Any
import json
import yaml
from jsonschema import Draft202012Validator
from pydantic import ValidationError

from dprforge.logging import get_logger
from dprforge.models.build import BuildConfiguration


SCHEMA_DIR = Path(__file__).resolve().parent / "schema"

log = get_logger(__name__)


class PrettyError(Exception):
    pass


def _read_json(path: Path) -> Any:
    return json.loads(path.read_text(encoding="utf-8"))


def _read_yaml(path: Path) -> Any:
    return yaml.safe_load(path.read_text(encoding="utf-8"))


def _is_yaml(path: Path) -> bool:
    return path.suffix.lower() in {".yaml", ".yml"}


_def_schemas = {
    "build": SCHEMA_DIR / "build.schema.json",
}


def _validate_jsonschema(obj: Any, schema_path: Path) -> None:
    schema = _read_json(schema_path)
    v = Draft202012Validator(schema)
    errors = sorted(v.iter_errors(obj), key=lambda e: list(e.path))
    if errors:
        lines = []
        for e in errors[:5]:
            ptr = "/" + "/".join([str(p) for p in e.path])
            lines.append(f"- {ptr or '/'}: {e.message}")
        more = "" if len(errors) <= 5 else f" (+{len(errors)-5} more)"
        raise PrettyError("JSON Schema validation failed:\n" + "\n".join(lines) + more)


def _format_pydantic(e: ValidationError) -> str:
    lines = []
    for err in e.errors(include_url=False):
        ptr = "/" + "/".join(str(p) for p in err["loc"])
        lines.append(f"- {ptr}: {err['msg']}")
    return "Build validation failed:\n" + "\n".join(lines)


# Public API


def parse_build(data: Any) -> BuildConfiguration:
    _validate_jsonschema(data, _def_schemas["build"])
    try:
        return BuildConfiguration.model_validate(data)
    except ValidationError as e:
        raise PrettyError(_format_pydantic(e))


def load_build(path: Path) -> BuildConfiguration:
    """Read a build file (JSON, or YAML by extension) and validate it."""
    try:
        data = _read_yaml(path) if _is_yaml(path) else _read_json(path)
    except (json.JSONDecodeError, yaml.YAMLError) as e:
        raise PrettyError(f"{path}: could not parse build file: {e}")
    try:
        return parse_build(data)
    except PrettyError:
        log.warning("invalid build file %s", path)
        raise


def save_build(build: BuildConfiguration, path: Path) -> None:
    data = build.model_dump(mode="json")
    path.parent.mkdir(parents=True, exist_ok=True)
    if _is_yaml(path):
        path.write_text(yaml.safe_dump(data, sort_keys=False), encoding="utf-8")
    else:
        path.write_text(json.dumps(data, indent=2) + "\n", encoding="utf-8")


__all__ = ["load_build", "parse_build", "save_build", "PrettyError"]
