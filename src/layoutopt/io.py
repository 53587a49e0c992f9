from __future__ import annotations

import json
from pathlib import Path
from typing import Any, Dict, List, Mapping

from pydantic import ValidationError

from .errors import StructDefinitionError
from .export import layout_frame
from .models import Layout, MemoryReport, StructDefinition

DEFAULT_STRUCT_NAME = "Struct"


def _is_field_list(items: List[Any]) -> bool:
    return bool(items) and all(isinstance(i, dict) and "type" in i and "fields" not in i for i in items)


def parse_struct_definitions(data: Any) -> List[StructDefinition]:
    """Accept ``{"structs": [...]}``, a list of structs, or a bare list of fields."""
    if isinstance(data, list) and _is_field_list(data):
        data = [{"name": DEFAULT_STRUCT_NAME, "fields": data}]
    elif isinstance(data, dict):
        if "structs" not in data:
            raise StructDefinitionError("Expected a 'structs' key at the top level")
        data = data["structs"]
    if not isinstance(data, list):
        raise StructDefinitionError("Expected a list of struct definitions")

    definitions = []
    for idx, item in enumerate(data):
        if not isinstance(item, dict) or "fields" not in item:
            raise StructDefinitionError(f"Struct definition at index {idx} has no 'fields'")
        try:
            definitions.append(StructDefinition.model_validate(item))
        except ValidationError as exc:
            raise StructDefinitionError(f"Invalid struct definition at index {idx}: {exc}") from exc
    return definitions


def _read_json(path: Path) -> Any:
    try:
        return json.loads(path.read_text(encoding="utf-8"))
    except UnicodeDecodeError as exc:
        raise StructDefinitionError(f"{path} is not UTF-8 text: {exc}") from exc
    except json.JSONDecodeError as exc:
        raise StructDefinitionError(f"{path} is not valid JSON: {exc}") from exc


def load_struct_definitions(path: Path) -> List[StructDefinition]:
    return parse_struct_definitions(_read_json(path))


def load_memory_report(path: Path) -> MemoryReport:
    try:
        return MemoryReport.model_validate(_read_json(path))
    except ValidationError as exc:
        raise StructDefinitionError(f"{path} is not an analysis summary: {exc}") from exc


def write_json(data: Dict[str, Any], out_path: Path) -> Path:
    out_path.parent.mkdir(parents=True, exist_ok=True)
    out_path.write_text(json.dumps(data, indent=2), encoding="utf-8")
    return out_path


def write_layout_csv(layouts: Mapping[str, Layout], out_path: Path) -> Path:
    out_path.parent.mkdir(parents=True, exist_ok=True)
    layout_frame(layouts).to_csv(out_path, index=False)
    return out_path
