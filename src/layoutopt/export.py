from __future__ import annotations

from typing import Dict, Mapping, Optional, Union

import pandas as pd

from .models import (
    Architecture,
    ExportField,
    ExportFormat,
    ExportStruct,
    FieldEntry,
    Layout,
)
from .type_table import parse_architecture
from .utils import percent, utc_now_iso

LAYOUT_COLUMNS = ["struct", "kind", "name", "type", "offset", "size", "alignment", "padding_after"]


def export_struct(name: str, layout: Layout) -> ExportStruct:
    fields = []
    for idx, entry in enumerate(layout.entries):
        if not isinstance(entry, FieldEntry):
            continue
        fields.append(
            ExportField(
                name=entry.name,
                type_name=entry.type_name,
                offset=entry.offset,
                size=entry.size,
                alignment=entry.alignment,
                padding_after=layout.padding_after(idx),
            )
        )
    return ExportStruct(
        name=name,
        total_size=layout.total_size,
        alignment=layout.max_alignment,
        total_padding=layout.padding_bytes,
        padding_percentage=percent(layout.padding_bytes, layout.total_size),
        fields=fields,
    )


def to_export_format(
    layouts: Mapping[str, Layout],
    arch: Union[Architecture, str],
    exported_at: Optional[str] = None,
) -> ExportFormat:
    return ExportFormat(
        structs=[export_struct(name, layout) for name, layout in layouts.items()],
        architecture=parse_architecture(arch),
        exported_at=exported_at or utc_now_iso(),
    )


def export_dict(export: ExportFormat) -> Dict:
    return export.model_dump(mode="json", by_alias=True)


def export_json(export: ExportFormat, indent: int = 2) -> str:
    return export.model_dump_json(by_alias=True, indent=indent)


def layout_frame(layouts: Mapping[str, Layout]) -> pd.DataFrame:
    """One row per layout entry, padding included, in offset order."""
    rows = []
    for struct_name, layout in layouts.items():
        for idx, entry in enumerate(layout.entries):
            is_field = isinstance(entry, FieldEntry)
            rows.append(
                {
                    "struct": struct_name,
                    "kind": entry.kind,
                    "name": entry.name if is_field else "",
                    "type": entry.type_name if is_field else "",
                    "offset": entry.offset,
                    "size": entry.size,
                    "alignment": entry.alignment if is_field else 1,
                    "padding_after": layout.padding_after(idx) if is_field else 0,
                }
            )
    return pd.DataFrame(rows, columns=LAYOUT_COLUMNS)
