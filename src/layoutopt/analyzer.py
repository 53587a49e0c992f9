from __future__ import annotations

import logging
from typing import Iterable, List, Optional, Union

from .cache_lines import CACHE_LINE_SIZE, analyze_cache_lines
from .layout import prepare_fields
from .models import (
    Architecture,
    FieldEntry,
    FieldInfo,
    MemoryReport,
    StructAnalysis,
    StructDefinition,
    StructReport,
)
from .optimizer import optimize
from .recommendations import build_recommendations
from .type_table import is_known_type, parse_architecture
from .utils import compact_list, utc_now_iso

logger = logging.getLogger(__name__)


def analyze_struct(
    definition: StructDefinition,
    arch: Union[Architecture, str],
    line_size: int = CACHE_LINE_SIZE,
    strict: bool = False,
) -> StructAnalysis:
    arch = parse_architecture(arch)
    optimization = optimize(definition.fields, arch, strict=strict)
    layout = optimization.original
    cache_lines = analyze_cache_lines(layout, line_size)

    # cache_lines.fields follows the same order as the field entries
    per_field = iter(cache_lines.fields)
    fields = []
    for idx, entry in enumerate(layout.entries):
        if not isinstance(entry, FieldEntry):
            continue
        cache = next(per_field)
        fields.append(
            FieldInfo(
                name=entry.name,
                type_name=entry.type_name,
                offset=entry.offset,
                size=entry.size,
                alignment=entry.alignment,
                padding_after=layout.padding_after(idx),
                cache_line_start=cache.start_line,
                cache_line_end=cache.end_line,
                crosses_cache_line=cache.crosses_line_boundary,
            )
        )

    logger.debug(
        "%s: %d bytes, %d padding, %d cache line(s)",
        definition.name,
        layout.total_size,
        layout.padding_bytes,
        cache_lines.lines_spanned,
    )
    return StructAnalysis(
        name=definition.name,
        architecture=arch,
        layout=layout,
        optimization=optimization,
        cache_lines=cache_lines,
        fields=fields,
        cache_lines_crossed=cache_lines.lines_spanned,
        hot_fields=cache_lines.hot_fields,
    )


def _skipped_fields(definition: StructDefinition) -> List[str]:
    return [
        f"{definition.name}.{spec.name} has unknown type '{spec.type_name}' and was skipped."
        for spec in prepare_fields(definition.fields)
        if not is_known_type(spec.type_name)
    ]


def analyze_structs(
    definitions: Iterable[StructDefinition],
    arch: Union[Architecture, str],
    line_size: int = CACHE_LINE_SIZE,
    strict: bool = False,
    source: Optional[str] = None,
) -> MemoryReport:
    arch = parse_architecture(arch)
    notes: List[str] = []
    structs: List[StructReport] = []

    for definition in definitions:
        analysis = analyze_struct(definition, arch, line_size=line_size, strict=strict)
        if not strict:
            notes.extend(_skipped_fields(definition))
        structs.append(StructReport(analysis=analysis, findings=build_recommendations(analysis)))

    if not structs:
        notes.append("No struct definitions found.")

    return MemoryReport(
        architecture=arch,
        generated_at=utc_now_iso(),
        line_size=line_size,
        strict_types=strict,
        source=source,
        notes=compact_list(notes),
        structs=structs,
    )
