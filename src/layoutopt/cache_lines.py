from __future__ import annotations

from typing import Dict, List

from .models import CacheLineInfo, CacheLineReport, FieldCacheInfo, FieldEntry, Layout

CACHE_LINE_SIZE = 64


def _check_line_size(line_size: int) -> None:
    if line_size <= 0:
        raise ValueError(f"Cache line size must be positive, got {line_size}")


def field_cache_info(entry: FieldEntry, line_size: int = CACHE_LINE_SIZE) -> FieldCacheInfo:
    _check_line_size(line_size)
    start_line = entry.offset // line_size
    # A zero-size field occupies no bytes; pin it to the line it starts in.
    last_byte = entry.offset + max(entry.size, 1) - 1
    end_line = last_byte // line_size
    return FieldCacheInfo(
        name=entry.name,
        start_line=start_line,
        end_line=end_line,
        crosses_line_boundary=start_line != end_line,
    )


def analyze_cache_lines(layout: Layout, line_size: int = CACHE_LINE_SIZE) -> CacheLineReport:
    """Break a layout into cache lines.

    Every entry (field or padding) adds the bytes it holds inside a line to
    that line's totals, so a field spanning two lines is counted in both.
    Line ranges are half-open and the last one is clipped to the struct size.
    """
    _check_line_size(line_size)

    names: Dict[int, List[str]] = {}
    used: Dict[int, int] = {}
    padding: Dict[int, int] = {}

    for entry in layout.entries:
        if entry.size == 0:
            continue
        end = entry.offset + entry.size
        for line in range(entry.offset // line_size, (end - 1) // line_size + 1):
            line_start = line * line_size
            overlap = min(end, line_start + line_size) - max(entry.offset, line_start)
            if isinstance(entry, FieldEntry):
                used[line] = used.get(line, 0) + overlap
                present = names.setdefault(line, [])
                if entry.name not in present:
                    present.append(entry.name)
            else:
                padding[line] = padding.get(line, 0) + overlap
                names.setdefault(line, [])

    lines = []
    for line in sorted(names):
        start = line * line_size
        lines.append(
            CacheLineInfo(
                line_number=line,
                start_offset=start,
                end_offset=min(start + line_size, layout.total_size),
                field_names=names[line],
                bytes_used=used.get(line, 0),
                bytes_padding=padding.get(line, 0),
            )
        )

    fields = [field_cache_info(entry, line_size) for entry in layout.fields]
    return CacheLineReport(
        line_size=line_size,
        lines=lines,
        fields=fields,
        hot_fields=hot_fields(fields),
        lines_spanned=len(lines),
    )


def hot_fields(fields: List[FieldCacheInfo]) -> List[str]:
    """Names of fields that cross a cache-line boundary."""
    return [info.name for info in fields if info.crosses_line_boundary]
