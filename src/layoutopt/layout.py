from __future__ import annotations

import logging
from typing import Iterable, List, Mapping, Union

from .errors import LayoutInvariantError, StructDefinitionError, UnknownTypeError
from .models import Architecture, FieldEntry, FieldSpec, Layout, PaddingEntry
from .type_table import TYPE_SIZES, parse_architecture

logger = logging.getLogger(__name__)

FieldLike = Union[FieldSpec, Mapping[str, str]]


def _as_field(item: FieldLike) -> FieldSpec:
    if isinstance(item, FieldSpec):
        return item
    if isinstance(item, Mapping):
        type_name = item.get("type", item.get("type_name"))
        if not isinstance(type_name, str):
            raise StructDefinitionError(f"Field is missing a type: {dict(item)!r}")
        return FieldSpec(name=str(item.get("name") or ""), type_name=type_name)
    raise StructDefinitionError(f"Unsupported field value: {item!r}")


def prepare_fields(fields: Iterable[FieldLike]) -> List[FieldSpec]:
    """Coerce caller fields to ``FieldSpec`` and fill in blank names.

    A field without a name gets ``field<N>`` from its 1-based position.
    """
    prepared = []
    for idx, item in enumerate(fields):
        spec = _as_field(item)
        name = spec.name.strip()
        if not name:
            name = f"field{idx + 1}"
        if name != spec.name:
            spec = spec.model_copy(update={"name": name})
        prepared.append(spec)
    return prepared


def _padding_to(offset: int, align: int) -> int:
    return (align - offset % align) % align


def compute_layout(
    fields: Iterable[FieldLike],
    arch: Union[Architecture, str],
    strict: bool = False,
) -> Layout:
    """Lay fields out in order using natural alignment.

    Each field starts at the next offset that is a multiple of its own
    alignment and the total is rounded up to the largest alignment seen.
    Fields of unknown type are skipped unless ``strict`` is set, in which
    case ``UnknownTypeError`` is raised.
    """
    table = TYPE_SIZES[parse_architecture(arch)]
    offset = 0
    max_align = 1
    data_bytes = 0
    padding_bytes = 0
    entries: list = []

    for spec in prepare_fields(fields):
        info = table.get(spec.type_name)
        if info is None:
            if strict:
                raise UnknownTypeError(spec.type_name, spec.name)
            logger.debug("Skipping field %r: unknown type %r", spec.name, spec.type_name)
            continue

        size, align = info
        max_align = max(max_align, align)

        pad = _padding_to(offset, align)
        if pad > 0:
            entries.append(PaddingEntry(offset=offset, size=pad))
            padding_bytes += pad
            offset += pad

        entries.append(
            FieldEntry(
                name=spec.name,
                type_name=spec.type_name,
                offset=offset,
                size=size,
                alignment=align,
            )
        )
        data_bytes += size
        offset += size

    final_pad = _padding_to(offset, max_align)
    if final_pad > 0:
        entries.append(PaddingEntry(offset=offset, size=final_pad))
        padding_bytes += final_pad
        offset += final_pad

    layout = Layout(
        entries=tuple(entries),
        total_size=offset,
        data_bytes=data_bytes,
        padding_bytes=padding_bytes,
        max_alignment=max_align,
    )
    check_layout(layout)
    return layout


def check_layout(layout: Layout) -> None:
    """Raise ``LayoutInvariantError`` if ``layout`` is not self-consistent."""
    if layout.total_size != layout.data_bytes + layout.padding_bytes:
        raise LayoutInvariantError(
            f"total size {layout.total_size} != data {layout.data_bytes} "
            f"+ padding {layout.padding_bytes}"
        )
    if layout.max_alignment <= 0 or layout.total_size % layout.max_alignment:
        raise LayoutInvariantError(
            f"total size {layout.total_size} is not a multiple of "
            f"alignment {layout.max_alignment}"
        )
    cursor = 0
    for entry in layout.entries:
        if entry.offset != cursor:
            raise LayoutInvariantError(f"entry at {entry.offset} does not start at {cursor}")
        if isinstance(entry, FieldEntry) and entry.offset % entry.alignment:
            raise LayoutInvariantError(
                f"field {entry.name!r} at {entry.offset} is not {entry.alignment}-byte aligned"
            )
        cursor += entry.size
    if cursor != layout.total_size:
        raise LayoutInvariantError(f"entries cover {cursor} bytes, expected {layout.total_size}")
